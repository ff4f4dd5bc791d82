"""
Computes the layout order of entries among their siblings.

Siblings are grouped by the kind of their value (using large per-kind
offsets) and, within a kind, sorted by key: numeric keys first in numeric
order, then text keys alphabetically, then any other keys.
"""

from __future__ import annotations

from collections.abc import Mapping
from tableview.association import AssociationNode
from tableview.diff import REMOVAL
from tableview.formatting import format_key
from tableview.options import ViewerOptions
from tableview.values import element_count, is_container, kind_of
from typing import Any

# Added to a table's order for each of its items, when ordering tables by size
ORDER_PER_TABLE_ITEM = 100


def sibling_sort_key(key: Any, case_sensitive: bool=False) -> tuple:
    kind = kind_of(key)
    if kind == 'number':
        return (0, key, '')
    elif kind == 'string':
        return (1, key if case_sensitive else key.lower(), key)
    else:
        key_text = format_key(key)
        return (2, key_text if case_sensitive else key_text.lower(), key_text)


def update_order(
        root: AssociationNode,
        delta: Mapping[Any, Any],
        options: ViewerOptions,
        ) -> None:
    """
    Recomputes the layout order of every sibling group touched by `delta`.
    
    Whole sibling groups are recomputed, not only the touched entries,
    so that the resulting order does not depend on the order in which
    updates arrived.
    """
    order_children(root, options)
    for (key, delta_value) in delta.items():
        if delta_value is REMOVAL or not is_container(delta_value):
            continue
        node = root.child(key)
        if node is None or not node.is_container:
            continue
        update_order(node, delta_value, options)


def order_children(parent: AssociationNode, options: ViewerOptions) -> None:
    """Recomputes the layout order of all children of `parent`."""
    case_sensitive = options['case_sensitive']
    type_ordering = options['settings']['type_ordering']
    by_size = options['order_tables_by_size']
    
    children = sorted(
        parent.children.values(),
        key=lambda c: sibling_sort_key(c.key, case_sensitive))
    for (index, child) in enumerate(children):
        kind = child.kind
        order = index + type_ordering.get(kind, type_ordering['Other'])  # type: ignore[attr-defined]
        if child.is_container and by_size:
            order += element_count(child.children) * ORDER_PER_TABLE_ITEM
        child.layout_order = order
