"""
Decides which entries of a table are visible, given the key filters and
type exclusions entered by the user.

Visibility is computed by two separate tree walks:
1. evaluate() applies filters and exclusions to each touched entry.
   A table whose own key matches a filter pins its whole subtree visible.
2. hide_empty_containers() then hides every table that has no visible
   non-table entry anywhere below it.
"""

from __future__ import annotations

from collections.abc import Mapping
from tableview.association import AssociationNode
from tableview.diff import REMOVAL
from tableview.formatting import format_key
from tableview.options import ViewerOptions
from tableview.values import is_container
from typing import Any


def parse_filter_text(text: str, case_sensitive: bool=False) -> list[str]:
    """
    Parses comma-separated filter text, as typed by the user, into a list of filters.
    
    >>> parse_filter_text('Name, health,')
    ['name', 'health']
    """
    if not case_sensitive:
        text = text.lower()
    return [f.strip() for f in text.split(',') if f.strip() != '']


class VisibilityPass:
    def __init__(self, options: ViewerOptions) -> None:
        self._case_sensitive = options['case_sensitive']
        self.key_filters = []  # type: list[str]
        self.type_exclusions = []  # type: list[str]
    
    # === Properties ===
    
    @property
    def filtering_active(self) -> bool:
        return len(self.key_filters) != 0 or len(self.type_exclusions) != 0
    
    # === Filters ===
    
    def set_key_filters_text(self, text: str) -> None:
        self.key_filters = parse_filter_text(text, self._case_sensitive)
    
    def set_type_exclusions_text(self, text: str) -> None:
        self.type_exclusions = parse_filter_text(text, self._case_sensitive)
    
    def key_matches_filter(self, node: AssociationNode) -> bool:
        key_text = format_key(node.key)
        if not self._case_sensitive:
            key_text = key_text.lower()
        return any(f in key_text for f in self.key_filters)
    
    def is_excluded(self, node: AssociationNode) -> bool:
        if len(self.type_exclusions) == 0:
            return False
        type_name = node.type_name
        if not self._case_sensitive:
            type_name = type_name.lower()
        return type_name in self.type_exclusions
    
    # === Passes ===
    
    def evaluate(self,
            root: AssociationNode,
            delta: Mapping[Any, Any] | None=None,
            ) -> None:
        """
        Recomputes the visibility of the children of `root` that are touched
        by `delta`, and of their touched descendants.
        
        If `delta` is None then every descendant of `root` is recomputed.
        """
        if delta is None:
            for child in root.children.values():
                self._evaluate_node(child, None)
        else:
            for (key, delta_value) in delta.items():
                if delta_value is REMOVAL:
                    continue
                child = root.child(key)
                if child is None:
                    continue
                self._evaluate_node(
                    child,
                    delta_value if is_container(delta_value) else None)
    
    def _evaluate_node(self,
            node: AssociationNode,
            delta: Mapping[Any, Any] | None,
            ) -> None:
        if len(self.key_filters) != 0 and not node.is_container:
            visible = self.key_matches_filter(node)
        else:
            visible = True
        if self.is_excluded(node):
            visible = False
        node.visible = visible
        
        if node.is_container:
            if visible and self.key_matches_filter(node):
                # Table's key is in the filter. Show it and all its descendants.
                _force_show(node)
            else:
                self.evaluate(node, delta)
    
    def hide_empty_containers(self, root: AssociationNode) -> None:
        """
        Hides every table with no visible non-table descendant.
        
        Tables with no items at all are only hidden while some filter
        or exclusion is active.
        """
        for child in root.children.values():
            self._has_visible_leaf(child, pinned=False)
    
    def _has_visible_leaf(self, node: AssociationNode, *, pinned: bool) -> bool:
        if not node.is_container:
            return node.visible
        pinned = pinned or (self.key_matches_filter(node) and not self.is_excluded(node))
        children = node.children
        if len(children) == 0:
            has_visible_leaf = pinned or not self.filtering_active
        else:
            # NOTE: Visit every child, without short-circuiting,
            #       so that nested empty tables are hidden too
            results = [self._has_visible_leaf(c, pinned=pinned) for c in children.values()]
            has_visible_leaf = any(results)
        if not has_visible_leaf:
            node.visible = False
        return has_visible_leaf


def _force_show(node: AssociationNode) -> None:
    node.visible = True
    for descendant in node.walk():
        descendant.visible = True
