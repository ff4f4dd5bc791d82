"""
Applies a delta to an association tree, creating, updating, and destroying
nodes (and their display handles) so that the tree mirrors the new data.
"""

from __future__ import annotations

from collections.abc import Mapping
from tableview.association import AssociationNode
from tableview.diff import REMOVAL
from tableview.display import Presenter
from tableview.util import cli
from tableview.values import is_container
from typing import Any


class Reconciler:
    """
    Walks deltas against an association tree.
    
    Each node moves through the states absent -> created -> updated* -> destroyed.
    A key that disappears and later reappears gets a brand-new node.
    A key whose value changes between container and non-container is treated
    the same way: the old node is destroyed and a new node is created.
    """
    
    def __init__(self, presenter: Presenter) -> None:
        self._presenter = presenter
    
    def reconcile(self,
            root: AssociationNode,
            delta: Mapping[Any, Any],
            depth: int=0,
            ) -> None:
        """
        Applies `delta` to the children of `root`, which are at `depth`.
        """
        presenter = self._presenter
        for (key, delta_value) in delta.items():
            existing = root.child(key)
            
            if delta_value is REMOVAL:
                if existing is None:
                    # Inconsistent association state. Skip only this key.
                    cli.print_warning(
                        f'*** Asked to remove key {key!r} which has no association under {root!r}')
                    continue
                root.detach_child(key)
                presenter.destroy(existing)
                presenter.mark_dirty(root)
                continue
            
            if is_container(delta_value):
                if existing is not None and not existing.is_container:
                    root.detach_child(key)
                    presenter.destroy(existing)
                    existing = None
                if existing is None:
                    existing = self._create_node(root, key, depth, container=True)
                self.reconcile(existing, delta_value, depth + 1)
                presenter.mark_dirty(existing)
            else:
                if existing is not None and existing.is_container:
                    root.detach_child(key)
                    presenter.destroy(existing)
                    existing = None
                if existing is None:
                    existing = self._create_node(root, key, depth, value=delta_value)
                else:
                    existing.value = delta_value
                presenter.mark_dirty(existing)
                # Keep the parent's summary of its number of items current
                presenter.mark_dirty(root)
    
    def _create_node(self,
            parent: AssociationNode,
            key: Any,
            depth: int,
            *, container: bool=False,
            value: Any=None,
            ) -> AssociationNode:
        node = AssociationNode(
            key,
            parent=parent,
            depth=depth,
            container=container,
            value=value)
        parent.add_child(node)
        self._presenter.create(node)
        return node
