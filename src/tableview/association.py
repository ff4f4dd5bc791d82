"""
The association tree: a persistent mirror of the displayed data tree.

Each AssociationNode binds one key of the data, at one position in the tree,
to a display handle. A node (and therefore its handle) stays the same object
for as long as its key keeps existing at that position with the same kind
of value. This is what lets updates be incremental rather than rebuilding
the whole display.
"""

from __future__ import annotations

from collections.abc import Iterator
from tableview.values import kind_of, Kind, type_name_of
from typing import Any, Optional, TYPE_CHECKING
import weakref

if TYPE_CHECKING:
    from tableview.display import EntryDisplay


class AssociationNode:
    """
    A node of the association tree.
    
    A node is either a container node, whose `children` map each child key to
    a child node, or a scalar node, whose `value` is the displayed value.
    Never both.
    
    A node owns its display handle and its children. Its reference to its
    parent is weak and is used only to look up ancestors.
    """
    
    # Optimize per-instance memory use, since there may be very many nodes
    __slots__ = (
        'key',
        'depth',
        'handle',
        'layout_order',
        'visible',
        'displayed',
        '_value',
        '_children',
        '_parent_ref',
        '_destroyed',
        '__weakref__',
    )
    
    def __init__(self,
            key: Any,
            *, parent: AssociationNode | None,
            depth: int,
            container: bool,
            value: Any=None,
            ) -> None:
        if container and value is not None:
            raise ValueError('A container node cannot also hold a scalar value')
        self.key = key
        self.depth = depth
        self.handle = None  # type: object
        self.layout_order = 0
        self.visible = True
        # The display most recently sent to the display surface, if any
        self.displayed = None  # type: Optional[EntryDisplay]
        self._value = value
        self._children = {} if container else None  # type: Optional[dict[Any, AssociationNode]]
        self._parent_ref = (
            weakref.ref(parent) if parent is not None else None
        )  # type: Optional[weakref.ref[AssociationNode]]
        self._destroyed = False
    
    @staticmethod
    def new_root() -> AssociationNode:
        """
        Creates the root of an association tree.
        The root has no key, no parent, no display handle, and is never displayed.
        """
        return AssociationNode(None, parent=None, depth=-1, container=True)
    
    # === Properties ===
    
    @property
    def is_root(self) -> bool:
        return self.depth == -1
    
    @property
    def is_container(self) -> bool:
        return self._children is not None
    
    @property
    def children(self) -> dict[Any, AssociationNode]:
        """
        Raises:
        * ValueError -- if this is not a container node.
        """
        if self._children is None:
            raise ValueError(f'Scalar node has no children: {self!r}')
        return self._children
    
    def _get_value(self) -> Any:
        return self._value
    def _set_value(self, value: Any) -> None:
        self._ensure_not_destroyed()
        if self._children is not None:
            raise ValueError(f'Cannot set scalar value of container node: {self!r}')
        self._value = value
    value = property(_get_value, _set_value)
    
    @property
    def kind(self) -> Kind:
        return 'table' if self._children is not None else kind_of(self._value)
    
    @property
    def type_name(self) -> str:
        return 'table' if self._children is not None else type_name_of(self._value)
    
    @property
    def parent(self) -> AssociationNode | None:
        if self._parent_ref is None:
            return None
        return self._parent_ref()
    
    @property
    def is_destroyed(self) -> bool:
        return self._destroyed
    
    # === Navigation ===
    
    def child(self, key: Any) -> AssociationNode | None:
        if self._children is None:
            return None
        return self._children.get(key)
    
    def walk(self) -> Iterator[AssociationNode]:
        """Yields all descendants of this node, parents before children."""
        if self._children is None:
            return
        for child in self._children.values():
            yield child
            yield from child.walk()
    
    def ancestors(self) -> Iterator[AssociationNode]:
        """Yields the parent of this node, then its parent, up to and including the root."""
        cur = self.parent
        while cur is not None:
            yield cur
            cur = cur.parent
    
    # === Lifecycle ===
    
    def add_child(self, child: AssociationNode) -> None:
        self._ensure_not_destroyed()
        children = self.children
        if child.key in children:
            raise ValueError(f'Node already has a child with key {child.key!r}: {self!r}')
        children[child.key] = child
    
    def detach_child(self, key: Any) -> AssociationNode | None:
        """
        Removes and returns the child with the specified key,
        or returns None if there is no such child.
        """
        if self._children is None:
            return None
        return self._children.pop(key, None)
    
    def mark_destroyed(self) -> None:
        """
        Moves this node and its descendants to the terminal destroyed state.
        Their display handles must already have been destroyed.
        """
        for descendant in list(self.walk()):
            descendant._mark_destroyed_self()
        self._mark_destroyed_self()
    
    def _mark_destroyed_self(self) -> None:
        self._destroyed = True
        self.handle = None
        self.displayed = None
        if self._children is not None:
            self._children = {}
    
    def _ensure_not_destroyed(self) -> None:
        if self._destroyed:
            raise ValueError(f'Node has been destroyed: {self!r}')
    
    # === Utility ===
    
    def __repr__(self) -> str:
        if self.is_root:
            return '<AssociationNode ROOT>'
        return f'<AssociationNode {self.key!r} at depth {self.depth}>'
