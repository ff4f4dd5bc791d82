"""
Contract between the core of a TableViewer and the display surface
that actually draws entries on screen.

The core never inspects display handles. It only creates them, destroys
them, and sends each one the EntryDisplay it should currently show.
"""

from __future__ import annotations

from tableview.association import AssociationNode
from tableview.formatting import format_key, format_value
from tableview.options import Color, ViewerOptions
from tableview.util import cli
from typing import NamedTuple, Protocol

# Horizontal space taken by each level of nesting, in pixels
INDENT_PER_DEPTH = 16


class EntryDisplay(NamedTuple):
    key_text: str
    value_text: str
    key_color: Color
    kind_color: Color
    # Whether the entry is a table with at least one item
    expandable: bool
    indent: int
    layout_order: int
    visible: bool


class DisplaySurface(Protocol):
    """
    Draws the entries of a TableViewer.
    
    A surface is only ever called from the thread that drives the viewer.
    """
    
    def create_handle(self, node: AssociationNode) -> object:
        """
        Creates a display handle for a newly created node.
        
        The node's parent (if not the root) already has a handle.
        The node is passed so that the surface can offer expand/collapse
        affordances for container nodes once they have items.
        """
        ...
    
    def destroy_handle(self, handle: object) -> None:
        """
        Destroys a display handle. Must tolerate being called for
        a handle that has already been destroyed.
        """
        ...
    
    def refresh(self, handle: object, display: EntryDisplay) -> None:
        """Updates a display handle to show the specified display."""
        ...


class Presenter:
    """
    Mediates all calls from the core to a DisplaySurface.
    
    Refreshes are queued during an update cycle and sent by flush() at its
    end, so that each handle is refreshed at most once per cycle and only
    when it was touched or its display actually changed.
    """
    
    def __init__(self, surface: DisplaySurface, options: ViewerOptions) -> None:
        self._surface = surface
        self._options = options
        self._dirty = {}  # type: dict[AssociationNode, None]
    
    @property
    def surface(self) -> DisplaySurface:
        return self._surface
    
    # === Operations ===
    
    def create(self, node: AssociationNode) -> None:
        if node.handle is not None:
            raise ValueError(f'Node already has a display handle: {node!r}')
        node.handle = self._surface.create_handle(node)
        self.mark_dirty(node)
    
    def destroy(self, node: AssociationNode) -> None:
        """
        Destroys the display handles of a node and all of its descendants,
        children first, and then moves them all to the destroyed state.
        
        Failures to destroy a handle are reported but never raised.
        """
        self._destroy_handles(node)
        node.mark_destroyed()
    
    def _destroy_handles(self, node: AssociationNode) -> None:
        if node.is_container:
            for child in node.children.values():
                self._destroy_handles(child)
        self._dirty.pop(node, None)
        handle = node.handle
        if handle is None:
            return
        node.handle = None
        try:
            self._surface.destroy_handle(handle)
        except Exception as e:
            # Cleanup is best-effort. The handle may already be gone.
            cli.print_warning(
                f'*** Unable to destroy display handle of {node!r}: {e!r}')
    
    def mark_dirty(self, node: AssociationNode) -> None:
        """Queues a refresh of the specified node at the end of the current cycle."""
        if node.handle is None:
            # Root or destroyed node. Nothing to refresh.
            return
        self._dirty[node] = None
    
    def flush(self, root: AssociationNode) -> None:
        """
        Sends a refresh to every node that was marked dirty
        or whose display changed since it was last sent.
        """
        dirty = self._dirty
        self._dirty = {}
        for node in root.walk():
            if node.handle is None:
                continue
            display = self.display_for(node)
            if node in dirty or display != node.displayed:
                node.displayed = display
                self._surface.refresh(node.handle, display)
    
    def display_for(self, node: AssociationNode) -> EntryDisplay:
        options = self._options
        settings = options['settings']
        highlighting = settings['syntax_highlighting']
        if node.is_container:
            value = node.children  # type: object
            expandable = len(node.children) > 0
        else:
            value = node.value
            expandable = False
        return EntryDisplay(
            key_text=format_key(node.key),
            value_text=format_value(
                value,
                show_table_value=options['show_table_value'],
                number_precision=settings['number_precision']),
            key_color=highlighting['Default'],
            kind_color=highlighting.get(node.kind, highlighting['Other']),  # type: ignore[attr-defined]
            expandable=expandable,
            indent=INDENT_PER_DEPTH * node.depth,
            layout_order=node.layout_order,
            visible=node.visible,
        )
    
    def dispose(self, root: AssociationNode) -> None:
        """Destroys the display handles of every node in the tree."""
        for child in list(root.children.values()):
            root.detach_child(child.key)
            self.destroy(child)
        self._dirty.clear()
