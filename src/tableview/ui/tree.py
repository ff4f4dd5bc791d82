"""
Facade for working with wx.TreeCtrl, and the DisplaySurface that draws
the entries of a TableViewer on it.

This abstraction provides:
* tree nodes that can be manipulated before being added to a tree
* children kept sorted by an explicit order index
* access to the underlying "peer" objects (i.e. wx.TreeCtrl, tree item index)
"""

from __future__ import annotations

from tableview.association import AssociationNode
from tableview.display import EntryDisplay
from tableview.formatting import truncate_text
from tableview.options import ViewerOptions
from tableview.util.wx_error import (
    IGNORE_USE_AFTER_FREE, WindowDeletedError,
    wrapped_object_deleted_error_ignored, wrapped_object_deleted_error_raising,
)
from tableview.util.xthreading import fg_affinity
from typing import NoReturn, Optional
import wx

# Longest value text displayed before truncation
MAX_VALUE_TEXT_LENGTH = 80

_BACKGROUND_COLOR = wx.Colour(31, 31, 31)


class TreeView:
    """
    Displays a tree of nodes.
    
    Acts as a facade for manipulating an underlying wx.TreeCtrl.
    For advanced customization, this wx.TreeCtrl may be accessed through the `peer` attribute.
    
    Automatically creates a root NodeView (accessible via the `root` attribute),
    which will not be displayed.
    """
    
    def __init__(self, parent_peer: wx.Window, *, name: str | None=None) -> None:
        self.peer = _OrderedTreeCtrl(
            parent_peer,
            style=wx.TR_DEFAULT_STYLE|wx.TR_HIDE_ROOT,
            **(
                dict(name=name)
                if name is not None else
                dict()
            ))  # type: wx.TreeCtrl
        
        # Create root node's view
        self._root_peer = NodeViewPeer(self, self.peer.AddRoot(''))
        self.root = NodeView()
    
    # === Properties ===
    
    def _get_root(self) -> NodeView:
        return self._root
    def _set_root(self, value: NodeView) -> None:
        self._root = value
        self._root._attach(self._root_peer)
    root = property(_get_root, _set_root)
    
    # === Operations ===
    
    def expand(self, node_view: NodeView) -> None:
        if node_view.peer is None:
            raise ValueError('Cannot expand a node that is not attached to a tree.')
        node_view.peer.Expand()
    
    def dispose(self) -> None:
        self.root.dispose()


class _OrderedTreeCtrl(wx.TreeCtrl):
    def OnCompareItems(self, item1: wx.TreeItemId, item2: wx.TreeItemId) -> int:
        (item1_view, item2_view) = (self.GetItemData(item1), self.GetItemData(item2))
        assert isinstance(item1_view, NodeView) and isinstance(item2_view, NodeView)
        (order_index_1, order_index_2) = (item1_view._order_index, item2_view._order_index)
        if order_index_1 is None and order_index_2 is None:
            return 0
        assert isinstance(order_index_1, int) and isinstance(order_index_2, int)
        return order_index_1 - order_index_2


class NodeView:
    """
    Node that is (or will be) in a TreeView.
    
    Acts as a facade for manipulating a wxTreeItemId in a wxTreeCtrl. Allows modifications even
    if the underlying wxTreeItemId doesn't yet exist. For advanced customization, the wxTreeItemId
    and wxTreeCtrl may be accessed through the `peer` attribute (which is a `NodeViewPeer`)).
    """
    DEFAULT_TEXT_COLOR = wx.Colour(200, 200, 200)
    
    # Optimize per-instance memory use, since there may be very many NodeView objects
    __slots__ = (
        'peer',
        '_title',
        '_text_color',
        '_expandable',
        '_children',
        '_order_index',
    )
    
    def __init__(self) -> None:
        self.peer = None  # type: Optional[NodeViewPeer]
        self._title = ''
        self._text_color = None  # type: Optional[wx.Colour]
        self._expandable = False
        self._children = []  # type: list[NodeView]
        self._order_index = None  # type: Optional[int]
    
    # === Properties ===
    
    def _get_title(self) -> str:
        return self._title
    def _set_title(self, value: str) -> None:
        self._title = value
        if self.peer:
            self.peer.SetItemText(value)
    title = property(_get_title, _set_title)
    
    def _get_text_color(self) -> wx.Colour | None:
        return self._text_color
    def _set_text_color(self, value: wx.Colour | None) -> None:
        self._text_color = value
        if self.peer:
            self.peer.SetItemTextColour(value or self.DEFAULT_TEXT_COLOR)
    text_color = property(_get_text_color, _set_text_color)
    
    def _get_expandable(self) -> bool:
        return self._expandable
    def _set_expandable(self, value: bool) -> None:
        self._expandable = value
        if self.peer:
            self.peer.SetItemHasChildren(value)
    expandable = property(_get_expandable, _set_expandable)
    
    @property
    def children(self) -> list[NodeView]:
        return self._children
    
    def set_children(self, new_children: list[NodeView], *, _initial: bool=False) -> None:
        """
        Replaces the children of this node, in display order.
        
        Children that appear in both the old and new lists keep their
        underlying tree items, so that their expansion state is preserved.
        """
        old_children = self._children
        self._children = new_children
        for (index, child) in enumerate(new_children):
            child._order_index = index
        if self.peer:
            try:
                if _initial or len(old_children) == 0:
                    # Add initial children
                    for child in new_children:
                        child._attach(NodeViewPeer(self.peer._tree, self.peer.AppendItem('')))
                else:
                    # Replace existing children, preserving old ones that match new ones
                    old_children_set = set(old_children)
                    new_children_set = set(new_children)
                    
                    # Delete some children
                    for child in old_children:
                        if child not in new_children_set:
                            child._delete_peer_and_descendants()
                    
                    # Add some children
                    for child in new_children:
                        if child not in old_children_set:
                            child._attach(NodeViewPeer(self.peer._tree, self.peer.AppendItem('')))
                    
                    # Reorder children
                    self.peer.SortChildren()
            except WindowDeletedError:
                if IGNORE_USE_AFTER_FREE:
                    pass
                else:
                    raise
    
    # === Operations ===
    
    def _attach(self, peer: NodeViewPeer) -> None:
        old_peer = self.peer  # capture
        if old_peer:
            raise ValueError(
                f'Already attached to a different peer: '
                f'old_peer={old_peer!r}, new_peer={peer!r}')
        self.peer = peer
        
        # Enable navigation from peer back to this view
        peer.SetItemData(self)
        
        # Trigger property logic to update peer
        self.title = self.title
        if self._text_color is not None:
            self.text_color = self.text_color
        self.expandable = self.expandable
        self.set_children(self.children, _initial=True)
    
    def _delete_peer_and_descendants(self) -> None:
        if self.peer is None:
            return
        for child in self._children:
            child._forget_peer()
        # Deleting a tree item deletes its descendant items too
        self.peer.Delete()
        self.peer = None
    
    def _forget_peer(self) -> None:
        for child in self._children:
            child._forget_peer()
        self.peer = None
    
    def dispose(self) -> None:
        self.peer = None
        for c in self._children:
            c.dispose()
        self._children = []
    
    # === Utility ===
    
    def __repr__(self) -> str:
        return f'<NodeView {self.title!r}>'


class NodeViewPeer(tuple):
    """
    Thin wrapper around a wxPython tree item that makes the underlying API safer to use.
    """
    
    def __new__(cls, tree: TreeView, node_id: wx.TreeItemId):
        return tuple.__new__(cls, (tree, node_id))
    
    @property
    def _tree(self) -> TreeView:
        return self[0]
    
    @property
    def tree_peer(self) -> wx.TreeCtrl:
        return self._tree.peer
    
    @property
    def node_id(self) -> wx.TreeItemId:
        return self[1]
    
    @fg_affinity
    def SetItemData(self, obj: NodeView) -> None:
        node_id = self.node_id  # cache
        if node_id.IsOk():
            with wrapped_object_deleted_error_ignored():
                self.tree_peer.SetItemData(node_id, obj)
        else:
            self._did_access_not_ok_wx_object()
    
    @fg_affinity
    def SetItemText(self, text: str) -> None:
        node_id = self.node_id  # cache
        if node_id.IsOk():
            with wrapped_object_deleted_error_ignored():
                self.tree_peer.SetItemText(node_id, text)
        else:
            self._did_access_not_ok_wx_object()
    
    @fg_affinity
    def SetItemTextColour(self, colour: wx.Colour) -> None:
        node_id = self.node_id  # cache
        if node_id.IsOk():
            with wrapped_object_deleted_error_ignored():
                self.tree_peer.SetItemTextColour(node_id, colour)
        else:
            self._did_access_not_ok_wx_object()
    
    @fg_affinity
    def SetItemHasChildren(self, has: bool) -> None:
        node_id = self.node_id  # cache
        if node_id.IsOk():
            with wrapped_object_deleted_error_ignored():
                self.tree_peer.SetItemHasChildren(node_id, has)
        else:
            self._did_access_not_ok_wx_object()
    
    @fg_affinity
    def AppendItem(self, text: str, *args) -> wx.TreeItemId:
        node_id = self.node_id  # cache
        if node_id.IsOk():
            with wrapped_object_deleted_error_raising(self._raise_no_longer_exists):
                return self.tree_peer.AppendItem(node_id, text, *args)
        else:
            self._raise_no_longer_exists()
    
    @fg_affinity
    def Delete(self) -> None:
        node_id = self.node_id  # cache
        if node_id.IsOk():
            # Destroying a display handle is best-effort
            with wrapped_object_deleted_error_ignored(always=True):
                self.tree_peer.Delete(node_id)
        else:
            self._did_access_not_ok_wx_object()
    
    @fg_affinity
    def SortChildren(self) -> None:
        node_id = self.node_id  # cache
        if node_id.IsOk():
            with wrapped_object_deleted_error_ignored():
                self.tree_peer.SortChildren(node_id)
        else:
            self._did_access_not_ok_wx_object()
    
    @fg_affinity
    def Expand(self) -> None:
        node_id = self.node_id  # cache
        if node_id.IsOk():
            with wrapped_object_deleted_error_ignored():
                self.tree_peer.Expand(node_id)
        else:
            self._did_access_not_ok_wx_object()
    
    def _raise_no_longer_exists(self) -> NoReturn:
        raise WindowDeletedError('Tree item no longer exists')
    
    def _did_access_not_ok_wx_object(self) -> None:
        if IGNORE_USE_AFTER_FREE:
            pass
        else:
            self._raise_no_longer_exists()


# ------------------------------------------------------------------------------
# WxTreeSurface

class EntryView(NodeView):
    """
    NodeView that displays one entry of a TableViewer.
    
    Remembers all of its child entries, including hidden ones,
    so that hidden entries can be reattached when they are shown again.
    """
    __slots__ = (
        'entries',
        'parent_entry',
        'entry_order',
        'entry_visible',
        'auto_expanded',
        'destroyed',
    )
    
    def __init__(self, parent_entry: EntryView | None=None) -> None:
        super().__init__()
        self.entries = []  # type: list[EntryView]
        self.parent_entry = parent_entry
        self.entry_order = 0
        # Hidden until first refreshed
        self.entry_visible = False
        self.auto_expanded = False
        self.destroyed = False


class WxTreeSurface:
    """
    Draws the entries of a TableViewer in a TreeView.
    
    A display handle is an EntryView. Hidden entries are detached from
    the underlying wx.TreeCtrl, and visible entries are kept sorted by
    their layout order.
    """
    
    def __init__(self, tree: TreeView, options: ViewerOptions) -> None:
        settings = options['settings']
        self._tree = tree
        self._text_truncate = settings['text_truncate']
        self._expanded = settings['expanded']
        
        self._root_entry = EntryView()
        tree.root = self._root_entry
        
        tree.peer.SetBackgroundColour(_BACKGROUND_COLOR)
        if settings['font'] != '':
            tree.peer.SetFont(wx.Font(wx.FontInfo().FaceName(settings['font'])))
    
    @property
    def root_entry(self) -> EntryView:
        return self._root_entry
    
    # === DisplaySurface ===
    
    @fg_affinity
    def create_handle(self, node: AssociationNode) -> EntryView:
        parent_node = node.parent
        if parent_node is None or parent_node.is_root:
            parent_entry = self._root_entry
        else:
            parent_entry = parent_node.handle
            assert isinstance(parent_entry, EntryView)
        entry = EntryView(parent_entry)
        entry.expandable = node.is_container and len(node.children) > 0
        parent_entry.entries.append(entry)
        return entry
    
    @fg_affinity
    def destroy_handle(self, handle: object) -> None:
        assert isinstance(handle, EntryView)
        if handle.destroyed:
            return
        handle.destroyed = True
        parent_entry = handle.parent_entry
        if parent_entry is None:
            return
        try:
            parent_entry.entries.remove(handle)
        except ValueError:
            pass
        if not parent_entry.destroyed:
            self._sync_children(parent_entry)
        handle.parent_entry = None
    
    @fg_affinity
    def refresh(self, handle: object, display: EntryDisplay) -> None:
        assert isinstance(handle, EntryView)
        if handle.destroyed:
            return
        
        value_text = truncate_text(
            display.value_text, MAX_VALUE_TEXT_LENGTH, self._text_truncate)
        handle.title = (
            f'{display.key_text}: {value_text}'
            if value_text != '' else
            display.key_text
        )
        # A tree item has a single text color. Entries showing only their key use the key color.
        handle.text_color = wx.Colour(*(
            display.kind_color if value_text != '' else display.key_color
        ))
        handle.expandable = display.expandable
        
        if (handle.entry_order != display.layout_order or
                handle.entry_visible != display.visible):
            handle.entry_order = display.layout_order
            handle.entry_visible = display.visible
            if handle.parent_entry is not None:
                self._sync_children(handle.parent_entry)
    
    # === Internal ===
    
    def _sync_children(self, entry: EntryView) -> None:
        visible_entries = sorted(
            [e for e in entry.entries if e.entry_visible],
            key=lambda e: e.entry_order)
        entry.set_children(visible_entries)  # type: ignore[arg-type]
        
        if (self._expanded and
                entry is not self._root_entry and
                not entry.auto_expanded and
                entry.peer is not None and
                len(visible_entries) > 0):
            entry.auto_expanded = True
            self._tree.expand(entry)
    
    def dispose(self) -> None:
        self._tree.dispose()
