from __future__ import annotations

from collections.abc import Mapping
from tableview.options import resolve_options
from tableview.ui.tree import TreeView, WxTreeSurface
from tableview.util.wx_bind import bind
from tableview.util.xthreading import fg_affinity
from tableview.viewer import TableViewer
from typing import Any
import wx

_TITLE_DECORATION = '🔧  '

_FOOTER_SPACING = 4  # px
_TOGGLE_BUTTON_SIZE = (28, 24)


class ViewerFrame:
    """
    Window that displays a TableViewer.
    
    The window has a header with a button that collapses (hides) the body,
    a tree of entries, and a footer with fields for filtering the entries.
    """
    
    @fg_affinity
    def __init__(self,
            data: Mapping[Any, Any],
            options: Mapping[str, Any] | None=None,
            *, parent: wx.Window | None=None,
            ) -> None:
        """
        Raises:
        * InvalidOptionsError -- if the options are not valid.
        """
        resolved = resolve_options(options)
        settings = resolved['settings']
        
        title = resolved['title']
        if resolved['decorate_title']:
            title = _TITLE_DECORATION + title
        
        frame = wx.Frame(
            parent,
            title=title,
            size=settings['starting_size'],
            name='tv-viewer-frame')
        frame.SetMinSize(settings['min_size'])
        frame.SetMaxSize(settings['max_size'])
        self._frame = frame
        self._body_shown = True
        self._expanded_size = settings['starting_size']
        
        panel = wx.Panel(frame)
        panel_sizer = wx.BoxSizer(wx.VERTICAL)
        panel.SetSizer(panel_sizer)
        
        panel_sizer.Add(self._create_header(panel, title), flag=wx.EXPAND)
        
        self._body = wx.Panel(panel)
        body_sizer = wx.BoxSizer(wx.VERTICAL)
        self._body.SetSizer(body_sizer)
        self._tree = TreeView(self._body, name='tv-viewer-frame__tree')
        body_sizer.Add(self._tree.peer, proportion=1, flag=wx.EXPAND)
        body_sizer.Add(
            self._create_footer(self._body, filter_on_type=resolved['filter_on_type']),
            flag=wx.EXPAND|wx.ALL,
            border=_FOOTER_SPACING)
        panel_sizer.Add(self._body, proportion=1, flag=wx.EXPAND)
        
        self._viewer = TableViewer(
            data,
            resolved,
            surface=WxTreeSurface(self._tree, resolved))
        
        bind(frame, wx.EVT_CLOSE, self._on_close)
    
    def _create_header(self, parent: wx.Window, title: str) -> wx.Sizer:
        header_sizer = wx.BoxSizer(wx.HORIZONTAL)
        header_sizer.Add(
            wx.StaticText(parent, label=title),
            proportion=1,
            flag=wx.ALIGN_CENTER_VERTICAL|wx.LEFT,
            border=_FOOTER_SPACING)
        
        self._toggle_button = wx.Button(
            parent,
            label='▲',
            size=_TOGGLE_BUTTON_SIZE,
            name='tv-viewer-frame__toggle-button')
        self._toggle_button.SetToolTip('Show or hide the table')
        bind(self._toggle_button, wx.EVT_BUTTON, self._on_toggle_button)
        header_sizer.Add(self._toggle_button)
        return header_sizer
    
    def _create_footer(self, parent: wx.Window, *, filter_on_type: bool) -> wx.Sizer:
        footer_sizer = wx.BoxSizer(wx.HORIZONTAL)
        
        self.filter_field = wx.TextCtrl(
            parent,
            style=wx.TE_PROCESS_ENTER,
            name='tv-viewer-frame__filter-field')
        self.filter_field.SetHint('Field Filter')
        footer_sizer.Add(self.filter_field, proportion=1, flag=wx.EXPAND|wx.RIGHT, border=_FOOTER_SPACING)
        
        self.exclusions_field = wx.TextCtrl(
            parent,
            style=wx.TE_PROCESS_ENTER,
            name='tv-viewer-frame__exclusions-field')
        self.exclusions_field.SetHint('Type Exclusions')
        footer_sizer.Add(self.exclusions_field, proportion=1, flag=wx.EXPAND)
        
        for (field, on_changed) in [
                (self.filter_field, self._on_filter_field_changed),
                (self.exclusions_field, self._on_exclusions_field_changed)]:
            if filter_on_type:
                bind(field, wx.EVT_TEXT, on_changed)
            else:
                bind(field, wx.EVT_TEXT_ENTER, on_changed)
                bind(field, wx.EVT_KILL_FOCUS, on_changed)
        return footer_sizer
    
    # === Properties ===
    
    @property
    def frame(self) -> wx.Frame:
        return self._frame
    
    @property
    def viewer(self) -> TableViewer:
        return self._viewer
    
    @property
    def body_shown(self) -> bool:
        return self._body_shown
    
    # === Operations ===
    
    def show(self) -> None:
        self._frame.Show()
    
    def set_body_shown(self, shown: bool) -> None:
        if shown == self._body_shown:
            return
        self._body_shown = shown
        if not shown:
            self._expanded_size = tuple(self._frame.GetSize())
        self._body.Show(shown)
        self._toggle_button.SetLabel('▲' if shown else '▼')
        if shown:
            self._frame.SetSize(self._expanded_size)
        else:
            (width, _) = self._expanded_size
            self._frame.SetSize((width, self._frame.GetMinSize().height))
        self._frame.Layout()
    
    # === Events ===
    
    def _on_toggle_button(self, event: wx.CommandEvent) -> None:
        self.set_body_shown(not self._body_shown)
    
    def _on_filter_field_changed(self, event: wx.Event) -> None:
        self._viewer.set_key_filters(self.filter_field.GetValue())
        # Let the field process focus changes normally
        event.Skip()
    
    def _on_exclusions_field_changed(self, event: wx.Event) -> None:
        self._viewer.set_type_exclusions(self.exclusions_field.GetValue())
        event.Skip()
    
    def _on_close(self, event: wx.CloseEvent) -> None:
        self._viewer.dispose()
        self._tree.dispose()
        event.Skip()
