"""
TableViewer: displays a live, nested key-value table and keeps the display
synchronized with the table as it changes.

Each call to update() runs one synchronous reconciliation cycle:
1. diff the new snapshot against the previous one,
2. apply the delta to the association tree (creating, updating, and
   destroying display handles),
3. recompute the layout order of touched sibling groups,
4. recompute visibility of touched entries, then hide empty tables
   anywhere in the tree,
5. refresh every display handle whose display changed.
"""

from __future__ import annotations

from collections.abc import Mapping
from tableview.association import AssociationNode
from tableview.diff import Delta, deep_clone, get_diff
from tableview.display import DisplaySurface, Presenter
from tableview.options import resolve_options, ViewerOptions
from tableview.ordering import update_order
from tableview.reconciler import Reconciler
from tableview.util.xthreading import fg_affinity
from tableview.visibility import VisibilityPass
from typing import Any


def snapshot_of(data: Any) -> Any:
    """
    Returns a deep copy of `data` that the viewer owns.
    
    Lists and tuples inside tables are converted to tables keyed by index,
    so that their elements are displayed (and diffed) like any other entry.
    """
    if isinstance(data, Mapping):
        return {k: snapshot_of(v) for (k, v) in data.items()}
    if isinstance(data, (list, tuple)):
        return {i: snapshot_of(v) for (i, v) in enumerate(data)}
    return data


class TableViewer:
    """
    Displays a nested key-value table on a DisplaySurface.
    
    The viewer never aliases data passed to it. Callers may freely mutate
    their data after passing it, as long as they do not do so concurrently
    with a call to update().
    """
    
    def __init__(self,
            data: Mapping[Any, Any],
            options: Mapping[str, Any] | None=None,
            *, surface: DisplaySurface,
            ) -> None:
        """
        Raises:
        * InvalidOptionsError -- if the options are not valid.
        """
        self._options = resolve_options(options)
        self._data = {}  # type: dict[Any, Any]
        self._root = AssociationNode.new_root()
        self._presenter = Presenter(surface, self._options)
        self._reconciler = Reconciler(self._presenter)
        self._visibility = VisibilityPass(self._options)
        self._disposed = False
        
        # Create initial associations
        self.update(data)
    
    # === Properties ===
    
    @property
    def data(self) -> dict[Any, Any]:
        """A copy of the data currently displayed."""
        return deep_clone(self._data)
    
    @property
    def options(self) -> ViewerOptions:
        return self._options
    
    @property
    def root(self) -> AssociationNode:
        """The root of the association tree. Must not be mutated by callers."""
        return self._root
    
    @property
    def surface(self) -> DisplaySurface:
        return self._presenter.surface
    
    @property
    def key_filters(self) -> list[str]:
        return list(self._visibility.key_filters)
    
    @property
    def type_exclusions(self) -> list[str]:
        return list(self._visibility.type_exclusions)
    
    # === Operations ===
    
    @fg_affinity
    def update(self, new_data: Mapping[Any, Any]) -> Delta:
        """
        Displays `new_data` in place of the previously displayed data,
        disturbing only the entries that changed.
        
        Returns the delta that was applied.
        
        Raises:
        * ValueError -- if this viewer has been disposed.
        """
        self._ensure_not_disposed()
        if not isinstance(new_data, Mapping):
            raise TypeError(f'Expected a mapping but got {type(new_data).__name__}')
        
        last_data = self._data
        self._data = snapshot_of(new_data)
        delta = get_diff(self._data, last_data)
        
        self._reconciler.reconcile(self._root, delta)
        update_order(self._root, delta, self._options)
        self._visibility.evaluate(self._root, delta)
        self._visibility.hide_empty_containers(self._root)
        self._presenter.flush(self._root)
        return delta
    
    @fg_affinity
    def set_key_filters(self, text: str) -> None:
        """
        Shows only non-table entries whose key contains at least one of the
        comma-separated filters in `text`. Empty text shows every entry.
        """
        self._ensure_not_disposed()
        self._visibility.set_key_filters_text(text)
        self._update_visibility()
    
    @fg_affinity
    def set_type_exclusions(self, text: str) -> None:
        """
        Hides entries whose type name is one of the comma-separated
        exclusions in `text`, such as "boolean, function".
        """
        self._ensure_not_disposed()
        self._visibility.set_type_exclusions_text(text)
        self._update_visibility()
    
    def _update_visibility(self) -> None:
        self._visibility.evaluate(self._root)
        self._visibility.hide_empty_containers(self._root)
        self._presenter.flush(self._root)
    
    @fg_affinity
    def dispose(self) -> None:
        """Destroys all display handles. The viewer cannot be used afterward."""
        if self._disposed:
            return
        self._disposed = True
        self._presenter.dispose(self._root)
        self._data = {}
    
    def _ensure_not_disposed(self) -> None:
        if self._disposed:
            raise ValueError('TableViewer has been disposed')
    
    # === Utility ===
    
    def __repr__(self) -> str:
        return f'<TableViewer {self._options["title"]!r} with {len(self._data)} keys>'
