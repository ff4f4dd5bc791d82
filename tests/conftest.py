from __future__ import annotations

from collections.abc import Iterator
import pytest
from tableview.association import AssociationNode
from tableview.display import EntryDisplay
from tableview.util.xthreading import set_foreground_thread


class FakeHandle:
    """Display handle created by a RecordingSurface."""
    
    def __init__(self, node: AssociationNode) -> None:
        self.key = node.key
        self.depth = node.depth
        self.display = None  # type: EntryDisplay | None
        self.destroyed = False
    
    def __repr__(self) -> str:
        return f'<FakeHandle {self.key!r}>'


class RecordingSurface:
    """
    DisplaySurface that records every call made to it,
    as ('create' | 'destroy' | 'refresh', key) tuples.
    """
    
    def __init__(self) -> None:
        self.calls = []  # type: list[tuple[str, object]]
        self.handles = []  # type: list[FakeHandle]
        self.fail_destroy = False
    
    def create_handle(self, node: AssociationNode) -> FakeHandle:
        handle = FakeHandle(node)
        self.handles.append(handle)
        self.calls.append(('create', node.key))
        return handle
    
    def destroy_handle(self, handle: object) -> None:
        assert isinstance(handle, FakeHandle)
        self.calls.append(('destroy', handle.key))
        if self.fail_destroy:
            raise RuntimeError('Handle is already gone')
        handle.destroyed = True
    
    def refresh(self, handle: object, display: EntryDisplay) -> None:
        assert isinstance(handle, FakeHandle)
        assert not handle.destroyed, f'Refreshed destroyed handle {handle!r}'
        self.calls.append(('refresh', handle.key))
        handle.display = display
    
    # === Utility ===
    
    def live_handles(self) -> list[FakeHandle]:
        return [h for h in self.handles if not h.destroyed]
    
    def calls_of(self, kind: str) -> list[object]:
        return [key for (k, key) in self.calls if k == kind]
    
    def reset(self) -> None:
        self.calls.clear()


@pytest.fixture
def surface() -> RecordingSurface:
    return RecordingSurface()


@pytest.fixture(autouse=True)
def no_foreground_thread() -> Iterator[None]:
    # Tests drive viewers from whatever thread pytest uses
    set_foreground_thread(None)
    yield
    set_foreground_thread(None)
