from collections.abc import Callable, Iterator
from contextlib import contextmanager
from tableview.util import cli
import sys
import traceback
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import wx


def bind(
        window: 'wx.EvtHandler', 
        event_type, 
        target: 'Callable[[wx.Event], None]',
        *args
        ) -> None:
    """
    Equivalent to wx.EvtHandler.Bind(), but an exception raised by `target`
    is printed to stderr rather than propagated into wx.
    """
    window.Bind(event_type, _bind_target()(target), *args)


@contextmanager
def _bind_target() -> Iterator[None]:
    """
    Decorates any function that is a target of wx.EvtHandler.Bind().
    
    An exception that reaches wx from a listener can leave wx in an invalid
    state that crashes the process later, usually when Python exits.
    """
    try:
        yield
    except Exception:
        err_file = sys.stderr
        print(cli.TERMINAL_FG_RED, end='', file=err_file)
        print('Exception in wxPython listener:', file=err_file)
        traceback.print_exc(file=err_file)
        print(cli.TERMINAL_RESET, end='', file=err_file)
        err_file.flush()
