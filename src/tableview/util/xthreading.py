"""
Threading utilities.

A table viewer is driven from a single "foreground thread", the thread
running the GUI. Every update cycle runs to completion on that thread.
"""

from collections.abc import Callable
from functools import wraps
import threading
from typing import Optional, TypeVar
from typing_extensions import ParamSpec

_P = ParamSpec('_P')
_R = TypeVar('_R')


# ------------------------------------------------------------------------------
# Access Foreground Thread

_fg_thread = None  # type: Optional[threading.Thread]


def set_foreground_thread(fg_thread: threading.Thread | None) -> None:
    global _fg_thread
    _fg_thread = fg_thread


def is_foreground_thread() -> bool:
    """
    Returns whether the current thread is the foreground thread.
    """
    return threading.current_thread() == _fg_thread


def has_foreground_thread() -> bool:
    """
    Returns whether any foreground thread has been registered.
    
    Headless callers (such as automated tests) never register one,
    in which case no thread affinity is enforced.
    """
    return _fg_thread is not None


# ------------------------------------------------------------------------------
# Thread Affinity

def fg_affinity(func: Callable[_P, _R]) -> Callable[_P, _R]:
    """
    Marks the decorated function as needing to be called from the
    foreground thread only.
    
    Calling the decorated function from an inappropriate thread will immediately
    raise an AssertionError.
    
    The following kinds of manipulations need to happen on the foreground thread:
    - wxPython calls, except for wx.CallAfter
    - reconciliation of a TableViewer (update and filter changes)
    """
    if __debug__:  # no -O passed on command line?
        @wraps(func)
        def wrapper(*args, **kwargs):
            if not is_foreground_thread() and has_foreground_thread():
                raise AssertionError(
                    f'fg_affinity: Expected call on foreground thread: {func}')
            return func(*args, **kwargs)
        return wrapper
    else:
        return func
