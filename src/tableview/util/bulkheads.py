"""
Bulkheads stop exceptions raised by callbacks from propagating into callers
that cannot handle them, most notably the wx main loop.

A function decorated with @capture_crashes_to_stderr never raises.
Instead it prints the exception (and the full call stack that led to it)
to stderr and returns a fallback value.
"""

from collections.abc import Callable
from tableview.util import cli
from functools import wraps
import sys
import traceback
from typing import overload, TypeVar
from typing_extensions import ParamSpec

_P = ParamSpec('_P')
_RT = TypeVar('_RT')
_RF = TypeVar('_RF')


@overload
def capture_crashes_to_stderr(
        func: Callable[_P, _RT]
        ) -> Callable[_P, _RT | None]:
    ...

@overload
def capture_crashes_to_stderr(
        *, return_if_crashed: _RF
        ) -> Callable[[Callable[_P, _RT]], Callable[_P, _RT | _RF]]:
    ...

def capture_crashes_to_stderr(
        func: Callable[_P, _RT] | None=None,
        *, return_if_crashed=None  # _RF
        ):
    """
    A function that captures any raised exceptions, and prints them to stderr.
    
    Examples:
        @capture_crashes_to_stderr
        def on_filter_text_changed(self, event) -> None:
            ...
        
        @capture_crashes_to_stderr(return_if_crashed=False)
        def try_reload(self) -> bool:
            ...
    """
    def decorate(func: Callable[_P, _RT]) -> Callable[_P, _RT | _RF]:
        @wraps(func)
        def bulkhead_call(*args: _P.args, **kwargs: _P.kwargs) -> _RT | _RF:
            try:
                return func(*args, **kwargs)
            except Exception as e:
                _print_bulkhead_exception(e)
                return return_if_crashed
        return bulkhead_call
    if func is None:
        return decorate
    else:
        return decorate(func)


def _print_bulkhead_exception(e: BaseException) -> None:
    # Print the frames of the callers of the bulkhead too,
    # not just the frames below it
    err_file = sys.stderr
    print(cli.TERMINAL_FG_RED, end='', file=err_file)
    if e.__traceback__ is not None:
        here_tb = traceback.extract_stack(sys._getframe(2))
        exc_tb = traceback.extract_tb(e.__traceback__)
        print('Exception in bulkhead:', file=err_file)
        print('Traceback (most recent call last):', file=err_file)
        for x in traceback.format_list(here_tb[:-1] + exc_tb):
            print(x, end='', file=err_file)
    for x in traceback.format_exception_only(type(e), e):
        print(x, end='', file=err_file)
    print(cli.TERMINAL_RESET, end='', file=err_file)
    err_file.flush()
