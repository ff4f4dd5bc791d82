from collections.abc import Callable, Iterator
from contextlib import contextmanager
import os
from typing import NoReturn

# Whether RuntimeError('wrapped C/C++ object of type ... has been deleted')
# (or its sibling WindowDeletedError) is silently ignored.
# 
# Destroying a display handle is best-effort, so the surface always tolerates
# deleting an item that is already gone. Other uses after free are only
# ignored when this flag is set.
IGNORE_USE_AFTER_FREE = (
    os.environ.get('TABLEVIEW_IGNORE_USE_AFTER_FREE', 'False') == 'True'
)


def is_wrapped_object_deleted_error(e: Exception) -> bool:
    e_str = str(e)
    return (
        isinstance(e, RuntimeError) and
        e_str.startswith('wrapped C/C++ object of type ') and
        e_str.endswith(' has been deleted')
    )


@contextmanager
def wrapped_object_deleted_error_ignored(*, always: bool=False) -> Iterator[None]:
    if IGNORE_USE_AFTER_FREE or always:
        try:
            yield
        except Exception as e:
            if is_wrapped_object_deleted_error(e):
                pass
            else:
                raise
    else:
        # May raise errors matching is_wrapped_object_deleted_error()
        yield


@contextmanager
def wrapped_object_deleted_error_raising(
        raiser: Callable[[], NoReturn]
        ) -> Iterator[None]:
    try:
        yield
    except Exception as e:
        if is_wrapped_object_deleted_error(e):
            raiser()
        else:
            raise


class WindowDeletedError(Exception):
    """Raised when code attempts to manipulate a wx object that has been deleted."""
