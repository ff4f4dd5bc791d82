"""
The fixed value domain that a TableViewer can display.

Every value has exactly one kind. Kind names are user-visible: they key the
ordering and highlighting tables of the viewer options, and type exclusions
typed by the user are matched against them.
"""

from __future__ import annotations

from abc import ABC
from collections.abc import Mapping
import numbers
from typing import Any, Literal, TypeAlias

Kind: TypeAlias = Literal[
    'boolean', 'number', 'string', 'table', 'function', 'Instance', 'Other'
]

KINDS = (
    'boolean', 'number', 'string', 'table', 'function', 'Instance', 'Other'
)  # type: tuple[Kind, ...]


class ExternalHandle(ABC):
    """
    An opaque reference to an object owned by some external system,
    such as a window, a scene object, or a database row.
    
    A TableViewer never looks inside an ExternalHandle. It only displays
    its class name and, if available, its path.
    
    Classes that cannot inherit from ExternalHandle may be registered
    as virtual subclasses with ExternalHandle.register().
    """
    
    @property
    def class_name(self) -> str:
        return type(self).__name__
    
    @property
    def path(self) -> str | None:
        """A human-readable locator for the handle, or None if unknown."""
        return None


def kind_of(value: object) -> Kind:
    # NOTE: bool is checked before numbers because bool is a subclass of int
    if isinstance(value, bool):
        return 'boolean'
    if isinstance(value, numbers.Real):
        return 'number'
    if isinstance(value, str):
        return 'string'
    if isinstance(value, Mapping):
        return 'table'
    # NOTE: Handles are checked before callables because a handle may be callable
    if isinstance(value, ExternalHandle):
        return 'Instance'
    if callable(value) and not isinstance(value, type):
        return 'function'
    return 'Other'


def type_name_of(value: object) -> str:
    """
    Returns the name that type exclusions are matched against.
    
    Same as kind_of() except that values of kind 'Other' report
    their concrete Python type name, such as 'NoneType' or 'tuple'.
    """
    kind = kind_of(value)
    if kind == 'Other':
        return type(value).__name__
    return kind


def is_container(value: object) -> bool:
    return isinstance(value, Mapping)


def element_count(container: Mapping[Any, Any]) -> int:
    return len(container)


def scalars_equal(a: object, b: object) -> bool:
    """
    Returns whether two non-container values are the same for display purposes.
    
    Values of different kinds are never equal, so that (for example)
    changing a value from 1 to True is reported as a change.
    Numbers of different types are not equal either, since 1 and 1.0
    display differently.
    """
    if a is b:
        return True
    if kind_of(a) != kind_of(b):
        return False
    if type(a) is not type(b) and isinstance(a, numbers.Number):
        return False
    try:
        return bool(a == b)
    except Exception:
        # Comparison not supported by this value. Treat as changed.
        return False
