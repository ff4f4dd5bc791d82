"""
Structural diff and patch for nested key-value trees.

A delta is a tree shaped like the parts of the data that changed:
* a key mapped to REMOVAL was removed,
* a key mapped to a nested delta is a container that changed inside,
* a key mapped to any other value was added or changed to that value,
* a key that is absent did not change.

The delta for a key whose value changed kind (container to scalar or vice
versa) holds the new value itself, so that consumers can replace the old
entry rather than patch it.
"""

from __future__ import annotations

from collections.abc import Mapping
from tableview.values import is_container, kind_of, scalars_equal
from typing import Any, Final

Tree = Mapping[Any, Any]
Delta = dict[Any, Any]


class _RemovalMarker:
    """Type of the REMOVAL sentinel. Has exactly one instance."""
    __slots__ = ()
    
    def __repr__(self) -> str:
        return 'REMOVAL'
    
    def __reduce__(self) -> str:
        return 'REMOVAL'

REMOVAL: Final = _RemovalMarker()


def deep_clone(value: Any) -> Any:
    """
    Returns a copy of `value` that shares no containers with it.
    Non-container values are returned as-is.
    """
    if not is_container(value):
        return value
    return {k: deep_clone(v) for (k, v) in value.items()}


def get_diff(new: Any, old: Any) -> Any:
    """
    Returns the delta that transforms `old` into `new`.
    
    If either side is not a container then `new` is returned, as a scalar diff.
    If `old` is empty then `new` itself is returned, since every key is new.
    
    Law: apply_delta(deep_clone(old), get_diff(new, old)) == new
    """
    if not is_container(new) or not is_container(old):
        return new
    if len(old) == 0:
        return new
    
    diff = {}  # type: Delta
    _track_removals(new, old, diff)
    _track_mutations(new, old, diff)
    return diff


def _track_removals(current: Tree, previous: Tree, diff: Delta) -> None:
    for (key, previous_value) in previous.items():
        if key not in current:
            diff[key] = REMOVAL
            continue
        current_value = current[key]
        if is_container(current_value) and is_container(previous_value):
            sub_diff = diff.setdefault(key, {})
            _track_removals(current_value, previous_value, sub_diff)
            if len(sub_diff) == 0:
                del diff[key]
        elif kind_of(current_value) != kind_of(previous_value):
            # Kind changed. The replacement value is recorded by _track_mutations().
            diff[key] = REMOVAL


def _track_mutations(current: Tree, previous: Tree, diff: Delta) -> None:
    for (key, current_value) in current.items():
        if key in previous:
            previous_value = previous[key]
            if is_container(current_value) and is_container(previous_value):
                sub_diff = diff.setdefault(key, {})
                _track_mutations(current_value, previous_value, sub_diff)
                if len(sub_diff) == 0:
                    del diff[key]
                continue
            if scalars_equal(current_value, previous_value):
                continue
        diff[key] = current_value


def apply_delta(tree: dict[Any, Any], delta: Tree) -> dict[Any, Any]:
    """
    Applies `delta` to `tree` in place and returns `tree`.
    """
    for (key, delta_value) in delta.items():
        if delta_value is REMOVAL:
            tree.pop(key, None)
        elif is_container(delta_value) and is_container(tree.get(key)):
            tree[key] = apply_delta(tree[key], delta_value)
        else:
            tree[key] = delta_value
    return tree
