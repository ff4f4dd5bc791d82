"""
Renders keys and values of a table into display text.
"""

from __future__ import annotations

import numbers
import re
from tableview.values import ExternalHandle, kind_of, type_name_of
from typing import Any, Literal, TypeAlias

TextTruncate: TypeAlias = Literal['none', 'end', 'split_word']

TEXT_TRUNCATE_POLICIES = ('none', 'end', 'split_word')  # type: tuple[TextTruncate, ...]

FUNCTION_PLACEHOLDER = '<Function>'

_ELLIPSIS = '…'

# A run of at least two digits, possibly signed and with a decimal point
_EMBEDDED_NUMBER_RE = re.compile(r'-?\d+\.?\d+')


def format_key(key: Any) -> str:
    kind = kind_of(key)
    if kind == 'string':
        return key
    elif kind in ('number', 'function', 'table'):
        return _safe_str(key)
    else:
        return f'<{type_name_of(key)}> ({_safe_str(key)})'


def format_value(
        value: Any,
        *, show_table_value: bool=True,
        number_precision: int=-1,
        ) -> str:
    """
    Formats a value for display next to its key.
    
    Arguments:
    * value -- the value. For containers only the number of elements is used.
    * show_table_value -- whether containers show a summary of their size.
    * number_precision -- decimal places for numbers, or -1 for no rounding.
    """
    kind = kind_of(value)
    if kind == 'table':
        if show_table_value:
            return f'<Table> ({len(value)} Items)'
        else:
            return ''
    elif kind == 'function':
        return FUNCTION_PLACEHOLDER
    elif kind == 'string':
        return f'"{value}"'
    elif kind == 'Instance':
        return format_handle(value)
    elif kind == 'number':
        return format_number(value, number_precision)
    else:
        value_str = _safe_str(value)
        if number_precision >= 0 and _EMBEDDED_NUMBER_RE.search(value_str):
            # Round each number embedded in the value's text
            value_str = _EMBEDDED_NUMBER_RE.sub(
                lambda m: format_number(float(m.group(0)), number_precision),
                value_str)
            return f'<{type_name_of(value)}> ({value_str})'
        else:
            return value_str


def format_number(number: Any, precision: int) -> str:
    """
    Formats a number with the specified number of decimal places,
    dropping trailing zeros and any trailing decimal point.
    
    A negative precision formats the number without rounding.
    
    >>> format_number(3.14159, 2)
    '3.14'
    >>> format_number(3.0, 2)
    '3'
    """
    if precision < 0:
        return str(number)
    if isinstance(number, numbers.Integral):
        # Already whole. Avoid converting to float, which overflows for big ints.
        return str(number)
    try:
        number_str = f'{number:.{precision}f}'
    except (OverflowError, ValueError):
        return str(number)
    if '.' in number_str:
        number_str = number_str.rstrip('0').rstrip('.')
    return number_str


def format_handle(handle: ExternalHandle) -> str:
    path = handle.path
    if path is None:
        return f'<Instance: {handle.class_name}>'
    return f'<Instance: {handle.class_name}> ({path})'


def truncate_text(text: str, limit: int, policy: TextTruncate) -> str:
    """
    Shortens `text` to at most `limit` characters according to `policy`:
    * 'none' -- never shorten.
    * 'end' -- cut at the limit and append an ellipsis.
    * 'split_word' -- cut at the last word boundary before the limit
      and append an ellipsis. Cuts like 'end' if there is no such boundary.
    """
    if policy == 'none' or len(text) <= limit:
        return text
    if limit <= 1:
        return _ELLIPSIS[:limit]
    cut = text[:limit - 1]
    if policy == 'split_word':
        boundary = cut.rstrip().rfind(' ')
        if boundary > 0:
            cut = cut[:boundary]
    return cut.rstrip() + _ELLIPSIS


def _safe_str(value: object) -> str:
    try:
        return str(value)
    except Exception:
        # Malformed value. Display its type rather than failing the update.
        return f'<{type(value).__name__}>'
