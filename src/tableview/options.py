"""
Options that customize a TableViewer.

Callers supply any subset of the options. The supplied options are validated
and then deep-merged over DEFAULT_VIEWER_OPTIONS exactly once, when the
viewer is created.
"""

from __future__ import annotations

from collections.abc import Mapping
import json
from tableview.diff import apply_delta, deep_clone
from tableview.formatting import TEXT_TRUNCATE_POLICIES, TextTruncate
from tableview.values import is_container, kind_of
from typing import Any, cast, TypedDict

Size = tuple[int, int]
Color = tuple[int, int, int]


class TypeOrdering(TypedDict):
    """Layout order offset for each kind of value. Kept in the thousands."""
    boolean: int
    number: int
    string: int
    Instance: int
    Other: int
    function: int
    table: int


SyntaxHighlighting = TypedDict('SyntaxHighlighting', {
    'Default': Color,  # color of keys
    'boolean': Color,
    'number': Color,
    'string': Color,
    'table': Color,
    'function': Color,
    'Instance': Color,
    'Other': Color,
})


class Settings(TypedDict):
    starting_size: Size
    min_size: Size
    max_size: Size
    # Whether tables are expanded when first displayed
    expanded: bool
    # Decimal places to show for numbers. -1 for no rounding.
    number_precision: int
    # Font face name for keys and values. Empty for the platform default.
    font: str
    text_truncate: TextTruncate
    type_ordering: TypeOrdering
    syntax_highlighting: SyntaxHighlighting


class ViewerOptions(TypedDict):
    title: str
    # Whether to prefix the title with a wrench glyph
    decorate_title: bool
    # Whether tables show a summary of their number of items
    show_table_value: bool
    # Whether filters apply on every keystroke rather than when editing ends
    filter_on_type: bool
    # Case sensitivity of key filters and type exclusions
    case_sensitive: bool
    # Whether bigger tables are ordered after smaller tables
    order_tables_by_size: bool
    settings: Settings


DEFAULT_SETTINGS = Settings(
    starting_size=(300, 400),
    min_size=(200, 44),
    max_size=(8192, 8192),
    expanded=False,
    number_precision=-1,
    font='',
    text_truncate='split_word',
    type_ordering=TypeOrdering(
        # These are in the thousands to leave room for the position of
        # an entry among its siblings and the size of tables
        boolean=1000,
        number=2000,
        string=3000,
        Instance=4000,
        Other=5000,
        function=6000,
        table=7000,
    ),
    syntax_highlighting=SyntaxHighlighting({
        'Default': (200, 200, 200),
        'boolean': (86, 156, 214),
        'number': (181, 206, 168),
        'string': (206, 145, 120),
        'table': (224, 167, 86),
        'function': (197, 134, 192),
        'Instance': (78, 201, 176),
        'Other': (86, 156, 214),
    }),
)

DEFAULT_VIEWER_OPTIONS = ViewerOptions(
    title='Table Viewer',
    decorate_title=True,
    show_table_value=True,
    filter_on_type=True,
    case_sensitive=False,
    order_tables_by_size=True,
    settings=DEFAULT_SETTINGS,
)

_SIZE_OPTIONS = frozenset(['starting_size', 'min_size', 'max_size'])


class InvalidOptionsError(ValueError):
    """Raised when options passed to a TableViewer are not valid."""


# ------------------------------------------------------------------------------
# Resolve

def resolve_options(options: Mapping[str, Any] | None=None) -> ViewerOptions:
    """
    Returns a complete set of options, with defaults filled in
    for any options not specified by the caller.
    
    Raises:
    * InvalidOptionsError -- if an option is unrecognized or has an invalid value.
    """
    resolved = deep_clone(DEFAULT_VIEWER_OPTIONS)
    if options is not None:
        normalized = _validated(options, DEFAULT_VIEWER_OPTIONS, path='')
        apply_delta(resolved, normalized)
    _validate_sizes(resolved['settings'])
    return cast(ViewerOptions, resolved)


def load_options_file(filepath: str) -> ViewerOptions:
    """
    Loads options from a JSON file and resolves them.
    
    Raises:
    * OSError -- if the file could not be read.
    * json.JSONDecodeError -- if the file is not valid JSON.
    * InvalidOptionsError -- if the file contains invalid options.
    """
    with open(filepath, 'r', encoding='utf-8') as f:
        options = json.load(f)
    return resolve_options(options)


def _validated(options: Any, defaults: Mapping[str, Any], *, path: str) -> dict[str, Any]:
    """
    Returns a copy of `options`, with sequences normalized to tuples.
    
    Raises:
    * InvalidOptionsError
    """
    if not isinstance(options, Mapping):
        raise InvalidOptionsError(
            f'Expected {path or "options"} to be a mapping but got {options!r}')
    result = {}
    for (key, value) in options.items():
        full_key = f'{path}{key}'
        if key not in defaults:
            raise InvalidOptionsError(f'Unrecognized option: {full_key}')
        default = defaults[key]
        if is_container(default):
            result[key] = _validated(value, default, path=f'{full_key}.')
        elif key in _SIZE_OPTIONS:
            result[key] = _validated_size(value, full_key)
        elif path == 'settings.syntax_highlighting.':
            result[key] = _validated_color(value, full_key)
        elif key == 'text_truncate':
            if value not in TEXT_TRUNCATE_POLICIES:
                raise InvalidOptionsError(
                    f'Expected {full_key} to be one of {TEXT_TRUNCATE_POLICIES!r} '
                    f'but got {value!r}')
            result[key] = value
        elif isinstance(default, int) and not isinstance(default, bool):
            # Precision and ordering offsets must be whole numbers
            if not isinstance(value, int) or isinstance(value, bool):
                raise InvalidOptionsError(
                    f'Expected {full_key} to be an integer but got {value!r}')
            result[key] = value
        else:
            if kind_of(value) != kind_of(default):
                raise InvalidOptionsError(
                    f'Expected {full_key} to be a {kind_of(default)} but got {value!r}')
            result[key] = value
    return result


def _validated_size(value: Any, full_key: str) -> Size:
    if (not isinstance(value, (list, tuple)) or
            len(value) != 2 or
            not all(kind_of(c) == 'number' and c > 0 for c in value)):
        raise InvalidOptionsError(
            f'Expected {full_key} to be a (width, height) pair of positive numbers '
            f'but got {value!r}')
    return (int(value[0]), int(value[1]))


def _validated_color(value: Any, full_key: str) -> Color:
    if (not isinstance(value, (list, tuple)) or
            len(value) != 3 or
            not all(isinstance(c, int) and not isinstance(c, bool) and 0 <= c <= 255 for c in value)):
        raise InvalidOptionsError(
            f'Expected {full_key} to be an (r, g, b) triple of integers in 0..255 '
            f'but got {value!r}')
    return (value[0], value[1], value[2])


def _validate_sizes(settings: Settings) -> None:
    (min_size, starting_size, max_size) = (
        settings['min_size'], settings['starting_size'], settings['max_size'])
    for axis in (0, 1):
        if not (min_size[axis] <= starting_size[axis] <= max_size[axis]):
            raise InvalidOptionsError(
                f'Expected min_size <= starting_size <= max_size but got '
                f'{min_size!r}, {starting_size!r}, {max_size!r}')
