"""
Colorized terminal output.

All diagnostics of the viewer (warnings about best-effort cleanup,
unreadable data files, crashes captured in wx callbacks) are written
through these functions to stderr by default.
"""

from io import TextIOBase
import os
import sys

# ------------------------------------------------------------------------------
# Terminal Colors

_USE_COLORS = os.environ.get('TABLEVIEW_NO_COLOR', 'False') != 'True'

# ANSI color codes
TERMINAL_FG_RED =           '\033[0;31m'
TERMINAL_FG_YELLOW =        '\033[0;33m'
TERMINAL_RESET =            '\033[0m'


def print_error(message: str, file: TextIOBase | None=None) -> None:
    _print(colorize(TERMINAL_FG_RED, message), file)


def print_warning(message: str, file: TextIOBase | None=None) -> None:
    _print(colorize(TERMINAL_FG_YELLOW, message), file)


def colorize(color_code: str, str_value: str) -> str:
    return (color_code + str_value + TERMINAL_RESET) if _USE_COLORS else str_value


def _print(message: str, file: TextIOBase | None) -> None:
    # NOTE: Resolve sys.stderr at call time so that tests can capture it
    print(message, file=(file if file is not None else sys.stderr))
