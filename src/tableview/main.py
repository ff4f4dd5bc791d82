#!/usr/bin/env python
"""
Home of the main function, which opens a TableViewer window
that displays a JSON data file and follows changes to it.
"""

from __future__ import annotations

# NOTE: Avoid importing wx at the top-level of this module,
#       so that --help works even where wx is not installed.
import argparse
import sys
import threading
import traceback
from typing import NoReturn

_DEFAULT_WATCH_INTERVAL = 0.5  # seconds


def main() -> NoReturn:
    """
    Main function. Starts the program.
    """
    _main(sys.argv[1:])
    raise SystemExit()  # success


def _main(args: list[str]) -> None:
    # Print uncaught exceptions
    if True:
        # Print uncaught exceptions raised by Thread.run()
        def threading_excepthook(args) -> None:
            from tableview.util import cli
            
            err_file = sys.stderr
            print(cli.TERMINAL_FG_RED, end='', file=err_file)
            print('Exception in background thread:', file=err_file)
            traceback.print_exception(
                args.exc_type, args.exc_value, args.exc_traceback,
                file=err_file)
            print(cli.TERMINAL_RESET, end='', file=err_file)
            err_file.flush()
        threading.excepthook = threading_excepthook
        
        # Print uncaught exceptions raised in the main thread
        def sys_excepthook(exc_type, exc_value, exc_traceback) -> None:
            from tableview.util import cli
            
            err_file = sys.stderr
            print(cli.TERMINAL_FG_RED, end='', file=err_file)
            print('Exception in main thread:', file=err_file)
            traceback.print_exception(
                exc_type, exc_value, exc_traceback,
                file=err_file)
            print(cli.TERMINAL_RESET, end='', file=err_file)
            err_file.flush()
        sys.excepthook = sys_excepthook
    
    # 1. Enable terminal colors on Windows, by wrapping stdout and stderr
    # 2. Strip colorizing ANSI escape sequences when printing to a log file
    import colorama
    colorama.init()
    
    parsed_args = _parse_args(args)  # may raise SystemExit
    
    from tableview.options import InvalidOptionsError, load_options_file
    from tableview.util import cli
    from tableview.watch import DataFileWatcher
    
    # Load options
    options = {}  # type: dict
    if parsed_args.options is not None:
        try:
            options = load_options_file(parsed_args.options)
        except (OSError, ValueError) as e:
            cli.print_error(f'error: unable to load options: {e}')
            sys.exit(2)
    if parsed_args.title is not None:
        options['title'] = parsed_args.title
    
    # Load initial data
    watcher = DataFileWatcher(parsed_args.data_filepath, lambda data: frame.viewer.update(data))
    try:
        initial_data = watcher.load()
    except (OSError, ValueError) as e:
        cli.print_error(f'error: unable to load {parsed_args.data_filepath}: {e}')
        sys.exit(1)
    
    try:
        import wx
    except ImportError:
        cli.print_error('error: wxPython is required to open a window. Install tableview[gui].')
        sys.exit(1)
    from tableview.ui.frame import ViewerFrame
    from tableview.util.wx_timer import Timer
    from tableview.util.xthreading import set_foreground_thread
    
    set_foreground_thread(threading.current_thread())
    app = wx.App()
    try:
        frame = ViewerFrame(initial_data, options)
    except InvalidOptionsError as e:
        cli.print_error(f'error: {e}')
        sys.exit(2)
    frame.show()
    
    if parsed_args.watch_interval > 0:
        timer = Timer(watcher.poll, int(parsed_args.watch_interval * 1000))  # keep alive while running
    app.MainLoop()


def _parse_args(args: list[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog='tableview',
        description='Displays a live, nested key-value table from a JSON file.',
    )
    parser.add_argument(
        '--options',
        help='Path to a JSON file with viewer options.',
        type=str,
        default=None,
    )
    parser.add_argument(
        '--title',
        help='Title of the window. Overrides the title in --options.',
        type=str,
        default=None,
    )
    parser.add_argument(
        '--watch-interval',
        help=(
            f'Seconds between checks of the data file for changes '
            f'(default: {_DEFAULT_WATCH_INTERVAL}). 0 to disable.'
        ),
        type=float,
        default=_DEFAULT_WATCH_INTERVAL,
    )
    parser.add_argument(
        'data_filepath',
        help='Path to a JSON file containing an object to display.',
        type=str,
    )
    parsed_args = parser.parse_args(args)  # may raise SystemExit
    
    if parsed_args.watch_interval < 0:
        # NOTE: Error message format and exit code are similar to those used by argparse
        print('error: --watch-interval cannot be negative', file=sys.stderr)
        sys.exit(2)
    return parsed_args


if __name__ == '__main__':
    main()
