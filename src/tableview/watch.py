"""
Watches a JSON data file and reports its contents whenever it changes.
"""

from __future__ import annotations

from collections.abc import Callable
import json
import os
from tableview.util import cli
from typing import Any


class DataFileWatcher:
    """
    Polls a JSON file for changes to its modification time.
    
    Files that cannot be read or parsed are reported as warnings,
    and the last good contents stay in effect.
    """
    
    def __init__(self,
            filepath: str,
            on_data: Callable[[dict[Any, Any]], None],
            ) -> None:
        self._filepath = filepath
        self._on_data = on_data
        self._last_mtime = None  # type: float | None
    
    @property
    def filepath(self) -> str:
        return self._filepath
    
    def load(self) -> dict[Any, Any]:
        """
        Reads the watched file.
        
        Raises:
        * OSError -- if the file could not be read.
        * ValueError -- if the file is not a JSON object.
        """
        self._last_mtime = os.stat(self._filepath).st_mtime
        with open(self._filepath, encoding='utf-8') as f:
            data = json.load(f)
        if not isinstance(data, dict):
            raise ValueError(
                f'Expected a JSON object in {self._filepath} '
                f'but found {type(data).__name__}')
        return data
    
    def poll(self) -> bool:
        """
        Reloads the watched file if it changed since it was last loaded,
        passing its contents to the `on_data` callback.
        
        Returns whether new data was passed to the callback.
        """
        try:
            mtime = os.stat(self._filepath).st_mtime
        except OSError as e:
            if self._last_mtime is not None:
                cli.print_warning(f'*** Unable to check {self._filepath}: {e}')
                # Warn only once until the file reappears
                self._last_mtime = None
            return False
        if mtime == self._last_mtime:
            return False
        
        try:
            data = self.load()
        except (OSError, ValueError) as e:
            # json.JSONDecodeError is a ValueError
            cli.print_warning(
                f'*** Unable to load {self._filepath}. Keeping previous data. {e}')
            return False
        self._on_data(data)
        return True
