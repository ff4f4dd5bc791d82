"""
TableViewer: displays a live, nested key-value table and keeps the display
synchronized with the table as it changes.
"""

__version__ = '1.0.0'
