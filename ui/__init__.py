"""
UI module - Rich console output and clipboard export.
"""

from .display import ChangeSetDisplay, format_change
from .clipboard import copy_to_clipboard

__all__ = [
    "ChangeSetDisplay",
    "format_change",
    "copy_to_clipboard",
]
