"""
Diff engine - compares two preference snapshots.
"""

from .engine import diff, diff_keys

__all__ = [
    'diff',
    'diff_keys',
]
