"""
Mock components for testing prefdiff.

These mocks stand in for the `defaults` tool and the capture service so
the workflow can be exercised without a macOS preferences store.
"""

from .golden_data import (
    DOCK_BEFORE,
    DOCK_AFTER,
    FINDER,
    NEWAPP,
    GLOBAL_BEFORE,
    GLOBAL_AFTER,
    BEFORE_DOMAINS,
    AFTER_DOMAINS,
    to_plist,
)
from .mock_defaults import MockDefaultsRunner
from .mock_capture import MockSnapshotCapture, make_snapshot

__all__ = [
    # Mocks
    'MockDefaultsRunner',
    'MockSnapshotCapture',
    'make_snapshot',
    # Golden data
    'DOCK_BEFORE',
    'DOCK_AFTER',
    'FINDER',
    'NEWAPP',
    'GLOBAL_BEFORE',
    'GLOBAL_AFTER',
    'BEFORE_DOMAINS',
    'AFTER_DOMAINS',
    'to_plist',
]
