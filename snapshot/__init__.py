"""
Snapshot system for prefdiff.

A Snapshot is the full preferences state (domain -> key -> Value) at one
moment, plus the domains that could not be read. Snapshots are immutable
and live only for the duration of a run.

- build_snapshot: assemble a Snapshot from (domain, key, value) triples
- SnapshotCapture: read the live store through the `defaults` tool
- parse_domain_plist: decode `defaults export` output
"""

from .models import Snapshot, SnapshotEntry, build_snapshot
from .parser import parse_domain_plist, parse_domain_list
from .capture import SnapshotCapture, GLOBAL_DOMAIN

__all__ = [
    'Snapshot',
    'SnapshotEntry',
    'build_snapshot',
    'parse_domain_plist',
    'parse_domain_list',
    'SnapshotCapture',
    'GLOBAL_DOMAIN',
]
