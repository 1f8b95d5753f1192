"""
Protocol definitions for prefdiff.

- values: typed preference Values (Boolean, Integer, Float, String,
  Data, Date, Array, Dictionary)
- changes: KeyChange / DomainChange / ChangeSet (Diff Engine → Command Generator)
- errors: error taxonomy
"""

from .values import (
    Value,
    Boolean,
    Integer,
    Float,
    String,
    Data,
    Date,
    Array,
    Dictionary,
    to_value,
    to_python,
    to_json,
    describe,
)
from .changes import (
    ChangeKind,
    DomainChangeKind,
    SnapshotSide,
    Added,
    Removed,
    Modified,
    KeyChange,
    DomainChange,
    ChangeSet,
    UnreadableDomainWarning,
)
from .errors import (
    PrefDiffError,
    DuplicateKeyError,
    UnsupportedShapeError,
    CaptureError,
    PlistParseError,
    ClipboardError,
    InvalidTransition,
)

__all__ = [
    # Values
    "Value",
    "Boolean",
    "Integer",
    "Float",
    "String",
    "Data",
    "Date",
    "Array",
    "Dictionary",
    "to_value",
    "to_python",
    "to_json",
    "describe",
    # Changes
    "ChangeKind",
    "DomainChangeKind",
    "SnapshotSide",
    "Added",
    "Removed",
    "Modified",
    "KeyChange",
    "DomainChange",
    "ChangeSet",
    "UnreadableDomainWarning",
    # Errors
    "PrefDiffError",
    "DuplicateKeyError",
    "UnsupportedShapeError",
    "CaptureError",
    "PlistParseError",
    "ClipboardError",
    "InvalidTransition",
]
