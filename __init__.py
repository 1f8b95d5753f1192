"""
prefdiff - capture preference changes as replayable defaults commands.

Take a "before" snapshot of the preferences store, change settings through
the system UI, take an "after" snapshot, and get one `defaults write` /
`defaults delete` command per observed change.

Usage:
    # As a module
    python -m prefdiff --script > settings.sh

    # Programmatically
    from prefdiff import build_snapshot, diff, generate, Integer

    before = build_snapshot([("com.example.dock", "tilesize", Integer(36))])
    after = build_snapshot([("com.example.dock", "tilesize", Integer(48))])
    for command in generate(diff(before, after)):
        print(command.text)
"""

__version__ = "0.3.0"

# Core exports
from .protocol.values import (
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
)
from .protocol.changes import (
    Added,
    Removed,
    Modified,
    DomainChange,
    DomainChangeKind,
    ChangeSet,
    UnreadableDomainWarning,
)
from .protocol.errors import (
    PrefDiffError,
    DuplicateKeyError,
    UnsupportedShapeError,
    CaptureError,
)
from .snapshot.models import Snapshot, build_snapshot
from .differ.engine import diff
from .command.models import CommandKind, CommandLine
from .command.generator import generate

from loguru import logger

# Library use stays silent until configure_logging() is called
logger.disable("prefdiff")

__all__ = [
    # Version
    "__version__",
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
    # Changes
    "Added",
    "Removed",
    "Modified",
    "DomainChange",
    "DomainChangeKind",
    "ChangeSet",
    "UnreadableDomainWarning",
    # Errors
    "PrefDiffError",
    "DuplicateKeyError",
    "UnsupportedShapeError",
    "CaptureError",
    # Core
    "Snapshot",
    "build_snapshot",
    "diff",
    "CommandKind",
    "CommandLine",
    "generate",
]
