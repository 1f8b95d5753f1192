"""
Change protocol - Diff Engine → Command Generator.

KeyChange: Added / Removed / Modified for a single key
DomainChange: all key changes for one domain, tagged ADDED / REMOVED / MODIFIED
ChangeSet: ordered DomainChanges plus unreadable-domain warnings
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Iterator, List, Tuple, Union

from .values import Value, to_json


class ChangeKind(str, Enum):
    """What happened to a key."""
    ADDED = "ADDED"
    REMOVED = "REMOVED"
    MODIFIED = "MODIFIED"


class DomainChangeKind(str, Enum):
    """What happened to a domain as a whole."""
    ADDED = "ADDED"        # present only in the after snapshot
    REMOVED = "REMOVED"    # present only in the before snapshot
    MODIFIED = "MODIFIED"  # present in both, at least one key differs


class SnapshotSide(str, Enum):
    """Which snapshot(s) could not read a domain."""
    BEFORE = "before"
    AFTER = "after"
    BOTH = "both"


@dataclass(frozen=True)
class Added:
    key: str
    new_value: Value
    kind = ChangeKind.ADDED

    def to_dict(self) -> Dict[str, Any]:
        return {"kind": self.kind.value, "key": self.key, "new": to_json(self.new_value)}


@dataclass(frozen=True)
class Removed:
    key: str
    old_value: Value
    kind = ChangeKind.REMOVED

    def to_dict(self) -> Dict[str, Any]:
        return {"kind": self.kind.value, "key": self.key, "old": to_json(self.old_value)}


@dataclass(frozen=True)
class Modified:
    key: str
    old_value: Value
    new_value: Value
    kind = ChangeKind.MODIFIED

    def to_dict(self) -> Dict[str, Any]:
        return {
            "kind": self.kind.value,
            "key": self.key,
            "old": to_json(self.old_value),
            "new": to_json(self.new_value),
        }


KeyChange = Union[Added, Removed, Modified]


@dataclass(frozen=True)
class DomainChange:
    """All key changes for one domain, sorted by key."""
    domain: str
    kind: DomainChangeKind
    changes: Tuple[KeyChange, ...] = ()

    def __post_init__(self):
        object.__setattr__(self, "changes", tuple(self.changes))
        if self.kind == DomainChangeKind.MODIFIED and not self.changes:
            raise ValueError(f"Modified domain {self.domain!r} has no key changes")

    def __iter__(self) -> Iterator[KeyChange]:
        return iter(self.changes)

    def __len__(self) -> int:
        return len(self.changes)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "domain": self.domain,
            "kind": self.kind.value,
            "changes": [c.to_dict() for c in self.changes],
        }


@dataclass(frozen=True)
class UnreadableDomainWarning:
    """A domain that could not be compared because a capture failed to read it."""
    domain: str
    side: SnapshotSide

    @property
    def message(self) -> str:
        if self.side == SnapshotSide.BOTH:
            return f"{self.domain}: unreadable in both snapshots, not compared"
        return f"{self.domain}: unreadable in {self.side.value} snapshot, not compared"

    def to_dict(self) -> Dict[str, Any]:
        return {"domain": self.domain, "side": self.side.value}


@dataclass(frozen=True)
class ChangeSet:
    """
    Ordered result of diffing two snapshots.

    domain_changes are sorted by domain; warnings list the domains that
    were skipped because they could not be read.
    """
    domain_changes: Tuple[DomainChange, ...] = ()
    warnings: Tuple[UnreadableDomainWarning, ...] = ()

    def __post_init__(self):
        object.__setattr__(self, "domain_changes", tuple(self.domain_changes))
        object.__setattr__(self, "warnings", tuple(self.warnings))

    def __iter__(self) -> Iterator[DomainChange]:
        return iter(self.domain_changes)

    def __len__(self) -> int:
        return len(self.domain_changes)

    @property
    def is_empty(self) -> bool:
        """No changes and no warnings."""
        return not self.domain_changes and not self.warnings

    @property
    def total_changes(self) -> int:
        return sum(len(dc.changes) for dc in self.domain_changes)

    @property
    def domains(self) -> List[str]:
        return [dc.domain for dc in self.domain_changes]

    @property
    def unreadable_domains(self) -> List[str]:
        return [w.domain for w in self.warnings]

    def iter_changes(self) -> Iterator[Tuple[DomainChange, KeyChange]]:
        """Yield (DomainChange, KeyChange) pairs in ChangeSet order."""
        for domain_change in self.domain_changes:
            for change in domain_change.changes:
                yield domain_change, change

    def to_dict(self) -> Dict[str, Any]:
        return {
            "total_changes": self.total_changes,
            "domains": [dc.to_dict() for dc in self.domain_changes],
            "warnings": [w.to_dict() for w in self.warnings],
        }
