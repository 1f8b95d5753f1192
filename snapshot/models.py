"""
Data models for preference snapshots.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from types import MappingProxyType
from typing import Dict, FrozenSet, Iterable, List, Mapping, Optional, Tuple

from ..protocol.errors import DuplicateKeyError
from ..protocol.values import Value

# (domain, key, value) as produced by capture
SnapshotEntry = Tuple[str, str, Value]


@dataclass(frozen=True)
class Snapshot:
    """
    Preferences state at a point in time.

    domains maps domain -> (key -> Value). A domain that was read but has
    no keys is kept with an empty mapping, so losing every key diffs as a
    modified domain rather than a removed one. unreadable holds domains
    that capture attempted but could not read; they are excluded from
    diffs, never treated as empty.
    """

    domains: Mapping[str, Mapping[str, Value]] = field(default_factory=dict)
    unreadable: FrozenSet[str] = frozenset()
    captured_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def __post_init__(self):
        frozen = {
            domain: MappingProxyType(dict(values))
            for domain, values in self.domains.items()
        }
        object.__setattr__(self, "domains", MappingProxyType(frozen))
        object.__setattr__(self, "unreadable", frozenset(self.unreadable))

    @classmethod
    def from_domains(
        cls,
        domains: Mapping[str, Mapping[str, Value]],
        unreadable: Iterable[str] = (),
        captured_at: Optional[datetime] = None,
    ) -> 'Snapshot':
        """Create from an already-grouped {domain: {key: Value}} mapping."""
        return cls(
            domains=domains,
            unreadable=frozenset(unreadable),
            captured_at=captured_at or datetime.now(timezone.utc),
        )

    @property
    def domain_count(self) -> int:
        return len(self.domains)

    @property
    def key_count(self) -> int:
        return sum(len(values) for values in self.domains.values())

    def keys(self, domain: str) -> List[str]:
        """Sorted keys of a domain (empty if absent)."""
        return sorted(self.domains.get(domain, {}))

    def get(self, domain: str, key: str) -> Optional[Value]:
        return self.domains.get(domain, {}).get(key)

    def is_readable(self, domain: str) -> bool:
        return domain not in self.unreadable

    def summary(self) -> str:
        text = f"{self.domain_count} domains, {self.key_count} keys"
        if self.unreadable:
            text += f", {len(self.unreadable)} unreadable"
        return text


def build_snapshot(
    entries: Iterable[SnapshotEntry],
    unreadable_domains: Iterable[str] = (),
    captured_at: Optional[datetime] = None,
) -> Snapshot:
    """
    Build a Snapshot from (domain, key, value) triples.

    Raises:
        DuplicateKeyError: the same (domain, key) appears twice. The capture
            source guarantees uniqueness, so this is a programming error.
    """
    domains: Dict[str, Dict[str, Value]] = {}
    for domain, key, value in entries:
        values = domains.setdefault(domain, {})
        if key in values:
            raise DuplicateKeyError(domain, key)
        values[key] = value

    return Snapshot.from_domains(
        domains,
        unreadable=unreadable_domains,
        captured_at=captured_at,
    )
