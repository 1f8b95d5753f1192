"""
Diff Engine - computes the minimal ChangeSet between two snapshots.

Ordering comes only from explicit sorts (domains, then keys), never from
the order in which capture produced entries, so parallel capture is safe.
"""

from typing import List, Mapping, Optional

from ..logging_utils import get_logger
from ..protocol.changes import (
    Added,
    ChangeSet,
    DomainChange,
    DomainChangeKind,
    KeyChange,
    Modified,
    Removed,
    SnapshotSide,
    UnreadableDomainWarning,
)
from ..protocol.values import Value
from ..snapshot.models import Snapshot

log = get_logger("diff")


def diff(before: Snapshot, after: Snapshot) -> ChangeSet:
    """
    Compare two snapshots.

    Pure and total: neither snapshot is modified and any two snapshots can
    be compared. Domains unreadable in either snapshot are reported as
    warnings instead of changes.
    """
    domain_changes: List[DomainChange] = []
    warnings: List[UnreadableDomainWarning] = []

    all_domains = (
        set(before.domains) | set(after.domains) | before.unreadable | after.unreadable
    )

    for domain in sorted(all_domains):
        side = _unreadable_side(domain, before, after)
        if side is not None:
            warnings.append(UnreadableDomainWarning(domain=domain, side=side))
            continue

        old = before.domains.get(domain)
        new = after.domains.get(domain)

        # A domain present on one side with no keys has nothing to report
        if old is None:
            if new:
                domain_changes.append(DomainChange(
                    domain=domain,
                    kind=DomainChangeKind.ADDED,
                    changes=tuple(Added(key, new[key]) for key in sorted(new)),
                ))
        elif new is None:
            if old:
                domain_changes.append(DomainChange(
                    domain=domain,
                    kind=DomainChangeKind.REMOVED,
                    changes=tuple(Removed(key, old[key]) for key in sorted(old)),
                ))
        else:
            changes = diff_keys(old, new)
            if changes:
                domain_changes.append(DomainChange(
                    domain=domain,
                    kind=DomainChangeKind.MODIFIED,
                    changes=tuple(changes),
                ))

    change_set = ChangeSet(domain_changes=tuple(domain_changes), warnings=tuple(warnings))
    log.debug(
        "Compared {} domains: {} changed, {} changes, {} unreadable",
        len(all_domains),
        len(change_set),
        change_set.total_changes,
        len(warnings),
    )
    return change_set


def diff_keys(before: Mapping[str, Value], after: Mapping[str, Value]) -> List[KeyChange]:
    """Key-level changes for one domain, sorted by key. Equal values are omitted."""
    changes: List[KeyChange] = []

    for key in sorted(set(before) | set(after)):
        if key not in before:
            changes.append(Added(key, after[key]))
        elif key not in after:
            changes.append(Removed(key, before[key]))
        elif before[key] != after[key]:
            changes.append(Modified(key, before[key], after[key]))

    return changes


def _unreadable_side(domain: str, before: Snapshot, after: Snapshot) -> Optional[SnapshotSide]:
    in_before = domain in before.unreadable
    in_after = domain in after.unreadable
    if in_before and in_after:
        return SnapshotSide.BOTH
    if in_before:
        return SnapshotSide.BEFORE
    if in_after:
        return SnapshotSide.AFTER
    return None
