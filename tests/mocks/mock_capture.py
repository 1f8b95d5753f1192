"""
Mock capture service returning prepared snapshots in order.
"""

from typing import Any, Callable, Dict, Iterable, List, Optional, Union

from prefdiff.protocol.errors import CaptureError
from prefdiff.protocol.values import value_map
from prefdiff.snapshot.models import Snapshot


class MockSnapshotCapture:
    """Returns queued snapshots; a queued CaptureError is raised instead."""

    def __init__(self, results: List[Union[Snapshot, CaptureError]]):
        self.results = list(results)
        self.capture_count = 0

    def capture(self, progress: Optional[Callable[[str], None]] = None) -> Snapshot:
        self.capture_count += 1
        result = self.results.pop(0)
        if isinstance(result, CaptureError):
            raise result
        if progress:
            for domain in sorted(result.domains):
                progress(domain)
        return result


def make_snapshot(domains: Dict[str, Dict[str, Any]], unreadable: Iterable[str] = ()) -> Snapshot:
    """Snapshot from {domain: {key: plain python value}}."""
    return Snapshot.from_domains(
        {domain: value_map(values) for domain, values in domains.items()},
        unreadable=unreadable,
    )
