"""
Snapshot capture - reads preference domains through the `defaults` tool.
"""

import fnmatch
import subprocess
from concurrent.futures import ThreadPoolExecutor
from datetime import datetime, timezone
from typing import Callable, Dict, List, Optional, Set, Tuple

from ..config import CaptureConfig
from ..logging_utils import get_logger
from ..protocol.errors import CaptureError, PlistParseError
from ..protocol.values import Value
from .models import Snapshot
from .parser import parse_domain_list, parse_domain_plist

GLOBAL_DOMAIN = "NSGlobalDomain"

log = get_logger("capture")

# Signature of subprocess.run, injectable for tests
Runner = Callable[..., subprocess.CompletedProcess]


class SnapshotCapture:
    """Captures the current preferences state."""

    def __init__(
        self,
        config: Optional[CaptureConfig] = None,
        runner: Optional[Runner] = None,
    ):
        """
        Initialize snapshot capture.

        Args:
            config: Capture configuration (executable, workers, filters)
            runner: subprocess.run-compatible callable
        """
        self.config = config or CaptureConfig()
        self._run = runner or subprocess.run

    def capture(
        self,
        progress: Optional[Callable[[str], None]] = None,
    ) -> Snapshot:
        """
        Capture every selected domain.

        Domains are exported in parallel; a domain that cannot be exported
        or parsed is recorded as unreadable rather than dropped.

        Args:
            progress: Called with each domain name once it has been read

        Returns:
            Snapshot with captured values

        Raises:
            CaptureError: the domain list itself could not be read
        """
        domains = self.select_domains(self.list_domains())
        captured_at = datetime.now(timezone.utc)
        log.info("Capturing {} domains with {} workers", len(domains), self.config.max_workers)

        values: Dict[str, Dict[str, Value]] = {}
        unreadable: Set[str] = set()

        with ThreadPoolExecutor(max_workers=self.config.max_workers) as pool:
            for domain, result in pool.map(self._read_domain, domains):
                if result is None:
                    unreadable.add(domain)
                else:
                    values[domain] = result
                if progress:
                    progress(domain)

        snapshot = Snapshot.from_domains(values, unreadable=unreadable, captured_at=captured_at)
        log.info("Captured {}", snapshot.summary())
        return snapshot

    def list_domains(self) -> List[str]:
        """
        List all domains known to the defaults tool.

        Raises:
            CaptureError: the command failed or timed out
        """
        result = self._execute(["domains"])
        domains = parse_domain_list(result.stdout.decode("utf-8", errors="replace"))
        if self.config.include_global_domain and GLOBAL_DOMAIN not in domains:
            domains.append(GLOBAL_DOMAIN)
        return domains

    def select_domains(self, domains: List[str]) -> List[str]:
        """Apply include/exclude patterns; result is sorted and de-duplicated."""
        selected = set()
        for domain in domains:
            if self.config.domains and not _matches(domain, self.config.domains):
                continue
            if _matches(domain, self.config.exclude):
                continue
            selected.add(domain)
        return sorted(selected)

    def export_domain(self, domain: str) -> Dict[str, Value]:
        """
        Read one domain.

        Raises:
            CaptureError: export failed
            PlistParseError: export output is not a valid plist
        """
        result = self._execute(["export", domain, "-"])
        return parse_domain_plist(domain, result.stdout)

    def _read_domain(self, domain: str) -> Tuple[str, Optional[Dict[str, Value]]]:
        try:
            return domain, self.export_domain(domain)
        except (CaptureError, PlistParseError) as e:
            log.warning("Domain {} unreadable: {}", domain, e)
            return domain, None

    def _execute(self, args: List[str]) -> subprocess.CompletedProcess:
        cmd = [self.config.executable] + args
        try:
            result = self._run(
                cmd,
                capture_output=True,
                timeout=self.config.timeout,
            )
        except subprocess.TimeoutExpired as e:
            raise CaptureError(f"{' '.join(cmd)} timed out after {self.config.timeout}s") from e
        except OSError as e:
            raise CaptureError(f"Cannot run {self.config.executable}: {e}") from e

        if result.returncode != 0:
            stderr = result.stderr.decode("utf-8", errors="replace") if result.stderr else None
            raise CaptureError(f"{' '.join(cmd)} exited with {result.returncode}", stderr)
        return result


def _matches(domain: str, patterns: List[str]) -> bool:
    return any(fnmatch.fnmatchcase(domain, pattern) for pattern in patterns)
