"""
Error taxonomy for prefdiff.

DuplicateKeyError: capture produced the same (domain, key) twice (fatal)
UnsupportedShapeError: a value cannot be written as one flat command
CaptureError: the defaults tool could not list or export domains
PlistParseError: exported domain data is not a valid property list
ClipboardError: clipboard export failed

Unreadable domains are not errors; they travel as data on the Snapshot
and as warnings on the ChangeSet.
"""

from typing import Optional


class PrefDiffError(Exception):
    """Base class for all prefdiff errors."""
    pass


class DuplicateKeyError(PrefDiffError):
    """Capture contract violated: (domain, key) seen more than once."""

    def __init__(self, domain: str, key: str):
        self.domain = domain
        self.key = key
        super().__init__(f"Duplicate key {key!r} in domain {domain!r}")


class UnsupportedShapeError(PrefDiffError):
    """Value cannot be expressed faithfully as flat type-tagged arguments."""

    def __init__(self, reason: str, domain: str = "", key: str = ""):
        self.reason = reason
        self.domain = domain
        self.key = key
        where = f"{domain} {key}: " if domain or key else ""
        super().__init__(f"{where}{reason}")


class CaptureError(PrefDiffError):
    """The defaults tool failed."""

    def __init__(self, message: str, stderr: Optional[str] = None):
        self.stderr = stderr
        if stderr:
            message = f"{message}: {stderr.strip()}"
        super().__init__(message)


class ClipboardError(PrefDiffError):
    """Copying to the clipboard failed."""
    pass


class InvalidTransition(PrefDiffError, ValueError):
    """Capture workflow step requested out of order."""
    pass


class PlistParseError(PrefDiffError, ValueError):
    """Exported plist data could not be decoded."""
    pass
