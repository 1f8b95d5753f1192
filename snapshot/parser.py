"""
Plist parsing - turns `defaults export <domain> -` output into Values.
"""

import plistlib
from xml.parsers.expat import ExpatError
from typing import Dict, List

from ..protocol.errors import PlistParseError
from ..protocol.values import Value, to_value


def parse_domain_plist(domain: str, data: bytes) -> Dict[str, Value]:
    """
    Parse an exported domain (XML or binary plist) into {key: Value}.

    A root that is not a dictionary yields no keys.

    Raises:
        PlistParseError: data is not a valid property list
    """
    if not data.strip():
        return {}

    try:
        root = plistlib.loads(data)
    except (plistlib.InvalidFileException, ExpatError, ValueError) as e:
        raise PlistParseError(f"Invalid plist for domain {domain!r}: {e}") from e

    if not isinstance(root, dict):
        return {}

    try:
        return {str(key): to_value(value) for key, value in root.items()}
    except (TypeError, ValueError) as e:
        raise PlistParseError(f"Unsupported value in domain {domain!r}: {e}") from e


def parse_domain_list(output: str) -> List[str]:
    """Parse `defaults domains` output (comma separated) into a list."""
    return [d.strip() for d in output.split(",") if d.strip()]
