"""
Golden test data - realistic preference domains as `defaults export` sees them.

Each domain is a plain dict in plistlib form; to_plist() renders it as
the XML that `defaults export <domain> -` prints.
"""

import plistlib
from datetime import datetime
from typing import Any, Dict

DOCK_BEFORE: Dict[str, Any] = {
    "tilesize": 36,
    "autohide": False,
    "orientation": "bottom",
    "legacyFlag": "x",
    "magnification": 0.5,
    "persistent-apps": [
        {"tile-data": {"file-label": "Safari"}, "tile-type": "file-tile"},
    ],
}

DOCK_AFTER: Dict[str, Any] = {
    "tilesize": 48,
    "autohide": True,
    "orientation": "bottom",
    "magnification": 0.5,
    "persistent-apps": [
        {"tile-data": {"file-label": "Safari"}, "tile-type": "file-tile"},
        {"tile-data": {"file-label": "Mail"}, "tile-type": "file-tile"},
    ],
}

FINDER: Dict[str, Any] = {
    "ShowPathbar": True,
    "FXPreferredViewStyle": "Nlsv",
    "LastUpdate": datetime(2024, 3, 1, 9, 30, 0),
}

NEWAPP: Dict[str, Any] = {
    "launchCount": 1,
    "token": b"\x00\xffab",
}

GLOBAL_BEFORE: Dict[str, Any] = {
    "AppleInterfaceStyle": "Dark",
    "AppleLanguages": ["en-US", "ja-JP"],
}

GLOBAL_AFTER: Dict[str, Any] = {
    "AppleLanguages": ["en-US", "ja-JP"],
}

BEFORE_DOMAINS = {
    "com.example.dock": DOCK_BEFORE,
    "com.example.finder": FINDER,
    "NSGlobalDomain": GLOBAL_BEFORE,
}

AFTER_DOMAINS = {
    "com.example.dock": DOCK_AFTER,
    "com.example.finder": FINDER,
    "com.example.newapp": NEWAPP,
    "NSGlobalDomain": GLOBAL_AFTER,
}


def to_plist(values: Dict[str, Any]) -> bytes:
    """Render a domain as XML plist bytes."""
    return plistlib.dumps(values, fmt=plistlib.FMT_XML)
