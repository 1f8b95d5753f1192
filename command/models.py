"""
Command models - generated `defaults` command lines.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, List, Optional

from ..protocol.changes import DomainChange, KeyChange


class CommandKind(str, Enum):
    """Kind of generated command."""
    WRITE = "WRITE"
    DELETE = "DELETE"


@dataclass(frozen=True)
class CommandLine:
    """
    A single replayable command.

    domain_change and change point back at the diff entry this command was
    generated from. degraded is set when the value could not be expressed
    faithfully with flat type-tagged arguments; note says why.
    """
    kind: CommandKind
    domain: str
    key: str
    text: str
    domain_change: DomainChange
    change: KeyChange
    degraded: bool = False
    note: Optional[str] = None

    def __str__(self) -> str:
        return self.text

    def as_script_lines(self) -> List[str]:
        """Command text, preceded by a comment when degraded."""
        if self.degraded and self.note:
            return [f"# WARNING: {self.note}", self.text]
        return [self.text]

    def to_dict(self) -> Dict[str, Any]:
        result = {
            "kind": self.kind.value,
            "domain": self.domain,
            "key": self.key,
            "command": self.text,
            "degraded": self.degraded,
        }
        if self.note:
            result["note"] = self.note
        return result


def render_script(commands: List[CommandLine], header: bool = True) -> str:
    """Join commands into a shell script body."""
    lines: List[str] = []
    if header:
        lines.append("#!/bin/sh")
        lines.append(f"# {len(commands)} preference change(s)")
    for command in commands:
        lines.extend(command.as_script_lines())
    return "\n".join(lines) + "\n"
