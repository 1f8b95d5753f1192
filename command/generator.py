"""
Command Generator - renders a ChangeSet as `defaults` command lines.

Added / Modified  -> defaults write <domain> <key> <type-tagged value>
Removed           -> defaults delete <domain> <key>

Every argument goes through shlex.quote, so each line is safe to paste
into a POSIX shell.

Values that flat type-tagged arguments cannot express (a container nested
inside a container, non-finite floats) are still written, best effort, and
the CommandLine is marked degraded with a note. Nested containers are
passed as one XML property-list literal, which `defaults write` parses
as a plist value. No change is ever dropped.
"""

import base64
import math
import shlex
from dataclasses import dataclass, field
from decimal import Decimal
from typing import List
from xml.sax.saxutils import escape

from ..logging_utils import get_logger
from ..protocol.changes import ChangeSet, DomainChange, KeyChange, Removed
from ..protocol.errors import UnsupportedShapeError
from ..protocol.values import (
    Array,
    Boolean,
    Data,
    Date,
    Dictionary,
    Float,
    Integer,
    String,
    Value,
    format_date,
    nesting_depth,
)
from .models import CommandKind, CommandLine

DEFAULT_EXECUTABLE = "defaults"

log = get_logger("generator")


@dataclass
class EncodedValue:
    """Type-tagged arguments for one value, plus any fidelity problems."""
    args: List[str] = field(default_factory=list)
    problems: List[str] = field(default_factory=list)

    @property
    def degraded(self) -> bool:
        return bool(self.problems)


def generate(change_set: ChangeSet, executable: str = DEFAULT_EXECUTABLE) -> List[CommandLine]:
    """
    One CommandLine per KeyChange, in ChangeSet order.

    Deterministic: equal ChangeSets produce identical command sequences.
    """
    commands = [
        generate_command(domain_change, change, executable=executable)
        for domain_change, change in change_set.iter_changes()
    ]

    degraded = sum(1 for c in commands if c.degraded)
    if degraded:
        log.warning("{} of {} commands could not be expressed exactly", degraded, len(commands))
    return commands


def generate_command(
    domain_change: DomainChange,
    change: KeyChange,
    executable: str = DEFAULT_EXECUTABLE,
) -> CommandLine:
    """Render a single KeyChange."""
    domain = domain_change.domain

    if isinstance(change, Removed):
        return CommandLine(
            kind=CommandKind.DELETE,
            domain=domain,
            key=change.key,
            text=_join([executable, "delete", domain, change.key]),
            domain_change=domain_change,
            change=change,
        )

    encoded = encode_value(change.new_value)
    return CommandLine(
        kind=CommandKind.WRITE,
        domain=domain,
        key=change.key,
        text=_join([executable, "write", domain, change.key] + encoded.args),
        domain_change=domain_change,
        change=change,
        degraded=encoded.degraded,
        note="; ".join(encoded.problems) or None,
    )


def encode_value(value: Value, strict: bool = False) -> EncodedValue:
    """
    Type-tagged argument list for a value.

    Args:
        value: Value to encode
        strict: Raise instead of degrading

    Raises:
        UnsupportedShapeError: strict is set and the value cannot be
            expressed with flat type-tagged arguments
    """
    encoded = EncodedValue()

    if nesting_depth(value) > 1:
        problem = f"nested {value.type_name} written as a plist literal"
        if strict:
            raise UnsupportedShapeError(problem)
        encoded.args.append(to_plist_literal(value))
        encoded.problems.append(problem)
        if _has_fractional_date(value):
            encoded.problems.append("fractional seconds dropped from nested dates")
        return encoded

    if isinstance(value, Array):
        encoded.args.append("-array")
        for item in value.items:
            _encode_scalar(item, encoded, strict)
    elif isinstance(value, Dictionary):
        encoded.args.append("-dict")
        for key, item in value.entries:
            encoded.args.append(key)
            _encode_scalar(item, encoded, strict)
    else:
        _encode_scalar(value, encoded, strict)

    return encoded


def _encode_scalar(value: Value, encoded: EncodedValue, strict: bool) -> None:
    if isinstance(value, Boolean):
        encoded.args += ["-bool", "true" if value.value else "false"]
    elif isinstance(value, Integer):
        encoded.args += ["-int", str(value.value)]
    elif isinstance(value, Float):
        if not math.isfinite(value.value):
            problem = f"non-finite float {value.value!r}"
            if strict:
                raise UnsupportedShapeError(problem)
            encoded.problems.append(problem)
        encoded.args += ["-float", format_float(value.value)]
    elif isinstance(value, String):
        encoded.args += ["-string", value.value]
    elif isinstance(value, Data):
        encoded.args += ["-data", value.value.hex()]
    elif isinstance(value, Date):
        encoded.args += ["-date", format_date(value)]
    else:
        raise TypeError(f"Not a scalar preference value: {value!r}")


def format_float(number: float) -> str:
    """
    Positional decimal with the shortest round-trip digits.

    Never uses scientific notation: 1e-07 -> 0.0000001, 1e+22 -> 10000000000000000000000.0
    """
    if math.isnan(number):
        return "nan"
    if math.isinf(number):
        return "inf" if number > 0 else "-inf"
    text = format(Decimal(repr(number)), "f")
    if "." not in text:
        text += ".0"
    return text


def to_plist_literal(value: Value) -> str:
    """
    Compact XML property-list fragment, e.g. <array><integer>1</integer></array>.

    Dates are written in whole seconds, the only precision plist <date> holds.
    """
    if isinstance(value, Boolean):
        return "<true/>" if value.value else "<false/>"
    if isinstance(value, Integer):
        return f"<integer>{value.value}</integer>"
    if isinstance(value, Float):
        return f"<real>{format_float(value.value)}</real>"
    if isinstance(value, String):
        return f"<string>{escape(value.value)}</string>"
    if isinstance(value, Data):
        return f"<data>{base64.b64encode(value.value).decode('ascii')}</data>"
    if isinstance(value, Date):
        return f"<date>{value.as_utc().strftime('%Y-%m-%dT%H:%M:%SZ')}</date>"
    if isinstance(value, Array):
        return "<array>" + "".join(to_plist_literal(v) for v in value.items) + "</array>"
    if isinstance(value, Dictionary):
        body = "".join(
            f"<key>{escape(k)}</key>{to_plist_literal(v)}" for k, v in value.entries
        )
        return f"<dict>{body}</dict>"
    raise TypeError(f"Not a preference value: {value!r}")


def _has_fractional_date(value: Value) -> bool:
    if isinstance(value, Date):
        return value.as_utc().microsecond != 0
    if isinstance(value, Array):
        return any(_has_fractional_date(v) for v in value.items)
    if isinstance(value, Dictionary):
        return any(_has_fractional_date(v) for _, v in value.entries)
    return False


def _join(args: List[str]) -> str:
    return " ".join(shlex.quote(arg) for arg in args)
