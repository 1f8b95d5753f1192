"""
Value model - typed preference values.

A preference value is exactly one of a closed set of variants:

- Boolean, Integer (64-bit signed), Float (64-bit)
- String, Data (raw bytes), Date (absolute timestamp)
- Array (ordered Values), Dictionary (String -> Value, order irrelevant)

Equality is structural and exact per variant. Two values of different
variants never compare equal, so Integer(1) != Float(1.0) and
Boolean(True) != Integer(1). Floats compare by IEEE-754 bit pattern.
"""

import plistlib
import struct
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, Iterator, Mapping, Sequence, Tuple, Union

INT64_MIN = -(2 ** 63)
INT64_MAX = 2 ** 63 - 1

# Display width for String values in describe()
DESCRIBE_MAX_CHARS = 30


@dataclass(frozen=True)
class Boolean:
    value: bool
    type_name = "bool"


@dataclass(frozen=True)
class Integer:
    value: int
    type_name = "int"

    def __post_init__(self):
        if isinstance(self.value, bool) or not isinstance(self.value, int):
            raise TypeError(f"Integer requires an int, got {type(self.value).__name__}")
        if not INT64_MIN <= self.value <= INT64_MAX:
            raise ValueError(f"Integer out of 64-bit range: {self.value}")


@dataclass(frozen=True, eq=False)
class Float:
    """64-bit float compared bit-for-bit (0.0 != -0.0, NaN == same NaN)."""
    value: float
    type_name = "float"

    def _bits(self) -> bytes:
        return struct.pack(">d", self.value)

    def __eq__(self, other: object) -> bool:
        if other.__class__ is not Float:
            return NotImplemented
        return self._bits() == other._bits()

    def __hash__(self) -> int:
        return hash((Float, self._bits()))


@dataclass(frozen=True)
class String:
    value: str
    type_name = "string"


@dataclass(frozen=True)
class Data:
    value: bytes
    type_name = "data"

    def __post_init__(self):
        if not isinstance(self.value, bytes):
            object.__setattr__(self, "value", bytes(self.value))


@dataclass(frozen=True, eq=False)
class Date:
    """
    Absolute timestamp.

    Naive datetimes are taken to be UTC (this is what plistlib produces);
    the stored value is never shifted to another timezone.
    """
    value: datetime
    type_name = "date"

    def as_utc(self) -> datetime:
        if self.value.tzinfo is None:
            return self.value.replace(tzinfo=timezone.utc)
        return self.value.astimezone(timezone.utc)

    def __eq__(self, other: object) -> bool:
        if other.__class__ is not Date:
            return NotImplemented
        return self.as_utc() == other.as_utc()

    def __hash__(self) -> int:
        return hash((Date, self.as_utc()))


@dataclass(frozen=True)
class Array:
    items: Tuple["Value", ...] = ()
    type_name = "array"

    def __post_init__(self):
        object.__setattr__(self, "items", tuple(self.items))

    def __iter__(self) -> Iterator["Value"]:
        return iter(self.items)

    def __len__(self) -> int:
        return len(self.items)


@dataclass(frozen=True)
class Dictionary:
    """
    String-keyed mapping of Values.

    Entries are stored sorted by key, so equality is independent of
    construction order and iteration is deterministic.
    """
    entries: Tuple[Tuple[str, "Value"], ...] = field(default=())
    type_name = "dict"

    def __post_init__(self):
        pairs = self.entries.items() if isinstance(self.entries, Mapping) else self.entries
        pairs = list(pairs)
        keys = [k for k, _ in pairs]
        if len(set(keys)) != len(keys):
            raise ValueError("Dictionary keys must be unique")
        object.__setattr__(self, "entries", tuple(sorted(pairs, key=lambda kv: kv[0])))

    def keys(self) -> Tuple[str, ...]:
        return tuple(k for k, _ in self.entries)

    def values(self) -> Tuple["Value", ...]:
        return tuple(v for _, v in self.entries)

    def items(self) -> Tuple[Tuple[str, "Value"], ...]:
        return self.entries

    def get(self, key: str, default: Any = None) -> Any:
        for k, v in self.entries:
            if k == key:
                return v
        return default

    def __len__(self) -> int:
        return len(self.entries)


Value = Union[Boolean, Integer, Float, String, Data, Date, Array, Dictionary]

SCALAR_TYPES = (Boolean, Integer, Float, String, Data, Date)
CONTAINER_TYPES = (Array, Dictionary)


def to_value(obj: Any) -> Value:
    """
    Convert a plain Python / plistlib object into a Value.

    plistlib.UID is stored as an Integer. Raises TypeError for anything
    that has no preference-value counterpart.
    """
    if isinstance(obj, CONTAINER_TYPES + SCALAR_TYPES):
        return obj
    # bool before int: bool is an int subclass
    if isinstance(obj, bool):
        return Boolean(obj)
    if isinstance(obj, int):
        return Integer(obj)
    if isinstance(obj, float):
        return Float(obj)
    if isinstance(obj, str):
        return String(obj)
    if isinstance(obj, (bytes, bytearray)):
        return Data(bytes(obj))
    if isinstance(obj, datetime):
        return Date(obj)
    if isinstance(obj, plistlib.UID):
        return Integer(obj.data)
    if isinstance(obj, Mapping):
        return Dictionary(tuple((str(k), to_value(v)) for k, v in obj.items()))
    if isinstance(obj, (list, tuple)):
        return Array(tuple(to_value(v) for v in obj))
    raise TypeError(f"Unsupported preference value type: {type(obj).__name__}")


def to_python(value: Value) -> Any:
    """Convert a Value back to plain Python objects (JSON-friendly except Data)."""
    if isinstance(value, Array):
        return [to_python(v) for v in value.items]
    if isinstance(value, Dictionary):
        return {k: to_python(v) for k, v in value.entries}
    return value.value


def to_json(value: Value) -> Any:
    """Plain JSON-serializable form: Data as hex, Date as ISO-8601 UTC."""
    if isinstance(value, Array):
        return [to_json(v) for v in value.items]
    if isinstance(value, Dictionary):
        return {k: to_json(v) for k, v in value.entries}
    if isinstance(value, Data):
        return value.value.hex()
    if isinstance(value, Date):
        return format_date(value)
    return value.value


def format_date(value: Date) -> str:
    """ISO-8601 UTC form, e.g. 2024-01-02T03:04:05Z."""
    dt = value.as_utc()
    text = dt.strftime("%Y-%m-%dT%H:%M:%S")
    if dt.microsecond:
        text += f".{dt.microsecond:06d}".rstrip("0")
    return text + "Z"


def describe(value: Value) -> str:
    """Short one-line summary for display."""
    if isinstance(value, Boolean):
        return "true" if value.value else "false"
    if isinstance(value, Integer):
        return str(value.value)
    if isinstance(value, Float):
        return f"{value.value:.2f}"
    if isinstance(value, String):
        if len(value.value) > DESCRIBE_MAX_CHARS:
            return f'"{value.value[:DESCRIBE_MAX_CHARS - 3]}..."'
        return f'"{value.value}"'
    if isinstance(value, Data):
        return f"<data {len(value.value)} bytes>"
    if isinstance(value, Date):
        return format_date(value)
    if isinstance(value, Array):
        return f"[{len(value)} items]"
    if isinstance(value, Dictionary):
        return f"{{{len(value)} keys}}"
    raise TypeError(f"Not a preference value: {value!r}")


def array(values: Sequence[Any]) -> Array:
    """Build an Array from plain Python objects or Values."""
    return Array(tuple(to_value(v) for v in values))


def dictionary(mapping: Mapping[str, Any]) -> Dictionary:
    """Build a Dictionary from a mapping of plain Python objects or Values."""
    return Dictionary(tuple((k, to_value(v)) for k, v in mapping.items()))


def nesting_depth(value: Value) -> int:
    """0 for scalars, 1 for a container of scalars, and so on."""
    if isinstance(value, Array):
        return 1 + max((nesting_depth(v) for v in value.items), default=0)
    if isinstance(value, Dictionary):
        return 1 + max((nesting_depth(v) for _, v in value.entries), default=0)
    return 0


def value_map(mapping: Mapping[str, Any]) -> Dict[str, Value]:
    """Convert a {key: python-object} mapping to {key: Value}."""
    return {key: to_value(obj) for key, obj in mapping.items()}
