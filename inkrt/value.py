"""Tagged runtime values of the ink virtual machine."""

from __future__ import annotations

import math
import struct
from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass, field
from enum import IntEnum
from typing import Any, Protocol


class ValueType(IntEnum):
    """Kinds of runtime values; the order defines the operable/printable ranges."""

    NONE = 0
    DIVERT = 1
    BOOLEAN = 2
    UINT32 = 3
    INT32 = 4
    FLOAT32 = 5
    LIST = 6
    LIST_FLAG = 7
    STRING = 8
    NEWLINE = 9
    MARKER = 10
    VALUE_POINTER = 11
    GLUE = 12
    FUNC_START = 13
    FUNC_END = 14
    NULL = 15
    EX_FN_NOT_FOUND = 16
    TUNNEL_FRAME = 17
    FUNCTION_FRAME = 18
    THREAD_FRAME = 19
    THREAD_START = 20
    THREAD_END = 21
    JUMP_MARKER = 22


_OP_BEGIN = ValueType.DIVERT
_OP_END = ValueType.NEWLINE
_PRINT_BEGIN = ValueType.BOOLEAN
_PRINT_END = ValueType.MARKER

_INT32_RANGE = (-(2**31), 2**31)
_UINT32_RANGE = (0, 2**32)

_FRAMES = (ValueType.TUNNEL_FRAME, ValueType.FUNCTION_FRAME, ValueType.THREAD_FRAME)
_PAIRS = (ValueType.VALUE_POINTER, ValueType.JUMP_MARKER, ValueType.THREAD_START)

_PAYLOAD_SIZE = 16
_TYPE_FIELD = struct.Struct("<i")
_STRING_FIELD = struct.Struct("<Q?")
_PAYLOAD: dict[ValueType, struct.Struct] = {
    ValueType.BOOLEAN: struct.Struct("<?"),
    ValueType.UINT32: struct.Struct("<I"),
    ValueType.INT32: struct.Struct("<i"),
    ValueType.FLOAT32: struct.Struct("<f"),
    ValueType.DIVERT: struct.Struct("<I"),
    ValueType.LIST: struct.Struct("<i"),
    ValueType.LIST_FLAG: struct.Struct("<hh"),
    ValueType.VALUE_POINTER: struct.Struct("<Ii"),
    ValueType.JUMP_MARKER: struct.Struct("<II"),
    ValueType.THREAD_START: struct.Struct("<II"),
    ValueType.THREAD_END: struct.Struct("<I"),
    ValueType.TUNNEL_FRAME: struct.Struct("<I?"),
    ValueType.FUNCTION_FRAME: struct.Struct("<I?"),
    ValueType.THREAD_FRAME: struct.Struct("<I?"),
}


class InkValueError(Exception):
    """Raised for operations a value of the given type does not support."""


class _ListTable(Protocol):
    def to_bool(self, data: Any) -> bool: ...


@dataclass(frozen=True)
class StringValue:
    """A string, either allocated at runtime or living in the story's string table."""

    text: str
    allocated: bool = True
    offset: int | None = field(default=None, compare=False)

    def __str__(self) -> str:
        return self.text


def _to_float32(number: float) -> float:
    number = float(number)
    try:
        return struct.unpack("<f", struct.pack("<f", number))[0]
    except OverflowError:
        return math.copysign(math.inf, number)


def _checked_int(data: Any, bounds: tuple[int, int], kind: ValueType) -> int:
    if not isinstance(data, int):
        raise InkValueError(f"{kind.name} value needs an integer, got {data!r}")
    low, high = bounds
    if not low <= data < high:
        raise InkValueError(f"{data} is out of range for {kind.name}")
    return int(data)


def _int_pair(data: Any, kind: ValueType) -> tuple[int, int]:
    try:
        first, second = data
    except (TypeError, ValueError) as exc:
        raise InkValueError(f"{kind.name} value needs a pair of integers") from exc
    return int(first), int(second)


def _format_float(number: float) -> str:
    text = "%.7f" % number
    if "." in text:
        text = text.rstrip("0")
        if text.endswith("."):
            text = text[:-1]
    return text


@dataclass(frozen=True)
class Value:
    """A runtime value: a type tag together with its payload."""

    type: ValueType = ValueType.NONE
    data: Any = None

    def __post_init__(self) -> None:
        kind = ValueType(self.type)
        data = self.data
        if kind is ValueType.BOOLEAN:
            data = bool(data)
        elif kind is ValueType.INT32:
            data = _checked_int(data, _INT32_RANGE, kind)
        elif kind in (ValueType.UINT32, ValueType.DIVERT, ValueType.THREAD_END):
            data = _checked_int(data, _UINT32_RANGE, kind)
        elif kind is ValueType.FLOAT32:
            if not isinstance(data, (int, float)) or isinstance(data, bool):
                raise InkValueError(f"FLOAT32 value needs a number, got {data!r}")
            data = _to_float32(data)
        elif kind is ValueType.STRING:
            if isinstance(data, str):
                data = StringValue(data)
            elif not isinstance(data, StringValue):
                raise InkValueError(f"STRING value needs a string, got {data!r}")
        elif kind is ValueType.LIST:
            data = _checked_int(data, _INT32_RANGE, kind)
        elif kind is ValueType.LIST_FLAG or kind in _PAIRS:
            data = _int_pair(data, kind)
        elif kind in _FRAMES:
            addr, eval_mode = _int_pair(data, kind)
            data = (addr, bool(eval_mode))
        else:
            data = None
        object.__setattr__(self, "type", kind)
        object.__setattr__(self, "data", data)

    @classmethod
    def from_python(cls, obj: Any) -> Value:
        """Wrap a plain Python bool, int, float or string."""
        if isinstance(obj, bool):
            return cls(ValueType.BOOLEAN, obj)
        if isinstance(obj, int):
            if _INT32_RANGE[0] <= obj < _INT32_RANGE[1]:
                return cls(ValueType.INT32, obj)
            if _UINT32_RANGE[0] <= obj < _UINT32_RANGE[1]:
                return cls(ValueType.UINT32, obj)
            raise InkValueError(f"integer {obj} does not fit into 32 bits")
        if isinstance(obj, float):
            return cls(ValueType.FLOAT32, obj)
        if isinstance(obj, (str, StringValue)):
            return cls(ValueType.STRING, obj)
        raise InkValueError(f"no ink value type for {type(obj).__name__}")

    def to_python(self) -> Any:
        """Return the payload as a plain Python object."""
        kind = self.type
        if kind in (ValueType.BOOLEAN, ValueType.UINT32, ValueType.INT32, ValueType.FLOAT32):
            return self.data
        if kind is ValueType.STRING:
            return self.data.text
        if kind in (ValueType.LIST, ValueType.LIST_FLAG):
            return self.data
        raise InkValueError("No valid type to convert to interface value!")

    def printable(self) -> bool:
        """Whether the value can be written to the output."""
        return _PRINT_BEGIN <= self.type < _PRINT_END

    def truthy(self, lists: _ListTable | None = None) -> bool:
        """Evaluate the value as a condition."""
        kind = self.type
        if kind is ValueType.STRING:
            return self.data.text != ""
        if kind in (ValueType.LIST, ValueType.LIST_FLAG):
            if lists is None:
                raise InkValueError("evaluating a list needs a list table")
            return bool(lists.to_bool(self.data))
        if kind in (ValueType.FLOAT32, ValueType.INT32, ValueType.UINT32):
            return self.data != 0
        if kind is ValueType.BOOLEAN:
            return self.data
        if kind is ValueType.DIVERT:
            raise InkValueError("Divert can not be evaluated to boolean")
        raise InkValueError(
            "Type was not found in operational types or it has no conversion to boolean"
        )

    def redefine(self, other: Value) -> Value:
        """Return the value a variable holding ``self`` gets when assigned ``other``."""
        lists = (ValueType.LIST, ValueType.LIST_FLAG)
        if self.type != other.type and self.type in lists and other.type in lists:
            return Value(other.type, other.data)
        if self.type != other.type:
            raise InkValueError("try to redefine value of other type")
        if not _OP_BEGIN <= self.type < _OP_END:
            raise InkValueError("Can't redefine value with this type! (It is not an variable type!)")
        return Value(other.type, other.data)

    def __str__(self) -> str:
        if not self.printable():
            raise InkValueError("printing this type is not supported")
        kind = self.type
        if kind is ValueType.BOOLEAN:
            return "true" if self.data else "false"
        if kind is ValueType.FLOAT32:
            return _format_float(self.data)
        if kind in (ValueType.INT32, ValueType.UINT32):
            return str(self.data)
        if kind is ValueType.STRING:
            return self.data.text
        if kind is ValueType.NEWLINE:
            return "\n"
        raise InkValueError("to stringify lists, we need a list_table")

    def snap(
        self,
        string_ids: Mapping[str, int] | Callable[[str], int] | None = None,
        story_strings: bytes = b"",
    ) -> bytes:
        """Serialise the value as a type field followed by a fixed-size payload."""
        head = _TYPE_FIELD.pack(int(self.type))
        kind = self.type
        if kind is ValueType.STRING:
            string: StringValue = self.data
            if string.allocated:
                if string_ids is None:
                    raise InkValueError("allocated strings need a string id lookup")
                ident = string_ids(string.text) if callable(string_ids) else string_ids[string.text]
            else:
                ident = _story_offset(string, story_strings)
            payload = _STRING_FIELD.pack(ident, string.allocated)
        elif kind in _PAYLOAD:
            layout = _PAYLOAD[kind]
            payload = layout.pack(*self.data) if isinstance(self.data, tuple) else layout.pack(self.data)
        else:
            payload = b""
        return head + payload.ljust(_PAYLOAD_SIZE, b"\0")

    @classmethod
    def snap_load(
        cls,
        data: bytes,
        offset: int,
        strings: Sequence[str] = (),
        story_strings: bytes = b"",
    ) -> tuple[Value, int]:
        """Read a value written by :meth:`snap`; return it and the offset after it."""
        end = offset + _TYPE_FIELD.size + _PAYLOAD_SIZE
        if end > len(data):
            raise InkValueError("snapshot data ends inside a value")
        (raw_type,) = _TYPE_FIELD.unpack_from(data, offset)
        try:
            kind = ValueType(raw_type)
        except ValueError as exc:
            raise InkValueError(f"unknown value type {raw_type} in snapshot") from exc
        start = offset + _TYPE_FIELD.size
        if kind is ValueType.STRING:
            ident, allocated = _STRING_FIELD.unpack_from(data, start)
            if allocated:
                try:
                    text = strings[ident]
                except IndexError as exc:
                    raise InkValueError(f"string id {ident} not in string table") from exc
                payload: Any = StringValue(text)
            else:
                payload = StringValue(_read_story_string(story_strings, ident), False, ident)
        elif kind in _PAYLOAD:
            fields = _PAYLOAD[kind].unpack_from(data, start)
            payload = fields[0] if len(fields) == 1 else fields
        else:
            payload = None
        return cls(kind, payload), end


def _story_offset(string: StringValue, story_strings: bytes) -> int:
    if string.offset is not None:
        return string.offset
    needle = string.text.encode("utf-8") + b"\0"
    position = story_strings.find(needle)
    while position != -1:
        if position == 0 or story_strings[position - 1] == 0:
            return position
        position = story_strings.find(needle, position + 1)
    raise InkValueError(f"string {string.text!r} is not part of the story string table")


def _read_story_string(story_strings: bytes, offset: int) -> str:
    end = story_strings.find(b"\0", offset)
    if offset >= len(story_strings) or end == -1:
        raise InkValueError(f"offset {offset} is outside the story string table")
    return story_strings[offset:end].decode("utf-8")