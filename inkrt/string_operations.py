"""Operations of the evaluation machine on string operands."""

from __future__ import annotations

from .string_table import StringTable
from .string_utils import str_equal, to_str
from .value import Value, ValueType

_SPACES = frozenset(" \t\n\v\f\r")


def _as_text(value: Value) -> str:
    if value.type is ValueType.STRING:
        return value.data.text
    return to_str(value)


def contains_text(lh: str, rh: str) -> bool:
    """Whether ``rh`` occurs in ``lh``, ignoring leading and extra spaces of ``rh``."""
    lh = lh.lstrip(" \t\n\v\f\r")
    rh = rh.lstrip(" \t\n\v\f\r")
    if not lh and not rh:
        return True
    for start in range(len(lh)):
        offset = 0
        for index, char in enumerate(rh):
            position = start + index + offset
            if position >= len(lh) or lh[position] != char:
                if char in _SPACES:
                    offset -= 1
                    continue
                break
        else:
            return True
    return False


def add(lhs: Value, rhs: Value, strings: StringTable) -> Value:
    """Concatenate the text of both operands into a new allocated string."""
    text = strings.create(_as_text(lhs) + _as_text(rhs))
    return Value(ValueType.STRING, text)


def is_equal(lhs: Value, rhs: Value) -> Value:
    return Value(ValueType.BOOLEAN, str_equal(_as_text(lhs), _as_text(rhs)))


def not_equal(lhs: Value, rhs: Value) -> Value:
    return Value(ValueType.BOOLEAN, not str_equal(_as_text(lhs), _as_text(rhs)))


def has(lhs: Value, rhs: Value) -> Value:
    return Value(ValueType.BOOLEAN, contains_text(_as_text(lhs), _as_text(rhs)))


def hasnt(lhs: Value, rhs: Value) -> Value:
    return Value(ValueType.BOOLEAN, not contains_text(_as_text(lhs), _as_text(rhs)))