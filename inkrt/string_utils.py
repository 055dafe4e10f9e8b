"""Helpers to turn runtime values into text and to tidy output strings."""

from __future__ import annotations

from .value import InkValueError, Value, ValueType

_SPACES = frozenset(" \t\n\v\f\r")


def _isspace(char: str) -> bool:
    return char in _SPACES


def _c_string(text: str) -> str:
    """Return ``text`` up to its first NUL character."""
    return text.split("\0", 1)[0]


def format_float(number: float) -> str:
    """Format with seven decimals, then drop trailing zeros and a bare point."""
    text = "%.7f" % number
    text = text.rstrip("0")
    if text.endswith("."):
        text = text[:-1]
    return text


def to_str(value: Value) -> str:
    """Return the text of a numeric or newline value."""
    kind = value.type
    if kind in (ValueType.INT32, ValueType.UINT32):
        return str(value.data)
    if kind is ValueType.FLOAT32:
        return format_float(value.data)
    if kind is ValueType.NEWLINE:
        return "\n"
    raise InkValueError("only support toStr for numeric types")


def decimal_digits(number: int | float) -> int:
    """Return an upper bound for the length of the decimal text of ``number``."""
    if isinstance(number, float):
        return decimal_digits(int(number)) + 8
    length = 2 if number < 0 else 1
    remaining = abs(number) // 10
    while remaining:
        length += 1
        remaining //= 10
    return length


def value_length(value: Value) -> int:
    """Return an upper bound for the length of the text of ``value``."""
    kind = value.type
    if kind in (ValueType.INT32, ValueType.UINT32, ValueType.FLOAT32):
        return decimal_digits(value.data)
    if kind is ValueType.STRING:
        return len(_c_string(value.data.text).encode("utf-8"))
    if kind is ValueType.NEWLINE:
        return 1
    raise InkValueError("Can't determine length of this value type")


def str_equal(lh: str, rh: str) -> bool:
    """Compare two strings up to their terminating NUL characters."""
    return _c_string(lh) == _c_string(rh)


def str_equal_len(lh: str, rh: str, length: int) -> bool:
    """Whether the first ``length`` characters of both strings exist and match."""
    left, right = _c_string(lh), _c_string(rh)
    if length > len(left) or length > len(right):
        return length <= 0
    return left[:length] == right[:length]


def clean_string(text: str, leading: bool = True, trailing: bool = True) -> str:
    """Collapse runs of whitespace and blank lines.

    Whitespace after a line break and whitespace followed by more whitespace
    are dropped, as are repeated line breaks.  ``leading`` also drops
    whitespace at the start, ``trailing`` a final whitespace character.
    """
    out: list[str] = []
    last = len(text) - 1
    for index, char in enumerate(text):
        if not out:
            if leading and _isspace(char):
                continue
        elif index > 0 and text[index - 1] == "\n" and _isspace(char):
            continue
        elif (
            _isspace(char)
            and char != "\n"
            and ((index == last and trailing) or (index != last and _isspace(text[index + 1])))
        ):
            continue
        elif char == "\n" and out[-1] == "\n":
            continue
        out.append(char)
    return "".join(out)