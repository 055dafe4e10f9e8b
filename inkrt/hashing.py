"""String hashing used to identify story paths and variable names."""

_A = 54059
_B = 76963
_FIRST = 37
_MASK = 0xFFFFFFFF


def hash_string(text: str | bytes) -> int:
    """Return the 32-bit hash of ``text``, stopping at the first NUL byte.

    Strings are hashed over their UTF-8 encoding, with every byte taken as a
    signed char.
    """
    data = text.encode("utf-8") if isinstance(text, str) else bytes(text)
    data = data.split(b"\0", 1)[0]
    h = _FIRST
    for byte in data:
        signed = byte - 256 if byte >= 128 else byte
        h = ((h * _A) ^ (signed * _B)) & _MASK
    return h