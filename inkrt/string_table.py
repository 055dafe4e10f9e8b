"""Table of strings allocated while a story runs, with usage-based collection."""

from __future__ import annotations

import struct
from collections.abc import Sequence

_EMPTY_STRING = b"\x03"
_FLAG = struct.Struct("<?")
_ID = struct.Struct("<Q")


class StringTable:
    """Strings created at runtime, each carrying a "used" mark for collection.

    Identifiers handed out by :meth:`get_id` are positions in creation order
    and are only valid until the next :meth:`gc`.
    """

    def __init__(self) -> None:
        self._table: dict[str, bool] = {}

    def create(self, text: str) -> str:
        """Register ``text`` as an allocated string and return it."""
        self._table[text] = True
        return text

    def duplicate(self, text: str) -> str:
        """Register a copy of ``text`` up to its first NUL character."""
        return self.create(text.split("\0", 1)[0])

    def clear_usage(self) -> None:
        """Mark every string as unused."""
        for key in self._table:
            self._table[key] = False

    def mark_used(self, text: str) -> None:
        """Mark ``text`` as used; strings not in the table are ignored."""
        if text in self._table:
            self._table[text] = True

    def gc(self) -> None:
        """Drop every string that is not marked as used."""
        self._table = {key: used for key, used in self._table.items() if used}

    def get_id(self, text: str) -> int:
        """Return the position of ``text`` in the table."""
        for index, key in enumerate(self._table):
            if key == text:
                return index
        raise KeyError("Try to fetch not contained string!")

    def __contains__(self, text: object) -> bool:
        return text in self._table

    def __len__(self) -> int:
        return len(self._table)

    def snap(self) -> bytes:
        """Serialise the strings as NUL-terminated entries closed by an empty one."""
        out = bytearray()
        for key in self._table:
            encoded = key.encode("utf-8")
            out += (encoded or _EMPTY_STRING) + b"\0"
        out += b"\0"
        return bytes(out)

    def snap_load(self, data: bytes, offset: int) -> tuple[list[str], int]:
        """Load strings written by :meth:`snap`.

        Returns the loaded strings in id order and the offset after them.
        """
        loaded: list[str] = []
        while True:
            if offset >= len(data):
                raise ValueError("snapshot data ends inside the string table")
            if data[offset] == 0:
                return loaded, offset + 1
            end = data.find(b"\0", offset)
            if end == -1:
                raise ValueError("unterminated string in snapshot")
            raw = data[offset:end]
            text = "" if raw == _EMPTY_STRING else raw.decode("utf-8")
            self.create(text)
            self.mark_used(text)
            loaded.append(text)
            offset = end + 1


def snap_tag(tag: str | None, table: StringTable) -> bytes:
    """Serialise a tag as a presence flag followed by its string id."""
    if tag is None:
        return _FLAG.pack(False)
    return _FLAG.pack(True) + _ID.pack(table.get_id(tag))


def load_tag(data: bytes, offset: int, strings: Sequence[str]) -> tuple[str | None, int]:
    """Read a tag written by :func:`snap_tag`; return it and the offset after it."""
    (present,) = _FLAG.unpack_from(data, offset)
    offset += _FLAG.size
    if not present:
        return None, offset
    (ident,) = _ID.unpack_from(data, offset)
    offset += _ID.size
    try:
        return strings[ident], offset
    except IndexError as exc:
        raise ValueError(f"string id {ident} not in string table") from exc