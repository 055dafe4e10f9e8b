"""Binary snapshot container for the globals and runner states of a story.

Layout (little endian, 64-bit words): a header holding the number of runners
and the total length, a table of ``num_runners + 1`` section offsets, then the
globals section followed by one section per runner.
"""

from __future__ import annotations

import struct
from collections.abc import Iterable
from itertools import accumulate, pairwise
from os import PathLike
from pathlib import Path

_WORD = struct.Struct("<Q")
_HEADER = struct.Struct("<QQ")


class SnapshotError(Exception):
    """Raised for unreadable or corrupted snapshots."""


class Snapshot:
    """An immutable snapshot of story state."""

    def __init__(self, data: bytes | bytearray | memoryview) -> None:
        data = bytes(data)
        if len(data) < _HEADER.size:
            raise SnapshotError("snapshot is too short to hold a header")
        num_runners, length = _HEADER.unpack_from(data)
        if length != len(data):
            raise SnapshotError("Corrupted file length")
        table_end = _HEADER.size + (num_runners + 1) * _WORD.size
        if table_end > length:
            raise SnapshotError("snapshot is too short for its offset table")
        offsets = list(struct.unpack_from(f"<{num_runners + 1}Q", data, _HEADER.size))
        if offsets[0] < table_end or any(a > b for a, b in pairwise([*offsets, length])):
            raise SnapshotError("invalid section offsets in snapshot")
        self._data = data
        self._num_runners = num_runners
        self._offsets = offsets

    @classmethod
    def from_parts(cls, globals_data: bytes, runner_data: Iterable[bytes]) -> Snapshot:
        """Assemble a snapshot from serialised globals and runner sections."""
        sections = [bytes(globals_data), *(bytes(part) for part in runner_data)]
        table_end = _HEADER.size + len(sections) * _WORD.size
        offsets = accumulate((len(section) for section in sections[:-1]), initial=table_end)
        length = table_end + sum(len(section) for section in sections)
        data = b"".join(
            [
                _HEADER.pack(len(sections) - 1, length),
                *(_WORD.pack(offset) for offset in offsets),
                *sections,
            ]
        )
        return cls(data)

    @classmethod
    def from_binary(cls, data: bytes | bytearray | memoryview) -> Snapshot:
        return cls(data)

    @classmethod
    def from_file(cls, path: str | PathLike[str]) -> Snapshot:
        try:
            data = Path(path).read_bytes()
        except OSError as exc:
            raise SnapshotError(f"Failed to open snapshot file: {path}") from exc
        return cls(data)

    def write_to_file(self, path: str | PathLike[str]) -> None:
        try:
            Path(path).write_bytes(self._data)
        except OSError as exc:
            raise SnapshotError(f"Failed to open file to write snapshot: {path}") from exc

    def data(self) -> bytes:
        """Return the whole binary snapshot."""
        return self._data

    def num_runners(self) -> int:
        return self._num_runners

    def _section(self, index: int) -> bytes:
        start = self._offsets[index]
        end = self._offsets[index + 1] if index + 1 < len(self._offsets) else len(self._data)
        return self._data[start:end]

    def globals_snap(self) -> bytes:
        """Return the serialised globals section."""
        return self._section(0)

    def runner_snap(self, index: int) -> bytes:
        """Return the serialised section of runner ``index``."""
        if not 0 <= index < self._num_runners:
            raise IndexError("runner index out of range for snapshot")
        return self._section(index + 1)