"""A stack that can be saved and later restored or committed."""

from __future__ import annotations

import struct
from collections.abc import Callable, Iterator
from typing import Generic, TypeVar

T = TypeVar("T")

_INVALID = 2**64 - 1
_FIELDS = struct.Struct("<QQQ")


class RestorableStack(Generic[T]):
    """Stack of simple values with a single save point.

    After :meth:`save`, entries below the save point are never overwritten:
    pushes that would land on them jump over the saved region instead, so that
    :meth:`restore` can return to the saved state and :meth:`forget` can
    commit the current one.
    """

    def __init__(self, null: T, capacity: int | None = None) -> None:
        if capacity is not None and capacity < 0:
            raise ValueError("capacity must not be negative")
        self._null = null
        self._capacity = capacity
        self._buffer: list[T] = []
        self._pos = 0
        self._save: int | None = None
        self._jump: int | None = None

    def _write(self, index: int, value: T) -> None:
        if index < len(self._buffer):
            self._buffer[index] = value
        else:
            self._buffer.append(value)

    def push(self, value: T) -> None:
        """Push ``value``; the null value may not be pushed."""
        if value == self._null:
            raise ValueError("cannot push the null value onto the stack")
        if self._save is not None and self._pos < self._save:
            self._jump = self._pos
            self._pos = self._save
        if self._capacity is not None and self._pos >= self._capacity:
            raise OverflowError("stack overflow")
        self._write(self._pos, value)
        self._pos += 1

    def pop(self) -> T:
        """Remove and return the top value."""
        if self._pos == 0:
            raise IndexError("nothing left to pop")
        if self._pos == self._save:
            self._pos = self._jump
        if self._pos == 0:
            raise IndexError("nothing left to pop")
        self._pos -= 1
        return self._buffer[self._pos]

    def top(self) -> T:
        """Return the top value without removing it."""
        if self._pos == self._save:
            if self._jump == 0:
                raise IndexError("stack is empty")
            return self._buffer[self._jump - 1]
        if self._pos == 0:
            raise IndexError("stack is empty")
        return self._buffer[self._pos - 1]

    def __len__(self) -> int:
        if self._save is not None and self._pos >= self._save:
            return self._pos - (self._save - self._jump)
        return self._pos

    def is_empty(self) -> bool:
        return len(self) == 0

    def clear(self) -> None:
        """Drop every value and any save point."""
        self._save = self._jump = None
        self._pos = 0

    def __iter__(self) -> Iterator[T]:
        """Iterate from the top of the stack to the bottom."""
        if self._pos == 0:
            return
        if self._pos == self._save:
            if self._jump == 0:
                return
            index = self._jump - 1
        else:
            index = self._pos - 1
        while index >= 0:
            yield self._buffer[index]
            if index == self._save:
                index = self._jump
            index -= 1

    def __reversed__(self) -> Iterator[T]:
        """Iterate from the bottom of the stack to the top."""
        if self._pos == 0:
            return
        if self._jump == 0:
            if self._save == self._pos:
                return
            index = self._save
        else:
            index = 0
        while True:
            yield self._buffer[index]
            index += 1
            if index == self._jump:
                index = self._save
            if index == self._pos:
                return

    def save(self) -> None:
        """Record the current state as the save point."""
        if self._save is not None:
            raise RuntimeError("cannot save stack twice; restore() or forget() first")
        self._save = self._jump = self._pos

    def restore(self) -> None:
        """Return to the saved state and drop the save point."""
        if self._save is None:
            raise RuntimeError("cannot restore when there is no save")
        self._pos = self._save
        self._save = self._jump = None

    def forget(self) -> None:
        """Keep the current state and drop the save point."""
        if self._save is None:
            raise RuntimeError("cannot forget when the stack has never been saved")
        if self._pos >= self._save:
            delta = self._save - self._jump
            moved = self._buffer[self._save:self._pos]
            self._buffer[self._jump:self._jump + len(moved)] = moved
            self._pos -= delta
        self._save = self._jump = None

    def _extent(self) -> int:
        return max(self._pos, self._save or 0, self._jump or 0)

    def snap(self, pack_item: Callable[[T], bytes]) -> bytes:
        """Serialise the stack, including any saved region."""
        out = bytearray(pack_item(self._null))
        out += _FIELDS.pack(
            self._pos,
            _INVALID if self._save is None else self._save,
            _INVALID if self._jump is None else self._jump,
        )
        for item in self._buffer[: self._extent()]:
            out += pack_item(item)
        return bytes(out)

    def snap_load(
        self,
        data: bytes,
        offset: int,
        unpack_item: Callable[[bytes, int], tuple[T, int]],
    ) -> int:
        """Load a state written by :meth:`snap`; return the offset after it."""
        null, offset = unpack_item(data, offset)
        if null != self._null:
            raise ValueError("different null value compared to snapshot")
        pos, save, jump = _FIELDS.unpack_from(data, offset)
        offset += _FIELDS.size
        save_index = None if save == _INVALID else save
        jump_index = None if jump == _INVALID else jump
        extent = max(pos, save_index or 0, jump_index or 0)
        if self._capacity is not None and extent > self._capacity:
            raise OverflowError("stack overflow")
        items: list[T] = []
        for _ in range(extent):
            item, offset = unpack_item(data, offset)
            items.append(item)
        self._buffer = items
        self._pos = pos
        self._save = save_index
        self._jump = jump_index
        return offset