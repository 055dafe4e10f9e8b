import struct

import pytest

from inkrt.restorable_stack import RestorableStack

_ITEM = struct.Struct("<i")


def pack(item):
    return _ITEM.pack(item)


def unpack(data, offset):
    (item,) = _ITEM.unpack_from(data, offset)
    return item, offset + _ITEM.size


def make(*items, capacity=None):
    stack = RestorableStack(0, capacity)
    for item in items:
        stack.push(item)
    return stack


def test_lifo_order():
    stack = make(1, 2, 3)
    assert [stack.pop(), stack.pop(), stack.pop()] == [3, 2, 1]
    assert stack.is_empty()


def test_top_does_not_remove():
    stack = make(1, 2)
    assert stack.top() == 2
    assert len(stack) == 2


def test_push_null_rejected():
    stack = make()
    with pytest.raises(ValueError):
        stack.push(0)


def test_pop_and_top_empty():
    stack = make()
    with pytest.raises(IndexError):
        stack.pop()
    with pytest.raises(IndexError):
        stack.top()


def test_iteration_orders():
    stack = make(1, 2, 3)
    assert list(stack) == [3, 2, 1]
    assert list(reversed(stack)) == [1, 2, 3]


def test_fixed_capacity_overflow():
    stack = make(1, 2, capacity=2)
    with pytest.raises(OverflowError):
        stack.push(3)


def test_clear():
    stack = make(1, 2)
    stack.save()
    stack.clear()
    assert len(stack) == 0
    assert list(stack) == []
    stack.save()  # save point was dropped by clear
    assert stack.is_empty()


def _modified_after_save():
    stack = make(1, 2, 3)
    stack.save()
    assert stack.pop() == 3
    stack.push(4)
    return stack


def test_push_jumps_over_saved_region():
    stack = _modified_after_save()
    assert len(stack) == 3
    assert stack.top() == 4
    assert list(stack) == [4, 2, 1]
    assert list(reversed(stack)) == [1, 2, 4]


def test_restore_returns_to_saved_state():
    stack = _modified_after_save()
    stack.restore()
    assert list(stack) == [3, 2, 1]
    assert len(stack) == 3


def test_forget_keeps_current_state():
    stack = _modified_after_save()
    stack.forget()
    assert list(stack) == [4, 2, 1]
    assert [stack.pop(), stack.pop(), stack.pop()] == [4, 2, 1]
    assert stack.is_empty()


def test_pop_through_jump_region():
    stack = _modified_after_save()
    assert [stack.pop(), stack.pop(), stack.pop()] == [4, 2, 1]
    assert len(stack) == 0
    stack.restore()
    assert list(reversed(stack)) == [1, 2, 3]


def test_top_at_save_point_after_pop():
    stack = _modified_after_save()
    stack.pop()
    assert stack.top() == 2
    assert len(stack) == 2


def test_empty_after_popping_everything_below_save():
    stack = make(1, 2)
    stack.save()
    stack.pop()
    stack.pop()
    stack.push(7)
    assert stack.pop() == 7
    assert stack.is_empty()
    assert list(stack) == []
    assert list(reversed(stack)) == []
    with pytest.raises(IndexError):
        stack.top()


def test_save_twice_and_missing_save_errors():
    stack = make(1)
    with pytest.raises(RuntimeError):
        stack.restore()
    with pytest.raises(RuntimeError):
        stack.forget()
    stack.save()
    with pytest.raises(RuntimeError):
        stack.save()


def test_snap_round_trip():
    stack = make(5, 6, 7)
    data = stack.snap(pack)
    other = RestorableStack(0)
    end = other.snap_load(data, 0, unpack)
    assert end == len(data)
    assert list(other) == [7, 6, 5]


def test_snap_round_trip_keeps_save_point():
    stack = _modified_after_save()
    other = RestorableStack(0)
    other.snap_load(stack.snap(pack), 0, unpack)
    assert list(other) == [4, 2, 1]
    other.restore()
    assert list(other) == [3, 2, 1]


def test_snap_load_at_offset():
    stack = make(9)
    data = b"\xff\xff" + stack.snap(pack) + b"tail"
    other = RestorableStack(0)
    end = other.snap_load(data, 2, unpack)
    assert data[end:] == b"tail"
    assert other.pop() == 9


def test_snap_load_rejects_other_null():
    data = make(1).snap(pack)
    other = RestorableStack(-1)
    with pytest.raises(ValueError):
        other.snap_load(data, 0, unpack)


def test_snap_load_respects_capacity():
    data = make(1, 2, 3).snap(pack)
    other = RestorableStack(0, 2)
    with pytest.raises(OverflowError):
        other.snap_load(data, 0, unpack)