import pytest

from inkrt.string_table import StringTable, load_tag, snap_tag
from inkrt.value import Value, ValueType


def test_create_registers_string():
    table = StringTable()
    assert table.create("hello") == "hello"
    assert "hello" in table
    assert len(table) == 1


def test_duplicate_truncates_at_nul():
    table = StringTable()
    assert table.duplicate("ab\0cd") == "ab"
    assert "ab" in table
    assert "ab\0cd" not in table


def test_ids_follow_creation_order():
    table = StringTable()
    table.create("first")
    table.create("second")
    assert table.get_id("first") == 0
    assert table.get_id("second") == 1


def test_get_id_missing_raises():
    with pytest.raises(KeyError):
        StringTable().get_id("missing")


def test_gc_keeps_only_used():
    table = StringTable()
    for text in ("a", "b", "c"):
        table.create(text)
    table.clear_usage()
    table.mark_used("b")
    table.mark_used("not there")
    table.gc()
    assert len(table) == 1
    assert "b" in table
    assert "a" not in table
    assert table.get_id("b") == 0


def test_new_strings_start_used():
    table = StringTable()
    table.create("kept")
    table.gc()
    assert "kept" in table


def test_snap_of_empty_table():
    assert StringTable().snap() == b"\0"


def test_empty_string_uses_marker():
    table = StringTable()
    table.create("")
    assert table.snap() == b"\x03\0\0"


def test_snap_round_trip():
    table = StringTable()
    for text in ("alpha", "", "beta", "gr\u00fcn"):
        table.create(text)
    data = b"xx" + table.snap()
    other = StringTable()
    loaded, offset = other.snap_load(data, 2)
    assert loaded == ["alpha", "", "beta", "gr\u00fcn"]
    assert offset == len(data)
    assert len(other) == 4
    assert all(text in other for text in loaded)


def test_snap_load_truncated_raises():
    with pytest.raises(ValueError):
        StringTable().snap_load(b"abc", 0)


def test_tag_round_trip():
    table = StringTable()
    table.create("other")
    table.create("tag")
    strings, _ = StringTable().snap_load(table.snap(), 0)
    data = snap_tag("tag", table) + snap_tag(None, table)
    first, offset = load_tag(data, 0, strings)
    second, end = load_tag(data, offset, strings)
    assert first == "tag"
    assert second is None
    assert end == len(data)


def test_missing_tag_is_single_false_byte():
    assert snap_tag(None, StringTable()) == b"\x00"


def test_value_round_trip_through_table():
    table = StringTable()
    table.create("filler")
    text = table.create("story text")
    value = Value(ValueType.STRING, text)
    blob = value.snap(table.get_id)
    strings, _ = StringTable().snap_load(table.snap(), 0)
    loaded, _ = Value.snap_load(blob, 0, strings)
    assert loaded == value