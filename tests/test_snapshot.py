import struct

import pytest

from inkrt.snapshot import Snapshot, SnapshotError


def sample():
    return Snapshot.from_parts(b"globals-state", [b"runner-one", b"", b"runner-three!"])


def test_sections_round_trip():
    snap = sample()
    assert snap.num_runners() == 3
    assert snap.globals_snap() == b"globals-state"
    assert [snap.runner_snap(i) for i in range(3)] == [b"runner-one", b"", b"runner-three!"]


def test_header_layout():
    snap = Snapshot.from_parts(b"g", [b"a", b"b"])
    data = snap.data()
    assert data[:8] == (2).to_bytes(8, "little")
    assert data[8:16] == len(data).to_bytes(8, "little")
    first_offset = int.from_bytes(data[16:24], "little")
    assert data[first_offset:first_offset + 1] == b"g"


def test_total_length():
    globals_data, runners = b"xyz", [b"12", b"3456"]
    snap = Snapshot.from_parts(globals_data, runners)
    payload = len(globals_data) + sum(map(len, runners))
    assert len(snap.data()) == payload + 16 + (len(runners) + 1) * 8


def test_from_binary_round_trip():
    original = sample()
    loaded = Snapshot.from_binary(bytearray(original.data()))
    assert loaded.data() == original.data()
    assert loaded.runner_snap(2) == b"runner-three!"


def test_no_runners():
    snap = Snapshot.from_parts(b"only globals", [])
    assert snap.num_runners() == 0
    assert snap.globals_snap() == b"only globals"
    with pytest.raises(IndexError):
        snap.runner_snap(0)


def test_runner_index_out_of_range():
    snap = sample()
    with pytest.raises(IndexError):
        snap.runner_snap(3)
    with pytest.raises(IndexError):
        snap.runner_snap(-1)


def test_corrupted_length():
    data = sample().data() + b"extra"
    with pytest.raises(SnapshotError):
        Snapshot.from_binary(data)


def test_too_short():
    with pytest.raises(SnapshotError):
        Snapshot.from_binary(b"short")


def test_invalid_offsets():
    data = struct.pack("<QQQ", 0, 24, 0)
    with pytest.raises(SnapshotError):
        Snapshot.from_binary(data)


def test_file_round_trip(tmp_path):
    path = tmp_path / "story.snap"
    snap = sample()
    snap.write_to_file(path)
    loaded = Snapshot.from_file(path)
    assert loaded.data() == snap.data()
    assert loaded.globals_snap() == b"globals-state"


def test_missing_file(tmp_path):
    with pytest.raises(SnapshotError):
        Snapshot.from_file(tmp_path / "missing.snap")


def test_write_to_unwritable_path(tmp_path):
    with pytest.raises(SnapshotError):
        sample().write_to_file(tmp_path / "no-such-dir" / "x.snap")