"""
Tests for the byte-range file splitter.

Covers split planning, byte-for-byte reconstruction of the source, the
fixed-size transfer buffer and fatal error propagation.
"""

import io
import os

import pytest

from file_splitter import copy_range, main, plan_splits, split_file, split_file_name


def write_source(tmp_path, data):
    source = tmp_path / "source.txt"
    source.write_bytes(data)
    return source


def read_back(splits):
    return b"".join(split.path.read_bytes() for split in sorted(splits, key=lambda s: s.index))


def test_plan_splits_even():
    splits = plan_splits(100, 10)
    assert len(splits) == 10
    assert [s.index for s in splits] == list(range(1, 11))
    assert all(s.length == 10 for s in splits)
    assert [s.offset for s in splits] == list(range(0, 100, 10))


def test_plan_splits_with_remainder():
    """The trailing remainder gets one extra split at index K + 1."""
    splits = plan_splits(103, 10)
    assert len(splits) == 11
    assert splits[-1].index == 11
    assert splits[-1].offset == 100
    assert splits[-1].length == 3
    assert sum(s.length for s in splits) == 103


def test_plan_splits_more_splits_than_bytes():
    splits = plan_splits(3, 10)
    assert len(splits) == 11
    assert all(s.length == 0 for s in splits[:10])
    assert splits[-1].offset == 0
    assert splits[-1].length == 3


def test_plan_splits_rejects_bad_count():
    with pytest.raises(ValueError):
        plan_splits(10, 0)


@pytest.mark.parametrize("size", [0, 1, 20, 23])
def test_split_file_reconstructs_source(tmp_path, size):
    """Concatenating splits in index order reproduces the source exactly."""
    data = bytes((i * 7) % 256 for i in range(size))
    source = write_source(tmp_path, data)

    splits = split_file(source, tmp_path / "splits", num_splits=10, buffer_size=4, show_progress=False)

    assert read_back(splits) == data
    assert len(splits) == (11 if size % 10 else 10)
    for split in splits:
        assert split.path.name == split_file_name(split.index)
        assert split.path.stat().st_size == split.length


def test_split_file_does_not_modify_source(tmp_path):
    data = b"a|b|c\nd|e\n" * 50
    source = write_source(tmp_path, data)

    split_file(source, tmp_path / "splits", num_splits=3, show_progress=False)

    assert source.read_bytes() == data


def test_split_file_zero_length_splits(tmp_path):
    source = write_source(tmp_path, b"abc")

    splits = split_file(source, tmp_path / "splits", num_splits=5, show_progress=False)

    assert [s.length for s in splits] == [0, 0, 0, 0, 0, 3]
    assert read_back(splits) == b"abc"


def test_split_file_missing_source_is_fatal(tmp_path):
    with pytest.raises(FileNotFoundError):
        split_file(tmp_path / "missing.txt", tmp_path / "splits", show_progress=False)


def test_split_file_unwritable_output_is_fatal(tmp_path):
    source = write_source(tmp_path, b"a|b\n")
    # A regular file where the output directory should be
    blocker = tmp_path / "blocker"
    blocker.write_text("")

    with pytest.raises(OSError):
        split_file(source, blocker, show_progress=False)


class RecordingReader(io.BytesIO):
    def __init__(self, data):
        super().__init__(data)
        self.read_sizes = []

    def read(self, size=-1):
        self.read_sizes.append(size)
        return super().read(size)


def test_copy_range_reads_at_most_buffer_size():
    src = RecordingReader(b"x" * 1000)
    dst = io.BytesIO()

    copied = copy_range(src, dst, 1000, buffer_size=64)

    assert copied == 1000
    assert dst.getvalue() == b"x" * 1000
    assert max(src.read_sizes) <= 64
    assert len(src.read_sizes) == 16


def test_copy_range_short_source_raises():
    with pytest.raises(IOError):
        copy_range(io.BytesIO(b"abc"), io.BytesIO(), 10)


def test_split_file_rejects_bad_buffer(tmp_path):
    source = write_source(tmp_path, b"abc")
    with pytest.raises(ValueError):
        split_file(source, tmp_path / "splits", buffer_size=0, show_progress=False)
    assert not os.path.exists(tmp_path / "splits")


def test_main_writes_splits(tmp_path, capsys):
    source = write_source(tmp_path, b"0123456789ab")
    out_dir = tmp_path / "splits"

    main([str(source), str(out_dir), "--splits", "5", "--buffer-size", "2"])

    names = sorted(p.name for p in out_dir.iterdir())
    assert names == [split_file_name(i) for i in (1, 2, 3, 4, 5, 6)]
    assert (out_dir / split_file_name(6)).read_bytes() == b"ab"
    assert "offset 10, 2 bytes" in capsys.readouterr().out


def test_main_missing_input_exits(tmp_path, capsys):
    with pytest.raises(SystemExit) as exc_info:
        main([str(tmp_path / "missing.txt"), str(tmp_path / "splits")])

    assert exc_info.value.code == 1
    assert "does not exist" in capsys.readouterr().out


def test_main_bad_split_count_exits(tmp_path, capsys):
    source = write_source(tmp_path, b"abc")

    with pytest.raises(SystemExit) as exc_info:
        main([str(source), str(tmp_path / "splits"), "--splits", "0"])

    assert exc_info.value.code == 1
    assert "Error: num_splits must be at least 1" in capsys.readouterr().out
