"""
Unit tests for the handle-based engine.

Tests cover:
- Open flags and the error codes returned for each failure
- Sentinel returns from add, delete, name lookup and stream calls
- Finalize behavior on close and discard
"""

import os
import zipfile

import pytest

from safezip import engine
from safezip.constants import (
    COMP_STORED,
    ZIP_CHECKCONS,
    ZIP_CREATE,
    ZIP_ER_CHANGED,
    ZIP_ER_DELETED,
    ZIP_ER_EXISTS,
    ZIP_ER_INCONS,
    ZIP_ER_INVAL,
    ZIP_ER_NOENT,
    ZIP_ER_NOZIP,
    ZIP_ER_OK,
    ZIP_ER_OPEN,
    ZIP_ER_RDONLY,
    ZIP_ER_RENAME,
    ZIP_ER_ZIPCLOSED,
    ZIP_EXCL,
    ZIP_FL_OVERWRITE,
    ZIP_RDONLY,
    ZIP_STAT_ALL,
    ZIP_STAT_SIZE,
    ZIP_TRUNCATE,
)


class TestOpenArchive:
    """Tests for engine.open_archive."""

    def test_missing_without_create(self, zip_path):
        handle, code = engine.open_archive(zip_path, 0)
        assert handle is None
        assert code == ZIP_ER_NOENT

    def test_missing_with_create(self, zip_path):
        handle, code = engine.open_archive(zip_path, ZIP_CREATE)
        assert code == ZIP_ER_OK
        assert engine.get_num_entries(handle) == 0
        assert engine.close(handle) == 0
        # Nothing was added, so nothing is written
        assert not zip_path.exists()

    def test_exclusive_on_existing(self, make_zip):
        path = make_zip({"a.txt": b"a"})
        handle, code = engine.open_archive(path, ZIP_CREATE | ZIP_EXCL)
        assert handle is None
        assert code == ZIP_ER_EXISTS

    def test_not_a_zip(self, tmp_path):
        path = tmp_path / "plain.txt"
        path.write_bytes(b"this is not an archive at all")
        handle, code = engine.open_archive(path, 0)
        assert handle is None
        assert code == ZIP_ER_NOZIP

    def test_directory_cannot_be_opened(self, tmp_path):
        handle, code = engine.open_archive(tmp_path, 0)
        assert handle is None
        assert code == ZIP_ER_OPEN

    def test_invalid_path(self):
        assert engine.open_archive("", 0) == (None, ZIP_ER_INVAL)
        assert engine.open_archive("bad\x00name", 0) == (None, ZIP_ER_INVAL)
        assert engine.open_archive(None, 0) == (None, ZIP_ER_INVAL)

    def test_zero_length_file_is_empty_archive(self, tmp_path):
        path = tmp_path / "empty.zip"
        path.write_bytes(b"")
        handle, code = engine.open_archive(path, 0)
        assert code == ZIP_ER_OK
        assert engine.get_num_entries(handle) == 0
        engine.discard(handle)

    def test_consistency_check_rejects_mismatched_headers(self, make_zip):
        path = make_zip({"a.txt": b"hello"}, compression=zipfile.ZIP_STORED)
        raw = bytearray(path.read_bytes())
        # CRC field of the first local header
        raw[14] ^= 0xFF
        path.write_bytes(bytes(raw))

        handle, code = engine.open_archive(path, ZIP_CHECKCONS)
        assert handle is None
        assert code == ZIP_ER_INCONS

        # Without the check the central directory is trusted
        handle, code = engine.open_archive(path, 0)
        assert code == ZIP_ER_OK
        engine.discard(handle)

    def test_truncate_ignores_existing_entries(self, make_zip):
        path = make_zip({"a.txt": b"a"})
        handle, code = engine.open_archive(path, ZIP_TRUNCATE)
        assert code == ZIP_ER_OK
        assert engine.get_num_entries(handle) == 0
        engine.discard(handle)


class TestMutation:
    """Tests for adding and deleting through the engine."""

    def test_add_returns_index(self, zip_path):
        handle, _ = engine.open_archive(zip_path, ZIP_CREATE)
        assert engine.file_add(handle, "a", engine.source_buffer(b"1")) == 0
        assert engine.file_add(handle, "b", engine.source_buffer(b"2")) == 1
        engine.discard(handle)

    def test_add_existing_without_overwrite(self, zip_path):
        handle, _ = engine.open_archive(zip_path, ZIP_CREATE)
        engine.file_add(handle, "a", engine.source_buffer(b"1"))
        assert engine.file_add(handle, "a", engine.source_buffer(b"2")) == -1
        assert engine.error_code(handle) == ZIP_ER_EXISTS
        engine.discard(handle)

    def test_overwrite_keeps_index(self, zip_path):
        handle, _ = engine.open_archive(zip_path, ZIP_CREATE)
        engine.file_add(handle, "a", engine.source_buffer(b"1"))
        engine.file_add(handle, "b", engine.source_buffer(b"2"))
        assert engine.file_add(handle, "a", engine.source_buffer(b"3"), ZIP_FL_OVERWRITE) == 0
        assert engine.get_num_entries(handle) == 2
        engine.discard(handle)

    def test_add_invalid_name(self, zip_path):
        handle, _ = engine.open_archive(zip_path, ZIP_CREATE)
        assert engine.file_add(handle, "", engine.source_buffer(b"1")) == -1
        assert engine.error_code(handle) == ZIP_ER_INVAL
        assert "empty" in engine.strerror(handle)
        engine.discard(handle)

    def test_add_without_source(self, zip_path):
        handle, _ = engine.open_archive(zip_path, ZIP_CREATE)
        assert engine.source_buffer("not bytes") is None
        assert engine.file_add(handle, "a", None) == -1
        assert engine.error_code(handle) == ZIP_ER_INVAL
        engine.discard(handle)

    def test_read_only_rejects_changes(self, make_zip):
        path = make_zip({"a.txt": b"a"})
        handle, _ = engine.open_archive(path, ZIP_RDONLY)
        assert engine.file_add(handle, "b", engine.source_buffer(b"b")) == -1
        assert engine.error_code(handle) == ZIP_ER_RDONLY
        assert engine.delete(handle, 0) == -1
        engine.discard(handle)

    def test_delete_leaves_unnamed_slot(self, zip_path):
        handle, _ = engine.open_archive(zip_path, ZIP_CREATE)
        engine.file_add(handle, "a", engine.source_buffer(b"1"))
        assert engine.delete(handle, 0) == 0
        assert engine.get_num_entries(handle) == 1
        assert engine.get_name(handle, 0) is None
        assert engine.error_code(handle) == ZIP_ER_DELETED
        assert engine.name_locate(handle, "a") == -1
        assert engine.delete(handle, 0) == -1
        engine.discard(handle)

    def test_delete_out_of_range(self, zip_path):
        handle, _ = engine.open_archive(zip_path, ZIP_CREATE)
        assert engine.delete(handle, 5) == -1
        assert engine.error_code(handle) == ZIP_ER_INVAL
        engine.discard(handle)


class TestStat:
    def test_stat_existing_entry(self, make_zip):
        path = make_zip({"a.txt": b"hello"}, compression=zipfile.ZIP_STORED)
        handle, _ = engine.open_archive(path, ZIP_CHECKCONS)
        st = engine.stat(handle, "a.txt")
        assert st.index == 0
        assert st.size == 5
        assert st.comp_size == 5
        assert st.comp_method == COMP_STORED
        assert st.crc == zipfile.ZipFile(path).getinfo("a.txt").CRC
        assert st.valid == ZIP_STAT_ALL
        engine.discard(handle)

    def test_stat_pending_entry(self, zip_path):
        handle, _ = engine.open_archive(zip_path, ZIP_CREATE)
        engine.file_add(handle, "a", engine.source_buffer(b"12345"))
        st = engine.stat(handle, "a")
        assert st.size == 5
        assert st.valid & ZIP_STAT_SIZE
        engine.discard(handle)

    def test_stat_missing(self, zip_path):
        handle, _ = engine.open_archive(zip_path, ZIP_CREATE)
        assert engine.stat(handle, "missing") is None
        assert engine.error_code(handle) == ZIP_ER_NOENT
        assert engine.strerror(handle) == "No such file: missing"
        engine.discard(handle)


class TestStreams:
    def test_read_entry(self, make_zip):
        path = make_zip({"a.txt": b"hello world"})
        handle, _ = engine.open_archive(path, ZIP_CHECKCONS)
        fh = engine.fopen(handle, "a.txt")
        buffer = bytearray(64)
        count = engine.fread(fh, buffer)
        assert buffer[:count] == b"hello world"
        assert engine.fread(fh, buffer) == 0
        assert engine.fclose(fh) == 0
        engine.discard(handle)

    def test_fopen_missing(self, make_zip):
        path = make_zip({"a.txt": b"a"})
        handle, _ = engine.open_archive(path, 0)
        assert engine.fopen(handle, "b.txt") is None
        assert engine.error_code(handle) == ZIP_ER_NOENT
        engine.discard(handle)

    def test_fopen_pending_entry(self, zip_path):
        handle, _ = engine.open_archive(zip_path, ZIP_CREATE)
        engine.file_add(handle, "a", engine.source_buffer(b"1"))
        assert engine.fopen(handle, "a") is None
        assert engine.error_code(handle) == ZIP_ER_CHANGED
        engine.discard(handle)

    def test_close_invalidates_streams(self, make_zip):
        path = make_zip({"a.txt": b"a"})
        handle, _ = engine.open_archive(path, 0)
        fh = engine.fopen(handle, "a.txt")
        assert engine.close(handle) == 0
        assert engine.fread(fh, bytearray(4)) == -1
        assert engine.file_error_code(fh) == ZIP_ER_ZIPCLOSED
        assert engine.fclose(fh) == 0


class TestFinalize:
    def test_close_writes_entries(self, zip_path, tmp_path):
        source = tmp_path / "source.bin"
        source.write_bytes(b"from disk")
        handle, _ = engine.open_archive(zip_path, ZIP_CREATE)
        engine.file_add(handle, "buf.txt", engine.source_buffer(b"from memory"))
        engine.file_add(handle, "file.bin", engine.source_file(source))
        assert engine.close(handle) == 0

        with zipfile.ZipFile(zip_path) as z:
            assert z.namelist() == ["buf.txt", "file.bin"]
            assert z.read("buf.txt") == b"from memory"
            assert z.read("file.bin") == b"from disk"

    def test_file_source_is_read_at_close(self, zip_path, tmp_path):
        source = tmp_path / "late.txt"
        handle, _ = engine.open_archive(zip_path, ZIP_CREATE)
        engine.file_add(handle, "late.txt", engine.source_file(source))
        source.write_bytes(b"written after add")
        assert engine.close(handle) == 0

        with zipfile.ZipFile(zip_path) as z:
            assert z.read("late.txt") == b"written after add"

    def test_close_failure_keeps_handle(self, zip_path, tmp_path):
        missing = tmp_path / "missing.txt"
        handle, _ = engine.open_archive(zip_path, ZIP_CREATE)
        engine.file_add(handle, "m.txt", engine.source_file(missing))

        assert engine.close(handle) == -1
        assert engine.error_code(handle) == ZIP_ER_OPEN
        assert engine.strerror(handle).startswith("Can't open file: ")
        assert not zip_path.exists()
        assert list(tmp_path.glob(".safezip-*")) == []

        missing.write_bytes(b"now present")
        assert engine.close(handle) == 0
        assert zip_path.exists()

    def test_original_is_released_before_replace(self, make_zip, monkeypatch):
        path = make_zip({"a.txt": b"a", "b.txt": b"b"})
        handle, _ = engine.open_archive(path, 0)
        assert engine.delete(handle, 0) == 0

        replace = os.replace
        held_open = []

        def locked_replace(src, dst):
            held_open.append(handle._file is not None or handle._zip is not None)
            raise PermissionError(13, "Permission denied")

        monkeypatch.setattr(engine.os, "replace", locked_replace)
        assert engine.close(handle) == -1
        assert held_open == [False]
        assert engine.error_code(handle) == ZIP_ER_RENAME
        assert list(path.parent.glob(".safezip-*")) == []

        monkeypatch.setattr(engine.os, "replace", replace)
        assert engine.close(handle) == 0
        with zipfile.ZipFile(path) as z:
            assert z.namelist() == ["b.txt"]
            assert z.read("b.txt") == b"b"

    def test_close_removes_emptied_archive(self, make_zip):
        path = make_zip({"a.txt": b"a"})
        handle, _ = engine.open_archive(path, 0)
        engine.delete(handle, 0)
        assert engine.close(handle) == 0
        assert not path.exists()

    def test_delete_and_keep_others(self, make_zip):
        path = make_zip({"a.txt": b"a", "b.txt": b"b", "c.txt": b"c"})
        handle, _ = engine.open_archive(path, ZIP_CHECKCONS)
        engine.delete(handle, engine.name_locate(handle, "b.txt"))
        assert engine.close(handle) == 0

        with zipfile.ZipFile(path) as z:
            assert z.namelist() == ["a.txt", "c.txt"]
            assert z.read("c.txt") == b"c"

    def test_discard_writes_nothing(self, make_zip):
        path = make_zip({"a.txt": b"a"})
        before = path.read_bytes()
        handle, _ = engine.open_archive(path, 0)
        engine.file_add(handle, "b.txt", engine.source_buffer(b"b"))
        engine.discard(handle)
        assert path.read_bytes() == before
        assert engine.get_num_entries(handle) == -1

    def test_close_twice(self, zip_path):
        handle, _ = engine.open_archive(zip_path, ZIP_CREATE)
        assert engine.close(handle) == 0
        assert engine.close(handle) == -1

    @pytest.mark.parametrize("method", [0, 8, 12, 14])
    def test_compression_methods(self, zip_path, method):
        handle, _ = engine.open_archive(zip_path, ZIP_CREATE)
        index = engine.file_add(handle, "a", engine.source_buffer(b"x" * 1000))
        assert engine.set_file_compression(handle, index, method) == 0
        assert engine.close(handle) == 0

        with zipfile.ZipFile(zip_path) as z:
            assert z.getinfo("a").compress_type == method
            assert z.read("a") == b"x" * 1000

    def test_unknown_compression_method(self, zip_path):
        handle, _ = engine.open_archive(zip_path, ZIP_CREATE)
        index = engine.file_add(handle, "a", engine.source_buffer(b"x"))
        assert engine.set_file_compression(handle, index, 99) == -1
        engine.discard(handle)
