"""
Unit tests for pack_file.
"""

import zipfile

import pytest

from safezip import AddError, Archive, OpenError, OpenErrorKind, pack_file


class TestPackFile:
    def test_packs_into_new_archive(self, zip_path, tmp_path):
        source = tmp_path / "notes.txt"
        source.write_bytes(b"packed contents")

        pack_file(zip_path, source, "notes.txt")

        with zipfile.ZipFile(zip_path) as z:
            assert z.namelist() == ["notes.txt"]
            assert z.read("notes.txt") == b"packed contents"

    def test_adds_to_existing_archive(self, make_zip, tmp_path):
        path = make_zip({"keep.txt": b"keep"})
        source = tmp_path / "new.txt"
        source.write_bytes(b"new")

        pack_file(path, source, "new.txt")

        with Archive.open(path) as z:
            assert [e.name for e in z.entries()] == ["keep.txt", "new.txt"]

    def test_missing_source_raises(self, zip_path, tmp_path):
        with pytest.raises(AddError) as exc_info:
            pack_file(zip_path, tmp_path / "missing.txt", "missing.txt")
        assert "missing.txt" in exc_info.value.message
        assert not zip_path.exists()

    def test_invalid_entry_name_leaves_archive_untouched(self, make_zip, tmp_path):
        path = make_zip({"keep.txt": b"keep"})
        before = path.read_bytes()
        source = tmp_path / "src.txt"
        source.write_bytes(b"x")

        with pytest.raises(AddError):
            pack_file(path, source, "")
        assert path.read_bytes() == before

    def test_unopenable_container_raises(self, tmp_path):
        container = tmp_path / "container.zip"
        container.write_text("not a zip")
        source = tmp_path / "src.txt"
        source.write_bytes(b"x")

        with pytest.raises(OpenError) as exc_info:
            pack_file(container, source, "src.txt")
        assert exc_info.value.kind is OpenErrorKind.NOT_A_ZIP
