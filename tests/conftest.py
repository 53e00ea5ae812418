"""
Shared fixtures for safezip tests.
"""

import zipfile
from pathlib import Path

import pytest

from safezip import Archive


@pytest.fixture
def zip_path(tmp_path: Path) -> Path:
    """Path for an archive that does not exist yet."""
    return tmp_path / "archive.zip"


@pytest.fixture
def make_zip(tmp_path: Path):
    """Build an archive with the standard library and return its path."""

    def _make(members: dict, name: str = "fixture.zip", compression=zipfile.ZIP_DEFLATED) -> Path:
        path = tmp_path / name
        with zipfile.ZipFile(path, "w", compression=compression) as z:
            for member_name, data in members.items():
                z.writestr(member_name, data)
        return path

    return _make


@pytest.fixture
def archive(zip_path: Path):
    """An open, newly created archive, closed after the test."""
    z = Archive.open(zip_path, create=True)
    yield z
    z.discard()
