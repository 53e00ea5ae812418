"""
Unit tests for the error taxonomy.
"""

import pytest

from safezip import (
    CloseError,
    EntryReadError,
    NotOpenError,
    OpenError,
    OpenErrorKind,
    OperationError,
    OperationErrorKind,
    ZipError,
)
from safezip.constants import (
    ZIP_ER_EXISTS,
    ZIP_ER_INCONS,
    ZIP_ER_INVAL,
    ZIP_ER_MEMORY,
    ZIP_ER_NOENT,
    ZIP_ER_NOZIP,
    ZIP_ER_OPEN,
    ZIP_ER_READ,
    ZIP_ER_SEEK,
    ZIP_ER_WRITE,
)
from safezip.engine import error_string


class TestOpenErrorKind:
    @pytest.mark.parametrize(
        "code,kind",
        [
            (ZIP_ER_EXISTS, OpenErrorKind.ALREADY_EXISTS),
            (ZIP_ER_INCONS, OpenErrorKind.INCONSISTENT),
            (ZIP_ER_INVAL, OpenErrorKind.INVALID_ARGUMENT),
            (ZIP_ER_MEMORY, OpenErrorKind.OUT_OF_MEMORY),
            (ZIP_ER_NOENT, OpenErrorKind.NOT_FOUND),
            (ZIP_ER_NOZIP, OpenErrorKind.NOT_A_ZIP),
            (ZIP_ER_OPEN, OpenErrorKind.CANNOT_OPEN),
            (ZIP_ER_READ, OpenErrorKind.READ_FAILURE),
            (ZIP_ER_SEEK, OpenErrorKind.SEEK_UNSUPPORTED),
        ],
    )
    def test_code_mapping(self, code, kind):
        assert OpenErrorKind.from_code(code) is kind

    def test_unmapped_code(self):
        assert OpenErrorKind.from_code(ZIP_ER_WRITE) is OpenErrorKind.UNKNOWN
        assert OpenErrorKind.from_code(-42) is OpenErrorKind.UNKNOWN

    def test_open_error_message(self):
        error = OpenError.from_code(ZIP_ER_NOENT, "/tmp/a.zip")
        assert error.kind is OpenErrorKind.NOT_FOUND
        assert error.code == ZIP_ER_NOENT
        assert error.path == "/tmp/a.zip"
        assert str(error).endswith(": /tmp/a.zip")
        assert isinstance(error, ZipError)


class TestOperationErrors:
    def test_kind_and_display(self):
        error = CloseError("Write error: No space left on device", ZIP_ER_WRITE)
        assert error.kind is OperationErrorKind.CLOSE_FAILED
        assert error.message == "Write error: No space left on device"
        assert str(error) == "close failed: Write error: No space left on device"
        assert isinstance(error, OperationError)

    def test_not_open(self):
        error = NotOpenError("archive invalid")
        assert error.kind is OperationErrorKind.NOT_OPEN
        assert error.code is None

    def test_read_error_is_os_error(self):
        error = EntryReadError("Unable to read data", ZIP_ER_READ)
        assert isinstance(error, OSError)
        assert isinstance(error, ZipError)
        assert str(error) == "Unable to read data"
        assert error.code == ZIP_ER_READ

    def test_engine_error_string(self):
        assert error_string(ZIP_ER_NOENT) == "No such file"
        assert error_string(999) == "Unknown error 999"
