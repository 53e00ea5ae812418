"""
Copyright 2025 DNAi inc.

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at

    http://www.apache.org/licenses/LICENSE-2.0

Unless required by applicable law or agreed to in writing, software
distributed under the License is distributed on an "AS IS" BASIS,
WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
See the License for the specific language governing permissions and
limitations under the License.
"""

"""
Exception classes for archive and entry operations.

Engine calls report failure through sentinels and integer error codes. This
module turns those into a closed set of structured errors: ``OpenError`` for
failures while opening an archive, the ``OperationError`` family for
failures afterwards, and ``EntryReadError`` for stream reads. Every error
carries a ``kind`` that callers can match on and the engine's own diagnostic
text in ``message``.
"""

from enum import Enum
from typing import Optional

from .constants import (
    ZIP_ER_EXISTS,
    ZIP_ER_INCONS,
    ZIP_ER_INVAL,
    ZIP_ER_MEMORY,
    ZIP_ER_NOENT,
    ZIP_ER_NOZIP,
    ZIP_ER_OPEN,
    ZIP_ER_READ,
    ZIP_ER_SEEK,
)


class OpenErrorKind(Enum):
    """Reasons an archive could not be opened."""

    ALREADY_EXISTS = "The file specified by path exists and exclusive mode is set"
    INCONSISTENT = "Inconsistencies were found in the file specified by path"
    INVALID_ARGUMENT = "The path argument is invalid"
    OUT_OF_MEMORY = "Required memory could not be allocated"
    NOT_FOUND = "The file specified by path does not exist and create is not set"
    NOT_A_ZIP = "The file specified by path is not a zip archive"
    CANNOT_OPEN = "The file specified by path could not be opened"
    READ_FAILURE = "A read error occurred"
    SEEK_UNSUPPORTED = "The file specified by path does not allow seeks"
    UNKNOWN = "Unexpected error while trying to open the zip"

    @classmethod
    def from_code(cls, code: int) -> "OpenErrorKind":
        """Map an engine error code returned by open to a kind."""
        return _OPEN_CODES.get(code, cls.UNKNOWN)


_OPEN_CODES = {
    ZIP_ER_EXISTS: OpenErrorKind.ALREADY_EXISTS,
    ZIP_ER_INCONS: OpenErrorKind.INCONSISTENT,
    ZIP_ER_INVAL: OpenErrorKind.INVALID_ARGUMENT,
    ZIP_ER_MEMORY: OpenErrorKind.OUT_OF_MEMORY,
    ZIP_ER_NOENT: OpenErrorKind.NOT_FOUND,
    ZIP_ER_NOZIP: OpenErrorKind.NOT_A_ZIP,
    ZIP_ER_OPEN: OpenErrorKind.CANNOT_OPEN,
    ZIP_ER_READ: OpenErrorKind.READ_FAILURE,
    ZIP_ER_SEEK: OpenErrorKind.SEEK_UNSUPPORTED,
}


class OperationErrorKind(Enum):
    """Reasons an operation on an open archive or entry failed."""

    NOT_OPEN = "not open"
    ADD_FAILED = "add failed"
    DELETE_FAILED = "delete failed"
    CLOSE_FAILED = "close failed"
    STAT_FAILED = "stat failed"
    NATIVE_FAILURE = "engine failure"
    ENTRY_OPEN_FAILED = "entry open failed"
    ENTRY_STATE = "invalid entry state"


class ZipError(Exception):
    """Base exception class for all archive errors."""

    def __init__(self, message: str, code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.code = code


class ZipFormatError(ZipError):
    """Raised inside the engine when container bytes are malformed.

    The engine converts it to an error code before returning, so callers
    of the archive API see an ``OpenError`` or ``EntryReadError`` instead.
    """

    pass


class OpenError(ZipError):
    """Raised when an archive cannot be opened.

    Attributes:
        kind: The ``OpenErrorKind`` derived from the engine error code.
        path: The path that was being opened.
        code: The raw engine error code.
    """

    def __init__(self, kind: OpenErrorKind, path: str = "", code: Optional[int] = None):
        message = kind.value
        if path:
            message = f"{message}: {path}"
        super().__init__(message, code)
        self.kind = kind
        self.path = path

    @classmethod
    def from_code(cls, code: int, path: str = "") -> "OpenError":
        return cls(OpenErrorKind.from_code(code), path, code)


class OperationError(ZipError):
    """Raised when an operation on an archive or entry fails."""

    kind = OperationErrorKind.NATIVE_FAILURE

    def __str__(self) -> str:
        return f"{self.kind.value}: {self.message}"


class NotOpenError(OperationError):
    """Raised when an operation is attempted on a closed archive or entry."""

    kind = OperationErrorKind.NOT_OPEN


class AddError(OperationError):
    """Raised when the engine rejects a new source."""

    kind = OperationErrorKind.ADD_FAILED


class DeleteError(OperationError):
    """Raised when the engine refuses to delete an entry."""

    kind = OperationErrorKind.DELETE_FAILED


class CloseError(OperationError):
    """Raised when finalizing the archive fails.

    The archive stays open after this error so that close can be retried
    or the archive discarded.
    """

    kind = OperationErrorKind.CLOSE_FAILED


class StatError(OperationError):
    """Raised when entry metadata cannot be looked up."""

    kind = OperationErrorKind.STAT_FAILED


class NativeError(OperationError):
    """Raised for an engine status code with no more specific kind."""

    kind = OperationErrorKind.NATIVE_FAILURE


class EntryOpenError(OperationError):
    """Raised when the engine cannot open a read stream for an entry."""

    kind = OperationErrorKind.ENTRY_OPEN_FAILED


class EntryStateError(OperationError):
    """Raised when an entry is opened twice."""

    kind = OperationErrorKind.ENTRY_STATE


class EntryReadError(ZipError, OSError):
    """Raised when reading an entry stream fails.

    This is an ``OSError`` so that code written against file objects can
    handle it like any other I/O failure.
    """

    def __str__(self) -> str:
        return self.message
