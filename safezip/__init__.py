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
SAFEZIP - safe handle lifecycle and streaming over a zip engine.

Archives own their engine handle, entries borrow the archive and own an
optional read stream, and every engine failure is raised as a structured
error.
"""

import logging

from .archive import Archive
from .config import ArchiveOptions
from .entry import Entry
from .errors import (
    AddError,
    CloseError,
    DeleteError,
    EntryOpenError,
    EntryReadError,
    EntryStateError,
    NativeError,
    NotOpenError,
    OpenError,
    OpenErrorKind,
    OperationError,
    OperationErrorKind,
    StatError,
    ZipError,
)
from .pack import pack_file
from .stream import AsyncEntryReader, copy_entry, extract_entry, read_chunks
from .structures import EntryStat

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    "Archive",
    "ArchiveOptions",
    "Entry",
    "EntryStat",
    "AsyncEntryReader",
    "read_chunks",
    "copy_entry",
    "extract_entry",
    "pack_file",
    "ZipError",
    "OpenError",
    "OpenErrorKind",
    "OperationError",
    "OperationErrorKind",
    "NotOpenError",
    "AddError",
    "DeleteError",
    "CloseError",
    "StatError",
    "NativeError",
    "EntryOpenError",
    "EntryStateError",
    "EntryReadError",
]

__version__ = "0.1.0"
