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
Archive: the owner of one engine container handle.

This module provides the Archive class. An Archive is the only object that
holds the engine handle for its container; every operation checks that the
handle is still present and raises ``NotOpenError`` otherwise.
"""

import logging
import threading
from pathlib import Path
from typing import Optional

from . import engine
from .config import DEFAULT_OPTIONS, ArchiveOptions
from .constants import ZIP_FL_ENC_UTF_8, ZIP_FL_OVERWRITE
from .entry import Entry
from .errors import (
    AddError,
    CloseError,
    DeleteError,
    NativeError,
    NotOpenError,
    OpenError,
    StatError,
)
from .structures import EntryStat

logger = logging.getLogger(__name__)


class Archive:
    """A zip container opened through the engine.

    Additions and deletions are buffered by the engine and written when the
    archive is closed. Closing is idempotent. When used as a context
    manager the archive is closed on exit; if the block raised, a close
    failure is logged instead of replacing the original exception.

    An Archive and the entries taken from it belong to one thread at a
    time. Calls through the same Archive object are serialized by an
    internal lock, which keeps the two steps of ``delete_entry`` together.

    Example:
        with Archive.open("archive.zip", create=True) as z:
            z.add_buffer(b"Hello, World!", "hello.txt")

        with Archive.open("archive.zip") as z:
            entry = z.get_entry("hello.txt", open=True)
            data = entry.read()
    """

    def __init__(self, handle: engine.ArchiveHandle, path: Path, options: ArchiveOptions):
        """Wrap an engine handle. Use ``Archive.open`` instead."""
        self._handle: Optional[engine.ArchiveHandle] = handle
        self._path = path
        self._options = options
        self._lock = threading.RLock()

    @classmethod
    def open(
        cls, path, create: bool = False, options: Optional[ArchiveOptions] = None
    ) -> "Archive":
        """Open the archive at ``path``.

        Args:
            path: Filesystem path of the container (str or Path).
            create: Create an empty archive when ``path`` does not exist.
            options: Open and write options; defaults to ``DEFAULT_OPTIONS``.

        Returns:
            An open Archive.

        Raises:
            OpenError: With a kind describing why the engine refused.
        """
        options = options or DEFAULT_OPTIONS
        handle, code = engine.open_archive(path, options.engine_flags(create))
        if handle is None:
            raise OpenError.from_code(code, str(path))

        logger.debug("Opened archive %s", path)
        return cls(handle, Path(path), options)

    @property
    def path(self) -> Path:
        return self._path

    @property
    def options(self) -> ArchiveOptions:
        return self._options

    @property
    def is_open(self) -> bool:
        return self._handle is not None

    @property
    def num_entries(self) -> int:
        """Number of live entries, not counting deleted slots."""
        return len(self.entries())

    def _require_handle(self) -> engine.ArchiveHandle:
        handle = self._handle
        if handle is None:
            raise NotOpenError(f"Zip file is not open: {self._path}")
        return handle

    def _add(self, handle: engine.ArchiveHandle, source, name: str) -> None:
        index = engine.file_add(handle, name, source, ZIP_FL_OVERWRITE | ZIP_FL_ENC_UTF_8)
        if index < 0:
            raise AddError(
                f"Unable to add {name!r} to the zip: {engine.strerror(handle)}",
                engine.error_code(handle),
            )

        if engine.set_file_compression(handle, index, self._options.compression_method) < 0:
            raise AddError(
                f"Unable to set compression for {name!r}: {engine.strerror(handle)}",
                engine.error_code(handle),
            )

    def add_buffer(self, data: bytes, name: str) -> None:
        """Add in-memory data as entry ``name``, replacing any entry of that name.

        Raises:
            NotOpenError: If the archive is closed.
            AddError: If the engine rejects the data or the name.
        """
        with self._lock:
            handle = self._require_handle()
            source = engine.source_buffer(data)
            if source is None:
                raise AddError(
                    f"Unable to add {name!r} to the zip: expected bytes, got {type(data).__name__}"
                )
            self._add(handle, source, name)

    def add_file(self, path, name: str) -> None:
        """Add the file at ``path`` as entry ``name``.

        The file is not read now; its contents are copied when the archive
        is closed, so a missing or unreadable file is reported by ``close``.

        Raises:
            NotOpenError: If the archive is closed.
            AddError: If the engine rejects the source or the name.
        """
        with self._lock:
            handle = self._require_handle()
            source = engine.source_file(path)
            if source is None:
                raise AddError(f"Unable to add {name!r} to the zip: invalid source path {path!r}")
            self._add(handle, source, name)

    def stat(self, name: str) -> EntryStat:
        """Return metadata for entry ``name``.

        Raises:
            NotOpenError: If the archive is closed.
            StatError: If there is no such entry.
        """
        with self._lock:
            handle = self._require_handle()
            result = engine.stat(handle, name)
            if result is None:
                raise StatError(
                    f"Unable to stat {name!r}: {engine.strerror(handle)}",
                    engine.error_code(handle),
                )
            return result

    def delete_entry(self, name: str) -> None:
        """Delete entry ``name``. The deletion is written on close.

        Raises:
            NotOpenError: If the archive is closed.
            StatError: If there is no such entry.
            DeleteError: If the engine refuses the deletion.
        """
        with self._lock:
            handle = self._require_handle()
            index = self.stat(name).index
            if engine.delete(handle, index) != 0:
                raise DeleteError(
                    f"Unable to delete {name!r}: {engine.strerror(handle)}",
                    engine.error_code(handle),
                )

    def entries(self) -> list[Entry]:
        """Return the current entries, unopened, in engine order.

        Each call queries the engine again, so the result reflects any
        additions or deletions made since the previous call.
        """
        with self._lock:
            handle = self._require_handle()
            count = engine.get_num_entries(handle)
            if count < 0:
                raise NativeError("Invalid number of entries", engine.error_code(handle))

            entries = []
            for index in range(count):
                name = engine.get_name(handle, index)
                # Deleted slots have no name
                if name is not None:
                    entries.append(Entry(self, name))
            return entries

    def get_entry(self, name: str, open: bool = False) -> Optional[Entry]:
        """Find the first entry called ``name``.

        Args:
            name: Entry name to look for.
            open: Open the entry's read stream before returning it.

        Returns:
            The Entry, or None if no entry has that name.

        Raises:
            NotOpenError: If the archive is closed.
            EntryOpenError: If ``open`` is true and the stream cannot be opened.
        """
        entry = next((e for e in self.entries() if e.name == name), None)
        if entry is not None and open:
            entry.open()
        return entry

    def get_error(self, code: int) -> None:
        """Check an engine status code.

        Zero means success. Any other value raises ``NativeError`` with the
        engine's last error message.

        Raises:
            NotOpenError: If ``code`` is nonzero and the archive is closed.
            NativeError: If ``code`` is nonzero.
        """
        if code == 0:
            return
        handle = self._require_handle()
        raise NativeError(engine.strerror(handle), engine.error_code(handle))

    def close(self) -> None:
        """Write pending changes and release the engine handle.

        Closing a closed archive does nothing. If writing fails the archive
        stays open with its pending changes, so close can be retried or the
        archive discarded.

        Raises:
            CloseError: With the engine's message if writing fails.
        """
        with self._lock:
            handle = self._handle
            if handle is None:
                return
            if engine.close(handle) != 0:
                raise CloseError(engine.strerror(handle), engine.error_code(handle))
            self._handle = None
        logger.debug("Closed archive %s", self._path)

    def discard(self) -> None:
        """Release the engine handle without writing pending changes."""
        with self._lock:
            handle, self._handle = self._handle, None
            if handle is None:
                return
            engine.discard(handle)
        logger.debug("Discarded archive %s", self._path)

    def _close_at_scope_exit(self) -> None:
        if getattr(self, "_handle", None) is None:
            return
        try:
            self.close()
        except CloseError as e:
            logger.error("Unable to close zip file %s: %s", self._path, e)
            self.discard()

    def __str__(self) -> str:
        return str(self._path)

    def __repr__(self) -> str:
        state = "open" if self.is_open else "closed"
        return f"<Archive {str(self._path)!r} {state}>"

    def __enter__(self) -> "Archive":
        """Context manager entry."""
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        """Context manager exit."""
        if exc_type is None:
            self.close()
        else:
            self._close_at_scope_exit()

    def __del__(self) -> None:
        self._close_at_scope_exit()
