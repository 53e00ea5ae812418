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
Entry: one archive member and its optional read stream.
"""

import io
import logging
import weakref
from typing import TYPE_CHECKING, Optional

from . import engine
from .errors import EntryOpenError, EntryReadError, EntryStateError, NotOpenError

if TYPE_CHECKING:
    from .archive import Archive

logger = logging.getLogger(__name__)


class Entry(io.RawIOBase):
    """A member of an archive, readable as a raw binary stream.

    An Entry keeps a weak reference to its Archive and never keeps it
    alive. Every operation checks that the archive still exists and is
    open. The stream moves through ``unopened -> open -> closed``; a closed
    entry may be opened again while its archive is open, but opening an
    entry that is already open raises ``EntryStateError``. A stream
    invalidated by its archive counts as closed when opening again.

    ``readinto`` is the primitive; ``read``, ``readall`` and iteration come
    from ``io.RawIOBase``. A read of 0 bytes means end of stream.
    """

    def __init__(self, archive: "Archive", name: str):
        super().__init__()
        self._archive_ref = weakref.ref(archive)
        self._name = name
        self._stream: Optional[engine.FileHandle] = None

    @property
    def name(self) -> str:
        return self._name

    @property
    def archive(self) -> Optional["Archive"]:
        """The parent archive, or None once it has been garbage collected."""
        return self._archive_ref()

    @property
    def is_open(self) -> bool:
        return self._stream is not None

    @property
    def closed(self) -> bool:
        return self._stream is None

    @property
    def index(self) -> int:
        """Current position of the entry in the archive, looked up on each access."""
        return self._live_archive().stat(self._name).index

    def _live_archive(self) -> "Archive":
        archive = self._archive_ref()
        if archive is None or not archive.is_open:
            raise NotOpenError("archive invalid")
        return archive

    def open(self) -> None:
        """Open the read stream.

        Raises:
            EntryStateError: If the entry is already open.
            NotOpenError: If the archive is closed or gone.
            EntryOpenError: If the engine cannot open the entry.
        """
        if self._stream is not None:
            if engine.file_is_valid(self._stream):
                raise EntryStateError(f"Entry is already open: {self._name}")
            # Invalidated when the archive closed or tried to
            self.close()

        handle = self._live_archive()._require_handle()
        stream = engine.fopen(handle, self._name)
        if stream is None:
            raise EntryOpenError(
                f"Unable to open file in zip: {self._name}: {engine.strerror(handle)}",
                engine.error_code(handle),
            )
        self._stream = stream
        logger.debug("Opened entry %s", self._name)

    def readable(self) -> bool:
        return True

    def readinto(self, buffer) -> int:
        """Read up to ``len(buffer)`` bytes into ``buffer``.

        Returns:
            The number of bytes read; 0 at end of stream.

        Raises:
            EntryReadError: If the entry is not open, the archive was closed,
                or the engine reports a read failure.
        """
        stream = self._stream
        if stream is None:
            raise EntryReadError(f"Zip entry is not open: {self._name}")

        archive = self._archive_ref()
        if archive is None or not archive.is_open:
            raise EntryReadError(f"Containing zip archive was closed: {self._name}")

        count = engine.fread(stream, buffer)
        if count < 0:
            raise EntryReadError(
                f"Unable to read data from {self._name}: {engine.file_strerror(stream)}",
                engine.file_error_code(stream),
            )
        return count

    def close(self) -> None:
        """Release the read stream. Does nothing if the entry is not open."""
        stream, self._stream = self._stream, None
        if stream is None:
            return
        if engine.fclose(stream) != 0:
            logger.warning("Error closing entry %s: %s", self._name, engine.file_strerror(stream))
        logger.debug("Closed entry %s", self._name)

    def __enter__(self) -> "Entry":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    def __repr__(self) -> str:
        state = "open" if self.is_open else "closed"
        return f"<Entry {self._name!r} {state}>"
