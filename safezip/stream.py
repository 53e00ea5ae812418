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
Blocking and asyncio read helpers for entries.

Both conventions call ``Entry.readinto`` and therefore return the same bytes
in the same order. Engine reads are synchronous and cannot be interrupted.
``AsyncEntryReader`` runs each read on an executor thread so the event loop
keeps running while the engine decompresses.
"""

import asyncio
import logging
from concurrent.futures import Executor
from typing import AsyncIterator, BinaryIO, Iterator, Optional

from .constants import DEFAULT_CHUNK_SIZE
from .entry import Entry

logger = logging.getLogger(__name__)


def _resolve_chunk_size(entry: Entry, chunk_size: Optional[int]) -> int:
    """Explicit size, else the archive's configured size, else the default."""
    if chunk_size is not None:
        return chunk_size
    archive = entry.archive
    if archive is None:
        return DEFAULT_CHUNK_SIZE
    return archive.options.chunk_size


def read_chunks(entry: Entry, chunk_size: Optional[int] = None) -> Iterator[bytes]:
    """Yield the rest of an open entry in chunks of at most ``chunk_size`` bytes.

    ``chunk_size`` defaults to the ``chunk_size`` option of the entry's archive.

    Raises:
        EntryReadError: If the entry is not open or a read fails.
    """
    buffer = bytearray(_resolve_chunk_size(entry, chunk_size))
    view = memoryview(buffer)
    while True:
        count = entry.readinto(view)
        if count == 0:
            return
        yield bytes(view[:count])


def copy_entry(entry: Entry, target: BinaryIO, chunk_size: Optional[int] = None) -> int:
    """Copy the rest of an open entry into ``target``.

    Returns:
        Number of bytes copied.
    """
    total = 0
    for chunk in read_chunks(entry, chunk_size):
        target.write(chunk)
        total += len(chunk)
    return total


def extract_entry(entry: Entry, target_path, chunk_size: Optional[int] = None) -> int:
    """Write the rest of an open entry to a file on disk.

    Returns:
        Number of bytes written.
    """
    with open(target_path, "wb") as target:
        total = copy_entry(entry, target, chunk_size)
    logger.debug("Extracted %s to %s (%d bytes)", entry.name, target_path, total)
    return total


class AsyncEntryReader:
    """Cooperative reader for an open entry.

    Each read is handed to ``executor`` (the loop's default executor when
    None) and awaited, so the event loop is never blocked by the engine.
    Reads through one reader are serialized by an ``asyncio.Lock``; pass the
    same ``lock`` to readers of entries from one archive to serialize them
    too. ``chunk_size`` defaults to the ``chunk_size`` option of the entry's
    archive.

    Cancelling a waiting task does not stop a read that has already started
    on the executor. The lock stays held until that read returns, and its
    bytes are consumed from the stream.

    Example:
        async with AsyncEntryReader(entry) as reader:
            async for chunk in reader:
                ...
    """

    def __init__(
        self,
        entry: Entry,
        executor: Optional[Executor] = None,
        chunk_size: Optional[int] = None,
        lock: Optional[asyncio.Lock] = None,
    ):
        self._entry = entry
        self._executor = executor
        self._chunk_size = _resolve_chunk_size(entry, chunk_size)
        # Created on first use so it belongs to the running loop
        self._lock = lock

    @property
    def entry(self) -> Entry:
        return self._entry

    def _get_lock(self) -> asyncio.Lock:
        if self._lock is None:
            self._lock = asyncio.Lock()
        return self._lock

    async def readinto(self, buffer) -> int:
        """Read up to ``len(buffer)`` bytes into ``buffer``; 0 at end of stream."""
        async with self._get_lock():
            loop = asyncio.get_running_loop()
            future = loop.run_in_executor(self._executor, self._entry.readinto, buffer)
            try:
                return await asyncio.shield(future)
            except asyncio.CancelledError:
                await _wait_uncancellable(future)
                raise

    async def read(self, size: int = -1) -> bytes:
        """Read up to ``size`` bytes, or everything left when ``size`` is negative."""
        if size < 0:
            return await self.readall()
        buffer = bytearray(size)
        count = await self.readinto(buffer)
        del buffer[count:]
        return bytes(buffer)

    async def readall(self) -> bytes:
        parts = []
        async for chunk in self:
            parts.append(chunk)
        return b"".join(parts)

    async def copy_to(self, target: BinaryIO) -> int:
        """Copy the rest of the entry into ``target``. Returns bytes copied."""
        total = 0
        async for chunk in self:
            target.write(chunk)
            total += len(chunk)
        return total

    def __aiter__(self) -> AsyncIterator[bytes]:
        return self._chunks()

    async def _chunks(self) -> AsyncIterator[bytes]:
        while True:
            chunk = await self.read(self._chunk_size)
            if not chunk:
                return
            yield chunk

    async def aclose(self) -> None:
        async with self._get_lock():
            self._entry.close()

    async def __aenter__(self) -> "AsyncEntryReader":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.aclose()


async def _wait_uncancellable(future: asyncio.Future) -> None:
    """Wait for an executor read to finish, absorbing further cancellation."""
    while not future.done():
        try:
            await asyncio.wait([future])
        except asyncio.CancelledError:
            continue
    if not future.cancelled() and future.exception() is not None:
        logger.debug("Read abandoned by a cancelled task failed: %s", future.exception())
