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
Handle-based zip engine.

This module exposes a small, stateful, C-style API over the standard library
``zipfile`` codec: functions take opaque handles and report failure through
sentinels (``None`` or ``-1``) plus an error code and message stored on the
handle. Nothing in this module raises for an expected failure; the archive
and entry wrappers translate sentinels into exceptions.

Changes (added sources, deletions) are buffered on the archive handle and
applied by ``close``, which writes a new container next to the original and
atomically replaces it. File sources are read only at that point.

The engine is not thread-safe. A handle and the streams opened from it must
be used by one thread at a time.
"""

import io
import logging
import os
import shutil
import tempfile
import zipfile
import zlib
from datetime import datetime
from typing import BinaryIO, Optional

from .constants import (
    COMP_DEFLATE,
    DEFAULT_CHUNK_SIZE,
    EM_NONE,
    EM_TRAD_PKWARE,
    ERROR_STRINGS,
    FLAG_DATA_DESCRIPTOR,
    FLAG_ENCRYPTED,
    FLAG_UTF8,
    LOCAL_FILE_HEADER_SIZE,
    METHOD_TO_NAME,
    ZIP_CHECKCONS,
    ZIP_CREATE,
    ZIP_ER_CHANGED,
    ZIP_ER_CLOSE,
    ZIP_ER_COMPNOTSUPP,
    ZIP_ER_CRC,
    ZIP_ER_DELETED,
    ZIP_ER_ENCRNOTSUPP,
    ZIP_ER_EOF,
    ZIP_ER_EXISTS,
    ZIP_ER_INCONS,
    ZIP_ER_INTERNAL,
    ZIP_ER_INVAL,
    ZIP_ER_MEMORY,
    ZIP_ER_NOENT,
    ZIP_ER_NOZIP,
    ZIP_ER_OK,
    ZIP_ER_OPEN,
    ZIP_ER_RDONLY,
    ZIP_ER_READ,
    ZIP_ER_REMOVE,
    ZIP_ER_RENAME,
    ZIP_ER_SEEK,
    ZIP_ER_TMPOPEN,
    ZIP_ER_WRITE,
    ZIP_ER_ZIPCLOSED,
    ZIP_ER_ZLIB,
    ZIP_EXCL,
    ZIP_FL_OVERWRITE,
    ZIP_RDONLY,
    ZIP_STAT_ALL,
    ZIP_STAT_COMP_METHOD,
    ZIP_STAT_ENCRYPTION_METHOD,
    ZIP_STAT_INDEX,
    ZIP_STAT_MTIME,
    ZIP_STAT_NAME,
    ZIP_STAT_SIZE,
    ZIP_TRUNCATE,
)
from .errors import ZipFormatError
from .structures import EntryStat, parse_local_file_header
from .utils import check_entry_name, date_time_tuple, normalize_name

logger = logging.getLogger(__name__)


class _Failure(Exception):
    """Internal carrier for an error code while a multi-step call unwinds."""

    def __init__(self, code: int, detail: Optional[str] = None):
        super().__init__(code, detail)
        self.code = code
        self.detail = detail


class ErrorState:
    """Last error recorded on a handle."""

    __slots__ = ("code", "detail")

    def __init__(self) -> None:
        self.code = ZIP_ER_OK
        self.detail: Optional[str] = None

    def set(self, code: int, detail: Optional[str] = None) -> None:
        self.code = code
        self.detail = detail

    def clear(self) -> None:
        self.set(ZIP_ER_OK)

    def __str__(self) -> str:
        text = error_string(self.code)
        if self.detail:
            return f"{text}: {self.detail}"
        return text


class Source:
    """Data for an entry that has been added but not yet written."""

    size: Optional[int] = None

    def open(self) -> BinaryIO:
        raise NotImplementedError

    def mtime(self) -> datetime:
        return datetime.now()


class BufferSource(Source):
    def __init__(self, data: bytes):
        self.data = bytes(data)
        self.size = len(self.data)

    def open(self) -> BinaryIO:
        return io.BytesIO(self.data)


class FileSource(Source):
    """A file on disk, read lazily when the archive is closed."""

    def __init__(self, path: str, start: int = 0, length: int = -1):
        self.path = path
        self.start = start
        self.length = length
        if length >= 0:
            self.size = length

    def open(self) -> BinaryIO:
        f = open(self.path, "rb")
        if self.start:
            f.seek(self.start)
        return f

    def mtime(self) -> datetime:
        try:
            return datetime.fromtimestamp(os.stat(self.path).st_mtime)
        except OSError:
            return datetime.now()


class _Member:
    __slots__ = ("name", "info", "source", "comp_method", "added_at", "deleted")

    def __init__(
        self,
        name: str,
        info: Optional[zipfile.ZipInfo] = None,
        source: Optional[Source] = None,
    ):
        self.name = name
        self.info = info
        self.source = source
        self.comp_method = info.compress_type if info is not None else COMP_DEFLATE
        self.added_at = datetime.now()
        self.deleted = False


class ArchiveHandle:
    """Opaque state for one open container. Do not touch its attributes."""

    def __init__(self, path: str, flags: int):
        self.path = path
        self.flags = flags
        self.members: list[_Member] = []
        self.error = ErrorState()
        self.streams: set["FileHandle"] = set()
        self.changed = False
        self.valid = True
        self._file: Optional[BinaryIO] = None
        self._zip: Optional[zipfile.ZipFile] = None

    def __repr__(self) -> str:
        state = "open" if self.valid else "closed"
        return f"<ArchiveHandle {self.path!r} {state}>"


class FileHandle:
    """Opaque state for one open entry stream."""

    def __init__(self, archive: ArchiveHandle, name: str, stream: BinaryIO):
        self.archive = archive
        self.name = name
        self.error = ErrorState()
        self.valid = True
        self._stream: Optional[BinaryIO] = stream

    def __repr__(self) -> str:
        return f"<FileHandle {self.name!r}>"


def error_string(code: int) -> str:
    """Return the generic message for an error code."""
    return ERROR_STRINGS.get(code, f"Unknown error {code}")


def _os_detail(exc: OSError) -> str:
    return exc.strerror or str(exc)


def _raw_name(info: zipfile.ZipInfo) -> Optional[bytes]:
    encoding = "utf-8" if info.flag_bits & FLAG_UTF8 else "cp437"
    try:
        return info.orig_filename.encode(encoding)
    except UnicodeEncodeError:
        return None


def _info_mtime(info: zipfile.ZipInfo) -> Optional[datetime]:
    try:
        return datetime(*info.date_time)
    except ValueError:
        return None


def _check_consistency(f: BinaryIO, archive: zipfile.ZipFile) -> None:
    """Compare every central directory record with its local header.

    Raises:
        ZipFormatError: On the first mismatch found.
    """
    f.seek(0, io.SEEK_END)
    file_size = f.tell()

    for info in archive.infolist():
        if info.header_offset < 0 or info.header_offset + LOCAL_FILE_HEADER_SIZE > file_size:
            raise ZipFormatError(
                f"Invalid local header offset for entry '{info.filename}': {info.header_offset}"
            )

        f.seek(info.header_offset)
        header = parse_local_file_header(f)

        raw_name = _raw_name(info)
        if raw_name is not None and header.filename != raw_name:
            raise ZipFormatError(f"Local header name mismatch for entry '{info.filename}'")

        if header.compression_method != info.compress_type:
            raise ZipFormatError(f"Compression method mismatch for entry '{info.filename}'")

        # Sizes and CRC live in the data descriptor when the flag is set
        if not header.flags & FLAG_DATA_DESCRIPTOR:
            if header.crc32 != info.CRC:
                raise ZipFormatError(f"CRC mismatch between headers for entry '{info.filename}'")
            if header.compressed_size != 0xFFFFFFFF and header.compressed_size != info.compress_size:
                raise ZipFormatError(f"Compressed size mismatch for entry '{info.filename}'")

        data_end = f.tell() + info.compress_size
        if data_end > file_size:
            raise ZipFormatError(
                f"Compressed data extends beyond file for entry '{info.filename}'"
            )


def open_archive(path, flags: int = 0) -> tuple[Optional[ArchiveHandle], int]:
    """Open or create a container.

    Args:
        path: Filesystem path of the container.
        flags: Bitwise OR of ``ZIP_CREATE``, ``ZIP_EXCL``, ``ZIP_CHECKCONS``,
            ``ZIP_TRUNCATE`` and ``ZIP_RDONLY``.

    Returns:
        ``(handle, ZIP_ER_OK)`` on success, ``(None, code)`` on failure.
    """
    try:
        path = os.fspath(path)
    except TypeError:
        return None, ZIP_ER_INVAL
    if not isinstance(path, str) or not path or "\x00" in path:
        return None, ZIP_ER_INVAL

    exists = os.path.exists(path)
    if exists and flags & ZIP_EXCL:
        return None, ZIP_ER_EXISTS
    if not exists:
        if not flags & ZIP_CREATE:
            return None, ZIP_ER_NOENT
        logger.debug("Creating new archive %s", path)
        return ArchiveHandle(path, flags), ZIP_ER_OK

    handle = ArchiveHandle(path, flags)
    if flags & ZIP_TRUNCATE:
        handle.changed = True
        return handle, ZIP_ER_OK

    try:
        f = open(path, "rb")
    except MemoryError:
        return None, ZIP_ER_MEMORY
    except OSError as e:
        logger.debug("Cannot open %s: %s", path, e)
        return None, ZIP_ER_OPEN

    try:
        if not f.seekable():
            f.close()
            return None, ZIP_ER_SEEK

        # A zero-length file is an empty archive
        if f.seek(0, io.SEEK_END) == 0:
            f.close()
            return handle, ZIP_ER_OK

        if not zipfile.is_zipfile(f):
            f.close()
            return None, ZIP_ER_NOZIP

        f.seek(0)
        archive = zipfile.ZipFile(f)
        if flags & ZIP_CHECKCONS:
            _check_consistency(f, archive)
    except (zipfile.BadZipFile, ZipFormatError) as e:
        logger.debug("Inconsistent archive %s: %s", path, e)
        f.close()
        return None, ZIP_ER_INCONS
    except MemoryError:
        f.close()
        return None, ZIP_ER_MEMORY
    except OSError as e:
        logger.debug("Read error on %s: %s", path, e)
        f.close()
        return None, ZIP_ER_READ

    handle._file = f
    handle._zip = archive
    handle.members = [_Member(info.filename, info=info) for info in archive.infolist()]
    return handle, ZIP_ER_OK


def source_buffer(data) -> Optional[Source]:
    """Create a source from bytes-like data. Returns None for other types."""
    if not isinstance(data, (bytes, bytearray, memoryview)):
        return None
    return BufferSource(data)


def source_file(path, start: int = 0, length: int = -1) -> Optional[Source]:
    """Create a source reading ``length`` bytes of ``path`` from ``start``.

    The file is not opened until the archive is closed. ``length`` of -1
    reads to the end of the file.
    """
    try:
        path = os.fspath(path)
    except TypeError:
        return None
    if not path or start < 0 or length < -1:
        return None
    return FileSource(path, start, length)


def _usable(handle: Optional[ArchiveHandle]) -> bool:
    return handle is not None and handle.valid


def _locate(handle: ArchiveHandle, name: str) -> int:
    for index, member in enumerate(handle.members):
        if not member.deleted and member.name == name:
            return index
    return -1


def _writable(handle: ArchiveHandle) -> bool:
    if handle.flags & ZIP_RDONLY:
        handle.error.set(ZIP_ER_RDONLY)
        return False
    return True


def file_add(handle: ArchiveHandle, name: str, source: Optional[Source], flags: int = 0) -> int:
    """Add ``source`` under ``name``.

    With ``ZIP_FL_OVERWRITE`` an existing entry of the same name is replaced
    in place and keeps its index.

    Returns:
        The entry index, or -1 on failure.
    """
    if not _usable(handle):
        return -1
    if not _writable(handle):
        return -1
    if source is None:
        handle.error.set(ZIP_ER_INVAL, "Invalid source")
        return -1

    reason = check_entry_name(name)
    if reason is not None:
        handle.error.set(ZIP_ER_INVAL, reason)
        return -1
    name = normalize_name(name)

    index = _locate(handle, name)
    if index >= 0:
        if not flags & ZIP_FL_OVERWRITE:
            handle.error.set(ZIP_ER_EXISTS, name)
            return -1
        handle.members[index] = _Member(name, source=source)
    else:
        handle.members.append(_Member(name, source=source))
        index = len(handle.members) - 1

    handle.changed = True
    return index


def set_file_compression(handle: ArchiveHandle, index: int, method: int) -> int:
    """Choose the compression method used when entry ``index`` is written."""
    if not _usable(handle):
        return -1
    if not 0 <= index < len(handle.members):
        handle.error.set(ZIP_ER_INVAL)
        return -1
    if method not in METHOD_TO_NAME:
        handle.error.set(ZIP_ER_COMPNOTSUPP, str(method))
        return -1

    member = handle.members[index]
    if member.comp_method != method:
        member.comp_method = method
        handle.changed = True
    return 0


def name_locate(handle: ArchiveHandle, name: str) -> int:
    """Return the index of ``name``, or -1 if there is no such entry."""
    if not _usable(handle):
        return -1
    index = _locate(handle, normalize_name(name))
    if index < 0:
        handle.error.set(ZIP_ER_NOENT, name)
    return index


def stat(handle: ArchiveHandle, name: str) -> Optional[EntryStat]:
    """Return metadata for ``name``, or None on failure."""
    index = name_locate(handle, name)
    if index < 0:
        return None
    return stat_index(handle, index)


def stat_index(handle: ArchiveHandle, index: int) -> Optional[EntryStat]:
    if not _usable(handle):
        return None
    if not 0 <= index < len(handle.members):
        handle.error.set(ZIP_ER_INVAL)
        return None

    member = handle.members[index]
    if member.deleted:
        handle.error.set(ZIP_ER_DELETED)
        return None

    info = member.info
    if member.source is None and info is not None:
        encrypted = info.flag_bits & FLAG_ENCRYPTED
        return EntryStat(
            name=member.name,
            index=index,
            size=info.file_size,
            comp_size=info.compress_size,
            mtime=_info_mtime(info),
            crc=info.CRC,
            comp_method=member.comp_method,
            encryption_method=EM_TRAD_PKWARE if encrypted else EM_NONE,
            flags=info.flag_bits,
            valid=ZIP_STAT_ALL,
        )

    valid = (
        ZIP_STAT_NAME
        | ZIP_STAT_INDEX
        | ZIP_STAT_MTIME
        | ZIP_STAT_COMP_METHOD
        | ZIP_STAT_ENCRYPTION_METHOD
    )
    size = member.source.size
    if size is None and isinstance(member.source, FileSource):
        try:
            size = max(os.stat(member.source.path).st_size - member.source.start, 0)
        except OSError:
            size = None
    if size is not None:
        valid |= ZIP_STAT_SIZE

    return EntryStat(
        name=member.name,
        index=index,
        size=size or 0,
        mtime=member.added_at,
        comp_method=member.comp_method,
        valid=valid,
    )


def delete(handle: ArchiveHandle, index: int) -> int:
    """Mark entry ``index`` as deleted. Returns 0 or -1."""
    if not _usable(handle):
        return -1
    if not _writable(handle):
        return -1
    if not 0 <= index < len(handle.members):
        handle.error.set(ZIP_ER_INVAL, f"Index {index} out of range")
        return -1

    member = handle.members[index]
    if member.deleted:
        handle.error.set(ZIP_ER_DELETED)
        return -1

    member.deleted = True
    handle.changed = True
    return 0


def get_num_entries(handle: ArchiveHandle) -> int:
    """Number of entry slots, deleted ones included. -1 for a closed handle."""
    if not _usable(handle):
        return -1
    return len(handle.members)


def get_name(handle: ArchiveHandle, index: int) -> Optional[str]:
    """Name of entry ``index``; None for a deleted entry or bad index."""
    if not _usable(handle):
        return None
    if not 0 <= index < len(handle.members):
        handle.error.set(ZIP_ER_INVAL)
        return None
    member = handle.members[index]
    if member.deleted:
        handle.error.set(ZIP_ER_DELETED)
        return None
    return member.name


def fopen(handle: ArchiveHandle, name: str) -> Optional[FileHandle]:
    """Open a read stream for ``name``. Returns None on failure.

    Entries whose data was added or replaced since the archive was opened
    cannot be read until the archive is closed and reopened.
    """
    index = name_locate(handle, name)
    if index < 0:
        return None

    member = handle.members[index]
    if member.source is not None or member.info is None or handle._zip is None:
        handle.error.set(ZIP_ER_CHANGED, member.name)
        return None

    info = member.info
    if info.flag_bits & FLAG_ENCRYPTED:
        handle.error.set(ZIP_ER_ENCRNOTSUPP, member.name)
        return None
    if info.compress_type not in METHOD_TO_NAME:
        handle.error.set(ZIP_ER_COMPNOTSUPP, f"method {info.compress_type}")
        return None

    try:
        stream = handle._zip.open(info)
    except NotImplementedError as e:
        handle.error.set(ZIP_ER_COMPNOTSUPP, str(e))
        return None
    except zipfile.BadZipFile as e:
        handle.error.set(ZIP_ER_INCONS, str(e))
        return None
    except OSError as e:
        handle.error.set(ZIP_ER_READ, _os_detail(e))
        return None

    fh = FileHandle(handle, member.name, stream)
    handle.streams.add(fh)
    return fh


def fread(fh: Optional[FileHandle], buffer) -> int:
    """Read up to ``len(buffer)`` decompressed bytes into ``buffer``.

    Returns:
        The number of bytes read (0 at end of stream), or -1 on failure.
    """
    if fh is None:
        return -1
    if not fh.valid or fh._stream is None:
        fh.error.set(ZIP_ER_ZIPCLOSED)
        return -1

    try:
        count = fh._stream.readinto(buffer)
    except zipfile.BadZipFile as e:
        fh.error.set(ZIP_ER_CRC, str(e))
        return -1
    except zlib.error as e:
        fh.error.set(ZIP_ER_ZLIB, str(e))
        return -1
    except EOFError as e:
        fh.error.set(ZIP_ER_EOF, str(e))
        return -1
    except (OSError, ValueError) as e:
        fh.error.set(ZIP_ER_READ, str(e))
        return -1
    return count or 0


def fclose(fh: Optional[FileHandle]) -> int:
    """Release a stream. Closing an invalidated stream is a no-op."""
    if fh is None:
        return -1
    stream, fh._stream = fh._stream, None
    fh.valid = False
    fh.archive.streams.discard(fh)
    if stream is not None:
        try:
            stream.close()
        except OSError as e:
            fh.error.set(ZIP_ER_CLOSE, _os_detail(e))
            return -1
    return 0


def strerror(handle: ArchiveHandle) -> str:
    """Message for the last error recorded on an archive handle."""
    return str(handle.error)


def file_strerror(fh: FileHandle) -> str:
    """Message for the last error recorded on a stream."""
    return str(fh.error)


def error_code(handle: ArchiveHandle) -> int:
    return handle.error.code


def file_error_code(fh: FileHandle) -> int:
    return fh.error.code


def file_is_valid(fh: Optional[FileHandle]) -> bool:
    """Whether a stream is still readable; false once its archive closed it."""
    return fh is not None and fh.valid


def _invalidate_streams(handle: ArchiveHandle) -> None:
    for fh in list(handle.streams):
        stream, fh._stream = fh._stream, None
        fh.valid = False
        fh.error.set(ZIP_ER_ZIPCLOSED)
        if stream is not None:
            stream.close()
    handle.streams.clear()


def _release(handle: ArchiveHandle) -> None:
    _invalidate_streams(handle)
    if handle._zip is not None:
        handle._zip.close()
        handle._zip = None
    if handle._file is not None:
        handle._file.close()
        handle._file = None
    handle.valid = False


def _copy(src: BinaryIO, dst: BinaryIO, length: int = -1) -> None:
    if length < 0:
        shutil.copyfileobj(src, dst, DEFAULT_CHUNK_SIZE)
        return
    while length > 0:
        chunk = src.read(min(DEFAULT_CHUNK_SIZE, length))
        if not chunk:
            raise _Failure(ZIP_ER_EOF, "Source ended early")
        dst.write(chunk)
        length -= len(chunk)


def _write_member(handle: ArchiveHandle, out: zipfile.ZipFile, member: _Member) -> None:
    if member.source is None:
        info = member.info
        if handle._zip is None:
            raise _Failure(ZIP_ER_READ, f"Original archive is not open: {handle.path}")
        if info.flag_bits & FLAG_ENCRYPTED:
            raise _Failure(ZIP_ER_ENCRNOTSUPP, member.name)
        target = zipfile.ZipInfo(member.name, info.date_time)
        target.compress_type = member.comp_method
        target.external_attr = info.external_attr
        target.create_system = info.create_system
        target.comment = info.comment
        target.file_size = info.file_size
        with handle._zip.open(info) as src, out.open(target, "w") as dst:
            _copy(src, dst)
        return

    source = member.source
    target = zipfile.ZipInfo(member.name, date_time_tuple(source.mtime()))
    target.compress_type = member.comp_method
    target.external_attr = 0o644 << 16
    try:
        src = source.open()
    except OSError as e:
        raise _Failure(ZIP_ER_OPEN, f"{getattr(source, 'path', member.name)}: {_os_detail(e)}") from e

    with src:
        if source.size is not None:
            target.file_size = source.size
        else:
            target.file_size = max(os.fstat(src.fileno()).st_size - getattr(source, "start", 0), 0)
        with out.open(target, "w") as dst:
            _copy(src, dst, source.size if source.size is not None else -1)


def _close_original(handle: ArchiveHandle) -> bool:
    """Close the original container. Returns whether it had been open."""
    was_open = handle._zip is not None
    if handle._zip is not None:
        handle._zip.close()
        handle._zip = None
    if handle._file is not None:
        handle._file.close()
        handle._file = None
    return was_open


def _reopen_original(handle: ArchiveHandle) -> None:
    try:
        f = open(handle.path, "rb")
    except OSError as e:
        logger.warning("Could not reopen %s: %s", handle.path, e)
        return
    try:
        handle._zip = zipfile.ZipFile(f)
    except (zipfile.BadZipFile, OSError) as e:
        f.close()
        logger.warning("Could not reopen %s: %s", handle.path, e)
        return
    handle._file = f


def _replace_original(handle: ArchiveHandle, replace) -> None:
    """Run ``replace`` with the original container closed.

    The original is reopened if ``replace`` fails so the handle stays usable.
    """
    was_open = _close_original(handle)
    try:
        replace()
    except BaseException:
        if was_open:
            _reopen_original(handle)
        raise


def _commit(handle: ArchiveHandle) -> None:
    live = [member for member in handle.members if not member.deleted]

    if not live:
        # An archive without entries is removed
        if os.path.exists(handle.path):
            try:
                _replace_original(handle, lambda: os.remove(handle.path))
            except OSError as e:
                raise _Failure(ZIP_ER_REMOVE, _os_detail(e)) from e
        return

    directory = os.path.dirname(os.path.abspath(handle.path))
    try:
        fd, temp_path = tempfile.mkstemp(prefix=".safezip-", suffix=".tmp", dir=directory)
    except OSError as e:
        raise _Failure(ZIP_ER_TMPOPEN, _os_detail(e)) from e

    try:
        with os.fdopen(fd, "wb") as f, zipfile.ZipFile(f, "w") as out:
            for member in live:
                _write_member(handle, out, member)
        try:
            _replace_original(handle, lambda: os.replace(temp_path, handle.path))
        except OSError as e:
            raise _Failure(ZIP_ER_RENAME, _os_detail(e)) from e
    except BaseException:
        try:
            os.remove(temp_path)
        except OSError:
            logger.warning("Could not remove temporary file %s", temp_path)
        raise


def close(handle: ArchiveHandle) -> int:
    """Write pending changes and release the handle.

    Open streams are invalidated. On failure the handle stays usable, its
    pending changes are kept, and -1 is returned.
    """
    if not _usable(handle):
        return -1

    if handle.changed:
        _invalidate_streams(handle)
        try:
            _commit(handle)
        except _Failure as e:
            handle.error.set(e.code, e.detail)
            return -1
        except NotImplementedError as e:
            handle.error.set(ZIP_ER_COMPNOTSUPP, str(e))
            return -1
        except (zipfile.BadZipFile, zlib.error) as e:
            handle.error.set(ZIP_ER_INCONS, str(e))
            return -1
        except RuntimeError as e:
            handle.error.set(ZIP_ER_INTERNAL, str(e))
            return -1
        except OSError as e:
            handle.error.set(ZIP_ER_WRITE, _os_detail(e))
            return -1
        logger.debug("Wrote %s", handle.path)

    _release(handle)
    return 0


def discard(handle: Optional[ArchiveHandle]) -> None:
    """Release the handle without writing pending changes."""
    if not _usable(handle):
        return
    _release(handle)
