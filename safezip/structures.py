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
Record types shared by the engine and the archive wrapper.

``EntryStat`` is the metadata record returned by a stat call.
``LocalFileHeader`` is parsed during the consistency check that compares
each local header with its central directory record.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import BinaryIO, Optional

from .constants import (
    COMP_STORED,
    EM_NONE,
    LOCAL_FILE_HEADER,
    METHOD_TO_NAME,
)
from .errors import ZipFormatError
from .utils import read_exact, read_uint16, read_uint32


@dataclass
class EntryStat:
    """Metadata for one archive member.

    ``valid`` is a bit mask of the ``ZIP_STAT_*`` constants telling which
    fields were filled in. Entries added but not yet written have no
    compressed size or CRC until the archive is closed.
    """

    name: str
    index: int
    size: int = 0
    comp_size: int = 0
    mtime: Optional[datetime] = None
    crc: int = 0
    comp_method: int = COMP_STORED
    encryption_method: int = EM_NONE
    flags: int = 0
    valid: int = 0

    @property
    def compression(self) -> str:
        """Compression method name, or ``"unknown"``."""
        return METHOD_TO_NAME.get(self.comp_method, "unknown")

    @property
    def is_dir(self) -> bool:
        return self.name.endswith("/")


@dataclass
class LocalFileHeader:
    """Local file header structure.

    This header appears before each file's compressed data in the ZIP archive.
    """

    version: int
    flags: int
    compression_method: int
    mod_time: int
    mod_date: int
    crc32: int
    compressed_size: int
    uncompressed_size: int
    filename: bytes
    extra: bytes


def parse_local_file_header(f: BinaryIO) -> LocalFileHeader:
    """Parse a local file header from the current file position.

    Args:
        f: Binary file-like object positioned at the start of a local file header.

    Returns:
        LocalFileHeader object.

    Raises:
        ZipFormatError: If the signature is invalid or file is truncated.
    """
    signature = read_uint32(f)
    if signature != LOCAL_FILE_HEADER:
        raise ZipFormatError(
            f"Invalid local file header signature: 0x{signature:08X}, "
            f"expected 0x{LOCAL_FILE_HEADER:08X}"
        )

    version = read_uint16(f)
    flags = read_uint16(f)
    compression_method = read_uint16(f)
    mod_time = read_uint16(f)
    mod_date = read_uint16(f)
    crc32 = read_uint32(f)
    compressed_size = read_uint32(f)
    uncompressed_size = read_uint32(f)
    filename_len = read_uint16(f)
    extra_len = read_uint16(f)

    filename = read_exact(f, filename_len)
    extra = read_exact(f, extra_len)

    return LocalFileHeader(
        version=version,
        flags=flags,
        compression_method=compression_method,
        mod_time=mod_time,
        mod_date=mod_date,
        crc32=crc32,
        compressed_size=compressed_size,
        uncompressed_size=uncompressed_size,
        filename=filename,
        extra=extra,
    )
