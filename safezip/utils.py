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
Utility functions used by the engine.

This module provides helpers for header timestamps, safe binary reads,
and entry name validation.
"""

import struct
from datetime import datetime
from typing import BinaryIO, Optional

from .constants import MAX_NAME_LENGTH
from .errors import ZipFormatError


def date_time_tuple(dt: datetime) -> tuple[int, int, int, int, int, int]:
    """Return ``dt`` as the six-field tuple stored in zip headers.

    Years outside the DOS range are clamped to 1980-2107.
    """
    year = min(max(dt.year, 1980), 2107)
    return (year, dt.month, dt.day, dt.hour, dt.minute, dt.second)


def read_exact(f: BinaryIO, size: int) -> bytes:
    """Read exactly 'size' bytes from file, raising ZipFormatError on short read.

    Args:
        f: Binary file-like object to read from.
        size: Number of bytes to read.

    Returns:
        Exactly 'size' bytes of data.

    Raises:
        ZipFormatError: If fewer than 'size' bytes could be read or size is invalid.
    """
    if size < 0:
        raise ZipFormatError(f"Invalid read size: {size} (must be non-negative)")

    data = f.read(size)
    if len(data) != size:
        raise ZipFormatError(
            f"Unexpected end of file: expected {size} bytes, got {len(data)}"
        )
    return data


def read_uint16(f: BinaryIO) -> int:
    """Read a little-endian 16-bit unsigned integer from file."""
    return struct.unpack("<H", read_exact(f, 2))[0]


def read_uint32(f: BinaryIO) -> int:
    """Read a little-endian 32-bit unsigned integer from file."""
    return struct.unpack("<I", read_exact(f, 4))[0]


def check_entry_name(name: str) -> Optional[str]:
    """Validate an entry name before it is handed to the engine.

    Args:
        name: Entry name (path within the archive).

    Returns:
        None when the name is acceptable, otherwise the reason it is not.
    """
    if not isinstance(name, str):
        return f"Entry name must be a string, not {type(name).__name__}"
    if not name:
        return "Entry name cannot be empty"
    if "\x00" in name:
        return "Entry name cannot contain null bytes"
    if len(name.encode("utf-8", errors="surrogatepass")) > MAX_NAME_LENGTH:
        return f"Entry name too long (max {MAX_NAME_LENGTH} bytes)"
    return None


def normalize_name(name: str) -> str:
    """Use forward slashes as the path separator inside the archive."""
    if "\\" in name:
        name = name.replace("\\", "/")
    return name
