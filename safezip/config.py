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
Options controlling how archives are opened and written.

Options are passed explicitly to ``Archive.open`` or loaded from the
environment with ``ArchiveOptions.from_env()``:

    SAFEZIP_CHECK_CONSISTENCY   "true"/"false", default "true"
    SAFEZIP_COMPRESSION         stored | deflate | bzip2 | lzma, default "deflate"
    SAFEZIP_CHUNK_SIZE          bytes per streaming read, default 65536
"""

import logging
import os
from dataclasses import dataclass

from .constants import (
    COMPRESSION_DEFLATE,
    COMPRESSION_METHODS,
    DEFAULT_CHUNK_SIZE,
    ZIP_CHECKCONS,
    ZIP_CREATE,
    ZIP_EXCL,
    ZIP_RDONLY,
    ZIP_TRUNCATE,
)

logger = logging.getLogger(__name__)

_TRUE = {"1", "true", "yes", "on"}
_FALSE = {"0", "false", "no", "off"}


def _parse_bool(name: str, value: str) -> bool:
    lowered = value.strip().lower()
    if lowered in _TRUE:
        return True
    if lowered in _FALSE:
        return False
    raise ValueError(f"{name} must be a boolean, got {value!r}")


@dataclass(frozen=True)
class ArchiveOptions:
    """Archive open and write options.

    Attributes:
        check_consistency: Compare central directory and local headers on open
        exclusive: Fail if the archive already exists
        truncate: Treat an existing archive as empty
        read_only: Reject additions and deletions
        compression: Compression method name for added entries
        chunk_size: Read size used by the streaming helpers
    """

    check_consistency: bool = True
    exclusive: bool = False
    truncate: bool = False
    read_only: bool = False
    compression: str = COMPRESSION_DEFLATE
    chunk_size: int = DEFAULT_CHUNK_SIZE

    def __post_init__(self) -> None:
        if self.compression not in COMPRESSION_METHODS:
            raise ValueError(
                f"Unsupported compression method: {self.compression} "
                f"(expected one of {', '.join(sorted(COMPRESSION_METHODS))})"
            )
        if self.chunk_size <= 0:
            raise ValueError(f"chunk_size must be positive, got {self.chunk_size}")

    @property
    def compression_method(self) -> int:
        """Numeric compression method id."""
        return COMPRESSION_METHODS[self.compression]

    def engine_flags(self, create: bool) -> int:
        """Open flags for the engine."""
        flags = 0
        if create:
            flags |= ZIP_CREATE
        if self.check_consistency:
            flags |= ZIP_CHECKCONS
        if self.exclusive:
            flags |= ZIP_EXCL
        if self.truncate:
            flags |= ZIP_TRUNCATE
        if self.read_only:
            flags |= ZIP_RDONLY
        return flags

    @classmethod
    def from_env(cls) -> "ArchiveOptions":
        """Load options from environment variables."""
        options = cls(
            check_consistency=_parse_bool(
                "SAFEZIP_CHECK_CONSISTENCY", os.getenv("SAFEZIP_CHECK_CONSISTENCY", "true")
            ),
            compression=os.getenv("SAFEZIP_COMPRESSION", COMPRESSION_DEFLATE).strip().lower(),
            chunk_size=int(os.getenv("SAFEZIP_CHUNK_SIZE", str(DEFAULT_CHUNK_SIZE))),
        )
        logger.debug("Loaded archive options from environment: %s", options)
        return options


DEFAULT_OPTIONS = ArchiveOptions()
