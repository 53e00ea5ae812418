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
One-shot packing of a single file into an archive.
"""

import logging
import os
from typing import Optional

from .archive import Archive
from .config import ArchiveOptions
from .constants import ZIP_ER_NOENT
from .errors import AddError, ZipError

logger = logging.getLogger(__name__)


def pack_file(
    container_path,
    source_path,
    entry_name: str,
    options: Optional[ArchiveOptions] = None,
) -> None:
    """Store the file at ``source_path`` as ``entry_name`` in ``container_path``.

    The archive is created if it does not exist; an existing entry with the
    same name is replaced. On any failure the archive is left untouched and
    the error is raised to the caller.

    Raises:
        OpenError: If the archive cannot be opened or created.
        AddError: If the source file does not exist or is rejected.
        CloseError: If writing the archive fails.
    """
    if not os.path.isfile(source_path):
        raise AddError(f"Unable to add zip file {source_path}: no such file", ZIP_ER_NOENT)

    archive = Archive.open(container_path, create=True, options=options)
    try:
        archive.add_file(source_path, entry_name)
        archive.close()
    except ZipError:
        archive.discard()
        raise

    logger.info("Packed %s into %s as %s", source_path, container_path, entry_name)
