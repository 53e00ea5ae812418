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
Engine constants: open flags, add flags, error codes, compression methods.

The numeric error codes follow the libzip numbering so that codes surfaced
through the error taxonomy are meaningful to anyone who has used that
library.
"""

# Local file header signature
LOCAL_FILE_HEADER = 0x04034B50  # "PK\x03\x04"

# Local file header size (fixed part)
LOCAL_FILE_HEADER_SIZE = 30

# Compression methods
COMP_STORED = 0  # No compression
COMP_DEFLATE = 8  # Deflate compression (zlib)
COMP_BZIP2 = 12  # BZIP2 compression
COMP_LZMA = 14  # LZMA compression

# Compression method names (for API)
COMPRESSION_STORED = "stored"
COMPRESSION_DEFLATE = "deflate"
COMPRESSION_BZIP2 = "bzip2"
COMPRESSION_LZMA = "lzma"

# Compression method mapping
COMPRESSION_METHODS = {
    COMPRESSION_STORED: COMP_STORED,
    COMPRESSION_DEFLATE: COMP_DEFLATE,
    COMPRESSION_BZIP2: COMP_BZIP2,
    COMPRESSION_LZMA: COMP_LZMA,
}

# Reverse mapping
METHOD_TO_NAME = {
    COMP_STORED: COMPRESSION_STORED,
    COMP_DEFLATE: COMPRESSION_DEFLATE,
    COMP_BZIP2: COMPRESSION_BZIP2,
    COMP_LZMA: COMPRESSION_LZMA,
}

# Encryption methods reported by stat
EM_NONE = 0
EM_TRAD_PKWARE = 1

# General purpose bit flags
FLAG_ENCRYPTED = 0x0001  # File is encrypted
FLAG_DATA_DESCRIPTOR = 0x0008  # Data descriptor follows file data
FLAG_UTF8 = 0x0800  # UTF-8 encoding for filename/comment

# Archive open flags
ZIP_CREATE = 1
ZIP_EXCL = 2
ZIP_CHECKCONS = 4
ZIP_TRUNCATE = 8
ZIP_RDONLY = 16

# Per-call flags for naming and adding entries
ZIP_FL_ENC_GUESS = 0
ZIP_FL_OVERWRITE = 8192
ZIP_FL_ENC_UTF_8 = 2048

# Stat validity bits
ZIP_STAT_NAME = 0x0001
ZIP_STAT_INDEX = 0x0002
ZIP_STAT_SIZE = 0x0004
ZIP_STAT_COMP_SIZE = 0x0008
ZIP_STAT_MTIME = 0x0010
ZIP_STAT_CRC = 0x0020
ZIP_STAT_COMP_METHOD = 0x0040
ZIP_STAT_ENCRYPTION_METHOD = 0x0080
ZIP_STAT_FLAGS = 0x0100
ZIP_STAT_ALL = 0x01FF

# Error codes
ZIP_ER_OK = 0
ZIP_ER_RENAME = 2
ZIP_ER_CLOSE = 3
ZIP_ER_SEEK = 4
ZIP_ER_READ = 5
ZIP_ER_WRITE = 6
ZIP_ER_CRC = 7
ZIP_ER_ZIPCLOSED = 8
ZIP_ER_NOENT = 9
ZIP_ER_EXISTS = 10
ZIP_ER_OPEN = 11
ZIP_ER_TMPOPEN = 12
ZIP_ER_ZLIB = 13
ZIP_ER_MEMORY = 14
ZIP_ER_CHANGED = 15
ZIP_ER_COMPNOTSUPP = 16
ZIP_ER_EOF = 17
ZIP_ER_INVAL = 18
ZIP_ER_NOZIP = 19
ZIP_ER_INTERNAL = 20
ZIP_ER_INCONS = 21
ZIP_ER_REMOVE = 22
ZIP_ER_DELETED = 23
ZIP_ER_ENCRNOTSUPP = 24
ZIP_ER_RDONLY = 25
ZIP_ER_INUSE = 29

# Human readable text for each error code
ERROR_STRINGS = {
    ZIP_ER_OK: "No error",
    ZIP_ER_RENAME: "Renaming temporary file failed",
    ZIP_ER_CLOSE: "Closing zip archive failed",
    ZIP_ER_SEEK: "Seek error",
    ZIP_ER_READ: "Read error",
    ZIP_ER_WRITE: "Write error",
    ZIP_ER_CRC: "CRC error",
    ZIP_ER_ZIPCLOSED: "Containing zip archive was closed",
    ZIP_ER_NOENT: "No such file",
    ZIP_ER_EXISTS: "File already exists",
    ZIP_ER_OPEN: "Can't open file",
    ZIP_ER_TMPOPEN: "Failure to create temporary file",
    ZIP_ER_ZLIB: "Zlib error",
    ZIP_ER_MEMORY: "Malloc failure",
    ZIP_ER_CHANGED: "Entry has been changed",
    ZIP_ER_COMPNOTSUPP: "Compression method not supported",
    ZIP_ER_EOF: "Premature end of file",
    ZIP_ER_INVAL: "Invalid argument",
    ZIP_ER_NOZIP: "Not a zip archive",
    ZIP_ER_INTERNAL: "Internal error",
    ZIP_ER_INCONS: "Zip archive inconsistent",
    ZIP_ER_REMOVE: "Can't remove file",
    ZIP_ER_DELETED: "Entry has been deleted",
    ZIP_ER_ENCRNOTSUPP: "Encryption method not supported",
    ZIP_ER_RDONLY: "Read-only archive",
    ZIP_ER_INUSE: "Resource still in use",
}

# Largest entry name accepted by the engine (bytes, UTF-8)
MAX_NAME_LENGTH = 0xFFFF

# Default chunk size for streaming reads
DEFAULT_CHUNK_SIZE = 64 * 1024
