"""Constants for loosegit: file modes, object kinds, store and index layout."""

from __future__ import annotations

# Git file modes (octal)
MODE_FILE = 0o100644
MODE_DIR = 0o040000

# Object types
OBJ_BLOB = "blob"
OBJ_TREE = "tree"
OBJ_COMMIT = "commit"
OBJ_TAG = "tag"

# Kinds recognized in a header but never constructed by this package
UNSUPPORTED_KINDS = (OBJ_COMMIT, OBJ_TAG)

# Repository layout under the work tree
GIT_DIR_NAME = ".git"
OBJECTS_DIR_NAME = "objects"
INDEX_FILENAME = "index"
CONFIG_FILENAME = "config"

# Entries whose name starts with this are never hashed into a tree
IGNORE_PREFIX = "."

# SHA-1 sizes
SHA1_LEN = 20
SHA1_HEX_LEN = 40

# Minimum prefix length for abbreviated object names (git uses 4)
MIN_PREFIX_LEN = 4

# zlib default compression level
DEFAULT_COMPRESSION = -1

# Staging index (DIRC)
DIRC_SIGNATURE = b"DIRC"
INDEX_VERSIONS = (2, 3)
INDEX_HEADER_LEN = 12
INDEX_CHECKSUM_LEN = SHA1_LEN
INDEX_ENTRY_FIXED_LEN = 62
INDEX_EXTENDED_FLAG = 0x4000
INDEX_NAME_MASK = 0x0FFF
