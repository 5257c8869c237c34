"""Object database: store/load zlib-compressed loose objects by hash, prefix lookup."""

from __future__ import annotations

import logging
import zlib
from pathlib import Path
from typing import List

from .constants import DEFAULT_COMPRESSION, MIN_PREFIX_LEN, SHA1_HEX_LEN
from .errors import (
    AmbiguousObjectNameError,
    ObjectDecompressError,
    ObjectNotFoundError,
    ObjectReadError,
    ObjectWriteError,
)
from .objects import AnyObject, GitObject, decode_object, encode_object
from .util import is_hex, normalize_sha, sha1_hash, write_bytes_atomic

logger = logging.getLogger(__name__)


class ObjectDB:
    """Loose object storage under <objects_dir>/<aa>/<bb...>."""

    def __init__(self, objects_dir: Path, compression_level: int = DEFAULT_COMPRESSION) -> None:
        self.objects_dir = Path(objects_dir)
        self.compression_level = compression_level

    def object_path(self, sha: str) -> Path:
        """Path to loose object file. sha must be full 40-char hex (any case)."""
        sha = normalize_sha(sha)
        return self.objects_dir / sha[:2] / sha[2:]

    def exists(self, sha: str) -> bool:
        """Return True if object exists (sha must be full 40-char)."""
        return self.object_path(sha).is_file()

    def put_raw(self, encoded: bytes, persist: bool = True) -> str:
        """Hash canonical bytes; if persist, write them compressed unless already present."""
        sha = sha1_hash(encoded)
        if not persist:
            return sha
        path = self.object_path(sha)
        if path.exists():
            logger.debug("object %s already in store, skipped", sha)
            return sha
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise ObjectWriteError(f"could not create {path.parent}: {e}", path.parent) from e
        try:
            write_bytes_atomic(path, zlib.compress(encoded, self.compression_level))
        except OSError as e:
            raise ObjectWriteError(f"could not write {path}: {e}", path) from e
        logger.debug("stored object %s (%d bytes)", sha, len(encoded))
        return sha

    def put(self, obj: GitObject, persist: bool = True) -> str:
        """Encode obj, return its 40-char hash; write to the store when persist is True."""
        return self.put_raw(encode_object(obj), persist)

    def get_raw(self, sha: str) -> bytes:
        """Load decompressed canonical bytes. Raises ObjectNotFoundError, ObjectDecompressError."""
        path = self.object_path(sha)
        try:
            compressed = path.read_bytes()
        except FileNotFoundError as e:
            raise ObjectNotFoundError(f"object {sha.lower()} not found") from e
        except OSError as e:
            raise ObjectReadError(f"could not read object {sha.lower()}: {e}") from e
        try:
            return zlib.decompress(compressed)
        except zlib.error as e:
            raise ObjectDecompressError(f"object {sha.lower()} is not a valid zlib stream: {e}") from e

    def get(self, sha: str) -> AnyObject:
        """Load and decode object by full 40-char hash."""
        return decode_object(self.get_raw(sha))

    def prefix_lookup(self, prefix: str) -> List[str]:
        """Return list of full 40-char hashes that start with prefix. Prefix min 4 chars."""
        if len(prefix) < MIN_PREFIX_LEN or not is_hex(prefix):
            return []
        prefix = prefix.lower()
        if len(prefix) == SHA1_HEX_LEN:
            return [prefix] if self.exists(prefix) else []
        pre_dir = self.objects_dir / prefix[:2]
        if not pre_dir.is_dir():
            return []
        matches = []
        suffix = prefix[2:]
        for f in pre_dir.iterdir():
            if f.is_file() and f.name.startswith(suffix):
                full_sha = prefix[:2] + f.name
                if len(full_sha) == SHA1_HEX_LEN and is_hex(full_sha):
                    matches.append(full_sha)
        return sorted(matches)

    def resolve_prefix(self, prefix: str) -> str:
        """Resolve prefix to full hash. Raises ObjectNotFoundError or AmbiguousObjectNameError."""
        matches = self.prefix_lookup(prefix)
        if not matches:
            raise ObjectNotFoundError(f"object {prefix} not found")
        if len(matches) > 1:
            raise AmbiguousObjectNameError(f"prefix '{prefix}' is ambiguous: {matches}")
        return matches[0]
