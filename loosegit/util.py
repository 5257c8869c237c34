"""Helper functions: sha validation, atomic writes, file modes."""

from __future__ import annotations

import os
import tempfile
from pathlib import Path

from .constants import SHA1_HEX_LEN
from .errors import InvalidObjectNameError
from .sha1 import hexdigest

_HEX_DIGITS = frozenset("0123456789abcdef")


def sha1_hash(data: bytes) -> str:
    """Compute SHA-1 hex digest of data."""
    return hexdigest(data)


def is_hex(s: str) -> bool:
    """Return True if s is non-empty and only lowercase or uppercase hex digits."""
    return bool(s) and all(c in _HEX_DIGITS for c in s.lower())


def normalize_sha(sha: str) -> str:
    """Lowercase a full 40-char hex digest. Raises InvalidObjectNameError otherwise."""
    if not isinstance(sha, str) or len(sha) != SHA1_HEX_LEN or not is_hex(sha):
        raise InvalidObjectNameError(f"not a valid object name: {sha!r}")
    return sha.lower()


def read_bytes(path: Path) -> bytes:
    """Read file as bytes. Raises FileNotFoundError if not found."""
    return Path(path).read_bytes()


def write_bytes_atomic(path: Path, data: bytes) -> None:
    """Write bytes to file atomically (temp then replace)."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp = tempfile.mkstemp(dir=path.parent, prefix=".tmp_")
    try:
        with os.fdopen(fd, "wb") as f:
            f.write(data)
        os.replace(tmp, path)
    except Exception:
        if os.path.exists(tmp):
            os.unlink(tmp)
        raise


def write_text_atomic(path: Path, text: str) -> None:
    """Write text to file atomically."""
    write_bytes_atomic(path, text.encode("utf-8"))


def read_text_safe(path: Path) -> str | None:
    """Read file as text; return None if not found or error."""
    try:
        return Path(path).read_text(encoding="utf-8")
    except (FileNotFoundError, OSError):
        return None


def file_mode(path: Path) -> int:
    """Raw st_mode bits of path (follows symlinks)."""
    return Path(path).stat().st_mode


def normalize_path(repo_root: Path, path: str) -> Path:
    """Resolve path relative to repo root; reject paths escaping root."""
    repo_root = Path(repo_root).resolve()
    resolved = (repo_root / path).resolve()
    try:
        resolved.relative_to(repo_root)
    except ValueError:
        raise ValueError(f"path escapes repository: {path}") from None
    return resolved
