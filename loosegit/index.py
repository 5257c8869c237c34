"""Staging area: parse (and write) the git binary index, DIRC versions 2 and 3."""

from __future__ import annotations

import struct
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable, List, Tuple

from .constants import (
    DIRC_SIGNATURE,
    INDEX_CHECKSUM_LEN,
    INDEX_ENTRY_FIXED_LEN,
    INDEX_EXTENDED_FLAG,
    INDEX_HEADER_LEN,
    INDEX_NAME_MASK,
    INDEX_VERSIONS,
    SHA1_LEN,
)
from .errors import (
    IndexChecksumError,
    IndexCorruptError,
    IndexEntryCountError,
    IndexSignatureError,
    UnsupportedIndexVersionError,
)
from .objects import TreeEntry
from .sha1 import digest

# ctime s/ns, mtime s/ns, dev, ino, mode, uid, gid, size, sha1, flags
_ENTRY_STRUCT = struct.Struct(">10I20sH")
_HEADER_STRUCT = struct.Struct(">4sII")
_EXT_HEADER_STRUCT = struct.Struct(">4sI")


@dataclass
class IndexEntry:
    """Single index entry. sha1 is 40-char hex."""

    ctime_s: int
    ctime_ns: int
    mtime_s: int
    mtime_ns: int
    dev: int
    ino: int
    mode: int
    uid: int
    gid: int
    size: int
    sha1: str
    flags: int
    path: str
    extended_flags: int = 0

    def to_tree_entry(self) -> TreeEntry:
        """Project to a tree entry: mode, path as name, sha1 as object hash."""
        return TreeEntry(self.mode, self.path, self.sha1)


@dataclass
class Index:
    """Parsed index: version, entries in file order, raw extensions and stored checksum."""

    version: int
    entries: List[IndexEntry] = field(default_factory=list)
    extensions: List[Tuple[bytes, bytes]] = field(default_factory=list)
    checksum: bytes = b""


def _entry_length(fixed_len: int, path_len: int) -> int:
    """Entry length padded with NULs (at least one) to a multiple of 8."""
    return ((fixed_len + path_len + 8) // 8) * 8


def _parse_entry(body: bytes, pos: int, version: int) -> Tuple[IndexEntry, int]:
    """Parse one entry at pos; return (entry, next_pos)."""
    if pos + INDEX_ENTRY_FIXED_LEN > len(body):
        raise IndexCorruptError(f"index entry at offset {pos} is truncated")
    (
        ctime_s,
        ctime_ns,
        mtime_s,
        mtime_ns,
        dev,
        ino,
        mode,
        uid,
        gid,
        size,
        sha1_bin,
        flags,
    ) = _ENTRY_STRUCT.unpack_from(body, pos)
    fixed_len = INDEX_ENTRY_FIXED_LEN
    extended_flags = 0
    if version >= 3 and flags & INDEX_EXTENDED_FLAG:
        if pos + fixed_len + 2 > len(body):
            raise IndexCorruptError(f"index entry at offset {pos} is truncated")
        (extended_flags,) = struct.unpack_from(">H", body, pos + fixed_len)
        fixed_len += 2
    path_start = pos + fixed_len
    nul = body.find(b"\0", path_start)
    if nul == -1:
        raise IndexCorruptError(f"index entry at offset {pos} has no NUL-terminated path")
    try:
        path = body[path_start:nul].decode("utf-8")
    except UnicodeDecodeError as e:
        raise IndexCorruptError(f"index entry path is not valid UTF-8: {e}") from e
    next_pos = pos + _entry_length(fixed_len, nul - path_start)
    if next_pos > len(body):
        raise IndexCorruptError(f"index entry {path!r} runs past end of index")
    entry = IndexEntry(
        ctime_s=ctime_s,
        ctime_ns=ctime_ns,
        mtime_s=mtime_s,
        mtime_ns=mtime_ns,
        dev=dev,
        ino=ino,
        mode=mode,
        uid=uid,
        gid=gid,
        size=size,
        sha1=sha1_bin.hex(),
        flags=flags,
        path=path,
        extended_flags=extended_flags,
    )
    return entry, next_pos


def _parse_extensions(body: bytes, pos: int) -> List[Tuple[bytes, bytes]]:
    extensions: List[Tuple[bytes, bytes]] = []
    while pos < len(body):
        if pos + _EXT_HEADER_STRUCT.size > len(body):
            raise IndexCorruptError(f"index extension header at offset {pos} is truncated")
        sig, size = _EXT_HEADER_STRUCT.unpack_from(body, pos)
        if not 0x41 <= sig[0] <= 0x5A:
            raise IndexCorruptError(f"invalid index extension signature {sig!r} at offset {pos}")
        pos += _EXT_HEADER_STRUCT.size
        if pos + size > len(body):
            raise IndexCorruptError(f"index extension {sig!r} is truncated")
        extensions.append((sig, body[pos : pos + size]))
        pos += size
    return extensions


def parse_index(data: bytes, verify_checksum: bool = False) -> Index:
    """Parse index bytes. The trailing checksum is only checked when verify_checksum is True."""
    if len(data) < INDEX_HEADER_LEN + INDEX_CHECKSUM_LEN:
        raise IndexCorruptError("index file is too short")
    sig, version, count = _HEADER_STRUCT.unpack_from(data, 0)
    if sig != DIRC_SIGNATURE:
        raise IndexSignatureError(f"invalid index signature {sig!r}")
    if version not in INDEX_VERSIONS:
        raise UnsupportedIndexVersionError(f"unsupported index version {version}")
    body = data[:-INDEX_CHECKSUM_LEN]
    checksum = data[-INDEX_CHECKSUM_LEN:]
    if verify_checksum and digest(body) != checksum:
        raise IndexChecksumError("index checksum mismatch")

    entries: List[IndexEntry] = []
    pos = INDEX_HEADER_LEN
    while pos < len(body) and len(entries) < count:
        entry, pos = _parse_entry(body, pos, version)
        entries.append(entry)
    if len(entries) != count:
        raise IndexEntryCountError(count, len(entries))
    return Index(
        version=version,
        entries=entries,
        extensions=_parse_extensions(body, pos),
        checksum=checksum,
    )


def read_index(path: Path, verify_checksum: bool = False) -> Index:
    """Read and parse the index file at path."""
    return parse_index(Path(path).read_bytes(), verify_checksum=verify_checksum)


def serialize_index(entries: Iterable[IndexEntry], version: int = 2) -> bytes:
    """Build a DIRC index: header, entries sorted by path and padded to 8 bytes, SHA-1 trailer."""
    if version not in INDEX_VERSIONS:
        raise UnsupportedIndexVersionError(f"unsupported index version {version}")
    ordered = sorted(entries, key=lambda e: e.path.encode("utf-8"))
    chunks = [_HEADER_STRUCT.pack(DIRC_SIGNATURE, version, len(ordered))]
    for ent in ordered:
        path_bytes = ent.path.encode("utf-8")
        flags = (ent.flags & ~INDEX_NAME_MASK) | min(len(path_bytes), INDEX_NAME_MASK)
        extended = version >= 3 and bool(flags & INDEX_EXTENDED_FLAG)
        if version < 3:
            flags &= ~INDEX_EXTENDED_FLAG
        sha1_bin = bytes.fromhex(ent.sha1)
        if len(sha1_bin) != SHA1_LEN:
            raise ValueError(f"index entry {ent.path!r} has invalid sha1")
        entry = _ENTRY_STRUCT.pack(
            ent.ctime_s,
            ent.ctime_ns,
            ent.mtime_s,
            ent.mtime_ns,
            ent.dev,
            ent.ino,
            ent.mode,
            ent.uid,
            ent.gid,
            ent.size,
            sha1_bin,
            flags,
        )
        fixed_len = INDEX_ENTRY_FIXED_LEN
        if extended:
            entry += struct.pack(">H", ent.extended_flags)
            fixed_len += 2
        entry += path_bytes
        entry += b"\0" * (_entry_length(fixed_len, len(path_bytes)) - fixed_len - len(path_bytes))
        chunks.append(entry)
    content = b"".join(chunks)
    return content + digest(content)
