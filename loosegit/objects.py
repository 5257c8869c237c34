"""Git objects: Blob and Tree with canonical framing '<kind> <size>\\0<payload>' and its parser."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import ClassVar, List, Union

from .constants import OBJ_BLOB, OBJ_TREE, SHA1_HEX_LEN, SHA1_LEN, UNSUPPORTED_KINDS
from .errors import (
    CorruptObjectError,
    CorruptTreeEntryError,
    InvalidObjectSizeError,
    InvalidTreeEntryError,
    UnknownObjectKindError,
    UnsupportedObjectKindError,
)
from .util import is_hex, sha1_hash

_OCTAL_DIGITS = frozenset(b"01234567")
_MAX_MODE = 0xFFFFFFFF


def _object_header(obj_type: str, size: int) -> bytes:
    """Header: '<type> <size>\\0'."""
    return f"{obj_type} {size}\0".encode()


class GitObject:
    """Base git object. Subclasses provide the kind tag and the payload bytes."""

    type: ClassVar[str] = ""

    def payload(self) -> bytes:
        raise NotImplementedError

    def encode(self) -> bytes:
        """Canonical uncompressed representation: header + payload."""
        body = self.payload()
        return _object_header(self.type, len(body)) + body

    def hash_id(self) -> str:
        """SHA-1 of the canonical representation (40-char hex)."""
        return sha1_hash(self.encode())


@dataclass
class Blob(GitObject):
    """Blob object: raw file content."""

    type: ClassVar[str] = OBJ_BLOB
    content: bytes = b""

    def payload(self) -> bytes:
        return bytes(self.content)


@dataclass(frozen=True)
class TreeEntry:
    """Single tree entry: mode (u32, written in octal), name, object hash (40-char hex)."""

    mode: int
    name: str
    sha: str

    def validate(self) -> None:
        if not self.name:
            raise InvalidTreeEntryError("tree entry name is empty")
        if "\0" in self.name:
            raise InvalidTreeEntryError(f"tree entry name contains NUL: {self.name!r}")
        if not 0 <= self.mode <= _MAX_MODE:
            raise InvalidTreeEntryError(f"tree entry mode out of range: {self.mode}")
        if len(self.sha) != SHA1_HEX_LEN or not is_hex(self.sha):
            raise InvalidTreeEntryError(f"tree entry {self.name!r} has invalid sha: {self.sha!r}")

    def to_bytes(self) -> bytes:
        """Format: b'{mode:o} {name}\\0' + 20-byte binary sha."""
        self.validate()
        return f"{self.mode:o} {self.name}\0".encode() + bytes.fromhex(self.sha)


def _entry_sort_key(entry: TreeEntry) -> bytes:
    return entry.name.encode("utf-8")


@dataclass
class Tree(GitObject):
    """Tree object: list of entries, written sorted by name (byte-wise)."""

    type: ClassVar[str] = OBJ_TREE
    entries: List[TreeEntry] = field(default_factory=list)

    def sorted_entries(self) -> List[TreeEntry]:
        return sorted(self.entries, key=_entry_sort_key)

    def add_entry(self, mode: int, name: str, sha: str) -> None:
        self.entries.append(TreeEntry(mode, name, sha.lower()))

    def payload(self) -> bytes:
        return b"".join(e.to_bytes() for e in self.sorted_entries())

    @classmethod
    def from_payload(cls, payload: bytes) -> "Tree":
        """Parse a tree payload: repeated '<octal mode> <name>\\0<20-byte sha>'."""
        entries: List[TreeEntry] = []
        pos = 0
        end = len(payload)
        while pos < end:
            sp = payload.find(b" ", pos)
            if sp == -1:
                raise CorruptTreeEntryError("tree entry has no mode separator")
            mode_bytes = payload[pos:sp]
            if not mode_bytes or not all(b in _OCTAL_DIGITS for b in mode_bytes):
                raise CorruptTreeEntryError(f"corrupted tree entry mode: {mode_bytes!r}")
            mode = int(mode_bytes, 8)
            if mode > _MAX_MODE:
                raise CorruptTreeEntryError(f"tree entry mode out of range: {mode_bytes!r}")
            nul = payload.find(b"\0", sp + 1)
            if nul == -1:
                raise CorruptTreeEntryError("tree entry name is not NUL-terminated")
            if nul == sp + 1:
                raise CorruptTreeEntryError("tree entry name is empty")
            try:
                name = payload[sp + 1 : nul].decode("utf-8")
            except UnicodeDecodeError as e:
                raise CorruptTreeEntryError(f"invalid tree entry name: {e}") from e
            sha_bin = payload[nul + 1 : nul + 1 + SHA1_LEN]
            if len(sha_bin) != SHA1_LEN:
                raise CorruptTreeEntryError(f"corrupted tree entry sha1 for {name!r}")
            entries.append(TreeEntry(mode, name, sha_bin.hex()))
            pos = nul + 1 + SHA1_LEN
        return cls(entries)


AnyObject = Union[Blob, Tree]


def encode_object(obj: GitObject) -> bytes:
    """Canonical bytes of a blob or tree."""
    if isinstance(obj, (Blob, Tree)):
        return obj.encode()
    raise UnsupportedObjectKindError(f"cannot encode object of kind {obj.type!r}")


def split_header(raw: bytes) -> tuple[str, bytes]:
    """Split canonical bytes into (kind, payload). Validates the size field and payload length."""
    if len(raw) <= 1:
        raise CorruptObjectError("corrupted object: too short")
    sp = raw.find(b" ")
    if sp == -1:
        raise CorruptObjectError("corrupted object: no space after kind")
    kind_bytes = raw[:sp]
    i = sp + 1
    n = len(raw)
    while i < n and 0x30 <= raw[i] <= 0x39:
        i += 1
    if i == n:
        raise CorruptObjectError("corrupted object: no NUL after size")
    if raw[i] != 0:
        raise CorruptObjectError("corrupted object: byte after size digits is not NUL")
    if i == sp + 1:
        raise CorruptObjectError("corrupted object: empty size")
    size = int(raw[sp + 1 : i])
    payload = raw[i + 1 : i + 1 + size]
    if len(payload) < size:
        raise InvalidObjectSizeError(f"invalid object size: header says {size}, {len(payload)} bytes present")
    try:
        kind = kind_bytes.decode("ascii")
    except UnicodeDecodeError as e:
        raise UnknownObjectKindError(f"unknown object kind {kind_bytes!r}") from e
    return kind, payload


def decode_object(raw: bytes) -> AnyObject:
    """Parse canonical bytes into a Blob or Tree."""
    kind, payload = split_header(raw)
    if kind == OBJ_BLOB:
        return Blob(payload)
    if kind == OBJ_TREE:
        return Tree.from_payload(payload)
    if kind in UNSUPPORTED_KINDS:
        raise UnsupportedObjectKindError(f"object kind {kind!r} is not supported")
    raise UnknownObjectKindError(f"unknown object kind {kind!r}")
