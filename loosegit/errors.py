"""Custom exceptions for loosegit."""

from __future__ import annotations


class LooseGitError(Exception):
    """Base exception for loosegit."""

    pass


class NotARepositoryError(LooseGitError):
    """Raised when a directory has no .git subdirectory."""

    pass


class PathOutsideRepoError(LooseGitError):
    """Raised when a path would escape the repository root."""

    pass


class InvalidObjectNameError(LooseGitError):
    """Raised when a digest string is not 40 hexadecimal characters."""

    pass


class AmbiguousObjectNameError(LooseGitError):
    """Raised when an abbreviated object name matches multiple objects."""

    pass


class ObjectNotFoundError(LooseGitError):
    """Raised when an object is not found in the ODB."""

    pass


class ObjectReadError(LooseGitError):
    """Raised when a loose object file exists but cannot be read."""

    pass


class ObjectDecompressError(LooseGitError):
    """Raised when a loose object file is not a valid zlib stream."""

    pass


class ObjectWriteError(LooseGitError):
    """Raised when a loose object (or its fan-out directory) cannot be written."""

    def __init__(self, message: str, path: object = None) -> None:
        super().__init__(message)
        self.path = path


class CorruptObjectError(LooseGitError):
    """Raised when the canonical object framing is malformed."""

    pass


class InvalidObjectSizeError(CorruptObjectError):
    """Raised when fewer payload bytes remain than the header declares."""

    pass


class UnknownObjectKindError(CorruptObjectError):
    """Raised when the kind tag of an object is not a git object type."""

    pass


class CorruptTreeEntryError(CorruptObjectError):
    """Raised when a tree entry has a bad mode, bad name or a short hash tail."""

    pass


class UnsupportedObjectKindError(LooseGitError):
    """Raised when decoding a recognized kind this package does not implement (commit, tag)."""

    pass


class InvalidTreeEntryError(LooseGitError):
    """Raised when a tree entry cannot be encoded (NUL in name, mode out of range, bad sha)."""

    pass


class NotATreeError(LooseGitError):
    """Raised when a tree was expected but another kind was loaded."""

    pass


class NotABlobError(LooseGitError):
    """Raised when a blob was expected but another kind was loaded."""

    pass


class TreeBuildError(LooseGitError):
    """Raised when the top-level directory of a tree build cannot be read."""

    pass


class IndexSignatureError(LooseGitError):
    """Raised when the index file does not start with DIRC."""

    pass


class UnsupportedIndexVersionError(LooseGitError):
    """Raised when the index version is not 2 or 3."""

    pass


class IndexEntryCountError(LooseGitError):
    """Raised when the number of parsed entries differs from the header count."""

    def __init__(self, expected: int, got: int) -> None:
        super().__init__(f"missing index entries: expected {expected}, got {got}")
        self.expected = expected
        self.got = got


class IndexChecksumError(LooseGitError):
    """Raised when index file trailing SHA-1 checksum does not match contents."""

    pass


class IndexCorruptError(LooseGitError):
    """Raised when index file is truncated or an entry is malformed."""

    pass


class InvalidConfigKeyError(LooseGitError):
    """Raised when a config key is invalid (e.g. not section.option)."""

    pass


class InvalidConfigValueError(LooseGitError):
    """Raised when a config value cannot be interpreted (e.g. compression level out of range)."""

    pass
