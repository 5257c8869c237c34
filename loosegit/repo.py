"""Repository: ties paths, ODB, index and config together."""

from __future__ import annotations

from pathlib import Path

from .constants import GIT_DIR_NAME, INDEX_FILENAME, OBJECTS_DIR_NAME
from .errors import NotARepositoryError, PathOutsideRepoError
from .index import Index, read_index
from .objects import AnyObject, GitObject
from .odb import ObjectDB
from .util import normalize_path


class Repository:
    """Git repository rooted at a work tree with a .git directory (no bootstrap)."""

    def __init__(self, path: str | Path = ".") -> None:
        self.path = Path(path).resolve()
        self.git_dir = self.path / GIT_DIR_NAME
        self.objects_dir = self.git_dir / OBJECTS_DIR_NAME
        self.index_file = self.git_dir / INDEX_FILENAME
        self._odb: ObjectDB | None = None

    def require_repo(self) -> None:
        """Raise NotARepositoryError if not a git repo."""
        if not self.git_dir.is_dir():
            raise NotARepositoryError(f"not a git repository: {self.path}")

    def safe_path(self, path: str) -> Path:
        """Resolve path relative to repo root; reject escaping."""
        try:
            return normalize_path(self.path, path)
        except ValueError as e:
            raise PathOutsideRepoError(str(e)) from e

    @property
    def odb(self) -> ObjectDB:
        """Object store, created on first use with the configured compression level."""
        if self._odb is None:
            from .config import loose_compression_level
            self.require_repo()
            self._odb = ObjectDB(self.objects_dir, loose_compression_level(self))
        return self._odb

    def store_object(self, obj: GitObject, write: bool = True) -> str:
        """Hash obj; store it in ODB when write is True. Return full hash."""
        return self.odb.put(obj, persist=write)

    def load_object(self, sha: str) -> AnyObject:
        """Load object by full hash."""
        return self.odb.get(sha)

    def read_index(self, verify_checksum: bool = False) -> Index:
        """Parse .git/index."""
        self.require_repo()
        return read_index(self.index_file, verify_checksum=verify_checksum)
