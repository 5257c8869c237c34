"""Plumbing: hash-object, cat-file, ls-tree, write-tree. Return data; printing is left to callers."""

from __future__ import annotations

from typing import List, Union

from .constants import IGNORE_PREFIX
from .errors import NotABlobError, NotATreeError
from .objects import Blob, Tree, TreeEntry
from .repo import Repository
from .treebuilder import build_tree, tree_from_index
from .util import read_bytes


def hash_object(repo: Repository, path: str, write: bool) -> str:
    """Compute blob hash of file; optionally write to ODB. Return hash."""
    p = repo.safe_path(path)
    if not p.is_file():
        raise FileNotFoundError(f"path {path} is not a file")
    return repo.store_object(Blob(read_bytes(p)), write=write)


def cat_file_type(repo: Repository, sha: str) -> str:
    """Object kind (blob, tree)."""
    return repo.load_object(sha).type


def cat_file(repo: Repository, sha: str) -> bytes:
    """Content of a blob."""
    obj = repo.load_object(sha)
    if not isinstance(obj, Blob):
        raise NotABlobError(f"object {sha} is a {obj.type}, not a blob")
    return obj.content


def ls_tree(repo: Repository, sha: str, name_only: bool = False) -> Union[List[str], List[TreeEntry]]:
    """Entries of a tree (or just their names)."""
    obj = repo.load_object(sha)
    if not isinstance(obj, Tree):
        raise NotATreeError(f"object {sha} is a {obj.type}, not a tree")
    if name_only:
        return [e.name for e in obj.entries]
    return list(obj.entries)


def write_tree(repo: Repository) -> str:
    """Store the work tree (dot-entries such as .git excluded) and return its root tree hash."""
    sha, _mode = build_tree(repo.odb, repo.path, IGNORE_PREFIX)
    return sha


def write_tree_from_index(repo: Repository) -> str:
    """Store trees for the paths in .git/index and return the root tree hash."""
    return tree_from_index(repo.odb, repo.read_index())
