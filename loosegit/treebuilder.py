"""Build tree objects: from a directory on disk, or from the entries of a staging index."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Dict, Iterable, List, Tuple, Union

from .constants import IGNORE_PREFIX, MODE_DIR
from .errors import TreeBuildError
from .index import Index, IndexEntry
from .objects import Blob, Tree, TreeEntry
from .odb import ObjectDB
from .util import file_mode, read_bytes

logger = logging.getLogger(__name__)


def _build_dir(odb: ObjectDB, children: List[Path], ignore_prefix: str) -> str:
    entries: List[TreeEntry] = []
    for child in children:
        name = child.name
        if ignore_prefix and name.startswith(ignore_prefix):
            continue
        try:
            if child.is_file():
                sha = odb.put(Blob(read_bytes(child)), persist=True)
                entries.append(TreeEntry(file_mode(child), name, sha))
            elif child.is_dir():
                mode = file_mode(child)
                sha = _build_dir(odb, list(child.iterdir()), ignore_prefix)
                entries.append(TreeEntry(mode, name, sha))
            else:
                logger.debug("skipping %s: not a regular file or directory", child)
        except OSError as e:
            logger.warning("cannot read %s, skipped: %s", child, e)
    tree = Tree(sorted(entries, key=lambda e: e.name.encode("utf-8")))
    return odb.put(tree, persist=True)


def build_tree(odb: ObjectDB, directory: Path, ignore_prefix: str = IGNORE_PREFIX) -> Tuple[str, int]:
    """Store one tree per directory under `directory`, bottom-up.

    Files become blobs, subdirectories recurse. Entries whose name starts with
    `ignore_prefix` are left out. A child that cannot be read is logged and
    omitted; failing to list `directory` itself raises TreeBuildError.

    Returns (root tree sha, st_mode of `directory`).
    """
    directory = Path(directory)
    try:
        children = list(directory.iterdir())
        mode = file_mode(directory)
    except OSError as e:
        raise TreeBuildError(f"cannot read directory {directory}: {e}") from e
    return _build_dir(odb, children, ignore_prefix), mode


_Node = Dict[str, Union[TreeEntry, "_Node"]]


def _insert(root: _Node, entry: IndexEntry) -> None:
    parts = entry.path.split("/")
    node = root
    for part in parts[:-1]:
        child = node.setdefault(part, {})
        if isinstance(child, TreeEntry):
            raise TreeBuildError(f"index path {entry.path!r} conflicts with file {part!r}")
        node = child
    if isinstance(node.get(parts[-1]), dict):
        raise TreeBuildError(f"index path {entry.path!r} is also a directory")
    leaf = entry.to_tree_entry()
    node[parts[-1]] = TreeEntry(leaf.mode, parts[-1], leaf.sha)


def _store_node(odb: ObjectDB, node: _Node) -> str:
    tree = Tree()
    for name, val in node.items():
        if isinstance(val, TreeEntry):
            tree.entries.append(val)
        else:
            tree.add_entry(MODE_DIR, name, _store_node(odb, val))
    tree.entries.sort(key=lambda e: e.name.encode("utf-8"))
    return odb.put(tree, persist=True)


def tree_from_index(odb: ObjectDB, index: Union[Index, Iterable[IndexEntry]]) -> str:
    """Store trees for the paths listed in an index (slash-separated, nested); return root sha."""
    entries = index.entries if isinstance(index, Index) else index
    root: _Node = {}
    for entry in entries:
        _insert(root, entry)
    return _store_node(odb, root)
