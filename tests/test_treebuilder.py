"""Tests for tree building: from a directory walk and from index entries."""

import hashlib
import os
import tempfile
import unittest
from pathlib import Path
from unittest import mock

from loosegit import treebuilder
from loosegit.constants import MODE_DIR, MODE_FILE
from loosegit.errors import TreeBuildError
from loosegit.index import IndexEntry
from loosegit.objects import Blob, Tree, TreeEntry
from loosegit.odb import ObjectDB
from loosegit.treebuilder import build_tree, tree_from_index


def _git_hash(kind: bytes, payload: bytes) -> str:
    return hashlib.sha1(kind + b" " + str(len(payload)).encode() + b"\0" + payload).hexdigest()


def _index_entry(path: str, sha: str, mode: int = MODE_FILE) -> IndexEntry:
    return IndexEntry(0, 0, 0, 0, 0, 0, mode, 0, 0, 0, sha, len(path), path)


class TestBuildTree(unittest.TestCase):
    def setUp(self) -> None:
        self.tmp = Path(tempfile.mkdtemp(prefix="loosegit_tree_"))
        self.odb = ObjectDB(self.tmp / "store" / "objects")

    def _make_dir(self, name: str, files: dict) -> Path:
        root = self.tmp / name
        root.mkdir()
        for rel, content in files.items():
            p = root / rel
            p.parent.mkdir(parents=True, exist_ok=True)
            p.write_bytes(content)
        return root

    def test_flat_directory_hash(self) -> None:
        root = self._make_dir("flat", {"b.txt": b"bee", "a.txt": b"ay"})
        sha, mode = build_tree(self.odb, root)
        self.assertEqual(mode, os.stat(root).st_mode)
        payload = b""
        for name, content in (("a.txt", b"ay"), ("b.txt", b"bee")):
            file_mode = os.stat(root / name).st_mode
            payload += f"{file_mode:o} {name}\0".encode() + bytes.fromhex(_git_hash(b"blob", content))
        self.assertEqual(sha, _git_hash(b"tree", payload))

    def test_objects_persisted(self) -> None:
        root = self._make_dir("persist", {"f": b"data", "sub/g": b"more"})
        sha, _ = build_tree(self.odb, root)
        tree = self.odb.get(sha)
        self.assertEqual([e.name for e in tree.entries], ["f", "sub"])
        self.assertEqual(self.odb.get(tree.entries[0].sha), Blob(b"data"))
        sub = self.odb.get(tree.entries[1].sha)
        self.assertIsInstance(sub, Tree)
        self.assertEqual(sub.entries[0].name, "g")
        self.assertEqual(sub.entries[0].mode, os.stat(root / "sub" / "g").st_mode)
        self.assertEqual(tree.entries[1].mode, os.stat(root / "sub").st_mode)

    def test_creation_order_does_not_matter(self) -> None:
        one = self._make_dir("one", {"z": b"1", "m/x": b"2", "a": b"3"})
        two = self.tmp / "two"
        two.mkdir()
        for rel, content in (("a", b"3"), ("m/x", b"2"), ("z", b"1")):
            p = two / rel
            p.parent.mkdir(parents=True, exist_ok=True)
            p.write_bytes(content)
        self.assertEqual(build_tree(self.odb, one)[0], build_tree(self.odb, two)[0])

    def test_dot_entries_ignored(self) -> None:
        root = self._make_dir("dots", {"keep": b"k", ".git/HEAD": b"ref", ".hidden": b"h"})
        plain = self._make_dir("plain", {"keep": b"k"})
        self.assertEqual(build_tree(self.odb, root)[0], build_tree(self.odb, plain)[0])

    def test_custom_ignore_prefix(self) -> None:
        root = self._make_dir("custom", {"_skip": b"s", ".kept": b"k"})
        sha, _ = build_tree(self.odb, root, ignore_prefix="_")
        self.assertEqual([e.name for e in self.odb.get(sha).entries], [".kept"])

    def test_empty_subdirectory_is_empty_tree(self) -> None:
        root = self._make_dir("withempty", {"f": b"x"})
        (root / "empty").mkdir()
        sha, _ = build_tree(self.odb, root)
        entries = {e.name: e for e in self.odb.get(sha).entries}
        self.assertEqual(entries["empty"].sha, "4b825dc642cb6eb9a060e54bf8d69288fbee4904")

    def test_unreadable_child_skipped_and_logged(self) -> None:
        root = self._make_dir("partial", {"good": b"g", "bad": b"b"})
        expected = build_tree(self.odb, self._make_dir("goodonly", {"good": b"g"}))[0]
        real_read = treebuilder.read_bytes

        def flaky_read(path):
            if Path(path).name == "bad":
                raise PermissionError(13, "Permission denied", str(path))
            return real_read(path)

        with mock.patch.object(treebuilder, "read_bytes", side_effect=flaky_read):
            with self.assertLogs("loosegit.treebuilder", level="WARNING") as logs:
                sha, _ = build_tree(self.odb, root)
        self.assertEqual(sha, expected)
        self.assertTrue(any("bad" in line for line in logs.output))

    def test_unlistable_subdirectory_skipped_and_logged(self) -> None:
        root = self._make_dir("lockeddir", {"keep": b"k", "locked/inner": b"i"})
        expected = build_tree(self.odb, self._make_dir("keeponly", {"keep": b"k"}))[0]
        real_iterdir = Path.iterdir

        def flaky_iterdir(path):
            if path.name == "locked":
                raise PermissionError(13, "Permission denied", str(path))
            return real_iterdir(path)

        with mock.patch.object(Path, "iterdir", autospec=True, side_effect=flaky_iterdir):
            with self.assertLogs("loosegit.treebuilder", level="WARNING") as logs:
                sha, _ = build_tree(self.odb, root)
        self.assertEqual(sha, expected)
        self.assertTrue(any("locked" in line for line in logs.output))

    def test_missing_top_level_directory(self) -> None:
        with self.assertRaises(TreeBuildError):
            build_tree(self.odb, self.tmp / "does-not-exist")


class TestTreeFromIndex(unittest.TestCase):
    def setUp(self) -> None:
        self.odb = ObjectDB(Path(tempfile.mkdtemp(prefix="loosegit_idxtree_")) / "objects")

    def test_flat_entries(self) -> None:
        a = self.odb.put(Blob(b"a"))
        b = self.odb.put(Blob(b"b"))
        sha = tree_from_index(self.odb, [_index_entry("b", b), _index_entry("a", a, 0o100755)])
        expected = Tree([TreeEntry(0o100755, "a", a), TreeEntry(MODE_FILE, "b", b)])
        self.assertEqual(sha, expected.hash_id())
        self.assertEqual(self.odb.get(sha), expected)

    def test_nested_paths(self) -> None:
        f = self.odb.put(Blob(b"f"))
        g = self.odb.put(Blob(b"g"))
        sha = tree_from_index(self.odb, [_index_entry("dir/sub/g", g), _index_entry("f", f)])
        sub = Tree([TreeEntry(MODE_FILE, "g", g)])
        d = Tree([TreeEntry(MODE_DIR, "sub", sub.hash_id())])
        root = Tree([TreeEntry(MODE_DIR, "dir", d.hash_id()), TreeEntry(MODE_FILE, "f", f)])
        self.assertEqual(sha, root.hash_id())
        self.assertTrue(self.odb.exists(sub.hash_id()))
        self.assertTrue(self.odb.exists(d.hash_id()))

    def test_file_directory_conflict(self) -> None:
        f = self.odb.put(Blob(b"f"))
        with self.assertRaises(TreeBuildError):
            tree_from_index(self.odb, [_index_entry("x", f), _index_entry("x/y", f)])
        with self.assertRaises(TreeBuildError):
            tree_from_index(self.odb, [_index_entry("x/y", f), _index_entry("x", f)])

    def test_empty_index(self) -> None:
        self.assertEqual(tree_from_index(self.odb, []), "4b825dc642cb6eb9a060e54bf8d69288fbee4904")
