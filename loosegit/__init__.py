"""loosegit: content-addressed loose-object store (SHA-1, blob/tree codec, tree builder, index parser)."""

from .errors import LooseGitError, NotARepositoryError
from .index import Index, IndexEntry, parse_index, read_index
from .objects import Blob, Tree, TreeEntry, decode_object, encode_object
from .odb import ObjectDB
from .repo import Repository
from .sha1 import digest, hexdigest
from .treebuilder import build_tree, tree_from_index

__all__ = [
    "Blob",
    "Index",
    "IndexEntry",
    "LooseGitError",
    "NotARepositoryError",
    "ObjectDB",
    "Repository",
    "Tree",
    "TreeEntry",
    "build_tree",
    "decode_object",
    "digest",
    "encode_object",
    "hexdigest",
    "parse_index",
    "read_index",
    "tree_from_index",
]
