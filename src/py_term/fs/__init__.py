"""Virtual filesystem — node types, path resolution, and persistence.

Re-exports public symbols so callers can write::

    from py_term.fs import Directory, TextFile, lookup, resolve_path
"""

from py_term.fs.filesystem import (
    Directory,
    FileNode,
    FileType,
    FSNode,
    LinkFile,
    LinkTarget,
    TextFile,
    directory,
    is_directory,
    is_file,
    is_link_file,
    is_text_file,
    lookup,
)
from py_term.fs.paths import normalize_path, resolve_path, split_segments
from py_term.fs.persistence import (
    TreeFormatError,
    dump_tree,
    load_tree,
    tree_from_dict,
    tree_to_dict,
)
from py_term.fs.sample import sample_tree

__all__ = [
    "Directory",
    "FSNode",
    "FileNode",
    "FileType",
    "LinkFile",
    "LinkTarget",
    "TextFile",
    "TreeFormatError",
    "directory",
    "dump_tree",
    "is_directory",
    "is_file",
    "is_link_file",
    "is_text_file",
    "load_tree",
    "lookup",
    "normalize_path",
    "resolve_path",
    "sample_tree",
    "split_segments",
    "tree_from_dict",
    "tree_to_dict",
]
