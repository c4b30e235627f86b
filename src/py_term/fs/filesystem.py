"""Read-only virtual filesystem: node types and path lookup.

The tree the terminal navigates is handed to the engine by its caller
and is never modified afterwards.  It is built from three node kinds:

- **Directory** — a mapping of child names to nodes.  Names are unique;
  their order is irrelevant (listings are always sorted).
- **TextFile** — a file whose content is a plain string.
- **LinkFile** — a file that stands for a hyperlink.  ``cat`` on it
  produces a renderable link instead of text.

Why a sum type instead of dicts tagged with a ``kind`` string?
    Each node class carries exactly the fields that kind needs, and
    the ``is_*`` predicates and ``match`` make "forgot to check the kind"
    bugs visible to the type checker.

Lookup walks the tree one segment at a time from the root, mirroring
how a real kernel resolves ``/foo/bar/baz.txt`` component by component.
"""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from dataclasses import dataclass, field
from enum import StrEnum
from types import MappingProxyType
from typing import TypeAlias

from typing_extensions import TypeIs

from py_term.fs.paths import split_segments


class FileType(StrEnum):
    """The kind of object a node represents."""

    DIRECTORY = "directory"
    TEXT = "text"
    LINK = "link"


class LinkTarget(StrEnum):
    """Where a link opens — a new browsing context or the current one."""

    BLANK = "_blank"
    SELF = "_self"


@dataclass(frozen=True)
class TextFile:
    """A file holding plain text."""

    content: str = ""

    @property
    def file_type(self) -> FileType:
        """Return ``FileType.TEXT``."""
        return FileType.TEXT


@dataclass(frozen=True)
class LinkFile:
    """A file that represents a hyperlink.

    Attributes:
        href: The link destination.
        label: Display text; ``None`` means "show the href".
        target: Where the link opens; ``None`` means a new tab.

    """

    href: str
    label: str | None = None
    target: LinkTarget | None = None

    @property
    def file_type(self) -> FileType:
        """Return ``FileType.LINK``."""
        return FileType.LINK

    @property
    def display_label(self) -> str:
        """Return the label, falling back to the href."""
        return self.label if self.label is not None else self.href

    @property
    def open_target(self) -> LinkTarget:
        """Return the target, falling back to ``_blank``."""
        return self.target if self.target is not None else LinkTarget.BLANK


@dataclass(frozen=True)
class Directory:
    """A directory: an immutable mapping of names to child nodes.

    The entries are copied on construction and exposed through a
    read-only proxy, so neither the engine nor the caller can change
    the tree by mutating the dict that was passed in.
    """

    entries: Mapping[str, FSNode] = field(default_factory=dict, hash=False)

    def __post_init__(self) -> None:
        """Freeze the entries behind a read-only proxy."""
        object.__setattr__(self, "entries", MappingProxyType(dict(self.entries)))

    @property
    def file_type(self) -> FileType:
        """Return ``FileType.DIRECTORY``."""
        return FileType.DIRECTORY

    def names(self) -> list[str]:
        """Return the child names in lexicographic order."""
        return sorted(self.entries)

    def get(self, name: str) -> FSNode | None:
        """Return the child called *name*, or ``None``."""
        return self.entries.get(name)

    def __contains__(self, name: object) -> bool:
        """Return True if a child called *name* exists."""
        return name in self.entries

    def __iter__(self) -> Iterator[str]:
        """Iterate over child names (unordered)."""
        return iter(self.entries)

    def __len__(self) -> int:
        """Return the number of children."""
        return len(self.entries)


FileNode: TypeAlias = TextFile | LinkFile
FSNode: TypeAlias = Directory | TextFile | LinkFile


def directory(**entries: FSNode) -> Directory:
    """Build a directory from keyword arguments.

    A compact spelling for trees written in Python::

        directory(docs=directory(readme=TextFile("hi")), home=LinkFile("https://x.io"))

    Names that are not identifiers (``a.txt``) still need the mapping
    form or ``directory(**{"a.txt": ...})``.
    """
    return Directory(entries)


def is_directory(node: FSNode | None) -> TypeIs[Directory]:
    """Return True if *node* is a directory."""
    return isinstance(node, Directory)


def is_file(node: FSNode | None) -> TypeIs[FileNode]:
    """Return True if *node* is any kind of file."""
    return isinstance(node, TextFile | LinkFile)


def is_text_file(node: FSNode | None) -> TypeIs[TextFile]:
    """Return True if *node* is a text file."""
    return isinstance(node, TextFile)


def is_link_file(node: FSNode | None) -> TypeIs[LinkFile]:
    """Return True if *node* is a link file."""
    return isinstance(node, LinkFile)


def lookup(tree: Directory, path: str) -> FSNode | None:
    """Walk *path* from the root of *tree* and return the node it names.

    The walk fails as soon as the current node is not a directory or
    lacks the next segment.  An empty segment list (``/``) is the root.

    Args:
        tree: The root directory.
        path: An absolute path; it is normalized before walking.

    Returns:
        The node at *path*, or ``None`` if nothing lives there.

    """
    current: FSNode = tree
    for segment in split_segments(path):
        if not is_directory(current):
            return None
        child = current.get(segment)
        if child is None:
            return None
        current = child
    return current
