"""Tree persistence — load and save virtual filesystems as JSON.

A terminal is usually handed its tree by the embedding application,
but trees are also convenient to keep on disk next to a site's other
content.  The JSON shape is the tree shape itself::

    {"kind": "directory", "entries": {
        "readme.txt": {"kind": "file", "fileType": "text", "content": "hi"},
        "blog": {"kind": "file", "fileType": "link",
                 "href": "https://example.com", "label": "Blog",
                 "target": "_self"}}}

- ``tree_from_dict`` / ``tree_to_dict`` — convert between the JSON
  document and the node classes.
- ``load_tree`` / ``dump_tree`` — the same, to and from a file.

Malformed documents raise ``TreeFormatError`` naming the offending
location (``/blog``) so a broken fixture is easy to track down.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from py_term.fs.filesystem import Directory, FSNode, LinkFile, LinkTarget, TextFile

_KIND_DIRECTORY = "directory"
_KIND_FILE = "file"
_FILE_TEXT = "text"
_FILE_LINK = "link"


class TreeFormatError(ValueError):
    """Raise when a tree document does not describe a valid tree."""


def _require_str(data: dict[str, Any], key: str, where: str) -> str:
    value = data.get(key)
    if not isinstance(value, str):
        msg = f"{where}: '{key}' must be a string"
        raise TreeFormatError(msg)
    return value


def _optional_str(data: dict[str, Any], key: str, where: str) -> str | None:
    if key not in data or data[key] is None:
        return None
    return _require_str(data, key, where)


def _node_from_dict(data: object, where: str) -> FSNode:
    """Convert one JSON object into a node, recursing into directories."""
    if not isinstance(data, dict):
        msg = f"{where}: expected an object"
        raise TreeFormatError(msg)

    kind = data.get("kind")
    if kind == _KIND_DIRECTORY:
        entries = data.get("entries", {})
        if not isinstance(entries, dict):
            msg = f"{where}: 'entries' must be an object"
            raise TreeFormatError(msg)
        prefix = where.rstrip("/")
        return Directory(
            {name: _node_from_dict(child, f"{prefix}/{name}") for name, child in entries.items()}
        )

    if kind == _KIND_FILE:
        file_type = data.get("fileType")
        if file_type == _FILE_TEXT:
            return TextFile(content=_require_str(data, "content", where))
        if file_type == _FILE_LINK:
            target = _optional_str(data, "target", where)
            try:
                link_target = LinkTarget(target) if target is not None else None
            except ValueError:
                msg = f"{where}: unknown link target {target!r}"
                raise TreeFormatError(msg) from None
            return LinkFile(
                href=_require_str(data, "href", where),
                label=_optional_str(data, "label", where),
                target=link_target,
            )
        msg = f"{where}: unknown fileType {file_type!r}"
        raise TreeFormatError(msg)

    msg = f"{where}: unknown kind {kind!r}"
    raise TreeFormatError(msg)


def tree_from_dict(data: dict[str, Any]) -> Directory:
    """Build a tree from its JSON-compatible dictionary form.

    Args:
        data: The decoded document; its root must be a directory.

    Returns:
        The root directory.

    Raises:
        TreeFormatError: If the document is not a valid tree.

    """
    root = _node_from_dict(data, "/")
    if not isinstance(root, Directory):
        msg = "/: the root of a tree must be a directory"
        raise TreeFormatError(msg)
    return root


def tree_to_dict(node: FSNode) -> dict[str, Any]:
    """Convert *node* (and its descendants) to the JSON-compatible form.

    Optional link fields are omitted when unset, so a loaded document
    dumps back to the same shape it was written in.
    """
    match node:
        case Directory():
            return {
                "kind": _KIND_DIRECTORY,
                "entries": {name: tree_to_dict(child) for name, child in node.entries.items()},
            }
        case TextFile():
            return {"kind": _KIND_FILE, "fileType": _FILE_TEXT, "content": node.content}
        case LinkFile():
            result: dict[str, Any] = {"kind": _KIND_FILE, "fileType": _FILE_LINK, "href": node.href}
            if node.label is not None:
                result["label"] = node.label
            if node.target is not None:
                result["target"] = node.target.value
            return result


def load_tree(path: Path) -> Directory:
    """Load a tree from a JSON file.

    Raises:
        FileNotFoundError: If the path does not exist.
        TreeFormatError: If the file is not valid JSON or not a valid tree.

    """
    try:
        data = json.loads(path.read_text())
    except json.JSONDecodeError as e:
        msg = f"{path}: invalid JSON ({e.msg})"
        raise TreeFormatError(msg) from e
    return tree_from_dict(data)


def dump_tree(tree: Directory, path: Path) -> None:
    """Save a tree to a JSON file."""
    path.write_text(json.dumps(tree_to_dict(tree), indent=2))
