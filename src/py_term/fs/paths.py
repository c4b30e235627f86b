"""Path normalization and resolution for the virtual filesystem.

Every path the engine stores is **absolute and normalized**: it starts
with ``/`` and contains no empty, ``.`` or unresolved ``..`` segments.
User input is anything but, so every path typed at the prompt passes
through one of two functions before it touches the tree:

- ``normalize_path`` — collapse ``.``/``..``/``//`` into canonical form.
- ``resolve_path`` — interpret a relative path against the current
  working directory, then normalize.

Both functions are total: there is no string they reject.  ``..`` at
the root stays at the root, exactly like ``cd ..`` in ``/`` on Unix.
"""

_SEPARATOR = "/"
_CURRENT = "."
_PARENT = ".."


def split_segments(path: str) -> list[str]:
    """Return the non-empty segments of *path* after normalization.

    Examples::

        "/docs/a.txt"    → ["docs", "a.txt"]
        "/docs/../x//y"  → ["x", "y"]
        "/"              → []

    """
    stack: list[str] = []
    for part in path.split(_SEPARATOR):
        if not part or part == _CURRENT:
            continue
        if part == _PARENT:
            # Popping past the root is a no-op.
            if stack:
                stack.pop()
        else:
            stack.append(part)
    return stack


def normalize_path(path: str) -> str:
    """Collapse *path* into its canonical absolute form.

    Args:
        path: Any slash-separated string, absolute or not.

    Returns:
        An absolute path with no empty, ``.`` or ``..`` segments.

    """
    return _SEPARATOR + _SEPARATOR.join(split_segments(path))


def resolve_path(candidate: str, current: str) -> str:
    """Resolve *candidate* against the working directory *current*.

    Args:
        candidate: The path as typed (``""``, ``.``, relative or absolute).
        current: The absolute working directory.

    Returns:
        The absolute normalized path *candidate* refers to.

    """
    if not candidate or candidate == _CURRENT:
        return current
    if candidate.startswith(_SEPARATOR):
        return normalize_path(candidate)
    return normalize_path(f"{current}{_SEPARATOR}{candidate}")
