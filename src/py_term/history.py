"""Scrollback entries and the command recall stack.

Two distinct histories live in a terminal session:

- **Scrollback** — what the screen shows: each submitted line paired
  with its rendered output (``HistoryEntry``).  ``clear`` wipes it.
- **Recall stack** — the raw lines the user typed, navigated with the
  Up and Down arrows (``CommandHistory``).  ``clear`` does not touch it,
  so Up after ``clear`` brings back the literal ``clear``.

Recall navigation follows the familiar readline behaviour:

    Up    (first press)  → most recent line
    Up    (again)        → older lines, stopping at the oldest
    Down                 → newer lines; past the newest → blank input
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from typing import Any, TypeAlias

from py_term.fs.filesystem import LinkTarget


@dataclass(frozen=True)
class Hyperlink:
    """A renderable link — what ``cat`` produces for a link file."""

    href: str
    label: str
    target: LinkTarget = LinkTarget.BLANK

    def __str__(self) -> str:
        """Format as ``label <href>`` for plain-text consumers."""
        if self.label == self.href:
            return self.href
        return f"{self.label} <{self.href}>"


# Built-ins produce text or links; custom handlers may return anything
# their renderer understands.
Output: TypeAlias = str | Hyperlink | Any


@dataclass(frozen=True)
class HistoryEntry:
    """One scrollback row: the submitted line and its output.

    Attributes:
        command: The (trimmed) input line.
        output: What the command rendered, or ``None`` when it had no
            visible result (e.g. a successful ``cd``).

    """

    command: str
    output: Output | None = None


class Direction(StrEnum):
    """Recall navigation direction."""

    UP = "up"
    DOWN = "down"


class CommandHistory:
    """Append-only recall stack with an Up/Down cursor."""

    def __init__(self) -> None:
        """Create an empty recall stack."""
        self._lines: list[str] = []
        self._index: int | None = None

    @property
    def entries(self) -> list[str]:
        """Return all recorded lines, oldest first."""
        return list(self._lines)

    @property
    def index(self) -> int | None:
        """Return the recall cursor, or ``None`` when not recalling."""
        return self._index

    def record(self, line: str) -> None:
        """Push *line* (trimmed) onto the stack; blank lines are ignored."""
        stripped = line.strip()
        if stripped:
            self._lines.append(stripped)

    def reset(self) -> None:
        """Leave recall mode (the next Up starts from the newest line)."""
        self._index = None

    def navigate(self, direction: Direction) -> str | None:
        """Move the recall cursor and return the line to show.

        Args:
            direction: ``Direction.UP`` (older) or ``Direction.DOWN`` (newer).

        Returns:
            The new input text, ``""`` when Down moves past the newest
            line, or ``None`` when the input should stay as it is.

        """
        if not self._lines:
            return None

        if self._index is None:
            if direction is Direction.UP:
                self._index = len(self._lines) - 1
                return self._lines[self._index]
            return None

        if direction is Direction.UP:
            self._index = max(0, self._index - 1)
            return self._lines[self._index]

        if self._index >= len(self._lines) - 1:
            self._index = None
            return ""
        self._index += 1
        return self._lines[self._index]

    def __len__(self) -> int:
        """Return the number of recorded lines."""
        return len(self._lines)
