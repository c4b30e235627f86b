"""Diagnostic trail for a terminal session.

Nothing a user types can raise out of the engine: a missing file is an
output line, and a crashing custom command shows only
``error: executing <name>``.  The detail behind those lines is recorded
here, tagged with the component that produced it and the command line
being run, so a front end can surface it on its own terms:

- the REPL echoes new records to stderr after each key event
  (``py-term --log-level info``);
- the web app serves them from ``GET /api/log?level=warning&source=shell``.

Sources used by the engine: ``session`` (start, directory changes,
interrupts), ``shell`` (every dispatch, handler failures) and
``config`` (ignored keys).

Design choices:
    - **Threshold at the door.**  A logger created with
      ``min_level=LogLevel.WARNING`` never stores routine DEBUG/INFO
      records, so a long session does not accumulate dispatch noise.
    - **Drain, not tail.**  Consumers that stream records take them out
      with ``drain()``; consumers that query use ``filter()``.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum
from typing import Any


class LogLevel(IntEnum):
    """Severity, ordered so that ``DEBUG < INFO < WARNING < ERROR``."""

    DEBUG = 0
    INFO = 1
    WARNING = 2
    ERROR = 3

    @classmethod
    def parse(cls, name: str) -> LogLevel:
        """Return the level called *name*, ignoring case.

        Raises:
            ValueError: If *name* is not a level name.

        """
        try:
            return cls[name.upper()]
        except KeyError:
            choices = ", ".join(level.name.lower() for level in cls)
            msg = f"unknown log level {name!r} (expected one of: {choices})"
            raise ValueError(msg) from None


@dataclass(frozen=True)
class LogEntry:
    """One diagnostic record.

    Attributes:
        level: How serious the event is.
        message: What happened.
        source: The component that reported it (``shell``, ``session``...).
        command: The input line being processed, or ``""``.

    """

    level: LogLevel
    message: str
    source: str
    command: str = ""

    def __str__(self) -> str:
        """Format as ``[LEVEL] source: message``."""
        return f"[{self.level.name}] {self.source}: {self.message}"

    def to_dict(self) -> dict[str, Any]:
        """Return the JSON form served by the web app."""
        return {
            "level": self.level.name.lower(),
            "message": self.message,
            "source": self.source,
            "command": self.command,
        }


class Logger:
    """Per-session record buffer with a level threshold."""

    def __init__(self, *, min_level: LogLevel = LogLevel.DEBUG) -> None:
        """Create an empty logger that keeps records at or above *min_level*."""
        self._min_level = min_level
        self._records: list[LogEntry] = []

    @property
    def min_level(self) -> LogLevel:
        """Return the threshold below which records are dropped."""
        return self._min_level

    @property
    def entries(self) -> list[LogEntry]:
        """Return a copy of the stored records, oldest first."""
        return self._records.copy()

    def log(self, level: LogLevel, message: str, *, source: str, command: str = "") -> None:
        """Record an event unless it is below the threshold."""
        if level >= self._min_level:
            self._records.append(LogEntry(level, message, source, command))

    def filter(
        self,
        *,
        min_level: LogLevel | None = None,
        source: str | None = None,
    ) -> list[LogEntry]:
        """Return the stored records matching every given criterion.

        Args:
            min_level: Keep records at or above this level.
            source: Keep records from this component only.

        """
        return [
            record
            for record in self._records
            if (min_level is None or record.level >= min_level)
            and (source is None or record.source == source)
        ]

    def drain(self) -> list[LogEntry]:
        """Return every stored record and empty the buffer."""
        records, self._records = self._records, []
        return records

    def clear(self) -> None:
        """Drop every stored record."""
        self._records.clear()

    def __len__(self) -> int:
        """Return the number of stored records."""
        return len(self._records)
