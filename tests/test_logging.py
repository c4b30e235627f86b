"""Tests for the session logging system.

The logger records structured entries for session events.  Internal
failures never reach the person typing; they land here instead.
"""

import pytest

from py_term.fs.filesystem import Directory, TextFile
from py_term.logging import LogEntry, Logger, LogLevel
from py_term.session import Session


def _session(logger: Logger | None = None) -> Session:
    """Create a session over a one-file tree."""
    return Session(Directory({"docs": Directory({"a.txt": TextFile("hi")})}), logger=logger)


class TestLogLevel:
    """Verify log level ordering."""

    def test_levels_are_ordered(self) -> None:
        """DEBUG < INFO < WARNING < ERROR."""
        assert LogLevel.DEBUG < LogLevel.INFO
        assert LogLevel.INFO < LogLevel.WARNING
        assert LogLevel.WARNING < LogLevel.ERROR

    def test_parse_ignores_case(self) -> None:
        """Level names parse regardless of case."""
        assert LogLevel.parse("warning") is LogLevel.WARNING
        assert LogLevel.parse("Error") is LogLevel.ERROR

    def test_parse_rejects_unknown(self) -> None:
        """An unknown name lists the valid choices."""
        with pytest.raises(ValueError, match="debug, info, warning, error"):
            LogLevel.parse("loud")


class TestLogEntry:
    """Verify log entry structure."""

    def test_entry_has_fields(self) -> None:
        """A log entry should store level, message, source, and command."""
        entry = LogEntry(
            level=LogLevel.INFO,
            message="test message",
            source="test",
            command="ls docs",
        )
        assert entry.level is LogLevel.INFO
        assert entry.message == "test message"
        assert entry.source == "test"
        assert entry.command == "ls docs"

    def test_command_defaults_to_empty(self) -> None:
        """Entries not tied to a command line carry an empty command."""
        entry = LogEntry(level=LogLevel.INFO, message="m", source="s")
        assert entry.command == ""

    def test_entry_str(self) -> None:
        """String representation should be ``[LEVEL] source: message``."""
        entry = LogEntry(level=LogLevel.WARNING, message="bad key", source="config")
        assert str(entry) == "[WARNING] config: bad key"

    def test_to_dict(self) -> None:
        """The JSON form uses lowercase level names."""
        entry = LogEntry(level=LogLevel.ERROR, message="boom", source="shell", command="x")
        assert entry.to_dict() == {
            "level": "error",
            "message": "boom",
            "source": "shell",
            "command": "x",
        }


class TestLogger:
    """Verify the logger."""

    def test_log_stores_entries(self) -> None:
        """Logged entries should be retrievable."""
        logger = Logger()
        logger.log(LogLevel.INFO, "started", source="session")
        assert len(logger.entries) == 1
        assert logger.entries[0].message == "started"

    def test_log_with_command(self) -> None:
        """Entries should record the command line."""
        logger = Logger()
        logger.log(LogLevel.DEBUG, "dispatch", source="shell", command="pwd")
        assert logger.entries[0].command == "pwd"

    def test_entries_are_ordered(self) -> None:
        """Entries should be in chronological order."""
        logger = Logger()
        logger.log(LogLevel.INFO, "first", source="test")
        logger.log(LogLevel.INFO, "second", source="test")
        assert logger.entries[0].message == "first"
        assert logger.entries[1].message == "second"

    def test_entries_is_a_copy(self) -> None:
        """Mutating the returned list does not touch the log."""
        logger = Logger()
        logger.log(LogLevel.INFO, "kept", source="test")
        logger.entries.clear()
        assert len(logger.entries) == 1

    def test_min_level_drops_entries(self) -> None:
        """Entries below the minimum level are never stored."""
        logger = Logger(min_level=LogLevel.WARNING)
        logger.log(LogLevel.DEBUG, "noise", source="test")
        logger.log(LogLevel.ERROR, "signal", source="test")
        assert [e.message for e in logger.entries] == ["signal"]
        assert logger.min_level is LogLevel.WARNING

    def test_filter_by_level(self) -> None:
        """Filtering should return only entries at or above the level."""
        logger = Logger()
        logger.log(LogLevel.DEBUG, "debug msg", source="test")
        logger.log(LogLevel.INFO, "info msg", source="test")
        logger.log(LogLevel.ERROR, "error msg", source="test")
        warnings_and_above = logger.filter(min_level=LogLevel.WARNING)
        assert len(warnings_and_above) == 1
        assert warnings_and_above[0].level is LogLevel.ERROR

    def test_filter_by_source(self) -> None:
        """Filtering by source should return matching entries."""
        logger = Logger()
        logger.log(LogLevel.INFO, "shell event", source="shell")
        logger.log(LogLevel.INFO, "session event", source="session")
        shell_logs = logger.filter(source="shell")
        assert len(shell_logs) == 1
        assert shell_logs[0].source == "shell"

    def test_filter_combined(self) -> None:
        """Level and source filters apply together."""
        logger = Logger()
        logger.log(LogLevel.DEBUG, "a", source="shell")
        logger.log(LogLevel.ERROR, "b", source="shell")
        logger.log(LogLevel.ERROR, "c", source="session")
        result = logger.filter(min_level=LogLevel.ERROR, source="shell")
        assert [e.message for e in result] == ["b"]

    def test_clear(self) -> None:
        """Clearing should remove all entries."""
        logger = Logger()
        logger.log(LogLevel.INFO, "test", source="test")
        logger.clear()
        assert len(logger.entries) == 0

    def test_drain(self) -> None:
        """Draining returns the records and empties the buffer."""
        logger = Logger()
        logger.log(LogLevel.INFO, "a", source="test")
        logger.log(LogLevel.INFO, "b", source="test")
        assert [e.message for e in logger.drain()] == ["a", "b"]
        assert len(logger) == 0
        assert logger.drain() == []


class TestSessionLogging:
    """Verify that sessions log their events."""

    def test_start_is_logged(self) -> None:
        """Creating a session should produce an INFO entry."""
        session = _session()
        assert any("session started" in e.message for e in session.logger.entries)

    def test_each_dispatch_is_logged(self) -> None:
        """Every executed line leaves a DEBUG record from the shell."""
        session = _session()
        for line in ("pwd", "ls", "echo hi"):
            session.set_input(line)
            session.submit()
        commands = [e.command for e in session.logger.filter(source="shell")]
        assert commands == ["pwd", "ls", "echo hi"]

    def test_interrupt_is_logged(self) -> None:
        """Ctrl+C leaves a DEBUG record with the abandoned text."""
        session = _session()
        session.set_input("cat do")
        session.interrupt()
        last = session.logger.entries[-1]
        assert last.level is LogLevel.DEBUG
        assert last.command == "cat do"

    def test_quiet_logger(self) -> None:
        """A logger set to ERROR keeps routine events out."""
        logger = Logger(min_level=LogLevel.ERROR)
        session = _session(logger)
        session.set_input("cd docs")
        session.submit()
        assert logger.entries == []
