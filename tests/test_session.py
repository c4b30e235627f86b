"""Tests for session orchestration.

The session ties the pieces together: it feeds the input buffer to the
shell on submit, keeps the scrollback and recall stack, and owns the
completion state between Tab presses.
"""

from py_term.completer import CommandCompletion, PathCompletion
from py_term.fs.filesystem import Directory, TextFile
from py_term.history import Direction, HistoryEntry
from py_term.logging import Logger, LogLevel
from py_term.registry import CommandRegistry
from py_term.session import Session


def _tree() -> Directory:
    """Build the scenario tree: one directory with two text files."""
    return Directory({"docs": Directory({"a.txt": TextFile("hi"), "b.txt": TextFile("yo")})})


def _submit(session: Session, line: str) -> HistoryEntry:
    """Type *line* and press Enter."""
    session.set_input(line)
    return session.submit()


class TestSessionCreation:
    """Verify initial state."""

    def test_defaults(self) -> None:
        """A new session starts at the root with empty state."""
        session = Session(_tree())
        assert session.path == "/"
        assert session.input == ""
        assert session.scrollback == []
        assert session.completion is None
        assert session.previous_path is None
        assert session.cwd_node is session.tree

    def test_start_path_is_normalized(self) -> None:
        """The start path is stored in canonical form."""
        session = Session(_tree(), start_path="docs/./")
        assert session.path == "/docs"

    def test_start_logged(self) -> None:
        """Session start is recorded at INFO."""
        session = Session(_tree())
        assert session.logger.entries[0].level is LogLevel.INFO

    def test_bad_start_path_warns(self) -> None:
        """A start path that is not a directory is flagged."""
        session = Session(_tree(), start_path="/nowhere")
        assert session.cwd_node is None
        assert session.logger.filter(min_level=LogLevel.WARNING)

    def test_shared_logger(self) -> None:
        """An injected logger receives the session's records."""
        logger = Logger()
        Session(_tree(), logger=logger)
        assert logger.filter(source="session")


class TestScenario:
    """Walk through the basic docs scenario."""

    def test_docs_walkthrough(self) -> None:
        """ls, cat, cd, pwd and a missing file behave as in a real shell."""
        session = Session(_tree())
        assert _submit(session, "ls docs").output == "a.txt  b.txt"
        assert _submit(session, "cat docs/a.txt").output == "hi"
        assert _submit(session, "cd docs").output is None
        assert _submit(session, "pwd").output == "/docs"
        assert _submit(session, "cat missing.txt").output == "cat: missing.txt: No such file"

    def test_scrollback_records_entries(self) -> None:
        """Each submitted line lands in the scrollback with its output."""
        session = Session(_tree())
        _submit(session, "  pwd ")
        _submit(session, "cd docs")
        assert session.scrollback == [
            HistoryEntry(command="pwd", output="/"),
            HistoryEntry(command="cd docs", output=None),
        ]


class TestSubmit:
    """Verify Enter handling."""

    def test_submit_resets_line_state(self) -> None:
        """Input, recall cursor, and completion are cleared."""
        session = Session(_tree())
        _submit(session, "pwd")
        session.navigate_history(Direction.UP)
        session.set_input("c")
        session.complete()
        session.submit()
        assert session.input == ""
        assert session.history.index is None
        assert session.completion is None

    def test_empty_submit(self) -> None:
        """Enter on an empty line adds a blank row but nothing to recall."""
        session = Session(_tree())
        entry = _submit(session, "   ")
        assert entry == HistoryEntry(command="")
        assert session.scrollback == [HistoryEntry(command="")]
        assert session.history.entries == []

    def test_blank_rows_between_commands(self) -> None:
        """Blank lines keep their place in the scrollback."""
        session = Session(_tree())
        _submit(session, "pwd")
        _submit(session, "")
        _submit(session, "echo hi")
        assert [row.command for row in session.scrollback] == ["pwd", "", "echo hi"]
        assert session.history.entries == ["pwd", "echo hi"]

    def test_recall_stack_fed(self) -> None:
        """Submitted lines are pushed onto the recall stack, trimmed."""
        session = Session(_tree())
        _submit(session, " ls ")
        _submit(session, "pwd")
        assert session.history.entries == ["ls", "pwd"]


class TestClear:
    """Verify the clear / recall asymmetry."""

    def test_clear_empties_scrollback(self) -> None:
        """clear leaves nothing on screen, not even itself."""
        session = Session(_tree())
        _submit(session, "pwd")
        _submit(session, "ls")
        _submit(session, "clear")
        assert session.scrollback == []

    def test_clear_is_recalled(self) -> None:
        """ArrowUp after clear brings back the literal ``clear``."""
        session = Session(_tree())
        _submit(session, "pwd")
        _submit(session, "clear")
        session.navigate_history(Direction.UP)
        assert session.input == "clear"

    def test_clear_with_arguments(self) -> None:
        """Arguments do not stop clear from being suppressed."""
        session = Session(_tree())
        _submit(session, "pwd")
        _submit(session, "clear now")
        assert session.scrollback == []
        assert session.history.entries[-1] == "clear now"

    def test_output_after_clear(self) -> None:
        """Commands after clear appear normally."""
        session = Session(_tree())
        _submit(session, "clear")
        _submit(session, "pwd")
        assert session.scrollback == [HistoryEntry(command="pwd", output="/")]


class TestNavigateHistory:
    """Verify Up/Down through the session."""

    def test_up_and_down(self) -> None:
        """Up recalls, Down past the end blanks the input."""
        session = Session(_tree())
        _submit(session, "ls")
        _submit(session, "pwd")
        session.navigate_history("up")
        assert session.input == "pwd"
        session.navigate_history("up")
        assert session.input == "ls"
        session.navigate_history("down")
        assert session.input == "pwd"
        session.navigate_history("down")
        assert session.input == ""

    def test_empty_history_keeps_input(self) -> None:
        """With nothing to recall, the typed text stays."""
        session = Session(_tree())
        session.set_input("half typed")
        session.navigate_history(Direction.UP)
        assert session.input == "half typed"

    def test_recall_discards_completion(self) -> None:
        """Recalling a line drops any pending completion cycle."""
        session = Session(_tree())
        _submit(session, "pwd")
        session.set_input("c")
        session.complete()
        assert session.completion is not None
        session.navigate_history(Direction.UP)
        assert session.completion is None


class TestComplete:
    """Verify Tab handling through the session."""

    def test_complete_updates_input(self) -> None:
        """A unique match rewrites the buffer."""
        session = Session(_tree())
        session.set_input("cat docs/a")
        session.complete()
        assert session.input == "cat docs/a.txt"
        assert session.completion is None

    def test_complete_cycles(self) -> None:
        """Repeated Tab cycles through options."""
        session = Session(_tree())
        session.set_input("cat docs/")
        session.complete()
        assert isinstance(session.completion, PathCompletion)
        session.complete()
        assert session.input == "cat docs/a.txt"
        session.complete()
        assert session.input == "cat docs/b.txt"

    def test_completion_uses_cwd(self) -> None:
        """Paths complete relative to the working directory."""
        session = Session(_tree())
        _submit(session, "cd docs")
        session.set_input("cat b")
        session.complete()
        assert session.input == "cat b.txt"

    def test_editing_invalidates_state(self) -> None:
        """Typing after Tab throws the cycle away."""
        session = Session(_tree())
        session.set_input("c")
        session.complete()
        assert isinstance(session.completion, CommandCompletion)
        session.set_input("cx")
        assert session.completion is None

    def test_setting_same_input_keeps_state(self) -> None:
        """Re-setting the seed text keeps the cycle alive."""
        session = Session(_tree())
        session.set_input("c")
        session.complete()
        session.set_input("c")
        assert session.completion is not None

    def test_custom_command_name_completes(self) -> None:
        """Registered names are offered by the session."""
        registry = CommandRegistry()
        registry.register("greet", lambda _args, _ctx: "hi")
        session = Session(_tree(), registry=registry)
        session.set_input("gr")
        session.complete()
        assert session.input == "greet"


class TestInterrupt:
    """Verify Ctrl+C handling."""

    def test_interrupt_echoes_input(self) -> None:
        """The unsent text appears in scrollback with no output."""
        session = Session(_tree())
        session.set_input("cat do")
        entry = session.interrupt()
        assert entry == HistoryEntry(command="cat do")
        assert session.scrollback == [entry]

    def test_interrupt_resets_line(self) -> None:
        """Input, recall cursor, and completion are cleared."""
        session = Session(_tree())
        _submit(session, "pwd")
        session.navigate_history(Direction.UP)
        session.interrupt()
        assert session.input == ""
        assert session.history.index is None
        assert session.completion is None

    def test_interrupt_does_not_execute_or_record(self) -> None:
        """An interrupted line never runs and is not recalled."""
        session = Session(_tree())
        session.set_input("cd docs")
        session.interrupt()
        assert session.path == "/"
        assert session.history.entries == []


class TestPathSetters:
    """Verify direct path control."""

    def test_set_path_normalizes(self) -> None:
        """set_path stores the canonical form."""
        session = Session(_tree())
        session.set_path("docs/../docs/")
        assert session.path == "/docs"

    def test_set_path_does_not_touch_previous(self) -> None:
        """Only cd records the previous directory."""
        session = Session(_tree())
        session.set_path("/docs")
        assert session.previous_path is None

    def test_cwd_node_none_when_unresolvable(self) -> None:
        """A path that no longer resolves yields no current node."""
        session = Session(_tree())
        session.set_path("/gone")
        assert session.cwd_node is None

    def test_change_directory_logged(self) -> None:
        """Directory changes are logged at INFO."""
        session = Session(_tree())
        _submit(session, "cd docs")
        messages = [e.message for e in session.logger.filter(source="session")]
        assert "cwd / -> /docs" in messages
