"""Terminal session — the state behind one prompt.

A session owns everything that changes while someone types:

- the working directory and the previous one (for ``cd -``);
- the scrollback (``HistoryEntry`` rows shown on screen);
- the live input buffer and any pending Tab-completion cycle;
- the recall stack navigated with Up/Down.

The filesystem tree is the one thing it does *not* own: it is handed
in at construction and only ever read.

Front ends drive a session through four events, each of which runs to
completion before the next::

    session.set_input("cat do")
    session.complete()          # Tab       → "cat docs/"
    session.submit()            # Enter     → HistoryEntry
    session.navigate_history("up")          # ArrowUp
    session.interrupt()         # Ctrl+C

A session is not thread-safe.  Callers serving several clients must
serialize access per session (see ``py_term.web.app``).
"""

from __future__ import annotations

from py_term.completer import Completer, CompletionState
from py_term.fs.filesystem import Directory, FSNode, is_directory, lookup
from py_term.fs.paths import normalize_path, resolve_path
from py_term.history import CommandHistory, Direction, HistoryEntry
from py_term.logging import Logger, LogLevel
from py_term.registry import CommandContext, CommandRegistry
from py_term.shell import CLEAR_COMMAND, Shell


class Session:
    """One interactive terminal session over a read-only tree."""

    def __init__(
        self,
        tree: Directory,
        *,
        start_path: str = "/",
        registry: CommandRegistry | None = None,
        logger: Logger | None = None,
    ) -> None:
        """Create a session.

        Args:
            tree: The root of the virtual filesystem.
            start_path: The initial working directory (normalized).
            registry: Custom commands; defaults to built-ins only.
            logger: Diagnostic log; a fresh one is created if omitted.

        """
        self._tree = tree
        self._path = normalize_path(start_path)
        self._previous_path: str | None = None
        self._registry = registry if registry is not None else CommandRegistry()
        self._logger = logger if logger is not None else Logger()
        self._shell = Shell(registry=self._registry)
        self._completer = Completer(self._registry)
        self._history = CommandHistory()
        self._scrollback: list[HistoryEntry] = []
        self._input = ""
        self._completion: CompletionState | None = None

        self._logger.log(LogLevel.INFO, f"session started in {self._path}", source="session")
        if self.cwd_node is None:
            self._logger.log(
                LogLevel.WARNING,
                f"start path {self._path} is not a directory",
                source="session",
            )

    # -- Read state --------------------------------------------------------

    @property
    def tree(self) -> Directory:
        """Return the filesystem root."""
        return self._tree

    @property
    def path(self) -> str:
        """Return the current working directory."""
        return self._path

    @property
    def previous_path(self) -> str | None:
        """Return the directory ``cd -`` would switch to, if any."""
        return self._previous_path

    @property
    def cwd_node(self) -> Directory | None:
        """Return the current directory node, or ``None`` if it does not resolve."""
        node = lookup(self._tree, self._path)
        return node if is_directory(node) else None

    @property
    def scrollback(self) -> list[HistoryEntry]:
        """Return the scrollback rows, oldest first."""
        return list(self._scrollback)

    @property
    def input(self) -> str:
        """Return the live input buffer."""
        return self._input

    @property
    def completion(self) -> CompletionState | None:
        """Return the pending completion cycle, if any."""
        return self._completion

    @property
    def history(self) -> CommandHistory:
        """Return the recall stack."""
        return self._history

    @property
    def registry(self) -> CommandRegistry:
        """Return the command registry."""
        return self._registry

    @property
    def logger(self) -> Logger:
        """Return the session logger."""
        return self._logger

    # -- Path helpers ------------------------------------------------------

    def resolve(self, path: str) -> str:
        """Resolve *path* against the working directory."""
        return resolve_path(path, self._path)

    def get_node(self, path: str) -> FSNode | None:
        """Resolve *path* and return the node it names, or ``None``."""
        return lookup(self._tree, self.resolve(path))

    def context(self) -> CommandContext:
        """Return the read-only view handed to custom command handlers."""
        return CommandContext(
            path=self._path,
            cwd_node=self.cwd_node,
            resolve=self.resolve,
            get_node=self.get_node,
        )

    # -- Mutators ----------------------------------------------------------

    def set_input(self, text: str) -> None:
        """Replace the input buffer.

        A pending completion cycle survives only if it was computed for
        exactly this text.
        """
        self._input = text
        if self._completion is not None and self._completion.seed_input != text:
            self._completion = None

    def set_path(self, path: str) -> None:
        """Set the working directory directly (``cd -`` is not affected)."""
        self._path = normalize_path(path)

    def change_directory(self, path: str) -> None:
        """Move to *path*, remembering the current directory for ``cd -``."""
        self._previous_path = self._path
        self._path = normalize_path(path)
        self._logger.log(
            LogLevel.INFO, f"cwd {self._previous_path} -> {self._path}", source="session"
        )

    def clear_scrollback(self) -> None:
        """Remove every scrollback row."""
        self._scrollback.clear()

    # -- Events ------------------------------------------------------------

    def submit(self) -> HistoryEntry:
        """Execute the input buffer (the Enter key).

        The entry is appended to the scrollback, blank lines included, and
        the line (if not blank) is pushed onto the recall stack.  ``clear``
        is the exception: it still goes on the recall stack, but its own
        entry is not shown, so the screen it just emptied stays empty.

        Returns:
            The entry produced by the command.

        """
        stripped = self._input.strip()
        entry = self._shell.execute(stripped, self)
        self._history.record(stripped)

        name = stripped.split(maxsplit=1)[0] if stripped else ""
        if name != CLEAR_COMMAND:
            self._scrollback.append(entry)

        self._reset_line()
        return entry

    def complete(self) -> None:
        """Run tab completion on the input buffer (the Tab key)."""
        result = self._completer.complete(
            self._input, self._completion, path=self._path, tree=self._tree
        )
        self._input = result.line
        self._completion = result.state

    def navigate_history(self, direction: Direction | str) -> None:
        """Recall an older or newer line (the Up/Down keys).

        Args:
            direction: ``"up"`` or ``"down"`` (or a ``Direction``).

        Raises:
            ValueError: If *direction* is not a valid direction.

        """
        text = self._history.navigate(Direction(direction))
        if text is not None:
            self._input = text
            self._completion = None

    def interrupt(self) -> HistoryEntry:
        """Abandon the input buffer (Ctrl+C).

        The unsent text is echoed into the scrollback with no output,
        but it is not executed and not added to the recall stack.

        Returns:
            The echoed entry.

        """
        entry = HistoryEntry(command=self._input)
        self._scrollback.append(entry)
        self._logger.log(LogLevel.DEBUG, "input interrupted", source="session", command=self._input)
        self._reset_line()
        return entry

    def _reset_line(self) -> None:
        """Clear the buffer, the recall cursor, and any completion cycle."""
        self._input = ""
        self._history.reset()
        self._completion = None
