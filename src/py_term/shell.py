"""The shell — command dispatcher for a terminal session.

The shell reads one input line, splits it into a command name and
arguments, dispatches to the matching handler, and returns a
``HistoryEntry`` pairing the line with its output.

Dispatch order:
    1. Custom commands from the ``CommandRegistry`` (they win name
       collisions with built-ins).
    2. Built-in commands (``help``, ``ls``, ``cd``, ``cat``, ``echo``,
       ``pwd``, ``clear``).
    3. Otherwise ``command not found: <name>``.

Design choices:
    - **Returns entries, not prints.**  The caller decides how to render
      the output, which keeps the shell fully testable.
    - **Command dispatch via a dict.**  Adding a built-in means writing a
      method and adding one dict entry.
    - **Errors are output.**  A missing file or a crashing custom handler
      produces an error line, never an exception — nothing a user types
      can take the session down.
    - **Session passed in, not owned.**  The shell is stateless; every
      call receives the ``Session`` whose state it reads and changes.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import TYPE_CHECKING, TypeAlias

from py_term.fs.filesystem import Directory, LinkFile, TextFile, is_directory
from py_term.history import HistoryEntry, Hyperlink, Output
from py_term.logging import LogLevel
from py_term.registry import CommandRegistry, CustomCommand

if TYPE_CHECKING:
    from py_term.session import Session

# A built-in handler: takes the args and the session, returns output.
_Handler: TypeAlias = "Callable[[list[str], Session], Output | None]"

CLEAR_COMMAND = "clear"
_PREVIOUS_DIR = "-"


class Shell:
    """Command dispatcher over a registry of custom and built-in commands."""

    def __init__(self, *, registry: CommandRegistry) -> None:
        """Create a shell that consults *registry* for custom commands."""
        self._registry = registry

        # Built-in dispatch table: command name to handler method.
        self._commands: dict[str, _Handler] = {
            "help": self._cmd_help,
            "ls": self._cmd_ls,
            "cd": self._cmd_cd,
            "cat": self._cmd_cat,
            "echo": self._cmd_echo,
            "pwd": self._cmd_pwd,
            "clear": self._cmd_clear,
        }

    @property
    def registry(self) -> CommandRegistry:
        """Return the command registry."""
        return self._registry

    def execute(self, line: str, session: Session) -> HistoryEntry:
        """Parse and execute one input line against *session*.

        Args:
            line: The raw input line (e.g. ``"cat docs/a.txt"``).
            session: The session whose path and scrollback the command
                reads or changes.

        Returns:
            The scrollback entry for this line.  Empty input yields an
            entry with no output.

        """
        stripped = line.strip()
        if not stripped:
            return HistoryEntry(command="")

        name, *args = stripped.split()
        session.logger.log(LogLevel.DEBUG, f"dispatch '{name}'", source="shell", command=stripped)

        custom = self._registry.get_custom(name)
        if custom is not None:
            return HistoryEntry(command=stripped, output=self._run_custom(custom, args, session))

        handler = self._commands.get(name)
        if handler is None:
            return HistoryEntry(command=stripped, output=f"command not found: {name}")
        return HistoryEntry(command=stripped, output=handler(args, session))

    @staticmethod
    def _run_custom(command: CustomCommand, args: list[str], session: Session) -> Output | None:
        """Invoke a custom handler, converting any failure into error text."""
        try:
            return command.handler(args, session.context())
        except Exception as e:  # noqa: BLE001
            session.logger.log(
                LogLevel.ERROR,
                f"handler for '{command.name}' raised {type(e).__name__}: {e}",
                source="shell",
                command=" ".join([command.name, *args]),
            )
            return f"error: executing {command.name}"

    # -- Command handlers ------------------------------------------------

    def _cmd_help(self, _args: list[str], _session: Session) -> str:
        """List available commands."""
        return "Commands: " + ", ".join(self._registry.names)

    @staticmethod
    def _cmd_pwd(_args: list[str], session: Session) -> str:
        """Print the working directory."""
        return session.path

    @staticmethod
    def _cmd_clear(_args: list[str], session: Session) -> None:
        """Empty the scrollback."""
        session.clear_scrollback()

    @staticmethod
    def _cmd_echo(args: list[str], _session: Session) -> str:
        """Echo arguments back as output."""
        return " ".join(args)

    @staticmethod
    def _cmd_ls(args: list[str], session: Session) -> str:
        """List a directory, or echo the name of a file."""
        target = args[0] if args else "."
        node = session.get_node(target)
        match node:
            case None:
                return f"ls: cannot access '{target}': No such file or directory"
            case Directory():
                return "  ".join(node.names()) or "(empty)"
            case _:
                return target

    @staticmethod
    def _cmd_cd(args: list[str], session: Session) -> str | None:
        """Change directory; ``cd -`` returns to the previous one."""
        raw_target = args[0] if args else None

        if raw_target == _PREVIOUS_DIR:
            previous = session.previous_path
            if previous is None:
                return "cd: OLDPWD not set"
            if not is_directory(session.get_node(previous)):
                return f"cd: {previous}: No such file or directory"
            session.change_directory(previous)
            return previous

        target = raw_target if raw_target is not None else "/"
        target_path = session.resolve(target)
        node = session.get_node(target_path)
        if node is None:
            return f"cd: {target}: No such file or directory"
        if not is_directory(node):
            return f"cd: not a directory: {target}"
        session.change_directory(target_path)
        return None

    @staticmethod
    def _cmd_cat(args: list[str], session: Session) -> Output:
        """Print a text file, or render a link file as a hyperlink."""
        if not args:
            return "cat: missing file operand"
        target = args[0]
        node = session.get_node(target)
        match node:
            case None:
                return f"cat: {target}: No such file"
            case Directory():
                return f"cat: {target}: Is a directory"
            case TextFile():
                return node.content
            case LinkFile():
                return Hyperlink(href=node.href, label=node.display_label, target=node.open_target)
