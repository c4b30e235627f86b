"""Interactive REPL (Read-Eval-Print Loop) for a terminal session.

The REPL is the plain-terminal front end for the engine.  It loads a
tree (from a JSON document, or the built-in sample), creates a
session, and enters the classic loop:

    1. **Read** — display the prompt and read a line.
    2. **Eval** — hand the line to ``session.submit()``.
    3. **Print** — render the resulting entry.
    4. **Loop** — until ``exit`` or Ctrl+D.

Tab is routed through readline into the session's own completer, so
cycling and longest-common-prefix expansion behave exactly as in any
other front end.  Ctrl+C abandons the current line via
``session.interrupt()`` instead of quitting.

Log records go to stderr, never stdout, so piping a session's output
stays clean.  ``--log-level`` picks the threshold (``warning`` by
default).

The helpers (``build_prompt``, ``format_output``, ``ReadlineCompleter``)
are pure or nearly so and are tested directly; ``run()`` is the I/O
entrypoint.
"""

from __future__ import annotations

import argparse
import readline
import sys
from pathlib import Path

from py_term.config import TerminalConfig, load_config
from py_term.fs.filesystem import Directory
from py_term.fs.persistence import load_tree
from py_term.fs.sample import sample_tree
from py_term.history import HistoryEntry, Hyperlink, Output
from py_term.logging import Logger, LogLevel
from py_term.session import Session
from py_term.shell import CLEAR_COMMAND

EXIT_COMMAND = "exit"

# ANSI: erase display, cursor home.
_CLEAR_SCREEN = "\033[2J\033[H"

_DEFAULT_LOG_LEVEL = LogLevel.WARNING


def build_prompt(session: Session, config: TerminalConfig) -> str:
    """Return the configured prompt.

    A prompt ending in ``$ `` gets the working directory spliced in
    before the dollar sign, so ``guest@website:$ `` becomes
    ``guest@website:/docs$ ``.
    """
    marker = "$ "
    if config.prompt.endswith(marker):
        return f"{config.prompt[: -len(marker)]}{session.path}{marker}"
    return config.prompt


def format_output(output: Output | None) -> str | None:
    """Render an entry's output as plain text, or ``None`` if there is none."""
    match output:
        case None:
            return None
        case Hyperlink():
            return str(output)
        case str():
            return output
        case _:
            return str(output)


class ReadlineCompleter:
    """Adapt the session's Tab state machine to readline's callback.

    Readline asks for candidates one ``state`` at a time and replaces
    the word under the cursor with whatever we return.  We run the
    engine once (on ``state == 0``) and hand back the rewritten last
    word; the session keeps the cycle state, so the next Tab press
    continues the cycle.
    """

    def __init__(self, session: Session) -> None:
        """Create an adapter for *session*."""
        self._session = session

    def complete_line(self, line: str) -> str | None:
        """Run one Tab press on *line* and return the new last word.

        Returns:
            The replacement for the word being completed, or ``None``
            when completion left the line unchanged.

        """
        self._session.set_input(line)
        self._session.complete()
        new_line = self._session.input
        if new_line == line:
            return None
        words = new_line.split()
        return words[-1] if words else None

    def complete(self, _text: str, state: int) -> str | None:
        """Readline callback; only ``state == 0`` produces a candidate."""
        if state > 0:
            return None
        return self.complete_line(readline.get_line_buffer())


def _print_entry(entry: HistoryEntry) -> None:
    text = format_output(entry.output)
    if text is not None:
        print(text)  # noqa: T201


def _flush_log(logger: Logger) -> None:
    for record in logger.drain():
        print(record, file=sys.stderr)  # noqa: T201


def run(
    tree: Directory | None = None,
    config: TerminalConfig | None = None,
    logger: Logger | None = None,
) -> None:
    """Run the interactive REPL.

    Handles:
    - Tab completion through the session's completer.
    - Ctrl+C — interrupt the current line and keep going.
    - Ctrl+D or ``exit`` — leave the loop.

    Log records reaching *logger* (WARNING and above by default) are
    written to stderr after each line.
    """
    config = config if config is not None else TerminalConfig()
    logger = logger if logger is not None else Logger(min_level=_DEFAULT_LOG_LEVEL)
    session = Session(
        tree if tree is not None else sample_tree(),
        start_path=config.start_path,
        logger=logger,
    )
    _flush_log(logger)

    completer = ReadlineCompleter(session)
    readline.set_completer(completer.complete)
    readline.set_completer_delims(" \t")
    readline.parse_and_bind("tab: complete")

    if config.welcome_message:
        print(config.welcome_message)  # noqa: T201

    while True:
        try:
            line = input(build_prompt(session, config))
        except EOFError:
            # Ctrl+D: graceful exit
            print()  # noqa: T201
            break
        except KeyboardInterrupt:
            # Ctrl+C: drop the line, keep the session
            session.set_input(readline.get_line_buffer())
            session.interrupt()
            print("^C")  # noqa: T201
            _flush_log(logger)
            continue

        if line.strip() == EXIT_COMMAND:
            break
        session.set_input(line)
        entry = session.submit()
        if entry.command.split(maxsplit=1)[:1] == [CLEAR_COMMAND]:
            print(_CLEAR_SCREEN, end="")  # noqa: T201
        _print_entry(entry)
        _flush_log(logger)


def main(argv: list[str] | None = None) -> None:
    """Parse command-line arguments and start the REPL.

    This is the ``py-term`` console entry point.
    """
    parser = argparse.ArgumentParser(prog="py-term", description="Explore a virtual filesystem.")
    parser.add_argument("tree", nargs="?", type=Path, help="JSON tree document")
    parser.add_argument("--config", type=Path, help="JSON configuration file")
    parser.add_argument(
        "--log-level",
        type=LogLevel.parse,
        default=_DEFAULT_LOG_LEVEL,
        metavar="LEVEL",
        help="lowest log level echoed to stderr (debug, info, warning, error)",
    )
    args = parser.parse_args(argv)

    logger = Logger(min_level=args.log_level)
    config = load_config(args.config, logger=logger) if args.config else TerminalConfig()
    tree = load_tree(args.tree) if args.tree else None
    run(tree, config, logger)
