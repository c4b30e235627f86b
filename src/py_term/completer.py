"""Tab completion for the terminal input line.

The completer is a small state machine driven by Tab presses:

    Idle ──Tab, many matches──▶ CommandCompletion / PathCompletion
      ▲                               │
      │                         Tab, line unchanged
      │                               ▼
      └──── line edited ───── cycle to the next option

On each Tab:

1. **Cycle** — if a pending state exists, it was computed for exactly
   the current line, and it has several options, rotate to the next
   option and rewrite the token being completed.
2. **Recompute** — otherwise throw the state away and start over:

   - Still typing the command name → match command names by prefix.
   - Typing an argument → ask the registry how the command completes
     its arguments.  Path policies list the base directory and keep
     children matching the typed prefix and the policy's scope.

   One match replaces the token outright.  Several matches insert
   their longest common prefix (if that adds anything) and enter a
   cycle state with index ``-1``, meaning "the next Tab shows option 0".

The completer is pure: it takes the line and the previous state and
returns a new line and state.  The ``Session`` owns the state between
presses.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import NamedTuple, TypeAlias

from py_term.fs.filesystem import Directory, is_directory, lookup
from py_term.fs.paths import resolve_path
from py_term.registry import CommandRegistry, CompletionScope, PathCompletionPolicy

_CURRENT_DIR = "."
_NOT_CYCLED = -1


@dataclass(frozen=True)
class CommandCompletion:
    """A pending cycle over command names.

    Attributes:
        options: The matching command names.
        index: The option currently shown; ``-1`` before the first cycle.
        seed_input: The line this state was computed for.

    """

    options: tuple[str, ...]
    index: int
    seed_input: str


@dataclass(frozen=True)
class PathCompletion:
    """A pending cycle over the children of one directory.

    Attributes:
        options: The matching child names (not full paths).
        index: The option currently shown; ``-1`` before the first cycle.
        seed_input: The line this state was computed for.
        base_part: The directory part of the token as typed (``.`` when
            the token had no slash); options are rebuilt onto it.

    """

    options: tuple[str, ...]
    index: int
    seed_input: str
    base_part: str


CompletionState: TypeAlias = CommandCompletion | PathCompletion


class Completion(NamedTuple):
    """The outcome of one Tab press."""

    line: str
    state: CompletionState | None


def longest_common_prefix(strings: list[str] | tuple[str, ...]) -> str:
    """Return the longest string that prefixes every item in *strings*.

    Examples::

        ["cat", "cd", "clear"] → "c"
        ["notes", "notebook"]  → "note"
        []                     → ""

    """
    if not strings:
        return ""
    prefix = strings[0]
    for s in strings[1:]:
        i = 0
        while i < len(prefix) and i < len(s) and prefix[i] == s[i]:
            i += 1
        prefix = prefix[:i]
        if not prefix:
            break
    return prefix


def _replace_first_token(line: str, replacement: str) -> str:
    """Swap the first word of *line* for *replacement*."""
    stripped = line.lstrip()
    leading = line[: len(line) - len(stripped)]
    word = stripped.split(maxsplit=1)[0] if stripped else ""
    return f"{leading}{replacement}{stripped[len(word) :]}"


def _last_token(line: str) -> str:
    """Return the text after the last whitespace (``""`` after a space)."""
    if line and line[-1].isspace():
        return ""
    return line.split()[-1] if line.split() else ""


def _replace_last_token(line: str, replacement: str) -> str:
    """Swap the last word of *line* (possibly empty) for *replacement*."""
    token = _last_token(line)
    return line[: len(line) - len(token)] + replacement


def _rebuild(base_part: str, name: str) -> str:
    """Join a child name back onto the directory part it was typed under."""
    if base_part == _CURRENT_DIR:
        return name
    return f"{base_part}/{name}"


class Completer:
    """Tab-completion engine for command names and path arguments."""

    def __init__(self, registry: CommandRegistry) -> None:
        """Create a completer that draws commands and policies from *registry*."""
        self._registry = registry

    def complete(
        self,
        line: str,
        state: CompletionState | None,
        *,
        path: str,
        tree: Directory,
    ) -> Completion:
        """Handle one Tab press.

        Args:
            line: The live input line.
            state: The pending completion state, if any.
            path: The current working directory.
            tree: The filesystem root.

        Returns:
            The rewritten line and the new state (``None`` when idle).

        """
        if state is not None and state.seed_input == line and len(state.options) > 1:
            return self._cycle(line, state)

        if not line.strip():
            return Completion(line, None)

        words = line.split()
        if len(words) == 1 and not line[-1].isspace():
            return self._complete_command(line, words[0])

        policy = self._registry.completion_for(words[0])
        if not isinstance(policy, PathCompletionPolicy):
            # Unknown command, or one that takes no argument completion.
            return Completion(line, None)
        return self._complete_path(line, policy.scope, path=path, tree=tree)

    # -- private completers ------------------------------------------------

    @staticmethod
    def _cycle(line: str, state: CompletionState) -> Completion:
        """Advance a pending cycle to its next option."""
        index = (state.index + 1) % len(state.options)
        choice = state.options[index]
        match state:
            case CommandCompletion():
                new_line = _replace_first_token(line, choice)
            case PathCompletion():
                new_line = _replace_last_token(line, _rebuild(state.base_part, choice))
        return Completion(new_line, replace(state, index=index, seed_input=new_line))

    def _complete_command(self, line: str, token: str) -> Completion:
        """Complete the command name being typed."""
        matches = sorted(name for name in self._registry.names if name.startswith(token))
        if not matches:
            return Completion(line, None)
        if len(matches) == 1:
            return Completion(_replace_first_token(line, matches[0]), None)

        prefix = longest_common_prefix(matches)
        new_line = _replace_first_token(line, prefix) if len(prefix) > len(token) else line
        return Completion(
            new_line,
            CommandCompletion(options=tuple(matches), index=_NOT_CYCLED, seed_input=new_line),
        )

    @staticmethod
    def _complete_path(
        line: str, scope: CompletionScope, *, path: str, tree: Directory
    ) -> Completion:
        """Complete the path argument at the end of the line.

        Split the token into a directory part and a name prefix
        (``docs/ge`` → ``docs`` + ``ge``), list the directory, and keep
        children that start with the prefix and satisfy *scope*.
        """
        token = _last_token(line)
        last_slash = token.rfind("/")
        if last_slash == -1:
            base_part, prefix = _CURRENT_DIR, token
        else:
            base_part, prefix = token[:last_slash], token[last_slash + 1 :]

        # "/x" has an empty directory part, which names the root.
        base_dir = lookup(tree, resolve_path(base_part or "/", path))
        if not is_directory(base_dir):
            return Completion(line, None)

        matches = sorted(
            name
            for name, node in base_dir.entries.items()
            if name.startswith(prefix) and scope.matches(node)
        )
        if not matches:
            return Completion(line, None)
        if len(matches) == 1:
            return Completion(_replace_last_token(line, _rebuild(base_part, matches[0])), None)

        common = longest_common_prefix(matches)
        new_line = line
        if len(common) > len(prefix):
            new_line = _replace_last_token(line, _rebuild(base_part, common))
        return Completion(
            new_line,
            PathCompletion(
                options=tuple(matches),
                index=_NOT_CYCLED,
                seed_input=new_line,
                base_part=base_part,
            ),
        )
