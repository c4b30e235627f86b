"""Command registry — built-in names, custom commands, completion policy.

The terminal ships seven built-ins (``help``, ``ls``, ``cd``, ``cat``,
``echo``, ``pwd``, ``clear``).  Embedding applications add their own
commands by registering a handler::

    registry = CommandRegistry()
    registry.register("whoami", lambda args, ctx: "guest")
    registry.register("open", open_project, completion=paths(CompletionScope.LINK_FILES))

A custom command whose name collides with a built-in **replaces** it.

Each command also declares how its arguments complete on Tab:

- ``NO_COMPLETION`` — Tab does nothing after the command name.  This is
  the default for custom commands: no declaration means no completion.
- ``paths(scope)`` — complete path segments, keeping only children the
  scope accepts (any node, directories, files, text or link files).

Handlers receive a read-only ``CommandContext`` — never the session
itself — so a custom command can inspect the tree but not rearrange
the terminal underneath the user.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass
from enum import StrEnum
from typing import TypeAlias

from py_term.fs.filesystem import (
    Directory,
    FSNode,
    is_directory,
    is_file,
    is_link_file,
    is_text_file,
)
from py_term.history import Output

BUILTIN_COMMANDS: tuple[str, ...] = ("help", "ls", "cd", "cat", "echo", "pwd", "clear")


class CompletionScope(StrEnum):
    """Which children a path completion may offer."""

    ANY = "any"
    DIRECTORIES = "directories"
    FILES = "files"
    TEXT_FILES = "textFiles"
    LINK_FILES = "linkFiles"

    def matches(self, node: FSNode) -> bool:
        """Return True if *node* is acceptable under this scope."""
        match self:
            case CompletionScope.DIRECTORIES:
                return is_directory(node)
            case CompletionScope.FILES:
                return is_file(node)
            case CompletionScope.TEXT_FILES:
                return is_text_file(node)
            case CompletionScope.LINK_FILES:
                return is_link_file(node)
            case _:
                return True


@dataclass(frozen=True)
class NoCompletion:
    """Arguments of this command are never completed."""


@dataclass(frozen=True)
class PathCompletionPolicy:
    """Arguments of this command complete as paths within *scope*."""

    scope: CompletionScope = CompletionScope.ANY


CompletionPolicy: TypeAlias = NoCompletion | PathCompletionPolicy

NO_COMPLETION = NoCompletion()


def paths(scope: CompletionScope = CompletionScope.ANY) -> PathCompletionPolicy:
    """Return a path completion policy for *scope*."""
    return PathCompletionPolicy(scope=scope)


# Built-in argument completion.
_BUILTIN_COMPLETION: dict[str, CompletionPolicy] = {
    "help": NO_COMPLETION,
    "ls": paths(CompletionScope.ANY),
    "cd": paths(CompletionScope.DIRECTORIES),
    "cat": paths(CompletionScope.FILES),
    "echo": paths(CompletionScope.ANY),
    "pwd": NO_COMPLETION,
    "clear": NO_COMPLETION,
}


@dataclass(frozen=True)
class CommandContext:
    """What a custom handler may see of the session.

    Attributes:
        path: The current working directory.
        cwd_node: The directory at *path*, or ``None`` if it no longer
            resolves.
        resolve: Turn a typed path into an absolute one.
        get_node: Resolve a typed path and look it up in the tree.

    """

    path: str
    cwd_node: Directory | None
    resolve: Callable[[str], str]
    get_node: Callable[[str], FSNode | None]


Handler: TypeAlias = Callable[[list[str], CommandContext], Output]


@dataclass(frozen=True)
class CustomCommand:
    """A caller-supplied command."""

    name: str
    handler: Handler
    completion: CompletionPolicy = NO_COMPLETION


class CommandRegistry:
    """Lookup table of command names, handlers, and completion policies."""

    def __init__(self, commands: Mapping[str, Handler] | None = None) -> None:
        """Create a registry, optionally pre-populated with handlers.

        Args:
            commands: Name → handler pairs, registered with no
                argument completion.

        """
        self._custom: dict[str, CustomCommand] = {}
        for name, handler in (commands or {}).items():
            self.register(name, handler)

    @property
    def builtin_names(self) -> list[str]:
        """Return the built-in command names in declaration order."""
        return list(BUILTIN_COMMANDS)

    @property
    def names(self) -> list[str]:
        """Return every known command name.

        Built-ins come first (in declaration order), followed by custom
        commands in registration order.  Overridden built-ins appear once.
        """
        extra = [name for name in self._custom if name not in BUILTIN_COMMANDS]
        return [*BUILTIN_COMMANDS, *extra]

    def register(
        self,
        name: str,
        handler: Handler,
        *,
        completion: CompletionPolicy = NO_COMPLETION,
    ) -> CustomCommand:
        """Register (or replace) a custom command.

        Args:
            name: The command name typed at the prompt.
            handler: Called with ``(args, context)``; returns the output.
            completion: How the command's arguments complete on Tab.

        Returns:
            The registered command.

        Raises:
            ValueError: If *name* is empty or contains whitespace.

        """
        if not name or name != "".join(name.split()):
            msg = f"Invalid command name: {name!r}"
            raise ValueError(msg)
        command = CustomCommand(name=name, handler=handler, completion=completion)
        self._custom[name] = command
        return command

    def unregister(self, name: str) -> None:
        """Remove a custom command (restoring any built-in it shadowed).

        Raises:
            KeyError: If no custom command is called *name*.

        """
        del self._custom[name]

    def get_custom(self, name: str) -> CustomCommand | None:
        """Return the custom command called *name*, or ``None``."""
        return self._custom.get(name)

    def completion_for(self, name: str) -> CompletionPolicy | None:
        """Return the completion policy for *name*, or ``None`` if unknown."""
        custom = self._custom.get(name)
        if custom is not None:
            return custom.completion
        return _BUILTIN_COMPLETION.get(name)

    def __contains__(self, name: object) -> bool:
        """Return True if *name* is a built-in or custom command."""
        return name in self._custom or name in BUILTIN_COMMANDS
