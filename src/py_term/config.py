"""Terminal configuration — prompt, welcome banner, and start directory.

The engine itself only needs a tree and a start path.  The consumers
(REPL and web UI) also need a prompt string and an optional welcome
message.  These live in one frozen dataclass so they travel together.

Configuration files are JSON, using the same camelCase keys a front end
would pass as component props::

    {"startPath": "/docs", "prompt": "me@site:$ ", "welcomeMessage": "hi"}

Unknown keys are reported as warnings and ignored, so a config shared
with a richer front end (themes, window chrome) still loads.  A known
key with the wrong type is an error.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from py_term.fs.paths import normalize_path
from py_term.logging import Logger, LogLevel

DEFAULT_PROMPT = "guest@website:$ "
DEFAULT_WELCOME_MESSAGE = ""
DEFAULT_START_PATH = "/"

# JSON key → dataclass field.
_KEYS: dict[str, str] = {
    "startPath": "start_path",
    "prompt": "prompt",
    "welcomeMessage": "welcome_message",
}


class ConfigError(ValueError):
    """Raise when a configuration document is malformed."""


@dataclass(frozen=True)
class TerminalConfig:
    """Settings shared by the terminal front ends."""

    start_path: str = DEFAULT_START_PATH
    prompt: str = DEFAULT_PROMPT
    welcome_message: str = DEFAULT_WELCOME_MESSAGE

    def __post_init__(self) -> None:
        """Normalize the start path."""
        object.__setattr__(self, "start_path", normalize_path(self.start_path))

    @classmethod
    def from_dict(cls, data: dict[str, Any], *, logger: Logger | None = None) -> TerminalConfig:
        """Build a config from its JSON-compatible form.

        Args:
            data: Decoded JSON object.
            logger: Receives a WARNING for every unknown key.

        Raises:
            ConfigError: If *data* is not an object or a value has the
                wrong type.

        """
        if not isinstance(data, dict):
            msg = "configuration must be a JSON object"
            raise ConfigError(msg)

        kwargs: dict[str, str] = {}
        for key, value in data.items():
            field_name = _KEYS.get(key)
            if field_name is None:
                if logger is not None:
                    logger.log(LogLevel.WARNING, f"ignoring unknown key '{key}'", source="config")
                continue
            if not isinstance(value, str):
                msg = f"'{key}' must be a string, got {type(value).__name__}"
                raise ConfigError(msg)
            kwargs[field_name] = value
        return cls(**kwargs)


def load_config(path: Path, *, logger: Logger | None = None) -> TerminalConfig:
    """Load a configuration file.

    Raises:
        FileNotFoundError: If the path does not exist.
        ConfigError: If the file is not valid JSON or not a valid config.

    """
    try:
        data = json.loads(path.read_text())
    except json.JSONDecodeError as e:
        msg = f"{path}: invalid JSON ({e.msg})"
        raise ConfigError(msg) from e
    return TerminalConfig.from_dict(data, logger=logger)
