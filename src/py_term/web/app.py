"""Flask application factory for the PyTerm web API.

The ``create_app`` function creates one terminal session and returns a
Flask app that forwards browser key events to it:

- ``GET /api/state`` — path, input, completion cycle, and scrollback.
- ``POST /api/submit`` — Enter: execute ``{"input": ...}``.
- ``POST /api/complete`` — Tab: complete ``{"input": ...}``.
- ``POST /api/history`` — ArrowUp/ArrowDown: ``{"direction": ...}``.
- ``POST /api/interrupt`` — Ctrl+C: abandon ``{"input": ...}``.
- ``GET /api/log`` — diagnostic records, filtered by ``level`` and
  ``source`` query parameters.
- ``DELETE /api/log`` — drop the stored records.

Flask serves requests on several threads, but a session must only see
one event at a time, so every route holds the session lock.
"""

from __future__ import annotations

import threading
from typing import Any

from flask import Flask, Response, jsonify, request

from py_term.completer import CommandCompletion, CompletionState, PathCompletion
from py_term.config import TerminalConfig
from py_term.fs.filesystem import Directory
from py_term.fs.sample import sample_tree
from py_term.history import Direction, HistoryEntry, Hyperlink, Output
from py_term.logging import Logger, LogLevel
from py_term.registry import CommandRegistry
from py_term.session import Session

_HTTP_BAD_REQUEST = 400


def serialize_output(output: Output | None) -> dict[str, Any] | None:
    """Convert command output to JSON: text, link, or ``None``."""
    match output:
        case None:
            return None
        case Hyperlink():
            return {
                "type": "link",
                "href": output.href,
                "label": output.label,
                "target": output.target.value,
            }
        case _:
            return {"type": "text", "text": str(output)}


def serialize_entry(entry: HistoryEntry) -> dict[str, Any]:
    """Convert a scrollback entry to JSON."""
    return {"command": entry.command, "output": serialize_output(entry.output)}


def serialize_completion(state: CompletionState | None) -> dict[str, Any] | None:
    """Convert a pending completion cycle to JSON (for the options menu)."""
    match state:
        case None:
            return None
        case CommandCompletion():
            kind = "command"
        case PathCompletion():
            kind = "path"
    return {"kind": kind, "options": list(state.options), "index": state.index}


def _read_str(data: dict[str, Any] | None, key: str) -> str | None:
    if data is None or not isinstance(data.get(key), str):
        return None
    return data[key]


def create_app(
    tree: Directory | None = None,
    config: TerminalConfig | None = None,
    registry: CommandRegistry | None = None,
    logger: Logger | None = None,
) -> Flask:
    """Create and configure the Flask application.

    Args:
        tree: The filesystem to serve; defaults to the sample tree.
        config: Start path, prompt, and welcome message.
        registry: Custom commands available in the session.
        logger: Receives the session's diagnostic records.

    Returns:
        A configured Flask application ready to serve.

    """
    config = config if config is not None else TerminalConfig()
    session = Session(
        tree if tree is not None else sample_tree(),
        start_path=config.start_path,
        registry=registry,
        logger=logger,
    )
    lock = threading.Lock()

    app = Flask(__name__)
    app.config["PY_TERM_SESSION"] = session

    def _bad_request(message: str) -> tuple[Response, int]:
        return jsonify({"error": message}), _HTTP_BAD_REQUEST

    @app.route("/api/state")
    def state() -> Response:  # pyright: ignore[reportUnusedFunction]
        """Return the session state for rendering."""
        with lock:
            return jsonify(
                {
                    "path": session.path,
                    "prompt": config.prompt,
                    "welcomeMessage": config.welcome_message,
                    "input": session.input,
                    "completion": serialize_completion(session.completion),
                    "scrollback": [serialize_entry(e) for e in session.scrollback],
                }
            )

    @app.route("/api/submit", methods=["POST"])
    def submit() -> tuple[Response, int] | Response:  # pyright: ignore[reportUnusedFunction]
        """Execute a line and return its entry.

        Expects JSON body: ``{"input": "..."}``
        """
        line = _read_str(request.get_json(silent=True), "input")
        if line is None:
            return _bad_request("Missing 'input' field")
        with lock:
            session.set_input(line)
            entry = session.submit()
            return jsonify({"entry": serialize_entry(entry), "path": session.path})

    @app.route("/api/complete", methods=["POST"])
    def complete() -> tuple[Response, int] | Response:  # pyright: ignore[reportUnusedFunction]
        """Run one Tab press and return the rewritten input.

        Expects JSON body: ``{"input": "..."}``
        """
        line = _read_str(request.get_json(silent=True), "input")
        if line is None:
            return _bad_request("Missing 'input' field")
        with lock:
            session.set_input(line)
            session.complete()
            return jsonify(
                {"input": session.input, "completion": serialize_completion(session.completion)}
            )

    @app.route("/api/history", methods=["POST"])
    def history() -> tuple[Response, int] | Response:  # pyright: ignore[reportUnusedFunction]
        """Recall an older or newer line.

        Expects JSON body: ``{"direction": "up" | "down"}``
        """
        raw = _read_str(request.get_json(silent=True), "direction")
        if raw not in {d.value for d in Direction}:
            return _bad_request("'direction' must be 'up' or 'down'")
        with lock:
            session.navigate_history(Direction(raw))
            return jsonify({"input": session.input})

    @app.route("/api/interrupt", methods=["POST"])
    def interrupt() -> Response:  # pyright: ignore[reportUnusedFunction]
        """Abandon the current line.

        Accepts an optional JSON body: ``{"input": "..."}``
        """
        line = _read_str(request.get_json(silent=True), "input")
        with lock:
            if line is not None:
                session.set_input(line)
            entry = session.interrupt()
            return jsonify({"entry": serialize_entry(entry)})

    @app.route("/api/log")
    def log() -> tuple[Response, int] | Response:  # pyright: ignore[reportUnusedFunction]
        """Return stored log records, oldest first.

        Optional query parameters: ``level`` (lowest level to include)
        and ``source`` (component name).
        """
        raw_level = request.args.get("level")
        try:
            min_level = LogLevel.parse(raw_level) if raw_level is not None else None
        except ValueError as e:
            return _bad_request(str(e))
        with lock:
            records = session.logger.filter(
                min_level=min_level, source=request.args.get("source")
            )
            return jsonify({"entries": [r.to_dict() for r in records]})

    @app.route("/api/log", methods=["DELETE"])
    def clear_log() -> Response:  # pyright: ignore[reportUnusedFunction]
        """Drop every stored log record."""
        with lock:
            session.logger.clear()
            return jsonify({"entries": []})

    return app


def main() -> None:
    """Run the web API development server.

    This is the ``py-term-web`` console entry point.
    """
    app = create_app()
    app.run(debug=True, port=8080)
