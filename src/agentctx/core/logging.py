"""Diagnostics for agentctx.

stdout carries exactly one JSON document per run, so every diagnostic goes
to stderr. Collectors log from worker threads; each line is written with a
single print call and carries the thread name in JSON mode.
"""

import json
import sys
import threading
from datetime import UTC, datetime
from typing import Any, Literal

LogLevel = Literal["debug", "info", "warning", "error"]
LogFormat = Literal["text", "json"]

_verbose = False
_quiet = False
_log_format: LogFormat = "text"


def configure_logging(
    log_format: LogFormat = "text",
    quiet: bool = False,
    verbose: bool | None = None,
) -> None:
    """Configure logging settings.

    Args:
        log_format: Output format for log messages
        quiet: Suppress debug and info output
        verbose: Emit debug output (left unchanged when None)
    """
    global _log_format, _quiet, _verbose
    _log_format = log_format
    _quiet = quiet
    if verbose is not None:
        _verbose = verbose


def _enabled(level: LogLevel) -> bool:
    if level == "debug":
        return _verbose and not _quiet
    if level == "info":
        return not _quiet
    return True


def _format_text(level: LogLevel, message: str, context: dict[str, Any]) -> str:
    fields = "".join(f" {key}={value}" for key, value in context.items())
    return f"[{level.upper()}] {message}{fields}"


def _format_json(level: LogLevel, message: str, context: dict[str, Any]) -> str:
    entry = {
        "timestamp": datetime.now(UTC).isoformat(),
        "level": level,
        "message": message,
        "thread": threading.current_thread().name,
        **context,
    }
    return json.dumps(entry, default=str)


def log(message: str, level: LogLevel = "info", **context: Any) -> None:
    """Log a message to stderr.

    Args:
        message: Log message
        level: Log level
        **context: Additional fields, appended as key=value in text mode
    """
    if not _enabled(level):
        return
    formatter = _format_json if _log_format == "json" else _format_text
    print(formatter(level, message, context), file=sys.stderr)


def debug(message: str, **context: Any) -> None:
    """Log a debug message (only with --verbose)."""
    log(message, level="debug", **context)


def info(message: str, **context: Any) -> None:
    log(message, level="info", **context)


def warning(message: str, **context: Any) -> None:
    log(message, level="warning", **context)


def error(message: str, **context: Any) -> None:
    log(message, level="error", **context)
