"""
Process logging for the publisher.

The process log (stderr, optionally a JSON file) is kept apart from the
build console. Structured context attached with log_with_context() or
extra={...} travels with each record:

- JSONFormatter puts it at the top level of the JSON object
- ContextFormatter appends it as key=value pairs

Usage:
    from hygieia_publisher.core.logging_config import get_logger, log_with_context

    logger = get_logger(__name__)
    log_with_context(logger, "info", "Build published", endpoint="https://hygieia.example.com/api")
"""

import json
import logging
import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

PLAIN_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# Attributes every LogRecord carries; anything else came from extra={...}
_RESERVED_ATTRS = set(logging.LogRecord("", 0, "", 0, "", (), None).__dict__) | {"message", "asctime"}

_QUIET_LOGGERS = ("urllib3", "requests")


def _context_fields(record: logging.LogRecord) -> dict[str, Any]:
    """Context attached to a record, from log_with_context() and plain extra={...}."""
    fields = dict(getattr(record, "extra_fields", None) or {})
    for key, value in record.__dict__.items():
        if key not in _RESERVED_ATTRS and key != "extra_fields":
            fields[key] = value
    return fields


class JSONFormatter(logging.Formatter):
    """One JSON object per record, for log aggregation."""

    def format(self, record: logging.LogRecord) -> str:
        entry: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "source": f"{record.module}:{record.funcName}:{record.lineno}",
        }
        entry.update(_context_fields(record))
        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(entry, default=str)


class ContextFormatter(logging.Formatter):
    """
    Single-line human-readable format with context fields appended.

    Colors the whole line by level when use_color is set (default: when
    stderr is a terminal).

    Example output:
        2026-10-19 12:00:00 | INFO     | hygieia_publisher.listener | Endpoint build publish finished | endpoint=http://a/api status=published
    """

    LEVEL_COLORS = {
        logging.DEBUG: "\033[36m",
        logging.INFO: "\033[32m",
        logging.WARNING: "\033[33m",
        logging.ERROR: "\033[31m",
        logging.CRITICAL: "\033[35m",
    }
    RESET = "\033[0m"

    def __init__(self, use_color: bool | None = None):
        super().__init__(fmt=PLAIN_FORMAT, datefmt=DATE_FORMAT)
        self.use_color = sys.stderr.isatty() if use_color is None else use_color

    def format(self, record: logging.LogRecord) -> str:
        line = super().format(record)
        context = _context_fields(record)
        if context:
            line += " | " + " ".join(f"{key}={value}" for key, value in sorted(context.items()))
        if self.use_color:
            line = f"{self.LEVEL_COLORS.get(record.levelno, '')}{line}{self.RESET}"
        return line


def _resolve_level(level: str) -> int:
    resolved = logging.getLevelName(level.upper())
    return resolved if isinstance(resolved, int) else logging.INFO


def setup_logging(
    level: str = "INFO",
    log_file: Path | None = None,
    json_output: bool = False,
) -> None:
    """
    Configure the process log; replaces any handlers on the root logger.

    Args:
        level: Level name; unknown names fall back to INFO
        log_file: Optional JSON log file, created with its parent directory
        json_output: Write JSON instead of the human-readable format to stderr

    Example:
        setup_logging(level="DEBUG", log_file=Path(".tmp/logs/publisher.log"))
    """
    log_level = _resolve_level(level)

    stderr_handler = logging.StreamHandler(sys.stderr)
    stderr_handler.setFormatter(JSONFormatter() if json_output else ContextFormatter())
    handlers: list[logging.Handler] = [stderr_handler]

    if log_file:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setFormatter(JSONFormatter())
        handlers.append(file_handler)

    root = logging.getLogger()
    root.handlers.clear()
    root.setLevel(log_level)
    for handler in handlers:
        handler.setLevel(log_level)
        root.addHandler(handler)

    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def get_logger(name: str) -> logging.Logger:
    """Module logger; call with __name__."""
    return logging.getLogger(name)


def log_with_context(logger: logging.Logger, level: str, message: str, **context: Any) -> None:
    """
    Log a message with structured context fields.

    Example:
        log_with_context(logger, "info", "Endpoint build publish finished",
                         endpoint="http://a/api", status="published")
    """
    getattr(logger, level.lower())(message, extra={"extra_fields": context})
