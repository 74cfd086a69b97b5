"""Structured logging configuration.

Provides JSON-formatted logs with:
- Category detection (engine, render, input, history, cli, system)
- surface_id context when available
- Structured JSON output for log aggregation
"""

from __future__ import annotations

import json
import logging
import sys
from datetime import UTC, datetime
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from typing import TextIO

# Logger name prefix -> category, most specific first
CATEGORIES: tuple[tuple[str, str], ...] = (
    ("museo_brush.engine", "engine"),
    ("museo_brush.renderers", "render"),
    ("museo_brush.surface", "render"),
    ("museo_brush.rendering", "render"),
    ("museo_brush.events", "input"),
    ("museo_brush.coordinates", "input"),
    ("museo_brush.history", "history"),
    ("museo_brush.cli", "cli"),
    ("PIL", "render"),
)

# Attributes every LogRecord carries; anything else came in through `extra=`
_RECORD_FIELDS = frozenset(vars(logging.makeLogRecord({}))) | {"message", "surface_id"}

PLAIN_FORMAT = "%(asctime)s %(levelname)5s [%(name)s] %(message)s"
MAX_LOG_BYTES = 10 * 1024 * 1024


def category_for(logger_name: str) -> str:
    for prefix, category in CATEGORIES:
        if logger_name == prefix or logger_name.startswith(prefix + "."):
            return category
    return "system"


def _jsonable(value: Any) -> Any:
    try:
        json.dumps(value)
    except (TypeError, ValueError):
        return str(value)
    return value


class StructuredFormatter(logging.Formatter):
    """JSON formatter, one object per line."""

    def format(self, record: logging.LogRecord) -> str:
        entry: dict[str, Any] = {
            "timestamp": datetime.now(UTC).isoformat(),
            "level": record.levelname,
            "category": category_for(record.name),
            "logger": record.name,
            "message": record.getMessage(),
        }

        surface_id = getattr(record, "surface_id", None)
        if surface_id is not None:
            entry["surface_id"] = surface_id

        extra = {
            key: _jsonable(value)
            for key, value in vars(record).items()
            if key not in _RECORD_FIELDS and not key.startswith("_")
        }
        if extra:
            entry["extra"] = extra

        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)

        return json.dumps(entry)


class PlainFormatter(logging.Formatter):
    """Human-readable lines, tagged with the surface a message is about."""

    def __init__(self) -> None:
        super().__init__(PLAIN_FORMAT, datefmt="%H:%M:%S")

    def formatMessage(self, record: logging.LogRecord) -> str:  # noqa: N802
        line = super().formatMessage(record)
        surface_id = getattr(record, "surface_id", None)
        return line if surface_id is None else f"{line} <{surface_id}>"


class ErrorFilter(logging.Filter):
    """Filter that only allows ERROR and CRITICAL level logs."""

    def filter(self, record: logging.LogRecord) -> bool:
        return record.levelno >= logging.ERROR


def _rotating_handler(
    path: str, formatter: logging.Formatter, backup_count: int
) -> RotatingFileHandler:
    Path(path).parent.mkdir(parents=True, exist_ok=True)
    handler = RotatingFileHandler(
        path, maxBytes=MAX_LOG_BYTES, backupCount=backup_count, encoding="utf-8"
    )
    handler.setFormatter(formatter)
    return handler


def configure_logging(
    *,
    json_format: bool = True,
    log_level: int = logging.INFO,
    log_file: str | None = None,
    error_log_file: str | None = None,
    stream: TextIO | None = None,
) -> None:
    """Replace the root logger's handlers.

    Args:
        json_format: JSON lines (StructuredFormatter) or PlainFormatter text
        log_level: Minimum log level
        log_file: Rotating log file for every record (None for stream only)
        error_log_file: Rotating log file for ERROR and above (None to skip)
        stream: Stream to write to (default: sys.stderr)
    """
    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    formatter: logging.Formatter = StructuredFormatter() if json_format else PlainFormatter()

    stream_handler = logging.StreamHandler(stream or sys.stderr)
    stream_handler.setFormatter(formatter)
    root_logger.addHandler(stream_handler)

    if log_file:
        root_logger.addHandler(_rotating_handler(log_file, formatter, backup_count=5))
    if error_log_file:
        error_handler = _rotating_handler(error_log_file, formatter, backup_count=10)
        error_handler.addFilter(ErrorFilter())
        root_logger.addHandler(error_handler)

    # Pillow logs every plugin import at DEBUG
    logging.getLogger("PIL").setLevel(logging.WARNING)
