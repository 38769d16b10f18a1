"""
Structured Logging - text and JSON log output.

Two formats are supported:
- text: human-readable, optionally colored, for interactive use
- json: one JSON object per line, for log aggregation (cron, CI)

Extra fields passed with `extra=` (target, identifier, provider, ...)
are rendered as key=value pairs in text mode and under "context" in
JSON mode.

Usage:
    from gistsync.cli.logging import setup_logging

    setup_logging(level=logging.INFO, log_format="json")
    logger = logging.getLogger("SyncOrchestrator")
    logger.info("Created snippet", extra={"target": "gitlab", "identifier": "my-gist"})
"""

import json
import logging
import sys
import traceback
from datetime import datetime, timezone
from typing import Any


# Attributes every LogRecord carries; anything else came from `extra=`.
STANDARD_ATTRS = frozenset(
    {
        "args",
        "asctime",
        "created",
        "exc_info",
        "exc_text",
        "filename",
        "funcName",
        "levelname",
        "levelno",
        "lineno",
        "message",
        "module",
        "msecs",
        "msg",
        "name",
        "pathname",
        "process",
        "processName",
        "relativeCreated",
        "stack_info",
        "taskName",
        "thread",
        "threadName",
    }
)

NOISY_LOGGERS = ("urllib3", "requests")


def _extra_fields(record: logging.LogRecord) -> dict[str, Any]:
    return {
        key: value
        for key, value in record.__dict__.items()
        if key not in STANDARD_ATTRS and not key.startswith("_")
    }


# =============================================================================
# Formatters
# =============================================================================


class JSONFormatter(logging.Formatter):
    """
    Format log records as single-line JSON objects.

    Output fields:
        timestamp: ISO-8601 UTC with milliseconds (2024-01-15T10:30:00.123Z)
        level: Level name
        logger: Logger name
        message: Formatted message
        context: Extra fields, if any
        exception: {type, message, traceback}, if exc_info is set
        location: {file, line, function}, if include_location
    """

    def __init__(
        self,
        static_fields: dict[str, Any] | None = None,
        include_location: bool = False,
        include_timestamp: bool = True,
        include_level: bool = True,
        include_logger: bool = True,
    ):
        """
        Initialize the JSON formatter.

        Args:
            static_fields: Fields added to every record (e.g. service name).
            include_location: Add source file, line and function.
            include_timestamp: Add the timestamp field.
            include_level: Add the level field.
            include_logger: Add the logger field.
        """
        super().__init__()
        self.static_fields = dict(static_fields or {})
        self.include_location = include_location
        self.include_timestamp = include_timestamp
        self.include_level = include_level
        self.include_logger = include_logger

    def format(self, record: logging.LogRecord) -> str:
        entry: dict[str, Any] = {}

        if self.include_timestamp:
            entry["timestamp"] = self._format_timestamp(record.created)
        if self.include_level:
            entry["level"] = record.levelname
        if self.include_logger:
            entry["logger"] = record.name

        entry["message"] = record.getMessage()
        entry.update(self.static_fields)

        context = _extra_fields(record)
        if context:
            entry["context"] = context

        if record.exc_info and record.exc_info[0] is not None:
            exc_type, exc_value, exc_tb = record.exc_info
            entry["exception"] = {
                "type": exc_type.__name__,
                "message": str(exc_value),
                "traceback": "".join(traceback.format_exception(exc_type, exc_value, exc_tb)),
            }

        if self.include_location:
            entry["location"] = {
                "file": record.filename,
                "line": record.lineno,
                "function": record.funcName,
            }

        return json.dumps(entry, default=str, ensure_ascii=False)

    @staticmethod
    def _format_timestamp(created: float) -> str:
        moment = datetime.fromtimestamp(created, tz=timezone.utc)
        return moment.strftime("%Y-%m-%dT%H:%M:%S.") + f"{moment.microsecond // 1000:03d}Z"


class TextFormatter(logging.Formatter):
    """Human-readable formatter: `time LEVEL logger: message key=value ...`."""

    LEVEL_COLORS = {
        logging.DEBUG: "\033[2m",
        logging.INFO: "\033[36m",
        logging.WARNING: "\033[33m",
        logging.ERROR: "\033[31m",
        logging.CRITICAL: "\033[1;31m",
    }
    RESET = "\033[0m"

    def __init__(self, use_colors: bool = True, include_context: bool = True):
        super().__init__(datefmt="%Y-%m-%d %H:%M:%S")
        self.use_colors = use_colors
        self.include_context = include_context

    def format(self, record: logging.LogRecord) -> str:
        level = record.levelname
        if self.use_colors:
            level = f"{self.LEVEL_COLORS.get(record.levelno, '')}{level}{self.RESET}"

        timestamp = self.formatTime(record, self.datefmt)
        line = f"{timestamp} {level} {record.name}: {record.getMessage()}"

        if self.include_context:
            context = _extra_fields(record)
            if context:
                line += " " + " ".join(f"{k}={v}" for k, v in context.items())

        if record.exc_info:
            line += "\n" + self.formatException(record.exc_info)
        return line


# =============================================================================
# Setup
# =============================================================================


def setup_logging(
    level: int = logging.INFO,
    log_format: str = "text",
    log_file: str | None = None,
    static_fields: dict[str, Any] | None = None,
) -> None:
    """
    Configure root logging for the CLI.

    Existing root handlers are replaced. Logs go to stderr; when a log
    file is given, records are also appended there (never colored).

    Args:
        level: Root log level.
        log_format: "text" or "json".
        log_file: Optional path of a file to also write logs to.
        static_fields: Fields added to every JSON record.
    """
    root = logging.getLogger()
    for handler in root.handlers[:]:
        root.removeHandler(handler)
    root.setLevel(level)

    def make_formatter(use_colors: bool) -> logging.Formatter:
        if log_format == "json":
            return JSONFormatter(static_fields=static_fields)
        return TextFormatter(use_colors=use_colors)

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setFormatter(make_formatter(use_colors=sys.stderr.isatty()))
    root.addHandler(console_handler)

    if log_file:
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setFormatter(make_formatter(use_colors=False))
        root.addHandler(file_handler)

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def parse_level(name: str) -> int:
    """
    Map a configured level name to a logging level.

    >>> parse_level("warn")
    30
    """
    aliases = {"warn": "WARNING"}
    return logging.getLevelName(aliases.get(name.lower(), name.upper()))
