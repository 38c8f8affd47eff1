"""
Structured logging configuration for sortcheck.

Provides:
- JSON-formatted logs (machine-readable)
- Human-readable logs for interactive use
- A check correlation ID, set per validated pair in batch runs

Usage:
    from sortcheck.logging import setup_logging

    setup_logging(level="DEBUG", json_format=True)

    logger = logging.getLogger(__name__)
    logger.info("Loaded rules", extra={"rule_count": 1116})
"""

import json
import logging
import sys
from contextvars import ContextVar
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

# Context variable for the check correlation ID
check_id_var: ContextVar[str | None] = ContextVar("check_id", default=None)

# Standard LogRecord attributes, never copied as extra fields
_RECORD_ATTRS = frozenset({
    "name", "msg", "args", "created", "filename", "funcName",
    "levelname", "levelno", "lineno", "module", "msecs",
    "pathname", "process", "processName", "relativeCreated",
    "stack_info", "exc_info", "exc_text", "thread", "threadName",
    "taskName", "message",
})


def get_check_id() -> str | None:
    """Get the current check correlation ID."""
    return check_id_var.get()


def set_check_id(check_id: str | None) -> None:
    """Set the current check correlation ID."""
    check_id_var.set(check_id)


def _extra_fields(record: logging.LogRecord) -> dict[str, Any]:
    return {
        key: value
        for key, value in record.__dict__.items()
        if key not in _RECORD_ATTRS and not key.startswith("_")
    }


class JSONFormatter(logging.Formatter):
    """
    JSON log formatter for structured logging.

    Output format:
    {
        "timestamp": "2026-01-15T10:30:00.123456+00:00",
        "level": "INFO",
        "logger": "sortcheck.core.rules",
        "message": "Loaded 1116 modulus rules from valacdos.txt",
        "check_id": "row-12",
        ...
    }
    """

    def format(self, record: logging.LogRecord) -> str:
        log_data: dict[str, Any] = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        check_id = get_check_id()
        if check_id:
            log_data["check_id"] = check_id

        if record.levelno >= logging.WARNING:
            log_data["source"] = {
                "file": record.pathname,
                "line": record.lineno,
                "function": record.funcName,
            }

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        for key, value in _extra_fields(record).items():
            try:
                json.dumps(value)
                log_data[key] = value
            except (TypeError, ValueError):
                log_data[key] = str(value)

        return json.dumps(log_data, default=str)


class DevelopmentFormatter(logging.Formatter):
    """
    Human-readable log formatter.

    Output format:
    2026-01-15 10:30:00 DEBUG    [row-12] [sortcheck.core.session] Attempt 1/2 ...
    """

    COLORS = {
        "DEBUG": "\033[36m",     # Cyan
        "INFO": "\033[32m",      # Green
        "WARNING": "\033[33m",   # Yellow
        "ERROR": "\033[31m",     # Red
        "CRITICAL": "\033[35m",  # Magenta
    }
    RESET = "\033[0m"

    def __init__(self, use_colors: bool = True) -> None:
        super().__init__()
        self.use_colors = use_colors

    def format(self, record: logging.LogRecord) -> str:
        timestamp = datetime.now().strftime("%Y-%m-%d %H:%M:%S")
        level = f"{record.levelname:8}"

        if self.use_colors:
            color = self.COLORS.get(record.levelname, "")
            level = f"{color}{level}{self.RESET}"

        extras = " ".join(f"{key}={value}" for key, value in _extra_fields(record).items())
        extra_str = f" {extras}" if extras else ""

        check_id = get_check_id()
        check_str = f" [{check_id}]" if check_id else ""

        message = f"{timestamp} {level}{check_str} [{record.name}] {record.getMessage()}{extra_str}"

        if record.exc_info:
            message += "\n" + self.formatException(record.exc_info)

        return message


def setup_logging(
    level: str = "WARNING",
    json_format: bool = False,
    log_file: str | Path | None = None,
) -> None:
    """
    Configure logging for the application.

    Logs go to stderr so that command output on stdout stays parseable.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR)
        json_format: Use JSON formatting
        log_file: Optional file path to write logs (always JSON)
    """
    root_logger = logging.getLogger()
    root_logger.setLevel(getattr(logging, level.upper()))

    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    if json_format:
        formatter: logging.Formatter = JSONFormatter()
    else:
        formatter = DevelopmentFormatter(use_colors=sys.stderr.isatty())

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)

    if log_file:
        file_handler = logging.FileHandler(log_file)
        file_handler.setFormatter(JSONFormatter())
        root_logger.addHandler(file_handler)

