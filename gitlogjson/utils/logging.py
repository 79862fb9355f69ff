"""Logging setup for gitlogjson."""

import logging
import sys
import json
from datetime import datetime, timezone
from typing import Dict, Any

from rich.console import Console
from rich.logging import RichHandler


# Attributes present on every LogRecord; anything else came in via `extra`.
_STANDARD_ATTRS = {
    "name",
    "msg",
    "args",
    "created",
    "filename",
    "funcName",
    "levelname",
    "levelno",
    "lineno",
    "module",
    "msecs",
    "message",
    "pathname",
    "process",
    "processName",
    "relativeCreated",
    "thread",
    "threadName",
    "taskName",
    "exc_info",
    "exc_text",
    "stack_info",
    "repo_path",
    "commit_count",
    "duration",
    "line_number",
}


class JSONFormatter(logging.Formatter):
    """Format log records as JSON for structured logging."""

    def format(self, record: logging.LogRecord) -> str:
        """
        Format log record as JSON.

        Args:
            record: Log record to format

        Returns:
            JSON-formatted log string
        """
        log_data: Dict[str, Any] = {
            "timestamp": datetime.now(timezone.utc).isoformat().replace("+00:00", "Z"),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        # Export context
        if hasattr(record, "repo_path"):
            log_data["repo_path"] = record.repo_path
        if hasattr(record, "commit_count"):
            log_data["commit_count"] = record.commit_count
        if hasattr(record, "duration"):
            log_data["duration_ms"] = record.duration
        if hasattr(record, "line_number"):
            log_data["input_line"] = record.line_number

        for key, value in record.__dict__.items():
            if key not in _STANDARD_ATTRS:
                log_data[key] = value

        return json.dumps(log_data, default=str)


def setup_logger(
    name: str = "gitlogjson",
    level: int = logging.INFO,
    verbose: bool = False,
    json_format: bool = False,
) -> logging.Logger:
    """
    Set up logger with Rich or JSON formatting.

    Args:
        name: Logger name
        level: Logging level
        verbose: Enable verbose logging
        json_format: Use JSON structured logging (for automation)

    Returns:
        Configured logger instance
    """
    if verbose:
        level = logging.DEBUG

    logger = logging.getLogger(name)
    logger.setLevel(level)

    # Remove existing handlers
    logger.handlers = []

    if json_format:
        handler = logging.StreamHandler(sys.stderr)
        handler.setLevel(level)
        handler.setFormatter(JSONFormatter())
    else:
        handler = RichHandler(
            console=Console(stderr=True),
            rich_tracebacks=True,
            tracebacks_show_locals=verbose,
        )
        handler.setLevel(level)
        handler.setFormatter(logging.Formatter("%(message)s", datefmt="[%X]"))

    logger.addHandler(handler)
    logger.propagate = False

    return logger
