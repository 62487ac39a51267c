"""
Structured JSON logging utilities for data channels.

Channels log mutations with structured ``extra`` fields (record_id,
log_version, ...). The formatter here renders those records as single-line
JSON objects so they can be shipped to any log aggregator unchanged.
"""

import json
import logging
import sys
from datetime import datetime, timezone
from typing import Any

# Attributes every LogRecord carries; anything else came in through ``extra``.
_STANDARD_ATTRS = frozenset(
    {
        "name", "msg", "args", "created", "filename", "funcName",
        "levelname", "levelno", "lineno", "module", "msecs",
        "pathname", "process", "processName", "relativeCreated",
        "stack_info", "exc_info", "exc_text", "thread", "threadName",
        "taskName", "message",
    }
)


class StructuredJsonFormatter(logging.Formatter):
    """
    JSON formatter for structured channel logging.

    Outputs logs as single-line JSON objects with consistent fields:
    - timestamp: ISO 8601 format in UTC
    - level: Log level (INFO, WARNING, ERROR, etc.)
    - logger: Logger name
    - message: Log message
    - Additional context fields from extra dict
    """

    def format(self, record: logging.LogRecord) -> str:
        """Format log record as JSON."""
        log_obj: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        if record.exc_info:
            log_obj["exception"] = self.formatException(record.exc_info)

        for key, value in record.__dict__.items():
            if key not in _STANDARD_ATTRS and not key.startswith("_"):
                try:
                    json.dumps(value)
                    log_obj[key] = value
                except (TypeError, ValueError):
                    log_obj[key] = str(value)

        return json.dumps(log_obj, default=str)


def configure_structured_logging(
    level: int | str = logging.INFO,
    logger_name: str | None = None,
) -> logging.Logger:
    """
    Configure structured JSON logging on stdout.

    Args:
        level: Logging level (default: INFO); level names are accepted
        logger_name: Specific logger to configure (default: root logger)

    Returns:
        Configured logger instance
    """
    logger = logging.getLogger(logger_name)

    # Remove existing handlers to avoid duplicates
    logger.handlers.clear()

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(StructuredJsonFormatter())

    logger.addHandler(handler)
    logger.setLevel(level.upper() if isinstance(level, str) else level)

    return logger


def get_channel_logger(name: str) -> logging.Logger:
    """
    Get a logger for channel components with consistent naming.

    Args:
        name: Component name (e.g., 'memory')

    Returns:
        Logger instance with name 'data_channels.{name}'
    """
    return logging.getLogger(f"data_channels.{name}")


class ChannelLoggerAdapter(logging.LoggerAdapter):
    """
    Logger adapter that adds channel context to all log messages.

    Caller-supplied ``extra`` fields are kept; the adapter's own context
    (typically ``channel``) is merged on top.
    """

    def process(self, msg: str, kwargs: dict[str, Any]) -> tuple[str, dict[str, Any]]:
        """Add extra context to log record."""
        extra = dict(kwargs.get("extra") or {})
        extra.update(self.extra)
        kwargs["extra"] = extra
        return msg, kwargs
