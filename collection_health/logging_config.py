"""Structured logging configuration.

JSON output outside development, human-readable otherwise. Logs are written
to stderr so that stdout stays reserved for the JSON report.
"""

import json
import logging
import sys
from datetime import UTC, datetime
from typing import Any

from collection_health.config import Environment, get_settings

# Attributes every LogRecord carries; anything else came in through ``extra=``.
_RESERVED_ATTRS = frozenset(
    vars(logging.LogRecord("", 0, "", 0, "", (), None)).keys()
) | {"message", "asctime"}


class JSONFormatter(logging.Formatter):
    """JSON log formatter for structured logging."""

    def format(self, record: logging.LogRecord) -> str:
        """Format log record as JSON string."""
        log_data: dict[str, Any] = {
            "timestamp": datetime.now(UTC).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        extra = {
            key: value
            for key, value in vars(record).items()
            if key not in _RESERVED_ATTRS and not key.startswith("_")
        }
        if extra:
            log_data["extra"] = extra

        if record.funcName:
            log_data["function"] = record.funcName
        if record.pathname:
            log_data["file"] = f"{record.pathname}:{record.lineno}"

        return json.dumps(log_data, default=str, ensure_ascii=False)


class DevFormatter(logging.Formatter):
    """Human-readable formatter for development."""

    FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
    DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

    def __init__(self) -> None:
        super().__init__(fmt=self.FORMAT, datefmt=self.DATE_FORMAT)


class NarrationFormatter(logging.Formatter):
    """Plain progress lines for ``--verbose`` runs.

    INFO records print as the bare message, so progress reads like console
    narration. Anything more severe keeps its level as a prefix.
    """

    def format(self, record: logging.LogRecord) -> str:
        """Format record as a narration line."""
        message = record.getMessage()
        if record.levelno > logging.INFO:
            message = f"{record.levelname}: {message}"
        if record.exc_info:
            message = f"{message}\n{self.formatException(record.exc_info)}"
        return message


def setup_logging(
    level: str | None = None,
    json_output: bool | None = None,
    verbose: bool = False,
) -> logging.Logger:
    """Configure logging for a checker run.

    Args:
        level: Log level override (default from settings, INFO when verbose).
        json_output: Force JSON output (default based on environment).
        verbose: Narrate progress as plain lines unless JSON is in effect.

    Returns:
        Root logger instance.
    """
    settings = get_settings()

    log_level = level or ("INFO" if verbose else settings.log_level)
    numeric_level = getattr(logging, log_level.upper(), logging.INFO)

    if json_output is None:
        json_output = settings.environment != Environment.DEVELOPMENT

    root_logger = logging.getLogger()
    root_logger.setLevel(numeric_level)
    root_logger.handlers.clear()

    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(numeric_level)

    if json_output:
        handler.setFormatter(JSONFormatter())
    elif verbose:
        handler.setFormatter(NarrationFormatter())
    else:
        handler.setFormatter(DevFormatter())

    root_logger.addHandler(handler)

    # Suppress noisy third-party loggers
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)

    return root_logger


def get_logger(name: str) -> logging.Logger:
    """Get a named logger.

    Args:
        name: Logger name (typically __name__).

    Returns:
        Logger instance.
    """
    return logging.getLogger(name)
