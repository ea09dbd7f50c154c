"""Structured JSON logging configuration for schema matchers.

All modules log under the ``schema_matchers`` namespace so a single call to
:func:`setup_logging` controls matcher probes, contract evaluation and the
expectation runner alike.
"""

from __future__ import annotations

import json
import logging
import sys
from datetime import UTC, datetime
from typing import Any

ROOT_LOGGER_NAME: str = "schema_matchers"


class JSONFormatter(logging.Formatter):
    """Format log records as JSON for structured logging."""

    def format(self, record: logging.LogRecord) -> str:
        """Format a log record as a JSON string.

        Args:
            record: The log record to format.

        Returns:
            JSON-formatted string with standard fields.
        """
        log_entry: dict[str, Any] = {
            "timestamp": datetime.now(UTC).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        # Correlation fields passed through ``extra=``
        if hasattr(record, "attribute"):
            log_entry["attribute"] = record.attribute
        if hasattr(record, "run_id"):
            log_entry["run_id"] = record.run_id

        if record.exc_info and record.exc_info[1]:
            log_entry["exception"] = {
                "type": record.exc_info[0].__name__ if record.exc_info[0] else None,
                "message": str(record.exc_info[1]),
            }

        return json.dumps(log_entry, default=str)


def setup_logging(level: str = "INFO") -> logging.Logger:
    """Configure structured JSON logging for schema matchers.

    Writes to stderr so stdout stays free for run summaries.

    Args:
        level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL).

    Returns:
        Configured root logger for the package.
    """
    logger = logging.getLogger(ROOT_LOGGER_NAME)
    logger.setLevel(getattr(logging, level.upper(), logging.INFO))

    # Remove existing handlers to avoid duplicates
    logger.handlers.clear()

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(JSONFormatter())
    logger.addHandler(handler)

    logger.propagate = False

    return logger


def get_logger(name: str) -> logging.Logger:
    """Get a child logger under the schema_matchers namespace.

    Args:
        name: The module name for the child logger.

    Returns:
        A child logger that inherits the package configuration.
    """
    return logging.getLogger(f"{ROOT_LOGGER_NAME}.{name}")
