"""Unit tests for structured logging setup."""

from __future__ import annotations

import json
import logging

from schema_matchers.lib.logging_config import (
    ROOT_LOGGER_NAME,
    JSONFormatter,
    get_logger,
    setup_logging,
)


class TestJSONFormatter:
    """Tests for JSONFormatter."""

    def test_standard_fields(self) -> None:
        record = logging.LogRecord(
            "schema_matchers.validate", logging.INFO, __file__, 1, "hello %s", ("a",), None
        )
        entry = json.loads(JSONFormatter().format(record))
        assert entry["level"] == "INFO"
        assert entry["logger"] == "schema_matchers.validate"
        assert entry["message"] == "hello a"
        assert "timestamp" in entry

    def test_attribute_extra(self) -> None:
        record = logging.LogRecord(
            "schema_matchers.probe", logging.DEBUG, __file__, 1, "probe", (), None
        )
        record.attribute = "email"
        entry = json.loads(JSONFormatter().format(record))
        assert entry["attribute"] == "email"


class TestSetupLogging:
    """Tests for setup_logging and get_logger."""

    def test_single_handler(self) -> None:
        setup_logging("DEBUG")
        logger = setup_logging("WARNING")
        assert logger.name == ROOT_LOGGER_NAME
        assert len(logger.handlers) == 1
        assert logger.level == logging.WARNING
        assert isinstance(logger.handlers[0].formatter, JSONFormatter)

    def test_child_logger_namespace(self) -> None:
        assert get_logger("runner").name == "schema_matchers.runner"
