"""Shared test fixtures: small contracts covering each rule kind."""

from __future__ import annotations

import logging
from pathlib import Path

import duckdb
import pytest

from schema_matchers.contract.contract import Contract
from schema_matchers.contract.models import rule
from schema_matchers.lib.logging_config import ROOT_LOGGER_NAME

FIXTURES_DIR = Path(__file__).parent / "fixtures"


# ---------------------------------------------------------------------------
# Contracts
# ---------------------------------------------------------------------------


class RequiredStringContract(Contract):
    schema = {
        "type": "object",
        "required": ["a"],
        "properties": {"a": {"type": "string"}},
    }


class OptionalStringContract(Contract):
    schema = {
        "type": "object",
        "properties": {"a": {"type": "string"}},
    }


class RequiredIntegerContract(Contract):
    schema = {
        "type": "object",
        "required": ["a"],
        "properties": {"a": {"type": "integer"}},
    }


class MinSizeFiveContract(Contract):
    schema = {
        "type": "object",
        "required": ["a"],
        "properties": {"a": {"type": "string", "minLength": 5}},
    }


class MinSizeThreeContract(Contract):
    schema = {
        "type": "object",
        "required": ["a"],
        "properties": {"a": {"type": "string", "minLength": 3}},
    }


class MaxSizeTenContract(Contract):
    schema = {
        "type": "object",
        "required": ["a"],
        "properties": {"a": {"type": "string", "maxLength": 10}},
    }


class ColorContract(Contract):
    schema = {
        "type": "object",
        "required": ["a"],
        "properties": {
            "a": {"type": "string", "enum": ["red", "green", "blue"]},
        },
    }


class UniqueContract(Contract):
    schema = {
        "type": "object",
        "required": ["a"],
        "properties": {"a": {"type": "string"}},
    }
    rules = [rule("a").validate(unique=True)]


class EmailContract(Contract):
    schema = {
        "type": "object",
        "required": ["email"],
        "properties": {"email": {"type": "string", "maxLength": 64}},
    }
    rules = [rule("email").validate("email_format")]


@pytest.fixture
def required_string_contract() -> type[Contract]:
    return RequiredStringContract


@pytest.fixture
def optional_string_contract() -> type[Contract]:
    return OptionalStringContract


@pytest.fixture
def required_integer_contract() -> type[Contract]:
    return RequiredIntegerContract


@pytest.fixture
def color_contract() -> type[Contract]:
    return ColorContract


@pytest.fixture
def unique_contract() -> type[Contract]:
    return UniqueContract


@pytest.fixture
def email_contract() -> type[Contract]:
    return EmailContract


# ---------------------------------------------------------------------------
# Files
# ---------------------------------------------------------------------------


@pytest.fixture
def fixtures_dir() -> Path:
    """Directory holding the sample schema and manifest."""
    return FIXTURES_DIR


@pytest.fixture
def sample_manifest() -> Path:
    """Manifest whose expectations all hold against the user schema."""
    return FIXTURES_DIR / "expectations.yaml"


@pytest.fixture
def user_schema_path() -> Path:
    return FIXTURES_DIR / "schemas" / "user.schema.json"


@pytest.fixture(autouse=True)
def _restore_package_logger() -> None:
    """Undo setup_logging() so caplog keeps seeing package records."""
    yield
    logger = logging.getLogger(ROOT_LOGGER_NAME)
    logger.handlers.clear()
    logger.propagate = True
    logger.setLevel(logging.NOTSET)


@pytest.fixture
def mem_conn() -> duckdb.DuckDBPyConnection:
    """In-memory DuckDB connection for fast unit tests."""
    conn = duckdb.connect(":memory:")
    yield conn
    conn.close()
