"""Unit tests for the pytest assertion helpers."""

from __future__ import annotations

import pytest

from schema_matchers.contract.contract import Contract
from schema_matchers.matcher.assertions import assert_not_validates, assert_validates
from schema_matchers.matcher.validate import validate, validate_optional


class TestAssertValidates:
    """Tests for assert_validates."""

    def test_passes_silently(self, required_string_contract: type[Contract]) -> None:
        assert_validates(required_string_contract, validate("a").filled())

    def test_failure_names_schema_and_expectation(
        self, optional_string_contract: type[Contract]
    ) -> None:
        with pytest.raises(AssertionError) as excinfo:
            assert_validates(optional_string_contract, validate("a"))
        message = str(excinfo.value)
        assert "OptionalStringContract" in message
        assert "be missing validation for required `a`" in message

    def test_accepts_instances(self, required_string_contract: type[Contract]) -> None:
        assert_validates(required_string_contract(), validate("a"))


class TestAssertNotValidates:
    """Tests for assert_not_validates."""

    def test_passes_when_not_matching(
        self, required_string_contract: type[Contract]
    ) -> None:
        assert_not_validates(required_string_contract, validate_optional("a"))

    def test_fails_when_matching(self, required_string_contract: type[Contract]) -> None:
        with pytest.raises(AssertionError, match="not validate for required `a`"):
            assert_not_validates(required_string_contract, validate("a"))
