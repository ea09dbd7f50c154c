"""Assertion helpers for pytest suites.

    from schema_matchers.matcher.assertions import assert_validates
    from schema_matchers.matcher.validate import validate

    def test_user_email():
        assert_validates(UserContract, validate("email").filled("string"))
"""

from __future__ import annotations

from typing import Any

from schema_matchers.matcher.validate import ValidateMatcher


def _schema_label(schema: Any) -> str:
    if isinstance(schema, type):
        return schema.__name__
    return type(schema).__name__


def assert_validates(schema: Any, matcher: ValidateMatcher) -> None:
    """Assert the schema satisfies every expectation of ``matcher``.

    Raises:
        AssertionError: With the matcher's failure message.
    """
    if not matcher.matches(schema):
        raise AssertionError(
            f"expected {_schema_label(schema)} to {matcher.description()}, "
            f"but it appears to {matcher.failure_message()}"
        )


def assert_not_validates(schema: Any, matcher: ValidateMatcher) -> None:
    """Assert the schema does NOT satisfy ``matcher``."""
    if matcher.matches(schema):
        raise AssertionError(
            f"expected {_schema_label(schema)} to {matcher.negated_failure_message()}"
        )
