"""Unit tests for the macro registry and built-in macros."""

from __future__ import annotations

import pytest

from schema_matchers.contract.macros import (
    email_format,
    get_macro,
    lowercase,
    register_macro,
    registered_macros,
    unique,
)


class TestRegistry:
    """Tests for macro registration and lookup."""

    def test_builtins_registered(self) -> None:
        assert {"email_format", "lowercase", "unique"} <= set(registered_macros())

    def test_register_and_lookup(self) -> None:
        @register_macro("even_length")
        def even_length(value: str) -> str | None:
            return None if len(value) % 2 == 0 else "must have even length"

        assert get_macro("even_length") is even_length
        assert get_macro("even_length")("abc") == "must have even length"

    def test_unknown_macro_raises(self) -> None:
        with pytest.raises(ValueError, match="Unknown macro 'nope'"):
            get_macro("nope")


class TestBuiltins:
    """Tests for the built-in macros."""

    def test_email_format(self) -> None:
        assert email_format("ada@example.com") is None
        assert email_format("ada.example.com") == "not a valid email format"
        assert email_format(42) == "not a valid email format"

    def test_lowercase(self) -> None:
        assert lowercase("abc") is None
        assert lowercase("Abc") == "must be lowercase"

    def test_unique_flag_only_marks(self) -> None:
        assert unique("anything", True) is None

    def test_unique_against_taken_values(self) -> None:
        assert unique("ada", ["ada", "bob"]) == "is already taken"
        assert unique("eve", ["ada", "bob"]) is None

    def test_unique_against_spread_values(self) -> None:
        assert unique("bob", "ada", "bob") == "is already taken"
        assert unique("eve", "ada", "bob") is None

    def test_unique_without_arguments(self) -> None:
        assert unique("anything") is None
