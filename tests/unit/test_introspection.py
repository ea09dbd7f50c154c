"""Unit tests for macro metadata extraction."""

from __future__ import annotations

from types import SimpleNamespace

from schema_matchers.contract.models import rule
from schema_matchers.matcher.introspection import (
    extract_macro_value,
    flatten_macros,
    rule_macros,
    uses_macro,
)


def _schema(*rules) -> SimpleNamespace:
    return SimpleNamespace(rules=list(rules))


class TestFlattenMacros:
    """Tests for flatten_macros."""

    def test_nested(self) -> None:
        assert flatten_macros((("unique", (True,)),)) == ["unique", True]

    def test_no_args(self) -> None:
        assert flatten_macros((("email_format", ()),)) == ["email_format"]

    def test_deep_lists(self) -> None:
        assert flatten_macros([["a", [[1, 2], 3]]]) == ["a", 1, 2, 3]


class TestExtractMacroValue:
    """Tests for reducing macros to a comparable value."""

    def test_mapping_expectation(self) -> None:
        macros = (("unique", (True,)),)
        assert extract_macro_value(macros, {"unique": True}) == {"unique": True}

    def test_scalar_expectation_uses_name(self) -> None:
        macros = (("unique", (True,)),)
        assert extract_macro_value(macros, "unique") == "unique"

    def test_mapping_of_several_macros(self) -> None:
        macros = (("unique", (True,)), ("lowercase", ()))
        assert extract_macro_value(macros, {"unique": True}) == {
            "unique": True,
            "lowercase": None,
        }

    def test_mapping_expectation_without_args(self) -> None:
        """A single argument-less macro flattens to one element: its name."""
        macros = (("email_format", ()),)
        assert extract_macro_value(macros, {"email_format": None}) == "email_format"

    def test_no_macros(self) -> None:
        assert extract_macro_value((), "unique") is None


class TestUsesMacro:
    """Tests for scanning a schema's rules."""

    def test_matching_rule(self) -> None:
        schema = _schema(rule("a").validate(unique=True))
        assert uses_macro(schema, "a", {"unique": True})

    def test_first_key_only(self) -> None:
        schema = _schema(rule("b", "a").validate(unique=True))
        assert not uses_macro(schema, "a", {"unique": True})

    def test_any_rule_may_match(self) -> None:
        schema = _schema(
            rule("a").validate("lowercase"),
            rule("a").validate(unique=True),
        )
        assert uses_macro(schema, "a", {"unique": True})
        assert uses_macro(schema, "a", "lowercase")

    def test_schema_without_rules(self) -> None:
        assert not uses_macro(SimpleNamespace(), "a", "unique")

    def test_rule_macros_filters_by_attribute(self) -> None:
        schema = _schema(rule("a").validate("lowercase"), rule("b").validate("unique"))
        assert list(rule_macros(schema, "b")) == [(("unique", ()),)]
