"""Matcher asserting that a schema validates one attribute.

The matcher never reads the schema's rules (except for macro usage). It
calls the schema with synthetic single-key inputs and infers from the error
messages whether each declared expectation holds::

    matcher = (
        validate("email", "required")
        .filled("string")
        .value([("max_size", 64)])
        .macro_use("email_format")
    )
    assert matcher.matches(UserContract)

Checks run in a fixed order and stop at the first failure:

1. required/optional: probe with ``{}``
2. filled: probe with ``None``
3. filled with type: probe with the catalog value for the declared type
4. value rules: see :mod:`schema_matchers.matcher.value_rules`
5. macro usage: see :mod:`schema_matchers.matcher.introspection`
"""

from __future__ import annotations

import random
from collections.abc import Callable, Sized
from enum import Enum
from typing import Any

from schema_matchers.lib.config_loader import MatcherSettings
from schema_matchers.lib.logging_config import get_logger
from schema_matchers.matcher.catalog import (
    DEFAULT_TYPE,
    TYPE_ERRORS,
    ValueType,
    unallowed_type_messages,
)
from schema_matchers.matcher.introspection import uses_macro
from schema_matchers.matcher.probe import ProbeContext, is_iterable, resolve_schema
from schema_matchers.matcher.value_rules import check_value_rules

logger = get_logger("validate")


class Acceptance(Enum):
    """Whether the attribute must be present in the input."""

    REQUIRED = "required"
    OPTIONAL = "optional"


class ValidateMatcher:
    """Fluent matcher for one attribute of a validation schema.

    Args:
        attribute: Name of the attribute under test.
        acceptance: ``"required"`` or ``"optional"`` (or an Acceptance).
        settings: Probe settings; defaults to :class:`MatcherSettings`.
    """

    def __init__(
        self,
        attribute: str,
        acceptance: Acceptance | str,
        *,
        settings: MatcherSettings | None = None,
    ) -> None:
        self._attribute = attribute
        self._acceptance = Acceptance(
            acceptance.value if isinstance(acceptance, Acceptance) else acceptance
        )
        self._type: ValueType | str = DEFAULT_TYPE
        self._value_rules: Any = []
        self._macro_usage_params: Any = None
        self._check_filled = False
        self._check_macro = False
        self._settings = settings or MatcherSettings()

    @property
    def attribute(self) -> str:
        return self._attribute

    @property
    def acceptance(self) -> Acceptance:
        return self._acceptance

    def __repr__(self) -> str:
        return f"<ValidateMatcher {self.description()}>"

    # -- fluent configuration -------------------------------------------

    def filled(self, value_type: ValueType | str = DEFAULT_TYPE) -> ValidateMatcher:
        """Expect the attribute to be non-empty and of ``value_type``."""
        self._check_filled = True
        self._type = value_type
        return self

    def value(self, value_rules: Any) -> ValidateMatcher:
        """Expect value rules, e.g. ``[("min_size", 2), ("max_size", 20)]``."""
        self._value_rules = value_rules
        return self

    def macro_use(self, macro_params: Any) -> ValidateMatcher:
        """Expect a macro on the attribute, e.g. ``{"unique": True}``."""
        self._check_macro = True
        self._macro_usage_params = macro_params
        return self

    # -- reporting --------------------------------------------------------

    def _type_label(self) -> str:
        return self._type.value if isinstance(self._type, ValueType) else str(self._type)

    def _details(self) -> str:
        details: list[str] = []
        if self._check_filled:
            details.append(f"filled with {self._type_label()}")
        if self._check_macro:
            details.append(f"macro usage `{self._macro_usage_params}`")
        if not details:
            return ""
        return " (" + "; ".join(details) + ")"

    def description(self) -> str:
        return (
            f"validate for {self._acceptance.value} `{self._attribute}`"
            f"{self._details()} exists"
        )

    def failure_message(self) -> str:
        return (
            f"be missing validation for {self._acceptance.value} `{self._attribute}`"
            f"{self._details()}"
        )

    def negated_failure_message(self) -> str:
        return (
            f"not validate for {self._acceptance.value} `{self._attribute}`"
            f"{self._details()}"
        )

    # -- probing ----------------------------------------------------------

    def matches(self, schema_or_schema_class: Any) -> bool:
        """Probe the schema and report whether every expectation holds.

        Args:
            schema_or_schema_class: A Contract instance or subclass.

        Returns:
            True when all configured checks pass.

        Raises:
            TypeError: If the argument is not a contract instance or class.
        """
        schema = resolve_schema(schema_or_schema_class)
        ctx = ProbeContext(
            schema=schema,
            attribute=self._attribute,
            settings=self._settings,
            rng=random.Random(self._settings.seed),
        )

        checks: list[tuple[str, Callable[[ProbeContext], bool]]] = [
            ("required_or_optional", self._check_required_or_optional),
            ("filled", self._check_filled_probe),
            ("filled_with_type", self._check_filled_with_type),
            ("value", self._check_value),
            ("macro_usage", self._check_macro_usage),
        ]
        for name, check in checks:
            if not check(ctx):
                logger.info(
                    "Check %s failed: %s",
                    name,
                    self.failure_message(),
                    extra={"attribute": self._attribute},
                )
                return False
        return True

    def _check_required_or_optional(self, ctx: ProbeContext) -> bool:
        result = ctx.run_empty()
        if self._acceptance is Acceptance.REQUIRED:
            attr_errors = ctx.attribute_errors(result)
            return is_iterable(attr_errors) and any(
                msg.predicate == "key?" for msg in attr_errors
            )
        return result.errors[self._attribute] is None

    def _check_filled_probe(self, ctx: ProbeContext) -> bool:
        if not self._check_filled:
            return True

        result = ctx.run(None)
        if result.errors[self._attribute] is None:
            return False
        attr_errors = ctx.attribute_errors(result)
        return is_iterable(attr_errors) and any(
            msg.predicate == "filled?" for msg in attr_errors
        )

    def _check_filled_with_type(self, ctx: ProbeContext) -> bool:
        if not self._check_filled:
            return True

        declared = ValueType.coerce(self._type)
        error_messages = ctx.messages(TYPE_ERRORS[declared].test_value)
        if error_messages is None:
            return True
        # Other errors (e.g. size limits) are fine; only another type's
        # wrong-type message contradicts the declared type.
        return not (set(error_messages) & unallowed_type_messages(declared))

    def _check_value(self, ctx: ProbeContext) -> bool:
        return check_value_rules(ctx, self._value_rules)

    def _check_macro_usage(self, ctx: ProbeContext) -> bool:
        params = self._macro_usage_params
        if params is None or (isinstance(params, Sized) and len(params) == 0):
            return True
        return uses_macro(ctx.schema, self._attribute, params)


def validate(
    attribute: str,
    acceptance: Acceptance | str = Acceptance.REQUIRED,
    *,
    settings: MatcherSettings | None = None,
) -> ValidateMatcher:
    """Create a :class:`ValidateMatcher` for ``attribute``."""
    return ValidateMatcher(attribute, acceptance, settings=settings)


def validate_required(attribute: str, **kwargs: Any) -> ValidateMatcher:
    return validate(attribute, Acceptance.REQUIRED, **kwargs)


def validate_optional(attribute: str, **kwargs: Any) -> ValidateMatcher:
    return validate(attribute, Acceptance.OPTIONAL, **kwargs)
