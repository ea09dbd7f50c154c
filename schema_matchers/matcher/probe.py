"""Probe helpers: run a schema on one synthetic input and read its errors."""

from __future__ import annotations

import random
from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import Any

from schema_matchers.contract.contract import Contract
from schema_matchers.contract.models import ContractResult, Message, path_includes, to_path
from schema_matchers.lib.config_loader import MatcherSettings
from schema_matchers.lib.logging_config import get_logger

logger = get_logger("probe")


def resolve_schema(schema_or_class: Any) -> Contract:
    """Return a contract instance for a contract instance or class.

    Raises:
        TypeError: If the argument is neither.
    """
    if isinstance(schema_or_class, Contract):
        return schema_or_class
    if isinstance(schema_or_class, type) and issubclass(schema_or_class, Contract):
        return schema_or_class()
    msg = f"must be a schema instance or class; got {schema_or_class!r} instead"
    raise TypeError(msg)


def is_iterable(value: Any) -> bool:
    return isinstance(value, Iterable) and not isinstance(value, (str, bytes))


@dataclass
class ProbeContext:
    """Everything a check needs to probe one attribute of one schema.

    Attributes:
        schema: The contract under test.
        attribute: Name of the attribute being probed.
        settings: Matcher settings (probe characters, sampling).
        rng: Random source for sampled probe values.
    """

    schema: Contract
    attribute: str
    settings: MatcherSettings = field(default_factory=MatcherSettings)
    rng: random.Random = field(default_factory=random.Random)

    def run(self, value: Any) -> ContractResult:
        """Call the schema with only the attribute set to ``value``."""
        result = self.schema({self.attribute: value})
        logger.debug(
            "Probe %s=%r -> %s",
            self.attribute,
            value,
            result.errors[self.attribute],
            extra={"attribute": self.attribute},
        )
        return result

    def run_empty(self) -> ContractResult:
        """Call the schema with an empty input."""
        result = self.schema({})
        logger.debug(
            "Probe without %s -> %s",
            self.attribute,
            result.errors[self.attribute],
            extra={"attribute": self.attribute},
        )
        return result

    def messages(self, value: Any) -> list[str] | None:
        """Return the attribute's error texts for a probe value, or None."""
        return self.run(value).errors[self.attribute]

    def attribute_errors(self, result: ContractResult) -> list[Message] | None:
        """Select the errors whose path falls under the attribute.

        Returns None when the error set cannot be iterated.
        """
        if not is_iterable(result.errors):
            return None
        prefix = to_path(self.attribute)
        return [m for m in result.errors if path_includes(m.path, prefix)]


def has_message(messages: Any, expected: str) -> bool:
    """Return True if an error collection contains ``expected``.

    Collections that are missing or not iterable count as not containing it.
    """
    return is_iterable(messages) and expected in messages


def lacks_message(messages: Any, expected: str) -> bool:
    """Return True if there are no errors or ``expected`` is not among them."""
    return messages is None or not has_message(messages, expected)
