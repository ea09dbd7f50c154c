"""Value-rule checks and their dispatch table.

Each checker receives a :class:`ProbeContext` and the rule argument and
returns True when the schema enforces the rule on the attribute.

| rule name     | argument        | checker              |
|---------------|-----------------|----------------------|
| included_in   | allowed values  | check_included_in    |
| min_size      | minimum length  | check_min_size       |
| max_size      | maximum length  | check_max_size       |

Names are normalised to snake_case, so ``includedIn`` and ``included_in``
select the same checker. A name missing from the table resolves to an
always-true checker, or an always-false one when
``MatcherSettings.strict_value_rules`` is set.
"""

from __future__ import annotations

import re
import secrets
from collections.abc import Callable, Iterable, Mapping
from typing import Any

from schema_matchers.lib.logging_config import get_logger
from schema_matchers.matcher.probe import ProbeContext, has_message, is_iterable, lacks_message

logger = get_logger("value_rules")

ValueRuleChecker = Callable[[ProbeContext, Any], bool]

INCLUSION_PATTERN = re.compile(r"must be one of")


def min_size_message(size: int) -> str:
    return f"size cannot be less than {size}"


def max_size_message(size: int) -> str:
    return f"size cannot be greater than {size}"


def _mentions_inclusion(messages: Any) -> bool:
    return is_iterable(messages) and any(
        INCLUSION_PATTERN.search(str(m)) for m in messages
    )


def _hex_suffix(ctx: ProbeContext) -> str:
    # Seeded runs draw from ctx.rng so the same seed sends the same values
    n = ctx.settings.hex_suffix_bytes
    if ctx.settings.seed is not None:
        return ctx.rng.randbytes(n).hex()
    return secrets.token_hex(n)


def check_included_in(ctx: ProbeContext, allowed_values: Any) -> bool:
    """Every allowed value is accepted and an outside value is rejected."""
    allowed = list(allowed_values)

    for value in allowed:
        if _mentions_inclusion(ctx.messages(value)):
            return False

    # A random hex suffix puts the probe outside the allowed set
    base = str(ctx.rng.choice(allowed)) if allowed else ""
    outside = base + _hex_suffix(ctx)
    messages = ctx.messages(outside)
    if messages is None:
        return False
    return _mentions_inclusion(messages)


def check_min_size(ctx: ProbeContext, min_size: int) -> bool:
    """Values of length N+1 and N pass; a value of length N-1 is rejected.

    When N-1 is not a positive length no shorter probe can be built and the
    lower boundary counts as enforced.
    """
    expected = min_size_message(min_size)
    pad = ctx.settings.pad_char

    no_error_when_over = lacks_message(ctx.messages(pad * (min_size + 1)), expected)
    no_error_when_exact = lacks_message(ctx.messages(pad * min_size), expected)

    below = min_size - 1
    if below <= 0:
        error_when_below = True
    else:
        error_when_below = has_message(ctx.messages(pad * below), expected)

    return no_error_when_over and no_error_when_exact and error_when_below


def check_max_size(ctx: ProbeContext, max_size: int) -> bool:
    """A value of length N+1 is rejected; a value of length N passes."""
    expected = max_size_message(max_size)
    pad = ctx.settings.pad_char

    error_when_over = has_message(ctx.messages(pad * (max_size + 1)), expected)
    no_error_when_within = lacks_message(ctx.messages(pad * max_size), expected)

    return error_when_over and no_error_when_within


VALUE_RULE_CHECKERS: dict[str, ValueRuleChecker] = {
    "included_in": check_included_in,
    "min_size": check_min_size,
    "max_size": check_max_size,
}


def _accept_unknown(ctx: ProbeContext, argument: Any) -> bool:
    return True


def _reject_unknown(ctx: ProbeContext, argument: Any) -> bool:
    return False


def normalize_rule_name(name: Any) -> str:
    """Convert a rule name to snake_case (``minSize`` -> ``min_size``)."""
    text = str(name).strip().rstrip("?")
    return re.sub(r"(?<!^)(?=[A-Z])", "_", text).lower()


def resolve_checker(name: Any, *, strict: bool = False) -> ValueRuleChecker:
    """Return the checker for a rule name.

    Args:
        name: Rule name as declared by the test author.
        strict: Reject unknown rule names instead of accepting them.

    Returns:
        The registered checker, or a constant checker for unknown names.
    """
    key = normalize_rule_name(name)
    checker = VALUE_RULE_CHECKERS.get(key)
    if checker is not None:
        return checker

    if strict:
        logger.warning("Unknown value rule '%s' rejected (strict mode)", name)
        return _reject_unknown
    logger.warning("Unknown value rule '%s' ignored", name)
    return _accept_unknown


def rule_pairs(rules: Any) -> list[tuple[Any, Any]]:
    """Normalise declared value rules into ``(name, argument)`` pairs.

    Accepts a mapping (``{"min_size": 5}``) or a sequence of pairs
    (``[("min_size", 5)]``).

    Raises:
        ValueError: If an entry is not a pair.
    """
    if rules is None:
        return []
    if isinstance(rules, Mapping):
        return list(rules.items())

    pairs: list[tuple[Any, Any]] = []
    for entry in rules if isinstance(rules, Iterable) else [rules]:
        if isinstance(entry, (str, bytes)) or not isinstance(entry, Iterable):
            msg = f"value rule must be a (name, argument) pair, got {entry!r}"
            raise ValueError(msg)
        items = list(entry)
        if len(items) != 2:
            msg = f"value rule must be a (name, argument) pair, got {entry!r}"
            raise ValueError(msg)
        pairs.append((items[0], items[1]))
    return pairs


def check_value_rules(ctx: ProbeContext, rules: Any) -> bool:
    """Run every declared value rule and AND the results.

    All rules are evaluated, even after one fails.
    """
    results = [
        resolve_checker(name, strict=ctx.settings.strict_value_rules)(ctx, argument)
        for name, argument in rule_pairs(rules)
    ]
    return all(results)
