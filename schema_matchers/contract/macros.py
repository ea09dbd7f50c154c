"""Registry of reusable rule macros.

A macro is a function ``(value, *args) -> str | None``. It returns an error
text when ``value`` is invalid and ``None`` otherwise. Contracts reference
macros by name through :meth:`Rule.validate`.
"""

from __future__ import annotations

import re
from collections.abc import Callable
from typing import Any

MacroFn = Callable[..., "str | None"]

_REGISTRY: dict[str, MacroFn] = {}

EMAIL_PATTERN = re.compile(r"^[^@\s]+@[^@\s]+\.[A-Za-z]{2,}$")


def register_macro(name: str) -> Callable[[MacroFn], MacroFn]:
    """Register a macro function under ``name``.

    Re-registering a name replaces the previous function.
    """

    def decorator(fn: MacroFn) -> MacroFn:
        _REGISTRY[name] = fn
        return fn

    return decorator


def get_macro(name: str) -> MacroFn:
    """Look up a registered macro.

    Raises:
        ValueError: If no macro is registered under ``name``.
    """
    try:
        return _REGISTRY[name]
    except KeyError:
        msg = f"Unknown macro '{name}', registered: {', '.join(registered_macros())}"
        raise ValueError(msg) from None


def registered_macros() -> list[str]:
    return sorted(_REGISTRY)


@register_macro("email_format")
def email_format(value: Any) -> str | None:
    if not isinstance(value, str) or not EMAIL_PATTERN.match(value):
        return "not a valid email format"
    return None


@register_macro("lowercase")
def lowercase(value: Any) -> str | None:
    if isinstance(value, str) and value != value.lower():
        return "must be lowercase"
    return None


@register_macro("unique")
def unique(value: Any, *taken: Any) -> str | None:
    # unique(True) only marks the key; otherwise the arguments are taken values
    if not taken or (len(taken) == 1 and isinstance(taken[0], bool)):
        return None
    if len(taken) == 1 and isinstance(taken[0], (list, tuple, set, frozenset)):
        taken = tuple(taken[0])
    if value in taken:
        return "is already taken"
    return None
