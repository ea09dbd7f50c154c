"""Macro metadata adapter.

The only place the matcher looks inside a schema instead of probing it.
Given a schema exposing ``rules`` (each with ``keys`` and ``macros``), it
answers which macro invocations are attached to an attribute.
"""

from __future__ import annotations

from collections.abc import Iterator, Mapping, Sequence
from typing import Any


def flatten_macros(macros: Any) -> list[Any]:
    """Flatten nested lists and tuples into one list, depth first."""
    flat: list[Any] = []
    for item in macros:
        if isinstance(item, (list, tuple)):
            flat.extend(flatten_macros(item))
        else:
            flat.append(item)
    return flat


def rule_macros(schema: Any, attribute: str) -> Iterator[Sequence[Any]]:
    """Yield the macros of every rule whose first key is ``attribute``."""
    for r in getattr(schema, "rules", None) or ():
        keys = list(r.keys)
        if not keys or keys[0] != attribute:
            continue
        yield r.macros


def extract_macro_value(macros: Sequence[Any], expected: Any) -> Any:
    """Reduce a rule's macros to a value comparable with ``expected``.

    With a mapping expectation and more than one flattened element, the
    macros become ``{name: first_argument}``. Otherwise the first flattened
    element is used, which is the macro name.
    """
    flat = flatten_macros(macros)
    if isinstance(expected, Mapping) and len(flat) > 1:
        return {name: (args[0] if args else None) for name, args in macros}
    return flat[0] if flat else None


def uses_macro(schema: Any, attribute: str, expected: Any) -> bool:
    """Return True if some rule for ``attribute`` carries ``expected``."""
    for macros in rule_macros(schema, attribute):
        if extract_macro_value(macros, expected) == expected:
            return True
    return False
