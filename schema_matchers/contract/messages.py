"""Translate jsonschema validation errors into contract messages."""

from __future__ import annotations

from typing import Any

from jsonschema.exceptions import ValidationError

from schema_matchers.contract.models import Message, Path

KEY_MISSING: str = "is missing"
MUST_BE_FILLED: str = "must be filled"

# Wrong-type text per JSON-Schema type name
TYPE_MESSAGES: dict[str, str] = {
    "string": "must be a string",
    "integer": "must be an integer",
    "number": "must be a float",
    "float": "must be a float",
    "decimal": "must be a decimal",
    "boolean": "must be a boolean",
    "date": "must be a date",
    "time": "must be a time",
    "date_time": "must be a date time",
    "array": "must be an array",
    "object": "must be a hash",
    "hash": "must be a hash",
    "null": "must be nil",
}

# Predicates whose failure hides every other message on the same path
SHORT_CIRCUIT_PREDICATES: frozenset[str] = frozenset({"filled?", "type?"})


def _join(values: Any) -> str:
    return ", ".join(str(v) for v in values)


def _size_min(n: Any) -> tuple[str, str]:
    return "min_size?", f"size cannot be less than {n}"


def _size_max(n: Any) -> tuple[str, str]:
    return "max_size?", f"size cannot be greater than {n}"


_VALUE_TRANSLATIONS = {
    "enum": lambda v: ("included_in?", f"must be one of: {_join(v)}"),
    "const": lambda v: ("eql?", f"must be equal to {v}"),
    "minLength": _size_min,
    "minItems": _size_min,
    "minProperties": _size_min,
    "maxLength": _size_max,
    "maxItems": _size_max,
    "maxProperties": _size_max,
    "minimum": lambda v: ("gteq?", f"must be greater than or equal to {v}"),
    "exclusiveMinimum": lambda v: ("gt?", f"must be greater than {v}"),
    "maximum": lambda v: ("lteq?", f"must be less than or equal to {v}"),
    "exclusiveMaximum": lambda v: ("lt?", f"must be less than {v}"),
    "pattern": lambda v: ("format?", "is in invalid format"),
}


def type_message(expected: str | list[str]) -> str:
    """Return the wrong-type text for a JSON-Schema ``type`` value.

    When several types are allowed the first non-null one names the
    message.
    """
    types = [expected] if isinstance(expected, str) else list(expected)
    named = [t for t in types if t != "null"] or types
    first = named[0]
    return TYPE_MESSAGES.get(first, f"must be a {first}")


def _allows_null(expected: str | list[str]) -> bool:
    if isinstance(expected, str):
        return expected == "null"
    return "null" in expected


def translate_error(error: ValidationError) -> list[Message]:
    """Convert one jsonschema error into contract messages.

    jsonschema yields one ``required`` error per missing key, each carrying
    the full ``required`` list. The key named in the error text becomes the
    single ``key?`` message; an error naming none of them falls back to every
    missing key.

    Args:
        error: An error yielded by ``Validator.iter_errors``.

    Returns:
        Messages carrying the failing path, predicate and text.
    """
    path: Path = tuple(error.absolute_path)

    if error.validator == "required":
        instance = error.instance if isinstance(error.instance, dict) else {}
        missing = [key for key in error.validator_value if key not in instance]
        named = [key for key in missing if error.message.startswith(f"{key!r} ")]
        return [
            Message(path=path + (key,), predicate="key?", text=KEY_MISSING)
            for key in (named or missing)
        ]

    if error.validator == "type":
        if error.instance is None and not _allows_null(error.validator_value):
            return [Message(path=path, predicate="filled?", text=MUST_BE_FILLED)]
        return [
            Message(
                path=path,
                predicate="type?",
                text=type_message(error.validator_value),
            )
        ]

    translate = _VALUE_TRANSLATIONS.get(str(error.validator))
    if translate is not None:
        predicate, text = translate(error.validator_value)
        return [Message(path=path, predicate=predicate, text=text)]

    return [Message(path=path, predicate=f"{error.validator}?", text=error.message)]


def short_circuit(messages: list[Message]) -> list[Message]:
    """Drop messages shadowed by a type failure on the same path."""
    blocked = {m.path for m in messages if m.predicate in SHORT_CIRCUIT_PREDICATES}
    return [
        m
        for m in messages
        if m.path not in blocked or m.predicate in SHORT_CIRCUIT_PREDICATES
    ]
