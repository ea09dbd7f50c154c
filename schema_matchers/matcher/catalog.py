"""Type catalog used by the filled-with-type probe.

Each supported type has a representative value that a schema expecting the
type accepts, and the exact text a schema reports when a value is not of
that type. The texts are mutually exclusive: a schema that really requires
type X must never answer the X test value with the wrong-type text of any
other type.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, time
from decimal import Decimal
from enum import Enum
from typing import Any


class ValueType(Enum):
    """Primitive types a matcher can expect an attribute to be filled with."""

    STRING = "string"
    INTEGER = "integer"
    FLOAT = "float"
    DECIMAL = "decimal"
    BOOLEAN = "boolean"
    DATE = "date"
    TIME = "time"
    DATE_TIME = "date_time"
    ARRAY = "array"
    HASH = "hash"

    @classmethod
    def coerce(cls, value: ValueType | str) -> ValueType:
        """Convert a type name (or enum member) into a ValueType.

        ``"bool"`` is accepted as an alias of ``"boolean"``.

        Raises:
            ValueError: If the name is not in the catalog.
        """
        if isinstance(value, cls):
            return value
        name = str(value).lower()
        return cls(_ALIASES.get(name, name))


_ALIASES: dict[str, str] = {"bool": "boolean"}

DEFAULT_TYPE: ValueType = ValueType.STRING


@dataclass(frozen=True)
class TypeErrorEntry:
    """Catalog entry for one type.

    Attributes:
        test_value: A value of the type, used as the probe input.
        message: The wrong-type error text for the type.
    """

    test_value: Any
    message: str


TYPE_ERRORS: dict[ValueType, TypeErrorEntry] = {
    ValueType.STRING: TypeErrorEntry("str", "must be a string"),
    ValueType.INTEGER: TypeErrorEntry(43, "must be an integer"),
    ValueType.FLOAT: TypeErrorEntry(41.5, "must be a float"),
    ValueType.DECIMAL: TypeErrorEntry(Decimal("41.5"), "must be a decimal"),
    ValueType.BOOLEAN: TypeErrorEntry(False, "must be a boolean"),
    ValueType.DATE: TypeErrorEntry(date(2011, 1, 2), "must be a date"),
    ValueType.TIME: TypeErrorEntry(time(2, 33), "must be a time"),
    ValueType.DATE_TIME: TypeErrorEntry(
        datetime(2011, 5, 1, 2, 3, 4), "must be a date time"
    ),
    ValueType.ARRAY: TypeErrorEntry([1, 3, 5], "must be an array"),
    ValueType.HASH: TypeErrorEntry({"hello": "there"}, "must be a hash"),
}


def type_error_messages() -> list[str]:
    """Return every wrong-type message in the catalog."""
    return [entry.message for entry in TYPE_ERRORS.values()]


def unallowed_type_messages(declared: ValueType) -> set[str]:
    """Return the wrong-type messages of every type except ``declared``."""
    return set(type_error_messages()) - {TYPE_ERRORS[declared].message}
