"""JSON-Schema backed validation contracts.

A contract pairs a JSON Schema (structure, types, sizes, enums) with a list
of macro rules (reusable named checks). Calling a contract with a mapping
returns a :class:`ContractResult` whose errors are indexed by path::

    class UserContract(Contract):
        schema = {
            "type": "object",
            "required": ["email"],
            "properties": {
                "email": {"type": "string", "maxLength": 64},
                "age": {"type": ["integer", "null"], "minimum": 0},
            },
        }
        rules = [rule("email").validate("email_format", unique=True)]

    UserContract()({"email": None}).errors["email"]  # ['must be filled']
"""

from __future__ import annotations

from collections.abc import Mapping
from datetime import date, datetime, time
from decimal import Decimal
from typing import Any, ClassVar

from jsonschema import Draft202012Validator, validators

from schema_matchers.contract.macros import get_macro
from schema_matchers.contract.messages import short_circuit, translate_error
from schema_matchers.contract.models import (
    ContractResult,
    ErrorSet,
    Message,
    Rule,
    path_includes,
)
from schema_matchers.lib.logging_config import get_logger

logger = get_logger("contract")

# JSON-Schema keyword listing macros on a property: [[name, [args...]], ...]
MACROS_KEYWORD: str = "x-macros"


def _is_float(checker: Any, instance: Any) -> bool:
    return isinstance(instance, float)


def _is_decimal(checker: Any, instance: Any) -> bool:
    return isinstance(instance, Decimal)


def _is_date(checker: Any, instance: Any) -> bool:
    return isinstance(instance, date) and not isinstance(instance, datetime)


def _is_time(checker: Any, instance: Any) -> bool:
    return isinstance(instance, time)


def _is_date_time(checker: Any, instance: Any) -> bool:
    return isinstance(instance, datetime)


def _is_hash(checker: Any, instance: Any) -> bool:
    return isinstance(instance, Mapping)


CONTRACT_TYPE_CHECKER = Draft202012Validator.TYPE_CHECKER.redefine_many(
    {
        "float": _is_float,
        "decimal": _is_decimal,
        "date": _is_date,
        "time": _is_time,
        "date_time": _is_date_time,
        "hash": _is_hash,
    }
)

ContractValidator = validators.extend(
    Draft202012Validator,
    type_checker=CONTRACT_TYPE_CHECKER,
)


class Contract:
    """Base class for validation contracts.

    Subclasses set ``schema`` and optionally ``rules``. Instances are
    stateless and may be called any number of times.

    Attributes:
        schema: JSON Schema describing the accepted input object.
        rules: Macro rules evaluated once the schema passes for their keys.
    """

    schema: ClassVar[dict[str, Any]] = {"type": "object", "properties": {}}
    rules: ClassVar[list[Rule]] = []

    def __init__(self) -> None:
        self._validator = ContractValidator(self.schema)
        # Fail fast on macros nobody registered
        for r in self.rules:
            for name, _ in r.macros:
                get_macro(name)

    def __call__(self, data: Mapping[str, Any]) -> ContractResult:
        """Validate ``data`` and collect every failure.

        Args:
            data: Input mapping of attribute name to value.

        Returns:
            ContractResult holding the input and its errors.

        Raises:
            TypeError: If ``data`` is not a mapping.
        """
        if not isinstance(data, Mapping):
            msg = f"contract input must be a mapping, got {type(data).__name__}"
            raise TypeError(msg)

        payload = dict(data)
        messages: list[Message] = []
        for error in self._validator.iter_errors(payload):
            messages.extend(translate_error(error))
        messages = short_circuit(messages)
        messages.extend(self._rule_messages(payload, messages))

        logger.debug(
            "%s produced %d error(s) for keys %s",
            type(self).__name__,
            len(messages),
            sorted(payload),
        )
        return ContractResult(data=payload, errors=ErrorSet(messages))

    def _rule_messages(
        self,
        payload: dict[str, Any],
        schema_messages: list[Message],
    ) -> list[Message]:
        """Run macro rules whose keys passed schema validation."""
        failed_paths = [m.path for m in schema_messages]
        messages: list[Message] = []

        for r in self.rules:
            key = r.keys[0]
            if key not in payload:
                continue
            if any(path_includes(p, (k,)) for p in failed_paths for k in r.keys):
                continue
            for name, args in r.macros:
                text = get_macro(name)(payload[key], *args)
                if text is not None:
                    messages.append(
                        Message(path=(key,), predicate=f"{name}?", text=text)
                    )

        return messages

    @classmethod
    def from_json_schema(
        cls,
        schema: dict[str, Any],
        name: str | None = None,
    ) -> type[Contract]:
        """Build a contract class from a plain JSON Schema document.

        Properties carrying an ``x-macros`` list contribute one rule each.
        Entries are either a macro name or a ``[name, [args...]]`` pair.

        Args:
            schema: JSON Schema for the input object.
            name: Class name for the generated contract.

        Returns:
            A new Contract subclass.

        Raises:
            ValueError: If an ``x-macros`` entry is malformed.
        """
        rules: list[Rule] = []
        for prop, prop_schema in (schema.get("properties") or {}).items():
            entries = prop_schema.get(MACROS_KEYWORD) if isinstance(prop_schema, dict) else None
            if not entries:
                continue
            macros: list[tuple[str, tuple[Any, ...]]] = []
            for entry in entries:
                if isinstance(entry, str):
                    macros.append((entry, ()))
                elif isinstance(entry, list) and entry and isinstance(entry[0], str):
                    args = entry[1] if len(entry) > 1 else []
                    if not isinstance(args, list):
                        args = [args]
                    macros.append((entry[0], tuple(args)))
                else:
                    msg = f"Invalid {MACROS_KEYWORD} entry for '{prop}': {entry!r}"
                    raise ValueError(msg)
            rules.append(Rule(keys=(prop,), macros=tuple(macros)))

        class_name = name or schema.get("title") or "JsonSchemaContract"
        return type(
            str(class_name),
            (cls,),
            {"schema": schema, "rules": rules},
        )
