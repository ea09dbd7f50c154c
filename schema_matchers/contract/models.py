"""Result and rule models returned by contracts."""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field
from typing import Any

Path = tuple[Any, ...]


def to_path(key: Any) -> Path:
    """Normalise an attribute key or path into a path tuple."""
    if isinstance(key, tuple):
        return key
    return (key,)


def path_includes(path: Path, prefix: Path) -> bool:
    """Return True if ``path`` starts with ``prefix``.

    Args:
        path: Path of an error message.
        prefix: Attribute path being looked up.

    Returns:
        True when the message belongs to the attribute or one of its
        children.
    """
    if len(prefix) > len(path):
        return False
    return path[: len(prefix)] == prefix


@dataclass(frozen=True)
class Message:
    """A single validation failure.

    Attributes:
        path: Structural path into the input, e.g. ``("email",)``.
        predicate: Symbolic name of the failed rule, e.g. ``"key?"``.
        text: Human-readable error text, e.g. ``"must be filled"``.
    """

    path: Path
    predicate: str
    text: str


class ErrorSet:
    """Path-indexed collection of :class:`Message` objects.

    Iterating yields every message. Indexing with an attribute name (or a
    path tuple) yields the message texts recorded for exactly that path, or
    ``None`` when the path has no errors.
    """

    def __init__(self, messages: Iterable[Message] = ()) -> None:
        self._messages: list[Message] = list(messages)

    def __iter__(self) -> Iterator[Message]:
        return iter(self._messages)

    def __len__(self) -> int:
        return len(self._messages)

    def __bool__(self) -> bool:
        return bool(self._messages)

    def __getitem__(self, key: Any) -> list[str] | None:
        path = to_path(key)
        texts = [m.text for m in self._messages if m.path == path]
        return texts or None

    def __repr__(self) -> str:
        return f"ErrorSet({self.to_dict()!r})"

    def to_dict(self) -> dict[str, list[str]]:
        """Group message texts by dotted path."""
        grouped: dict[str, list[str]] = {}
        for m in self._messages:
            grouped.setdefault(".".join(str(p) for p in m.path), []).append(m.text)
        return grouped


@dataclass
class ContractResult:
    """Outcome of calling a contract with some input.

    Attributes:
        data: The input mapping the contract was called with.
        errors: Every failure found in ``data``.
    """

    data: dict[str, Any]
    errors: ErrorSet = field(default_factory=ErrorSet)

    @property
    def success(self) -> bool:
        return not self.errors

    @property
    def failure(self) -> bool:
        return bool(self.errors)


@dataclass(frozen=True)
class Rule:
    """A block of macro validations attached to one or more keys.

    Attributes:
        keys: Attribute names the rule governs. The first key is the one the
            macros validate.
        macros: ``(name, args)`` pairs, in declaration order.
    """

    keys: tuple[str, ...]
    macros: tuple[tuple[str, tuple[Any, ...]], ...] = ()

    def validate(self, *names: str, **macros: Any) -> Rule:
        """Return a copy of this rule with more macros attached.

        Positional names attach argument-less macros; keyword arguments
        attach a macro with its argument(s). A list or tuple value supplies
        several arguments.

        Example:
            >>> rule("email").validate("email_format").macros
            (('email_format', ()),)
            >>> rule("name").validate(unique=True).macros
            (('unique', (True,)),)
        """
        added: list[tuple[str, tuple[Any, ...]]] = [(name, ()) for name in names]
        for name, args in macros.items():
            if isinstance(args, (list, tuple)):
                added.append((name, tuple(args)))
            else:
                added.append((name, (args,)))
        return Rule(keys=self.keys, macros=self.macros + tuple(added))


def rule(*keys: str) -> Rule:
    """Start a rule declaration for ``keys``."""
    if not keys:
        msg = "rule() needs at least one key"
        raise ValueError(msg)
    return Rule(keys=tuple(keys))
