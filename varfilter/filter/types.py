"""
Value types shared by the filter engine and its handlers.

A table entry is either a constant (Literal) or a zero-argument
computation (Computed) that is re-evaluated on every lookup.
"""

from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType
from typing import Any, Callable, Mapping, Optional, Protocol, Union


class ValueKind(str, Enum):
    """Tag for ResolvedValue variants."""
    LITERAL = "literal"
    COMPUTED = "computed"


@dataclass(frozen=True)
class Literal:
    """A constant value."""
    value: Any
    kind: ValueKind = ValueKind.LITERAL


@dataclass(frozen=True)
class Computed:
    """A value produced by calling `func` at resolution time. Never cached."""
    func: Callable[[], Any]
    kind: ValueKind = ValueKind.COMPUTED


ResolvedValue = Union[Literal, Computed]


def resolve_value(entry: ResolvedValue) -> Any:
    """
    Produce the value held by a table entry.

    Args:
        entry: Literal or Computed entry

    Returns:
        The constant, or the result of invoking the computation
    """
    if entry.kind == ValueKind.LITERAL:
        return entry.value
    elif entry.kind == ValueKind.COMPUTED:
        return entry.func()
    raise TypeError(f"Unknown value kind: {entry.kind!r}")


class Handler(Protocol):
    """Anything that maps a variable name to a value, or None if unknown."""

    def __call__(self, variable: str) -> Optional[Any]:
        ...


class TableHandler:
    """
    Handler backed by a fixed table of ResolvedValue entries.

    The table is copied at construction; entries are resolved on each lookup.
    """

    def __init__(self, entries: Mapping[str, ResolvedValue]):
        self._entries: Mapping[str, ResolvedValue] = MappingProxyType(dict(entries))

    @property
    def entries(self) -> Mapping[str, ResolvedValue]:
        return self._entries

    def __call__(self, variable: str) -> Optional[Any]:
        entry = self._entries.get(variable)
        if entry is None:
            return None
        return resolve_value(entry)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({sorted(self._entries)})"


class ValueHandler:
    """Handler answering exactly one variable: the name it was registered under."""

    def __init__(self, name: str, entry: ResolvedValue):
        self.name = name
        self.entry = entry

    def __call__(self, variable: str) -> Optional[Any]:
        if variable != self.name:
            return None
        return resolve_value(self.entry)

    def __repr__(self) -> str:
        return f"ValueHandler({self.name!r}, {self.entry.kind.value})"
