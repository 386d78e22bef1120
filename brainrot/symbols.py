"""Global symbol table: one flat namespace of typed variables."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Iterator

from .errors import CapacityExceeded


class VarKind(Enum):
    """Declared kind of a variable."""

    INT = "int"
    FLOAT = "float"
    DOUBLE = "double"
    BOOL = "bool"
    CHAR = "char"


@dataclass(frozen=True)
class Qualifiers:
    """Declaration modifiers.

    reserved is set by some front ends at initialization and carried along,
    but nothing in the evaluator reads it.
    """

    volatile: bool = False
    signed: bool = False
    unsigned: bool = False
    reserved: bool = False


@dataclass
class Variable:
    name: str
    kind: VarKind
    qualifiers: Qualifiers
    value: int | float | bool

    def number(self) -> int | float:
        """Current value as a plain number (bools become 0/1)."""
        if isinstance(self.value, bool):
            return int(self.value)
        return self.value


class SymbolTable:
    """Ordered name -> Variable store.

    capacity bounds the number of distinct names; None means unbounded.
    """

    def __init__(self, capacity: int | None = None) -> None:
        self.capacity = capacity
        self._vars: dict[str, Variable] = {}

    def lookup(self, name: str) -> Variable | None:
        return self._vars.get(name)

    def upsert(
        self,
        name: str,
        kind: VarKind,
        qualifiers: Qualifiers,
        value: int | float | bool,
    ) -> CapacityExceeded | None:
        """Create or update a variable in place.

        Returns a CapacityExceeded error (without raising) when a new name
        does not fit; the caller decides how severe that is.
        """
        var = self._vars.get(name)
        if var is not None:
            var.kind = kind
            var.qualifiers = qualifiers
            var.value = value
            return None
        if self.capacity is not None and len(self._vars) >= self.capacity:
            return CapacityExceeded(
                f"symbol table full ({self.capacity} variables), cannot add '{name}'"
            )
        self._vars[name] = Variable(name, kind, qualifiers, value)
        return None

    def qualifiers_of(self, name: str) -> Qualifiers:
        var = self._vars.get(name)
        if var is None:
            return Qualifiers()
        return var.qualifiers

    def names(self) -> list[str]:
        return list(self._vars)

    def __contains__(self, name: object) -> bool:
        return name in self._vars

    def __len__(self) -> int:
        return len(self._vars)

    def __iter__(self) -> Iterator[Variable]:
        return iter(self._vars.values())
