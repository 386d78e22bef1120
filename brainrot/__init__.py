"""brainrot evaluator — public API."""

from __future__ import annotations

from .ast import Node, Pos
from .errors import (
    ArithmeticFault as ArithmeticFault,
    BrainrotError as BrainrotError,
    CapacityExceeded as CapacityExceeded,
    LoadError as LoadError,
    MalformedCall as MalformedCall,
    TypeMisuse as TypeMisuse,
    UndefinedSymbol as UndefinedSymbol,
)
from .primitives import Primitives as Primitives, StreamPrimitives as StreamPrimitives
from .runtime import RunResult as RunResult, execute as execute, run as run
from .serialize import dumps as dumps, loads
from .symbols import Qualifiers as Qualifiers, SymbolTable as SymbolTable, VarKind as VarKind


def run_json(text: str, **options: object) -> RunResult:
    """Load a JSON-serialized program and run it with buffered output."""
    return run(loads(text), **options)  # type: ignore[arg-type]


__all__ = [
    "ArithmeticFault",
    "BrainrotError",
    "CapacityExceeded",
    "LoadError",
    "MalformedCall",
    "Node",
    "Pos",
    "Primitives",
    "Qualifiers",
    "RunResult",
    "StreamPrimitives",
    "SymbolTable",
    "TypeMisuse",
    "UndefinedSymbol",
    "VarKind",
    "dumps",
    "execute",
    "loads",
    "run",
    "run_json",
]
