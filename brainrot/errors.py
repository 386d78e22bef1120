"""Error taxonomy and the diagnostic reporter.

Fatal errors are raised and end the run with exit status 1. Non-fatal errors
are handed to Diagnostics.report and evaluation continues with a default.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Callable

if TYPE_CHECKING:
    from .ast import Pos


# Lines reported by the scanner run ahead of the construct being evaluated.
LOOKAHEAD_OFFSET = 2

EXIT_FAILURE = 1


class BrainrotError(Exception):
    """Base error for brainrot evaluation."""

    def __init__(self, msg: str, pos: Pos | None = None):
        if pos is None:
            super().__init__(msg)
        else:
            super().__init__(f"{msg} at line {pos.line}")
        self.msg = msg
        self.pos = pos


class UndefinedSymbol(BrainrotError):
    """Reference to a name that was never assigned."""


class TypeMisuse(BrainrotError):
    """Value of the wrong kind in a context that forbids it."""


class ArithmeticFault(BrainrotError):
    """Integer division by zero or a narrowing overflow."""


class MalformedCall(BrainrotError):
    """Wrong arity or argument kind passed to a built-in."""


class CapacityExceeded(BrainrotError):
    """Symbol table is full."""


class LoadError(BrainrotError):
    """Malformed serialized AST."""


class Diagnostics:
    """Formats errors and writes them to the diagnostic channel."""

    def __init__(self, write: Callable[[str], None], *, line_offset: int = LOOKAHEAD_OFFSET):
        self._write = write
        self.line_offset = line_offset

    def format(self, err: BrainrotError) -> str:
        if err.pos is None:
            return f"Error: {err.msg}\n"
        line = max(1, err.pos.line - self.line_offset)
        return f"Error: {err.msg} at line {line}\n"

    def report(self, err: BrainrotError) -> None:
        self._write(self.format(err))
