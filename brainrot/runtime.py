"""brainrot runtime — wire the table, evaluator and executor and run a tree."""

from __future__ import annotations

import io
import time
from dataclasses import dataclass
from typing import Callable

from .ast import Node
from .errors import (
    EXIT_FAILURE,
    LOOKAHEAD_OFFSET,
    BrainrotError,
    Diagnostics,
    TypeMisuse,
)
from .executor import Executor, Flow
from .primitives import Exit, Primitives, StreamPrimitives
from .symbols import SymbolTable


@dataclass
class RunResult:
    exit_code: int
    stdout: bytes
    stderr: bytes
    table: SymbolTable


class Runtime:
    """One interpreter instance: a fresh symbol table per Runtime."""

    def __init__(
        self,
        primitives: Primitives,
        *,
        max_vars: int | None = None,
        line_offset: int = LOOKAHEAD_OFFSET,
    ) -> None:
        self.primitives = primitives
        self.table = SymbolTable(max_vars)
        self.diag = Diagnostics(primitives.report, line_offset=line_offset)
        self.executor = Executor(self.table, primitives, self.diag)

    def run_program(self, program: Node) -> int:
        """Execute program and return its exit status."""
        try:
            flow = self.executor.execute(program)
        except Exit as e:
            return e.code
        except BrainrotError as e:
            self.diag.report(e)
            return EXIT_FAILURE
        if flow is Flow.BREAK:
            self.diag.report(TypeMisuse("break statement not within loop or switch"))
        return 0


def execute(
    program: Node,
    primitives: Primitives,
    *,
    max_vars: int | None = None,
    line_offset: int = LOOKAHEAD_OFFSET,
) -> int:
    """Run program against caller-supplied primitives. Returns exit status."""
    rt = Runtime(primitives, max_vars=max_vars, line_offset=line_offset)
    return rt.run_program(program)


def run(
    program: Node,
    *,
    max_vars: int | None = None,
    line_offset: int = LOOKAHEAD_OFFSET,
    sleep: Callable[[float], None] = time.sleep,
) -> RunResult:
    """Run program with buffered output and return everything it produced."""
    out = io.BytesIO()
    err = io.BytesIO()
    rt = Runtime(
        StreamPrimitives(out, err, sleep=sleep),
        max_vars=max_vars,
        line_offset=line_offset,
    )
    code = rt.run_program(program)
    return RunResult(code, out.getvalue(), err.getvalue(), rt.table)
