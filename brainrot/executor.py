"""Statement executor.

Every execute() call returns a Flow. BREAK travels up through Blocks until
the nearest Switch, While or For consumes it.
"""

from __future__ import annotations

import math
from enum import Enum

from .ast import (
    Assign,
    Block,
    BoolLit,
    Break,
    Call,
    CharLit,
    ErrorPrint,
    Expr,
    For,
    If,
    Node,
    Print,
    StringLit,
    Switch,
    While,
)
from .builtins import Dispatcher
from .errors import ArithmeticFault, CapacityExceeded, Diagnostics, TypeMisuse
from .evaluator import Evaluator, to_storage
from .numeric import INT_MAX, INT_MIN, NumKind, float_to_int32, wrap_int32
from .primitives import Primitives
from .symbols import SymbolTable, VarKind


class Flow(Enum):
    COMPLETED = "completed"
    BREAK = "break"


_VAR_KIND: dict[NumKind, VarKind] = {
    NumKind.INT: VarKind.INT,
    NumKind.FLOAT: VarKind.FLOAT,
    NumKind.DOUBLE: VarKind.DOUBLE,
}


class Executor:
    def __init__(
        self,
        table: SymbolTable,
        primitives: Primitives,
        diag: Diagnostics,
    ) -> None:
        self.table = table
        self.primitives = primitives
        self.diag = diag
        self.evaluator = Evaluator(table, diag)
        self.dispatcher = Dispatcher(self.evaluator, primitives, diag)

    # ---- Statements --------------------------------------------------------

    def execute(self, st: Node | None) -> Flow:
        if st is None:
            return Flow.COMPLETED

        if isinstance(st, Assign):
            self._assign(st)
            return Flow.COMPLETED

        if isinstance(st, Block):
            for member in st.body:
                if self.execute(member) is Flow.BREAK:
                    return Flow.BREAK
            return Flow.COMPLETED

        if isinstance(st, If):
            if self.evaluator.evaluate_int(st.cond):
                return self.execute(st.then_body)
            return self.execute(st.else_body)

        if isinstance(st, While):
            while self.evaluator.evaluate_int(st.cond):
                if self.execute(st.body) is Flow.BREAK:
                    break
            return Flow.COMPLETED

        if isinstance(st, For):
            self._eval_for(st)
            return Flow.COMPLETED

        if isinstance(st, Switch):
            self._eval_switch(st)
            return Flow.COMPLETED

        if isinstance(st, Break):
            return Flow.BREAK

        if isinstance(st, Call):
            self.dispatcher.call(st)
            return Flow.COMPLETED

        if isinstance(st, (Print, ErrorPrint)):
            self._print(st)
            return Flow.COMPLETED

        if isinstance(st, Expr):
            self.evaluator.evaluate_int(st)
            return Flow.COMPLETED

        self.diag.report(TypeMisuse("Unknown statement type", st.pos))
        return Flow.COMPLETED

    def _eval_for(self, st: For) -> None:
        self.execute(st.init)
        while True:
            if st.cond is not None and not self.evaluator.evaluate_int(st.cond):
                return
            if self.execute(st.body) is Flow.BREAK:
                return
            self.execute(st.incr)

    def _eval_switch(self, st: Switch) -> None:
        selector = self.evaluator.evaluate_int(st.selector)
        matched = False
        for case in st.cases:
            if case.value is None:
                # Default runs whenever it is reached. Without a prior match
                # it is the last body the dispatch executes.
                if self.execute(case.body) is Flow.BREAK or not matched:
                    return
                continue
            case_value = self.evaluator.evaluate_int(case.value)
            if matched or case_value == selector:
                matched = True
                if self.execute(case.body) is Flow.BREAK:
                    return

    def _print(self, st: Print | ErrorPrint) -> None:
        write = self.primitives.yapping if isinstance(st, Print) else self.primitives.baka
        if isinstance(st.expr, StringLit):
            write("%s\n", st.expr.value)
        else:
            write("%d\n", self.evaluator.evaluate_int(st.expr))

    # ---- Assignment --------------------------------------------------------

    def _assign(self, st: Assign) -> None:
        name = st.target.name
        value = st.value
        if st.qualifiers is not None:
            quals = st.qualifiers
        else:
            quals = self.table.qualifiers_of(name)

        number: int | float
        if st.declared is None and isinstance(value, CharLit):
            kind, number = VarKind.CHAR, value.value
        elif st.declared is None and isinstance(value, BoolLit):
            kind, number = VarKind.BOOL, int(value.value)
        else:
            ctx = self.evaluator.infer(value)
            number = self.evaluator.evaluate(value, ctx)
            kind = st.declared if st.declared is not None else _VAR_KIND[ctx]
            if kind in (VarKind.INT, VarKind.CHAR) and isinstance(number, float):
                number = self._narrow(number, st)

        err = self.table.upsert(name, kind, quals, to_storage(kind, number))
        if err is not None:
            self.diag.report(
                CapacityExceeded(f"Failed to set {kind.value} variable: {err.msg}", st.pos)
            )

    def _narrow(self, number: float, st: Assign) -> int:
        """Float to int: saturate above INT_MAX, report but wrap below INT_MIN."""
        if math.isnan(number):
            return float_to_int32(number)
        if number > INT_MAX:
            self.diag.report(ArithmeticFault("Float to int conversion overflow", st.pos))
            return INT_MAX
        if number < INT_MIN:
            self.diag.report(ArithmeticFault("Float to int conversion overflow", st.pos))
            if math.isinf(number):
                return float_to_int32(number)
            return wrap_int32(int(number))
        return int(number)
