"""Expression evaluator — kind inference plus one evaluator per numeric kind.

infer() finds the widest kind a sub-tree touches (double > float > int);
evaluate() then computes the whole sub-tree in that kind. Evaluation is
eager and left to right, so ++/-- writes are visible to later siblings.
"""

from __future__ import annotations

from .ast import (
    BinaryOp,
    BoolLit,
    CharLit,
    DoubleLit,
    FloatLit,
    IntLit,
    Node,
    SizeOf,
    StringLit,
    UnaryOp,
    Var,
)
from .errors import ArithmeticFault, Diagnostics, TypeMisuse, UndefinedSymbol
from .numeric import (
    FLOAT_RULES,
    NumKind,
    coerce,
    float_to_int32,
    int_divmod_trunc,
    to_f32,
    to_unsigned32,
    widest,
    wrap_int8,
    wrap_int32,
)
from .symbols import SymbolTable, VarKind

_COMPARISONS = ("<", ">", "<=", ">=", "==", "!=")

_KIND_OF_VAR: dict[VarKind, NumKind] = {
    VarKind.INT: NumKind.INT,
    VarKind.BOOL: NumKind.INT,
    VarKind.CHAR: NumKind.INT,
    VarKind.FLOAT: NumKind.FLOAT,
    VarKind.DOUBLE: NumKind.DOUBLE,
}

_SIZES: dict[VarKind, int] = {
    VarKind.INT: 4,
    VarKind.FLOAT: 4,
    VarKind.DOUBLE: 8,
    VarKind.BOOL: 1,
    VarKind.CHAR: 1,
}


def num_kind(kind: VarKind) -> NumKind:
    return _KIND_OF_VAR[kind]


def to_storage(kind: VarKind, x: int | float) -> int | float | bool:
    """Convert a computed number to the representation stored for kind."""
    if kind == VarKind.FLOAT:
        return to_f32(float(x))
    if kind == VarKind.DOUBLE:
        return float(x)
    if kind == VarKind.BOOL:
        return x != 0
    n = x if isinstance(x, int) else float_to_int32(x)
    if kind == VarKind.CHAR:
        return wrap_int8(n)
    return wrap_int32(n)


def _cmp(op: str, a: int, b: int) -> bool:
    if op == "<":
        return a < b
    if op == "<=":
        return a <= b
    if op == ">":
        return a > b
    if op == ">=":
        return a >= b
    if op == "==":
        return a == b
    if op == "!=":
        return a != b
    raise AssertionError(op)


class Evaluator:
    """Evaluates expressions against a symbol table."""

    def __init__(self, table: SymbolTable, diag: Diagnostics) -> None:
        self.table = table
        self.diag = diag
        # Var node -> whether its name resolved on first evaluation.
        self._resolved: dict[Var, bool] = {}

    # ---- Entry points ------------------------------------------------------

    def evaluate_int(self, expr: Node) -> int:
        """Evaluate in the inferred kind, then truncate to int."""
        kind = self.infer(expr)
        value = self.evaluate(expr, kind)
        if kind == NumKind.INT:
            return int(value)
        return float_to_int32(value)

    def evaluate_bool(self, expr: Node) -> bool:
        kind = self.infer(expr)
        return self.evaluate(expr, kind) != 0

    def resolve(self, var: Var) -> bool:
        """Look the name up once and remember the outcome for this node."""
        if var not in self._resolved:
            self._resolved[var] = var.name in self.table
        return self._resolved[var]

    # ---- Kind inference ----------------------------------------------------

    def infer(self, expr: Node) -> NumKind:
        if isinstance(expr, FloatLit):
            return NumKind.FLOAT
        if isinstance(expr, DoubleLit):
            return NumKind.DOUBLE
        if isinstance(expr, Var):
            var = self.table.lookup(expr.name)
            if var is None:
                return NumKind.INT
            return num_kind(var.kind)
        if isinstance(expr, BinaryOp):
            return widest(self.infer(expr.left), self.infer(expr.right))
        if isinstance(expr, UnaryOp):
            return self.infer(expr.operand)
        return NumKind.INT

    # ---- Evaluation --------------------------------------------------------

    def evaluate(self, expr: Node, kind: NumKind) -> int | float:
        if isinstance(expr, IntLit):
            if kind == NumKind.INT:
                return wrap_int32(expr.value)
            return coerce(kind, expr.value)
        if isinstance(expr, FloatLit):
            value = to_f32(expr.value)
            if kind == NumKind.INT:
                self.diag.report(
                    TypeMisuse("Cannot use float in integer context", expr.pos)
                )
                return float_to_int32(value)
            return value
        if isinstance(expr, DoubleLit):
            if kind == NumKind.INT:
                self.diag.report(
                    TypeMisuse("Cannot use double in integer context", expr.pos)
                )
                return float_to_int32(expr.value)
            return coerce(kind, expr.value)
        if isinstance(expr, CharLit):
            return coerce(kind, expr.value)
        if isinstance(expr, BoolLit):
            return coerce(kind, int(expr.value))
        if isinstance(expr, Var):
            return self._eval_var(expr, kind)
        if isinstance(expr, SizeOf):
            return coerce(kind, self._sizeof(expr))
        if isinstance(expr, BinaryOp):
            return self._eval_binary(expr, kind)
        if isinstance(expr, UnaryOp):
            return self._eval_unary(expr, kind)
        if isinstance(expr, StringLit):
            self.diag.report(TypeMisuse("String literal used as a value", expr.pos))
            return coerce(kind, 0)
        self.diag.report(
            TypeMisuse(f"Invalid {kind.name.lower()} expression", expr.pos)
        )
        return coerce(kind, 0)

    def _eval_var(self, expr: Var, kind: NumKind) -> int | float:
        if kind == NumKind.INT:
            if not self.resolve(expr):
                raise UndefinedSymbol(f"Undefined variable '{expr.name}'", expr.pos)
            var = self.table.lookup(expr.name)
            assert var is not None
            if var.kind in (VarKind.FLOAT, VarKind.DOUBLE):
                self.diag.report(
                    TypeMisuse(
                        f"Cannot use {var.kind.value} variable in integer context",
                        expr.pos,
                    )
                )
                return float_to_int32(var.value)
            return var.number()
        var = self.table.lookup(expr.name)
        if var is None:
            self.diag.report(
                UndefinedSymbol(f"Undefined variable '{expr.name}'", expr.pos)
            )
            return coerce(kind, 0)
        return coerce(kind, var.number())

    def _sizeof(self, expr: SizeOf) -> int:
        var = self.table.lookup(expr.name)
        if var is None:
            self.diag.report(
                UndefinedSymbol(f"Undefined variable '{expr.name}' in sizeof", expr.pos)
            )
            return 0
        return _SIZES[var.kind]

    def _eval_binary(self, expr: BinaryOp, kind: NumKind) -> int | float:
        left = self.evaluate(expr.left, kind)
        right = self.evaluate(expr.right, kind)
        if expr.op == "&&":
            return coerce(kind, int(left != 0 and right != 0))
        if expr.op == "||":
            return coerce(kind, int(left != 0 or right != 0))
        if kind == NumKind.INT:
            return self._int_binary(expr, int(left), int(right))
        return self._float_binary(expr, kind, float(left), float(right))

    def _int_binary(self, expr: BinaryOp, left: int, right: int) -> int:
        op = expr.op
        if op == "+":
            return wrap_int32(left + right)
        if op == "-":
            return wrap_int32(left - right)
        if op == "*":
            return wrap_int32(left * right)
        if op in ("/", "%"):
            if right == 0:
                self.diag.report(ArithmeticFault("Division by zero", expr.pos))
                return 0
            if op == "/":
                q, _ = int_divmod_trunc(left, right)
                return wrap_int32(q)
            if expr.qualifiers.unsigned:
                return wrap_int32(to_unsigned32(left) % to_unsigned32(right))
            _, r = int_divmod_trunc(left, right)
            return r
        if op in _COMPARISONS:
            return int(_cmp(op, left, right))
        self.diag.report(TypeMisuse(f"Unknown operator '{op}'", expr.pos))
        return 0

    def _float_binary(
        self, expr: BinaryOp, kind: NumKind, left: float, right: float
    ) -> float:
        rules = FLOAT_RULES[kind]
        op = expr.op
        if op == "+":
            return rules.round(left + right)
        if op == "-":
            return rules.round(left - right)
        if op == "*":
            return rules.round(left * right)
        if op == "/":
            return rules.divide(left, right)
        if op in _COMPARISONS:
            return 1.0 if rules.compare(op, left, right) else 0.0
        self.diag.report(
            TypeMisuse(
                f"Invalid operator '{op}' for {kind.name.lower()} operation", expr.pos
            )
        )
        return 0.0

    def _eval_unary(self, expr: UnaryOp, kind: NumKind) -> int | float:
        op = expr.op
        if op == "-":
            value = self.evaluate(expr.operand, kind)
            if kind == NumKind.INT:
                return wrap_int32(-int(value))
            return -value
        if op in ("++", "--"):
            operand = expr.operand
            if not isinstance(operand, Var):
                self.diag.report(
                    TypeMisuse(f"Operand of '{op}' must be a variable", expr.pos)
                )
                return coerce(kind, 0)
            old = self.evaluate(operand, kind)
            step = 1 if op == "++" else -1
            if kind == NumKind.INT:
                new: int | float = wrap_int32(int(old) + step)
            else:
                new = FLOAT_RULES[kind].round(old + step)
            self._write_back(operand, new)
            return old if expr.postfix else new
        self.diag.report(TypeMisuse(f"Unknown unary operator '{op}'", expr.pos))
        return coerce(kind, 0)

    def _write_back(self, target: Var, value: int | float) -> None:
        var = self.table.lookup(target.name)
        if var is None:
            # Already reported by the read; nothing to update.
            return
        self.table.upsert(
            target.name,
            var.kind,
            self.table.qualifiers_of(target.name),
            to_storage(var.kind, value),
        )
