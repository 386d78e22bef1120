"""Built-in call dispatcher.

Each built-in validates its argument list, evaluates the value argument in
the right numeric context and hands the result to a primitive. Validation
failures marked fatal raise MalformedCall; the rest are reported.
"""

from __future__ import annotations

from typing import Callable

from .ast import BinaryOp, BoolLit, Call, Expr, IntLit, StringLit, UnaryOp, Var
from .errors import Diagnostics, MalformedCall
from .evaluator import Evaluator
from .numeric import NumKind, to_unsigned32
from .primitives import Primitives
from .symbols import VarKind


class Dispatcher:
    """Routes Call nodes to the built-in table."""

    def __init__(
        self, evaluator: Evaluator, primitives: Primitives, diag: Diagnostics
    ) -> None:
        self.evaluator = evaluator
        self.table = evaluator.table
        self.primitives = primitives
        self.diag = diag

    def call(self, node: Call) -> None:
        handler = BUILTINS.get(node.name)
        if handler is None:
            self.diag.report(MalformedCall(f"Unknown function '{node.name}'", node.pos))
            return
        handler(self, node)

    # ---- Argument classification ------------------------------------------

    def is_unsigned(self, expr: Expr) -> bool:
        """Unsigned per the variable's recorded qualifiers or the node's own."""
        if isinstance(expr, Var):
            return self.table.qualifiers_of(expr.name).unsigned
        if isinstance(expr, (IntLit, BinaryOp, UnaryOp)):
            return expr.qualifiers.unsigned
        return False

    def is_bool(self, expr: Expr) -> bool:
        if isinstance(expr, BoolLit):
            return True
        if isinstance(expr, Var):
            var = self.table.lookup(expr.name)
            return var is not None and var.kind == VarKind.BOOL
        return False


def _format_arg(d: Dispatcher, call: Call, *, fatal: bool) -> StringLit | None:
    if not call.args:
        raise MalformedCall(
            f"No arguments provided for {call.name} function call", call.pos
        )
    fmt = call.args[0]
    if not isinstance(fmt, StringLit):
        err = MalformedCall(
            f"First argument to {call.name} must be a string literal", call.pos
        )
        if fatal:
            raise err
        d.diag.report(err)
        return None
    return fmt


def _bi_yapping(d: Dispatcher, call: Call) -> None:
    fmt_node = _format_arg(d, call, fatal=False)
    if fmt_node is None:
        return
    fmt = fmt_node.value
    if len(call.args) == 1:
        d.primitives.yapping("%s", fmt)
        return
    expr = call.args[1]
    ev = d.evaluator
    kind = ev.infer(expr)
    if kind != NumKind.INT:
        d.primitives.yapping(fmt, ev.evaluate(expr, kind))
        return
    if "%b" in fmt:
        val = ev.evaluate_bool(expr)
        d.primitives.yapping(fmt.replace("%b", "%s", 1), "W" if val else "L")
        return
    if d.is_unsigned(expr):
        uval = to_unsigned32(ev.evaluate(expr, NumKind.INT))
        if "%lu" in fmt or "%u" in fmt:
            d.primitives.yapping(fmt, uval)
        else:
            d.primitives.yapping("%u", uval)
        return
    d.primitives.yapping(fmt, ev.evaluate(expr, NumKind.INT))


def _bi_yappin(d: Dispatcher, call: Call) -> None:
    fmt_node = _format_arg(d, call, fatal=True)
    assert fmt_node is not None
    fmt = fmt_node.value
    if len(call.args) == 1:
        d.primitives.yappin("%s", fmt)
        return
    expr = call.args[1]
    ev = d.evaluator
    if d.is_bool(expr):
        val = ev.evaluate(expr, NumKind.INT)
        if "%d" in fmt:
            d.primitives.yappin(fmt, val)
        else:
            d.primitives.yappin("W" if val else "L")
        return
    kind = ev.infer(expr)
    d.primitives.yappin(fmt, ev.evaluate(expr, kind))


def _bi_baka(d: Dispatcher, call: Call) -> None:
    if not call.args:
        d.primitives.baka("\n")
        return
    # TODO: formatted baka(fmt, args...) once its argument conventions are settled.


def _bi_ragequit(d: Dispatcher, call: Call) -> None:
    if not call.args:
        raise MalformedCall("No arguments provided for ragequit function call", call.pos)
    code = call.args[0]
    if not isinstance(code, IntLit):
        raise MalformedCall("First argument to ragequit must be an integer", call.pos)
    d.primitives.ragequit(code.value)


def _bi_chill(d: Dispatcher, call: Call) -> None:
    if not call.args:
        raise MalformedCall("No arguments provided for chill function call", call.pos)
    arg = call.args[0]
    if d.is_unsigned(arg):
        seconds = to_unsigned32(d.evaluator.evaluate(arg, NumKind.INT))
    elif isinstance(arg, IntLit) and arg.value >= 0:
        seconds = arg.value
    else:
        raise MalformedCall(
            "First argument to chill must be an unsigned integer", call.pos
        )
    d.primitives.chill(seconds)


BUILTINS: dict[str, Callable[[Dispatcher, Call], None]] = {
    "yapping": _bi_yapping,
    "yappin": _bi_yappin,
    "baka": _bi_baka,
    "ragequit": _bi_ragequit,
    "chill": _bi_chill,
}
