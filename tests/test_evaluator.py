"""Tests for kind inference and expression evaluation."""

import math

import pytest

from brainrot.ast import (
    BinaryOp,
    BoolLit,
    CharLit,
    DoubleLit,
    FloatLit,
    IntLit,
    Pos,
    SizeOf,
    StringLit,
    UnaryOp,
    Var,
)
from brainrot.errors import Diagnostics, UndefinedSymbol
from brainrot.evaluator import Evaluator
from brainrot.numeric import FLT_MAX, INT_MAX, INT_MIN, NumKind, to_f32
from brainrot.symbols import Qualifiers, SymbolTable, VarKind


@pytest.fixture
def messages():
    return []


@pytest.fixture
def table():
    return SymbolTable()


@pytest.fixture
def ev(table, messages):
    return Evaluator(table, Diagnostics(messages.append, line_offset=0))


def _set(table, name, kind, value, **quals):
    table.upsert(name, kind, Qualifiers(**quals), value)


# ---------------------------------------------------------------------------
# Inference
# ---------------------------------------------------------------------------


def test_infer_literals(ev):
    assert ev.infer(IntLit(1)) == NumKind.INT
    assert ev.infer(FloatLit(1.0)) == NumKind.FLOAT
    assert ev.infer(DoubleLit(1.0)) == NumKind.DOUBLE
    assert ev.infer(CharLit(65)) == NumKind.INT
    assert ev.infer(BoolLit(True)) == NumKind.INT


def test_infer_widest_kind_wins(ev):
    assert ev.infer(BinaryOp("+", IntLit(1), FloatLit(0.5))) == NumKind.FLOAT
    mixed = BinaryOp("*", FloatLit(1.0), BinaryOp("+", IntLit(1), DoubleLit(2.0)))
    assert ev.infer(mixed) == NumKind.DOUBLE
    assert ev.infer(UnaryOp("-", DoubleLit(1.0))) == NumKind.DOUBLE


def test_infer_variables(ev, table):
    _set(table, "f", VarKind.FLOAT, 1.5)
    _set(table, "c", VarKind.CHAR, 65)
    assert ev.infer(Var("f")) == NumKind.FLOAT
    assert ev.infer(Var("c")) == NumKind.INT
    assert ev.infer(Var("unknown")) == NumKind.INT


# ---------------------------------------------------------------------------
# Integer context
# ---------------------------------------------------------------------------


def test_int_arithmetic_wraps(ev):
    assert ev.evaluate_int(BinaryOp("+", IntLit(INT_MAX), IntLit(1))) == INT_MIN
    assert ev.evaluate_int(BinaryOp("*", IntLit(65536), IntLit(65536))) == 0


def test_int_division_truncates(ev):
    assert ev.evaluate_int(BinaryOp("/", IntLit(-7), IntLit(2))) == -3
    assert ev.evaluate_int(BinaryOp("%", IntLit(-7), IntLit(2))) == -1


def test_int_division_by_zero_reports(ev, messages):
    expr = BinaryOp("/", IntLit(1), IntLit(0), pos=Pos(4))
    assert ev.evaluate_int(expr) == 0
    assert messages == ["Error: Division by zero at line 4\n"]


def test_int_modulo_by_zero_reports(ev, messages):
    assert ev.evaluate_int(BinaryOp("%", IntLit(7), IntLit(0), pos=Pos(2))) == 0
    unsigned = BinaryOp("%", IntLit(-7), IntLit(0), qualifiers=Qualifiers(unsigned=True))
    assert ev.evaluate_int(unsigned) == 0
    assert messages == [
        "Error: Division by zero at line 2\n",
        "Error: Division by zero\n",
    ]


def test_unsigned_modulo(ev):
    expr = BinaryOp("%", IntLit(-1), IntLit(10), qualifiers=Qualifiers(unsigned=True))
    assert ev.evaluate_int(expr) == 5


def test_comparisons_yield_zero_or_one(ev):
    assert ev.evaluate_int(BinaryOp("<", IntLit(1), IntLit(2))) == 1
    assert ev.evaluate_int(BinaryOp("==", IntLit(1), IntLit(2))) == 0
    assert ev.evaluate_int(BinaryOp("!=", IntLit(1), IntLit(2))) == 1


def test_logical_ops_evaluate_both_sides(ev, table):
    _set(table, "x", VarKind.INT, 0)
    expr = BinaryOp("&&", IntLit(0), UnaryOp("++", Var("x"), postfix=True))
    assert ev.evaluate_int(expr) == 0
    assert table.lookup("x").value == 1
    expr = BinaryOp("||", IntLit(1), UnaryOp("++", Var("x"), postfix=True))
    assert ev.evaluate_int(expr) == 1
    assert table.lookup("x").value == 2


def test_float_literal_in_int_context_reports(ev, messages):
    assert ev.evaluate(FloatLit(2.5), NumKind.INT) == 2
    assert messages == ["Error: Cannot use float in integer context\n"]


def test_float_variable_in_int_context_truncates(ev, table, messages):
    _set(table, "f", VarKind.DOUBLE, -2.75)
    assert ev.evaluate(Var("f"), NumKind.INT) == -2
    assert "Cannot use double variable in integer context" in messages[0]


def test_undefined_in_int_context_is_fatal(ev):
    with pytest.raises(UndefinedSymbol) as exc:
        ev.evaluate_int(Var("ghost", pos=Pos(3)))
    assert str(exc.value) == "Undefined variable 'ghost' at line 3"


def test_undefined_in_float_context_reports(ev, messages):
    expr = BinaryOp("+", Var("ghost"), FloatLit(1.5))
    assert ev.evaluate(expr, NumKind.FLOAT) == 1.5
    assert messages == ["Error: Undefined variable 'ghost'\n"]


def test_resolution_is_remembered_per_node(ev, table):
    ref = Var("late")
    with pytest.raises(UndefinedSymbol):
        ev.evaluate_int(ref)
    _set(table, "late", VarKind.INT, 9)
    with pytest.raises(UndefinedSymbol):
        ev.evaluate_int(ref)
    assert ev.evaluate_int(Var("late")) == 9


def test_char_and_bool_values(ev, table):
    _set(table, "c", VarKind.CHAR, 65)
    _set(table, "b", VarKind.BOOL, True)
    assert ev.evaluate_int(BinaryOp("+", Var("c"), Var("b"))) == 66
    assert ev.evaluate(BinaryOp("+", Var("c"), FloatLit(0.5)), NumKind.FLOAT) == 65.5


# ---------------------------------------------------------------------------
# Float and double contexts
# ---------------------------------------------------------------------------


def test_float_context_rounds_to_float32(ev):
    expr = BinaryOp("+", FloatLit(0.1), FloatLit(0.2))
    assert ev.evaluate(expr, NumKind.FLOAT) == to_f32(to_f32(0.1) + to_f32(0.2))


def test_double_context_keeps_precision(ev):
    expr = BinaryOp("+", DoubleLit(0.1), DoubleLit(0.2))
    assert ev.evaluate(expr, NumKind.DOUBLE) == 0.1 + 0.2


def test_float_division_by_zero_saturates(ev, messages):
    expr = BinaryOp("/", FloatLit(1.0), FloatLit(0.0))
    assert ev.evaluate(expr, NumKind.FLOAT) == FLT_MAX
    assert math.isnan(ev.evaluate(BinaryOp("/", DoubleLit(0.0), DoubleLit(0.0)), NumKind.DOUBLE))
    assert messages == []


def test_float_modulo_is_rejected(ev, messages):
    expr = BinaryOp("%", FloatLit(5.0), FloatLit(2.0))
    assert ev.evaluate(expr, NumKind.FLOAT) == 0.0
    assert messages == ["Error: Invalid operator '%' for float operation\n"]


def test_float_comparisons(ev):
    assert ev.evaluate(BinaryOp("<", FloatLit(1.0), FloatLit(2.0)), NumKind.FLOAT) == 1.0
    assert ev.evaluate(BinaryOp("==", DoubleLit(1.0), DoubleLit(1.0)), NumKind.DOUBLE) == 1.0


def test_evaluate_int_truncates_float_result(ev):
    assert ev.evaluate_int(BinaryOp("*", IntLit(3), FloatLit(1.5))) == 4


# ---------------------------------------------------------------------------
# Unary operators
# ---------------------------------------------------------------------------


def test_postfix_and_prefix_increment(ev, table):
    _set(table, "x", VarKind.INT, 5)
    assert ev.evaluate_int(UnaryOp("++", Var("x"), postfix=True)) == 5
    assert table.lookup("x").value == 6
    assert ev.evaluate_int(UnaryOp("++", Var("x"))) == 7
    assert ev.evaluate_int(UnaryOp("--", Var("x"), postfix=True)) == 7
    assert table.lookup("x").value == 6


def test_increment_is_visible_to_later_operands(ev, table):
    _set(table, "x", VarKind.INT, 5)
    expr = BinaryOp("+", UnaryOp("++", Var("x"), postfix=True), Var("x"))
    assert ev.evaluate_int(expr) == 11
    assert table.lookup("x").value == 6
    expr = BinaryOp("*", UnaryOp("--", Var("x")), Var("x"))
    assert ev.evaluate_int(expr) == 25


def test_increment_keeps_kind_and_qualifiers(ev, table):
    _set(table, "d", VarKind.DOUBLE, 1.5, volatile=True)
    assert ev.evaluate(UnaryOp("++", Var("d")), NumKind.DOUBLE) == 2.5
    var = table.lookup("d")
    assert var.kind == VarKind.DOUBLE
    assert var.value == 2.5
    assert var.qualifiers.volatile


def test_increment_wraps(ev, table):
    _set(table, "x", VarKind.INT, INT_MAX)
    assert ev.evaluate_int(UnaryOp("++", Var("x"))) == INT_MIN


def test_increment_requires_variable(ev, messages):
    assert ev.evaluate_int(UnaryOp("++", IntLit(1))) == 0
    assert messages == ["Error: Operand of '++' must be a variable\n"]


def test_negation(ev):
    assert ev.evaluate_int(UnaryOp("-", IntLit(INT_MIN))) == INT_MIN
    assert ev.evaluate(UnaryOp("-", DoubleLit(2.5)), NumKind.DOUBLE) == -2.5


# ---------------------------------------------------------------------------
# Misc
# ---------------------------------------------------------------------------


def test_sizeof(ev, table, messages):
    _set(table, "i", VarKind.INT, 0)
    _set(table, "d", VarKind.DOUBLE, 0.0)
    _set(table, "c", VarKind.CHAR, 0)
    assert ev.evaluate_int(SizeOf("i")) == 4
    assert ev.evaluate_int(SizeOf("d")) == 8
    assert ev.evaluate_int(SizeOf("c")) == 1
    assert ev.evaluate_int(SizeOf("nope")) == 0
    assert "Undefined variable 'nope' in sizeof" in messages[0]


def test_string_literal_is_not_a_value(ev, messages):
    assert ev.evaluate_int(StringLit("hi")) == 0
    assert messages == ["Error: String literal used as a value\n"]
