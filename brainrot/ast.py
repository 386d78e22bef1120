"""brainrot AST — node definitions handed to the evaluator by the parser.

Nodes are frozen. They compare and hash by identity, so side tables such as
the evaluator's resolution cache can key on them directly.

Architecture:
    Source -> Parser (external) -> [AST] -> Executor / Evaluator -> Primitives
"""

from __future__ import annotations

from dataclasses import dataclass, field

from .symbols import Qualifiers, VarKind


# ============================================================
# SOURCE POSITIONS
# ============================================================


@dataclass(frozen=True)
class Pos:
    """Source position as reported by the scanner.

    Invariants:
    - line >= 1
    - line may run ahead of the construct by the scanner's lookahead
    """

    line: int


NO_QUALIFIERS = Qualifiers()


# ============================================================
# BASE CLASSES
# ============================================================


@dataclass(frozen=True, eq=False)
class Node:
    """Base for every AST node."""

    pos: Pos | None = field(default=None, kw_only=True)


@dataclass(frozen=True, eq=False)
class Expr(Node):
    """Base for expressions. Expressions may also appear as statements."""


@dataclass(frozen=True, eq=False)
class Stmt(Node):
    """Base for statements."""


# ============================================================
# LITERALS
# ============================================================


@dataclass(frozen=True, eq=False)
class IntLit(Expr):
    """Integer literal.

    qualifiers are the modifiers in effect when the parser built the literal;
    `chill` accepts an unsigned-qualified argument in place of a literal.
    """

    value: int
    qualifiers: Qualifiers = NO_QUALIFIERS


@dataclass(frozen=True, eq=False)
class FloatLit(Expr):
    """Single precision literal. Rounded to float32 when evaluated."""

    value: float


@dataclass(frozen=True, eq=False)
class DoubleLit(Expr):
    """Double precision literal."""

    value: float


@dataclass(frozen=True, eq=False)
class CharLit(Expr):
    """Character literal, stored as its code point."""

    value: int


@dataclass(frozen=True, eq=False)
class BoolLit(Expr):
    value: bool


@dataclass(frozen=True, eq=False)
class StringLit(Expr):
    """String literal. Only meaningful as a format or print operand."""

    value: str


# ============================================================
# NAMES AND OPERATIONS
# ============================================================


@dataclass(frozen=True, eq=False)
class Var(Expr):
    """Identifier reference.

    Resolution is memoized by the evaluator, keyed on this node.
    """

    name: str


@dataclass(frozen=True, eq=False)
class BinaryOp(Expr):
    """Binary operation.

    Operators: + - * / % < > <= >= == != && ||

    Invariants:
    - && and || evaluate both operands
    - qualifiers.unsigned selects unsigned integer modulo
    """

    op: str
    left: Expr
    right: Expr
    qualifiers: Qualifiers = NO_QUALIFIERS


@dataclass(frozen=True, eq=False)
class UnaryOp(Expr):
    """Unary operation: negation, increment, decrement.

    Invariants:
    - op is one of "-", "++", "--"
    - postfix is only meaningful for "++" and "--"
    - "++" and "--" require a Var operand
    """

    op: str
    operand: Expr
    postfix: bool = False
    qualifiers: Qualifiers = NO_QUALIFIERS


@dataclass(frozen=True, eq=False)
class SizeOf(Expr):
    """sizeof(name): storage size of a declared variable."""

    name: str


# ============================================================
# STATEMENTS
# ============================================================


@dataclass(frozen=True, eq=False)
class Assign(Stmt):
    """Assignment or declaration.

    declared is set for declarations (`int x = ...`) and forces the stored
    kind. qualifiers is None for plain re-assignment, in which case the
    variable keeps the qualifiers it already has.
    """

    target: Var
    value: Expr
    declared: VarKind | None = None
    qualifiers: Qualifiers | None = None


@dataclass(frozen=True, eq=False)
class Call(Stmt):
    """Built-in call. args is the ordered argument list."""

    name: str
    args: tuple[Expr, ...] = ()


@dataclass(frozen=True, eq=False)
class Block(Stmt):
    """Statement sequence, executed in order."""

    body: tuple[Node, ...] = ()


@dataclass(frozen=True, eq=False)
class If(Stmt):
    cond: Expr
    then_body: Node
    else_body: Node | None = None


@dataclass(frozen=True, eq=False)
class While(Stmt):
    cond: Expr
    body: Node | None = None


@dataclass(frozen=True, eq=False)
class For(Stmt):
    """Classic three-part loop. A missing cond loops forever."""

    init: Node | None
    cond: Expr | None
    incr: Node | None
    body: Node | None = None


@dataclass(frozen=True, eq=False)
class Case:
    """One branch of a Switch. value is None for the default branch."""

    value: Expr | None
    body: Node | None = None


@dataclass(frozen=True, eq=False)
class Switch(Stmt):
    """Multi-branch dispatch with fallthrough. Cases keep source order."""

    selector: Expr
    cases: tuple[Case, ...] = ()


@dataclass(frozen=True, eq=False)
class Break(Stmt):
    """Exit the nearest enclosing Switch, While or For."""


@dataclass(frozen=True, eq=False)
class Print(Stmt):
    """Print statement: string literals verbatim, anything else as %d."""

    expr: Expr


@dataclass(frozen=True, eq=False)
class ErrorPrint(Stmt):
    """Like Print, but on the error stream."""

    expr: Expr
