"""JSON interchange for ASTs.

Every node becomes an object with a "_type" key naming its class and one
key per field. This is the format a parser front end hands to the CLI.
"""

from __future__ import annotations

import json
from dataclasses import fields

from .ast import (
    Assign,
    BinaryOp,
    Block,
    BoolLit,
    Break,
    Call,
    Case,
    CharLit,
    DoubleLit,
    ErrorPrint,
    FloatLit,
    For,
    If,
    IntLit,
    Node,
    Pos,
    Print,
    SizeOf,
    StringLit,
    Switch,
    UnaryOp,
    Var,
    While,
)
from .errors import LoadError
from .symbols import Qualifiers, VarKind

_NODE_TYPES: dict[str, type] = {
    cls.__name__: cls
    for cls in (
        IntLit,
        FloatLit,
        DoubleLit,
        CharLit,
        BoolLit,
        StringLit,
        Var,
        BinaryOp,
        UnaryOp,
        SizeOf,
        Assign,
        Call,
        Block,
        If,
        While,
        For,
        Case,
        Switch,
        Break,
        Print,
        ErrorPrint,
    )
}

# Expected type per field. A one-element list means "list of". Fields not
# named here (pos) are checked by _field.
_SHAPES: dict[type, dict[str, object]] = {
    IntLit: {"value": int, "qualifiers": Qualifiers},
    FloatLit: {"value": float},
    DoubleLit: {"value": float},
    CharLit: {"value": int},
    BoolLit: {"value": bool},
    StringLit: {"value": str},
    Var: {"name": str},
    BinaryOp: {"op": str, "left": Node, "right": Node, "qualifiers": Qualifiers},
    UnaryOp: {"op": str, "operand": Node, "postfix": bool, "qualifiers": Qualifiers},
    SizeOf: {"name": str},
    Assign: {"target": Var, "value": Node, "declared": VarKind, "qualifiers": Qualifiers},
    Call: {"name": str, "args": [Node]},
    Block: {"body": [Node]},
    If: {"cond": Node, "then_body": Node, "else_body": Node},
    While: {"cond": Node, "body": Node},
    For: {"init": Node, "cond": Node, "incr": Node, "body": Node},
    Case: {"value": Node, "body": Node},
    Switch: {"selector": Node, "cases": [Case]},
    Break: {},
    Print: {"expr": Node},
    ErrorPrint: {"expr": Node},
}

_NULLABLE: set[tuple[type, str]] = {
    (Assign, "declared"),
    (Assign, "qualifiers"),
    (If, "else_body"),
    (While, "body"),
    (For, "init"),
    (For, "cond"),
    (For, "incr"),
    (For, "body"),
    (Case, "value"),
    (Case, "body"),
}


# ---------------------------------------------------------------------------
# Tree -> JSON-compatible structure
# ---------------------------------------------------------------------------


def serialize(obj: object) -> object:
    """Recursively serialize a node (or field value) to plain data."""
    if obj is None:
        return None
    if isinstance(obj, (bool, int, float, str)):
        return obj
    if isinstance(obj, (list, tuple)):
        return [serialize(x) for x in obj]
    if isinstance(obj, Pos):
        return {"line": obj.line}
    if isinstance(obj, Qualifiers):
        return {
            "volatile": obj.volatile,
            "signed": obj.signed,
            "unsigned": obj.unsigned,
            "reserved": obj.reserved,
        }
    if isinstance(obj, VarKind):
        return obj.value
    if isinstance(obj, (Node, Case)):
        out: dict[str, object] = {"_type": type(obj).__name__}
        for f in fields(obj):
            value = getattr(obj, f.name)
            if f.name == "pos" and value is None:
                continue
            out[f.name] = serialize(value)
        return out
    raise TypeError(f"cannot serialize {type(obj).__name__}")


def dumps(node: Node, *, indent: int | None = 2) -> str:
    return json.dumps(serialize(node), indent=indent)


# ---------------------------------------------------------------------------
# JSON-compatible structure -> tree
# ---------------------------------------------------------------------------


def deserialize(data: object) -> Node:
    """Rebuild a tree. Raises LoadError on anything malformed."""
    node = _build(data)
    if not isinstance(node, Node):
        raise LoadError("top level must be a node")
    return node


def loads(text: str) -> Node:
    try:
        data = json.loads(text)
    except ValueError as e:
        raise LoadError(f"invalid JSON: {e}") from e
    return deserialize(data)


def _build(data: object) -> object:
    if not isinstance(data, dict) or "_type" not in data:
        raise LoadError(f"expected a node object, got {data!r}")
    type_name = data["_type"]
    cls = _NODE_TYPES.get(type_name)
    if cls is None:
        raise LoadError(f"unknown node type '{type_name}'")
    kwargs: dict[str, object] = {}
    for f in fields(cls):
        if f.name in data:
            kwargs[f.name] = _field(f.name, data[f.name])
    value = kwargs.get("value")
    if cls in (FloatLit, DoubleLit) and isinstance(value, int) and not isinstance(value, bool):
        kwargs["value"] = float(value)
    if cls is CharLit and isinstance(value, str):
        if len(value) != 1:
            raise LoadError(f"char literal must be one character, got {value!r}")
        kwargs["value"] = ord(value)
    _check_fields(cls, kwargs)
    try:
        return cls(**kwargs)
    except TypeError as e:
        raise LoadError(f"bad fields for {type_name}: {e}") from e


def _is_a(value: object, want: type) -> bool:
    # bool is an int subclass but never a valid number in the tree.
    if want is not bool and isinstance(value, bool):
        return False
    return isinstance(value, want)


def _check_fields(cls: type, kwargs: dict[str, object]) -> None:
    for name, want in _SHAPES[cls].items():
        if name not in kwargs:
            continue
        value = kwargs[name]
        where = f"{cls.__name__}.{name}"
        if value is None:
            if (cls, name) in _NULLABLE:
                continue
            raise LoadError(f"{where} must not be null")
        if isinstance(want, list):
            item = want[0]
            if not isinstance(value, tuple) or not all(isinstance(x, item) for x in value):
                raise LoadError(f"{where} must be a list of {item.__name__} objects")
        elif not _is_a(value, want):  # type: ignore[arg-type]
            raise LoadError(f"{where} must be {want.__name__}, got {value!r}")  # type: ignore[attr-defined]


def _field(name: str, raw: object) -> object:
    if raw is None:
        return None
    try:
        if name == "pos":
            return Pos(int(raw["line"]))  # type: ignore[index]
        if name == "qualifiers":
            return Qualifiers(**{k: bool(v) for k, v in raw.items()})  # type: ignore[union-attr]
        if name == "declared":
            return VarKind(raw)
    except (KeyError, TypeError, ValueError, AttributeError) as e:
        raise LoadError(f"bad {name}: {raw!r}") from e
    if isinstance(raw, list):
        return tuple(_build(x) for x in raw)
    if isinstance(raw, dict):
        return _build(raw)
    return raw
