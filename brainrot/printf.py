"""C printf-style formatting for the output primitives."""

from __future__ import annotations

import math
import re

# %[flags][width][.precision][length]conversion
_CONVERSION_RE = re.compile(
    r"%(?P<flags>[-+ #0]*)"
    r"(?P<width>\*|\d+)?"
    r"(?:\.(?P<precision>\*|\d*))?"
    r"(?P<length>hh|h|ll|l|L|z|j|t)?"
    r"(?P<conv>[diouxXeEfFgGcsp%])"
)

_FLOAT_CONVS = "eEfFgG"


def _as_int(arg: object) -> int:
    if isinstance(arg, bool):
        return int(arg)
    if isinstance(arg, int):
        return arg
    if isinstance(arg, float):
        if math.isnan(arg) or math.isinf(arg):
            return 0
        return int(arg)
    if isinstance(arg, str) and len(arg) == 1:
        return ord(arg)
    return 0


def _as_float(arg: object) -> float:
    if isinstance(arg, (int, float)):
        return float(arg)
    return 0.0


def _unsigned(value: int, length: str | None) -> int:
    if length in ("l", "ll", "z", "j", "t"):
        return value & 0xFFFFFFFFFFFFFFFF
    if length == "h":
        return value & 0xFFFF
    if length == "hh":
        return value & 0xFF
    return value & 0xFFFFFFFF


def format_c(fmt: str, args: tuple[object, ...] | list[object]) -> str:
    """Render fmt with args the way printf would.

    Conversions without a matching argument are left in the output verbatim.
    """
    pending = list(args)
    out: list[str] = []
    pos = 0
    for m in _CONVERSION_RE.finditer(fmt):
        out.append(fmt[pos : m.start()])
        pos = m.end()
        conv = m.group("conv")
        if conv == "%":
            out.append("%")
            continue
        flags = m.group("flags")
        width = m.group("width") or ""
        precision = m.group("precision")
        if width == "*":
            if not pending:
                out.append(m.group(0))
                continue
            w = _as_int(pending.pop(0))
            if w < 0:
                flags += "-"
                w = -w
            width = str(w)
        if precision == "*":
            if not pending:
                out.append(m.group(0))
                continue
            p = _as_int(pending.pop(0))
            precision = str(p) if p >= 0 else None
        if not pending:
            out.append(m.group(0))
            continue
        arg = pending.pop(0)
        out.append(_render(conv, flags, width, precision, m.group("length"), arg))
    out.append(fmt[pos:])
    return "".join(out)


def _render(
    conv: str,
    flags: str,
    width: str,
    precision: str | None,
    length: str | None,
    arg: object,
) -> str:
    prec = "" if precision is None else "." + (precision or "0")
    if conv == "s":
        text = arg if isinstance(arg, str) else str(arg)
        return ("%" + flags.replace("0", "") + width + prec + "s") % text
    if conv == "c":
        return ("%" + flags.replace("0", "") + width + "c") % chr(_as_int(arg) & 0xFF)
    if conv == "p":
        return ("%" + flags + width + "s") % hex(_as_int(arg))
    if conv in _FLOAT_CONVS:
        value = _as_float(arg)
        if math.isnan(value) or math.isinf(value):
            text = "nan" if math.isnan(value) else ("inf" if value > 0 else "-inf")
            if value > 0 and "+" in flags:
                text = "+" + text
            if conv.isupper():
                text = text.upper()
            return ("%" + flags.replace("0", "") + width + "s") % text
        return ("%" + flags + width + prec + conv) % value
    value = _as_int(arg)
    if conv == "u":
        return ("%" + flags + width + prec + "d") % _unsigned(value, length)
    if conv in "xXo" and value < 0:
        value = _unsigned(value, length)
    if conv == "o" and "#" in flags:
        # C marks alternate octal with a single leading zero, not "0o".
        text = ("%" + prec + "o") % value
        if not text.startswith("0"):
            text = "0" + text
        return ("%" + ("-" if "-" in flags else "") + width + "s") % text
    if conv == "i":
        conv = "d"
    return ("%" + flags + width + prec + conv) % value
