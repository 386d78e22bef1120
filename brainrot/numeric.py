"""Numeric kinds and their machine rules: 32-bit int, float32, float64."""

from __future__ import annotations

import math
import struct
import sys
from dataclasses import dataclass
from enum import IntEnum
from typing import Callable

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

INT_MIN: int = -(2**31)
INT_MAX: int = 2**31 - 1
MASK32: int = 0xFFFFFFFF

FLT_MIN: float = 1.1754943508222875e-38
FLT_MAX: float = 3.4028234663852886e38
FLT_EPSILON: float = 1.1920928955078125e-07

DBL_MIN: float = sys.float_info.min
DBL_MAX: float = sys.float_info.max
DBL_EPSILON: float = sys.float_info.epsilon


class NumKind(IntEnum):
    """Evaluation context. Ordered by dominance: the widest kind wins."""

    INT = 0
    FLOAT = 1
    DOUBLE = 2


def widest(a: NumKind, b: NumKind) -> NumKind:
    return a if a >= b else b


# ---------------------------------------------------------------------------
# Integer helpers
# ---------------------------------------------------------------------------


def wrap_int32(x: int) -> int:
    """Two's complement wraparound to a signed 32-bit int."""
    x &= MASK32
    if x > INT_MAX:
        return x - (1 << 32)
    return x


def wrap_int8(x: int) -> int:
    x &= 0xFF
    if x > 0x7F:
        return x - 0x100
    return x


def to_unsigned32(x: int) -> int:
    return x & MASK32


def int_divmod_trunc(a: int, b: int) -> tuple[int, int]:
    """C division: quotient truncates toward zero, remainder has a's sign."""
    if b == 0:
        raise ZeroDivisionError
    q = abs(a) // abs(b)
    if (a < 0) != (b < 0):
        q = -q
    r = a - q * b
    return (q, r)


def float_to_int32(x: float) -> int:
    """Truncating cast. NaN and out-of-range values give INT_MIN."""
    if math.isnan(x) or math.isinf(x):
        return INT_MIN
    i = int(x)
    if i < INT_MIN or i > INT_MAX:
        return INT_MIN
    return i


# ---------------------------------------------------------------------------
# Float helpers
# ---------------------------------------------------------------------------


def to_f32(x: float) -> float:
    """Round a double to the nearest float32 value."""
    try:
        return struct.unpack("<f", struct.pack("<f", x))[0]
    except OverflowError:
        return math.copysign(math.inf, x)


def _identity(x: float) -> float:
    return x


@dataclass(frozen=True)
class FloatRules:
    """Per-kind constants for the float contexts."""

    tiny: float
    huge: float
    epsilon: float
    round: Callable[[float], float]

    def divide(self, left: float, right: float) -> float:
        """Division that saturates instead of producing infinities."""
        if abs(right) < self.tiny:
            if abs(left) < self.tiny:
                return math.nan
            return self.huge if left > 0 else -self.huge
        return self.round(left / right)

    def compare(self, op: str, left: float, right: float) -> bool:
        diff = self.round(left - right)
        eps = self.epsilon
        if op == "<":
            return diff < -eps
        if op == ">":
            return diff > eps
        if op == "<=":
            return diff <= eps
        if op == ">=":
            return diff >= -eps
        if op == "==":
            return abs(diff) <= eps
        if op == "!=":
            return abs(diff) > eps
        raise AssertionError(op)


FLOAT_RULES: dict[NumKind, FloatRules] = {
    NumKind.FLOAT: FloatRules(FLT_MIN, FLT_MAX, FLT_EPSILON, to_f32),
    NumKind.DOUBLE: FloatRules(DBL_MIN, DBL_MAX, DBL_EPSILON, _identity),
}


def coerce(kind: NumKind, x: int | float) -> int | float:
    """Represent a number in the given context (no truncation for INT)."""
    if kind == NumKind.FLOAT:
        return to_f32(float(x))
    if kind == NumKind.DOUBLE:
        return float(x)
    return x
