"""
Fixed-point helpers shared by the liquidity and swap kernels.

Integer-only; every helper either returns an exact result or raises.
"""

from __future__ import annotations

import math

from ...errors import ArithmeticFault


UINT256_BITS = 256


def require_uint(name: str, value: int, *, bits: int = UINT256_BITS) -> int:
    """
    Check that `value` lies in the unsigned domain `[0, 2**bits)`.

    Raises:
        TypeError: If value is not an int (bools are rejected too)
        ArithmeticFault: If value is negative or wider than `bits`
    """
    if not isinstance(value, int) or isinstance(value, bool):
        raise TypeError(f"{name} must be an int")
    if value < 0:
        raise ArithmeticFault(f"{name} must be non-negative: {value}")
    if value >> bits:
        raise ArithmeticFault(f"{name} exceeds uint{bits}: {value}")
    return value


def isqrt(n: int) -> int:
    """floor(sqrt(n)), exact for arbitrarily large n (no float rounding)."""
    require_uint("n", n, bits=2 * UINT256_BITS)
    return math.isqrt(n)


def min_uint(a: int, b: int) -> int:
    require_uint("a", a)
    require_uint("b", b)
    return a if a < b else b


def max_uint(a: int, b: int) -> int:
    require_uint("a", a)
    require_uint("b", b)
    return a if a > b else b


def mul_div(a: int, b: int, denominator: int) -> int:
    """floor(a * b / denominator) for unsigned operands."""
    require_uint("a", a)
    require_uint("b", b)
    require_uint("denominator", denominator)
    if denominator == 0:
        raise ArithmeticFault("division by zero")
    return (a * b) // denominator
