"""
CPMM swap kernel (fixed 0.3% fee).

The fee is taken on the input side by scaling: 997/1000 of the input prices the
trade while the whole input stays in the pool. Output is floored and required
input is rounded up, so every trade leaves reserve_in * reserve_out strictly
larger than before.
"""

from __future__ import annotations

from dataclasses import dataclass

from ...errors import InsufficientInputAmount, InsufficientLiquidity, InsufficientOutputAmount
from .fixed_point import require_uint


FEE_NUMERATOR = 997
FEE_DENOMINATOR = 1000


@dataclass(frozen=True)
class SwapResult:
    amount_in: int
    amount_out: int
    new_reserve_in: int
    new_reserve_out: int
    k_before: int
    k_after: int


def get_amount_out(*, reserve_in: int, reserve_out: int, amount_in: int) -> int:
    """
    amount_out = floor(amount_in * 997 * reserve_out / (reserve_in * 1000 + amount_in * 997))
    """
    for name, v in (("reserve_in", reserve_in), ("reserve_out", reserve_out), ("amount_in", amount_in)):
        require_uint(name, v)
    if amount_in == 0:
        raise InsufficientInputAmount("amount_in must be positive")
    if reserve_in == 0 or reserve_out == 0:
        raise InsufficientLiquidity("cannot swap against an empty reserve")

    amount_in_with_fee = amount_in * FEE_NUMERATOR
    numerator = amount_in_with_fee * reserve_out
    denominator = reserve_in * FEE_DENOMINATOR + amount_in_with_fee
    return numerator // denominator


def get_amount_in(*, reserve_in: int, reserve_out: int, amount_out: int) -> int:
    """
    Minimal input that yields at least `amount_out`:
        floor(reserve_in * amount_out * 1000 / ((reserve_out - amount_out) * 997)) + 1
    """
    for name, v in (("reserve_in", reserve_in), ("reserve_out", reserve_out), ("amount_out", amount_out)):
        require_uint(name, v)
    if amount_out == 0:
        raise InsufficientOutputAmount("amount_out must be positive")
    if reserve_in == 0 or reserve_out == 0:
        raise InsufficientLiquidity("cannot swap against an empty reserve")
    if amount_out >= reserve_out:
        raise InsufficientLiquidity(f"amount_out ({amount_out}) would drain reserve_out ({reserve_out})")

    numerator = reserve_in * amount_out * FEE_DENOMINATOR
    denominator = (reserve_out - amount_out) * FEE_NUMERATOR
    return numerator // denominator + 1


def swap_exact_in(*, reserve_in: int, reserve_out: int, amount_in: int) -> SwapResult:
    """Exact-in quote plus post-trade reserves."""
    amount_out = get_amount_out(reserve_in=reserve_in, reserve_out=reserve_out, amount_in=amount_in)
    return _settle(reserve_in=reserve_in, reserve_out=reserve_out, amount_in=amount_in, amount_out=amount_out)


def swap_exact_out(*, reserve_in: int, reserve_out: int, amount_out: int) -> SwapResult:
    """Exact-out quote plus post-trade reserves (reserves move by the requested amount_out)."""
    amount_in = get_amount_in(reserve_in=reserve_in, reserve_out=reserve_out, amount_out=amount_out)
    return _settle(reserve_in=reserve_in, reserve_out=reserve_out, amount_in=amount_in, amount_out=amount_out)


def _settle(*, reserve_in: int, reserve_out: int, amount_in: int, amount_out: int) -> SwapResult:
    if amount_out == 0:
        raise InsufficientOutputAmount("amount_out is zero (trade too small)")
    if amount_out >= reserve_out:
        raise InsufficientLiquidity("amount_out exceeds reserve_out")

    k_before = reserve_in * reserve_out
    new_reserve_in = reserve_in + amount_in
    new_reserve_out = reserve_out - amount_out
    k_after = new_reserve_in * new_reserve_out

    return SwapResult(
        amount_in=amount_in,
        amount_out=amount_out,
        new_reserve_in=new_reserve_in,
        new_reserve_out=new_reserve_out,
        k_before=k_before,
        k_after=k_after,
    )
