"""
Liquidity math kernel.

Pure functions with explicit floor rounding:
- first deposit mints floor(sqrt(amount_a * amount_b)) claims (no locked minimum),
- later deposits are trimmed to the current reserve ratio and mint the smaller
  of the two proportional shares,
- redemption pays out floor(claims * reserve / supply) of each asset, which may
  be zero for one side of a lopsided pool.
"""

from __future__ import annotations

from dataclasses import dataclass

from ...errors import (
    InsufficientAAmount,
    InsufficientAmount,
    InsufficientBAmount,
    InsufficientBalance,
    InsufficientLiquidity,
    InsufficientLiquidityBurned,
    InsufficientLiquidityMinted,
)
from .fixed_point import isqrt, min_uint, mul_div, require_uint


@dataclass(frozen=True)
class OptimalLiquidityResult:
    amount_a_used: int
    amount_b_used: int
    amount_a_refund: int
    amount_b_refund: int


@dataclass(frozen=True)
class MintLiquidityResult:
    liquidity_minted: int
    amount_a_used: int
    amount_b_used: int
    new_reserve_a: int
    new_reserve_b: int
    new_total_supply: int


@dataclass(frozen=True)
class BurnLiquidityResult:
    amount_a_out: int
    amount_b_out: int


def quote(*, amount_a: int, reserve_a: int, reserve_b: int) -> int:
    """Amount of B worth `amount_a` of A at the current reserve ratio (floor)."""
    for name, v in (("amount_a", amount_a), ("reserve_a", reserve_a), ("reserve_b", reserve_b)):
        require_uint(name, v)
    if amount_a == 0:
        raise InsufficientAmount("amount_a must be positive")
    if reserve_a == 0 or reserve_b == 0:
        raise InsufficientLiquidity("cannot quote against an empty reserve")
    return mul_div(amount_a, reserve_b, reserve_a)


def optimal_liquidity(
    *,
    reserve_a: int,
    reserve_b: int,
    amount_a_desired: int,
    amount_b_desired: int,
    amount_a_min: int = 0,
    amount_b_min: int = 0,
) -> OptimalLiquidityResult:
    """
    Compute ratio-preserving used amounts, enforcing the caller's minimums.

    For an empty pool (reserve_a == 0 and reserve_b == 0) everything is used.
    """
    for name, v in (
        ("reserve_a", reserve_a),
        ("reserve_b", reserve_b),
        ("amount_a_desired", amount_a_desired),
        ("amount_b_desired", amount_b_desired),
        ("amount_a_min", amount_a_min),
        ("amount_b_min", amount_b_min),
    ):
        require_uint(name, v)

    if reserve_a == 0 and reserve_b == 0:
        return OptimalLiquidityResult(
            amount_a_used=amount_a_desired,
            amount_b_used=amount_b_desired,
            amount_a_refund=0,
            amount_b_refund=0,
        )
    if reserve_a == 0 or reserve_b == 0:
        raise InsufficientLiquidity("one-sided reserves: pool is neither empty nor initialized")

    amount_b_optimal = mul_div(amount_a_desired, reserve_b, reserve_a)
    if amount_b_optimal <= amount_b_desired:
        if amount_b_optimal < amount_b_min:
            raise InsufficientBAmount(f"amount_b ({amount_b_optimal}) < amount_b_min ({amount_b_min})")
        amount_a_used = amount_a_desired
        amount_b_used = amount_b_optimal
    else:
        amount_a_optimal = mul_div(amount_b_desired, reserve_a, reserve_b)
        # amount_b_optimal > amount_b_desired implies amount_a_optimal <= amount_a_desired.
        if amount_a_optimal > amount_a_desired:
            raise AssertionError("amount_a_optimal exceeds amount_a_desired")
        if amount_a_optimal < amount_a_min:
            raise InsufficientAAmount(f"amount_a ({amount_a_optimal}) < amount_a_min ({amount_a_min})")
        amount_a_used = amount_a_optimal
        amount_b_used = amount_b_desired

    return OptimalLiquidityResult(
        amount_a_used=amount_a_used,
        amount_b_used=amount_b_used,
        amount_a_refund=amount_a_desired - amount_a_used,
        amount_b_refund=amount_b_desired - amount_b_used,
    )


def mint_liquidity_initial(*, amount_a: int, amount_b: int) -> int:
    """
    Claims minted by the first deposit: floor(sqrt(amount_a * amount_b)).

    The geometric mean makes the minted amount independent of the initial price.
    """
    require_uint("amount_a", amount_a)
    require_uint("amount_b", amount_b)
    minted = isqrt(amount_a * amount_b)
    if minted == 0:
        raise InsufficientLiquidityMinted("initial deposit mints zero claims")
    return minted


def mint_liquidity(
    *,
    reserve_a: int,
    reserve_b: int,
    total_supply: int,
    amount_a_desired: int,
    amount_b_desired: int,
    amount_a_min: int = 0,
    amount_b_min: int = 0,
) -> MintLiquidityResult:
    """Mint claims for a deposit into an empty or initialized pool."""
    require_uint("total_supply", total_supply)

    opt = optimal_liquidity(
        reserve_a=reserve_a,
        reserve_b=reserve_b,
        amount_a_desired=amount_a_desired,
        amount_b_desired=amount_b_desired,
        amount_a_min=amount_a_min,
        amount_b_min=amount_b_min,
    )

    if total_supply == 0:
        if reserve_a != 0 or reserve_b != 0:
            raise InsufficientLiquidity("cannot mint initial liquidity when reserves are non-zero")
        minted = mint_liquidity_initial(amount_a=opt.amount_a_used, amount_b=opt.amount_b_used)
    else:
        if reserve_a == 0 or reserve_b == 0:
            raise InsufficientLiquidity("cannot mint into an empty pool when total_supply > 0")
        minted = min_uint(
            mul_div(opt.amount_a_used, total_supply, reserve_a),
            mul_div(opt.amount_b_used, total_supply, reserve_b),
        )
        if minted == 0:
            raise InsufficientLiquidityMinted("deposit too small: mints zero claims")

    return MintLiquidityResult(
        liquidity_minted=minted,
        amount_a_used=opt.amount_a_used,
        amount_b_used=opt.amount_b_used,
        new_reserve_a=reserve_a + opt.amount_a_used,
        new_reserve_b=reserve_b + opt.amount_b_used,
        new_total_supply=total_supply + minted,
    )


def burn_liquidity(
    *,
    claim_amount: int,
    reserve_a: int,
    reserve_b: int,
    total_supply: int,
    amount_a_min: int = 0,
    amount_b_min: int = 0,
) -> BurnLiquidityResult:
    """
    Burn claims for underlying assets (floor rounding).

    A share that floors to zero is paid as zero; the caller's minimums decide
    whether that is acceptable.
    """
    for name, v in (
        ("claim_amount", claim_amount),
        ("reserve_a", reserve_a),
        ("reserve_b", reserve_b),
        ("total_supply", total_supply),
        ("amount_a_min", amount_a_min),
        ("amount_b_min", amount_b_min),
    ):
        require_uint(name, v)

    if claim_amount == 0:
        raise InsufficientLiquidityBurned("claim_amount must be positive")
    if total_supply == 0:
        raise InsufficientLiquidity("total_supply is zero")
    if claim_amount > total_supply:
        raise InsufficientBalance(f"cannot burn more than total_supply: {claim_amount} > {total_supply}")

    amount_a_out = mul_div(claim_amount, reserve_a, total_supply)
    amount_b_out = mul_div(claim_amount, reserve_b, total_supply)

    if amount_a_out < amount_a_min:
        raise InsufficientAAmount(f"amount_a ({amount_a_out}) < amount_a_min ({amount_a_min})")
    if amount_b_out < amount_b_min:
        raise InsufficientBAmount(f"amount_b ({amount_b_out}) < amount_b_min ({amount_b_min})")

    return BurnLiquidityResult(amount_a_out=amount_a_out, amount_b_out=amount_b_out)
