"""
Spot price and reserve reads.

Read-only: nothing here mutates the pool, so these may be called while a
mutating operation is in flight (the ledger is committed before any outbound
transfer).
"""

from __future__ import annotations

from typing import Optional, Tuple

from ..errors import NoLiquidity
from ..state.types import Address, Amount, require_address
from .pool import Pool


def get_reserves(pool: Pool, token_a: Address, token_b: Address) -> Tuple[Amount, Amount]:
    """Reserves ordered to match the arguments; `InvalidAssetPair` if they do not name the bound pair."""
    side = pool.orientation(require_address(token_a, name="token_a"), require_address(token_b, name="token_b"))
    return pool.reserves_for(side)


def get_price(pool: Pool, token_a: Address, token_b: Address, *, scale: Optional[int] = None) -> int:
    """
    Price of one unit of `token_a` in units of `token_b`, fixed-point scaled:
        price = reserve_b * scale // reserve_a

    `scale` defaults to `pool.config.price_scale` (10**18).

    Raises:
        InvalidAssetPair: If the pair does not match the bound pair
        NoLiquidity: If reserve_a is zero
    """
    reserve_a, reserve_b = get_reserves(pool, token_a, token_b)
    if scale is None:
        scale = pool.config.price_scale
    if not isinstance(scale, int) or isinstance(scale, bool) or scale <= 0:
        raise ValueError(f"scale must be a positive int: {scale!r}")
    if reserve_a == 0:
        raise NoLiquidity("reserve of token_a is zero")
    return (reserve_b * scale) // reserve_a
