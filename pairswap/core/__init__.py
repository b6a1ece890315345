"""
Core pool engine
"""

from .invariants import check_all
from .liquidity import (
    add_liquidity,
    claim_balance_of,
    quote,
    remove_liquidity,
    total_claim_supply,
    transfer_claims,
)
from .oracle import get_price, get_reserves
from .pool import Pool
from .records import AddLiquidity, ClaimTransfer, Event, RemoveLiquidity, Swap
from .swap import get_amount_in, get_amount_out, swap_exact_in, swap_exact_out

__all__ = [
    "check_all",
    "add_liquidity",
    "remove_liquidity",
    "claim_balance_of",
    "total_claim_supply",
    "transfer_claims",
    "quote",
    "get_price",
    "get_reserves",
    "Pool",
    "AddLiquidity",
    "RemoveLiquidity",
    "Swap",
    "ClaimTransfer",
    "Event",
    "get_amount_in",
    "get_amount_out",
    "swap_exact_in",
    "swap_exact_out",
]
