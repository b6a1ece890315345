"""
pairswap: a two-token constant-product liquidity pool engine.
"""

from .config import PoolConfig, configure_logging
from .core import (
    Pool,
    add_liquidity,
    get_amount_in,
    get_amount_out,
    get_price,
    get_reserves,
    quote,
    remove_liquidity,
    swap_exact_in,
    swap_exact_out,
)
from .integration import InMemoryAsset

__all__ = [
    "PoolConfig",
    "configure_logging",
    "Pool",
    "add_liquidity",
    "remove_liquidity",
    "swap_exact_in",
    "swap_exact_out",
    "get_amount_in",
    "get_amount_out",
    "get_price",
    "get_reserves",
    "quote",
    "InMemoryAsset",
]
