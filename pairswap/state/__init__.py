"""
State management for pairswap pools
"""

from .claims import ClaimTable
from .ledger import LedgerState, ReserveLedger
from .types import NULL_ADDRESS, Address, Amount, Side

__all__ = [
    "ClaimTable",
    "LedgerState",
    "ReserveLedger",
    "NULL_ADDRESS",
    "Address",
    "Amount",
    "Side",
]
