"""
Claim-token balance tracking.

Claims are the pool's fungible receipt for deposited liquidity; they are tracked
separately from the reserves (see `ledger.py`), which own the total supply.
"""

from __future__ import annotations

from typing import Dict

from ..errors import InsufficientBalance
from .types import Address, Amount


class ClaimTable:
    """
    Deterministic claim balance table mapping holder -> amount.

    Notes:
    - Balances are always non-negative.
    - Zero balances are omitted to keep the table sparse.
    - Do not rely on dict iteration order; sort at serialization boundaries.
    """

    def __init__(self) -> None:
        self._balances: Dict[Address, Amount] = {}

    def get(self, holder: Address) -> Amount:
        """Get claim balance for holder. Returns 0 if not found."""
        return self._balances.get(holder, 0)

    def set(self, holder: Address, amount: Amount) -> None:
        """Set claim balance for holder."""
        if amount < 0:
            raise ValueError(f"Claim balance cannot be negative: {amount}")
        if amount == 0:
            self._balances.pop(holder, None)
        else:
            self._balances[holder] = amount

    def mint(self, holder: Address, amount: Amount) -> None:
        if amount < 0:
            raise ValueError(f"Mint amount must be non-negative: {amount}")
        self.set(holder, self.get(holder) + amount)

    def burn(self, holder: Address, amount: Amount) -> None:
        """Remove `amount` claims from holder, failing if the holder has fewer."""
        if amount < 0:
            raise ValueError(f"Burn amount must be non-negative: {amount}")
        current = self.get(holder)
        if amount > current:
            raise InsufficientBalance(f"Insufficient claim balance: {current} < {amount}")
        self.set(holder, current - amount)

    def transfer(self, sender: Address, recipient: Address, amount: Amount) -> None:
        self.burn(sender, amount)
        self.mint(recipient, amount)

    def total(self) -> Amount:
        return sum(self._balances.values())

    def get_all_balances(self) -> Dict[Address, Amount]:
        """Return all claim balances."""
        return dict(self._balances)

    def load(self, balances: Dict[Address, Amount]) -> None:
        """Replace every balance (used to roll back or restore a snapshot)."""
        self._balances = {}
        for holder, amount in balances.items():
            self.set(holder, amount)

    def verify_non_negative(self) -> bool:
        """Verify all stored balances are non-negative."""
        return all(amount >= 0 for amount in self._balances.values())

    def __len__(self) -> int:
        return len(self._balances)

    def __repr__(self) -> str:
        return f"ClaimTable({len(self._balances)} holders)"
