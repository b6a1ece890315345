"""
Reserve ledger for a single pool.

Holds the two reserves and the total claim supply. Every update computes and
validates all new values before assigning any of them, so a rejected update
leaves the ledger exactly as it was.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple

from ..errors import ArithmeticFault
from ..kernels.python.fixed_point import require_uint
from .types import MAX_UINT112, MAX_UINT256, Amount, Side


@dataclass(frozen=True)
class LedgerState:
    """
    Immutable view of the ledger.

    Attributes:
        reserve_a: Reserve of the first bound asset
        reserve_b: Reserve of the second bound asset
        total_supply: Outstanding claim tokens
    """
    reserve_a: Amount = 0
    reserve_b: Amount = 0
    total_supply: Amount = 0

    def __post_init__(self) -> None:
        for name in ("reserve_a", "reserve_b", "total_supply"):
            require_uint(name, getattr(self, name))

    def reserve(self, side: Side) -> Amount:
        return self.reserve_a if side is Side.A else self.reserve_b

    def get_constant_product(self) -> int:
        """k = reserve_a * reserve_b."""
        return self.reserve_a * self.reserve_b

    def is_empty(self) -> bool:
        return self.reserve_a == 0 and self.reserve_b == 0 and self.total_supply == 0


class ReserveLedger:
    """Mutable holder of one pool's `LedgerState`."""

    def __init__(self, *, max_reserve: Amount = MAX_UINT112, max_supply: Amount = MAX_UINT256) -> None:
        if max_reserve <= 0 or max_supply <= 0:
            raise ValueError("ledger bounds must be positive")
        self.max_reserve = max_reserve
        self.max_supply = max_supply
        self._state = LedgerState()

    @property
    def state(self) -> LedgerState:
        return self._state

    def get(self) -> Tuple[Amount, Amount, Amount]:
        """Return (reserve_a, reserve_b, total_supply)."""
        s = self._state
        return s.reserve_a, s.reserve_b, s.total_supply

    def apply_deposit(self, d_a: Amount, d_b: Amount, minted: Amount) -> LedgerState:
        for name, v in (("d_a", d_a), ("d_b", d_b), ("minted", minted)):
            require_uint(name, v)
        s = self._state
        return self._commit(
            reserve_a=s.reserve_a + d_a,
            reserve_b=s.reserve_b + d_b,
            total_supply=s.total_supply + minted,
        )

    def apply_redeem(self, d_a: Amount, d_b: Amount, burned: Amount) -> LedgerState:
        for name, v in (("d_a", d_a), ("d_b", d_b), ("burned", burned)):
            require_uint(name, v)
        s = self._state
        return self._commit(
            reserve_a=s.reserve_a - d_a,
            reserve_b=s.reserve_b - d_b,
            total_supply=s.total_supply - burned,
        )

    def apply_swap_in(self, side_in: Side, amount_in: Amount, amount_out: Amount) -> LedgerState:
        """Credit `amount_in` to the `side_in` reserve and debit `amount_out` from the other."""
        require_uint("amount_in", amount_in)
        require_uint("amount_out", amount_out)
        s = self._state
        if side_in is Side.A:
            reserve_a, reserve_b = s.reserve_a + amount_in, s.reserve_b - amount_out
        else:
            reserve_a, reserve_b = s.reserve_a - amount_out, s.reserve_b + amount_in
        return self._commit(reserve_a=reserve_a, reserve_b=reserve_b, total_supply=s.total_supply)

    def snapshot(self) -> LedgerState:
        return self._state

    def restore(self, state: LedgerState) -> None:
        self._check_bounds(state.reserve_a, state.reserve_b, state.total_supply)
        self._state = state

    def _check_bounds(self, reserve_a: int, reserve_b: int, total_supply: int) -> None:
        if reserve_a < 0 or reserve_b < 0:
            raise ArithmeticFault(f"reserve underflow: ({reserve_a}, {reserve_b})")
        if total_supply < 0:
            raise ArithmeticFault(f"claim supply underflow: {total_supply}")
        if reserve_a > self.max_reserve or reserve_b > self.max_reserve:
            raise ArithmeticFault(f"reserve overflow: ({reserve_a}, {reserve_b}) > {self.max_reserve}")
        if total_supply > self.max_supply:
            raise ArithmeticFault(f"claim supply overflow: {total_supply}")

    def _commit(self, *, reserve_a: int, reserve_b: int, total_supply: int) -> LedgerState:
        self._check_bounds(reserve_a, reserve_b, total_supply)
        self._state = LedgerState(reserve_a=reserve_a, reserve_b=reserve_b, total_supply=total_supply)
        return self._state

    def __repr__(self) -> str:
        s = self._state
        return f"ReserveLedger(reserves=({s.reserve_a}, {s.reserve_b}), total_supply={s.total_supply})"
