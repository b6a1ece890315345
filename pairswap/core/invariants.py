"""Invariant checkers for a pool.

Each function returns True when the invariant holds, and `check_all()` returns
the list of violated invariant ids (empty = all pass). The pool runs
`check_all()` before committing every mutating operation.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Callable

if TYPE_CHECKING:
    from .pool import Pool


def inv_empty_iff_all_zero(p: "Pool") -> bool:
    reserve_a, reserve_b, supply = p.ledger.get()
    return (reserve_a == 0) == (reserve_b == 0) == (supply == 0)


def inv_claims_sum_to_supply(p: "Pool") -> bool:
    return p.claims.total() == p.ledger.state.total_supply


def inv_claims_non_negative(p: "Pool") -> bool:
    return p.claims.verify_non_negative()


def inv_holder_within_supply(p: "Pool") -> bool:
    supply = p.ledger.state.total_supply
    return all(amount <= supply for amount in p.claims.get_all_balances().values())


def inv_reserves_within_bounds(p: "Pool") -> bool:
    reserve_a, reserve_b, supply = p.ledger.get()
    return (
        0 <= reserve_a <= p.ledger.max_reserve
        and 0 <= reserve_b <= p.ledger.max_reserve
        and 0 <= supply <= p.ledger.max_supply
    )


def inv_liquidity_requires_bound_pair(p: "Pool") -> bool:
    if p.ledger.state.is_empty():
        return True
    return p.is_bound()


def inv_bound_pair_distinct(p: "Pool") -> bool:
    if not p.is_bound():
        return p.token_a is None and p.token_b is None
    return p.token_a != p.token_b


INVARIANT_REGISTRY: dict[str, Callable[["Pool"], bool]] = {
    "inv_empty_iff_all_zero": inv_empty_iff_all_zero,
    "inv_claims_sum_to_supply": inv_claims_sum_to_supply,
    "inv_claims_non_negative": inv_claims_non_negative,
    "inv_holder_within_supply": inv_holder_within_supply,
    "inv_reserves_within_bounds": inv_reserves_within_bounds,
    "inv_liquidity_requires_bound_pair": inv_liquidity_requires_bound_pair,
    "inv_bound_pair_distinct": inv_bound_pair_distinct,
}


def check_all(p: "Pool") -> list[str]:
    """Return the ids of every violated invariant."""
    return [name for name, fn in INVARIANT_REGISTRY.items() if not fn(p)]
