"""
Pool snapshot encoding.

Goals:
- Deterministic JSON serialization for hashing / persisting a pool.
- Round-trippable into a live `Pool` (ledger, claim balances, pair binding).
- Explicit versioning.

Asset collaborators, the clock and the record log are runtime wiring, not
state, and are not part of a snapshot.
"""

from __future__ import annotations

import hashlib
from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional

from ..core.pool import Pool
from ..state.canonical import canonical_json_bytes, domain_sep_bytes, sha256_hex
from ..state.ledger import LedgerState
from ..state.types import require_address


POOL_SNAPSHOT_VERSION = 1


def _require_int(value: Any, *, name: str) -> int:
    if not isinstance(value, int) or isinstance(value, bool):
        raise TypeError(f"{name} must be an int")
    if value < 0:
        raise ValueError(f"{name} must be non-negative")
    return int(value)


def _optional_address(value: Any, *, name: str) -> Optional[str]:
    if value is None:
        return None
    return require_address(value, name=name)


@dataclass(frozen=True)
class PoolSnapshot:
    """
    Deterministic, versioned snapshot of a pool.

    The commitment is *not* included inside `data` to avoid self-reference.
    """

    version: int
    data: Dict[str, Any]

    def canonical_bytes(self) -> bytes:
        return canonical_json_bytes(self.data)

    def commitment_bytes(self) -> bytes:
        payload = domain_sep_bytes("pool_snapshot", version=self.version) + self.canonical_bytes()
        return hashlib.sha256(payload).digest()

    def commitment_hex(self) -> str:
        payload = domain_sep_bytes("pool_snapshot", version=self.version) + self.canonical_bytes()
        return sha256_hex(payload)


def snapshot_from_pool(pool: Pool, *, version: int = POOL_SNAPSHOT_VERSION) -> PoolSnapshot:
    if not isinstance(version, int) or isinstance(version, bool) or version <= 0:
        raise ValueError("version must be a positive int")

    reserve_a, reserve_b, supply = pool.ledger.get()
    claim_entries = [
        {"holder": holder, "amount": int(amount)}
        for holder, amount in pool.claims.get_all_balances().items()
    ]
    claim_entries.sort(key=lambda e: e["holder"])

    data: Dict[str, Any] = {
        "version": int(version),
        "address": pool.address,
        "token_a": pool.token_a,
        "token_b": pool.token_b,
        "reserve_a": int(reserve_a),
        "reserve_b": int(reserve_b),
        "total_supply": int(supply),
        "claims": claim_entries,
    }
    return PoolSnapshot(version=version, data=data)


def restore_pool(snapshot: Mapping[str, Any], pool: Pool, *, max_claims: int = 200_000) -> Pool:
    """
    Load snapshot data into `pool`, replacing its ledger, claims and pair binding.

    A snapshot that names a pool address must name `pool`.

    Runs as a pool transaction, so pool invariants are checked before the load
    completes; on any error the pool is left unchanged.
    """
    if not isinstance(snapshot, Mapping):
        raise TypeError("snapshot must be a mapping")

    version = snapshot.get("version", POOL_SNAPSHOT_VERSION)
    if not isinstance(version, int) or isinstance(version, bool) or version <= 0:
        raise ValueError("snapshot.version must be a positive int")
    if version != POOL_SNAPSHOT_VERSION:
        raise ValueError(f"unsupported snapshot version: {version}")

    address = _optional_address(snapshot.get("address"), name="snapshot.address")
    if address is not None and address != pool.address:
        raise ValueError(f"snapshot.address {address} does not match pool address {pool.address}")

    token_a = _optional_address(snapshot.get("token_a"), name="snapshot.token_a")
    token_b = _optional_address(snapshot.get("token_b"), name="snapshot.token_b")
    if (token_a is None) != (token_b is None):
        raise ValueError("snapshot pair must be fully bound or fully unbound")

    ledger_state = LedgerState(
        reserve_a=_require_int(snapshot.get("reserve_a", 0), name="snapshot.reserve_a"),
        reserve_b=_require_int(snapshot.get("reserve_b", 0), name="snapshot.reserve_b"),
        total_supply=_require_int(snapshot.get("total_supply", 0), name="snapshot.total_supply"),
    )

    entries = snapshot.get("claims")
    if entries is None:
        entries = []
    if not isinstance(entries, list):
        raise TypeError("snapshot.claims must be a list")
    if len(entries) > max_claims:
        raise ValueError(f"too many claim entries: {len(entries)} > {max_claims}")
    claims: Dict[str, int] = {}
    for entry in entries:
        if not isinstance(entry, Mapping):
            raise TypeError("snapshot.claims entries must be objects")
        holder = require_address(entry.get("holder"), name="claim.holder")
        if holder in claims:
            raise ValueError(f"duplicate claim entry: {holder}")
        claims[holder] = _require_int(entry.get("amount"), name="claim.amount")

    with pool.transaction("restore_snapshot"):
        pool.ledger.restore(ledger_state)
        pool.claims.load(claims)
        pool.token_a, pool.token_b = token_a, token_b
    return pool
