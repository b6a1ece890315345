#!/usr/bin/env python3

from __future__ import annotations

import argparse
import json
import sys
import time
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from pairswap import (
    InMemoryAsset,
    Pool,
    PoolConfig,
    add_liquidity,
    configure_logging,
    get_price,
    remove_liquidity,
    swap_exact_in,
)
from pairswap.core import claim_balance_of
from pairswap.errors import PoolError
from pairswap.integration.snapshot import snapshot_from_pool


POOL = "0x" + "99" * 20
USER = "0x" + "aa" * 20
TOKEN_A = "0x" + "11" * 20
TOKEN_B = "0x" + "22" * 20


def _now() -> int:
    return int(time.time())


def _parse_args(argv: list[str] | None) -> argparse.Namespace:
    ap = argparse.ArgumentParser(description="Run an offline add/swap/remove cycle against an in-memory pool.")
    ap.add_argument("--config", type=Path, default=None, help="YAML config file (defaults to PAIRSWAP_* env vars)")
    ap.add_argument("--amount-a", type=int, default=1_000, help="initial token A deposit")
    ap.add_argument("--amount-b", type=int, default=2_000, help="initial token B deposit")
    ap.add_argument("--swap-in", type=int, default=100, help="token A sold in the swap")
    ap.add_argument("--json", action="store_true", help="print the final snapshot as JSON")
    return ap.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    args = _parse_args(argv)
    config = PoolConfig.from_yaml(args.config) if args.config else PoolConfig.from_env()
    configure_logging(config)

    asset_a = InMemoryAsset(TOKEN_A, symbol="A")
    asset_b = InMemoryAsset(TOKEN_B, symbol="B")
    for asset in (asset_a, asset_b):
        asset.mint(USER, 1_000_000)
        asset.approve(USER, POOL, 1_000_000)
    pool = Pool(
        address=POOL,
        assets={TOKEN_A: asset_a.handle(POOL), TOKEN_B: asset_b.handle(POOL)},
        config=config,
        clock=_now,
    )
    deadline = _now() + 3600

    try:
        amount_a, amount_b, minted = add_liquidity(
            pool,
            caller=USER,
            token_a=TOKEN_A,
            token_b=TOKEN_B,
            amount_a_desired=args.amount_a,
            amount_b_desired=args.amount_b,
            amount_a_min=0,
            amount_b_min=0,
            recipient=USER,
            deadline=deadline,
        )
        print(f"[pool-demo] deposited a={amount_a} b={amount_b} minted={minted}")
        print(f"[pool-demo] price A in B (scaled): {get_price(pool, TOKEN_A, TOKEN_B)}")

        amount_out = swap_exact_in(
            pool,
            caller=USER,
            amount_in=args.swap_in,
            amount_out_min=1,
            token_in=TOKEN_A,
            token_out=TOKEN_B,
            recipient=USER,
            deadline=deadline,
        )
        reserve_a, reserve_b, _ = pool.ledger.get()
        print(f"[pool-demo] swapped {args.swap_in} A -> {amount_out} B; reserves now a={reserve_a} b={reserve_b}")

        out_a, out_b = remove_liquidity(
            pool,
            caller=USER,
            token_a=TOKEN_A,
            token_b=TOKEN_B,
            claim_amount=claim_balance_of(pool, USER),
            amount_a_min=0,
            amount_b_min=0,
            recipient=USER,
            deadline=deadline,
        )
        print(f"[pool-demo] withdrew a={out_a} b={out_b}")
    except PoolError as exc:
        print(f"[pool-demo] FAIL ({exc.code}): {exc}")
        return 1

    snap = snapshot_from_pool(pool)
    print(f"[pool-demo] snapshot commitment={snap.commitment_hex()}")
    if args.json:
        print(json.dumps(snap.data, indent=2, sort_keys=True))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
