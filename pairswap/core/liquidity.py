"""
Liquidity operations: add/remove liquidity and the claim-token surface.

Both operations accept the pair in either order; amounts and records are
reported in the caller's order. Ledger and claim balances are committed before
any outbound transfer, and the whole call is one transaction on the pool.
"""

from __future__ import annotations

from typing import Tuple

from ..errors import IdenticalAssets, InsufficientAAmount, InsufficientBAmount
from ..kernels.python.fixed_point import require_uint
from ..kernels.python.lp_math import burn_liquidity, mint_liquidity
from ..kernels.python.lp_math import quote as _kernel_quote
from ..state.types import Address, Amount, Side, require_address
from .pool import Pool
from .records import AddLiquidity, ClaimTransfer, RemoveLiquidity


def _pair_args(token_a: Address, token_b: Address) -> Tuple[Address, Address]:
    token_a = require_address(token_a, name="token_a")
    token_b = require_address(token_b, name="token_b")
    if token_a == token_b:
        raise IdenticalAssets(f"token_a == token_b: {token_a}")
    return token_a, token_b


def _ordered(side: Side, first: int, second: int) -> Tuple[int, int]:
    """Map a caller-ordered pair of values onto the pool's (A, B) order, or back."""
    return (first, second) if side is Side.A else (second, first)


def _caller_slippage_error(side: Side, exc: Exception) -> Exception:
    """Relabel a pool-ordered slippage failure for a caller who passed the pair reversed."""
    if side is Side.A:
        return exc
    if isinstance(exc, InsufficientAAmount):
        return InsufficientBAmount(f"token_b slippage guard tripped: {exc}")
    return InsufficientAAmount(f"token_a slippage guard tripped: {exc}")


def quote(amount_a: Amount, reserve_a: Amount, reserve_b: Amount) -> Amount:
    """
    Equivalent amount of B for `amount_a` of A at the given reserves.

    Raises:
        InsufficientAmount: If amount_a is zero
        InsufficientLiquidity: If either reserve is zero
    """
    return _kernel_quote(amount_a=amount_a, reserve_a=reserve_a, reserve_b=reserve_b)


def add_liquidity(
    pool: Pool,
    *,
    caller: Address,
    token_a: Address,
    token_b: Address,
    amount_a_desired: Amount,
    amount_b_desired: Amount,
    amount_a_min: Amount,
    amount_b_min: Amount,
    recipient: Address,
    deadline: int,
) -> Tuple[Amount, Amount, Amount]:
    """
    Deposit both assets and mint claims to `recipient`.

    First deposit (empty pool): binds the pair if unbound, uses the desired
    amounts as-is and mints floor(sqrt(amount_a * amount_b)).

    Later deposits: trimmed to the current reserve ratio
        amount_b_optimal = amount_a_desired * reserve_b // reserve_a
    (or the symmetric amount_a_optimal when that exceeds amount_b_desired), and
    mint min(amount_a * supply // reserve_a, amount_b * supply // reserve_b).

    Args:
        pool: Pool to deposit into
        caller: Account the assets are pulled from (must have approved the pool)
        token_a: First asset, in caller order
        token_b: Second asset, in caller order
        amount_a_desired: Upper bound on token_a deposited
        amount_b_desired: Upper bound on token_b deposited
        amount_a_min: Slippage guard for token_a
        amount_b_min: Slippage guard for token_b
        recipient: Receives the minted claims
        deadline: Unix time after which the call is rejected

    Returns:
        Tuple of (amount_a, amount_b, minted_claims) in caller order

    Raises:
        Expired, IdenticalAssets, ZeroRecipient, InvalidAssetPair,
        InsufficientAAmount, InsufficientBAmount, InsufficientLiquidityMinted,
        TransferFailed, ArithmeticFault
    """
    with pool.transaction("add_liquidity"):
        pool.check_deadline(deadline)
        token_a, token_b = _pair_args(token_a, token_b)
        recipient = pool.check_recipient(recipient)
        caller = require_address(caller, name="caller")

        if not pool.is_bound():
            pool.bind_pair(token_a, token_b)
        side = pool.orientation(token_a, token_b)

        # Slippage guards are caller-ordered; the kernel works in pool order.
        desired_a, desired_b = _ordered(side, amount_a_desired, amount_b_desired)
        min_a, min_b = _ordered(side, amount_a_min, amount_b_min)
        reserve_a, reserve_b, supply = pool.ledger.get()
        try:
            res = mint_liquidity(
                reserve_a=reserve_a,
                reserve_b=reserve_b,
                total_supply=supply,
                amount_a_desired=desired_a,
                amount_b_desired=desired_b,
                amount_a_min=min_a,
                amount_b_min=min_b,
            )
        except (InsufficientAAmount, InsufficientBAmount) as exc:
            raise _caller_slippage_error(side, exc) from None

        pool.ledger.apply_deposit(res.amount_a_used, res.amount_b_used, res.liquidity_minted)
        pool.claims.mint(recipient, res.liquidity_minted)

        pool.pull(pool.token(Side.A), caller, res.amount_a_used)
        pool.pull(pool.token(Side.B), caller, res.amount_b_used)

        amount_a, amount_b = _ordered(side, res.amount_a_used, res.amount_b_used)
        pool.emit(
            AddLiquidity(
                caller=caller,
                token_a=token_a,
                token_b=token_b,
                amount_a=amount_a,
                amount_b=amount_b,
                minted_claims=res.liquidity_minted,
            )
        )
    return amount_a, amount_b, res.liquidity_minted


def remove_liquidity(
    pool: Pool,
    *,
    caller: Address,
    token_a: Address,
    token_b: Address,
    claim_amount: Amount,
    amount_a_min: Amount,
    amount_b_min: Amount,
    recipient: Address,
    deadline: int,
) -> Tuple[Amount, Amount]:
    """
    Burn `claim_amount` of the caller's claims and pay out the proportional share.

    Outputs:
        amount_a = floor(claim_amount * reserve_a / supply)
        amount_b = floor(claim_amount * reserve_b / supply)

    Returns:
        Tuple of (amount_a, amount_b) in caller order

    Raises:
        Expired, IdenticalAssets, ZeroRecipient, InvalidAssetPair,
        InsufficientBalance, InsufficientLiquidityBurned, InsufficientAAmount,
        InsufficientBAmount, TransferFailed, ArithmeticFault
    """
    with pool.transaction("remove_liquidity"):
        pool.check_deadline(deadline)
        token_a, token_b = _pair_args(token_a, token_b)
        recipient = pool.check_recipient(recipient)
        caller = require_address(caller, name="caller")
        side = pool.orientation(token_a, token_b)

        min_a, min_b = _ordered(side, amount_a_min, amount_b_min)
        reserve_a, reserve_b, supply = pool.ledger.get()
        try:
            res = burn_liquidity(
                claim_amount=claim_amount,
                reserve_a=reserve_a,
                reserve_b=reserve_b,
                total_supply=supply,
                amount_a_min=min_a,
                amount_b_min=min_b,
            )
        except (InsufficientAAmount, InsufficientBAmount) as exc:
            raise _caller_slippage_error(side, exc) from None

        # Slippage guards are checked above; the burn itself enforces the caller's
        # balance, and both happen before any asset leaves the pool.
        pool.claims.burn(caller, claim_amount)
        pool.ledger.apply_redeem(res.amount_a_out, res.amount_b_out, claim_amount)

        pool.push(pool.token(Side.A), recipient, res.amount_a_out)
        pool.push(pool.token(Side.B), recipient, res.amount_b_out)

        amount_a, amount_b = _ordered(side, res.amount_a_out, res.amount_b_out)
        pool.emit(
            RemoveLiquidity(
                caller=caller,
                token_a=token_a,
                token_b=token_b,
                amount_a=amount_a,
                amount_b=amount_b,
                burned_claims=claim_amount,
            )
        )
    return amount_a, amount_b


def claim_balance_of(pool: Pool, holder: Address) -> Amount:
    return pool.claims.get(require_address(holder, name="holder"))


def total_claim_supply(pool: Pool) -> Amount:
    return pool.ledger.state.total_supply


def transfer_claims(pool: Pool, *, sender: Address, recipient: Address, amount: Amount) -> None:
    """Move claims between holders; reserves and supply are untouched."""
    with pool.transaction("transfer_claims"):
        sender = require_address(sender, name="sender")
        recipient = pool.check_recipient(recipient)
        require_uint("amount", amount)
        pool.claims.transfer(sender, recipient, amount)
        pool.emit(ClaimTransfer(sender=sender, recipient=recipient, amount=amount))
