"""Exception types for the pool accounting engine.

Every failure aborts the whole operation: the pool's transaction boundary
restores the pre-call state before the exception reaches the caller. Each class
carries a stable ``code`` used in log events and rejection reasons.
"""

from __future__ import annotations

from typing import Sequence


class PoolError(ValueError):
    """Base class for all pool rejections."""

    code = "pool_error"


class Expired(PoolError):
    code = "expired"


class IdenticalAssets(PoolError):
    code = "identical_assets"


class ZeroRecipient(PoolError):
    code = "zero_recipient"


class InvalidAssetPair(PoolError):
    code = "invalid_asset_pair"


class InsufficientAAmount(PoolError):
    code = "insufficient_a_amount"


class InsufficientBAmount(PoolError):
    code = "insufficient_b_amount"


class InsufficientOutputAmount(PoolError):
    code = "insufficient_output_amount"


class ExcessiveInputAmount(PoolError):
    code = "excessive_input_amount"


class InsufficientAmount(PoolError):
    code = "insufficient_amount"


class InsufficientLiquidityMinted(PoolError):
    code = "insufficient_liquidity_minted"


class InsufficientLiquidityBurned(PoolError):
    code = "insufficient_liquidity_burned"


class InsufficientLiquidity(PoolError):
    code = "insufficient_liquidity"


class InsufficientInputAmount(PoolError):
    code = "insufficient_input_amount"


class InsufficientBalance(PoolError):
    code = "insufficient_balance"


class NoLiquidity(PoolError):
    code = "no_liquidity"


class TransferFailed(PoolError):
    code = "transfer_failed"


class ReentrantCall(PoolError):
    code = "reentrant_call"


class ArithmeticFault(PoolError, ArithmeticError):
    """Raised when a value would leave the unsigned domain (underflow or overflow)."""

    code = "arithmetic_fault"


class InvariantViolation(PoolError):
    """Raised when a post-state violates one or more pool invariants."""

    code = "invariant_violation"

    def __init__(self, violations: Sequence[str]) -> None:
        self.violations = list(violations)
        super().__init__(f"invariant violations: {', '.join(self.violations)}")
