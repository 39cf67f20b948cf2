"""Pool error classes.

Every error carries a stable ``code`` (the identifier callers match on) and a
``kind`` that tells the caller whether retrying with different parameters can
help (validation, capacity) or whether the pool itself is inconsistent
(consistency, numerical).
"""

from enum import Enum
from typing import ClassVar


class ErrorKind(str, Enum):
    """Coarse classification of pool errors."""

    VALIDATION = "validation"
    CAPACITY = "capacity"
    CONSISTENCY = "consistency"
    NUMERICAL = "numerical"


class StableSwapError(Exception):
    """Base error for pool operations."""

    code: ClassVar[str] = "StableSwapError"
    kind: ClassVar[ErrorKind] = ErrorKind.CONSISTENCY
    default_message: ClassVar[str] = "Stable swap error"

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message or self.default_message)

    @property
    def message(self) -> str:
        return str(self.args[0])


# =============================================================================
# Validation
# =============================================================================


class ZeroOutput(StableSwapError):
    """Requested output amount is zero."""

    code = "ZeroOutput"
    kind = ErrorKind.VALIDATION
    default_message = "Zero output"


class InvalidA(StableSwapError):
    """Amplification coefficient outside (0, AMPL_MAX_VALUE)."""

    code = "InvalidA"
    kind = ErrorKind.VALIDATION
    default_message = "Invalid A"


class RampTooShort(StableSwapError):
    """Ramp ends less than AMPL_RAMP_MIN_TIME from now."""

    code = "RampTooShort"
    kind = ErrorKind.VALIDATION
    default_message = "A ramp time too short"


class RampChangeTooLarge(StableSwapError):
    """Ramp target differs from the current value by more than AMPL_RAMP_MAX_CHANGE times."""

    code = "RampChangeTooLarge"
    kind = ErrorKind.VALIDATION
    default_message = "A ramp change too large"


class NoLiquidityAdded(StableSwapError):
    """Deposit does not increase the invariant."""

    code = "NoLiquidityAdded"
    kind = ErrorKind.VALIDATION
    default_message = "No liquidity is added"


class InvalidFeeRate(StableSwapError):
    """Fee rate above its governance bound."""

    code = "InvalidFeeRate"
    kind = ErrorKind.VALIDATION
    default_message = "Exceed max fee rate"


class PoolPaused(StableSwapError):
    """Operation is disabled while the pool is paused."""

    code = "PoolPaused"
    kind = ErrorKind.VALIDATION
    default_message = "Pausable: paused"


class Unauthorized(StableSwapError):
    """Caller is not the pool owner."""

    code = "Unauthorized"
    kind = ErrorKind.VALIDATION
    default_message = "Only owner"


# =============================================================================
# Capacity
# =============================================================================


class InsufficientLiquidity(StableSwapError):
    """Requested output exceeds the pooled balance."""

    code = "InsufficientLiquidity"
    kind = ErrorKind.CAPACITY
    default_message = "Insufficient liquidity"


class InsufficientOutput(StableSwapError):
    """Withdrawal output below the caller's minimum."""

    code = "InsufficientOutput"
    kind = ErrorKind.CAPACITY
    default_message = "Insufficient output"


class ExcessiveInput(StableSwapError):
    """Swap input above the caller's maximum."""

    code = "ExcessiveInput"
    kind = ErrorKind.CAPACITY
    default_message = "Excessive input"


class InsufficientBalance(StableSwapError):
    """Account balance too low for a transfer or burn."""

    code = "InsufficientBalance"
    kind = ErrorKind.CAPACITY
    default_message = "Transfer amount exceeds balance"


# =============================================================================
# Consistency
# =============================================================================


class InvariantMismatch(StableSwapError):
    """Settlement would lower the invariant."""

    code = "InvariantMismatch"
    default_message = "Invariant mismatch"


class WrongVersion(StableSwapError):
    """Caller's rebalance version is stale."""

    code = "WrongVersion"
    default_message = "Obsolete rebalance version"


class ReentrantCall(StableSwapError):
    """Pool entered again from a settlement callback."""

    code = "ReentrantCall"
    default_message = "ReentrancyGuard: reentrant call"


class InvalidOraclePrice(StableSwapError):
    """Oracle reported a non-positive price."""

    code = "InvalidOraclePrice"
    default_message = "Invalid oracle price"


class TradingCurb(StableSwapError):
    """Fund NAV of R is below the pool's trading curb threshold."""

    code = "TradingCurb"
    default_message = "Trading curb"


# =============================================================================
# Numerical
# =============================================================================


class DidNotConverge(StableSwapError):
    """Newton-Raphson iteration hit its cap."""

    code = "DidNotConverge"
    kind = ErrorKind.NUMERICAL
    default_message = "Newton-Raphson did not converge"


class InvariantDidNotConverge(DidNotConverge):
    """Newton-Raphson iteration for the invariant D did not converge."""

    default_message = "Invariant D did not converge"


class BalanceDidNotConverge(DidNotConverge):
    """Newton-Raphson iteration for a balance given D did not converge."""

    default_message = "Balance did not converge"


class ZeroBalance(StableSwapError):
    """Invariant requested with exactly one empty side."""

    code = "ZeroBalance"
    kind = ErrorKind.NUMERICAL
    default_message = "Balance must be positive"
