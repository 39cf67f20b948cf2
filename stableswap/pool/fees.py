"""Fee and decimal scaling helpers.

All fees are charged in the quote token. Rates are Bfp values in [0, 1).
"""

from stableswap.math.fixed_point import Bfp
from stableswap.safe_int import S


def quote_multiplier(decimals: int) -> int:
    """Factor that normalizes a token amount to 18 decimals.

    Raises:
        ValueError: If decimals is outside [0, 18]
    """
    if not 0 <= decimals <= 18:
        raise ValueError(f"Token decimals must be in [0, 18], got {decimals}")
    return 10 ** (18 - decimals)


def fee_on_input(amount: int, fee_rate: Bfp) -> int:
    """Fee charged on a gross input, rounded down."""
    return Bfp.from_wei(amount).mul_down(fee_rate).value


def subtract_fee(amount: int, fee_rate: Bfp) -> int:
    """Net amount after fee: amount * (1 - fee), rounded down."""
    return Bfp.from_wei(amount).mul_down(fee_rate.complement()).value


def add_fee(amount: int, fee_rate: Bfp) -> int:
    """Gross amount that nets ``amount`` after fee: amount / (1 - fee), rounded up."""
    return Bfp.from_wei(amount).div_up(fee_rate.complement()).value


def fee_on_output(amount: int, fee_rate: Bfp) -> int:
    """Fee on top of a net output: amount * fee / (1 - fee), rounded down."""
    return (S(amount) * fee_rate.value // fee_rate.complement().value).value


def admin_fee(fee: int, admin_fee_rate: Bfp) -> int:
    """Part of a fee reserved for the fee collector, rounded down."""
    return Bfp.from_wei(fee).mul_down(admin_fee_rate).value
