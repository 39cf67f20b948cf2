"""Two-asset StableSwap math.

The invariant for n=2 (n^n = 4):

    4A * (x + y) + D = 4A * D + D^3 / (4 * x * y)

where x is the base balance valued at the oracle price and y is the quote
balance normalized to 18 decimals. D and the balance given D are both found
by Newton-Raphson iteration starting from an upper bound, stopping once two
successive estimates differ by at most one unit.

All functions are pure integer math. Token-unit wrappers (get_d, get_base,
get_quote, get_price_over_oracle) take native balances, the oracle price of
the base asset and the quote decimal multiplier, and convert at the boundary.
"""

from collections.abc import Sequence

from stableswap.constants import MAX_ITERATION, UNIT
from stableswap.errors import BalanceDidNotConverge, InvariantDidNotConverge, ZeroBalance
from stableswap.safe_int import S

BASE_INDEX = 0
QUOTE_INDEX = 1


def compute_d(balances: Sequence[int], ampl: int) -> int:
    """Calculate the StableSwap invariant D using Newton-Raphson iteration.

    Algorithm:
        1. Initial guess: D = x0 + x1
        2. d3 = D^3 / (4 * x0 * x1)
        3. D = (4A * S + 2 * d3) * D / ((4A - 1) * D + 3 * d3)
        4. Stop when |D_new - D_old| <= 1, at most MAX_ITERATION rounds

    Args:
        balances: The two balances in value terms (18 decimals)
        ampl: Amplification coefficient (unscaled)

    Returns:
        The invariant D, or 0 for an empty pool

    Raises:
        ZeroBalance: If exactly one balance is zero
        InvariantDidNotConverge: If iteration doesn't converge
    """
    if len(balances) != 2:
        raise ValueError(f"Expected 2 balances, got {len(balances)}")
    x0, x1 = balances
    total = S(x0) + x1
    if total == 0:
        return 0
    for i, bal in enumerate(balances):
        if bal <= 0:
            raise ZeroBalance(f"Balance at index {i} must be positive")

    ann = S(ampl) * 4
    d = total
    for _ in range(MAX_ITERATION):
        prev_d = d
        d3 = d * d // x0 * d // x1 // 4
        d = (ann * total + d3 * 2) * d // ((ann - 1) * d + d3 * 3)
        if d.abs_diff(prev_d) <= 1:
            return d.value

    raise InvariantDidNotConverge(f"Invariant did not converge after {MAX_ITERATION} iterations")


def compute_y(known_index: int, known_balance: int, d: int, ampl: int) -> int:
    """Solve for the other balance given D and one balance.

    The curve is symmetric in x and y, so the same iteration serves both
    directions:

        y = (y^2 + c) / (2y + b - D)
        c = D^3 / (16A * x)
        b = x + D / 4A

    Args:
        known_index: Index of the known balance (BASE_INDEX or QUOTE_INDEX)
        known_balance: The known balance in value terms
        d: The invariant to preserve
        ampl: Amplification coefficient (unscaled)

    Returns:
        The other balance in value terms, rounded down

    Raises:
        IndexError: If known_index is not 0 or 1
        ZeroBalance: If the known balance is zero
        BalanceDidNotConverge: If iteration doesn't converge
    """
    if known_index not in (BASE_INDEX, QUOTE_INDEX):
        raise IndexError(f"known_index {known_index} out of range for 2 tokens")
    if known_balance <= 0:
        raise ZeroBalance(f"Balance at index {known_index} must be positive")

    sd = S(d)
    ann = S(ampl) * 4
    c = sd * sd // known_balance * sd // (ann * 4)
    b = sd // ann + known_balance

    y = sd
    for _ in range(MAX_ITERATION):
        prev_y = y
        # 2y + b - D must stay positive for the update to be defined
        partial = y * 2 + b
        if partial <= sd:
            raise BalanceDidNotConverge("Denominator became non-positive")
        y = (y * y + c) // (partial - sd)
        if y.abs_diff(prev_y) <= 1:
            return y.value

    raise BalanceDidNotConverge(f"Balance did not converge after {MAX_ITERATION} iterations")


def base_value(base: int, oracle_price: int) -> int:
    """Value of a base amount in quote terms (18 decimals)."""
    return (S(base) * oracle_price // UNIT).value


def get_d(base: int, quote: int, ampl: int, oracle_price: int, quote_multiplier: int = 1) -> int:
    """Invariant of native token balances."""
    return compute_d([base_value(base, oracle_price), quote * quote_multiplier], ampl)


def get_base(ampl: int, quote: int, oracle_price: int, d: int, quote_multiplier: int = 1) -> int:
    """Base balance (native units, rounded down) that keeps D given the quote balance."""
    value = compute_y(QUOTE_INDEX, quote * quote_multiplier, d, ampl)
    return (S(value) * UNIT // oracle_price).value


def get_quote(ampl: int, base: int, oracle_price: int, d: int, quote_multiplier: int = 1) -> int:
    """Quote balance (native units, rounded down) that keeps D given the base balance."""
    value = compute_y(BASE_INDEX, base_value(base, oracle_price), d, ampl)
    return value // quote_multiplier


def get_price_over_oracle(
    base: int,
    quote: int,
    ampl: int,
    oracle_price: int,
    d: int,
    quote_multiplier: int = 1,
) -> int:
    """Marginal price of base over the oracle price, 18 decimals.

    With F(x, y) the invariant equation, the price is -dy/dx = F_x / F_y:

        p = y * (2x + y - c) / (x * (2y + x - c)),  c = D - D / 4A

    Returns UNIT when either side is empty.
    """
    x = base_value(base, oracle_price)
    y = quote * quote_multiplier
    if x == 0 or y == 0:
        return UNIT
    c = S(d) - S(d) // (S(ampl) * 4)
    numerator = S(y) * (S(x) * 2 + y - c)
    denominator = S(x) * (S(y) * 2 + x - c)
    return (numerator * UNIT // denominator).value
