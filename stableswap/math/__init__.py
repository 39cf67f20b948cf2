"""Fixed-point and StableSwap math."""

from stableswap.math.fixed_point import Bfp, multiply_decimal
from stableswap.math.stable_math import (
    BASE_INDEX,
    QUOTE_INDEX,
    compute_d,
    compute_y,
    get_base,
    get_d,
    get_price_over_oracle,
    get_quote,
)

__all__ = [
    "Bfp",
    "multiply_decimal",
    "BASE_INDEX",
    "QUOTE_INDEX",
    "compute_d",
    "compute_y",
    "get_d",
    "get_base",
    "get_quote",
    "get_price_over_oracle",
]
