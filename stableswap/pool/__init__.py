"""Pool components and the StableSwapPool facade."""

from stableswap.pool.accumulator import PriceOracleAccumulator
from stableswap.pool.ampl import AmplificationRamp
from stableswap.pool.liquidity import LiquidityAccountant
from stableswap.pool.rebalance import RebalanceResult, RebalanceSync
from stableswap.pool.stable_swap import StableSwapPool
from stableswap.pool.state import AccessControl, PoolState
from stableswap.pool.swap import SwapEngine, SwapQuote

__all__ = [
    "StableSwapPool",
    "AmplificationRamp",
    "PriceOracleAccumulator",
    "SwapEngine",
    "SwapQuote",
    "LiquidityAccountant",
    "RebalanceSync",
    "RebalanceResult",
    "AccessControl",
    "PoolState",
]
