"""Rebalance-aware two-asset StableSwap pool."""

from stableswap.chain import Chain
from stableswap.config import PoolConfig
from stableswap.errors import ErrorKind, StableSwapError
from stableswap.local import LocalDeployment, deploy_local
from stableswap.pool import StableSwapPool, SwapQuote

__version__ = "0.1.0"

__all__ = [
    "Chain",
    "PoolConfig",
    "StableSwapPool",
    "SwapQuote",
    "StableSwapError",
    "ErrorKind",
    "LocalDeployment",
    "deploy_local",
]
