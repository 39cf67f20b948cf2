"""Pydantic models for pool events and API views."""

from stableswap.models.events import (
    AdminFeeRateUpdated,
    AmplRampUpdated,
    FeeCollected,
    FeeCollectorUpdated,
    FeeRateUpdated,
    LiquidityAdded,
    LiquidityRemoved,
    Paused,
    PoolEvent,
    Rebalanced,
    Swap,
    Sync,
    Unpaused,
)
from stableswap.models.types import Address, Amount, Uint256

__all__ = [
    # Types
    "Address",
    "Amount",
    "Uint256",
    # Events
    "PoolEvent",
    "Swap",
    "LiquidityAdded",
    "LiquidityRemoved",
    "Sync",
    "Rebalanced",
    "AmplRampUpdated",
    "FeeCollected",
    "FeeRateUpdated",
    "AdminFeeRateUpdated",
    "FeeCollectorUpdated",
    "Paused",
    "Unpaused",
]
