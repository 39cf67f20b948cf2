"""Collaborator protocols and in-memory implementations."""

from stableswap.collaborators.interfaces import (
    Fund,
    PriceOracle,
    PrimaryMarket,
    QuoteToken,
    SettleRequest,
    ShareLedger,
    SwapCallee,
)
from stableswap.collaborators.memory import (
    Distribution,
    InMemoryFund,
    InMemoryPrimaryMarket,
    InMemoryShareLedger,
    InMemoryToken,
    RebalanceRatios,
    StaticPriceOracle,
)

__all__ = [
    # Protocols
    "Fund",
    "PrimaryMarket",
    "PriceOracle",
    "QuoteToken",
    "ShareLedger",
    "SwapCallee",
    "SettleRequest",
    # In-memory implementations
    "InMemoryFund",
    "InMemoryPrimaryMarket",
    "InMemoryShareLedger",
    "InMemoryToken",
    "RebalanceRatios",
    "Distribution",
    "StaticPriceOracle",
]
