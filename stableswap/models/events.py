"""Events emitted by the pool.

Each settled state change appends one of these records to the execution
context's event log. Records are immutable; a rolled-back call leaves no
record behind.
"""

from typing import ClassVar

from pydantic import BaseModel, ConfigDict, Field

from stableswap.models.types import Address, Amount


class PoolEvent(BaseModel):
    """Base class for pool events."""

    model_config = ConfigDict(frozen=True)

    name: ClassVar[str] = "PoolEvent"


class Swap(PoolEvent):
    """A buy or sell settled against the pool."""

    name: ClassVar[str] = "Swap"

    payer: Address = Field(description="Account that initiated the swap")
    recipient: Address
    base_in: Amount
    quote_in: Amount
    base_out: Amount
    quote_out: Amount
    fee: Amount = Field(description="Trading fee in quote units")
    admin_fee: Amount = Field(description="Part of the fee reserved for the fee collector")
    oracle_price: Amount


class LiquidityAdded(PoolEvent):
    name: ClassVar[str] = "LiquidityAdded"

    sender: Address
    recipient: Address
    base_in: Amount
    quote_in: Amount
    lp_out: Amount
    fee: Amount
    admin_fee: Amount
    oracle_price: Amount


class LiquidityRemoved(PoolEvent):
    name: ClassVar[str] = "LiquidityRemoved"

    account: Address
    lp_in: Amount
    base_out: Amount
    quote_out: Amount
    fee: Amount
    admin_fee: Amount
    oracle_price: Amount


class Sync(PoolEvent):
    """Stored balances refreshed from live balances."""

    name: ClassVar[str] = "Sync"

    base: Amount
    quote: Amount
    oracle_price: Amount


class Rebalanced(PoolEvent):
    """Stored balances projected to a new rebalance version."""

    name: ClassVar[str] = "Rebalanced"

    base: Amount
    quote: Amount
    version: int = Field(ge=0)


class AmplRampUpdated(PoolEvent):
    name: ClassVar[str] = "AmplRampUpdated"

    start: int = Field(gt=0)
    end: int = Field(gt=0)
    start_timestamp: int = Field(ge=0)
    end_timestamp: int = Field(ge=0)


class FeeCollected(PoolEvent):
    name: ClassVar[str] = "FeeCollected"

    fee_collector: Address
    amount: Amount


class FeeRateUpdated(PoolEvent):
    name: ClassVar[str] = "FeeRateUpdated"

    fee_rate: Amount


class AdminFeeRateUpdated(PoolEvent):
    name: ClassVar[str] = "AdminFeeRateUpdated"

    admin_fee_rate: Amount


class FeeCollectorUpdated(PoolEvent):
    name: ClassVar[str] = "FeeCollectorUpdated"

    fee_collector: Address


class Paused(PoolEvent):
    name: ClassVar[str] = "Paused"

    account: Address


class Unpaused(PoolEvent):
    name: ClassVar[str] = "Unpaused"

    account: Address
