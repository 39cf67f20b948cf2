"""Response models for the pool HTTP API.

Amounts are serialized as decimal strings so 256-bit values survive JSON
clients that parse numbers as doubles.
"""

from __future__ import annotations

from enum import Enum
from typing import TYPE_CHECKING

from pydantic import BaseModel, ConfigDict, Field

from stableswap.models.types import Address, Uint256

if TYPE_CHECKING:
    from stableswap.pool.stable_swap import StableSwapPool
    from stableswap.pool.swap import SwapQuote


class QuoteDirection(str, Enum):
    """Amount being solved for."""

    BASE_OUT = "base-out"
    QUOTE_OUT = "quote-out"
    BASE_IN = "base-in"
    QUOTE_IN = "quote-in"


class PoolView(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    address: Address
    base_balance: Uint256 = Field(alias="baseBalance")
    quote_balance: Uint256 = Field(alias="quoteBalance")
    total_shares: Uint256 = Field(alias="totalShares")
    total_admin_fee: Uint256 = Field(alias="totalAdminFee")
    rebalance_version: int = Field(alias="rebalanceVersion")
    ampl: int
    invariant: Uint256 = Field(description="Current D, 18 decimals")
    virtual_price: Uint256 = Field(alias="virtualPrice")
    oracle_price: Uint256 = Field(alias="oraclePrice")
    price: Uint256 = Field(description="Marginal price of base in quote terms, 18 decimals")
    price_over_oracle: Uint256 = Field(alias="priceOverOracle")
    price_over_oracle_integral: Uint256 = Field(alias="priceOverOracleIntegral")
    fee_rate: Uint256 = Field(alias="feeRate")
    admin_fee_rate: Uint256 = Field(alias="adminFeeRate")
    paused: bool

    @classmethod
    def from_pool(cls, pool: StableSwapPool) -> PoolView:
        base, quote = pool.all_balances()
        return cls(
            address=pool.address,
            base_balance=base,
            quote_balance=quote,
            total_shares=pool.share_ledger.total_supply(),
            total_admin_fee=pool.total_admin_fee,
            rebalance_version=pool.fund.get_rebalance_size(),
            ampl=pool.get_ampl(),
            invariant=pool.get_current_d(),
            virtual_price=pool.get_virtual_price(),
            oracle_price=pool.get_oracle_price(),
            price=pool.get_current_price(),
            price_over_oracle=pool.get_current_price_over_oracle(),
            price_over_oracle_integral=pool.get_price_over_oracle_integral(),
            fee_rate=pool.fee_rate,
            admin_fee_rate=pool.admin_fee_rate,
            paused=pool.paused,
        )


class QuoteView(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    direction: QuoteDirection
    amount_in: Uint256 = Field(alias="amountIn")
    amount_out: Uint256 = Field(alias="amountOut")
    fee: Uint256
    admin_fee: Uint256 = Field(alias="adminFee")

    @classmethod
    def from_quote(cls, direction: QuoteDirection, quote: SwapQuote) -> QuoteView:
        return cls(
            direction=direction,
            amount_in=quote.amount_in,
            amount_out=quote.amount_out,
            fee=quote.fee,
            admin_fee=quote.admin_fee,
        )


class ErrorView(BaseModel):
    error: str = Field(description="Stable error code, e.g. InsufficientLiquidity")
    kind: str
    detail: str
