"""Rebalance-aware two-asset StableSwap pool."""

from __future__ import annotations

import copy
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from typing import TypeVar

import structlog

from stableswap.chain import Chain
from stableswap.collaborators.interfaces import (
    Fund,
    PriceOracle,
    QuoteToken,
    ShareLedger,
    SwapCallee,
)
from stableswap.config import PoolConfig
from stableswap.constants import MAX_ADMIN_FEE_RATE, MAX_FEE_RATE, TRANCHE_B, UNIT
from stableswap.errors import (
    InvalidFeeRate,
    InvalidOraclePrice,
    PoolPaused,
    ReentrantCall,
    StableSwapError,
    TradingCurb,
    WrongVersion,
)
from stableswap.math.fixed_point import Bfp
from stableswap.math.stable_math import get_d, get_price_over_oracle
from stableswap.models.events import (
    AdminFeeRateUpdated,
    AmplRampUpdated,
    FeeCollectorUpdated,
    FeeRateUpdated,
    Paused,
    Swap,
    Sync,
    Unpaused,
)
from stableswap.models.types import normalize_address
from stableswap.pool.accumulator import PriceOracleAccumulator
from stableswap.pool.ampl import AmplificationRamp
from stableswap.pool.fees import quote_multiplier
from stableswap.pool.liquidity import LiquidityAccountant
from stableswap.pool.rebalance import RebalanceSync
from stableswap.pool.state import AccessControl, PoolState
from stableswap.pool.swap import SwapEngine, SwapQuote

logger = structlog.get_logger()

T = TypeVar("T")


class StableSwapPool:
    """StableSwap pool between a rebased fund tranche (base) and a quote token.

    Every mutating method takes the caller as ``sender`` and runs atomically
    inside ``chain.transaction()``: on any exception the pool state, every
    registered collaborator and the event log are restored. Methods that
    take a ``version`` fail with WrongVersion unless it equals the fund's
    latest rebalance version.

    Usage:
        pool = StableSwapPool(address=..., config=PoolConfig(...), chain=chain, ...)
        quote_in = pool.get_quote_in(base_out)
        pool.buy(version, base_out, recipient, sender=trader, callee=trader_callee)
    """

    def __init__(
        self,
        *,
        address: str,
        config: PoolConfig,
        chain: Chain,
        fund: Fund,
        quote_token: QuoteToken,
        share_ledger: ShareLedger,
        oracle: PriceOracle,
    ) -> None:
        self.address = normalize_address(address, validate=True)
        self.chain = chain
        self.fund = fund
        self.quote_token = quote_token
        self.share_ledger = share_ledger
        self.oracle = oracle
        self.quote_multiplier = quote_multiplier(quote_token.decimals)
        self.trading_curb_threshold = config.trading_curb_threshold_wei
        self.state = PoolState(
            access=AccessControl(owner=config.owner),
            ramp=AmplificationRamp.constant(config.ampl),
            accumulator=PriceOracleAccumulator(last_timestamp=chain.timestamp),
            fee_rate=config.fee_rate_bfp,
            admin_fee_rate=config.admin_fee_rate_bfp,
            fee_collector=config.fee_collector,
            rebalance_version=fund.get_rebalance_size(),
        )
        self._entered = False
        self.swaps = SwapEngine(self)
        self.liquidity = LiquidityAccountant(self)
        self.rebalancer = RebalanceSync(self)
        chain.register(self)

    # =========================================================================
    # Snapshot support
    # =========================================================================

    def snapshot(self) -> PoolState:
        return copy.deepcopy(self.state)

    def restore(self, state: PoolState) -> None:
        self.state = state

    # =========================================================================
    # Internal helpers
    # =========================================================================

    @contextmanager
    def _call(self, operation: str) -> Iterator[None]:
        """Non-reentrant, atomic scope for a mutating call."""
        if self._entered:
            raise ReentrantCall()
        self._entered = True
        try:
            with self.chain.transaction():
                yield
        except StableSwapError as err:
            logger.warning(
                "pool_call_rejected",
                pool=self.address,
                operation=operation,
                error=err.code,
                kind=err.kind.value,
                reason=err.message,
            )
            raise
        finally:
            self._entered = False

    def _run(self, operation: str, fn: Callable[[], T]) -> T:
        with self._call(operation):
            return fn()

    def _require_not_paused(self) -> None:
        if self.state.paused:
            raise PoolPaused()

    def _require_no_trading_curb(self) -> None:
        _, _, nav_r = self.fund.extrapolate_nav()
        if nav_r < self.trading_curb_threshold:
            raise TradingCurb()

    def check_version(self, version: int) -> None:
        if version != self.fund.get_rebalance_size():
            raise WrongVersion()

    def live_base_balance(self) -> int:
        return self.fund.tranche_balance_of(TRANCHE_B, self.address)

    def live_quote_balance(self) -> int:
        """Quote held by the pool minus fees owed to the fee collector."""
        return self.quote_token.balance_of(self.address) - self.state.total_admin_fee

    def update_price_integral(self, base: int, quote: int, ampl: int, oracle_price: int) -> None:
        """Close the price integral segment at the given (pre-change) balances."""
        self.state.accumulator.update(
            self.chain.timestamp,
            lambda: self._price_over_oracle(base, quote, ampl, oracle_price),
        )

    def _price_over_oracle(self, base: int, quote: int, ampl: int, oracle_price: int) -> int:
        if base == 0 or quote == 0:
            return UNIT
        d = get_d(base, quote, ampl, oracle_price, self.quote_multiplier)
        return get_price_over_oracle(base, quote, ampl, oracle_price, d, self.quote_multiplier)

    # =========================================================================
    # Views
    # =========================================================================

    @property
    def owner(self) -> str:
        return self.state.access.owner

    @property
    def fee_rate(self) -> int:
        return self.state.fee_rate.value

    @property
    def admin_fee_rate(self) -> int:
        return self.state.admin_fee_rate.value

    @property
    def fee_collector(self) -> str:
        return self.state.fee_collector

    @property
    def total_admin_fee(self) -> int:
        return self.state.total_admin_fee

    @property
    def rebalance_version(self) -> int:
        return self.state.rebalance_version

    @property
    def paused(self) -> bool:
        return self.state.paused

    @property
    def ampl_ramp(self) -> AmplificationRamp:
        return self.state.ramp

    def get_ampl(self) -> int:
        return self.state.ramp.get_ampl(self.chain.timestamp)

    def get_oracle_price(self) -> int:
        price = self.oracle.get_price()
        if price <= 0:
            raise InvalidOraclePrice(f"Invalid oracle price: {price}")
        return price

    def all_balances(self) -> tuple[int, int]:
        """Stored (base, quote) projected to the fund's latest version."""
        result = self.rebalancer.get_rebalance_result(self.fund.get_rebalance_size())
        return result.base, result.quote

    def get_current_d(self) -> int:
        base, quote = self.all_balances()
        return get_d(base, quote, self.get_ampl(), self.get_oracle_price(), self.quote_multiplier)

    def get_current_price_over_oracle(self) -> int:
        base, quote = self.all_balances()
        return self._price_over_oracle(base, quote, self.get_ampl(), self.get_oracle_price())

    def get_current_price(self) -> int:
        """Marginal price of base in quote terms, 18 decimals."""
        oracle_price = self.get_oracle_price()
        base, quote = self.all_balances()
        return (
            self._price_over_oracle(base, quote, self.get_ampl(), oracle_price)
            * oracle_price
            // UNIT
        )

    def get_price_over_oracle_integral(self) -> int:
        return self.state.accumulator.value_at(
            self.chain.timestamp, self.get_current_price_over_oracle()
        )

    def get_virtual_price(self) -> int:
        """Invariant per share, 18 decimals; 0 before the first deposit."""
        lp_supply = self.share_ledger.total_supply()
        if lp_supply == 0:
            return 0
        return self.get_current_d() * UNIT // lp_supply

    def get_base_out(self, quote_in: int) -> int:
        return self.swaps.quote_base_out(quote_in).amount_out

    def get_quote_out(self, base_in: int) -> int:
        return self.swaps.quote_quote_out(base_in).amount_out

    def get_base_in(self, quote_out: int) -> int:
        return self.swaps.quote_base_in(quote_out).amount_in

    def get_quote_in(self, base_out: int) -> int:
        return self.swaps.quote_quote_in(base_out).amount_in

    def quote(self, direction: str, amount: int) -> SwapQuote:
        """Full quote for one of 'base-out', 'quote-out', 'base-in', 'quote-in'.

        The direction names the amount being solved for.
        """
        quoters = {
            "base-out": self.swaps.quote_base_out,
            "quote-out": self.swaps.quote_quote_out,
            "base-in": self.swaps.quote_base_in,
            "quote-in": self.swaps.quote_quote_in,
        }
        if direction not in quoters:
            raise ValueError(f"Unknown quote direction: {direction}")
        return quoters[direction](amount)

    # =========================================================================
    # Trading
    # =========================================================================

    def buy(
        self,
        version: int,
        base_out: int,
        recipient: str,
        data: bytes = b"",
        *,
        sender: str,
        callee: SwapCallee | None = None,
        max_in: int | None = None,
    ) -> Swap:
        """Buy exactly ``base_out`` base, paying quote into the pool.

        Payment must be in the pool before the call returns: either sent
        beforehand or from ``callee.settle``.
        """

        def _buy() -> Swap:
            self.check_version(version)
            self._require_not_paused()
            self._require_no_trading_curb()
            return self.swaps.buy(version, base_out, recipient, data, sender, callee, max_in)

        return self._run("buy", _buy)

    def sell(
        self,
        version: int,
        quote_out: int,
        recipient: str,
        data: bytes = b"",
        *,
        sender: str,
        callee: SwapCallee | None = None,
        max_in: int | None = None,
    ) -> Swap:
        """Sell base for exactly ``quote_out`` quote."""

        def _sell() -> Swap:
            self.check_version(version)
            self._require_not_paused()
            return self.swaps.sell(version, quote_out, recipient, data, sender, callee, max_in)

        return self._run("sell", _sell)

    # =========================================================================
    # Liquidity
    # =========================================================================

    def add_liquidity(self, version: int, recipient: str, *, sender: str) -> int:
        def _add() -> int:
            self.check_version(version)
            self._require_not_paused()
            self._require_no_trading_curb()
            return self.liquidity.add_liquidity(version, recipient, sender)

        return self._run("add_liquidity", _add)

    def remove_liquidity(
        self,
        version: int,
        lp_in: int,
        min_base_out: int = 0,
        min_quote_out: int = 0,
        *,
        sender: str,
    ) -> tuple[int, int]:
        """Proportional withdrawal. Available while paused."""

        def _remove() -> tuple[int, int]:
            self.check_version(version)
            return self.liquidity.remove_liquidity(
                version, lp_in, min_base_out, min_quote_out, sender
            )

        return self._run("remove_liquidity", _remove)

    def remove_base_liquidity(
        self, version: int, lp_in: int, min_base_out: int = 0, *, sender: str
    ) -> int:
        def _remove() -> int:
            self.check_version(version)
            self._require_not_paused()
            return self.liquidity.remove_base_liquidity(version, lp_in, min_base_out, sender)

        return self._run("remove_base_liquidity", _remove)

    def remove_quote_liquidity(
        self, version: int, lp_in: int, min_quote_out: int = 0, *, sender: str
    ) -> int:
        def _remove() -> int:
            self.check_version(version)
            self._require_not_paused()
            return self.liquidity.remove_quote_liquidity(version, lp_in, min_quote_out, sender)

        return self._run("remove_quote_liquidity", _remove)

    def sync(self) -> Sync:
        return self._run("sync", self.rebalancer.sync)

    def collect_fee(self) -> int:
        return self._run("collect_fee", self.liquidity.collect_fee)

    # =========================================================================
    # Governance
    # =========================================================================

    def update_ampl_ramp(
        self, end_ampl: int, end_timestamp: int, *, sender: str
    ) -> AmplRampUpdated:
        """Ramp A linearly from its current value to end_ampl by end_timestamp."""

        def _update() -> AmplRampUpdated:
            self.state.access.require_owner(sender)
            ramp, event = self.state.ramp.ramp_to(end_ampl, end_timestamp, self.chain.timestamp)
            self.state.ramp = ramp
            self.chain.emit(event)
            logger.info(
                "ampl_ramp_updated",
                pool=self.address,
                start=event.start,
                end=event.end,
                end_timestamp=end_timestamp,
            )
            return event

        return self._run("update_ampl_ramp", _update)

    def update_fee_rate(self, fee_rate: int, *, sender: str) -> None:
        def _update() -> None:
            self.state.access.require_owner(sender)
            if not 0 <= fee_rate <= MAX_FEE_RATE:
                raise InvalidFeeRate()
            self.state.fee_rate = Bfp(fee_rate)
            self.chain.emit(FeeRateUpdated(fee_rate=fee_rate))

        self._run("update_fee_rate", _update)

    def update_admin_fee_rate(self, admin_fee_rate: int, *, sender: str) -> None:
        def _update() -> None:
            self.state.access.require_owner(sender)
            if not 0 <= admin_fee_rate <= MAX_ADMIN_FEE_RATE:
                raise InvalidFeeRate("Exceed max admin fee rate")
            self.state.admin_fee_rate = Bfp(admin_fee_rate)
            self.chain.emit(AdminFeeRateUpdated(admin_fee_rate=admin_fee_rate))

        self._run("update_admin_fee_rate", _update)

    def update_fee_collector(self, fee_collector: str, *, sender: str) -> None:
        def _update() -> None:
            self.state.access.require_owner(sender)
            self.state.fee_collector = normalize_address(fee_collector, validate=True)
            self.chain.emit(FeeCollectorUpdated(fee_collector=self.state.fee_collector))

        self._run("update_fee_collector", _update)

    def transfer_ownership(self, new_owner: str, *, sender: str) -> None:
        self._run(
            "transfer_ownership",
            lambda: self.state.access.transfer_ownership(sender, new_owner),
        )

    def pause(self, *, sender: str) -> None:
        def _pause() -> None:
            self.state.access.require_owner(sender)
            self.state.paused = True
            self.chain.emit(Paused(account=normalize_address(sender)))

        self._run("pause", _pause)

    def unpause(self, *, sender: str) -> None:
        def _unpause() -> None:
            self.state.access.require_owner(sender)
            self.state.paused = False
            self.chain.emit(Unpaused(account=normalize_address(sender)))

        self._run("unpause", _unpause)
