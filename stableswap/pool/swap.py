"""Quotes and settlement of trades between base and quote.

Trades settle optimistically: the pool sends the requested output first,
optionally lets the caller pay from a callback, then infers the input from
its live balance and verifies that the invariant did not decrease. Quotes
add a unit of slack on D and on the solved balance so a trade executed with
exactly the quoted amounts always passes that check.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

import structlog

from stableswap.collaborators.interfaces import SettleRequest, SwapCallee
from stableswap.constants import TRANCHE_B
from stableswap.errors import (
    ExcessiveInput,
    InsufficientLiquidity,
    InvariantMismatch,
    ZeroOutput,
)
from stableswap.math.stable_math import get_base, get_d, get_quote
from stableswap.models.events import Swap
from stableswap.pool.fees import add_fee, admin_fee, fee_on_input, fee_on_output, subtract_fee
from stableswap.safe_int import S

if TYPE_CHECKING:
    from stableswap.pool.stable_swap import StableSwapPool

logger = structlog.get_logger()


@dataclass(frozen=True)
class SwapQuote:
    """Predicted amounts of a trade.

    Attributes:
        amount_in: Amount the trader pays (quote for buys, base for sells)
        amount_out: Amount the trader receives
        fee: Trading fee in quote units
        admin_fee: Part of the fee credited to the fee collector
    """

    amount_in: int
    amount_out: int
    fee: int
    admin_fee: int


class SwapEngine:
    def __init__(self, pool: StableSwapPool) -> None:
        self._pool = pool

    # =========================================================================
    # Quotes
    # =========================================================================

    def _quote_context(self) -> tuple[int, int, int, int, int]:
        """Projected balances, A, oracle price and D plus one unit of slack."""
        pool = self._pool
        old_base, old_quote = pool.all_balances()
        if old_base == 0 or old_quote == 0:
            raise InsufficientLiquidity()
        ampl = pool.get_ampl()
        oracle_price = pool.get_oracle_price()
        d = get_d(old_base, old_quote, ampl, oracle_price, pool.quote_multiplier) + 1
        return old_base, old_quote, ampl, oracle_price, d

    def quote_base_out(self, quote_in: int) -> SwapQuote:
        """Base received for an exact quote input (buy)."""
        pool = self._pool
        old_base, old_quote, ampl, oracle_price, d = self._quote_context()
        new_quote = old_quote + subtract_fee(quote_in, pool.state.fee_rate)
        new_base = get_base(ampl, new_quote, oracle_price, d, pool.quote_multiplier) + 1
        if new_base >= old_base:
            raise ZeroOutput()
        base_out = old_base - new_base
        fee = fee_on_input(quote_in, pool.state.fee_rate)
        return SwapQuote(quote_in, base_out, fee, admin_fee(fee, pool.state.admin_fee_rate))

    def quote_quote_in(self, base_out: int) -> SwapQuote:
        """Quote to pay for an exact base output (buy)."""
        pool = self._pool
        old_base, old_quote, ampl, oracle_price, d = self._quote_context()
        if base_out >= old_base:
            raise InsufficientLiquidity()
        new_base = old_base - base_out
        new_quote = get_quote(ampl, new_base, oracle_price, d, pool.quote_multiplier) + 1
        quote_in = add_fee((S(new_quote) - old_quote).value, pool.state.fee_rate)
        fee = fee_on_input(quote_in, pool.state.fee_rate)
        return SwapQuote(quote_in, base_out, fee, admin_fee(fee, pool.state.admin_fee_rate))

    def quote_quote_out(self, base_in: int) -> SwapQuote:
        """Quote received for an exact base input (sell)."""
        pool = self._pool
        old_base, old_quote, ampl, oracle_price, d = self._quote_context()
        new_base = old_base + base_in
        new_quote = get_quote(ampl, new_base, oracle_price, d, pool.quote_multiplier) + 1
        if new_quote >= old_quote:
            raise ZeroOutput()
        quote_out = subtract_fee(old_quote - new_quote, pool.state.fee_rate)
        fee = fee_on_output(quote_out, pool.state.fee_rate)
        return SwapQuote(base_in, quote_out, fee, admin_fee(fee, pool.state.admin_fee_rate))

    def quote_base_in(self, quote_out: int) -> SwapQuote:
        """Base to pay for an exact quote output (sell)."""
        pool = self._pool
        old_base, old_quote, ampl, oracle_price, d = self._quote_context()
        quote_out_before_fee = add_fee(quote_out, pool.state.fee_rate)
        if quote_out_before_fee >= old_quote:
            raise InsufficientLiquidity()
        new_quote = old_quote - quote_out_before_fee
        new_base = get_base(ampl, new_quote, oracle_price, d, pool.quote_multiplier) + 1
        base_in = (S(new_base) - old_base).value
        fee = fee_on_output(quote_out, pool.state.fee_rate)
        return SwapQuote(base_in, quote_out, fee, admin_fee(fee, pool.state.admin_fee_rate))

    # =========================================================================
    # Settlement
    # =========================================================================

    def _settle(
        self,
        callee: SwapCallee | None,
        version: int,
        base_out: int,
        quote_out: int,
        recipient: str,
        data: bytes,
    ) -> None:
        pool = self._pool
        if callee is not None:
            callee.settle(
                SettleRequest(
                    pool=pool,
                    version=version,
                    base_out=base_out,
                    quote_out=quote_out,
                    recipient=recipient,
                    data=data,
                )
            )
        # The callback may have triggered a rebalance
        pool.check_version(version)

    def buy(
        self,
        version: int,
        base_out: int,
        recipient: str,
        data: bytes,
        sender: str,
        callee: SwapCallee | None,
        max_in: int | None,
    ) -> Swap:
        """Send base out, then charge the quote that arrived.

        Raises:
            ZeroOutput: If base_out is zero
            InsufficientLiquidity: If base_out is not below the pooled base
            ExcessiveInput: If the inferred quote input exceeds max_in
            InvariantMismatch: If the payment does not preserve D
        """
        pool = self._pool
        state = pool.state
        if base_out == 0:
            raise ZeroOutput()
        old_base, old_quote = pool.rebalancer.handle_rebalance(version)
        if base_out >= old_base:
            raise InsufficientLiquidity()

        pool.fund.tranche_transfer(TRANCHE_B, pool.address, recipient, base_out, version)
        self._settle(callee, version, base_out, 0, recipient, data)

        new_quote = pool.live_quote_balance()
        if new_quote < old_quote:
            raise InvariantMismatch()
        quote_in = new_quote - old_quote
        if max_in is not None and quote_in > max_in:
            raise ExcessiveInput()
        fee = fee_on_input(quote_in, state.fee_rate)
        ampl = pool.get_ampl()
        oracle_price = pool.get_oracle_price()
        pool.update_price_integral(old_base, old_quote, ampl, oracle_price)
        old_d = get_d(old_base, old_quote, ampl, oracle_price, pool.quote_multiplier)
        new_d = get_d(
            old_base - base_out, new_quote - fee, ampl, oracle_price, pool.quote_multiplier
        )
        if new_d < old_d:
            raise InvariantMismatch()

        admin = admin_fee(fee, state.admin_fee_rate)
        state.base_balance = old_base - base_out
        state.quote_balance = new_quote - admin
        state.total_admin_fee += admin
        event = Swap(
            payer=sender,
            recipient=recipient,
            base_in=0,
            quote_in=quote_in,
            base_out=base_out,
            quote_out=0,
            fee=fee,
            admin_fee=admin,
            oracle_price=oracle_price,
        )
        pool.chain.emit(event)
        logger.info(
            "swap_buy",
            pool=pool.address,
            base_out=base_out,
            quote_in=quote_in,
            fee=fee,
            admin_fee=admin,
        )
        return event

    def sell(
        self,
        version: int,
        quote_out: int,
        recipient: str,
        data: bytes,
        sender: str,
        callee: SwapCallee | None,
        max_in: int | None,
    ) -> Swap:
        """Send quote out, then charge the base that arrived.

        The fee is grossed up from the output so the recipient receives
        exactly quote_out.

        Raises:
            ZeroOutput: If quote_out is zero
            InsufficientLiquidity: If quote_out plus fee is not below the pooled quote
            ExcessiveInput: If the inferred base input exceeds max_in
            InvariantMismatch: If the payment does not preserve D
        """
        pool = self._pool
        state = pool.state
        if quote_out == 0:
            raise ZeroOutput()
        old_base, old_quote = pool.rebalancer.handle_rebalance(version)
        if quote_out >= old_quote:
            raise InsufficientLiquidity()

        pool.quote_token.transfer(pool.address, recipient, quote_out)
        self._settle(callee, version, 0, quote_out, recipient, data)

        new_base = pool.live_base_balance()
        if new_base < old_base:
            raise InvariantMismatch()
        base_in = new_base - old_base
        if max_in is not None and base_in > max_in:
            raise ExcessiveInput()
        fee = fee_on_output(quote_out, state.fee_rate)
        if quote_out + fee >= old_quote:
            raise InsufficientLiquidity()
        ampl = pool.get_ampl()
        oracle_price = pool.get_oracle_price()
        pool.update_price_integral(old_base, old_quote, ampl, oracle_price)
        old_d = get_d(old_base, old_quote, ampl, oracle_price, pool.quote_multiplier)
        new_d = get_d(
            new_base, old_quote - quote_out - fee, ampl, oracle_price, pool.quote_multiplier
        )
        if new_d < old_d:
            raise InvariantMismatch()

        admin = admin_fee(fee, state.admin_fee_rate)
        state.base_balance = new_base
        state.quote_balance = old_quote - quote_out - admin
        state.total_admin_fee += admin
        event = Swap(
            payer=sender,
            recipient=recipient,
            base_in=base_in,
            quote_in=0,
            base_out=0,
            quote_out=quote_out,
            fee=fee,
            admin_fee=admin,
            oracle_price=oracle_price,
        )
        pool.chain.emit(event)
        logger.info(
            "swap_sell",
            pool=pool.address,
            base_in=base_in,
            quote_out=quote_out,
            fee=fee,
            admin_fee=admin,
        )
        return event
