"""Pool share minting and burning.

Deposits are whatever arrived since the stored balances were last written;
shares are minted in proportion to the growth of D. Imbalanced deposits and
single-sided withdrawals pay the trading fee on the quote side, so liquidity
operations cannot be used as a fee-free swap.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import structlog

from stableswap.constants import BURN_ADDRESS, MINIMUM_LIQUIDITY, TRANCHE_B
from stableswap.errors import (
    InsufficientLiquidity,
    InsufficientOutput,
    NoLiquidityAdded,
    ZeroOutput,
)
from stableswap.math.stable_math import get_base, get_d, get_quote
from stableswap.models.events import FeeCollected, LiquidityAdded, LiquidityRemoved
from stableswap.pool.fees import admin_fee, fee_on_input
from stableswap.safe_int import S

if TYPE_CHECKING:
    from stableswap.pool.stable_swap import StableSwapPool

logger = structlog.get_logger()


class LiquidityAccountant:
    def __init__(self, pool: StableSwapPool) -> None:
        self._pool = pool

    def add_liquidity(self, version: int, recipient: str, sender: str) -> int:
        """Mint shares for the balances transferred in since the last update.

        Returns:
            Shares minted to the recipient

        Raises:
            NoLiquidityAdded: If the deposit does not increase D, or a first
                deposit leaves either side empty
        """
        pool = self._pool
        state = pool.state
        old_base, old_quote = pool.rebalancer.handle_rebalance(version)
        new_base = pool.live_base_balance()
        new_quote = pool.live_quote_balance()
        base_in = (S(new_base) - old_base).value
        quote_in = (S(new_quote) - old_quote).value
        ampl = pool.get_ampl()
        oracle_price = pool.get_oracle_price()
        multiplier = pool.quote_multiplier
        lp_supply = pool.share_ledger.total_supply()

        if lp_supply == 0:
            if new_base == 0 or new_quote == 0:
                raise NoLiquidityAdded("Zero initial balance")
            pool.update_price_integral(old_base, old_quote, ampl, oracle_price)
            d1 = get_d(new_base, new_quote, ampl, oracle_price, multiplier)
            if d1 <= MINIMUM_LIQUIDITY:
                raise NoLiquidityAdded()
            state.base_balance = new_base
            state.quote_balance = new_quote
            lp_out = d1 - MINIMUM_LIQUIDITY
            pool.share_ledger.mint(BURN_ADDRESS, MINIMUM_LIQUIDITY)
            pool.share_ledger.mint(recipient, lp_out)
            self._emit_added(sender, recipient, base_in, quote_in, lp_out, 0, 0, oracle_price)
            return lp_out

        if base_in == 0 and quote_in == 0:
            raise NoLiquidityAdded()
        d0 = get_d(old_base, old_quote, ampl, oracle_price, multiplier)
        d1 = get_d(new_base, new_quote, ampl, oracle_price, multiplier)
        ideal_quote = (S(d1) * old_quote // d0).value
        fee = fee_on_input(abs(ideal_quote - new_quote), state.fee_rate)
        admin = admin_fee(fee, state.admin_fee_rate)
        pool.update_price_integral(old_base, old_quote, ampl, oracle_price)
        d2 = get_d(new_base, new_quote - fee, ampl, oracle_price, multiplier)
        if d2 <= d0:
            raise NoLiquidityAdded()

        state.base_balance = new_base
        state.quote_balance = new_quote - admin
        state.total_admin_fee += admin
        lp_out = (S(lp_supply) * (d2 - d0) // d0).value
        pool.share_ledger.mint(recipient, lp_out)
        self._emit_added(sender, recipient, base_in, quote_in, lp_out, fee, admin, oracle_price)
        return lp_out

    def _emit_added(
        self,
        sender: str,
        recipient: str,
        base_in: int,
        quote_in: int,
        lp_out: int,
        fee: int,
        admin: int,
        oracle_price: int,
    ) -> None:
        pool = self._pool
        pool.chain.emit(
            LiquidityAdded(
                sender=sender,
                recipient=recipient,
                base_in=base_in,
                quote_in=quote_in,
                lp_out=lp_out,
                fee=fee,
                admin_fee=admin,
                oracle_price=oracle_price,
            )
        )
        logger.info(
            "liquidity_added",
            pool=pool.address,
            recipient=recipient,
            base_in=base_in,
            quote_in=quote_in,
            lp_out=lp_out,
            fee=fee,
        )

    def _burn_context(self, version: int, lp_in: int) -> tuple[int, int, int]:
        pool = self._pool
        old_base, old_quote = pool.rebalancer.handle_rebalance(version)
        lp_supply = pool.share_ledger.total_supply()
        if lp_supply == 0 or lp_in > lp_supply:
            raise InsufficientLiquidity()
        return old_base, old_quote, lp_supply

    def _finish_removal(
        self,
        sender: str,
        lp_in: int,
        base_out: int,
        quote_out: int,
        fee: int,
        admin: int,
        oracle_price: int,
        version: int,
    ) -> None:
        pool = self._pool
        pool.share_ledger.burn_from(sender, lp_in)
        if base_out > 0:
            pool.fund.tranche_transfer(TRANCHE_B, pool.address, sender, base_out, version)
        if quote_out > 0:
            pool.quote_token.transfer(pool.address, sender, quote_out)
        pool.chain.emit(
            LiquidityRemoved(
                account=sender,
                lp_in=lp_in,
                base_out=base_out,
                quote_out=quote_out,
                fee=fee,
                admin_fee=admin,
                oracle_price=oracle_price,
            )
        )
        logger.info(
            "liquidity_removed",
            pool=pool.address,
            account=sender,
            lp_in=lp_in,
            base_out=base_out,
            quote_out=quote_out,
            fee=fee,
        )

    def remove_liquidity(
        self, version: int, lp_in: int, min_base_out: int, min_quote_out: int, sender: str
    ) -> tuple[int, int]:
        """Burn shares for a proportional slice of both balances, fee free.

        Raises:
            InsufficientOutput: If either output is below its minimum
        """
        pool = self._pool
        state = pool.state
        old_base, old_quote, lp_supply = self._burn_context(version, lp_in)
        base_out = (S(old_base) * lp_in // lp_supply).value
        quote_out = (S(old_quote) * lp_in // lp_supply).value
        if base_out < min_base_out or quote_out < min_quote_out:
            raise InsufficientOutput()

        oracle_price = pool.get_oracle_price()
        pool.update_price_integral(old_base, old_quote, pool.get_ampl(), oracle_price)
        state.base_balance = old_base - base_out
        state.quote_balance = old_quote - quote_out
        self._finish_removal(sender, lp_in, base_out, quote_out, 0, 0, oracle_price, version)
        return base_out, quote_out

    def remove_base_liquidity(
        self, version: int, lp_in: int, min_base_out: int, sender: str
    ) -> int:
        """Burn shares for base only.

        D shrinks by the burned share; the base balance is solved so the
        quote balance only loses the fee's admin part.

        Raises:
            InsufficientOutput: If the output is below min_base_out
            ZeroOutput: If the burned shares are worth no base
        """
        pool = self._pool
        state = pool.state
        old_base, old_quote, lp_supply = self._burn_context(version, lp_in)
        ampl = pool.get_ampl()
        oracle_price = pool.get_oracle_price()
        multiplier = pool.quote_multiplier

        d0 = get_d(old_base, old_quote, ampl, oracle_price, multiplier)
        d1 = (S(d0) - S(d0) * lp_in // lp_supply).value
        fee = fee_on_input((S(old_quote) * lp_in // lp_supply).value, state.fee_rate)
        new_base = get_base(ampl, (S(old_quote) - fee).value, oracle_price, d1, multiplier) + 1
        if new_base >= old_base:
            raise ZeroOutput()
        base_out = old_base - new_base
        if base_out < min_base_out:
            raise InsufficientOutput()

        admin = admin_fee(fee, state.admin_fee_rate)
        pool.update_price_integral(old_base, old_quote, ampl, oracle_price)
        state.base_balance = new_base
        state.quote_balance = old_quote - admin
        state.total_admin_fee += admin
        self._finish_removal(sender, lp_in, base_out, 0, fee, admin, oracle_price, version)
        return base_out

    def remove_quote_liquidity(
        self, version: int, lp_in: int, min_quote_out: int, sender: str
    ) -> int:
        """Burn shares for quote only.

        The fee is charged on the quote taken beyond the proportional share.

        Raises:
            InsufficientOutput: If the output is below min_quote_out
            ZeroOutput: If the burned shares are worth no quote
        """
        pool = self._pool
        state = pool.state
        old_base, old_quote, lp_supply = self._burn_context(version, lp_in)
        ampl = pool.get_ampl()
        oracle_price = pool.get_oracle_price()
        multiplier = pool.quote_multiplier

        d0 = get_d(old_base, old_quote, ampl, oracle_price, multiplier)
        d1 = (S(d0) - S(d0) * lp_in // lp_supply).value
        ideal_quote = (S(old_quote) * (lp_supply - lp_in) // lp_supply).value
        new_quote = get_quote(ampl, old_base, oracle_price, d1, multiplier) + 1
        # Rounding can put the solved balance above the proportional one
        fee = fee_on_input(max(ideal_quote - new_quote, 0), state.fee_rate)
        if new_quote + fee >= old_quote:
            raise ZeroOutput()
        quote_out = old_quote - new_quote - fee
        if quote_out < min_quote_out:
            raise InsufficientOutput()

        admin = admin_fee(fee, state.admin_fee_rate)
        pool.update_price_integral(old_base, old_quote, ampl, oracle_price)
        state.quote_balance = new_quote + fee - admin
        state.total_admin_fee += admin
        self._finish_removal(sender, lp_in, 0, quote_out, fee, admin, oracle_price, version)
        return quote_out

    def collect_fee(self) -> int:
        """Send accrued admin fees to the fee collector."""
        pool = self._pool
        state = pool.state
        pool.rebalancer.handle_rebalance(pool.fund.get_rebalance_size())
        amount = state.total_admin_fee
        state.total_admin_fee = 0
        if amount > 0:
            pool.quote_token.transfer(pool.address, state.fee_collector, amount)
        pool.chain.emit(FeeCollected(fee_collector=state.fee_collector, amount=amount))
        logger.info(
            "fee_collected", pool=pool.address, collector=state.fee_collector, amount=amount
        )
        return amount
