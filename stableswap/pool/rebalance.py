"""Reconcile stored balances with fund rebalances.

When the fund rebalances, the pool's base balance is rebased and part of its
value turns into Q. The pool keeps at most its pre-rebalance base: Q is split
into B and R when that helps restore base, quote is removed in proportion if
base shrank, and every excess asset goes to the share ledger for pro-rata
distribution to liquidity providers.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

import structlog

from stableswap.constants import TRANCHE_B, TRANCHE_Q, TRANCHE_R
from stableswap.models.events import Rebalanced, Sync
from stableswap.safe_int import S

if TYPE_CHECKING:
    from stableswap.pool.stable_swap import StableSwapPool

logger = structlog.get_logger()


@dataclass(frozen=True)
class RebalanceResult:
    """Stored balances projected to a rebalance version.

    Attributes:
        base: Base balance the pool keeps
        quote: Quote balance the pool keeps
        excessive_q: Q produced by the rebalance
        excessive_b: Base above the pre-rebalance balance
        excessive_r: R produced by splitting excessive_q
        excessive_quote: Quote removed to keep the pool's composition
        version: Version the balances belong to
        rebalanced: Whether the projection crossed at least one rebalance
    """

    base: int
    quote: int
    excessive_q: int = 0
    excessive_b: int = 0
    excessive_r: int = 0
    excessive_quote: int = 0
    version: int = 0
    rebalanced: bool = False


class RebalanceSync:
    def __init__(self, pool: StableSwapPool) -> None:
        self._pool = pool

    def get_rebalance_result(self, latest_version: int) -> RebalanceResult:
        """Project stored balances to ``latest_version`` without side effects."""
        pool = self._pool
        state = pool.state
        old_base = state.base_balance
        old_quote = state.quote_balance
        if latest_version == state.rebalance_version:
            return RebalanceResult(base=old_base, quote=old_quote, version=latest_version)

        excessive_q, new_base, _ = pool.fund.batch_rebalance(
            0, old_base, 0, state.rebalance_version, latest_version
        )
        excessive_r = 0
        if new_base < old_base:
            excessive_r = pool.fund.primary_market.get_split(excessive_q)
            new_base += excessive_r

        excessive_b = 0
        excessive_quote = 0
        if new_base < old_base:
            new_quote = (S(old_quote) * new_base // old_base).value
            excessive_quote = old_quote - new_quote
        else:
            new_quote = old_quote
            excessive_b = new_base - old_base
            new_base = old_base

        return RebalanceResult(
            base=new_base,
            quote=new_quote,
            excessive_q=excessive_q,
            excessive_b=excessive_b,
            excessive_r=excessive_r,
            excessive_quote=excessive_quote,
            version=latest_version,
            rebalanced=True,
        )

    def handle_rebalance(self, latest_version: int) -> tuple[int, int]:
        """Apply the projection to ``latest_version`` and hand excess assets out.

        Idempotent: a second call for the same version changes nothing.

        Returns:
            The (base, quote) balances valid for ``latest_version``
        """
        result = self.get_rebalance_result(latest_version)
        if not result.rebalanced:
            return result.base, result.quote

        pool = self._pool
        state = pool.state
        state.base_balance = result.base
        state.quote_balance = result.quote
        state.rebalance_version = latest_version
        pool.chain.emit(Rebalanced(base=result.base, quote=result.quote, version=latest_version))

        ledger = pool.share_ledger.address
        excessive_q = result.excessive_q
        if excessive_q > 0:
            if result.excessive_r > 0:
                pool.fund.primary_market.split(pool.address, excessive_q, latest_version)
                excessive_q = 0
            else:
                pool.fund.tranche_transfer(
                    TRANCHE_Q, pool.address, ledger, excessive_q, latest_version
                )
        if result.excessive_b > 0:
            pool.fund.tranche_transfer(
                TRANCHE_B, pool.address, ledger, result.excessive_b, latest_version
            )
        if result.excessive_r > 0:
            pool.fund.tranche_transfer(
                TRANCHE_R, pool.address, ledger, result.excessive_r, latest_version
            )
        if result.excessive_quote > 0:
            pool.quote_token.transfer(pool.address, ledger, result.excessive_quote)
        pool.share_ledger.distribute(
            excessive_q,
            result.excessive_b,
            result.excessive_r,
            result.excessive_quote,
            latest_version,
        )

        logger.info(
            "pool_rebalanced",
            pool=pool.address,
            version=latest_version,
            base=result.base,
            quote=result.quote,
            excessive_q=excessive_q,
            excessive_b=result.excessive_b,
            excessive_r=result.excessive_r,
            excessive_quote=result.excessive_quote,
        )
        return result.base, result.quote

    def sync(self) -> Sync:
        """Adopt live balances as stored balances.

        Catches up with any rebalance first, then closes the price integral
        segment at the old balances, so direct transfers into the pool are
        absorbed without pricing the past at the new balances.
        """
        pool = self._pool
        state = pool.state
        old_base, old_quote = self.handle_rebalance(pool.fund.get_rebalance_size())
        ampl = pool.get_ampl()
        oracle_price = pool.get_oracle_price()
        pool.update_price_integral(old_base, old_quote, ampl, oracle_price)

        new_base = pool.live_base_balance()
        new_quote = pool.live_quote_balance()
        state.base_balance = new_base
        state.quote_balance = new_quote
        event = Sync(base=new_base, quote=new_quote, oracle_price=oracle_price)
        pool.chain.emit(event)
        logger.info("pool_synced", pool=pool.address, base=new_base, quote=new_quote)
        return event
