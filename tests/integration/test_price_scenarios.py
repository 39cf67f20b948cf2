"""Integration tests for pricing and settlement of skewed pools.

Each scenario pushes extra base or quote into a seeded 100k/100k pool,
syncs, and checks the marginal price against the known StableSwap curve
at A=80. Trades quoted at the skewed state must then settle exactly. Price
checks use a 1 USDC trade so slippage stays well below the tolerance.
"""

import pytest

from stableswap.constants import TRANCHE_B
from tests.helpers import INIT_B, INIT_USDC, UNIT, USDC_MULTIPLIER, USER1, USER2, make_deployment

SCENARIOS = [
    # (extra base, extra quote, expected price over oracle, tolerance in bps)
    pytest.param(0, INIT_USDC * 174 // 1000, UNIT * 1001 // 1000, 1, id="1:1.174"),
    pytest.param(INIT_B * 174 // 1000, 0, UNIT * 999 // 1000, 1, id="1.174:1"),
    pytest.param(0, INIT_USDC * 185 // 100, UNIT * 101 // 100, 2, id="1:2.85"),
    pytest.param(INIT_B * 185 // 100, 0, UNIT * 99 // 100, 2, id="2.85:1"),
    pytest.param(0, INIT_USDC * 55924 // 100, 100 * UNIT, 10, id="1:560.24"),
    pytest.param(INIT_B * 55924 // 100, 0, UNIT // 100, 10, id="560.24:1"),
]


def within_bps(actual: int, expected: int, bps: int) -> bool:
    return abs(actual - expected) * 10_000 <= expected * bps


def skewed_deployment(extra_base: int, extra_quote: int):
    deployment = make_deployment()
    if extra_base:
        deployment.deposit_base(extra_base)
    if extra_quote:
        deployment.deposit_quote(extra_quote)
    deployment.pool.sync()
    return deployment


@pytest.mark.parametrize("extra_base,extra_quote,expected,bps", SCENARIOS)
class TestSkewedPools:
    def test_marginal_price(self, extra_base, extra_quote, expected, bps):
        pool = skewed_deployment(extra_base, extra_quote).pool
        assert within_bps(pool.get_current_price_over_oracle(), expected, bps)

    def test_small_buy_trades_near_marginal_price(self, extra_base, extra_quote, expected, bps):
        deployment = skewed_deployment(extra_base, extra_quote)
        pool = deployment.pool
        quote_in = 10**6
        quote = pool.swaps.quote_base_out(quote_in)

        swap_price = (quote_in - quote.fee) * USDC_MULTIPLIER * UNIT // quote.amount_out
        assert within_bps(swap_price, expected, bps + 1)

        d_before = pool.get_current_d()
        deployment.deposit_quote(quote_in)
        event = pool.buy(deployment.version, quote.amount_out, USER2, sender=USER1)
        assert event.fee == quote.fee
        assert deployment.fund.tranche_balance_of(TRANCHE_B, USER2) == quote.amount_out
        assert pool.get_current_d() >= d_before

    def test_quoted_sell_settles(self, extra_base, extra_quote, expected, bps):
        deployment = skewed_deployment(extra_base, extra_quote)
        pool = deployment.pool
        quote_out = INIT_USDC // 1000
        base_in = pool.get_base_in(quote_out)

        d_before = pool.get_current_d()
        deployment.deposit_base(base_in)
        event = pool.sell(deployment.version, quote_out, USER2, sender=USER1, max_in=base_in)
        assert event.base_in == base_in
        assert deployment.quote_token.balance_of(USER2) == quote_out
        assert pool.get_current_d() >= d_before

    def test_quoted_buy_by_output_settles(self, extra_base, extra_quote, expected, bps):
        deployment = skewed_deployment(extra_base, extra_quote)
        pool = deployment.pool
        base_out = pool.get_base_out(INIT_USDC // 1000)
        quote_in = pool.get_quote_in(base_out)

        deployment.deposit_quote(quote_in)
        event = pool.buy(deployment.version, base_out, USER2, sender=USER1, max_in=quote_in)
        assert event.quote_in == quote_in


class TestRoundTrip:
    def test_buy_then_sell_loses_fees(self):
        """Buying and selling back the same base never returns more quote."""
        deployment = make_deployment()
        pool = deployment.pool
        quote_in = 10_000 * 10**6
        base_out = pool.get_base_out(quote_in)
        deployment.deposit_quote(quote_in)
        pool.buy(deployment.version, base_out, USER2, sender=USER1)

        quote_back = pool.get_quote_out(base_out)
        deployment.deposit_base(base_out)
        pool.sell(deployment.version, quote_back, USER2, sender=USER1)

        assert quote_back < quote_in
        assert pool.get_virtual_price() > UNIT
