"""Simulate trades against a local pool and print how price and fees evolve.

Usage:
    python -m scripts.simulate_pool --ampl 80 --fee-rate 0.03 --trades 20
"""

import argparse
import logging
from decimal import Decimal

import structlog

from stableswap.config import PoolConfig
from stableswap.constants import UNIT
from stableswap.local import deploy_local

logger = structlog.get_logger()

TRADER = "0x7ade700000000000000000000000000000000001"


def run_simulation(
    ampl: int, fee_rate: Decimal, trades: int, trade_fraction: int
) -> list[dict[str, int]]:
    """Alternate buys and sells of 1/trade_fraction of the seed balance.

    Returns:
        One row per trade with the price, invariant and accrued admin fee
    """
    seed_base = 100_000 * UNIT
    seed_quote = 100_000 * 10**6
    deployment = deploy_local(
        PoolConfig(ampl=ampl, fee_rate=fee_rate, admin_fee_rate=Decimal("0.4")),
        seed_base=seed_base,
        seed_quote=seed_quote,
    )
    pool = deployment.pool
    rows = []
    for i in range(trades):
        if i % 2 == 0:
            quote_in = seed_quote // trade_fraction
            base_out = pool.get_base_out(quote_in)
            deployment.quote_token.mint(pool.address, quote_in)
            pool.buy(deployment.version, base_out, TRADER, sender=TRADER)
        else:
            quote_out = seed_quote // trade_fraction
            base_in = pool.get_base_in(quote_out)
            deployment.deposit_base(base_in)
            pool.sell(deployment.version, quote_out, TRADER, sender=TRADER)
        deployment.chain.advance(60)
        rows.append(
            {
                "trade": i,
                "price": pool.get_current_price(),
                "invariant": pool.get_current_d(),
                "admin_fee": pool.total_admin_fee,
            }
        )
    return rows


def main() -> int:
    parser = argparse.ArgumentParser(description="Simulate trades against a local pool")
    parser.add_argument("--ampl", type=int, default=80, help="Amplification (default: 80)")
    parser.add_argument(
        "--fee-rate", type=Decimal, default=Decimal("0.0003"), help="Fee rate (default: 0.0003)"
    )
    parser.add_argument("--trades", type=int, default=10, help="Number of trades (default: 10)")
    parser.add_argument(
        "--trade-fraction",
        type=int,
        default=100,
        help="Trade size as 1/N of the seed balance (default: 100)",
    )
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable verbose logging")
    args = parser.parse_args()

    log_level = logging.DEBUG if args.verbose else logging.WARNING
    structlog.configure(
        processors=[
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.dev.ConsoleRenderer(),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(log_level),
    )

    rows = run_simulation(args.ampl, args.fee_rate, args.trades, args.trade_fraction)
    print(f"{'trade':>5}  {'price':>22}  {'invariant':>30}  {'admin fee':>12}")
    for row in rows:
        price = Decimal(row["price"]) / UNIT
        print(f"{row['trade']:>5}  {price:>22.12f}  {row['invariant']:>30}  {row['admin_fee']:>12}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
