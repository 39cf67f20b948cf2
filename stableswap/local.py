"""In-process deployment of a pool with in-memory collaborators."""

from dataclasses import dataclass

import structlog

from stableswap.chain import Chain
from stableswap.collaborators.memory import (
    InMemoryFund,
    InMemoryShareLedger,
    InMemoryToken,
    StaticPriceOracle,
)
from stableswap.config import PoolConfig
from stableswap.constants import TRANCHE_B, UNIT
from stableswap.pool.stable_swap import StableSwapPool

logger = structlog.get_logger()

POOL_ADDRESS = "0x5ab1e5a0000000000000000000000000000000a1"
SHARE_LEDGER_ADDRESS = "0x5ab1e5a0000000000000000000000000000000b2"
DEFAULT_SEEDER = "0x5ab1e5a0000000000000000000000000000000c3"


@dataclass
class LocalDeployment:
    """A pool wired to its in-memory collaborators on one Chain."""

    chain: Chain
    fund: InMemoryFund
    quote_token: InMemoryToken
    share_ledger: InMemoryShareLedger
    oracle: StaticPriceOracle
    pool: StableSwapPool

    @property
    def version(self) -> int:
        return self.fund.get_rebalance_size()

    def deposit_base(self, amount: int) -> None:
        """Transfer base into the pool without accounting for it."""
        self.fund.mint_tranche(TRANCHE_B, self.pool.address, amount)

    def deposit_quote(self, amount: int) -> None:
        """Transfer quote into the pool without accounting for it."""
        self.quote_token.mint(self.pool.address, amount)


def deploy_local(
    config: PoolConfig | None = None,
    *,
    quote_decimals: int = 6,
    oracle_price: int = UNIT,
    seed_base: int = 0,
    seed_quote: int = 0,
    seeder: str = DEFAULT_SEEDER,
    timestamp: int = 0,
) -> LocalDeployment:
    """Build a pool and optionally make its first deposit.

    Args:
        config: Pool parameters (default: PoolConfig())
        quote_decimals: Decimals of the quote token
        oracle_price: Initial oracle price of base in quote terms, 18 decimals
        seed_base: Base for the first deposit (0 to leave the pool empty)
        seed_quote: Quote for the first deposit, native units
        seeder: Account receiving the first deposit's shares
        timestamp: Initial chain timestamp

    Returns:
        The wired deployment
    """
    config = config or PoolConfig()
    chain = Chain(timestamp=timestamp)
    fund = InMemoryFund(chain=chain)
    quote_token = InMemoryToken("USDC", decimals=quote_decimals, chain=chain)
    share_ledger = InMemoryShareLedger(SHARE_LEDGER_ADDRESS, chain=chain)
    oracle = StaticPriceOracle(oracle_price)
    pool = StableSwapPool(
        address=POOL_ADDRESS,
        config=config,
        chain=chain,
        fund=fund,
        quote_token=quote_token,
        share_ledger=share_ledger,
        oracle=oracle,
    )
    deployment = LocalDeployment(
        chain=chain,
        fund=fund,
        quote_token=quote_token,
        share_ledger=share_ledger,
        oracle=oracle,
        pool=pool,
    )
    if seed_base or seed_quote:
        deployment.deposit_base(seed_base)
        deployment.deposit_quote(seed_quote)
        pool.add_liquidity(deployment.version, seeder, sender=seeder)
    logger.info(
        "local_pool_deployed",
        pool=pool.address,
        ampl=config.ampl,
        seed_base=seed_base,
        seed_quote=seed_quote,
    )
    return deployment
