"""API endpoints for the pool service."""

import os
from functools import lru_cache

import structlog
from fastapi import APIRouter, Depends, Query

from stableswap.config import PoolConfig
from stableswap.local import deploy_local
from stableswap.models.views import PoolView, QuoteDirection, QuoteView
from stableswap.pool.stable_swap import StableSwapPool

logger = structlog.get_logger()

router = APIRouter()


@lru_cache(maxsize=1)
def get_default_pool() -> StableSwapPool:
    """Local pool built from STABLESWAP_* environment variables.

    STABLESWAP_SEED_BASE and STABLESWAP_SEED_QUOTE (native units) make the
    first deposit; STABLESWAP_QUOTE_DECIMALS sets the quote token decimals.
    """
    deployment = deploy_local(
        PoolConfig.from_env(),
        quote_decimals=int(os.environ.get("STABLESWAP_QUOTE_DECIMALS", "6")),
        seed_base=int(os.environ.get("STABLESWAP_SEED_BASE", "0")),
        seed_quote=int(os.environ.get("STABLESWAP_SEED_QUOTE", "0")),
    )
    return deployment.pool


def get_pool() -> StableSwapPool:
    """Dependency provider for the pool instance.

    Override this in tests to inject another pool:
        app.dependency_overrides[get_pool] = lambda: pool
    """
    return get_default_pool()


@router.get("/pool")
async def pool_state(pool: StableSwapPool = Depends(get_pool)) -> PoolView:
    """Balances, invariant, prices and parameters of the pool."""
    return PoolView.from_pool(pool)


@router.get("/quote/{direction}")
async def quote(
    direction: QuoteDirection,
    amount: int = Query(ge=0, description="Known amount, native units"),
    pool: StableSwapPool = Depends(get_pool),
) -> QuoteView:
    """Quote a trade.

    ``direction`` names the amount being solved for: ``base-out`` quotes the
    base received for ``amount`` quote in, ``quote-in`` the quote owed for
    ``amount`` base out, and so on.
    """
    result = pool.quote(direction.value, amount)
    logger.info(
        "quote_served",
        direction=direction.value,
        amount=amount,
        amount_in=result.amount_in,
        amount_out=result.amount_out,
    )
    return QuoteView.from_quote(direction, result)


@router.post("/sync")
async def sync(pool: StableSwapPool = Depends(get_pool)) -> PoolView:
    """Adopt live balances (and any pending rebalance) as the pool's balances."""
    pool.sync()
    return PoolView.from_pool(pool)
