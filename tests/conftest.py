"""Pytest configuration and fixtures."""

import pytest

from stableswap.local import LocalDeployment
from stableswap.pool.stable_swap import StableSwapPool
from tests.helpers import make_deployment


@pytest.fixture
def deployment() -> LocalDeployment:
    """A pool seeded by USER1 with 100k base and 100k USDC."""
    return make_deployment()


@pytest.fixture
def empty_deployment() -> LocalDeployment:
    """A pool with no liquidity."""
    return make_deployment(seeded=False)


@pytest.fixture
def pool(deployment: LocalDeployment) -> StableSwapPool:
    return deployment.pool
