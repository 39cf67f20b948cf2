"""Unit tests for the pool HTTP API."""

import inspect

import pytest
from fastapi.testclient import TestClient

from stableswap.api.endpoints import get_default_pool, get_pool, pool_state, quote, sync
from stableswap.api.main import app
from stableswap.math import stable_math
from tests.helpers import INIT_B, INIT_LP, INIT_USDC, UNIT, make_deployment


@pytest.fixture
def deployment():
    return make_deployment()


@pytest.fixture
def client(deployment):
    """Test client serving the seeded deployment's pool."""
    app.dependency_overrides[get_pool] = lambda: deployment.pool
    yield TestClient(app)
    app.dependency_overrides.clear()


class ZeroOracle:
    def get_price(self) -> int:
        return 0


class TestHandlers:
    @pytest.mark.parametrize("handler", [pool_state, quote, sync])
    def test_handlers_run_on_the_event_loop(self, handler):
        """Pool calls never run concurrently from a worker thread."""
        assert inspect.iscoroutinefunction(handler)


class TestHealth:
    def test_health(self, client):
        response = client.get("/health")
        assert response.status_code == 200
        assert response.json() == {"status": "ok"}


class TestPoolState:
    def test_pool_state(self, client, deployment):
        response = client.get("/pool")

        assert response.status_code == 200
        data = response.json()
        assert data["address"] == deployment.pool.address
        assert data["baseBalance"] == str(INIT_B)
        assert data["quoteBalance"] == str(INIT_USDC)
        assert data["totalShares"] == str(INIT_LP)
        assert data["invariant"] == str(INIT_LP)
        assert data["virtualPrice"] == str(UNIT)
        assert data["priceOverOracle"] == str(UNIT)
        assert data["price"] == str(UNIT)
        assert data["feeRate"] == str(3 * 10**16)
        assert data["rebalanceVersion"] == 0
        assert data["ampl"] == 80
        assert data["paused"] is False

    def test_sync_absorbs_direct_transfer(self, client, deployment):
        deployment.deposit_quote(1000 * 10**6)

        response = client.post("/sync")

        assert response.status_code == 200
        assert response.json()["quoteBalance"] == str(INIT_USDC + 1000 * 10**6)


class TestQuoteEndpoint:
    def test_base_out_quote(self, client, deployment):
        response = client.get("/quote/base-out", params={"amount": 100 * 10**6})

        assert response.status_code == 200
        data = response.json()
        assert data["direction"] == "base-out"
        assert data["amountIn"] == str(100 * 10**6)
        assert data["amountOut"] == str(deployment.pool.get_base_out(100 * 10**6))
        assert data["fee"] == "3000000"
        assert data["adminFee"] == "1200000"

    def test_quote_in_quote(self, client, deployment):
        response = client.get("/quote/quote-in", params={"amount": 1000 * UNIT})
        assert response.status_code == 200
        assert response.json()["amountIn"] == str(deployment.pool.get_quote_in(1000 * UNIT))

    def test_capacity_error_is_400(self, client):
        response = client.get("/quote/quote-in", params={"amount": INIT_B})

        assert response.status_code == 400
        data = response.json()
        assert data["error"] == "InsufficientLiquidity"
        assert data["kind"] == "capacity"

    def test_validation_error_is_400(self, client):
        response = client.get("/quote/base-out", params={"amount": 0})
        assert response.status_code == 400
        assert response.json()["error"] == "ZeroOutput"

    def test_unknown_direction_is_422(self, client):
        response = client.get("/quote/sideways", params={"amount": 1})
        assert response.status_code == 422

    def test_negative_amount_is_422(self, client):
        response = client.get("/quote/base-out", params={"amount": -1})
        assert response.status_code == 422

    def test_empty_pool_is_400(self):
        empty = make_deployment(seeded=False)
        app.dependency_overrides[get_pool] = lambda: empty.pool
        try:
            response = TestClient(app).get("/quote/base-out", params={"amount": 1})
        finally:
            app.dependency_overrides.clear()
        assert response.status_code == 400
        assert response.json()["error"] == "InsufficientLiquidity"


class TestServerErrors:
    def test_consistency_error_is_409(self, client, deployment):
        deployment.pool.oracle = ZeroOracle()

        response = client.get("/pool")

        assert response.status_code == 409
        data = response.json()
        assert data["error"] == "InvalidOraclePrice"
        assert data["kind"] == "consistency"

    def test_numerical_error_is_500(self, client, deployment, monkeypatch):
        deployment.deposit_quote(INIT_USDC)
        deployment.pool.sync()
        monkeypatch.setattr(stable_math, "MAX_ITERATION", 1)

        response = client.get("/pool")

        assert response.status_code == 500
        data = response.json()
        assert data["error"] == "DidNotConverge"
        assert data["kind"] == "numerical"


class TestDefaultPool:
    def test_built_from_environment(self, monkeypatch):
        monkeypatch.setenv("STABLESWAP_SEED_BASE", str(1000 * UNIT))
        monkeypatch.setenv("STABLESWAP_SEED_QUOTE", str(1000 * 10**6))
        monkeypatch.setenv("STABLESWAP_AMPL", "120")
        get_default_pool.cache_clear()
        try:
            pool = get_default_pool()
            assert get_pool() is pool
            assert pool.all_balances() == (1000 * UNIT, 1000 * 10**6)
            assert pool.get_ampl() == 120
        finally:
            get_default_pool.cache_clear()
