"""Tests for the simulation and query scripts."""

from decimal import Decimal

import pytest
from fastapi.testclient import TestClient

from scripts.query_pool import fetch_ladder
from scripts.simulate_pool import run_simulation
from stableswap.api.endpoints import get_pool
from stableswap.api.main import app
from tests.helpers import INIT_B, make_deployment


class TestSimulatePool:
    def test_rows_per_trade(self):
        rows = run_simulation(ampl=80, fee_rate=Decimal("0.003"), trades=4, trade_fraction=100)
        assert [row["trade"] for row in rows] == [0, 1, 2, 3]

    def test_fees_accrue_and_invariant_grows(self):
        rows = run_simulation(ampl=80, fee_rate=Decimal("0.003"), trades=6, trade_fraction=50)
        admin_fees = [row["admin_fee"] for row in rows]
        invariants = [row["invariant"] for row in rows]
        assert admin_fees == sorted(admin_fees)
        assert admin_fees[-1] > 0
        assert invariants == sorted(invariants)


class TestQueryPool:
    @pytest.fixture
    def client(self):
        deployment = make_deployment()
        app.dependency_overrides[get_pool] = lambda: deployment.pool
        yield TestClient(app)
        app.dependency_overrides.clear()

    def test_ladder_of_quotes(self, client):
        ladder = fetch_ladder(client, "base-out", [10**6, 10**8])
        assert [row["amountIn"] for row in ladder] == [str(10**6), str(10**8)]
        assert int(ladder[0]["amountOut"]) < int(ladder[1]["amountOut"])

    def test_failed_quote_carries_error_code(self, client):
        ladder = fetch_ladder(client, "quote-in", [10**18, INIT_B])
        assert "amountIn" in ladder[0]
        assert ladder[1] == {"amount": str(INIT_B), "error": "InsufficientLiquidity"}
