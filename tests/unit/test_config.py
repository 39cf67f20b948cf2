"""Tests for pool configuration."""

from decimal import Decimal

import pytest

from stableswap.config import DEFAULT_FEE_COLLECTOR, DEFAULT_OWNER, PoolConfig
from stableswap.errors import InvalidA, InvalidFeeRate


class TestPoolConfig:
    def test_defaults(self):
        config = PoolConfig()
        assert config.owner == DEFAULT_OWNER
        assert config.fee_collector == DEFAULT_FEE_COLLECTOR
        assert config.ampl == 80
        assert config.fee_rate_bfp.value == 3 * 10**14
        assert config.admin_fee_rate_bfp.value == 5 * 10**17
        assert config.trading_curb_threshold_wei == 0

    def test_addresses_are_normalized(self):
        config = PoolConfig(owner="0x" + "AB" * 20)
        assert config.owner == "0x" + "ab" * 20

    def test_invalid_address_raises(self):
        with pytest.raises(ValueError):
            PoolConfig(fee_collector="not-an-address")

    @pytest.mark.parametrize("ampl", [0, 10**6])
    def test_invalid_ampl_raises(self, ampl):
        with pytest.raises(InvalidA):
            PoolConfig(ampl=ampl)

    def test_fee_rate_bounds(self):
        PoolConfig(fee_rate=Decimal("0.5"), admin_fee_rate=Decimal("1"))
        with pytest.raises(InvalidFeeRate):
            PoolConfig(fee_rate=Decimal("0.51"))
        with pytest.raises(InvalidFeeRate):
            PoolConfig(admin_fee_rate=Decimal("1.01"))

    def test_trading_curb_threshold(self):
        config = PoolConfig(trading_curb_threshold=Decimal("0.35"))
        assert config.trading_curb_threshold_wei == 35 * 10**16
        with pytest.raises(ValueError):
            PoolConfig(trading_curb_threshold=Decimal("-0.01"))

    def test_is_frozen(self):
        config = PoolConfig()
        with pytest.raises(AttributeError):
            config.ampl = 100  # type: ignore[misc]


class TestFromEnv:
    def test_empty_environment_gives_defaults(self):
        assert PoolConfig.from_env({}) == PoolConfig()

    def test_reads_variables(self):
        config = PoolConfig.from_env(
            {
                "STABLESWAP_OWNER": "0x" + "11" * 20,
                "STABLESWAP_FEE_COLLECTOR": "0x" + "22" * 20,
                "STABLESWAP_AMPL": "200",
                "STABLESWAP_FEE_RATE": "0.03",
                "STABLESWAP_ADMIN_FEE_RATE": "0.4",
                "STABLESWAP_TRADING_CURB_THRESHOLD": "0.35",
            }
        )
        assert config.owner == "0x" + "11" * 20
        assert config.fee_collector == "0x" + "22" * 20
        assert config.ampl == 200
        assert config.fee_rate_bfp.value == 3 * 10**16
        assert config.admin_fee_rate_bfp.value == 4 * 10**17
        assert config.trading_curb_threshold_wei == 35 * 10**16

    def test_reads_process_environment(self, monkeypatch):
        monkeypatch.setenv("STABLESWAP_AMPL", "150")
        assert PoolConfig.from_env().ampl == 150

    def test_bad_decimal_raises(self):
        with pytest.raises(ValueError):
            PoolConfig.from_env({"STABLESWAP_FEE_RATE": "three percent"})

    def test_bad_integer_raises(self):
        with pytest.raises(ValueError):
            PoolConfig.from_env({"STABLESWAP_AMPL": "eighty"})
