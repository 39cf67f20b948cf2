"""Pool configuration."""

import os
from collections.abc import Mapping
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation

from stableswap.constants import AMPL_MAX_VALUE, MAX_ADMIN_FEE_RATE, MAX_FEE_RATE
from stableswap.errors import InvalidA, InvalidFeeRate
from stableswap.math.fixed_point import Bfp
from stableswap.models.types import normalize_address

ENV_PREFIX = "STABLESWAP_"

# Placeholder accounts used when no environment override is given
DEFAULT_OWNER = "0x00000000000000000000000000000000000000a1"
DEFAULT_FEE_COLLECTOR = "0x00000000000000000000000000000000000000fc"


@dataclass(frozen=True)
class PoolConfig:
    """Initial parameters of a pool.

    Rates are fractions (``Decimal("0.03")`` is 3%) and are converted to
    18-decimal fixed point when the pool is built. Governance may change the
    rates and the fee collector later; this object only seeds them.

    Attributes:
        owner: Account allowed to call privileged operations
        fee_collector: Account receiving collected admin fees
        ampl: Initial amplification coefficient
        fee_rate: Trading fee, at most 0.5
        admin_fee_rate: Share of the trading fee kept for the fee collector, at most 1
        trading_curb_threshold: Minimum NAV of R at which buying base and adding
            liquidity stay open; 0 disables the curb
    """

    owner: str = DEFAULT_OWNER
    fee_collector: str = DEFAULT_FEE_COLLECTOR
    ampl: int = 80
    fee_rate: Decimal = Decimal("0.0003")
    admin_fee_rate: Decimal = Decimal("0.5")
    trading_curb_threshold: Decimal = Decimal(0)

    def __post_init__(self) -> None:
        object.__setattr__(self, "owner", normalize_address(self.owner, validate=True))
        object.__setattr__(
            self, "fee_collector", normalize_address(self.fee_collector, validate=True)
        )
        if not 0 < self.ampl < AMPL_MAX_VALUE:
            raise InvalidA(f"Invalid A: {self.ampl}")
        if not 0 <= self.fee_rate_bfp.value <= MAX_FEE_RATE:
            raise InvalidFeeRate(f"Exceed max fee rate: {self.fee_rate}")
        if not 0 <= self.admin_fee_rate_bfp.value <= MAX_ADMIN_FEE_RATE:
            raise InvalidFeeRate(f"Exceed max admin fee rate: {self.admin_fee_rate}")
        if self.trading_curb_threshold < 0:
            raise ValueError(f"Negative trading curb threshold: {self.trading_curb_threshold}")

    @property
    def fee_rate_bfp(self) -> Bfp:
        return Bfp.from_decimal(self.fee_rate)

    @property
    def admin_fee_rate_bfp(self) -> Bfp:
        return Bfp.from_decimal(self.admin_fee_rate)

    @property
    def trading_curb_threshold_wei(self) -> int:
        return Bfp.from_decimal(self.trading_curb_threshold).value

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "PoolConfig":
        """Build a config from STABLESWAP_* environment variables.

        Recognized variables (all optional):
        - STABLESWAP_OWNER
        - STABLESWAP_FEE_COLLECTOR
        - STABLESWAP_AMPL
        - STABLESWAP_FEE_RATE (fraction, e.g. "0.0003")
        - STABLESWAP_ADMIN_FEE_RATE (fraction, e.g. "0.5")
        - STABLESWAP_TRADING_CURB_THRESHOLD (NAV of R, e.g. "0.35")

        Raises:
            ValueError: If a numeric variable cannot be parsed
        """
        env = os.environ if environ is None else environ
        defaults = cls()
        try:
            return cls(
                owner=env.get(f"{ENV_PREFIX}OWNER", defaults.owner),
                fee_collector=env.get(f"{ENV_PREFIX}FEE_COLLECTOR", defaults.fee_collector),
                ampl=int(env.get(f"{ENV_PREFIX}AMPL", str(defaults.ampl))),
                fee_rate=Decimal(env.get(f"{ENV_PREFIX}FEE_RATE", str(defaults.fee_rate))),
                admin_fee_rate=Decimal(
                    env.get(f"{ENV_PREFIX}ADMIN_FEE_RATE", str(defaults.admin_fee_rate))
                ),
                trading_curb_threshold=Decimal(
                    env.get(
                        f"{ENV_PREFIX}TRADING_CURB_THRESHOLD", str(defaults.trading_curb_threshold)
                    )
                ),
            )
        except InvalidOperation as err:
            raise ValueError(f"Invalid decimal in {ENV_PREFIX}* environment: {err}") from err


# Default configuration instance
DEFAULT_POOL_CONFIG = PoolConfig()
