"""Test helpers module for shared test utilities.

- constants: Accounts, pool parameters and seed amounts
- factories: Deployment factories and settlement callees
"""

from tests.helpers.constants import (
    ADMIN_FEE_RATE,
    ADMIN_FEE_RATE_WEI,
    AMPL,
    DAY,
    FEE_COLLECTOR,
    FEE_RATE,
    FEE_RATE_WEI,
    INIT_B,
    INIT_LP,
    INIT_USDC,
    OWNER,
    START_TIME,
    UNIT,
    USDC_MULTIPLIER,
    USER1,
    USER2,
    USER3,
    WEEK,
)
from tests.helpers.factories import PayingCallee, make_config, make_deployment, ratios

__all__ = [
    # Constants
    "UNIT",
    "OWNER",
    "FEE_COLLECTOR",
    "USER1",
    "USER2",
    "USER3",
    "AMPL",
    "FEE_RATE",
    "ADMIN_FEE_RATE",
    "FEE_RATE_WEI",
    "ADMIN_FEE_RATE_WEI",
    "USDC_MULTIPLIER",
    "INIT_B",
    "INIT_USDC",
    "INIT_LP",
    "START_TIME",
    "DAY",
    "WEEK",
    # Factories
    "make_config",
    "make_deployment",
    "ratios",
    "PayingCallee",
]
