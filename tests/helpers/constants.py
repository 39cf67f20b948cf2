"""Shared constants for pool tests.

Amounts mirror a 100k/100k pool of an 18-decimal base tranche against a
6-decimal stablecoin, A=80, 3% fee with 40% of it kept as admin fee.

Usage:
    from tests.helpers import INIT_B, INIT_USDC, USER1
"""

from decimal import Decimal

UNIT = 10**18

# =============================================================================
# Accounts (lowercase, as returned by normalize_address())
# =============================================================================

OWNER = "0x000000000000000000000000000000000000a11c"
FEE_COLLECTOR = "0x000000000000000000000000000000000000fee0"
USER1 = "0x1111111111111111111111111111111111111111"
USER2 = "0x2222222222222222222222222222222222222222"
USER3 = "0x3333333333333333333333333333333333333333"

# =============================================================================
# Pool parameters
# =============================================================================

AMPL = 80
FEE_RATE = Decimal("0.03")
ADMIN_FEE_RATE = Decimal("0.4")
FEE_RATE_WEI = 3 * 10**16
ADMIN_FEE_RATE_WEI = 4 * 10**17

USDC_DECIMALS = 6
USDC_MULTIPLIER = 10**12

# =============================================================================
# Seed balances
# =============================================================================

INIT_B = 100_000 * UNIT
INIT_USDC = 100_000 * 10**6
# D of a balanced pool is the sum of its values
INIT_LP = 200_000 * UNIT

# =============================================================================
# Time
# =============================================================================

START_TIME = 1_700_000_000
DAY = 86400
WEEK = 7 * DAY
