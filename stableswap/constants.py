"""Pool parameters and well-known addresses.

Centralizes the fixed-point unit, solver limits and governance bounds
shared by the pool components.
"""

from stableswap.models.types import is_valid_address

# 18-decimal fixed-point unit
UNIT = 10**18

# Newton-Raphson iteration cap for the invariant and balance solvers
MAX_ITERATION = 255

# Amplification coefficient bounds (exclusive upper bound)
AMPL_MAX_VALUE = 10**6
AMPL_RAMP_MIN_TIME = 86400
AMPL_RAMP_MAX_CHANGE = 10

# Governance bounds for fee rates (18-decimal)
MAX_FEE_RATE = UNIT // 2
MAX_ADMIN_FEE_RATE = UNIT

# Shares locked forever on the first deposit
MINIMUM_LIQUIDITY = 1000

# Fund tranche indices
TRANCHE_Q = 0
TRANCHE_B = 1
TRANCHE_R = 2


def _validate_address(name: str, address: str) -> str:
    """Validate and return a well-known address.

    Raises:
        ValueError: If the address is invalid
    """
    if not is_valid_address(address):
        raise ValueError(f"Invalid {name} address: {address} (must be 0x + 40 hex chars)")
    return address


# Receives the locked first-deposit shares
BURN_ADDRESS = _validate_address("burn", "0x000000000000000000000000000000000000dead")
