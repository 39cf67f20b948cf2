"""Mutable pool state.

Everything a failed call must be able to undo lives in PoolState, so the
pool snapshots it as one value. Stored balances belong to the rebalance
generation in ``rebalance_version``; they are only meaningful for that
version and must be projected through the rebalance sync before use once the
fund has moved on.
"""

from __future__ import annotations

from dataclasses import dataclass

from stableswap.errors import Unauthorized
from stableswap.math.fixed_point import Bfp
from stableswap.models.types import normalize_address
from stableswap.pool.accumulator import PriceOracleAccumulator
from stableswap.pool.ampl import AmplificationRamp


@dataclass
class AccessControl:
    """Single-owner permission check."""

    owner: str

    def require_owner(self, sender: str) -> None:
        if normalize_address(sender) != self.owner:
            raise Unauthorized()

    def transfer_ownership(self, sender: str, new_owner: str) -> None:
        self.require_owner(sender)
        self.owner = normalize_address(new_owner, validate=True)


@dataclass
class PoolState:
    access: AccessControl
    ramp: AmplificationRamp
    accumulator: PriceOracleAccumulator
    fee_rate: Bfp
    admin_fee_rate: Bfp
    fee_collector: str
    rebalance_version: int
    base_balance: int = 0
    quote_balance: int = 0
    total_admin_fee: int = 0
    paused: bool = False
