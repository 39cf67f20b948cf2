"""In-memory collaborators.

Minimal ledgers that satisfy the collaborator protocols so a pool can run
end to end in tests and in the local API service. Each one registers with
the Chain it is given so failed pool calls roll it back too.
"""

from __future__ import annotations

import copy
from dataclasses import dataclass, field
from typing import Any

import structlog

from stableswap.chain import Chain
from stableswap.constants import TRANCHE_B, TRANCHE_Q, TRANCHE_R, UNIT
from stableswap.errors import InsufficientBalance, InvalidOraclePrice, WrongVersion
from stableswap.math.fixed_point import multiply_decimal
from stableswap.models.types import normalize_address

logger = structlog.get_logger()


class _Snapshotting:
    """Deep-copies instance state listed in _state_fields."""

    _state_fields: tuple[str, ...] = ()

    def snapshot(self) -> dict[str, Any]:
        return {name: copy.deepcopy(getattr(self, name)) for name in self._state_fields}

    def restore(self, state: dict[str, Any]) -> None:
        for name, value in state.items():
            setattr(self, name, value)


class InMemoryToken(_Snapshotting):
    """Fungible token with free minting."""

    _state_fields = ("_balances",)

    def __init__(self, symbol: str, decimals: int = 18, chain: Chain | None = None) -> None:
        if not 0 <= decimals <= 18:
            raise ValueError(f"Token decimals must be in [0, 18], got {decimals}")
        self.symbol = symbol
        self._decimals = decimals
        self._balances: dict[str, int] = {}
        if chain is not None:
            chain.register(self)

    @property
    def decimals(self) -> int:
        return self._decimals

    def balance_of(self, account: str) -> int:
        return self._balances.get(normalize_address(account), 0)

    def mint(self, account: str, amount: int) -> None:
        account = normalize_address(account)
        self._balances[account] = self._balances.get(account, 0) + amount

    def transfer(self, sender: str, recipient: str, amount: int) -> None:
        sender = normalize_address(sender)
        recipient = normalize_address(recipient)
        balance = self._balances.get(sender, 0)
        if balance < amount:
            raise InsufficientBalance(f"{self.symbol}: transfer amount exceeds balance")
        self._balances[sender] = balance - amount
        self._balances[recipient] = self._balances.get(recipient, 0) + amount


@dataclass(frozen=True)
class RebalanceRatios:
    """Conversion factors of one rebalance, 18 decimals.

    After the rebalance an account holding (q, b, r) holds
    (q + b * ratio_b2q + r * ratio_r2q, b * ratio_br, r * ratio_br).
    """

    ratio_b2q: int
    ratio_r2q: int
    ratio_br: int


class InMemoryFund(_Snapshotting):
    """Tranche ledger with lazily rebased per-account balances."""

    _state_fields = ("_balances", "_versions", "_rebalances", "_navs")

    def __init__(
        self,
        chain: Chain | None = None,
        primary_market: InMemoryPrimaryMarket | None = None,
    ) -> None:
        self._balances: dict[str, list[int]] = {}
        self._versions: dict[str, int] = {}
        self._rebalances: list[RebalanceRatios] = []
        self._navs = (2 * UNIT, UNIT, UNIT)
        self._primary_market = primary_market or InMemoryPrimaryMarket(self)
        if chain is not None:
            chain.register(self)

    @property
    def primary_market(self) -> InMemoryPrimaryMarket:
        return self._primary_market

    def get_rebalance_size(self) -> int:
        return len(self._rebalances)

    def extrapolate_nav(self) -> tuple[int, int, int]:
        return self._navs

    def set_navs(self, nav_b: int, nav_r: int) -> None:
        self._navs = (nav_b + nav_r, nav_b, nav_r)

    def do_rebalance(
        self, amount_q: int, amount_b: int, amount_r: int, index: int
    ) -> tuple[int, int, int]:
        r = self._rebalances[index]
        new_q = (
            amount_q
            + multiply_decimal(amount_b, r.ratio_b2q)
            + multiply_decimal(amount_r, r.ratio_r2q)
        )
        return new_q, multiply_decimal(amount_b, r.ratio_br), multiply_decimal(amount_r, r.ratio_br)

    def batch_rebalance(
        self, amount_q: int, amount_b: int, amount_r: int, from_index: int, to_index: int
    ) -> tuple[int, int, int]:
        for index in range(from_index, to_index):
            amount_q, amount_b, amount_r = self.do_rebalance(amount_q, amount_b, amount_r, index)
        return amount_q, amount_b, amount_r

    def trigger_rebalance(self, ratios: RebalanceRatios) -> int:
        """Append a rebalance and return the new version."""
        self._rebalances.append(ratios)
        logger.info(
            "fund_rebalanced",
            version=len(self._rebalances),
            ratio_b2q=ratios.ratio_b2q,
            ratio_r2q=ratios.ratio_r2q,
            ratio_br=ratios.ratio_br,
        )
        return len(self._rebalances)

    def tranche_balance_of(self, tranche: int, account: str) -> int:
        account = normalize_address(account)
        balances = self._balances.get(account)
        if balances is None:
            return 0
        rebased = self.batch_rebalance(*balances, self._versions[account], len(self._rebalances))
        return rebased[tranche]

    def tranche_transfer(
        self, tranche: int, sender: str, recipient: str, amount: int, version: int
    ) -> None:
        self._check_version(version)
        sender_balances = self._refresh(sender)
        recipient_balances = self._refresh(recipient)
        if sender_balances[tranche] < amount:
            raise InsufficientBalance(f"Tranche {tranche}: transfer amount exceeds balance")
        sender_balances[tranche] -= amount
        recipient_balances[tranche] += amount

    def mint_tranche(
        self, tranche: int, account: str, amount: int, version: int | None = None
    ) -> None:
        self._check_version(self.get_rebalance_size() if version is None else version)
        self._refresh(account)[tranche] += amount

    def burn_tranche(self, tranche: int, account: str, amount: int, version: int) -> None:
        self._check_version(version)
        balances = self._refresh(account)
        if balances[tranche] < amount:
            raise InsufficientBalance(f"Tranche {tranche}: burn amount exceeds balance")
        balances[tranche] -= amount

    def _check_version(self, version: int) -> None:
        if version != len(self._rebalances):
            raise WrongVersion()

    def _refresh(self, account: str) -> list[int]:
        account = normalize_address(account)
        latest = len(self._rebalances)
        balances = self._balances.setdefault(account, [0, 0, 0])
        version = self._versions.get(account, latest)
        if version != latest:
            balances[:] = self.batch_rebalance(*balances, version, latest)
        self._versions[account] = latest
        return balances


class InMemoryPrimaryMarket:
    """Splits Q into equal amounts of B and R at a fixed ratio."""

    def __init__(self, fund: InMemoryFund, split_ratio: int = UNIT) -> None:
        self._fund = fund
        self.split_ratio = split_ratio

    def get_split(self, in_q: int) -> int:
        return multiply_decimal(in_q, self.split_ratio)

    def split(self, recipient: str, in_q: int, version: int) -> int:
        out_b = self.get_split(in_q)
        self._fund.burn_tranche(TRANCHE_Q, recipient, in_q, version)
        self._fund.mint_tranche(TRANCHE_B, recipient, out_b, version)
        self._fund.mint_tranche(TRANCHE_R, recipient, out_b, version)
        return out_b


@dataclass(frozen=True)
class Distribution:
    """Assets handed to share holders at one rebalance version."""

    amount_q: int
    amount_b: int
    amount_r: int
    quote_amount: int
    total_supply: int
    balances: dict[str, int] = field(default_factory=dict)


class InMemoryShareLedger(_Snapshotting):
    """Pool share token plus per-version rebalance distributions."""

    _state_fields = ("_balances", "_total_supply", "distributions")

    def __init__(self, address: str, chain: Chain | None = None) -> None:
        self._address = normalize_address(address, validate=True)
        self._balances: dict[str, int] = {}
        self._total_supply = 0
        self.distributions: dict[int, Distribution] = {}
        if chain is not None:
            chain.register(self)

    @property
    def address(self) -> str:
        return self._address

    def total_supply(self) -> int:
        return self._total_supply

    def balance_of(self, account: str) -> int:
        return self._balances.get(normalize_address(account), 0)

    def mint(self, account: str, amount: int) -> None:
        account = normalize_address(account)
        self._balances[account] = self._balances.get(account, 0) + amount
        self._total_supply += amount

    def burn_from(self, account: str, amount: int) -> None:
        account = normalize_address(account)
        balance = self._balances.get(account, 0)
        if balance < amount:
            raise InsufficientBalance("Burn amount exceeds balance")
        self._balances[account] = balance - amount
        self._total_supply -= amount

    def distribute(
        self, amount_q: int, amount_b: int, amount_r: int, quote_amount: int, version: int
    ) -> None:
        self.distributions[version] = Distribution(
            amount_q=amount_q,
            amount_b=amount_b,
            amount_r=amount_r,
            quote_amount=quote_amount,
            total_supply=self._total_supply,
            balances=dict(self._balances),
        )

    def claimable(self, account: str, version: int) -> tuple[int, int, int, int]:
        """Pro-rata share of a distribution as (q, b, r, quote)."""
        dist = self.distributions.get(version)
        if dist is None or dist.total_supply == 0:
            return 0, 0, 0, 0
        balance = dist.balances.get(normalize_address(account), 0)
        return (
            dist.amount_q * balance // dist.total_supply,
            dist.amount_b * balance // dist.total_supply,
            dist.amount_r * balance // dist.total_supply,
            dist.quote_amount * balance // dist.total_supply,
        )


class StaticPriceOracle:
    """Price source returning a settable constant."""

    def __init__(self, price: int = UNIT) -> None:
        self.set_price(price)

    def set_price(self, price: int) -> None:
        if price <= 0:
            raise InvalidOraclePrice(f"Invalid oracle price: {price}")
        self._price = price

    def get_price(self) -> int:
        return self._price
