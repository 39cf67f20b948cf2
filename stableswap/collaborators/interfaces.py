"""Collaborator interfaces.

The pool never owns token ledgers, the fund or the price source. It talks to
them through these protocols. Any object with matching methods works, which
keeps tests free to inject fakes the same way the API injects a pool.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from stableswap.pool.stable_swap import StableSwapPool


@runtime_checkable
class PrimaryMarket(Protocol):
    """Creates B and R tranche tokens from Q."""

    def get_split(self, in_q: int) -> int:
        """Amount of B (and of R) produced by splitting in_q of Q."""
        ...

    def split(self, recipient: str, in_q: int, version: int) -> int:
        """Burn in_q of the recipient's Q and mint B and R to it."""
        ...


@runtime_checkable
class Fund(Protocol):
    """Tranche ledger that rebases balances at each rebalance."""

    @property
    def primary_market(self) -> PrimaryMarket: ...

    def get_rebalance_size(self) -> int:
        """Number of rebalances so far; the latest rebalance version."""
        ...

    def extrapolate_nav(self) -> tuple[int, int, int]:
        """Current net asset values (total, B, R), 18 decimals."""
        ...

    def tranche_balance_of(self, tranche: int, account: str) -> int:
        """Balance of an account, rebased to the latest version."""
        ...

    def tranche_transfer(
        self, tranche: int, sender: str, recipient: str, amount: int, version: int
    ) -> None: ...

    def batch_rebalance(
        self, amount_q: int, amount_b: int, amount_r: int, from_index: int, to_index: int
    ) -> tuple[int, int, int]:
        """Project tranche amounts across rebalances [from_index, to_index)."""
        ...


@runtime_checkable
class QuoteToken(Protocol):
    @property
    def decimals(self) -> int: ...

    def balance_of(self, account: str) -> int: ...

    def transfer(self, sender: str, recipient: str, amount: int) -> None: ...


@runtime_checkable
class ShareLedger(Protocol):
    """Pool share token that also receives rebalance distributions."""

    @property
    def address(self) -> str: ...

    def total_supply(self) -> int: ...

    def balance_of(self, account: str) -> int: ...

    def mint(self, account: str, amount: int) -> None: ...

    def burn_from(self, account: str, amount: int) -> None: ...

    def distribute(
        self, amount_q: int, amount_b: int, amount_r: int, quote_amount: int, version: int
    ) -> None:
        """Record assets removed from the pool by a rebalance, for pro-rata claims."""
        ...


@runtime_checkable
class PriceOracle(Protocol):
    def get_price(self) -> int:
        """Price of one base unit in quote terms, 18 decimals."""
        ...


@dataclass(frozen=True)
class SettleRequest:
    """What the pool has sent out and expects to be paid for.

    Passed to the callee between the optimistic transfer and the final
    invariant check.
    """

    pool: StableSwapPool
    version: int
    base_out: int
    quote_out: int
    recipient: str
    data: bytes


@runtime_checkable
class SwapCallee(Protocol):
    def settle(self, request: SettleRequest) -> None:
        """Pay the pool for the output already transferred."""
        ...
