"""Tests for the execution context: clock, event log and rollback."""

import pytest
from structlog.testing import capture_logs

from stableswap.chain import Chain
from stableswap.collaborators.memory import InMemoryToken
from stableswap.models.events import Paused
from tests.helpers import USER1, USER2


class TestClock:
    def test_initial_timestamp(self):
        assert Chain(timestamp=5).timestamp == 5

    def test_negative_timestamp_raises(self):
        with pytest.raises(ValueError):
            Chain(timestamp=-1)

    def test_advance(self):
        chain = Chain(timestamp=100)
        assert chain.advance(50) == 150
        assert chain.timestamp == 150

    def test_set_timestamp_cannot_go_back(self):
        chain = Chain(timestamp=100)
        chain.set_timestamp(100)
        with pytest.raises(ValueError):
            chain.set_timestamp(99)


class TestEvents:
    def test_events_of_filters_by_type(self):
        chain = Chain()
        chain.emit(Paused(account=USER1))
        assert chain.events_of(Paused) == [Paused(account=USER1)]

    def test_emit_logs_event_fields(self):
        chain = Chain()
        with capture_logs() as logs:
            chain.emit(Paused(account=USER1))
        assert logs == [
            {
                "event": "event_emitted",
                "event_type": "Paused",
                "account": USER1,
                "log_level": "debug",
            }
        ]


class TestTransaction:
    """Tests for snapshot and restore of registered participants."""

    def test_success_keeps_changes(self):
        chain = Chain()
        token = InMemoryToken("T", chain=chain)
        with chain.transaction():
            token.mint(USER1, 5)
            chain.emit(Paused(account=USER1))
        assert token.balance_of(USER1) == 5
        assert len(chain.events) == 1

    def test_failure_restores_participants_and_events(self):
        chain = Chain()
        token = InMemoryToken("T", chain=chain)
        token.mint(USER1, 5)
        with pytest.raises(RuntimeError):
            with chain.transaction():
                token.transfer(USER1, USER2, 3)
                chain.emit(Paused(account=USER1))
                raise RuntimeError("boom")
        assert token.balance_of(USER1) == 5
        assert token.balance_of(USER2) == 0
        assert chain.events == []

    def test_inner_failure_only_undoes_inner_block(self):
        chain = Chain()
        token = InMemoryToken("T", chain=chain)
        with chain.transaction():
            token.mint(USER1, 1)
            with pytest.raises(RuntimeError):
                with chain.transaction():
                    token.mint(USER1, 10)
                    raise RuntimeError("inner")
            token.mint(USER1, 100)
        assert token.balance_of(USER1) == 101

    def test_register_requires_snapshot_support(self):
        with pytest.raises(TypeError):
            Chain().register(object())

    def test_register_is_idempotent(self):
        chain = Chain()
        token = InMemoryToken("T", chain=chain)
        chain.register(token)
        token.mint(USER1, 5)
        with pytest.raises(RuntimeError):
            with chain.transaction():
                token.mint(USER1, 1)
                raise RuntimeError("boom")
        assert token.balance_of(USER1) == 5
