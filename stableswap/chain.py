"""Execution context shared by a pool and its in-process collaborators.

A Chain supplies the block timestamp, keeps the event log and makes every
mutating call atomic: ``transaction()`` snapshots each registered participant
and restores all of them, and truncates the log, if the body raises.
"""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any, Protocol, TypeVar, runtime_checkable

import structlog

from stableswap.models.events import PoolEvent

logger = structlog.get_logger()

E = TypeVar("E", bound=PoolEvent)


@runtime_checkable
class Snapshottable(Protocol):
    """State holder that can be rolled back by a transaction."""

    def snapshot(self) -> Any:
        """Return an opaque copy of the current state."""
        ...

    def restore(self, state: Any) -> None:
        """Replace the current state with a snapshot."""
        ...


class Chain:
    """Timestamp source, event log and rollback scope.

    Timestamps only move forward. Participants register once and are
    snapshotted on entry to every transaction; nested transactions each keep
    their own snapshot so an inner failure caught by the caller only undoes
    the inner call.
    """

    def __init__(self, timestamp: int = 0) -> None:
        if timestamp < 0:
            raise ValueError(f"Timestamp cannot be negative: {timestamp}")
        self._timestamp = timestamp
        self._participants: list[Snapshottable] = []
        self.events: list[PoolEvent] = []

    @property
    def timestamp(self) -> int:
        return self._timestamp

    def set_timestamp(self, timestamp: int) -> None:
        """Move the clock to an absolute timestamp.

        Raises:
            ValueError: If the timestamp is earlier than the current one
        """
        if timestamp < self._timestamp:
            raise ValueError(f"Timestamp cannot decrease: {timestamp} < {self._timestamp}")
        self._timestamp = timestamp

    def advance(self, seconds: int) -> int:
        """Move the clock forward and return the new timestamp."""
        self.set_timestamp(self._timestamp + seconds)
        return self._timestamp

    def register(self, participant: Snapshottable) -> None:
        if not isinstance(participant, Snapshottable):
            raise TypeError(f"{type(participant).__name__} cannot be snapshotted")
        if participant not in self._participants:
            self._participants.append(participant)

    def emit(self, event: PoolEvent) -> None:
        self.events.append(event)
        logger.debug("event_emitted", event_type=event.name, **event.model_dump())

    def events_of(self, event_type: type[E]) -> list[E]:
        """Events of a given type, oldest first."""
        return [e for e in self.events if isinstance(e, event_type)]

    @contextmanager
    def transaction(self) -> Iterator[None]:
        """Run a block atomically.

        Raises:
            Whatever the block raised, after every participant is restored
        """
        snapshots = [(p, p.snapshot()) for p in self._participants]
        event_count = len(self.events)
        try:
            yield
        except BaseException:
            for participant, state in reversed(snapshots):
                participant.restore(state)
            del self.events[event_count:]
            raise
