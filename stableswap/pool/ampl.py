"""Time-ramped amplification coefficient."""

from __future__ import annotations

from dataclasses import dataclass

from stableswap.constants import AMPL_MAX_VALUE, AMPL_RAMP_MAX_CHANGE, AMPL_RAMP_MIN_TIME
from stableswap.errors import InvalidA, RampChangeTooLarge, RampTooShort
from stableswap.models.events import AmplRampUpdated


@dataclass(frozen=True)
class AmplificationRamp:
    """Linear ramp of A between two timestamps.

    Before ``start_timestamp`` the value is ``start``; from ``end_timestamp``
    on it is ``end``; in between it is interpolated and rounded down.
    """

    start: int
    end: int
    start_timestamp: int = 0
    end_timestamp: int = 0

    @classmethod
    def constant(cls, ampl: int) -> AmplificationRamp:
        if not 0 < ampl < AMPL_MAX_VALUE:
            raise InvalidA()
        return cls(start=ampl, end=ampl)

    def get_ampl(self, now: int) -> int:
        if now >= self.end_timestamp:
            return self.end
        if now <= self.start_timestamp:
            return self.start
        elapsed = now - self.start_timestamp
        duration = self.end_timestamp - self.start_timestamp
        if self.end > self.start:
            return self.start + (self.end - self.start) * elapsed // duration
        return self.start - (self.start - self.end) * elapsed // duration

    def ramp_to(
        self, new_ampl: int, end_timestamp: int, now: int
    ) -> tuple[AmplificationRamp, AmplRampUpdated]:
        """Start a new ramp from the current value.

        Returns:
            The new ramp and the event describing it

        Raises:
            InvalidA: If new_ampl is not in (0, AMPL_MAX_VALUE)
            RampTooShort: If the ramp ends less than a day from now
            RampChangeTooLarge: If new_ampl is more than 10x away from the current value
        """
        if not 0 < new_ampl < AMPL_MAX_VALUE:
            raise InvalidA()
        if end_timestamp < now + AMPL_RAMP_MIN_TIME:
            raise RampTooShort()
        current = self.get_ampl(now)
        if not (
            current <= new_ampl <= current * AMPL_RAMP_MAX_CHANGE
            or (new_ampl < current and new_ampl * AMPL_RAMP_MAX_CHANGE >= current)
        ):
            raise RampChangeTooLarge()

        ramp = AmplificationRamp(
            start=current, end=new_ampl, start_timestamp=now, end_timestamp=end_timestamp
        )
        event = AmplRampUpdated(
            start=current, end=new_ampl, start_timestamp=now, end_timestamp=end_timestamp
        )
        return ramp, event
