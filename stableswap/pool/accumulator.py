"""Time integral of the pool price over the oracle price."""

from collections.abc import Callable
from dataclasses import dataclass


@dataclass
class PriceOracleAccumulator:
    """Running sum of price_over_oracle * seconds.

    The integral only advances when time has passed since the last update,
    and each segment is weighted by the price that held during it, i.e. the
    price before the state change that triggers the update. Consumers derive
    a time-weighted average from two readings.
    """

    last_timestamp: int
    integral: int = 0

    def update(self, now: int, price_over_oracle: Callable[[], int]) -> None:
        """Close the segment ending at ``now``.

        ``price_over_oracle`` is only evaluated when the segment is non-empty.
        """
        if now > self.last_timestamp:
            self.integral += price_over_oracle() * (now - self.last_timestamp)
            self.last_timestamp = now

    def value_at(self, now: int, current_price_over_oracle: int) -> int:
        """Integral including the still-open segment."""
        return self.integral + current_price_over_oracle * max(0, now - self.last_timestamp)
