"""
Rate keeping for the fixed-period autopilot tick.
Provides a monotonic wall-clock rate keeper for the run loop and bench targets.
"""

from __future__ import annotations

import time

from common.logger import get_logger

logger = get_logger("realtime")


def monotonic_time() -> float:
    """Return monotonic time in seconds."""
    return time.monotonic()


class RateKeeper:
    """
    Keep a loop running at a fixed period:
    - monitor_time(): advance the frame counter, return remaining time (negative if late)
    - keep_time(): call monitor_time() then sleep for the remaining time, if positive
    """

    def __init__(self, period: float, clock=monotonic_time, sleep=time.sleep, lag_threshold: float | None = 0.05):
        if period <= 0.0:
            raise ValueError("period must be positive")
        self.period = float(period)
        self.clock = clock
        self.sleep = sleep
        self.lag_threshold = lag_threshold
        self.frame = 0
        self._next = self.clock() + self.period

    @classmethod
    def from_rate(cls, rate_hz: float, **kwargs) -> "RateKeeper":
        if rate_hz <= 0.0:
            raise ValueError("rate_hz must be positive")
        return cls(1.0 / rate_hz, **kwargs)

    def monitor_time(self) -> float:
        now = self.clock()
        remaining = self._next - now
        if self.lag_threshold is not None and remaining < -self.lag_threshold:
            logger.warning(f"Tick {self.frame} lagging by {-remaining * 1000.0:.2f} ms")
            # Re-anchor so one slow tick does not trigger a burst of catch-up ticks
            self._next = now
        self._next += self.period
        self.frame += 1
        return remaining

    def keep_time(self) -> None:
        remaining = self.monitor_time()
        if remaining > 0.0:
            self.sleep(remaining)
