from __future__ import annotations
from abc import ABC, abstractmethod
import time


class Clock(ABC):
    """
    Time source used by the controllers to measure the interval between updates.

    Implementations return a time in seconds. Only differences between two
    readings are meaningful, so the origin is arbitrary.
    """

    @abstractmethod
    def now(self) -> float: ...


class MonotonicClock(Clock):
    """Clock backed by `time.monotonic()` (default for real control loops)."""

    def now(self) -> float:
        return time.monotonic()


class ManualClock(Clock):
    """
    Deterministic clock advanced explicitly by the caller.

    Used by the closed-loop simulator and by tests, so that elapsed-time
    dependent terms (integral, derivative) can be driven without sleeping.
    The clock is allowed to move backwards.

    Attributes:
        t: Current time reading in seconds.
    """

    def __init__(self, start: float = 0.0) -> None:
        self.t = float(start)

    def now(self) -> float:
        return self.t

    def advance(self, dt: float) -> float:
        """Move the clock by `dt` seconds and return the new reading."""
        self.t += dt
        return self.t

    def set(self, t: float) -> None:
        self.t = float(t)
