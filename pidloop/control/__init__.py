from .clock import Clock, MonotonicClock, ManualClock  # noqa: F401
from .pid import PIDController, PIDConfig, PIDState  # noqa: F401

__all__ = [
    "Clock",
    "MonotonicClock",
    "ManualClock",
    "PIDController",
    "PIDConfig",
    "PIDState",
]
