"""
Top-level namespace for pidloop.

The package is organised in three subpackages:
- pidloop.control: the discrete-time PID controller and its time sources.
- pidloop.plant: linear process models used to close the loop in simulation.
- pidloop.solver: fixed-rate closed-loop simulation of controller and plant.
"""

from . import control  # noqa: F401
from . import plant  # noqa: F401
from . import solver  # noqa: F401
from .control import PIDController, PIDConfig, ManualClock, MonotonicClock  # noqa: F401

__all__ = [
    "control",
    "plant",
    "solver",
    "PIDController",
    "PIDConfig",
    "ManualClock",
    "MonotonicClock",
]
