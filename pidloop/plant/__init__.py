"""
Process models used to close the loop around a controller in simulation.
"""

from .base import Plant  # noqa: F401
from .linear import StateSpacePlant, FirstOrderPlant, MassPlant  # noqa: F401

__all__ = [
    "Plant",
    "StateSpacePlant",
    "FirstOrderPlant",
    "MassPlant",
]
