from __future__ import annotations
from abc import ABC, abstractmethod
import numpy as np

Array = np.ndarray


class Plant(ABC):
    """
    Abstract base class for single-input single-output process models.

    A plant is the process a controller acts on in a closed-loop simulation:
    it receives the control output u, evolves its internal state over a time
    step and exposes one measured output y.

    Subclasses must implement:
        - output: Current measured value y
        - step: Advance the state by dt under a constant input u

    Subclasses may optionally implement:
        - State metadata (n_states, state_names, state_init)
    """

    def __init__(self) -> None:
        self.x: Array = self.state_init()

    # ---- Stato interno ----
    def n_states(self) -> int: return 0
    def state_names(self) -> list[str]: return []
    def state_init(self) -> Array: return np.empty(0)

    @property
    def state(self) -> Array:
        return self.x.copy()

    def reset(self) -> None:
        """Restore the initial state."""
        self.x = self.state_init()

    @abstractmethod
    def output(self, u: float = 0.0) -> float: ...
    @abstractmethod
    def step(self, u: float, dt: float) -> None: ...
