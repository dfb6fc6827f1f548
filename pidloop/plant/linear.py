from __future__ import annotations
import numpy as np
from scipy.linalg import expm
from .base import Plant, Array


class StateSpacePlant(Plant):
    """
    Continuous-time linear SISO plant in state-space form.

    x' = A x + B u
    y  = C x + D u

    The state is advanced with the exact zero-order-hold discretisation
    (input held constant over the step):
    Ad = exp(A dt),  Bd = ∫_0^dt exp(A s) ds B

    Both matrices are obtained from a single matrix exponential of the
    augmented matrix [[A, B], [0, 0]] * dt and cached per time step.

    Attributes:
        A: State matrix, shape (n, n).
        B: Input vector, shape (n,).
        C: Output vector, shape (n,).
        D: Feedthrough scalar.
        x0: Initial state, shape (n,).
        x: Current state.
    """

    def __init__(self, A, B, C, D: float = 0.0, x0=None) -> None:
        self.A = np.atleast_2d(np.asarray(A, dtype=float))
        n = self.A.shape[0]
        if self.A.shape != (n, n):
            raise ValueError(f"A must be square, got shape {self.A.shape}.")
        self.B = np.asarray(B, dtype=float).reshape(-1)
        self.C = np.asarray(C, dtype=float).reshape(-1)
        if self.B.size != n or self.C.size != n:
            raise ValueError(
                f"B and C must have {n} elements (got {self.B.size} and {self.C.size})."
            )
        self.D = float(D)
        self.x0 = np.zeros(n) if x0 is None else np.asarray(x0, dtype=float).reshape(-1)
        if self.x0.size != n:
            raise ValueError(f"x0 must have {n} elements, got {self.x0.size}.")
        self._zoh_cache: dict[float, tuple[Array, Array]] = {}
        super().__init__()

    def n_states(self) -> int:
        return self.A.shape[0]

    def state_names(self) -> list[str]:
        return [f"x{i}" for i in range(self.n_states())]

    def state_init(self) -> Array:
        return self.x0.copy()

    def discretize(self, dt: float) -> tuple[Array, Array]:
        """
        Return the ZOH-discretised (Ad, Bd) pair for the given step.

        Raises:
            ValueError: If dt is not strictly positive.
        """
        if dt <= 0:
            raise ValueError(f"Time step must be positive, got {dt}.")
        cached = self._zoh_cache.get(dt)
        if cached is not None:
            return cached
        n = self.n_states()
        M = np.zeros((n + 1, n + 1))
        M[:n, :n] = self.A
        M[:n, n] = self.B
        E = expm(M * dt)
        Ad, Bd = E[:n, :n], E[:n, n]
        self._zoh_cache[dt] = cached = (Ad, Bd)
        return cached

    def output(self, u: float = 0.0) -> float:
        return float(self.C @ self.x + self.D * u)

    def step(self, u: float, dt: float) -> None:
        Ad, Bd = self.discretize(dt)
        self.x = Ad @ self.x + Bd * u


class FirstOrderPlant(StateSpacePlant):
    """
    First-order lag: tau * y' = -y + gain * u.

    Typical model for thermal processes or a motor speed loop with negligible
    electrical dynamics.
    """

    def __init__(self, gain: float, tau: float, y0: float = 0.0) -> None:
        if tau <= 0:
            raise ValueError("tau must be positive.")
        self.gain = gain
        self.tau = tau
        super().__init__(A=[[-1.0 / tau]], B=[gain / tau], C=[1.0], x0=[y0])

    def state_names(self) -> list[str]:
        return ["y"]


class MassPlant(StateSpacePlant):
    """
    Point mass driven by a force with viscous damping: m x'' = u - b x'.

    States are [position, velocity]; the measured output is the position.
    """

    def __init__(self, mass: float, damping: float = 0.0,
                 x0: float = 0.0, v0: float = 0.0) -> None:
        if mass <= 0:
            raise ValueError("mass must be positive.")
        self.mass = mass
        self.damping = damping
        super().__init__(
            A=[[0.0, 1.0], [0.0, -damping / mass]],
            B=[0.0, 1.0 / mass],
            C=[1.0, 0.0],
            x0=[x0, v0],
        )

    def state_names(self) -> list[str]:
        return ["position", "velocity"]
