from __future__ import annotations
from dataclasses import dataclass
import logging
from typing import Callable, Union
import numpy as np
from ..control.clock import ManualClock
from ..control.pid import PIDController
from ..plant.base import Plant

Array = np.ndarray
Signal = Union[float, Callable[[float], float]]

_LOGGER = logging.getLogger(__name__)


@dataclass
class LoopResult:
    """
    Results from a closed-loop simulation.

    All arrays share the same length N+1, one sample per control update.

    Attributes:
        t: Sample times.
        setpoint: Reference value at each sample.
        measured: Plant output measured at each sample (before the update).
        output: Controller output computed at each sample.
        saturated: Controller saturation flag after each update.
        integral: Controller integral accumulator after each update.
    """
    t: Array
    setpoint: Array
    measured: Array
    output: Array
    saturated: Array
    integral: Array

    SERIES = ("setpoint", "measured", "output", "saturated", "integral")

    def series(self, name: str) -> tuple[Array, Array]:
        """
        Return the time history of a recorded signal.
        """
        if name not in self.SERIES:
            raise KeyError(f"Series '{name}' not found.")
        return self.t, getattr(self, name)

    @property
    def error(self) -> Array:
        return self.setpoint - self.measured

    def overshoot(self) -> float:
        """
        Peak overshoot as a fraction of the step from the initial measurement
        to the final setpoint. Returns 0.0 if the response never overshoots or
        the step size is zero.
        """
        y0 = self.measured[0]
        r = self.setpoint[-1]
        step = r - y0
        if step == 0:
            return 0.0
        peak = np.max((self.measured - y0) / step)
        return float(max(peak - 1.0, 0.0))

    def steady_state_error(self, window: float = 0.1) -> float:
        """
        Mean absolute error over the trailing `window` fraction of the run.
        """
        if not 0.0 < window <= 1.0:
            raise ValueError("window must be in (0, 1].")
        n = max(int(np.ceil(window * self.t.size)), 1)
        return float(np.mean(np.abs(self.error[-n:])))

    def saturated_fraction(self) -> float:
        return float(np.mean(self.saturated))


def _as_signal(value: Signal) -> Callable[[float], float]:
    if callable(value):
        return value
    return lambda _t, v=float(value): v


def run_closed_loop(
    controller: PIDController,
    plant: Plant,
    setpoint: Signal,
    t_stop: float,
    dt: float,
    disturbance: Callable[[float], float] | None = None,
) -> LoopResult:
    """
    Simulate a PID controller regulating a plant with a fixed sampling period.

    At each sample t_k = k*dt (k = 0..N, N = round(t_stop/dt)):
    - the plant output y_k is measured,
    - the controller computes u_k = update(r(t_k), y_k),
    - the plant is advanced by dt with the input u_k + d(t_k) held constant,
    - the controller clock is advanced by dt.

    The controller must run on a ManualClock so that the simulated time drives
    its integral and derivative terms. The first sample is the controller's
    baseline update: unless the controller has been used before, its output is
    the previous output (0.0 for a new controller).

    Args:
        controller: PIDController instance using a ManualClock.
        plant: Plant to regulate. It is stepped in place, not reset.
        setpoint: Constant reference or function of time r(t).
        t_stop: Simulation end time (seconds).
        dt: Sampling period (seconds).
        disturbance: Optional input disturbance d(t) added to the control output
            before it reaches the plant.

    Returns:
        LoopResult with the sampled signals.

    Raises:
        ValueError: If the controller clock is not a ManualClock, t_stop is
            negative or dt is not positive.
    """
    clock = controller.clock
    if not isinstance(clock, ManualClock):
        raise ValueError("run_closed_loop requires a controller driven by a ManualClock.")
    if t_stop < 0:
        raise ValueError(f"t_stop must be non-negative, got {t_stop}.")
    if dt <= 0:
        raise ValueError(f"dt must be positive, got {dt}.")

    r_fun = _as_signal(setpoint)
    d_fun = disturbance if disturbance is not None else (lambda _t: 0.0)

    N = int(round(t_stop / dt))
    t = np.linspace(0.0, N * dt, N + 1)
    r = np.zeros(N + 1)
    y = np.zeros(N + 1)
    u = np.zeros(N + 1)
    sat = np.zeros(N + 1, dtype=bool)
    integ = np.zeros(N + 1)

    _LOGGER.debug("Closed-loop run: %d samples, dt=%g s, plant=%s",
                  N + 1, dt, type(plant).__name__)

    for k in range(N + 1):
        r[k] = r_fun(t[k])
        y[k] = plant.output()
        u[k] = controller.update(r[k], y[k])
        state = controller.snapshot()
        sat[k] = state.saturated
        integ[k] = state.integral

        if k > 0 and sat[k] != sat[k - 1]:
            _LOGGER.debug("Saturation %s at t=%.6g s (u=%g)",
                          "entered" if sat[k] else "left", t[k], u[k])

        if k < N:
            plant.step(u[k] + d_fun(t[k]), dt)
            clock.advance(dt)

    _LOGGER.debug("Closed-loop run finished: final y=%g, final u=%g", y[-1], u[-1])

    return LoopResult(t=t, setpoint=r, measured=y, output=u,
                      saturated=sat, integral=integ)
