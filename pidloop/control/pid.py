from __future__ import annotations
from dataclasses import dataclass
from .clock import Clock, MonotonicClock


@dataclass
class PIDConfig:
    """
    Configuration parameters for a PID controller.

    Attributes:
        kp: Proportional gain.
        ki: Integral gain.
        kd: Derivative gain.
        min_output: Lower saturation limit of the control output.
        max_output: Upper saturation limit of the control output.
        deadband: Errors with magnitude strictly below this threshold are
            ignored (default: 0.0, no deadband).
        anti_windup: Freeze the integral while the output is saturated in the
            direction of the error (default: False).
    """
    kp: float
    ki: float
    kd: float
    min_output: float
    max_output: float
    deadband: float = 0.0
    anti_windup: bool = False


@dataclass(frozen=True)
class PIDState:
    """Snapshot of the controller internal state."""
    prev_error: float
    integral: float
    last_time: float | None    # None prima del primo update
    last_output: float
    saturated: bool


class PIDController:
    """
    Discrete-time PID controller with deadband, output saturation and anti-windup.

    The control law evaluated at every update is:
    u_k = Kp * e_k + Ki * I_{k-1} + Kd * (e_k - e_{k-1}) / dt_k

    where the error integral is accumulated with the trapezoidal rule:
    I_k = I_{k-1} + 0.5 * dt_k * (e_k + e_{k-1})

    The integral term applied at step k uses the accumulator as it was after
    step k-1; the value accumulated at step k only affects the next output.
    The elapsed time dt_k is read from the controller clock, so the update rate
    may vary between calls.

    The output is clamped to [min_output, max_output]. The controller is flagged
    as saturated when the output is clamped on the side the error is pushing
    towards (upper limit with positive error, lower limit with negative error).
    With anti-windup enabled the accumulator does not advance while saturated.

    No parameter validation is performed and no exception is raised: non-finite
    inputs propagate to the output. Instances are not thread-safe; each control
    loop owns one controller.

    Attributes:
        kp, ki, kd: Controller gains.
        min_output: Lower output limit.
        max_output: Upper output limit.
        deadband: Error magnitude below which the previous output is held.
        anti_windup: Enable conditional integration while saturated.
        clock: Time source used to measure the update interval.
    """

    def __init__(self, kp: float, ki: float, kd: float,
                 min_output: float, max_output: float,
                 deadband: float = 0.0, anti_windup: bool = False,
                 clock: Clock | None = None) -> None:
        """
        Initialize the PID controller.

        Args:
            kp: Proportional gain.
            ki: Integral gain.
            kd: Derivative gain.
            min_output: Minimum output value.
            max_output: Maximum output value. Expected >= min_output.
            deadband: Error threshold below which no corrective action is taken.
            anti_windup: If True, the integral is frozen while the output is
                saturated in the direction of the error.
            clock: Time source. Defaults to a MonotonicClock.
        """
        self.kp = kp
        self.ki = ki
        self.kd = kd
        self.min_output = min_output
        self.max_output = max_output
        self.deadband = deadband
        self.anti_windup = anti_windup
        self.clock = clock if clock is not None else MonotonicClock()

        self._saturated = False
        self._prev_error = 0.0
        self._integral = 0.0
        self._last_time: float | None = None
        self._last_output = 0.0

    @classmethod
    def from_config(cls, cfg: PIDConfig, clock: Clock | None = None) -> "PIDController":
        """Build a controller from a PIDConfig."""
        return cls(cfg.kp, cfg.ki, cfg.kd, cfg.min_output, cfg.max_output,
                   deadband=cfg.deadband, anti_windup=cfg.anti_windup, clock=clock)

    @property
    def saturated(self) -> bool:
        """True if the last computed output was clamped in the direction of the error."""
        return self._saturated

    def update(self, setpoint: float, measured: float) -> float:
        """
        Compute the control output for the current measurement.

        The first call after construction only establishes the timing baseline
        and returns the previous output (0.0). Calls where the clock has not
        advanced, or where the error lies inside the deadband, return the
        previous output and leave the internal state unchanged.

        Args:
            setpoint: Desired value of the process variable.
            measured: Current measured value of the process variable.

        Returns:
            Control output clamped to [min_output, max_output].
        """
        now = self.clock.now()
        if self._last_time is None:
            self._last_time = now

        dt = now - self._last_time
        if dt <= 0:
            return self._last_output

        error = setpoint - measured
        if abs(error) < self.deadband:
            return self._last_output

        p_term = self.kp * error
        d_term = 0.0
        if self.kd != 0:
            d_term = self.kd * (error - self._prev_error) / dt

        # trapezoidal accumulation, applied from the next call
        integral = self._integral + 0.5 * dt * (error + self._prev_error)
        i_term = self.ki * self._integral

        output = p_term + i_term + d_term

        saturated = False
        if output > self.max_output:
            output = self.max_output
            saturated = error > 0
        elif output < self.min_output:
            output = self.min_output
            saturated = error < 0

        self._prev_error = error
        self._last_time = now
        self._last_output = output
        self._saturated = saturated
        if not (self.anti_windup and saturated):
            self._integral = integral

        return output

    def reset(self) -> None:
        """
        Clear the error history and the integral, and restart timing from now.

        The last output and the saturation flag are preserved.
        """
        self._prev_error = 0.0
        self._integral = 0.0
        self._last_time = self.clock.now()

    def snapshot(self) -> PIDState:
        """Return a copy of the internal state (error history, integral, timing, output)."""
        return PIDState(
            prev_error=self._prev_error,
            integral=self._integral,
            last_time=self._last_time,
            last_output=self._last_output,
            saturated=self._saturated,
        )
