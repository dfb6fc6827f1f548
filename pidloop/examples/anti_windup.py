"""
Integral windup with and without anti-windup.

A point mass is pushed to a position 10 m away with a force limited to
±2 N, so the controller output saturates for most of the transient. The same
PID gains are run twice: with plain integration and with the integral frozen
while saturated.

Expected behaviour:
    - Without anti-windup the integral keeps growing during saturation and the
      mass overshoots the target by a large margin.
    - With anti-windup the integral stays bounded and the overshoot is
      reduced.
"""

import sys
from pathlib import Path

project_root = Path(__file__).resolve().parents[2]
if str(project_root) not in sys.path:
    sys.path.insert(0, str(project_root))

from pidloop.control import ManualClock, PIDController
from pidloop.plant import MassPlant
from pidloop.solver import run_closed_loop


def simulate(anti_windup: bool):
    controller = PIDController(kp=1.5, ki=0.4, kd=2.0, min_output=-2.0, max_output=2.0,
                               anti_windup=anti_windup, clock=ManualClock())
    plant = MassPlant(mass=1.0, damping=0.5)
    return run_closed_loop(controller, plant, setpoint=10.0, t_stop=40.0, dt=0.02)


def main() -> None:
    runs = {"plain": simulate(False), "anti-windup": simulate(True)}

    for name, res in runs.items():
        print(f"{name:>12}: overshoot {res.overshoot() * 100:6.1f} %, "
              f"max |integral| {abs(res.integral).max():7.2f}, "
              f"saturated {res.saturated_fraction() * 100:5.1f} % of samples")

    try:
        import matplotlib.pyplot as plt

        fig, ax = plt.subplots(2, 1, figsize=(8, 6), sharex=True)
        for name, res in runs.items():
            ax[0].plot(res.t, res.measured, label=name)
            ax[1].plot(res.t, res.integral, label=name)
        ax[0].axhline(10.0, color="k", linestyle="--", label="setpoint")
        ax[0].set_ylabel("Position [m]")
        ax[0].grid(True)
        ax[0].legend()
        ax[1].set_ylabel("Integral [m s]")
        ax[1].set_xlabel("Time [s]")
        ax[1].grid(True)
        ax[1].legend()

        fig.tight_layout()
        plt.show()
    except ImportError:
        pass


if __name__ == "__main__":
    main()
