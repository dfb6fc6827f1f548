"""
Step response of a PID-controlled first-order process.

A FirstOrderPlant (gain 2, time constant 0.5 s) is regulated to a setpoint of
1.0 with a PID controller sampled at 100 Hz. The controller runs on a
ManualClock advanced by the simulator, so the run is fully deterministic.

Expected behaviour:
    - The output rises towards the setpoint with a small overshoot.
    - The integral action removes the steady-state error.
"""

import sys
from pathlib import Path

project_root = Path(__file__).resolve().parents[2]
if str(project_root) not in sys.path:
    sys.path.insert(0, str(project_root))

from pidloop.control import ManualClock, PIDConfig, PIDController
from pidloop.plant import FirstOrderPlant
from pidloop.solver import run_closed_loop


def main() -> None:
    dt = 0.01
    t_stop = 5.0

    cfg = PIDConfig(kp=2.0, ki=3.0, kd=0.02, min_output=-5.0, max_output=5.0)
    controller = PIDController.from_config(cfg, clock=ManualClock())
    plant = FirstOrderPlant(gain=2.0, tau=0.5)

    result = run_closed_loop(controller, plant, setpoint=1.0, t_stop=t_stop, dt=dt)

    print(f"Final output: {result.measured[-1]:.4f} (target 1.0)")
    print(f"Overshoot: {result.overshoot() * 100:.1f} %")
    print(f"Steady-state error: {result.steady_state_error():.2e}")

    try:
        import matplotlib.pyplot as plt

        fig, ax = plt.subplots(2, 1, figsize=(8, 6), sharex=True)
        ax[0].plot(result.t, result.measured, label="y")
        ax[0].plot(result.t, result.setpoint, "k--", label="setpoint")
        ax[0].set_ylabel("Process value")
        ax[0].grid(True)
        ax[0].legend()

        ax[1].plot(result.t, result.output, label="u")
        ax[1].set_ylabel("Control output")
        ax[1].set_xlabel("Time [s]")
        ax[1].grid(True)
        ax[1].legend()

        fig.tight_layout()
        plt.show()
    except ImportError:
        pass


if __name__ == "__main__":
    main()
