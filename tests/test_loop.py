import logging

import numpy as np
import pytest

from pidloop.control import ManualClock, PIDController
from pidloop.plant import FirstOrderPlant, MassPlant
from pidloop.solver import LoopResult, run_closed_loop


def controller(kp, ki, kd, lo=-10.0, hi=10.0, **kwargs):
    return PIDController(kp, ki, kd, lo, hi, clock=ManualClock(), **kwargs)


def test_requires_manual_clock():
    pid = PIDController(1.0, 0.0, 0.0, -1, 1)
    with pytest.raises(ValueError):
        run_closed_loop(pid, FirstOrderPlant(1.0, 1.0), 1.0, t_stop=1.0, dt=0.1)


@pytest.mark.parametrize("t_stop, dt", [(-1.0, 0.1), (1.0, 0.0), (1.0, -0.1)])
def test_rejects_invalid_timing(t_stop, dt):
    with pytest.raises(ValueError):
        run_closed_loop(controller(1, 0, 0), FirstOrderPlant(1.0, 1.0), 1.0, t_stop, dt)


def test_sampling_grid_and_baseline_sample():
    res = run_closed_loop(controller(1, 0, 0), FirstOrderPlant(1.0, 1.0), 1.0,
                          t_stop=2.0, dt=0.1)
    assert res.t.size == 21
    assert res.t[-1] == pytest.approx(2.0)
    assert res.output[0] == 0.0
    assert res.output[1] == pytest.approx(1.0)
    assert res.measured[0] == 0.0


def test_proportional_control_leaves_offset():
    res = run_closed_loop(controller(1.0, 0.0, 0.0), FirstOrderPlant(1.0, 0.5), 1.0,
                          t_stop=10.0, dt=0.01)
    assert res.measured[-1] == pytest.approx(0.5, abs=1e-3)
    assert res.steady_state_error() == pytest.approx(0.5, abs=1e-3)


def test_integral_action_removes_offset():
    res = run_closed_loop(controller(1.0, 2.0, 0.0), FirstOrderPlant(1.0, 0.5), 1.0,
                          t_stop=20.0, dt=0.01)
    assert res.steady_state_error() < 1e-3


def test_integral_rejects_constant_disturbance():
    res = run_closed_loop(controller(1.0, 2.0, 0.0), FirstOrderPlant(1.0, 0.5), 1.0,
                          t_stop=20.0, dt=0.01, disturbance=lambda t: -0.3)
    assert res.steady_state_error() < 1e-3
    assert res.output[-1] == pytest.approx(1.3, abs=1e-3)


def test_setpoint_profile():
    res = run_closed_loop(controller(1.0, 0.0, 0.0), FirstOrderPlant(1.0, 1.0),
                          lambda t: 0.0 if t < 1.0 else 2.0, t_stop=2.0, dt=0.25)
    np.testing.assert_array_equal(res.setpoint, [0, 0, 0, 0, 2, 2, 2, 2, 2])


def test_outputs_within_bounds_and_flags_recorded():
    res = run_closed_loop(controller(20.0, 1.0, 0.0, -2.0, 2.0), FirstOrderPlant(1.0, 1.0),
                          5.0, t_stop=5.0, dt=0.05)
    assert np.all(res.output <= 2.0)
    assert np.all(res.output >= -2.0)
    assert res.saturated[1:].all()
    assert res.saturated_fraction() == pytest.approx(100 / 101)


def test_anti_windup_freezes_integral_while_saturated():
    def run(anti_windup):
        pid = controller(1.5, 0.4, 2.0, -2.0, 2.0, anti_windup=anti_windup)
        return run_closed_loop(pid, MassPlant(mass=1.0, damping=0.5), 10.0,
                               t_stop=40.0, dt=0.02)

    plain, guarded = run(False), run(True)
    for k in range(1, guarded.t.size):
        if guarded.saturated[k]:
            assert guarded.integral[k] == guarded.integral[k - 1]
    assert np.abs(plain.integral).max() > np.abs(guarded.integral).max()


def test_series_lookup():
    res = run_closed_loop(controller(1, 0, 0), FirstOrderPlant(1.0, 1.0), 1.0,
                          t_stop=1.0, dt=0.1)
    t, u = res.series("output")
    assert t is res.t
    assert u is res.output
    with pytest.raises(KeyError):
        res.series("voltage")


def test_overshoot_and_steady_state_error():
    res = LoopResult(
        t=np.arange(4.0),
        setpoint=np.ones(4),
        measured=np.array([0.0, 0.5, 1.2, 1.0]),
        output=np.zeros(4),
        saturated=np.zeros(4, dtype=bool),
        integral=np.zeros(4),
    )
    assert res.overshoot() == pytest.approx(0.2)
    assert res.steady_state_error(window=0.25) == 0.0
    assert res.steady_state_error(window=0.5) == pytest.approx(0.1)
    with pytest.raises(ValueError):
        res.steady_state_error(window=0.0)


def test_overshoot_with_zero_step():
    res = LoopResult(t=np.arange(2.0), setpoint=np.zeros(2), measured=np.zeros(2),
                     output=np.zeros(2), saturated=np.zeros(2, dtype=bool),
                     integral=np.zeros(2))
    assert res.overshoot() == 0.0


def test_logs_run_at_debug(caplog):
    caplog.set_level(logging.DEBUG, logger="pidloop.solver.loop")
    run_closed_loop(controller(20.0, 0.0, 0.0, -1.0, 1.0), FirstOrderPlant(1.0, 1.0),
                    lambda t: 1.0 if t < 0.5 else -1.0, t_stop=1.0, dt=0.1)
    messages = [r.getMessage() for r in caplog.records]
    assert any(m.startswith("Closed-loop run:") for m in messages)
    assert any("Saturation entered" in m for m in messages)
