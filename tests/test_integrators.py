"""Order of accuracy of the fixed-step integrators on a harmonic oscillator."""

import numpy as np
import pytest

from physlab.physics import (
    EulerIntegrator,
    ODEModel,
    RK4Integrator,
    rk4_step,
    substep,
)


def oscillator(x: np.ndarray, u: np.ndarray, t: float) -> np.ndarray:
    return np.array([x[1], -x[0]])


def final_error(integrator, dt: float, t_end: float = 1.0) -> float:
    x = np.array([1.0, 0.0])
    n = int(round(t_end / dt))
    for i in range(n):
        x = integrator.step(oscillator, x, np.array([]), i * dt, dt)
    exact = np.array([np.cos(t_end), -np.sin(t_end)])
    return float(np.linalg.norm(x - exact))


@pytest.mark.parametrize(
    "integrator",
    [EulerIntegrator(), RK4Integrator()],
)
def test_observed_order_matches_nominal(integrator) -> None:
    e1 = final_error(integrator, 0.02)
    e2 = final_error(integrator, 0.01)
    observed = np.log2(e1 / e2)
    assert observed == pytest.approx(integrator.order, abs=0.25)


def test_rk4_single_step_on_linear_ode() -> None:
    # dx/dt = x: one RK4 step reproduces the 4th-order Taylor polynomial of e^dt
    dt = 0.1
    x = rk4_step(lambda x, u, t: x, np.array([1.0]), np.array([]), 0.0, dt)
    taylor = 1 + dt + dt**2 / 2 + dt**3 / 6 + dt**4 / 24
    assert x[0] == pytest.approx(taylor, rel=1e-14)


def test_substep_equals_repeated_small_steps() -> None:
    x0 = np.array([1.0, 0.0])
    via_substep = substep(RK4Integrator(), oscillator, x0, np.array([]), 0.0, 0.4, 4)
    x = x0
    for i in range(4):
        x = rk4_step(oscillator, x, np.array([]), i * 0.1, 0.1)
    np.testing.assert_allclose(via_substep, x, rtol=0, atol=1e-15)


def test_substep_rejects_zero_count() -> None:
    with pytest.raises(ValueError):
        substep(RK4Integrator(), oscillator, np.array([1.0, 0.0]), np.array([]), 0.0, 0.1, 0)


class Decay(ODEModel):
    def rhs(self, x, u, t):
        return -x


def test_ode_model_tracks_time() -> None:
    model = Decay(substeps=2)
    model.initialize()
    out = model.step(state=np.array([1.0]), dt=0.1)
    assert model.time == pytest.approx(0.1)
    assert out["state"][0] == pytest.approx(np.exp(-0.1), rel=1e-7)
    assert set(out) == {"state"}
