"""Double pendulum: equations of motion, RK4 energy behaviour, shadow copy."""

import numpy as np
import pytest

from physlab.simulation.pendulum import (
    DEFAULT_SUBSTEPS,
    SHADOW_OFFSET,
    DoublePendulum,
    DoublePendulumParams,
    ShadowedPendulum,
    angular_accelerations,
    bob_positions,
    initial_state,
    total_energy,
)

UNIT = DoublePendulumParams(m1=1.0, m2=1.0, l1=1.0, l2=1.0, g=9.81, damping=0.0)


def max_energy_drift(dt: float, t_end: float = 2.0) -> float:
    model = DoublePendulum(UNIT, substeps=1)
    x = initial_state(0.6, 0.3)
    e0 = total_energy(x, UNIT)
    drift = 0.0
    for _ in range(int(round(t_end / dt))):
        x = model.step(state=x, dt=dt)["state"]
        drift = max(drift, abs(total_energy(x, UNIT) - e0))
    return drift


class TestEquationsOfMotion:

    def test_rest_at_bottom_is_equilibrium(self):
        a1, a2 = angular_accelerations(0.0, 0.0, 0.0, 0.0, UNIT)
        assert a1 == pytest.approx(0.0, abs=1e-15)
        assert a2 == pytest.approx(0.0, abs=1e-15)

    def test_small_angle_single_arm_limit(self):
        # with both arms at the same angle and at rest, the upper arm feels -g/l1 sin(theta)
        theta = 0.1
        a1, a2 = angular_accelerations(theta, theta, 0.0, 0.0, UNIT)
        assert a1 == pytest.approx(-UNIT.g / UNIT.l1 * np.sin(theta))
        assert a2 == pytest.approx(0.0, abs=1e-12)

    def test_damping_subtracts_linear_term(self):
        damped = DoublePendulumParams(m1=1.0, m2=1.0, l1=1.0, l2=1.0, damping=0.5)
        free = angular_accelerations(0.5, 1.0, 2.0, 1.5, UNIT)
        with_damping = angular_accelerations(0.5, 1.0, 2.0, 1.5, damped)
        assert with_damping[0] == pytest.approx(free[0] - 0.5 * 2.0)
        assert with_damping[1] == pytest.approx(free[1] - 0.5 * 1.5)

    def test_angles_are_not_wrapped(self):
        model = DoublePendulum(UNIT)
        x = initial_state(0.5, 0.2)
        shifted = x + np.array([2 * np.pi, -4 * np.pi, 0.0, 0.0])
        np.testing.assert_allclose(model.rhs(x, np.array([]), 0.0), model.rhs(shifted, np.array([]), 0.0), atol=1e-12)

    def test_rhs_first_components_are_velocities(self):
        model = DoublePendulum(UNIT)
        d = model.rhs(np.array([0.5, 1.0, 0.3, -0.2]), np.array([]), 0.0)
        assert d[0] == pytest.approx(0.3)
        assert d[1] == pytest.approx(-0.2)


class TestEnergy:

    def test_rk4_energy_drift_scales_with_dt_to_the_fourth(self):
        coarse = max_energy_drift(0.02)
        fine = max_energy_drift(0.01)
        # at least fourth order: halving dt cuts the drift by ~16x or more
        assert np.log2(coarse / fine) > 3.5

    def test_damping_dissipates_energy(self):
        params = DoublePendulumParams(m1=1.0, m2=1.0, l1=1.0, l2=1.0, damping=0.2)
        model = DoublePendulum(params)
        x = initial_state(1.0, 0.5)
        e0 = total_energy(x, params)
        for _ in range(200):
            x = model.step(state=x, dt=0.01)["state"]
        assert total_energy(x, params) < e0

    def test_positions_follow_lengths(self):
        x1, y1, x2, y2 = bob_positions(initial_state(np.pi / 2, 0.0), UNIT)
        assert (x1, y1) == pytest.approx((1.0, 0.0), abs=1e-12)
        assert (x2, y2) == pytest.approx((1.0, 1.0), abs=1e-12)


class TestStepping:

    def test_default_substeps(self):
        assert DoublePendulum().substeps == DEFAULT_SUBSTEPS == 4

    def test_substeps_match_manual_quarter_steps(self):
        sub = DoublePendulum(UNIT)
        single = DoublePendulum(UNIT, substeps=1)
        x = initial_state()
        via_substeps = sub.step(state=x, dt=0.1)["state"]
        y = x
        for _ in range(4):
            y = single.step(state=y, dt=0.025)["state"]
        np.testing.assert_allclose(via_substeps, y, rtol=0, atol=1e-14)


class TestShadow:

    def test_shadow_starts_offset_on_theta1(self):
        pair = ShadowedPendulum(UNIT)
        state = pair.initial_state(initial_state(1.0, 0.5))
        assert state[4] - state[0] == pytest.approx(SHADOW_OFFSET)
        np.testing.assert_array_equal(state[5:], state[1:4])

    def test_halves_evolve_independently(self):
        pair = ShadowedPendulum(UNIT)
        solo = DoublePendulum(UNIT)
        state = pair.initial_state(initial_state(1.0, 0.5))
        primary = state[:4].copy()
        for _ in range(50):
            state = pair.step(state=state, dt=0.05)["state"]
            primary = solo.step(state=primary, dt=0.05)["state"]
        np.testing.assert_allclose(state[:4], primary, rtol=0, atol=1e-14)

    def test_divergence_is_reported(self):
        pair = ShadowedPendulum(UNIT)
        out = pair.step(state=pair.initial_state(initial_state()), dt=0.01)
        assert out["divergence"] > 0.0

    def test_rejects_wrong_state_length(self):
        with pytest.raises(ValueError):
            ShadowedPendulum(UNIT).step(state=np.zeros(4), dt=0.01)
