"""RC transient and capacitor helpers."""

import math

import numpy as np
import pytest

from physlab.core import SimHistory, SimulationLoop
from physlab.physics import euler_step
from physlab.simulation.circuit import (
    RCCircuit,
    RCParams,
    SwitchMode,
    ac_response,
    impedance,
    plate_capacitance,
    rc_step,
    reactance,
    stored_charge,
    stored_energy,
)


def test_charge_approaches_source_monotonically() -> None:
    vc = 0.0
    values = [vc]
    for _ in range(2000):
        vc, _ = rc_step(vc, 10.0, 100.0, 0.01, 0.01, SwitchMode.CHARGE)
        values.append(vc)
    values = np.array(values)
    assert np.all(np.diff(values) >= 0.0)
    assert np.all(np.diff(values[:500]) > 0.0)
    assert np.all(values <= 10.0)
    assert values[-1] == pytest.approx(10.0, abs=1e-6)


def test_charge_is_clamped_for_large_steps() -> None:
    vc, current = rc_step(0.0, 10.0, 100.0, 0.01, 5.0)
    assert vc == 10.0
    assert current == pytest.approx(0.1)


def test_discharge_decays_and_never_goes_negative() -> None:
    vc = 10.0
    for _ in range(1000):
        prev = vc
        vc, current = rc_step(vc, 10.0, 100.0, 0.01, 0.01, "Discharge")
        assert 0.0 <= vc <= prev
    assert vc < 1e-3
    assert rc_step(1.0, 10.0, 100.0, 0.01, 10.0, SwitchMode.DISCHARGE)[0] == 0.0


def test_euler_step_size() -> None:
    vc, current = rc_step(2.0, 12.0, 100.0, 0.01, 0.01)
    assert current == pytest.approx(0.1)
    assert vc == pytest.approx(2.0 + 0.1 / 0.01 * 0.01)


def test_discharge_matches_explicit_euler() -> None:
    vc, current = rc_step(6.0, 12.0, 100.0, 0.01, 0.02, SwitchMode.DISCHARGE)
    expected = euler_step(lambda x, u, t: -x / (100.0 * 0.01), np.array([6.0]), np.array([]), 0.0, 0.02)
    assert current == pytest.approx(0.06)
    assert vc == pytest.approx(expected[0])


def test_zero_capacitance_skips_update() -> None:
    for mode in SwitchMode:
        vc, _ = rc_step(3.0, 10.0, 100.0, 0.0, 0.01, mode)
        assert vc == 3.0
        assert not math.isnan(vc)


def test_component_in_loop_switches_mode() -> None:
    history = SimHistory()
    circuit = RCCircuit(RCParams(source_voltage=10.0, resistance=100.0, capacitance=0.01))
    loop = SimulationLoop(circuit, dt=0.01, history=history)
    loop.initialize([0.0])
    loop.run(300)
    charged = loop.state[0]
    assert 9.0 < charged < 10.0
    circuit.mode = SwitchMode.DISCHARGE
    result = loop.tick()
    assert result.state[0] < charged
    assert result.extra["charge"] == pytest.approx(0.01 * result.state[0])
    assert len(history) == 301


def test_helpers() -> None:
    c = plate_capacitance(1.0, 100.0, 1.0)
    assert c == pytest.approx(8.854e-12 * 0.01 / 0.001)
    assert reactance(0.0, c) == math.inf
    assert reactance(50.0, 0.0) == math.inf
    assert reactance(50.0, 1e-3) == pytest.approx(1 / (2 * math.pi * 50.0 * 1e-3))
    assert impedance(3.0, 4.0) == pytest.approx(5.0)
    assert stored_energy(2.0, 3.0) == pytest.approx(9.0)
    assert stored_charge(2.0, 3.0) == pytest.approx(6.0)


def test_ac_response() -> None:
    xc = 1 / (2 * math.pi * 50.0 * 1e-4)
    res = ac_response(10.0, 30.0, 1e-4, 50.0)
    assert res.reactance == pytest.approx(xc)
    assert res.current == pytest.approx(10.0 / math.hypot(30.0, xc))
    assert res.phase == pytest.approx(math.atan2(xc, 30.0))
    assert res.peak_charge == pytest.approx(1e-3)
