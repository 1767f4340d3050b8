"""Parameter files and snapshots."""

import numpy as np
import pytest

from physlab.core import SimulationLoop
from physlab.io import load_params, load_snapshot, params_from_dict, save_params, save_snapshot
from physlab.simulation.pendulum import DoublePendulum, DoublePendulumParams, initial_state
from physlab.simulation.wave import Boundary, StringParams


def test_params_round_trip(tmp_path) -> None:
    params = StringParams(tension=120.0, boundary=Boundary.FREE)
    path = tmp_path / "cfg" / "string.json"
    save_params(params, path)
    loaded = load_params(StringParams, path)
    assert loaded == params
    assert loaded.boundary is Boundary.FREE


def test_missing_keys_keep_defaults() -> None:
    params = params_from_dict(DoublePendulumParams, {"damping": 0.05})
    assert params.damping == 0.05
    assert params.m1 == DoublePendulumParams().m1


def test_unknown_keys_rejected() -> None:
    with pytest.raises(ValueError, match="speed"):
        params_from_dict(DoublePendulumParams, {"speed": 2.0})


def test_save_params_needs_dataclass(tmp_path) -> None:
    with pytest.raises(TypeError):
        save_params({"m1": 1.0}, tmp_path / "p.json")


def test_snapshot_round_trip(tmp_path) -> None:
    loop = SimulationLoop(DoublePendulum(), dt=0.01)
    loop.initialize(initial_state())
    loop.run(10)
    path = tmp_path / "snap"
    save_snapshot(loop.state_dict(), path)
    data = load_snapshot(path)
    np.testing.assert_array_equal(data["state"], loop.state)
    assert data["time"] == pytest.approx(loop.time)
    assert data["finished"] is False
    assert data["component"]["t"] == pytest.approx(loop.time)
