"""Plot helpers (skipped if matplotlib is not installed)."""

import numpy as np
import pytest

matplotlib = pytest.importorskip("matplotlib")
matplotlib.use("Agg")

from physlab.core import SimHistory, SimulationLoop
from physlab.simulation import plot_state_vs_time, plot_trajectory
from physlab.simulation.pendulum import DoublePendulum, initial_state
from physlab.simulation.projectile import ProjectileParams, predict_trajectory


def test_state_vs_time_from_history() -> None:
    history = SimHistory()
    loop = SimulationLoop(DoublePendulum(), dt=0.01, history=history)
    loop.initialize(initial_state())
    loop.run(20)
    fig = plot_state_vs_time(history=history, state_names=["theta1", "theta2"])
    assert len(fig.axes) == 4
    assert fig.axes[0].get_ylabel() == "theta1"
    assert fig.axes[3].get_ylabel() == "x3"


def test_state_vs_time_needs_data() -> None:
    with pytest.raises(ValueError):
        plot_state_vs_time()


def test_trajectory_with_prediction() -> None:
    pred = predict_trajectory(ProjectileParams())
    ax = plot_trajectory(pred.path[::2], prediction=pred.path)
    assert len(ax.lines) == 3
