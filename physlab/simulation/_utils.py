"""
Quick-look plots for simulation output: state vs time and x/y trajectories.

Functions accept either a SimHistory (keys 'time' and 'state') or raw
arrays. Matplotlib is an optional dependency, imported on first use.
"""

from typing import Any, List, Optional, Tuple

import numpy as np


def _pyplot() -> Any:
    try:
        import matplotlib.pyplot as plt
    except ImportError:
        raise ImportError("matplotlib is required for plotting: pip install physlab[plot]")
    return plt


def _time_and_state(
    history: Optional[Any] = None,
    time: Optional[np.ndarray] = None,
    state: Optional[np.ndarray] = None,
) -> Tuple[np.ndarray, np.ndarray]:
    if history is not None:
        st = history.get("state")
        if st.size == 0:
            raise ValueError("History has no 'state' records.")
        t = history.get("time")
        if t.size == 0:
            t = np.arange(len(st), dtype=float)
        return np.asarray(t, dtype=float).ravel(), np.asarray(st, dtype=float)
    if time is not None and state is not None:
        return np.asarray(time, dtype=float).ravel(), np.asarray(state, dtype=float)
    raise ValueError("Provide either history= or (time=, state=).")


def plot_state_vs_time(
    history: Optional[Any] = None,
    time: Optional[np.ndarray] = None,
    state: Optional[np.ndarray] = None,
    state_names: Optional[List[str]] = None,
    title: str = "State vs time",
    **kwargs: Any,
) -> Any:
    """
    One subplot per state component.

    Args:
        history: SimHistory with 'state' and optional 'time'.
        time, state: raw arrays if history is not used.
        state_names: labels, e.g. ["theta1", "theta2", "omega1", "omega2"].
        **kwargs: passed to Axes.plot().

    Returns:
        matplotlib Figure.
    """
    plt = _pyplot()
    t, st = _time_and_state(history=history, time=time, state=state)
    if st.ndim == 1:
        st = st.reshape(-1, 1)
    n = st.shape[1]
    names = list(state_names or [])
    names += [f"x{i}" for i in range(len(names), n)]

    fig, axes = plt.subplots(n, 1, sharex=True, figsize=(8, max(2 * n, 4)), squeeze=False)
    for i, ax in enumerate(axes[:, 0]):
        ax.plot(t, st[:, i], **kwargs)
        ax.set_ylabel(names[i])
        ax.grid(True, alpha=0.3)
    axes[-1, 0].set_xlabel("time")
    if title:
        fig.suptitle(title)
    fig.tight_layout()
    return fig


def plot_trajectory(
    path: np.ndarray,
    prediction: Optional[np.ndarray] = None,
    ax: Optional[Any] = None,
    title: str = "Trajectory",
    **kwargs: Any,
) -> Any:
    """
    Plot an (N, 2) x/y path, with an optional dashed predicted path.

    Returns:
        matplotlib Axes.
    """
    plt = _pyplot()
    path = np.asarray(path, dtype=float)
    if ax is None:
        _, ax = plt.subplots(1, 1, figsize=(8, 5))
    ax.plot(path[:, 0], path[:, 1], label="path", **kwargs)
    if prediction is not None:
        prediction = np.asarray(prediction, dtype=float)
        ax.plot(prediction[:, 0], prediction[:, 1], "--", alpha=0.6, label="prediction")
    ax.axhline(0.0, color="k", linewidth=0.8)
    ax.set_xlabel("x")
    ax.set_ylabel("y")
    ax.set_title(title)
    ax.legend(loc="upper right", fontsize=8)
    ax.grid(True, alpha=0.3)
    return ax
