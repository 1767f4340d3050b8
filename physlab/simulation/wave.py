"""
Driven string: explicit finite differences for the 1-D wave equation.

The left end is driven by A*sin(2*pi*f*t); the right end is either fixed
(Dirichlet) or free (zero gradient). Grid spacing is one index unit.
The scheme is only conditionally stable and dt is not checked against
the CFL limit; keep c*dt well below 1.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Iterable, Optional, Tuple

import numpy as np

from physlab.core.component import SimComponent
from physlab.core.history import SimHistory

ENERGY_HISTORY_LENGTH = 200
LONGITUDINAL_SCALE = 1.5
# Ripple field: sin(k*r - f*t) * GAIN / (r + OFFSET) per source.
RIPPLE_WAVENUMBER = 0.15
RIPPLE_GAIN = 500.0
RIPPLE_OFFSET = 50.0


class Boundary(str, Enum):
    FIXED = "Fixed"
    FREE = "Free"


class WaveType(str, Enum):
    TRANSVERSE = "Transverse"
    LONGITUDINAL = "Longitudinal"


@dataclass
class StringParams:
    """String and driver parameters."""

    tension: float = 80.0
    density: float = 0.1
    damping: float = 0.01
    frequency: float = 5.0
    amplitude: float = 40.0
    boundary: Boundary = Boundary.FIXED
    wave_type: WaveType = WaveType.TRANSVERSE
    n_points: int = 100

    def __post_init__(self) -> None:
        self.boundary = Boundary(self.boundary)
        self.wave_type = WaveType(self.wave_type)
        if self.n_points < 3:
            raise ValueError(f"n_points must be >= 3, got {self.n_points}")

    @property
    def wave_speed(self) -> float:
        return float(np.sqrt(self.tension / self.density))


@dataclass
class StringState:
    """Displacement y and velocity v per point, plus the drive time t."""

    y: np.ndarray
    v: np.ndarray
    t: float = 0.0

    @classmethod
    def at_rest(cls, n_points: int) -> "StringState":
        return cls(np.zeros(n_points), np.zeros(n_points), 0.0)


class StandingWaveString(SimComponent):
    """Wave-equation kernel; every tick is one explicit step of size dt."""

    def __init__(self, params: Optional[StringParams] = None, history_length: int = ENERGY_HISTORY_LENGTH) -> None:
        self.params = params or StringParams()
        self.energy = SimHistory(max_length=history_length)

    def initialize(self, **kwargs: Any) -> None:
        self.energy.clear()

    def initial_state(self) -> StringState:
        return StringState.at_rest(self.params.n_points)

    def drive(self, t: float) -> float:
        p = self.params
        return p.amplitude * np.sin(2 * np.pi * p.frequency * t)

    def step(
        self,
        *,
        state: StringState,
        u: Optional[np.ndarray] = None,
        dt: float,
        **kwargs: Any,
    ) -> Dict[str, Any]:
        """
        Advance the string by dt. Every interior point reads the displacements
        from the start of the step, unlike a left-to-right in-place sweep,
        which blows up at the default parameters.
        """
        p = self.params
        y = state.y.astype(float)
        v = state.v.astype(float)
        if y.shape != (p.n_points,) or v.shape != (p.n_points,):
            raise ValueError(f"y and v must have shape ({p.n_points},)")
        t = state.t + dt
        c_sq = p.tension / p.density

        # all interior accelerations come from the same (old) displacement
        accel = c_sq * (y[:-2] - 2 * y[1:-1] + y[2:]) - p.damping * v[1:-1]
        v[1:-1] += accel * dt
        y[1:-1] += v[1:-1] * dt

        kinetic = float(np.sum(0.5 * p.density * v[1:-1] ** 2))
        potential = float(np.sum(0.5 * p.tension * (y[2:] - y[1:-1]) ** 2))

        y[0] = self.drive(t)
        if p.boundary is Boundary.FIXED:
            y[-1] = 0.0
            v[-1] = 0.0
        else:
            y[-1] = y[-2]
            v[-1] = v[-2]

        self.energy.append(kinetic=kinetic, potential=potential)
        return {"state": StringState(y, v, t), "kinetic": kinetic, "potential": potential}

    def state_dict(self) -> Dict[str, Any]:
        return {"energy": self.energy.to_dict()}


def display_positions(
    state: StringState,
    width: float,
    wave_type: WaveType = WaveType.TRANSVERSE,
    scale: float = LONGITUDINAL_SCALE,
) -> Tuple[np.ndarray, np.ndarray]:
    """
    Map the solution to (x, offset) display coordinates.

    Transverse: x is the rest position, offset is the displacement.
    Longitudinal: the displacement moves each point along the axis
    (x = rest + scale * y) and the offset is zero.
    """
    n = state.y.size
    base = np.arange(n) * (width / n)
    if WaveType(wave_type) is WaveType.LONGITUDINAL:
        return base + state.y * scale, np.zeros(n)
    return base, state.y.copy()


@dataclass
class RippleSource:
    """Point source of circular ripples at (x, y), angular rate freq."""

    x: float
    y: float
    freq: float = 6.0


def ripple_field(
    sources: Iterable[RippleSource],
    grid: Tuple[np.ndarray, np.ndarray],
    t: float,
) -> np.ndarray:
    """
    Superposed surface height on a grid at time t.

    Each source contributes sin(0.15 * r - freq * t) * 500 / (r + 50), with r
    the distance to the source. grid is an (X, Y) pair as from np.meshgrid;
    the result has the shape of X. No sources gives a flat surface.
    """
    gx, gy = (np.asarray(g, dtype=float) for g in grid)
    if gx.shape != gy.shape:
        raise ValueError(f"grid arrays differ in shape: {gx.shape} vs {gy.shape}")
    height = np.zeros_like(gx)
    for src in sources:
        r = np.hypot(gx - src.x, gy - src.y)
        height += np.sin(RIPPLE_WAVENUMBER * r - src.freq * t) * RIPPLE_GAIN / (r + RIPPLE_OFFSET)
    return height
