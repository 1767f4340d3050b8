"""
Ideal-gas box: non-interacting particles with wall reflection, a heuristic
thermostat, an optional leak hole and an optional piston.

Time is measured in frames: with dt = 1 a particle moves by its velocity.
Particles do not collide with each other.
"""

import logging
from dataclasses import dataclass, replace
from typing import Any, Dict, Optional, Tuple

import numpy as np

from physlab.core.component import SimComponent

logger = logging.getLogger(__name__)

# Thermal speed per sqrt(kelvin) for unit mass.
SPEED_PER_SQRT_K = 0.2
# Weight given to the target speed on each tick.
RELAXATION = 0.05
PRESSURE_SAMPLE_TICKS = 10
HOLE_HALF_HEIGHT = 20.0
# Escaped particles are parked at ESCAPED_X and purged past PURGE_X.
ESCAPED_X = 9999.0
PURGE_X = 2000.0
PISTON_GAIN = 0.05
PISTON_SCALE = 10.0
SPAWN_SPREAD = 100.0

NORMAL_COLOR = "#38bdf8"
HEAVY_COLOR = "#fbbf24"


def thermal_speed(temperature: float, mass: Any = 1.0) -> Any:
    """Target speed for a temperature: sqrt(T) * 0.2 / sqrt(m)."""
    return np.sqrt(temperature) * SPEED_PER_SQRT_K / np.sqrt(mass)


@dataclass
class ParticleSet:
    """Columnar particle storage; a particle is its index."""

    x: np.ndarray
    y: np.ndarray
    vx: np.ndarray
    vy: np.ndarray
    radius: np.ndarray
    mass: np.ndarray
    color: Optional[np.ndarray] = None

    def __post_init__(self) -> None:
        if self.color is None:
            self.color = np.full(self.x.size, NORMAL_COLOR, dtype=object)
        elif self.color.shape != self.x.shape:
            raise ValueError(f"color has {self.color.size} entries for {self.x.size} particles")

    @classmethod
    def empty(cls) -> "ParticleSet":
        z = np.zeros(0)
        return cls(z, z.copy(), z.copy(), z.copy(), z.copy(), z.copy(), np.array([], dtype=object))

    def __len__(self) -> int:
        return int(self.x.size)

    def copy(self) -> "ParticleSet":
        return replace(self, **{k: getattr(self, k).copy() for k in _COLUMNS})

    def select(self, mask: np.ndarray) -> "ParticleSet":
        return replace(self, **{k: getattr(self, k)[mask] for k in _COLUMNS})

    def concat(self, other: "ParticleSet") -> "ParticleSet":
        return replace(
            self, **{k: np.concatenate([getattr(self, k), getattr(other, k)]) for k in _COLUMNS}
        )

    def speeds(self) -> np.ndarray:
        return np.hypot(self.vx, self.vy)


_COLUMNS = ("x", "y", "vx", "vy", "radius", "mass", "color")


def spawn_particles(
    count: int,
    center: Tuple[float, float],
    temperature: float,
    mass: float = 1.0,
    color: Optional[str] = None,
    rng: Optional[np.random.Generator] = None,
) -> ParticleSet:
    """
    count particles in a SPAWN_SPREAD square around center, random directions,
    speed sqrt(T) * 0.2 (mass does not enter the initial speed).
    """
    rng = rng if rng is not None else np.random.default_rng()
    speed = np.sqrt(temperature) * SPEED_PER_SQRT_K
    angle = rng.uniform(0.0, 2 * np.pi, count)
    if color is None:
        color = HEAVY_COLOR if mass > 1 else NORMAL_COLOR
    return ParticleSet(
        x=center[0] + (rng.random(count) - 0.5) * SPAWN_SPREAD,
        y=center[1] + (rng.random(count) - 0.5) * SPAWN_SPREAD,
        vx=np.cos(angle) * speed,
        vy=np.sin(angle) * speed,
        radius=np.full(count, 8.0 if mass > 1 else 4.0),
        mass=np.full(count, float(mass)),
        color=np.array([color] * count, dtype=object),
    )


@dataclass
class GasBoxParams:
    """
    Box geometry and controls. The box spans [left, left + width] by
    [top, top + height] in screen coordinates (y down).
    """

    left: float = 50.0
    top: float = 100.0
    width: float = 600.0
    height: float = 400.0
    temperature: float = 300.0
    hole: bool = False
    piston: bool = False
    piston_mass: float = 10.0
    thermostat: bool = True


class GasBox(SimComponent):
    """
    Semi-implicit Euler loop for a particle gas.

    Per tick: piston width update, speed relaxation towards the thermal
    speed (skipped with thermostat off, i.e. hot/cold mixing), drift,
    wall reflection with pressure impulse accounting, escape through the
    hole, purge of escaped particles. The relaxation is a fixed-weight
    blend, not a physical thermostat.
    """

    def __init__(self, params: Optional[GasBoxParams] = None) -> None:
        self.params = params or GasBoxParams()
        self.width = self.params.width
        self.pressure = 0
        self.escaped = 0
        self._impulse = 0.0
        self._ticks = 0

    def initialize(self, **kwargs: Any) -> None:
        self.width = self.params.width
        self.pressure = 0
        self.escaped = 0
        self._impulse = 0.0
        self._ticks = 0

    def piston_target(self, n_particles: int) -> float:
        p = self.params
        return n_particles * p.temperature / (p.piston_mass * PISTON_SCALE)

    def relax_speeds(self, particles: ParticleSet) -> None:
        speed = particles.speeds()
        target = thermal_speed(self.params.temperature, particles.mass)
        new_speed = (1.0 - RELAXATION) * speed + RELAXATION * target
        scale = new_speed / np.where(speed > 0, speed, 1.0)
        particles.vx *= scale
        particles.vy *= scale

    def reflect(self, particles: ParticleSet) -> float:
        """Clamp to the walls, invert normal components; return the impulse."""
        p = self.params
        r = particles.radius
        impulse = 0.0

        lo = particles.x < p.left + r
        particles.x[lo] = (p.left + r)[lo]
        particles.vx[lo] *= -1
        impulse += np.abs(particles.vx[lo] * particles.mass[lo]).sum()

        hi = particles.x > p.left + self.width - r
        if p.hole:
            mid = p.top + p.height / 2
            leak = hi & (particles.y > mid - HOLE_HALF_HEIGHT) & (particles.y < mid + HOLE_HALF_HEIGHT)
            particles.x[leak] = ESCAPED_X
            hi &= ~leak
        particles.x[hi] = (p.left + self.width - r)[hi]
        particles.vx[hi] *= -1
        impulse += np.abs(particles.vx[hi] * particles.mass[hi]).sum()

        # parked escapees are left alone until purged
        inside = particles.x < PURGE_X
        top = inside & (particles.y < p.top + r)
        particles.y[top] = (p.top + r)[top]
        particles.vy[top] *= -1
        impulse += np.abs(particles.vy[top] * particles.mass[top]).sum()

        bottom = inside & (particles.y > p.top + p.height - r)
        particles.y[bottom] = (p.top + p.height - r)[bottom]
        particles.vy[bottom] *= -1
        impulse += np.abs(particles.vy[bottom] * particles.mass[bottom]).sum()
        return float(impulse)

    def step(
        self,
        *,
        state: ParticleSet,
        u: Optional[np.ndarray] = None,
        dt: float = 1.0,
        **kwargs: Any,
    ) -> Dict[str, Any]:
        particles = state.copy()
        p = self.params

        if p.piston:
            self.width += (self.piston_target(len(particles)) - self.width) * PISTON_GAIN

        if p.thermostat:
            self.relax_speeds(particles)

        particles.x += particles.vx * dt
        particles.y += particles.vy * dt
        self._impulse += self.reflect(particles)

        if p.hole:
            keep = particles.x < PURGE_X
            purged = int((~keep).sum())
            if purged:
                particles = particles.select(keep)
                self.escaped += purged
                logger.debug("%d particle(s) escaped, %d left", purged, len(particles))

        self._ticks += 1
        if self._ticks % PRESSURE_SAMPLE_TICKS == 0:
            self.pressure = round(self._impulse / PRESSURE_SAMPLE_TICKS)
            self._impulse = 0.0

        return {
            "state": particles,
            "pressure": self.pressure,
            "width": self.width,
            "count": len(particles),
        }

    def state_dict(self) -> Dict[str, Any]:
        return {
            "width": self.width,
            "pressure": self.pressure,
            "escaped": self.escaped,
            "impulse": self._impulse,
            "ticks": self._ticks,
        }


def mixed(*groups: ParticleSet) -> ParticleSet:
    """Concatenate particle groups (e.g. a hot and a cold batch)."""
    out = ParticleSet.empty()
    for group in groups:
        out = out.concat(group)
    return out
