"""
Point-mass projectile with quadratic drag and Magnus lift, RK4 in time,
with restitution bounces on the ground.

State vector: [x, y, vx, vy], y up, ground at y = 0.
"""

import math
from dataclasses import dataclass
from typing import Any, Dict, Optional, Tuple

import numpy as np

from physlab.physics.ode import ODEModel

AIR_DENSITY = 1.225
REFERENCE_AREA = 0.01
MAGNUS_COEFF = 0.005
# Horizontal velocity kept per bounce.
GROUND_FRICTION = 0.95
# Below this |vy| on the ground the projectile comes to rest.
REST_SPEED = 1.0
REST_HEIGHT = 0.01
# Drag/Magnus are skipped below this speed (direction undefined).
MIN_SPEED = 1e-4

PREDICTION_DT = 0.05
PREDICTION_T_MAX = 100.0


@dataclass
class ProjectileParams:
    """Launch conditions and physical parameters (angle in degrees)."""

    v0: float = 60.0
    angle: float = 45.0
    h0: float = 10.0
    g: float = 9.81
    m: float = 1.0
    drag: float = 0.0
    spin: float = 0.0
    elasticity: float = 0.7


@dataclass
class TrajectoryPrediction:
    """Bounce-free forward integration from the launch point."""

    path: np.ndarray
    flight_time: float
    max_height: float
    range: float


def launch_state(params: ProjectileParams) -> np.ndarray:
    rad = math.radians(params.angle)
    return np.array([0.0, params.h0, params.v0 * math.cos(rad), params.v0 * math.sin(rad)])


def derivatives(state: np.ndarray, params: ProjectileParams) -> np.ndarray:
    """dx/dt, dy/dt, dvx/dt, dvy/dt under gravity, drag and Magnus force."""
    vx, vy = state[2], state[3]
    v_sq = vx * vx + vy * vy
    v = math.sqrt(v_sq)
    ax, ay = 0.0, -params.g
    if v > MIN_SPEED:
        drag_force = 0.5 * AIR_DENSITY * params.drag * REFERENCE_AREA * v_sq
        magnus_force = params.spin * v * MAGNUS_COEFF
        ax -= drag_force * (vx / v) / params.m
        ay -= drag_force * (vy / v) / params.m
        ax -= magnus_force * (vy / v) / params.m
        ay += magnus_force * (vx / v) / params.m
    return np.array([vx, vy, ax, ay])


def mechanical_energy(state: np.ndarray, params: ProjectileParams) -> Tuple[float, float]:
    """(kinetic, potential); potential is zero below ground level."""
    kinetic = 0.5 * params.m * float(state[2] ** 2 + state[3] ** 2)
    potential = params.m * params.g * max(0.0, float(state[1]))
    return kinetic, potential


class Projectile(ODEModel):
    """
    Projectile kernel.

    Each sub-step takes an RK4 trial step. If the trial ends at or below the
    ground, the trial is discarded: y is clamped to 0, vy is reflected and
    scaled by the elasticity, vx loses GROUND_FRICTION. A projectile resting
    on the ground with |vy| < REST_SPEED is stopped and marked finished.

    The speed multiplier scales dt linearly; large multipliers can make the
    integrator unstable and nothing here prevents that.
    """

    def __init__(
        self,
        params: Optional[ProjectileParams] = None,
        substeps: int = 2,
        **kwargs: Any,
    ) -> None:
        super().__init__(substeps=substeps, **kwargs)
        self.params = params or ProjectileParams()
        self.finished = False
        self.bounces = 0

    def rhs(self, x: np.ndarray, u: np.ndarray, t: float) -> np.ndarray:
        return derivatives(x, self.params)

    def initialize(self, **kwargs: Any) -> None:
        super().initialize(**kwargs)
        self.finished = False
        self.bounces = 0

    def bounce(self, state: np.ndarray) -> np.ndarray:
        """Ground contact applied to the pre-impact state."""
        x, _, vx, vy = state
        vy = -vy * self.params.elasticity
        vx = vx * GROUND_FRICTION
        self.bounces += 1
        if abs(vy) < REST_SPEED:
            vx, vy = 0.0, 0.0
            self.finished = True
        return np.array([x, 0.0, vx, vy])

    def step(
        self,
        *,
        state: np.ndarray,
        u: Optional[np.ndarray] = None,
        dt: float,
        **kwargs: Any,
    ) -> Dict[str, Any]:
        x = np.atleast_1d(np.asarray(state, dtype=float))
        u_arr = np.array([])
        bounced = False
        h = dt / self.substeps
        for _ in range(self.substeps):
            if self.finished:
                break
            trial = self.integrator.step(self.rhs, x, u_arr, self._t, h)
            if trial[1] <= 0:
                x = self.bounce(x)
                bounced = True
            else:
                x = trial
                self._t += h
        return {
            "state": x,
            "bounced": bounced,
            "finished": self.finished,
        }

    def state_dict(self) -> Dict[str, Any]:
        return {"t": self._t, "finished": self.finished, "bounces": self.bounces}


def predict_trajectory(
    params: ProjectileParams,
    dt: float = PREDICTION_DT,
    t_max: float = PREDICTION_T_MAX,
) -> TrajectoryPrediction:
    """
    Integrate from the launch state without bounces until y first goes
    negative or t_max is reached; the last point may lie below ground.
    """
    model = Projectile(params, substeps=1)
    x = launch_state(params)
    path = [x[:2].copy()]
    t = 0.0
    max_height = x[1]
    u_arr = np.array([])
    while x[1] >= 0 and t < t_max:
        x = model.integrator.step(model.rhs, x, u_arr, t, dt)
        path.append(x[:2].copy())
        max_height = max(max_height, x[1])
        t += dt
    return TrajectoryPrediction(
        path=np.array(path),
        flight_time=t,
        max_height=float(max_height),
        range=float(x[0]),
    )
