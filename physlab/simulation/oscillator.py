"""
Single-degree-of-freedom oscillators: a driven, damped simple pendulum and
a driven, damped spring-mass system.

Both are ODE models with state [q, dq/dt] and keep a rolling record of the
displacement and the kinetic / potential energy, sampled at a fixed
interval of model time.
"""

import math
from dataclasses import dataclass
from typing import Any, Dict, Optional, Tuple

import numpy as np

from physlab.core.history import SimHistory
from physlab.physics.ode import ODEModel

HISTORY_LENGTH = 100
# Model time between two history samples (s).
SAMPLE_INTERVAL = 0.05


class Oscillator(ODEModel):
    """Common stepping and energy bookkeeping; subclasses provide rhs()."""

    def __init__(
        self,
        substeps: int = 1,
        sample_interval: float = SAMPLE_INTERVAL,
        history_length: int = HISTORY_LENGTH,
        **kwargs: Any,
    ) -> None:
        super().__init__(substeps=substeps, **kwargs)
        if sample_interval <= 0:
            raise ValueError(f"sample_interval must be positive, got {sample_interval}")
        self.sample_interval = float(sample_interval)
        self.history = SimHistory(max_length=history_length)
        self._next_sample = 0.0

    def energies(self, x: np.ndarray) -> Tuple[float, float]:
        raise NotImplementedError

    def displacement(self, x: np.ndarray) -> float:
        return float(x[0])

    def initialize(self, **kwargs: Any) -> None:
        super().initialize(**kwargs)
        self.history.clear()
        self._next_sample = 0.0

    def step(
        self,
        *,
        state: np.ndarray,
        u: Optional[np.ndarray] = None,
        dt: float,
        **kwargs: Any,
    ) -> Dict[str, Any]:
        out = super().step(state=state, u=u, dt=dt)
        x = out["state"]
        kinetic, potential = self.energies(x)
        if self._t >= self._next_sample - 1e-9:
            self.history.append(t=self._t, value=self.displacement(x), kinetic=kinetic, potential=potential)
            self._next_sample = (math.floor(self._t / self.sample_interval + 1e-9) + 1) * self.sample_interval
        out.update(kinetic=kinetic, potential=potential)
        return out

    def state_dict(self) -> Dict[str, Any]:
        return {"t": self._t, "history": self.history.to_dict()}


@dataclass
class SimplePendulumParams:
    """
    Pendulum on a light rod. drive_amplitude * cos(drive_frequency * t) is
    added to the angular acceleration. elevator_acc adds to g; a non-zero
    car_acc tilts the effective gravity and the equilibrium angle. With
    peg_depth set, a peg that far below the pivot shortens the swinging
    length while theta > 0. A cut rod leaves the bob spinning freely.
    """

    length: float = 1.0
    mass: float = 1.0
    g: float = 9.81
    damping: float = 0.0
    drive_amplitude: float = 0.0
    drive_frequency: float = 0.0
    elevator_acc: float = 0.0
    car_acc: float = 0.0
    peg_depth: Optional[float] = None
    cut: bool = False


def effective_gravity(params: SimplePendulumParams) -> Tuple[float, float]:
    """(g_eff, equilibrium angle) in the accelerating frame."""
    if params.car_acc != 0:
        return math.hypot(params.g, params.car_acc), math.atan(params.car_acc / params.g)
    return params.g + params.elevator_acc, 0.0


def swing_length(theta: float, params: SimplePendulumParams) -> float:
    if params.peg_depth is not None and theta > 0:
        return params.length - params.peg_depth
    return params.length


class SimplePendulum(Oscillator):
    """State [theta, omega], theta from the downward vertical."""

    def __init__(self, params: Optional[SimplePendulumParams] = None, **kwargs: Any) -> None:
        super().__init__(**kwargs)
        self.params = params or SimplePendulumParams()

    def initial_state(self, theta: float = math.radians(10), omega: float = 0.0) -> np.ndarray:
        return np.array([theta, omega], dtype=float)

    def rhs(self, x: np.ndarray, u: np.ndarray, t: float) -> np.ndarray:
        p = self.params
        theta, omega = x
        if p.cut:
            return np.array([omega, 0.0])
        g_eff, shift = effective_gravity(p)
        alpha = (
            -(g_eff / swing_length(theta, p)) * np.sin(theta - shift)
            - p.damping * omega
            + p.drive_amplitude * np.cos(p.drive_frequency * t)
        )
        return np.array([omega, alpha])

    def energies(self, x: np.ndarray) -> Tuple[float, float]:
        # potential measured from the (possibly tilted) equilibrium
        p = self.params
        theta, omega = x
        g_eff, shift = effective_gravity(p)
        length = swing_length(theta, p)
        kinetic = 0.5 * p.mass * (length * omega) ** 2
        potential = p.mass * g_eff * length * (1 - np.cos(theta - shift))
        return float(kinetic), float(potential)

    def small_angle_period(self) -> float:
        g_eff, _ = effective_gravity(self.params)
        return 2 * math.pi * math.sqrt(self.params.length / g_eff)


@dataclass
class SpringParams:
    """
    Mass on a spring. A vertical spring or an incline (incline_deg, which
    takes precedence) shifts the equilibrium by the gravity load; a charge in
    a uniform field adds charge * field / k on top.
    """

    k: float = 50.0
    mass: float = 1.0
    g: float = 9.81
    damping: float = 0.0
    drive_amplitude: float = 0.0
    drive_frequency: float = 0.0
    vertical: bool = False
    incline_deg: float = 0.0
    charge: float = 0.0
    field: float = 0.0


def spring_equilibrium(params: SpringParams) -> float:
    eq = 0.0
    if params.incline_deg:
        eq = params.mass * params.g * math.sin(math.radians(params.incline_deg)) / params.k
    elif params.vertical:
        eq = params.mass * params.g / params.k
    return eq + params.charge * params.field / params.k


class SpringOscillator(Oscillator):
    """
    State [x, v], x the spring extension. A vertical spring whose
    acceleration points downward faster than g reports detached; the
    equations themselves keep the mass attached.
    """

    def __init__(self, params: Optional[SpringParams] = None, **kwargs: Any) -> None:
        super().__init__(**kwargs)
        self.params = params or SpringParams()
        self.detached = False

    def initial_state(self, x: float = 0.2, v: float = 0.0) -> np.ndarray:
        return np.array([x, v], dtype=float)

    @property
    def equilibrium(self) -> float:
        return spring_equilibrium(self.params)

    def rhs(self, x: np.ndarray, u: np.ndarray, t: float) -> np.ndarray:
        p = self.params
        pos, vel = x
        force = -p.k * (pos - self.equilibrium) - p.damping * vel + p.drive_amplitude * np.cos(p.drive_frequency * t)
        return np.array([vel, force / p.mass])

    def displacement(self, x: np.ndarray) -> float:
        return float(x[0] - self.equilibrium)

    def energies(self, x: np.ndarray) -> Tuple[float, float]:
        p = self.params
        kinetic = 0.5 * p.mass * x[1] ** 2
        potential = 0.5 * p.k * (x[0] - self.equilibrium) ** 2
        return float(kinetic), float(potential)

    def initialize(self, **kwargs: Any) -> None:
        super().initialize(**kwargs)
        self.detached = False

    def step(
        self,
        *,
        state: np.ndarray,
        u: Optional[np.ndarray] = None,
        dt: float,
        **kwargs: Any,
    ) -> Dict[str, Any]:
        out = super().step(state=state, u=u, dt=dt)
        if self.params.vertical and self.rhs(out["state"], np.array([]), self._t)[1] < -self.params.g:
            self.detached = True
        out["detached"] = self.detached
        return out

    def state_dict(self) -> Dict[str, Any]:
        return {**super().state_dict(), "detached": self.detached}
