"""
Damped double pendulum (Lagrangian equations of motion) advanced with RK4.

State vector: [theta1, theta2, omega1, omega2], angles from the downward
vertical. Angles are never wrapped; sin/cos do not need it.
"""

from dataclasses import dataclass
from typing import Any, Dict, Optional, Tuple

import numpy as np

from physlab.core.component import SimComponent
from physlab.physics.ode import ODEModel

# Sub-steps per tick; fixed, not derived from an error estimate.
DEFAULT_SUBSTEPS = 4
# Initial offset of the shadow pendulum on theta1 (rad).
SHADOW_OFFSET = 0.01


@dataclass
class DoublePendulumParams:
    """Physical parameters of the double pendulum."""

    m1: float = 10.0
    m2: float = 10.0
    l1: float = 150.0
    l2: float = 150.0
    g: float = 9.81
    damping: float = 0.0


def angular_accelerations(
    theta1: float, theta2: float, omega1: float, omega2: float, params: DoublePendulumParams
) -> Tuple[float, float]:
    """
    Angular accelerations of both arms, with linear damping -damping * omega.

    The shared denominator 2*m1 + m2 - m2*cos(2*theta1 - 2*theta2) is
    positive whenever m1 > 0; zero masses are not supported.
    """
    m1, m2, l1, l2, g = params.m1, params.m2, params.l1, params.l2, params.g
    delta = theta1 - theta2
    den = 2 * m1 + m2 - m2 * np.cos(2 * theta1 - 2 * theta2)

    alpha1 = (
        -g * (2 * m1 + m2) * np.sin(theta1)
        - m2 * g * np.sin(theta1 - 2 * theta2)
        - 2 * np.sin(delta) * m2 * (omega2**2 * l2 + omega1**2 * l1 * np.cos(delta))
    ) / (l1 * den)

    alpha2 = (
        2
        * np.sin(delta)
        * (
            omega1**2 * l1 * (m1 + m2)
            + g * (m1 + m2) * np.cos(theta1)
            + omega2**2 * l2 * m2 * np.cos(delta)
        )
    ) / (l2 * den)

    return alpha1 - params.damping * omega1, alpha2 - params.damping * omega2


def initial_state(
    theta1: float = np.pi / 2,
    theta2: float = np.pi / 2,
    omega1: float = 0.0,
    omega2: float = 0.0,
) -> np.ndarray:
    return np.array([theta1, theta2, omega1, omega2], dtype=float)


def bob_positions(state: np.ndarray, params: DoublePendulumParams) -> Tuple[float, float, float, float]:
    """(x1, y1, x2, y2) with the pivot at the origin and y pointing down."""
    theta1, theta2 = state[0], state[1]
    x1 = params.l1 * np.sin(theta1)
    y1 = params.l1 * np.cos(theta1)
    x2 = x1 + params.l2 * np.sin(theta2)
    y2 = y1 + params.l2 * np.cos(theta2)
    return x1, y1, x2, y2


def total_energy(state: np.ndarray, params: DoublePendulumParams) -> float:
    """Kinetic plus potential energy, potential measured from the pivot."""
    theta1, theta2, omega1, omega2 = state
    m1, m2, l1, l2, g = params.m1, params.m2, params.l1, params.l2, params.g

    kinetic = (
        0.5 * (m1 + m2) * l1**2 * omega1**2
        + 0.5 * m2 * l2**2 * omega2**2
        + m2 * l1 * l2 * omega1 * omega2 * np.cos(theta1 - theta2)
    )
    potential = -(m1 + m2) * g * l1 * np.cos(theta1) - m2 * g * l2 * np.cos(theta2)
    return float(kinetic + potential)


class DoublePendulum(ODEModel):
    """Double pendulum as an ODE model; RK4 with DEFAULT_SUBSTEPS per tick."""

    def __init__(
        self,
        params: Optional[DoublePendulumParams] = None,
        substeps: int = DEFAULT_SUBSTEPS,
        **kwargs: Any,
    ) -> None:
        super().__init__(substeps=substeps, **kwargs)
        self.params = params or DoublePendulumParams()

    def rhs(self, x: np.ndarray, u: np.ndarray, t: float) -> np.ndarray:
        theta1, theta2, omega1, omega2 = x
        alpha1, alpha2 = angular_accelerations(theta1, theta2, omega1, omega2, self.params)
        return np.array([omega1, omega2, alpha1, alpha2])

    def energy(self, state: np.ndarray) -> float:
        return total_energy(state, self.params)


class ShadowedPendulum(SimComponent):
    """
    A pendulum and its shadow copy, for showing sensitivity to initial
    conditions.

    Composite state: [primary (4), shadow (4)]. Both halves use the same
    equations and step size and are integrated independently; nothing
    couples them.
    """

    def __init__(
        self,
        params: Optional[DoublePendulumParams] = None,
        substeps: int = DEFAULT_SUBSTEPS,
        offset: float = SHADOW_OFFSET,
    ) -> None:
        self.params = params or DoublePendulumParams()
        self.offset = float(offset)
        self.primary = DoublePendulum(self.params, substeps=substeps)
        self.shadow = DoublePendulum(self.params, substeps=substeps)

    def initial_state(self, primary: np.ndarray) -> np.ndarray:
        """Composite state with the shadow started offset rad away on theta1."""
        primary = np.asarray(primary, dtype=float)
        shadow = primary.copy()
        shadow[0] += self.offset
        return np.concatenate([primary, shadow])

    def initialize(self, **kwargs: Any) -> None:
        self.primary.initialize()
        self.shadow.initialize()

    def step(
        self,
        *,
        state: np.ndarray,
        u: Optional[np.ndarray] = None,
        dt: float,
        **kwargs: Any,
    ) -> Dict[str, Any]:
        state = np.atleast_1d(np.asarray(state, dtype=float))
        if state.shape != (8,):
            raise ValueError(f"state must have length 8, got shape {state.shape}")
        x1 = self.primary.step(state=state[:4], dt=dt)["state"]
        x2 = self.shadow.step(state=state[4:], dt=dt)["state"]
        return {"state": np.concatenate([x1, x2]), "divergence": divergence(x1, x2)}

    def state_dict(self) -> Dict[str, Any]:
        return {"primary": self.primary.state_dict(), "shadow": self.shadow.state_dict()}


def divergence(a: np.ndarray, b: np.ndarray) -> float:
    """Distance between two pendulum states in angle space."""
    return float(np.hypot(a[0] - b[0], a[1] - b[1]))
