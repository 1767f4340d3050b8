"""
Fixed-step ODE integrators: x_{n+1} = step(f, x_n, u_n, t_n, dt).

Purely numerical: no dependency on SimComponent. One generic routine per
scheme, shared by every kernel instead of an inlined copy per simulation.
No adaptive step control: the step size and sub-step count are fixed.
"""

from typing import Any, Callable

import numpy as np

# ODE right-hand side: (x, u, t) -> dx/dt
RHS = Callable[[np.ndarray, np.ndarray, float], np.ndarray]


def euler_step(f: RHS, x: np.ndarray, u: np.ndarray, t: float, dt: float) -> np.ndarray:
    """Explicit Euler, order 1."""
    return x + dt * f(x, u, t)


def rk4_step(f: RHS, x: np.ndarray, u: np.ndarray, t: float, dt: float) -> np.ndarray:
    """Classical Runge-Kutta 4: weights 1-2-2-1 over dt/6."""
    k1 = f(x, u, t)
    k2 = f(x + 0.5 * dt * k1, u, t + 0.5 * dt)
    k3 = f(x + 0.5 * dt * k2, u, t + 0.5 * dt)
    k4 = f(x + dt * k3, u, t + dt)
    return x + (dt / 6.0) * (k1 + 2 * k2 + 2 * k3 + k4)


def substep(
    integrator: Any,
    f: RHS,
    x: np.ndarray,
    u: np.ndarray,
    t: float,
    dt: float,
    n: int,
) -> np.ndarray:
    """Advance by dt using n equal sub-steps of dt / n."""
    if n < 1:
        raise ValueError(f"n must be >= 1, got {n}")
    h = dt / n
    for i in range(n):
        x = integrator.step(f, x, u, t + i * h, h)
    return x


class EulerIntegrator:
    """Explicit Euler integrator, order 1."""

    order = 1

    @staticmethod
    def step(f: RHS, x: np.ndarray, u: np.ndarray, t: float, dt: float) -> np.ndarray:
        return euler_step(f, x, u, t, dt)


class RK4Integrator:
    """Runge-Kutta 4 integrator, order 4."""

    order = 4

    @staticmethod
    def step(f: RHS, x: np.ndarray, u: np.ndarray, t: float, dt: float) -> np.ndarray:
        return rk4_step(f, x, u, t, dt)
