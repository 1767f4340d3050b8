"""
Numerical level shared by the kernels.

  - integrators: fixed-step schemes (explicit Euler, RK4) and sub-stepping
  - ode: ODEModel base class
"""

from physlab.physics.integrators import (
    EulerIntegrator,
    RK4Integrator,
    euler_step,
    rk4_step,
    substep,
)
from physlab.physics.ode import ODEModel

__all__ = [
    "EulerIntegrator",
    "RK4Integrator",
    "euler_step",
    "rk4_step",
    "substep",
    "ODEModel",
]
