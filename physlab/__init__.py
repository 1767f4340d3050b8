"""
physlab: numerical kernels for teaching simulations (double pendulum,
projectile, gas box, standing waves, RC circuit).
"""

__version__ = "0.1.0"

from physlab.core.component import SimComponent
from physlab.core.history import SimHistory
from physlab.core.loop import SimulationLoop, StepResult

__all__ = [
    "__version__",
    "SimComponent",
    "SimHistory",
    "SimulationLoop",
    "StepResult",
]
