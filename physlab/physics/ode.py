"""ODE model base: dx/dt = rhs(x, u, t) advanced by a fixed-step integrator."""

from typing import Any, Dict, Optional

import numpy as np

from physlab.core.component import SimComponent
from physlab.physics.integrators import RK4Integrator, substep


class ODEModel(SimComponent):
    """
    Base class for kernels described by an ODE: dx/dt = f(x, u, t).
    Subclasses implement rhs().
    """

    def __init__(self, integrator: Optional[Any] = None, substeps: int = 1) -> None:
        """
        Args:
            integrator: object with step(f, x, u, t, dt). Default: RK4.
            substeps: equal sub-steps per call to step().
        """
        if substeps < 1:
            raise ValueError(f"substeps must be >= 1, got {substeps}")
        self.integrator = integrator or RK4Integrator()
        self.substeps = int(substeps)
        self._t: float = 0.0

    def rhs(self, x: np.ndarray, u: np.ndarray, t: float) -> np.ndarray:
        """Right-hand side dx/dt = rhs(x, u, t)."""
        raise NotImplementedError("Subclasses must implement rhs(x, u, t).")

    def initialize(self, **kwargs: Any) -> None:
        self._t = 0.0

    def advance(self, x: np.ndarray, u: np.ndarray, dt: float) -> np.ndarray:
        """Integrate from the model's current time by dt, without side effects."""
        return substep(self.integrator, self.rhs, x, u, self._t, dt, self.substeps)

    def step(
        self,
        *,
        state: np.ndarray,
        u: Optional[np.ndarray] = None,
        dt: float,
        **kwargs: Any,
    ) -> Dict[str, Any]:
        x = np.atleast_1d(np.asarray(state, dtype=float))
        u_arr = np.atleast_1d(u) if u is not None else np.array([])
        x_next = self.advance(x, u_arr, dt)
        self._t += dt
        return {"state": x_next}

    @property
    def time(self) -> float:
        return self._t

    def state_dict(self) -> Dict[str, Any]:
        return {"t": self._t}
