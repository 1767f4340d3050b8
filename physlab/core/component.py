"""Base interface shared by every simulation kernel."""

from abc import ABC, abstractmethod
from typing import Any, Dict, Optional

import numpy as np


class SimComponent(ABC):
    """
    Interface for a kernel advanced one fixed tick at a time:
    pendulum, projectile, gas box, string, RC branch.
    """

    @abstractmethod
    def initialize(self, **kwargs: Any) -> None:
        """Reset internal bookkeeping (time, counters) before a run."""
        pass

    @abstractmethod
    def step(
        self,
        *,
        state: Any,
        u: Optional[np.ndarray] = None,
        dt: float,
        **kwargs: Any,
    ) -> Dict[str, Any]:
        """
        Advance by one tick.

        Args:
            state: current state (vector or kernel-specific container)
            u: external input, if the kernel takes one
            dt: time step
            **kwargs: kernel-specific extras

        Returns:
            Dictionary with at least the key "state"; a truthy "finished"
            tells the loop to stop scheduling ticks.
        """
        pass

    def state_dict(self) -> Dict[str, Any]:
        """
        Internal bookkeeping for snapshots.
        Override in stateful kernels.
        """
        return {}
