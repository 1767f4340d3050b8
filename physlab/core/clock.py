"""Fixed-step accumulator decoupling physics dt from render frame time."""

import math


class FixedStepClock:
    """
    Turns variable wall-clock frame deltas into a whole number of fixed steps.

    The frame delta is clamped to max_frame_dt (so a stalled tab does not
    unleash a burst of steps) and scaled by the speed multiplier. The
    remainder carries over to the next frame.
    """

    def __init__(self, step: float, max_frame_dt: float = 0.1, speed: float = 1.0) -> None:
        if step <= 0:
            raise ValueError(f"step must be positive, got {step}")
        self.step = float(step)
        self.max_frame_dt = float(max_frame_dt)
        self.speed = float(speed)
        self._accumulator = 0.0

    def advance(self, frame_dt: float) -> int:
        """Feed one frame delta; return how many fixed steps are due."""
        frame_dt = min(max(float(frame_dt), 0.0), self.max_frame_dt)
        self._accumulator += frame_dt * self.speed
        n = int(math.floor(self._accumulator / self.step + 1e-9))
        self._accumulator -= n * self.step
        if self._accumulator < 0.0:
            self._accumulator = 0.0
        return n

    @property
    def alpha(self) -> float:
        """Fraction of a step left in the accumulator (for interpolation)."""
        return self._accumulator / self.step

    def reset(self) -> None:
        self._accumulator = 0.0
