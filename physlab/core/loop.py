"""Simulation loop: fixed-step ticks driven by frame callbacks."""

import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional, Sequence

import numpy as np

from physlab.core.clock import FixedStepClock
from physlab.core.component import SimComponent
from physlab.core.history import SimHistory

logger = logging.getLogger(__name__)


@dataclass
class StepResult:
    """Outcome of one tick."""

    state: Any
    time: float
    finished: bool = False
    extra: Dict[str, Any] = field(default_factory=dict)


StepCallback = Callable[[StepResult], None]


class SimulationLoop:
    """
    Owns one kernel and its state; runs it one fixed tick at a time.

    advance(frame_dt) is meant to be called from a render/animation callback:
    it feeds the frame delta to a FixedStepClock and runs the ticks that are
    due. Each tick completes before the next starts. Stopping is just not
    calling advance() (or pause()); there is no in-flight work to cancel.
    """

    def __init__(
        self,
        component: SimComponent,
        dt: float,
        speed: float = 1.0,
        max_frame_dt: float = 0.1,
        u: Optional[Sequence[float]] = None,
        history: Optional[SimHistory] = None,
        callbacks: Optional[List[StepCallback]] = None,
    ) -> None:
        """
        Args:
            component: kernel to drive
            dt: fixed physics step
            speed: simulation speed multiplier (scales simulated time per frame)
            max_frame_dt: clamp on a single frame delta
            u: constant input passed to the kernel on every tick
            history: optional buffer; each tick's state and time are appended
            callbacks: called with every StepResult, in order
        """
        self.component = component
        self.dt = float(dt)
        self.clock = FixedStepClock(self.dt, max_frame_dt=max_frame_dt, speed=speed)
        self.u = None if u is None else np.atleast_1d(np.asarray(u, dtype=float))
        self.history = history
        self._callbacks: List[StepCallback] = list(callbacks or [])
        self._state: Any = None
        self._time = 0.0
        self._initialized = False
        self.playing = False
        self.finished = False

    def initialize(self, state: Any, **kwargs: Any) -> None:
        """Reset the loop and the kernel with an initial state."""
        if isinstance(state, (list, tuple, np.ndarray)):
            state = np.atleast_1d(np.asarray(state, dtype=float))
        self._state = state
        self._time = 0.0
        self.clock.reset()
        self.component.initialize(state=state, **kwargs)
        if self.history is not None:
            self.history.clear()
        self._initialized = True
        self.playing = True
        self.finished = False

    def add_callback(self, callback: StepCallback) -> None:
        self._callbacks.append(callback)

    def tick(self, **kwargs: Any) -> StepResult:
        """Run exactly one fixed step."""
        if not self._initialized:
            raise RuntimeError("Loop not initialized: call initialize(state) before tick().")
        out = self.component.step(state=self._state, u=self.u, dt=self.dt, **kwargs)
        self._state = out.get("state", self._state)
        self._time += self.dt
        finished = bool(out.get("finished", False))
        extra = {k: v for k, v in out.items() if k not in ("state", "finished")}
        result = StepResult(state=self._state, time=self._time, finished=finished, extra=extra)

        if self.history is not None:
            self.history.append(time=self._time, state=self._state)
        for callback in self._callbacks:
            callback(result)

        if finished and not self.finished:
            logger.info("%s finished at t=%.3f", type(self.component).__name__, self._time)
            self.finished = True
            self.playing = False
        return result

    def advance(self, frame_dt: float, **kwargs: Any) -> List[StepResult]:
        """Feed one render frame; run the fixed steps it makes due."""
        if not self.playing:
            return []
        n = self.clock.advance(frame_dt)
        results = []
        for _ in range(n):
            results.append(self.tick(**kwargs))
            if not self.playing:
                break
        return results

    def run(self, n_ticks: int, **kwargs: Any) -> List[StepResult]:
        """Run n_ticks fixed steps back to back (stops early when finished)."""
        results = []
        for _ in range(n_ticks):
            results.append(self.tick(**kwargs))
            if self.finished:
                break
        return results

    def pause(self) -> None:
        self.playing = False

    def play(self) -> None:
        if self._initialized and not self.finished:
            self.playing = True

    @property
    def speed(self) -> float:
        return self.clock.speed

    @speed.setter
    def speed(self, value: float) -> None:
        self.clock.speed = float(value)

    @property
    def state(self) -> Any:
        """Current state."""
        return self._state

    @property
    def time(self) -> float:
        """Current simulated time."""
        return self._time

    def state_dict(self) -> Dict[str, Any]:
        """Loop and kernel state for snapshots."""
        state = self._state
        if isinstance(state, np.ndarray):
            state = state.copy()
        return {
            "state": state,
            "time": self._time,
            "finished": self.finished,
            "component": self.component.state_dict(),
        }
