"""Core: kernel interface, fixed-step clock, loop and history."""

from physlab.core.clock import FixedStepClock
from physlab.core.component import SimComponent
from physlab.core.history import SimHistory
from physlab.core.loop import SimulationLoop, StepResult

__all__ = ["SimComponent", "FixedStepClock", "SimulationLoop", "StepResult", "SimHistory"]
