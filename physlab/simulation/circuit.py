"""
Capacitor in an RC branch: explicit Euler transient for charge/discharge,
plus the steady-state AC quantities shown alongside it.
"""

import logging
import math
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional, Tuple

import numpy as np

from physlab.core.component import SimComponent
from physlab.physics.integrators import euler_step

logger = logging.getLogger(__name__)

EPSILON_0 = 8.854e-12


class SwitchMode(str, Enum):
    CHARGE = "Charge"
    DISCHARGE = "Discharge"


def rc_step(
    vc: float,
    vs: float,
    r: float,
    c: float,
    dt: float,
    mode: SwitchMode = SwitchMode.CHARGE,
) -> Tuple[float, float]:
    """
    One Euler step of the capacitor voltage; returns (vc_next, current).

    Charging: I = (Vs - Vc) / R, Vc is clamped to at most Vs.
    Discharging: I = Vc / R, Vc is clamped to at least 0.
    With C == 0 the voltage is left unchanged.
    """
    charging = SwitchMode(mode) is SwitchMode.CHARGE
    current = (vs - vc) / r if charging else vc / r
    if c == 0:
        logger.debug("zero capacitance, skipping %s update", "charge" if charging else "discharge")
        return vc, current
    dv = current / c if charging else -current / c
    nxt = float(euler_step(lambda x, u, t: dv, np.array([vc]), np.array([]), 0.0, dt)[0])
    return (min(vs, nxt) if charging else max(0.0, nxt)), current


def plate_capacitance(epsilon_r: float, area_cm2: float, gap_mm: float) -> float:
    """Parallel-plate capacitance in farad (area in cm^2, gap in mm)."""
    return epsilon_r * EPSILON_0 * (area_cm2 * 1e-4) / (gap_mm * 1e-3)


def reactance(frequency: float, c: float) -> float:
    if frequency == 0 or c == 0:
        return math.inf
    return 1.0 / (2 * math.pi * frequency * c)


def impedance(r: float, xc: float) -> float:
    return math.sqrt(r * r + xc * xc)


def stored_energy(c: float, v: float) -> float:
    return 0.5 * c * v * v


def stored_charge(c: float, v: float) -> float:
    return c * v


@dataclass
class ACResponse:
    """Steady-state series RC driven by a sine source."""

    reactance: float
    impedance: float
    current: float
    phase: float
    peak_charge: float


def ac_response(voltage: float, r: float, c: float, frequency: float) -> ACResponse:
    """Current amplitude V/Z; phase atan2(Xc, R) by which current leads voltage."""
    xc = reactance(frequency, c)
    z = impedance(r, xc)
    return ACResponse(
        reactance=xc,
        impedance=z,
        current=voltage / z,
        phase=math.atan2(xc, r),
        peak_charge=stored_charge(c, voltage),
    )


@dataclass
class RCParams:
    source_voltage: float = 12.0
    resistance: float = 100.0
    capacitance: float = 1e-3


class RCCircuit(SimComponent):
    """
    RC transient kernel. State is [Vc]; the switch mode can be flipped
    between ticks.
    """

    def __init__(self, params: Optional[RCParams] = None, mode: SwitchMode = SwitchMode.CHARGE) -> None:
        self.params = params or RCParams()
        self.mode = SwitchMode(mode)

    def initialize(self, **kwargs: Any) -> None:
        mode = kwargs.get("mode")
        if mode is not None:
            self.mode = SwitchMode(mode)

    def step(
        self,
        *,
        state: np.ndarray,
        u: Optional[np.ndarray] = None,
        dt: float,
        **kwargs: Any,
    ) -> Dict[str, Any]:
        p = self.params
        vc = float(np.atleast_1d(state)[0])
        vc, current = rc_step(vc, p.source_voltage, p.resistance, p.capacitance, dt, self.mode)
        return {
            "state": np.array([vc]),
            "current": current,
            "charge": stored_charge(p.capacitance, vc),
        }

    def state_dict(self) -> Dict[str, Any]:
        return {"mode": self.mode.value}
