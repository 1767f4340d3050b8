"""
Simulation kernels, one module per lab:

  - pendulum: damped double pendulum (RK4) and its shadow copy
  - oscillator: driven, damped simple pendulum and spring-mass system
  - projectile: drag + Magnus projectile (RK4) with bounces, trajectory preview
  - gas: ideal-gas particle box (semi-implicit Euler)
  - wave: driven string (explicit finite differences)
  - circuit: RC capacitor transient (explicit Euler) and AC helpers

_utils holds the optional matplotlib plots.
"""

from physlab.simulation._utils import plot_state_vs_time, plot_trajectory
from physlab.simulation.circuit import RCCircuit, RCParams, SwitchMode, rc_step
from physlab.simulation.gas import GasBox, GasBoxParams, ParticleSet, spawn_particles
from physlab.simulation.oscillator import SimplePendulum, SimplePendulumParams, SpringOscillator, SpringParams
from physlab.simulation.pendulum import DoublePendulum, DoublePendulumParams, ShadowedPendulum
from physlab.simulation.projectile import Projectile, ProjectileParams, predict_trajectory
from physlab.simulation.wave import (
    Boundary,
    RippleSource,
    StandingWaveString,
    StringParams,
    StringState,
    WaveType,
    ripple_field,
)

__all__ = [
    "DoublePendulum",
    "DoublePendulumParams",
    "ShadowedPendulum",
    "SimplePendulum",
    "SimplePendulumParams",
    "SpringOscillator",
    "SpringParams",
    "Projectile",
    "ProjectileParams",
    "predict_trajectory",
    "GasBox",
    "GasBoxParams",
    "ParticleSet",
    "spawn_particles",
    "StandingWaveString",
    "StringParams",
    "StringState",
    "Boundary",
    "WaveType",
    "RippleSource",
    "ripple_field",
    "RCCircuit",
    "RCParams",
    "SwitchMode",
    "rc_step",
    "plot_state_vs_time",
    "plot_trajectory",
]
