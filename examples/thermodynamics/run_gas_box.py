"""
Gas box scenarios: constant temperature, leaking box, piston. Prints the
sampled pressure, particle count and box width.
"""

import argparse
import logging
import sys
from pathlib import Path

import numpy as np

ROOT = Path(__file__).resolve().parents[2]
sys.path.insert(0, str(ROOT))

from physlab.core import SimulationLoop
from physlab.simulation.gas import GasBox, GasBoxParams, spawn_particles


def main() -> None:
    parser = argparse.ArgumentParser(description="Ideal gas particle box")
    parser.add_argument("--scenario", default="isothermal", choices=["isothermal", "hole", "piston"])
    parser.add_argument("--particles", type=int, default=50)
    parser.add_argument("--temperature", type=float, default=300.0)
    parser.add_argument("--frames", type=int, default=600)
    parser.add_argument("--seed", type=int, default=0)
    parser.add_argument("-v", "--verbose", action="store_true")
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(name)s %(levelname)s: %(message)s",
    )

    params = GasBoxParams(
        temperature=args.temperature,
        hole=args.scenario == "hole",
        piston=args.scenario == "piston",
    )
    rng = np.random.default_rng(args.seed)
    particles = spawn_particles(args.particles, (300.0, 300.0), args.temperature, rng=rng)

    box = GasBox(params)
    loop = SimulationLoop(box, dt=1.0)
    loop.initialize(particles)
    for frame, result in enumerate(loop.run(args.frames), start=1):
        if frame % 60 == 0:
            print(
                f"frame {frame:4d}  pressure {result.extra['pressure']:5d}  "
                f"particles {result.extra['count']:4d}  width {result.extra['width']:7.1f}"
            )


if __name__ == "__main__":
    main()
