"""
Projectile with drag, spin and bounces: prints the bounce-free prediction,
then flies the shot until it comes to rest.
"""

import argparse
import logging
import sys
from pathlib import Path

import numpy as np

ROOT = Path(__file__).resolve().parents[2]
sys.path.insert(0, str(ROOT))

from physlab.core import SimulationLoop
from physlab.io import load_params, save_params
from physlab.simulation.projectile import (
    Projectile,
    ProjectileParams,
    launch_state,
    mechanical_energy,
    predict_trajectory,
)


def main() -> None:
    parser = argparse.ArgumentParser(description="Projectile with drag and Magnus effect")
    parser.add_argument("--config", type=Path, help="JSON file with ProjectileParams fields")
    parser.add_argument("--save-config", type=Path, help="write the parameters used to this JSON file")
    parser.add_argument("--plot", action="store_true", help="save trajectory and prediction to PNG")
    args = parser.parse_args()

    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(name)s %(levelname)s: %(message)s")

    params = load_params(ProjectileParams, args.config) if args.config else ProjectileParams(drag=0.3, spin=2.0)
    if args.save_config:
        save_params(params, args.save_config)

    pred = predict_trajectory(params)
    print(f"Prediction: flight {pred.flight_time:.2f} s, max height {pred.max_height:.2f} m, range {pred.range:.2f} m")

    path = []
    bounces = []

    def record(result) -> None:
        path.append(result.state[:2].copy())
        if result.extra.get("bounced"):
            bounces.append(result.state[0])

    loop = SimulationLoop(Projectile(params), dt=1.0 / 120.0, callbacks=[record])
    loop.initialize(launch_state(params))
    loop.run(200_000)

    ke, pe = mechanical_energy(loop.state, params)
    print(f"Came to rest at x={loop.state[0]:.2f} m after {len(bounces)} bounce(s), t={loop.time:.2f} s")
    print(f"Remaining energy: kinetic {ke:.3f} J, potential {pe:.3f} J")

    if args.plot:
        from physlab.simulation import plot_trajectory

        ax = plot_trajectory(np.array(path), prediction=pred.path, title="Projectile")
        out_path = Path(__file__).resolve().parent / "projectile.png"
        ax.figure.savefig(out_path, dpi=120)
        print(f"Plot saved to {out_path}")


if __name__ == "__main__":
    main()
