"""Run the bounce physics without a window and print a summary."""

from __future__ import annotations

import argparse
from pathlib import Path

import numpy as np

from circle_bounce.core.config import PhysicsConfig
from circle_bounce.core.engine import PhysicsEngine
from circle_bounce.core.state import Boundary, initial_ball
from circle_bounce.io import load_settings


def main() -> int:
    parser = argparse.ArgumentParser()
    parser.add_argument("--settings", type=Path, default=None)
    parser.add_argument("--width", type=int, default=720)
    parser.add_argument("--height", type=int, default=1280)
    parser.add_argument("--ticks", type=int, default=3600)
    parser.add_argument("--out", type=Path, default=None)
    args = parser.parse_args()

    config = load_settings(args.settings).physics if args.settings else PhysicsConfig()
    boundary = Boundary.from_surface(args.width, args.height)
    engine = PhysicsEngine(boundary, initial_ball(args.width, args.height), config)

    centers = np.zeros((args.ticks, 2), dtype=np.float64)
    radii = np.zeros(args.ticks, dtype=np.float64)
    for tick in range(args.ticks):
        engine.step()
        centers[tick] = engine.ball.center
        radii[tick] = engine.ball.radius

    print("ticks:", args.ticks)
    print("boundary radius:", boundary.radius)
    print("collisions:", engine.collision_count)
    print("final radius:", engine.ball.radius)
    print("final speed:", engine.ball.speed())

    if args.out is not None:
        np.savez_compressed(args.out, centers=centers, radii=radii)
        print("saved samples to:", args.out)

    return 0


if __name__ == "__main__":
    raise SystemExit(main())
