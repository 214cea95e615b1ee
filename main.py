#!/usr/bin/env python3
"""
Bounded Boids Simulation

A 2-D flock of point agents steered by three pairwise rules (alignment,
cohesion, separation) and kept inside a rectangular viewport by soft wall
steering plus a hard clamp.

Usage:
    python main.py                          # Run headless with default weights
    python main.py --steps 5000 --seed 7    # Longer, reproducible run
    python main.py --attraction 500 --closeness 40
    python main.py --sweep                  # Attraction sweep

For parameter sweeps:
    python experiments/sweep.py             # Sweep one weight, report cohesion
"""

import argparse
import logging

from flocksim.analysis.metrics import (
    calculate_fragmentation,
    calculate_mean_speed,
    calculate_order_parameter,
)
from flocksim.config import Config, Configuration, Viewport
from flocksim.core.flock import Flock

# Agents closer than this count as one group when reporting
CLUSTER_RADIUS = Config.NEIGHBOR_RADIUS / 2.0


def build_parser():
    defaults = Configuration()
    parser = argparse.ArgumentParser(
        description="Bounded Boids Simulation",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    parser.add_argument("--steps", type=int, default=Config.STEPS, help="Ticks to run")
    parser.add_argument(
        "--agents", "-n", type=int, default=Config.N_AGENTS, help="Flock size"
    )
    parser.add_argument("--seed", type=int, default=None, help="Random seed")
    parser.add_argument("--width", type=float, default=Config.WIDTH)
    parser.add_argument("--height", type=float, default=Config.HEIGHT)
    for name, (lo, hi) in Configuration.BOUNDS.items():
        parser.add_argument(
            f"--{name}",
            type=float,
            default=getattr(defaults, name),
            help=f"{name.capitalize()} weight (expected {lo:g}..{hi:g})",
        )
    parser.add_argument(
        "--report-every",
        type=int,
        default=250,
        help="Print metrics every N ticks (0 to disable)",
    )
    parser.add_argument(
        "--sweep", action="store_true", help="Run the attraction sweep instead"
    )
    parser.add_argument("--verbose", "-v", action="store_true", help="Debug logging")
    return parser


def format_metrics(flock):
    order = calculate_order_parameter(flock.vel)
    n_fragments, largest = calculate_fragmentation(flock.pos, CLUSTER_RADIUS)
    return (
        f"Step: {flock.ticks:6d}  |  Order: {order:.3f}  |  "
        f"Cohesion: {largest / flock.N:.3f}  |  Fragments: {n_fragments:3d}  |  "
        f"Speed: {calculate_mean_speed(flock.vel):.3f}"
    )


def run(args):
    config = Configuration(
        attraction=args.attraction,
        repulsion=args.repulsion,
        direction=args.direction,
        closeness=args.closeness,
    )
    if config.out_of_range():
        print(f"Warning: outside expected range: {', '.join(config.out_of_range())}")

    viewport = Viewport(args.width, args.height)
    flock = Flock(n=args.agents, viewport=viewport, config=config, rng=args.seed)

    print(Config.info())
    print(f"Weights: {config}")
    print("=" * 60)

    for _ in range(args.steps):
        flock.step()
        if args.report_every and flock.ticks % args.report_every == 0:
            print(format_metrics(flock))

    print("=" * 60)
    print("Final state:")
    print(format_metrics(flock))
    if flock.skipped_terms:
        print(f"Skipped terms: {', '.join(flock.skipped_terms)}")
    return flock


def main(argv=None):
    args = build_parser().parse_args(argv)

    if args.verbose:
        logging.basicConfig(
            level=logging.DEBUG, format="%(asctime)s %(name)s %(levelname)s %(message)s"
        )

    if args.sweep:
        from experiments.sweep import main as sweep

        sweep()
        return

    run(args)


if __name__ == "__main__":
    main()
