"""
Parameter Sweep: Weight vs Cohesion Analysis

Sweeps one flocking weight (attraction by default) over a log-spaced range
and measures how well the flock holds together. Because every weight
divides its rule, larger values mean a weaker rule; the sweep looks for the
value where the flock stops forming a single group.
"""

import os
import sys

import numpy as np
from tqdm import tqdm

sys.path.append(os.path.join(os.path.dirname(__file__), ".."))

from flocksim.analysis.metrics import calculate_fragmentation, calculate_order_parameter
from flocksim.config import Config, Configuration, Viewport
from flocksim.core.flock import Flock

CLUSTER_RADIUS = Config.NEIGHBOR_RADIUS / 2.0


def find_critical_threshold(values, cluster_sizes, threshold=0.5):
    """
    Find the weight where cohesion drops below a threshold.
    Uses linear interpolation between data points.

    Args:
        values: Array of tested weight values (ascending)
        cluster_sizes: Corresponding normalized cluster sizes
        threshold: Cohesion threshold (default 0.5 = 50% of agents in largest cluster)

    Returns:
        Critical weight, or None if cohesion never crosses the threshold
    """
    cluster_sizes = np.array(cluster_sizes)

    # Cohesion falls as the weight grows, so look for a downward crossing
    for i in range(len(cluster_sizes) - 1):
        if cluster_sizes[i] >= threshold > cluster_sizes[i + 1]:
            v1, v2 = values[i], values[i + 1]
            c1, c2 = cluster_sizes[i], cluster_sizes[i + 1]
            return v1 + (threshold - c1) * (v2 - v1) / (c2 - c1)

    if np.all(cluster_sizes < threshold):
        return values[0]  # Never cohesive

    return None


def run_sweep(
    param="attraction",
    n_values=12,
    n_trials=3,
    warmup_steps=500,
    measure_steps=50,
    n_agents=Config.N_AGENTS,
    seed=0,
):
    """
    Run a parameter sweep with statistical analysis.

    Args:
        param: Configuration field to sweep
        n_values: Number of values to test, log-spaced over the field's bounds
        n_trials: Number of seeded trials per value
        warmup_steps: Simulation steps before measuring
        measure_steps: Number of measurement samples (averaged for stability)

    Returns:
        Dictionary containing all results and statistics
    """
    if param not in Configuration.BOUNDS:
        raise ValueError(f"Unknown configuration field: {param}")

    lo, hi = Configuration.BOUNDS[param]
    values = np.geomspace(lo, hi, n_values)
    viewport = Viewport()

    print("=" * 60)
    print("BOUNDED BOIDS SIMULATION - PARAMETER SWEEP")
    print("=" * 60)
    print(f"Configuration: N={n_agents}, sweeping {param} from {lo:g} to {hi:g}")
    print(f"Trials per value: {n_trials}, Warmup: {warmup_steps} steps")
    print("=" * 60)

    all_cluster_sizes = []
    all_order_params = []

    for value in tqdm(values, desc=f"Sweeping {param}"):
        trial_clusters = []
        trial_orders = []

        for trial in range(n_trials):
            config = Configuration().update(**{param: value})
            flock = Flock(
                n=n_agents, viewport=viewport, config=config, rng=seed + trial
            )
            flock.run(warmup_steps)

            sample_clusters = []
            sample_orders = []
            for _ in range(measure_steps):
                flock.step()
                _, largest = calculate_fragmentation(flock.pos, CLUSTER_RADIUS)
                sample_clusters.append(largest / n_agents)
                sample_orders.append(calculate_order_parameter(flock.vel))

            trial_clusters.append(np.mean(sample_clusters))
            trial_orders.append(np.mean(sample_orders))

        all_cluster_sizes.append(trial_clusters)
        all_order_params.append(trial_orders)

    all_cluster_sizes = np.array(all_cluster_sizes)
    all_order_params = np.array(all_order_params)

    results = {
        "param": param,
        "values": values,
        "cluster_mean": np.mean(all_cluster_sizes, axis=1),
        "cluster_std": np.std(all_cluster_sizes, axis=1),
        "order_mean": np.mean(all_order_params, axis=1),
        "order_std": np.std(all_order_params, axis=1),
        "config": {
            "N_AGENTS": n_agents,
            "n_trials": n_trials,
            "warmup_steps": warmup_steps,
            "measure_steps": measure_steps,
        },
    }
    results["critical_threshold_50"] = find_critical_threshold(
        values, results["cluster_mean"], 0.5
    )
    results["critical_threshold_90"] = find_critical_threshold(
        values, results["cluster_mean"], 0.9
    )
    return results


def print_summary(results):
    """Print summary statistics and findings."""
    param = results["param"]
    print("\n" + "=" * 60)
    print("SWEEP RESULTS SUMMARY")
    print("=" * 60)

    print(f"\n{param:>12}  cohesion         order")
    for i, value in enumerate(results["values"]):
        print(
            f"{value:12.2f}  {results['cluster_mean'][i]:.3f} ± {results['cluster_std'][i]:.3f}"
            f"  {results['order_mean'][i]:.3f} ± {results['order_std'][i]:.3f}"
        )

    print(f"\nCritical Thresholds ({param}):")
    for pct in (90, 50):
        critical = results[f"critical_threshold_{pct}"]
        if critical is None:
            print(f"  - Cohesion stays above {pct}% over the whole range")
        else:
            print(f"  - {pct}% cohesion lost above: {param} = {critical:.2f}")

    print("=" * 60)


def main():
    results = run_sweep()
    print_summary(results)


if __name__ == "__main__":
    main()
