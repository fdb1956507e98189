"""
Example 03: Single Particle Trajectories

Traces a handful of particles through the example grid pair and plots the
first transmitted and first reflected path in the (r, z) half-plane.
"""

from clausingsim import ClausingParams, build_geometry, trace_trajectory
from clausingsim.constants import EXAMPLE_PARAMS
from clausingsim.diagnostics import plot_trajectory


def trajectories(n_trials=200):
    print("=" * 70)
    print("SINGLE PARTICLE TRAJECTORIES")
    print("=" * 70)

    params = ClausingParams(**EXAMPLE_PARAMS)
    geometry = build_geometry(params)
    print(f"\n{geometry}")

    wanted = {"transmitted", "reflected"}
    for seed in range(n_trials):
        path, outcome, n_collisions = trace_trajectory(params, seed=seed)
        if outcome not in wanted:
            continue
        wanted.remove(outcome)

        print(f"\n  seed {seed}: {outcome} after {n_collisions} strikes")
        for x, y, z in path:
            print(f"    ({x:+.4f}, {y:+.4f}, {z:.4f})")

        plot_trajectory(path, geometry, outcome=outcome, show=False,
                        save_filename=f"trajectory_{outcome}.png")
        if not wanted:
            break

    print("\n" + "=" * 70)


if __name__ == "__main__":
    trajectories()
