"""
Example 01: Example Grid Pair

Clausing factor and downstream correction for the documented screen/accel
pair (r_screen = 2, r_accel = 1, t_screen = 1, t_accel = 0.5, gap = 0.3),
with a convergence check in particle count.

Shows:
- Single run and its summary
- Statistical error vs npart (1/sqrt(N))
- Threaded batches for the largest run
"""

import time

import numpy as np

from clausingsim import ClausingParams, run_simulation
from clausingsim.constants import EXAMPLE_PARAMS, EXAMPLE_DEN_COR


def example_grid_pair():
    print("=" * 70)
    print("EXAMPLE GRID PAIR")
    print("=" * 70)

    params = ClausingParams(**EXAMPLE_PARAMS)
    print(f"\nParameters: {params}")
    print(f"Stack length: {params.total_length:.2f}")

    # ========== SINGLE RUN ==========
    start = time.time()
    results = run_simulation(params, seed=12345)
    elapsed = time.time() - start

    print(f"\nSingle run ({elapsed:.2f} s, includes JIT compilation):")
    results.summary()
    print(f"  Documented den_cor: {EXAMPLE_DEN_COR:.6f}")

    # ========== CONVERGENCE ==========
    print("\n" + "=" * 70)
    print("CONVERGENCE IN PARTICLE COUNT")
    print("=" * 70)
    print(f"\n  {'npart':>10}  {'K':>9}  {'sigma':>9}  {'den_cor':>9}  {'time [s]':>9}")

    for npart in [1_000, 10_000, 100_000, 1_000_000]:
        point = ClausingParams(**dict(EXAMPLE_PARAMS, npart=npart))
        n_workers = 4 if npart >= 100_000 else 1

        start = time.time()
        r = run_simulation(point, seed=npart, n_workers=n_workers)
        elapsed = time.time() - start

        sigma = np.sqrt(r.clausing_factor * (1.0 - r.clausing_factor) / npart)
        print(f"  {npart:>10,}  {r.clausing_factor:9.5f}  {sigma:9.5f}  "
              f"{r.den_cor:9.5f}  {elapsed:9.2f}")

    print("\n" + "=" * 70)


if __name__ == "__main__":
    example_grid_pair()
