"""
Example 02: Grid Space and Straight Tube Study

Parameter sweeps over the grid pair:
- Gap length between screen and accel grids
- Straight tube (r_screen = r_accel) against the Clausing table

Generates transmission curves for both studies.
"""

import dataclasses

import numpy as np

from clausingsim import ClausingParams, run_simulation, sweep_parameter
from clausingsim.constants import EXAMPLE_PARAMS
from clausingsim.diagnostics import plot_sweep
from clausingsim.geometry import clausing_factor_analytical, clausing_factor_tabulated


def grid_space_study(npart=50_000, n_workers=4):
    print("=" * 70)
    print("GRID SPACE STUDY")
    print("=" * 70)

    params = ClausingParams(**dict(EXAMPLE_PARAMS, npart=npart))
    gaps = np.linspace(0.0, 3.0, 11)

    results = sweep_parameter(params, "grid_space", gaps, seed=7, n_workers=n_workers)

    print(f"\n  {'gap':>6}  {'K':>9}  {'K_accel':>9}  {'den_cor':>9}  {'max_count':>9}")
    for gap, r in zip(gaps, results):
        print(f"  {gap:6.2f}  {r.clausing_factor:9.5f}  {r.accel_clausing_factor:9.5f}  "
              f"{r.den_cor:9.5f}  {r.max_count:9d}")

    plot_sweep("grid_space", gaps, results, show=False,
               save_filename="grid_space_study.png")


def straight_tube_study(npart=50_000, n_workers=4):
    print("\n" + "=" * 70)
    print("STRAIGHT TUBE VALIDATION")
    print("=" * 70)

    # Unit-radius tube split evenly between screen and accel, no gap
    params = ClausingParams(thick_screen=1.0, thick_accel=1.0, r_screen=1.0,
                            r_accel=1.0, grid_space=0.0, npart=npart)
    L_over_D = np.array([0.25, 0.5, 1.0, 2.0, 3.0, 5.0])

    # L = 2 * thickness and D = 2, so each grid is L/D thick
    results = [
        run_simulation(dataclasses.replace(params, thick_screen=x, thick_accel=x),
                       seed=11, n_workers=n_workers)
        for x in L_over_D
    ]

    table = [clausing_factor_tabulated(x) for x in L_over_D]
    fit = [clausing_factor_analytical(x) for x in L_over_D]

    print(f"\n  {'L/D':>6}  {'MC':>9}  {'table':>9}  {'fit':>9}  {'error':>8}")
    for x, r, k_table, k_fit in zip(L_over_D, results, table, fit):
        error = (r.clausing_factor - k_table) / k_table * 100
        print(f"  {x:6.2f}  {r.clausing_factor:9.5f}  {k_table:9.5f}  {k_fit:9.5f}  "
              f"{error:7.2f}%")

    plot_sweep("L/D", L_over_D, results, reference=table, show=False,
               save_filename="straight_tube_validation.png")

    print("\n" + "=" * 70)


if __name__ == "__main__":
    grid_space_study()
    straight_tube_study()
