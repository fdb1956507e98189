"""
Clausing Factor Simulation Driver

Runs the Monte Carlo tracer over npart independent particles and reduces
the outcomes to ClausingResults.

Particles are split into contiguous batches, one per worker. Every batch
gets its own numpy.random.Generator spawned from a single SeedSequence, and
its own tally; tallies are merged once all batches finish. The tracing
kernel releases the GIL, so batches run concurrently in a thread pool.
"""

import dataclasses
import logging
import time
from concurrent.futures import ThreadPoolExecutor
from typing import List, Optional, Sequence

import numpy as np

from .constants import MAX_COLLISIONS, OUTCOME_NAMES
from .diagnostics import ClausingTally, merge_tallies, reduce_tally
from .geometry.grids import build_geometry
from .params import ClausingParams, ClausingResults, InvalidParameter, LENGTH_FIELDS, RADIUS_FIELDS
from .tracing.tracer import trace_batch, trace_path

logger = logging.getLogger(__name__)


def _split_particles(npart, n_workers):
    base, extra = divmod(npart, n_workers)
    return [base + 1 if i < extra else base for i in range(n_workers)]


def _spawn_generators(seed, n_streams):
    seed_seq = np.random.SeedSequence(seed)
    return [np.random.default_rng(child) for child in seed_seq.spawn(n_streams)]


def _check_run_options(n_workers, max_collisions):
    if isinstance(n_workers, bool) or not isinstance(n_workers, (int, np.integer)) or n_workers < 1:
        raise InvalidParameter("n_workers", n_workers, "need at least one worker")
    if isinstance(max_collisions, bool) or not isinstance(max_collisions, (int, np.integer)) \
            or max_collisions < 1:
        raise InvalidParameter("max_collisions", max_collisions, "collision budget must be >= 1")


def run_simulation(
    params: ClausingParams,
    seed: Optional[int] = None,
    n_workers: int = 1,
    max_collisions: int = MAX_COLLISIONS,
) -> ClausingResults:
    """
    Monte Carlo Clausing factor and downstream correction for a grid pair.

    Args:
        params: Grid pair description and particle count
        seed: Seed for the random streams. None draws fresh OS entropy.
        n_workers: Number of independent batches traced concurrently
        max_collisions: Wall strikes allowed before a particle is lost

    Returns:
        results: ClausingResults

    Raises:
        InvalidParameter: If params or the run options are out of range

    Notes:
        Results are bit-identical for the same (params, seed, n_workers).
        Changing n_workers changes how the random streams are assigned to
        particles, so results differ within Monte Carlo noise.
    """
    geometry = build_geometry(params)
    _check_run_options(n_workers, max_collisions)

    z_bounds, radii = geometry.as_arrays()
    batch_sizes = _split_particles(params.npart, n_workers)
    generators = _spawn_generators(seed, n_workers)

    logger.info("Tracing %d particles in %d batch(es) through %r",
                params.npart, n_workers, geometry)
    start = time.time()

    def run_batch(n_batch, rng):
        batch = trace_batch(z_bounds, radii, max_collisions, n_batch, rng)
        return ClausingTally.from_batch(n_batch, batch)

    if n_workers == 1:
        tallies = [run_batch(batch_sizes[0], generators[0])]
    else:
        with ThreadPoolExecutor(max_workers=n_workers) as executor:
            tallies = list(executor.map(run_batch, batch_sizes, generators))

    tally = merge_tallies(tallies)
    area_ratio = (params.r_screen / params.r_accel) ** 2
    results = reduce_tally(tally, area_ratio=area_ratio)

    elapsed = time.time() - start
    logger.info("Done in %.3f s: clausing_factor=%.6f, nlost=%d, max_count=%d, den_cor=%.6f",
                elapsed, results.clausing_factor, results.nlost, results.max_count,
                results.den_cor)
    if results.nlost > 0:
        logger.warning("%d of %d particles exceeded the collision budget of %d",
                       results.nlost, params.npart, max_collisions)

    return results


SWEEPABLE_FIELDS = RADIUS_FIELDS + LENGTH_FIELDS


def sweep_parameter(
    params: ClausingParams,
    name: str,
    values: Sequence[float],
    seed: Optional[int] = None,
    n_workers: int = 1,
    max_collisions: int = MAX_COLLISIONS,
) -> List[ClausingResults]:
    """
    Rerun the simulation with one geometric parameter varied.

    Every point uses the same seed, so neighbouring points share their
    random streams and their difference reflects the geometry change rather
    than independent noise.

    Args:
        params: Baseline parameters
        name: One of thick_screen, thick_accel, r_screen, r_accel, grid_space
        values: Values to substitute for that field
        seed: Seed shared by every point
        n_workers: Batches per point
        max_collisions: Collision budget per particle

    Returns:
        results: One ClausingResults per value

    Raises:
        InvalidParameter: For an unknown field name or an invalid value
    """
    if name not in SWEEPABLE_FIELDS:
        raise InvalidParameter("name", name, f"must be one of {', '.join(SWEEPABLE_FIELDS)}")

    results = []
    for value in values:
        point = dataclasses.replace(params, **{name: value})
        logger.info("Sweep %s = %g", name, value)
        results.append(run_simulation(point, seed=seed, n_workers=n_workers,
                                      max_collisions=max_collisions))

    return results


def trace_trajectory(
    params: ClausingParams,
    seed: Optional[int] = None,
    max_collisions: int = MAX_COLLISIONS,
):
    """
    Trace a single particle and return its event points.

    Args:
        params: Grid pair description (npart is ignored)
        seed: Seed for the random stream
        max_collisions: Collision budget

    Returns:
        path: Launch point, every wall or face strike and the exit point,
            shape (n_points, 3)
        outcome: 'transmitted', 'reflected' or 'lost'
        n_collisions: Number of strikes
    """
    geometry = build_geometry(params)
    _check_run_options(1, max_collisions)

    z_bounds, radii = geometry.as_arrays()
    rng = np.random.default_rng(seed)
    path, state, n_collisions = trace_path(z_bounds, radii, max_collisions, rng,
                                           max_collisions + 3)

    return path, OUTCOME_NAMES[state], int(n_collisions)
