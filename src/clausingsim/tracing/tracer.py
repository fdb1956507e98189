"""
Trajectory Tracer

Numba-compiled straight-line tracer for free-molecular flow through the
screen / gap / accel stack.

Each particle is a small state machine:

    TRACING --(top plane of accel region)-----------> TRANSMITTED
    TRACING --(bottom plane of screen region)--------> REFLECTED
    TRACING --(wall strike, budget exhausted)--------> LOST
    TRACING --(wall or grid-face strike)-------------> TRACING (re-emitted)
    TRACING --(internal plane inside next aperture)--> TRACING (region change)

Between two wall strikes a particle crosses at most n_regions - 1 internal
planes, so a trace takes at most n_regions * (max_collisions + 1) steps.
"""

import numpy as np
from numba import njit

from ..constants import TRACING, TRANSMITTED, REFLECTED, LOST
from ..geometry.grids import cylinder_exit_distance, plane_exit_distance, inside_radius
from .launcher import sample_entry_position, sample_cosine_direction
from .surfaces import reemit_from_wall, reemit_from_face


# ==================== SINGLE PARTICLE ====================

@njit
def _record(path, n_points, x, y, z):
    if n_points < path.shape[0]:
        path[n_points, 0] = x
        path[n_points, 1] = y
        path[n_points, 2] = z
        return n_points + 1
    return n_points


@njit(nogil=True)
def trace_particle(z_bounds, radii, max_collisions, rng, path):
    """
    Launch one particle and trace it to a terminal state.

    Parameters:
    -----------
    z_bounds : ndarray (n_regions + 1,)
        Axial region boundaries, non-decreasing
    radii : ndarray (n_regions,)
        Region radii
    max_collisions : int
        Collision budget; exceeding it ends the trace as LOST
    rng : numpy.random.Generator
        Random stream owned by the caller
    path : ndarray (n_max, 3)
        Event points are written here until it is full. Pass a (0, 3)
        array to skip recording.

    Returns:
    --------
    state : int
        TRANSMITTED, REFLECTED or LOST
    n_collisions : int
        Wall and grid-face strikes
    vz_launch : float
        Axial direction cosine at launch
    vz_exit : float
        Axial direction cosine of the last flight
    n_points : int
        Rows of path filled

    Notes:
    ------
    Ties between a plane and the side wall go to the plane. At a plane the
    particle either leaves the stack, enters the neighbouring region (if it
    lies within that region's radius) or strikes the solid annulus of the
    neighbouring grid and is re-emitted back into its own region.
    """
    n_regions = radii.shape[0]

    x, y = sample_entry_position(radii[0], rng)
    z = z_bounds[0]
    vx, vy, vz = sample_cosine_direction(rng)
    vz_launch = vz

    region = 0
    n_collisions = 0
    n_points = _record(path, 0, x, y, z)
    state = TRACING

    while state == TRACING:
        radius = radii[region]
        t_wall = cylinder_exit_distance(x, y, vx, vy, radius)
        t_plane = plane_exit_distance(z, vz, z_bounds[region], z_bounds[region + 1])

        if t_plane <= t_wall:
            # ---------- End plane of the current region ----------
            x += vx * t_plane
            y += vy * t_plane

            if vz > 0.0:
                z = z_bounds[region + 1]
                if region == n_regions - 1:
                    state = TRANSMITTED
                    n_points = _record(path, n_points, x, y, z)
                    break
                next_region = region + 1
            else:
                z = z_bounds[region]
                if region == 0:
                    state = REFLECTED
                    n_points = _record(path, n_points, x, y, z)
                    break
                next_region = region - 1

            if inside_radius(x, y, radii[next_region]):
                region = next_region
                continue

            # Solid annulus of the neighbouring grid
            n_points = _record(path, n_points, x, y, z)
            n_collisions += 1
            if n_collisions > max_collisions:
                state = LOST
                break
            vx, vy, vz = reemit_from_face(vz < 0.0, rng)

        else:
            # ---------- Side wall of the current region ----------
            x += vx * t_wall
            y += vy * t_wall
            z += vz * t_wall

            # Pin to the wall to stop radial drift
            r = np.sqrt(x * x + y * y)
            if r > 0.0:
                x *= radius / r
                y *= radius / r

            n_points = _record(path, n_points, x, y, z)
            n_collisions += 1
            if n_collisions > max_collisions:
                state = LOST
                break
            vx, vy, vz = reemit_from_wall(x, y, rng)

    return state, n_collisions, vz_launch, vz, n_points


# ==================== BATCH ====================

@njit(nogil=True)
def trace_batch(z_bounds, radii, max_collisions, n_particles, rng):
    """
    Trace a batch of independent particles and accumulate their outcomes.

    Args:
        z_bounds: Axial region boundaries
        radii: Region radii
        max_collisions: Collision budget per particle
        n_particles: Particles in this batch
        rng: numpy.random.Generator owned by this batch

    Returns:
        n_transmitted, n_reflected, n_lost: Outcome counts
        max_count: Largest collision count in the batch
        vz_launch_sum: Sum of launch axial direction cosines
        vz_exit_sum: Sum of exit axial direction cosines (transmitted only)
    """
    no_path = np.empty((0, 3), dtype=np.float64)

    n_transmitted = 0
    n_reflected = 0
    n_lost = 0
    max_count = 0
    vz_launch_sum = 0.0
    vz_exit_sum = 0.0

    for _ in range(n_particles):
        state, n_collisions, vz_launch, vz_exit, _n = trace_particle(
            z_bounds, radii, max_collisions, rng, no_path
        )

        vz_launch_sum += vz_launch
        if n_collisions > max_count:
            max_count = n_collisions

        if state == TRANSMITTED:
            n_transmitted += 1
            vz_exit_sum += vz_exit
        elif state == REFLECTED:
            n_reflected += 1
        else:
            n_lost += 1

    return n_transmitted, n_reflected, n_lost, max_count, vz_launch_sum, vz_exit_sum


@njit
def trace_path(z_bounds, radii, max_collisions, rng, max_points):
    """
    Trace one particle and keep its event points.

    Returns:
        path: Event points, shape (n_points, 3)
        state: Terminal state
        n_collisions: Wall and grid-face strikes
    """
    path = np.zeros((max_points, 3), dtype=np.float64)
    state, n_collisions, _vz0, _vz, n_points = trace_particle(
        z_bounds, radii, max_collisions, rng, path
    )
    return path[:n_points].copy(), state, n_collisions
