"""
Particle Launcher

Samples entry states at the upstream face of the screen aperture:
- Position uniform in area over the aperture disk
- Direction from a cosine (Lambertian) law about +z, the angular
  distribution of gas effusing through an orifice

All kernels draw from an explicit numpy.random.Generator so that every
worker owns its own stream.
"""

import math

import numpy as np
from numba import njit


@njit
def sample_entry_position(r_aperture, rng):
    """
    Sample (x, y) uniformly over a disk.

    Parameters:
    -----------
    r_aperture : float
        Disk radius
    rng : numpy.random.Generator
        Random stream

    Returns:
    --------
    x, y : float
        Transverse position

    Notes:
    ------
    Inverse transform sampling: P(R < r) = (r/R)² = u gives r = R√u.
    """
    r = r_aperture * math.sqrt(rng.random())
    phi = 2.0 * math.pi * rng.random()
    return r * math.cos(phi), r * math.sin(phi)


@njit
def sample_cosine_direction(rng):
    """
    Sample a unit direction from the cosine law about +z.

    Returns:
    --------
    vx, vy, vz : float
        Unit direction with vz > 0

    Notes:
    ------
    Density ∝ cos θ sin θ on θ ∈ [0, π/2) gives cos θ = sqrt(1 - u).
    rng.random() lies in [0, 1), so vz is strictly positive.
    """
    cos_theta = math.sqrt(1.0 - rng.random())
    sin_theta = math.sqrt(1.0 - cos_theta * cos_theta)
    phi = 2.0 * math.pi * rng.random()
    return sin_theta * math.cos(phi), sin_theta * math.sin(phi), cos_theta


@njit
def launch_particles(n_particles, r_aperture, rng):
    """
    Sample a batch of entry states.

    Args:
        n_particles: Number of particles
        r_aperture: Entry aperture radius
        rng: numpy.random.Generator

    Returns:
        x: Positions, shape (n_particles, 3), all at z = 0
        v: Unit directions, shape (n_particles, 3)
    """
    x = np.zeros((n_particles, 3), dtype=np.float64)
    v = np.zeros((n_particles, 3), dtype=np.float64)

    for i in range(n_particles):
        px, py = sample_entry_position(r_aperture, rng)
        ux, uy, uz = sample_cosine_direction(rng)

        x[i, 0] = px
        x[i, 1] = py
        v[i, 0] = ux
        v[i, 1] = uy
        v[i, 2] = uz

    return x, v
