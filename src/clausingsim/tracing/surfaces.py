"""
Diffuse Wall Re-emission

Free-molecular particles striking a grid surface are assumed to
accommodate fully and leave with a cosine (Lambert) angular distribution
about the local surface normal, independent of the incident direction.

References:
- Bird (1994), "Molecular Gas Dynamics", Ch. 11
- Clausing (1932)
"""

import math

from numba import njit

from ..geometry.grids import wall_normal_inward


@njit
def cosine_law_direction(nx, ny, nz, rng):
    """
    Sample a unit direction from the cosine law about an arbitrary normal.

    Parameters:
    -----------
    nx, ny, nz : float
        Unit surface normal pointing INTO the gas (away from the wall)
    rng : numpy.random.Generator
        Random stream

    Returns:
    --------
    vx, vy, vz : float
        Unit direction with (v · n) > 0

    Notes:
    ------
    In the local frame (t1, t2, n):
        v = sinθ cosφ t1 + sinθ sinφ t2 + cosθ n,   cosθ = sqrt(1 - u)
    t1 is built from whichever lab axis is least aligned with n.
    """
    cos_theta = math.sqrt(1.0 - rng.random())
    sin_theta = math.sqrt(1.0 - cos_theta * cos_theta)
    phi = 2.0 * math.pi * rng.random()
    a = sin_theta * math.cos(phi)
    b = sin_theta * math.sin(phi)

    # t1 = normalize(e × n) with e = z unless n is close to z
    if abs(nz) < 0.9:
        t1x = -ny
        t1y = nx
        t1z = 0.0
    else:
        t1x = 0.0
        t1y = -nz
        t1z = ny
    norm = math.sqrt(t1x * t1x + t1y * t1y + t1z * t1z)
    t1x /= norm
    t1y /= norm
    t1z /= norm

    # t2 = n × t1
    t2x = ny * t1z - nz * t1y
    t2y = nz * t1x - nx * t1z
    t2z = nx * t1y - ny * t1x

    vx = a * t1x + b * t2x + cos_theta * nx
    vy = a * t1y + b * t2y + cos_theta * ny
    vz = a * t1z + b * t2z + cos_theta * nz

    return vx, vy, vz


@njit
def reemit_from_wall(x, y, rng):
    """
    Diffuse re-emission from the cylindrical aperture wall at (x, y).

    The normal points radially inward (toward the axis).
    """
    nx, ny, nz = wall_normal_inward(x, y)
    return cosine_law_direction(nx, ny, nz, rng)


@njit
def reemit_from_face(facing_up, rng):
    """
    Diffuse re-emission from a flat grid face.

    Args:
        facing_up: True for a face whose normal is +z (downstream face of
            the screen grid), False for -z (upstream face of the accel grid)
        rng: numpy.random.Generator
    """
    if facing_up:
        return cosine_law_direction(0.0, 0.0, 1.0, rng)
    return cosine_law_direction(0.0, 0.0, -1.0, rng)
