"""
Grid Pair Geometry Module

Implements:
- Axial partition of the aperture stack into screen, gap and accel regions
- Ray-cylinder and ray-plane exit distances
- Wall normals for diffuse re-emission

Coordinate system:
- z along the aperture axis, z = 0 at the upstream face of the screen grid
- Particles enter at z = 0 moving in +z
- Region k spans [z_bounds[k], z_bounds[k+1]] with radius radii[k]
"""

import math
from dataclasses import dataclass

import numpy as np
from numba import njit

from ..constants import PARALLEL_TOL, RADIAL_TOL


# ==================== STACK GEOMETRY ====================

SCREEN_REGION = 0
GAP_REGION = 1
ACCEL_REGION = 2

REGION_NAMES = ("screen", "gap", "accel")


@dataclass(frozen=True)
class GridGeometry:
    """
    Three coaxial cylindrical regions of a screen/accel grid pair.

    Attributes:
        z_bounds: Axial boundaries, shape (4,), non-decreasing
        radii: Region radii, shape (3,)

    The gap is bounded by the larger of the two aperture radii. The part of
    a grid face that lies outside the neighbouring aperture is solid and
    re-emits particles that reach it.
    """

    z_bounds: tuple
    radii: tuple

    @property
    def length(self):
        return self.z_bounds[-1] - self.z_bounds[0]

    @property
    def n_regions(self):
        return len(self.radii)

    def as_arrays(self):
        """
        Float64 copies for the tracing kernels.

        Returns:
            z_bounds: ndarray (4,)
            radii: ndarray (3,)
        """
        return (np.array(self.z_bounds, dtype=np.float64),
                np.array(self.radii, dtype=np.float64))

    def __repr__(self):
        regions = ", ".join(
            f"{name}=[{self.z_bounds[k]:.3g}, {self.z_bounds[k + 1]:.3g}] r={self.radii[k]:.3g}"
            for k, name in enumerate(REGION_NAMES)
        )
        return f"GridGeometry({regions})"


def build_geometry(params):
    """
    Derive the region layout from run parameters.

    Args:
        params: ClausingParams

    Returns:
        geometry: GridGeometry

    Raises:
        InvalidParameter: If a length or radius is out of range
    """
    params.validate()

    z1 = params.thick_screen
    z2 = z1 + params.grid_space
    z3 = z2 + params.thick_accel

    return GridGeometry(
        z_bounds=(0.0, float(z1), float(z2), float(z3)),
        radii=(float(params.r_screen),
               float(max(params.r_screen, params.r_accel)),
               float(params.r_accel)),
    )


# ==================== INTERSECTIONS ====================

@njit
def cylinder_exit_distance(x, y, vx, vy, radius):
    """
    Path length to the wall of an axis-centred cylinder.

    Solves |(x, y) + t (vx, vy)| = radius and returns the larger root, so a
    particle sitting on the wall and moving inward gets the far side of the
    aperture rather than a zero-length hit on its own strike point.

    Parameters:
    -----------
    x, y : float
        Transverse position (inside or on the wall)
    vx, vy : float
        Transverse direction components
    radius : float
        Cylinder radius

    Returns:
    --------
    t : float
        Distance along the ray (>= 0), np.inf if the ray is parallel to the axis

    Notes:
    ------
    With a = vx² + vy², b = x·vx + y·vy, c = x² + y² - R²:
        t = (-b + sqrt(b² - a·c)) / a
    A negative discriminant only arises from rounding when the particle sits
    marginally outside the wall; it is clamped to zero.
    """
    a = vx * vx + vy * vy
    if a < PARALLEL_TOL:
        return np.inf

    b = x * vx + y * vy
    c = x * x + y * y - radius * radius
    disc = b * b - a * c
    if disc < 0.0:
        disc = 0.0

    t = (-b + math.sqrt(disc)) / a
    if t < 0.0:
        t = 0.0

    return t


@njit
def plane_exit_distance(z, vz, z_lo, z_hi):
    """
    Path length to the region end plane in the direction of travel.

    Returns np.inf for vz == 0. Negative values from rounding are clamped to
    zero, which the tracer handles as an immediate crossing of that plane.
    """
    if vz > 0.0:
        t = (z_hi - z) / vz
    elif vz < 0.0:
        t = (z_lo - z) / vz
    else:
        return np.inf

    if t < 0.0:
        t = 0.0

    return t


@njit
def inside_radius(x, y, radius):
    """True if the transverse position lies within (or on) the radius."""
    return x * x + y * y <= radius * radius * (1.0 + RADIAL_TOL)


@njit
def wall_normal_inward(x, y):
    """
    Unit normal of the cylinder wall at (x, y), pointing toward the axis.

    On the axis itself an arbitrary radial direction is returned.
    """
    r = math.sqrt(x * x + y * y)
    if r < 1e-300:
        return -1.0, 0.0, 0.0
    return -x / r, -y / r, 0.0
