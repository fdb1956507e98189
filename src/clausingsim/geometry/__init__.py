"""
Geometry module for ClausingSIM.

Provides the grid pair layout, intersection kernels and straight-tube
reference values.
"""

from .grids import (
    GridGeometry,
    build_geometry,
    cylinder_exit_distance,
    plane_exit_distance,
    inside_radius,
    wall_normal_inward,
    SCREEN_REGION,
    GAP_REGION,
    ACCEL_REGION,
)
from .analytical import (
    clausing_factor_analytical,
    clausing_factor_tabulated,
    equivalent_tube_L_over_D,
)

__all__ = [
    'GridGeometry',
    'build_geometry',
    'cylinder_exit_distance',
    'plane_exit_distance',
    'inside_radius',
    'wall_normal_inward',
    'SCREEN_REGION',
    'GAP_REGION',
    'ACCEL_REGION',
    'clausing_factor_analytical',
    'clausing_factor_tabulated',
    'equivalent_tube_L_over_D',
]
