"""
ClausingSIM: Monte Carlo Clausing Factor for Ion-Optics Grid Pairs

Free-molecular transmission probability of a screen/accel aperture stack
and the downstream density correction of the transmitted neutral beam,
computed by tracing cosine-law particles with diffuse wall re-emission.

Version: 0.1.0
"""

__version__ = "0.1.0"

from .constants import MAX_COLLISIONS, TRANSMITTED, REFLECTED, LOST
from .params import ClausingParams, ClausingResults, InvalidParameter
from .geometry import GridGeometry, build_geometry
from .simulation import run_simulation, sweep_parameter, trace_trajectory

__all__ = [
    "ClausingParams",
    "ClausingResults",
    "InvalidParameter",
    "GridGeometry",
    "build_geometry",
    "run_simulation",
    "sweep_parameter",
    "trace_trajectory",
    "MAX_COLLISIONS",
    "TRANSMITTED",
    "REFLECTED",
    "LOST",
]
