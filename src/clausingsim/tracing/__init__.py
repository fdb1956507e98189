"""
Monte Carlo Tracing Module

Launch sampling, diffuse re-emission and the per-particle tracer for
free-molecular flow through the grid pair.
"""

from .launcher import (
    sample_entry_position,
    sample_cosine_direction,
    launch_particles,
)
from .surfaces import (
    cosine_law_direction,
    reemit_from_wall,
    reemit_from_face,
)
from .tracer import (
    trace_particle,
    trace_batch,
    trace_path,
)

__all__ = [
    "sample_entry_position",
    "sample_cosine_direction",
    "launch_particles",
    "cosine_law_direction",
    "reemit_from_wall",
    "reemit_from_face",
    "trace_particle",
    "trace_batch",
    "trace_path",
]
