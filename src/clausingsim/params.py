"""
Run Parameters and Results

ClausingParams is validated on construction so that no simulation work
starts from an invalid grid description.
"""

import math
from dataclasses import dataclass

import numpy as np


class InvalidParameter(ValueError):
    """Raised when a grid dimension or particle count is out of range."""

    def __init__(self, name, value, reason):
        self.name = name
        self.value = value
        super().__init__(f"{name}={value!r}: {reason}")


LENGTH_FIELDS = ("thick_screen", "thick_accel", "grid_space")
RADIUS_FIELDS = ("r_screen", "r_accel")


@dataclass(frozen=True)
class ClausingParams:
    """
    Grid pair description.

    Attributes:
        thick_screen: Screen grid thickness
        thick_accel: Accel grid thickness
        r_screen: Screen aperture radius
        r_accel: Accel aperture radius
        grid_space: Axial gap between the grids
        npart: Number of simulated particles
    """

    thick_screen: float
    thick_accel: float
    r_screen: float
    r_accel: float
    grid_space: float
    npart: int

    def __post_init__(self):
        self.validate()

    def validate(self):
        """
        Check every field.

        Radii must be positive. Thicknesses and the gap may be zero, which
        collapses that region to a plane.

        Raises:
            InvalidParameter: On the first offending field
        """
        for name in RADIUS_FIELDS:
            value = getattr(self, name)
            _check_finite(name, value)
            if value <= 0:
                raise InvalidParameter(name, value, "aperture radius must be positive")

        for name in LENGTH_FIELDS:
            value = getattr(self, name)
            _check_finite(name, value)
            if value < 0:
                raise InvalidParameter(name, value, "length must be non-negative")

        if isinstance(self.npart, bool) or not isinstance(self.npart, (int, np.integer)):
            raise InvalidParameter("npart", self.npart, "particle count must be an integer")
        if self.npart < 1:
            raise InvalidParameter("npart", self.npart, "at least one particle is required")

    @property
    def total_length(self):
        return self.thick_screen + self.grid_space + self.thick_accel


def _check_finite(name, value):
    if isinstance(value, bool) or not isinstance(value, (int, float, np.integer, np.floating)):
        raise InvalidParameter(name, value, "must be a real number")
    if not math.isfinite(value):
        raise InvalidParameter(name, value, "must be finite")


@dataclass(frozen=True)
class ClausingResults:
    """
    Reduced output of one run.

    Attributes:
        clausing_factor: Fraction of launched particles that were transmitted
        max_count: Largest wall-collision count of any particle
        nlost: Particles that exhausted the collision budget
        den_cor: Downstream density correction factor
        n_transmitted: Particles leaving through the accel aperture
        n_reflected: Particles leaving back through the screen aperture
        npart: Particles launched
        accel_clausing_factor: Transmission referenced to the accel aperture area
    """

    clausing_factor: float
    max_count: int
    nlost: int
    den_cor: float
    n_transmitted: int = 0
    n_reflected: int = 0
    npart: int = 0
    accel_clausing_factor: float = 0.0

    @property
    def reflection_fraction(self):
        return self.n_reflected / self.npart if self.npart else 0.0

    @property
    def loss_fraction(self):
        return self.nlost / self.npart if self.npart else 0.0

    def summary(self):
        """Print summary statistics."""
        print("\nClausing Results:")
        print(f"  Clausing factor:              {self.clausing_factor:.6f}")
        print(f"  Max collision count:          {self.max_count}")
        print(f"  Particles lost:               {self.nlost}")
        print(f"  Downstream correction factor: {self.den_cor:.6f}")
        print(f"\n  Transmitted / reflected / lost: "
              f"{self.n_transmitted} / {self.n_reflected} / {self.nlost} of {self.npart}")
        print(f"  Clausing factor (accel area): {self.accel_clausing_factor:.6f}")
