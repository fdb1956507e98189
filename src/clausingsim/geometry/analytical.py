"""
Straight-Tube Clausing References

Closed-form and tabulated transmission probabilities of a single cylindrical
tube, used to check the Monte Carlo tracer when both apertures are equal.

References:
- Clausing (1932), "The flow of highly rarefied gases through tubes of arbitrary length"
- Santeler (1986), "New concepts in molecular gas flow", J. Vac. Sci. Technol. A 4, 338
"""

import numpy as np
from scipy.interpolate import PchipInterpolator

from ..constants import CLAUSING_TABLE_L_OVER_R, CLAUSING_TABLE_W


def clausing_factor_analytical(L_over_D):
    """
    Santeler's fit to the Clausing factor of a cylindrical tube.

    Parameters:
    -----------
    L_over_D : float
        Length-to-diameter ratio of the tube

    Returns:
    --------
    K : float
        Transmission probability [0, 1]

    Notes:
    ------
    With L/R = 2 L/D:
        K = 1 / (1 + (3L/8R) * (1 + 1 / (3 + 3L/7R)))
    Accurate to about 0.7 % against Clausing's table for all L/R.
    """
    if L_over_D <= 0:
        return 1.0

    L_over_R = 2.0 * L_over_D
    correction = 1.0 + 1.0 / (3.0 + 3.0 * L_over_R / 7.0)
    return 1.0 / (1.0 + 0.375 * L_over_R * correction)


_table = PchipInterpolator(
    np.asarray(CLAUSING_TABLE_L_OVER_R, dtype=np.float64),
    np.asarray(CLAUSING_TABLE_W, dtype=np.float64),
)


def clausing_factor_tabulated(L_over_D):
    """
    Clausing factor interpolated from Clausing's table.

    Monotone (PCHIP) interpolation in L/R. Outside the table the Santeler
    fit is used.

    Parameters:
    -----------
    L_over_D : float
        Length-to-diameter ratio of the tube

    Returns:
    --------
    K : float
        Transmission probability [0, 1]
    """
    if L_over_D <= 0:
        return 1.0

    L_over_R = 2.0 * L_over_D
    if L_over_R > CLAUSING_TABLE_L_OVER_R[-1]:
        return clausing_factor_analytical(L_over_D)

    return float(_table(L_over_R))


def equivalent_tube_L_over_D(params):
    """
    L/D of the straight tube formed when both apertures are equal.

    Returns None if the radii differ.
    """
    if params.r_screen != params.r_accel:
        return None
    return params.total_length / (2.0 * params.r_screen)
