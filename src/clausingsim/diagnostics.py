"""
Statistics reduction and plotting for Clausing runs.

This module provides:
- ClausingTally: per-worker partial accumulator of particle outcomes
- Reduction of merged tallies into ClausingResults
- Sweep and trajectory plots
"""

import logging
from dataclasses import dataclass
from typing import List, Optional, Sequence

import numpy as np

from .params import ClausingResults

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ClausingTally:
    """
    Partial outcome counts and velocity sums.

    Tallies from independent workers combine with merge(), which is
    commutative and associative, so the reduced result does not depend on
    the order in which workers finish.
    """

    n_launched: int = 0
    n_transmitted: int = 0
    n_reflected: int = 0
    n_lost: int = 0
    max_count: int = 0
    vz_launch_sum: float = 0.0
    vz_exit_sum: float = 0.0

    @classmethod
    def from_batch(cls, n_launched, batch):
        """
        Build a tally from the tuple returned by trace_batch().

        Args:
            n_launched: Particles traced in the batch
            batch: (n_transmitted, n_reflected, n_lost, max_count,
                    vz_launch_sum, vz_exit_sum)
        """
        n_transmitted, n_reflected, n_lost, max_count, vz_launch_sum, vz_exit_sum = batch
        return cls(
            n_launched=int(n_launched),
            n_transmitted=int(n_transmitted),
            n_reflected=int(n_reflected),
            n_lost=int(n_lost),
            max_count=int(max_count),
            vz_launch_sum=float(vz_launch_sum),
            vz_exit_sum=float(vz_exit_sum),
        )

    def merge(self, other):
        return ClausingTally(
            n_launched=self.n_launched + other.n_launched,
            n_transmitted=self.n_transmitted + other.n_transmitted,
            n_reflected=self.n_reflected + other.n_reflected,
            n_lost=self.n_lost + other.n_lost,
            max_count=max(self.max_count, other.max_count),
            vz_launch_sum=self.vz_launch_sum + other.vz_launch_sum,
            vz_exit_sum=self.vz_exit_sum + other.vz_exit_sum,
        )

    @property
    def n_terminated(self):
        return self.n_transmitted + self.n_reflected + self.n_lost


def merge_tallies(tallies: Sequence[ClausingTally]) -> ClausingTally:
    """Fold any number of tallies into one."""
    total = ClausingTally()
    for tally in tallies:
        total = total.merge(tally)
    return total


def compute_den_cor(tally: ClausingTally) -> float:
    """
    Downstream density correction factor.

    Ratio of the mean axial direction cosine at launch (the cosine-law
    value, 2/3 in expectation) to that of the transmitted beam:

        den_cor = <vz>_launch / <vz>_exit

    A transmitted beam that is more forward-peaked than a cosine source
    gives den_cor < 1.

    Returns 1.0 when no particle was transmitted.
    """
    if tally.n_transmitted == 0 or tally.vz_exit_sum <= 0.0:
        logger.warning(
            "No transmitted particles out of %d; density correction set to 1.0",
            tally.n_launched,
        )
        return 1.0

    vz_launch_mean = tally.vz_launch_sum / tally.n_launched
    vz_exit_mean = tally.vz_exit_sum / tally.n_transmitted
    return vz_launch_mean / vz_exit_mean


def reduce_tally(tally: ClausingTally, area_ratio: float = 1.0) -> ClausingResults:
    """
    Turn a merged tally into the run results.

    Args:
        tally: Merged tally over all particles
        area_ratio: (r_screen / r_accel)², converts the transmission
            probability to the accel aperture reference area

    Returns:
        results: ClausingResults

    Raises:
        RuntimeError: If the outcome counts do not partition the launched
            particles (tracer bug)
    """
    if tally.n_launched == 0:
        raise RuntimeError("Cannot reduce an empty tally")

    if tally.n_terminated != tally.n_launched:
        raise RuntimeError(
            f"Outcome counts ({tally.n_terminated}) do not match "
            f"launched particles ({tally.n_launched})"
        )

    clausing_factor = tally.n_transmitted / tally.n_launched

    return ClausingResults(
        clausing_factor=clausing_factor,
        max_count=tally.max_count,
        nlost=tally.n_lost,
        den_cor=compute_den_cor(tally),
        n_transmitted=tally.n_transmitted,
        n_reflected=tally.n_reflected,
        npart=tally.n_launched,
        accel_clausing_factor=clausing_factor * area_ratio,
    )


# ==================== PLOTTING ====================

def plot_sweep(
    name: str,
    values: Sequence[float],
    results: List[ClausingResults],
    reference: Optional[Sequence[float]] = None,
    show: bool = True,
    save_filename: Optional[str] = None,
):
    """
    Plot Clausing factor and density correction against a swept parameter.

    Args:
        name: Swept parameter name (axis label)
        values: Parameter values
        results: One ClausingResults per value
        reference: Optional analytical Clausing factors for comparison
        show: Display plots interactively
        save_filename: Save figure to file (optional)
    """
    import matplotlib.pyplot as plt

    values = np.asarray(values, dtype=np.float64)
    clausing = np.array([r.clausing_factor for r in results])
    den_cor = np.array([r.den_cor for r in results])

    # 1-sigma binomial error bars
    npart = np.array([max(r.npart, 1) for r in results], dtype=np.float64)
    sigma = np.sqrt(clausing * (1.0 - clausing) / npart)

    fig, axes = plt.subplots(1, 2, figsize=(12, 5))

    ax = axes[0]
    ax.errorbar(values, clausing, yerr=sigma, fmt='bo-', linewidth=2, capsize=3,
                label='Monte Carlo')
    if reference is not None:
        ax.plot(values, reference, 'r--', linewidth=1.5, label='Analytical tube')
    ax.set_xlabel(name, fontsize=12)
    ax.set_ylabel('Clausing Factor', fontsize=12)
    ax.set_title('Transmission Probability', fontsize=14, fontweight='bold')
    ax.set_ylim(bottom=0)
    ax.legend(fontsize=10)
    ax.grid(True, alpha=0.3)

    ax = axes[1]
    ax.plot(values, den_cor, 'gs-', linewidth=2)
    ax.set_xlabel(name, fontsize=12)
    ax.set_ylabel('Density Correction Factor', fontsize=12)
    ax.set_title('Downstream Correction', fontsize=14, fontweight='bold')
    ax.grid(True, alpha=0.3)

    plt.tight_layout()

    if save_filename:
        plt.savefig(save_filename, dpi=300, bbox_inches='tight')
        print(f"Plot saved to {save_filename}")

    if show:
        plt.show()

    return fig


def plot_trajectory(
    path: np.ndarray,
    geometry,
    outcome: str = "",
    show: bool = True,
    save_filename: Optional[str] = None,
):
    """
    Draw one particle path in the (r, z) half-plane over the grid outline.

    Args:
        path: Event points, shape (n_points, 3)
        geometry: GridGeometry the particle was traced through
        outcome: Terminal state name for the title
        show: Display plots interactively
        save_filename: Save figure to file (optional)
    """
    import matplotlib.pyplot as plt

    z_bounds = geometry.z_bounds
    radii = geometry.radii
    r_outer = 1.3 * max(radii)

    fig, ax = plt.subplots(figsize=(6, 8))

    # Grid outline: aperture walls and solid faces
    for k in range(geometry.n_regions):
        ax.plot([radii[k], radii[k]], [z_bounds[k], z_bounds[k + 1]], 'k-', linewidth=2)
    ax.fill_betweenx([z_bounds[0], z_bounds[1]], radii[0], r_outer, color='0.8')
    ax.fill_betweenx([z_bounds[2], z_bounds[3]], radii[2], r_outer, color='0.8')

    r = np.sqrt(path[:, 0]**2 + path[:, 1]**2)
    ax.plot(r, path[:, 2], 'b.-', linewidth=1, markersize=4)
    ax.plot(r[0], path[0, 2], 'go', markersize=8, label='Launch')
    ax.plot(r[-1], path[-1, 2], 'rx', markersize=10, label='End')

    ax.set_xlim(0, r_outer)
    ax.set_xlabel('r', fontsize=12)
    ax.set_ylabel('z', fontsize=12)
    ax.set_title(f'Particle Trajectory ({outcome}, {len(path)} points)',
                 fontsize=14, fontweight='bold')
    ax.legend(fontsize=10)
    ax.grid(True, alpha=0.3)

    plt.tight_layout()

    if save_filename:
        plt.savefig(save_filename, dpi=300, bbox_inches='tight')
        print(f"Plot saved to {save_filename}")

    if show:
        plt.show()

    return fig
