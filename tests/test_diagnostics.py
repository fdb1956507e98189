"""
Tests for the statistics reducer

Validates:
- Tally merge is commutative and associative
- Reduction to ClausingResults
- Density correction factor edge cases
- Plot helpers
"""

import logging

import numpy as np
import pytest

from clausingsim.diagnostics import (
    ClausingTally,
    merge_tallies,
    compute_den_cor,
    reduce_tally,
    plot_sweep,
    plot_trajectory,
)
from clausingsim.geometry import build_geometry
from clausingsim.params import ClausingParams, ClausingResults


def tally(n_t, n_r, n_l, max_count, vz0, vz):
    return ClausingTally(
        n_launched=n_t + n_r + n_l, n_transmitted=n_t, n_reflected=n_r,
        n_lost=n_l, max_count=max_count, vz_launch_sum=vz0, vz_exit_sum=vz,
    )


class TestTallyMerge:
    """Test per-worker accumulator merging."""

    def test_merge_adds_counts_and_takes_max(self):
        merged = tally(3, 5, 0, 7, 5.0, 2.5).merge(tally(1, 2, 1, 1001, 2.0, 0.75))
        assert merged.n_launched == 12
        assert merged.n_transmitted == 4
        assert merged.n_reflected == 7
        assert merged.n_lost == 1
        assert merged.max_count == 1001
        assert merged.vz_launch_sum == 7.0
        assert merged.vz_exit_sum == 3.25

    def test_commutative_and_associative(self):
        a = tally(3, 5, 0, 7, 5.0, 2.5)
        b = tally(1, 2, 1, 12, 2.0, 0.75)
        c = tally(0, 4, 0, 3, 2.5, 0.0)
        assert a.merge(b) == b.merge(a)
        assert a.merge(b).merge(c) == a.merge(b.merge(c))

    def test_merge_tallies_identity(self):
        a = tally(3, 5, 0, 7, 5.0, 2.5)
        assert merge_tallies([]) == ClausingTally()
        assert merge_tallies([a]) == a

    def test_from_batch(self):
        batch = (np.int64(2), np.int64(3), np.int64(0), np.int64(9), 3.1, 1.4)
        t = ClausingTally.from_batch(5, batch)
        assert t.n_terminated == 5
        assert isinstance(t.n_transmitted, int)
        assert isinstance(t.vz_exit_sum, float)


class TestReduce:
    """Test reduction to ClausingResults."""

    def test_metrics(self):
        results = reduce_tally(tally(25, 70, 5, 1001, 66.0, 17.5), area_ratio=4.0)
        assert isinstance(results, ClausingResults)
        assert results.clausing_factor == 0.25
        assert results.nlost == 5
        assert results.max_count == 1001
        assert results.npart == 100
        assert results.accel_clausing_factor == 1.0
        # <vz0> = 0.66, <vz> = 0.7
        assert abs(results.den_cor - 0.66 / 0.7) < 1e-12

    def test_partition_holds(self):
        results = reduce_tally(tally(25, 70, 5, 10, 66.0, 17.5))
        assert results.n_transmitted + results.n_reflected + results.nlost == results.npart

    def test_inconsistent_tally_rejected(self):
        bad = ClausingTally(n_launched=10, n_transmitted=2, n_reflected=2, n_lost=0)
        with pytest.raises(RuntimeError, match="do not match"):
            reduce_tally(bad)

    def test_empty_tally_rejected(self):
        with pytest.raises(RuntimeError, match="empty"):
            reduce_tally(ClausingTally())


class TestDenCor:
    """Test downstream correction factor."""

    def test_cosine_beam_gives_unity(self):
        assert abs(compute_den_cor(tally(10, 0, 0, 0, 6.0, 6.0)) - 1.0) < 1e-12

    def test_forward_peaked_beam_below_unity(self):
        assert compute_den_cor(tally(10, 10, 0, 5, 13.3, 8.0)) < 1.0

    def test_no_transmission(self, caplog):
        with caplog.at_level(logging.WARNING, logger="clausingsim.diagnostics"):
            den_cor = compute_den_cor(tally(0, 10, 0, 5, 6.6, 0.0))
        assert den_cor == 1.0
        assert "No transmitted particles" in caplog.text


class TestPlots:
    """Smoke-test plotting helpers on a non-interactive backend."""

    @pytest.fixture(autouse=True)
    def agg_backend(self):
        matplotlib = pytest.importorskip("matplotlib")
        matplotlib.use("Agg")
        yield
        import matplotlib.pyplot as plt
        plt.close("all")

    def test_plot_sweep(self, tmp_path):
        results = [reduce_tally(tally(n, 100 - n, 0, 10, 66.0, 0.7 * n)) for n in (40, 30, 20)]
        out = tmp_path / "sweep.png"
        fig = plot_sweep("grid_space", [0.1, 0.5, 1.0], results,
                         reference=[0.4, 0.3, 0.2], show=False, save_filename=str(out))
        assert fig is not None
        assert out.exists()

    def test_plot_trajectory(self, tmp_path):
        params = ClausingParams(thick_screen=1.0, thick_accel=0.5, r_screen=2.0,
                                r_accel=1.0, grid_space=0.3, npart=1)
        geometry = build_geometry(params)
        path = np.array([[0.5, 0.0, 0.0], [2.0, 0.0, 0.6], [0.2, 0.1, 1.8]])
        out = tmp_path / "trajectory.png"
        plot_trajectory(path, geometry, outcome="transmitted", show=False,
                        save_filename=str(out))
        assert out.exists()
