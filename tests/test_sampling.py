"""
Piecewise-linear sampler tests.

Statistical checks use fixed seeds; KS and chi-square p-values are
compared against a loose 1e-3 threshold.
"""

import numpy as np
import pytest
from scipy import integrate, stats

from inelastic_mc.constants import RYDBERG_EV
from inelastic_mc.exceptions import DegenerateDistributionError
from inelastic_mc.physics.inelastic import InelasticScatter
from inelastic_mc.physics.sampling import (
    DiscretizedDistribution,
    bin_midpoints,
    discretize,
    piecewise_linear_inverse,
    sample,
    sample_density,
)


# -----------------------------------------------------------------------
# Table construction
# -----------------------------------------------------------------------

class TestDiscretize:

    def test_bin_midpoints(self):
        np.testing.assert_allclose(bin_midpoints(0.0, 1.0, 4), [0.125, 0.375, 0.625, 0.875])

    def test_table_over_domain(self):
        table = discretize(lambda x: x**2, 1.0, 3.0, 100)
        assert table.n_points == 100
        assert table.domain == (1.0, 3.0)
        assert table.x[0] > 1.0 and table.x[-1] < 3.0
        np.testing.assert_allclose(table.weights, table.x**2)

    def test_nan_weights_rejected(self):
        with pytest.raises(DegenerateDistributionError):
            discretize(lambda x: np.where(x > 0.5, np.nan, 1.0), 0.0, 1.0, 10)

    def test_negative_weights_rejected(self):
        with pytest.raises(DegenerateDistributionError):
            discretize(lambda x: x - 0.5, 0.0, 1.0, 10)

    def test_zero_mass_rejected(self):
        with pytest.raises(DegenerateDistributionError):
            discretize(np.zeros_like, 0.0, 1.0, 10)

    def test_empty_domain_rejected(self):
        with pytest.raises(DegenerateDistributionError):
            discretize(np.ones_like, 2.0, 2.0, 10)

    def test_mismatched_arrays_rejected(self):
        with pytest.raises(ValueError):
            DiscretizedDistribution(np.arange(3.0), np.ones(4), (0.0, 3.0))


# -----------------------------------------------------------------------
# Inversion kernel
# -----------------------------------------------------------------------

class TestPiecewiseLinearInverse:

    def test_uniform_density_is_linear_in_u(self):
        x = np.array([0.0, 1.0, 2.0])
        w = np.array([1.0, 1.0, 1.0])
        for u in (0.0, 0.25, 0.5, 0.9):
            assert piecewise_linear_inverse(x, w, u) == pytest.approx(2.0 * u)

    def test_triangular_density(self):
        """Density 2x on [0, 1]: inverse CDF is sqrt(u)."""
        x = np.array([0.0, 1.0])
        w = np.array([0.0, 2.0])
        for u in (0.01, 0.3, 0.64, 0.99):
            assert piecewise_linear_inverse(x, w, u) == pytest.approx(np.sqrt(u), rel=1e-12)

    def test_zero_weight_segment_never_selected(self):
        x = np.array([0.0, 1.0, 2.0, 3.0])
        w = np.array([1.0, 0.0, 0.0, 1.0])
        u = np.linspace(0.0, 0.999, 500)
        draws = np.array([piecewise_linear_inverse(x, w, ui) for ui in u])
        assert not np.any((draws > 1.0) & (draws < 2.0))

    def test_within_table_range(self):
        table = discretize(lambda x: np.exp(-x), 0.0, 5.0, 50)
        rng = np.random.default_rng(3)
        draws = np.array([sample(table, rng) for _ in range(2000)])
        assert draws.min() >= table.x[0]
        assert draws.max() <= table.x[-1]

    def test_cdf_of_table(self):
        table = discretize(np.ones_like, 0.0, 1.0, 10)
        np.testing.assert_allclose(table.cdf([0.0, 0.05, 0.5, 0.95, 1.0]),
                                   [0.0, 0.0, 0.5, 1.0, 1.0], atol=1e-12)

    def test_ks_against_table_cdf(self):
        table = discretize(lambda x: 1.0 + np.sin(x)**2, 0.0, 6.0, 200)
        rng = np.random.default_rng(11)
        draws = np.array([sample(table, rng) for _ in range(20000)])
        assert stats.kstest(draws, table.cdf).pvalue > 1e-3

    def test_sample_density(self):
        rng = np.random.default_rng(5)
        value = sample_density(np.ones_like, 2.0, 4.0, 10, rng)
        assert 2.0 <= value <= 4.0


# -----------------------------------------------------------------------
# Energy transfer and angle sampling
# -----------------------------------------------------------------------

class TestScatterSampling:

    def test_energy_transfer_domain(self, coarse_sampling):
        scatter = InelasticScatter(0.0, "rudd1991", "H", incident_energy=100.0,
                                   seed=1, sampling=coarse_sampling)
        lo, hi = (100.0 - RYDBERG_EV) / 2, 100.0 - RYDBERG_EV
        draws = np.array([scatter.sample_energy_transfer() for _ in range(500)])
        assert np.all((draws >= lo) & (draws <= hi))

    def test_kim_domain_uses_binding_energy(self, coarse_sampling):
        scatter = InelasticScatter(0.0, "kim1994", "He", incident_energy=100.0,
                                   seed=1, sampling=coarse_sampling)
        lo, hi = (100.0 - 24.59) / 2, 100.0 - 24.59
        draws = np.array([scatter.sample_energy_transfer() for _ in range(300)])
        assert np.all((draws >= lo) & (draws <= hi))

    def test_angle_domain(self, rudd_h):
        for W in (45.0, 60.0, 85.0):
            draws = np.array([rudd_h.sample_angle(W) for _ in range(200)])
            assert np.all((draws >= 0.0) & (draws <= 0.5 * np.pi))

    def test_table_follows_incident_energy(self, rudd_h):
        first = rudd_h.energy_transfer_table()
        rudd_h.incident_energy = 300.0
        second = rudd_h.energy_transfer_table()
        assert second.domain == pytest.approx(((300.0 - RYDBERG_EV) / 2, 300.0 - RYDBERG_EV))
        assert second.domain != first.domain

    def test_energy_transfer_ks(self, rudd_h):
        """1e5 draws from the 5000-point table against its own CDF."""
        table = rudd_h.energy_transfer_table()
        rng = np.random.default_rng(2024)
        draws = np.array([sample(table, rng) for _ in range(100_000)])
        assert stats.kstest(draws, table.cdf).pvalue > 1e-3

    def test_energy_transfer_matches_analytic_shape(self, rudd_h):
        """Chi-square of sampled W against dσ/dW integrated per histogram bin."""
        table = rudd_h.energy_transfer_table()
        rng = np.random.default_rng(99)
        draws = np.array([sample(table, rng) for _ in range(100_000)])

        edges = np.linspace(table.x[0], table.x[-1], 21)
        observed, _ = np.histogram(draws, bins=edges)
        expected = np.array([
            integrate.quad(rudd_h.single_diff_cross_section, a, b)[0]
            for a, b in zip(edges[:-1], edges[1:])
        ])
        expected *= observed.sum() / expected.sum()
        assert stats.chisquare(observed, expected).pvalue > 1e-3

    def test_angle_ks(self, rudd_h):
        table = rudd_h.angle_table(60.0)
        rng = np.random.default_rng(7)
        draws = np.array([sample(table, rng) for _ in range(20000)])
        assert stats.kstest(draws, table.cdf).pvalue > 1e-3

    def test_degenerate_energy_table_reported(self, rudd_h, monkeypatch):
        monkeypatch.setattr(rudd_h.model, "single_diff_table",
                            lambda W, E: np.full_like(W, np.nan))
        with pytest.raises(DegenerateDistributionError):
            rudd_h.sample_energy_transfer()

    def test_seeded_draws_reproducible(self, coarse_sampling):
        a = InelasticScatter(0.0, "rudd1991", "H", incident_energy=100.0, seed=42,
                             sampling=coarse_sampling)
        b = InelasticScatter(0.0, "rudd1991", "H", incident_energy=100.0, seed=42,
                             sampling=coarse_sampling)
        assert [a.sample_energy_transfer() for _ in range(10)] == \
               [b.sample_energy_transfer() for _ in range(10)]

    def test_reseed(self, coarse_sampling):
        scatter = InelasticScatter(0.0, "kim1994", "H2", incident_energy=80.0,
                                   sampling=coarse_sampling)
        scatter.seed(8)
        first = [scatter.sample_energy_transfer() for _ in range(5)]
        scatter.seed(8)
        assert [scatter.sample_energy_transfer() for _ in range(5)] == first
