"""Tests for the resonance mass sampler."""

import numpy as np
import pytest
from scipy.stats import chisquare

from general_particles import ParticleCatalog
from resonances_cross_sections import quadrature_1d
from resonances_sampling import (
    distribution_maximum,
    mass_distribution,
    sample_resonance_mass,
    sample_resonance_masses,
)
from tests.conftest import PIONS


class TestMassDistribution:
    def test_range(self, rho_catalog):
        distribution, m_min, m_max = mass_distribution(rho_catalog, 113, 111, 1.5)
        assert m_min == pytest.approx(2 * 0.138)
        assert m_max == pytest.approx(1.5 - 0.138)
        assert distribution(0.776) > distribution(0.5) > 0.0

    def test_empty_range(self, rho_catalog):
        with pytest.raises(ValueError, match="No mass available"):
            mass_distribution(rho_catalog, 113, 111, 0.4)
        with pytest.raises(ValueError):
            sample_resonance_masses(rho_catalog, 113, 111, 0.4, 10)


class TestSampling:
    def test_within_range(self, rho_catalog):
        masses = sample_resonance_masses(rho_catalog, 113, 111, 1.2, 500,
                                         rng=np.random.default_rng(1))
        assert masses.shape == (500,)
        assert np.all(masses >= 2 * 0.138 - 1e-12)
        assert np.all(masses <= 1.2 - 0.138 + 1e-12)

    def test_reproducible(self, rho_catalog):
        first = sample_resonance_masses(rho_catalog, 113, 111, 1.2, 50,
                                        rng=np.random.default_rng(7))
        second = sample_resonance_masses(rho_catalog, 113, 111, 1.2, 50,
                                         rng=np.random.default_rng(7))
        np.testing.assert_array_equal(first, second)

    def test_single_draw(self, rho_catalog):
        mass = sample_resonance_mass(rho_catalog, 113, 111, 1.2,
                                     rng=np.random.default_rng(3))
        assert isinstance(mass, float)
        assert 2 * 0.138 <= mass <= 1.2 - 0.138

    def test_matches_distribution(self, rho_catalog):
        """Histogram of 10⁴ masses against the binned integrand (χ² test)."""
        cms_energy = 1.5
        masses = sample_resonance_masses(rho_catalog, 113, 111, cms_energy, 10000,
                                         rng=np.random.default_rng(2024))
        distribution, m_min, m_max = mass_distribution(rho_catalog, 113, 111, cms_energy)

        edges = np.linspace(m_min, m_max, 21)
        observed, _ = np.histogram(masses, bins=edges)
        bin_integrals = np.array([quadrature_1d(distribution, lo, hi)[0]
                                  for lo, hi in zip(edges[:-1], edges[1:])])
        expected = bin_integrals / bin_integrals.sum() * len(masses)

        # Merge sparse bins into their neighbour
        obs_merged, exp_merged = [], []
        obs_acc, exp_acc = 0.0, 0.0
        for obs, exp in zip(observed, expected):
            obs_acc += obs
            exp_acc += exp
            if exp_acc >= 5.0:
                obs_merged.append(obs_acc)
                exp_merged.append(exp_acc)
                obs_acc, exp_acc = 0.0, 0.0
        obs_merged[-1] += obs_acc
        exp_merged[-1] += exp_acc

        _, p_value = chisquare(obs_merged, exp_merged)
        assert p_value > 1e-3


NARROW_POLE, NARROW_WIDTH = 0.7773, 0.0006


@pytest.fixture
def narrow_catalog():
    """A resonance much narrower than the envelope grid spacing."""
    return ParticleCatalog.from_strings(
        PIONS + f"X0 {NARROW_POLE} {NARROW_WIDTH} 9000113 2 2 0 0 0\n",
        "9000113 1\n1.0 211 -211\n")


class TestNarrowResonance:
    def test_envelope_covers_peak(self, narrow_catalog):
        distribution, m_min, m_max = mass_distribution(narrow_catalog, 9000113, 111, 3.0)
        fine_grid = np.linspace(NARROW_POLE - 5 * NARROW_WIDTH,
                                NARROW_POLE + 5 * NARROW_WIDTH, 100001)
        peak = distribution(fine_grid).max()
        maximum = distribution_maximum(distribution, m_min, m_max,
                                       NARROW_POLE, NARROW_WIDTH)
        assert maximum >= peak * (1.0 - 1e-4)
        assert maximum == pytest.approx(peak, rel=1e-4)

    def test_pole_outside_range(self, narrow_catalog):
        """The pole is clipped into the mass range."""
        distribution, m_min, m_max = mass_distribution(narrow_catalog, 9000113, 111, 0.7)
        maximum = distribution_maximum(distribution, m_min, m_max,
                                       NARROW_POLE, NARROW_WIDTH)
        grid = np.linspace(m_min, m_max, 10001)
        assert maximum == pytest.approx(distribution(grid).max(), rel=1e-3)

    def test_peak_is_sampled(self, narrow_catalog):
        """Half of the masses fall within Γ/2 of the pole (χ² test)."""
        masses = sample_resonance_masses(narrow_catalog, 9000113, 111, 3.0, 2000,
                                         rng=np.random.default_rng(11))
        distribution, m_min, m_max = mass_distribution(narrow_catalog, 9000113, 111, 3.0)
        edges = [m_min, NARROW_POLE - NARROW_WIDTH / 2, NARROW_POLE + NARROW_WIDTH / 2, m_max]
        observed, _ = np.histogram(masses, bins=edges)
        bin_integrals = np.array([quadrature_1d(distribution, lo, hi)[0]
                                  for lo, hi in zip(edges[:-1], edges[1:])])
        expected = bin_integrals / bin_integrals.sum() * len(masses)

        _, p_value = chisquare(observed, expected)
        assert p_value > 1e-3
