"""Tests for the Boltzmann hadron gas densities and strangeness neutrality."""

import pytest
from scipy.special import kn

from general_particles import ParticleCatalog, ParticleSpecies
from general_physics_constants import PHASE_SPACE_PREFACTOR
from hadgas_eos import HadronGasEOS
from hadgas_thermodynamics import (
    EosConvergenceError,
    compute_hadgas_thermo,
    density,
    energy_density,
    entropy_density,
    is_eos_particle,
    mus_net_strangeness0,
    net_baryon_density,
    net_strange_density,
    partial_density,
    pressure,
    scaled_partial_density,
)


T, MU_B, MU_S = 0.15, 0.2, 0.05


def species_with_z(z, temperature=T):
    """A spin-1/2 particle whose mass gives m/T = z."""
    return ParticleSpecies("x", z * temperature, None, 9000111, 1, 0)


class TestSmallMassLimit:
    def test_density_limit_matches_bessel_formula(self):
        limit = scaled_partial_density(species_with_z(1e-12), 1.0 / T, 0.0, 0.0)
        bessel = scaled_partial_density(species_with_z(1e-8), 1.0 / T, 0.0, 0.0)
        assert limit == pytest.approx(2.0 * 2, rel=1e-9)
        assert bessel == pytest.approx(limit, rel=1e-6)

    def test_energy_limit_matches_bessel_formula(self):
        limit = energy_density(T, 0.0, 0.0, [species_with_z(1e-12)])
        bessel = energy_density(T, 0.0, 0.0, [species_with_z(1e-8)])
        assert bessel == pytest.approx(limit, rel=1e-6)

    def test_massless_gas_equation_of_state(self):
        particles = [species_with_z(1e-12)]
        e = energy_density(T, 0.0, 0.0, particles)
        assert e == pytest.approx(3.0 * pressure(T, 0.0, 0.0, particles), rel=1e-12)


class TestDensities:
    def test_pion_density(self, light_catalog):
        pion = light_catalog.find(111)
        z = pion.mass / T
        expected = PHASE_SPACE_PREFACTOR * T**3 * z**2 * kn(2, z)
        assert partial_density(pion, T, 0.0, 0.0) == pytest.approx(expected, rel=1e-10)

    def test_zero_temperature(self, light_catalog):
        assert energy_density(0.0, MU_B, MU_S, light_catalog) == 0.0
        assert density(0.0, MU_B, MU_S, light_catalog) == 0.0
        assert net_baryon_density(0.0, MU_B, MU_S, light_catalog) == 0.0
        assert net_strange_density(0.0, MU_B, MU_S, light_catalog) == 0.0
        assert entropy_density(0.0, MU_B, MU_S, light_catalog) == 0.0
        assert partial_density(light_catalog.find(211), 0.0, 0.0, 0.0) == 0.0

    def test_underflow_gives_zero(self):
        heavy = ParticleSpecies("heavy", 200.0, None, 9000221, 0, 0)
        assert scaled_partial_density(heavy, 1.0 / 0.1, 0.0, 0.0) == 0.0

    def test_symmetric_matter(self, light_catalog):
        assert net_baryon_density(T, 0.0, 0.0, light_catalog) == pytest.approx(0.0, abs=1e-15)
        assert net_strange_density(T, 0.0, 0.0, light_catalog) == pytest.approx(0.0, abs=1e-15)

    def test_baryon_density_sign(self, light_catalog):
        assert net_baryon_density(T, MU_B, 0.0, light_catalog) > 0.0
        assert net_baryon_density(T, -MU_B, 0.0, light_catalog) < 0.0

    def test_non_hadrons_are_skipped(self, light_catalog):
        electron = ParticleSpecies("e-", 0.000511, None, 11, 1, 0, 0, 0, -1)
        assert not is_eos_particle(electron)
        with_electron = list(light_catalog) + [electron]
        assert density(T, MU_B, MU_S, with_electron) == density(T, MU_B, MU_S, light_catalog)


class TestThermodynamicConsistency:
    """Boltzmann gas relations s = ∂P/∂T, n_B = ∂P/∂μ_B, n_S = ∂P/∂μ_S."""

    h = 1.0e-5

    def test_entropy_density(self, light_catalog):
        dPdT = (pressure(T + self.h, MU_B, MU_S, light_catalog)
                - pressure(T - self.h, MU_B, MU_S, light_catalog)) / (2 * self.h)
        assert entropy_density(T, MU_B, MU_S, light_catalog) == pytest.approx(dPdT, rel=1e-6)

    def test_baryon_density(self, light_catalog):
        dPdmu = (pressure(T, MU_B + self.h, MU_S, light_catalog)
                 - pressure(T, MU_B - self.h, MU_S, light_catalog)) / (2 * self.h)
        assert net_baryon_density(T, MU_B, MU_S, light_catalog) == pytest.approx(dPdmu, rel=1e-6)

    def test_strange_density(self, light_catalog):
        dPdmu = (pressure(T, MU_B, MU_S + self.h, light_catalog)
                 - pressure(T, MU_B, MU_S - self.h, light_catalog)) / (2 * self.h)
        assert net_strange_density(T, MU_B, MU_S, light_catalog) == pytest.approx(dPdmu, rel=1e-6)

    def test_thermo_bundle(self, light_catalog):
        result = compute_hadgas_thermo(T, MU_B, MU_S, light_catalog)
        assert result.e == pytest.approx(energy_density(T, MU_B, MU_S, light_catalog))
        assert result.n_B == pytest.approx(net_baryon_density(T, MU_B, MU_S, light_catalog))
        assert result.P == pytest.approx(pressure(T, MU_B, MU_S, light_catalog))
        assert result.s == pytest.approx(entropy_density(T, MU_B, MU_S, light_catalog))
        assert result.P == pytest.approx(result.n * T)


class TestStrangenessNeutrality:
    def test_root(self, light_catalog):
        mu_S = mus_net_strangeness0(T, 0.4, light_catalog)
        assert 0.0 < mu_S < 0.4 + T
        assert net_strange_density(T, 0.4, mu_S, light_catalog) == pytest.approx(0.0, abs=1e-8)

    def test_symmetric_matter(self, light_catalog):
        assert mus_net_strangeness0(T, 0.0, light_catalog) == 0.0

    def test_no_strange_species(self, rho_catalog):
        assert mus_net_strangeness0(T, 0.3, rho_catalog) == 0.0

    def test_no_sign_change(self):
        kaon_only = ParticleCatalog([ParticleSpecies("K+", 0.494, None, 321, 0, 1, 0, 1, 1)])
        with pytest.raises(EosConvergenceError) as excinfo:
            mus_net_strangeness0(T, 0.2, kaon_only)
        assert excinfo.value.residual.shape == (2,)

    def test_eos_facade(self, light_catalog):
        eos = HadronGasEOS(light_catalog, verbose=False)
        assert eos.mus_net_strangeness0(T, 0.4) == pytest.approx(
            mus_net_strangeness0(T, 0.4, light_catalog))
        assert eos.pressure(T, MU_B, MU_S) == pytest.approx(pressure(T, MU_B, MU_S, light_catalog))
        assert not eos.is_tabulated
        assert "26 hadrons" in repr(eos)
