"""Tests for resonance formation cross sections."""

import warnings

import numpy as np
import pytest

from general_kinematics import ParticleData
from general_particles import ParticleCatalog
from general_physics_constants import PI
from resonances_cross_sections import (
    breit_wigner,
    calculate_minimum_mass,
    quadrature_1d,
    resonance_cross_section,
    spectral_function,
    spectral_function_integrand,
    two_to_one_formation,
    two_to_two_formation,
)
from tests.conftest import PIONS

HBARC = 0.197327053
FM2_MB = 0.1


def back_to_back(catalog, pdg1, pdg2, momentum):
    return (ParticleData.with_three_momentum(catalog.find(pdg1), [0.0, 0.0, momentum]),
            ParticleData.with_three_momentum(catalog.find(pdg2), [0.0, 0.0, -momentum]))


def at_sqrts(catalog, pdg1, pdg2, sqrts):
    """Equal-mass pair at the given CM energy."""
    mass = catalog.find(pdg1).mass
    return back_to_back(catalog, pdg1, pdg2, np.sqrt(sqrts**2 / 4.0 - mass**2))


class TestLineshapes:
    def test_breit_wigner_at_pole(self):
        assert breit_wigner(0.776**2, 0.776, 0.149) == pytest.approx(1.0)

    def test_breit_wigner_value(self):
        s, m, width = 0.5, 0.776, 0.149
        expected = s * width**2 / ((s - m**2)**2 + s * width**2)
        assert breit_wigner(s, m, width) == pytest.approx(expected)

    def test_spectral_function_at_pole(self):
        assert spectral_function(1.232, 1.232, 0.117) == pytest.approx(1.0 / (PI * 1.232 * 0.117))

    def test_integrand_below_threshold(self):
        assert spectral_function_integrand(1.0, 0.117, 1.232, 0.938, 1.9**2) == 0.0

    def test_integrand_positive(self):
        assert spectral_function_integrand(1.2, 0.117, 1.232, 0.938, 2.5**2) > 0.0

    def test_integrand_on_array(self):
        masses = np.array([1.1, 1.232, 1.5, 1.6])
        values = spectral_function_integrand(masses, 0.117, 1.232, 0.938, 2.5**2)
        assert values.shape == (4,)
        assert values[-1] == 0.0
        for mass, value in zip(masses, values):
            assert value == pytest.approx(
                spectral_function_integrand(mass, 0.117, 1.232, 0.938, 2.5**2))

    def test_quadrature(self):
        value, error = quadrature_1d(lambda x, a: a * x**2, 0.0, 1.0, args=(3.0,))
        assert value == pytest.approx(1.0)
        assert error < 1e-6


class TestMinimumMass:
    def test_stable(self, light_catalog):
        assert calculate_minimum_mass(light_catalog, 2212) == 0.938

    def test_heaviest_mode(self, light_catalog):
        assert calculate_minimum_mass(light_catalog, 223) == pytest.approx(3 * 0.138)
        assert calculate_minimum_mass(light_catalog, 2224) == pytest.approx(1.076)


class TestTwoToOne:
    def test_pion_pair_to_scalar(self, f0_catalog):
        """Only branch: π0 π0 -> f0 from the Breit-Wigner formula."""
        pion_a, pion_b = back_to_back(f0_catalog, 111, 111, 0.4)
        branches = resonance_cross_section(pion_a, pion_b, f0_catalog)

        s = 4.0 * (0.138**2 + 0.16)
        expected = (2.0 * (1.0 / 3.0) * 4.0 * PI / 0.16
                    * breit_wigner(s, 0.99, 0.07) * HBARC**2 / FM2_MB)
        assert len(branches) == 1
        assert branches[0].pdg_list == (9010221,)
        assert branches[0].multiplicity == 1
        assert branches[0].weight == pytest.approx(expected, rel=1e-6)

    def test_rho_formation(self, rho_catalog):
        pi_plus, pi_minus = back_to_back(rho_catalog, 211, -211, 0.35)
        branches = resonance_cross_section(pi_plus, pi_minus, rho_catalog)

        s = 4.0 * (0.138**2 + 0.35**2)
        # symmetry 2, CG² = 1/2, spin factor 3
        expected = (2.0 * 0.5 * 3.0 * 4.0 * PI / 0.35**2
                    * breit_wigner(s, 0.776, 0.149) * HBARC**2 / FM2_MB)
        assert [b.pdg_list for b in branches] == [(113,)]
        assert branches[0].weight == pytest.approx(expected, rel=1e-6)

    def test_charge_conservation(self, rho_catalog):
        pi_plus, pi_zero = back_to_back(rho_catalog, 211, 111, 0.35)
        assert resonance_cross_section(pi_plus, pi_zero, rho_catalog) == []

    def test_isospin_forbidden(self, rho_catalog):
        pion_a, pion_b = back_to_back(rho_catalog, 111, 111, 0.35)
        assert resonance_cross_section(pion_a, pion_b, rho_catalog) == []

    def test_detailed_balance(self):
        catalog = ParticleCatalog.from_strings(
            PIONS + "rho0 0.776 0.149 113 2 2 0 0 0\n",
            "113 1\n1.0 111 111\n")
        pi_plus, pi_minus = back_to_back(catalog, 211, -211, 0.35)
        assert resonance_cross_section(pi_plus, pi_minus, catalog) == []

    def test_every_channel_needs_energy(self):
        catalog = ParticleCatalog.from_strings(
            "pi0 0.138 -1.0 111 0 2 0 0 0\n"
            "K+ 0.494 -1.0 321 0 1 0 1 1\n"
            "K- 0.494 -1.0 -321 0 1 0 -1 -1\n"
            "f0 0.990 0.07 9010221 0 0 0 0 0\n",
            "9010221 2\n0.5 111 111\n0.5 321 -321\n")
        pion_a, pion_b = back_to_back(catalog, 111, 111, 0.4)
        assert resonance_cross_section(pion_a, pion_b, catalog) == []
        pion_a, pion_b = back_to_back(catalog, 111, 111, 0.5)
        assert len(resonance_cross_section(pion_a, pion_b, catalog)) == 1

    def test_baryon_needs_fermion_resonance(self, nucleon_delta_catalog):
        catalog = nucleon_delta_catalog
        proton, pi_zero = catalog.find(2212), catalog.find(111)
        s = 1.3**2
        assert two_to_one_formation(catalog, proton, pi_zero, catalog.find(2214), s, 0.1) > 0.0
        # charge allows it, baryon number does not
        assert two_to_one_formation(catalog, proton, catalog.find(-211), pi_zero, s, 0.1) == 0.0

    def test_many_body_mode_warns(self):
        catalog = ParticleCatalog.from_strings(
            PIONS +
            "rho0 0.776 0.149 113 2 2 0 0 0\n"
            "rho1450 1.465 0.4 100113 2 2 0 0 0\n",
            "113 1\n1.0 211 -211\n"
            "100113 2\n0.5 211 -211\n0.5 211 -211 211 -211\n")
        pi_plus, pi_minus = back_to_back(catalog, 211, -211, 0.6)
        with pytest.warns(UserWarning, match="4 decay particles"):
            branches = resonance_cross_section(pi_plus, pi_minus, catalog)
        assert {b.pdg_list for b in branches} == {(113,), (100113,)}


class TestAtRest:
    """A pair with no relative momentum forms nothing."""

    def test_pion_pair(self, rho_catalog):
        pi_plus, pi_minus = back_to_back(rho_catalog, 211, -211, 0.0)
        with warnings.catch_warnings():
            warnings.simplefilter("error")
            assert resonance_cross_section(pi_plus, pi_minus, rho_catalog) == []

    def test_two_to_one(self, rho_catalog):
        s = 4.0 * 0.138**2
        sigma = two_to_one_formation(rho_catalog, rho_catalog.find(211), rho_catalog.find(-211),
                                     rho_catalog.find(113), s, 0.0)
        assert sigma == 0.0

    def test_two_to_two(self, nucleon_delta_catalog):
        catalog = nucleon_delta_catalog
        branches = []
        added = two_to_two_formation(catalog, catalog.find(2212), catalog.find(2212),
                                     catalog.find(2224), 2.5**2, 0.0, branches)
        assert added == 0
        assert branches == []


class TestTwoToTwo:
    def test_nucleon_nucleon_channels(self, nucleon_delta_catalog):
        proton_a, proton_b = at_sqrts(nucleon_delta_catalog, 2212, 2212, 2.5)
        branches = resonance_cross_section(proton_a, proton_b, nucleon_delta_catalog)
        assert {b.pdg_list for b in branches} == {(2224, 2112), (2214, 2212)}
        assert all(b.weight > 0.0 for b in branches)

    def test_isospin_ratio(self, nucleon_delta_catalog):
        proton_a, proton_b = at_sqrts(nucleon_delta_catalog, 2212, 2212, 2.5)
        weights = {b.pdg_list: b.weight for b in
                   resonance_cross_section(proton_a, proton_b, nucleon_delta_catalog)}
        # CG² = 3/4 for Δ++ n, 1/4 for Δ+ p
        assert weights[(2224, 2112)] / weights[(2214, 2212)] == pytest.approx(3.0, rel=1e-9)

    def test_value(self, nucleon_delta_catalog):
        catalog = nucleon_delta_catalog
        sqrts = 2.5
        s = sqrts**2
        p2 = s / 4.0 - 0.938**2
        integral, _ = quadrature_1d(spectral_function_integrand, 0.938 + 0.138, sqrts - 0.938,
                                    args=(0.117, 1.232, 0.938, s))
        branches = []
        added = two_to_two_formation(catalog, catalog.find(2212), catalog.find(2212),
                                     catalog.find(2224), s, p2, branches)
        assert added == 1
        assert branches[0].pdg_list == (2224, 2112)
        assert branches[0].weight == pytest.approx(
            0.75 * 180.0 / s / np.sqrt(p2) * integral, rel=1e-9)

    def test_below_threshold(self, nucleon_delta_catalog):
        proton_a, proton_b = at_sqrts(nucleon_delta_catalog, 2212, 2212, 2.0)
        assert resonance_cross_section(proton_a, proton_b, nucleon_delta_catalog) == []

    def test_mesons_skip_two_to_two(self, rho_catalog):
        pi_plus, pi_minus = back_to_back(rho_catalog, 211, -211, 0.8)
        branches = resonance_cross_section(pi_plus, pi_minus, rho_catalog)
        assert all(len(b.pdg_list) == 1 for b in branches)
