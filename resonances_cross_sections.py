"""
resonances_cross_sections.py
============================
Energy-dependent cross sections for resonance formation in two-particle
collisions.

For a colliding pair this module enumerates every resonance of the catalog
and builds the list of formation branches:
- 2->1: a + b -> R, Breit-Wigner cross section with detailed balance
- 2->2: a + b -> R + c (baryon-baryon only), with the resonance mass
  integrated over its spectral function

Cross sections follow O. Buss et al., Phys. Rept. 512 (2012) 1,
Eq. (176) for 2->1 and Eq. (D.28) for 2->2.

Units:
- Masses, energies: GeV
- Cross sections: mb
"""
import warnings
import numpy as np
from typing import Callable, List, Optional, Tuple

import scipy.integrate as integrate

from general_kinematics import ParticleData, mandelstam_s, cm_momentum_squared
from general_particles import ParticleCatalog, ParticleSpecies, ProcessBranch
from general_physics_constants import PI, REALLY_SMALL, hbarc, fm2_mb
from hadgas_parameters import HadronGasParams, get_hadgas_default
from resonances_isospin import clebsch_gordan


# =============================================================================
# LINESHAPES
# =============================================================================
def breit_wigner(mandelstam_s: float, resonance_mass: float,
                 resonance_width: float) -> float:
    """
    Relativistic Breit-Wigner, s Γ² / ((s - M²)² + s Γ²).

    Equals 1 at the pole.
    """
    massdiff = mandelstam_s - resonance_mass * resonance_mass
    s_width2 = mandelstam_s * resonance_width * resonance_width
    return s_width2 / (massdiff * massdiff + s_width2)


def spectral_function(resonance_mass: float, resonance_pole: float,
                      resonance_width: float) -> float:
    """
    Spectral function of the resonance at mass m.

    breit_wigner is π m Γ times the spectral function.
    """
    return (breit_wigner(resonance_mass * resonance_mass, resonance_pole, resonance_width)
            / PI / resonance_mass / resonance_width)


def spectral_function_integrand(resonance_mass: float, resonance_width: float,
                                resonance_pole_mass: float, stable_mass: float,
                                mandelstam_s: float) -> float:
    """
    Mass distribution of a resonance produced together with a stable particle.

    Spectral function weighted with the final-state CM momentum and with
    dm² = 2m dm. Zero below the R + c threshold. Accepts an array of
    masses; a scalar mass gives a float.
    """
    mass = np.asarray(resonance_mass, dtype=float)
    sum_mass = stable_mass + mass
    diff_mass = stable_mass - mass
    above_threshold = mandelstam_s - sum_mass * sum_mass > 0.0
    cm_momentum_final = np.sqrt(np.where(
        above_threshold,
        (mandelstam_s - sum_mass * sum_mass) * (mandelstam_s - diff_mass * diff_mass)
        / (4.0 * mandelstam_s),
        0.0))
    integrand = np.where(
        above_threshold,
        spectral_function(mass, resonance_pole_mass, resonance_width)
        * cm_momentum_final * 2.0 * mass,
        0.0)
    return integrand if integrand.ndim else float(integrand)


def quadrature_1d(integrand_function: Callable[..., float],
                  lower_limit: float, upper_limit: float,
                  args: Tuple = (),
                  params: Optional[HadronGasParams] = None) -> Tuple[float, float]:
    """
    Adaptive 1D quadrature.

    Returns:
        (integral_value, integral_error)
    """
    if params is None:
        params = get_hadgas_default()
    with warnings.catch_warnings():
        warnings.simplefilter("ignore", integrate.IntegrationWarning)
        value, error = integrate.quad(
            integrand_function, lower_limit, upper_limit, args=args,
            epsabs=params.quad_epsabs, epsrel=params.quad_epsrel,
            limit=params.quad_limit)
    return value, error


# =============================================================================
# MASS THRESHOLDS
# =============================================================================
def calculate_minimum_mass(catalog: ParticleCatalog, pdgcode: int) -> float:
    """
    Minimum rest mass a resonance needs for all of its decay channels.

    Decay products are taken at their pole masses. For stable species the
    mass itself is returned.
    """
    ptype = catalog.find(pdgcode)
    if ptype.is_stable:
        return ptype.mass
    minimum_mass = 0.0
    for mode in catalog.decay_modes(pdgcode):
        total_mass = sum(catalog.find(pdg).mass for pdg in mode.pdg_list)
        minimum_mass = max(minimum_mass, total_mass)
    return minimum_mass


def _decay_threshold(catalog: ParticleCatalog, mode: ProcessBranch) -> Optional[float]:
    """Summed minimum masses of a 2- or 3-body decay, None otherwise."""
    n_products = len(mode.pdg_list)
    if n_products > 3:
        warnings.warn(f"Not a 1->2 or 1->3 process: {n_products} decay particles "
                      f"in {mode.pdg_list}")
        return None
    return sum(calculate_minimum_mass(catalog, pdg) for pdg in mode.pdg_list)


# =============================================================================
# 2 -> 1
# =============================================================================
def two_to_one_formation(catalog: ParticleCatalog,
                         type_particle1: ParticleSpecies,
                         type_particle2: ParticleSpecies,
                         type_resonance: ParticleSpecies,
                         mandelstam_s: float,
                         cm_momentum_squared: float) -> float:
    """
    Cross section (mb) of a + b -> R, without isospin symmetry factor.
    """
    if cm_momentum_squared < REALLY_SMALL:
        return 0.0

    # Charge conservation
    if type_resonance.charge != type_particle1.charge + type_particle2.charge:
        return 0.0

    # Baryon number conservation
    if type_particle1.is_fermion or type_particle2.is_fermion:
        # The resonance must be a fermion
        if not type_resonance.is_fermion:
            return 0.0
        # Antibaryons form antibaryons, baryons form baryons
        if (type_particle1.baryon_number != 0
                and type_particle1.baryon_number != type_resonance.baryon_number):
            return 0.0
        if (type_particle2.baryon_number != 0
                and type_particle2.baryon_number != type_resonance.baryon_number):
            return 0.0

    clebsch_gordan_isospin = clebsch_gordan(
        type_particle1.isospin.twice, type_particle2.isospin.twice,
        type_resonance.isospin.twice,
        type_particle1.isospin3.twice, type_particle2.isospin3.twice,
        type_resonance.isospin3.twice)
    if abs(clebsch_gordan_isospin) < REALLY_SMALL:
        return 0.0

    # Enough energy for every decay channel, and detailed balance:
    # the resonance must be able to decay back into a + b
    sqrts = np.sqrt(mandelstam_s)
    not_enough_energy = False
    not_balanced = True
    initial_pair = sorted((type_particle1.pdg, type_particle2.pdg))
    for mode in catalog.decay_modes(type_resonance.pdg):
        threshold = _decay_threshold(catalog, mode)
        if threshold is None:
            continue
        if sqrts < threshold:
            not_enough_energy = True
        if (len(mode.pdg_list) == 2 and sorted(mode.pdg_list) == initial_pair
                and mode.weight > 0.0):
            not_balanced = False
    if not_enough_energy or not_balanced:
        return 0.0

    spinfactor = (type_resonance.degeneracy
                  / (type_particle1.degeneracy * type_particle2.degeneracy))
    return (clebsch_gordan_isospin * clebsch_gordan_isospin * spinfactor
            * 4.0 * PI / cm_momentum_squared
            * breit_wigner(mandelstam_s, type_resonance.mass, type_resonance.width)
            * hbarc * hbarc / fm2_mb)


# =============================================================================
# 2 -> 2
# =============================================================================
def two_to_two_formation(catalog: ParticleCatalog,
                         type_particle1: ParticleSpecies,
                         type_particle2: ParticleSpecies,
                         type_resonance: ParticleSpecies,
                         mandelstam_s: float,
                         cm_momentum_squared: float,
                         process_list: List[ProcessBranch],
                         params: Optional[HadronGasParams] = None) -> int:
    """
    Append branches a + b -> R + c to `process_list` for every stable c.

    Returns:
        Number of branches added
    """
    if params is None:
        params = get_hadgas_default()
    number_of_processes = 0
    if cm_momentum_squared < REALLY_SMALL:
        return number_of_processes

    # Two baryons need a baryonic resonance
    if (type_particle1.baryon_number != 0 and type_particle2.baryon_number != 0
            and not type_particle1.is_antiparticle_of(type_particle2)
            and type_resonance.baryon_number == 0):
        return 0

    isospin_resonance = type_resonance.isospin.twice
    isospin_z_resonance = type_resonance.isospin3.twice

    # Total isospin range of the initial state
    initial_total_maximum = type_particle1.isospin.twice + type_particle2.isospin.twice
    initial_total_minimum = abs(type_particle1.isospin.twice - type_particle2.isospin.twice)

    initial_charge = type_particle1.charge + type_particle2.charge
    initial_baryon_number = type_particle1.baryon_number + type_particle2.baryon_number
    sqrts = np.sqrt(mandelstam_s)

    for second_type in catalog:
        if not second_type.is_stable:
            continue
        if type_resonance.charge + second_type.charge != initial_charge:
            continue
        if type_resonance.baryon_number + second_type.baryon_number != initial_baryon_number:
            continue

        # Total isospin range allowed by both initial and final state
        isospin_maximum = min(isospin_resonance + second_type.isospin.twice,
                              initial_total_maximum)
        isospin_minimum = max(abs(isospin_resonance - second_type.isospin.twice),
                              initial_total_minimum)
        isospin_z_i = second_type.isospin3.twice
        isospin_z_final = isospin_z_resonance + isospin_z_i

        # Coefficients are added up over the allowed total isospins
        clebsch_gordan_isospin = 0.0
        isospin_final = isospin_maximum
        while isospin_final >= isospin_minimum:
            if abs(isospin_z_final) > isospin_final:
                break
            clebsch_gordan_isospin += clebsch_gordan(
                isospin_resonance, second_type.isospin.twice, isospin_final,
                isospin_z_resonance, isospin_z_i, isospin_z_final)
            isospin_final -= 2
        if abs(clebsch_gordan_isospin) < REALLY_SMALL:
            continue

        # Enough energy for every decay channel plus the spectator
        not_enough_energy = False
        minimum_mass = 0.0
        for mode in catalog.decay_modes(type_resonance.pdg):
            threshold = _decay_threshold(catalog, mode)
            if threshold is None:
                continue
            if sqrts < threshold + second_type.mass:
                not_enough_energy = True
            else:
                minimum_mass = max(minimum_mass, threshold)
        if not_enough_energy:
            continue

        # Integrate over the allowed resonance mass range
        lower_limit = minimum_mass
        upper_limit = sqrts - second_type.mass
        resonance_integral, _ = quadrature_1d(
            spectral_function_integrand, lower_limit, upper_limit,
            args=(type_resonance.width, type_resonance.mass,
                  second_type.mass, mandelstam_s),
            params=params)

        # |M|²/16π in mb GeV², uniform angular distribution
        matrix_element = params.matrix_element_2to2
        xsection = (clebsch_gordan_isospin * clebsch_gordan_isospin
                    * matrix_element / mandelstam_s
                    / np.sqrt(cm_momentum_squared)
                    * resonance_integral)

        if xsection > REALLY_SMALL:
            process_list.append(ProcessBranch(
                (type_resonance.pdg, second_type.pdg), xsection, 1))
            number_of_processes += 1

    return number_of_processes


# =============================================================================
# ALL RESONANCES
# =============================================================================
def resonance_cross_section(particle1: ParticleData, particle2: ParticleData,
                            catalog: ParticleCatalog,
                            params: Optional[HadronGasParams] = None) -> List[ProcessBranch]:
    """
    Resonance formation branches of a colliding pair.

    Args:
        particle1, particle2: Colliding particles with four-momenta
        catalog: Species and decay modes
        params: HadronGasParams (quadrature settings, 2->2 matrix element)

    Returns:
        List of ProcessBranch; weights are cross sections in mb. The order
        follows the catalog and carries no meaning.
    """
    if params is None:
        params = get_hadgas_default()
    type_particle1 = particle1.species
    type_particle2 = particle2.species
    resonance_process_list: List[ProcessBranch] = []

    # Isospin symmetry factor 2 for two members of one isospin multiplet
    symmetryfactor = 1
    if type_particle1.iso_multiplet == type_particle2.iso_multiplet:
        symmetryfactor = 2

    s = mandelstam_s(particle1.momentum, particle2.momentum)
    cm_p2 = cm_momentum_squared(particle1.momentum, particle2.momentum,
                                type_particle1.mass, type_particle2.mass)
    # Pair at rest in its CM frame: 1/p² diverges, nothing is formed
    if cm_p2 < REALLY_SMALL:
        return resonance_process_list

    for type_resonance in catalog:
        if type_resonance.is_stable:
            continue
        # Same resonance as in the initial state
        if ((not type_particle1.is_stable and type_resonance.pdg == type_particle1.pdg) or
                (not type_particle2.is_stable and type_resonance.pdg == type_particle2.pdg)):
            continue
        if not catalog.has_decay_modes(type_resonance.pdg):
            continue

        resonance_xsection = symmetryfactor * two_to_one_formation(
            catalog, type_particle1, type_particle2, type_resonance, s, cm_p2)
        if resonance_xsection > REALLY_SMALL:
            resonance_process_list.append(
                ProcessBranch((type_resonance.pdg,), resonance_xsection, 1))

        # 2->2 only for baryon-baryon collisions
        if type_particle1.is_fermion and type_particle2.is_fermion:
            two_to_two_formation(catalog, type_particle1, type_particle2,
                                 type_resonance, s, cm_p2,
                                 resonance_process_list, params)

    return resonance_process_list
