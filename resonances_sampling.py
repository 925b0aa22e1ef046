"""
resonances_sampling.py
======================
Monte Carlo sampling of the mass of a resonance produced together with a
stable particle (a + b -> R + c).

Masses are drawn by rejection sampling from spectral_function_integrand,
the same distribution that enters the 2->2 cross sections. The envelope is
the integrand maximum (grid plus pole, refined by a bounded minimization),
enlarged by params.sampling_margin. It is built once per call, so drawing
many masses at one energy should go through sample_resonance_masses;
candidates are then tested in vectorized batches.
"""
import numpy as np
from typing import Callable, Optional, Tuple

from scipy.optimize import minimize_scalar

from general_particles import ParticleCatalog
from hadgas_parameters import HadronGasParams, get_hadgas_default
from resonances_cross_sections import calculate_minimum_mass, spectral_function_integrand


def mass_distribution(catalog: ParticleCatalog, pdg_resonance: int,
                      pdg_stable: int, cms_energy: float
                      ) -> Tuple[Callable[[float], float], float, float]:
    """
    Unnormalized resonance mass distribution of R + c at sqrt(s) = cms_energy.

    Returns:
        (distribution(m) for scalar or array m, minimum mass, maximum mass)

    Raises:
        ValueError: the allowed mass range is empty
    """
    type_resonance = catalog.find(pdg_resonance)
    type_stable = catalog.find(pdg_stable)

    mass_stable = type_stable.mass
    mandelstam_s = cms_energy * cms_energy
    minimum_mass = calculate_minimum_mass(catalog, pdg_resonance)
    maximum_mass = cms_energy - mass_stable
    if minimum_mass >= maximum_mass:
        raise ValueError(
            f"No mass available for {type_resonance.name} + {type_stable.name} "
            f"at sqrt(s) = {cms_energy} GeV: minimum mass {minimum_mass:.4f} "
            f">= {maximum_mass:.4f}")

    def distribution(mass: float) -> float:
        return spectral_function_integrand(mass, type_resonance.width,
                                           type_resonance.mass, mass_stable,
                                           mandelstam_s)

    return distribution, minimum_mass, maximum_mass


def distribution_maximum(distribution: Callable, minimum_mass: float,
                         maximum_mass: float, pole_mass: float, width: float,
                         params: Optional[HadronGasParams] = None) -> float:
    """
    Maximum of the mass distribution on [minimum_mass, maximum_mass].

    A grid locates the peak; the pole (clipped into the range) is added, so
    a resonance narrower than the grid spacing is not missed. Both
    candidates are refined with a bounded scalar minimization.
    """
    if params is None:
        params = get_hadgas_default()
    mass_grid = np.linspace(minimum_mass, maximum_mass, params.sampling_grid_points)
    spacing = mass_grid[1] - mass_grid[0]
    values = distribution(mass_grid)
    i_max = int(np.argmax(values))
    pole = float(np.clip(pole_mass, minimum_mass, maximum_mass))

    maximum = max(float(values[i_max]), distribution(pole))
    brackets = [
        (mass_grid[max(i_max - 1, 0)], mass_grid[min(i_max + 1, len(mass_grid) - 1)]),
        (max(minimum_mass, pole - spacing), min(maximum_mass, pole + spacing)),
    ]
    for lower, upper in brackets:
        if upper <= lower:
            continue
        result = minimize_scalar(lambda m: -distribution(m), bounds=(lower, upper),
                                 method='bounded', options={'xatol': 1.0e-4 * width})
        maximum = max(maximum, -float(result.fun))
    return maximum


def sample_resonance_masses(catalog: ParticleCatalog, pdg_resonance: int,
                            pdg_stable: int, cms_energy: float, n_samples: int,
                            rng: Optional[np.random.Generator] = None,
                            params: Optional[HadronGasParams] = None) -> np.ndarray:
    """
    Draw `n_samples` resonance masses for R + c at total CM energy `cms_energy`.

    Args:
        catalog: Species and decay modes
        pdg_resonance: PDG code of the resonance R
        pdg_stable: PDG code of the stable partner c
        cms_energy: sqrt(s) (GeV)
        n_samples: Number of masses
        rng: numpy Generator, a fresh default_rng() if None
        params: HadronGasParams (envelope grid, margin and batch size)

    Returns:
        Masses in [minimum mass, cms_energy - m_c] (GeV), in order of acceptance

    Raises:
        ValueError: the allowed mass range is empty
    """
    if params is None:
        params = get_hadgas_default()
    if rng is None:
        rng = np.random.default_rng()

    type_resonance = catalog.find(pdg_resonance)
    distribution, minimum_mass, maximum_mass = mass_distribution(
        catalog, pdg_resonance, pdg_stable, cms_energy)

    distribution_max = (distribution_maximum(distribution, minimum_mass, maximum_mass,
                                             type_resonance.mass, type_resonance.width,
                                             params)
                        * (1.0 + params.sampling_margin))
    if not distribution_max > 0.0:
        raise ValueError(
            f"Vanishing mass distribution of {type_resonance.name} "
            f"at sqrt(s) = {cms_energy} GeV")

    # Candidates are drawn in batches sized by the acceptance seen so far
    masses = np.empty(n_samples)
    n_accepted = 0
    n_drawn = 0
    acceptance = 0.5
    while n_accepted < n_samples:
        n_missing = n_samples - n_accepted
        n_draw = min(max(int(1.2 * n_missing / acceptance), 64), params.sampling_batch_size)
        mass_resonance = rng.uniform(minimum_mass, maximum_mass, n_draw)
        random_number = rng.uniform(0.0, distribution_max, n_draw)
        accepted = mass_resonance[random_number <= distribution(mass_resonance)][:n_missing]
        masses[n_accepted:n_accepted + len(accepted)] = accepted
        n_accepted += len(accepted)
        n_drawn += n_draw
        acceptance = max(n_accepted, 1) / n_drawn
    return masses


def sample_resonance_mass(catalog: ParticleCatalog, pdg_resonance: int,
                          pdg_stable: int, cms_energy: float,
                          rng: Optional[np.random.Generator] = None,
                          params: Optional[HadronGasParams] = None) -> float:
    """Draw one resonance mass; see sample_resonance_masses."""
    return float(sample_resonance_masses(catalog, pdg_resonance, pdg_stable,
                                         cms_energy, 1, rng, params)[0])


if __name__ == "__main__":
    catalog = ParticleCatalog.from_strings(
        "π⁺  0.138  -1.0  211  0  2  0  0  1\n"
        "π⁰  0.138  -1.0  111  0  2  0  0  0\n"
        "π⁻  0.138  -1.0  -211 0  2  0  0 -1\n"
        "ρ⁰  0.776  0.149 113  2  2  0  0  0\n",
        "113 1\n"
        "1.0 211 -211\n"
    )
    rng = np.random.default_rng(42)
    masses = sample_resonance_masses(catalog, 113, 111, 1.5, 2000, rng)
    print(f"ρ⁰ + π⁰ at sqrt(s) = 1.5 GeV: <m> = {np.mean(masses):.4f} GeV, "
          f"std = {np.std(masses):.4f} GeV")
    print(f"single draw: {sample_resonance_mass(catalog, 113, 111, 1.5, rng):.4f} GeV")
