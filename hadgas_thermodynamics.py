"""
hadgas_thermodynamics.py
========================
Thermodynamics of a hadron resonance gas in Boltzmann approximation.

Every hadron of the catalog is an ideal classical gas with chemical
potential μ = B μ_B + S μ_S. With z = m/T the partial density is

    n = g/(2π²) T³ z² K₂(z) exp((μ - m)/T) / (ℏc)³

and the partial energy density

    ε = g/(2π²) T⁴ z² (3 K₂(z) + z K₁(z)) exp((μ - m)/T) / (ℏc)³

The Bessel functions are used in exponentially scaled form,
kve(n, z) = exp(z) K_n(z), and exp(z) is absorbed into the Boltzmann
factor exp((μ - m)/T). For z -> 0: z² K₂(z) -> 2, z³ K₁(z) -> 0.

Units:
- T, μ_B, μ_S, masses: GeV
- Densities: fm⁻³
- Energy density, pressure: GeV/fm³
- Entropy density: fm⁻³
"""
import numpy as np
from dataclasses import dataclass
from typing import Iterable, List

from scipy.optimize import brentq
from scipy.special import kve

from general_particles import ParticleSpecies
from general_physics_constants import (
    PHASE_SPACE_PREFACTOR, REALLY_SMALL, EXP_UNDERFLOW
)


# =============================================================================
# ERRORS
# =============================================================================
class EosConvergenceError(RuntimeError):
    """
    A hadron gas EOS solver did not converge.

    Attributes:
        iterations: Iterations / function evaluations spent
        x: Last iterate
        residual: Residual at the last iterate
    """

    def __init__(self, message: str, iterations: int = 0,
                 x=None, residual=None):
        super().__init__(message)
        self.iterations = iterations
        self.x = None if x is None else np.asarray(x, dtype=float)
        self.residual = None if residual is None else np.asarray(residual, dtype=float)


# =============================================================================
# DATA CLASSES
# =============================================================================
@dataclass
class HadronGasThermoResult:
    """
    Thermodynamic state of the hadron gas at (T, μ_B, μ_S).

    Attributes:
        T, mu_B, mu_S: Temperature and chemical potentials (GeV)
        n: Total hadron density (fm⁻³)
        n_B: Net baryon density (fm⁻³)
        n_S: Net strangeness density (fm⁻³)
        P: Pressure (GeV/fm³)
        e: Energy density (GeV/fm³)
        s: Entropy density (fm⁻³)
    """
    T: float
    mu_B: float
    mu_S: float
    n: float
    n_B: float
    n_S: float
    P: float
    e: float
    s: float

    def __repr__(self):
        return (f"HadronGasThermoResult(T={self.T:.4f}, mu_B={self.mu_B:.4f}, "
                f"mu_S={self.mu_S:.4f}, e={self.e:.4e}, n_B={self.n_B:.4e}, "
                f"P={self.P:.4e})")


# =============================================================================
# SPECIES SELECTION
# =============================================================================
def is_eos_particle(ptype: ParticleSpecies) -> bool:
    """Only hadrons enter the hadron gas EOS."""
    return ptype.is_hadron


def list_eos_particles(particles: Iterable[ParticleSpecies]) -> List[ParticleSpecies]:
    return [ptype for ptype in particles if is_eos_particle(ptype)]


# =============================================================================
# SINGLE SPECIES
# =============================================================================
def _boltzmann_factor(ptype: ParticleSpecies, beta: float,
                      mu_B: float, mu_S: float) -> float:
    """exp(β (B μ_B + S μ_S - m)), zero below the underflow limit."""
    x = beta * (ptype.baryon_number * mu_B + ptype.strangeness * mu_S - ptype.mass)
    return 0.0 if x < EXP_UNDERFLOW else np.exp(x)


def scaled_partial_density(ptype: ParticleSpecies, beta: float,
                           mu_B: float, mu_S: float) -> float:
    """
    Partial density in units of T³/(2π²(ℏc)³).

    Returns g z² kve(2, z) exp(β(μ - m)), with the z -> 0 limit
    2 g exp(β(μ - m)).
    """
    z = ptype.mass * beta
    x = _boltzmann_factor(ptype, beta, mu_B, mu_S)
    g = ptype.degeneracy
    # K_n(z) -> (n-1)!/2 (2/z)^n for z -> 0, so z² K₂(z) -> 2
    if z < REALLY_SMALL:
        return 2.0 * g * x
    return z * z * g * x * kve(2, z)


def partial_density(ptype: ParticleSpecies, T: float,
                    mu_B: float, mu_S: float) -> float:
    """Density of one species (fm⁻³)."""
    if T < REALLY_SMALL:
        return 0.0
    return PHASE_SPACE_PREFACTOR * T**3 * scaled_partial_density(ptype, 1.0 / T, mu_B, mu_S)


# =============================================================================
# SUMS OVER SPECIES
# =============================================================================
def energy_density(T: float, mu_B: float, mu_S: float,
                   particles: Iterable[ParticleSpecies]) -> float:
    """Energy density (GeV/fm³)."""
    if T < REALLY_SMALL:
        return 0.0
    beta = 1.0 / T
    e = 0.0
    for ptype in particles:
        if not is_eos_particle(ptype):
            continue
        z = ptype.mass * beta
        x = _boltzmann_factor(ptype, beta, mu_B, mu_S)
        g = ptype.degeneracy
        # z² K₂(z) -> 2, z³ K₁(z) -> 0 at z -> 0
        if z < REALLY_SMALL:
            e += 6.0 * g * x
        else:
            e += z * z * g * x * (3.0 * kve(2, z) + z * kve(1, z))
    return e * PHASE_SPACE_PREFACTOR * T**4


def density(T: float, mu_B: float, mu_S: float,
            particles: Iterable[ParticleSpecies]) -> float:
    """Total hadron density (fm⁻³)."""
    if T < REALLY_SMALL:
        return 0.0
    beta = 1.0 / T
    rho = 0.0
    for ptype in particles:
        if not is_eos_particle(ptype):
            continue
        rho += scaled_partial_density(ptype, beta, mu_B, mu_S)
    return rho * PHASE_SPACE_PREFACTOR * T**3


def net_baryon_density(T: float, mu_B: float, mu_S: float,
                       particles: Iterable[ParticleSpecies]) -> float:
    """Net baryon density (fm⁻³)."""
    if T < REALLY_SMALL:
        return 0.0
    beta = 1.0 / T
    rho = 0.0
    for ptype in particles:
        if not ptype.is_baryon or not is_eos_particle(ptype):
            continue
        rho += scaled_partial_density(ptype, beta, mu_B, mu_S) * ptype.baryon_number
    return rho * PHASE_SPACE_PREFACTOR * T**3


def net_strange_density(T: float, mu_B: float, mu_S: float,
                        particles: Iterable[ParticleSpecies]) -> float:
    """Net strangeness density (fm⁻³)."""
    if T < REALLY_SMALL:
        return 0.0
    beta = 1.0 / T
    rho = 0.0
    for ptype in particles:
        if ptype.strangeness == 0 or not is_eos_particle(ptype):
            continue
        rho += scaled_partial_density(ptype, beta, mu_B, mu_S) * ptype.strangeness
    return rho * PHASE_SPACE_PREFACTOR * T**3


def pressure(T: float, mu_B: float, mu_S: float,
             particles: Iterable[ParticleSpecies]) -> float:
    """Pressure of the Boltzmann gas, P = n T (GeV/fm³)."""
    return T * density(T, mu_B, mu_S, particles)


def entropy_density(T: float, mu_B: float, mu_S: float,
                    particles: Iterable[ParticleSpecies]) -> float:
    """s = (ε + P - μ_B n_B - μ_S n_S) / T (fm⁻³)."""
    if T < REALLY_SMALL:
        return 0.0
    particles = list(particles)
    e = energy_density(T, mu_B, mu_S, particles)
    P = pressure(T, mu_B, mu_S, particles)
    n_B = net_baryon_density(T, mu_B, mu_S, particles)
    n_S = net_strange_density(T, mu_B, mu_S, particles)
    return (e + P - mu_B * n_B - mu_S * n_S) / T


def compute_hadgas_thermo(T: float, mu_B: float, mu_S: float,
                          particles: Iterable[ParticleSpecies]) -> HadronGasThermoResult:
    """
    Compute all thermodynamic quantities of the hadron gas at one point.

    Args:
        T: Temperature (GeV)
        mu_B: Baryon chemical potential (GeV)
        mu_S: Strangeness chemical potential (GeV)
        particles: Species to include (non-hadrons are skipped)

    Returns:
        HadronGasThermoResult
    """
    particles = list_eos_particles(particles)
    n = density(T, mu_B, mu_S, particles)
    n_B = net_baryon_density(T, mu_B, mu_S, particles)
    n_S = net_strange_density(T, mu_B, mu_S, particles)
    e = energy_density(T, mu_B, mu_S, particles)
    P = T * n
    s = (e + P - mu_B * n_B - mu_S * n_S) / T if T >= REALLY_SMALL else 0.0
    return HadronGasThermoResult(T=T, mu_B=mu_B, mu_S=mu_S,
                                 n=n, n_B=n_B, n_S=n_S, P=P, e=e, s=s)


# =============================================================================
# STRANGENESS NEUTRALITY
# =============================================================================
def mus_net_strangeness0(
    T: float, mu_B: float,
    particles: Iterable[ParticleSpecies],
    tol: float = 1.0e-9,
    max_iter: int = 30
) -> float:
    """
    Strangeness chemical potential of strangeness-neutral matter.

    Finds μ_S in [0, μ_B + T] with n_S(T, μ_B, μ_S) = 0. n_S grows
    monotonically with μ_S, so the bracket holds a single root.

    Args:
        T: Temperature (GeV)
        mu_B: Baryon chemical potential (GeV)
        particles: Species list
        tol: Precision on μ_S (GeV)
        max_iter: Iteration cap

    Returns:
        μ_S (GeV)

    Raises:
        EosConvergenceError: no root in the bracket, or not converged
    """
    particles = list_eos_particles(particles)
    mus_l, mus_u = 0.0, mu_B + T

    def rho_s(mu_S):
        return net_strange_density(T, mu_B, mu_S, particles)

    rho_l = rho_s(mus_l)
    if rho_l == 0.0:
        return mus_l
    rho_u = rho_s(mus_u)
    if np.sign(rho_l) == np.sign(rho_u):
        raise EosConvergenceError(
            f"Solving rho_s = 0: no sign change in mu_S = [{mus_l}, {mus_u}] "
            f"at T = {T}, mu_B = {mu_B}",
            iterations=0, x=[mus_l, mus_u], residual=[rho_l, rho_u])

    mu_S, info = brentq(rho_s, mus_l, mus_u, xtol=tol, maxiter=max_iter,
                        full_output=True, disp=False)
    if not info.converged:
        raise EosConvergenceError(
            f"Solving rho_s = 0: too many iterations ({info.iterations})",
            iterations=info.iterations, x=[mu_S], residual=[rho_s(mu_S)])
    return mu_S
