"""
general_kinematics.py
=====================
Relativistic two-body kinematics for the resonance cross sections.

Four-momenta are numpy arrays (E, px, py, pz) with metric (+, -, -, -).

Units: GeV
"""
import numpy as np
from dataclasses import dataclass

from general_particles import ParticleSpecies


@dataclass
class ParticleData:
    """A particle of a given species with its four-momentum."""
    species: ParticleSpecies
    momentum: np.ndarray

    @classmethod
    def with_three_momentum(cls, species: ParticleSpecies, p3, mass: float = None) -> 'ParticleData':
        """On-shell particle; the pole mass is used unless `mass` is given."""
        m = species.mass if mass is None else mass
        p3 = np.asarray(p3, dtype=float)
        energy = np.sqrt(m * m + p3 @ p3)
        return cls(species, np.concatenate(([energy], p3)))

    @property
    def effective_mass(self) -> float:
        return np.sqrt(max(minkowski_dot(self.momentum, self.momentum), 0.0))


def minkowski_dot(a: np.ndarray, b: np.ndarray) -> float:
    """a·b = a0 b0 - a⃗·b⃗"""
    return float(a[0] * b[0] - a[1:] @ b[1:])


def mandelstam_s(p1: np.ndarray, p2: np.ndarray) -> float:
    """Square of the total four-momentum, s = (p1 + p2)²."""
    total = p1 + p2
    return minkowski_dot(total, total)


def cm_momentum_squared(p1: np.ndarray, p2: np.ndarray,
                        m1: float, m2: float) -> float:
    """
    Squared momentum of either particle in the centre-of-mass frame.

    p_cm² = ((p1·p2)² - m1² m2²) / s
    """
    p1p2 = minkowski_dot(p1, p2)
    return (p1p2 * p1p2 - m1 * m1 * m2 * m2) / mandelstam_s(p1, p2)


def lorentz_boost(p: np.ndarray, velocity) -> np.ndarray:
    """
    Four-vector seen from a frame moving with `velocity`.

    x'_0 = γ (x_0 - r⃗·v⃗)
    x'_i = x_i - v_i γ/(γ+1) (x'_0 + x_0)

    For |v| >= 1, γ is set to 0.
    """
    v = np.asarray(velocity, dtype=float)
    v2 = v @ v
    gamma = 1.0 / np.sqrt(1.0 - v2) if v2 < 1.0 else 0.0

    xprime_0 = gamma * (p[0] - p[1:] @ v)
    constant_part = gamma / (gamma + 1.0) * (xprime_0 + p[0])
    return np.concatenate(([xprime_0], p[1:] - v * constant_part))
