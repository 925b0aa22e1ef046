"""
resonances_isospin.py
=====================
Isospin Clebsch-Gordan coefficients for resonance formation.

All isospin arguments are integers equal to twice the physical value
(isospin 1/2 -> 1, isospin 1 -> 2), the convention of HalfInteger.twice.

    <I1 Iz1; I2 Iz2 | I3 Iz3> = (-1)^(I1/2 - I2/2 + Iz3/2) sqrt(I3 + 1)
                                 × (I1/2  I2/2  I3/2; Iz1/2  Iz2/2  -Iz3/2)

with the Wigner 3j symbol evaluated exactly by sympy.
"""
from functools import lru_cache

import numpy as np
import sympy
from sympy.physics.wigner import wigner_3j

from general_physics_constants import REALLY_SMALL


def _is_coupling_allowed(I1: int, I2: int, I3: int,
                         Iz1: int, Iz2: int, Iz3: int) -> bool:
    """Selection rules of the doubled quantum numbers."""
    if min(I1, I2, I3) < 0:
        return False
    if (I1 + I2 + I3) % 2 != 0:
        return False
    if I3 < abs(I1 - I2) or I3 > I1 + I2:
        return False
    for I, Iz in ((I1, Iz1), (I2, Iz2), (I3, Iz3)):
        if abs(Iz) > I or (I - Iz) % 2 != 0:
            return False
    return Iz1 + Iz2 == Iz3


@lru_cache(maxsize=4096)
def clebsch_gordan(I1: int, I2: int, I3: int,
                   Iz1: int, Iz2: int, Iz3: int) -> float:
    """
    Isospin Clebsch-Gordan coefficient <I1 Iz1; I2 Iz2 | I3 Iz3>.

    Args:
        I1, I2, I3: Twice the isospins of particle 1, 2 and the coupled state
        Iz1, Iz2, Iz3: Twice the corresponding isospin projections

    Returns:
        The coefficient, exactly 0.0 for forbidden couplings
    """
    if not _is_coupling_allowed(I1, I2, I3, Iz1, Iz2, Iz3):
        return 0.0
    half = sympy.Rational(1, 2)
    w3j = float(wigner_3j(I1 * half, I2 * half, I3 * half,
                          Iz1 * half, Iz2 * half, -Iz3 * half))
    if abs(w3j) < REALLY_SMALL:
        return 0.0
    # I1 - I2 + Iz3 is even whenever the 3j symbol is nonzero
    sign = -1.0 if ((I1 - I2 + Iz3) // 2) % 2 else 1.0
    return sign * np.sqrt(I3 + 1) * w3j
