"""
general_physics_constants.py
============================
Physical constants and unit conversions shared by the hadron gas EOS and
the resonance cross sections.

Units: GeV for energy/mass/temperature/chemical potential, fm for length,
mb for cross sections.
"""
import numpy as np

# =============================================================================
# FUNDAMENTAL CONSTANTS
# =============================================================================
hbarc = 0.197327053           # GeV·fm (ℏc)
hbarc3 = hbarc**3             # (GeV·fm)³

# Nucleon mass for the unphysical-region cut n_B·m_N >= e of the EOS table
nucleon_mass = 0.938          # GeV

# =============================================================================
# UNIT CONVERSIONS
# =============================================================================
fm2_mb = 0.1                  # 1 fm² = 10 mb, so σ[mb] = σ[fm²] / fm2_mb

# =============================================================================
# NUMERICAL THRESHOLDS
# =============================================================================
PI = np.pi

# Below this, quantities are treated as zero
REALLY_SMALL = 1.0e-10

# Exponent below which exp(x) is set to zero
EXP_UNDERFLOW = -700.0

# =============================================================================
# DERIVED CONSTANTS
# =============================================================================
# Boltzmann phase-space prefactor 1/(2π²(ℏc)³) in GeV⁻³fm⁻³
PHASE_SPACE_PREFACTOR = 1.0 / (2.0 * PI**2 * hbarc3)


# =============================================================================
# SELF-TEST
# =============================================================================
if __name__ == "__main__":
    print("Physical Constants Module (GeV units)")
    print("=" * 50)
    print(f"ℏc = {hbarc:.9f} GeV·fm")
    print(f"1/(2π²(ℏc)³) = {PHASE_SPACE_PREFACTOR:.6f} GeV⁻³fm⁻³")
    print(f"m_N (EOS cut) = {nucleon_mass} GeV")
    print(f"(ℏc)²/fm2_mb = {hbarc**2 / fm2_mb:.6f} GeV² mb")
