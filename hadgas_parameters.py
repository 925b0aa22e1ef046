"""
hadgas_parameters.py
====================
Parameter dataclasses for the hadron gas EOS table and the resonance
cross sections.

The hadron gas is a mixture of ideal Boltzmann gases of all hadrons of a
species catalog, with conserved baryon number and strangeness. The
parameters below fix:
- the (e, n_B) grid of the tabulated EOS and its cache file
- tolerances and iteration caps of the EOS root solvers
- adaptive quadrature settings for resonance mass integrals
- the constant matrix element of 2->2 resonance formation

Units:
- Energies/masses/temperatures: GeV
- Densities: fm⁻³, energy densities: GeV/fm³
- Cross sections: mb

References:
- O. Buss et al., Phys. Rept. 512 (2012) 1
"""
from dataclasses import dataclass


@dataclass
class HadronGasParams:
    """
    Parameters for the hadron gas EOS and resonance formation.

    Attributes:
        name: Parameter set identifier
        de: Energy density step of the EOS table (GeV/fm³)
        dnb: Net baryon density step of the EOS table (fm⁻³)
        n_e: Number of energy density grid points
        n_nb: Number of baryon density grid points
        table_filename: Cache file of the compiled EOS table
        solver_tolerance: Σ|residual| accepted by the (e, n_B, n_S) solver
        solver_max_iterations: Function-evaluation cap of the solver
        min_temperature: Trial temperature (GeV) below which the solver gives up
        mus_tolerance: Precision of μ_S in the strangeness neutrality search (GeV)
        mus_max_iterations: Iteration cap of the strangeness neutrality search
        consistency_steps: Grid points per axis checked when loading a table
        consistency_tolerance: Accepted discrepancy of a loaded table
        quad_epsabs, quad_epsrel, quad_limit: Adaptive quadrature settings
        matrix_element_2to2: |M|²/16π for 2->2 formation (mb GeV²)
        sampling_grid_points: Grid used to bound the mass distribution
        sampling_margin: Relative safety margin on that bound
        sampling_batch_size: Largest number of candidates drawn at once
    """
    name: str = "hadgas_default"

    # EOS table grid
    de: float = 1.0e-2
    dnb: float = 1.0e-2
    n_e: int = 900
    n_nb: int = 900
    table_filename: str = "hadgas_eos_table.dat"

    # (e, n_B, n_S) -> (T, μ_B, μ_S) solver
    solver_tolerance: float = 1.0e-4
    solver_max_iterations: int = 1000
    min_temperature: float = 0.015

    # Net strangeness zero search
    mus_tolerance: float = 1.0e-9
    mus_max_iterations: int = 30

    # Loaded table validation
    consistency_steps: int = 50
    consistency_tolerance: float = 1.0e-3

    # Quadrature of spectral functions
    quad_epsabs: float = 1.0e-6
    quad_epsrel: float = 1.0e-4
    quad_limit: int = 100

    # Cross sections
    matrix_element_2to2: float = 180.0

    # Resonance mass sampling
    sampling_grid_points: int = 2001
    sampling_margin: float = 0.05
    sampling_batch_size: int = 1000000


def get_hadgas_default() -> HadronGasParams:
    """Get default hadron gas parameter set."""
    return HadronGasParams(name="hadgas_default")


def get_hadgas_custom(
    de: float = 1.0e-2, dnb: float = 1.0e-2,
    n_e: int = 900, n_nb: int = 900,
    table_filename: str = "hadgas_eos_table.dat",
    name: str = "hadgas_custom",
    **kwargs
) -> HadronGasParams:
    """
    Create custom hadron gas parameter set.

    Args:
        de, dnb: Table steps in e (GeV/fm³) and n_B (fm⁻³)
        n_e, n_nb: Table extents
        table_filename: Cache file of the compiled table
        name: Parameter set name
        **kwargs: Any other HadronGasParams field

    Returns:
        HadronGasParams with specified values
    """
    return HadronGasParams(
        name=name,
        de=de, dnb=dnb, n_e=n_e, n_nb=n_nb,
        table_filename=table_filename,
        **kwargs
    )


# =============================================================================
# SELF-TEST
# =============================================================================
if __name__ == "__main__":
    print("Hadron Gas Parameters Test")
    print("=" * 50)

    params = get_hadgas_default()
    print(f"\nDefault parameters: {params.name}")
    print(f"  grid       = {params.n_e} x {params.n_nb}")
    print(f"  de         = {params.de} GeV/fm³")
    print(f"  dnb        = {params.dnb} fm⁻³")
    print(f"  e_max      = {params.de * (params.n_e - 1):.2f} GeV/fm³")
    print(f"  nB_max     = {params.dnb * (params.n_nb - 1):.2f} fm⁻³")
    print(f"  solver tol = {params.solver_tolerance:.1e}")
    print(f"  T_min      = {params.min_temperature} GeV")

    print("\n✓ All OK")
