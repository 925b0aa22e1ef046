"""
hadgas_compute_tables.py
========================
User-friendly script for compiling the hadron gas EOS table at zero net
strangeness.

The table maps (e, n_B) -> (P, T, μ_B, μ_S) and is cached in a text file;
an existing cache is reused only if it passes the consistency check against
the current species list.

Usage:
    1. Edit the CONFIGURATION section below
    2. Run: python hadgas_compute_tables.py

    OR import and use programmatically:

    from hadgas_compute_tables import compute_table, TableSettings
"""

import numpy as np
import time
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

from general_particles import ParticleCatalog, get_light_hadron_catalog
from hadgas_eos import HadronGasEOS
from hadgas_eos_table import EosTable, OUTSIDE_TABLE
from hadgas_parameters import HadronGasParams, get_hadgas_custom


#==============================================================================
# SETTINGS DATACLASS
#==============================================================================
@dataclass
class TableSettings:
    """
    Configuration for hadron gas EOS table generation.

    The species list is read from `particles_file` / `decaymodes_file`, or
    taken from general_particles.LIGHT_HADRONS when no file is given.

    Custom parametrization:
        Use custom_params to pass a HadronGasParams object directly; the
        grid fields below are then ignored.

        from hadgas_parameters import get_hadgas_custom

        my_params = get_hadgas_custom(de=0.02, dnb=0.005, n_e=200, n_nb=100,
                                      solver_tolerance=1e-6)
        settings = TableSettings(custom_params=my_params)
    """
    # Species list
    particles_file: Optional[str] = None
    decaymodes_file: Optional[str] = None
    custom_params: Any = None            # HadronGasParams object

    # Grid definition
    de: float = 1.0e-2                   # GeV/fm³
    dnb: float = 1.0e-2                  # fm⁻³
    n_e: int = 900
    n_nb: int = 900
    table_filename: str = "hadgas_eos_table.dat"

    # Output control
    print_results: bool = True
    print_timing: bool = True
    sample_points: List[Tuple[float, float]] = field(default_factory=lambda: [
        (0.1, 0.0), (0.3, 0.05), (1.0, 0.2)
    ])


def _get_params(settings: TableSettings) -> HadronGasParams:
    if settings.custom_params is not None:
        return settings.custom_params
    return get_hadgas_custom(
        de=settings.de, dnb=settings.dnb,
        n_e=settings.n_e, n_nb=settings.n_nb,
        table_filename=settings.table_filename
    )


def load_catalog(settings: TableSettings) -> ParticleCatalog:
    """Species catalog selected by the settings."""
    if settings.particles_file is None:
        return get_light_hadron_catalog()
    return ParticleCatalog.from_files(settings.particles_file, settings.decaymodes_file)


#==============================================================================
# TABLE GENERATOR
#==============================================================================
def compute_table(settings: TableSettings,
                  catalog: Optional[ParticleCatalog] = None) -> HadronGasEOS:
    """
    Compile (or read back) the EOS table described by `settings`.

    Returns:
        Tabulated HadronGasEOS; the table is eos.table
    """
    params = _get_params(settings)
    if catalog is None:
        catalog = load_catalog(settings)

    if settings.print_results:
        print("=" * 70)
        print("HADRON GAS EOS TABLE GENERATION")
        print("=" * 70)
        print(f"\nParameters: {params.name}")
        print(f"Species: {len(catalog)} in catalog")
        print(f"\nGrid: {params.n_e} x {params.n_nb} = {params.n_e * params.n_nb} points")
        print(f"  e   range: [0, {params.de * (params.n_e - 1):.4f}] GeV/fm^3")
        print(f"  n_B range: [0, {params.dnb * (params.n_nb - 1):.4f}] fm^-3")
        print(f"\nCache file: {params.table_filename}")
        print()

    start_time = time.time()
    eos = HadronGasEOS(catalog, tabulate=True, params=params,
                       verbose=settings.print_results)
    elapsed = time.time() - start_time

    if settings.print_results:
        print(f"\n{eos!r}")

    if settings.print_timing:
        n_points = params.n_e * params.n_nb
        print(f"\n  Completed in {elapsed:.2f} s ({elapsed*1000/n_points:.3f} ms/point)")

    if settings.print_results and settings.sample_points:
        print_lookups(eos.table, settings.sample_points)

    return eos


def print_lookups(table: EosTable, points: List[Tuple[float, float]]):
    """Print interpolated states at (e, n_B) points."""
    print("\n" + "-" * 70)
    print(f"{'e':>10} {'n_B':>10} {'P':>12} {'T':>12} {'mu_B':>12} {'mu_S':>12}")
    for e, n_B in points:
        state = table.get(e, n_B)
        if state == OUTSIDE_TABLE:
            print(f"{e:>10.4f} {n_B:>10.4f}   outside table")
            continue
        print(f"{e:>10.4f} {n_B:>10.4f} {state.p:>12.6f} {state.T:>12.6f} "
              f"{state.mu_B:>12.6f} {state.mu_S:>12.6f}")


def table_to_arrays(table: EosTable) -> Dict[str, np.ndarray]:
    """Convert a compiled table to a dictionary of 2D arrays indexed [ie, inb]."""
    values = table.as_array()
    e_values, nb_values = table.grid()
    e_grid, nb_grid = np.meshgrid(e_values, nb_values, indexing='ij')
    return {
        'e': e_grid,
        'n_B': nb_grid,
        'P': values[:, :, 0],
        'T': values[:, :, 1],
        'mu_B': values[:, :, 2],
        'mu_S': values[:, :, 3],
    }


#==============================================================================
# CONFIGURATION (EDIT THIS SECTION)
#==============================================================================
settings = TableSettings(
    # ===================== SPECIES =====================
    particles_file=None,        # None: built-in light hadron list
    decaymodes_file=None,

    # ===================== GRID =====================
    de=1.0e-2,
    dnb=2.0e-3,
    n_e=150,
    n_nb=60,
    table_filename="hadgas_eos_table.dat",

    # ===================== OUTPUT =====================
    print_results=True,
    print_timing=True,
)


#==============================================================================
# MAIN
#==============================================================================
if __name__ == "__main__":
    print("\n" + "=" * 70)
    print("HADRON GAS EOS TABLE GENERATOR")
    print("=" * 70 + "\n")

    eos = compute_table(settings)
    data = table_to_arrays(eos.table)
    filled = data['T'] > 0.0

    print("\n" + "=" * 70)
    print("DONE!")
    print(f"  solved nodes: {np.count_nonzero(filled)}/{filled.size}")
    print(f"  T: [{data['T'][filled].min():.4f}, {data['T'][filled].max():.4f}] GeV")
    print(f"  P: [{data['P'][filled].min():.4e}, {data['P'][filled].max():.4e}] GeV/fm^3")
    print("=" * 70 + "\n")
