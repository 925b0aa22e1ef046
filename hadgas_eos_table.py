"""
hadgas_eos_table.py
===================
Tabulated hadron gas EOS on a regular (e, n_B) grid at zero net strangeness.

Each grid node stores (P, T, μ_B, μ_S). The table is compiled once, by
solving the EOS at every node, and cached in a plain-text file:

    de dnb
    n_e n_nb
    p T mu_B mu_S        <- n_e * n_nb lines, energy index outer

A cached file is only trusted after a consistency check against the live
EOS; otherwise the table is recompiled and the file overwritten.

Lookups interpolate bilinearly and return OUTSIDE_TABLE beyond the grid.

Units:
- e, P: GeV/fm³
- n_B: fm⁻³
- T, μ_B, μ_S: GeV
"""
import numpy as np
from dataclasses import dataclass
from pathlib import Path
from typing import Union

from general_physics_constants import nucleon_mass


# =============================================================================
# DATA CLASSES
# =============================================================================
@dataclass(frozen=True)
class TableElement:
    """Solved thermodynamic state at one (e, n_B) point."""
    p: float
    T: float
    mu_B: float
    mu_S: float

    def to_array(self) -> np.ndarray:
        return np.array([self.p, self.T, self.mu_B, self.mu_S])


# Returned by EosTable.get outside the grid
OUTSIDE_TABLE = TableElement(-1.0, -1.0, -1.0, -1.0)


# =============================================================================
# TABLE
# =============================================================================
class EosTable:
    """
    (e, n_B) -> (P, T, μ_B, μ_S) table of the hadron gas.

    Args:
        de: Energy density step (GeV/fm³)
        dnb: Net baryon density step (fm⁻³)
        n_e: Number of energy density nodes
        n_nb: Number of baryon density nodes
    """

    def __init__(self, de: float, dnb: float, n_e: int, n_nb: int):
        self.de = de
        self.dnb = dnb
        self.n_e = n_e
        self.n_nb = n_nb
        self._table = np.zeros((n_e, n_nb, 4))
        self._compiled = False

    def index(self, ie: int, inb: int) -> int:
        """Position of node (ie, inb) in the row-major file order."""
        return ie * self.n_nb + inb

    @property
    def is_compiled(self) -> bool:
        return self._compiled

    def element(self, ie: int, inb: int) -> TableElement:
        """Stored state at node (ie, inb)."""
        self._require_compiled()
        return TableElement(*self._table[ie, inb])

    def _require_compiled(self):
        if not self._compiled:
            raise RuntimeError("EOS table is read before it was compiled")

    def as_array(self) -> np.ndarray:
        """Copy of all nodes, shape (n_e, n_nb, 4) with fields (P, T, μ_B, μ_S)."""
        self._require_compiled()
        return self._table.copy()

    def grid(self):
        """Node coordinates (e_values, n_B_values)."""
        return (self.de * np.arange(self.n_e), self.dnb * np.arange(self.n_nb))

    # -------------------------------------------------------------------------
    # Compilation
    # -------------------------------------------------------------------------
    def compile(self, eos, filename: Union[str, Path],
                consistency_steps: int = 50, consistency_tolerance: float = 1.0e-3,
                verbose: bool = True):
        """
        Fill the table, from `filename` if it is present and consistent.

        Args:
            eos: Object with energy_density, net_baryon_density,
                net_strange_density, pressure (all of T, μ_B, μ_S) and
                solve_eos(e, n_B, n_S, initial_guess)
            filename: Cache file, read if present and written after compiling
            consistency_steps: Approximate nodes per axis to check on load
            consistency_tolerance: Accepted absolute discrepancy
            verbose: Print progress
        """
        filename = Path(filename)
        if filename.exists():
            if verbose:
                print(f"Reading table from file {filename}")
            if self._read(filename, verbose) and self.is_consistent(
                    eos, consistency_steps, consistency_tolerance, verbose):
                self._compiled = True
                return

        if verbose:
            print("Compiling an EoS table...")
        self._fill(eos)
        self._compiled = True

        if verbose:
            print(f"Saving table to file {filename}")
        self.save(filename)

    def _fill(self, eos):
        """Solve the EOS at every node, row by row in energy density."""
        n_S = 0.0
        for ie in range(self.n_e):
            e = self.de * ie
            init_approx = np.array([0.1, 0.0, 0.0])
            for inb in range(self.n_nb):
                n_B = self.dnb * inb
                # No solution for e below the baryon rest mass
                if n_B * nucleon_mass >= e:
                    self._table[ie, inb] = 0.0
                    continue
                # Extrapolate from the previous two nodes, except close
                # to the unphysical region
                if n_B > e:
                    init_approx = np.array([0.1, 0.7, 0.0])
                elif inb >= 2:
                    y = self._table[ie, inb - 2, 1:]
                    x = self._table[ie, inb - 1, 1:]
                    init_approx = 2.0 * x - y
                T, mu_B, mu_S = eos.solve_eos(e, n_B, n_S, init_approx)
                self._table[ie, inb] = (eos.pressure(T, mu_B, mu_S), T, mu_B, mu_S)

    def is_consistent(self, eos, steps: int = 50, tolerance: float = 1.0e-3,
                      verbose: bool = True) -> bool:
        """
        Check stored nodes against the EOS on a ~steps x steps subgrid.

        Nodes with T = 0 (unphysical region) are skipped; any other node,
        including one holding NaN, must match within `tolerance`.
        """
        if verbose:
            print("Checking consistency of the table... ")
        ie_step = 1 + self.n_e // steps
        inb_step = 1 + self.n_nb // steps
        for ie in range(0, self.n_e, ie_step):
            for inb in range(0, self.n_nb, inb_step):
                p, T, mu_B, mu_S = self._table[ie, inb]
                if T == 0.0:
                    continue
                e_comp = eos.energy_density(T, mu_B, mu_S)
                nb_comp = eos.net_baryon_density(T, mu_B, mu_S)
                ns_comp = eos.net_strange_density(T, mu_B, mu_S)
                p_comp = eos.pressure(T, mu_B, mu_S)
                # Written so that NaN counts as a discrepancy
                if not (T > 0.0 and
                        abs(self.de * ie - e_comp) <= tolerance and
                        abs(self.dnb * inb - nb_comp) <= tolerance and
                        abs(ns_comp) <= tolerance and
                        abs(p - p_comp) <= tolerance):
                    if verbose:
                        print(f"discrepancy: {self.de * ie} = {e_comp}, "
                              f"{self.dnb * inb} = {nb_comp}, "
                              f"{p} = {p_comp}, 0 = {ns_comp}")
                    return False
        return True

    # -------------------------------------------------------------------------
    # File I/O
    # -------------------------------------------------------------------------
    def save(self, filename: Union[str, Path]):
        """Write grid parameters and all nodes with 7 decimals."""
        self._require_compiled()
        with open(filename, 'w') as f:
            f.write(f"{self.de!r} {self.dnb!r}\n")
            f.write(f"{self.n_e} {self.n_nb}\n")
            for p, T, mu_B, mu_S in self._table.reshape(-1, 4):
                f.write(f"{p:.7f} {T:.7f} {mu_B:.7f} {mu_S:.7f}\n")

    def _read(self, filename: Path, verbose: bool = True) -> bool:
        """Replace grid and nodes by the file content; False if malformed."""
        try:
            with open(filename, 'r') as f:
                de, dnb = (float(v) for v in f.readline().split())
                n_e, n_nb = (int(v) for v in f.readline().split())
            data = np.loadtxt(filename, skiprows=2, ndmin=2)
        except ValueError as err:
            if verbose:
                print(f"Malformed table file {filename}: {err}")
            return False

        if data.shape != (n_e * n_nb, 4):
            if verbose:
                print(f"Table file {filename} holds {data.shape[0]} nodes, "
                      f"expected {n_e} x {n_nb} = {n_e * n_nb}")
            return False

        if not np.isfinite(data).all():
            if verbose:
                print(f"Table file {filename} holds non-finite values")
            return False

        self.de, self.dnb = de, dnb
        self.n_e, self.n_nb = n_e, n_nb
        self._table = data.reshape(n_e, n_nb, 4)
        if verbose:
            print("Table consumed successfully.")
        return True

    @classmethod
    def load(cls, filename: Union[str, Path], verbose: bool = False) -> 'EosTable':
        """
        Read a table file without checking it against an EOS.

        Raises:
            ValueError: malformed file
        """
        table = cls(0.0, 0.0, 0, 0)
        if not table._read(Path(filename), verbose):
            raise ValueError(f"Malformed EOS table file {filename}")
        table._compiled = True
        return table

    # -------------------------------------------------------------------------
    # Lookup
    # -------------------------------------------------------------------------
    def get(self, e: float, n_B: float) -> TableElement:
        """
        Bilinear interpolation of (P, T, μ_B, μ_S) at (e, n_B).

        Returns OUTSIDE_TABLE if (e, n_B) has no upper neighbour node.
        """
        self._require_compiled()
        if (e < 0.0 or n_B < 0.0 or
                e >= (self.n_e - 1) * self.de or n_B >= (self.n_nb - 1) * self.dnb):
            return OUTSIDE_TABLE
        ie = int(np.floor(e / self.de))
        inb = int(np.floor(n_B / self.dnb))
        if ie >= self.n_e - 1 or inb >= self.n_nb - 1:
            return OUTSIDE_TABLE

        ae = e / self.de - ie
        an = n_B / self.dnb - inb
        s1 = self._table[ie, inb]
        s2 = self._table[ie + 1, inb]
        s3 = self._table[ie, inb + 1]
        s4 = self._table[ie + 1, inb + 1]
        res = ae * (an * s4 + (1.0 - an) * s2) + (1.0 - ae) * (an * s3 + (1.0 - an) * s1)
        return TableElement(*res)
