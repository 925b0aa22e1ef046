"""
hadgas_eos.py
=============
Hadron resonance gas EOS bound to a particle catalog.

HadronGasEOS collects the hadrons of a catalog and exposes:
- densities and pressure as functions of (T, μ_B, μ_S)
- the inverse problem (e, n_B, n_S) -> (T, μ_B, μ_S)
- μ_S of strangeness-neutral matter
- optionally, the tabulated EOS at zero net strangeness

Usage:
    from general_particles import ParticleCatalog
    from hadgas_eos import HadronGasEOS

    catalog = ParticleCatalog.from_files("particles.txt", "decaymodes.txt")
    eos = HadronGasEOS(catalog)
    T, mu_B, mu_S = eos.solve_eos(e=0.3, n_B=0.05, n_S=0.0)

    eos = HadronGasEOS(catalog, tabulate=True)   # compiles or reads the table
    state = eos.table.get(0.3, 0.05)

Units: GeV, fm⁻³, GeV/fm³
"""
import numpy as np
from typing import Iterable, Optional, Sequence

from general_particles import ParticleSpecies
from hadgas_parameters import HadronGasParams, get_hadgas_default
from hadgas_thermodynamics import (
    HadronGasThermoResult, list_eos_particles, compute_hadgas_thermo,
    energy_density, density, net_baryon_density, net_strange_density,
    pressure, entropy_density, partial_density, mus_net_strangeness0
)
from hadgas_eos_solver import solve_eos
from hadgas_eos_table import EosTable


class HadronGasEOS:
    """
    Hadron gas EOS for the hadrons of a species catalog.

    Args:
        particles: Species catalog (any iterable of ParticleSpecies)
        tabulate: Compile (or read) the EOS table at construction
        params: HadronGasParams, defaults to get_hadgas_default()
        verbose: Print progress of table compilation and solver failures
    """

    def __init__(self, particles: Iterable[ParticleSpecies], tabulate: bool = False,
                 params: Optional[HadronGasParams] = None, verbose: bool = True):
        self.params = params if params is not None else get_hadgas_default()
        self.particles = list_eos_particles(particles)
        self.verbose = verbose
        self.table: Optional[EosTable] = None
        if tabulate:
            self.table = EosTable(self.params.de, self.params.dnb,
                                  self.params.n_e, self.params.n_nb)
            self.table.compile(
                self, self.params.table_filename,
                consistency_steps=self.params.consistency_steps,
                consistency_tolerance=self.params.consistency_tolerance,
                verbose=verbose)

    @property
    def is_tabulated(self) -> bool:
        return self.table is not None

    def energy_density(self, T: float, mu_B: float, mu_S: float) -> float:
        return energy_density(T, mu_B, mu_S, self.particles)

    def density(self, T: float, mu_B: float, mu_S: float) -> float:
        return density(T, mu_B, mu_S, self.particles)

    def net_baryon_density(self, T: float, mu_B: float, mu_S: float) -> float:
        return net_baryon_density(T, mu_B, mu_S, self.particles)

    def net_strange_density(self, T: float, mu_B: float, mu_S: float) -> float:
        return net_strange_density(T, mu_B, mu_S, self.particles)

    def pressure(self, T: float, mu_B: float, mu_S: float) -> float:
        return pressure(T, mu_B, mu_S, self.particles)

    def entropy_density(self, T: float, mu_B: float, mu_S: float) -> float:
        return entropy_density(T, mu_B, mu_S, self.particles)

    def partial_density(self, ptype: ParticleSpecies, T: float,
                        mu_B: float, mu_S: float) -> float:
        return partial_density(ptype, T, mu_B, mu_S)

    def thermo(self, T: float, mu_B: float, mu_S: float) -> HadronGasThermoResult:
        return compute_hadgas_thermo(T, mu_B, mu_S, self.particles)

    def mus_net_strangeness0(self, T: float, mu_B: float) -> float:
        return mus_net_strangeness0(
            T, mu_B, self.particles,
            tol=self.params.mus_tolerance,
            max_iter=self.params.mus_max_iterations)

    def solve_eos(self, e: float, n_B: float, n_S: float,
                  initial_guess: Sequence[float] = (0.1, 0.0, 0.0)) -> np.ndarray:
        """(e, n_B, n_S) -> [T, μ_B, μ_S]; see hadgas_eos_solver.solve_eos."""
        return solve_eos(
            e, n_B, n_S, initial_guess, self.particles,
            tol=self.params.solver_tolerance,
            max_iter=self.params.solver_max_iterations,
            min_temperature=self.params.min_temperature,
            verbose=self.verbose)

    def __repr__(self):
        return (f"HadronGasEOS({len(self.particles)} hadrons, "
                f"tabulated={self.is_tabulated})")
