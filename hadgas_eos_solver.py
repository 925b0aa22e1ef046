"""
hadgas_eos_solver.py
====================
Inversion of the hadron gas EOS: (e, n_B, n_S) -> (T, μ_B, μ_S).

The three equations

    ε(T, μ_B, μ_S)   - e   = 0
    n_B(T, μ_B, μ_S) - n_B = 0
    n_S(T, μ_B, μ_S) - n_S = 0

are solved with the Powell hybrid method (scipy 'hybr'), which builds its
Jacobian from finite differences. The scratch vector and residual live
only inside one call.

Policy:
- A trial temperature below `min_temperature` aborts the solve and
  (0, 0, 0) is returned; this happens at very low densities.
- A solution must satisfy Σ|residual| < tol. Anything else raises
  EosConvergenceError and is never retried.

Units: GeV, fm⁻³, GeV/fm³
"""
import warnings
import numpy as np
from typing import Iterable, Sequence

from scipy.optimize import root

from general_particles import ParticleSpecies
from hadgas_thermodynamics import (
    EosConvergenceError, list_eos_particles,
    energy_density, net_baryon_density, net_strange_density
)


class _TemperatureFloorReached(Exception):
    """Internal signal: the solver wandered below the temperature floor."""


def print_solver_state(iterations: int, x: Sequence[float], f: Sequence[float]):
    """Print iteration count, iterate and residual of the solver."""
    print(f"iter = {iterations}, "
          f"x = {x[0]:.6g} {x[1]:.6g} {x[2]:.6g}, "
          f"f(x) = {f[0]:.6g} {f[1]:.6g} {f[2]:.6g}")


def solve_eos(
    e: float, n_B: float, n_S: float,
    initial_guess: Sequence[float],
    particles: Iterable[ParticleSpecies],
    tol: float = 1.0e-4,
    max_iter: int = 1000,
    min_temperature: float = 0.015,
    verbose: bool = True
) -> np.ndarray:
    """
    Find (T, μ_B, μ_S) for given energy, baryon and strangeness densities.

    Args:
        e: Energy density (GeV/fm³)
        n_B: Net baryon density (fm⁻³)
        n_S: Net strangeness density (fm⁻³)
        initial_guess: Starting point [T, μ_B, μ_S] (GeV)
        particles: Species list
        tol: Accepted Σ|residual|
        max_iter: Cap on residual evaluations
        min_temperature: Temperature floor (GeV)
        verbose: Print the solver state on failure

    Returns:
        np.ndarray [T, μ_B, μ_S], or zeros if the temperature floor was hit

    Raises:
        EosConvergenceError: solver stalled or hit the iteration cap
    """
    particles = list_eos_particles(particles)
    n_calls = 0

    def residual_function(x: np.ndarray) -> np.ndarray:
        nonlocal n_calls
        n_calls += 1
        T, mu_B, mu_S = x
        if T < min_temperature:
            raise _TemperatureFloorReached()
        return np.array([
            energy_density(T, mu_B, mu_S, particles) - e,
            net_baryon_density(T, mu_B, mu_S, particles) - n_B,
            net_strange_density(T, mu_B, mu_S, particles) - n_S,
        ])

    x0 = np.asarray(initial_guess, dtype=float)

    try:
        with warnings.catch_warnings():
            warnings.simplefilter("ignore")
            solution = root(residual_function, x0, method='hybr',
                            options={'maxfev': max_iter})
    except _TemperatureFloorReached:
        return np.zeros(3)

    residual = np.sum(np.abs(solution.fun))
    if residual < tol:
        return np.asarray(solution.x, dtype=float)

    if verbose:
        print_solver_state(n_calls, solution.x, solution.fun)
    raise EosConvergenceError(
        f"EOS solver failed for e={e}, n_B={n_B}, n_S={n_S}: {solution.message}",
        iterations=n_calls, x=solution.x, residual=solution.fun)
