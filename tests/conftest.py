"""Shared catalogs for the hadron gas and resonance tests."""

import numpy as np
import pytest

from general_particles import ParticleCatalog, get_light_hadron_catalog


PIONS = (
    "pi+  0.138  -1.0  211   0  2  0  0  1\n"
    "pi0  0.138  -1.0  111   0  2  0  0  0\n"
    "pi-  0.138  -1.0  -211  0  2  0  0 -1\n"
)


@pytest.fixture(scope="session")
def light_catalog():
    return get_light_hadron_catalog()


@pytest.fixture
def f0_catalog():
    """A stable neutral pion and one scalar resonance decaying into two of them."""
    return ParticleCatalog.from_strings(
        "pi0  0.138  -1.0  111      0  2  0  0  0\n"
        "f0   0.990  0.07  9010221  0  0  0  0  0\n",
        "9010221 1\n"
        "1.0 111 111\n",
    )


@pytest.fixture
def rho_catalog():
    return ParticleCatalog.from_strings(
        PIONS + "rho0  0.776  0.149  113  2  2  0  0  0\n",
        "113 1\n"
        "1.0 211 -211\n",
    )


@pytest.fixture
def nucleon_delta_catalog():
    """Pions, nucleons and the four Δ(1232) states."""
    return ParticleCatalog.from_strings(
        PIONS +
        "p        0.938  -1.0   2212  1  1  1  0  1\n"
        "n        0.938  -1.0   2112  1  1  1  0  0\n"
        "Delta++  1.232  0.117  2224  3  3  1  0  2\n"
        "Delta+   1.232  0.117  2214  3  3  1  0  1\n"
        "Delta0   1.232  0.117  2114  3  3  1  0  0\n"
        "Delta-   1.232  0.117  1114  3  3  1  0 -1\n",
        "2224 1\n"
        "1.0 2212 211\n"
        "2214 2\n"
        "0.667 2212 111\n"
        "0.333 2112 211\n"
        "2114 2\n"
        "0.667 2112 111\n"
        "0.333 2212 -211\n"
        "1114 1\n"
        "1.0 2112 -211\n",
    )


class LinearEos:
    """EOS with e = T, n_B = μ_B, n_S = μ_S and P = T/3; records solver calls."""

    def __init__(self):
        self.guesses = {}

    def energy_density(self, T, mu_B, mu_S):
        return T

    def net_baryon_density(self, T, mu_B, mu_S):
        return mu_B

    def net_strange_density(self, T, mu_B, mu_S):
        return mu_S

    def pressure(self, T, mu_B, mu_S):
        return T / 3.0

    def solve_eos(self, e, n_B, n_S, initial_guess):
        self.guesses[(e, n_B)] = np.array(initial_guess)
        return np.array([e, n_B, n_S])
