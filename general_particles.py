"""
general_particles.py
====================
Particle species catalog shared by the hadron gas EOS and the resonance
cross sections.

This module provides:
1. HalfInteger: spin and isospin values stored as twice their physical value
2. ParticleSpecies: immutable species record (mass, width, quantum numbers)
3. ProcessBranch: final state + weight of a decay or a formation process
4. ParticleCatalog: insertion-ordered species/decay-mode collection
5. Text loaders for particle and decay-mode lists

Stable species have width None. In the particle file any width <= 0 marks
a stable species.

Particle file format (one species per line, '#' starts a comment):
    # NAME  MASS[GeV]  WIDTH[GeV]  PDG  SPIN(x2)  ISOSPIN(x2)  B  S  Q

Decay-mode file format:
    <pdg> <number of modes>
    <ratio> <pdg1> <pdg2> [<pdg3>]

Units: GeV
"""
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Iterator, List, Optional, Tuple, Union

import numpy as np
import sympy

from general_physics_constants import REALLY_SMALL


# =============================================================================
# HALF-INTEGER QUANTUM NUMBERS
# =============================================================================
@dataclass(frozen=True, order=True)
class HalfInteger:
    """
    Angular-momentum-like quantum number stored as 2*value.

    Isospin 1/2 is HalfInteger(1), isospin 1 is HalfInteger(2). All
    arithmetic acts on `twice`, so no factor of 2 can get lost.
    """
    twice: int

    def __post_init__(self):
        if not isinstance(self.twice, (int, np.integer)):
            raise TypeError(f"HalfInteger needs an integer, got {self.twice!r}")
        object.__setattr__(self, 'twice', int(self.twice))

    @classmethod
    def from_value(cls, value: float) -> 'HalfInteger':
        """Build from the physical value, e.g. 1.5 -> HalfInteger(3)."""
        twice = 2.0 * value
        if abs(twice - round(twice)) > REALLY_SMALL:
            raise ValueError(f"{value} is not a half-integer")
        return cls(int(round(twice)))

    def rational(self) -> sympy.Rational:
        return sympy.Rational(self.twice, 2)

    @property
    def is_integer(self) -> bool:
        return self.twice % 2 == 0

    def __float__(self) -> float:
        return self.twice / 2.0

    def __add__(self, other: 'HalfInteger') -> 'HalfInteger':
        return HalfInteger(self.twice + other.twice)

    def __sub__(self, other: 'HalfInteger') -> 'HalfInteger':
        return HalfInteger(self.twice - other.twice)

    def __neg__(self) -> 'HalfInteger':
        return HalfInteger(-self.twice)

    def __abs__(self) -> 'HalfInteger':
        return HalfInteger(abs(self.twice))

    def __str__(self) -> str:
        if self.is_integer:
            return str(self.twice // 2)
        return f"{self.twice}/2"


def _as_half_integer(value: Union[int, HalfInteger]) -> HalfInteger:
    """Integers are read in the doubled convention."""
    if isinstance(value, HalfInteger):
        return value
    return HalfInteger(value)


def _collapse_ud(code: int) -> int:
    """Identify u and d quark digits of a PDG code (u=2 -> d=1)."""
    result = code
    for place in (10, 100, 1000):
        if (code // place) % 10 == 2:
            result -= place
    return result


# =============================================================================
# DATA CLASSES
# =============================================================================
@dataclass(frozen=True)
class ParticleSpecies:
    """
    Immutable particle species record.

    Attributes:
        name: Display name
        mass: Pole mass (GeV)
        width: Width (GeV), None for stable species
        pdg: PDG code
        spin: Spin (HalfInteger, doubled convention)
        isospin: Total isospin (HalfInteger, doubled convention)
        baryon_number: Baryon number B
        strangeness: Strangeness S
        charge: Electric charge Q
    """
    name: str
    mass: float
    width: Optional[float]
    pdg: int
    spin: HalfInteger = HalfInteger(0)
    isospin: HalfInteger = HalfInteger(0)
    baryon_number: int = 0
    strangeness: int = 0
    charge: int = 0

    def __post_init__(self):
        object.__setattr__(self, 'spin', _as_half_integer(self.spin))
        object.__setattr__(self, 'isospin', _as_half_integer(self.isospin))
        if self.width is not None and self.width <= 0.0:
            object.__setattr__(self, 'width', None)
        if abs(self.isospin3.twice) > self.isospin.twice:
            raise ValueError(
                f"{self.name}: isospin projection {self.isospin3} "
                f"exceeds isospin {self.isospin}")

    @property
    def is_stable(self) -> bool:
        return self.width is None

    @property
    def isospin3(self) -> HalfInteger:
        """Gell-Mann–Nishijima: 2 I3 = 2 Q - (B + S); zero for non-hadrons."""
        if not self.is_hadron:
            return HalfInteger(0)
        return HalfInteger(2 * self.charge - (self.baryon_number + self.strangeness))

    @property
    def degeneracy(self) -> int:
        return self.spin.twice + 1

    @property
    def is_fermion(self) -> bool:
        return self.spin.twice % 2 != 0

    @property
    def is_baryon(self) -> bool:
        return self.baryon_number != 0

    @property
    def is_hadron(self) -> bool:
        """Hadrons have both quark digits n_q2 and n_q3 of the PDG code set."""
        code = abs(self.pdg)
        return (code // 10) % 10 != 0 and (code // 100) % 10 != 0

    @property
    def iso_multiplet(self) -> Tuple[int, int, int]:
        """Key shared by all members of one isospin multiplet."""
        if self.baryon_number != 0:
            sign = int(np.sign(self.baryon_number))
        else:
            sign = int(np.sign(self.strangeness))
        return (sign, self.isospin.twice, _collapse_ud(abs(self.pdg)))

    def is_antiparticle_of(self, other: 'ParticleSpecies') -> bool:
        return self.pdg == -other.pdg

    def __repr__(self):
        width = "stable" if self.is_stable else f"Γ={self.width:.4g}"
        return (f"ParticleSpecies({self.name}, pdg={self.pdg}, "
                f"m={self.mass:.4g}, {width})")


@dataclass(frozen=True)
class ProcessBranch:
    """
    One branch of a decay or of a resonance formation process.

    Attributes:
        pdg_list: PDG codes of the final state
        weight: Branching ratio (decays) or cross section in mb (formation)
        multiplicity: Number of times the final state is produced
    """
    pdg_list: Tuple[int, ...]
    weight: float
    multiplicity: int = 1

    def __post_init__(self):
        object.__setattr__(self, 'pdg_list', tuple(int(p) for p in self.pdg_list))
        if len(self.pdg_list) == 0:
            raise ValueError("ProcessBranch needs at least one particle")


# =============================================================================
# CATALOG
# =============================================================================
class ParticleCatalog:
    """
    Insertion-ordered collection of species and their decay modes.

    Iterating yields ParticleSpecies in the order they were added.
    """

    def __init__(self, species: Optional[List[ParticleSpecies]] = None):
        self._types: Dict[int, ParticleSpecies] = {}
        self._decay_modes: Dict[int, Tuple[ProcessBranch, ...]] = {}
        for ptype in species or []:
            self.add_species(ptype)

    def add_species(self, ptype: ParticleSpecies):
        if ptype.pdg in self._types:
            raise ValueError(f"Duplicate PDG code {ptype.pdg} ({ptype.name})")
        self._types[ptype.pdg] = ptype

    def add_decay_modes(self, pdg: int, modes: List[ProcessBranch]):
        """Attach decay modes to an existing species."""
        if pdg not in self._types:
            raise KeyError(f"Decay modes for unknown PDG code {pdg}")
        for mode in modes:
            for product in mode.pdg_list:
                if product not in self._types:
                    raise ValueError(
                        f"Decay of {pdg} into unknown PDG code {product}")
        self._decay_modes[pdg] = tuple(modes)

    def find(self, pdg: int) -> ParticleSpecies:
        return self._types[pdg]

    def decay_modes(self, pdg: int) -> Tuple[ProcessBranch, ...]:
        return self._decay_modes.get(pdg, ())

    def has_decay_modes(self, pdg: int) -> bool:
        return len(self.decay_modes(pdg)) > 0

    def __iter__(self) -> Iterator[ParticleSpecies]:
        return iter(self._types.values())

    def __len__(self) -> int:
        return len(self._types)

    def __contains__(self, pdg: int) -> bool:
        return pdg in self._types

    @classmethod
    def from_strings(cls, particles_text: str,
                     decaymodes_text: Optional[str] = None) -> 'ParticleCatalog':
        catalog = cls(parse_particles(particles_text))
        if decaymodes_text is not None:
            for pdg, modes in parse_decaymodes(decaymodes_text).items():
                catalog.add_decay_modes(pdg, modes)
        return catalog

    @classmethod
    def from_files(cls, particles_path: Union[str, Path],
                   decaymodes_path: Union[str, Path, None] = None) -> 'ParticleCatalog':
        particles_text = Path(particles_path).read_text()
        decaymodes_text = None
        if decaymodes_path is not None:
            decaymodes_text = Path(decaymodes_path).read_text()
        return cls.from_strings(particles_text, decaymodes_text)


# =============================================================================
# TEXT LOADERS
# =============================================================================
def _is_skipped(line: str) -> bool:
    return (not line.strip()) or line[0] in '#/\t'


def parse_particles(text: str) -> List[ParticleSpecies]:
    """
    Parse a particle list.

    Each line: NAME MASS WIDTH PDG SPIN(x2) ISOSPIN(x2) B S Q
    """
    species = []
    for lineno, line in enumerate(text.splitlines(), start=1):
        if _is_skipped(line):
            continue
        tokens = line.split('#')[0].split()
        if len(tokens) != 9:
            raise ValueError(
                f"Line {lineno}: expected 9 columns, got {len(tokens)}: {line!r}")
        name = tokens[0]
        try:
            mass, width = float(tokens[1]), float(tokens[2])
            pdg, spin, isospin, B, S, Q = (int(t) for t in tokens[3:])
        except ValueError as err:
            raise ValueError(f"Line {lineno}: {err}") from err
        species.append(ParticleSpecies(
            name=name, mass=mass, width=width, pdg=pdg,
            spin=HalfInteger(spin), isospin=HalfInteger(isospin),
            baryon_number=B, strangeness=S, charge=Q
        ))
    return species


def parse_decaymodes(text: str) -> Dict[int, List[ProcessBranch]]:
    """
    Parse a decay-mode list.

    Ratios of one species that do not add up to 1 are renormalized.
    """
    decaymodes: Dict[int, List[ProcessBranch]] = {}
    modes_left = 0
    pdgcode = 0
    current: List[ProcessBranch] = []

    for lineno, line in enumerate(text.splitlines(), start=1):
        if _is_skipped(line):
            continue
        tokens = line.split()
        if modes_left == 0:
            # Header: PDG code and number of modes
            if len(tokens) < 2:
                raise ValueError(f"Line {lineno}: expected '<pdg> <modes>': {line!r}")
            pdgcode, modes_left = int(tokens[0]), int(tokens[1])
            current = []
            if modes_left <= 0:
                raise ValueError(f"Line {lineno}: number of modes must be positive")
            continue

        if len(tokens) < 3:
            raise ValueError(f"Line {lineno}: decay mode needs a ratio and 2+ products")
        ratio = float(tokens[0])
        current.append(ProcessBranch(tuple(int(t) for t in tokens[1:]), ratio))
        modes_left -= 1

        if modes_left == 0:
            ratio_sum = sum(mode.weight for mode in current)
            if abs(ratio_sum - 1.0) > REALLY_SMALL:
                current = [ProcessBranch(mode.pdg_list, mode.weight / ratio_sum)
                           for mode in current]
            decaymodes[pdgcode] = current

    if modes_left != 0:
        raise ValueError(f"Decay list of {pdgcode} ends with {modes_left} modes missing")
    return decaymodes


# =============================================================================
# LIGHT HADRON LIST
# =============================================================================
# Lightest (anti)hadrons up to the Δ(1232), PDG 2022 masses and widths
LIGHT_HADRONS = """\
# NAME       MASS     WIDTH    PDG    2S  2I   B   S   Q
pi+          0.138    -1.0     211    0   2    0   0   1
pi0          0.138    -1.0     111    0   2    0   0   0
pi-          0.138    -1.0     -211   0   2    0   0  -1
K+           0.494    -1.0     321    0   1    0   1   1
K0           0.494    -1.0     311    0   1    0   1   0
K0bar        0.494    -1.0     -311   0   1    0  -1   0
K-           0.494    -1.0     -321   0   1    0  -1  -1
eta          0.548    -1.0     221    0   0    0   0   0
rho+         0.776    0.149    213    2   2    0   0   1
rho0         0.776    0.149    113    2   2    0   0   0
rho-         0.776    0.149    -213   2   2    0   0  -1
omega        0.783    0.0085   223    2   0    0   0   0
p            0.938    -1.0     2212   1   1    1   0   1
n            0.938    -1.0     2112   1   1    1   0   0
pbar         0.938    -1.0     -2212  1   1   -1   0  -1
nbar         0.938    -1.0     -2112  1   1   -1   0   0
Lambda       1.116    -1.0     3122   1   0    1  -1   0
Lambdabar    1.116    -1.0     -3122  1   0   -1   1   0
Delta++      1.232    0.117    2224   3   3    1   0   2
Delta+       1.232    0.117    2214   3   3    1   0   1
Delta0       1.232    0.117    2114   3   3    1   0   0
Delta-       1.232    0.117    1114   3   3    1   0  -1
Deltabar--   1.232    0.117    -2224  3   3   -1   0  -2
Deltabar-    1.232    0.117    -2214  3   3   -1   0  -1
Deltabar0    1.232    0.117    -2114  3   3   -1   0   0
Deltabar+    1.232    0.117    -1114  3   3   -1   0   1
"""

LIGHT_HADRON_DECAYS = """\
213 1
1.0 211 111
113 1
1.0 211 -211
-213 1
1.0 -211 111
223 2
0.98 211 -211 111
0.02 211 -211
2224 1
1.0 2212 211
2214 2
0.667 2212 111
0.333 2112 211
2114 2
0.667 2112 111
0.333 2212 -211
1114 1
1.0 2112 -211
-2224 1
1.0 -2212 -211
-2214 2
0.667 -2212 111
0.333 -2112 -211
-2114 2
0.667 -2112 111
0.333 -2212 211
-1114 1
1.0 -2112 211
"""


def get_light_hadron_catalog() -> ParticleCatalog:
    """Catalog of LIGHT_HADRONS with their decay modes."""
    return ParticleCatalog.from_strings(LIGHT_HADRONS, LIGHT_HADRON_DECAYS)


# =============================================================================
# SELF-TEST
# =============================================================================
if __name__ == "__main__":
    catalog = ParticleCatalog.from_strings(
        "π⁺  0.138  -1.0  211  0  2  0  0  1\n"
        "π⁰  0.138  -1.0  111  0  2  0  0  0\n"
        "π⁻  0.138  -1.0  -211 0  2  0  0 -1\n"
        "ρ⁰  0.776  0.149 113  2  2  0  0  0\n",
        "113 1\n"
        "1.0 211 -211\n"
    )
    for ptype in catalog:
        print(f"{ptype!r}  I={ptype.isospin} I3={ptype.isospin3}")
    print(catalog.decay_modes(113))
