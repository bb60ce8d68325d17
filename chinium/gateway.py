"""Reading calculation settings from a keyword-based input deck.

A deck is plain text in which a line holding only a keyword (``xyz``,
``basis``, ``charge``, ...) is followed by a line with its value.
"""

from __future__ import annotations

import math
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

ANGSTROM_TO_BOHR = 1.0 / 0.529177210903

_SYMBOLS = (
    "H He Li Be B C N O F Ne Na Mg Al Si P S Cl Ar K Ca Sc Ti V Cr Mn Fe Co Ni "
    "Cu Zn Ga Ge As Se Br Kr Rb Sr Y Zr Nb Mo Tc Ru Rh Pd Ag Cd In Sn Sb Te I "
    "Xe Cs Ba La Ce Pr Nd Pm Sm Eu Gd Tb Dy Ho Er Tm Yb Lu Hf Ta W Re Os Ir Pt "
    "Au Hg Tl Pb Bi Po At Rn Fr Ra Ac Th Pa U Np Pu Am Cm Bk Cf Es Fm Md No Lr "
    "Rf Db Sg Bh Hs Mt Ds Rg Cn Nh Fl Mc Lv Ts Og"
).split()
_NUMBERS = {symbol: z for z, symbol in enumerate(_SYMBOLS, start=1)}


class InputError(ValueError):
    """Raised when an input deck is malformed or refers to missing data."""


def element_symbol(z) -> str:
    """Chemical symbol of atomic number ``z``."""
    if not 1 <= int(z) <= len(_SYMBOLS):
        raise ValueError(f"no element with atomic number {z}")
    return _SYMBOLS[int(z) - 1]


def atomic_number(symbol) -> int:
    """Atomic number of a chemical symbol (case-insensitive)."""
    try:
        return _NUMBERS[str(symbol).capitalize()]
    except KeyError:
        raise ValueError(f"unknown element {symbol!r}") from None


@dataclass(frozen=True)
class Atom:
    """A nucleus with Cartesian coordinates in bohr."""

    number: int
    x: float
    y: float
    z: float

    @property
    def symbol(self) -> str:
        return element_symbol(self.number)


def _data_root(data_dir) -> Path:
    if data_dir is not None:
        return Path(data_dir)
    root = os.environ.get("CHINIUM_PATH")
    if root is None:
        raise InputError("no data directory given and CHINIUM_PATH is not set")
    return Path(root)


class InputDeck:
    """The lines of an input deck, with accessors for each setting."""

    def __init__(self, lines):
        self.lines = list(lines)

    @classmethod
    def from_text(cls, text):
        return cls(text.splitlines())

    @classmethod
    def from_file(cls, path):
        return cls.from_text(Path(path).read_text())

    def _section(self, keyword) -> Optional[int]:
        """Index of the line after the first line holding ``keyword``."""
        for index, line in enumerate(self.lines):
            if line.strip() == keyword:
                return index + 1
        return None

    def _token(self, keyword) -> Optional[str]:
        start = self._section(keyword)
        if start is None:
            return None
        if start >= len(self.lines) or not self.lines[start].split():
            raise InputError(f"section {keyword!r} has no value")
        return self.lines[start].split()[0]

    def _converted(self, keyword, convert, default):
        token = self._token(keyword)
        if token is None:
            return default
        try:
            return convert(token)
        except ValueError:
            raise InputError(f"invalid value {token!r} for {keyword!r}") from None

    def atoms(self) -> list:
        """Atoms of the ``xyz`` section, converted from angstroms to bohr."""
        start = self._section("xyz")
        if start is None:
            return []
        try:
            count = int(self.lines[start].split()[0])
        except (IndexError, ValueError):
            raise InputError("the xyz section must start with the number of atoms") from None
        rows = self.lines[start + 1:start + 1 + count]
        if len(rows) < count:
            raise InputError(f"expected {count} atoms, found {len(rows)}")
        atoms = []
        for row in rows:
            fields = row.split()
            try:
                number = atomic_number(fields[0])
                x, y, z = (float(v) * ANGSTROM_TO_BOHR for v in fields[1:4])
            except (IndexError, ValueError) as error:
                raise InputError(f"malformed atom line {row!r}") from error
            atoms.append(Atom(number, x, y, z))
        return atoms

    def basis_set(self) -> str:
        return self._converted("basis", str, "")

    def electron_count(self) -> int:
        """Total nuclear charge minus the molecular charge."""
        charge = self._converted("charge", int, 0)
        return sum(atom.number for atom in self.atoms()) - charge

    def nprocs(self) -> int:
        return self._converted("nprocs", int, 1)

    def guess(self) -> str:
        return self._converted("guess", str, "sad")

    def grid(self, data_dir=None) -> str:
        """Grid name; a named grid must exist under ``<data_dir>/Grids``."""
        grid = self._converted("grid", str, "")
        if grid and not (_data_root(data_dir) / "Grids" / grid).exists():
            raise InputError(f"grid {grid!r} is missing")
        return grid

    def method(self, data_dir=None) -> str:
        """Method name; a functional must have a ``.df`` file under ``DensityFunctionals``."""
        method = self._converted("method", str, "rhf")
        if method != "rhf":
            path = _data_root(data_dir) / "DensityFunctionals" / f"{method}.df"
            if not path.is_file():
                raise InputError(f"density functional file for {method!r} is missing")
        return method

    def derivative(self) -> int:
        return int(self._converted("derivative", float, 0.0))

    def temperature(self) -> float:
        """Electronic temperature in hartree, NaN when absent."""
        value = self._converted("temperature", float, math.nan)
        if value == 0:
            raise InputError("to use zero temperature, omit the temperature section")
        if not math.isnan(value) and value < 0:
            raise InputError("temperature must be positive")
        return value

    def chemical_potential(self) -> float:
        """Electronic chemical potential in hartree, NaN when absent."""
        return self._converted("chemicalpotential", float, math.nan)