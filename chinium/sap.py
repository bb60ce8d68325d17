"""Superposition-of-atomic-potentials initial guess."""

from __future__ import annotations

import os
from pathlib import Path

import numpy as np

from .gateway import InputError
from .grid_integrals import fxc_matrix

SAP_TABLE_LINES = 751
_RADIUS_OFFSET = 1.0e-12


def _sap_directory(data_dir) -> Path:
    if data_dir is not None:
        return Path(data_dir) / "SAP"
    root = os.environ.get("CHINIUM_PATH")
    if root is None:
        raise InputError("no data directory given and CHINIUM_PATH is not set")
    return Path(root) / "SAP"


def read_sap_table(path):
    """Read radii and effective charges from a tabulated atomic potential.

    Each line holds a radius and a charge; at most the first 751 lines are used.
    """
    path = Path(path)
    if not path.is_file():
        raise InputError(f"SAP file {path} is missing")
    radii, charges = [], []
    with path.open() as handle:
        for number, line in enumerate(handle):
            if number >= SAP_TABLE_LINES:
                break
            fields = line.split()
            if len(fields) < 2:
                continue
            try:
                radii.append(float(fields[0]))
                charges.append(float(fields[1]))
            except ValueError:
                raise InputError(f"malformed line {line.strip()!r} in {path}") from None
    if not radii:
        raise InputError(f"SAP file {path} holds no data")
    return np.array(radii), np.array(charges)


def sap_potential(atoms, xs, ys, zs, data_dir=None) -> np.ndarray:
    """Sum of tabulated atomic potentials at the grid points.

    For each atom the charge at the tabulated radius nearest to the point's
    distance (the last one on ties) is divided by that distance.
    """
    points = np.stack([np.asarray(v, dtype=float) for v in (xs, ys, zs)])
    potential = np.zeros(points.shape[1])
    directory = _sap_directory(data_dir)
    tables = {}
    for atom in atoms:
        symbol = atom.symbol
        if symbol not in tables:
            tables[symbol] = read_sap_table(directory / f"v_{symbol}.dat")
        radii, charges = tables[symbol]
        centre = np.array([atom.x, atom.y, atom.z])[:, None]
        r = np.sqrt(np.sum((points - centre) ** 2, axis=0)) + _RADIUS_OFFSET
        diffs = np.abs(radii[None, :] - r[:, None])
        nearest = radii.size - 1 - np.argmin(diffs[:, ::-1], axis=1)
        potential += charges[nearest] / r
    return potential


def sap_matrix(atoms, xs, ys, zs, weights, aos, data_dir=None) -> np.ndarray:
    """Matrix of the superposed atomic potential in the AO basis."""
    potential = sap_potential(atoms, xs, ys, zs, data_dir)
    return fxc_matrix(weights, aos, potential)