"""Building blocks of molecular integration grids.

Becke's fuzzy-cell partition, radial quadratures and the per-element
grid description files, plus evenly spaced box grids.
"""

from __future__ import annotations

from itertools import permutations
from pathlib import Path

import numpy as np

from .gateway import InputError


def becke_switch(point, center_a, center_b):
    """Becke's cell function s(mu) for ``point`` between two centres.

    It is 1 at ``center_a``, 0 at ``center_b`` and 0.5 halfway, using three
    iterations of ``p(mu) = 1.5 mu - 0.5 mu**3``.
    """
    point = np.asarray(point, dtype=float)
    a = np.asarray(center_a, dtype=float)
    b = np.asarray(center_b, dtype=float)
    r12 = float(np.linalg.norm(a - b))
    if r12 == 0.0:
        raise ValueError("the two centres coincide")
    r01 = np.linalg.norm(point - a, axis=-1)
    r02 = np.linalg.norm(point - b, axis=-1)
    p = (r01 - r02) / r12
    for _ in range(3):
        p = 1.5 * p - 0.5 * p**3
    return 0.5 * (1.0 - p)


def becke_partition(point, atom_index, centers) -> float:
    """Normalised Becke weight of ``point`` for the atom ``atom_index``."""
    centers = np.asarray(centers, dtype=float).reshape(-1, 3)
    count = centers.shape[0]
    if not 0 <= atom_index < count:
        raise IndexError(f"atom index {atom_index} out of range for {count} centres")
    cells = np.ones(count)
    for j, k in permutations(range(count), 2):
        cells[j] *= becke_switch(point, centers[j], centers[k])
    return float(cells[atom_index] / cells.sum())


def de2_radial(index, a, xi_start, xi_end, nshells):
    """Radius and radial weight of shell ``index`` for the double-exponential rule.

    With ``xi = h*index + xi_start`` and ``h = (xi_end - xi_start)/(nshells - 1)``
    the radius is ``exp(a*xi - exp(-xi))``.
    """
    if nshells < 2:
        raise ValueError("the double-exponential rule needs at least two shells")
    h = (xi_end - xi_start) / (nshells - 1)
    xi = h * np.asarray(index, dtype=float) + xi_start
    radius = np.exp(a * xi - np.exp(-xi))
    weight = np.exp(3 * a * xi - 3 * np.exp(-xi)) * (a + np.exp(-xi)) * h
    return radius, weight


def em_radial(index, radius, nshells):
    """Radius and radial weight of shell ``index`` for the Euler-Maclaurin rule."""
    if nshells < 1:
        raise ValueError("the Euler-Maclaurin rule needs at least one shell")
    ii = np.asarray(index, dtype=float) + 1
    total = nshells + 1
    r = radius * (ii / (total - ii)) ** 2
    weight = 2 * radius**3 * total * ii**5 / (total - ii) ** 7
    return r, weight


def _element_grid_points(path: Path) -> int:
    if not path.is_file():
        raise InputError(f"missing element grid file {path}")
    lines = path.read_text().splitlines()
    try:
        ngroups = int(lines[0].split()[0])
        groups = lines[2:2 + ngroups]
        if len(groups) < ngroups:
            raise InputError(f"grid file {path} lists fewer groups than announced")
        total = 0
        for line in groups:
            first, second = (int(v) for v in line.split()[:2])
            total += first * second
    except (IndexError, ValueError):
        raise InputError(f"malformed grid file {path}") from None
    return total


def spherical_grid_size(grid_dir, symbols) -> int:
    """Total number of points of the atom-centred grid for the given elements.

    Each element has a file ``<grid_dir>/<symbol>.grid`` whose first line
    holds the number of groups, whose second line describes the radial rule
    and whose following lines give the shell and point counts of each group.
    """
    grid_dir = Path(grid_dir)
    cache: dict = {}
    total = 0
    for symbol in symbols:
        if symbol not in cache:
            cache[symbol] = _element_grid_points(grid_dir / f"{symbol}.grid")
        total += cache[symbol]
    return total


def uniform_box_grid(centers, overhead, spacing):
    """Evenly spaced points in the box around ``centers`` enlarged by ``overhead``.

    Returns the x, y and z coordinates, with z varying fastest.
    """
    if spacing <= 0:
        raise ValueError("spacing must be positive")
    centers = np.asarray(centers, dtype=float).reshape(-1, 3)
    if centers.shape[0] == 0:
        raise ValueError("at least one centre is required")
    lower = centers.min(axis=0) - overhead
    upper = centers.max(axis=0) + overhead
    counts = [max(int(length / spacing), 0) for length in upper - lower]
    axes = [lo + np.arange(n) * spacing for lo, n in zip(lower, counts)]
    xs, ys, zs = np.meshgrid(*axes, indexing="ij")
    return xs.ravel(), ys.ravel(), zs.ravel()