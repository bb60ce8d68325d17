"""Density purification and the two-electron part of the Fock matrix."""

from __future__ import annotations

import math

import numpy as np

_PURIFICATION_MAX_ITERATIONS = 1024
_PURIFICATION_THRESHOLD = 1.0e-15


class PurificationError(ArithmeticError):
    """Raised when McWeeny purification does not make the density idempotent."""


def purify_density(overlap, density) -> np.ndarray:
    """Return the McWeeny-purified density, idempotent in the metric ``overlap``.

    Iterates ``D <- 3 DSD - 2 DSDSD`` until ``|DSDS - DS|`` drops below
    1e-15, for at most 1024 iterations.
    """
    s = np.asarray(overlap, dtype=float)
    d = np.array(density, dtype=float)
    if s.ndim != 2 or s.shape[0] != s.shape[1] or d.shape != s.shape:
        raise ValueError("overlap and density must be square matrices of the same size")
    error = math.inf
    for _ in range(_PURIFICATION_MAX_ITERATIONS):
        if error <= _PURIFICATION_THRESHOLD:
            break
        ds = d @ s
        d = 3.0 * ds @ d - 2.0 * ds @ ds @ d
        ds = d @ s
        error = float(np.linalg.norm(ds @ ds - ds))
    if not error < _PURIFICATION_THRESHOLD:
        raise PurificationError(
            "density matrix purification failed; try another initial guess"
        )
    return d


def ghf_matrix(repulsion, indices, density, kscale) -> np.ndarray:
    """Coulomb and scaled exchange contribution to the Fock matrix.

    ``repulsion`` holds the unique two-electron integrals (ab|cd) and
    ``indices`` an array of shape (5, n) whose rows are the degeneracy and
    the four basis-function indices a, b, c, d.  The result is
    ``2 J[D] - kscale * K[D]``; exchange is skipped when ``kscale <= 0``.
    """
    d = np.asarray(density, dtype=float)
    if d.ndim != 2 or d.shape[0] != d.shape[1]:
        raise ValueError("the density matrix must be square")
    repulsion = np.asarray(repulsion, dtype=float).reshape(-1)
    indices = np.asarray(indices)
    if indices.ndim != 2 or indices.shape != (5, repulsion.size):
        raise ValueError("indices must have shape (5, number of integrals)")

    degs = indices[0].astype(float)
    a, b, c, e = (indices[k].astype(np.intp) for k in range(1, 5))
    values = degs * repulsion
    nbasis = d.shape[0]

    rawj = np.zeros((nbasis, nbasis))
    np.add.at(rawj, (a, b), d[c, e] * values)
    np.add.at(rawj, (c, e), d[a, b] * values)

    rawk = np.zeros((nbasis, nbasis))
    if kscale > 0:
        np.add.at(rawk, (a, c), d[b, e] * values)
        np.add.at(rawk, (b, e), d[a, c] * values)
        np.add.at(rawk, (a, e), d[b, c] * values)
        np.add.at(rawk, (b, c), d[a, e] * values)

    j = 0.5 * (rawj + rawj.T)
    k = 0.25 * (rawk + rawk.T)
    return j - 0.5 * kscale * k