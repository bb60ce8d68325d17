"""Values and Cartesian derivatives of contracted spherical Gaussian AOs on a grid.

An AO is a contracted radial Gaussian ``sum_k c_k exp(-a_k r**2)`` times a
real solid harmonic. Results are laid out as ``(nbasis, ngrids)``, with
derivative components first: x, y, z for gradients and xx, yy, zz, xy, xz,
yz for second derivatives.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional, Sequence

import numpy as np

from .harmonics import MAX_ANGULAR_MOMENTUM, solid_harmonics

_SECOND_AXES = ((0, 0), (1, 1), (2, 2), (0, 1), (0, 2), (1, 2))


@dataclass(frozen=True)
class Shell:
    """A contracted shell of angular momentum ``l`` centred at ``center``.

    ``coefficients`` multiply the primitives directly, so they should already
    include any normalisation.
    """

    l: int
    center: tuple
    exponents: tuple
    coefficients: tuple = field(default=())

    def __post_init__(self):
        if not 0 <= int(self.l) <= MAX_ANGULAR_MOMENTUM:
            raise ValueError(f"angular momentum {self.l} is not supported")
        center = tuple(float(v) for v in self.center)
        if len(center) != 3:
            raise ValueError("a shell centre needs three coordinates")
        exponents = tuple(float(v) for v in self.exponents)
        coefficients = tuple(float(v) for v in self.coefficients)
        if not exponents:
            raise ValueError("a shell needs at least one primitive")
        if len(exponents) != len(coefficients):
            raise ValueError("exponents and coefficients must have the same length")
        object.__setattr__(self, "l", int(self.l))
        object.__setattr__(self, "center", center)
        object.__setattr__(self, "exponents", exponents)
        object.__setattr__(self, "coefficients", coefficients)

    @property
    def size(self) -> int:
        """Number of basis functions in the shell."""
        return 2 * self.l + 1


@dataclass
class AoValues:
    """AO values on a grid and the derivatives that were requested."""

    values: np.ndarray
    gradient: Optional[np.ndarray] = None
    hessian: Optional[np.ndarray] = None

    @property
    def laplacian(self) -> Optional[np.ndarray]:
        if self.hessian is None:
            return None
        return self.hessian[0] + self.hessian[1] + self.hessian[2]


def basis_size(shells: Sequence[Shell]) -> int:
    """Total number of basis functions in ``shells``."""
    return sum(shell.size for shell in shells)


def ao_values(shells, xs, ys, zs, order=0) -> AoValues:
    """Evaluate all AOs of ``shells`` at the grid points, with derivatives up to ``order``."""
    if order not in (0, 1, 2):
        raise ValueError("order must be 0, 1 or 2")
    xs, ys, zs = (np.asarray(v, dtype=float).reshape(-1) for v in (xs, ys, zs))
    if not xs.shape == ys.shape == zs.shape:
        raise ValueError("grid coordinate arrays must have the same length")
    shells = list(shells)
    ngrids = xs.size
    nbasis = basis_size(shells)

    values = np.zeros((nbasis, ngrids))
    gradient = np.zeros((3, nbasis, ngrids)) if order >= 1 else None
    hessian = np.zeros((6, nbasis, ngrids)) if order >= 2 else None

    start = 0
    for shell in shells:
        block = slice(start, start + shell.size)
        start += shell.size
        cx, cy, cz = shell.center
        d = np.stack([xs - cx, ys - cy, zs - cz])
        r2 = np.sum(d * d, axis=0)
        alphas = np.array(shell.exponents)[:, None]
        prims = np.array(shell.coefficients)[:, None] * np.exp(-alphas * r2[None, :])
        radial = prims.sum(axis=0)

        harmonics = solid_harmonics(shell.l, d[0], d[1], d[2], order)
        q = harmonics.values
        values[block] = radial * q
        if order == 0:
            continue

        tmp2 = (alphas * prims).sum(axis=0)
        radial_grad = -2.0 * d * tmp2
        gradient[:, block] = radial_grad[:, None, :] * q[None] + radial * harmonics.gradient
        if order == 1:
            continue

        tmp3 = (alphas * alphas * prims).sum(axis=0)
        for k, (a, b) in enumerate(_SECOND_AXES):
            radial_hess = 4.0 * tmp3 * d[a] * d[b]
            if a == b:
                radial_hess = radial_hess - 2.0 * tmp2
            hessian[k, block] = (
                radial_hess * q
                + radial_grad[a] * harmonics.gradient[b]
                + radial_grad[b] * harmonics.gradient[a]
                + radial * harmonics.hessian[k]
            )

    return AoValues(values=values, gradient=gradient, hessian=hessian)