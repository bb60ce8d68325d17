"""Electron density on integration grids and exchange-correlation matrices.

Atomic-orbital values are stored as arrays of shape ``(nbasis, ngrids)``.
First derivatives have shape ``(3, nbasis, ngrids)`` in the order x, y, z.
Second derivatives for the density skeleton have shape ``(6, nbasis, ngrids)``
in the order xx, yy, zz, xy, xz, yz.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

import numpy as np

# Position of each Cartesian pair in the (xx, yy, zz, xy, xz, yz) layout.
_HESSIAN_INDEX = ((0, 3, 4), (3, 1, 5), (4, 5, 2))


@dataclass
class GridDensity:
    """Density and its derivatives at every grid point.

    ``ds`` is the density, ``d1s`` its gradient (3, ngrids), ``cgs`` the
    squared gradient norm, ``d2s`` the Laplacian and ``ts`` the kinetic
    energy density.  Quantities that were not requested are ``None``.
    """

    ds: np.ndarray
    d1s: Optional[np.ndarray] = None
    cgs: Optional[np.ndarray] = None
    d2s: Optional[np.ndarray] = None
    ts: Optional[np.ndarray] = None


@dataclass
class DensitySkeleton:
    """Skeleton derivatives of the grid density with respect to one atom.

    ``dns[b]`` is the density derivative with respect to nuclear coordinate
    ``b``; ``dn1s[a, b]`` is the derivative of gradient component ``a`` with
    respect to nuclear coordinate ``b``.  ``dn1s`` is ``None`` when no second
    AO derivatives were supplied.
    """

    dns: np.ndarray
    dn1s: Optional[np.ndarray] = None


def _array(values) -> np.ndarray:
    return np.asarray(values, dtype=float)


def _lower_symmetric(density_matrix) -> np.ndarray:
    """Symmetric matrix built from the lower triangle only."""
    d = _array(density_matrix)
    if d.ndim != 2 or d.shape[0] != d.shape[1]:
        raise ValueError("the density matrix must be square")
    return np.tril(d) + np.tril(d, -1).T


def _check_aos(aos, nbasis: int) -> np.ndarray:
    aos = _array(aos)
    if aos.ndim != 2 or aos.shape[0] != nbasis:
        raise ValueError("AO values must have shape (nbasis, ngrids)")
    return aos


def density_on_grid(density_matrix, aos, ao1s=None, ao2ls=None) -> GridDensity:
    """Evaluate the density (and gradient, Laplacian, kinetic density) on a grid.

    Only the lower triangle of ``density_matrix`` is read; it is taken as the
    lower half of a symmetric matrix.
    """
    d = _lower_symmetric(density_matrix)
    aos = _check_aos(aos, d.shape[0])
    if ao2ls is not None and ao1s is None:
        raise ValueError("Laplacians of AOs require their first derivatives")

    ds = np.einsum("ij,ig,jg->g", d, aos, aos)
    result = GridDensity(ds=ds)
    if ao1s is None:
        return result

    ao1s = _array(ao1s)
    d1s = 2.0 * np.einsum("ij,cig,jg->cg", d, ao1s, aos)
    result.d1s = d1s
    result.cgs = np.sum(d1s * d1s, axis=0)

    if ao2ls is not None:
        ao2ls = _array(ao2ls)
        ts = 0.5 * np.einsum("ij,cig,cjg->g", d, ao1s, ao1s)
        d2s = 2.0 * np.einsum("ij,ig,jg->g", d, aos, ao2ls) + 4.0 * ts
        result.ts = ts
        result.d2s = d2s
    return result


def density_skeleton(density_matrix, atom, bf2atom, aos, ao1s, ao2s=None) -> DensitySkeleton:
    """Skeleton derivatives of the grid density with respect to the nuclei of ``atom``.

    ``bf2atom`` gives the atom each basis function is centred on.
    """
    d = _array(density_matrix)
    if d.ndim != 2 or d.shape[0] != d.shape[1]:
        raise ValueError("the density matrix must be square")
    aos = _check_aos(aos, d.shape[0])
    ao1s = _array(ao1s)
    mask = (np.asarray(bf2atom) == atom).astype(float)
    if mask.shape != (d.shape[0],):
        raise ValueError("bf2atom must give one atom per basis function")

    dns = -(
        np.einsum("ij,i,cig,jg->cg", d, mask, ao1s, aos)
        + np.einsum("ij,j,ig,cjg->cg", d, mask, aos, ao1s)
    )
    if ao2s is None:
        return DensitySkeleton(dns=dns)

    ao2s = _array(ao2s)
    hessian = np.stack([np.stack([ao2s[k] for k in row]) for row in _HESSIAN_INDEX])
    dn1s = -2.0 * (
        np.einsum("ij,i,abig,jg->abg", d, mask, hessian, aos)
        + np.einsum("ij,j,aig,bjg->abg", d, mask, ao1s, ao1s)
    )
    return DensitySkeleton(dns=dns, dn1s=dn1s)


def grid_sum(values, weights) -> float:
    """Quadrature sum of ``values`` with ``weights``."""
    return float(np.sum(_array(values) * _array(weights)))


def _gradient_pair(vector, weight, ao1s, aos) -> np.ndarray:
    """Matrix of sum_g weight * vector . (grad ao_i ao_j + ao_i grad ao_j)."""
    half = (weight * np.einsum("cg,cig->ig", vector, ao1s)) @ aos.T
    return half + half.T


def fxc_matrix(weights, aos, vrs, ao1s=None, d1s=None, vss=None,
               ao2ls=None, vls=None, vts=None) -> np.ndarray:
    """Exchange-correlation potential matrix for LDA, GGA or meta-GGA input."""
    w = _array(weights)
    aos = _array(aos)
    if ao2ls is not None and ao1s is None:
        raise ValueError("meta-GGA terms require first AO derivatives")

    fxc = (aos * (w * _array(vrs))) @ aos.T
    if ao1s is None:
        return fxc
    if d1s is None or vss is None:
        raise ValueError("GGA terms require the density gradient and vss")
    ao1s = _array(ao1s)
    fxc += _gradient_pair(_array(d1s), 2.0 * w * _array(vss), ao1s, aos)

    if ao2ls is not None:
        if vls is None or vts is None:
            raise ValueError("meta-GGA terms require vls and vts")
        vls = _array(vls)
        factor = w * (0.5 * _array(vts) + 2.0 * vls)
        fxc += np.einsum("cig,cjg->ij", ao1s * factor, ao1s)
        half = (aos * (w * vls)) @ _array(ao2ls).T
        fxc += half + half.T
    return fxc


def fxc_u_matrix(weights, aos, vrrs, dns, ao1s=None, d1s=None, vss=None,
                 vrss=None, vsss=None, dn1s=None) -> np.ndarray:
    """Response of the exchange-correlation matrix to a density perturbation.

    ``dns`` and ``dn1s`` are the perturbed density and density gradient;
    without ``dn1s`` only the LDA kernel term is included.
    """
    w = _array(weights)
    aos = _array(aos)
    vrrs = _array(vrrs)
    dns = _array(dns)
    if dn1s is None:
        return (aos * (w * vrrs * dns)) @ aos.T

    if ao1s is None or d1s is None or vss is None or vrss is None or vsss is None:
        raise ValueError("GGA response requires ao1s, d1s, vss, vrss and vsss")
    ao1s = _array(ao1s)
    d1s = _array(d1s)
    dn1s = _array(dn1s)
    vrss = _array(vrss)
    cross = np.sum(d1s * dn1s, axis=0)

    fxc = (aos * (w * (vrrs * dns + 2.0 * vrss * cross))) @ aos.T
    fxc += _gradient_pair(d1s, 2.0 * w * (vrss * dns + 2.0 * _array(vsss) * cross), ao1s, aos)
    fxc += _gradient_pair(dn1s, 2.0 * w * _array(vss), ao1s, aos)
    return fxc