"""Grassmann manifolds: projector form and local (Stiefel-quotient) form."""

from __future__ import annotations

import numpy as np
from scipy.linalg import expm, logm

from .manifold import Manifold, UnsupportedOperationError, dot


def lowdin_orthogonalization(p):
    """Symmetrically orthonormalise the columns of ``p``."""
    p = np.asarray(p, dtype=float)
    values, vectors = np.linalg.eigh(p.T @ p)
    x = vectors @ np.diag(1.0 / np.sqrt(values)) @ vectors.T
    return p @ x


def orthogonal_complement(p):
    """Orthonormal basis of the complement of the column space of ``p``."""
    p = np.asarray(p, dtype=float)
    _, vectors = np.linalg.eigh(p @ p.T)
    return vectors[:, : p.shape[0] - p.shape[1]]


class Grassmann(Manifold):
    """Grassmann manifold represented by rank-r orthogonal projectors."""

    name = "Grassmann"

    def __init__(self, p):
        super().__init__(p)
        values, vectors = np.linalg.eigh(self.p)
        rank = int(np.count_nonzero(values > 0.5))
        self.aux = vectors[:, vectors.shape[1] - rank:]

    def dimension(self):
        rank = self.aux.shape[1]
        return rank * (self.p.shape[0] - rank)

    def inner(self, x, y):
        return dot(x, y)

    def inner_function(self):
        return dot

    def distance(self, q):
        raise UnsupportedOperationError("geodesic length on the Grassmann manifold is not available")

    def exponential(self, x):
        x = np.asarray(x, dtype=float)
        xp = x @ self.p - self.p @ x
        return expm(xp) @ self.p @ expm(-xp)

    def logarithm(self, q):
        q = np.asarray(q, dtype=float)
        eye = np.eye(*q.shape)
        omega = 0.5 * np.real(logm((eye - 2 * q) @ (eye - 2 * self.p)))
        return omega @ self.p - self.p @ omega

    def tangent_projection(self, a):
        a = np.asarray(a, dtype=float)
        ad = self.p @ a - a @ self.p
        return self.p @ ad - ad @ self.p

    def tangent_purification(self, a):
        a = np.asarray(a, dtype=float)
        sym = 0.5 * (a + a.T)
        pure = sym - self.p @ sym @ self.p
        return 0.5 * (pure + pure.T)

    def transport_tangent(self, x, y):
        y = np.asarray(y, dtype=float)
        dp = y @ self.p - self.p @ y
        return expm(dp) @ np.asarray(x, dtype=float) @ expm(-dp)

    def transport_manifold(self, x, q):
        return self.transport_tangent(x, self.logarithm(q))

    def update(self, p, purify):
        self.p = np.array(p, dtype=float)
        _, vectors = np.linalg.eigh(self.p)
        ncols = self.aux.shape[1]
        self.aux = vectors[:, vectors.shape[1] - ncols:]
        if purify:
            self.p = self.aux @ self.aux.T

    def compute_gradient(self):
        self.gr = self.tangent_projection(self.ge)

    def compute_hessian(self):
        p = self.p.copy()
        ge = self.ge.copy()
        he = self._euclidean_hessian()

        def hr(v):
            h = he(v)
            total = (p @ h - h @ p) - (ge @ v - v @ ge)
            return p @ total - total @ p

        self.hr = hr


class GrassmannQLocal(Manifold):
    """Grassmann manifold as orthonormal frames, tangents in complement coordinates."""

    name = "Grassmann (Quotient) manifold with complement mapping"

    def __init__(self, p):
        super().__init__(p)
        rows, cols = self.p.shape
        self.gr = np.zeros((rows - cols, cols))
        self.p = lowdin_orthogonalization(self.p)
        self.aux = orthogonal_complement(self.p)

    def dimension(self):
        return int(self.gr.size)

    def inner(self, x, y):
        return dot(x, y)

    def inner_function(self):
        return dot

    def distance(self, q):
        return float(np.linalg.norm(self.logarithm(q)))

    def exponential(self, x):
        u, s, vt = np.linalg.svd(self.aux @ np.asarray(x, dtype=float), full_matrices=False)
        z = (self.p @ vt.T @ np.diag(np.cos(s)) + u @ np.diag(np.sin(s))) @ vt
        q, _ = np.linalg.qr(z)
        return q

    def logarithm(self, q):
        raise UnsupportedOperationError("logarithm on the local Grassmann manifold is not available")

    def tangent_projection(self, a):
        return self.aux.T @ np.asarray(a, dtype=float)

    def tangent_purification(self, a):
        return np.asarray(a, dtype=float)

    def transport_tangent(self, x, y):
        raise UnsupportedOperationError("parallel transport on the local Grassmann manifold is not available")

    def transport_manifold(self, x, q):
        # Local coordinates need no transport.
        return np.asarray(x, dtype=float)

    def update(self, p, purify):
        p = np.array(p, dtype=float)
        self.p = lowdin_orthogonalization(p) if purify else p
        self.aux = orthogonal_complement(self.p)

    def compute_gradient(self):
        self.gr = self.tangent_projection(self.ge)

    def compute_hessian(self):
        p = self.p.copy()
        aux = self.aux.copy()
        com = np.eye(p.shape[0]) - p @ p.T
        ptge = p.T @ self.ge
        he = self._euclidean_hessian()

        def hr(v):
            x = he(v) - v @ ptge
            return aux.T @ (com @ x)

        self.hr = hr