"""The orthogonal group as a Riemannian manifold."""

from __future__ import annotations

import numpy as np
from scipy.linalg import expm, logm

from .manifold import Manifold, UnsupportedOperationError, dot


class Orthogonal(Manifold):
    """Orthogonal matrices with the metric ``0.5 * <X, Y>``."""

    name = "Orthogonal"

    def __init__(self, p):
        super().__init__(p)
        self.p = np.array(p, dtype=float)

    def dimension(self):
        cols = self.p.shape[1]
        return cols * (cols - 1) // 2

    def inner(self, x, y):
        return 0.5 * dot(x, y)

    def inner_function(self):
        def inner(x, y):
            return 0.5 * dot(x, y)

        return inner

    def distance(self, q):
        raise UnsupportedOperationError("geodesic length on the Orthogonal manifold is not available")

    def exponential(self, x):
        return expm(np.asarray(x, dtype=float) @ self.p.T) @ self.p

    def logarithm(self, q):
        return np.real(logm(self.p.T @ np.asarray(q, dtype=float)))

    def tangent_projection(self, a):
        a = np.asarray(a, dtype=float)
        return 0.5 * (a - self.p @ a.T @ self.p)

    def tangent_purification(self, a):
        z = self.p.T @ np.asarray(a, dtype=float)
        return self.p @ (0.5 * (z - z.T))

    def transport_tangent(self, x, y):
        raise UnsupportedOperationError("parallel transport on the Orthogonal manifold is not available")

    def transport_manifold(self, x, q):
        raise UnsupportedOperationError("parallel transport on the Orthogonal manifold is not available")

    def update(self, p, purify):
        self.p = np.array(p, dtype=float)
        if purify:
            u, _, vt = np.linalg.svd(self.p, full_matrices=False)
            self.p = u @ vt

    def compute_gradient(self):
        self.gr = self.tangent_purification(self.tangent_projection(self.ge))

    def compute_hessian(self):
        p = self.p.copy()
        grp = self.ge - self.gr
        pgrpt = p @ grp.T
        he = self._euclidean_hessian()

        def hr(v):
            hev = he(v)
            projected = 0.5 * (hev - p @ hev.T @ p)
            return projected - 0.5 * (pgrpt @ v - p @ v.T @ grp)

        self.hr = hr