"""The probability simplex with the Fisher-Rao metric."""

from __future__ import annotations

import math

import numpy as np

from .manifold import Manifold, UnsupportedOperationError, dot


class Simplex(Manifold):
    """Points with positive entries summing to one."""

    name = "Simplex"

    def __init__(self, p):
        super().__init__(p)
        self.p = np.array(p, dtype=float)

    def _projector(self) -> np.ndarray:
        flat = self.p.reshape(-1)
        n = flat.size
        return np.eye(n) - np.outer(flat, np.ones(n))

    def dimension(self):
        return int(self.p.size) - 1

    def inner(self, x, y):
        return float(np.sum(np.asarray(x, dtype=float) * np.asarray(y, dtype=float) / self.p))

    def inner_function(self):
        p = self.p.copy()

        def inner(x, y):
            return float(np.sum(np.asarray(x, dtype=float) * np.asarray(y, dtype=float) / p))

        return inner

    def distance(self, q):
        return 2.0 * math.acos(float(np.sum(np.sqrt(self.p * np.asarray(q, dtype=float)))))

    def exponential(self, x):
        xp = np.asarray(x, dtype=float) / np.sqrt(self.p)
        norm = float(np.linalg.norm(xp))
        xpn = xp / norm
        part1 = 0.5 * (self.p + xpn * xpn)
        part2 = 0.5 * (self.p - xpn * xpn) * math.cos(norm)
        part3 = xpn * np.sqrt(self.p) * math.sin(norm)
        return part1 + part2 + part3

    def logarithm(self, q):
        q = np.asarray(q, dtype=float)
        overlap = dot(np.sqrt(self.p), np.sqrt(q))
        return self.distance(q) / (1.0 - overlap) * (np.sqrt(self.p * q) - overlap * self.p)

    def tangent_projection(self, a):
        return self._projector() @ np.asarray(a, dtype=float)

    def tangent_purification(self, a):
        a = np.asarray(a, dtype=float)
        return a - a.mean()

    def transport_tangent(self, x, y):
        raise UnsupportedOperationError("parallel transport on the Simplex manifold is not available")

    def transport_manifold(self, x, q):
        raise UnsupportedOperationError("parallel transport on the Simplex manifold is not available")

    def update(self, p, purify):
        self.p = np.array(p, dtype=float)
        if purify:
            self.p = self.p / np.sum(np.abs(self.p))

    def compute_gradient(self):
        self.gr = self.tangent_projection(self.p * self.ge)

    def compute_hessian(self):
        proj = self._projector()
        p = self.p.reshape(-1)
        ge = self.ge.reshape(-1)
        gr = np.asarray(self.gr, dtype=float).reshape(-1)
        m = proj @ np.diag(p)
        n = proj @ np.diag(ge - np.sum(ge * p) - 0.5 * gr / p)
        he = self._euclidean_hessian()

        def hr(v):
            return m @ he(v) + n @ v

        self.hr = hr