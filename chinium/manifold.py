"""Interface shared by the Riemannian manifolds used in orbital optimisation."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Callable, Optional

import numpy as np

MatrixFunction = Callable[[np.ndarray], np.ndarray]


class UnsupportedOperationError(NotImplementedError):
    """Raised when a manifold does not provide a geometric operation."""


def dot(x, y) -> float:
    """Frobenius inner product of two arrays of the same shape."""
    return float(np.sum(np.asarray(x, dtype=float) * np.asarray(y, dtype=float)))


class Manifold(ABC):
    """A point ``p`` on a manifold with Euclidean and Riemannian derivatives.

    ``ge`` is the Euclidean gradient and ``he`` the Euclidean Hessian (a
    callable acting on tangent vectors); ``gr`` and ``hr`` are their
    Riemannian counterparts, filled by :meth:`compute_gradient` and
    :meth:`compute_hessian`.
    """

    name = "Manifold"

    def __init__(self, p):
        self.p = np.array(p, dtype=float)
        self.aux = np.empty((0, 0))
        self.ge = np.zeros_like(self.p)
        self.gr = np.zeros_like(self.p)
        self.he: Optional[MatrixFunction] = None
        self.hr: Optional[MatrixFunction] = None

    def _euclidean_hessian(self) -> MatrixFunction:
        if self.he is None:
            raise ValueError("the Euclidean Hessian 'he' has not been set")
        return self.he

    @abstractmethod
    def dimension(self) -> int:
        """Dimension of the manifold."""

    def inner(self, x, y) -> float:
        """Riemannian metric at the current point."""
        return dot(x, y)

    def inner_function(self) -> Callable[[np.ndarray, np.ndarray], float]:
        """The metric at the current point as a standalone function."""
        return dot

    def distance(self, q) -> float:
        """Geodesic distance from the current point to ``q``."""
        raise UnsupportedOperationError(f"geodesic length on {self.name} is not available")

    @abstractmethod
    def exponential(self, x) -> np.ndarray:
        """Exponential map of tangent vector ``x``."""

    def logarithm(self, q) -> np.ndarray:
        """Logarithm map of point ``q``."""
        raise UnsupportedOperationError(f"logarithm on {self.name} is not available")

    @abstractmethod
    def tangent_projection(self, a) -> np.ndarray:
        """Project an ambient vector onto the tangent space."""

    @abstractmethod
    def tangent_purification(self, a) -> np.ndarray:
        """Remove numerical drift from a tangent vector."""

    def transport_tangent(self, x, y) -> np.ndarray:
        """Parallel-transport ``x`` along the geodesic with direction ``y``."""
        raise UnsupportedOperationError(f"parallel transport on {self.name} is not available")

    def transport_manifold(self, x, q) -> np.ndarray:
        """Parallel-transport ``x`` to point ``q``."""
        raise UnsupportedOperationError(f"parallel transport on {self.name} is not available")

    @abstractmethod
    def update(self, p, purify) -> None:
        """Move to point ``p``, optionally projecting it back onto the manifold."""

    def compute_gradient(self) -> None:
        """Fill ``gr`` from ``ge``."""
        self.gr = self.tangent_projection(self.ge)

    @abstractmethod
    def compute_hessian(self) -> None:
        """Fill ``hr`` from ``he`` and the current gradient."""