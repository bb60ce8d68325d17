"""Real regular solid harmonics and their Cartesian derivatives.

The harmonics use the Racah normalisation of the integral library's
spherical shells, so that the sum of squares over one shell is ``r**(2l)``.
Functions are ordered by increasing ``m`` from ``-l`` to ``l``; for ``l = 1``
that is ``y, z, x``. Shells up to ``l = 6`` (I functions) are supported.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from functools import lru_cache
from numbers import Real
from typing import Optional

import numpy as np

MAX_ANGULAR_MOMENTUM = 6

# Order of the second derivatives: xx, yy, zz, xy, xz, yz.
_SECOND_AXES = ((0, 0), (1, 1), (2, 2), (0, 1), (0, 2), (1, 2))


class _Polynomial:
    """A polynomial in x, y, z stored as {(a, b, c): coefficient}."""

    __slots__ = ("terms",)

    def __init__(self, terms=None):
        self.terms = {k: v for k, v in (terms or {}).items() if v != 0}

    @classmethod
    def _coerce(cls, value) -> "_Polynomial":
        if isinstance(value, _Polynomial):
            return value
        if isinstance(value, Real):
            return cls({(0, 0, 0): float(value)})
        return NotImplemented

    def __add__(self, other):
        other = self._coerce(other)
        if other is NotImplemented:
            return other
        terms = dict(self.terms)
        for key, value in other.terms.items():
            terms[key] = terms.get(key, 0.0) + value
        return _Polynomial(terms)

    __radd__ = __add__

    def __neg__(self):
        return _Polynomial({k: -v for k, v in self.terms.items()})

    def __sub__(self, other):
        other = self._coerce(other)
        if other is NotImplemented:
            return other
        return self + (-other)

    def __rsub__(self, other):
        return (-self) + other

    def __mul__(self, other):
        if isinstance(other, Real):
            return _Polynomial({k: v * float(other) for k, v in self.terms.items()})
        if not isinstance(other, _Polynomial):
            return NotImplemented
        terms: dict = {}
        for (a1, b1, c1), v1 in self.terms.items():
            for (a2, b2, c2), v2 in other.terms.items():
                key = (a1 + a2, b1 + b2, c1 + c2)
                terms[key] = terms.get(key, 0.0) + v1 * v2
        return _Polynomial(terms)

    __rmul__ = __mul__

    def __truediv__(self, other):
        if not isinstance(other, Real):
            return NotImplemented
        return self * (1.0 / float(other))

    def __pow__(self, exponent: int):
        result = _Polynomial({(0, 0, 0): 1.0})
        for _ in range(exponent):
            result = result * self
        return result

    def derivative(self, axis: int) -> "_Polynomial":
        terms: dict = {}
        for exponents, value in self.terms.items():
            power = exponents[axis]
            if power == 0:
                continue
            key = tuple(e - 1 if i == axis else e for i, e in enumerate(exponents))
            terms[key] = terms.get(key, 0.0) + value * power
        return _Polynomial(terms)

    def evaluate(self, x, y, z) -> np.ndarray:
        total = np.zeros_like(x)
        for (a, b, c), value in self.terms.items():
            total = total + value * x**a * y**b * z**c
        return total


X = _Polynomial({(1, 0, 0): 1.0})
Y = _Polynomial({(0, 1, 0): 1.0})
Z = _Polynomial({(0, 0, 1): 1.0})


def _shell(l: int) -> tuple:
    x, y, z = X, Y, Z
    r2 = x * x + y * y + z * z
    sq = math.sqrt
    if l == 0:
        return (_Polynomial({(0, 0, 0): 1.0}),)
    if l == 1:
        return (y, z, x)
    if l == 2:
        return (
            x * y * sq(3),
            y * z * sq(3),
            (3 * z * z - r2) / 2,
            x * z * sq(3),
            (x * x - y * y) * sq(3) / 2,
        )
    if l == 3:
        return (
            y * (3 * x**2 - y**2) * sq(10) / 4,
            x * y * z * sq(15),
            y * (5 * z**2 - r2) * sq(6) / 4,
            (5 * z**3 - 3 * z * r2) / 2,
            x * (5 * z**2 - r2) * sq(6) / 4,
            (x**2 - y**2) * z * sq(15) / 2,
            x * (x**2 - 3 * y**2) * sq(10) / 4,
        )
    if l == 4:
        return (
            x * y * (x**2 - y**2) * sq(35) / 2,
            y * (3 * x**2 - y**2) * z * sq(70) / 4,
            x * y * (7 * z**2 - r2) * sq(5) / 2,
            y * (7 * z**3 - 3 * z * r2) * sq(10) / 4,
            (35 * z**4 - 30 * z**2 * r2 + 3 * r2 * r2) / 8,
            x * (7 * z**3 - 3 * z * r2) * sq(10) / 4,
            (x**2 - y**2) * (7 * z**2 - r2) * sq(5) / 4,
            x * (x**2 - 3 * y**2) * z * sq(70) / 4,
            (x**2 * (x**2 - 3 * y**2) - y**2 * (3 * x**2 - y**2)) * sq(35) / 8,
        )
    if l == 5:
        return (
            y * (5 * x**4 - 10 * x**2 * y**2 + y**4) * 3 * sq(14) / 16,
            x * y * z * (x**2 - y**2) * 3 * sq(35) / 2,
            y * (y**4 - 2 * x**2 * y**2 - 3 * x**4 - 8 * y**2 * z**2 + 24 * x**2 * z**2) * sq(70) / 16,
            x * y * z * (2 * z**2 - x**2 - y**2) * sq(105) / 2,
            y * (x**4 + 2 * x**2 * y**2 + y**4 - 12 * x**2 * z**2 - 12 * y**2 * z**2 + 8 * z**4) * sq(15) / 8,
            z * (15 * x**4 + 15 * y**4 + 8 * z**4 + 30 * x**2 * y**2 - 40 * x**2 * z**2 - 40 * y**2 * z**2) / 8,
            x * (x**4 + 2 * x**2 * y**2 + y**4 - 12 * x**2 * z**2 - 12 * y**2 * z**2 + 8 * z**4) * sq(15) / 8,
            z * (2 * x**2 * z**2 - 2 * y**2 * z**2 - x**4 + y**4) * sq(105) / 4,
            x * (2 * x**2 * y**2 + 8 * x**2 * z**2 - 24 * y**2 * z**2 - x**4 + 3 * y**4) * sq(70) / 16,
            z * (x**4 - 6 * x**2 * y**2 + y**4) * 3 * sq(35) / 8,
            x * (x**4 - 10 * x**2 * y**2 + 5 * y**4) * 3 * sq(14) / 16,
        )
    if l == 6:
        return (
            x * y * (3 * x**4 - 10 * x**2 * y**2 + 3 * y**4) * sq(462) / 16,
            y * z * (5 * x**4 - 10 * x**2 * y**2 + y**4) * 3 * sq(154) / 16,
            x * y * (-(x**4) + y**4 + 10 * x**2 * z**2 - 10 * y**2 * z**2) * 3 * sq(7) / 4,
            y * z * (-9 * x**4 + 3 * y**4 - 6 * x**2 * y**2 + 24 * x**2 * z**2 - 8 * y**2 * z**2) * sq(210) / 16,
            x * y * (x**4 + y**4 + 16 * z**4 + 2 * x**2 * y**2 - 16 * x**2 * z**2 - 16 * y**2 * z**2) * sq(210) / 16,
            y * z * (5 * x**4 + 5 * y**4 + 8 * z**4 + 10 * x**2 * y**2 - 20 * x**2 * z**2 - 20 * y**2 * z**2) * sq(21) / 8,
            (16 * z**6 - 5 * x**6 - 5 * y**6 - 15 * x**4 * y**2 + 90 * x**4 * z**2 + 90 * y**4 * z**2
             - 120 * y**2 * z**4 - 15 * x**2 * y**4 - 120 * x**2 * z**4 + 180 * x**2 * y**2 * z**2) / 16,
            x * z * (5 * x**4 + 5 * y**4 + 8 * z**4 + 10 * x**2 * y**2 - 20 * x**2 * z**2 - 20 * y**2 * z**2) * sq(21) / 8,
            (x**6 - y**6 + x**4 * y**2 - x**2 * y**4 - 16 * x**4 * z**2 + 16 * x**2 * z**4
             + 16 * y**4 * z**2 - 16 * y**2 * z**4) * sq(210) / 32,
            x * z * (-3 * x**4 + 6 * x**2 * y**2 + 8 * x**2 * z**2 - 24 * y**2 * z**2 + 9 * y**4) * sq(210) / 16,
            (-(x**6) + 5 * x**4 * y**2 + 10 * x**4 * z**2 + 5 * x**2 * y**4 + 10 * y**4 * z**2 - y**6
             - 60 * x**2 * y**2 * z**2) * 3 * sq(7) / 16,
            x * z * (x**4 - 10 * x**2 * y**2 + 5 * y**4) * 3 * sq(154) / 16,
            (x**6 - 15 * x**4 * y**2 + 15 * x**2 * y**4 - y**6) * sq(462) / 32,
        )
    raise ValueError(f"angular momentum {l} is not supported")


@lru_cache(maxsize=None)
def _shell_with_derivatives(l: int) -> tuple:
    values = _shell(l)
    first = tuple(tuple(q.derivative(axis) for q in values) for axis in range(3))
    second = tuple(
        tuple(q.derivative(a).derivative(b) for q in values) for a, b in _SECOND_AXES
    )
    return values, first, second


@dataclass
class HarmonicTerms:
    """Solid harmonics of one shell at a set of points.

    ``values`` has shape ``(2l+1, *points)``; ``gradient`` has shape
    ``(3, 2l+1, *points)`` (x, y, z) and ``hessian`` ``(6, 2l+1, *points)``
    (xx, yy, zz, xy, xz, yz). Derivatives not requested are ``None``.
    """

    values: np.ndarray
    gradient: Optional[np.ndarray] = None
    hessian: Optional[np.ndarray] = None

    @property
    def laplacian(self) -> Optional[np.ndarray]:
        if self.hessian is None:
            return None
        return self.hessian[0] + self.hessian[1] + self.hessian[2]


def solid_harmonics(l, x, y, z, order=0) -> HarmonicTerms:
    """Evaluate the shell of angular momentum ``l`` and derivatives up to ``order``.

    ``x``, ``y`` and ``z`` are coordinates relative to the shell centre.
    """
    l = int(l)
    if not 0 <= l <= MAX_ANGULAR_MOMENTUM:
        raise ValueError(f"angular momentum {l} is not supported")
    if order not in (0, 1, 2):
        raise ValueError("order must be 0, 1 or 2")
    x, y, z = np.broadcast_arrays(*(np.asarray(v, dtype=float) for v in (x, y, z)))
    values, first, second = _shell_with_derivatives(l)

    def stack(polys):
        return np.stack([q.evaluate(x, y, z) for q in polys])

    result = HarmonicTerms(values=stack(values))
    if order >= 1:
        result.gradient = np.stack([stack(row) for row in first])
    if order >= 2:
        result.hessian = np.stack([stack(row) for row in second])
    return result