"""Small dense linear-algebra helpers."""

from __future__ import annotations

import numpy as np


def gram_schmidt(target):
    """Orthonormalise the columns of ``target`` in order (classical Gram-Schmidt).

    Each column is projected against the already orthonormalised columns
    using the original column, then normalised.
    """
    target = np.asarray(target, dtype=float)
    if target.ndim != 2:
        raise ValueError("gram_schmidt expects a two-dimensional array")
    basis: list[np.ndarray] = []
    for column in target.T:
        vector = column.copy()
        for q in basis:
            vector -= (column @ q) * q / (q @ q)
        basis.append(vector / np.linalg.norm(vector))
    if not basis:
        return target.copy()
    return np.column_stack(basis)