import numpy as np
import pytest

from chinium.linalg import gram_schmidt


SAMPLE = np.array([[1.0, 3.0, 5.0], [7.0, 9.0, 2.0], [4.0, 6.0, 8.0]])


def test_columns_are_orthonormal():
    q = gram_schmidt(SAMPLE)
    assert q.shape == SAMPLE.shape
    np.testing.assert_allclose(q.T @ q, np.eye(3), atol=1e-12)


def test_first_column_is_normalised_input():
    q = gram_schmidt(SAMPLE)
    np.testing.assert_allclose(q[:, 0], SAMPLE[:, 0] / np.linalg.norm(SAMPLE[:, 0]))


def test_triangular_factor():
    rng = np.random.default_rng(3)
    a = rng.normal(size=(5, 3))
    q = gram_schmidt(a)
    r = q.T @ a
    np.testing.assert_allclose(np.tril(r, -1), 0.0, atol=1e-12)
    assert np.all(np.diag(r) > 0)
    np.testing.assert_allclose(q @ r, a, atol=1e-12)


def test_reconstructs_square_input():
    q = gram_schmidt(SAMPLE)
    np.testing.assert_allclose(q @ (q.T @ SAMPLE), SAMPLE, atol=1e-10)


def test_rejects_vector():
    with pytest.raises(ValueError):
        gram_schmidt(np.ones(3))