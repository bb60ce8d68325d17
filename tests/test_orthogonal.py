import numpy as np
import pytest

from chinium.manifold import UnsupportedOperationError, dot
from chinium.orthogonal import Orthogonal

N = 4


@pytest.fixture
def point():
    q, _ = np.linalg.qr(np.random.default_rng(21).normal(size=(N, N)))
    return q


@pytest.fixture
def skew():
    a = np.random.default_rng(22).normal(size=(N, N))
    return 0.1 * (a - a.T)


def _skew_check(m):
    np.testing.assert_allclose(m, -m.T, atol=1e-10)


def test_dimension(point):
    assert Orthogonal(point).dimension() == N * (N - 1) // 2


def test_inner_is_half_dot(point, skew):
    m = Orthogonal(point)
    assert m.inner(skew, point) == pytest.approx(0.5 * dot(skew, point))
    assert m.inner_function()(skew, point) == pytest.approx(m.inner(skew, point))


def test_exponential_is_orthogonal(point, skew):
    m = Orthogonal(point)
    q = m.exponential(skew @ point)
    np.testing.assert_allclose(q.T @ q, np.eye(N), atol=1e-10)


def test_log_exp_round_trip_at_identity(skew):
    m = Orthogonal(np.eye(N))
    np.testing.assert_allclose(m.logarithm(m.exponential(skew)), skew, atol=1e-10)


def test_projection_idempotent(point):
    m = Orthogonal(point)
    a = np.random.default_rng(23).normal(size=(N, N))
    once = m.tangent_projection(a)
    np.testing.assert_allclose(m.tangent_projection(once), once, atol=1e-10)


def test_projection_keeps_tangent(point, skew):
    m = Orthogonal(point)
    np.testing.assert_allclose(m.tangent_projection(skew @ point), skew @ point, atol=1e-10)


def test_purification_is_tangent(point):
    m = Orthogonal(point)
    a = np.random.default_rng(24).normal(size=(N, N))
    _skew_check(point.T @ m.tangent_purification(a))


@pytest.mark.parametrize(
    "call",
    [
        lambda m, p: m.distance(p),
        lambda m, p: m.transport_tangent(p, p),
        lambda m, p: m.transport_manifold(p, p),
    ],
)
def test_unsupported(point, call):
    with pytest.raises(UnsupportedOperationError):
        call(Orthogonal(point), point)


def test_update_purify(point):
    m = Orthogonal(point)
    noisy = point + 0.01 * np.random.default_rng(25).normal(size=(N, N))
    m.update(noisy, False)
    np.testing.assert_allclose(m.p, noisy)
    m.update(noisy, True)
    np.testing.assert_allclose(m.p.T @ m.p, np.eye(N), atol=1e-10)


def test_update_purify_keeps_orthogonal(point):
    m = Orthogonal(np.eye(N))
    m.update(point, True)
    np.testing.assert_allclose(m.p, point, atol=1e-10)


def test_gradient_is_tangent(point):
    m = Orthogonal(point)
    m.ge = np.random.default_rng(26).normal(size=(N, N))
    m.compute_gradient()
    _skew_check(point.T @ m.gr)


def test_hessian_is_tangent(point, skew):
    m = Orthogonal(point)
    m.ge = np.random.default_rng(27).normal(size=(N, N))
    m.compute_gradient()
    m.he = lambda v: 2.0 * v
    m.compute_hessian()
    _skew_check(point.T @ m.hr(skew @ point))


def test_hessian_requires_he(point):
    with pytest.raises(ValueError):
        Orthogonal(point).compute_hessian()