import numpy as np
import pytest

from chinium.grid_integrals import (
    density_on_grid,
    density_skeleton,
    fxc_matrix,
    fxc_u_matrix,
    grid_sum,
)

NB = 3
NG = 7


@pytest.fixture
def data():
    rng = np.random.default_rng(0)
    a = rng.normal(size=(NB, NB))
    return {
        "d": a + a.T,
        "aos": rng.normal(size=(NB, NG)),
        "ao1s": rng.normal(size=(3, NB, NG)),
        "ao2ls": rng.normal(size=(NB, NG)),
        "ao2s": rng.normal(size=(6, NB, NG)),
        "w": rng.uniform(0.1, 1.0, size=NG),
        "c": rng.normal(size=NB),
        "rng": rng,
    }


def test_rank_one_density_identities(data):
    c = data["c"]
    dens = density_on_grid(np.outer(c, c), data["aos"], data["ao1s"], data["ao2ls"])
    phi = c @ data["aos"]
    dphi = np.einsum("i,cig->cg", c, data["ao1s"])
    lap = c @ data["ao2ls"]
    assert np.allclose(dens.ds, phi**2)
    assert np.allclose(dens.d1s, 2 * phi * dphi)
    assert np.allclose(dens.cgs, np.sum(dens.d1s**2, axis=0))
    assert np.allclose(dens.ts, 0.5 * np.sum(dphi**2, axis=0))
    assert np.allclose(dens.d2s, 2 * phi * lap + 4 * dens.ts)


def test_only_lower_triangle_is_read(data):
    d = data["d"]
    changed = d.copy()
    changed[np.triu_indices(NB, 1)] += 5.0
    a = density_on_grid(d, data["aos"], data["ao1s"], data["ao2ls"])
    b = density_on_grid(changed, data["aos"], data["ao1s"], data["ao2ls"])
    assert np.allclose(a.ds, b.ds)
    assert np.allclose(a.d2s, b.d2s)


def test_density_is_linear_in_matrix(data):
    d = data["d"]
    one = density_on_grid(d, data["aos"], data["ao1s"])
    two = density_on_grid(2 * d, data["aos"], data["ao1s"])
    assert np.allclose(two.ds, 2 * one.ds)
    assert np.allclose(two.d1s, 2 * one.d1s)
    assert one.d2s is None and one.ts is None


def test_laplacian_without_gradient_rejected(data):
    with pytest.raises(ValueError):
        density_on_grid(data["d"], data["aos"], None, data["ao2ls"])


def test_grid_sum():
    assert grid_sum([1.0, 2.0, 3.0], [1.0, 1.0, 1.0]) == pytest.approx(6.0)


def test_lda_matrix_contracts_to_density_integral(data):
    d, aos, w = data["d"], data["aos"], data["w"]
    f = fxc_matrix(w, aos, np.ones(NG))
    assert np.allclose(f, f.T)
    dens = density_on_grid(d, aos)
    assert np.sum(d * f) == pytest.approx(grid_sum(dens.ds, w))


def test_gga_matrix_contracts_to_gradient_integral(data):
    d, aos, ao1s, w = data["d"], data["aos"], data["ao1s"], data["w"]
    vs = data["rng"].uniform(size=NG)
    dens = density_on_grid(d, aos, ao1s)
    f = fxc_matrix(w, aos, np.zeros(NG), ao1s, dens.d1s, vs)
    assert np.allclose(f, f.T)
    assert np.sum(d * f) == pytest.approx(2 * grid_sum(dens.cgs, w * vs))


def test_mgga_tau_term_contracts_to_kinetic_density(data):
    d, aos, ao1s, w = data["d"], data["aos"], data["ao1s"], data["w"]
    dens = density_on_grid(d, aos, ao1s, data["ao2ls"])
    f = fxc_matrix(w, aos, np.zeros(NG), ao1s, dens.d1s, np.zeros(NG),
                   data["ao2ls"], np.zeros(NG), np.ones(NG))
    assert np.allclose(f, f.T)
    assert np.sum(d * f) == pytest.approx(grid_sum(dens.ts, w))


def test_gga_requires_gradient_inputs(data):
    with pytest.raises(ValueError):
        fxc_matrix(data["w"], data["aos"], np.ones(NG), data["ao1s"])


def test_u_matrix_lda_matches_potential_matrix(data):
    aos, w = data["aos"], data["w"]
    vrr = data["rng"].normal(size=NG)
    dn = data["rng"].normal(size=NG)
    assert np.allclose(fxc_u_matrix(w, aos, vrr, dn), fxc_matrix(w, aos, vrr * dn))


def test_u_matrix_gga_gradient_term(data):
    d, aos, ao1s, w = data["d"], data["aos"], data["ao1s"], data["w"]
    dens = density_on_grid(d, aos, ao1s)
    dn1s = data["rng"].normal(size=(3, NG))
    zeros = np.zeros(NG)
    f = fxc_u_matrix(w, aos, zeros, zeros, ao1s, dens.d1s, np.ones(NG),
                     zeros, zeros, dn1s)
    assert np.allclose(f, f.T)
    expected = 2 * grid_sum(np.sum(dn1s * dens.d1s, axis=0), w)
    assert np.sum(d * f) == pytest.approx(expected)


def test_skeleton_zero_for_atom_without_functions(data):
    sk = density_skeleton(data["d"], 5, [0, 0, 1], data["aos"], data["ao1s"], data["ao2s"])
    assert np.allclose(sk.dns, 0.0)
    assert np.allclose(sk.dn1s, 0.0)


def test_skeleton_sums_to_negative_gradient(data):
    d, aos, ao1s = data["d"], data["aos"], data["ao1s"]
    bf2atom = [0, 0, 1]
    parts = [density_skeleton(d, atom, bf2atom, aos, ao1s, data["ao2s"]) for atom in (0, 1)]
    total = sum(p.dns for p in parts)
    full = density_on_grid(d, aos, ao1s)
    assert np.allclose(total, -full.d1s)
    total2 = sum(p.dn1s for p in parts)
    assert total2.shape == (3, 3, NG)
    assert np.allclose(total2, np.transpose(total2, (1, 0, 2)))


def test_skeleton_without_second_derivatives(data):
    sk = density_skeleton(data["d"], 0, [0, 1, 1], data["aos"], data["ao1s"])
    assert sk.dn1s is None
    assert sk.dns.shape == (3, NG)