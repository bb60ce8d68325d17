import numpy as np
import pytest

from chinium.gateway import Atom, InputError
from chinium.sap import SAP_TABLE_LINES, read_sap_table, sap_matrix, sap_potential


def _write_table(directory, symbol, rows):
    sap = directory / "SAP"
    sap.mkdir(exist_ok=True)
    path = sap / f"v_{symbol}.dat"
    path.write_text("".join(f"{r} {z}\n" for r, z in rows))
    return path


def test_read_table_round_trip(tmp_path):
    rows = [(0.1 * i, 2.0 + i) for i in range(5)]
    path = _write_table(tmp_path, "H", rows)
    radii, charges = read_sap_table(path)
    assert np.allclose(radii, [r for r, _ in rows])
    assert np.allclose(charges, [z for _, z in rows])


def test_read_table_limits_lines(tmp_path):
    rows = [(0.01 * i, 1.0) for i in range(SAP_TABLE_LINES + 49)]
    radii, _ = read_sap_table(_write_table(tmp_path, "He", rows))
    assert radii.size == SAP_TABLE_LINES


def test_missing_table_raises(tmp_path):
    with pytest.raises(InputError):
        read_sap_table(tmp_path / "v_X.dat")
    with pytest.raises(InputError):
        sap_potential([Atom(1, 0.0, 0.0, 0.0)], [1.0], [0.0], [0.0], tmp_path)


def test_constant_charge_gives_coulomb_potential(tmp_path):
    _write_table(tmp_path, "H", [(0.5 * i, 3.0) for i in range(10)])
    xs = np.array([1.0, 0.0, 0.0])
    ys = np.array([0.0, 2.0, 0.0])
    zs = np.array([0.0, 0.0, 4.0])
    result = sap_potential([Atom(1, 0.0, 0.0, 0.0)], xs, ys, zs, tmp_path)
    assert np.allclose(result, 3.0 / np.array([1.0, 2.0, 4.0]))


def test_last_nearest_entry_wins_on_tie(tmp_path):
    _write_table(tmp_path, "H", [(0.5, 1.0), (1.5, 5.0)])
    result = sap_potential([Atom(1, 0.0, 0.0, 0.0)], [1.0], [0.0], [0.0], tmp_path)
    assert result[0] == pytest.approx(5.0)


def test_potentials_superpose(tmp_path):
    _write_table(tmp_path, "He", [(0.1 * i, 0.2 * i) for i in range(30)])
    xs, ys, zs = [0.3, 1.2], [0.4, -0.7], [0.0, 0.9]
    single = sap_potential([Atom(2, 0.1, 0.2, 0.3)], xs, ys, zs, tmp_path)
    double = sap_potential([Atom(2, 0.1, 0.2, 0.3)] * 2, xs, ys, zs, tmp_path)
    assert np.allclose(double, 2 * single)


def test_sap_matrix_single_function(tmp_path):
    _write_table(tmp_path, "H", [(1.0, 4.0), (2.0, 4.0)])
    matrix = sap_matrix([Atom(1, 0.0, 0.0, 0.0)], [2.0], [0.0], [0.0],
                        [0.5], [[3.0]], tmp_path)
    assert matrix.shape == (1, 1)
    assert matrix[0, 0] == pytest.approx(9.0)


def test_sap_matrix_is_symmetric(tmp_path):
    _write_table(tmp_path, "H", [(0.2 * i, 1.0 + 0.1 * i) for i in range(20)])
    rng = np.random.default_rng(0)
    xs, ys, zs = rng.standard_normal((3, 6))
    aos = rng.standard_normal((3, 6))
    weights = rng.random(6)
    matrix = sap_matrix([Atom(1, 0.0, 0.0, 0.0)], xs, ys, zs, weights, aos, tmp_path)
    assert np.allclose(matrix, matrix.T)