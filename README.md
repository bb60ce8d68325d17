# chinium

Building blocks for restricted Hartree–Fock and Kohn–Sham calculations,
written on top of NumPy and SciPy.

## Installation

```
pip install .
```

To run the test suite:

```
pip install .[test]
pytest
```

## Modules

- `chinium.linalg`: `gram_schmidt(target)` orthonormalises the columns of a
  matrix in order.
- `chinium.manifold`: the abstract `Manifold` base class used by Riemannian
  optimisers (point `p`, Euclidean gradient `ge` and Hessian `he`, Riemannian
  gradient `gr` and Hessian `hr`), the Frobenius product `dot`, and
  `UnsupportedOperationError`, raised by operations a manifold does not
  provide.
- `chinium.grassmann`: `Grassmann` (rank-r orthogonal projectors) and
  `GrassmannQLocal` (orthonormal frames with tangents in complement
  coordinates), plus `lowdin_orthogonalization` and `orthogonal_complement`.
- `chinium.orthogonal`: the `Orthogonal` group with the metric `0.5 * <X, Y>`.
- `chinium.simplex`: the probability `Simplex` with the Fisher–Rao metric.
- `chinium.grid_integrals`: `density_on_grid` (returning a `GridDensity` with
  density, gradient, squared gradient, Laplacian and kinetic energy
  density), `density_skeleton` (returning a `DensitySkeleton` of nuclear
  derivatives), `grid_sum`, and the exchange–correlation matrices
  `fxc_matrix` (LDA, GGA, meta-GGA) and `fxc_u_matrix` (density response).
- `chinium.gateway`: `InputDeck` reads keyword-based input (`from_text`,
  `from_file`) with accessors `atoms`, `basis_set`, `electron_count`,
  `nprocs`, `guess`, `grid`, `method`, `derivative`, `temperature` and
  `chemical_potential`; `Atom` holds a nucleus in bohr; `element_symbol`
  and `atomic_number` map between symbols and nuclear charges; malformed
  input raises `InputError`.
- `chinium.hartree_fock`: `ghf_matrix` builds the Coulomb and scaled exchange
  part of the Fock matrix from a list of unique two-electron integrals;
  `purify_density` applies McWeeny purification and raises
  `PurificationError` when it fails.
- `chinium.sap`: superposition-of-atomic-potentials guess: `read_sap_table`,
  `sap_potential` and `sap_matrix`.
- `chinium.harmonics`: real solid harmonics up to l = 6 with first and second
  derivatives (`solid_harmonics`, returning `HarmonicTerms`).
- `chinium.grid`: Becke partitioning (`becke_switch`, `becke_partition`),
  radial rules (`de2_radial`, `em_radial`), `spherical_grid_size` and
  `uniform_box_grid`.
- `chinium.ao_values`: contracted Gaussian `Shell` objects, `basis_size`,
  and `ao_values`, which evaluates AOs and their derivatives on a grid
  (returning `AoValues`).

## Data files

`InputDeck.grid` and `InputDeck.method` check that a named grid exists under
`<data_dir>/Grids/` and that a functional has a file
`<data_dir>/DensityFunctionals/<name>.df`. `sap_potential` and `sap_matrix`
read `<data_dir>/SAP/v_<symbol>.dat`. When no `data_dir` is given, the
directory named by the `CHINIUM_PATH` environment variable is used.
`spherical_grid_size` reads `<grid_dir>/<symbol>.grid` files.

## Examples

```python
import numpy as np
from chinium.grassmann import Grassmann

p = np.diag([1.0, 1.0, 0.0, 0.0])
m = Grassmann(p)
print(m.dimension())  # 4
x = m.tangent_purification(np.random.default_rng(0).normal(size=(4, 4)))
q = m.exponential(x)
print(np.allclose(q @ q, q))  # True: still a projector
```

```python
from chinium.gateway import InputDeck

deck = InputDeck.from_text("xyz\n1\nH 0 0 0\nbasis\nsto-3g\n")
print(deck.basis_set(), deck.electron_count())  # sto-3g 1
```

## What the package does not do

- It does not compute one- or two-electron integrals and does not load basis
  sets by name; `ghf_matrix` expects integrals and their indices to be given,
  and `ao_values` expects `Shell` objects built by the caller.
- It does not evaluate exchange–correlation functionals; the potentials and
  kernels passed to `fxc_matrix` and `fxc_u_matrix` must come from elsewhere.
- It does not run a self-consistent field iteration, geometry gradients or
  Hessians.
- It holds no angular quadrature tables, so it sizes atom-centred grids and
  provides their radial and partition parts but does not generate the full
  molecular grid.
- It has no command-line program.