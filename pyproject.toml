[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "chinium"
version = "0.1.0"
description = "Quantum chemistry building blocks: Riemannian manifolds, grid integrals, Fock-matrix helpers and input parsing"
requires-python = ">=3.10"
keywords = [
    "quantum chemistry",
    "hartree-fock",
    "density functional theory",
    "riemannian optimization",
    "manifold",
    "numerical integration",
    "gaussian basis",
]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Science/Research",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Scientific/Engineering :: Chemistry",
    "Topic :: Scientific/Engineering :: Mathematics",
]
dependencies = [
    "numpy",
    "scipy",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[tool.hatch.build.targets.wheel]
packages = ["chinium"]

[tool.pytest.ini_options]
addopts = "-ra"
