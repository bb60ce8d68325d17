"""Quantum chemistry building blocks: Riemannian manifolds, grid integrals, Fock-matrix helpers and input parsing."""

__version__ = "0.1.0"