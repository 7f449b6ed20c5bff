"""
Hessenberg QR eigenvalue routines on one-based, column-major storage.

Subpackages
-----------
indexed_array
    One-based, column-major array storage.
blas
    The BLAS kernels the eigenvalue routines build on.
machine
    Machine constants and tuning parameters.
auxiliary
    Householder reflectors, 2x2 Schur blocks, shift vectors and matrix
    copies.
eigenvalue
    Double-shift and multi-shift QR iteration.
"""

from torchlapack import auxiliary, blas, eigenvalue, indexed_array, machine
from torchlapack._exceptions import (
    ConvergenceWarning,
    IllegalArgumentError,
    LapackError,
)

__version__ = "0.1.0"

__all__ = [
    "ConvergenceWarning",
    "IllegalArgumentError",
    "LapackError",
    "auxiliary",
    "blas",
    "eigenvalue",
    "indexed_array",
    "machine",
]
