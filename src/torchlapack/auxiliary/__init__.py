"""
Auxiliary routines of the Hessenberg QR algorithm.

Functions
---------
householder_reflector
    Elementary reflector that annihilates all but the first entry.
standardize_schur_2x2
    Standard Schur form of a real 2x2 block and its eigenvalues.
shift_vector
    Scaled first column of (H - s1 I)(H - s2 I).
pythagorean_sum
    sqrt(x**2 + y**2) without unnecessary overflow.
copy_matrix
    Copy all or a triangle of a column-major matrix.
set_matrix
    Initialize the diagonal and off-diagonal of a column-major matrix.

Classes
-------
ReflectorResult
    Named tuple returned by :func:`householder_reflector`.
Schur2x2
    Named tuple returned by :func:`standardize_schur_2x2`.
"""

from torchlapack.auxiliary._copy_matrix import copy_matrix
from torchlapack.auxiliary._householder_reflector import (
    ReflectorResult,
    householder_reflector,
)
from torchlapack.auxiliary._pythagorean_sum import pythagorean_sum
from torchlapack.auxiliary._set_matrix import set_matrix
from torchlapack.auxiliary._shift_vector import shift_vector
from torchlapack.auxiliary._standardize_schur_2x2 import (
    Schur2x2,
    standardize_schur_2x2,
)

__all__ = [
    "ReflectorResult",
    "Schur2x2",
    "copy_matrix",
    "householder_reflector",
    "pythagorean_sum",
    "set_matrix",
    "shift_vector",
    "standardize_schur_2x2",
]
