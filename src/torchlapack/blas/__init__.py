"""
Vector and matrix primitives over flat column-major buffers.

The routines follow the calling convention of the reference BLAS: explicit
dimensions, increments and leading dimensions, with buffers passed as flat
float64 ``numpy.ndarray`` objects (usually views obtained from
:meth:`torchlapack.indexed_array.IndexedArray.slice_from`). All updates
are in place.

Functions
---------
copy
    Strided vector copy.
scale
    Strided vector scaling.
plane_rotation
    Apply a plane rotation to a pair of vectors.
euclidean_norm
    Overflow-safe Euclidean norm.
matrix_multiply
    General matrix multiply with optional transposes.
triangular_matrix_multiply
    Triangular matrix multiply from the left or the right.
same_letter
    Case-insensitive option letter comparison.
"""

from torchlapack.blas._copy import copy
from torchlapack.blas._euclidean_norm import euclidean_norm
from torchlapack.blas._matrix_multiply import matrix_multiply
from torchlapack.blas._plane_rotation import plane_rotation
from torchlapack.blas._same_letter import same_letter
from torchlapack.blas._scale import scale
from torchlapack.blas._triangular_matrix_multiply import (
    triangular_matrix_multiply,
)

__all__ = [
    "copy",
    "euclidean_norm",
    "matrix_multiply",
    "plane_rotation",
    "same_letter",
    "scale",
    "triangular_matrix_multiply",
]
