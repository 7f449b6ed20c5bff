"""
One-based, column-major array storage.

Every routine in torchlapack works on :class:`IndexedArray`, a flat
double-precision buffer addressed the way the Fortran reference code
addresses its arrays: ``a[i]`` for vectors and ``a[i, j]`` for matrices,
both one-based, with matrices stored column by column.

Public entry points copy their arguments into indexed arrays with
:func:`as_indexed_vector` and :func:`as_indexed_matrix`, run on the copies,
and publish the results once with :func:`write_back`.

Classes
-------
IndexedArray
    Flat storage with one-based vector and matrix accessors.

Functions
---------
as_indexed_vector
    Copy a tensor, array or sequence into a vector.
as_indexed_matrix
    Copy a 2-D array or a flat buffer into a matrix.
write_back
    Copy results into the caller's storage in place.
"""

from torchlapack.indexed_array._convert import (
    as_indexed_matrix,
    as_indexed_vector,
    write_back,
)
from torchlapack.indexed_array._indexed_array import SENTINEL, IndexedArray

__all__ = [
    "IndexedArray",
    "SENTINEL",
    "as_indexed_matrix",
    "as_indexed_vector",
    "write_back",
]
