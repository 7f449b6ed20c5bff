"""
Eigenvalues of upper Hessenberg matrices by implicit QR iteration.

The one-based routines take ``h``, ``wr``, ``wi`` and ``z`` as tensors,
arrays, lists or :class:`~torchlapack.indexed_array.IndexedArray` and
update them in place; :func:`hessenberg_qr` is the batched tensor entry
point built on top of them.

Functions
---------
double_shift_qr
    Double-shift QR iteration with Ahues-Kressner deflation and
    exceptional shifts. Suited to small matrices.

multishift_sweep
    One sweep chasing a chain of tightly packed 3x3 bulges, optionally
    accumulating the transformations for blocked updates.

multishift_qr
    Multi-shift QR driver: sweeps on large windows, double-shift QR on
    small ones.

hessenberg_qr
    Real Schur decomposition H = ZTZ^T of a batch of Hessenberg tensors.

Result Types
------------
HessenbergQRResult
    Named tuple with T, Z, eigenvalues, info, iterations.
"""

from torchlapack.eigenvalue._double_shift_qr import double_shift_qr
from torchlapack.eigenvalue._hessenberg_qr import hessenberg_qr
from torchlapack.eigenvalue._multishift_qr import multishift_qr
from torchlapack.eigenvalue._multishift_sweep import multishift_sweep
from torchlapack.eigenvalue._result_types import HessenbergQRResult

__all__ = [
    "HessenbergQRResult",
    "double_shift_qr",
    "hessenberg_qr",
    "multishift_qr",
    "multishift_sweep",
]
