"""Adapters between caller storage and :class:`IndexedArray` working copies."""

from typing import Optional

import numpy
import torch
from torch import Tensor

from torchlapack.indexed_array._indexed_array import IndexedArray


def _as_numpy(values) -> numpy.ndarray:
    if isinstance(values, Tensor):
        return values.detach().cpu().to(torch.float64).numpy()

    return numpy.asarray(values, dtype=numpy.float64)


def as_indexed_vector(values) -> IndexedArray:
    """
    Copy ``values`` into a fresh one-based vector.

    Parameters
    ----------
    values : Tensor, numpy.ndarray, IndexedArray, sequence or float
        Source values. Multi-dimensional input is flattened in column-major
        order, a scalar becomes a vector of length one.

    Returns
    -------
    IndexedArray
        A vector that does not share memory with ``values``.
    """
    if isinstance(values, IndexedArray):
        return IndexedArray(values.data.copy())

    array = _as_numpy(values)

    return IndexedArray(array.reshape(-1, order="F").copy())


def as_indexed_matrix(values, ld: Optional[int] = None) -> IndexedArray:
    """
    Copy ``values`` into a fresh column-major matrix.

    Parameters
    ----------
    values : Tensor, numpy.ndarray, IndexedArray or sequence
        Either a 2-D array indexed ``[row, column]``, whose leading
        dimension is its row count, or a flat column-major buffer, which
        needs ``ld``.
    ld : int, optional
        Leading dimension. Required for flat input, and must match the row
        count of 2-D input when given.

    Returns
    -------
    IndexedArray
        A matrix that does not share memory with ``values``.

    Raises
    ------
    ValueError
        If the leading dimension is missing or inconsistent.
    """
    if isinstance(values, IndexedArray):
        matrix = values.copy()

        if ld is not None:
            matrix.reshape_rows(ld)
        elif matrix.is_vector:
            raise ValueError("a flat buffer needs an explicit leading dimension")

        return matrix

    array = _as_numpy(values)

    if array.ndim == 2:
        if ld is not None and ld != array.shape[0]:
            raise ValueError(
                f"leading dimension {ld} does not match {array.shape[0]} rows"
            )

        return IndexedArray(
            array.reshape(-1, order="F").copy(),
            array.shape[0],
            array.shape[1],
        )

    if array.ndim == 1:
        if ld is None:
            raise ValueError("a flat buffer needs an explicit leading dimension")

        matrix = IndexedArray(array.copy())
        matrix.reshape_rows(ld)

        return matrix

    raise ValueError(f"expected a 1-D or 2-D array, got {array.ndim}D")


def write_back(target, source: IndexedArray) -> None:
    """
    Copy the contents of ``source`` into the caller's ``target`` in place.

    ``target`` must be the object ``source`` was created from (or one of
    the same shape). 2-D targets receive the ``[row, column]`` layout,
    1-D targets the flat column-major buffer.

    Raises
    ------
    TypeError
        If ``target`` is immutable or of an unsupported type.
    """
    if isinstance(target, IndexedArray):
        target.data[...] = source.data
        return

    if isinstance(target, Tensor):
        values = source.to_numpy() if target.dim() == 2 else source.data
        with torch.no_grad():
            target.copy_(
                torch.from_numpy(numpy.ascontiguousarray(values)).reshape(
                    target.shape
                )
            )
        return

    if isinstance(target, numpy.ndarray):
        values = source.to_numpy() if target.ndim == 2 else source.data
        target[...] = values.reshape(target.shape)
        return

    if isinstance(target, list):
        if target and isinstance(target[0], list):
            for row, values in zip(target, source.to_numpy().tolist()):
                row[:] = values
        else:
            target[:] = source.data.tolist()
        return

    raise TypeError(
        f"cannot write results back into {type(target).__name__}"
    )
