"""Application of 2x2 and 3x3 Householder reflections to indexed matrices.

A reflection is ``I - tau * u * u^T`` with ``u = (1, v2)`` or
``u = (1, v2, v3)``; pass ``v3=None`` for the 2x2 case.
"""

from typing import Optional

from torchlapack.indexed_array import IndexedArray


def apply_from_left(
    a: IndexedArray,
    row: int,
    first: int,
    last: int,
    v2: float,
    v3: Optional[float],
    tau: float,
) -> None:
    """Reflect rows ``row, row + 1[, row + 2]`` of columns ``first..last``."""
    t2 = tau * v2

    if v3 is None:
        for j in range(first, last + 1):
            total = a[row, j] + v2 * a[row + 1, j]
            a[row, j] = a[row, j] - total * tau
            a[row + 1, j] = a[row + 1, j] - total * t2

        return

    t3 = tau * v3

    for j in range(first, last + 1):
        total = a[row, j] + v2 * a[row + 1, j] + v3 * a[row + 2, j]
        a[row, j] = a[row, j] - total * tau
        a[row + 1, j] = a[row + 1, j] - total * t2
        a[row + 2, j] = a[row + 2, j] - total * t3


def apply_from_right(
    a: IndexedArray,
    col: int,
    first: int,
    last: int,
    v2: float,
    v3: Optional[float],
    tau: float,
) -> None:
    """Reflect columns ``col, col + 1[, col + 2]`` of rows ``first..last``."""
    t2 = tau * v2

    if v3 is None:
        for j in range(first, last + 1):
            total = a[j, col] + v2 * a[j, col + 1]
            a[j, col] = a[j, col] - total * tau
            a[j, col + 1] = a[j, col + 1] - total * t2

        return

    t3 = tau * v3

    for j in range(first, last + 1):
        total = a[j, col] + v2 * a[j, col + 1] + v3 * a[j, col + 2]
        a[j, col] = a[j, col] - total * tau
        a[j, col + 1] = a[j, col + 1] - total * t2
        a[j, col + 2] = a[j, col + 2] - total * t3
