from typing import List, Optional, Tuple

from torchlapack.indexed_array import IndexedArray, as_indexed_matrix


def shifted_first_column(
    n: int,
    h: IndexedArray,
    sr1: float,
    si1: float,
    sr2: float,
    si2: float,
) -> Tuple[float, ...]:
    """Indexed-array kernel of :func:`shift_vector`.

    ``h`` is addressed from ``(1, 1)``; pass a view made with
    :meth:`IndexedArray.from_buffer` to start inside a larger matrix.
    Returns an empty tuple for ``n`` other than 2 or 3.
    """
    if n == 2:
        s = abs(h[1, 1] - sr2) + abs(si2) + abs(h[2, 1])

        if s == 0.0:
            return 0.0, 0.0

        h21s = h[2, 1] / s

        return (
            h21s * h[1, 2]
            + (h[1, 1] - sr1) * ((h[1, 1] - sr2) / s)
            - si1 * (si2 / s),
            h21s * (h[1, 1] + h[2, 2] - sr1 - sr2),
        )

    if n == 3:
        s = abs(h[1, 1] - sr2) + abs(si2) + abs(h[2, 1]) + abs(h[3, 1])

        if s == 0.0:
            return 0.0, 0.0, 0.0

        h21s = h[2, 1] / s
        h31s = h[3, 1] / s

        return (
            (h[1, 1] - sr1) * ((h[1, 1] - sr2) / s)
            - si1 * (si2 / s)
            + h[1, 2] * h21s
            + h[1, 3] * h31s,
            h21s * (h[1, 1] + h[2, 2] - sr1 - sr2) + h[2, 3] * h31s,
            h31s * (h[1, 1] + h[3, 3] - sr1 - sr2) + h21s * h[3, 2],
        )

    return ()


def shift_vector(
    n: int,
    h,
    sr1: float,
    si1: float,
    sr2: float,
    si2: float,
    *,
    ldh: Optional[int] = None,
) -> List[float]:
    r"""
    First column of a doubly shifted Hessenberg matrix, up to scaling.

    Returns a multiple of the first column of

    .. math::

        K = (H - s_1 I)(H - s_2 I), \qquad
        s_1 = sr_1 + i \, si_1, \quad s_2 = sr_2 + i \, si_2,

    which seeds the bulge of an implicit double-shift QR step. The shifts
    must either both be real or form a complex conjugate pair, so that
    :math:`K` is real.

    Parameters
    ----------
    n : int
        Order of the leading block, 2 or 3.
    h : Tensor, numpy.ndarray, list or IndexedArray
        Upper Hessenberg matrix whose leading ``n`` by ``n`` block is used,
        either 2-D or as a flat column-major buffer with leading dimension
        ``ldh``.
    sr1, si1, sr2, si2 : float
        Real and imaginary parts of the two shifts.
    ldh : int, optional
        Leading dimension of a flat ``h``.

    Returns
    -------
    list of float
        The ``n`` entries of the scaled column. The scaling divides by the
        sum of magnitudes of the entries involved, and the result is all
        zeros when that sum is zero.

    Raises
    ------
    ValueError
        If ``n`` is not 2 or 3.

    Examples
    --------
    >>> shift_vector(2, [[2.0, 1.0], [1.0, 2.0]], 3.0, 0.0, 1.0, 0.0)
    [0.0, 0.0]
    """
    if n not in (2, 3):
        raise ValueError(f"n must be 2 or 3, got {n}")

    return list(
        shifted_first_column(
            n, as_indexed_matrix(h, ldh), sr1, si1, sr2, si2
        )
    )
