import numpy

from torchlapack._exceptions import report_illegal_argument
from torchlapack.blas._column_major import column_major
from torchlapack.blas._same_letter import same_letter


def _is_transpose_option(trans: str) -> bool:
    return any(same_letter(trans, option) for option in ("N", "T", "C"))


def matrix_multiply(
    transa: str,
    transb: str,
    m: int,
    n: int,
    k: int,
    alpha: float,
    a: numpy.ndarray,
    lda: int,
    b: numpy.ndarray,
    ldb: int,
    beta: float,
    c: numpy.ndarray,
    ldc: int,
) -> None:
    r"""
    General matrix multiply on column-major buffers.

    Computes :math:`C \leftarrow \alpha \, op(A) \, op(B) + \beta C` where
    :math:`op(X)` is :math:`X` or :math:`X^T`, :math:`op(A)` is
    :math:`m \times k` and :math:`op(B)` is :math:`k \times n`.

    Parameters
    ----------
    transa, transb : str
        ``"N"`` for no transpose, ``"T"`` or ``"C"`` for transpose.
    m, n, k : int
        Problem dimensions.
    alpha, beta : float
        Scalars. When ``beta == 0`` the input contents of ``C`` are ignored.
    a, b, c : numpy.ndarray
        Flat float64 buffers holding the matrices in column-major order.
        ``c`` is updated in place.
    lda, ldb, ldc : int
        Leading dimensions.

    Raises
    ------
    IllegalArgumentError
        If an argument is invalid. ``position`` is the one-based index of
        the first offending argument in the signature above.
    """
    nota = same_letter(transa, "N")
    notb = same_letter(transb, "N")

    nrowa = m if nota else k
    nrowb = k if notb else n

    info = 0

    if not _is_transpose_option(transa):
        info = 1
    elif not _is_transpose_option(transb):
        info = 2
    elif m < 0:
        info = 3
    elif n < 0:
        info = 4
    elif k < 0:
        info = 5
    elif lda < max(1, nrowa):
        info = 8
    elif ldb < max(1, nrowb):
        info = 10
    elif ldc < max(1, m):
        info = 13

    if info != 0:
        report_illegal_argument("matrix_multiply", info)

    if m == 0 or n == 0 or ((alpha == 0.0 or k == 0) and beta == 1.0):
        return

    cv = column_major(c, m, n, ldc)

    if alpha == 0.0 or k == 0:
        if beta == 0.0:
            cv.zero_()
        else:
            cv.mul_(beta)

        return

    av = column_major(a, nrowa, k if nota else m, lda)
    bv = column_major(b, nrowb, n if notb else k, ldb)

    product = alpha * ((av if nota else av.T) @ (bv if notb else bv.T))

    if beta == 0.0:
        cv.copy_(product)
    else:
        cv.copy_(product + beta * cv)
