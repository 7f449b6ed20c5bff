import numpy
import torch

from torchlapack._exceptions import report_illegal_argument
from torchlapack.blas._column_major import column_major
from torchlapack.blas._same_letter import same_letter


def triangular_matrix_multiply(
    side: str,
    uplo: str,
    transa: str,
    diag: str,
    m: int,
    n: int,
    alpha: float,
    a: numpy.ndarray,
    lda: int,
    b: numpy.ndarray,
    ldb: int,
) -> None:
    r"""
    Triangular matrix multiply on column-major buffers.

    Computes :math:`B \leftarrow \alpha \, op(A) \, B` (``side="L"``) or
    :math:`B \leftarrow \alpha \, B \, op(A)` (``side="R"``) where ``A`` is
    triangular and ``B`` is :math:`m \times n`. Only the triangle of ``A``
    named by ``uplo`` is referenced, and with ``diag="U"`` its diagonal is
    taken to be one.

    Raises
    ------
    IllegalArgumentError
        If an argument is invalid.
    """
    lside = same_letter(side, "L")
    nrowa = m if lside else n
    upper = same_letter(uplo, "U")
    nounit = same_letter(diag, "N")

    info = 0

    if not lside and not same_letter(side, "R"):
        info = 1
    elif not upper and not same_letter(uplo, "L"):
        info = 2
    elif not any(same_letter(transa, option) for option in ("N", "T", "C")):
        info = 3
    elif not nounit and not same_letter(diag, "U"):
        info = 4
    elif m < 0:
        info = 5
    elif n < 0:
        info = 6
    elif lda < max(1, nrowa):
        info = 9
    elif ldb < max(1, m):
        info = 11

    if info != 0:
        report_illegal_argument("triangular_matrix_multiply", info)

    if m == 0 or n == 0:
        return

    bv = column_major(b, m, n, ldb)

    if alpha == 0.0:
        bv.zero_()
        return

    av = column_major(a, nrowa, nrowa, lda)
    triangle = torch.triu(av) if upper else torch.tril(av)

    if not nounit:
        triangle.diagonal().fill_(1.0)

    if not same_letter(transa, "N"):
        triangle = triangle.T

    if lside:
        bv.copy_(alpha * (triangle @ bv))
    else:
        bv.copy_(alpha * (bv @ triangle))
