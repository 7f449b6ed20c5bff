import numpy
import torch

from torchlapack.blas import same_letter
from torchlapack.blas._column_major import column_major


def copy_matrix(
    uplo: str,
    m: int,
    n: int,
    a: numpy.ndarray,
    lda: int,
    b: numpy.ndarray,
    ldb: int,
) -> None:
    """Copy all or part of the ``m`` by ``n`` matrix ``A`` into ``B``.

    ``uplo`` selects the upper triangle (``"U"``), the lower triangle
    (``"L"``) or, for any other letter, the whole matrix. Entries of ``B``
    outside the selected part are left alone.
    """
    if m <= 0 or n <= 0:
        return

    av = column_major(a, m, n, lda)
    bv = column_major(b, m, n, ldb)

    if same_letter(uplo, "U"):
        mask = torch.ones(m, n, dtype=torch.bool).triu()
    elif same_letter(uplo, "L"):
        mask = torch.ones(m, n, dtype=torch.bool).tril()
    else:
        bv.copy_(av)
        return

    bv.copy_(torch.where(mask, av, bv))
