import numpy
import torch

from torchlapack.blas import same_letter
from torchlapack.blas._column_major import column_major


def set_matrix(
    uplo: str,
    m: int,
    n: int,
    alpha: float,
    beta: float,
    a: numpy.ndarray,
    lda: int,
) -> None:
    """Set the off-diagonal entries of ``A`` to ``alpha``, its diagonal to ``beta``.

    ``uplo`` restricts the off-diagonal assignment to the strictly upper
    (``"U"``) or strictly lower (``"L"``) triangle. ``set_matrix("A", n, n,
    0.0, 1.0, a, n)`` makes ``A`` the identity.
    """
    if m <= 0 or n <= 0:
        return

    av = column_major(a, m, n, lda)

    if same_letter(uplo, "U"):
        av.masked_fill_(torch.ones(m, n, dtype=torch.bool).triu(1), alpha)
    elif same_letter(uplo, "L"):
        av.masked_fill_(torch.ones(m, n, dtype=torch.bool).tril(-1), alpha)
    else:
        av.fill_(alpha)

    av.diagonal().fill_(beta)
