import numpy

from torchlapack.blas._strided import strided


def copy(
    n: int, x: numpy.ndarray, incx: int, y: numpy.ndarray, incy: int
) -> None:
    r"""Copy ``n`` elements of ``x`` into ``y``: :math:`y \leftarrow x`."""
    if n <= 0:
        return

    strided(y, n, incy)[...] = strided(x, n, incx)
