import numpy

from torchlapack.blas._strided import strided


def scale(n: int, alpha: float, x: numpy.ndarray, incx: int) -> None:
    r"""Scale ``n`` elements of ``x`` in place: :math:`x \leftarrow \alpha x`.

    Does nothing when ``n <= 0`` or ``incx <= 0``.
    """
    if n <= 0 or incx <= 0:
        return

    strided(x, n, incx)[...] *= alpha
