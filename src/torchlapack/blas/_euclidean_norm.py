import numpy
import scipy.linalg.blas

from torchlapack.blas._strided import strided


def euclidean_norm(n: int, x: numpy.ndarray, incx: int) -> float:
    """Euclidean norm of ``n`` elements of ``x``.

    Delegates to the reference ``dnrm2``, which scales as it accumulates so
    that neither overflow nor harmful underflow occurs.
    """
    if n <= 0 or incx <= 0:
        return 0.0

    values = numpy.ascontiguousarray(strided(x, n, incx))

    return float(scipy.linalg.blas.dnrm2(values))
