import numpy

from torchlapack.blas._strided import strided


def plane_rotation(
    n: int,
    x: numpy.ndarray,
    incx: int,
    y: numpy.ndarray,
    incy: int,
    c: float,
    s: float,
) -> None:
    r"""
    Apply a plane rotation to the vector pair ``(x, y)`` in place.

    .. math::

        \begin{pmatrix} x_k \\ y_k \end{pmatrix} \leftarrow
        \begin{pmatrix} c & s \\ -s & c \end{pmatrix}
        \begin{pmatrix} x_k \\ y_k \end{pmatrix}

    Parameters
    ----------
    n : int
        Number of element pairs.
    x, y : numpy.ndarray
        Flat buffers, typically views into a matrix returned by
        :meth:`IndexedArray.slice_from`. They must not share elements.
    incx, incy : int
        Increments between consecutive elements.
    c, s : float
        Cosine and sine of the rotation.
    """
    if n <= 0:
        return

    xs = strided(x, n, incx)
    ys = strided(y, n, incy)

    rotated_x = c * xs + s * ys
    rotated_y = c * ys - s * xs

    xs[...] = rotated_x
    ys[...] = rotated_y
