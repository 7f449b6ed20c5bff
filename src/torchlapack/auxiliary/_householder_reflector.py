import math
from typing import NamedTuple, Tuple

import numpy

from torchlapack.auxiliary._pythagorean_sum import pythagorean_sum
from torchlapack.blas import euclidean_norm, scale
from torchlapack.indexed_array import as_indexed_vector, write_back
from torchlapack.machine import machine_parameter

# Rescalings attempted before accepting an underflowing beta.
_MAX_RESCALINGS = 20


class ReflectorResult(NamedTuple):
    beta: float
    tau: float


def generate_reflector(
    n: int, alpha: float, x: numpy.ndarray, incx: int
) -> Tuple[float, float]:
    """Buffer-level kernel of :func:`householder_reflector`.

    Overwrites ``x`` with ``v`` and returns ``(beta, tau)``.
    """
    if n <= 1:
        return alpha, 0.0

    xnorm = euclidean_norm(n - 1, x, incx)

    if xnorm == 0.0:
        return alpha, 0.0

    beta = -math.copysign(pythagorean_sum(alpha, xnorm), alpha)
    safmin = machine_parameter("S") / machine_parameter("E")

    knt = 0

    if abs(beta) < safmin:
        rsafmn = 1.0 / safmin

        while True:
            knt += 1

            scale(n - 1, rsafmn, x, incx)

            beta *= rsafmn
            alpha *= rsafmn

            if abs(beta) >= safmin or knt >= _MAX_RESCALINGS:
                break

        xnorm = euclidean_norm(n - 1, x, incx)
        beta = -math.copysign(pythagorean_sum(alpha, xnorm), alpha)

    tau = (beta - alpha) / beta

    scale(n - 1, 1.0 / (alpha - beta), x, incx)

    for _ in range(knt):
        beta *= safmin

    return beta, tau


def householder_reflector(
    n: int, alpha: float, x, incx: int = 1
) -> ReflectorResult:
    r"""
    Generate an elementary reflector.

    Finds :math:`H = I - \tau \begin{pmatrix} 1 \\ v \end{pmatrix}
    \begin{pmatrix} 1 & v^T \end{pmatrix}` such that

    .. math::

        H \begin{pmatrix} \alpha \\ x \end{pmatrix} =
        \begin{pmatrix} \beta \\ 0 \end{pmatrix}, \qquad H^T H = I.

    Parameters
    ----------
    n : int
        Order of the reflector.
    alpha : float
        Leading entry of the vector to reflect.
    x : Tensor, numpy.ndarray, list or IndexedArray
        Holds the ``n - 1`` trailing entries, ``incx`` apart. Overwritten
        in place with :math:`v`.
    incx : int, optional
        Increment between the entries of ``x``.

    Returns
    -------
    ReflectorResult
        A named tuple containing:

        - **beta** (*float*) - Reflected leading entry,
          :math:`-\operatorname{sign}(\alpha)\lVert(\alpha, x)\rVert`.
          Equals ``alpha`` when ``tau`` is zero.
        - **tau** (*float*) - Scalar factor, :math:`0 \le \tau \le 2`.
          It is zero exactly when the reflector is the identity, which
          happens for ``n <= 1`` and for :math:`x = 0`, and otherwise
          :math:`1 \le \tau \le 2`.

    Notes
    -----
    When :math:`|\beta|` is below :math:`S / \epsilon` (``S`` the safe
    minimum), ``alpha`` and ``x`` are rescaled by :math:`\epsilon / S` up to
    20 times before recomputing :math:`\beta`, and the scaling is undone on
    :math:`\beta` alone.

    Examples
    --------
    >>> x = [4.0]
    >>> householder_reflector(2, 3.0, x)
    ReflectorResult(beta=-5.0, tau=1.6)
    >>> x
    [0.5]
    """
    working = as_indexed_vector(x)

    beta, tau = generate_reflector(n, alpha, working.data, incx)

    write_back(x, working)

    return ReflectorResult(beta=beta, tau=tau)
