import math
from typing import NamedTuple

from torchlapack.auxiliary._pythagorean_sum import pythagorean_sum
from torchlapack.machine import machine_parameter

# A discriminant below MULTPL * eps postpones the real/complex decision.
_MULTPL = 4.0
_MAX_RESCALINGS = 20


class Schur2x2(NamedTuple):
    a: float
    b: float
    c: float
    d: float
    rt1r: float
    rt1i: float
    rt2r: float
    rt2i: float
    cs: float
    sn: float


def _sign(a: float, b: float) -> float:
    return math.copysign(abs(a), b)


def standardize_schur_2x2(
    a: float, b: float, c: float, d: float
) -> Schur2x2:
    r"""
    Schur factorization of a real 2x2 nonsymmetric matrix in standard form.

    Computes a rotation such that

    .. math::

        \begin{pmatrix} a & b \\ c & d \end{pmatrix} =
        \begin{pmatrix} cs & -sn \\ sn & cs \end{pmatrix}
        \begin{pmatrix} aa & bb \\ cc & dd \end{pmatrix}
        \begin{pmatrix} cs & sn \\ -sn & cs \end{pmatrix}

    where either

    1. :math:`cc = 0`, so that :math:`aa` and :math:`dd` are the real
       eigenvalues, or
    2. :math:`aa = dd` and :math:`bb \cdot cc < 0`, so that
       :math:`aa \pm \sqrt{bb \cdot cc}` are complex conjugate eigenvalues.

    Parameters
    ----------
    a, b, c, d : float
        Entries of the input matrix, row by row.

    Returns
    -------
    Schur2x2
        A named tuple containing:

        - **a**, **b**, **c**, **d** (*float*) - The standardized block.
        - **rt1r**, **rt1i**, **rt2r**, **rt2i** (*float*) - Real and
          imaginary parts of the eigenvalues. A complex pair is returned
          with ``rt1i > 0``.
        - **cs**, **sn** (*float*) - The rotation.

    Notes
    -----
    Cases are tried in order: ``c == 0`` (nothing to do), ``b == 0`` (swap
    rows and columns), exactly equal diagonal with opposite off-diagonal
    signs (already standard), and the general case. A diagonal that is
    only nearly equal goes through the general case, so the test does not
    depend on the scale of the entries. In the general case the discriminant is formed
    with scaled arithmetic, and the equal-diagonal reduction rescales
    :math:`a - d` and :math:`b + c` by powers of the radix, at most 20
    times, to keep them away from overflow and underflow.

    Examples
    --------
    >>> result = standardize_schur_2x2(2.0, 3.0, 3.0, 2.0)
    >>> round(result.a, 12), round(result.d, 12)
    (5.0, -1.0)
    """
    eps = machine_parameter("P")
    safmin = machine_parameter("S")
    base = machine_parameter("B")

    safmn2 = base ** int(math.log(safmin / eps) / math.log(base) / 2.0)
    safmx2 = 1.0 / safmn2

    if c == 0.0:
        cs = 1.0
        sn = 0.0
    elif b == 0.0:
        cs = 0.0
        sn = 1.0
        a, d = d, a
        b = -c
        c = 0.0
    elif a - d == 0.0 and _sign(1.0, b) != _sign(1.0, c):
        cs = 1.0
        sn = 0.0
    else:
        temp = a - d
        p = 0.5 * temp
        bcmax = max(abs(b), abs(c))
        bcmis = min(abs(b), abs(c)) * _sign(1.0, b) * _sign(1.0, c)
        scale = max(abs(p), bcmax)
        z = (p / scale) * p + (bcmax / scale) * bcmis

        if z >= _MULTPL * eps:
            # Real eigenvalues.
            z = p + _sign(math.sqrt(scale) * math.sqrt(z), p)
            a = d + z
            d = d - (bcmax / z) * bcmis

            tau = pythagorean_sum(c, z)
            cs = z / tau
            sn = c / tau
            b = b - c
            c = 0.0
        else:
            # Complex or almost equal real eigenvalues: equalize the
            # diagonal.
            count = 0
            sigma = b + c

            while True:
                count += 1
                scale = max(abs(temp), abs(sigma))

                if scale >= safmx2:
                    sigma *= safmn2
                    temp *= safmn2

                    if count <= _MAX_RESCALINGS:
                        continue

                if scale <= safmn2:
                    sigma *= safmx2
                    temp *= safmx2

                    if count <= _MAX_RESCALINGS:
                        continue

                break

            p = 0.5 * temp
            tau = pythagorean_sum(sigma, temp)
            cs = math.sqrt(0.5 * (1.0 + abs(sigma) / tau))
            sn = -(p / (tau * cs)) * _sign(1.0, sigma)

            aa = a * cs + b * sn
            bb = -a * sn + b * cs
            cc = c * cs + d * sn
            dd = -c * sn + d * cs

            a = aa * cs + cc * sn
            b = bb * cs + dd * sn
            c = -aa * sn + cc * cs
            d = -bb * sn + dd * cs

            temp = 0.5 * (a + d)
            a = temp
            d = temp

            if c != 0.0:
                if b != 0.0:
                    if _sign(1.0, b) == _sign(1.0, c):
                        # Real eigenvalues after all: reduce to upper
                        # triangular form.
                        sab = math.sqrt(abs(b))
                        sac = math.sqrt(abs(c))
                        p = _sign(sab * sac, c)
                        tau = 1.0 / math.sqrt(abs(b + c))
                        a = temp + p
                        d = temp - p
                        b = b - c
                        c = 0.0

                        cs1 = sab * tau
                        sn1 = sac * tau
                        temp = cs * cs1 - sn * sn1
                        sn = cs * sn1 + sn * cs1
                        cs = temp
                else:
                    b = -c
                    c = 0.0
                    temp = cs
                    cs = -sn
                    sn = temp

    rt1r = a
    rt2r = d

    if c == 0.0:
        rt1i = 0.0
        rt2i = 0.0
    else:
        rt1i = math.sqrt(abs(b)) * math.sqrt(abs(c))
        rt2i = -rt1i

    return Schur2x2(
        a=a,
        b=b,
        c=c,
        d=d,
        rt1r=rt1r,
        rt1i=rt1i,
        rt2r=rt2r,
        rt2i=rt2i,
        cs=cs,
        sn=sn,
    )
