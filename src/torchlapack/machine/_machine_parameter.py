import functools
import sys

import torch

from torchlapack.blas import same_letter


@functools.lru_cache(maxsize=None)
def _parameters() -> dict:
    finfo = torch.finfo(torch.float64)

    # Relative machine precision for rounding arithmetic.
    eps = finfo.eps * 0.5

    sfmin = finfo.tiny
    small = 1.0 / finfo.max

    if small >= sfmin:
        sfmin = small * (1.0 + eps)

    return {
        "E": eps,
        "S": sfmin,
        "B": float(sys.float_info.radix),
        "P": eps * sys.float_info.radix,
        "N": float(sys.float_info.mant_dig),
        "R": 1.0,
        "M": float(sys.float_info.min_exp),
        "U": finfo.tiny,
        "L": float(sys.float_info.max_exp),
        "O": finfo.max,
    }


def machine_parameter(cmach: str) -> float:
    """
    Double-precision machine parameters.

    Parameters
    ----------
    cmach : str
        Selector, compared case-insensitively on its first letter:

        - ``"E"`` - relative machine epsilon (rounding unit)
        - ``"S"`` - safe minimum, such that ``1/S`` does not overflow
        - ``"B"`` - base of the machine
        - ``"P"`` - ``E * B``, the precision
        - ``"N"`` - number of base digits in the mantissa
        - ``"R"`` - ``1.0`` since rounding occurs in addition
        - ``"M"`` - minimum exponent before gradual underflow
        - ``"U"`` - underflow threshold, ``B**(M-1)``
        - ``"L"`` - largest exponent before overflow
        - ``"O"`` - overflow threshold, ``(B**L)*(1-E)``

    Returns
    -------
    float
        The requested value, or ``0.0`` for an unknown selector.

    Examples
    --------
    >>> machine_parameter("e")
    1.1102230246251565e-16
    >>> machine_parameter("P")
    2.220446049250313e-16
    """
    for key, value in _parameters().items():
        if same_letter(cmach, key):
            return value

    return 0.0
