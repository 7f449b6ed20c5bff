import math

from torchlapack.machine import machine_parameter


def pythagorean_sum(x: float, y: float) -> float:
    r"""
    Compute :math:`\sqrt{x^2 + y^2}` without unnecessary overflow.

    NaN inputs propagate (``y`` wins when both are NaN), and an infinite
    argument yields infinity.

    Examples
    --------
    >>> pythagorean_sum(3.0, 4.0)
    5.0
    >>> pythagorean_sum(1e300, 1e300)
    1.4142135623730952e+300
    """
    x_is_nan = math.isnan(x)
    y_is_nan = math.isnan(y)

    if y_is_nan:
        return y

    if x_is_nan:
        return x

    x_abs = abs(x)
    y_abs = abs(y)

    w = max(x_abs, y_abs)
    z = min(x_abs, y_abs)

    if z == 0.0 or w > machine_parameter("O"):
        return w

    return w * math.sqrt(1.0 + (z / w) ** 2)
