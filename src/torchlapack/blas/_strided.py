import numpy


def strided(x: numpy.ndarray, n: int, inc: int) -> numpy.ndarray:
    """View of the ``n`` elements of ``x`` visited with increment ``inc``.

    A negative increment walks the same storage from the far end, so the
    first logical element sits at ``(n - 1) * abs(inc)``.
    """
    if n <= 0:
        return x[:0]

    if inc == 0:
        return x[:1]

    step = abs(inc)
    view = x[: (n - 1) * step + 1 : step]

    if inc < 0:
        return view[::-1]

    return view
