import enum
import math


class TuningParameter(enum.IntEnum):
    """Selectors understood by :func:`tuning_parameter`."""

    MINIMUM_SIZE = 12
    DEFLATION_WINDOW = 13
    NIBBLE = 14
    SHIFT_COUNT = 15
    ACCUMULATION = 16
    COST = 17


# Smallest active window handed to the multi-shift machinery.
_NMIN = 75
_K22MIN = 14
_KACMIN = 14
_NIBBLE = 14
# Windows above this size use a wider deflation window.
_KNWSWP = 500
_RCOST = 10


def _shift_count(nh: int) -> int:
    ns = 2

    if nh >= 30:
        ns = 4
    if nh >= 60:
        ns = 10
    if nh >= 150:
        ns = max(10, nh // int(math.floor(math.log2(nh) + 0.5)))
    if nh >= 590:
        ns = 64
    if nh >= 3000:
        ns = 128
    if nh >= 6000:
        ns = 256

    return max(2, ns - ns % 2)


def tuning_parameter(ispec: int, name: str, ilo: int, ihi: int) -> int:
    """
    Block sizes and shift counts for the multi-shift QR iteration.

    Parameters
    ----------
    ispec : int or TuningParameter
        Which parameter to return:

        - ``MINIMUM_SIZE`` - smallest window worth a multi-shift sweep
        - ``DEFLATION_WINDOW`` - recommended deflation window size
        - ``NIBBLE`` - percentage of deflations that skips a sweep
        - ``SHIFT_COUNT`` - number of simultaneous shifts (even, >= 2)
        - ``ACCUMULATION`` - how a sweep applies its reflections: ``0``
          one at a time, ``1`` accumulated into a dense block, ``2``
          accumulated with the block's 2x2 structure
        - ``COST`` - relative cost of a sweep against a deflation check
    name : str
        Name of the calling routine, upper- or lower-case. Only the
        ``ACCUMULATION`` answer depends on it.
    ilo, ihi : int
        Bounds of the active window.

    Returns
    -------
    int
        The recommended value, or ``-1`` for an unknown ``ispec``.
    """
    nh = ihi - ilo + 1

    if ispec == TuningParameter.MINIMUM_SIZE:
        return _NMIN

    if ispec == TuningParameter.NIBBLE:
        return _NIBBLE

    if ispec == TuningParameter.COST:
        return _RCOST

    if ispec not in (
        TuningParameter.SHIFT_COUNT,
        TuningParameter.DEFLATION_WINDOW,
        TuningParameter.ACCUMULATION,
    ):
        return -1

    ns = _shift_count(nh)

    if ispec == TuningParameter.SHIFT_COUNT:
        return ns

    if ispec == TuningParameter.DEFLATION_WINDOW:
        if nh <= _KNWSWP:
            return ns

        return 3 * ns // 2

    routine = name.upper()

    if routine[1:6] in ("GGHRD", "GGHD3"):
        return 2 if nh >= _K22MIN else 1

    if routine[3:6] == "EXC":
        if nh >= _K22MIN:
            return 2

        return 1 if nh >= _KACMIN else 0

    if routine[1:6] == "HSEQR" or routine[1:5] == "LAQR":
        if ns >= _K22MIN:
            return 2

        return 1 if ns >= _KACMIN else 0

    return 0
