from typing import List, Optional, Tuple

from torchlapack.auxiliary import copy_matrix, standardize_schur_2x2
from torchlapack.eigenvalue._double_shift_qr import (
    DoubleShiftQR,
    find_split,
    iteration_limit,
)
from torchlapack.eigenvalue._multishift_sweep import sweep
from torchlapack.indexed_array import (
    IndexedArray,
    as_indexed_matrix,
    as_indexed_vector,
    write_back,
)
from torchlapack.machine import (
    TuningParameter,
    machine_parameter,
    tuning_parameter,
)

# Routine name under which tuning parameters are looked up.
_ROUTINE = "DLAQR0"

# Windows smaller than this always go to the double-shift kernel.
_NTINY = 15

# Exceptional shifts every _KEXSH sweeps without deflation.
_KEXSH = 6
_WILK1 = 0.75
_WILK2 = -0.4375


class MultishiftQR:
    """
    Multi-shift QR iteration on an indexed Hessenberg matrix.

    Splits the active window at negligible subdiagonal entries, finishes
    blocks smaller than ``nmin`` with :class:`DoubleShiftQR` and reduces
    larger ones with multi-shift sweeps.

    Parameters are those of :func:`multishift_qr`, with ``h``, ``wr``,
    ``wi`` and ``z`` given as indexed arrays that are updated in place.

    Attributes
    ----------
    iterations : int
        Multi-shift sweeps plus double-shift steps performed so far.
    sweeps : int
        Multi-shift sweeps performed so far.
    info : int
        ``0``, or the row at which the iteration stalled.
    """

    def __init__(
        self,
        wantt: bool,
        wantz: bool,
        n: int,
        ilo: int,
        ihi: int,
        h: IndexedArray,
        wr: IndexedArray,
        wi: IndexedArray,
        iloz: int,
        ihiz: int,
        z: Optional[IndexedArray],
        nmin: Optional[int] = None,
        kacc22: Optional[int] = None,
    ):
        self.wantt = wantt
        self.wantz = wantz
        self.n = n
        self.ilo = ilo
        self.ihi = ihi
        self.h = h
        self.wr = wr
        self.wi = wi
        self.iloz = iloz
        self.ihiz = ihiz
        self.z = z

        if nmin is None:
            nmin = tuning_parameter(
                TuningParameter.MINIMUM_SIZE, _ROUTINE, ilo, ihi
            )

        if kacc22 is None:
            kacc22 = tuning_parameter(
                TuningParameter.ACCUMULATION, _ROUTINE, ilo, ihi
            )

        self.nmin = max(_NTINY, nmin)
        self.kacc22 = kacc22

        self.iterations = 0
        self.sweeps = 0
        self.info = 0

    def _finish(self, ktop: int, kbot: int) -> int:
        kernel = DoubleShiftQR(
            self.wantt,
            self.wantz,
            self.n,
            ktop,
            kbot,
            self.h,
            self.wr,
            self.wi,
            self.iloz,
            self.ihiz,
            self.z,
        )

        info = kernel.run()

        self.iterations += kernel.iterations

        return info

    def run(self) -> int:
        """Iterate until every eigenvalue in ``[ilo, ihi]`` has converged."""
        h = self.h
        ilo = self.ilo
        ihi = self.ihi

        if self.n == 0:
            return 0

        nh = ihi - ilo + 1

        if nh < self.nmin:
            self.info = self._finish(ilo, ihi)
            return self.info

        ulp = machine_parameter("P")
        smlnum = machine_parameter("S") * (nh / ulp)

        nsmax = tuning_parameter(
            TuningParameter.SHIFT_COUNT, _ROUTINE, ilo, ihi
        )

        kbot = ihi
        ndfl = 1

        for _ in range(iteration_limit(nh)):
            if kbot < ilo:
                return 0

            ktop = find_split(h, ilo, kbot, ilo, ihi, smlnum, ulp)

            if ktop > ilo:
                h[ktop, ktop - 1] = 0.0

            if kbot - ktop + 1 < self.nmin:
                info = self._finish(ktop, kbot)

                if info > 0:
                    self.info = info
                    return info

                kbot = ktop - 1
                ndfl = 1
                continue

            ns = max(2, min(nsmax, kbot - ktop))
            ns -= ns % 2

            if ndfl % _KEXSH == 0:
                sr, si = self._exceptional_shifts(kbot - ns + 1, ktop, kbot)
            else:
                sr, si = self._trailing_shifts(ns, kbot)

            ns = len(sr) - len(sr) % 2
            sr = IndexedArray.vector(sr[len(sr) - ns :])
            si = IndexedArray.vector(si[len(si) - ns :])

            sweep(
                self.wantt,
                self.wantz,
                self.kacc22,
                self.n,
                ktop,
                kbot,
                ns,
                sr,
                si,
                h,
                self.iloz,
                self.ihiz,
                self.z,
            )

            self.sweeps += 1
            self.iterations += 1
            ndfl += 1

        if kbot < ilo:
            return 0

        self.info = kbot

        return self.info

    def _exceptional_shifts(
        self, ks: int, ktop: int, kbot: int
    ) -> Tuple[List[float], List[float]]:
        h = self.h
        sr = [0.0] * (kbot - ks + 1)
        si = [0.0] * (kbot - ks + 1)

        for i in range(kbot, max(ks + 1, ktop + 2) - 1, -2):
            ss = abs(h[i, i - 1]) + abs(h[i - 1, i - 2])
            aa = _WILK1 * ss + h[i, i]
            schur = standardize_schur_2x2(aa, ss, _WILK2 * ss, aa)

            sr[i - ks - 1], si[i - ks - 1] = schur.rt1r, schur.rt1i
            sr[i - ks], si[i - ks] = schur.rt2r, schur.rt2i

        return sr, si

    def _trailing_shifts(
        self, ns: int, kbot: int
    ) -> Tuple[List[float], List[float]]:
        """Eigenvalues of the trailing ``ns`` by ``ns`` block, paired."""
        h = self.h
        ks = kbot - ns + 1

        block = IndexedArray.zeros(ns, ns)
        copy_matrix(
            "ALL", ns, ns, h.slice_from(ks, ks), h.rows, block.data, ns
        )

        wr = IndexedArray.zeros(ns)
        wi = IndexedArray.zeros(ns)

        info = DoubleShiftQR(
            False, False, ns, 1, ns, block, wr, wi, 1, 1, None
        ).run()

        # Only eigenvalues info+1..ns of the block are reliable.
        sr = wr.data[info:].tolist()
        si = wi.data[info:].tolist()

        if len(sr) < 2:
            schur = standardize_schur_2x2(
                h[kbot - 1, kbot - 1],
                h[kbot - 1, kbot],
                h[kbot, kbot - 1],
                h[kbot, kbot],
            )
            sr = [schur.rt1r, schur.rt2r]
            si = [schur.rt1i, schur.rt2i]

        # Bubble sort by decreasing magnitude, which keeps conjugate pairs
        # adjacent.
        for last in range(len(sr) - 1, 0, -1):
            swapped = False

            for i in range(last):
                if abs(sr[i]) + abs(si[i]) < abs(sr[i + 1]) + abs(si[i + 1]):
                    sr[i], sr[i + 1] = sr[i + 1], sr[i]
                    si[i], si[i + 1] = si[i + 1], si[i]
                    swapped = True

            if not swapped:
                break

        # Pair up real shifts.
        for i in range(len(sr) - 1, 1, -2):
            if si[i] != -si[i - 1]:
                sr[i], sr[i - 1], sr[i - 2] = sr[i - 1], sr[i - 2], sr[i]
                si[i], si[i - 1], si[i - 2] = si[i - 1], si[i - 2], si[i]

        # Two real shifts: use the one closer to H(kbot, kbot) twice.
        if len(sr) == 2 and si[1] == 0.0:
            if abs(sr[1] - h[kbot, kbot]) < abs(sr[0] - h[kbot, kbot]):
                sr[0] = sr[1]
            else:
                sr[1] = sr[0]

        return sr, si


def multishift_qr(
    wantt: bool,
    wantz: bool,
    n: int,
    ilo: int,
    ihi: int,
    h,
    wr,
    wi,
    iloz: int,
    ihiz: int,
    z=None,
    *,
    nmin: Optional[int] = None,
    kacc22: Optional[int] = None,
    ldh: Optional[int] = None,
    ldz: Optional[int] = None,
) -> int:
    r"""
    Eigenvalues and Schur form of an upper Hessenberg matrix by multi-shift QR.

    Arguments and result are those of :func:`double_shift_qr`. Windows of
    at least ``nmin`` rows are reduced with :func:`multishift_sweep`, each
    sweep chasing as many bulges as :func:`~torchlapack.machine.
    tuning_parameter` recommends; smaller blocks, including every block
    split off at a negligible subdiagonal entry, are finished by the
    double-shift iteration.

    Parameters
    ----------
    nmin : int, optional
        Smallest window handled with multi-shift sweeps, at least 15.
        Defaults to the ``MINIMUM_SIZE`` tuning parameter (75).
    kacc22 : int, optional
        Accumulation mode passed to :func:`multishift_sweep`. Defaults to
        the ``ACCUMULATION`` tuning parameter.

    Returns
    -------
    int
        ``0`` on success, otherwise the row at which the iteration stalled.

    Notes
    -----
    Shifts are the eigenvalues of the trailing block of the window, sorted
    by decreasing magnitude and arranged in real or conjugate pairs. After
    every sixth sweep without deflation exceptional shifts are used
    instead. No aggressive early deflation is performed.
    """
    if wantz and z is None:
        raise ValueError("z is required when wantz is set")

    hh = as_indexed_matrix(h, ldh)
    wrr = as_indexed_vector(wr)
    wii = as_indexed_vector(wi)
    zz = as_indexed_matrix(z, ldz) if wantz else None

    info = MultishiftQR(
        wantt,
        wantz,
        n,
        ilo,
        ihi,
        hh,
        wrr,
        wii,
        iloz,
        ihiz,
        zz,
        nmin=nmin,
        kacc22=kacc22,
    ).run()

    write_back(h, hh)
    write_back(wr, wrr)
    write_back(wi, wii)

    if zz is not None:
        write_back(z, zz)

    return info
