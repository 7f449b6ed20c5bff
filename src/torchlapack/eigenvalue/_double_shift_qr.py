import enum
import math
from typing import Optional, Tuple

from torchlapack.auxiliary import standardize_schur_2x2
from torchlapack.auxiliary._householder_reflector import generate_reflector
from torchlapack.blas import copy, plane_rotation
from torchlapack.eigenvalue._reflection import (
    apply_from_left,
    apply_from_right,
)
from torchlapack.indexed_array import (
    IndexedArray,
    as_indexed_matrix,
    as_indexed_vector,
    write_back,
)
from torchlapack.machine import machine_parameter

# A window of nh rows may take _ITERATIONS_PER_ROW * max(_MINIMUM_ROWS, nh)
# steps.
_ITERATIONS_PER_ROW = 30
_MINIMUM_ROWS = 10

# Exceptional shifts every _KEXSH iterations without deflation.
_KEXSH = 10
_DAT1 = 3.0 / 4.0
_DAT2 = -0.4375

Shifts = Tuple[float, float, float, float]


def iteration_limit(nh: int) -> int:
    """Double-shift steps allowed before a window of ``nh`` rows stalls."""
    return _ITERATIONS_PER_ROW * max(_MINIMUM_ROWS, nh)


def find_split(
    h: IndexedArray,
    l: int,
    i: int,
    ilo: int,
    ihi: int,
    smlnum: float,
    ulp: float,
) -> int:
    """
    Row ``k`` in ``l + 1..i`` of the bottom-most negligible ``H(k, k-1)``.

    Returns ``l`` when no subdiagonal entry in the range is negligible. An
    entry is negligible when it is below ``smlnum``, or when it is small
    relative to its diagonal neighbours and passes the more conservative
    test of Ahues and Kressner on the surrounding 2x2 block.
    """
    for k in range(i, l, -1):
        hkk1 = abs(h[k, k - 1])

        if hkk1 <= smlnum:
            return k

        tst = abs(h[k - 1, k - 1]) + abs(h[k, k])

        if tst == 0.0:
            if k - 2 >= ilo:
                tst += abs(h[k - 1, k - 2])
            if k + 1 <= ihi:
                tst += abs(h[k + 1, k])

        if hkk1 <= ulp * tst:
            ab = max(hkk1, abs(h[k - 1, k]))
            ba = min(hkk1, abs(h[k - 1, k]))
            aa = max(abs(h[k, k]), abs(h[k - 1, k - 1] - h[k, k]))
            bb = min(abs(h[k, k]), abs(h[k - 1, k - 1] - h[k, k]))
            s = aa + ab

            if ba * (ab / s) <= max(smlnum, ulp * (bb * (aa / s))):
                return k

    return l


class _Phase(enum.Enum):
    SCAN = enum.auto()
    ITERATE = enum.auto()
    SOLVE_2X2 = enum.auto()
    DEFLATE = enum.auto()
    CONVERGED = enum.auto()
    STALLED = enum.auto()


class DoubleShiftQR:
    """
    Double-shift QR iteration on an indexed Hessenberg matrix.

    The iteration is a state machine over the active window ``[l, i]``:

    - ``SCAN`` looks for a negligible subdiagonal entry from the bottom of
      the window up and moves ``l`` below it.
    - ``ITERATE`` chases one double-shift bulge through ``[l, i]``.
    - ``SOLVE_2X2`` standardizes a trailing 2x2 block.
    - ``DEFLATE`` records converged eigenvalues and shrinks the window
      to ``[ilo, l - 1]``.

    It ends in ``CONVERGED`` once the window is empty, or in ``STALLED``
    when a window exhausts its iteration budget.

    Parameters are those of :func:`double_shift_qr`, with ``h``, ``wr``,
    ``wi`` and ``z`` given as indexed arrays that are updated in place.

    Attributes
    ----------
    iterations : int
        Double-shift steps performed so far.
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

        self.iterations = 0
        self.info = 0

        nh = ihi - ilo + 1

        self._ulp = machine_parameter("P")
        self._smlnum = machine_parameter("S") * (nh / self._ulp)
        self._itmax = iteration_limit(nh)

        self._i = ihi
        self._l = ilo
        self._its = 0
        self._kdefl = 0

        # Rows and columns touched by each transformation.
        if wantt:
            self._i1, self._i2 = 1, n
        else:
            self._i1, self._i2 = ilo, ihi

    def run(self) -> int:
        """Iterate until every eigenvalue in ``[ilo, ihi]`` has converged."""
        h = self.h

        if self.n == 0:
            return 0

        if self.ilo == self.ihi:
            self.wr[self.ilo] = h[self.ilo, self.ilo]
            self.wi[self.ilo] = 0.0
            return 0

        for j in range(self.ilo, self.ihi - 2):
            h[j + 2, j] = 0.0
            h[j + 3, j] = 0.0

        if self.ilo <= self.ihi - 2:
            h[self.ihi, self.ihi - 2] = 0.0

        transitions = {
            _Phase.SCAN: self._scan,
            _Phase.ITERATE: self._iterate,
            _Phase.SOLVE_2X2: self._solve_2x2,
            _Phase.DEFLATE: self._deflate,
        }

        phase = _Phase.SCAN

        while phase not in (_Phase.CONVERGED, _Phase.STALLED):
            phase = transitions[phase]()

        if phase is _Phase.STALLED:
            self.info = self._i

        return self.info

    def _scan(self) -> _Phase:
        if self._i < self.ilo:
            return _Phase.CONVERGED

        if self._its > self._itmax:
            return _Phase.STALLED

        self._l = find_split(
            self.h,
            self._l,
            self._i,
            self.ilo,
            self.ihi,
            self._smlnum,
            self._ulp,
        )

        if self._l > self.ilo:
            self.h[self._l, self._l - 1] = 0.0

        if self._l == self._i - 1:
            return _Phase.SOLVE_2X2

        if self._l >= self._i:
            return _Phase.DEFLATE

        return _Phase.ITERATE

    def _iterate(self) -> _Phase:
        self._kdefl += 1
        self._its += 1
        self.iterations += 1

        if not self.wantt:
            self._i1, self._i2 = self._l, self._i

        v = IndexedArray.zeros(3)

        m = self._bulge_start(self._shifts(), v)

        self._chase(m, v)

        return _Phase.SCAN

    def _shifts(self) -> Shifts:
        """Shifts for the next step, as ``(rt1r, rt1i, rt2r, rt2i)``."""
        h = self.h
        i = self._i
        l = self._l

        if self._kdefl % (2 * _KEXSH) == 0:
            s = abs(h[i, i - 1]) + abs(h[i - 1, i - 2])
            h11 = _DAT1 * s + h[i, i]
            h12 = _DAT2 * s
            h21 = s
            h22 = h11
        elif self._kdefl % _KEXSH == 0:
            s = abs(h[l + 1, l]) + abs(h[l + 2, l + 1])
            h11 = _DAT1 * s + h[l, l]
            h12 = _DAT2 * s
            h21 = s
            h22 = h11
        else:
            h11 = h[i - 1, i - 1]
            h21 = h[i, i - 1]
            h12 = h[i - 1, i]
            h22 = h[i, i]

        s = abs(h11) + abs(h12) + abs(h21) + abs(h22)

        if s == 0.0:
            return 0.0, 0.0, 0.0, 0.0

        h11 /= s
        h21 /= s
        h12 /= s
        h22 /= s

        tr = (h11 + h22) / 2.0
        det = (h11 - tr) * (h22 - tr) - h12 * h21
        rtdisc = math.sqrt(abs(det))

        if det >= 0.0:
            # Complex conjugate shifts.
            return tr * s, rtdisc * s, tr * s, -rtdisc * s

        # Real shifts: use the one closer to h22 twice.
        rt1r = tr + rtdisc
        rt2r = tr - rtdisc

        if abs(rt1r - h22) <= abs(rt2r - h22):
            shift = rt1r * s
        else:
            shift = rt2r * s

        return shift, 0.0, shift, 0.0

    def _bulge_start(self, shifts: Shifts, v: IndexedArray) -> int:
        """First row ``m`` from which a bulge creates negligible fill.

        Leaves the scaled first column of the shifted polynomial at ``m``
        in ``v``.
        """
        h = self.h
        rt1r, rt1i, rt2r, rt2i = shifts

        for m in range(self._i - 2, self._l - 1, -1):
            h21s = h[m + 1, m]
            s = abs(h[m, m] - rt2r) + abs(rt2i) + abs(h21s)
            h21s = h[m + 1, m] / s

            v[1] = (
                h21s * h[m, m + 1]
                + (h[m, m] - rt1r) * ((h[m, m] - rt2r) / s)
                - rt1i * (rt2i / s)
            )
            v[2] = h21s * (h[m, m] + h[m + 1, m + 1] - rt1r - rt2r)
            v[3] = h21s * h[m + 2, m + 1]

            s = abs(v[1]) + abs(v[2]) + abs(v[3])

            v[1] = v[1] / s
            v[2] = v[2] / s
            v[3] = v[3] / s

            if m == self._l:
                return m

            h00 = abs(h[m, m - 1]) * (abs(v[2]) + abs(v[3]))
            h01 = (
                self._ulp
                * abs(v[1])
                * (abs(h[m - 1, m - 1]) + abs(h[m, m]) + abs(h[m + 1, m + 1]))
            )

            if h00 <= h01:
                return m

        return self._l

    def _chase(self, m: int, v: IndexedArray) -> None:
        """Chase the bulge seeded by ``v`` from row ``m`` to the bottom."""
        h = self.h
        i = self._i

        for k in range(m, i):
            nr = min(3, i - k + 1)

            if k > m:
                copy(nr, h.slice_from(k, k - 1), 1, v.data, 1)

            beta, t1 = generate_reflector(nr, v[1], v.slice_from(2), 1)
            v[1] = beta

            if k > m:
                h[k, k - 1] = v[1]
                h[k + 1, k - 1] = 0.0

                if k < i - 1:
                    h[k + 2, k - 1] = 0.0
            elif m > self._l:
                # Multiplying by (1 - t1) rather than negating avoids trouble
                # when v(2) and v(3) underflow.
                h[k, k - 1] = h[k, k - 1] * (1.0 - t1)

            v2 = v[2]
            v3 = v[3] if nr == 3 else None

            apply_from_left(h, k, k, self._i2, v2, v3, t1)

            last_row = min(k + 3, i) if nr == 3 else i
            apply_from_right(h, k, self._i1, last_row, v2, v3, t1)

            if self.wantz:
                apply_from_right(
                    self.z, k, self.iloz, self.ihiz, v2, v3, t1
                )

    def _solve_2x2(self) -> _Phase:
        h = self.h
        i = self._i

        schur = standardize_schur_2x2(
            h[i - 1, i - 1], h[i - 1, i], h[i, i - 1], h[i, i]
        )

        h[i - 1, i - 1] = schur.a
        h[i - 1, i] = schur.b
        h[i, i - 1] = schur.c
        h[i, i] = schur.d

        self.wr[i - 1] = schur.rt1r
        self.wi[i - 1] = schur.rt1i
        self.wr[i] = schur.rt2r
        self.wi[i] = schur.rt2i

        if self.wantt:
            ldh = h.rows

            if self._i2 > i:
                plane_rotation(
                    self._i2 - i,
                    h.slice_from(i - 1, i + 1),
                    ldh,
                    h.slice_from(i, i + 1),
                    ldh,
                    schur.cs,
                    schur.sn,
                )

            plane_rotation(
                i - self._i1 - 1,
                h.slice_from(self._i1, i - 1),
                1,
                h.slice_from(self._i1, i),
                1,
                schur.cs,
                schur.sn,
            )

        if self.wantz:
            plane_rotation(
                self.ihiz - self.iloz + 1,
                self.z.slice_from(self.iloz, i - 1),
                1,
                self.z.slice_from(self.iloz, i),
                1,
                schur.cs,
                schur.sn,
            )

        return _Phase.DEFLATE

    def _deflate(self) -> _Phase:
        i = self._i

        if self._l == i:
            self.wr[i] = self.h[i, i]
            self.wi[i] = 0.0

        self._kdefl = 0
        self._its = 0
        self._i = self._l - 1
        self._l = self.ilo

        return _Phase.SCAN


def double_shift_qr(
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
    ldh: Optional[int] = None,
    ldz: Optional[int] = None,
) -> int:
    r"""
    Eigenvalues and Schur form of an upper Hessenberg matrix.

    Runs the double-shift implicit QR algorithm on the active window
    ``H(ilo:ihi, ilo:ihi)``, which is assumed to be already isolated, i.e.
    ``H(ilo, ilo-1)`` and ``H(ihi+1, ihi)`` are zero. All indices are
    one-based.

    Parameters
    ----------
    wantt : bool
        If ``True`` the full quasi-triangular Schur form ``T`` is computed
        in ``h``; otherwise only the eigenvalues are.
    wantz : bool
        If ``True`` the transformations are accumulated into ``z``.
    n : int
        Order of ``H``.
    ilo, ihi : int
        Active window, ``1 <= ilo <= ihi <= n`` (or ``ilo = 1, ihi = 0``
        for ``n = 0``).
    h : Tensor, numpy.ndarray, list or IndexedArray
        The ``n`` by ``n`` upper Hessenberg matrix, 2-D or flat
        column-major with leading dimension ``ldh``. Overwritten with
        ``T`` when ``wantt`` is set. Entries below the first subdiagonal
        of the window are set to zero.
    wr, wi : Tensor, numpy.ndarray, list or IndexedArray
        Vectors of length ``n`` receiving the real and imaginary parts of
        the eigenvalues ``ilo..ihi``. Complex conjugate pairs are stored
        consecutively with the positive imaginary part first. With
        ``wantt`` they appear in the order of the diagonal of ``T``.
    iloz, ihiz : int
        Rows of ``z`` the transformations are applied to,
        ``1 <= iloz <= ilo`` and ``ihi <= ihiz <= n``.
    z : Tensor, numpy.ndarray, list or IndexedArray, optional
        Matrix multiplied on the right by the orthogonal transformation.
        Only referenced when ``wantz`` is set.
    ldh, ldz : int, optional
        Leading dimensions of flat ``h`` and ``z``.

    Returns
    -------
    int
        ``0`` on success. A positive value ``i`` means the iteration failed
        to converge within ``30 * max(10, ihi - ilo + 1)`` steps for the
        window ending at row ``i``. Eigenvalues ``i+1..ihi`` are then
        correct, and ``h`` and ``z`` still hold a consistent similarity
        transformation.

    Raises
    ------
    ValueError
        If ``wantz`` is set but ``z`` is missing.

    Notes
    -----
    Shifts are the eigenvalues of the trailing 2x2 block, except after
    every 10th step without deflation, when ad hoc exceptional shifts
    break cycles. A subdiagonal entry is considered negligible according
    to the criterion of Ahues and Kressner, which is scale invariant.

    Results are written back into ``h``, ``wr``, ``wi`` and ``z`` once,
    after the iteration finishes.

    Examples
    --------
    >>> h = [[2.0, 3.0], [3.0, 2.0]]
    >>> wr, wi = [0.0, 0.0], [0.0, 0.0]
    >>> double_shift_qr(True, False, 2, 1, 2, h, wr, wi, 1, 2)
    0
    >>> [round(value, 12) for value in wr]
    [5.0, -1.0]
    """
    if wantz and z is None:
        raise ValueError("z is required when wantz is set")

    hh = as_indexed_matrix(h, ldh)
    wrr = as_indexed_vector(wr)
    wii = as_indexed_vector(wi)
    zz = as_indexed_matrix(z, ldz) if wantz else None

    info = DoubleShiftQR(
        wantt, wantz, n, ilo, ihi, hh, wrr, wii, iloz, ihiz, zz
    ).run()

    write_back(h, hh)
    write_back(wr, wrr)
    write_back(wi, wii)

    if zz is not None:
        write_back(z, zz)

    return info
