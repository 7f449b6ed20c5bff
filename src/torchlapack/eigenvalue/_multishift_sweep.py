from typing import Optional

from torchlapack.auxiliary import copy_matrix, set_matrix
from torchlapack.auxiliary._householder_reflector import generate_reflector
from torchlapack.auxiliary._shift_vector import shifted_first_column
from torchlapack.blas import matrix_multiply
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


def _truncating_division(a: int, b: int) -> int:
    return int(a / b)


def _shuffle_shifts(nshfts: int, sr: IndexedArray, si: IndexedArray) -> None:
    # Rotate each triple whose leading pair is not conjugate, so that a
    # real shift moves to the end and the remaining shifts stay paired.
    for i in range(1, nshfts - 1, 2):
        if si[i] != -si[i + 1]:
            sr[i], sr[i + 1], sr[i + 2] = sr[i + 1], sr[i + 2], sr[i]
            si[i], si[i + 1], si[i + 2] = si[i + 1], si[i + 2], si[i]


def _vigilant_deflation(
    h: IndexedArray,
    k: int,
    ktop: int,
    kbot: int,
    smlnum: float,
    ulp: float,
) -> None:
    """Set ``H(k+1, k)`` to zero if it passed below the deflation threshold."""
    if k < ktop or h[k + 1, k] == 0.0:
        return

    tst1 = abs(h[k, k]) + abs(h[k + 1, k + 1])

    if tst1 == 0.0:
        if k >= ktop + 1:
            tst1 += abs(h[k, k - 1])
        if k >= ktop + 2:
            tst1 += abs(h[k, k - 2])
        if k >= ktop + 3:
            tst1 += abs(h[k, k - 3])
        if k <= kbot - 2:
            tst1 += abs(h[k + 2, k + 1])
        if k <= kbot - 3:
            tst1 += abs(h[k + 3, k + 1])
        if k <= kbot - 4:
            tst1 += abs(h[k + 4, k + 1])

    if abs(h[k + 1, k]) > max(smlnum, ulp * tst1):
        return

    h12 = max(abs(h[k + 1, k]), abs(h[k, k + 1]))
    h21 = min(abs(h[k + 1, k]), abs(h[k, k + 1]))
    h11 = max(abs(h[k + 1, k + 1]), abs(h[k, k] - h[k + 1, k + 1]))
    h22 = min(abs(h[k + 1, k + 1]), abs(h[k, k] - h[k + 1, k + 1]))
    scl = h11 + h12
    tst2 = h22 * (h11 / scl)

    if tst2 == 0.0 or h21 * (h12 / scl) <= max(smlnum, ulp * tst2):
        h[k + 1, k] = 0.0


def sweep(
    wantt: bool,
    wantz: bool,
    kacc22: int,
    n: int,
    ktop: int,
    kbot: int,
    nshfts: int,
    sr: IndexedArray,
    si: IndexedArray,
    h: IndexedArray,
    iloz: int,
    ihiz: int,
    z: Optional[IndexedArray],
    v: Optional[IndexedArray] = None,
    u: Optional[IndexedArray] = None,
    nv: Optional[int] = None,
    wv: Optional[IndexedArray] = None,
    nh: Optional[int] = None,
    wh: Optional[IndexedArray] = None,
) -> None:
    """Indexed-array kernel of :func:`multishift_sweep`.

    Missing scratch arrays are allocated here.
    """
    if nshfts < 2 or ktop >= kbot:
        return

    _shuffle_shifts(nshfts, sr, si)

    # An odd count drops the last shift, which the shuffle made real.
    ns = nshfts - nshfts % 2

    ulp = machine_parameter("P")
    smlnum = machine_parameter("S") * (n / ulp)

    accum = kacc22 in (1, 2)

    if ktop + 2 <= kbot:
        h[ktop + 2, ktop] = 0.0

    nbmps = ns // 2
    kdu = 4 * nbmps

    if v is None:
        v = IndexedArray.zeros(3, nbmps)
    if u is None:
        u = IndexedArray.zeros(kdu, kdu)
    if nv is None:
        nv = wv.rows if wv is not None else max(1, n)
    if wv is None:
        wv = IndexedArray.zeros(nv, kdu)
    if nh is None:
        nh = wh.cols if wh is not None else max(1, n)
    if wh is None:
        wh = IndexedArray.zeros(kdu, nh)

    ldh = h.rows

    def seed(order: int, block_row: int, m: int) -> tuple:
        # Shifted first column for bulge m, from H(block_row, block_row).
        block = IndexedArray.from_buffer(
            h.slice_from(block_row, block_row), ldh
        )

        return shifted_first_column(
            order,
            block,
            sr[2 * m - 1],
            si[2 * m - 1],
            sr[2 * m],
            si[2 * m],
        )

    for incol in range(ktop - 2 * nbmps + 1, kbot - 1, 2 * nbmps):
        # Updates from the right start at row jtop.
        if accum:
            jtop = max(ktop, incol)
        elif wantt:
            jtop = 1
        else:
            jtop = ktop

        ndcol = incol + kdu

        if accum:
            set_matrix("ALL", kdu, kdu, 0.0, 1.0, u.data, u.rows)

        # Left updates end at column jbot.
        if accum:
            jbot = min(ndcol, kbot)
        elif wantt:
            jbot = n
        else:
            jbot = kbot

        for krcol in range(incol, min(incol + 2 * nbmps - 1, kbot - 2) + 1):
            mtop = max(1, _truncating_division(ktop - krcol, 2) + 1)
            mbot = min(nbmps, (kbot - krcol - 1) // 2)
            m22 = mbot + 1
            bmp22 = mbot < nbmps and krcol + 2 * (m22 - 1) == kbot - 2

            if bmp22:
                # A 2x2 reflection at the bottom of the window.
                k = krcol + 2 * (m22 - 1)

                if k == ktop - 1:
                    v[1, m22], v[2, m22] = seed(2, k + 1, m22)
                    _, tau = generate_reflector(
                        2, v[1, m22], v.slice_from(2, m22), 1
                    )
                    v[1, m22] = tau
                else:
                    v[2, m22] = h[k + 2, k]
                    beta, tau = generate_reflector(
                        2, h[k + 1, k], v.slice_from(2, m22), 1
                    )
                    v[1, m22] = tau
                    h[k + 1, k] = beta
                    h[k + 2, k] = 0.0

                tau = v[1, m22]
                v2 = v[2, m22]

                apply_from_right(
                    h, k + 1, jtop, min(kbot, k + 3), v2, None, tau
                )
                apply_from_left(h, k + 1, k + 1, jbot, v2, None, tau)

                _vigilant_deflation(h, k, ktop, kbot, smlnum, ulp)

                if accum:
                    kms = k - incol
                    apply_from_right(
                        u, kms + 1, max(1, ktop - incol), kdu, v2, None, tau
                    )
                elif wantz:
                    apply_from_right(z, k + 1, iloz, ihiz, v2, None, tau)

            for m in range(mbot, mtop - 1, -1):
                k = krcol + 2 * (m - 1)

                if k == ktop - 1:
                    v[1, m], v[2, m], v[3, m] = seed(3, ktop, m)
                    _, tau = generate_reflector(
                        3, v[1, m], v.slice_from(2, m), 1
                    )
                    v[1, m] = tau
                else:
                    # Delayed transformation of the row below the bulge,
                    # whose first two entries are known to be zero.
                    t1 = v[1, m]
                    t2 = t1 * v[2, m]
                    t3 = t1 * v[3, m]
                    refsum = v[3, m] * h[k + 3, k + 2]
                    h[k + 3, k] = -refsum * t1
                    h[k + 3, k + 1] = -refsum * t2
                    h[k + 3, k + 2] = h[k + 3, k + 2] - refsum * t3

                    v[2, m] = h[k + 2, k]
                    v[3, m] = h[k + 3, k]
                    beta, tau = generate_reflector(
                        3, h[k + 1, k], v.slice_from(2, m), 1
                    )
                    v[1, m] = tau

                    if (
                        h[k + 3, k] != 0.0
                        or h[k + 3, k + 1] != 0.0
                        or h[k + 3, k + 2] == 0.0
                    ):
                        h[k + 1, k] = beta
                        h[k + 2, k] = 0.0
                        h[k + 3, k] = 0.0
                    else:
                        # The bulge collapsed. Reseed it unless the new
                        # reflector would create non-negligible fill.
                        vt = IndexedArray.zeros(3)
                        vt[1], vt[2], vt[3] = seed(3, k + 1, m)
                        _, vt_tau = generate_reflector(
                            3, vt[1], vt.slice_from(2), 1
                        )
                        vt[1] = vt_tau

                        t1 = vt[1]
                        t2 = t1 * vt[2]
                        t3 = t1 * vt[3]
                        refsum = h[k + 1, k] + vt[2] * h[k + 2, k]

                        fill = abs(h[k + 2, k] - refsum * t2) + abs(
                            refsum * t3
                        )
                        nearby = (
                            abs(h[k, k])
                            + abs(h[k + 1, k + 1])
                            + abs(h[k + 2, k + 2])
                        )

                        if fill > ulp * nearby:
                            h[k + 1, k] = beta
                            h[k + 2, k] = 0.0
                            h[k + 3, k] = 0.0
                        else:
                            h[k + 1, k] = h[k + 1, k] - refsum * t1
                            h[k + 2, k] = 0.0
                            h[k + 3, k] = 0.0
                            v[1, m], v[2, m], v[3, m] = vt[1], vt[2], vt[3]

                # The right update and the first column of the left update
                # are needed now for the deflation check. The rest of the
                # left update is delayed.
                tau = v[1, m]
                v2 = v[2, m]
                v3 = v[3, m]

                apply_from_right(h, k + 1, jtop, min(kbot, k + 3), v2, v3, tau)
                apply_from_left(h, k + 1, k + 1, k + 1, v2, v3, tau)

                _vigilant_deflation(h, k, ktop, kbot, smlnum, ulp)

            for m in range(mbot, mtop - 1, -1):
                k = krcol + 2 * (m - 1)

                apply_from_left(
                    h,
                    k + 1,
                    max(ktop, krcol + 2 * m),
                    jbot,
                    v[2, m],
                    v[3, m],
                    v[1, m],
                )

            if accum:
                # Z is updated with U after the block.
                for m in range(mbot, mtop - 1, -1):
                    k = krcol + 2 * (m - 1)
                    kms = k - incol
                    i2 = max(1, ktop - incol, kms - (krcol - incol) + 1)
                    i4 = min(kdu, krcol + 2 * (mbot - 1) - incol + 5)

                    apply_from_right(
                        u, kms + 1, i2, i4, v[2, m], v[3, m], v[1, m]
                    )
            elif wantz:
                for m in range(mbot, mtop - 1, -1):
                    k = krcol + 2 * (m - 1)

                    apply_from_right(
                        z, k + 1, iloz, ihiz, v[2, m], v[3, m], v[1, m]
                    )

        if not accum:
            continue

        # Apply U to the entries of H (and to Z) outside the diagonal block.
        if wantt:
            jtop = 1
            jbot = n
        else:
            jtop = ktop
            jbot = kbot

        k1 = max(1, ktop - incol)
        nu = (kdu - max(0, ndcol - kbot)) - k1 + 1
        u_block = u.slice_from(k1, k1)

        for jcol in range(min(ndcol, kbot) + 1, jbot + 1, nh):
            jlen = min(nh, jbot - jcol + 1)
            strip = h.slice_from(incol + k1, jcol)

            matrix_multiply(
                "C", "N", nu, jlen, nu, 1.0, u_block, u.rows, strip, ldh,
                0.0, wh.data, wh.rows,
            )
            copy_matrix("ALL", nu, jlen, wh.data, wh.rows, strip, ldh)

        for jrow in range(jtop, max(ktop, incol), nv):
            jlen = min(nv, max(ktop, incol) - jrow)
            strip = h.slice_from(jrow, incol + k1)

            matrix_multiply(
                "N", "N", jlen, nu, nu, 1.0, strip, ldh, u_block, u.rows,
                0.0, wv.data, wv.rows,
            )
            copy_matrix("ALL", jlen, nu, wv.data, wv.rows, strip, ldh)

        if wantz:
            for jrow in range(iloz, ihiz + 1, nv):
                jlen = min(nv, ihiz - jrow + 1)
                strip = z.slice_from(jrow, incol + k1)

                matrix_multiply(
                    "N", "N", jlen, nu, nu, 1.0, strip, z.rows, u_block,
                    u.rows, 0.0, wv.data, wv.rows,
                )
                copy_matrix(
                    "ALL", jlen, nu, wv.data, wv.rows, strip, z.rows
                )


def multishift_sweep(
    wantt: bool,
    wantz: bool,
    kacc22: int,
    n: int,
    ktop: int,
    kbot: int,
    nshfts: int,
    sr,
    si,
    h,
    iloz: int,
    ihiz: int,
    z=None,
    v=None,
    u=None,
    nv: Optional[int] = None,
    wv=None,
    nh: Optional[int] = None,
    wh=None,
    *,
    ldh: Optional[int] = None,
    ldz: Optional[int] = None,
) -> None:
    r"""
    One multi-shift QR sweep over an upper Hessenberg matrix.

    Chases a tightly packed chain of ``nshfts / 2`` bulges, each introduced
    by a pair of shifts, from the top to the bottom of the active block
    ``H(ktop:kbot, ktop:kbot)``. This is the small-bulge multi-shift QR
    sweep of Braman, Byers and Mathias. All indices are one-based.

    Parameters
    ----------
    wantt : bool
        Whether the full Schur form is wanted, i.e. whether entries of
        ``H`` outside the active block are updated too.
    wantz : bool
        Whether the transformations are accumulated into ``z``.
    kacc22 : int
        ``0`` applies each reflection to ``H`` and ``Z`` one at a time.
        ``1`` and ``2`` accumulate the reflections of each diagonal block
        of the sweep into ``U`` and apply them to the far-from-diagonal
        entries with matrix multiplies.
    n : int
        Order of ``H``.
    ktop, kbot : int
        Active block. ``H(ktop, ktop-1)`` and ``H(kbot+1, kbot)`` should be
        zero.
    nshfts : int
        Number of shifts. An odd count is reduced by one.
    sr, si : Tensor, numpy.ndarray, list or IndexedArray
        Real and imaginary parts of the shifts. Complex shifts must come
        in adjacent conjugate pairs. They are shuffled in place so that
        each consecutive pair is either real or conjugate.
    h : Tensor, numpy.ndarray, list or IndexedArray
        Upper Hessenberg matrix, updated in place. Entries that drop below
        the deflation threshold during the sweep are set to zero.
    iloz, ihiz : int
        Rows of ``z`` that are updated.
    z : Tensor, numpy.ndarray, list or IndexedArray, optional
        Updated in place when ``wantz`` is set.
    v : optional
        ``3`` by ``nshfts / 2`` scratch for the bulge reflectors.
    u : optional
        ``4 * (nshfts / 2)`` square scratch for the accumulated block
        transformation.
    nv : int, optional
        Row strip height for the vertical multiplies. Defaults to the row
        count of ``wv``, or ``n``.
    wv : optional
        ``nv`` by ``4 * (nshfts / 2)`` scratch.
    nh : int, optional
        Column strip width for the horizontal multiplies. Defaults to the
        column count of ``wh``, or ``n``.
    wh : optional
        ``4 * (nshfts / 2)`` by ``nh`` scratch.
    ldh, ldz : int, optional
        Leading dimensions of flat ``h`` and ``z``.

    Raises
    ------
    ValueError
        If a scratch array is too small, or ``z`` is missing while
        ``wantz`` is set.

    Notes
    -----
    A bulge that collapses, for instance through underflow, is reseeded
    from the shifts unless that would introduce non-negligible fill, in
    which case the stale reflector is kept. After every reflection the
    subdiagonal entry it produced is checked against the deflation
    criterion of the double-shift driver.

    Shifts that are not paired as required are not rejected. The shuffle
    only repairs lists in which conjugate pairs are already adjacent.
    """
    if wantz and z is None:
        raise ValueError("z is required when wantz is set")

    nbmps = (nshfts - nshfts % 2) // 2
    kdu = 4 * nbmps

    hh = as_indexed_matrix(h, ldh)
    srr = as_indexed_vector(sr)
    sii = as_indexed_vector(si)
    zz = as_indexed_matrix(z, ldz) if wantz else None

    scratch = {
        "v": (v, 3, nbmps),
        "u": (u, kdu, kdu),
        "wv": (wv, 1, kdu),
        "wh": (wh, kdu, 1),
    }
    working = {}

    for name, (array, rows, cols) in scratch.items():
        if array is None:
            working[name] = None
            continue

        matrix = as_indexed_matrix(array)

        if matrix.rows < rows or matrix.cols < cols:
            raise ValueError(
                f"{name} must be at least {rows}x{cols}, got "
                f"{matrix.rows}x{matrix.cols}"
            )

        working[name] = matrix

    if nv is not None and working["wv"] is not None:
        if working["wv"].rows < nv:
            raise ValueError(f"wv must have at least nv={nv} rows")

    if nh is not None and working["wh"] is not None:
        if working["wh"].cols < nh:
            raise ValueError(f"wh must have at least nh={nh} columns")

    sweep(
        wantt,
        wantz,
        kacc22,
        n,
        ktop,
        kbot,
        nshfts,
        srr,
        sii,
        hh,
        iloz,
        ihiz,
        zz,
        working["v"],
        working["u"],
        nv,
        working["wv"],
        nh,
        working["wh"],
    )

    write_back(h, hh)
    write_back(sr, srr)
    write_back(si, sii)

    if zz is not None:
        write_back(z, zz)

    for name, array in (("v", v), ("u", u), ("wv", wv), ("wh", wh)):
        if array is not None:
            write_back(array, working[name])
