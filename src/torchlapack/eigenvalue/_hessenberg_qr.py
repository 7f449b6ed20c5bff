"""Hessenberg QR algorithm."""

import warnings
from typing import Optional

import torch
from torch import Tensor

from torchlapack._exceptions import ConvergenceWarning
from torchlapack.eigenvalue._multishift_qr import MultishiftQR
from torchlapack.eigenvalue._result_types import HessenbergQRResult
from torchlapack.indexed_array import IndexedArray


def _solve(
    h: Tensor,
    z: Optional[Tensor],
    ilo: int,
    ihi: int,
    compute_schur_form: bool,
    compute_schur_vectors: bool,
    nmin: Optional[int],
):
    n = h.shape[-1]

    hh = IndexedArray(h.t().reshape(-1).numpy().copy(), n, n)
    wr = IndexedArray.zeros(n)
    wi = IndexedArray.zeros(n)

    zz = None

    if compute_schur_vectors:
        zz = IndexedArray(z.t().reshape(-1).numpy().copy(), n, n)

    solver = MultishiftQR(
        compute_schur_form,
        compute_schur_vectors,
        n,
        ilo,
        ihi,
        hh,
        wr,
        wi,
        1,
        n,
        zz,
        nmin=nmin,
    )

    info = solver.run()

    # Rows outside the window are already isolated.
    for k in list(range(1, ilo)) + list(range(ihi + 1, n + 1)):
        wr[k] = hh[k, k]
        wi[k] = 0.0

    return hh, zz, wr, wi, info, solver.iterations


def hessenberg_qr(
    h: Tensor,
    *,
    z: Optional[Tensor] = None,
    ilo: Optional[int] = None,
    ihi: Optional[int] = None,
    compute_schur_form: bool = True,
    compute_schur_vectors: bool = True,
    nmin: Optional[int] = None,
) -> HessenbergQRResult:
    r"""
    Real Schur decomposition of an upper Hessenberg matrix.

    Computes :math:`H = Z T Z^T` where :math:`Z` is orthogonal and
    :math:`T` is quasi-upper-triangular: its diagonal holds 1x1 blocks for
    real eigenvalues and 2x2 blocks :math:`\begin{pmatrix} a & b \\ c & a
    \end{pmatrix}` with :math:`bc < 0` for complex conjugate pairs
    :math:`a \pm \sqrt{bc}`.

    Parameters
    ----------
    h : Tensor
        Upper Hessenberg matrix of shape (..., n, n). Entries below the
        first subdiagonal are ignored. Non-floating inputs are converted to
        float64.
    z : Tensor, optional
        Matrix of shape (..., n, n) the transformation is accumulated into,
        e.g. the orthogonal factor of a preceding Hessenberg reduction, so
        that the Schur vectors of the original matrix are returned.
        Defaults to the identity.
    ilo, ihi : int, optional
        One-based bounds of the active window. Rows and columns outside
        ``[ilo, ihi]`` must already be isolated, as after balancing.
        Default to ``1`` and ``n``.
    compute_schur_form : bool
        If ``False`` only the eigenvalues are computed and ``T`` is an
        intermediate matrix.
    compute_schur_vectors : bool
        If ``False`` the transformation is not accumulated and ``Z`` is
        ``None``.
    nmin : int, optional
        Smallest window reduced with multi-shift sweeps rather than the
        double-shift iteration.

    Returns
    -------
    HessenbergQRResult
        T : Tensor of shape (..., n, n), Schur form
        Z : Tensor of shape (..., n, n), Schur vectors, or None
        eigenvalues : Tensor of shape (..., n), eigenvalues (complex) in
            the order of the diagonal of T
        info : Tensor of shape (...), int, 0 indicates success
        iterations : Tensor of shape (...), int, QR sweeps performed

    Raises
    ------
    ValueError
        If ``h`` is not a batch of square matrices, ``z`` has a different
        shape, or the window bounds are out of range.

    Warns
    -----
    ConvergenceWarning
        If the iteration stalls for some matrix. Its ``info`` is then the
        row at which it stalled, and only eigenvalues ``info + 1..ihi``
        are valid.

    Examples
    --------
    >>> h = torch.tensor([[0.0, 0.0, 1.0], [1.0, 0.0, 0.0], [0.0, 1.0, 0.0]])
    >>> result = hessenberg_qr(h)
    >>> torch.allclose(result.Z @ result.T @ result.Z.T, h.double())
    True
    """
    if h.dim() < 2:
        raise ValueError(f"h must be at least 2D, got {h.dim()}D")
    if h.shape[-2] != h.shape[-1]:
        raise ValueError(f"h must be square, got shape {h.shape}")
    if h.is_complex():
        raise ValueError(f"h must be real, got dtype {h.dtype}")
    if z is not None and z.shape != h.shape:
        raise ValueError(
            f"z must have the shape of h, got {z.shape} and {h.shape}"
        )

    n = h.shape[-1]

    if ilo is None:
        ilo = 1
    if ihi is None:
        ihi = n

    if n > 0 and not (1 <= ilo <= n and ilo - 1 <= ihi <= n):
        raise ValueError(
            f"ilo and ihi must satisfy 1 <= ilo <= ihi + 1 <= n + 1, "
            f"got ilo={ilo}, ihi={ihi} for n={n}"
        )

    dtype = h.dtype if h.is_floating_point() else torch.float64
    device = h.device

    batch_shape = h.shape[:-2]
    batch_size = batch_shape.numel()

    h_flat = torch.triu(h.detach().to(torch.float64).cpu(), diagonal=-1)
    h_flat = h_flat.reshape(batch_size, n, n)

    if z is None:
        z_flat = torch.eye(n, dtype=torch.float64).expand_as(h_flat)
    else:
        z_flat = z.detach().to(torch.float64).cpu()
        z_flat = z_flat.reshape(batch_size, n, n)

    T_list = []
    Z_list = []
    eigenvalues_list = []
    info_list = []
    iterations_list = []

    for i in range(h_flat.shape[0]):
        hh, zz, wr, wi, info_i, iterations_i = _solve(
            h_flat[i],
            z_flat[i],
            ilo,
            ihi,
            compute_schur_form,
            compute_schur_vectors,
            nmin,
        )

        T_list.append(torch.from_numpy(hh.to_numpy()).reshape(n, n))

        if zz is not None:
            Z_list.append(torch.from_numpy(zz.to_numpy()).reshape(n, n))

        eigenvalues_list.append(
            torch.complex(
                torch.from_numpy(wr.to_numpy()),
                torch.from_numpy(wi.to_numpy()),
            )
        )
        info_list.append(info_i)
        iterations_list.append(iterations_i)

    if T_list:
        T = torch.stack(T_list)
        eigenvalues = torch.stack(eigenvalues_list)
    else:
        T = torch.empty(0, n, n, dtype=torch.float64)
        eigenvalues = torch.empty(0, n, dtype=torch.complex128)

    T = T.reshape(*batch_shape, n, n).to(device=device, dtype=dtype)
    eigenvalues = eigenvalues.reshape(*batch_shape, n).to(
        device=device,
        dtype=torch.complex128 if dtype == torch.float64 else torch.complex64,
    )

    Z = None

    if compute_schur_vectors:
        if Z_list:
            Z = torch.stack(Z_list)
        else:
            Z = torch.empty(0, n, n, dtype=torch.float64)

        Z = Z.reshape(*batch_shape, n, n).to(device=device, dtype=dtype)

    info = torch.tensor(info_list, dtype=torch.int32, device=device)
    info = info.reshape(batch_shape)

    iterations = torch.tensor(iterations_list, dtype=torch.int64, device=device)
    iterations = iterations.reshape(batch_shape)

    failures = sum(1 for value in info_list if value > 0)

    if failures:
        warnings.warn(
            f"QR iteration did not converge for {failures} of "
            f"{len(info_list)} matrices; see info for the rows reached",
            ConvergenceWarning,
            stacklevel=2,
        )

    return HessenbergQRResult(
        T=T, Z=Z, eigenvalues=eigenvalues, info=info, iterations=iterations
    )
