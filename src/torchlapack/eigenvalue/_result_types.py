from typing import NamedTuple, Optional

from torch import Tensor


class HessenbergQRResult(NamedTuple):
    """Result of the Hessenberg QR algorithm H = ZTZ^T.

    T is quasi-upper-triangular with 1x1 and standardized 2x2 diagonal
    blocks, Z is orthogonal.
    """

    T: Tensor  # (..., n, n) - Schur form, or the partially reduced H
    Z: Optional[Tensor]  # (..., n, n) - None unless vectors are requested
    eigenvalues: Tensor  # (..., n) - complex
    info: Tensor  # (...) - int, 0 or the row at which QR stalled
    iterations: Tensor  # (...) - int, QR sweeps performed
