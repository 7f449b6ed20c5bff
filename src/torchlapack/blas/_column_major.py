import numpy
import torch
from torch import Tensor


def column_major(buffer: numpy.ndarray, rows: int, cols: int, ld: int) -> Tensor:
    """Zero-copy ``(rows, cols)`` tensor over a column-major flat buffer.

    Writes through the returned tensor land in ``buffer``.
    """
    return torch.from_numpy(buffer).as_strided((rows, cols), (1, ld))
