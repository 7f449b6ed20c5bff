"""One-based, column-major view over flat float64 storage."""

from typing import Iterable, List, Optional, Sequence, Union

import numpy

SENTINEL = float(numpy.finfo(numpy.float64).tiny)

Key = Union[int, tuple]


class IndexedArray:
    r"""
    Flat double-precision storage addressed with one-based indices.

    A vector has ``cols == 0`` and ``len(a) == rows``. A matrix stores
    element :math:`(i, j)` at zero-based offset :math:`(j - 1) \cdot rows +
    (i - 1)`, i.e. in column-major order, and ``rows`` doubles as the
    leading dimension.

    Parameters
    ----------
    data : array_like
        Values to wrap. A one-dimensional float64 ``numpy.ndarray`` is
        wrapped without copying, anything else is copied.
    rows : int, optional
        Row count, which is also the leading dimension. Defaults to the
        length of ``data``.
    cols : int, optional
        Column count. ``0`` (the default) makes the array a vector.

    Notes
    -----
    Out-of-range access never fails. Reads at index 0, at negative indices
    or past the end of storage return :data:`SENTINEL`, the smallest
    positive normal float64. Writes to such positions land in a throwaway
    slot that is never read back. Only the flat offset is bounds checked,
    so ``(rows + 1, 1)`` silently addresses ``(1, 2)``.

    Examples
    --------
    >>> a = IndexedArray.matrix([1.0, 2.0, 3.0, 4.0], 2, 2)
    >>> a[2, 1]
    2.0
    >>> a[1, 2]
    3.0
    >>> a[0]
    2.2250738585072014e-308
    """

    __slots__ = ("_data", "_rows", "_cols", "_discard")

    def __init__(self, data, rows: Optional[int] = None, cols: int = 0):
        if (
            isinstance(data, numpy.ndarray)
            and data.dtype == numpy.float64
            and data.ndim == 1
        ):
            buffer = data
        else:
            buffer = numpy.array(data, dtype=numpy.float64).reshape(-1)

        if rows is None:
            rows = buffer.shape[0]

        self._data = buffer
        self._rows = int(rows)
        self._cols = int(cols)
        self._discard = numpy.full(1, numpy.nan)

    @classmethod
    def vector(cls, values: Iterable[float]) -> "IndexedArray":
        """Vector holding a copy of ``values``."""
        return cls(numpy.array(list(values), dtype=numpy.float64))

    @classmethod
    def matrix(
        cls, values: Iterable[float], rows: int, cols: int
    ) -> "IndexedArray":
        """Matrix over a copy of ``values`` given in column-major order."""
        buffer = numpy.array(list(values), dtype=numpy.float64)

        if buffer.shape[0] != rows * cols:
            raise ValueError(
                f"expected {rows * cols} values for a {rows}x{cols} matrix, "
                f"got {buffer.shape[0]}"
            )

        return cls(buffer, rows, cols)

    @classmethod
    def zeros(cls, rows: int, cols: int = 0) -> "IndexedArray":
        """Zero-filled vector (``cols == 0``) or matrix."""
        size = rows if cols == 0 else rows * cols

        return cls(numpy.zeros(size, dtype=numpy.float64), rows, cols)

    @classmethod
    def from_columns(
        cls, columns: Sequence[Sequence[float]]
    ) -> "IndexedArray":
        """Matrix whose ``k``-th column is ``columns[k]``."""
        if len(columns) == 0:
            return cls(numpy.zeros(0, dtype=numpy.float64), 0, 0)

        rows = len(columns[0])

        if any(len(column) != rows for column in columns):
            raise ValueError("all columns must have the same length")

        buffer = numpy.array(
            [value for column in columns for value in column],
            dtype=numpy.float64,
        )

        return cls(buffer, rows, len(columns))

    @classmethod
    def from_buffer(cls, buffer: numpy.ndarray, rows: int) -> "IndexedArray":
        """Matrix sharing ``buffer`` with leading dimension ``rows``.

        Used to address a sub-block ``A(k, k)`` of a larger matrix with the
        parent's leading dimension. Writes go straight to ``buffer``.
        """
        if rows <= 0:
            raise ValueError(f"rows must be positive, got {rows}")

        return cls(buffer, rows, buffer.shape[0] // rows)

    @property
    def data(self) -> numpy.ndarray:
        return self._data

    @property
    def rows(self) -> int:
        return self._rows

    @property
    def cols(self) -> int:
        return self._cols

    @property
    def is_vector(self) -> bool:
        return self._cols == 0

    def __len__(self) -> int:
        return self._data.shape[0]

    def offset(self, i: int, j: Optional[int] = None) -> int:
        """Zero-based storage offset of a one-based position."""
        if j is None:
            return i - 1

        return (j - 1) * self._rows + (i - 1)

    def get(self, i: int, j: Optional[int] = None) -> float:
        offset = self.offset(i, j)

        if 0 <= offset < self._data.shape[0]:
            return float(self._data[offset])

        return SENTINEL

    def set(self, *args: float) -> None:
        """``set(i, value)`` for vectors, ``set(i, j, value)`` for matrices."""
        if len(args) == 2:
            offset = self.offset(int(args[0]))
        elif len(args) == 3:
            offset = self.offset(int(args[0]), int(args[1]))
        else:
            raise TypeError(
                f"set expects 2 or 3 arguments, got {len(args)}"
            )

        if 0 <= offset < self._data.shape[0]:
            self._data[offset] = args[-1]
        else:
            self._discard[0] = args[-1]

    def __getitem__(self, key: Key) -> float:
        if isinstance(key, tuple):
            return self.get(key[0], key[1])

        return self.get(key)

    def __setitem__(self, key: Key, value: float) -> None:
        if isinstance(key, tuple):
            self.set(key[0], key[1], value)
        else:
            self.set(key, value)

    def slice_from(self, i: int, j: Optional[int] = None) -> numpy.ndarray:
        """Writeable view of storage from a one-based position to the end.

        Returns an empty array when the position lies outside storage.
        """
        offset = self.offset(i, j)

        if 0 <= offset < self._data.shape[0]:
            return self._data[offset:]

        return self._data[:0]

    def reshape_rows(self, rows: int) -> None:
        """Set the row count in place, recomputing columns from the length."""
        if rows <= 0:
            raise ValueError(f"rows must be positive, got {rows}")

        self._rows = rows
        self._cols = self._data.shape[0] // rows

    def copy(self) -> "IndexedArray":
        return IndexedArray(self._data.copy(), self._rows, self._cols)

    def to_numpy(self) -> numpy.ndarray:
        """Copy as a 1-D vector or a ``(rows, cols)`` matrix."""
        if self.is_vector:
            return self._data.copy()

        size = self._rows * self._cols

        return self._data[:size].reshape(self._cols, self._rows).T.copy()

    def to_columns(self) -> List[List[float]]:
        """Columns as lists, the inverse of :meth:`from_columns`."""
        if self.is_vector:
            return [self._data.tolist()]

        return [
            self._data[k * self._rows : (k + 1) * self._rows].tolist()
            for k in range(self._cols)
        ]

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, IndexedArray):
            return NotImplemented

        return (
            self._rows == other._rows
            and self._cols == other._cols
            and numpy.array_equal(self._data, other._data)
        )

    __hash__ = None

    def __repr__(self) -> str:
        def line(values) -> str:
            return "[" + ", ".join(f"{value:.1f}" for value in values) + "]"

        if self.is_vector:
            return line(self._data)

        return "\n".join(line(row) for row in self.to_numpy())
