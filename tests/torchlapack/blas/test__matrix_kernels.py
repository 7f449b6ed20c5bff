"""Tests for the level 3 BLAS kernels."""

import numpy
import pytest
import torch

from torchlapack import IllegalArgumentError
from torchlapack.blas import matrix_multiply, triangular_matrix_multiply


def _buffer(matrix: numpy.ndarray) -> numpy.ndarray:
    return numpy.ascontiguousarray(matrix.reshape(-1, order="F"))


def _matrix(buffer: numpy.ndarray, rows: int, cols: int) -> numpy.ndarray:
    return buffer[: rows * cols].reshape(cols, rows).T


class TestMatrixMultiply:
    """Tests for matrix_multiply."""

    @pytest.mark.parametrize("transa", ["N", "T", "c"])
    @pytest.mark.parametrize("transb", ["n", "T"])
    def test_against_torch(self, transa, transb):
        """Test alpha op(A) op(B) + beta C for every transpose option."""
        torch.manual_seed(42)
        m, n, k = 4, 3, 5

        a = torch.randn(m, k, dtype=torch.float64)
        b = torch.randn(k, n, dtype=torch.float64)
        c = torch.randn(m, n, dtype=torch.float64)

        stored_a = a if transa in ("N", "n") else a.T
        stored_b = b if transb in ("N", "n") else b.T

        c_buffer = _buffer(c.numpy())

        matrix_multiply(
            transa,
            transb,
            m,
            n,
            k,
            2.0,
            _buffer(stored_a.numpy()),
            stored_a.shape[0],
            _buffer(stored_b.numpy()),
            stored_b.shape[0],
            0.5,
            c_buffer,
            m,
        )

        expected = 2.0 * (a @ b) + 0.5 * c
        torch.testing.assert_close(
            torch.from_numpy(_matrix(c_buffer, m, n).copy()),
            expected,
            rtol=1e-12,
            atol=1e-12,
        )

    def test_beta_zero_ignores_nan(self):
        """Test that C is not read when beta is zero."""
        a = _buffer(numpy.eye(2))
        b = _buffer(numpy.array([[1.0, 2.0], [3.0, 4.0]]))
        c = numpy.full(4, numpy.nan)

        matrix_multiply("N", "N", 2, 2, 2, 1.0, a, 2, b, 2, 0.0, c, 2)

        numpy.testing.assert_array_equal(
            _matrix(c, 2, 2), [[1.0, 2.0], [3.0, 4.0]]
        )

    def test_alpha_zero_scales_c(self):
        """Test that alpha zero leaves beta C."""
        c = numpy.array([1.0, 2.0, 3.0, 4.0])

        matrix_multiply(
            "N", "N", 2, 2, 2, 0.0, numpy.zeros(4), 2, numpy.zeros(4), 2,
            3.0, c, 2,
        )

        numpy.testing.assert_array_equal(c, [3.0, 6.0, 9.0, 12.0])

    def test_leading_dimension_larger_than_rows(self):
        """Test operating on a sub-block of a larger buffer."""
        big = numpy.arange(1.0, 17.0)  # 4x4, column-major
        c = numpy.zeros(4)

        # Top-left 2x2 block of the 4x4 matrix times the identity.
        matrix_multiply(
            "N", "N", 2, 2, 2, 1.0, big, 4, _buffer(numpy.eye(2)), 2,
            0.0, c, 2,
        )

        numpy.testing.assert_array_equal(c, [1.0, 2.0, 5.0, 6.0])

    @pytest.mark.parametrize(
        "arguments, position",
        [
            (("X", "N", 2, 2, 2, 2, 2, 2), 1),
            (("N", "X", 2, 2, 2, 2, 2, 2), 2),
            (("N", "N", -1, 2, 2, 2, 2, 2), 3),
            (("N", "N", 2, -1, 2, 2, 2, 2), 4),
            (("N", "N", 2, 2, -1, 2, 2, 2), 5),
            (("N", "N", 2, 2, 2, 1, 2, 2), 8),
            (("N", "N", 2, 2, 2, 2, 1, 2), 10),
            (("N", "N", 2, 2, 2, 2, 2, 1), 13),
        ],
    )
    def test_illegal_arguments(self, arguments, position):
        """Test that the first invalid argument is reported."""
        transa, transb, m, n, k, lda, ldb, ldc = arguments
        buffer = numpy.zeros(16)

        with pytest.raises(IllegalArgumentError) as excinfo:
            matrix_multiply(
                transa, transb, m, n, k, 1.0, buffer, lda, buffer, ldb,
                0.0, buffer, ldc,
            )

        assert excinfo.value.position == position
        assert excinfo.value.routine == "matrix_multiply"
        assert f"parameter number {position}" in str(excinfo.value)

    def test_illegal_argument_is_value_error(self):
        """Test that IllegalArgumentError is a ValueError."""
        with pytest.raises(ValueError):
            matrix_multiply(
                "N", "N", -1, 1, 1, 1.0, numpy.zeros(1), 1, numpy.zeros(1),
                1, 0.0, numpy.zeros(1), 1,
            )


class TestTriangularMatrixMultiply:
    """Tests for triangular_matrix_multiply."""

    @pytest.mark.parametrize("side", ["L", "R"])
    @pytest.mark.parametrize("uplo", ["U", "L"])
    @pytest.mark.parametrize("transa", ["N", "T"])
    @pytest.mark.parametrize("diag", ["N", "U"])
    def test_against_torch(self, side, uplo, transa, diag):
        """Test every combination of options."""
        torch.manual_seed(7)
        m, n = 3, 4
        order = m if side == "L" else n

        a = torch.randn(order, order, dtype=torch.float64)
        b = torch.randn(m, n, dtype=torch.float64)

        triangle = torch.triu(a) if uplo == "U" else torch.tril(a)

        if diag == "U":
            triangle = triangle - torch.diag(torch.diag(triangle))
            triangle = triangle + torch.eye(order, dtype=torch.float64)

        if transa == "T":
            triangle = triangle.T

        if side == "L":
            expected = 1.5 * (triangle @ b)
        else:
            expected = 1.5 * (b @ triangle)

        b_buffer = _buffer(b.numpy())

        triangular_matrix_multiply(
            side, uplo, transa, diag, m, n, 1.5, _buffer(a.numpy()), order,
            b_buffer, m,
        )

        torch.testing.assert_close(
            torch.from_numpy(_matrix(b_buffer, m, n).copy()),
            expected,
            rtol=1e-12,
            atol=1e-12,
        )

    def test_alpha_zero(self):
        """Test that alpha zero clears B."""
        b = numpy.ones(4)

        triangular_matrix_multiply(
            "L", "U", "N", "N", 2, 2, 0.0, numpy.ones(4), 2, b, 2
        )

        numpy.testing.assert_array_equal(b, numpy.zeros(4))

    @pytest.mark.parametrize(
        "arguments, position",
        [
            (("X", "U", "N", "N", 2, 2, 2, 2), 1),
            (("L", "X", "N", "N", 2, 2, 2, 2), 2),
            (("L", "U", "X", "N", 2, 2, 2, 2), 3),
            (("L", "U", "N", "X", 2, 2, 2, 2), 4),
            (("L", "U", "N", "N", -1, 2, 2, 2), 5),
            (("L", "U", "N", "N", 2, -1, 2, 2), 6),
            (("L", "U", "N", "N", 2, 2, 1, 2), 9),
            (("L", "U", "N", "N", 2, 2, 2, 1), 11),
        ],
    )
    def test_illegal_arguments(self, arguments, position):
        """Test that the first invalid argument is reported."""
        side, uplo, transa, diag, m, n, lda, ldb = arguments
        buffer = numpy.zeros(16)

        with pytest.raises(IllegalArgumentError) as excinfo:
            triangular_matrix_multiply(
                side, uplo, transa, diag, m, n, 1.0, buffer, lda, buffer, ldb
            )

        assert excinfo.value.position == position
