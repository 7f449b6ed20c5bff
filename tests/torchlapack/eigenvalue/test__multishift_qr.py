"""Tests for the multi-shift Hessenberg QR driver."""

import numpy
import pytest
import torch

from torchlapack.eigenvalue import multishift_qr
from torchlapack.eigenvalue._multishift_qr import MultishiftQR
from torchlapack.indexed_array import IndexedArray


def _random_hessenberg(n: int, seed: int) -> numpy.ndarray:
    torch.manual_seed(seed)

    return torch.triu(torch.randn(n, n, dtype=torch.float64), -1).numpy()


def _assert_same_spectrum(actual, expected, atol: float) -> None:
    remaining = list(expected)

    for value in actual:
        distances = [abs(value - other) for other in remaining]
        k = int(numpy.argmin(distances))

        assert distances[k] <= atol, f"no eigenvalue near {value}"

        remaining.pop(k)


class TestMultishiftQR:
    """Tests for multishift_qr."""

    @pytest.mark.parametrize(
        "n, seed, kacc22",
        [(30, 0, None), (30, 1, 0), (40, 2, 1), (40, 3, 2)],
    )
    def test_schur_decomposition(self, n, seed, kacc22):
        """Test eigenvalues, orthogonality and reconstruction."""
        h = _random_hessenberg(n, seed)
        t = h.copy()
        z = numpy.eye(n)
        wr = numpy.zeros(n)
        wi = numpy.zeros(n)

        info = multishift_qr(
            True, True, n, 1, n, t, wr, wi, 1, n, z, nmin=15, kacc22=kacc22
        )

        assert info == 0
        _assert_same_spectrum(
            wr + 1j * wi,
            numpy.linalg.eigvals(h),
            atol=1e-9,
        )
        numpy.testing.assert_allclose(z.T @ z, numpy.eye(n), atol=1e-12)
        numpy.testing.assert_allclose(z @ t @ z.T, h, atol=1e-10)
        numpy.testing.assert_array_equal(numpy.tril(t, -2), 0.0)

        for k in range(n - 2):
            assert t[k + 1, k] == 0.0 or t[k + 2, k + 1] == 0.0

    def test_uses_sweeps_on_large_windows(self):
        """Test that a window of at least nmin rows is swept."""
        n = 32
        h = IndexedArray(_random_hessenberg(n, 4).T.reshape(-1).copy(), n, n)
        wr = IndexedArray.zeros(n)
        wi = IndexedArray.zeros(n)

        solver = MultishiftQR(
            False, False, n, 1, n, h, wr, wi, 1, n, None, nmin=15
        )

        assert solver.run() == 0
        assert solver.sweeps > 0
        assert solver.iterations >= solver.sweeps

    def test_small_matrix_delegates(self):
        """Test that windows below nmin use only the double-shift kernel."""
        n = 10
        h = IndexedArray(_random_hessenberg(n, 5).T.reshape(-1).copy(), n, n)
        wr = IndexedArray.zeros(n)
        wi = IndexedArray.zeros(n)

        solver = MultishiftQR(False, False, n, 1, n, h, wr, wi, 1, n, None)

        assert solver.run() == 0
        assert solver.sweeps == 0
        assert solver.iterations > 0

    def test_nmin_has_a_floor(self):
        """Test that nmin below 15 is raised to 15."""
        h = IndexedArray.zeros(4, 4)

        solver = MultishiftQR(
            True, False, 4, 1, 4, h, IndexedArray.zeros(4),
            IndexedArray.zeros(4), 1, 4, None, nmin=2,
        )

        assert solver.nmin == 15

    def test_matches_double_shift_eigenvalues(self):
        """Test eigenvalues only against the unswept driver."""
        n = 36
        h = _random_hessenberg(n, 6)

        wr_swept = numpy.zeros(n)
        wi_swept = numpy.zeros(n)
        multishift_qr(
            False, False, n, 1, n, h.copy(), wr_swept, wi_swept, 1, n,
            nmin=15,
        )

        wr_plain = numpy.zeros(n)
        wi_plain = numpy.zeros(n)
        multishift_qr(
            False, False, n, 1, n, h.copy(), wr_plain, wi_plain, 1, n,
            nmin=n + 1,
        )

        _assert_same_spectrum(
            wr_swept + 1j * wi_swept,
            wr_plain + 1j * wi_plain,
            atol=1e-9,
        )

    def test_window(self):
        """Test a window whose borders are already isolated."""
        n = 24
        h = _random_hessenberg(n, 7)
        h[2, 1] = 0.0
        h[21, 20] = 0.0

        t = h.copy()
        z = numpy.eye(n)
        wr = numpy.zeros(n)
        wi = numpy.zeros(n)

        info = multishift_qr(
            True, True, n, 3, 21, t, wr, wi, 1, n, z, nmin=15
        )

        assert info == 0
        _assert_same_spectrum(
            wr[2:21] + 1j * wi[2:21],
            numpy.linalg.eigvals(h[2:21, 2:21]),
            atol=1e-9,
        )
        numpy.testing.assert_allclose(z @ t @ z.T, h, atol=1e-10)

    def test_empty(self):
        """Test that n == 0 returns immediately."""
        assert multishift_qr(True, False, 0, 1, 0, [], [], [], 1, 0, ldh=1) == 0

    def test_missing_z(self):
        """Test that wantz requires z."""
        with pytest.raises(ValueError, match="z is required"):
            multishift_qr(
                True, True, 2, 1, 2, numpy.eye(2), [0.0, 0.0], [0.0, 0.0], 1, 2
            )

    @pytest.mark.parametrize("kacc22", [0, 1])
    def test_schur_vector_rows(self, kacc22):
        """Test that only rows iloz..ihiz of Z are updated."""
        n = 20
        h = _random_hessenberg(n, 8)
        h[1, 0] = 0.0
        h[19, 18] = 0.0

        t = h.copy()
        z = numpy.eye(n)
        wr = numpy.zeros(n)
        wi = numpy.zeros(n)

        info = multishift_qr(
            True, True, n, 2, 19, t, wr, wi, 2, 19, z, nmin=15, kacc22=kacc22
        )

        assert info == 0

        outside = [0, n - 1]
        inside = slice(1, n - 1)

        numpy.testing.assert_array_equal(z[outside], numpy.eye(n)[outside])
        numpy.testing.assert_array_equal(
            z[:, outside], numpy.eye(n)[:, outside]
        )
        numpy.testing.assert_allclose(
            z[inside, inside].T @ z[inside, inside],
            numpy.eye(n - 2),
            atol=1e-12,
        )
        numpy.testing.assert_allclose(z @ t @ z.T, h, atol=1e-10)

    @pytest.mark.parametrize("scale", [1e-150, 1e-40, 1e-16, 1e40, 1e150])
    def test_scaled_spectrum(self, scale):
        """Test eigenvalues of a scaled matrix against numpy."""
        n = 32
        h = _random_hessenberg(n, 9) * scale
        wr = numpy.zeros(n)
        wi = numpy.zeros(n)

        info = multishift_qr(
            False, False, n, 1, n, h.copy(), wr, wi, 1, n, nmin=15
        )

        assert info == 0
        _assert_same_spectrum(
            (wr + 1j * wi) / scale,
            numpy.linalg.eigvals(h / scale),
            atol=1e-9,
        )
