"""Tests for multi-shift QR tuning parameters."""

import pytest

from torchlapack.machine import TuningParameter, tuning_parameter


class TestTuningParameter:
    """Tests for tuning_parameter."""

    def test_constants(self):
        """Test the parameters that do not depend on the window."""
        expected = {
            TuningParameter.MINIMUM_SIZE: 75,
            TuningParameter.NIBBLE: 14,
            TuningParameter.COST: 10,
        }

        for ispec, value in expected.items():
            assert tuning_parameter(ispec, "DHSEQR", 1, 10) == value

    def test_plain_integers(self):
        """Test that plain integer selectors are accepted."""
        assert tuning_parameter(12, "DHSEQR", 1, 10) == 75
        assert tuning_parameter(15, "DHSEQR", 1, 10) == 2

    @pytest.mark.parametrize(
        "nh, expected",
        [
            (10, 2),
            (29, 2),
            (30, 4),
            (59, 4),
            (60, 10),
            (149, 10),
            (150, 20),
            (300, 36),
            (589, 64),
            (590, 64),
            (3000, 128),
            (6000, 256),
        ],
    )
    def test_shift_count(self, nh, expected):
        """Test the recommended number of shifts."""
        assert (
            tuning_parameter(TuningParameter.SHIFT_COUNT, "DLAQR0", 1, nh)
            == expected
        )

    def test_shift_count_is_even(self):
        """Test that the shift count is always even and at least 2."""
        for nh in range(1, 700):
            ns = tuning_parameter(
                TuningParameter.SHIFT_COUNT, "DLAQR0", 1, nh
            )

            assert ns >= 2
            assert ns % 2 == 0

    def test_deflation_window(self):
        """Test the deflation window for small and large windows."""
        window = TuningParameter.DEFLATION_WINDOW

        assert tuning_parameter(window, "DLAQR0", 1, 100) == 10
        assert tuning_parameter(window, "DLAQR0", 1, 600) == 96

    @pytest.mark.parametrize(
        "name, nh, expected",
        [
            ("DLAQR0", 100, 0),
            ("dlaqr0", 200, 2),
            ("DHSEQR", 200, 2),
            ("DLAQR0", 10, 0),
            ("DGGHRD", 20, 2),
            ("DGGHD3", 5, 1),
            ("DTGEXC", 20, 2),
            ("DTGEXC", 5, 0),
            ("DGEMM", 200, 0),
        ],
    )
    def test_accumulation(self, name, nh, expected):
        """Test the accumulation mode for each family of callers."""
        assert (
            tuning_parameter(TuningParameter.ACCUMULATION, name, 1, nh)
            == expected
        )

    def test_window_offset(self):
        """Test that only the window size ihi - ilo + 1 matters."""
        assert tuning_parameter(
            TuningParameter.SHIFT_COUNT, "DLAQR0", 101, 160
        ) == tuning_parameter(TuningParameter.SHIFT_COUNT, "DLAQR0", 1, 60)

    def test_unknown_selector(self):
        """Test that an unknown selector gives -1."""
        assert tuning_parameter(99, "DLAQR0", 1, 10) == -1
