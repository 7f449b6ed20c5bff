"""Tests for one-based, column-major indexed arrays."""

import numpy
import pytest

from torchlapack.indexed_array import SENTINEL, IndexedArray


class TestIndexedArray:
    """Tests for IndexedArray."""

    def test_column_major_layout(self):
        """Test that matrix element (i, j) is stored at (j-1)*rows + (i-1)."""
        a = IndexedArray.matrix([1.0, 2.0, 3.0, 4.0, 5.0, 6.0], 2, 3)

        assert a[1, 1] == 1.0
        assert a[2, 1] == 2.0
        assert a[1, 2] == 3.0
        assert a[2, 3] == 6.0
        assert a.offset(2, 3) == 5
        assert a.rows == 2
        assert a.cols == 3

    def test_vector_indexing(self):
        """Test one-based vector access."""
        x = IndexedArray.vector([10.0, 20.0, 30.0])

        assert x.is_vector
        assert len(x) == 3
        assert x[1] == 10.0
        assert x[3] == 30.0

    @pytest.mark.parametrize(
        "key",
        [0, -1, 4, 101],
    )
    def test_out_of_range_vector_read_returns_sentinel(self, key):
        """Test that reads outside storage return the sentinel."""
        x = IndexedArray.vector([1.0, 2.0, 3.0])

        assert x[key] == SENTINEL

    def test_out_of_range_matrix_read_returns_sentinel(self):
        """Test that matrix reads outside storage return the sentinel."""
        a = IndexedArray.zeros(10, 10)

        assert a[-1, -1] == SENTINEL
        assert a[0, 0] == SENTINEL
        assert a[101, 101] == SENTINEL

    def test_sentinel_is_smallest_normal(self):
        """Test the value of the sentinel."""
        assert SENTINEL == numpy.finfo(numpy.float64).tiny
        assert SENTINEL > 0.0

    def test_out_of_range_write_is_discarded(self):
        """Test that writes outside storage leave the data untouched."""
        a = IndexedArray.matrix([1.0, 2.0, 3.0, 4.0], 2, 2)

        a[0, 0] = 99.0
        a[3, 2] = 99.0
        a.set(-5, 99.0)

        numpy.testing.assert_array_equal(a.data, [1.0, 2.0, 3.0, 4.0])
        assert a[0, 0] == SENTINEL

    def test_only_flat_offset_is_checked(self):
        """Test that row rows+1 of column j addresses row 1 of column j+1."""
        a = IndexedArray.matrix([1.0, 2.0, 3.0, 4.0], 2, 2)

        assert a[3, 1] == a[1, 2]

    def test_set_and_setitem(self):
        """Test writing through set and item assignment."""
        a = IndexedArray.zeros(3, 3)

        a.set(2, 3, 5.0)
        a[3, 1] = 7.0

        assert a[2, 3] == 5.0
        assert a.data[a.offset(3, 1)] == 7.0

        x = IndexedArray.zeros(2)
        x[2] = 1.5

        assert x.data.tolist() == [0.0, 1.5]

    def test_set_argument_count(self):
        """Test that set rejects the wrong number of arguments."""
        x = IndexedArray.zeros(2)

        with pytest.raises(TypeError):
            x.set(1.0)

    def test_matrix_length_mismatch(self):
        """Test that matrix rejects a wrong number of values."""
        with pytest.raises(ValueError, match="expected 6 values"):
            IndexedArray.matrix([1.0, 2.0, 3.0], 2, 3)

    def test_from_columns(self):
        """Test construction from a list of columns."""
        a = IndexedArray.from_columns([[1.0, 2.0], [3.0, 4.0]])

        assert a == IndexedArray.matrix([1.0, 2.0, 3.0, 4.0], 2, 2)
        assert a.to_columns() == [[1.0, 2.0], [3.0, 4.0]]

    def test_from_columns_ragged(self):
        """Test that columns of different lengths are rejected."""
        with pytest.raises(ValueError):
            IndexedArray.from_columns([[1.0, 2.0], [3.0]])

    def test_slice_from(self):
        """Test views starting at a one-based position."""
        a = IndexedArray.matrix([1.0, 2.0, 3.0, 4.0], 2, 2)

        view = a.slice_from(2, 1)

        assert view.tolist() == [2.0, 3.0, 4.0]

        view[0] = 20.0

        assert a[2, 1] == 20.0

    def test_slice_from_out_of_range(self):
        """Test that views past the end of storage are empty."""
        a = IndexedArray.matrix([1.0, 2.0, 3.0, 4.0], 2, 2)

        assert a.slice_from(3, 2).shape == (0,)
        assert a.slice_from(0).shape == (0,)
        assert a.slice_from(4).tolist() == [4.0]

    def test_from_buffer_shares_memory(self):
        """Test addressing a sub-block with the parent's leading dimension."""
        a = IndexedArray.matrix(range(1, 10), 3, 3)

        block = IndexedArray.from_buffer(a.slice_from(2, 2), a.rows)

        assert block[1, 1] == a[2, 2]
        assert block[2, 2] == a[3, 3]

        block[1, 2] = -1.0

        assert a[2, 3] == -1.0

    def test_reshape_rows(self):
        """Test changing the leading dimension in place."""
        a = IndexedArray.vector([1.0, 2.0, 3.0, 4.0, 5.0, 6.0])

        a.reshape_rows(3)

        assert not a.is_vector
        assert a.cols == 2
        assert a[1, 2] == 4.0

        with pytest.raises(ValueError):
            a.reshape_rows(0)

    def test_copy_is_independent(self):
        """Test that copies do not share storage."""
        a = IndexedArray.matrix([1.0, 2.0, 3.0, 4.0], 2, 2)
        b = a.copy()

        b[1, 1] = 0.0

        assert a[1, 1] == 1.0
        assert b.rows == 2
        assert b.cols == 2

    def test_wraps_float64_ndarray_without_copy(self):
        """Test that a 1-D float64 array is used as storage directly."""
        buffer = numpy.zeros(4)
        a = IndexedArray(buffer, 2, 2)

        a[2, 2] = 3.0

        assert buffer[3] == 3.0

    def test_to_numpy(self):
        """Test conversion to a row-major 2-D array."""
        a = IndexedArray.matrix([1.0, 2.0, 3.0, 4.0, 5.0, 6.0], 2, 3)

        numpy.testing.assert_array_equal(
            a.to_numpy(), [[1.0, 3.0, 5.0], [2.0, 4.0, 6.0]]
        )

    def test_repr(self):
        """Test the row-by-row display."""
        a = IndexedArray.matrix([1.0, 2.0, 3.0, 4.0], 2, 2)

        assert repr(a) == "[1.0, 3.0]\n[2.0, 4.0]"
        assert repr(IndexedArray.vector([1.0, 2.5])) == "[1.0, 2.5]"

    def test_equality(self):
        """Test that equality compares shape and contents."""
        a = IndexedArray.matrix([1.0, 2.0, 3.0, 4.0], 2, 2)

        assert a == IndexedArray.matrix([1.0, 2.0, 3.0, 4.0], 2, 2)
        assert a != IndexedArray.matrix([1.0, 2.0, 3.0, 4.0], 1, 4)
        assert a != IndexedArray.vector([1.0, 2.0, 3.0, 4.0])
        assert a != [1.0, 2.0, 3.0, 4.0]

    def test_unhashable(self):
        """Test that indexed arrays cannot be hashed."""
        with pytest.raises(TypeError):
            hash(IndexedArray.zeros(2))
