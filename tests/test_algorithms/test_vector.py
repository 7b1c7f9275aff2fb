"""
Tests for vector space primitives.
"""

import math

import numpy as np
import pytest

from ldnn.algorithms.vector import (
    LabeledExample,
    RealVector,
    add,
    centroid,
    distance,
    dot,
    length,
    merge,
    midpoint,
    normalize,
    remove_dimension,
    scale,
    select_dimensions,
    subtract,
)
from ldnn.exceptions import (
    DimensionMismatchError,
    EmptyInputError,
    IndexOutOfRangeError,
)


# ------------------------------------------------------------------
# RealVector
# ------------------------------------------------------------------


def test_real_vector_basic():
    v = RealVector([1, 2, 3])
    assert v.rank == 3
    assert len(v) == 3
    assert v[1] == 2.0
    assert list(v) == [1.0, 2.0, 3.0]
    assert v.dtype == np.float64


def test_real_vector_is_read_only():
    """The backing array can't be mutated, so rank and values stay fixed."""
    v = RealVector([1.0, 2.0])
    with pytest.raises(ValueError):
        v.values[0] = 5.0


def test_real_vector_copies_input():
    data = np.array([1.0, 2.0])
    v = RealVector(data)
    data[0] = 9.0
    assert v[0] == 1.0


def test_real_vector_dtype_parameter():
    v = RealVector([1, 2], dtype=np.float32)
    assert v.dtype == np.float32
    assert scale(v, 2.0).dtype == np.float32


def test_real_vector_rejects_non_float_dtype():
    with pytest.raises(TypeError):
        RealVector([1, 2], dtype=np.int64)


def test_real_vector_rejects_2d():
    with pytest.raises(ValueError):
        RealVector(np.zeros((2, 2)))


def test_real_vector_equality():
    assert RealVector([1, 2]) == RealVector([1.0, 2.0])
    assert RealVector([1, 2]) != RealVector([1, 3])
    assert RealVector([1, 2]) != RealVector([1, 2, 0])


def test_operators():
    a = RealVector([1, 2])
    b = RealVector([3, 5])
    assert a + b == RealVector([4, 7])
    assert b - a == RealVector([2, 3])
    assert a * b == 13.0
    assert a @ b == 13.0
    assert a * 2 == RealVector([2, 4])
    assert 2 * a == RealVector([2, 4])
    assert b / 2 == RealVector([1.5, 2.5])
    assert -a == RealVector([-1, -2])


def test_numpy_real_scalars_scale():
    a = RealVector([1, 2])
    assert a * np.float32(0.5) == RealVector([0.5, 1])
    assert a * np.int64(3) == RealVector([3, 6])


def test_complex_scalars_rejected():
    a = RealVector([1, 2])
    with pytest.raises(TypeError):
        a * 1j
    with pytest.raises(TypeError):
        a / (2 + 1j)
    z = np.complex128(2 + 1j)
    assert a.__mul__(z) is NotImplemented
    assert a.__rmul__(z) is NotImplemented
    assert a.__truediv__(z) is NotImplemented


# ------------------------------------------------------------------
# Rank checks
# ------------------------------------------------------------------


@pytest.mark.parametrize("op", [add, subtract, dot, distance, midpoint])
def test_binary_ops_require_equal_rank(op):
    with pytest.raises(DimensionMismatchError):
        op(RealVector([1, 2]), RealVector([1, 2, 3]))


def test_merge_custom_function():
    result = merge(RealVector([1, 5]), RealVector([4, 2]), np.maximum)
    assert result == RealVector([4, 5])
    with pytest.raises(DimensionMismatchError):
        merge(RealVector([1]), RealVector([1, 2]), np.maximum)


def test_dimension_mismatch_is_value_error():
    """Callers guarding with ``except ValueError`` still catch rank errors."""
    with pytest.raises(ValueError):
        RealVector([1]) + RealVector([1, 2])


# ------------------------------------------------------------------
# Length, normalize, distance
# ------------------------------------------------------------------


def test_length():
    assert length(RealVector([3, 4])) == pytest.approx(5.0)
    assert length(RealVector([0, 0, 0])) == 0.0


def test_normalize_unit_length(rng):
    for _ in range(50):
        v = RealVector(rng.normal(size=5) * rng.uniform(0.01, 100))
        assert length(normalize(v)) == pytest.approx(1.0)


def test_normalize_keeps_direction():
    n = normalize(RealVector([0, 2, 0]))
    assert n == RealVector([0, 1, 0])


def test_normalize_zero_vector_is_nan():
    """A zero vector has no direction; the result is NaN rather than an error."""
    n = normalize(RealVector([0.0, 0.0]))
    assert all(math.isnan(x) for x in n)


def test_distance_properties(rng):
    a = RealVector(rng.normal(size=4))
    b = RealVector(rng.normal(size=4))
    assert distance(a, a) == 0.0
    assert distance(a, b) == pytest.approx(distance(b, a))
    assert distance(RealVector([0, 0]), RealVector([3, 4])) == pytest.approx(5.0)


def test_midpoint():
    assert midpoint(RealVector([0, 2]), RealVector([2, 4])) == RealVector([1, 3])


# ------------------------------------------------------------------
# Centroid
# ------------------------------------------------------------------


def test_centroid_single_and_repeated():
    v = RealVector([1.5, -2.0, 3.0])
    assert centroid([v]) == v
    assert centroid([v, v, v]) == v


def test_centroid_mean():
    c = centroid([RealVector([0, 0]), RealVector([2, 0]), RealVector([1, 3])])
    np.testing.assert_allclose(c.values, [1.0, 1.0])


def test_centroid_accepts_generator():
    c = centroid(RealVector([i, 2 * i]) for i in range(3))
    np.testing.assert_allclose(c.values, [1.0, 2.0])


def test_centroid_empty():
    with pytest.raises(EmptyInputError):
        centroid([])


def test_centroid_mixed_rank():
    with pytest.raises(DimensionMismatchError):
        centroid([RealVector([1, 2]), RealVector([1])])


# ------------------------------------------------------------------
# Dimension selection / removal
# ------------------------------------------------------------------


def test_select_dimensions_identity(rng):
    v = RealVector(rng.normal(size=6))
    assert select_dimensions(v, list(range(v.rank))) == v
    assert select_dimensions(v, range(v.rank)) == v


def test_select_dimensions_reorder_and_duplicate():
    v = RealVector([10, 20, 30])
    assert select_dimensions(v, [2, 0, 0]) == RealVector([30, 10, 10])
    assert select_dimensions(v, []).rank == 0


@pytest.mark.parametrize("bad", [3, -1, 100])
def test_select_dimensions_out_of_range(bad):
    with pytest.raises(IndexOutOfRangeError):
        select_dimensions(RealVector([1, 2, 3]), [0, bad])


def test_remove_dimension():
    v = RealVector([1, 2, 3, 4])
    assert remove_dimension(v, 0) == RealVector([2, 3, 4])
    assert remove_dimension(v, 2) == RealVector([1, 2, 4])
    assert remove_dimension(v, 3) == RealVector([1, 2, 3])


@pytest.mark.parametrize("bad", [4, -1])
def test_remove_dimension_out_of_range(bad):
    with pytest.raises(IndexOutOfRangeError):
        remove_dimension(RealVector([1, 2, 3, 4]), bad)


def test_index_error_is_index_error():
    with pytest.raises(IndexError):
        remove_dimension(RealVector([1]), 1)


# ------------------------------------------------------------------
# LabeledExample
# ------------------------------------------------------------------


def test_labeled_example_target():
    assert LabeledExample(RealVector([1]), True).target == 1.0
    assert LabeledExample(RealVector([1]), False).target == 0.0
