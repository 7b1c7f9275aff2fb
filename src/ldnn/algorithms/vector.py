"""
Fixed-rank real vectors and the vector space primitives used by the network.

A ``RealVector`` wraps a read-only 1-D numpy array. Its rank (length) is
fixed when it is created. Binary operations between vectors require equal
rank and raise ``DimensionMismatchError`` otherwise.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Iterable, Iterator, Sequence, Union
import numpy as np

from ..exceptions import DimensionMismatchError, EmptyInputError, IndexOutOfRangeError

Scalar = Union[int, float, np.floating]
DEFAULT_DTYPE = np.float64


class RealVector:
    """
    Immutable, fixed-rank vector of floating-point components.

    Attributes:
        values: Read-only numpy array holding the components
    """

    __slots__ = ("_values",)

    def __init__(self, values: Iterable[Scalar], dtype=DEFAULT_DTYPE):
        if not np.issubdtype(np.dtype(dtype), np.floating):
            raise TypeError(f"dtype must be a floating-point type, got {dtype}")
        if isinstance(values, RealVector):
            values = values.values
        elif not isinstance(values, np.ndarray):
            values = list(values)
        arr = np.array(values, dtype=dtype)
        if arr.ndim != 1:
            raise ValueError(f"RealVector requires 1-D data, got shape {arr.shape}")
        arr.setflags(write=False)
        self._values = arr

    @classmethod
    def zeros(cls, rank: int, dtype=DEFAULT_DTYPE) -> RealVector:
        """Return the zero vector of the given rank."""
        return cls(np.zeros(rank, dtype=dtype), dtype=dtype)

    @property
    def values(self) -> np.ndarray:
        return self._values

    @property
    def rank(self) -> int:
        return int(self._values.shape[0])

    @property
    def dtype(self) -> np.dtype:
        return self._values.dtype

    def __len__(self) -> int:
        return self.rank

    def __iter__(self) -> Iterator[float]:
        return (float(x) for x in self._values)

    def __getitem__(self, index: int) -> float:
        return float(self._values[index])

    def __repr__(self) -> str:
        inner = " ".join(f"{x:g}" for x in self._values)
        return f"RealVector(({inner}))"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, RealVector):
            return NotImplemented
        return self.rank == other.rank and bool(np.array_equal(self._values, other._values))

    def __hash__(self) -> int:
        return hash((self.rank, self._values.tobytes()))

    def __add__(self, other: RealVector) -> RealVector:
        if not isinstance(other, RealVector):
            return NotImplemented
        return add(self, other)

    def __sub__(self, other: RealVector) -> RealVector:
        if not isinstance(other, RealVector):
            return NotImplemented
        return subtract(self, other)

    def __neg__(self) -> RealVector:
        return scale(self, -1)

    def __mul__(self, other):
        # vector * vector is the dot product, vector * scalar scales
        if isinstance(other, RealVector):
            return dot(self, other)
        if isinstance(other, (int, float, np.integer, np.floating)):
            return scale(self, other)
        return NotImplemented

    def __rmul__(self, other):
        if isinstance(other, (int, float, np.integer, np.floating)):
            return scale(self, other)
        return NotImplemented

    def __matmul__(self, other: RealVector) -> float:
        if not isinstance(other, RealVector):
            return NotImplemented
        return dot(self, other)

    def __truediv__(self, other):
        if isinstance(other, (int, float, np.integer, np.floating)):
            return scale(self, 1.0 / other)
        return NotImplemented


@dataclass(frozen=True)
class LabeledExample:
    """A vector together with its binary label (``True`` = positive class)."""

    vector: RealVector
    positive: bool

    @property
    def target(self) -> float:
        """Numeric target: 1.0 for positive, 0.0 for negative."""
        return 1.0 if self.positive else 0.0


def as_vector(values: Union[RealVector, Iterable[Scalar]], dtype=DEFAULT_DTYPE) -> RealVector:
    """Return ``values`` as a RealVector, converting when necessary."""
    if isinstance(values, RealVector) and values.dtype == np.dtype(dtype):
        return values
    return RealVector(values, dtype=dtype)


def _check_rank(l: RealVector, r: RealVector) -> None:
    if l.rank != r.rank:
        raise DimensionMismatchError(
            f"rank differs: {l.rank} != {r.rank}"
        )


def merge(l: RealVector, r: RealVector, fn: Callable[[np.ndarray, np.ndarray], np.ndarray]) -> RealVector:
    """
    Combine two vectors component by component.

    Args:
        l: Left operand
        r: Right operand (same rank as ``l``)
        fn: Elementwise function applied to the two component arrays

    Returns:
        RealVector with ``fn(l[k], r[k])`` in component k

    Raises:
        DimensionMismatchError: If the ranks differ
    """
    _check_rank(l, r)
    return RealVector(fn(l.values, r.values), dtype=np.result_type(l.dtype, r.dtype))


def add(l: RealVector, r: RealVector) -> RealVector:
    return merge(l, r, np.add)


def subtract(l: RealVector, r: RealVector) -> RealVector:
    return merge(l, r, np.subtract)


def scale(v: RealVector, s: Scalar) -> RealVector:
    """Multiply every component of ``v`` by ``s``."""
    return RealVector(v.values * s, dtype=v.dtype)


def dot(l: RealVector, r: RealVector) -> float:
    """Dot product of two vectors of equal rank."""
    _check_rank(l, r)
    return float(np.dot(l.values, r.values))


def length(v: RealVector) -> float:
    """Euclidean norm ``sqrt(sum(v_k ** 2))``."""
    return float(np.sqrt(np.sum(np.square(v.values))))


def normalize(v: RealVector) -> RealVector:
    """
    Scale ``v`` to unit length.

    A zero vector has no direction; the result is then all NaN. Callers that
    may see zero vectors must check for them first.
    """
    norm = v.dtype.type(length(v))
    with np.errstate(divide="ignore", invalid="ignore"):
        return RealVector(v.values * (v.dtype.type(1) / norm), dtype=v.dtype)


def distance(l: RealVector, r: RealVector) -> float:
    """Euclidean distance ``length(l - r)``."""
    return length(subtract(l, r))


def midpoint(l: RealVector, r: RealVector) -> RealVector:
    """Point halfway between ``l`` and ``r``."""
    return scale(add(l, r), 0.5)


def centroid(points: Iterable[RealVector]) -> RealVector:
    """
    Arithmetic mean of a non-empty collection of equal-rank vectors.

    Raises:
        EmptyInputError: If ``points`` is empty
        DimensionMismatchError: If the points do not share one rank
    """
    points = list(points)
    if not points:
        raise EmptyInputError("cannot compute the centroid of an empty collection")
    rank = points[0].rank
    for p in points:
        if p.rank != rank:
            raise DimensionMismatchError(f"rank differs: {p.rank} != {rank}")
    stacked = np.stack([p.values for p in points], axis=0)
    return RealVector(stacked.mean(axis=0), dtype=points[0].dtype)


def _check_index(v: RealVector, index: int) -> int:
    index = int(index)
    if index < 0 or index >= v.rank:
        raise IndexOutOfRangeError(
            f"dimension {index} out of range for rank {v.rank}"
        )
    return index


def select_dimensions(v: RealVector, indices: Sequence[int]) -> RealVector:
    """
    Project ``v`` onto the given ordered list of component indices.

    Duplicates and reordering are allowed, e.g. ``select_dimensions(v, [2, 0, 0])``.

    Raises:
        IndexOutOfRangeError: If any index is outside ``[0, rank)``
    """
    idx = [_check_index(v, i) for i in indices]
    return RealVector(v.values[idx], dtype=v.dtype)


def remove_dimension(v: RealVector, dimension: int) -> RealVector:
    """
    Return ``v`` without component ``dimension``, keeping the others in order.

    Raises:
        IndexOutOfRangeError: If ``dimension`` is outside ``[0, rank)``
    """
    dimension = _check_index(v, dimension)
    return RealVector(np.delete(v.values, dimension), dtype=v.dtype)
