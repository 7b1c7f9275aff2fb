"""
Logistic disjunctive normal network (LDNN).

The decision function is a soft OR over polytopes, each polytope a soft AND
over logistic halfspaces:

    halfspace(i, j, v) = 1 / (1 + exp(-(w_ij . v) - b_ij))
    polytope(i, v)     = prod_j halfspace(i, j, v)
    classify(v)        = 1 - prod_i (1 - polytope(i, v))

Hyperplanes are seeded by k-means: positives are clustered into
``polytope_count`` centroids, negatives into ``max_halfspaces`` centroids,
and hyperplane (i, j) separates positive centroid i from negative centroid j.
Training is online gradient descent on the squared classification error.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Iterable, Optional, Sequence, Tuple, Union
import numpy as np

from ..exceptions import (
    DimensionMismatchError,
    EmptyExamplesError,
    IndexOutOfRangeError,
    RankMismatchError,
)
from ..utils.logging_config import get_logger
from .clustering import DEFAULT_KMEANS_ITERATIONS, RandomSource, as_generator, kmeans
from .vector import (
    DEFAULT_DTYPE,
    LabeledExample,
    RealVector,
    as_vector,
    dot,
    length,
    midpoint,
    normalize,
)

logger = get_logger(__name__)

VectorIn = Union[RealVector, np.ndarray, Sequence[float]]
ExamplesIn = Union[LabeledExample, Iterable[LabeledExample]]

DEFAULT_THRESHOLD = 0.5


@dataclass(frozen=True)
class HyperplaneParameter:
    """Weight vector and bias of one soft halfspace boundary."""

    weight: RealVector
    bias: float


@dataclass(frozen=True)
class HalfspaceOverflow:
    """Diagnostic emitted when a halfspace denominator overflows to infinity."""

    polytope: int
    halfspace: int
    activation: float  # weight . v
    bias: float


OverflowHandler = Callable[[HalfspaceOverflow], None]


def log_overflow(event: HalfspaceOverflow) -> None:
    """Default overflow handler: one WARNING per saturated halfspace."""
    logger.warning(
        "invalid denominator: inf, i: %d, j: %d, weight * v: %g, bias: %g",
        event.polytope,
        event.halfspace,
        event.activation,
        event.bias,
    )


class Network:
    """
    Binary classifier whose positive region is a union of soft polytopes.

    Parameters live in two contiguous arrays owned by the network:
    ``weights`` of shape ``(polytope_count, max_halfspaces, rank)`` and
    ``biases`` of shape ``(polytope_count, max_halfspaces)``.
    Not safe for concurrent mutation.
    """

    def __init__(
        self,
        polytope_count: int,
        max_halfspaces: int,
        alpha: float,
        examples: Iterable[LabeledExample],
        rng: RandomSource = None,
        *,
        kmeans_iterations: int = DEFAULT_KMEANS_ITERATIONS,
        dtype=DEFAULT_DTYPE,
        on_overflow: Optional[OverflowHandler] = None,
    ):
        """
        Build a network and seed its hyperplanes from ``examples``.

        Args:
            polytope_count: Number of polytopes (positive clusters), >= 1
            max_halfspaces: Halfspaces per polytope (negative clusters), >= 1
            alpha: Learning rate, > 0
            examples: Labeled training examples sharing one rank
            rng: numpy Generator or integer seed used by k-means
            kmeans_iterations: Lloyd rounds for each clustering
            dtype: Floating-point type of all parameters
            on_overflow: Callback for halfspace overflow diagnostics
                (defaults to a WARNING log record)

        Raises:
            EmptyExamplesError: If ``examples`` is empty
            RankMismatchError: If the examples do not share one rank
            InsufficientClusterDataError: If a class has fewer examples than
                the clusters requested for it
            ValueError: If a count is < 1 or alpha <= 0
        """
        if polytope_count < 1:
            raise ValueError(f"polytope_count must be >= 1, got {polytope_count}")
        if max_halfspaces < 1:
            raise ValueError(f"max_halfspaces must be >= 1, got {max_halfspaces}")
        if not alpha > 0:
            raise ValueError(f"alpha must be > 0, got {alpha}")

        examples = list(examples)
        if not examples:
            raise EmptyExamplesError("examples must not be empty")

        rank = examples[0].vector.rank
        for ex in examples:
            if ex.vector.rank != rank:
                raise RankMismatchError("all examples must have the same rank")

        self._dtype = np.dtype(dtype)
        self._polytope_count = int(polytope_count)
        self._max_halfspaces = int(max_halfspaces)
        self._alpha = self._dtype.type(alpha)
        self._rank = rank
        self._on_overflow: OverflowHandler = on_overflow or log_overflow

        self._weights = np.zeros((self._polytope_count, self._max_halfspaces, rank), dtype=self._dtype)
        self._biases = np.zeros((self._polytope_count, self._max_halfspaces), dtype=self._dtype)

        positives = [as_vector(ex.vector, self._dtype) for ex in examples if ex.positive]
        negatives = [as_vector(ex.vector, self._dtype) for ex in examples if not ex.positive]

        gen = as_generator(rng)
        pos_centroids = kmeans(positives, self._polytope_count, kmeans_iterations, gen)
        neg_centroids = kmeans(negatives, self._max_halfspaces, kmeans_iterations, gen)

        for i, pos in enumerate(pos_centroids):
            for j, neg in enumerate(neg_centroids):
                direction = pos - neg
                if length(direction) == 0:
                    # No direction to separate along; leave the halfspace at a flat 0.5
                    logger.warning(
                        "positive centroid %d and negative centroid %d coincide; "
                        "hyperplane (%d, %d) starts at zero",
                        i, j, i, j,
                    )
                    continue
                weight = normalize(direction)
                self._weights[i, j] = weight.values
                self._biases[i, j] = dot(weight, midpoint(pos, neg))

        logger.debug(
            "Initialized network: %d polytopes x %d halfspaces, rank %d, "
            "%d positive / %d negative examples",
            self._polytope_count,
            self._max_halfspaces,
            rank,
            len(positives),
            len(negatives),
        )

    @classmethod
    def from_config(
        cls,
        config,
        examples: Iterable[LabeledExample],
        rng: RandomSource = None,
        **kwargs,
    ) -> Network:
        """
        Build a network from a :class:`ldnn.config.NetworkConfig`.

        Extra keyword arguments (``dtype``, ``on_overflow``) are passed through.
        """
        return cls(
            config.polytope_count,
            config.max_halfspaces,
            config.alpha,
            examples,
            rng,
            kmeans_iterations=config.kmeans_iterations,
            **kwargs,
        )

    def __repr__(self) -> str:
        return (
            f"Network(polytope_count={self._polytope_count}, "
            f"max_halfspaces={self._max_halfspaces}, alpha={float(self._alpha)}, "
            f"rank={self._rank})"
        )

    # ------------------------------------------------------------------
    # Parameters
    # ------------------------------------------------------------------

    @property
    def polytope_count(self) -> int:
        return self._polytope_count

    @property
    def max_halfspaces(self) -> int:
        return self._max_halfspaces

    @property
    def alpha(self) -> float:
        return float(self._alpha)

    @property
    def rank(self) -> int:
        return self._rank

    @property
    def dtype(self) -> np.dtype:
        return self._dtype

    @property
    def weights(self) -> np.ndarray:
        """Copy of the weight grid, shape ``(P, H, rank)``."""
        return self._weights.copy()

    @property
    def biases(self) -> np.ndarray:
        """Copy of the bias grid, shape ``(P, H)``."""
        return self._biases.copy()

    def _check_cell(self, i: int, j: int = 0) -> Tuple[int, int]:
        i, j = int(i), int(j)
        if not 0 <= i < self._polytope_count:
            raise IndexOutOfRangeError(
                f"polytope {i} out of range for {self._polytope_count} polytopes"
            )
        if not 0 <= j < self._max_halfspaces:
            raise IndexOutOfRangeError(
                f"halfspace {j} out of range for {self._max_halfspaces} halfspaces"
            )
        return i, j

    def hyperplane(self, i: int, j: int) -> HyperplaneParameter:
        """Weight and bias of hyperplane (i, j)."""
        i, j = self._check_cell(i, j)
        return HyperplaneParameter(
            weight=RealVector(self._weights[i, j], dtype=self._dtype),
            bias=float(self._biases[i, j]),
        )

    def set_parameters(self, weights: np.ndarray, biases: np.ndarray) -> None:
        """
        Replace the whole parameter grid.

        Raises:
            DimensionMismatchError: If the shapes don't match the network
        """
        weights = np.asarray(weights, dtype=self._dtype)
        biases = np.asarray(biases, dtype=self._dtype)
        if weights.shape != self._weights.shape:
            raise DimensionMismatchError(
                f"weights must have shape {self._weights.shape}, got {weights.shape}"
            )
        if biases.shape != self._biases.shape:
            raise DimensionMismatchError(
                f"biases must have shape {self._biases.shape}, got {biases.shape}"
            )
        self._weights[...] = weights
        self._biases[...] = biases

    # ------------------------------------------------------------------
    # Scoring
    # ------------------------------------------------------------------

    def _input(self, v: VectorIn) -> np.ndarray:
        x = v.values if isinstance(v, RealVector) else np.asarray(v)
        if x.shape != (self._rank,):
            raise DimensionMismatchError(
                f"input must have rank {self._rank}, got shape {x.shape}"
            )
        return x.astype(self._dtype, copy=False)

    def _squash(
        self, activation: np.ndarray, bias: np.ndarray, origin: Tuple[int, int] = (0, 0)
    ) -> np.ndarray:
        """
        Logistic score for a 2-D block of halfspaces.

        ``origin`` is the (i, j) index of the block's first cell, used only
        to report overflowing cells.
        """
        with np.errstate(over="ignore"):
            denom = 1 + np.exp(-activation - bias)
        overflow = np.isinf(denom)
        scores = np.zeros_like(denom)
        np.divide(1, denom, out=scores, where=~overflow)
        for a, b in zip(*np.nonzero(overflow)):
            self._on_overflow(
                HalfspaceOverflow(
                    polytope=origin[0] + int(a),
                    halfspace=origin[1] + int(b),
                    activation=float(activation[a, b]),
                    bias=float(bias[a, b]),
                )
            )
        return scores

    def _halfspace_grid(self, x: np.ndarray) -> np.ndarray:
        """All halfspace scores for ``x``, shape ``(P, H)``."""
        return self._squash(self._weights @ x, self._biases)

    def halfspace(self, i: int, j: int, v: VectorIn) -> float:
        """Score of halfspace j of polytope i, in [0, 1]."""
        i, j = self._check_cell(i, j)
        x = self._input(v)
        activation = np.array([[self._weights[i, j] @ x]], dtype=self._dtype)
        bias = self._biases[i : i + 1, j : j + 1]
        return float(self._squash(activation, bias, origin=(i, j))[0, 0])

    def polytope(self, i: int, v: VectorIn) -> float:
        """Soft AND of the halfspaces of polytope i."""
        i, _ = self._check_cell(i)
        x = self._input(v)
        activation = (self._weights[i] @ x)[None, :]
        bias = self._biases[i : i + 1]
        return float(np.prod(self._squash(activation, bias, origin=(i, 0))))

    def classify(self, v: VectorIn) -> float:
        """Soft OR over all polytopes; always in [0, 1]."""
        polytopes = np.prod(self._halfspace_grid(self._input(v)), axis=1)
        return float(1 - np.prod(1 - polytopes))

    def predict(self, v: VectorIn, threshold: float = DEFAULT_THRESHOLD) -> bool:
        """``True`` when ``classify(v)`` exceeds ``threshold``."""
        return self.classify(v) > threshold

    # ------------------------------------------------------------------
    # Training
    # ------------------------------------------------------------------

    def _error(self, example: LabeledExample) -> float:
        return self.classify(example.vector) - example.target

    def _descend(self, example: LabeledExample) -> None:
        x = self._input(example.vector)

        # Phase 1: every score and gradient coefficient from one snapshot
        scores = self._halfspace_grid(x)
        polytopes = np.prod(scores, axis=1)
        complements = 1 - polytopes
        err = (1 - np.prod(complements)) - example.target

        others = np.array(
            [np.prod(np.delete(complements, i)) for i in range(self._polytope_count)],
            dtype=self._dtype,
        )
        diff = 2 * err * others[:, None] * polytopes[:, None] * (1 - scores) * self._alpha

        # Phase 2: apply the buffered update to the whole grid at once
        self._weights -= diff[:, :, None] * x[None, None, :]
        self._biases -= diff

    def gradient_descent(self, data: ExamplesIn) -> None:
        """
        Online gradient descent on the squared error.

        Accepts a single :class:`LabeledExample` (one update) or an iterable
        of them (one update per example, in the given order; one epoch).
        Shuffling between epochs is up to the caller.
        """
        if isinstance(data, LabeledExample):
            self._descend(data)
            return
        for example in data:
            self._descend(example)

    def quadratic_error(self, data: ExamplesIn) -> float:
        """
        Squared error ``(classify(v) - label) ** 2`` of one example, or the
        sum over an iterable of examples.
        """
        if isinstance(data, LabeledExample):
            return self._error(data) ** 2
        return float(sum(self._error(example) ** 2 for example in data))
