"""
Lloyd's k-means used to seed the network's hyperplanes.

Seeding is random (the first k points of a Fisher-Yates shuffle) and the
algorithm runs a fixed number of rounds without a convergence check, so the
result only depends on the input order and the random generator state.
"""

from __future__ import annotations

from typing import List, Optional, Sequence, TypeVar, Union
import numpy as np

from ..exceptions import InsufficientClusterDataError, RankMismatchError
from ..utils.logging_config import get_logger
from .vector import RealVector, centroid, distance

logger = get_logger(__name__)

T = TypeVar("T")
RandomSource = Union[np.random.Generator, int, None]

# Historical runs used both 10 and 100 rounds; 10 is enough to seed hyperplanes
DEFAULT_KMEANS_ITERATIONS = 10


def as_generator(rng: RandomSource) -> np.random.Generator:
    """Return ``rng`` if it already is a Generator, else seed a new one with it."""
    if isinstance(rng, np.random.Generator):
        return rng
    return np.random.default_rng(rng)


def fisher_yates_shuffle(items: List[T], rng: np.random.Generator) -> List[T]:
    """
    Shuffle ``items`` in place.

    Walks from the last index down to 1 and swaps each element with one drawn
    uniformly from ``[0, i]``, so the permutation is a pure function of the
    generator state.

    Returns:
        The same list, for chaining
    """
    for i in range(len(items) - 1, 0, -1):
        j = int(rng.integers(0, i + 1))
        items[i], items[j] = items[j], items[i]
    return items


def assign_to_nearest(points: Sequence[RealVector], centroids: Sequence[RealVector]) -> List[int]:
    """
    Index of the nearest centroid for every point.

    Ties go to the lowest centroid index.
    """
    labels = []
    for p in points:
        dists = [distance(p, c) for c in centroids]
        labels.append(int(np.argmin(dists)))
    return labels


def kmeans(
    points: Sequence[RealVector],
    k: int,
    iterations: int = DEFAULT_KMEANS_ITERATIONS,
    rng: RandomSource = None,
) -> List[RealVector]:
    """
    Cluster ``points`` into ``k`` groups and return the group centroids.

    Steps:
    1. Shuffle a copy of ``points`` once with ``rng``
    2. Use the first ``k`` shuffled points as the initial centroids
    3. Run exactly ``iterations`` Lloyd rounds: assign each point to its
       nearest centroid, then move each centroid to the mean of its points

    A cluster that ends a round with no points keeps its previous centroid.

    Args:
        points: Vectors to cluster, all of the same rank
        k: Number of clusters
        iterations: Number of Lloyd rounds (0 returns the random seeds)
        rng: numpy Generator or integer seed

    Returns:
        List of exactly ``k`` centroids

    Raises:
        InsufficientClusterDataError: If ``k`` exceeds the number of points
        RankMismatchError: If the points do not share one rank
        ValueError: If ``k < 1`` or ``iterations < 0``
    """
    if k < 1:
        raise ValueError(f"k must be >= 1, got {k}")
    if iterations < 0:
        raise ValueError(f"iterations must be >= 0, got {iterations}")

    data = list(points)
    if k > len(data):
        raise InsufficientClusterDataError(
            f"too many clusters for given data: k ({k}) > number of points ({len(data)})"
        )
    rank = data[0].rank
    if any(p.rank != rank for p in data):
        raise RankMismatchError("all points must have the same rank")

    gen = as_generator(rng)
    fisher_yates_shuffle(data, gen)

    centroids = data[:k]
    for round_idx in range(iterations):
        clusters: List[List[RealVector]] = [[] for _ in range(k)]
        for p, label in zip(data, assign_to_nearest(data, centroids)):
            clusters[label].append(p)

        for c, members in enumerate(clusters):
            if members:
                centroids[c] = centroid(members)
            else:
                logger.debug(
                    "k-means round %d: cluster %d is empty, keeping previous centroid",
                    round_idx,
                    c,
                )

    return centroids
