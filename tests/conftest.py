"""
Pytest configuration and shared fixtures.

This file is automatically discovered by pytest and provides fixtures
available to all test modules.
"""

import numpy as np
import pytest

from ldnn.algorithms.vector import LabeledExample, RealVector


def make_examples(points, labels):
    """Build LabeledExamples from an (n, d) array and n booleans."""
    return [
        LabeledExample(vector=RealVector(p), positive=bool(l))
        for p, l in zip(points, labels)
    ]


@pytest.fixture
def rng():
    """Seeded numpy Generator so every test is reproducible."""
    return np.random.default_rng(42)


@pytest.fixture
def square_examples():
    """
    Fixture factory for the square-in-square dataset.

    Points are uniform in the unit square; a point is positive when both
    coordinates lie in the central square of half the side length.

    Usage:
        examples = square_examples(n=1000, seed=0)
    """
    def _make(n: int = 1000, seed: int = 0):
        gen = np.random.default_rng(seed)
        X = gen.uniform(0.0, 1.0, size=(n, 2))
        labels = np.all(np.abs(X - 0.5) < 0.25, axis=1)
        return make_examples(X, labels)

    return _make


@pytest.fixture
def separable_examples():
    """
    Two well-separated 2-D blobs: negatives around (0.2, 0.2), positives
    around (0.8, 0.8).
    """
    gen = np.random.default_rng(7)
    neg = gen.normal(0.2, 0.05, size=(40, 2))
    pos = gen.normal(0.8, 0.05, size=(40, 2))
    X = np.vstack([neg, pos])
    labels = [False] * 40 + [True] * 40
    return make_examples(X, labels)


@pytest.fixture
def overflow_events():
    """
    Fixture for an overflow handler that records diagnostics instead of
    logging them.

    Returns (events, handler); pass ``handler`` as ``on_overflow``.
    """
    events = []
    return events, events.append


@pytest.fixture
def examples_from():
    """Fixture exposing :func:`make_examples` to test modules."""
    return make_examples
