"""
Tests for the training driver.
"""

import logging

import numpy as np
import pytest

from ldnn.algorithms.network import Network
from ldnn.algorithms.training import (
    CrossValidationResult,
    RoundResult,
    accuracy,
    random_partition,
    run_cross_validation,
    train_network,
)
from ldnn.config import NetworkConfig, TrainingConfig
from ldnn.exceptions import EmptyExamplesError, EmptyInputError


def test_random_partition_sizes():
    items = list(range(11))
    first, second = random_partition(items, np.random.default_rng(0))
    assert len(first) == 5
    assert len(second) == 6
    assert sorted(first + second) == items
    assert items == list(range(11))  # input untouched


def test_random_partition_fraction():
    first, second = random_partition(list(range(10)), 0, fraction=0.8)
    assert len(first) == 8
    assert len(second) == 2


def test_random_partition_deterministic():
    a = random_partition(list(range(30)), np.random.default_rng(4))
    b = random_partition(list(range(30)), np.random.default_rng(4))
    assert a == b


def test_random_partition_invalid_fraction():
    with pytest.raises(ValueError):
        random_partition([1, 2], 0, fraction=1.5)


def test_accuracy(separable_examples):
    net = Network(1, 1, 1.0, separable_examples, 0)
    acc = accuracy(net, separable_examples)
    assert 0.0 <= acc <= 1.0
    expected = np.mean([net.predict(ex.vector) == ex.positive for ex in separable_examples])
    assert acc == pytest.approx(expected)


def test_accuracy_threshold_extremes(separable_examples):
    net = Network(1, 1, 1.0, separable_examples, 0)
    # Nothing scores above 1, so everything is predicted negative
    assert accuracy(net, separable_examples, threshold=1.0) == pytest.approx(0.5)


def test_accuracy_empty(separable_examples):
    net = Network(1, 1, 1.0, separable_examples, 0)
    with pytest.raises(EmptyInputError):
        accuracy(net, [])


def test_train_network_returns_error_per_epoch(separable_examples):
    net = Network(1, 1, 1.0, separable_examples, 0)
    initial = net.quadratic_error(separable_examples)
    errors = train_network(net, separable_examples, 5, np.random.default_rng(0))
    assert len(errors) == 5
    assert errors[-1] < initial
    assert accuracy(net, separable_examples) >= 0.95


def test_train_network_without_shuffle_is_plain_epochs(separable_examples):
    a = Network(2, 2, 1.0, separable_examples, 0)
    b = Network(2, 2, 1.0, separable_examples, 0)
    train_network(a, separable_examples, 3, shuffle=False)
    for _ in range(3):
        b.gradient_descent(separable_examples)
    np.testing.assert_array_equal(a.weights, b.weights)


def test_train_network_zero_epochs(separable_examples):
    net = Network(1, 1, 1.0, separable_examples, 0)
    before = net.weights
    assert train_network(net, separable_examples, 0) == []
    np.testing.assert_array_equal(net.weights, before)
    with pytest.raises(ValueError):
        train_network(net, separable_examples, -1)


def test_run_cross_validation(separable_examples, caplog):
    cfg = NetworkConfig(polytope_count=1, max_halfspaces=1, alpha=1.0)
    training = TrainingConfig(rounds=3, gradient_iterations=10)

    with caplog.at_level(logging.INFO, logger="ldnn"):
        result = run_cross_validation(
            separable_examples, cfg, training, np.random.default_rng(0)
        )

    assert isinstance(result, CrossValidationResult)
    assert len(result.rounds) == 3
    assert all(isinstance(r, RoundResult) for r in result.rounds)
    assert [r.round_index for r in result.rounds] == [0, 1, 2]
    assert all(0.0 <= r.accuracy <= 1.0 for r in result.rounds)
    assert all(r.elapsed_ms >= 0.0 for r in result.rounds)
    assert result.mean_accuracy == pytest.approx(np.mean([r.accuracy for r in result.rounds]))
    assert result.mean_accuracy > 0.9
    assert "correctly classified" in caplog.text


def test_run_cross_validation_deterministic(separable_examples):
    cfg = NetworkConfig(polytope_count=1, max_halfspaces=1, alpha=1.0)
    training = TrainingConfig(rounds=2, gradient_iterations=2)
    a = run_cross_validation(separable_examples, cfg, training, 3)
    b = run_cross_validation(separable_examples, cfg, training, 3)
    assert [r.accuracy for r in a.rounds] == [r.accuracy for r in b.rounds]
    assert [r.train_error for r in a.rounds] == [r.train_error for r in b.rounds]


def test_run_cross_validation_empty():
    cfg = NetworkConfig(polytope_count=1, max_halfspaces=1, alpha=1.0)
    with pytest.raises(EmptyExamplesError):
        run_cross_validation([], cfg, TrainingConfig(), 0)
