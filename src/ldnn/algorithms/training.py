"""
Training driver: partitioning, epochs and cross-validation rounds.

Each cross-validation round shuffles the examples, splits them into a
training and a test half, seeds a fresh network on the training half, runs a
fixed number of gradient descent epochs and reports the test accuracy.
"""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from typing import Any, List, Optional, Sequence, Tuple
import numpy as np

from ..config import NetworkConfig, TrainingConfig
from ..exceptions import EmptyInputError
from ..utils.logging_config import get_logger
from .clustering import RandomSource, as_generator, fisher_yates_shuffle
from .network import DEFAULT_THRESHOLD, Network
from .vector import LabeledExample

logger = get_logger(__name__)


@dataclass
class RoundResult:
    """Outcome of one cross-validation round."""

    round_index: int
    accuracy: float
    train_error: float
    elapsed_ms: float


@dataclass
class CrossValidationResult:
    """Results of all rounds plus summary statistics."""

    rounds: List[RoundResult] = field(default_factory=list)
    mean_accuracy: float = 0.0
    std_accuracy: float = 0.0


def random_partition(
    examples: Sequence[Any], rng: RandomSource = None, fraction: float = 0.5
) -> Tuple[List[Any], List[Any]]:
    """
    Shuffle a copy of ``examples`` and split it in two.

    Args:
        examples: Items to split
        rng: numpy Generator or integer seed
        fraction: Share of items that go to the first part

    Returns:
        ``(first, second)`` with ``int(fraction * n)`` items in ``first``
    """
    if not 0.0 <= fraction <= 1.0:
        raise ValueError(f"fraction must be in [0, 1], got {fraction}")
    items = fisher_yates_shuffle(list(examples), as_generator(rng))
    split_at = int(fraction * len(items))
    return items[:split_at], items[split_at:]


def accuracy(
    network: Network,
    examples: Sequence[LabeledExample],
    threshold: float = DEFAULT_THRESHOLD,
) -> float:
    """
    Fraction of examples whose predicted class matches their label.

    Raises:
        EmptyInputError: If ``examples`` is empty
    """
    if not examples:
        raise EmptyInputError("cannot compute accuracy of an empty example set")
    correct = sum(
        1 for ex in examples if network.predict(ex.vector, threshold) == ex.positive
    )
    return correct / len(examples)


def train_network(
    network: Network,
    examples: Sequence[LabeledExample],
    epochs: int,
    rng: RandomSource = None,
    *,
    shuffle: bool = True,
) -> List[float]:
    """
    Run ``epochs`` passes of gradient descent over ``examples``.

    Args:
        network: Network to train in place
        examples: Training examples
        epochs: Number of passes
        rng: numpy Generator or seed used for shuffling
        shuffle: Reshuffle a copy of the examples before every pass

    Returns:
        Total quadratic error over ``examples`` after each epoch
    """
    if epochs < 0:
        raise ValueError(f"epochs must be >= 0, got {epochs}")

    gen = as_generator(rng)
    order = list(examples)
    errors: List[float] = []
    for epoch in range(epochs):
        if shuffle:
            fisher_yates_shuffle(order, gen)
        network.gradient_descent(order)
        errors.append(network.quadratic_error(order))
        logger.debug("epoch %d/%d: quadratic error %.6f", epoch + 1, epochs, errors[-1])
    return errors


def run_cross_validation(
    examples: Sequence[LabeledExample],
    network_config: NetworkConfig,
    training_config: Optional[TrainingConfig] = None,
    rng: RandomSource = None,
    **network_kwargs,
) -> CrossValidationResult:
    """
    Repeated random-split evaluation of freshly trained networks.

    For each round:
    1. Randomly partition the examples (``train_fraction`` to training)
    2. Seed a new network on the training part
    3. Train for ``gradient_iterations`` shuffled epochs
    4. Measure accuracy on the held-out part

    Args:
        examples: All labeled examples
        network_config: Hyperparameters for every network
        training_config: Rounds, epochs, split and threshold
        rng: numpy Generator or seed driving partitioning, seeding and shuffling
        **network_kwargs: Passed to :class:`Network` (e.g. ``on_overflow``)

    Returns:
        CrossValidationResult with one RoundResult per round

    Raises:
        EmptyExamplesError: If ``examples`` is empty
        InsufficientClusterDataError: If a training split has too few
            examples of a class
    """
    training_config = training_config or TrainingConfig()
    gen = as_generator(rng)
    examples = list(examples)

    result = CrossValidationResult()
    for round_index in range(training_config.rounds):
        start = time.perf_counter()

        train, test = random_partition(examples, gen, training_config.train_fraction)
        network = Network.from_config(network_config, train, gen, **network_kwargs)
        errors = train_network(network, train, training_config.gradient_iterations, gen)
        round_accuracy = accuracy(network, test, training_config.threshold)

        elapsed_ms = (time.perf_counter() - start) * 1000.0
        train_error = errors[-1] if errors else network.quadratic_error(train)
        result.rounds.append(
            RoundResult(
                round_index=round_index,
                accuracy=round_accuracy,
                train_error=train_error,
                elapsed_ms=elapsed_ms,
            )
        )
        logger.info(
            "%d/%d: %.2f%% correctly classified! (%.0fms)",
            round_index + 1,
            training_config.rounds,
            100.0 * round_accuracy,
            elapsed_ms,
        )

    accuracies = [r.accuracy for r in result.rounds]
    result.mean_accuracy = float(np.mean(accuracies))
    result.std_accuracy = float(np.std(accuracies))
    return result
