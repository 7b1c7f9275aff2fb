"""
Algorithm Core Library - vector primitives, k-means seeding and the LDNN model.

This module provides the classifier itself plus the training driver, with
numpy as the only numerical dependency.
"""

from .vector import (
    RealVector,
    LabeledExample,
    scale,
    length,
    normalize,
    dot,
    distance,
    midpoint,
    centroid,
    select_dimensions,
    remove_dimension,
)
from .clustering import kmeans, assign_to_nearest, fisher_yates_shuffle
from .network import Network, HalfspaceOverflow, HyperplaneParameter, log_overflow
from .training import (
    random_partition,
    accuracy,
    train_network,
    run_cross_validation,
    RoundResult,
    CrossValidationResult,
)

__all__ = [
    # Vector primitives
    "RealVector",
    "LabeledExample",
    "scale",
    "length",
    "normalize",
    "dot",
    "distance",
    "midpoint",
    "centroid",
    "select_dimensions",
    "remove_dimension",
    # Clustering
    "kmeans",
    "assign_to_nearest",
    "fisher_yates_shuffle",
    # Model
    "Network",
    "HalfspaceOverflow",
    "HyperplaneParameter",
    "log_overflow",
    # Training driver
    "random_partition",
    "accuracy",
    "train_network",
    "run_cross_validation",
    "RoundResult",
    "CrossValidationResult",
]
