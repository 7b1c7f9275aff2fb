"""
LDNN - Core Package

A binary classifier whose positive region is a union of soft convex
polytopes (logistic disjunctive normal network).

This package provides:
- Vector primitives and k-means seeding
- The network model with online gradient descent
- A cross-validation training driver, CSV loading and a CLI
"""

__version__ = "0.1.0"

from .exceptions import (
    LDNNError,
    DimensionMismatchError,
    RankMismatchError,
    EmptyInputError,
    EmptyExamplesError,
    InsufficientClusterDataError,
    IndexOutOfRangeError,
)
from .algorithms import (
    RealVector,
    LabeledExample,
    Network,
    HalfspaceOverflow,
    kmeans,
    run_cross_validation,
)
from .config import NetworkConfig, TrainingConfig, load_network_config

# Explicitly import subpackages to ensure they're discoverable
from . import algorithms
from . import utils

__all__ = [
    "LDNNError",
    "DimensionMismatchError",
    "RankMismatchError",
    "EmptyInputError",
    "EmptyExamplesError",
    "InsufficientClusterDataError",
    "IndexOutOfRangeError",
    "RealVector",
    "LabeledExample",
    "Network",
    "HalfspaceOverflow",
    "kmeans",
    "run_cross_validation",
    "NetworkConfig",
    "TrainingConfig",
    "load_network_config",
    "algorithms",
    "utils",
]
