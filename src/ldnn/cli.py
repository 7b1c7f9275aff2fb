#!/usr/bin/env python3
"""
Command line entry point: cross-validate an LDNN on a delimited data file.

Usage:
    ldnn data.tsv --label-dimension 2 --dimensions 0 1 --rounds 5 \\
        --gradient-iterations 10 --config network.env --seed 42
"""

import argparse
import sys
from typing import List, Optional

import numpy as np

from .algorithms.training import run_cross_validation
from .config import TrainingConfig, config, load_network_config
from .exceptions import LDNNError
from .utils.csv_loader import (
    dimension_to_classification,
    min_max_normalize,
    read_csv_file,
    select_example_dimensions,
)
from .utils.logging_config import get_logger, setup_logging

logger = get_logger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="ldnn",
        description="Train and cross-validate a logistic disjunctive normal network",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )
    parser.add_argument("datafile", help="Delimited text file with one example per line")
    parser.add_argument(
        "--label-dimension",
        type=int,
        required=True,
        help="Column holding the class (1 = positive)",
    )
    parser.add_argument(
        "--dimensions",
        type=int,
        nargs="+",
        default=None,
        help="Columns to learn on, counted after removing the label column (default: all)",
    )
    parser.add_argument("--rounds", type=int, default=1, help="Cross-validation rounds")
    parser.add_argument(
        "--gradient-iterations", type=int, default=10, help="Gradient descent epochs per round"
    )
    parser.add_argument(
        "--config",
        default=None,
        help="KEY=value file with polytope_count, max_halfspaces, alpha, kmeans_iterations "
        "(default: LDNN_* environment variables)",
    )
    parser.add_argument("--seed", type=int, default=None, help="Random seed")
    parser.add_argument("--delimiter", default="\t", help="Field separator")
    parser.add_argument("--log-level", default=config.log_level, help="Logging level")
    parser.add_argument("--log-file", default=None, help="Also append log lines to this file")
    return parser


def run(args: argparse.Namespace) -> int:
    network_config = load_network_config(args.config) if args.config else config.network
    training_config = TrainingConfig(
        rounds=args.rounds, gradient_iterations=args.gradient_iterations
    )

    logger.info("initializing...")
    data = read_csv_file(args.datafile, args.delimiter)
    examples = dimension_to_classification(data, args.label_dimension)
    if args.dimensions:
        examples = select_example_dimensions(examples, args.dimensions)
    examples = min_max_normalize(examples)

    result = run_cross_validation(
        examples, network_config, training_config, np.random.default_rng(args.seed)
    )
    for r in result.rounds:
        print(
            f"{r.round_index + 1}/{training_config.rounds}: "
            f"{100.0 * r.accuracy:.2f}% correctly classified! ({r.elapsed_ms:.0f}ms)"
        )
    print(
        f"mean accuracy: {100.0 * result.mean_accuracy:.2f}% "
        f"(std {100.0 * result.std_accuracy:.2f}%)"
    )
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    setup_logging(args.log_level, args.log_file)
    try:
        return run(args)
    except (LDNNError, OSError, ValueError) as e:
        print(f"ERROR: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
