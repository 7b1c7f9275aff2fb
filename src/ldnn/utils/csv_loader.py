"""Delimited text ingestion and preprocessing of labeled examples."""

from __future__ import annotations

import math
from pathlib import Path
from typing import Iterable, List, Sequence, Union
import numpy as np

from ..algorithms.vector import (
    LabeledExample,
    RealVector,
    remove_dimension,
    select_dimensions,
)
from ..exceptions import EmptyExamplesError, RankMismatchError
from .logging_config import get_logger

logger = get_logger(__name__)


def _parse_field(word: str) -> float:
    try:
        return float(word)
    except ValueError:
        return math.nan


def read_csv_data(lines: Iterable[str], delimiter: str = "\t") -> List[RealVector]:
    """
    Parse delimited lines into vectors.

    Fields that don't parse as numbers become NaN; rows made up only of NaNs
    (headers, blank lines) are dropped.

    Args:
        lines: Lines of text (an open file works)
        delimiter: Field separator

    Returns:
        One RealVector per remaining row

    Raises:
        RankMismatchError: If the remaining rows differ in length
    """
    vectors = []
    for line in lines:
        line = line.rstrip("\r\n")
        vectors.append(RealVector([_parse_field(w) for w in line.split(delimiter)]))

    kept = [v for v in vectors if not np.all(np.isnan(v.values))]
    if len(kept) < len(vectors):
        logger.debug("Dropped %d rows without numeric data", len(vectors) - len(kept))
    if not kept:
        return kept

    rank = kept[0].rank
    if any(v.rank != rank for v in kept):
        raise RankMismatchError("the data contains vectors of different lengths")
    return kept


def read_csv_file(path: Union[str, Path], delimiter: str = "\t") -> List[RealVector]:
    """
    Read vectors from a delimited text file.

    Raises:
        FileNotFoundError: If the file can't be found
    """
    path = Path(path)
    with open(path, "r", encoding="utf-8") as f:
        vectors = read_csv_data(f, delimiter)
    logger.info("Loaded %d rows from %s", len(vectors), path)
    return vectors


def dimension_to_classification(
    data: Iterable[RealVector], dimension: int
) -> List[LabeledExample]:
    """
    Turn one column into the label of each vector.

    A row is positive when the value in ``dimension`` equals 1; the column
    itself is removed from the vector.
    """
    return [
        LabeledExample(vector=remove_dimension(v, dimension), positive=v[dimension] == 1)
        for v in data
    ]


def select_example_dimensions(
    examples: Iterable[LabeledExample], dimensions: Sequence[int]
) -> List[LabeledExample]:
    """Keep only ``dimensions`` (in that order) of every example's vector."""
    return [
        LabeledExample(vector=select_dimensions(ex.vector, dimensions), positive=ex.positive)
        for ex in examples
    ]


def min_max_normalize(examples: Sequence[LabeledExample]) -> List[LabeledExample]:
    """
    Rescale every dimension to [0, 1] using its minimum and maximum.

    A dimension with a single value everywhere maps to 0. Missing (NaN)
    fields are ignored when taking the range and stay NaN.

    Raises:
        EmptyExamplesError: If ``examples`` is empty
        RankMismatchError: If the examples differ in rank
    """
    if not examples:
        raise EmptyExamplesError("cannot normalize an empty example set")
    rank = examples[0].vector.rank
    if any(ex.vector.rank != rank for ex in examples):
        raise RankMismatchError("all examples must have the same rank")

    X = np.stack([ex.vector.values for ex in examples], axis=0)
    missing = np.isnan(X)
    empty_columns = np.all(missing, axis=0)
    if empty_columns.any():
        logger.debug("Dimensions without values: %s", np.flatnonzero(empty_columns).tolist())
    filled = np.where(missing, 0.0, X)
    lo = np.where(
        empty_columns, 0.0, np.min(np.where(missing, np.inf, X), axis=0)
    )
    hi = np.where(
        empty_columns, 0.0, np.max(np.where(missing, -np.inf, X), axis=0)
    )
    span = hi - lo
    safe_span = np.where(span > 0, span, 1.0)
    scaled = np.where(span > 0, (filled - lo) / safe_span, 0.0)
    scaled = np.where(missing, np.nan, scaled)

    return [
        LabeledExample(vector=RealVector(row, dtype=ex.vector.dtype), positive=ex.positive)
        for row, ex in zip(scaled, examples)
    ]
