"""
Error taxonomy for the LDNN classifier.

Every error derives from ``LDNNError`` which is itself a ``ValueError``, so
callers that already guard with ``except ValueError`` keep working.
All errors are raised at the point of violation; nothing retries internally.
"""


class LDNNError(ValueError):
    """Base class for all LDNN errors."""


class DimensionMismatchError(LDNNError):
    """Vector operation between vectors of unequal rank."""


class RankMismatchError(DimensionMismatchError):
    """A collection (examples, rows) does not share a single rank."""


class EmptyInputError(LDNNError):
    """An empty collection was given where a non-empty one is required."""


class EmptyExamplesError(EmptyInputError):
    """The example set used to build or normalize a network is empty."""


class InsufficientClusterDataError(LDNNError):
    """More clusters were requested than there are points to seed them."""


class IndexOutOfRangeError(LDNNError, IndexError):
    """A dimension index lies outside ``[0, rank)``."""
