"""
Precondition errors raised at the boundary of the layer operations.
"""


class PreconditionError(ValueError):
    """Base class for caller errors detected before any buffer is written."""


class DimensionMismatchError(PreconditionError):
    """Raised when vector lengths or matrix shapes do not agree."""


class CapacityExceededError(PreconditionError):
    """Raised when an operand is larger than a configured scratch ceiling."""
