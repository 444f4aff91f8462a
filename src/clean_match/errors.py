"""Typed exceptions raised by the matching core and its configuration layer."""


class CleanMatchError(Exception):
    """Base class for all package errors."""


class ConfigError(CleanMatchError):
    """Raised when configuration cannot be loaded or validated."""


class UnsupportedMatchingModeError(CleanMatchError):
    """Raised when the matching problem is not a two-sided (clean-clean) one."""


class InvalidSimilarityError(CleanMatchError, ValueError):
    """Raised for NaN, infinite or out-of-range similarities, costs or indices."""


class CostMatrixShapeError(CleanMatchError, ValueError):
    """Raised when a cost matrix is not a square two-dimensional array."""


class ClusteringStateError(CleanMatchError, RuntimeError):
    """Raised when the clustering state machine is driven out of order."""


class InputError(CleanMatchError):
    """Raised when an input file is missing or holds malformed rows."""
