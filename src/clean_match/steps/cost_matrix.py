from __future__ import annotations

import math
from collections.abc import Iterable
from dataclasses import dataclass

import numpy as np

from clean_match.errors import CostMatrixShapeError, InvalidSimilarityError
from clean_match.models import CandidatePair


@dataclass(frozen=True, slots=True)
class CostMatrix:
    """Square assignment costs plus the similarities they were derived from.

    ``similarities`` holds 0.0 wherever no candidate above the threshold was
    written; ``costs`` is ``1.0 - similarities``. Both arrays are read-only.
    """

    costs: np.ndarray
    similarities: np.ndarray

    @property
    def size(self) -> int:
        return int(self.costs.shape[0])


class CostMatrixBuilder:
    """Turn sparse scored pairs into a dense square cost matrix.

    If a ``(left_index, right_index)`` combination appears more than once, the
    last occurrence above the threshold wins. Occurrences at or below the
    threshold are never written and so never overwrite an earlier value.
    """

    def __init__(self, similarity_threshold: float = 0.5) -> None:
        self._similarity_threshold = similarity_threshold

    def build(self, pairs: Iterable[CandidatePair], left_size: int, right_size: int) -> CostMatrix:
        if left_size < 0 or right_size < 0:
            raise InvalidSimilarityError(
                f"Collection sizes must be non-negative, got {left_size} and {right_size}"
            )

        size = max(left_size, right_size)
        similarities = np.zeros((size, size), dtype=float)
        for pair in pairs:
            _check_pair(pair, left_size, right_size)
            if self._similarity_threshold < pair.similarity:
                similarities[pair.left_index, pair.right_index] = pair.similarity

        costs = to_cost_matrix(similarities)
        similarities.flags.writeable = False
        costs.flags.writeable = False
        return CostMatrix(costs=costs, similarities=similarities)


def to_cost_matrix(similarities: np.ndarray) -> np.ndarray:
    """Invert similarities into costs so the assignment becomes a minimisation."""
    return 1.0 - np.asarray(similarities, dtype=float)


def validate_cost_matrix(matrix: object) -> np.ndarray:
    """Return ``matrix`` as a float array, failing fast on a malformed shape."""
    try:
        costs = np.asarray(matrix, dtype=float)
    except ValueError as exc:
        raise CostMatrixShapeError(f"Cost matrix rows have mismatched lengths: {exc}") from exc

    if costs.ndim != 2:
        raise CostMatrixShapeError(f"Cost matrix must be two-dimensional, got {costs.ndim} dimension(s)")
    rows, columns = costs.shape
    if rows != columns:
        raise CostMatrixShapeError(f"Cost matrix must be square, got {rows}x{columns}")
    if not np.all(np.isfinite(costs)):
        raise InvalidSimilarityError("Cost matrix contains NaN or infinite values")
    return costs


def _check_pair(pair: CandidatePair, left_size: int, right_size: int) -> None:
    if not math.isfinite(pair.similarity) or not 0.0 <= pair.similarity <= 1.0:
        raise InvalidSimilarityError(
            f"Similarity must be a finite value in [0, 1], got {pair.similarity!r} "
            f"for ({pair.left_index}, {pair.right_index})"
        )
    if not 0 <= pair.left_index < left_size:
        raise InvalidSimilarityError(
            f"Left index {pair.left_index} is outside the left collection of size {left_size}"
        )
    if not 0 <= pair.right_index < right_size:
        raise InvalidSimilarityError(
            f"Right index {pair.right_index} is outside the right collection of size {right_size}"
        )
