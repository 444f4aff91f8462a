from clean_match.steps.cost_matrix import CostMatrix, CostMatrixBuilder, to_cost_matrix, validate_cost_matrix
from clean_match.steps.embedding import (
    CrossSourceVectorIndex,
    EmbeddingCandidateGenerator,
    SbertEmbeddingModel,
    SimpleTextEmbeddingModel,
)
from clean_match.steps.emission import MatchEmitter
from clean_match.steps.scanning import GreedyColumnScanner, GreedyRowScanner
from clean_match.steps.selection import SolutionSelector

__all__ = [
    "CostMatrix",
    "CostMatrixBuilder",
    "to_cost_matrix",
    "validate_cost_matrix",
    "CrossSourceVectorIndex",
    "EmbeddingCandidateGenerator",
    "SbertEmbeddingModel",
    "SimpleTextEmbeddingModel",
    "MatchEmitter",
    "GreedyColumnScanner",
    "GreedyRowScanner",
    "SolutionSelector",
]
