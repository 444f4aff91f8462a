"""Clean-clean entity resolution via row-column proxy assignment."""

from clean_match.clustering import ClusteringState, RowColumnClustering
from clean_match.models import (
    CandidatePair,
    CleanCleanProblem,
    Cluster,
    DirtyProblem,
    EntityRecord,
    SimilarityPairs,
)

__all__ = [
    "CandidatePair",
    "CleanCleanProblem",
    "Cluster",
    "ClusteringState",
    "DirtyProblem",
    "EntityRecord",
    "RowColumnClustering",
    "SimilarityPairs",
]
