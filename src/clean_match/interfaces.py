from __future__ import annotations

from collections.abc import Iterator
from typing import Protocol, Sequence

from clean_match.models import CandidatePair, EntityRecord


class CandidateSource(Protocol):
    """Scored comparisons together with their total count."""

    def __len__(self) -> int:
        ...

    def __iter__(self) -> Iterator[CandidatePair]:
        ...


class SimilarityGraph(Protocol):
    """Accumulates accepted matches and extracts connected components."""

    def add_edge(self, left_id: int, right_id: int, weight: float) -> None:
        ...

    def connected_components(self) -> list[list[int]]:
        ...

    def component_weights(self) -> dict[int, list[float]]:
        ...

    def find(self, node: int) -> int:
        ...


class EmbeddingModel(Protocol):
    """Map source records into embedding vectors."""

    def embed(self, records: Sequence[EntityRecord]) -> list[list[float]]:
        ...


class CrossSourceIndex(Protocol):
    """Similarity search between the vectors of two sources."""

    def build(
        self,
        left_vectors: Sequence[Sequence[float]],
        right_vectors: Sequence[Sequence[float]],
    ) -> None:
        ...

    def query_similar_pairs(self, min_similarity: float) -> list[CandidatePair]:
        ...


class CandidateGenerator(Protocol):
    """Produce scored cross-source comparisons for two record collections."""

    def match(
        self, left: Sequence[EntityRecord], right: Sequence[EntityRecord]
    ) -> CandidateSource:
        ...
