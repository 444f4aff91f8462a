from __future__ import annotations

from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field
from typing import Any


@dataclass(slots=True)
class EntityRecord:
    """One record of a source collection."""

    record_id: str
    attributes: dict[str, Any]


@dataclass(frozen=True, slots=True)
class CandidatePair:
    """Scored comparison between a left-source entity and a right-source entity.

    Both indices are local to their own source: ``right_index`` is translated
    into the shared id space only when an edge is emitted.
    """

    left_index: int
    right_index: int
    similarity: float


class SimilarityPairs:
    """Sized, immutable collection of candidate pairs."""

    __slots__ = ("_pairs",)

    def __init__(self, pairs: Iterable[CandidatePair] = ()) -> None:
        self._pairs: tuple[CandidatePair, ...] = tuple(pairs)

    def __len__(self) -> int:
        return len(self._pairs)

    def __iter__(self) -> Iterator[CandidatePair]:
        return iter(self._pairs)

    def __repr__(self) -> str:
        return f"SimilarityPairs(count={len(self._pairs)})"


@dataclass(frozen=True, slots=True)
class CleanCleanProblem:
    """Matching between two duplicate-free collections of the given sizes."""

    left_size: int
    right_size: int


@dataclass(frozen=True, slots=True)
class DirtyProblem:
    """Deduplication inside a single collection."""

    size: int


MatchingProblem = CleanCleanProblem | DirtyProblem


@dataclass(frozen=True, slots=True)
class AssignmentProxy:
    """Row -> column mapping produced by one greedy scan."""

    columns: tuple[int, ...]
    total_cost: float
    scan: str


@dataclass(frozen=True, slots=True)
class MatchEdge:
    """Accepted match, expressed in the shared id space."""

    left_id: int
    right_id: int
    similarity: float


@dataclass(frozen=True, slots=True)
class DuplicateMatch:
    """An accepted pair that reused an id already consumed by an earlier edge."""

    left_id: int
    right_id: int
    conflicting_ids: tuple[int, ...]
    inserted: bool


@dataclass(slots=True)
class EmissionReport:
    edges: list[MatchEdge] = field(default_factory=list)
    conflicts: list[DuplicateMatch] = field(default_factory=list)
    below_threshold: int = 0


@dataclass(slots=True)
class Cluster:
    """A group of entities that refer to the same real-world object."""

    cluster_id: str
    entity_ids: list[int]
    confidence: float
    record_ids: list[str] = field(default_factory=list)
