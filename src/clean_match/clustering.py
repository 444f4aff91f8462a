"""Row-column proxy clustering for clean-clean entity resolution.

The assignment problem between two collections is solved approximately: a
greedy row scan and a greedy column scan each produce a one-to-one mapping
over the cost matrix ``1 - similarity``, and the cheaper of the two is kept.
Selected pairs above the similarity threshold become edges of a similarity
graph, whose connected components are returned as clusters.

A run walks through :class:`ClusteringState` in order. ``reset()`` (also
called by ``reconfigure()``) must be used between runs that should not see
each other's matches; without it the ids matched by the previous run stay
consumed and are reported as duplicate conflicts.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from enum import StrEnum

from clean_match.config import ClusteringConfig
from clean_match.errors import ClusteringStateError, UnsupportedMatchingModeError
from clean_match.graph import UnionFindGraph
from clean_match.interfaces import CandidateSource, SimilarityGraph
from clean_match.models import (
    AssignmentProxy,
    CleanCleanProblem,
    Cluster,
    EmissionReport,
    MatchingProblem,
)
from clean_match.steps.cost_matrix import CostMatrix, CostMatrixBuilder
from clean_match.steps.emission import MatchEmitter
from clean_match.steps.selection import SolutionSelector

LOGGER = logging.getLogger(__name__)


class ClusteringState(StrEnum):
    UNINITIALIZED = "uninitialized"
    MATRIX_BUILT = "matrix_built"
    SCANS_COMPLETE = "scans_complete"
    SOLUTION_CHOSEN = "solution_chosen"
    EDGES_EMITTED = "edges_emitted"
    CLUSTERS_READY = "clusters_ready"


_STATE_ORDER = list(ClusteringState)


@dataclass(slots=True)
class RunReport:
    """Diagnostics of the most recent clustering run."""

    comparisons: int = 0
    row_scan_cost: float | None = None
    column_scan_cost: float | None = None
    chosen_scan: str | None = None
    emission: EmissionReport = field(default_factory=EmissionReport)


class RowColumnClustering:
    method_name = "Row-Column Proxy Clustering"
    method_info = (
        f"{method_name}: creates clusters after approximately solving the assignment "
        "problem with a greedy row scan and a greedy column scan."
    )

    def __init__(
        self,
        config: ClusteringConfig | None = None,
        graph_factory: Callable[[], SimilarityGraph] = UnionFindGraph,
    ) -> None:
        self._config = config or ClusteringConfig()
        self._graph_factory = graph_factory
        self._emitter = self._build_emitter()
        self._state = ClusteringState.UNINITIALIZED
        self._cost_matrix: CostMatrix | None = None
        self._report = RunReport()

    @property
    def config(self) -> ClusteringConfig:
        return self._config

    @property
    def state(self) -> ClusteringState:
        return self._state

    @property
    def report(self) -> RunReport:
        return self._report

    @property
    def matched_ids(self) -> frozenset[int]:
        return self._emitter.matched_ids

    def reset(self) -> None:
        """Forget matched ids and return to the initial state."""
        self._emitter.reset()
        self._cost_matrix = None
        self._state = ClusteringState.UNINITIALIZED

    def reconfigure(self, similarity_threshold: float) -> None:
        """Switch to a new threshold, e.g. between parameter-search iterations."""
        self._config = self._config.with_threshold(similarity_threshold)
        self._emitter = self._build_emitter()
        self.reset()

    def get_duplicates(self, problem: MatchingProblem, pairs: CandidateSource) -> list[Cluster]:
        if not isinstance(problem, CleanCleanProblem):
            raise UnsupportedMatchingModeError(
                f"{self.method_name} only supports clean-clean matching, got {type(problem).__name__}"
            )

        comparisons = len(pairs)
        LOGGER.info("Input comparisons: %d", comparisons)
        self._state = ClusteringState.UNINITIALIZED
        self._report = RunReport(comparisons=comparisons)
        if comparisons == 0:
            return []

        threshold = self._config.similarity_threshold
        self._cost_matrix = CostMatrixBuilder(threshold).build(
            pairs, problem.left_size, problem.right_size
        )
        self._advance(ClusteringState.MATRIX_BUILT)

        selector = SolutionSelector(parallel=self._config.parallel_scans)
        row_result, column_result = selector.run_scans(self._cost_matrix.costs)
        self._advance(ClusteringState.SCANS_COMPLETE)

        solution = selector.choose(row_result, column_result)
        self._record_solution(row_result, column_result, solution)
        self._advance(ClusteringState.SOLUTION_CHOSEN)

        graph = self._graph_factory()
        self._report.emission = self._emitter.emit(
            solution, self._cost_matrix.similarities, problem.left_size, graph
        )
        self._cost_matrix = None
        self._advance(ClusteringState.EDGES_EMITTED)

        clusters = _extract_clusters(graph)
        self._advance(ClusteringState.CLUSTERS_READY)
        LOGGER.info(
            "Accepted %d matches into %d clusters (%d duplicate conflicts)",
            len(self._report.emission.edges),
            len(clusters),
            len(self._report.emission.conflicts),
        )
        return clusters

    def _build_emitter(self) -> MatchEmitter:
        return MatchEmitter(
            similarity_threshold=self._config.similarity_threshold,
            duplicate_policy=self._config.duplicate_policy,
        )

    def _advance(self, target: ClusteringState) -> None:
        position = _STATE_ORDER.index(self._state)
        if position + 1 >= len(_STATE_ORDER) or _STATE_ORDER[position + 1] is not target:
            raise ClusteringStateError(f"Cannot move from {self._state.value} to {target.value}")
        self._state = target

    def _record_solution(
        self,
        row_result: AssignmentProxy,
        column_result: AssignmentProxy,
        solution: AssignmentProxy,
    ) -> None:
        self._report.row_scan_cost = row_result.total_cost
        self._report.column_scan_cost = column_result.total_cost
        self._report.chosen_scan = solution.scan
        LOGGER.info(
            "Chose %s scan (row cost %.4f, column cost %.4f)",
            solution.scan,
            row_result.total_cost,
            column_result.total_cost,
        )


def _extract_clusters(graph: SimilarityGraph) -> list[Cluster]:
    weights = graph.component_weights()
    clusters: list[Cluster] = []
    for members in graph.connected_components():
        if len(members) < 2:
            continue
        root = graph.find(members[0])
        scores = weights.get(root, [0.0])
        clusters.append(
            Cluster(
                cluster_id=f"cluster_{members[0]}",
                entity_ids=members,
                confidence=sum(scores) / len(scores),
            )
        )
    return clusters
