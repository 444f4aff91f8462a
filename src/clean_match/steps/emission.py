from __future__ import annotations

import logging

import numpy as np

from clean_match.config import DuplicatePolicy
from clean_match.interfaces import SimilarityGraph
from clean_match.models import AssignmentProxy, DuplicateMatch, EmissionReport, MatchEdge

LOGGER = logging.getLogger(__name__)


class MatchEmitter:
    """Turn a chosen assignment into graph edges.

    Every selected cell is re-checked against the original similarity, since
    a greedy scan may land on an empty or padding cell for lack of
    alternatives. Ids consumed by accepted edges are remembered until
    :meth:`reset` so that repeated emission can be detected.
    """

    def __init__(
        self,
        similarity_threshold: float = 0.5,
        duplicate_policy: DuplicatePolicy = DuplicatePolicy.REPORT,
    ) -> None:
        self._similarity_threshold = similarity_threshold
        self._duplicate_policy = duplicate_policy
        self._matched_ids: set[int] = set()

    @property
    def matched_ids(self) -> frozenset[int]:
        return frozenset(self._matched_ids)

    def reset(self) -> None:
        self._matched_ids.clear()

    def emit(
        self,
        solution: AssignmentProxy,
        similarities: np.ndarray,
        left_size: int,
        graph: SimilarityGraph,
    ) -> EmissionReport:
        report = EmissionReport()
        for left_id, column in enumerate(solution.columns):
            similarity = float(similarities[left_id, column])
            if similarity <= self._similarity_threshold:
                report.below_threshold += 1
                continue

            right_id = column + left_size
            conflicting = tuple(i for i in (left_id, right_id) if i in self._matched_ids)
            if conflicting:
                inserted = self._duplicate_policy is DuplicatePolicy.REPORT
                report.conflicts.append(
                    DuplicateMatch(
                        left_id=left_id,
                        right_id=right_id,
                        conflicting_ids=conflicting,
                        inserted=inserted,
                    )
                )
                LOGGER.warning(
                    "Ids %s already matched; pair (%d, %d) %s",
                    list(conflicting),
                    left_id,
                    right_id,
                    "inserted anyway" if inserted else "rejected",
                )
                if not inserted:
                    continue

            graph.add_edge(left_id, right_id, similarity)
            report.edges.append(MatchEdge(left_id=left_id, right_id=right_id, similarity=similarity))
            self._matched_ids.add(left_id)
            self._matched_ids.add(right_id)

        return report
