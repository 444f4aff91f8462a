from __future__ import annotations

from collections.abc import Sequence

from clean_match.clustering import RowColumnClustering
from clean_match.interfaces import CandidateGenerator
from clean_match.models import CleanCleanProblem, Cluster, EntityRecord


class LocalLinkagePipeline:
    """Local runner linking two sources on a single machine.

    Record ids are expected to be unique across both sources.
    """

    def __init__(
        self,
        candidate_generator: CandidateGenerator,
        clustering: RowColumnClustering,
    ) -> None:
        self._candidate_generator = candidate_generator
        self._clustering = clustering

    def run(self, left: Sequence[EntityRecord], right: Sequence[EntityRecord]) -> list[Cluster]:
        candidates = self._candidate_generator.match(left, right)
        problem = CleanCleanProblem(left_size=len(left), right_size=len(right))
        clusters = self._clustering.get_duplicates(problem, candidates)

        for cluster in clusters:
            cluster.record_ids = [
                left[entity_id].record_id
                if entity_id < len(left)
                else right[entity_id - len(left)].record_id
                for entity_id in cluster.entity_ids
            ]
        return clusters
