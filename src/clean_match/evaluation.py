from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from itertools import product

from clean_match.models import Cluster


@dataclass(frozen=True, slots=True)
class MatchMetrics:
    """Pairwise quality of a clustering against known true matches."""

    true_positives: int
    predicted_matches: int
    true_matches: int

    @property
    def precision(self) -> float:
        return self.true_positives / self.predicted_matches if self.predicted_matches else 0.0

    @property
    def recall(self) -> float:
        return self.true_positives / self.true_matches if self.true_matches else 0.0

    @property
    def f1(self) -> float:
        total = self.precision + self.recall
        return 2 * self.precision * self.recall / total if total else 0.0


def evaluate_clusters(
    clusters: Sequence[Cluster],
    true_matches: Iterable[tuple[str, str]],
    left_ids: Iterable[str],
) -> MatchMetrics:
    """Score every cross-source record pair inside a cluster as a predicted match.

    ``left_ids`` tells the two sources apart; ``true_matches`` holds
    ``(left_record_id, right_record_id)`` pairs.
    """
    left = set(left_ids)
    predicted: set[tuple[str, str]] = set()
    for cluster in clusters:
        members_left = [r for r in cluster.record_ids if r in left]
        members_right = [r for r in cluster.record_ids if r not in left]
        predicted.update(product(members_left, members_right))

    truth = set(true_matches)
    return MatchMetrics(
        true_positives=len(predicted & truth),
        predicted_matches=len(predicted),
        true_matches=len(truth),
    )
