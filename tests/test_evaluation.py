import pytest

from clean_match.evaluation import MatchMetrics, evaluate_clusters
from clean_match.models import Cluster


def test_pairwise_precision_and_recall() -> None:
    clusters = [
        Cluster(cluster_id="cluster_0", entity_ids=[0, 3], confidence=0.9, record_ids=["a1", "b1"]),
        Cluster(cluster_id="cluster_1", entity_ids=[1, 4], confidence=0.7, record_ids=["a2", "b3"]),
    ]
    truth = [("a1", "b1"), ("a2", "b2"), ("a3", "b3")]

    metrics = evaluate_clusters(clusters, truth, left_ids=["a1", "a2", "a3"])

    assert metrics.true_positives == 1
    assert metrics.precision == pytest.approx(0.5)
    assert metrics.recall == pytest.approx(1 / 3)
    assert metrics.f1 == pytest.approx(0.4)


def test_empty_inputs_score_zero() -> None:
    metrics = MatchMetrics(true_positives=0, predicted_matches=0, true_matches=0)

    assert metrics.precision == 0.0
    assert metrics.recall == 0.0
    assert metrics.f1 == 0.0
