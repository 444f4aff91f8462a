import logging

import numpy as np
import pytest

from clean_match.config import DuplicatePolicy
from clean_match.graph import UnionFindGraph
from clean_match.models import AssignmentProxy, MatchEdge
from clean_match.steps import MatchEmitter


def _identity(size: int) -> AssignmentProxy:
    return AssignmentProxy(columns=tuple(range(size)), total_cost=0.0, scan="row")


def test_accepted_pairs_are_offset_into_the_right_id_space() -> None:
    similarities = np.array([[0.9, 0.0], [0.0, 0.8]])
    graph = UnionFindGraph()

    report = MatchEmitter(similarity_threshold=0.5).emit(_identity(2), similarities, left_size=2, graph=graph)

    assert report.edges == [
        MatchEdge(left_id=0, right_id=2, similarity=0.9),
        MatchEdge(left_id=1, right_id=3, similarity=0.8),
    ]
    assert graph.connected_components() == [[0, 2], [1, 3]]
    assert report.conflicts == []


def test_cells_at_or_below_threshold_are_skipped() -> None:
    similarities = np.array([[0.5, 0.0], [0.0, 0.4]])
    graph = UnionFindGraph()

    report = MatchEmitter(similarity_threshold=0.5).emit(_identity(2), similarities, left_size=2, graph=graph)

    assert report.edges == []
    assert report.below_threshold == 2
    assert graph.connected_components() == []


@pytest.mark.parametrize("threshold", [0.0, 0.25, 0.5, 0.75, 1.0])
def test_no_edge_is_ever_at_or_below_threshold(threshold: float) -> None:
    similarities = np.random.default_rng(3).random((6, 6))
    solution = AssignmentProxy(columns=(5, 4, 3, 2, 1, 0), total_cost=0.0, scan="row")

    report = MatchEmitter(similarity_threshold=threshold).emit(solution, similarities, 6, UnionFindGraph())

    assert all(edge.similarity > threshold for edge in report.edges)
    assert len(report.edges) + report.below_threshold == 6


def test_repeated_emission_reports_duplicates_and_still_inserts(caplog: pytest.LogCaptureFixture) -> None:
    similarities = np.array([[0.9, 0.0], [0.0, 0.8]])
    emitter = MatchEmitter(similarity_threshold=0.5)
    emitter.emit(_identity(2), similarities, 2, UnionFindGraph())

    with caplog.at_level(logging.WARNING, logger="clean_match.steps.emission"):
        report = emitter.emit(_identity(2), similarities, 2, UnionFindGraph())

    assert len(report.edges) == 2
    assert [c.conflicting_ids for c in report.conflicts] == [(0, 2), (1, 3)]
    assert all(c.inserted for c in report.conflicts)
    assert "already matched" in caplog.text


def test_reject_policy_drops_duplicate_edges() -> None:
    similarities = np.array([[0.9, 0.0], [0.0, 0.8]])
    emitter = MatchEmitter(similarity_threshold=0.5, duplicate_policy=DuplicatePolicy.REJECT)
    emitter.emit(_identity(2), similarities, 2, UnionFindGraph())
    graph = UnionFindGraph()

    report = emitter.emit(_identity(2), similarities, 2, graph)

    assert report.edges == []
    assert len(report.conflicts) == 2
    assert not any(c.inserted for c in report.conflicts)
    assert graph.connected_components() == []


def test_reset_clears_matched_ids() -> None:
    similarities = np.array([[0.9]])
    emitter = MatchEmitter(similarity_threshold=0.5)
    emitter.emit(_identity(1), similarities, 1, UnionFindGraph())
    assert emitter.matched_ids == {0, 1}

    emitter.reset()
    report = emitter.emit(_identity(1), similarities, 1, UnionFindGraph())

    assert emitter.matched_ids == {0, 1}
    assert report.conflicts == []
