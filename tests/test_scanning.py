import numpy as np
import pytest

from clean_match.errors import CostMatrixShapeError
from clean_match.models import AssignmentProxy
from clean_match.steps import GreedyColumnScanner, GreedyRowScanner, SolutionSelector


@pytest.mark.parametrize("size", [1, 2, 3, 5, 8])
def test_scans_never_reuse_a_column_or_row(size: int) -> None:
    costs = np.random.default_rng(size).random((size, size))

    for scanner in (GreedyRowScanner(), GreedyColumnScanner()):
        result = scanner.scan(costs)
        assert sorted(result.columns) == list(range(size))
        assert result.total_cost == pytest.approx(
            sum(costs[row, column] for row, column in enumerate(result.columns))
        )


def test_ties_go_to_the_lowest_index() -> None:
    costs = np.ones((3, 3))

    assert GreedyRowScanner().scan(costs).columns == (0, 1, 2)
    assert GreedyColumnScanner().scan(costs).columns == (0, 1, 2)


def test_greedy_scan_keeps_a_forced_suboptimal_pick() -> None:
    # Optimal is 0->1, 1->0, 2->2 for 1.3; the greedy scans commit row 0 to column 0.
    costs = np.array(
        [
            [0.1, 0.2, 1.0],
            [0.1, 0.9, 1.0],
            [1.0, 1.0, 1.0],
        ]
    )

    row_result = GreedyRowScanner().scan(costs)
    column_result = GreedyColumnScanner().scan(costs)

    assert row_result.columns == (0, 1, 2)
    assert row_result.total_cost == pytest.approx(2.0)
    assert column_result.columns == (0, 1, 2)
    assert column_result.total_cost == pytest.approx(2.0)


def test_column_scan_reports_row_to_column_mapping() -> None:
    costs = np.array([[0.2, 0.3], [0.1, 0.9]])

    result = GreedyColumnScanner().scan(costs)

    assert result.columns == (1, 0)
    assert result.total_cost == pytest.approx(0.4)
    assert result.scan == "column"


def test_selector_prefers_cheaper_row_scan() -> None:
    costs = np.array([[0.2, 0.1], [0.3, 0.9]])

    solution = SolutionSelector().select(costs)

    assert solution.scan == "row"
    assert solution.columns == (1, 0)
    assert solution.total_cost == pytest.approx(0.4)


def test_selector_prefers_cheaper_column_scan() -> None:
    costs = np.array([[0.2, 0.3], [0.1, 0.9]])

    solution = SolutionSelector().select(costs)

    assert solution.scan == "column"
    assert solution.columns == (1, 0)


def test_selector_breaks_ties_in_favour_of_row_scan() -> None:
    selector = SolutionSelector()
    row_result = AssignmentProxy(columns=(0, 1), total_cost=0.5, scan="row")
    column_result = AssignmentProxy(columns=(1, 0), total_cost=0.5, scan="column")

    assert selector.choose(row_result, column_result) is row_result
    assert selector.select(np.ones((3, 3))).scan == "row"


@pytest.mark.parametrize("size", [2, 4, 6])
def test_selector_never_returns_the_more_expensive_scan(size: int) -> None:
    costs = np.random.default_rng(100 + size).random((size, size))
    selector = SolutionSelector()

    row_result, column_result = selector.run_scans(costs)
    solution = selector.choose(row_result, column_result)

    assert solution.total_cost == min(row_result.total_cost, column_result.total_cost)


def test_parallel_scans_match_sequential_scans() -> None:
    costs = np.random.default_rng(5).random((7, 7))

    assert SolutionSelector(parallel=True).select(costs) == SolutionSelector().select(costs)


class _RecordingScanner(GreedyRowScanner):
    def __init__(self) -> None:
        self.calls = 0

    def scan(self, costs: np.ndarray) -> AssignmentProxy:
        self.calls += 1
        return super().scan(costs)


def test_malformed_matrix_fails_before_any_scan() -> None:
    scanner = _RecordingScanner()
    selector = SolutionSelector(row_scanner=scanner)

    with pytest.raises(CostMatrixShapeError):
        selector.select([[0.1, 0.2, 0.3], [0.4, 0.5, 0.6]])
    assert scanner.calls == 0
