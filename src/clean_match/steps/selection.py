from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor

import numpy as np

from clean_match.models import AssignmentProxy
from clean_match.steps.cost_matrix import validate_cost_matrix
from clean_match.steps.scanning import GreedyColumnScanner, GreedyRowScanner

LOGGER = logging.getLogger(__name__)


class SolutionSelector:
    """Run both greedy scans and keep the cheaper assignment.

    The row scan wins ties. With ``parallel=True`` the two scans run on
    separate threads and are joined before their totals are compared.
    """

    def __init__(
        self,
        row_scanner: GreedyRowScanner | None = None,
        column_scanner: GreedyColumnScanner | None = None,
        parallel: bool = False,
    ) -> None:
        self._row_scanner = row_scanner or GreedyRowScanner()
        self._column_scanner = column_scanner or GreedyColumnScanner()
        self._parallel = parallel

    def run_scans(self, costs: object) -> tuple[AssignmentProxy, AssignmentProxy]:
        matrix = validate_cost_matrix(costs)
        if self._parallel:
            row_result, column_result = self._run_parallel(matrix)
        else:
            row_result = self._row_scanner.scan(matrix)
            column_result = self._column_scanner.scan(matrix)

        LOGGER.debug(
            "Row scan cost %.6f, column scan cost %.6f",
            row_result.total_cost,
            column_result.total_cost,
        )
        return row_result, column_result

    def choose(self, row_result: AssignmentProxy, column_result: AssignmentProxy) -> AssignmentProxy:
        if row_result.total_cost <= column_result.total_cost:
            return row_result
        return column_result

    def select(self, costs: object) -> AssignmentProxy:
        return self.choose(*self.run_scans(costs))

    def _run_parallel(self, matrix: np.ndarray) -> tuple[AssignmentProxy, AssignmentProxy]:
        with ThreadPoolExecutor(max_workers=2, thread_name_prefix="greedy-scan") as executor:
            row_future = executor.submit(self._row_scanner.scan, matrix)
            column_future = executor.submit(self._column_scanner.scan, matrix)
            return row_future.result(), column_future.result()
