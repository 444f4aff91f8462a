from __future__ import annotations

import numpy as np

from clean_match.models import AssignmentProxy


class GreedyRowScanner:
    """Assign every row, in order, to its cheapest still-uncovered column.

    Ties go to the lowest column index. A column claimed by an earlier row is
    never offered again, so later rows may be pushed onto expensive columns:
    the result approximates, but does not guarantee, a minimum-cost assignment.
    """

    def scan(self, costs: np.ndarray) -> AssignmentProxy:
        size = costs.shape[0]
        column_covered = np.zeros(size, dtype=bool)
        selected_columns = [0] * size
        total_cost = 0.0

        for row in range(size):
            column = _position_of_min(costs[row, :], column_covered)
            selected_columns[row] = column
            column_covered[column] = True
            total_cost += float(costs[row, column])

        return AssignmentProxy(columns=tuple(selected_columns), total_cost=total_cost, scan="row")


class GreedyColumnScanner:
    """Column-major counterpart of :class:`GreedyRowScanner`.

    Columns are visited in order and each claims its cheapest uncovered row;
    the result is still expressed as a row -> column mapping.
    """

    def scan(self, costs: np.ndarray) -> AssignmentProxy:
        size = costs.shape[0]
        row_covered = np.zeros(size, dtype=bool)
        columns_from_selected_row = [0] * size
        total_cost = 0.0

        for column in range(size):
            row = _position_of_min(costs[:, column], row_covered)
            columns_from_selected_row[row] = column
            row_covered[row] = True
            total_cost += float(costs[row, column])

        return AssignmentProxy(
            columns=tuple(columns_from_selected_row), total_cost=total_cost, scan="column"
        )


def _position_of_min(line: np.ndarray, covered: np.ndarray) -> int:
    # argmin returns the first occurrence, which gives the lowest-index tie-break.
    return int(np.argmin(np.where(covered, np.inf, line)))
