"""Main iteration loop of the tabular simplex method."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Iterator, List, Optional

from simplex import (
    PivotStatus,
    Point,
    alternate_entering_column,
    find_pivot_element,
    find_pivot_row,
    get_vector,
    pivot,
)
from tableau import Tableau

logger = logging.getLogger(__name__)


class OptimizeResult(Enum):
    OPTIMAL = "Optimal"
    MULTIPLE_OPTIMAL = "Multiple optimal solutions. Check out both last tableaus."
    UNBOUNDED = "Unbounded"

    @property
    def label(self) -> str:
        return self.value


class IterationLimitError(RuntimeError):
    """Raised when the optional iteration guard is exceeded."""

    def __init__(self, max_iterations: int) -> None:
        self.max_iterations = max_iterations
        super().__init__(f"simplex did not terminate within {max_iterations} pivots")


@dataclass(frozen=True)
class OptimizeOutcome:
    result: OptimizeResult
    tableaus: List[Tableau]

    def __iter__(self) -> Iterator:
        return iter((self.result, self.tableaus))

    @property
    def final(self) -> Tableau:
        return self.tableaus[-1]


def optimize(tableau: Tableau, *, max_iterations: Optional[int] = None) -> OptimizeOutcome:
    """Pivot until optimal or unbounded, keeping every intermediate tableau.

    ``max_iterations`` is an external guard for inputs that may cycle; by
    default the loop is unbounded.
    """
    if max_iterations is not None and max_iterations < 0:
        raise ValueError("max_iterations must be non-negative")

    tableaus: List[Tableau] = [tableau]
    iterations = 0

    while True:
        last = tableaus[-1]
        located = find_pivot_element(last)

        if located.status is PivotStatus.UNBOUNDED:
            logger.info("unbounded after %d pivots", iterations)
            return OptimizeOutcome(OptimizeResult.UNBOUNDED, tableaus)

        if located.status is PivotStatus.OPTIMAL:
            return _finish_optimal(tableaus, iterations)

        if max_iterations is not None and iterations >= max_iterations:
            raise IterationLimitError(max_iterations)

        logger.debug(
            "pivot %d at column %d, row %d",
            iterations + 1,
            located.point.x,
            located.point.y,
        )
        tableaus.append(_pivoted(last, located.point))
        iterations += 1


def _finish_optimal(tableaus: List[Tableau], iterations: int) -> OptimizeOutcome:
    last = tableaus[-1]
    column = alternate_entering_column(last, get_vector(last))
    if column is None:
        logger.info("optimal after %d pivots", iterations)
        return OptimizeOutcome(OptimizeResult.OPTIMAL, tableaus)

    row = find_pivot_row(last.column(column)[1:], last.rhs[1:])
    if row is None:
        # Zero-cost ray: optima are not unique but there is no other vertex.
        logger.info("multiple optima along an unbounded edge at column %d", column)
        return OptimizeOutcome(OptimizeResult.MULTIPLE_OPTIMAL, tableaus)

    point = Point(column, row + 1)
    logger.info(
        "optimal after %d pivots; alternate vertex at column %d, row %d",
        iterations,
        point.x,
        point.y,
    )
    tableaus.append(_pivoted(last, point))
    return OptimizeOutcome(OptimizeResult.MULTIPLE_OPTIMAL, tableaus)


def _pivoted(tableau: Tableau, point: Point) -> Tableau:
    next_tableau = tableau.copy()
    pivot(next_tableau, point)
    return next_tableau
