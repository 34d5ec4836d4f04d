"""Pivot selection and Gauss-Jordan steps of the tabular simplex method."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import List, Optional, Sequence

import numpy as np

from tableau import Tableau


@dataclass(frozen=True)
class Point:
    """Pivot cell; ``x`` is the column index, ``y`` the row index."""

    x: int
    y: int


class PivotStatus(Enum):
    FOUND = "found"
    OPTIMAL = "optimal"
    UNBOUNDED = "unbounded"


@dataclass(frozen=True)
class PivotElementResult:
    status: PivotStatus
    point: Optional[Point] = None

    @classmethod
    def found(cls, point: Point) -> PivotElementResult:
        return cls(PivotStatus.FOUND, point)

    @classmethod
    def optimal(cls) -> PivotElementResult:
        return cls(PivotStatus.OPTIMAL)

    @classmethod
    def unbounded(cls) -> PivotElementResult:
        return cls(PivotStatus.UNBOUNDED)


@dataclass(frozen=True)
class SolutionVariable:
    basic: bool
    value: float = 0.0



def find_pivot_column(row: Sequence[float]) -> Optional[int]:
    """Return the entering column within ``row``, or ``None`` when optimal.

    Most negative coefficient wins; ties go to the leftmost entry. NaN
    entries are skipped.
    """
    values = np.asarray(row, dtype=float)
    min_value = np.fmin.reduce(values, initial=np.inf)
    if min_value >= 0.0:
        return None
    return int(np.flatnonzero(values == min_value)[0])


def find_pivot_row(
    pivot_column: Sequence[float], rhs_column: Sequence[float]
) -> Optional[int]:
    """Minimum-ratio test; ``None`` means nothing bounds the entering variable.

    Ties go to the topmost row. NaN ratios are skipped.
    """
    column = np.asarray(pivot_column, dtype=float)
    rhs = np.asarray(rhs_column, dtype=float)
    if np.fmax.reduce(column, initial=-np.inf) <= 0.0:
        return None

    quotients = np.full(column.shape, np.inf)
    positive = column > 0.0
    quotients[positive] = rhs[positive] / column[positive]
    min_quotient = np.fmin.reduce(quotients, initial=np.inf)
    matches = np.flatnonzero(quotients == min_quotient)
    if matches.size == 0:
        # Every positive row has a NaN ratio.
        return None
    return int(matches[0])


def find_pivot_element(tableau: Tableau) -> PivotElementResult:
    # x0 and RHS never enter the basis.
    target_row = tableau.objective_row[1:-1]
    pivot_column_index = find_pivot_column(target_row)
    if pivot_column_index is None:
        return PivotElementResult.optimal()
    pivot_column_index += 1

    pivot_row_index = _ratio_test(tableau, pivot_column_index)
    if pivot_row_index is None:
        return PivotElementResult.unbounded()

    return PivotElementResult.found(Point(pivot_column_index, pivot_row_index))


def pivot(tableau: Tableau, point: Point) -> None:
    """Gauss-Jordan step around ``point``, in place."""
    rows = tableau.rows
    pivot_value = rows[point.y, point.x]
    rows[point.y, :] /= pivot_value
    for y in range(rows.shape[0]):
        if y == point.y:
            continue
        factor = rows[y, point.x]
        rows[y, :] -= factor * rows[point.y, :]


def get_vector(tableau: Tableau) -> List[SolutionVariable]:
    """Read the current basic solution, one entry per non-RHS column.

    A column counts as basic when its entries add up to exactly 1.0, which
    holds for the unit columns this pivoting produces.
    """
    rows = tableau.rows
    vector: List[SolutionVariable] = []
    for x in range(rows.shape[1] - 1):
        column = rows[:, x].tolist()
        total = 0.0
        for value in column:
            total += value
        if total != 1.0 or 1.0 not in column:
            vector.append(SolutionVariable(basic=False, value=0.0))
            continue
        row_index = column.index(1.0)
        vector.append(SolutionVariable(basic=True, value=float(rows[row_index, -1])))
    return vector


def alternate_entering_column(
    tableau: Tableau, vector: Sequence[SolutionVariable]
) -> Optional[int]:
    """First nonbasic column with a zero objective coefficient, if any."""
    target_row = tableau.objective_row
    for index, variable in enumerate(vector):
        if not variable.basic and target_row[index] == 0.0:
            return index
    return None


def _ratio_test(tableau: Tableau, column_index: int) -> Optional[int]:
    row = find_pivot_row(tableau.column(column_index)[1:], tableau.rhs[1:])
    if row is None:
        return None
    return row + 1
