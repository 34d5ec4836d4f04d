"""Validated tableau container for the tabular simplex method."""

from __future__ import annotations

from typing import Callable, Sequence

import numpy as np


class TableauCreationError(ValueError):
    """Raised when the given rows cannot form a valid tableau."""


class NotEnoughRows(TableauCreationError):
    def __init__(self, count: int) -> None:
        self.count = count
        super().__init__(
            f"Tableau must have at least two rows, current tableau has {count} rows"
        )


class NotEnoughColumns(TableauCreationError):
    def __init__(self) -> None:
        super().__init__("Tableau must at least have the x0 and RHS columns")


class UnevenColumns(TableauCreationError):
    def __init__(self, expected_columns: int, row_index: int, actual_columns: int) -> None:
        self.expected_columns = expected_columns
        self.row_index = row_index
        self.actual_columns = actual_columns
        super().__init__(
            "All rows must have the same number of columns. "
            f"First row has {expected_columns} columns, "
            f"but row {row_index} has {actual_columns} columns"
        )


class Tableau:
    """One simplex iteration: objective row first, RHS in the last column.

    Column 0 holds the ``x0`` coefficient, the columns in between belong to
    structural and slack variables.
    """

    def __init__(self, rows: Sequence[Sequence[float]]) -> None:
        rows = list(rows)
        if len(rows) < 2:
            raise NotEnoughRows(len(rows))

        columns = len(rows[0])
        if columns < 2:
            raise NotEnoughColumns()

        for index, row in enumerate(rows):
            if len(row) != columns:
                # Reported row numbers are one-based.
                raise UnevenColumns(columns, index + 1, len(row))

        self._rows = np.array(rows, dtype=float)

    @classmethod
    def _wrap(cls, array: np.ndarray) -> Tableau:
        instance = cls.__new__(cls)
        instance._rows = array
        return instance

    @property
    def rows(self) -> np.ndarray:
        return self._rows

    @property
    def shape(self) -> tuple[int, int]:
        return self._rows.shape

    @property
    def objective_row(self) -> np.ndarray:
        return self._rows[0]

    @property
    def rhs(self) -> np.ndarray:
        return self._rows[:, -1]

    def column(self, index: int) -> np.ndarray:
        return self._rows[:, index]

    def copy(self) -> Tableau:
        return Tableau._wrap(self._rows.copy())

    def to_list(self) -> list[list[float]]:
        return self._rows.tolist()

    def apply_all(self, function: Callable[[float], float]) -> None:
        for row_index in range(self._rows.shape[0]):
            self.apply_row(row_index, function)

    def apply_row(self, row_index: int, function: Callable[[float], float]) -> None:
        row = self._rows[row_index]
        for column_index, value in enumerate(row):
            row[column_index] = function(float(value))

    def apply_column(self, column_index: int, function: Callable[[float], float]) -> None:
        column = self._rows[:, column_index]
        for row_index, value in enumerate(column):
            column[row_index] = function(float(value))

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Tableau):
            return NotImplemented
        return self._rows.shape == other._rows.shape and bool(
            np.array_equal(self._rows, other._rows)
        )

    __hash__ = None  # mutable

    def __repr__(self) -> str:
        return f"Tableau({self.to_list()!r})"
