"""Fixed-width text rendering of tableaus and solve results."""

from __future__ import annotations

import math
from typing import Iterable, List, Sequence

import numpy as np

from runner.loop import OptimizeResult
from simplex import PivotStatus, SolutionVariable, find_pivot_element, get_vector
from tableau import Tableau


def format_number(value: float) -> str:
    """Plain positional float text: ``1``, ``-0``, ``0.30000000000000004``."""
    if math.isfinite(value):
        return np.format_float_positional(value, trim="-")
    return str(value)


def format_variable(variable: SolutionVariable) -> str:
    label = "BV" if variable.basic else "NBV"
    return f"{label}({format_number(variable.value)})"


def render_tableau(tableau: Tableau) -> str:
    cells = [[format_number(value) for value in row] for row in tableau.to_list()]
    widths = _column_widths(cells)
    total_width = sum(widths) + len(widths) * 3 + 1

    lines: List[str] = [_header(widths)]
    for row_index, row in enumerate(cells):
        lines.append(_row(row, widths))
        if row_index == 0:
            lines.append("-" * total_width)
    return "\n".join(lines)


def render_annotated(tableau: Tableau) -> str:
    """Grid plus the current solution vector and the next pivot cell."""
    vector = ", ".join(format_variable(variable) for variable in get_vector(tableau))
    located = find_pivot_element(tableau)
    if located.status is PivotStatus.FOUND:
        pivot_text = f"({located.point.x}, {located.point.y})"
    else:
        pivot_text = located.status.name.capitalize()
    return "\n".join(
        [
            render_tableau(tableau),
            f"Vector: [{vector}]",
            f"Pivot: {pivot_text}",
        ]
    )


def render_history(tableaus: Iterable[Tableau], *, annotate: bool = False) -> str:
    renderer = render_annotated if annotate else render_tableau
    blocks = [
        f"Tableau {index}:\n{renderer(tableau)}\n"
        for index, tableau in enumerate(tableaus, start=1)
    ]
    return "\n".join(blocks)


def render_status(result: OptimizeResult) -> str:
    return f"Status: {result.label}"


def _column_widths(cells: Sequence[Sequence[str]]) -> List[int]:
    widths = []
    for column_index in range(len(cells[0])):
        width = max(len(row[column_index]) for row in cells)
        widths.append(max(width, 2))
    return widths


def _header(widths: Sequence[int]) -> str:
    last = len(widths) - 1
    parts: List[str] = []
    for index, width in enumerate(widths):
        if index == 0:
            parts.append(f"{'x0':>{width}} |")
        elif index == last:
            parts.append(f" | {'RHS':>{width}}")
            break
        else:
            parts.append(f" {'x' + str(index):>{width}} ")
        if index < last - 1:
            parts.append(" ")
    return "".join(parts)


def _row(row: Sequence[str], widths: Sequence[int]) -> str:
    last = len(row) - 1
    parts: List[str] = []
    for index, cell in enumerate(row):
        width = widths[index]
        if index == 0:
            parts.append(f"{cell:>{width}} |")
        elif index == last:
            parts.append(f"| {cell:>{width}}")
            break
        else:
            parts.append(f" {cell:>{width}} ")
        if index < last:
            parts.append(" ")
    return "".join(parts)
