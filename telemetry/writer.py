"""Telemetry writer producing JSON lines."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Iterable, Iterator, Mapping

from runner.loop import OptimizeOutcome
from simplex import get_vector


def history_records(outcome: OptimizeOutcome) -> Iterator[dict[str, Any]]:
    last = len(outcome.tableaus) - 1
    for index, tableau in enumerate(outcome.tableaus):
        vector = get_vector(tableau)
        yield {
            "index": index,
            "rows": tableau.rows,
            "objective": float(tableau.objective_row[-1]),
            "vector": [
                {"basic": variable.basic, "value": variable.value} for variable in vector
            ],
            "status": outcome.result.label if index == last else None,
        }


def write_history(path: str | Path, records: Iterable[Mapping[str, object]]) -> None:
    target = Path(path)
    target.parent.mkdir(parents=True, exist_ok=True)
    with target.open("w", encoding="utf-8") as handle:
        for record in records:
            handle.write(json.dumps(record, default=_json_fallback))
            handle.write("\n")


def _json_fallback(obj):
    if hasattr(obj, "tolist"):
        return obj.tolist()
    raise TypeError(f"object of type {type(obj)!r} is not JSON serializable")
