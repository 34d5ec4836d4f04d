"""Configuration loading for the simplex driver."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, List, Optional

import numpy as np
import yaml

from tableau import Tableau

# Used when no config file is given; x3..x5 are the slack columns.
DEFAULT_ROWS: List[List[float]] = [
    [1.0, -5.0, -6.0, 0.0, 0.0, 0.0, -7.0],
    [0.0, 10.0, 10.0, 1.0, 0.0, 0.0, 40.0],
    [0.0, 10.0, 20.0, 0.0, 1.0, 0.0, 60.0],
    [0.0, 1.0, 0.0, 0.0, 0.0, 1.0, 3.0],
]


@dataclass
class ProblemConfig:
    rows: List[List[float]] = field(default_factory=lambda: [list(row) for row in DEFAULT_ROWS])

    def build_tableau(self) -> Tableau:
        return Tableau(self.rows)


@dataclass
class RunConfig:
    max_iterations: Optional[int] = None
    annotate: bool = False
    logging: bool = False


@dataclass
class Config:
    problem: ProblemConfig = field(default_factory=ProblemConfig)
    run: RunConfig = field(default_factory=RunConfig)
    base_path: Path = field(default_factory=Path.cwd)


def _load_rows(path: Path) -> List[List[float]]:
    if not path.exists():
        raise FileNotFoundError(path)
    if path.suffix == ".npy":
        arr = np.asarray(np.load(path), dtype=float)
        if arr.ndim != 2:
            raise ValueError(f"tableau file must hold a 2-D array: {path}")
        return arr.tolist()
    if path.suffix in {".csv", ".txt"}:
        return _read_text_rows(path)
    raise ValueError(f"unsupported tableau file type: {path}")


def _read_text_rows(path: Path) -> List[List[float]]:
    # Row lengths are left for Tableau to check.
    rows = []
    with path.open("r", encoding="utf-8") as handle:
        for line_number, line in enumerate(handle, start=1):
            line = line.split("#", 1)[0].strip()
            if not line:
                continue
            try:
                rows.append([float(value) for value in line.split(",")])
            except ValueError as exc:
                raise ValueError(f"{path}:{line_number}: {exc}") from exc
    return rows


def _parse_rows(raw: Any) -> List[List[float]]:
    if not isinstance(raw, (list, tuple)):
        raise ValueError("problem.rows must be a list of rows")
    rows = []
    for index, row in enumerate(raw):
        if not isinstance(row, (list, tuple)):
            raise ValueError(f"problem.rows[{index}] must be a list of numbers")
        rows.append([float(value) for value in row])
    return rows


def load_config(path: str | Path) -> Config:
    cfg_path = Path(path).expanduser().resolve()
    with cfg_path.open("r", encoding="utf-8") as handle:
        raw = yaml.safe_load(handle) or {}

    base = cfg_path.parent

    problem_raw = raw.get("problem") or {}
    run_raw = raw.get("run") or {}

    if "rows" in problem_raw:
        rows = _parse_rows(problem_raw["rows"])
    elif "rows_path" in problem_raw:
        rows = _load_rows(base / problem_raw["rows_path"])
    else:
        raise ValueError("problem section needs either 'rows' or 'rows_path'")

    max_iterations = run_raw.get("max_iterations")
    if max_iterations is not None and int(max_iterations) < 0:
        raise ValueError(f"run.max_iterations must be non-negative, got {max_iterations}")
    run = RunConfig(
        max_iterations=int(max_iterations) if max_iterations is not None else None,
        annotate=bool(run_raw.get("annotate", False)),
        logging=bool(run_raw.get("logging", False)),
    )

    return Config(problem=ProblemConfig(rows=rows), run=run, base_path=base)
