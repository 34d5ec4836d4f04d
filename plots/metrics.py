"""Plotting utilities for solve histories."""

from __future__ import annotations

from pathlib import Path
from typing import Iterable

import matplotlib.pyplot as plt
import numpy as np

from tableau import Tableau


def generate_plots(tableaus: Iterable[Tableau], out_dir: str | Path) -> None:
    records = list(tableaus)
    if not records:
        return
    out_path = Path(out_dir)
    out_path.mkdir(parents=True, exist_ok=True)

    steps = np.arange(1, len(records) + 1)
    objective = np.array([tableau.objective_row[-1] for tableau in records], dtype=float)

    plt.figure(figsize=(6, 4))
    plt.plot(steps, objective, marker="o", label="objective (RHS)")
    plt.xlabel("tableau")
    plt.ylabel("objective value")
    plt.xticks(steps)
    plt.legend()
    plt.tight_layout()
    plt.savefig(out_path / "objective.png", dpi=150)
    plt.close()
