import json

import numpy as np
import pytest

from cli import main
from config import DEFAULT_ROWS, load_config
from render import (
    format_number,
    format_variable,
    render_annotated,
    render_history,
    render_status,
    render_tableau,
)
from runner.loop import OptimizeResult, optimize
from simplex import SolutionVariable
from tableau import Tableau, UnevenColumns
from telemetry.writer import history_records, write_history


def _write(path, text):
    path.write_text(text, encoding="utf-8")
    return path


def test_load_config_inline_rows(tmp_path):
    cfg_path = _write(
        tmp_path / "problem.yaml",
        "problem:\n"
        "  rows:\n"
        "    - [1, -1, 0]\n"
        "    - [0, -1, 5]\n"
        "run:\n"
        "  max_iterations: 5\n"
        "  annotate: true\n",
    )
    cfg = load_config(cfg_path)
    assert cfg.problem.rows == [[1.0, -1.0, 0.0], [0.0, -1.0, 5.0]]
    assert cfg.run.max_iterations == 5
    assert cfg.run.annotate is True
    assert cfg.run.logging is False
    assert cfg.base_path == tmp_path.resolve()


def test_load_config_rows_from_csv(tmp_path):
    _write(tmp_path / "tableau.csv", "1,-3,-2,0,0,0\n0,1,1,1,0,4\n0,1,0,0,1,2\n")
    cfg_path = _write(tmp_path / "problem.yaml", "problem:\n  rows_path: tableau.csv\n")
    cfg = load_config(cfg_path)
    tableau = cfg.problem.build_tableau()
    assert tableau.shape == (3, 6)
    assert cfg.run.max_iterations is None


def test_load_config_requires_rows(tmp_path):
    cfg_path = _write(tmp_path / "problem.yaml", "run:\n  annotate: false\n")
    with pytest.raises(ValueError):
        load_config(cfg_path)


def test_build_tableau_surfaces_creation_error(tmp_path):
    cfg_path = _write(
        tmp_path / "problem.yaml",
        "problem:\n  rows:\n    - [1, 2, 3]\n    - [0, 1]\n",
    )
    with pytest.raises(UnevenColumns):
        load_config(cfg_path).problem.build_tableau()


def test_format_number_matches_plain_float_display():
    assert format_number(1.0) == "1"
    assert format_number(-5.0) == "-5"
    assert format_number(0.25) == "0.25"
    assert format_number(-0.0) == "-0"
    assert format_number(0.1 + 0.2) == "0.30000000000000004"
    assert format_number(1e20) == "100000000000000000000"


def test_format_variable_labels_basic_and_nonbasic():
    assert format_variable(SolutionVariable(basic=True, value=2.0)) == "BV(2)"
    assert format_variable(SolutionVariable(basic=False, value=0.0)) == "NBV(0)"


def test_render_tableau_layout():
    tableau = Tableau([[1.0, -3.0, 0.0], [0.0, 1.0, 4.0]])
    assert render_tableau(tableau) == "\n".join(
        [
            "x0 |  x1  | RHS",
            " 1 |  -3  |  0",
            "-" * 16,
            " 0 |   1  |  4",
        ]
    )


def test_render_annotated_appends_vector_and_pivot():
    tableau = Tableau([[1.0, -3.0, 0.0], [0.0, 1.0, 4.0]])
    lines = render_annotated(tableau).splitlines()
    assert lines[-2] == "Vector: [BV(0), NBV(0)]"
    assert lines[-1] == "Pivot: (1, 1)"

    unbounded = Tableau([[1.0, -1.0, 0.0], [0.0, -1.0, 5.0]])
    assert render_annotated(unbounded).splitlines()[-1] == "Pivot: Unbounded"


def test_render_history_and_status():
    outcome = optimize(Tableau([[1.0, -1.0, 0.0], [0.0, 1.0, 5.0]]))
    text = render_history(outcome.tableaus)
    assert text.startswith("Tableau 1:\n")
    assert "\n\nTableau 2:\n" in text
    assert render_status(outcome.result) == "Status: Optimal"
    assert render_status(OptimizeResult.MULTIPLE_OPTIMAL) == (
        "Status: Multiple optimal solutions. Check out both last tableaus."
    )


def test_history_records(tmp_path):
    outcome = optimize(Tableau([[1.0, -1.0, 0.0], [0.0, 1.0, 5.0]]))
    target = tmp_path / "out" / "history.jsonl"
    write_history(target, history_records(outcome))
    records = [json.loads(line) for line in target.read_text(encoding="utf-8").splitlines()]
    assert len(records) == len(outcome.tableaus) == 2
    assert records[0]["status"] is None
    assert records[-1]["status"] == "Optimal"
    assert records[-1]["objective"] == 5.0
    assert records[-1]["rows"] == [[1.0, 0.0, 5.0], [0.0, 1.0, 5.0]]
    assert records[-1]["vector"][1] == {"basic": True, "value": 5.0}


def test_main_solves_builtin_example(capsys):
    assert main([]) == 0
    out = capsys.readouterr().out
    assert "Tableau 3:" in out
    assert "Tableau 4:" not in out
    assert out.rstrip().endswith("Status: Optimal")


def test_main_reports_creation_error(tmp_path, capsys):
    cfg_path = _write(tmp_path / "bad.yaml", "problem:\n  rows:\n    - [1, 2]\n")
    assert main(["--config", str(cfg_path)]) == 1
    captured = capsys.readouterr()
    assert captured.out == ""
    assert captured.err.strip() == (
        "Error: Tableau must have at least two rows, current tableau has 1 rows"
    )


def test_main_unbounded_config(tmp_path, capsys):
    cfg_path = _write(
        tmp_path / "unbounded.yaml",
        "problem:\n  rows:\n    - [1, -1, 0]\n    - [0, -1, 5]\n",
    )
    assert main(["--config", str(cfg_path), "--annotate"]) == 0
    out = capsys.readouterr().out
    assert "Pivot: Unbounded" in out
    assert out.rstrip().endswith("Status: Unbounded")


def test_main_iteration_guard(capsys):
    assert main(["--max-iterations", "1"]) == 2
    assert "did not terminate within 1 pivots" in capsys.readouterr().err


def test_main_writes_history_and_plot(tmp_path):
    history = tmp_path / "history.jsonl"
    plots = tmp_path / "plots"
    assert main(["--history-out", str(history), "--plot-out", str(plots)]) == 0
    lines = history.read_text(encoding="utf-8").splitlines()
    assert len(lines) == 3
    first = json.loads(lines[0])
    np.testing.assert_array_equal(first["rows"], DEFAULT_ROWS)
    assert (plots / "objective.png").exists()


def test_load_config_ragged_csv_reaches_tableau_check(tmp_path):
    _write(tmp_path / "ragged.csv", "# x0,x1,RHS\n1,-1,0\n\n0,1\n")
    cfg_path = _write(tmp_path / "problem.yaml", "problem:\n  rows_path: ragged.csv\n")
    cfg = load_config(cfg_path)
    assert cfg.problem.rows == [[1.0, -1.0, 0.0], [0.0, 1.0]]
    with pytest.raises(UnevenColumns) as excinfo:
        cfg.problem.build_tableau()
    assert (excinfo.value.expected_columns, excinfo.value.row_index) == (3, 2)


def test_main_reports_ragged_csv(tmp_path, capsys):
    _write(tmp_path / "ragged.csv", "1,-1,0\n0,1\n")
    cfg_path = _write(tmp_path / "problem.yaml", "problem:\n  rows_path: ragged.csv\n")
    assert main(["--config", str(cfg_path)]) == 1
    captured = capsys.readouterr()
    assert captured.out == ""
    assert captured.err.strip() == (
        "Error: All rows must have the same number of columns. "
        "First row has 3 columns, but row 2 has 2 columns"
    )


def test_main_reports_config_errors(tmp_path, capsys):
    _write(tmp_path / "bad.csv", "1,x,0\n0,1,2\n")
    cfg_path = _write(tmp_path / "problem.yaml", "problem:\n  rows_path: bad.csv\n")
    assert main(["--config", str(cfg_path)]) == 1
    assert "bad.csv:1" in capsys.readouterr().err

    assert main(["--config", str(tmp_path / "missing.yaml")]) == 1
    assert capsys.readouterr().err.startswith("Error: ")

    negative = _write(
        tmp_path / "negative.yaml",
        "problem:\n  rows:\n    - [1, -1, 0]\n    - [0, 1, 5]\nrun:\n  max_iterations: -3\n",
    )
    assert main(["--config", str(negative)]) == 1
    assert "non-negative" in capsys.readouterr().err


def test_main_rejects_negative_max_iterations(capsys):
    with pytest.raises(SystemExit) as excinfo:
        main(["--max-iterations", "-1"])
    assert excinfo.value.code == 2
    assert "must be non-negative" in capsys.readouterr().err
