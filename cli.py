"""Command-line driver: solve one tableau and print every iteration."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Optional, Sequence

import yaml

from config import Config, load_config
from plots.metrics import generate_plots
from render import render_history, render_status
from runner.loop import IterationLimitError, optimize
from tableau import TableauCreationError
from telemetry.writer import history_records, write_history


def _non_negative_int(text: str) -> int:
    value = int(text)
    if value < 0:
        raise argparse.ArgumentTypeError(f"must be non-negative, got {value}")
    return value


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Tabular simplex solver")
    parser.add_argument(
        "--config",
        help="Path to YAML configuration file. Defaults to the built-in example.",
    )
    parser.add_argument(
        "--annotate",
        action="store_true",
        help="Print the solution vector and next pivot under each tableau.",
    )
    parser.add_argument(
        "--max-iterations",
        type=_non_negative_int,
        help="Abort after this many pivots.",
    )
    parser.add_argument(
        "--history-out",
        help="Write the tableau history as JSON lines to this file.",
    )
    parser.add_argument(
        "--plot-out",
        help="Output directory for the objective plot.",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Log solver progress to stderr.",
    )
    return parser.parse_args(argv)


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = parse_args(argv)
    try:
        cfg = load_config(args.config) if args.config else Config()
    except (OSError, ValueError, yaml.YAMLError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    if args.verbose or cfg.run.logging:
        logging.basicConfig(
            level=logging.DEBUG if args.verbose else logging.INFO,
            format="%(levelname)s %(name)s: %(message)s",
        )

    try:
        tableau = cfg.problem.build_tableau()
    except TableauCreationError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    max_iterations = (
        args.max_iterations if args.max_iterations is not None else cfg.run.max_iterations
    )
    try:
        outcome = optimize(tableau, max_iterations=max_iterations)
    except IterationLimitError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 2

    print(render_history(outcome.tableaus, annotate=args.annotate or cfg.run.annotate))
    print(render_status(outcome.result))

    if args.history_out:
        write_history(Path(args.history_out), history_records(outcome))
    if args.plot_out:
        generate_plots(outcome.tableaus, Path(args.plot_out))
    return 0


if __name__ == "__main__":
    sys.exit(main())
