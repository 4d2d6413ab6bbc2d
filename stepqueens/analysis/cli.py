"""Command-line interface for solving boards and comparing strategies.

Two subcommands:

- ``solve``: run one strategy on one board, optionally animating every step
  in the terminal, and print the final board.
- ``compare``: run every selected strategy many times for several board sizes,
  print a summary, write CSV files and (optionally) charts.

This module isolates I/O, argument parsing and progress reporting from the
search core so the core stays easy to test programmatically.
"""
from __future__ import annotations

import argparse
import random
import tempfile
from pathlib import Path
from typing import List, Optional

from . import settings
from .experiments import run_experiments, run_experiments_parallel
from .plots import plot_and_save
from .reporting import save_raw_data_to_csv, save_results_to_csv
from config_manager import ConfigManager
from stepqueens.board import create_board
from stepqueens.controller import chain_observers, deadline_observer, run, throttle_observer
from stepqueens.protocol import SearchOutcome
from stepqueens.render import animate_observer, render_outcome
from stepqueens.strategies import STRATEGIES, get_strategy
from stepqueens.utils import is_valid_solution


# ------------- Utils --------------------------------------------------------

def parse_strategy_filters(strategy_args: Optional[List[str]]) -> Optional[List[str]]:
    """Normalize strategy filter CLI inputs into a list of labels.

    Accepts repeated flags (``-s ordered -s random``) and comma-separated
    lists (``-s ordered,random``). Returns None when no filter is provided.
    """
    if not strategy_args:
        return None
    selected: List[str] = []
    for entry in strategy_args:
        for token in entry.split(","):
            token = token.strip().lower()
            if token:
                get_strategy(token)
                selected.append(token)
    unique = list(dict.fromkeys(selected))  # preserve order, remove dups
    return unique or None


def parse_sizes(text: Optional[str]) -> Optional[List[int]]:
    """Parse ``"4,8,12"`` into ``[4, 8, 12]``; negative sizes are rejected."""
    if not text:
        return None
    sizes = [int(token) for token in text.split(",") if token.strip()]
    for n in sizes:
        if n < 0:
            raise ValueError(f"Board sizes must be >= 0, got {n}")
    return sizes or None


def apply_configuration(config_path: str) -> ConfigManager:
    """Load configuration and update the ``settings`` module in place."""
    config_mgr = ConfigManager(config_path)

    experiment_settings = config_mgr.get_experiment_settings()
    if experiment_settings:
        settings.N_VALUES = [int(n) for n in experiment_settings.get("N_values", settings.N_VALUES)]
        settings.STRATEGIES = [s.lower() for s in config_mgr.get_strategies()]
        settings.RUNS_RANDOM = int(experiment_settings.get("runs_random", settings.RUNS_RANDOM))
        settings.RUNS_ORDERED = int(experiment_settings.get("runs_ordered", settings.RUNS_ORDERED))
        settings.SEED = experiment_settings.get("seed", settings.SEED)
        settings.OUT_DIR = experiment_settings.get("output_dir", settings.OUT_DIR)

    unknown = [s for s in settings.STRATEGIES if s not in STRATEGIES]
    if unknown:
        raise ValueError("Unknown strategies in configuration: " + ", ".join(unknown))

    timeout_settings = config_mgr.get_timeout_settings()
    if timeout_settings:
        settings.set_time_limit(timeout_settings.get("run_time_limit", settings.RUN_TIME_LIMIT))

    display_settings = config_mgr.get_display_settings()
    if display_settings:
        settings.DISPLAY_BOARD_SIZE = int(display_settings.get("board_size", settings.DISPLAY_BOARD_SIZE))
        settings.STEP_DELAY = float(display_settings.get("step_delay", settings.STEP_DELAY))

    return config_mgr


def print_summary(results, N_values: List[int]) -> None:
    """Print one line per (N, strategy) with success counts and mean steps."""
    print("\nSummary (mean forward steps per run):")
    for N in N_values:
        for label, per_n in results.items():
            entry = per_n.get(N)
            if not entry:
                continue
            steps = entry.get("all_steps", {}).get("mean")
            median = entry.get("all_steps", {}).get("median")
            print(
                f"  N={N:<3} {label:<14} solved {entry['successes']}/{entry['total_runs']}"
                f"  steps mean={steps if steps is not None else '-'}"
                f" median={median if median is not None else '-'}"
            )


# ------------- Pipelines ----------------------------------------------------

def solve_board(
    size: int,
    strategy: str,
    seed: Optional[int] = None,
    animate: bool = False,
    delay: float = 0.0,
    time_limit: Optional[float] = None,
) -> SearchOutcome:
    """Run one search and print the result board."""
    board = create_board(size)
    observer = chain_observers(
        deadline_observer(time_limit) if time_limit is not None else None,
        animate_observer(delay=delay) if animate else (throttle_observer(delay) if delay > 0 else None),
    )
    outcome = run(board, strategy, observer, rng=random.Random(seed))
    print(render_outcome(outcome))
    return outcome


def compare_strategies(
    N_values: List[int],
    strategies: List[str],
    runs_random: int,
    runs_ordered: int,
    out_dir: str,
    parallel: bool = False,
    plots: bool = False,
    validate: bool = False,
):
    """Run the comparison, write CSV files and optional charts."""
    runner = run_experiments_parallel if parallel else run_experiments
    results = runner(
        N_values,
        strategies,
        runs_random=runs_random,
        runs_ordered=runs_ordered,
        time_limit=settings.RUN_TIME_LIMIT,
        seed=settings.SEED,
        progress_label="Strategy comparison",
        validate=validate,
    )
    print_summary(results, N_values)
    save_results_to_csv(results, N_values, out_dir)
    save_raw_data_to_csv(results, N_values, out_dir)
    if plots:
        plot_and_save(results, N_values, out_dir)
    return results


def run_quick_regression_tests() -> None:
    """Solve N=8 with every strategy and run a tiny comparison into a temp dir."""
    print("Running quick regression tests (N=8)...")
    for label in STRATEGIES:
        board = create_board(8)
        outcome = run(board, label, rng=random.Random(8))
        if not outcome.solved or not is_valid_solution(board):
            raise AssertionError(f"Strategy {label} did not produce a valid N=8 solution.")
        print(f"  {label}: solved in {outcome.steps} steps ({outcome.elapsed:.4f}s)")

    results = run_experiments(
        [6],
        list(STRATEGIES),
        runs_random=3,
        runs_ordered=1,
        time_limit=5.0,
        seed=1,
        progress_label="Quick regression experiments",
        validate=True,
    )

    with tempfile.TemporaryDirectory() as tmpdir:
        csv_path = Path(save_results_to_csv(results, [6], tmpdir))
        if not csv_path.exists() or csv_path.stat().st_size == 0:
            raise AssertionError("Results CSV was not generated successfully during quick tests.")

    print("Quick regression tests passed.")


# ------------- CLI wiring --------------------------------------------------

def build_arg_parser() -> argparse.ArgumentParser:
    """Construct the argument parser for the CLI entry point."""
    parser = argparse.ArgumentParser(description="Observable backtracking search for N-Queens.")
    parser.add_argument("--config", default=None, help="Path to a JSON configuration file (optional).")
    parser.add_argument("--quick-test", action="store_true", help="Run quick regression tests (N=8) and exit.")
    sub = parser.add_subparsers(dest="command")

    solve = sub.add_parser("solve", help="Solve one board and print it.")
    solve.add_argument("size", type=int, nargs="?", default=None, help="Board size N (default from settings).")
    solve.add_argument("--strategy", "-s", default="ordered", choices=sorted(STRATEGIES), help="Placement strategy.")
    solve.add_argument("--seed", type=int, default=None, help="Seed for the random strategies.")
    solve.add_argument("--animate", action="store_true", help="Print the board after every step.")
    solve.add_argument("--delay", type=float, default=None, help="Pause in seconds between steps.")
    solve.add_argument("--time-limit", type=float, default=None, help="Abort after this many seconds.")

    compare = sub.add_parser("compare", help="Compare strategies over many runs.")
    compare.add_argument("--sizes", "-n", default=None, help="Comma-separated board sizes (e.g. 4,8,12).")
    compare.add_argument(
        "--strategy",
        "-s",
        action="append",
        help="Filter strategies (comma-separated or multiple flags). Default: all configured.",
    )
    compare.add_argument("--runs", type=int, default=None, help="Runs per random strategy and N.")
    compare.add_argument("--out-dir", default=None, help="Output directory for CSV files and charts.")
    compare.add_argument("--parallel", action="store_true", help="Distribute runs across worker processes.")
    compare.add_argument("--plots", action="store_true", help="Also write charts (requires matplotlib).")
    compare.add_argument("--validate", action="store_true", help="Check every solved board for validity.")
    return parser


def main(argv: Optional[List[str]] = None) -> None:
    """CLI entry point: parse arguments and dispatch to the chosen pipeline."""
    parser = build_arg_parser()
    args = parser.parse_args(argv)

    if args.quick_test:
        run_quick_regression_tests()
        return

    try:
        if args.config:
            apply_configuration(args.config)
        if args.command == "solve":
            size = args.size if args.size is not None else settings.DISPLAY_BOARD_SIZE
            delay = args.delay if args.delay is not None else settings.STEP_DELAY
            solve_board(size, args.strategy, args.seed, args.animate, delay, args.time_limit)
        elif args.command == "compare":
            compare_strategies(
                parse_sizes(args.sizes) or settings.N_VALUES,
                parse_strategy_filters(args.strategy) or settings.STRATEGIES,
                runs_random=args.runs if args.runs is not None else settings.RUNS_RANDOM,
                runs_ordered=settings.RUNS_ORDERED,
                out_dir=args.out_dir or settings.OUT_DIR,
                parallel=args.parallel,
                plots=args.plots,
                validate=args.validate,
            )
        else:
            parser.print_help()
    except FileNotFoundError as exc:
        print(f"Configuration file not found: {exc}")
        raise SystemExit(1) from exc
    except ValueError as exc:
        print(f"Execution error: {exc}")
        raise SystemExit(1) from exc
    except KeyboardInterrupt:
        print("\nExecution interrupted by user.")
        raise SystemExit(130) from None


if __name__ == "__main__":
    main()
