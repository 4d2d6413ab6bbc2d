"""Repeated-run experiments comparing the search strategies (sequential and parallel).

For every board size and strategy, a batch of independent runs is executed
and reduced to aggregates via :func:`compute_grouped_statistics`. The step
count (forward transitions) is the canonical, hardware-independent work
metric; wall-clock time is kept alongside it.

Each run uses its own board and its own ``random.Random`` derived from the
base seed, so batches are reproducible and safe to distribute across
processes.
"""
from __future__ import annotations

import random
from concurrent.futures import ProcessPoolExecutor
from typing import Any, List, Optional, Tuple

from .settings import NUM_PROCESSES
from .stats import ExperimentResults, ProgressPrinter, RunRecord, compute_grouped_statistics
from stepqueens.board import create_board
from stepqueens.controller import deadline_observer, run
from stepqueens.strategies import get_strategy
from stepqueens.utils import is_valid_solution


def _run_seed(base_seed: Optional[int], size: int, run_index: int) -> Optional[int]:
    if base_seed is None:
        return None
    return base_seed * 1_000_003 + size * 1_009 + run_index


def run_single(params: Tuple[int, str, Optional[float], Optional[int]]) -> RunRecord:
    """Worker: one search on a fresh board (picklable for process pools)."""
    size, label, time_limit, seed = params
    board = create_board(size)
    observer = deadline_observer(time_limit) if time_limit is not None else None
    outcome = run(board, get_strategy(label), observer, rng=random.Random(seed))
    return {
        "success": outcome.solved,
        "timeout": outcome.aborted,
        "steps": outcome.steps,
        "backtracks": outcome.backtracks,
        "time": outcome.elapsed,
        "valid": is_valid_solution(board) if outcome.solved else False,
    }


def _runs_for(label: str, runs_random: int, runs_ordered: int) -> int:
    return runs_ordered if label == "ordered" else runs_random


def _batch_params(
    size: int, label: str, runs: int, time_limit: Optional[float], seed: Optional[int]
) -> List[Tuple[int, str, Optional[float], Optional[int]]]:
    return [(size, label, time_limit, _run_seed(seed, size, i)) for i in range(runs)]


def _summarize(records: List[RunRecord], validate: bool, size: int, label: str) -> Any:
    if validate:
        for record in records:
            if record["success"] and not record["valid"]:
                raise AssertionError(f"Invalid board produced for N={size} by {label}")
    entry = compute_grouped_statistics(records)
    entry["raw_runs"] = records
    return entry


def run_strategy_batch(
    size: int,
    strategy: str,
    runs: int,
    time_limit: Optional[float] = None,
    seed: Optional[int] = None,
) -> List[RunRecord]:
    """Run ``strategy`` ``runs`` times on a fresh ``size x size`` board."""
    get_strategy(strategy)
    return [run_single(p) for p in _batch_params(size, strategy, runs, time_limit, seed)]


def run_experiments(
    N_values: List[int],
    strategies: List[str],
    runs_random: int,
    runs_ordered: int = 1,
    time_limit: Optional[float] = None,
    seed: Optional[int] = None,
    progress_label: Optional[str] = None,
    validate: bool = False,
) -> ExperimentResults:
    """Sequential experiments: every strategy for every N.

    Returns ``results[strategy][N]`` aggregates with ``raw_runs`` attached.
    """
    for label in strategies:
        get_strategy(label)
    results: Any = {label: {} for label in strategies}
    progress = ProgressPrinter(len(N_values), progress_label) if progress_label else None

    for index, N in enumerate(N_values, start=1):
        if progress:
            progress.update(index, f"N={N}")
        print(f"=== N = {N}, strategies: {'+'.join(strategies)} ===")
        for label in strategies:
            runs = _runs_for(label, runs_random, runs_ordered)
            records = run_strategy_batch(N, label, runs, time_limit, seed)
            entry = _summarize(records, validate, N, label)
            results[label][N] = entry
            print(
                f"  {label}: {entry['successes']}/{runs} solved, "
                f"{entry['timeouts']} timeouts, "
                f"mean steps {entry['all_steps']['mean'] if runs else 0}"
            )

    return results


def run_experiments_parallel(
    N_values: List[int],
    strategies: List[str],
    runs_random: int,
    runs_ordered: int = 1,
    time_limit: Optional[float] = None,
    seed: Optional[int] = None,
    progress_label: Optional[str] = None,
    validate: bool = False,
    max_workers: Optional[int] = None,
) -> ExperimentResults:
    """Parallel version of :func:`run_experiments` using a process pool.

    Runs of one (strategy, N) batch are distributed across ``max_workers``
    processes (default ``NUM_PROCESSES``). Each worker owns its board.
    """
    for label in strategies:
        get_strategy(label)
    results: Any = {label: {} for label in strategies}
    progress = ProgressPrinter(len(N_values), progress_label) if progress_label else None

    with ProcessPoolExecutor(max_workers=max_workers or NUM_PROCESSES) as executor:
        for index, N in enumerate(N_values, start=1):
            if progress:
                progress.update(index, f"N={N}")
            print(f"=== (Parallel) N = {N}, strategies: {'+'.join(strategies)} ===")
            for label in strategies:
                runs = _runs_for(label, runs_random, runs_ordered)
                params = _batch_params(N, label, runs, time_limit, seed)
                records = list(executor.map(run_single, params))
                results[label][N] = _summarize(records, validate, N, label)

    return results
