"""Typed result shapes and statistics helpers for the comparison pipeline.

Defines ``TypedDict`` structures for per-run records and per-strategy
aggregates, and utilities to summarize step counts and times across runs.
"""
from __future__ import annotations

import statistics
from typing import Any, Dict, List, Optional, TypedDict


class StatsSummary(TypedDict, total=False):
    count: int
    mean: Optional[float]
    median: Optional[float]
    std: Optional[float]
    min: Optional[float]
    max: Optional[float]
    q25: Optional[float]
    q75: Optional[float]
    range: Optional[float]


class RunRecord(TypedDict):
    success: bool
    timeout: bool
    steps: int
    backtracks: int
    time: float
    valid: bool


class StrategyEntry(TypedDict, total=False):
    success_rate: float
    timeout_rate: float
    failure_rate: float
    total_runs: int
    successes: int
    failures: int
    timeouts: int
    all_steps: StatsSummary
    all_backtracks: StatsSummary
    all_time: StatsSummary
    success_steps: StatsSummary
    success_backtracks: StatsSummary
    success_time: StatsSummary
    timeout_steps: StatsSummary
    timeout_backtracks: StatsSummary
    timeout_time: StatsSummary
    failure_steps: StatsSummary
    failure_backtracks: StatsSummary
    failure_time: StatsSummary
    raw_runs: List[RunRecord]


# strategy label -> N -> aggregate
ExperimentResults = Dict[str, Dict[int, StrategyEntry]]

METRICS = ("steps", "backtracks", "time")


class ProgressPrinter:
    """Minimal, stdout-only progress reporter for long-running loops.

    Parameters
    ----------
    total : int
        Total number of items expected. Values <= 0 are coerced to 1 to
        avoid division by zero when reporting percentages.
    label : str
        Short label printed in front of the counters.
    """

    def __init__(self, total: int, label: str):
        self.total = max(1, total)
        self.label = label

    def update(self, index: int, detail: str = "") -> None:
        """Print a single-line progress update to stdout."""
        percent = (index / self.total) * 100
        suffix = f" - {detail}" if detail else ""
        print(f"[{self.label}] {index}/{self.total} ({percent:.0f}%)" + suffix)


def compute_detailed_statistics(values: List[float]) -> StatsSummary:
    """Compute summary statistics for a numeric sequence.

    Returns count, mean, median, population std, min, max, 25th and 75th
    percentiles (q25, q75) and range. An empty input yields ``count == 0`` and
    ``None`` everywhere else so CSV rows keep a stable shape.
    """
    if not values:
        return {
            "count": 0,
            "mean": None,
            "median": None,
            "std": None,
            "min": None,
            "max": None,
            "q25": None,
            "q75": None,
            "range": None,
        }

    sorted_vals = sorted(values)
    n = len(values)
    min_val = sorted_vals[0]
    max_val = sorted_vals[-1]

    return {
        "count": n,
        "mean": statistics.mean(values),
        "median": statistics.median(values),
        "std": statistics.pstdev(values) if n > 1 else 0,
        "min": min_val,
        "max": max_val,
        "q25": sorted_vals[n // 4] if n >= 4 else min_val,
        "q75": sorted_vals[3 * n // 4] if n >= 4 else max_val,
        "range": max_val - min_val,
    }


def compute_grouped_statistics(runs: List[RunRecord]) -> Dict[str, Any]:
    """Aggregate run records by outcome (success, timeout, failure).

    A failure is a run that neither found a solution nor hit the time limit,
    i.e. an exhausted search.
    """
    successes = [r for r in runs if r["success"]]
    timeouts = [r for r in runs if r["timeout"]]
    failures = [r for r in runs if not r["success"] and not r["timeout"]]
    total = len(runs)

    stats: Dict[str, Any] = {
        "total_runs": total,
        "successes": len(successes),
        "failures": len(failures),
        "timeouts": len(timeouts),
        "success_rate": len(successes) / total if total else 0,
        "timeout_rate": len(timeouts) / total if total else 0,
        "failure_rate": len(failures) / total if total else 0,
    }

    for group, records in (("all", runs), ("success", successes), ("timeout", timeouts), ("failure", failures)):
        if not records:
            continue
        for metric in METRICS:
            stats[f"{group}_{metric}"] = compute_detailed_statistics([r[metric] for r in records])

    return stats
