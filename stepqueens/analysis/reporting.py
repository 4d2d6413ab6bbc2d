"""CSV export utilities for experiment outputs (aggregates and raw runs).

Two files per experiment: one row per (strategy, N) with aggregate metrics,
and one row per individual run. Filenames are optionally stamped with the
run identifier from ``settings``.
"""
from __future__ import annotations

import csv
import os
from typing import List, Optional

from . import settings
from .stats import ExperimentResults, StatsSummary


def _suffix() -> str:
    if getattr(settings, "DATE_IN_FILENAMES", False):
        return f"_{settings.RUN_ID}"
    return ""


def _stat(summary: Optional[StatsSummary], key: str):
    if not summary:
        return ""
    value = summary.get(key)
    return "" if value is None else value


def save_results_to_csv(results: ExperimentResults, N_values: List[int], out_dir: str) -> str:
    """Write per-(strategy, N) aggregate metrics to CSV and return the path.

    Column names are lowercase snake_case.
    """
    os.makedirs(out_dir, exist_ok=True)
    filename = os.path.join(out_dir, f"results_strategies{_suffix()}.csv")

    with open(filename, "w", newline="") as f:
        writer = csv.writer(f)
        writer.writerow([
            "n",
            "strategy",
            "total_runs",
            "successes",
            "failures",
            "timeouts",
            "success_rate",
            "timeout_rate",
            "steps_mean",
            "steps_median",
            "steps_std",
            "steps_min",
            "steps_max",
            "backtracks_mean",
            "backtracks_median",
            "time_mean",
            "time_median",
            "success_steps_mean",
            "success_time_mean",
        ])
        for N in N_values:
            for label, per_n in results.items():
                entry = per_n.get(N)
                if not entry:
                    continue
                writer.writerow([
                    N,
                    label,
                    entry.get("total_runs", 0),
                    entry.get("successes", 0),
                    entry.get("failures", 0),
                    entry.get("timeouts", 0),
                    entry.get("success_rate", 0),
                    entry.get("timeout_rate", 0),
                    _stat(entry.get("all_steps"), "mean"),
                    _stat(entry.get("all_steps"), "median"),
                    _stat(entry.get("all_steps"), "std"),
                    _stat(entry.get("all_steps"), "min"),
                    _stat(entry.get("all_steps"), "max"),
                    _stat(entry.get("all_backtracks"), "mean"),
                    _stat(entry.get("all_backtracks"), "median"),
                    _stat(entry.get("all_time"), "mean"),
                    _stat(entry.get("all_time"), "median"),
                    _stat(entry.get("success_steps"), "mean"),
                    _stat(entry.get("success_time"), "mean"),
                ])

    print(f"Aggregate results saved to {filename}")
    return filename


def save_raw_data_to_csv(results: ExperimentResults, N_values: List[int], out_dir: str) -> str:
    """Write one row per individual run to CSV and return the path."""
    os.makedirs(out_dir, exist_ok=True)
    filename = os.path.join(out_dir, f"raw_data_strategies{_suffix()}.csv")

    with open(filename, "w", newline="") as f:
        writer = csv.writer(f)
        writer.writerow([
            "n",
            "run_id",
            "strategy",
            "success",
            "timeout",
            "valid",
            "steps",
            "backtracks",
            "time_seconds",
        ])
        for N in N_values:
            for label, per_n in results.items():
                entry = per_n.get(N)
                if not entry:
                    continue
                for i, record in enumerate(entry.get("raw_runs", []), start=1):
                    writer.writerow([
                        N,
                        i,
                        label,
                        record["success"],
                        record["timeout"],
                        record["valid"],
                        record["steps"],
                        record["backtracks"],
                        record["time"],
                    ])

    print(f"Raw run data saved to {filename}")
    return filename
