"""Visualization utilities for strategy comparison results.

Overview
--------
Charts are written as PNG files into ``out_dir``. The module degrades
gracefully: if the plotting stack (matplotlib, numpy, pandas, seaborn) is
unavailable, public functions print a short message and return so upstream
pipelines can continue.

Chart map
---------
- 01_steps_vs_N.png: mean forward steps per strategy vs N (log scale), with
  a +/- 1 std band.
    - X: N (board size). Y: steps. Step count is hardware independent, so this
      is the chart to use when comparing the random and seeded strategies.
- 02_time_vs_N.png: mean wall-clock time per strategy vs N (log scale).
- 03_success_rate_vs_N.png: solved fraction per strategy vs N.
- boxplot_steps_N{N}.png: step-count distribution per strategy for one N.
"""
from __future__ import annotations

import os
from typing import Any, List, Optional, cast

try:
    import matplotlib.pyplot as plt  # type: ignore
    import numpy as np  # type: ignore
    import pandas as pd  # type: ignore
    import seaborn as sns  # type: ignore
    _PLOTS_AVAILABLE = True
except Exception:
    plt = cast(Any, None)  # type: ignore
    np = cast(Any, None)  # type: ignore
    pd = cast(Any, None)  # type: ignore
    sns = cast(Any, None)  # type: ignore
    _PLOTS_AVAILABLE = False

from . import settings
from .stats import ExperimentResults


def _suffix() -> str:
    if getattr(settings, "DATE_IN_FILENAMES", False):
        return f"_{settings.RUN_ID}"
    return ""


def _series(results: ExperimentResults, label: str, N_values: List[int], key: str, stat: str) -> List[float]:
    values: List[float] = []
    for N in N_values:
        summary = results[label].get(N, {}).get(key) or {}
        value = summary.get(stat)
        values.append(float(value) if value is not None else float("nan"))
    return values


def plot_steps_vs_n(results: ExperimentResults, N_values: List[int], out_dir: str) -> Optional[str]:
    """Plot mean step count per strategy against N; return the file path."""
    if not _PLOTS_AVAILABLE:
        print("Plotting skipped: matplotlib, numpy, pandas and seaborn are required.")
        return None
    os.makedirs(out_dir, exist_ok=True)

    plt.figure(figsize=(12, 8))
    for label in results:
        mean = np.array(_series(results, label, N_values, "all_steps", "mean"))
        std = np.nan_to_num(np.array(_series(results, label, N_values, "all_steps", "std")))
        plt.semilogy(N_values, np.maximum(mean, 1), marker="o", linewidth=2, markersize=8, label=label)
        plt.fill_between(N_values, np.maximum(mean - std, 1), np.maximum(mean + std, 1), alpha=0.15)
    plt.xlabel("N (board size)", fontsize=12)
    plt.ylabel("Forward steps (log scale)", fontsize=12)
    plt.title("Search Effort vs Problem Size\n(mean forward steps, +/- 1 std)", fontsize=14)
    plt.legend(fontsize=11)
    plt.grid(True, alpha=0.7)
    plt.xticks(N_values)

    fname = os.path.join(out_dir, f"01_steps_vs_N{_suffix()}.png")
    plt.savefig(fname, bbox_inches="tight", dpi=150)
    plt.close()
    print(f"Saved step-count chart: {fname}")
    return fname


def plot_time_and_success(results: ExperimentResults, N_values: List[int], out_dir: str) -> List[str]:
    """Plot mean time and success rate per strategy against N."""
    if not _PLOTS_AVAILABLE:
        print("Plotting skipped: matplotlib, numpy, pandas and seaborn are required.")
        return []
    os.makedirs(out_dir, exist_ok=True)
    written: List[str] = []

    plt.figure(figsize=(12, 8))
    for label in results:
        times = np.array(_series(results, label, N_values, "all_time", "mean"))
        plt.semilogy(N_values, np.maximum(times, 1e-6), marker="s", linewidth=2, markersize=8, label=label)
    plt.xlabel("N (board size)", fontsize=12)
    plt.ylabel("Average time [s] (log scale)", fontsize=12)
    plt.title("Execution Time vs Problem Size", fontsize=14)
    plt.legend(fontsize=11)
    plt.grid(True, alpha=0.7)
    plt.xticks(N_values)
    fname = os.path.join(out_dir, f"02_time_vs_N{_suffix()}.png")
    plt.savefig(fname, bbox_inches="tight", dpi=150)
    plt.close()
    written.append(fname)

    plt.figure(figsize=(12, 8))
    for label in results:
        rates = [results[label].get(N, {}).get("success_rate", 0.0) for N in N_values]
        plt.plot(N_values, rates, marker="^", linewidth=2, markersize=8, label=label)
    plt.xlabel("N (board size)", fontsize=12)
    plt.ylabel("Success rate", fontsize=12)
    plt.title("Success Rate vs Problem Size", fontsize=14)
    plt.ylim(-0.05, 1.05)
    plt.legend(fontsize=11)
    plt.grid(True, alpha=0.7)
    plt.xticks(N_values)
    fname = os.path.join(out_dir, f"03_success_rate_vs_N{_suffix()}.png")
    plt.savefig(fname, bbox_inches="tight", dpi=150)
    plt.close()
    written.append(fname)

    print(f"Saved time and success-rate charts in {out_dir}")
    return written


def plot_step_distribution(results: ExperimentResults, N: int, out_dir: str) -> Optional[str]:
    """Boxplot of per-run step counts for every strategy at one N."""
    if not _PLOTS_AVAILABLE:
        print("Plotting skipped: matplotlib, numpy, pandas and seaborn are required.")
        return None

    rows = [
        {"strategy": label, "steps": record["steps"]}
        for label, per_n in results.items()
        for record in per_n.get(N, {}).get("raw_runs", [])
    ]
    if not rows:
        print(f"Raw runs not available for N={N}")
        return None
    os.makedirs(out_dir, exist_ok=True)

    frame = pd.DataFrame(rows)
    plt.figure(figsize=(10, 6))
    ax = sns.boxplot(data=frame, x="strategy", y="steps")
    sns.stripplot(data=frame, x="strategy", y="steps", color="black", size=3, alpha=0.5, ax=ax)
    ax.set_yscale("log")
    ax.set_title(f"Step-count distribution, N={N}")
    ax.set_xlabel("Strategy")
    ax.set_ylabel("Forward steps (log scale)")

    fname = os.path.join(out_dir, f"boxplot_steps_N{N}{_suffix()}.png")
    plt.savefig(fname, bbox_inches="tight", dpi=150)
    plt.close()
    print(f"Saved step distribution: {fname}")
    return fname


def plot_and_save(results: ExperimentResults, N_values: List[int], out_dir: str) -> None:
    """Emit every chart for a finished experiment."""
    plot_steps_vs_n(results, N_values, out_dir)
    plot_time_and_success(results, N_values, out_dir)
    for N in N_values:
        plot_step_distribution(results, N, out_dir)
