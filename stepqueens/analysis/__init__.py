"""
Analysis and orchestration package for comparing search strategies.

This package contains:
- settings: global knobs and the per-run time limit
- stats: typed run records and aggregation helpers
- experiments: repeated runs of each strategy with result shaping
- reporting: CSV exports of aggregates and raw runs
- plots: optional charts (matplotlib, numpy, pandas, seaborn)
- cli: argparse entry point
"""

from . import settings as settings  # re-export for convenience
from .stats import (
    ExperimentResults,
    ProgressPrinter,
    RunRecord,
    StatsSummary,
    StrategyEntry,
    compute_detailed_statistics,
    compute_grouped_statistics,
)

__all__ = [
    # types
    "StatsSummary",
    "RunRecord",
    "StrategyEntry",
    "ExperimentResults",
    # utils
    "compute_detailed_statistics",
    "compute_grouped_statistics",
    "ProgressPrinter",
    # settings module
    "settings",
]
