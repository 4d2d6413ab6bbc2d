"""Global settings for the strategy comparison pipeline.

This module centralizes tunable constants used by the experiment runner,
reporting and the CLI. Values can be overridden at runtime via
`stepqueens.analysis.cli.apply_configuration`. The search core never reads
these; every value reaches it as an explicit argument.
"""
from __future__ import annotations

import multiprocessing
from datetime import datetime
from typing import List, Optional

# Board sizes to evaluate (in ascending order)
N_VALUES: List[int] = [4, 6, 8, 10, 12]

# Strategies to compare (labels from stepqueens.strategies.STRATEGIES)
STRATEGIES: List[str] = ["ordered", "random", "random_seeded"]

# Independent runs per (strategy, N); the ordered strategy is deterministic
RUNS_RANDOM: int = 20
RUNS_ORDERED: int = 1

# Base seed for reproducible random runs (None = fresh entropy)
SEED: Optional[int] = 12345

# Per-run time limit in seconds (None = no limit); enforced through an observer
RUN_TIME_LIMIT: Optional[float] = 30.0

# Output directory for CSV and charts
OUT_DIR: str = "results_stepqueens"

# Board size and per-step pause for the interactive `solve` command
DISPLAY_BOARD_SIZE: int = 8
STEP_DELAY: float = 0.0

# Number of worker processes to use (leave one core for the OS)
NUM_PROCESSES: int = max(1, multiprocessing.cpu_count() - 1)

# When True, output filenames carry a datestamp suffix (e.g., _20261018-142530)
DATE_IN_FILENAMES: bool = True

# Unique run identifier used for filename stamping; set once at import time.
RUN_ID: str = datetime.now().strftime("%Y%m%d-%H%M%S")


def set_time_limit(run_time_limit: Optional[float] = 30.0) -> None:
    """Configure the per-run time limit and print the active value."""
    global RUN_TIME_LIMIT
    RUN_TIME_LIMIT = run_time_limit
    print(f"Run time limit: {RUN_TIME_LIMIT}s" if RUN_TIME_LIMIT else "Run time limit: unlimited")
