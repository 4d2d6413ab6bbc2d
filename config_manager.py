"""Configuration management for the stepqueens experiment and display tools.

This module provides a thin, explicit wrapper around a JSON configuration file
to centralize experiment settings, the per-run time limit and the display
settings used by the interactive solver.

File format (high-level)
------------------------
- experiment_settings: board sizes, strategies, run counts, seed, output dir.
- timeout_settings: per-run time limit in seconds (null = unlimited).
- display_settings: default board size and per-step delay for ``solve``.

All methods return Python native types; the class does not validate semantics
beyond presence of keys to keep responsibilities minimal.
"""
import json
from pathlib import Path


class ConfigManager:
    """Load and query configuration. The file is never written back.

    Parameters
    ----------
    config_path : str | os.PathLike, default "config.json"
        Path to the configuration file.
    """

    def __init__(self, config_path="config.json"):
        self.config_path = Path(config_path)
        self.config = self.load_config()

    def load_config(self):
        """Load and parse the JSON configuration file."""
        if not self.config_path.exists():
            raise FileNotFoundError(
                f"Configuration file not found: {self.config_path}\n"
                f"Create it or use the default config.json template"
            )

        with open(self.config_path, "r") as f:
            return json.load(f)

    def get_experiment_settings(self):
        """Return experiment settings (sizes, strategies, runs, seed, output dir)."""
        return self.config.get("experiment_settings", {})

    def get_timeout_settings(self):
        """Return the time limit settings."""
        return self.config.get("timeout_settings", {})

    def get_display_settings(self):
        """Return board size and step delay for the interactive solver."""
        return self.config.get("display_settings", {})

    def get_strategies(self):
        """Return the configured strategy labels, defaulting to all three."""
        return self.get_experiment_settings().get("strategies", ["ordered", "random", "random_seeded"])

