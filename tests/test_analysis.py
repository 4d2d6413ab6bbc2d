"""Experiment runner, statistics, CSV reporting, configuration and CLI."""

import contextlib
import csv
import io
import json
import os
import tempfile
import unittest
from unittest import mock

from stepqueens.analysis import plots, settings
from stepqueens.analysis.cli import apply_configuration, main, parse_sizes, parse_strategy_filters
from stepqueens.analysis.experiments import (
    run_experiments,
    run_experiments_parallel,
    run_single,
    run_strategy_batch,
)
from stepqueens.analysis.reporting import save_raw_data_to_csv, save_results_to_csv
from stepqueens.analysis.stats import compute_detailed_statistics, compute_grouped_statistics


def _quiet(fn, *args, **kwargs):
    buffer = io.StringIO()
    with contextlib.redirect_stdout(buffer):
        result = fn(*args, **kwargs)
    return result, buffer.getvalue()


class StatsTests(unittest.TestCase):
    def test_detailed_statistics(self):
        summary = compute_detailed_statistics([4, 1, 3, 2])
        self.assertEqual(summary["count"], 4)
        self.assertEqual(summary["mean"], 2.5)
        self.assertEqual(summary["median"], 2.5)
        self.assertEqual(summary["min"], 1)
        self.assertEqual(summary["max"], 4)
        self.assertEqual(summary["range"], 3)
        self.assertEqual(summary["q25"], 2)
        self.assertEqual(summary["q75"], 4)

    def test_empty_statistics(self):
        summary = compute_detailed_statistics([])
        self.assertEqual(summary["count"], 0)
        self.assertIsNone(summary["mean"])

    def test_grouped_statistics(self):
        runs = [
            {"success": True, "timeout": False, "steps": 10, "backtracks": 2, "time": 0.1, "valid": True},
            {"success": False, "timeout": True, "steps": 50, "backtracks": 40, "time": 1.0, "valid": False},
            {"success": False, "timeout": False, "steps": 6, "backtracks": 6, "time": 0.01, "valid": False},
        ]
        stats = compute_grouped_statistics(runs)
        self.assertEqual(stats["total_runs"], 3)
        self.assertEqual((stats["successes"], stats["timeouts"], stats["failures"]), (1, 1, 1))
        self.assertAlmostEqual(stats["success_rate"], 1 / 3)
        self.assertEqual(stats["success_steps"]["mean"], 10)
        self.assertEqual(stats["all_steps"]["median"], 10)
        self.assertEqual(stats["failure_backtracks"]["max"], 6)


class ExperimentTests(unittest.TestCase):
    def test_run_single(self):
        record = run_single((6, "random", None, 3))
        self.assertTrue(record["success"])
        self.assertTrue(record["valid"])
        self.assertFalse(record["timeout"])
        self.assertGreaterEqual(record["steps"], 6)

    def test_run_single_exhausted(self):
        record = run_single((3, "ordered", None, None))
        self.assertFalse(record["success"])
        self.assertFalse(record["timeout"])

    def test_batch_is_reproducible(self):
        first = run_strategy_batch(7, "random_seeded", 3, seed=11)
        second = run_strategy_batch(7, "random_seeded", 3, seed=11)
        self.assertEqual([r["steps"] for r in first], [r["steps"] for r in second])

    def test_batch_rejects_unknown_strategy(self):
        with self.assertRaises(ValueError):
            run_strategy_batch(4, "genetic", 1)

    def test_run_experiments_shape(self):
        results, _ = _quiet(
            run_experiments, [4, 5], ["ordered", "random"], runs_random=2, runs_ordered=1, seed=5, validate=True
        )
        self.assertEqual(set(results), {"ordered", "random"})
        self.assertEqual(results["ordered"][4]["total_runs"], 1)
        self.assertEqual(results["random"][5]["total_runs"], 2)
        self.assertEqual(results["random"][5]["success_rate"], 1.0)
        self.assertEqual(len(results["random"][4]["raw_runs"]), 2)

    def test_parallel_matches_sequential(self):
        args = ([4, 6], ["ordered", "random"])
        kwargs = dict(runs_random=2, seed=1, validate=True)
        parallel, _ = _quiet(run_experiments_parallel, *args, max_workers=2, **kwargs)
        sequential, _ = _quiet(run_experiments, *args, **kwargs)
        self.assertEqual(set(parallel), {"ordered", "random"})
        for label in ("ordered", "random"):
            self.assertEqual(set(parallel[label]), {4, 6})
            for n in (4, 6):
                entry = parallel[label][n]
                self.assertEqual(entry["total_runs"], 1 if label == "ordered" else 2)
                self.assertEqual(entry["success_rate"], 1.0)
                self.assertEqual(
                    [r["steps"] for r in entry["raw_runs"]],
                    [r["steps"] for r in sequential[label][n]["raw_runs"]],
                )


class ReportingTests(unittest.TestCase):
    def setUp(self):
        self.results, _ = _quiet(run_experiments, [4, 6], ["ordered", "random_seeded"], runs_random=3, seed=2)

    def test_results_csv(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            path, _ = _quiet(save_results_to_csv, self.results, [4, 6], tmpdir)
            with open(path, newline="") as f:
                rows = list(csv.DictReader(f))
        self.assertEqual(len(rows), 4)
        self.assertEqual({row["strategy"] for row in rows}, {"ordered", "random_seeded"})
        self.assertEqual({row["n"] for row in rows}, {"4", "6"})

    def test_raw_csv(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            path, _ = _quiet(save_raw_data_to_csv, self.results, [4, 6], tmpdir)
            with open(path, newline="") as f:
                rows = list(csv.DictReader(f))
        # 1 ordered + 3 seeded runs per N
        self.assertEqual(len(rows), 8)
        self.assertTrue(all(row["success"] == "True" for row in rows))

    @unittest.skipUnless(plots._PLOTS_AVAILABLE, "plotting stack not installed")
    def test_step_chart(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            path, _ = _quiet(plots.plot_steps_vs_n, self.results, [4, 6], tmpdir)
            self.assertTrue(os.path.exists(path))

    def test_charts_skipped_without_plotting_stack(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            with mock.patch.object(plots, "_PLOTS_AVAILABLE", False):
                _, output = _quiet(plots.plot_and_save, self.results, [4], tmpdir)
            self.assertEqual(os.listdir(tmpdir), [])
        lines = output.splitlines()
        self.assertEqual(len(lines), 3)
        for line in lines:
            for name in ("matplotlib", "numpy", "pandas", "seaborn"):
                self.assertIn(name, line)


class CliTests(unittest.TestCase):
    def setUp(self):
        self._saved = {name: getattr(settings, name) for name in dir(settings) if name.isupper()}

    def tearDown(self):
        for name, value in self._saved.items():
            setattr(settings, name, value)

    def test_parse_helpers(self):
        self.assertEqual(parse_sizes("4, 8,12"), [4, 8, 12])
        self.assertIsNone(parse_sizes(None))
        with self.assertRaises(ValueError):
            parse_sizes("4,-1")
        self.assertEqual(parse_strategy_filters(["ordered,random", "ordered"]), ["ordered", "random"])
        with self.assertRaises(ValueError):
            parse_strategy_filters(["annealing"])

    def test_apply_configuration(self):
        config = {
            "experiment_settings": {"N_values": [5], "strategies": ["random"], "runs_random": 4, "seed": 1},
            "timeout_settings": {"run_time_limit": None},
            "display_settings": {"board_size": 6, "step_delay": 0.5},
        }
        with tempfile.TemporaryDirectory() as tmpdir:
            path = os.path.join(tmpdir, "config.json")
            with open(path, "w") as f:
                json.dump(config, f)
            _quiet(apply_configuration, path)
            with open(path) as f:
                self.assertEqual(json.load(f), config)
        self.assertEqual(settings.N_VALUES, [5])
        self.assertEqual(settings.STRATEGIES, ["random"])
        self.assertEqual(settings.RUNS_RANDOM, 4)
        self.assertIsNone(settings.RUN_TIME_LIMIT)
        self.assertEqual(settings.DISPLAY_BOARD_SIZE, 6)
        self.assertEqual(settings.STEP_DELAY, 0.5)

    def test_solve_command(self):
        _, output = _quiet(main, ["solve", "5", "--strategy", "random", "--seed", "3"])
        self.assertIn("Solved: 5/5 queens", output)

    def test_solve_exhausted(self):
        _, output = _quiet(main, ["solve", "2"])
        self.assertIn("No solution found", output)

    def test_compare_command(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            _, output = _quiet(
                main, ["compare", "--sizes", "4,5", "--runs", "2", "-s", "ordered,random", "--out-dir", tmpdir]
            )
            produced = os.listdir(tmpdir)
        self.assertIn("Summary", output)
        self.assertEqual(len([name for name in produced if name.endswith(".csv")]), 2)

    def test_missing_config_exits(self):
        with self.assertRaises(SystemExit) as ctx:
            _quiet(main, ["--config", "/nonexistent/config.json", "solve", "4"])
        self.assertEqual(ctx.exception.code, 1)

    def test_negative_size_exits(self):
        with self.assertRaises(SystemExit) as ctx:
            _quiet(main, ["solve", "-3"])
        self.assertEqual(ctx.exception.code, 1)


if __name__ == "__main__":
    unittest.main()
