"""Search strategies: correctness, exhaustion, step protocol shape."""

import itertools
import math
import random
import unittest

from stepqueens.attacks import mark
from stepqueens.board import Position, create_board
from stepqueens.controller import run
from stepqueens.protocol import SearchStatus, StepKind
from stepqueens.strategies import (
    STRATEGIES,
    get_strategy,
    place_is_valid,
    search_ordered,
    search_random_free,
    search_random_seeded,
)
from stepqueens.utils import is_valid_columns, is_valid_solution


def first_permutation_solution(size):
    """Lexicographically first column sequence with no diagonal clash."""
    for columns in itertools.permutations(range(size)):
        if all(
            abs(columns[i] - columns[j]) != j - i
            for i in range(size)
            for j in range(i + 1, size)
        ):
            return list(columns)
    return None


def record_steps(board, strategy, rng=None):
    steps = []
    outcome = run(board, strategy, lambda b, s: steps.append(s), rng=rng)
    return outcome, steps


class OrderedStrategyTests(unittest.TestCase):
    def test_solves_every_size_from_four(self):
        for size in range(4, 13):
            board = create_board(size)
            outcome = run(board, search_ordered)
            self.assertEqual(outcome.status, SearchStatus.SOLVED, size)
            self.assertIs(outcome.board, board)
            self.assertTrue(is_valid_solution(board))
            self.assertTrue(is_valid_columns(board.as_columns()))

    def test_two_and_three_are_exhausted(self):
        for size in (2, 3):
            board = create_board(size)
            outcome = run(board, search_ordered)
            self.assertEqual(outcome.status, SearchStatus.EXHAUSTED)
            self.assertEqual(board.queens_placed, 0)

    def test_zero_is_solved_without_queens(self):
        outcome = run(create_board(0), search_ordered)
        self.assertTrue(outcome.solved)
        self.assertEqual(outcome.board.queens_placed, 0)
        self.assertEqual(outcome.steps, 0)

    def test_one_queen_in_the_corner(self):
        outcome = run(create_board(1), "ordered")
        self.assertTrue(outcome.solved)
        self.assertEqual(outcome.solution(), [Position(0, 0)])

    def test_eight_matches_first_permutation(self):
        board = create_board(8)
        run(board, search_ordered)
        self.assertEqual(board.as_columns(), first_permutation_solution(8))
        self.assertEqual(board.as_columns(), [0, 4, 7, 5, 2, 6, 1, 3])

    def test_first_solution_matches_brute_force_for_small_sizes(self):
        for size in range(4, 8):
            board = create_board(size)
            run(board, search_ordered)
            self.assertEqual(board.as_columns(), first_permutation_solution(size))

    def test_ordered_never_touches_attacker_sets(self):
        board = create_board(6)
        run(board, search_ordered)
        for pos in board.positions():
            self.assertEqual(board.cell(*pos).attackers, set())

    def test_place_is_valid_scans_row_column_and_diagonals(self):
        board = create_board(4)
        board.occupy(Position(0, 1))
        self.assertFalse(place_is_valid(board, 1, 0))
        self.assertFalse(place_is_valid(board, 1, 1))
        self.assertFalse(place_is_valid(board, 1, 2))
        self.assertTrue(place_is_valid(board, 1, 3))
        self.assertFalse(place_is_valid(board, 3, 1))
        # Queens below and beside the candidate count too.
        board.occupy(Position(3, 3))
        self.assertFalse(place_is_valid(board, 2, 2))
        self.assertFalse(place_is_valid(board, 3, 0))

    def test_partial_board_is_completed_around_existing_queen(self):
        board = create_board(4)
        board.occupy(Position(3, 2))
        outcome, steps = record_steps(board, search_ordered)
        self.assertTrue(outcome.solved)
        self.assertEqual(board.as_columns(), [1, 3, 0, 2])
        self.assertTrue(is_valid_solution(board))
        self.assertNotIn(3, {step.position.row for step in steps})

    def test_partial_board_without_completion_is_exhausted_and_restored(self):
        # No 4x4 solution uses a corner.
        board = create_board(4)
        board.occupy(Position(0, 0))
        outcome = run(board, search_ordered)
        self.assertTrue(outcome.exhausted)
        self.assertEqual(board.queen_positions(), [Position(0, 0)])

    def test_full_starting_board_is_solved_without_steps(self):
        board = create_board(4)
        for row, col in enumerate([2, 0, 3, 1]):
            board.occupy(Position(row, col))
        outcome, steps = record_steps(board, search_ordered)
        self.assertTrue(outcome.solved)
        self.assertEqual(steps, [])


class StepShapeTests(unittest.TestCase):
    def assertStackDiscipline(self, steps, final_depth):
        stack = []
        for step in steps:
            if step.kind is StepKind.FORWARD:
                stack.append(step.position)
            else:
                self.assertTrue(stack, "backward step without a placement")
                self.assertEqual(stack.pop(), step.position)
            self.assertEqual(step.depth, len(stack))
        self.assertEqual(len(stack), final_depth)

    def test_every_removal_undoes_the_latest_placement(self):
        for label in STRATEGIES:
            for size in (3, 5, 6):
                board = create_board(size)
                outcome, steps = record_steps(board, label, random.Random(size))
                self.assertStackDiscipline(steps, board.queens_placed)
                self.assertEqual(outcome.steps, sum(1 for s in steps if s.is_forward))
                self.assertEqual(outcome.backtracks, sum(1 for s in steps if not s.is_forward))

    def test_exhausted_search_ends_with_empty_board(self):
        board = create_board(3)
        outcome, steps = record_steps(board, search_ordered)
        self.assertTrue(outcome.exhausted)
        self.assertEqual(steps[-1].kind, StepKind.BACKWARD)
        self.assertEqual(steps[-1].depth, 0)

    def test_step_count_is_monotonic(self):
        _, steps = record_steps(create_board(6), search_ordered)
        counts = [s.step_count for s in steps]
        self.assertEqual(counts, sorted(counts))
        self.assertEqual(counts[0], 1)


class RandomStrategyTests(unittest.TestCase):
    def test_random_strategies_solve_eight_repeatedly(self):
        for strategy in (search_random_free, search_random_seeded):
            for seed in range(10):
                board = create_board(8)
                outcome = run(board, strategy, rng=random.Random(seed))
                self.assertTrue(outcome.solved, (strategy.__name__, seed))
                self.assertTrue(is_valid_solution(board))

    def test_random_strategies_small_sizes(self):
        for strategy in (search_random_free, search_random_seeded):
            for size in (0, 1, 4, 5, 6):
                board = create_board(size)
                outcome = run(board, strategy, rng=random.Random(7))
                self.assertTrue(outcome.solved, (strategy.__name__, size))
                self.assertTrue(is_valid_solution(board))
            for size in (2, 3):
                board = create_board(size)
                outcome = run(board, strategy, rng=random.Random(7))
                self.assertTrue(outcome.exhausted, (strategy.__name__, size))
                self.assertEqual(board.queens_placed, 0)
                self.assertEqual(len(board.free_cells()), size * size)

    def test_same_seed_same_run(self):
        first = run(create_board(8), search_random_free, rng=random.Random(99))
        second = run(create_board(8), search_random_free, rng=random.Random(99))
        self.assertEqual(first.solution(), second.solution())
        self.assertEqual(first.steps, second.steps)

    def test_seeded_first_queen_comes_from_top_left_quadrant(self):
        for size in (5, 6, 8):
            extent = math.ceil(size / 2)
            for seed in range(5):
                _, steps = record_steps(create_board(size), search_random_seeded, random.Random(seed))
                roots = [s.position for s in steps if s.is_forward and s.depth == 1]
                self.assertTrue(roots)
                for pos in roots:
                    self.assertLess(pos.row, extent)
                    self.assertLess(pos.col, extent)

    def test_random_candidates_are_always_free(self):
        board = create_board(7)

        def observer(b, step):
            if step.is_forward:
                # The queen just placed must not be attacked by any other.
                self.assertEqual(b.cell(*step.position).attackers, set())

        outcome = run(board, search_random_free, observer, rng=random.Random(3))
        self.assertTrue(outcome.solved)

    def test_partial_unsolvable_board_is_exhausted_and_restored(self):
        # No 4x4 solution uses a corner.
        board = create_board(4)
        mark(board, Position(0, 0))
        before = [(c.occupied, frozenset(c.attackers)) for row in board.cells for c in row]
        outcome = run(board, search_random_free, rng=random.Random(1))
        self.assertTrue(outcome.exhausted)
        after = [(c.occupied, frozenset(c.attackers)) for row in board.cells for c in row]
        self.assertEqual(before, after)

    def test_cardinality_pruning_fails_level_immediately(self):
        # Queen at (1, 1) on 3x3 leaves no free cell for the other two.
        board = create_board(3)
        mark(board, Position(1, 1))
        outcome, steps = record_steps(board, search_random_free, random.Random(0))
        self.assertTrue(outcome.exhausted)
        self.assertEqual(steps, [])

    def test_seeded_versus_free_step_counts_are_measured(self):
        # Relative effort is measured only; neither strategy is asserted faster.
        totals = {}
        for label in ("random", "random_seeded"):
            totals[label] = sum(
                run(create_board(8), label, rng=random.Random(seed)).steps for seed in range(5)
            )
        for total in totals.values():
            self.assertGreaterEqual(total, 5 * 8)


class RegistryTests(unittest.TestCase):
    def test_labels_resolve(self):
        self.assertIs(get_strategy("ordered"), search_ordered)
        self.assertIs(get_strategy(" Random "), search_random_free)
        self.assertIs(get_strategy("random_seeded"), search_random_seeded)

    def test_unknown_label(self):
        with self.assertRaises(ValueError):
            get_strategy("min_conflicts")


if __name__ == "__main__":
    unittest.main()
