"""Validation helpers for finished or partial boards.

Two encodings are accepted:

- ``columns`` sequences where ``columns[row] = col`` (one queen per row);
- arbitrary collections of ``(row, col)`` queen positions.

The conflict counters mirror each other: ``conflicts`` is O(N) with hash
counters, ``conflicts_on2`` is the O(N^2) pairwise reference.
"""

from __future__ import annotations

from collections import Counter
from typing import Iterable, Sequence, Tuple

from .board import Board


def conflicts(columns: Sequence[int]) -> int:
    """Count attacking queen pairs in a one-per-row encoding in O(N)."""
    col_count: Counter[int] = Counter()
    diag1: Counter[int] = Counter()
    diag2: Counter[int] = Counter()

    for row, col in enumerate(columns):
        col_count[col] += 1
        diag1[row - col] += 1
        diag2[row + col] += 1

    def _pairs(counter: Counter[int]) -> int:
        return sum(count * (count - 1) // 2 for count in counter.values() if count > 1)

    return _pairs(col_count) + _pairs(diag1) + _pairs(diag2)


def conflicts_on2(columns: Sequence[int]) -> int:
    """Reference O(N^2) pairwise count of attacking queen pairs."""
    n = len(columns)
    total = 0
    for i in range(n):
        for j in range(i + 1, n):
            if columns[i] == columns[j] or abs(columns[i] - columns[j]) == abs(i - j):
                total += 1
    return total


def positions_attack(a: Tuple[int, int], b: Tuple[int, int]) -> bool:
    """True when two distinct squares share a row, a column or a diagonal."""
    return a[0] == b[0] or a[1] == b[1] or abs(a[0] - b[0]) == abs(a[1] - b[1])


def is_non_attacking(positions: Iterable[Tuple[int, int]]) -> bool:
    """True when no two of ``positions`` attack each other."""
    placed = list(positions)
    for i, a in enumerate(placed):
        for b in placed[i + 1:]:
            if positions_attack(a, b):
                return False
    return True


def is_valid_solution(board: Board) -> bool:
    """Return True if ``board`` holds N mutually non-attacking queens.

    The empty 0x0 board is a valid (vacuous) solution.
    """
    queens = board.queen_positions()
    if len(queens) != board.size:
        return False
    return is_non_attacking(queens)


def is_valid_columns(columns: Sequence[int]) -> bool:
    """Validate a ``columns[row] = col`` encoding: range check plus zero conflicts."""
    n = len(columns)
    for col in columns:
        if not isinstance(col, int) or col < 0 or col >= n:
            return False
    return conflicts(columns) == 0
