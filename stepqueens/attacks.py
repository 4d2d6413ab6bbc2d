"""Attack index: neighbour sets and incremental attacker bookkeeping.

A queen on ``(row, col)`` attacks its whole row, its whole column and the four
diagonal rays leaving the square. ``mark`` records the queen's position in the
attacker set of every such neighbour, ``unmark`` removes exactly that entry.
Both are O(N): a square has at most ``2*(N-1)`` row/column neighbours and
``2*(N-1)`` diagonal neighbours.

Attackers are stored by position value, so a cell covered by several queens
at different recursion depths keeps one independent entry per queen and
undoing one placement never disturbs the others.
"""

from __future__ import annotations

from typing import List

from .board import Board, BoardStateError, Position

# (row step, col step) for the four diagonal rays.
_DIAGONAL_RAYS = ((-1, -1), (1, 1), (-1, 1), (1, -1))


def neighbors(board: Board, pos: Position) -> List[Position]:
    """Return every position attacked from ``pos``, excluding ``pos`` itself.

    Order: row (left to right), column (top to bottom), then the diagonal rays
    up-left, down-right, up-right, down-left. No position appears twice.
    """
    size = board.size
    row, col = pos
    if not (0 <= row < size and 0 <= col < size):
        raise IndexError(f"({row}, {col}) is outside a {size}x{size} board")

    result = [Position(row, c) for c in range(size) if c != col]
    result.extend(Position(r, col) for r in range(size) if r != row)
    for d_row, d_col in _DIAGONAL_RAYS:
        r, c = row + d_row, col + d_col
        while 0 <= r < size and 0 <= c < size:
            result.append(Position(r, c))
            r += d_row
            c += d_col
    return result


def mark(board: Board, pos: Position) -> None:
    """Place a queen on ``pos`` and register it as attacker of its neighbours."""
    pos = Position(*pos)
    board.occupy(pos)
    cells = board.cells
    for r, c in neighbors(board, pos):
        cells[r][c].attackers.add(pos)


def unmark(board: Board, pos: Position) -> None:
    """Remove the queen on ``pos`` and drop its entry from every neighbour.

    Raises
    ------
    BoardStateError
        If a neighbour does not list ``pos`` as attacker, meaning the index
        went out of sync with the placements.
    """
    pos = Position(*pos)
    board.vacate(pos)
    cells = board.cells
    for r, c in neighbors(board, pos):
        attackers = cells[r][c].attackers
        if pos not in attackers:
            raise BoardStateError(
                f"Attacker {tuple(pos)} missing from cell ({r}, {c}) during unmark"
            )
        attackers.remove(pos)
