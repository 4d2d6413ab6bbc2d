"""Backtracking placement strategies for the N-Queens problem.

Three strategies share one depth-first engine and differ only in how each
decision level produces its candidate squares:

- ``search_ordered(board, rng=None)``: one level per empty row, columns
  scanned left to right, legality checked by a direct scan of the row, the
  column and both diagonals. Uses occupancy only.
- ``search_random_free(board, rng=None)``: every level draws from the shuffled
  free cells (unoccupied and unattacked), reshuffled at each level. A level
  fails at once when fewer free cells remain than queens still needed.
  Placements go through the attack index (``mark``/``unmark``).
- ``search_random_seeded(board, rng=None)``: like ``search_random_free`` but
  the first level only draws from the top-left ``ceil(N/2) x ceil(N/2)``
  square. The idea is that if a first queen in that quadrant leads nowhere,
  its rotations and reflections lead nowhere either; whether this actually
  saves work is unverified and is only measured by the experiment runner.

Contract (public API)
---------------------
Each strategy returns a generator. The generator mutates ``board`` in place and
yields a :class:`~stepqueens.protocol.StepInfo` after every placement and
after every removal, doing nothing else until resumed. When the generator
finishes, its return value (``StopIteration.value``) is True when the board
was completed and False when the search space was exhausted. Closing the
generator at a yield point abandons the search and leaves the board as it is.

Implementation overview
-----------------------
- Non-recursive: an explicit stack of ``_Frame`` objects holds the candidate
  list of each level and the square currently placed from it.
- Candidate generation is injected as ``expand(level)`` which returns None
  when the board is complete, otherwise the (possibly empty) ordered list of
  candidates for that level.
- ``accept(pos)`` filters candidates lazily at try time; ``place``/``remove``
  apply and undo a placement.
"""

from __future__ import annotations

import math
import random
from dataclasses import dataclass
from typing import Callable, Dict, Generator, List, Optional

from .attacks import mark, unmark
from .board import Board, Position
from .protocol import StepInfo, StepKind

SearchGenerator = Generator[StepInfo, None, bool]
Strategy = Callable[[Board, Optional[random.Random]], SearchGenerator]


@dataclass
class _Frame:
    """Decision level: ordered candidates, next index, current placement."""

    candidates: List[Position]
    next_index: int = 0
    placed: Optional[Position] = None


def _depth_first(
    board: Board,
    expand: Callable[[int], Optional[List[Position]]],
    accept: Callable[[Position], bool],
    place: Callable[[Position], None],
    remove: Callable[[Position], None],
) -> SearchGenerator:
    """Generic iterative backtracking emitting one StepInfo per transition."""
    steps = 0

    candidates = expand(0)
    if candidates is None:
        return True
    stack: List[_Frame] = [_Frame(candidates)]

    while stack:
        frame = stack[-1]

        if frame.placed is not None:
            # The subtree below this placement failed; undo it.
            pos = frame.placed
            frame.placed = None
            remove(pos)
            yield StepInfo(StepKind.BACKWARD, pos, steps, board.queens_placed)

        pos = None
        while frame.next_index < len(frame.candidates):
            candidate = frame.candidates[frame.next_index]
            frame.next_index += 1
            if accept(candidate):
                pos = candidate
                break

        if pos is None:
            # Level exhausted; hand control back to the parent level.
            stack.pop()
            continue

        place(pos)
        frame.placed = pos
        steps += 1
        yield StepInfo(StepKind.FORWARD, pos, steps, board.queens_placed)

        candidates = expand(len(stack))
        if candidates is None:
            return True
        stack.append(_Frame(candidates))

    return False


def place_is_valid(board: Board, row: int, col: int) -> bool:
    """Direct O(N) legality scan used by the ordered strategy.

    Checks the whole row, the whole column and both diagonals through
    ``(row, col)``. On an empty starting board only the cells above ``row``
    can hold a queen, but a partial starting board may have queens anywhere.
    """
    cells = board.cells
    size = board.size
    for i in range(size):
        if cells[i][col].occupied or cells[row][i].occupied:
            return False
    for dr, dc in ((-1, -1), (-1, 1), (1, -1), (1, 1)):
        r, c = row + dr, col + dc
        while 0 <= r < size and 0 <= c < size:
            if cells[r][c].occupied:
                return False
            r += dr
            c += dc
    return True


def search_ordered(board: Board, rng: Optional[random.Random] = None) -> SearchGenerator:
    """Row-by-row, left-to-right backtracking.

    Determinism and ordering
    ------------------------
    Level ``k`` places a queen in the ``k``-th row that is empty when the
    search starts; rows already holding a queen are skipped. Columns are tried
    0..N-1, so on an empty board the first solution found is the
    lexicographically smallest column sequence. ``rng`` is accepted for a
    uniform signature and ignored.
    """
    size = board.size
    open_rows = [
        row for row in range(size)
        if not any(board.cells[row][col].occupied for col in range(size))
    ]

    def expand(level: int) -> Optional[List[Position]]:
        if level >= len(open_rows):
            return None
        row = open_rows[level]
        return [Position(row, col) for col in range(size)]

    def accept(pos: Position) -> bool:
        return place_is_valid(board, pos.row, pos.col)

    return _depth_first(board, expand, accept, board.occupy, board.vacate)


def _free_candidates(board: Board) -> Optional[List[Position]]:
    """Free cells for the next random level, or [] when the level must fail.

    Returns None when the board is already complete. Pruning: a level with
    fewer free cells than queens still to place cannot succeed. This is a
    lower bound only; a level that passes may still fail deeper down.
    """
    if board.is_full():
        return None
    free = board.free_cells()
    if not free or len(free) < board.size - board.queens_placed:
        return []
    return free


def _random_search(board: Board, rng: Optional[random.Random], seed_extent: Optional[int]) -> SearchGenerator:
    shuffler = rng if rng is not None else random

    def expand(level: int) -> Optional[List[Position]]:
        candidates = _free_candidates(board)
        if not candidates:
            return candidates
        if level == 0 and seed_extent is not None:
            region = set(board.subregion(seed_extent))
            candidates = [pos for pos in candidates if pos in region]
        shuffler.shuffle(candidates)
        return candidates

    def accept(pos: Position) -> bool:
        return True

    return _depth_first(
        board,
        expand,
        accept,
        lambda pos: mark(board, pos),
        lambda pos: unmark(board, pos),
    )


def search_random_free(board: Board, rng: Optional[random.Random] = None) -> SearchGenerator:
    """Backtracking over randomly shuffled free cells.

    Candidates at each level are exactly ``board.free_cells()`` after a fresh
    shuffle; siblings stay free because every sibling is tried on the same
    restored board state.
    """
    return _random_search(board, rng, None)


def search_random_seeded(board: Board, rng: Optional[random.Random] = None) -> SearchGenerator:
    """Random free-cell backtracking with the first queen taken from the top-left quadrant.

    The quadrant includes the middle row and column when N is odd.
    """
    return _random_search(board, rng, math.ceil(board.size / 2))


STRATEGIES: Dict[str, Strategy] = {
    "ordered": search_ordered,
    "random": search_random_free,
    "random_seeded": search_random_seeded,
}


def get_strategy(name: str) -> Strategy:
    """Resolve a strategy label (``ordered``, ``random``, ``random_seeded``)."""
    try:
        return STRATEGIES[name.strip().lower()]
    except KeyError:
        raise ValueError(
            f"Unknown strategy '{name}'. Available: " + ", ".join(sorted(STRATEGIES))
        ) from None


def strategy_label(strategy: Strategy) -> str:
    for label, fn in STRATEGIES.items():
        if fn is strategy:
            return label
    return getattr(strategy, "__name__", repr(strategy))
