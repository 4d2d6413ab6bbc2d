"""Plain-text board rendering for terminals and logs.

Legend
------
- ``Q``: queen
- ``*``: most recently placed queen
- ``.``: free square (no queen, no attacker)
- ``1``..``9``: number of attackers on an empty square (``+`` above nine)

Only the read-only introspection helpers of :mod:`stepqueens.board` are used,
so any renderer can be written the same way.
"""

from __future__ import annotations

import sys
import time
from typing import Optional, TextIO

from .board import Board, Position, attacker_count, is_cell_occupied
from .protocol import Decision, SearchOutcome, StepInfo


def cell_shade(row: int, col: int) -> str:
    """Checkerboard colour of a square: ``"bright"`` or ``"dark"``."""
    return "bright" if (row + col) % 2 == 0 else "dark"


def _glyph(board: Board, row: int, col: int, last: Optional[Position]) -> str:
    if is_cell_occupied(board, row, col):
        return "*" if last is not None and (row, col) == tuple(last) else "Q"
    count = attacker_count(board, row, col)
    if count == 0:
        return "."
    return str(count) if count < 10 else "+"


def render_board(board: Board, last: Optional[Position] = None) -> str:
    """Return the board as lines of space-separated glyphs."""
    return "\n".join(
        " ".join(_glyph(board, row, col, last) for col in range(board.size))
        for row in range(board.size)
    )


def render_outcome(outcome: SearchOutcome) -> str:
    """Board plus a one-line status footer."""
    if outcome.exhausted:
        return "No solution found"
    lines = []
    if outcome.board.size:
        lines.append(render_board(outcome.board))
    label = "Solved" if outcome.solved else "Aborted"
    lines.append(
        f"{label}: {outcome.board.queens_placed}/{outcome.board.size} queens, "
        f"steps={outcome.steps}, backtracks={outcome.backtracks}, "
        f"time={outcome.elapsed * 1000:.2f} ms"
    )
    return "\n".join(lines)


def animate_observer(stream: Optional[TextIO] = None, delay: float = 0.0):
    """Return an observer that prints the board after every step.

    The most recently placed queen is highlighted; a backward step clears the
    highlight. ``delay`` pauses between frames.
    """
    out = stream if stream is not None else sys.stdout

    def observe(board: Board, step: StepInfo) -> Decision:
        last = step.position if step.is_forward else None
        out.write(
            f"[{step.kind.value:>8}] step {step.step_count} "
            f"({step.position.row}, {step.position.col}) depth={step.depth}\n"
        )
        out.write(render_board(board, last) + "\n\n")
        out.flush()
        if delay > 0:
            time.sleep(delay)
        return Decision.CONTINUE

    return observe
