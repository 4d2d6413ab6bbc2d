"""Value types shared by the strategies and the controller.

- ``StepInfo``: one board transition, handed once to the observer.
- ``Decision``: what the observer wants after a step.
- ``SearchOutcome``: terminal result of a search (solved, exhausted, aborted).
"""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, List, Optional

from .board import Position

if TYPE_CHECKING:
    from .board import Board


class StepKind(enum.Enum):
    FORWARD = "forward"
    BACKWARD = "backward"


class Decision(enum.Enum):
    CONTINUE = "continue"
    STOP = "stop"

    @classmethod
    def coerce(cls, value: Any) -> "Decision":
        """Interpret an observer return value.

        ``None`` and ``True`` continue, ``False`` stops, so plain callbacks
        that return nothing keep the search running.
        """
        if isinstance(value, Decision):
            return value
        if value is None or value is True:
            return cls.CONTINUE
        if value is False:
            return cls.STOP
        raise TypeError(f"Observer must return a Decision, bool or None, got {value!r}")


@dataclass(frozen=True)
class StepInfo:
    """One forward (placement) or backward (removal) transition.

    ``step_count`` is the number of forward transitions so far, including this
    one when it is forward. ``depth`` is the number of queens on the board
    after the transition.
    """

    kind: StepKind
    position: Position
    step_count: int
    depth: int

    @property
    def is_forward(self) -> bool:
        return self.kind is StepKind.FORWARD


class SearchStatus(enum.Enum):
    SOLVED = "solved"
    EXHAUSTED = "exhausted"
    ABORTED = "aborted"


@dataclass
class SearchOutcome:
    """Result of one search invocation.

    ``board`` is the very board the search ran on (not a copy): on SOLVED it
    holds the solution, on ABORTED it holds whatever was on it when the
    observer stopped.
    """

    status: SearchStatus
    board: "Board"
    steps: int = 0
    backtracks: int = 0
    elapsed: float = 0.0
    strategy: Optional[str] = None

    @property
    def solved(self) -> bool:
        return self.status is SearchStatus.SOLVED

    @property
    def exhausted(self) -> bool:
        return self.status is SearchStatus.EXHAUSTED

    @property
    def aborted(self) -> bool:
        return self.status is SearchStatus.ABORTED

    def solution(self) -> Optional[List[Position]]:
        """Queen positions when solved, else None."""
        if not self.solved:
            return None
        return self.board.queen_positions()
