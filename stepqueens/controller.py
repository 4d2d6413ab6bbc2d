"""Drive a strategy over a board and let an observer intervene at every step.

Every placement and every removal is a suspension point: the strategy
generator yields a :class:`StepInfo` and does not touch the board again until
the driver resumes it. The drivers in this module hand each step to an
optional observer and honour its decision:

- ``run(board, strategy, observer=None, rng=None)``: blocking driver; the
  observer is a plain callable.
- ``arun(board, strategy, observer=None, rng=None)``: coroutine driver; the
  observer may be a coroutine function and may await anything (a delay, a UI
  frame, user input) before answering.
- ``iter_steps(board, strategy, rng=None)``: the raw step generator for
  pull-style callers who want to resume one transition at a time.

Observer contract
-----------------
``observer(board, step)`` returns ``Decision.CONTINUE`` or ``Decision.STOP``
(``None``/``True`` continue, ``False`` stops). On STOP the search is abandoned
immediately and the outcome is ABORTED; the board keeps its state, including
a queen placed by the step that was being observed.

Timeouts are not enforced here; ``deadline_observer`` turns a wall-clock
limit into a STOP decision.
"""

from __future__ import annotations

import asyncio
import inspect
import random
import time
from contextlib import contextmanager
from time import perf_counter
from typing import Any, Awaitable, Callable, Iterator, Optional, Union

from .board import Board, SearchAlreadyRunning, create_board
from .protocol import Decision, SearchOutcome, SearchStatus, StepInfo, StepKind
from .strategies import SearchGenerator, Strategy, get_strategy, strategy_label

Observer = Callable[[Board, StepInfo], Any]
AsyncObserver = Callable[[Board, StepInfo], Union[Any, Awaitable[Any]]]
StrategyLike = Union[str, Strategy]


def _resolve(strategy: StrategyLike) -> Strategy:
    if isinstance(strategy, str):
        return get_strategy(strategy)
    return strategy


@contextmanager
def _exclusive(board: Board) -> Iterator[None]:
    """Single-writer guard: one search per board at a time."""
    if board.in_search:
        raise SearchAlreadyRunning(f"A search is already running on {board!r}")
    board.in_search = True
    try:
        yield
    finally:
        board.in_search = False


class _Tally:
    """Forward/backward counters fed from the step stream."""

    def __init__(self) -> None:
        self.steps = 0
        self.backtracks = 0
        self.start = perf_counter()

    def record(self, step: StepInfo) -> None:
        if step.kind is StepKind.FORWARD:
            self.steps = step.step_count
        else:
            self.backtracks += 1

    def outcome(self, status: SearchStatus, board: Board, strategy: Strategy) -> SearchOutcome:
        return SearchOutcome(
            status=status,
            board=board,
            steps=self.steps,
            backtracks=self.backtracks,
            elapsed=perf_counter() - self.start,
            strategy=strategy_label(strategy),
        )


def iter_steps(board: Board, strategy: StrategyLike, rng: Optional[random.Random] = None) -> SearchGenerator:
    """Return the strategy's step generator for ``board``.

    The caller owns the single-writer discipline when using this directly;
    ``run`` and ``arun`` enforce it.
    """
    return _resolve(strategy)(board, rng)


def run(
    board: Board,
    strategy: StrategyLike,
    observer: Optional[Observer] = None,
    rng: Optional[random.Random] = None,
) -> SearchOutcome:
    """Run a search to its end, consulting ``observer`` after every step.

    Parameters
    ----------
    board : Board
        Board to search on; mutated in place.
    strategy : str | callable
        Strategy function or registry label.
    observer : callable | None
        ``observer(board, step)``; None runs uninterrupted.
    rng : random.Random | None
        Randomness source for the random strategies.

    Returns
    -------
    SearchOutcome
        SOLVED, EXHAUSTED or ABORTED, with step and backtrack counts.
    """
    fn = _resolve(strategy)
    with _exclusive(board):
        tally = _Tally()
        search = fn(board, rng)
        try:
            while True:
                try:
                    step = next(search)
                except StopIteration as done:
                    status = SearchStatus.SOLVED if done.value else SearchStatus.EXHAUSTED
                    return tally.outcome(status, board, fn)
                tally.record(step)
                if observer is not None and Decision.coerce(observer(board, step)) is Decision.STOP:
                    return tally.outcome(SearchStatus.ABORTED, board, fn)
        finally:
            search.close()


async def arun(
    board: Board,
    strategy: StrategyLike,
    observer: Optional[AsyncObserver] = None,
    rng: Optional[random.Random] = None,
) -> SearchOutcome:
    """Coroutine counterpart of :func:`run`.

    The observer may return an awaitable; the search stays suspended until it
    resolves. Cancelling the task abandons the search like a STOP decision
    would, then re-raises ``CancelledError``.
    """
    fn = _resolve(strategy)
    with _exclusive(board):
        tally = _Tally()
        search = fn(board, rng)
        try:
            while True:
                try:
                    step = next(search)
                except StopIteration as done:
                    status = SearchStatus.SOLVED if done.value else SearchStatus.EXHAUSTED
                    return tally.outcome(status, board, fn)
                tally.record(step)
                if observer is None:
                    continue
                decision = observer(board, step)
                if inspect.isawaitable(decision):
                    decision = await decision
                if Decision.coerce(decision) is Decision.STOP:
                    return tally.outcome(SearchStatus.ABORTED, board, fn)
        finally:
            search.close()


def solve(
    size: int,
    strategy: StrategyLike = "ordered",
    observer: Optional[Observer] = None,
    seed: Optional[int] = None,
) -> SearchOutcome:
    """Create a ``size x size`` board and run ``strategy`` on it.

    ``seed`` makes the random strategies reproducible.
    """
    board = create_board(size)
    return run(board, strategy, observer, rng=random.Random(seed))


# Observer helpers ------------------------------------------------------------

def deadline_observer(seconds: Optional[float]) -> Observer:
    """Return an observer that answers STOP once ``seconds`` have elapsed.

    The clock starts on the first step. ``None`` never stops.
    """
    start: Optional[float] = None

    def observe(board: Board, step: StepInfo) -> Decision:
        nonlocal start
        if seconds is None:
            return Decision.CONTINUE
        now = perf_counter()
        if start is None:
            start = now
        return Decision.STOP if now - start > seconds else Decision.CONTINUE

    return observe


def step_limit_observer(max_steps: int) -> Observer:
    """Return an observer that stops after ``max_steps`` forward steps."""

    def observe(board: Board, step: StepInfo) -> Decision:
        return Decision.STOP if step.step_count >= max_steps else Decision.CONTINUE

    return observe


def throttle_observer(delay: float) -> Observer:
    """Blocking observer that sleeps ``delay`` seconds per step (animation pacing)."""

    def observe(board: Board, step: StepInfo) -> Decision:
        if delay > 0:
            time.sleep(delay)
        return Decision.CONTINUE

    return observe


def async_throttle_observer(delay: float) -> AsyncObserver:
    """Coroutine observer yielding to the event loop for ``delay`` seconds per step."""

    async def observe(board: Board, step: StepInfo) -> Decision:
        await asyncio.sleep(delay)
        return Decision.CONTINUE

    return observe


def chain_observers(*observers: Optional[Observer]) -> Observer:
    """Combine blocking observers; the first STOP wins and later ones are skipped."""
    active = [obs for obs in observers if obs is not None]

    def observe(board: Board, step: StepInfo) -> Decision:
        for obs in active:
            if Decision.coerce(obs(board, step)) is Decision.STOP:
                return Decision.STOP
        return Decision.CONTINUE

    return observe
