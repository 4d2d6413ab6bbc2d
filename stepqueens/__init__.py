"""Observable backtracking search for the N-Queens problem."""

from .attacks import mark, neighbors, unmark
from .board import (
    Board,
    BoardStateError,
    Cell,
    InvalidDimension,
    Position,
    SearchAlreadyRunning,
    attacker_count,
    create_board,
    is_cell_occupied,
    queens_placed,
)
from .controller import (
    arun,
    async_throttle_observer,
    chain_observers,
    deadline_observer,
    iter_steps,
    run,
    solve,
    step_limit_observer,
    throttle_observer,
)
from .protocol import Decision, SearchOutcome, SearchStatus, StepInfo, StepKind
from .strategies import (
    STRATEGIES,
    get_strategy,
    search_ordered,
    search_random_free,
    search_random_seeded,
)
from .utils import conflicts, conflicts_on2, is_valid_columns, is_valid_solution

__all__ = [
    # board
    "Board",
    "Cell",
    "Position",
    "create_board",
    "queens_placed",
    "is_cell_occupied",
    "attacker_count",
    # attack index
    "neighbors",
    "mark",
    "unmark",
    # strategies
    "STRATEGIES",
    "get_strategy",
    "search_ordered",
    "search_random_free",
    "search_random_seeded",
    # step protocol
    "StepKind",
    "StepInfo",
    "Decision",
    "SearchStatus",
    "SearchOutcome",
    "run",
    "arun",
    "iter_steps",
    "solve",
    "deadline_observer",
    "step_limit_observer",
    "throttle_observer",
    "async_throttle_observer",
    "chain_observers",
    # errors
    "InvalidDimension",
    "BoardStateError",
    "SearchAlreadyRunning",
    # validation
    "conflicts",
    "conflicts_on2",
    "is_valid_columns",
    "is_valid_solution",
]
