"""Mutable N x N board with per-cell attacker bookkeeping.

Each cell tracks two things: whether a queen sits on it, and the set of
queen positions currently attacking it. Occupancy is toggled here; attacker
sets are maintained by :mod:`stepqueens.attacks`, which the random strategies
call explicitly. The ordered strategy only needs occupancy and never pays for
attacker maintenance.

Representation
--------------
- ``Position(row, col)`` identifies a square (and an attacker) by value.
- ``Board.cells[row][col]`` is a :class:`Cell`.
- ``Board.queens_placed`` is kept in sync with the number of occupied cells.

The board is mutated in place by the search and is never copied.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterator, List, NamedTuple, Optional, Set


class InvalidDimension(ValueError):
    """Raised when a board is requested with a negative or non-integer size."""


class BoardStateError(RuntimeError):
    """Internal invariant violation on a board (programming error)."""


class SearchAlreadyRunning(BoardStateError):
    """Raised when a second search is started on a board that is in use."""


class Position(NamedTuple):
    row: int
    col: int


@dataclass
class Cell:
    """One square: occupancy flag plus the positions of its attackers."""

    occupied: bool = False
    attackers: Set[Position] = field(default_factory=set)

    @property
    def is_free(self) -> bool:
        return not self.occupied and not self.attackers


class Board:
    """Square board of :class:`Cell` objects.

    Parameters
    ----------
    size : int
        Board dimension N (N >= 0).

    Raises
    ------
    InvalidDimension
        If ``size`` is negative or not an integer.
    """

    def __init__(self, size: int):
        if isinstance(size, bool) or not isinstance(size, int):
            raise InvalidDimension(f"Board size must be an integer, got {size!r}")
        if size < 0:
            raise InvalidDimension(f"Board size must be >= 0, got {size}")
        self.size = size
        self.cells: List[List[Cell]] = [[Cell() for _ in range(size)] for _ in range(size)]
        self.queens_placed = 0
        # Set by the controller while a search drives this board.
        self.in_search = False

    def __repr__(self) -> str:
        return f"Board(size={self.size}, queens_placed={self.queens_placed})"

    def cell(self, row: int, col: int) -> Cell:
        if not (0 <= row < self.size and 0 <= col < self.size):
            raise IndexError(f"({row}, {col}) is outside a {self.size}x{self.size} board")
        return self.cells[row][col]

    def positions(self) -> Iterator[Position]:
        """Yield every position in row-major order."""
        for row in range(self.size):
            for col in range(self.size):
                yield Position(row, col)

    def is_full(self) -> bool:
        return self.queens_placed == self.size

    def free_cells(self) -> List[Position]:
        """Return unoccupied, unattacked positions in row-major order.

        This is the only candidate set the random strategies draw from; an
        attacked cell is excluded even when it is empty.
        """
        return [
            Position(row, col)
            for row, cells in enumerate(self.cells)
            for col, cell in enumerate(cells)
            if cell.is_free
        ]

    def subregion(self, extent: int) -> List[Position]:
        """Return the positions of the top-left ``extent x extent`` square."""
        extent = min(extent, self.size)
        return [Position(row, col) for row in range(extent) for col in range(extent)]

    def occupy(self, pos: Position) -> None:
        """Put a queen on ``pos``. Attacker sets are left untouched."""
        cell = self.cell(*pos)
        if cell.occupied:
            raise BoardStateError(f"{tuple(pos)} is already occupied")
        cell.occupied = True
        self.queens_placed += 1

    def vacate(self, pos: Position) -> None:
        """Remove the queen on ``pos``. Attacker sets are left untouched."""
        cell = self.cell(*pos)
        if not cell.occupied:
            raise BoardStateError(f"{tuple(pos)} holds no queen")
        cell.occupied = False
        self.queens_placed -= 1

    def queen_positions(self) -> List[Position]:
        return [pos for pos in self.positions() if self.cells[pos.row][pos.col].occupied]

    def as_columns(self) -> Optional[List[int]]:
        """Return ``columns[row] = col`` when every row holds exactly one queen.

        Returns None for boards that are not one-queen-per-row (partial or
        malformed boards).
        """
        columns: List[int] = []
        for cells in self.cells:
            occupied = [col for col, cell in enumerate(cells) if cell.occupied]
            if len(occupied) != 1:
                return None
            columns.append(occupied[0])
        return columns

    def reset(self) -> None:
        """Clear every queen and attacker."""
        if self.in_search:
            raise SearchAlreadyRunning("Cannot reset a board while a search is running")
        for cells in self.cells:
            for cell in cells:
                cell.occupied = False
                cell.attackers.clear()
        self.queens_placed = 0


def create_board(size: int) -> Board:
    """Allocate an empty ``size x size`` board."""
    return Board(size)


# Read-only introspection for renderers and other downstream consumers.

def queens_placed(board: Board) -> int:
    return board.queens_placed


def is_cell_occupied(board: Board, row: int, col: int) -> bool:
    return board.cell(row, col).occupied


def attacker_count(board: Board, row: int, col: int) -> int:
    return len(board.cell(row, col).attackers)
