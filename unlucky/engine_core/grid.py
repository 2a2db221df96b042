"""
Grid - Fixed-size square matrix of tile values.

Cells hold 0 when empty and a tile value otherwise. The grid carries no
rules of its own: ordering is checked by the rules module before any
mutation, never by the grid.

Orientation:
- Row and column indices grow outward, toward the bottom-right edge
- UP and LEFT point inward (smaller values expected)
- DOWN and RIGHT point outward (larger values expected)
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Iterator

BOARD_SIZE = 4
EMPTY = 0

# (row delta, col delta)
UP = (-1, 0)
DOWN = (1, 0)
LEFT = (0, -1)
RIGHT = (0, 1)

INWARD = (UP, LEFT)
OUTWARD = (DOWN, RIGHT)
DIAGONALS = ((-1, -1), (-1, 1), (1, -1), (1, 1))


@dataclass(frozen=True)
class Cell:
    """A (row, col) coordinate, 0-indexed."""
    row: int
    col: int

    def in_bounds(self, size: int = BOARD_SIZE) -> bool:
        return 0 <= self.row < size and 0 <= self.col < size

    def step(self, direction: tuple[int, int]) -> Cell:
        """Neighbouring cell one step in a direction (may be out of bounds)."""
        return Cell(self.row + direction[0], self.col + direction[1])

    def __str__(self) -> str:
        return f"({self.row},{self.col})"


@dataclass
class Grid:
    """
    An N x N matrix of tile values, 0 meaning empty.

    Owned by exactly one Board.
    """
    rows: list[list[int]] = field(
        default_factory=lambda: [[EMPTY] * BOARD_SIZE for _ in range(BOARD_SIZE)]
    )

    @classmethod
    def empty(cls, size: int = BOARD_SIZE) -> Grid:
        return cls(rows=[[EMPTY] * size for _ in range(size)])

    @classmethod
    def from_rows(cls, rows: list[list[int]]) -> Grid:
        """Build a grid from row lists; the input must be square."""
        size = len(rows)
        if any(len(row) != size for row in rows):
            raise ValueError(f"Grid must be square, got rows of lengths {[len(r) for r in rows]}")
        return cls(rows=[list(row) for row in rows])

    @property
    def size(self) -> int:
        return len(self.rows)

    def to_rows(self) -> list[list[int]]:
        return [row.copy() for row in self.rows]

    def copy(self) -> Grid:
        return Grid(rows=self.to_rows())

    def get(self, cell: Cell) -> int:
        """Value at cell, or EMPTY when the cell is out of bounds."""
        if not cell.in_bounds(self.size):
            return EMPTY
        return self.rows[cell.row][cell.col]

    def set(self, cell: Cell, value: int) -> None:
        if not cell.in_bounds(self.size):
            raise IndexError(f"Cell {cell} outside a {self.size}x{self.size} grid")
        self.rows[cell.row][cell.col] = value

    def clear(self, cell: Cell) -> None:
        self.set(cell, EMPTY)

    def is_empty(self, cell: Cell) -> bool:
        return self.get(cell) == EMPTY

    def cells(self) -> Iterator[Cell]:
        """All cells in row-major order."""
        for r in range(self.size):
            for c in range(self.size):
                yield Cell(r, c)

    def occupied(self) -> Iterator[tuple[Cell, int]]:
        """(cell, value) for every occupied cell, row-major."""
        for cell in self.cells():
            value = self.rows[cell.row][cell.col]
            if value != EMPTY:
                yield cell, value

    def values(self) -> list[int]:
        return [value for _, value in self.occupied()]

    def empty_count(self) -> int:
        return sum(1 for cell in self.cells() if self.is_empty(cell))

    def is_full(self) -> bool:
        return self.empty_count() == 0

    def walk(self, cell: Cell, direction: tuple[int, int]) -> Iterator[Cell]:
        """Cells from `cell` (exclusive) toward the edge in a direction."""
        current = cell.step(direction)
        while current.in_bounds(self.size):
            yield current
            current = current.step(direction)

    def nearest(self, cell: Cell, direction: tuple[int, int]) -> Cell | None:
        """First occupied cell from `cell` in a direction, skipping empties."""
        for other in self.walk(cell, direction):
            if not self.is_empty(other):
                return other
        return None

    def diagonal_neighbours(self, cell: Cell) -> Iterator[Cell]:
        for direction in DIAGONALS:
            other = cell.step(direction)
            if other.in_bounds(self.size):
                yield other
