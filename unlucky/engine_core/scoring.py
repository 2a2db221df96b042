"""
Placement Scoring - How desirable is tile t at cell (r, c)?

The score blends two factors:
- Alignment: does the tile's magnitude match the magnitude expected at
  the cell's distance from the top-left corner?
- Flexibility: once the tile sits there, how likely is it that the other
  empty cells in its row and column can still be filled from the tiles
  that remain?

score = alignment x row_flexibility x column_flexibility

Every factor lies in [0, 1]. Only relative order matters; the absolute
value has no meaning beyond ranking.
"""

from __future__ import annotations
from dataclasses import dataclass
import math
from typing import Mapping

from .config import EngineConfig, DEFAULT_CONFIG
from .grid import Cell, Grid, EMPTY, LEFT, RIGHT, UP, DOWN


@dataclass(frozen=True)
class ScoreBreakdown:
    """Factors of a placement score, for display and debugging."""
    alignment: float
    row_flexibility: float
    column_flexibility: float

    @property
    def total(self) -> float:
        return self.alignment * self.row_flexibility * self.column_flexibility


class PlacementEvaluator:
    """
    Scores single placements using the configured heuristic.

    Used by the move generator (ranking), the recommender (choosing a
    draw source, spotting weak tiles) and the score-map display.
    """

    def __init__(self, config: EngineConfig | None = None):
        self.config = config or DEFAULT_CONFIG

    def alignment(self, tile: int, cell: Cell) -> float:
        """
        Gaussian similarity between tile magnitude and cell position.

        Both are normalised to [0, 1] and the difference is stretched
        back to the grid's diagonal span, so alpha = 1 means one step of
        misplacement costs a factor of e.
        """
        size = self.config.board_size
        span = 2 * (size - 1)
        tile_pos = (tile - 1) / (self.config.max_tile - 1)
        cell_pos = (cell.row + cell.col) / span
        diff = span * (tile_pos - cell_pos)
        return math.exp(-self.config.alignment_sensitivity * diff * diff)

    def flexibility(
        self,
        grid: Grid,
        cell: Cell,
        tile: int,
        remaining: Mapping[int, int],
    ) -> tuple[float, float]:
        """(row, column) probability that the line can still be filled."""
        work = grid.copy()
        work.set(cell, tile)
        row_cells = [Cell(cell.row, c) for c in range(work.size) if c != cell.col]
        col_cells = [Cell(r, cell.col) for r in range(work.size) if r != cell.row]
        row_prob = self._line_probability(work, cell, row_cells, (LEFT, RIGHT), remaining)
        col_prob = self._line_probability(work, cell, col_cells, (UP, DOWN), remaining)
        return row_prob, col_prob

    def score(
        self,
        tile: int,
        cell: Cell,
        grid: Grid,
        remaining: Mapping[int, int],
    ) -> float:
        return self.breakdown(tile, cell, grid, remaining).total

    def breakdown(
        self,
        tile: int,
        cell: Cell,
        grid: Grid,
        remaining: Mapping[int, int],
    ) -> ScoreBreakdown:
        row_prob, col_prob = self.flexibility(grid, cell, tile, remaining)
        return ScoreBreakdown(
            alignment=self.alignment(tile, cell),
            row_flexibility=row_prob,
            column_flexibility=col_prob,
        )

    def _line_probability(
        self,
        grid: Grid,
        origin: Cell,
        others: list[Cell],
        directions: tuple[tuple[int, int], tuple[int, int]],
        remaining: Mapping[int, int],
    ) -> float:
        """
        Product over empty cells of 1 - w * (1 - p_fit).

        Closer cells weigh more (w = 1 / (distance + 1)).
        """
        prob = 1.0
        inward, outward = directions
        for other in others:
            if grid.get(other) != EMPTY:
                continue
            distance = abs(other.row - origin.row) + abs(other.col - origin.col)
            weight = 1.0 / (distance + 1.0)

            low_cell = grid.nearest(other, inward)
            high_cell = grid.nearest(other, outward)
            low = grid.get(low_cell) + 1 if low_cell is not None else 1
            high = grid.get(high_cell) - 1 if high_cell is not None else self.config.max_tile

            p_fit = self._fit_probability(low, high, remaining)
            prob *= 1.0 - weight * (1.0 - p_fit)
        return prob

    @staticmethod
    def _fit_probability(low: int, high: int, remaining: Mapping[int, int]) -> float:
        """Share of remaining tiles with value in [low, high]."""
        total = sum(count for count in remaining.values() if count > 0)
        if total == 0 or low > high:
            return 0.0
        fitting = sum(
            count for value, count in remaining.items()
            if count > 0 and low <= value <= high
        )
        return fitting / total
