"""
Move Generator - Enumerates and ranks every move for a drawn tile.

The move generator is used by:
1. Bots to pick their placement
2. The recommender to value table tiles
3. The "recommend" assist shown to human players

Ordering contract: cells are visited row-major and each cell yields at
most one move (Place when empty, Swap when occupied). The result is
stably sorted by descending score, so equal scores keep row-major order.
Discard is never listed; an empty result means "discard only".
"""

from __future__ import annotations
from dataclasses import dataclass, field
import logging
from typing import TYPE_CHECKING

from .action import Move, Place, Swap
from .config import EngineConfig, DEFAULT_CONFIG
from .grid import EMPTY
from .rules import is_feasible, remaining_counts
from .scoring import PlacementEvaluator

if TYPE_CHECKING:
    from .state import Board, GameState

logger = logging.getLogger("unlucky.engine")


@dataclass
class MoveGenerator:
    """
    Generates legal, feasible moves for one board and ranks them.

    Swaps must beat the current occupant's score by `swap_margin` so
    bots don't churn tiles for marginal gains.
    """
    config: EngineConfig = field(default_factory=lambda: DEFAULT_CONFIG)
    evaluator: PlacementEvaluator | None = None

    def __post_init__(self):
        if self.evaluator is None:
            self.evaluator = PlacementEvaluator(self.config)

    def best_moves(
        self,
        state: GameState,
        tile: int,
        board: Board | None = None,
        limit: int | None = None,
    ) -> list[Move]:
        """
        All Place/Swap moves for `tile`, best first.

        Uses the current player's board unless `board` is given.
        """
        board = board or state.current_board
        if not 1 <= tile <= self.config.max_tile:
            return []

        pool = remaining_counts(state)
        moves: list[Move] = []
        for cell in board.grid.cells():
            occupant = board.grid.get(cell)
            if occupant == EMPTY:
                move = self._place(board, cell, tile, pool)
            elif occupant != tile:
                move = self._swap(board, cell, tile, occupant, pool)
            else:
                move = None
            if move is not None:
                moves.append(move)

        moves.sort(key=lambda m: m.score, reverse=True)
        logger.debug(
            "%d moves for tile %d on %s%s",
            len(moves), tile, board.player_id,
            f", best {moves[0]}" if moves else "",
        )
        if limit is not None:
            return moves[:limit]
        return moves

    def _place(self, board: Board, cell, tile: int, pool) -> Place | None:
        grid = board.grid
        if not self._feasible(grid, cell, tile, pool):
            return None
        return Place(cell=cell, tile=tile, score=self.evaluator.score(tile, cell, grid, pool))

    def _swap(self, board: Board, cell, tile: int, old: int, pool) -> Swap | None:
        # Judge the cell as if the occupant were gone; it returns to the table.
        grid = board.grid.copy()
        grid.clear(cell)
        swap_pool = pool.copy()
        swap_pool[old] += 1

        if not self._feasible(grid, cell, tile, swap_pool):
            return None

        new_score = self.evaluator.score(tile, cell, grid, swap_pool)
        old_score = self.evaluator.score(old, cell, grid, swap_pool)
        if new_score <= old_score * (1.0 + self.config.swap_margin):
            return None
        return Swap(cell=cell, tile=tile, old_tile=old, score=new_score)

    def _feasible(self, grid, cell, tile: int, pool) -> bool:
        return is_feasible(
            grid, cell, tile, pool,
            check_inward=self.config.check_inward_supply,
            max_tile=self.config.max_tile,
        )


def best_moves(
    state: GameState,
    tile: int,
    board: Board | None = None,
    config: EngineConfig | None = None,
    limit: int | None = None,
) -> list[Move]:
    """
    Convenience function to rank moves.

    Creates a MoveGenerator with the state's config unless one is given.
    """
    generator = MoveGenerator(config=config or state.config)
    return generator.best_moves(state, tile, board=board, limit=limit)
