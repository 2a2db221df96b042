"""
Draw Recommender - Which tile should the current player acquire?

For every tile on the table (and the top of the draw pile, when the
configuration allows peeking) the recommender asks the move generator
for the best move and keeps the candidate with the highest score. A
recommendation is only made when that score clears the configured
minimum; otherwise the player should draw blindly from the pile.

When the recommended tile comes from the table, the board's weakest
tile (lowest alignment, below the weak-tile threshold) is reported as
a candidate to evacuate. When the move generator offers a swap of the
recommended tile into that cell, the recommended move becomes that swap.
"""

from __future__ import annotations
from dataclasses import dataclass
import logging
from typing import TYPE_CHECKING

from ..engine_core.action import Move, Swap
from ..engine_core.action_generator import MoveGenerator
from ..engine_core.config import EngineConfig
from ..engine_core.grid import Cell
from ..engine_core.state import TileSource

if TYPE_CHECKING:
    from ..engine_core.state import Board, GameState

logger = logging.getLogger("unlucky.bots")


@dataclass(frozen=True)
class Recommendation:
    """
    A suggested draw.

    `move` is the best move for `tile` on the current board at the time
    of the recommendation, or the swap that evacuates `weak_cell` when
    one is allowed. `score` always rates the best move.
    """
    tile: int
    source: TileSource
    move: Move
    score: float
    weak_cell: Cell | None = None


class DrawRecommender:
    """
    Recommends a draw source and tile.

    Usage:
        recommender = DrawRecommender(state.config)
        rec = recommender.recommend(state)
        if rec is None:
            ...  # draw from the pile
    """

    def __init__(
        self,
        config: EngineConfig | None = None,
        generator: MoveGenerator | None = None,
    ):
        if generator is not None:
            self.generator = generator
            self.config = config or generator.config
        else:
            self.config = config or EngineConfig()
            self.generator = MoveGenerator(config=self.config)

    def recommend(self, state: GameState) -> Recommendation | None:
        board = state.current_board
        best: Recommendation | None = None

        for tile, source in self._candidates(state):
            moves = self.generator.best_moves(state, tile, board=board, limit=1)
            if not moves:
                continue
            top = moves[0]
            if best is None or top.score > best.score:
                best = Recommendation(tile=tile, source=source, move=top, score=top.score)

        if best is None or best.score <= self.config.min_recommend_score:
            logger.debug(
                "No recommendation for %s (best score %s)",
                board.player_id, f"{best.score:.3f}" if best else "n/a",
            )
            return None

        if best.source == TileSource.TABLE:
            weak = self.weakest_cell(board)
            if weak is not None:
                best = Recommendation(
                    tile=best.tile, source=best.source,
                    move=self._evacuation(state, board, best, weak),
                    score=best.score, weak_cell=weak,
                )

        logger.debug(
            "Recommend %d from %s for %s (score %.3f)",
            best.tile, best.source.value, board.player_id, best.score,
        )
        return best

    def weakest_cell(self, board: Board) -> Cell | None:
        """
        Occupied cell whose tile fits its position worst.

        Only tiles with alignment below the weak-tile threshold count;
        ties go to the first cell in row-major order.
        """
        evaluator = self.generator.evaluator
        weakest: Cell | None = None
        lowest = self.config.weak_tile_threshold
        for cell, value in board.grid.occupied():
            alignment = evaluator.alignment(value, cell)
            if alignment < lowest:
                weakest, lowest = cell, alignment
        return weakest

    def _evacuation(self, state: GameState, board: Board, best: Recommendation, weak: Cell) -> Move:
        """The swap of `best.tile` into `weak`, if generated; else the best move."""
        for move in self.generator.best_moves(state, best.tile, board=board):
            if isinstance(move, Swap) and move.cell == weak:
                return move
        return best.move

    def _candidates(self, state: GameState) -> list[tuple[int, TileSource]]:
        """Distinct table tiles in table order, then the top of the pile."""
        candidates: list[tuple[int, TileSource]] = []
        seen: set[int] = set()
        for tile in state.table:
            if tile not in seen:
                seen.add(tile)
                candidates.append((tile, TileSource.TABLE))

        # In analyze mode the pile order is ours, not the physical table's
        if self.config.peek_draw_pile and not state.analyze:
            top = state.draw_pile.peek()
            if top is not None:
                candidates.append((top, TileSource.PILE))
        return candidates


def recommend(state: GameState, config: EngineConfig | None = None) -> Recommendation | None:
    """Convenience function using the state's config."""
    return DrawRecommender(config=config or state.config).recommend(state)
