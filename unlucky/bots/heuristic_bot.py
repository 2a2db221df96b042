"""
Heuristic Bot - Automa implementation for the ripple grid.

This bot:
- Takes a table tile when the recommender rates it, else draws blind
- Plays the top-ranked move for the tile in hand, else discards
- Supports configurable personalities
- Generates physical instructions for the human mirroring it

The bot does NOT:
- Look further ahead than the current tile
- Model what opponents want from the table
"""

from __future__ import annotations
from dataclasses import dataclass
import logging
import random
from typing import TYPE_CHECKING

from ..engine_core.action import Discard, Move, Place, Swap, describe
from ..engine_core.action_generator import MoveGenerator
from ..engine_core.config import EngineConfig
from ..engine_core.state import TileSource
from .personality import Personality, BALANCED
from .policy import BotPolicy, BotDecision, DrawDecision
from .recommender import DrawRecommender

if TYPE_CHECKING:
    from ..engine_core.state import GameState

logger = logging.getLogger("unlucky.bots")


@dataclass
class HeuristicBot(BotPolicy):
    """
    Automa using the placement heuristic directly.

    Usage:
        bot = HeuristicBot(player_id="bot_1", personality=CAUTIOUS)
        draw = bot.select_draw(state)
        decision = bot.select_move(state, tile)
        print(decision.physical_instructions)  # What human should do
    """
    player_id: str
    personality: Personality = None  # type: ignore
    rng: random.Random = None  # type: ignore

    def __post_init__(self):
        if self.personality is None:
            self.personality = BALANCED
        if self.rng is None:
            self.rng = random.Random()

    def engine_config(self, state: GameState) -> EngineConfig:
        """Game geometry from the state, heuristic knobs from the personality."""
        mine = self.personality.config
        return state.config.with_overrides(
            alignment_sensitivity=mine.alignment_sensitivity,
            swap_margin=mine.swap_margin,
            weak_tile_threshold=mine.weak_tile_threshold,
            min_recommend_score=mine.min_recommend_score,
            check_inward_supply=mine.check_inward_supply,
        )

    def select_draw(self, state: GameState) -> DrawDecision:
        """
        Take the recommended table tile, otherwise draw from the pile.

        With an empty pile the bot must take something from the table;
        it picks the tile whose best move scores highest.
        """
        config = self.engine_config(state)
        recommender = DrawRecommender(config=config)
        rec = recommender.recommend(state)

        if rec is not None and rec.source == TileSource.TABLE:
            return DrawDecision(
                source=TileSource.TABLE,
                tile=rec.tile,
                explanation=f"{rec.tile} fits best ({describe(rec.move)}, score {rec.score:.3f})",
            )

        if not state.draw_pile.is_empty:
            return DrawDecision(source=TileSource.PILE, explanation="Nothing worth taking, drawing blind")

        if state.table.is_empty:
            raise ValueError("No tiles left to draw")

        generator = recommender.generator
        best_tile, best_score = state.table.tiles[0], -1.0
        for tile in state.table:
            moves = generator.best_moves(state, tile, limit=1)
            score = moves[0].score if moves else 0.0
            if score > best_score:
                best_tile, best_score = tile, score
        return DrawDecision(
            source=TileSource.TABLE,
            tile=best_tile,
            explanation="Draw pile is empty, taking the most useful table tile",
        )

    def select_move(self, state: GameState, tile: int) -> BotDecision:
        """
        Select the best move for `tile`.

        Process:
        1. Rank every feasible move for the tile
        2. Discard if there is none
        3. With probability personality.randomness pick any ranked move
        4. Otherwise take the top-ranked move
        """
        generator = MoveGenerator(config=self.engine_config(state))
        moves = generator.best_moves(state, tile)

        if not moves:
            move: Move = Discard(tile=tile)
            explanation = f"No feasible cell for {tile}, discarding"
            return self._create_decision(move, state, explanation, score=0.0, ranked=[])

        if self.rng.random() < self.personality.randomness:
            move = self.rng.choice(moves)
            explanation = f"Random move (personality: {self.personality.name})"
        else:
            move = moves[0]
            explanation = (
                f"Selected {describe(move)} "
                f"(score: {move.score:.3f}, personality: {self.personality.name})"
            )

        return self._create_decision(
            move, state, explanation, score=move.score, ranked=moves,
        )

    def _create_decision(
        self,
        move: Move,
        state: GameState,
        explanation: str,
        score: float,
        ranked: list[Move],
    ) -> BotDecision:
        """Create a BotDecision with physical instructions and the runners-up."""
        decision = BotDecision(
            move=move,
            explanation=explanation,
            confidence=self._calculate_confidence(move, len(ranked)),
            evaluated_moves=len(ranked),
            best_score=score,
            evaluation_details={
                "bot": self.get_name(),
                "top_moves": [(describe(m), round(m.score, 4)) for m in ranked[:3]],
            },
        )
        for instruction in self._generate_physical_instructions(move, state):
            decision.add_instruction(instruction)

        logger.debug(
            "%s: %s, top moves %s",
            self.player_id, explanation, decision.evaluation_details["top_moves"],
        )
        return decision

    def _generate_physical_instructions(self, move: Move, state: GameState) -> list[str]:
        """
        Generate instructions for what human should do on physical table.

        Cells are given 1-indexed, the way people count.
        """
        board = state.get_board(self.player_id)
        player_name = board.name if board else f"Bot ({self.player_id})"

        instructions = []
        if isinstance(move, Place):
            instructions.append(
                f"{player_name}: Place {move.tile} at row {move.cell.row + 1}, "
                f"column {move.cell.col + 1}"
            )
        elif isinstance(move, Swap):
            instructions.append(
                f"{player_name}: Take {move.old_tile} off row {move.cell.row + 1}, "
                f"column {move.cell.col + 1}"
            )
            instructions.append(f"Put {move.tile} in its place")
            instructions.append(f"Place {move.old_tile} face up on the table")
        else:
            instructions.append(f"{player_name}: Place {move.tile} face up on the table")

        return instructions

    def _calculate_confidence(self, move: Move, num_evaluated: int) -> float:
        """Confidence is the move's own score; a forced move is certain."""
        if num_evaluated <= 1:
            return 1.0
        return max(0.0, min(1.0, move.score))

    def get_name(self) -> str:
        return f"HeuristicBot({self.player_id}, {self.personality.name})"


def create_automa_team(
    player_ids: list[str],
    personalities: list[Personality] | None = None,
    seed: int | None = None,
) -> dict[str, HeuristicBot]:
    """
    Create one bot per automated board.

    If personalities not specified, uses BALANCED for all.
    Bots do NOT coordinate - they play independently.
    """
    bots = {}
    for i, player_id in enumerate(player_ids):
        personality = personalities[i] if personalities and i < len(personalities) else BALANCED
        bots[player_id] = HeuristicBot(
            player_id=player_id,
            personality=personality,
            rng=random.Random(seed + i if seed is not None else None),
        )
    return bots
