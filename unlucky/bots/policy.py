"""
Bot Policy - Interface for bot decision-making.

A turn has two decisions:
- Where to take a tile from (pile or table)
- What to do with the tile in hand (place, swap or discard)

Decisions carry instructions for a human mirroring the automa on a
physical table.
"""

from __future__ import annotations
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
import random
from typing import TYPE_CHECKING, Any

from ..engine_core.action import Discard, Move
from ..engine_core.action_generator import MoveGenerator
from ..engine_core.state import TileSource

if TYPE_CHECKING:
    from ..engine_core.state import GameState


@dataclass
class BotDecision:
    """
    A placement decision made by a bot.

    Contains:
    - The move to apply
    - Explanation (for UI/debugging)
    - Instructions for human (what to physically do)
    - Confidence in the decision
    """
    move: Move
    explanation: str = ""
    confidence: float = 1.0

    # For the human player to execute on physical table
    physical_instructions: list[str] = field(default_factory=list)

    # Evaluation details (for debugging)
    evaluated_moves: int = 0
    best_score: float = 0.0
    evaluation_details: dict[str, Any] = field(default_factory=dict)

    def add_instruction(self, instruction: str):
        """Add a physical instruction."""
        self.physical_instructions.append(instruction)


@dataclass
class DrawDecision:
    """
    Where to take the next tile from.

    `tile` is only set for table draws.
    """
    source: TileSource
    tile: int | None = None
    explanation: str = ""


class BotPolicy(ABC):
    """
    Abstract base class for bot policies.

    A policy defines how a bot draws and plays.
    """

    @abstractmethod
    def select_draw(self, state: GameState) -> DrawDecision:
        """
        Choose a draw source for the current player.

        Args:
            state: Current game state (no tile held)

        Returns:
            DrawDecision naming the pile or a table tile
        """
        pass

    @abstractmethod
    def select_move(self, state: GameState, tile: int) -> BotDecision:
        """
        Decide what to do with the tile in hand.

        Args:
            state: Current game state
            tile: The tile drawn this turn

        Returns:
            BotDecision with a Place, Swap or Discard
        """
        pass

    def get_name(self) -> str:
        """Get the bot's name/identifier."""
        return self.__class__.__name__


class RandomPolicy(BotPolicy):
    """
    Random policy - draws from the pile and plays any generated move.

    Used for:
    - Testing
    - Baseline comparison
    """

    def __init__(self, seed: int | None = None):
        self.rng = random.Random(seed)

    def select_draw(self, state: GameState) -> DrawDecision:
        if state.draw_pile.is_empty:
            if state.table.is_empty:
                raise ValueError("No tiles left to draw")
            tile = self.rng.choice(state.table.tiles)
            return DrawDecision(source=TileSource.TABLE, tile=tile, explanation="Pile empty")
        return DrawDecision(source=TileSource.PILE, explanation="Always draws blind")

    def select_move(self, state: GameState, tile: int) -> BotDecision:
        moves = MoveGenerator(config=state.config).best_moves(state, tile)
        if not moves:
            return BotDecision(
                move=Discard(tile=tile),
                explanation="No feasible move, discarding",
            )

        move = self.rng.choice(moves)
        return BotDecision(
            move=move,
            explanation="Selected randomly",
            confidence=1.0 / len(moves),
            evaluated_moves=len(moves),
            evaluation_details={"bot": self.get_name()},
        )
