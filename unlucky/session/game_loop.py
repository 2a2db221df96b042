"""
Game Loop - Turn sequencing for humans and automas.

The loop:
1. Current player draws (pile, table, or a declared tile in analyze mode)
2. Current player plays the tile (place, swap or discard)
3. Bruno variant: a diagonal match keeps the turn with the same player
4. Turn passes on; automas play until a human is to act
5. Repeat until a grid is full or both the pile and the table run dry

Human moves are checked for feasibility before they reach the reducer,
so a person is never allowed to paint themselves into a corner.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
import logging
from typing import TYPE_CHECKING

from ..engine_core.action import ActionResult, Discard, Move, Place, Swap, describe
from ..engine_core.config import EngineConfig
from ..engine_core.grid import Cell, EMPTY
from ..engine_core.reducer import Reducer
from ..engine_core.rules import is_playable
from ..engine_core.state import GamePhase, TileSource

if TYPE_CHECKING:
    from ..bots.policy import BotPolicy
    from ..engine_core.state import GameState

logger = logging.getLogger("unlucky.session")

TILES_EXHAUSTED = "tiles_exhausted"


class LoopState(Enum):
    """State of the game loop."""
    WAITING_DRAW = "waiting_draw"
    WAITING_MOVE = "waiting_move"
    RUNNING_AUTOMA = "running_automa"
    GAME_OVER = "game_over"


@dataclass
class TurnResult:
    """
    Result of a draw, a move or a run of automa turns.

    Contains instructions for the human player mirroring the automas
    and any errors that stopped the step.
    """
    success: bool
    loop_state: LoopState

    # Human-readable account of what happened
    actions: list[str] = field(default_factory=list)

    # Instructions for human to execute on physical table
    instructions: list[str] = field(default_factory=list)

    errors: list[str] = field(default_factory=list)
    error_code: str | None = None

    tile: int | None = None  # tile drawn, for draw results
    extra_turn: bool = False

    # Game over info
    winner_id: str | None = None
    game_over_reason: str | None = None


class GameLoop:
    """
    The main game loop driver.

    Usage:
        loop = GameLoop(state, bots={"bot_1": HeuristicBot("bot_1")})

        result = loop.draw(TileSource.PILE)
        result = loop.play(loop.move_for_cell(Cell(1, 2)))

        result = loop.run_automa_turns()
        show_instructions(result.instructions)
    """

    MAX_AUTOMA_TURNS = 200  # Safety limit

    def __init__(
        self,
        state: GameState,
        bots: dict[str, BotPolicy] | None = None,
        config: EngineConfig | None = None,
    ):
        self.state = state
        self.config = config or state.config
        self.reducer = Reducer(config=self.config)
        if bots is None:
            from ..bots.heuristic_bot import create_automa_team
            bots = create_automa_team([b.player_id for b in state.boards if b.is_automated])
        self.bots = bots
        # Consecutive discards made while the draw pile is empty
        self.idle_turns = 0

    @property
    def loop_state(self) -> LoopState:
        if self.state.phase == GamePhase.GAME_OVER:
            return LoopState.GAME_OVER
        if self.state.held_tile is not None:
            return LoopState.WAITING_MOVE
        if self.state.current_board.player_id in self.bots:
            return LoopState.RUNNING_AUTOMA
        return LoopState.WAITING_DRAW

    @property
    def is_human_turn(self) -> bool:
        return (
            self.state.phase != GamePhase.GAME_OVER
            and self.state.current_board.player_id not in self.bots
        )

    def draw(self, source: TileSource, tile: int | None = None) -> TurnResult:
        """Acquire a tile for the human whose turn it is."""
        if not self.is_human_turn:
            return self._failure("Not a human player's turn", "NOT_YOUR_TURN")

        if self._check_exhausted():
            return self._result(success=True)

        result = self.reducer.draw(self.state, source, tile)
        if not result.success:
            return self._failure(result.error, result.error_code)

        self.state = result.new_state
        return self._result(success=True, actions=result.state_changes, tile=result.tile)

    def move_for_cell(self, cell: Cell) -> Move:
        """Place or Swap of the held tile at `cell`, depending on its occupant."""
        tile = self.state.held_tile
        if tile is None:
            raise ValueError("No tile in hand")
        occupant = self.state.current_board.grid.get(cell)
        if occupant == EMPTY:
            return Place(cell=cell, tile=tile)
        return Swap(cell=cell, tile=tile, old_tile=occupant)

    def play(self, move: Move) -> TurnResult:
        """
        Apply the human's move for the held tile.

        Placements and swaps must be legal and feasible; discards are
        always accepted.
        """
        if not self.is_human_turn:
            return self._failure("Not a human player's turn", "NOT_YOUR_TURN")
        if self.state.held_tile is None:
            return self._failure("Draw a tile first", "NO_TILE_HELD")

        if isinstance(move, (Place, Swap)) and not is_playable(self.state, move.cell, move.tile):
            return self._failure(f"Cannot {describe(move)}: not legal or not completable", "INFEASIBLE")

        result = self.reducer.apply(self.state, move)
        if not result.success:
            return self._failure(result.error, result.error_code)

        return self._finish_move(result, actions=[])

    def run_automa_turns(self, max_turns: int | None = None) -> TurnResult:
        """
        Run automa turns until it's a human's turn again or the game ends.

        Bruno extra turns count against the same safety limit.
        """
        max_turns = max_turns or self.MAX_AUTOMA_TURNS
        actions: list[str] = []
        instructions: list[str] = []
        turns_run = 0

        while turns_run < max_turns and self.state.phase != GamePhase.GAME_OVER:
            board = self.state.current_board
            bot = self.bots.get(board.player_id)
            if bot is None:
                break

            if self._check_exhausted():
                break

            error = self._play_bot_turn(bot, actions, instructions)
            if error is not None:
                return self._result(success=False, actions=actions, instructions=instructions, errors=[error])
            turns_run += 1

        if turns_run >= max_turns:
            logger.warning("Stopped after %d automa turns", turns_run)

        return self._result(success=True, actions=actions, instructions=instructions)

    def _play_bot_turn(self, bot: BotPolicy, actions: list[str], instructions: list[str]) -> str | None:
        """Draw and play one tile for a bot. Returns an error message on failure."""
        board = self.state.current_board

        draw_decision = bot.select_draw(self.state)
        drawn = self.reducer.draw(self.state, draw_decision.source, draw_decision.tile)
        if not drawn.success:
            logger.error("%s could not draw: %s", board.player_id, drawn.error)
            return drawn.error
        self.state = drawn.new_state
        actions.extend(drawn.state_changes)
        if draw_decision.source == TileSource.TABLE:
            instructions.append(f"{board.name}: Take {drawn.tile} from the table")
        else:
            instructions.append(f"{board.name}: Draw a tile from the pile ({drawn.tile})")

        decision = bot.select_move(self.state, drawn.tile)
        result = self.reducer.apply(self.state, decision.move)
        if not result.success:
            # Generated moves are always legal
            logger.error("%s produced a rejected move: %s", board.player_id, result.error)
            return result.error

        instructions.extend(decision.physical_instructions)
        logger.info("%s [%s]: %s", board.name, bot.get_name(), describe(decision.move))
        self._finish_move(result, actions=actions)
        return None

    def _finish_move(self, result: ActionResult, actions: list[str]) -> TurnResult:
        """Store the new state and pass the turn unless the mover goes again."""
        self.state = result.new_state
        actions.extend(result.state_changes)

        if isinstance(self.state.move_history[-1], Discard) and self.state.draw_pile.is_empty:
            self.idle_turns += 1
        else:
            self.idle_turns = 0

        if not result.game_over and not result.extra_turn:
            self.state = self.reducer.end_turn(self.state)
            self._check_exhausted()
        elif result.extra_turn:
            logger.info("%s plays again", self.state.current_board.name)

        return self._result(success=True, actions=actions, extra_turn=result.extra_turn)

    def _check_exhausted(self) -> bool:
        """
        End the game when a turn starts with nothing left to draw.

        An empty pile alone is not the end: table tiles can still be taken,
        and a pile draw is refused by the reducer with DRAW_PILE_EMPTY.
        With the pile empty, a full round of discards also ends the game.

        Analyze mode never runs out: tiles come from the physical table.
        """
        if self.state.phase == GamePhase.GAME_OVER:
            return True
        if self.state.analyze or self.state.held_tile is not None:
            return False
        if not self.state.draw_pile.is_empty:
            return False
        if not self.state.table.is_empty and self.idle_turns < self.state.num_players:
            return False
        self.state = self.reducer.end_game(self.state, TILES_EXHAUSTED)
        return True

    def _failure(self, error: str | None, code: str | None = None) -> TurnResult:
        return TurnResult(
            success=False,
            loop_state=self.loop_state,
            errors=[error or "Unknown error"],
            error_code=code,
        )

    def _result(self, success: bool, **kwargs) -> TurnResult:
        return TurnResult(
            success=success,
            loop_state=self.loop_state,
            winner_id=self.state.winner_id,
            game_over_reason=self.state.game_over_reason,
            **kwargs,
        )
