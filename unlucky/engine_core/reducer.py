"""
Reducer - Applies moves and draws to game state.

The reducer is the single point of state mutation.
All state changes go through Reducer.apply() and Reducer.draw().

Design principles:
- (state, move) -> ActionResult carrying a new state
- The input state is never touched; work happens on a clone
- Validates before applying; failures carry an error code
- Legality is enforced here, feasibility is advisory (the generator
  and the turn loop only offer feasible moves)
"""

from __future__ import annotations
from dataclasses import dataclass, field
import logging

from .action import ActionResult, Discard, Move, Place, Swap, describe
from .config import EngineConfig, DEFAULT_CONFIG
from .grid import Cell, Grid
from .rules import is_legal
from .state import GamePhase, GameState, TileSource

logger = logging.getLogger("unlucky.engine")


def check_bruno_extra(grid: Grid, cell: Cell) -> bool:
    """True if the tile at `cell` matches one of its diagonal neighbours."""
    tile = grid.get(cell)
    if tile == 0:
        return False
    for other in grid.diagonal_neighbours(cell):
        if grid.get(other) == tile:
            logger.debug("Bruno match: %s and %s both hold %d", cell, other, tile)
            return True
    return False


@dataclass
class Reducer:
    """
    Applies moves and draws.

    Stateless - all state is in GameState.
    """
    config: EngineConfig = field(default_factory=lambda: DEFAULT_CONFIG)

    def apply(self, state: GameState, move: Move) -> ActionResult:
        """
        Apply a move for the current player.

        Returns ActionResult with the new state or an error.
        """
        validation_error = self._validate_move(state, move)
        if validation_error:
            message, code = validation_error
            logger.debug("Rejected %s: %s", describe(move), message)
            return ActionResult.failure(message, error_code=code)

        new_state = state.clone()
        board = new_state.current_board
        changes: list[str] = []

        if isinstance(move, Place):
            board.grid.set(move.cell, move.tile)
            changes.append(f"{board.name} placed {move.tile} at {move.cell}")
        elif isinstance(move, Swap):
            board.grid.set(move.cell, move.tile)
            new_state.table.add(move.old_tile)
            changes.append(
                f"{board.name} swapped {move.tile} into {move.cell}, "
                f"{move.old_tile} to the table"
            )
        else:
            new_state.table.add(move.tile)
            changes.append(f"{board.name} discarded {move.tile}")

        new_state.held_tile = None
        new_state.move_history.append(move)

        game_over = False
        extra_turn = False
        if not isinstance(move, Discard):
            if board.is_full:
                game_over = True
                new_state.phase = GamePhase.GAME_OVER
                new_state.winner_id = board.player_id
                new_state.game_over_reason = "board_full"
                changes.append(f"{board.name} filled their grid")
                logger.info("Game over: %s completed their grid", board.player_id)
            elif new_state.bruno_variant and check_bruno_extra(board.grid, move.cell):
                extra_turn = True
                changes.append(f"{board.name} earns an extra turn (diagonal match)")

        return ActionResult.success_with_state(
            new_state, changes, extra_turn=extra_turn, game_over=game_over,
        )

    def draw(
        self,
        state: GameState,
        source: TileSource,
        tile: int | None = None,
    ) -> ActionResult:
        """
        Acquire a tile for the current player.

        PILE takes the front of the draw pile, TABLE takes `tile` from
        the table, DECLARED records a tile the player says they drew
        (analyze mode).
        """
        if state.phase == GamePhase.GAME_OVER:
            return ActionResult.failure("Game is over - no draws allowed", "GAME_OVER")
        if state.held_tile is not None:
            return ActionResult.failure(
                f"Already holding tile {state.held_tile}", "TILE_ALREADY_HELD",
            )

        new_state = state.clone()
        name = new_state.current_board.name

        if source == TileSource.PILE:
            if new_state.draw_pile.is_empty:
                return ActionResult.failure("Draw pile is empty", "DRAW_PILE_EMPTY")
            tile = new_state.draw_pile.draw()
            change = f"{name} drew {tile} from the pile"
        elif source == TileSource.TABLE:
            if tile is None or not new_state.table.remove(tile):
                return ActionResult.failure(f"Tile {tile} is not on the table", "TILE_NOT_ON_TABLE")
            change = f"{name} took {tile} from the table"
        else:
            if tile is None or not 1 <= tile <= self.config.max_tile:
                return ActionResult.failure(f"Invalid tile {tile}", "INVALID_TILE")
            new_state.draw_pile.remove(tile)
            change = f"{name} drew {tile}"

        new_state.held_tile = tile
        return ActionResult.success_with_state(new_state, [change], tile=tile)

    def end_turn(self, state: GameState) -> GameState:
        """Return a state with the turn passed to the next player."""
        new_state = state.clone()
        new_state.advance_turn()
        return new_state

    def end_game(self, state: GameState, reason: str, winner_id: str | None = None) -> GameState:
        """Return a finished state (used when nobody can complete a grid)."""
        new_state = state.clone()
        new_state.phase = GamePhase.GAME_OVER
        new_state.game_over_reason = reason
        new_state.winner_id = winner_id
        logger.info("Game over: %s", reason)
        return new_state

    def _validate_move(self, state: GameState, move: Move) -> tuple[str, str] | None:
        """
        Validate that a move can be applied in the current state.

        Returns (message, error_code) if invalid, None if valid.
        """
        if state.phase == GamePhase.GAME_OVER:
            return "Game is over - no moves allowed", "GAME_OVER"

        if state.held_tile is not None and move.tile != state.held_tile:
            return f"Holding {state.held_tile}, not {move.tile}", "TILE_NOT_HELD"

        if not 1 <= move.tile <= self.config.max_tile:
            return f"Invalid tile {move.tile}", "INVALID_TILE"

        if isinstance(move, Discard):
            return None

        grid = state.current_board.grid
        if not move.cell.in_bounds(grid.size):
            return f"Cell {move.cell} is off the board", "INVALID_CELL"

        occupant = grid.get(move.cell)
        if isinstance(move, Place) and occupant != 0:
            return f"Cell {move.cell} is occupied by {occupant}", "CELL_OCCUPIED"
        if isinstance(move, Swap):
            if occupant == 0:
                return f"Cell {move.cell} is empty", "CELL_EMPTY"
            if occupant != move.old_tile:
                return f"Cell {move.cell} holds {occupant}, not {move.old_tile}", "TILE_MISMATCH"

        if not is_legal(grid, move.tile, move.cell, self.config.max_tile):
            return f"{move.tile} breaks the ordering at {move.cell}", "ILLEGAL_PLACEMENT"

        return None


def apply_move(state: GameState, move: Move) -> ActionResult:
    """
    Convenience function to apply a move.

    Creates a Reducer with the state's config.
    """
    return Reducer(config=state.config).apply(state, move)
