"""
Tests for the reducer (state transitions).

Tests:
- Draws from pile, table and declarations
- Place / swap / discard application
- Validation and error codes
- Game over and the Bruno extra turn
- Tile conservation across transitions
"""

import pytest

from ..engine_core.action import Discard, Place, Swap
from ..engine_core.grid import Cell, Grid
from ..engine_core.reducer import Reducer, apply_move, check_bruno_extra
from ..engine_core.state import GamePhase, TileSource
from .conftest import make_state


@pytest.fixture
def reducer():
    return Reducer()


class TestDraw:
    """Tests for Reducer.draw."""

    def test_draw_from_pile(self, reducer, new_game):
        top = new_game.draw_pile.peek()
        result = reducer.draw(new_game, TileSource.PILE)

        assert result.success
        assert result.tile == top
        assert result.new_state.held_tile == top
        assert len(result.new_state.draw_pile) == len(new_game.draw_pile) - 1
        assert result.new_state.supply_violations() == []

    def test_input_state_untouched(self, reducer, new_game):
        size = len(new_game.draw_pile)
        reducer.draw(new_game, TileSource.PILE)
        assert len(new_game.draw_pile) == size
        assert new_game.held_tile is None

    def test_draw_from_table(self, reducer, example_state):
        result = reducer.draw(example_state, TileSource.TABLE, 17)
        assert result.success
        assert result.new_state.held_tile == 17
        assert not result.new_state.table.contains(17)

    def test_tile_not_on_table(self, reducer, example_state):
        result = reducer.draw(example_state, TileSource.TABLE, 18)
        assert not result.success
        assert result.error_code == "TILE_NOT_ON_TABLE"

    def test_empty_pile(self, reducer, example_state):
        result = reducer.draw(example_state, TileSource.PILE)
        assert not result.success
        assert result.error_code == "DRAW_PILE_EMPTY"

    def test_already_holding(self, reducer, new_game):
        held = reducer.draw(new_game, TileSource.PILE).new_state
        result = reducer.draw(held, TileSource.PILE)
        assert not result.success
        assert result.error_code == "TILE_ALREADY_HELD"

    def test_declared_tile_leaves_pile(self, reducer, new_game):
        tile = list(new_game.draw_pile)[-1]
        result = reducer.draw(new_game, TileSource.DECLARED, tile)
        assert result.success
        assert result.new_state.held_tile == tile
        assert result.new_state.supply_violations() == []

    def test_declared_invalid_tile(self, reducer, new_game):
        result = reducer.draw(new_game, TileSource.DECLARED, 42)
        assert result.error_code == "INVALID_TILE"


class TestApply:
    """Tests for Reducer.apply."""

    def test_place(self, reducer, example_state):
        result = reducer.apply(example_state, Place(cell=Cell(0, 1), tile=6))

        assert result.success
        assert result.new_state.boards[0].grid.get(Cell(0, 1)) == 6
        assert example_state.boards[0].grid.get(Cell(0, 1)) == 0
        assert result.new_state.move_history[-1] == Place(cell=Cell(0, 1), tile=6)

    def test_illegal_place(self, reducer, example_state):
        result = reducer.apply(example_state, Place(cell=Cell(0, 1), tile=4))
        assert not result.success
        assert result.error_code == "ILLEGAL_PLACEMENT"

    def test_occupied(self, reducer, example_state):
        result = reducer.apply(example_state, Place(cell=Cell(1, 1), tile=8))
        assert result.error_code == "CELL_OCCUPIED"

    def test_off_board(self, reducer, example_state):
        result = reducer.apply(example_state, Place(cell=Cell(4, 4), tile=8))
        assert result.error_code == "INVALID_CELL"

    def test_swap_sends_old_tile_to_table(self, reducer, example_state):
        result = reducer.apply(example_state, Swap(cell=Cell(1, 1), tile=8, old_tile=7))

        assert result.success
        assert result.new_state.boards[0].grid.get(Cell(1, 1)) == 8
        assert result.new_state.table.tiles[-1] == 7

    def test_swap_mismatch(self, reducer, example_state):
        result = reducer.apply(example_state, Swap(cell=Cell(1, 1), tile=8, old_tile=6))
        assert result.error_code == "TILE_MISMATCH"

    def test_swap_empty_cell(self, reducer, example_state):
        result = reducer.apply(example_state, Swap(cell=Cell(0, 1), tile=6, old_tile=3))
        assert result.error_code == "CELL_EMPTY"

    def test_discard(self, reducer, example_state):
        result = reducer.apply(example_state, Discard(tile=11))
        assert result.success
        assert result.new_state.table.tiles[-1] == 11
        assert not result.game_over

    def test_must_play_held_tile(self, reducer, example_state):
        example_state.held_tile = 9
        result = reducer.apply(example_state, Place(cell=Cell(0, 1), tile=6))
        assert result.error_code == "TILE_NOT_HELD"

    def test_held_tile_cleared(self, reducer, example_state):
        example_state.held_tile = 6
        result = reducer.apply(example_state, Place(cell=Cell(0, 1), tile=6))
        assert result.new_state.held_tile is None

    def test_apply_move_helper(self, example_state):
        assert apply_move(example_state, Discard(tile=3)).success


class TestGameOver:
    """Tests for grid completion."""

    def test_full_grid_wins(self, reducer):
        state = make_state([
            [[1, 2, 3, 4], [5, 6, 7, 8], [9, 10, 11, 12], [13, 14, 15, 0]],
            [[0] * 4 for _ in range(4)],
        ])
        result = reducer.apply(state, Place(cell=Cell(3, 3), tile=16))

        assert result.success
        assert result.game_over
        assert result.new_state.phase == GamePhase.GAME_OVER
        assert result.new_state.winner_id == "player_1"
        assert result.new_state.game_over_reason == "board_full"

    def test_no_moves_after_game_over(self, reducer, example_state):
        example_state.phase = GamePhase.GAME_OVER
        assert reducer.apply(example_state, Discard(tile=3)).error_code == "GAME_OVER"
        assert reducer.draw(example_state, TileSource.TABLE, 7).error_code == "GAME_OVER"

    def test_end_game(self, reducer, example_state):
        finished = reducer.end_game(example_state, "tiles_exhausted")
        assert finished.phase == GamePhase.GAME_OVER
        assert finished.winner_id is None
        assert example_state.phase == GamePhase.PLAYING


class TestBrunoVariant:
    """Tests for the diagonal-match extra turn."""

    DIAGONAL = [[5, 0, 0, 0], [0, 0, 0, 0], [0, 0, 0, 0], [0, 0, 0, 0]]

    def test_check_bruno_extra(self):
        grid = Grid.from_rows([[5, 0, 0, 0], [0, 5, 0, 0], [0, 0, 0, 0], [0, 0, 0, 0]])
        assert check_bruno_extra(grid, Cell(1, 1))
        assert check_bruno_extra(grid, Cell(0, 0))
        assert not check_bruno_extra(grid, Cell(2, 2))

    def test_extra_turn_when_enabled(self, reducer):
        state = make_state([self.DIAGONAL])
        state.bruno_variant = True
        result = reducer.apply(state, Place(cell=Cell(1, 1), tile=5))
        assert result.success
        assert result.extra_turn

    def test_no_extra_turn_when_disabled(self, reducer):
        state = make_state([self.DIAGONAL])
        result = reducer.apply(state, Place(cell=Cell(1, 1), tile=5))
        assert result.success
        assert not result.extra_turn

    def test_no_extra_turn_without_match(self, reducer):
        state = make_state([self.DIAGONAL])
        state.bruno_variant = True
        result = reducer.apply(state, Place(cell=Cell(1, 1), tile=6))
        assert not result.extra_turn


class TestTurns:
    """Tests for turn passing and conservation over a sequence."""

    def test_end_turn_wraps(self, reducer, example_state):
        state = reducer.end_turn(example_state)
        assert state.current_player_idx == 1
        state = reducer.end_turn(state)
        assert state.current_player_idx == 0
        assert state.turn_number == 2

    def test_conservation_over_turns(self, reducer, new_game):
        state = new_game
        for _ in range(6):
            state = reducer.draw(state, TileSource.PILE).new_state
            state = reducer.apply(state, Discard(tile=state.held_tile)).new_state
            state = reducer.end_turn(state)
            assert state.supply_violations() == []
        assert len(state.table) == 6
