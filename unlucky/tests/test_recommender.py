"""
Tests for draw recommendations.

Tests:
- Table tiles are valued by their best move
- Threshold and empty candidates give no recommendation
- Weak-tile reporting and the swap that evacuates it
"""

from ..bots.recommender import DrawRecommender, recommend
from ..engine_core.action import Swap
from ..engine_core.action_generator import best_moves
from ..engine_core.config import EngineConfig
from ..engine_core.grid import Cell
from ..engine_core.state import DrawPile, Table, TileSource


NO_PEEK = EngineConfig(peek_draw_pile=False)


class TestRecommend:
    """Tests for DrawRecommender.recommend."""

    def test_nothing_to_consider(self, second_board_state):
        assert DrawRecommender(NO_PEEK).recommend(second_board_state) is None

    def test_table_tile_recommended(self, second_board_state):
        state = second_board_state
        state.table = Table(tiles=[8])
        rec = DrawRecommender(NO_PEEK).recommend(state)

        assert rec is not None
        assert rec.tile == 8
        assert rec.source == TileSource.TABLE
        assert rec.move == best_moves(state, 8)[0]
        assert rec.score == rec.move.score

    def test_unplayable_table_tile(self, second_board_state):
        state = second_board_state
        state.table = Table(tiles=[20])
        assert DrawRecommender(NO_PEEK).recommend(state) is None

    def test_threshold(self, second_board_state):
        state = second_board_state
        state.table = Table(tiles=[8])
        config = NO_PEEK.with_overrides(min_recommend_score=1.0)
        assert DrawRecommender(config).recommend(state) is None

    def test_best_of_several(self, second_board_state):
        state = second_board_state
        state.table = Table(tiles=[20, 8, 12, 8])
        rec = DrawRecommender(NO_PEEK).recommend(state)

        best_8 = best_moves(state, 8)[0].score
        best_12 = best_moves(state, 12)[0].score
        assert rec.score == max(best_8, best_12)

    def test_pile_peek(self, second_board_state):
        state = second_board_state
        state.draw_pile = DrawPile.of([8, 3])
        rec = DrawRecommender(EngineConfig(peek_draw_pile=True)).recommend(state)

        assert rec is not None
        assert rec.source == TileSource.PILE
        assert rec.tile == 8
        assert rec.weak_cell is None

    def test_no_peek_in_analyze_mode(self, second_board_state):
        state = second_board_state
        state.analyze = True
        state.draw_pile = DrawPile.of([8, 3])
        assert DrawRecommender(EngineConfig(peek_draw_pile=True)).recommend(state) is None

    def test_convenience_function(self, second_board_state):
        state = second_board_state
        state.table = Table(tiles=[8])
        assert recommend(state, NO_PEEK) == DrawRecommender(NO_PEEK).recommend(state)


class TestWeakCell:
    """Tests for weak-tile reporting."""

    def test_weakest_cell(self, second_board_state):
        board = second_board_state.current_board
        assert DrawRecommender(NO_PEEK).weakest_cell(board) == Cell(0, 0)

    def test_reported_with_table_draw(self, second_board_state):
        state = second_board_state
        state.table = Table(tiles=[8])
        rec = DrawRecommender(NO_PEEK).recommend(state)
        assert rec.weak_cell == Cell(0, 0)
        assert rec.move == best_moves(state, 8)[0]

    def test_recommends_swapping_weak_tile_out(self, second_board_state):
        state = second_board_state
        state.table = Table(tiles=[1])
        rec = DrawRecommender(NO_PEEK).recommend(state)

        assert rec.weak_cell == Cell(0, 0)
        assert rec.move == Swap(cell=Cell(0, 0), tile=1, old_tile=6)
        assert rec.score == best_moves(state, 1)[0].score

    def test_well_placed_board_has_none(self, second_board_state):
        board = second_board_state.current_board
        for cell, _ in list(board.grid.occupied()):
            board.grid.clear(cell)
        board.grid.set(Cell(0, 0), 1)
        board.grid.set(Cell(3, 3), 20)
        assert DrawRecommender(NO_PEEK).weakest_cell(board) is None
