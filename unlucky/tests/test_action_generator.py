"""
Tests for move generation and ranking.

Tests:
- Only legal, feasible moves are produced
- One move per cell, best first
- Swap hysteresis
- Ties broken by row-major cell order
"""

import pytest

from ..engine_core.action import Place, Swap
from ..engine_core.action_generator import MoveGenerator, best_moves
from ..engine_core.config import EngineConfig
from ..engine_core.grid import Cell
from ..engine_core.rules import is_playable
from ..engine_core.scoring import PlacementEvaluator
from .conftest import make_state


class TestBestMoves:
    """Tests for MoveGenerator.best_moves."""

    def test_sorted_best_first(self, second_board_state):
        moves = best_moves(second_board_state, 8)
        assert moves
        scores = [m.score for m in moves]
        assert scores == sorted(scores, reverse=True)

    def test_every_move_is_playable(self, second_board_state):
        for tile in (2, 8, 13, 18):
            for move in best_moves(second_board_state, tile):
                assert is_playable(second_board_state, move.cell, tile)

    def test_one_move_per_cell(self, second_board_state):
        moves = best_moves(second_board_state, 12)
        cells = [m.cell for m in moves]
        assert len(cells) == len(set(cells))

    def test_place_on_empty_swap_on_occupied(self, second_board_state):
        grid = second_board_state.current_board.grid
        for move in best_moves(second_board_state, 8):
            if isinstance(move, Place):
                assert grid.is_empty(move.cell)
            else:
                assert isinstance(move, Swap)
                assert move.old_tile == grid.get(move.cell)

    def test_infeasible_cell_excluded(self, second_board_state):
        cells = {m.cell for m in best_moves(second_board_state, 18)}
        assert Cell(0, 3) not in cells
        assert Cell(3, 2) in cells
        assert Cell(2, 3) in cells

    def test_no_moves_means_discard(self, second_board_state):
        assert best_moves(second_board_state, 20) == []

    def test_invalid_tile(self, second_board_state):
        assert best_moves(second_board_state, 0) == []
        assert best_moves(second_board_state, 21) == []

    def test_limit(self, second_board_state):
        everything = best_moves(second_board_state, 8)
        top = best_moves(second_board_state, 8, limit=1)
        assert top == everything[:1]

    def test_other_board(self, second_board_state):
        board = second_board_state.boards[0]
        for move in best_moves(second_board_state, 8, board=board):
            assert is_playable(second_board_state, move.cell, 8, board=board)

    def test_state_untouched(self, second_board_state):
        before = [b.grid.to_rows() for b in second_board_state.boards]
        best_moves(second_board_state, 8)
        assert [b.grid.to_rows() for b in second_board_state.boards] == before


class TestSwapMargin:
    """Tests for swap hysteresis."""

    def test_huge_margin_disables_swaps(self, second_board_state):
        generator = MoveGenerator(config=EngineConfig(swap_margin=1000.0))
        moves = generator.best_moves(second_board_state, 1)
        assert not any(isinstance(m, Swap) for m in moves)

    def test_clear_improvement_swaps(self, second_board_state):
        """A 1 belongs in the corner far more than the 6 sitting there."""
        moves = best_moves(second_board_state, 1)
        assert Swap(cell=Cell(0, 0), tile=1, old_tile=6) in moves

    def test_same_tile_never_swapped(self, second_board_state):
        moves = best_moves(second_board_state, 14)
        assert Cell(2, 2) not in {m.cell for m in moves}


class FlatEvaluator(PlacementEvaluator):
    """Rates every placement the same."""

    def score(self, tile, cell, grid, remaining):
        return 0.5


class TestTieOrder:
    """Equal scores keep row-major cell order."""

    def test_flat_scores_row_major(self, second_board_state):
        generator = MoveGenerator(evaluator=FlatEvaluator())
        moves = generator.best_moves(second_board_state, 8)
        cells = [(m.cell.row, m.cell.col) for m in moves]
        assert len(cells) > 1
        assert cells == sorted(cells)

    def test_mirrored_cells_on_empty_grid(self):
        empty = [[0] * 4 for _ in range(4)]
        state = make_state([empty, [row[:] for row in empty]])
        moves = best_moves(state, 4)

        cells = [m.cell for m in moves]
        assert Cell(0, 1) in cells
        assert Cell(1, 0) in cells
        for first, second in zip(moves, moves[1:]):
            if first.score == second.score:
                assert (first.cell.row, first.cell.col) < (second.cell.row, second.cell.col)
        by_cell = {m.cell: m.score for m in moves}
        assert by_cell[Cell(0, 1)] == pytest.approx(by_cell[Cell(1, 0)])
