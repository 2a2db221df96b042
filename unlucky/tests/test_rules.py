"""
Tests for placement legality and completion feasibility.

Tests:
- Nearest-neighbour ordering in all four directions
- Malformed input is rejected, never raised
- Supply-aware outward paths
- Swaps judged with the occupant returned to the pool
"""

from ..engine_core.grid import Cell, Grid
from ..engine_core.rules import is_feasible, is_legal, is_playable, remaining_counts
from .conftest import BOARD_ONE, BOARD_TWO, make_state


class TestLegality:
    """Tests for is_legal."""

    def test_fits_between_neighbours(self, board_one):
        assert is_legal(board_one, 6, Cell(0, 1))

    def test_fits_with_gaps(self, board_one):
        """Neighbours further than one cell away still count."""
        assert is_legal(board_one, 8, Cell(2, 1))

    def test_smaller_than_left_neighbour(self, board_one):
        assert not is_legal(board_one, 4, Cell(0, 1))

    def test_larger_than_right_neighbour(self, board_one):
        assert not is_legal(board_one, 20, Cell(3, 0))

    def test_equal_neighbour_is_illegal(self, board_one):
        assert not is_legal(board_one, 7, Cell(0, 1))
        assert not is_legal(board_one, 5, Cell(0, 1))

    def test_empty_grid_accepts_anything(self):
        grid = Grid.empty()
        for tile in (1, 10, 20):
            assert is_legal(grid, tile, Cell(2, 2))

    def test_occupant_ignored(self, board_one):
        """The cell's own tile takes no part, so swaps use the same check."""
        assert is_legal(board_one, 8, Cell(1, 1))

    def test_malformed_input(self, board_one):
        assert not is_legal(board_one, 0, Cell(0, 1))
        assert not is_legal(board_one, 21, Cell(0, 1))
        assert not is_legal(board_one, -3, Cell(0, 1))
        assert not is_legal(board_one, 6, Cell(4, 0))
        assert not is_legal(board_one, 6, Cell(0, -1))


class TestRemainingCounts:
    """Tests for the obtainable-tile ledger."""

    def test_one_set_per_player(self, second_board_state):
        counts = remaining_counts(second_board_state)
        assert counts[19] == 0
        assert counts[18] == 2
        assert counts[14] == 1

    def test_never_negative(self):
        state = make_state([[[10, 0, 0, 0], [0, 10, 0, 0], [0, 0, 10, 0], [0, 0, 0, 0]]])
        assert remaining_counts(state)[10] == 0


class TestFeasibility:
    """Tests for is_feasible / is_playable."""

    def test_blocked_by_exhausted_values(self, second_board_state):
        """18 above an empty cell needs a 19 that no longer exists."""
        assert is_legal(Grid.from_rows(BOARD_TWO), 18, Cell(0, 3))
        assert not is_playable(second_board_state, Cell(0, 3), 18)

    def test_next_to_occupied_outward(self, second_board_state):
        assert is_playable(second_board_state, Cell(3, 2), 18)
        assert is_playable(second_board_state, Cell(2, 3), 18)

    def test_path_reserves_distinct_values(self, second_board_state):
        assert is_playable(second_board_state, Cell(0, 1), 7)

    def test_illegal_is_never_feasible(self, second_board_state):
        assert not is_playable(second_board_state, Cell(0, 1), 5)

    def test_greedy_path_runs_out(self):
        """Two empty cells after 17 need two distinct values above 17."""
        grid = Grid.from_rows([
            [0, 0, 0, 0],
            [0, 0, 0, 0],
            [0, 0, 0, 0],
            [0, 0, 0, 0],
        ])
        remaining = {18: 1, 19: 1}
        assert is_feasible(grid, Cell(3, 1), 17, remaining)
        assert not is_feasible(grid, Cell(3, 1), 17, {18: 2})

    def test_inward_check_is_optional(self):
        grid = Grid.empty()
        remaining = {5: 4}
        # Nothing below 3 left for the cells above
        assert is_feasible(grid, Cell(3, 2), 3, {20: 4, 19: 4, 5: 4})
        assert not is_feasible(grid, Cell(3, 2), 3, {20: 4, 19: 4, 5: 4}, check_inward=True)
        assert not is_feasible(grid, Cell(0, 0), 20, remaining)

    def test_swap_returns_occupant_to_pool(self):
        """Swapping out the only 18 frees it for the empty cell beyond."""
        state = make_state([[
            [0, 0, 0, 19],
            [0, 0, 0, 20],
            [0, 0, 0, 0],
            [0, 0, 18, 0],
        ]])
        grid = state.current_board.grid
        assert not is_feasible(grid, Cell(3, 2), 17, remaining_counts(state))
        assert is_playable(state, Cell(3, 2), 17)

    def test_out_of_bounds_cell(self, second_board_state):
        assert not is_playable(second_board_state, Cell(5, 5), 7)

    def test_gap_down_to_edge(self):
        state = make_state([BOARD_ONE, BOARD_TWO], current=0)
        # 8 on the first board: right path (2,2)=10 occupied, down (3,1) empty
        assert is_playable(state, Cell(2, 1), 8)
