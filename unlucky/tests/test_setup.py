"""
Tests for game setup.
"""

from collections import Counter

import pytest

from ..engine_core.config import EngineConfig
from ..engine_core.grid import Cell
from ..engine_core.setup import build_supply, setup_game


class TestSupply:
    """Tests for build_supply."""

    def test_one_set_per_player(self):
        supply = build_supply(3)
        assert len(supply) == 60
        assert Counter(supply) == Counter({v: 3 for v in range(1, 21)})

    def test_sets_per_player(self):
        supply = build_supply(2, EngineConfig(sets_per_player=2))
        assert Counter(supply)[7] == 4


class TestSetupGame:
    """Tests for setup_game."""

    def test_boards_and_ids(self, new_game):
        assert [b.player_id for b in new_game.boards] == ["player_1", "bot_1"]
        assert not new_game.boards[0].is_automated
        assert new_game.boards[1].is_automated

    def test_diagonal_seeded_ascending(self, new_game):
        for board in new_game.boards:
            diagonal = [board.grid.get(Cell(i, i)) for i in range(4)]
            assert all(diagonal)
            assert diagonal == sorted(diagonal)
            assert board.grid.empty_count() == 12

    def test_pile_holds_the_rest(self, new_game):
        assert len(new_game.draw_pile) == 40 - 8
        assert new_game.table.is_empty
        assert new_game.supply_violations() == []

    def test_seed_is_deterministic(self):
        first = setup_game(num_humans=2, num_bots=0, random_seed=7)
        second = setup_game(num_humans=2, num_bots=0, random_seed=7)
        assert list(first.draw_pile) == list(second.draw_pile)
        assert first.boards[0].grid.to_rows() == second.boards[0].grid.to_rows()

    def test_manual_diagonal(self):
        state = setup_game(num_humans=1, num_bots=1, analyze=True, diagonals=[[2, 8, 12, 18]], random_seed=1)
        grid = state.boards[0].grid
        assert [grid.get(Cell(i, i)) for i in range(4)] == [2, 8, 12, 18]
        assert state.analyze
        assert state.supply_violations() == []

    def test_manual_diagonal_kept_as_given(self):
        state = setup_game(num_humans=1, num_bots=0, diagonals=[[9, 3, 15, 1]], random_seed=1)
        grid = state.boards[0].grid
        assert [grid.get(Cell(i, i)) for i in range(4)] == [9, 3, 15, 1]

    def test_manual_diagonal_exhausted_value(self):
        with pytest.raises(ValueError):
            setup_game(num_humans=1, num_bots=0, diagonals=[[4, 4, 5, 6]])

    def test_manual_diagonal_out_of_range(self):
        with pytest.raises(ValueError):
            setup_game(num_humans=1, num_bots=0, diagonals=[[0, 4, 5, 6]])

    def test_requires_a_player(self):
        with pytest.raises(ValueError):
            setup_game(num_humans=0, num_bots=0)

    def test_player_cap(self):
        state = setup_game(num_humans=2, num_bots=5, random_seed=3)
        assert state.num_players == 4
        assert sum(b.is_automated for b in state.boards) == 2

    def test_bruno_flag(self):
        assert setup_game(bruno_variant=True, random_seed=1).bruno_variant
