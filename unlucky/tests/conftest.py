"""
Pytest fixtures for Unlucky tests.
"""

import pytest

from ..engine_core.config import EngineConfig
from ..engine_core.grid import Grid
from ..engine_core.setup import setup_game
from ..engine_core.state import Board, DrawPile, GameState, Table


BOARD_ONE = [
    [5, 0, 0, 9],
    [0, 7, 0, 0],
    [0, 0, 10, 19],
    [0, 0, 19, 20],
]

BOARD_TWO = [
    [6, 0, 0, 0],
    [0, 10, 0, 0],
    [0, 0, 14, 0],
    [0, 0, 0, 20],
]


def make_state(
    grids: list[list[list[int]]],
    table: list[int] | None = None,
    pile: list[int] | None = None,
    current: int = 0,
    config: EngineConfig | None = None,
    automated: list[bool] | None = None,
) -> GameState:
    """Build a state directly from grids (no supply bookkeeping)."""
    boards = []
    for idx, rows in enumerate(grids):
        is_bot = automated[idx] if automated else False
        boards.append(Board(
            player_id=f"bot_{idx + 1}" if is_bot else f"player_{idx + 1}",
            name=f"Computer {idx + 1}" if is_bot else f"Player {idx + 1}",
            grid=Grid.from_rows(rows),
            is_automated=is_bot,
        ))
    return GameState(
        game_id="test_game",
        boards=boards,
        table=Table(tiles=list(table or [])),
        draw_pile=DrawPile.of(pile or []),
        current_player_idx=current,
        config=config or EngineConfig(),
    )


@pytest.fixture
def board_one() -> Grid:
    return Grid.from_rows(BOARD_ONE)


@pytest.fixture
def board_two() -> Grid:
    return Grid.from_rows(BOARD_TWO)


@pytest.fixture
def example_state() -> GameState:
    """Both example boards, first board to move."""
    return make_state([BOARD_ONE, BOARD_TWO], table=[7, 5, 17, 4, 10])


@pytest.fixture
def second_board_state() -> GameState:
    """Both example boards, second board to move, nothing to draw."""
    return make_state([BOARD_ONE, BOARD_TWO], current=1)


@pytest.fixture
def new_game() -> GameState:
    """A freshly set up 1 human + 1 bot game."""
    return setup_game(num_humans=1, num_bots=1, random_seed=42)
