"""
Game Setup - Creates the initial game state.

This module handles:
- Building the tile supply (one set of 1..20 per player by default)
- Shuffling with an explicit, seedable random source
- Seeding each board's main diagonal

Analyze mode lets the caller supply the diagonals (copying a physical
table); the chosen tiles are pulled out of the pile so the supply
stays conserved.
"""

from __future__ import annotations
import logging
import random
from typing import Sequence

from .config import EngineConfig, DEFAULT_CONFIG
from .grid import Cell, Grid
from .state import Board, DrawPile, GamePhase, GameState

logger = logging.getLogger("unlucky.engine")

MAX_PLAYERS = 4


def build_supply(num_players: int, config: EngineConfig = DEFAULT_CONFIG) -> list[int]:
    """Return every tile in the game (unshuffled)."""
    tiles: list[int] = []
    for _ in range(num_players * config.sets_per_player):
        tiles.extend(range(1, config.max_tile + 1))
    return tiles


def setup_game(
    num_humans: int = 1,
    num_bots: int = 1,
    analyze: bool = False,
    bruno_variant: bool = False,
    random_seed: int | None = None,
    diagonals: Sequence[Sequence[int] | None] | None = None,
    config: EngineConfig | None = None,
    rng: random.Random | None = None,
) -> GameState:
    """
    Set up a new game.

    Args:
        num_humans: Number of human players (0-4)
        num_bots: Number of automated players (0-4)
        analyze: Tiles will be declared by the player rather than drawn
        bruno_variant: Enable the diagonal-match extra turn
        random_seed: Seed for deterministic shuffling
        diagonals: Per-board diagonal values (analyze mode); None or a
            missing entry means "draw at random"
        config: Engine configuration
        rng: Random source (overrides random_seed)

    Returns:
        GameState ready for the first turn
    """
    config = config or DEFAULT_CONFIG
    total = num_humans + num_bots
    if total < 1:
        raise ValueError("At least one player is required")
    if total > MAX_PLAYERS:
        logger.warning("Max players is %d - dropping %d bot(s)", MAX_PLAYERS, total - MAX_PLAYERS)
        num_bots = max(0, MAX_PLAYERS - num_humans)
        num_humans = min(num_humans, MAX_PLAYERS)
        total = num_humans + num_bots

    rng = rng or random.Random(random_seed)
    supply = build_supply(total, config)
    rng.shuffle(supply)
    pile = DrawPile.of(supply)

    boards = []
    for idx in range(total):
        automated = idx >= num_humans
        if automated:
            player_id, name = f"bot_{idx - num_humans + 1}", f"Computer {idx - num_humans + 1}"
        else:
            player_id, name = f"player_{idx + 1}", f"Player {idx + 1}"

        manual = diagonals[idx] if diagonals and idx < len(diagonals) else None
        grid = _seed_diagonal(pile, config, manual)
        boards.append(Board(player_id=player_id, name=name, grid=grid, is_automated=automated))
        logger.info("%s board initialized", name)

    game_id = f"unlucky_{random_seed if random_seed is not None else rng.randint(0, 999999)}"
    return GameState(
        game_id=game_id,
        boards=boards,
        draw_pile=pile,
        phase=GamePhase.PLAYING,
        analyze=analyze,
        bruno_variant=bruno_variant,
        config=config,
    )


def _seed_diagonal(
    pile: DrawPile,
    config: EngineConfig,
    manual: Sequence[int] | None,
) -> Grid:
    """Fill the main diagonal: random draws ascending, manual tiles as given."""
    size = config.board_size
    if manual:
        tiles = []
        for tile in list(manual)[:size]:
            if not 1 <= tile <= config.max_tile:
                raise ValueError(f"Diagonal tile {tile} outside 1..{config.max_tile}")
            if not pile.remove(tile):
                raise ValueError(f"No copy of tile {tile} left for the diagonal")
            tiles.append(tile)
        # Short manual lists are topped up from the pile
        while len(tiles) < size:
            tiles.append(pile.draw())
    else:
        tiles = sorted(pile.draw() for _ in range(size))

    grid = Grid.empty(size)
    for i, tile in enumerate(tiles):
        grid.set(Cell(i, i), tile)
    return grid
