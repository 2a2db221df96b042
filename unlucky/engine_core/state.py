"""
Game State - Boards, the shared table and the draw pile.

Design principles:
- Tile conservation: for every value v, copies across all grids, the
  table, the draw pile and the tile in hand equal the configured supply
- Snapshot-friendly: a state rebuilt from a saved file is
  indistinguishable from a freshly set up one
- The reducer never mutates a state it was given; it works on clone()
"""

from __future__ import annotations
from collections import Counter, deque
from copy import deepcopy
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Iterable, Iterator

from ..errors import EmptyPileError
from .config import EngineConfig, DEFAULT_CONFIG
from .grid import Grid


class GamePhase(Enum):
    """High-level game phases."""
    SETUP = "setup"
    PLAYING = "playing"
    GAME_OVER = "game_over"


class TileSource(Enum):
    """Where a drawn tile comes from."""
    PILE = "pile"
    TABLE = "table"
    DECLARED = "declared"  # analyze mode: the player tells us what was drawn


@dataclass
class Board:
    """One player's grid plus whether the engine plays it."""
    player_id: str
    name: str
    grid: Grid = field(default_factory=Grid)
    is_automated: bool = False

    @property
    def is_full(self) -> bool:
        return self.grid.is_full()


@dataclass
class Table:
    """
    Face-up discarded tiles, available to any player.

    Order is kept (oldest first) so recommendations are deterministic.
    """
    tiles: list[int] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.tiles)

    def __iter__(self) -> Iterator[int]:
        return iter(self.tiles)

    @property
    def is_empty(self) -> bool:
        return not self.tiles

    def add(self, tile: int) -> None:
        self.tiles.append(tile)

    def contains(self, tile: int) -> bool:
        return tile in self.tiles

    def remove(self, tile: int) -> bool:
        """Remove one copy of tile. Returns False if it isn't on the table."""
        if tile not in self.tiles:
            return False
        self.tiles.remove(tile)
        return True

    def sorted(self) -> list[int]:
        return sorted(self.tiles)


@dataclass
class DrawPile:
    """
    Face-down tiles not yet drawn by anyone.

    Tiles are drawn from the front.
    """
    tiles: deque[int] = field(default_factory=deque)

    @classmethod
    def of(cls, tiles: Iterable[int]) -> DrawPile:
        return cls(tiles=deque(tiles))

    def __len__(self) -> int:
        return len(self.tiles)

    def __iter__(self) -> Iterator[int]:
        return iter(self.tiles)

    @property
    def is_empty(self) -> bool:
        return not self.tiles

    def peek(self) -> int | None:
        """Next tile to be drawn, without drawing it."""
        return self.tiles[0] if self.tiles else None

    def draw(self) -> int:
        if not self.tiles:
            raise EmptyPileError("Draw pile is empty")
        return self.tiles.popleft()

    def remove(self, tile: int) -> bool:
        """Pull a specific tile out of the pile (analyze mode, manual setup)."""
        try:
            self.tiles.remove(tile)
        except ValueError:
            return False
        return True


@dataclass
class GameState:
    """
    Complete game state at a point in time.

    Single-threaded and turn-sequential: only the reducer and the draw
    operations change it, one move at a time.
    """
    game_id: str
    boards: list[Board] = field(default_factory=list)
    table: Table = field(default_factory=Table)
    draw_pile: DrawPile = field(default_factory=DrawPile)

    phase: GamePhase = GamePhase.PLAYING
    current_player_idx: int = 0
    turn_number: int = 0

    # Modes
    analyze: bool = False  # tiles are declared by the player, not drawn
    bruno_variant: bool = False

    # Tile drawn this turn and not yet played
    held_tile: int | None = None

    winner_id: str | None = None
    game_over_reason: str | None = None

    config: EngineConfig = field(default_factory=lambda: DEFAULT_CONFIG)

    # History (for replay, logging)
    move_history: list[Any] = field(default_factory=list)

    @property
    def current_board(self) -> Board:
        return self.boards[self.current_player_idx]

    @property
    def num_players(self) -> int:
        return len(self.boards)

    @property
    def supply_per_value(self) -> int:
        """Copies of each tile value in the whole game."""
        return self.config.sets_per_player * self.num_players

    def get_board(self, player_id: str) -> Board | None:
        for board in self.boards:
            if board.player_id == player_id:
                return board
        return None

    def locked_counts(self) -> Counter[int]:
        """Copies of each value placed on any grid."""
        counts: Counter[int] = Counter()
        for board in self.boards:
            counts.update(board.grid.values())
        return counts

    def supply_violations(self) -> list[str]:
        """
        Check tile conservation across grids, table, pile and hand.

        Returns one message per value whose total differs from the supply.
        """
        totals = self.locked_counts()
        totals.update(self.table.tiles)
        totals.update(self.draw_pile.tiles)
        if self.held_tile is not None:
            totals[self.held_tile] += 1

        problems = []
        expected = self.supply_per_value
        for value in range(1, self.config.max_tile + 1):
            if totals[value] != expected:
                problems.append(f"tile {value}: {totals[value]} copies, expected {expected}")
        for value in sorted(v for v in totals if not 1 <= v <= self.config.max_tile):
            problems.append(f"tile {value}: out of range")
        return problems

    def advance_turn(self) -> None:
        self.current_player_idx = (self.current_player_idx + 1) % self.num_players
        self.turn_number += 1

    def clone(self) -> GameState:
        """Deep copy the state."""
        return deepcopy(self)
