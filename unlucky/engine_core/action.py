"""
Moves and Results.

A move is exactly one of:
1. Place   - put the held tile on an empty cell
2. Swap    - replace an occupied cell; the old tile goes to the table
3. Discard - put the held tile on the table

The score a move carries is used for ranking only and takes no part
in equality.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Union

from .grid import Cell


class MoveType(Enum):
    PLACE = "place"
    SWAP = "swap"
    DISCARD = "discard"


@dataclass(frozen=True)
class Place:
    cell: Cell
    tile: int
    score: float = field(default=0.0, compare=False)

    @property
    def move_type(self) -> MoveType:
        return MoveType.PLACE


@dataclass(frozen=True)
class Swap:
    cell: Cell
    tile: int
    old_tile: int
    score: float = field(default=0.0, compare=False)

    @property
    def move_type(self) -> MoveType:
        return MoveType.SWAP


@dataclass(frozen=True)
class Discard:
    tile: int
    score: float = field(default=0.0, compare=False)

    @property
    def move_type(self) -> MoveType:
        return MoveType.DISCARD


Move = Union[Place, Swap, Discard]


def describe(move: Move) -> str:
    """Human-readable one-liner for logs and prompts."""
    if isinstance(move, Place):
        return f"place {move.tile} at {move.cell}"
    if isinstance(move, Swap):
        return f"swap {move.tile} into {move.cell}, {move.old_tile} to the table"
    return f"discard {move.tile} to the table"


@dataclass
class ActionResult:
    """
    Result of applying a move or a draw.

    Contains:
    - Whether it succeeded
    - New state (if succeeded)
    - Errors (if failed)
    - Turn consequences (extra turn, game over)
    """
    success: bool
    new_state: Any | None = None  # GameState
    error: str | None = None
    error_code: str | None = None

    extra_turn: bool = False
    game_over: bool = False
    tile: int | None = None  # tile obtained by a draw

    # Human-readable changes
    state_changes: list[str] = field(default_factory=list)

    @classmethod
    def failure(cls, error: str, error_code: str | None = None) -> ActionResult:
        """Create a failure result."""
        return cls(success=False, error=error, error_code=error_code)

    @classmethod
    def success_with_state(
        cls,
        state: Any,
        changes: list[str] | None = None,
        **kwargs,
    ) -> ActionResult:
        """Create a success result with new state."""
        return cls(success=True, new_state=state, state_changes=changes or [], **kwargs)
