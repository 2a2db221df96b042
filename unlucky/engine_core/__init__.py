"""
Engine Core - Rules, scoring and state transitions.

The engine is the runtime that:
1. Holds GameState (boards, table, draw pile)
2. Decides legality and feasibility of placements
3. Scores and ranks moves for a drawn tile
4. Applies moves and draws via the reducer
"""

from .grid import Cell, Grid, BOARD_SIZE, EMPTY
from .config import EngineConfig, DEFAULT_CONFIG
from .state import GameState, GamePhase, Board, Table, DrawPile, TileSource
from .action import Move, MoveType, Place, Swap, Discard, ActionResult, describe
from .rules import is_legal, is_feasible, is_playable, remaining_counts
from .scoring import PlacementEvaluator, ScoreBreakdown
from .action_generator import MoveGenerator, best_moves
from .reducer import Reducer, apply_move, check_bruno_extra
from .setup import setup_game, build_supply

__all__ = [
    "Cell",
    "Grid",
    "BOARD_SIZE",
    "EMPTY",
    "EngineConfig",
    "DEFAULT_CONFIG",
    "GameState",
    "GamePhase",
    "Board",
    "Table",
    "DrawPile",
    "TileSource",
    "Move",
    "MoveType",
    "Place",
    "Swap",
    "Discard",
    "ActionResult",
    "describe",
    "is_legal",
    "is_feasible",
    "is_playable",
    "remaining_counts",
    "PlacementEvaluator",
    "ScoreBreakdown",
    "MoveGenerator",
    "best_moves",
    "Reducer",
    "apply_move",
    "check_bruno_extra",
    "setup_game",
    "build_supply",
]
