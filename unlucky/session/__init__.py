"""
Session Module - Manages ephemeral game sessions.

A session represents one play-through of a game:
- Created when a caller starts a game or loads a snapshot
- Holds the current game state inside its GameLoop
- Runs automa turns between human turns
- Removed when the game ends or the caller deletes it
"""

from .manager import SessionManager, Session, SessionState
from .game_loop import GameLoop, LoopState, TurnResult, TILES_EXHAUSTED

__all__ = [
    "SessionManager",
    "Session",
    "SessionState",
    "GameLoop",
    "LoopState",
    "TurnResult",
    "TILES_EXHAUSTED",
]
