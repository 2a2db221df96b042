"""
API Module - HTTP interface.

Exposes the engine via REST API. A client:
1. Creates a game session
2. Draws and plays tiles for its human players
3. Receives automa moves to mirror on a physical table
4. Asks for recommendations, rankings and placement checks

All state is session-scoped. No persistent user accounts required.
"""

from .schemas import (
    # Requests
    CreateSessionRequest,
    DrawRequest,
    MoveRequest,
    # Responses
    SessionResponse,
    GameStateResponse,
    TurnResponse,
    BestMovesResponse,
    RecommendationResponse,
    CheckResponse,
    ErrorResponse,
    # Shared
    PlayerInfo,
    BoardInfo,
    MoveInfo,
    CellInfo,
)
from .service import APIService
from .app import create_app

__all__ = [
    # Requests
    "CreateSessionRequest",
    "DrawRequest",
    "MoveRequest",
    # Responses
    "SessionResponse",
    "GameStateResponse",
    "TurnResponse",
    "BestMovesResponse",
    "RecommendationResponse",
    "CheckResponse",
    "ErrorResponse",
    # Shared
    "PlayerInfo",
    "BoardInfo",
    "MoveInfo",
    "CellInfo",
    # Service
    "APIService",
    "create_app",
]
