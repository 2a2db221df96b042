"""
Pydantic Schemas for API - Request/response models for OpenAPI.

These models define the exact contract between clients and the engine.
All responses include explicit types for OpenAPI schema generation.

Error Codes:
- SESSION_NOT_FOUND: Session does not exist or has expired
- VALIDATION_ERROR: Request is well-formed JSON but makes no sense
- NOT_YOUR_TURN: An automa is to act, or the game is over
- NO_TILE_HELD / TILE_ALREADY_HELD: Draw and move out of order
- ILLEGAL_PLACEMENT / INFEASIBLE: The placement breaks ordering now or later
"""

from enum import Enum
from typing import Optional, Any
from pydantic import BaseModel, Field


# =============================================================================
# Enums
# =============================================================================

class SessionStatus(str, Enum):
    """Session status values, as seen by the human client."""
    WAITING_DRAW = "waiting_draw"
    WAITING_MOVE = "waiting_move"
    AUTOMA_THINKING = "automa_thinking"
    GAME_OVER = "game_over"


class DrawSource(str, Enum):
    """Where a drawn tile comes from."""
    PILE = "pile"
    TABLE = "table"
    DECLARED = "declared"


class MoveKind(str, Enum):
    """Move types."""
    PLACE = "place"
    SWAP = "swap"
    DISCARD = "discard"


class ErrorCode(str, Enum):
    """Structured error codes."""
    SESSION_NOT_FOUND = "SESSION_NOT_FOUND"
    VALIDATION_ERROR = "VALIDATION_ERROR"
    NOT_YOUR_TURN = "NOT_YOUR_TURN"
    GAME_OVER = "GAME_OVER"
    NO_TILE_HELD = "NO_TILE_HELD"
    TILE_ALREADY_HELD = "TILE_ALREADY_HELD"
    TILE_NOT_HELD = "TILE_NOT_HELD"
    TILE_NOT_ON_TABLE = "TILE_NOT_ON_TABLE"
    DRAW_PILE_EMPTY = "DRAW_PILE_EMPTY"
    INVALID_TILE = "INVALID_TILE"
    INVALID_CELL = "INVALID_CELL"
    CELL_OCCUPIED = "CELL_OCCUPIED"
    CELL_EMPTY = "CELL_EMPTY"
    TILE_MISMATCH = "TILE_MISMATCH"
    ILLEGAL_PLACEMENT = "ILLEGAL_PLACEMENT"
    INFEASIBLE = "INFEASIBLE"
    INTERNAL_ERROR = "INTERNAL_ERROR"


# =============================================================================
# Shared Models
# =============================================================================

class CellInfo(BaseModel):
    """A 0-indexed grid coordinate."""
    row: int
    col: int


class PlayerInfo(BaseModel):
    """Player information for display."""
    player_id: str
    name: str
    is_automated: bool
    is_current_turn: bool = False

    model_config = {"from_attributes": True}


class BoardInfo(PlayerInfo):
    """A player's grid; 0 marks an empty cell."""
    grid: list[list[int]] = Field(default_factory=list)
    empty_cells: int = 0


class MoveInfo(BaseModel):
    """A ranked or applied move."""
    move_type: MoveKind
    tile: int
    row: Optional[int] = None
    col: Optional[int] = None
    old_tile: Optional[int] = Field(None, description="Tile sent to the table by a swap")
    score: float = 0.0
    description: str = ""


# =============================================================================
# Request Models
# =============================================================================

class CreateSessionRequest(BaseModel):
    """Request to create a new game session."""
    num_humans: int = Field(1, ge=1, le=4, description="Number of human players")
    num_bots: int = Field(1, ge=0, le=3, description="Number of automa players")
    analyze: bool = Field(False, description="Humans declare the tiles they draw")
    bruno_variant: bool = Field(False, description="Diagonal match earns an extra turn")
    random_seed: Optional[int] = Field(None, description="Seed for reproducible games")
    personality: Optional[str] = Field(
        None, description="Personality for every bot: balanced, cautious, greedy, chaotic"
    )
    diagonals: Optional[list[Optional[list[int]]]] = Field(
        None, description="Starting diagonal per board (analyze mode); null for random"
    )


class DrawRequest(BaseModel):
    """Request to acquire a tile for the human whose turn it is."""
    source: DrawSource = Field(DrawSource.PILE, description="pile, table, or declared")
    tile: Optional[int] = Field(None, description="Required for table and declared draws")


class MoveRequest(BaseModel):
    """
    Request to play the held tile.

    place and swap both mean "put the tile at (row, col)"; an occupied
    cell makes it a swap.
    """
    move_type: MoveKind = Field(MoveKind.PLACE, description="place, swap, or discard")
    row: Optional[int] = Field(None, ge=0)
    col: Optional[int] = Field(None, ge=0)


# =============================================================================
# Response Models
# =============================================================================

class ErrorResponse(BaseModel):
    """Standard error response."""
    error: str = Field(..., description="Human-readable error message")
    error_code: ErrorCode = Field(..., description="Machine-readable error code")
    details: Optional[dict[str, Any]] = Field(None, description="Additional error context")
    api_version: str = Field("v1", description="API version")


class SessionResponse(BaseModel):
    """Response containing session information."""
    session_id: str
    status: SessionStatus
    players: list[PlayerInfo] = Field(default_factory=list)
    current_turn_player_id: Optional[str] = None
    turn_number: int = 0
    created_at: float = 0.0
    instructions: list[str] = Field(
        default_factory=list, description="What the automas did before the first human turn"
    )
    api_version: str = "v1"


class GameStateResponse(BaseModel):
    """Complete game state for display."""
    session_id: str
    status: SessionStatus
    turn_number: int
    boards: list[BoardInfo] = Field(default_factory=list)
    table: list[int] = Field(default_factory=list)
    draw_pile_size: int = 0
    held_tile: Optional[int] = None
    current_turn_player_id: Optional[str] = None
    analyze: bool = False
    bruno_variant: bool = False
    winner_id: Optional[str] = None
    game_over_reason: Optional[str] = None
    api_version: str = "v1"


class TurnResponse(BaseModel):
    """Result of a draw, a move, or a run of automa turns."""
    session_id: str
    success: bool
    status: SessionStatus
    tile: Optional[int] = Field(None, description="Tile drawn, for draw requests")
    extra_turn: bool = False
    actions: list[str] = Field(default_factory=list)
    automa_actions: list[str] = Field(default_factory=list)
    automa_instructions: list[str] = Field(default_factory=list)
    game_state: Optional[GameStateResponse] = None
    api_version: str = "v1"


class BestMovesResponse(BaseModel):
    """Ranked moves for a tile on the current player's board."""
    session_id: str
    player_id: str
    tile: int
    moves: list[MoveInfo] = Field(default_factory=list)


class RecommendationResponse(BaseModel):
    """Draw recommendation; recommended=false means draw from the pile."""
    session_id: str
    player_id: str
    recommended: bool
    tile: Optional[int] = None
    source: Optional[DrawSource] = None
    score: Optional[float] = None
    move: Optional[MoveInfo] = None
    weak_cell: Optional[CellInfo] = None


class CheckResponse(BaseModel):
    """Legality and feasibility of one placement."""
    session_id: str
    player_id: str
    tile: int
    row: int
    col: int
    legal: bool
    feasible: bool
    remaining_copies: int


class SessionListResponse(BaseModel):
    """Response listing active sessions."""
    sessions: list[str]
    count: int


class EndSessionResponse(BaseModel):
    """Response after ending a session."""
    success: bool
    session_id: str


class HealthResponse(BaseModel):
    """Health check response."""
    status: str
    service: str
    version: str
