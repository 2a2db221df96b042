"""
FastAPI Application - REST API for game clients.

Endpoints:
    POST   /api/v1/sessions                       Create game session
    GET    /api/v1/sessions                       List active sessions
    GET    /api/v1/sessions/{id}                  Get session status
    DELETE /api/v1/sessions/{id}                  End session
    GET    /api/v1/sessions/{id}/state            Get game state
    POST   /api/v1/sessions/{id}/draw             Draw a tile
    POST   /api/v1/sessions/{id}/moves            Play the held tile
    GET    /api/v1/sessions/{id}/best-moves       Rank moves for a tile
    GET    /api/v1/sessions/{id}/recommendation   Which tile to take
    GET    /api/v1/sessions/{id}/check            Check one placement
    POST   /api/v1/sessions/{id}/automa           Run automa turns
    GET    /health                                Health check

Automa Execution Flow:
    1. POST /draw then POST /moves completes a human turn
    2. If an automa is next, its turns run immediately
    3. The /moves response includes automa_instructions to mirror

All responses are JSON with explicit Pydantic schemas.
"""

from typing import Annotated, Optional, Union
import logging
import os

from fastapi import FastAPI, Query, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .. import __version__
from ..errors import SessionNotFoundError
from .service import APIService
from .schemas import (
    # Request models
    CreateSessionRequest,
    DrawRequest,
    MoveRequest,
    # Response models
    BestMovesResponse,
    CheckResponse,
    EndSessionResponse,
    ErrorResponse,
    GameStateResponse,
    HealthResponse,
    RecommendationResponse,
    SessionListResponse,
    SessionResponse,
    TurnResponse,
    # Enums
    ErrorCode,
)

logger = logging.getLogger("unlucky.api")

# Environment configuration
UNLUCKY_ENV = os.getenv("UNLUCKY_ENV", "development")
ALLOWED_ORIGINS = os.getenv("ALLOWED_ORIGINS", "*").split(",")

# Rejections that are about turn order rather than the request itself
CONFLICT_CODES = {ErrorCode.NOT_YOUR_TURN, ErrorCode.GAME_OVER}


def create_app(service=None):
    """
    Create the FastAPI application.

    Args:
        service: Optional APIService instance (creates new if not provided)

    Returns:
        FastAPI application instance
    """
    app = FastAPI(
        title="Unlucky Engine API",
        description="""
Ripple grid tile engine - legality, feasibility, move ranking and automa play.

## Turn Flow

1. `POST /draw` with `source=pile`, `table` (plus `tile`) or `declared` (analyze mode)
2. `POST /moves` with `row`/`col`, or `move_type=discard`
3. Automa turns run right after; the response lists what they did

## Error Codes

| Code | Description |
|------|-------------|
| `SESSION_NOT_FOUND` | Session does not exist |
| `NOT_YOUR_TURN` | An automa is to act or the game is over |
| `NO_TILE_HELD` | Draw before moving |
| `ILLEGAL_PLACEMENT` | Tile breaks row/column ordering |
| `INFEASIBLE` | Tile is legal but the grid could no longer be completed |
        """,
        version=__version__,
        docs_url="/api/docs",
        redoc_url="/api/redoc",
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=ALLOWED_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    api_service = service or APIService()

    # =========================================================================
    # Error helpers
    # =========================================================================

    def make_error_response(
        error_code: ErrorCode,
        message: str,
        status_code: int = 400,
        details: Optional[dict] = None,
    ) -> JSONResponse:
        """Create a standardized error response."""
        return JSONResponse(
            status_code=status_code,
            content=ErrorResponse(
                error=message,
                error_code=error_code,
                details=details,
            ).model_dump(mode="json"),
        )

    def from_error(error: ErrorResponse) -> JSONResponse:
        status_code = 409 if error.error_code in CONFLICT_CODES else 400
        return make_error_response(error.error_code, error.error, status_code, error.details)

    @app.exception_handler(SessionNotFoundError)
    async def session_not_found(request: Request, exc: SessionNotFoundError) -> JSONResponse:
        return make_error_response(ErrorCode.SESSION_NOT_FOUND, str(exc), status_code=404)

    # =========================================================================
    # Session Endpoints
    # =========================================================================

    @app.post(
        "/api/v1/sessions",
        response_model=SessionResponse,
        responses={400: {"model": ErrorResponse, "description": "Invalid parameters"}},
        tags=["Sessions"],
        summary="Create a new game session",
    )
    async def create_session(body: CreateSessionRequest) -> Union[SessionResponse, JSONResponse]:
        """
        Create a new game session.

        Automas seated before the first human play immediately; their
        moves are listed in `instructions`.
        """
        try:
            return api_service.create_session(body)
        except ValueError as e:
            return make_error_response(ErrorCode.VALIDATION_ERROR, str(e))

    @app.get(
        "/api/v1/sessions",
        response_model=SessionListResponse,
        tags=["Sessions"],
        summary="List active sessions",
    )
    async def list_sessions() -> SessionListResponse:
        """List all active session IDs."""
        sessions = api_service.list_sessions()
        return SessionListResponse(sessions=sessions, count=len(sessions))

    @app.get(
        "/api/v1/sessions/{session_id}",
        response_model=SessionResponse,
        responses={404: {"model": ErrorResponse}},
        tags=["Sessions"],
        summary="Get session status",
    )
    async def get_session(session_id: str) -> SessionResponse:
        return api_service.get_session(session_id)

    @app.delete(
        "/api/v1/sessions/{session_id}",
        response_model=EndSessionResponse,
        tags=["Sessions"],
        summary="End a game session",
    )
    async def end_session(
        session_id: str,
        reason: Annotated[str, Query(description="Reason for ending")] = "user_ended",
    ) -> EndSessionResponse:
        """End a game session and release resources."""
        success = api_service.end_session(session_id, reason)
        return EndSessionResponse(success=success, session_id=session_id)

    # =========================================================================
    # Game Loop Endpoints
    # =========================================================================

    @app.get(
        "/api/v1/sessions/{session_id}/state",
        response_model=GameStateResponse,
        responses={404: {"model": ErrorResponse}},
        tags=["Game Loop"],
        summary="Get current game state",
    )
    async def get_game_state(session_id: str) -> GameStateResponse:
        """Get the complete current game state for display."""
        return api_service.get_game_state(session_id)

    @app.post(
        "/api/v1/sessions/{session_id}/draw",
        response_model=TurnResponse,
        responses={
            400: {"model": ErrorResponse, "description": "Draw rejected"},
            404: {"model": ErrorResponse, "description": "Session not found"},
            409: {"model": ErrorResponse, "description": "Not a human turn"},
        },
        tags=["Game Loop"],
        summary="Draw a tile",
    )
    async def draw(session_id: str, body: DrawRequest) -> Union[TurnResponse, JSONResponse]:
        result = api_service.draw(session_id, body)
        if isinstance(result, ErrorResponse):
            return from_error(result)
        return result

    @app.post(
        "/api/v1/sessions/{session_id}/moves",
        response_model=TurnResponse,
        responses={
            400: {"model": ErrorResponse, "description": "Move rejected"},
            404: {"model": ErrorResponse, "description": "Session not found"},
            409: {"model": ErrorResponse, "description": "Not a human turn"},
        },
        tags=["Game Loop"],
        summary="Play the held tile",
    )
    async def play(session_id: str, body: MoveRequest) -> Union[TurnResponse, JSONResponse]:
        """
        Place the held tile at (row, col) or discard it.

        **Request Body:**
        ```json
        {"move_type": "place", "row": 1, "col": 2}
        ```
        """
        result = api_service.play(session_id, body)
        if isinstance(result, ErrorResponse):
            return from_error(result)
        return result

    @app.post(
        "/api/v1/sessions/{session_id}/automa",
        response_model=TurnResponse,
        responses={404: {"model": ErrorResponse}},
        tags=["Game Loop"],
        summary="Run automa turns until a human is to act",
    )
    async def run_automa(session_id: str) -> Union[TurnResponse, JSONResponse]:
        result = api_service.run_automa(session_id)
        if isinstance(result, ErrorResponse):
            return make_error_response(result.error_code, result.error, status_code=500)
        return result

    # =========================================================================
    # Analysis Endpoints
    # =========================================================================

    @app.get(
        "/api/v1/sessions/{session_id}/best-moves",
        response_model=BestMovesResponse,
        responses={404: {"model": ErrorResponse}},
        tags=["Analysis"],
        summary="Rank every move for a tile",
    )
    async def best_moves(
        session_id: str,
        tile: Annotated[int, Query(description="Tile to rank placements for")],
        player_id: Annotated[Optional[str], Query(description="Board to rank on")] = None,
        limit: Annotated[Optional[int], Query(ge=1)] = None,
    ) -> Union[BestMovesResponse, JSONResponse]:
        result = api_service.best_moves(session_id, tile, player_id=player_id, limit=limit)
        if isinstance(result, ErrorResponse):
            return from_error(result)
        return result

    @app.get(
        "/api/v1/sessions/{session_id}/recommendation",
        response_model=RecommendationResponse,
        responses={404: {"model": ErrorResponse}},
        tags=["Analysis"],
        summary="Recommend a draw for the current player",
    )
    async def recommendation(session_id: str) -> RecommendationResponse:
        return api_service.recommendation(session_id)

    @app.get(
        "/api/v1/sessions/{session_id}/check",
        response_model=CheckResponse,
        responses={404: {"model": ErrorResponse}},
        tags=["Analysis"],
        summary="Check legality and feasibility of one placement",
    )
    async def check(
        session_id: str,
        tile: Annotated[int, Query()],
        row: Annotated[int, Query()],
        col: Annotated[int, Query()],
        player_id: Annotated[Optional[str], Query()] = None,
    ) -> Union[CheckResponse, JSONResponse]:
        result = api_service.check(session_id, tile, row, col, player_id=player_id)
        if isinstance(result, ErrorResponse):
            return from_error(result)
        return result

    # =========================================================================
    # Health
    # =========================================================================

    @app.get("/health", response_model=HealthResponse, tags=["Health"])
    async def health() -> HealthResponse:
        return HealthResponse(status="healthy", service="unlucky-engine", version=__version__)

    logger.debug("API created (env=%s)", UNLUCKY_ENV)
    return app


# For running directly: uvicorn unlucky.api.app:app
app = create_app()
