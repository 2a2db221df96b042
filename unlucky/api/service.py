"""
API Service - Business logic layer between API and engine.

The service:
1. Translates API requests to engine calls
2. Manages sessions
3. Runs automa turns after each completed human turn
4. Formats responses for clients

This layer is framework-agnostic (can be used with FastAPI, Flask, etc.)
Unknown sessions raise SessionNotFoundError; rejected draws and moves
come back as ErrorResponse.
"""

from __future__ import annotations
from dataclasses import dataclass, field
import logging

from .schemas import (
    # Requests
    CreateSessionRequest,
    DrawRequest,
    MoveRequest,
    # Responses
    BestMovesResponse,
    CheckResponse,
    ErrorResponse,
    GameStateResponse,
    RecommendationResponse,
    SessionResponse,
    TurnResponse,
    # Shared
    BoardInfo,
    CellInfo,
    MoveInfo,
    PlayerInfo,
    # Enums
    DrawSource,
    ErrorCode,
    MoveKind,
    SessionStatus,
)
from ..bots.recommender import DrawRecommender
from ..engine_core.action import Discard, Move, Place, Swap, describe
from ..engine_core.action_generator import MoveGenerator
from ..engine_core.grid import Cell
from ..engine_core.rules import is_legal, is_playable, remaining_counts
from ..engine_core.state import Board, TileSource
from ..session import LoopState, Session, SessionManager, TurnResult

logger = logging.getLogger("unlucky.api")


@dataclass
class APIService:
    """
    Main API service.

    Usage:
        service = APIService()

        session_response = service.create_session(CreateSessionRequest(num_bots=2))
        turn = service.draw(session_response.session_id, DrawRequest())
        turn = service.play(session_response.session_id, MoveRequest(row=1, col=2))
    """
    session_manager: SessionManager = field(default_factory=SessionManager)

    def create_session(self, request: CreateSessionRequest) -> SessionResponse:
        """
        Create a new game session.

        Raises ValueError for an unknown personality or bad diagonals.
        """
        session = self.session_manager.create_session(
            num_humans=request.num_humans,
            num_bots=request.num_bots,
            analyze=request.analyze,
            bruno_variant=request.bruno_variant,
            random_seed=request.random_seed,
            diagonals=request.diagonals,
            personality=request.personality,
        )
        return self._session_to_response(session, instructions=session.get_instructions())

    def get_session(self, session_id: str) -> SessionResponse:
        session = self.session_manager.require_session(session_id)
        return self._session_to_response(session)

    def end_session(self, session_id: str, reason: str = "user_ended") -> bool:
        return self.session_manager.end_session(session_id, reason)

    def list_sessions(self) -> list[str]:
        """List active session IDs."""
        return self.session_manager.list_active_sessions()

    def get_game_state(self, session_id: str) -> GameStateResponse:
        session = self.session_manager.require_session(session_id)
        return self._build_game_state(session)

    def draw(self, session_id: str, request: DrawRequest) -> TurnResponse | ErrorResponse:
        """Acquire a tile for the human whose turn it is."""
        session = self.session_manager.require_session(session_id)
        result = session.loop.draw(TileSource(request.source.value), request.tile)
        if not result.success:
            return self._error_from_result(result)
        return self._turn_response(session, result)

    def play(self, session_id: str, request: MoveRequest) -> TurnResponse | ErrorResponse:
        """
        Play the held tile, then let the automas take their turns.
        """
        session = self.session_manager.require_session(session_id)
        loop = session.loop
        if loop.state.held_tile is None:
            return ErrorResponse(error="Draw a tile first", error_code=ErrorCode.NO_TILE_HELD)

        if request.move_type == MoveKind.DISCARD:
            move: Move = Discard(tile=loop.state.held_tile)
        elif request.row is None or request.col is None:
            return ErrorResponse(
                error="row and col are required to place a tile",
                error_code=ErrorCode.VALIDATION_ERROR,
            )
        else:
            move = loop.move_for_cell(Cell(request.row, request.col))

        result = loop.play(move)
        if not result.success:
            return self._error_from_result(result)

        automa = None
        if loop.loop_state == LoopState.RUNNING_AUTOMA:
            automa = loop.run_automa_turns()
        return self._turn_response(session, result, automa=automa)

    def run_automa(self, session_id: str) -> TurnResponse | ErrorResponse:
        """Run automa turns until a human is to act."""
        session = self.session_manager.require_session(session_id)
        result = session.loop.run_automa_turns()
        if not result.success:
            return self._error_from_result(result)
        return self._turn_response(session, TurnResult(success=True, loop_state=result.loop_state), automa=result)

    def best_moves(
        self,
        session_id: str,
        tile: int,
        player_id: str | None = None,
        limit: int | None = None,
    ) -> BestMovesResponse | ErrorResponse:
        session = self.session_manager.require_session(session_id)
        state = session.game_state
        board = self._board(session, player_id)
        if board is None:
            return ErrorResponse(error=f"Unknown player {player_id}", error_code=ErrorCode.VALIDATION_ERROR)

        moves = MoveGenerator(config=state.config).best_moves(state, tile, board=board, limit=limit)
        return BestMovesResponse(
            session_id=session_id,
            player_id=board.player_id,
            tile=tile,
            moves=[self._move_info(m) for m in moves],
        )

    def recommendation(self, session_id: str) -> RecommendationResponse:
        """Draw recommendation for the player whose turn it is."""
        session = self.session_manager.require_session(session_id)
        state = session.game_state
        rec = DrawRecommender(config=state.config).recommend(state)
        player_id = state.current_board.player_id
        if rec is None:
            return RecommendationResponse(session_id=session_id, player_id=player_id, recommended=False)
        return RecommendationResponse(
            session_id=session_id,
            player_id=player_id,
            recommended=True,
            tile=rec.tile,
            source=DrawSource(rec.source.value),
            score=rec.score,
            move=self._move_info(rec.move),
            weak_cell=CellInfo(row=rec.weak_cell.row, col=rec.weak_cell.col) if rec.weak_cell else None,
        )

    def check(
        self,
        session_id: str,
        tile: int,
        row: int,
        col: int,
        player_id: str | None = None,
    ) -> CheckResponse | ErrorResponse:
        """Legality and feasibility of `tile` at (row, col)."""
        session = self.session_manager.require_session(session_id)
        state = session.game_state
        board = self._board(session, player_id)
        if board is None:
            return ErrorResponse(error=f"Unknown player {player_id}", error_code=ErrorCode.VALIDATION_ERROR)

        cell = Cell(row, col)
        return CheckResponse(
            session_id=session_id,
            player_id=board.player_id,
            tile=tile,
            row=row,
            col=col,
            legal=is_legal(board.grid, tile, cell, state.config.max_tile),
            feasible=is_playable(state, cell, tile, board=board),
            remaining_copies=remaining_counts(state)[tile],
        )

    # =========================================================================
    # Helper methods
    # =========================================================================

    def _board(self, session: Session, player_id: str | None) -> Board | None:
        state = session.game_state
        if player_id is None:
            return state.current_board
        return state.get_board(player_id)

    def _status(self, session: Session) -> SessionStatus:
        return self._loop_state_to_status(session.loop.loop_state)

    def _loop_state_to_status(self, loop_state: LoopState) -> SessionStatus:
        """Convert loop state to API status."""
        mapping = {
            LoopState.WAITING_DRAW: SessionStatus.WAITING_DRAW,
            LoopState.WAITING_MOVE: SessionStatus.WAITING_MOVE,
            LoopState.RUNNING_AUTOMA: SessionStatus.AUTOMA_THINKING,
            LoopState.GAME_OVER: SessionStatus.GAME_OVER,
        }
        return mapping[loop_state]

    def _players(self, session: Session) -> list[PlayerInfo]:
        state = session.game_state
        return [
            PlayerInfo(
                player_id=board.player_id,
                name=board.name,
                is_automated=board.is_automated,
                is_current_turn=idx == state.current_player_idx,
            )
            for idx, board in enumerate(state.boards)
        ]

    def _session_to_response(
        self,
        session: Session,
        instructions: list[str] | None = None,
    ) -> SessionResponse:
        """Convert Session to SessionResponse."""
        state = session.game_state
        return SessionResponse(
            session_id=session.session_id,
            status=self._status(session),
            players=self._players(session),
            current_turn_player_id=state.current_board.player_id,
            turn_number=state.turn_number,
            created_at=session.created_at,
            instructions=instructions or [],
        )

    def _build_game_state(self, session: Session) -> GameStateResponse:
        state = session.game_state
        boards = [
            BoardInfo(
                player_id=board.player_id,
                name=board.name,
                is_automated=board.is_automated,
                is_current_turn=idx == state.current_player_idx,
                grid=board.grid.to_rows(),
                empty_cells=board.grid.empty_count(),
            )
            for idx, board in enumerate(state.boards)
        ]
        return GameStateResponse(
            session_id=session.session_id,
            status=self._status(session),
            turn_number=state.turn_number,
            boards=boards,
            table=list(state.table.tiles),
            draw_pile_size=len(state.draw_pile),
            held_tile=state.held_tile,
            current_turn_player_id=state.current_board.player_id,
            analyze=state.analyze,
            bruno_variant=state.bruno_variant,
            winner_id=state.winner_id,
            game_over_reason=state.game_over_reason,
        )

    def _turn_response(
        self,
        session: Session,
        result: TurnResult,
        automa: TurnResult | None = None,
    ) -> TurnResponse:
        return TurnResponse(
            session_id=session.session_id,
            success=result.success,
            status=self._status(session),
            tile=result.tile,
            extra_turn=result.extra_turn,
            actions=result.actions,
            automa_actions=automa.actions if automa else [],
            automa_instructions=automa.instructions if automa else [],
            game_state=self._build_game_state(session),
        )

    def _move_info(self, move: Move) -> MoveInfo:
        if isinstance(move, Place):
            return MoveInfo(
                move_type=MoveKind.PLACE, tile=move.tile,
                row=move.cell.row, col=move.cell.col,
                score=move.score, description=describe(move),
            )
        if isinstance(move, Swap):
            return MoveInfo(
                move_type=MoveKind.SWAP, tile=move.tile,
                row=move.cell.row, col=move.cell.col, old_tile=move.old_tile,
                score=move.score, description=describe(move),
            )
        return MoveInfo(move_type=MoveKind.DISCARD, tile=move.tile, score=move.score, description=describe(move))

    def _error_from_result(self, result: TurnResult) -> ErrorResponse:
        try:
            code = ErrorCode(result.error_code)
        except ValueError:
            code = ErrorCode.INTERNAL_ERROR
        message = "; ".join(result.errors) or "Request rejected"
        logger.debug("Rejected request: %s (%s)", message, code.value)
        return ErrorResponse(error=message, error_code=code)
