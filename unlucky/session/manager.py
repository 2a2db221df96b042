"""
Session Manager - Creates and manages game sessions.

LIFECYCLE:
1. Caller starts a session -> a fresh game (or a loaded snapshot) is
   wrapped in a GameLoop with one bot per automated board
2. During the game:
   - Humans draw and play through the loop
   - Automas run until a human is to act
   - The engine tells the humans what the automas did
3. Game ends or caller deletes it -> session removed from memory

PERSISTENCE RULES:
- Sessions are in-memory only
- The only persistence is an explicit CSV snapshot (see snapshot.py)
"""

from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
import logging
import random
from typing import Any
import uuid
import time

from ..bots.heuristic_bot import create_automa_team
from ..bots.personality import PERSONALITIES
from ..bots.policy import BotPolicy
from ..engine_core.config import EngineConfig
from ..engine_core.setup import setup_game
from ..engine_core.state import GameState, GamePhase
from ..errors import SessionNotFoundError
from .game_loop import GameLoop

logger = logging.getLogger("unlucky.session")


class SessionState(Enum):
    """State of a game session."""
    ACTIVE = "active"  # Game in progress
    GAME_OVER = "game_over"  # Game completed
    ABANDONED = "abandoned"  # User quit


@dataclass
class Session:
    """
    An ephemeral game session.

    Contains:
    - The game loop (which owns the current GameState)
    - Bots for automas
    - Session metadata
    """
    session_id: str
    loop: GameLoop
    created_at: float

    state: SessionState = SessionState.ACTIVE
    last_active: float = 0.0

    # Instructions for human (from last automa turn)
    pending_instructions: list[str] = field(default_factory=list)

    metadata: dict[str, Any] = field(default_factory=dict)

    @property
    def game_state(self) -> GameState:
        return self.loop.state

    @property
    def bots(self) -> dict[str, BotPolicy]:
        return self.loop.bots

    def is_active(self) -> bool:
        """Check if session is still active."""
        return self.state == SessionState.ACTIVE and self.game_state.phase != GamePhase.GAME_OVER

    def is_human_turn(self) -> bool:
        return self.loop.is_human_turn

    def touch(self) -> None:
        self.last_active = time.time()

    def get_instructions(self) -> list[str]:
        """Get pending instructions for human player."""
        instructions = self.pending_instructions.copy()
        self.pending_instructions.clear()
        return instructions


class SessionManager:
    """
    Manages game sessions.

    Responsibilities:
    - Create sessions (new games or loaded states)
    - Track active sessions
    - Clean up completed sessions

    No persistence - sessions are in-memory only.
    """

    def __init__(self):
        self._sessions: dict[str, Session] = {}

    def create_session(
        self,
        num_humans: int = 1,
        num_bots: int = 1,
        analyze: bool = False,
        bruno_variant: bool = False,
        random_seed: int | None = None,
        diagonals: list[list[int] | None] | None = None,
        personality: str | None = None,
        config: EngineConfig | None = None,
    ) -> Session:
        """
        Create a new game session.

        Args:
            num_humans: Number of human players
            num_bots: Number of automa players
            analyze: Humans declare the tiles they draw
            bruno_variant: Diagonal matches earn an extra turn
            random_seed: Seed for shuffling and bot randomness
            diagonals: Starting diagonals (analyze mode)
            personality: Personality name for every bot; None cycles
                through the presets
            config: Engine configuration

        Returns:
            New Session, already advanced to the first human turn
        """
        rng = random.Random(random_seed)
        state = setup_game(
            num_humans=num_humans,
            num_bots=num_bots,
            analyze=analyze,
            bruno_variant=bruno_variant,
            random_seed=random_seed,
            diagonals=diagonals,
            config=config,
            rng=rng,
        )
        return self.create_from_state(state, personality=personality, seed=random_seed)

    def create_from_state(
        self,
        state: GameState,
        personality: str | None = None,
        seed: int | None = None,
    ) -> Session:
        """Wrap an existing state (e.g. a loaded snapshot) in a session."""
        if personality is not None and personality not in PERSONALITIES:
            raise ValueError(f"Unknown personality: {personality}")

        bot_ids = [b.player_id for b in state.boards if b.is_automated]
        if personality is not None:
            personalities = [PERSONALITIES[personality]] * len(bot_ids)
        else:
            names = list(PERSONALITIES.keys())
            personalities = [PERSONALITIES[names[i % len(names)]] for i in range(len(bot_ids))]
        bots = create_automa_team(bot_ids, personalities=personalities, seed=seed)

        now = time.time()
        session = Session(
            session_id=str(uuid.uuid4()),
            loop=GameLoop(state, bots=bots),
            created_at=now,
            last_active=now,
        )

        # Automas seated before the first human play straight away
        result = session.loop.run_automa_turns()
        session.pending_instructions.extend(result.instructions)

        self._sessions[session.session_id] = session
        logger.info("Session %s created (%d boards)", session.session_id, state.num_players)
        return session

    def get_session(self, session_id: str) -> Session | None:
        """Get a session by ID."""
        return self._sessions.get(session_id)

    def require_session(self, session_id: str) -> Session:
        """Get a session by ID or raise SessionNotFoundError."""
        session = self._sessions.get(session_id)
        if session is None:
            raise SessionNotFoundError(session_id)
        session.touch()
        return session

    def end_session(self, session_id: str, reason: str = "completed") -> bool:
        """
        End a session and remove it from memory.

        Returns False if there was no such session.
        """
        session = self._sessions.pop(session_id, None)
        if session is None:
            return False
        if reason == "completed":
            session.state = SessionState.GAME_OVER
        else:
            session.state = SessionState.ABANDONED
        session.pending_instructions.clear()
        logger.info("Session %s ended (%s)", session_id, reason)
        return True

    def list_sessions(self) -> list[Session]:
        return list(self._sessions.values())

    def list_active_sessions(self) -> list[str]:
        """List IDs of active sessions."""
        return [
            sid for sid, session in self._sessions.items()
            if session.is_active()
        ]

    def cleanup_stale_sessions(self, max_age_seconds: int = 3600) -> int:
        """
        Remove sessions idle for longer than max_age.

        Returns the number of sessions removed.
        """
        current_time = time.time()
        to_remove = [
            session_id for session_id, session in self._sessions.items()
            if current_time - session.last_active > max_age_seconds
        ]
        for session_id in to_remove:
            self.end_session(session_id, reason="stale")
        return len(to_remove)
