"""
Tests for session lifecycle.
"""

import pytest

from ..bots.personality import BALANCED, CAUTIOUS, GREEDY
from ..errors import SessionNotFoundError
from ..session import LoopState, SessionManager, SessionState
from .conftest import BOARD_ONE, BOARD_TWO, make_state


@pytest.fixture
def manager():
    return SessionManager()


class TestCreate:
    """Tests for creating sessions."""

    def test_new_game(self, manager):
        session = manager.create_session(num_humans=1, num_bots=1, random_seed=42)

        assert session.is_active()
        assert session.is_human_turn()
        assert session.loop.loop_state == LoopState.WAITING_DRAW
        assert session.game_state.num_players == 2
        assert set(session.bots) == {"bot_1"}

    def test_personality_for_every_bot(self, manager):
        session = manager.create_session(num_humans=1, num_bots=2, personality="greedy", random_seed=1)
        assert all(bot.personality is GREEDY for bot in session.bots.values())

    def test_personalities_cycle_by_default(self, manager):
        session = manager.create_session(num_humans=1, num_bots=2, random_seed=1)
        assert session.bots["bot_1"].personality is BALANCED
        assert session.bots["bot_2"].personality is CAUTIOUS

    def test_unknown_personality(self, manager):
        with pytest.raises(ValueError):
            manager.create_session(personality="reckless")

    def test_bad_player_count(self, manager):
        with pytest.raises(ValueError):
            manager.create_session(num_humans=0, num_bots=0)

    def test_automas_seated_first_play_immediately(self, manager):
        state = make_state(
            [BOARD_ONE, BOARD_TWO],
            pile=[3, 8, 12],
            current=1,
            automated=[False, True],
        )
        session = manager.create_from_state(state, seed=3)

        assert session.is_human_turn()
        instructions = session.get_instructions()
        assert instructions
        assert all(line.startswith("Computer 2: ") for line in instructions[:1])
        assert session.get_instructions() == []


class TestLookup:
    """Tests for finding and ending sessions."""

    def test_get_and_require(self, manager):
        session = manager.create_session(random_seed=2)
        assert manager.get_session(session.session_id) is session
        assert manager.require_session(session.session_id) is session

    def test_missing_session(self, manager):
        assert manager.get_session("nope") is None
        with pytest.raises(SessionNotFoundError) as excinfo:
            manager.require_session("nope")
        assert excinfo.value.session_id == "nope"

    def test_end_session(self, manager):
        session = manager.create_session(random_seed=2)
        assert manager.end_session(session.session_id)
        assert session.state == SessionState.GAME_OVER
        assert not manager.end_session(session.session_id)
        assert manager.list_sessions() == []

    def test_list_active(self, manager):
        first = manager.create_session(random_seed=1)
        second = manager.create_session(random_seed=2)
        second.state = SessionState.ABANDONED
        assert manager.list_active_sessions() == [first.session_id]

    def test_cleanup_stale(self, manager):
        stale = manager.create_session(random_seed=1)
        fresh = manager.create_session(random_seed=2)
        stale.last_active = 0.0

        assert manager.cleanup_stale_sessions(max_age_seconds=60) == 1
        assert stale.state == SessionState.ABANDONED
        assert manager.list_sessions() == [fresh]
