"""
Tests for sessions and the game loop.

Tests:
- Session lifecycle in the manager
- Turn order and game-over handling in the loop
- A complete game on a 3x3 board
"""

import time

import pytest

from ..engine_core.action import MoveStack, PlaceStone
from ..engine_core.errors import InvalidBoardSize
from ..engine_core.state import Direction, Player, Position, StoneType
from ..session import GameLoop, LoopState, SessionManager, SessionState


# First builds a road along row 1 while Second scatters
ROAD_GAME = ["c2", "c0", "a1", "a2", "b1", "b0", "c1"]


@pytest.fixture
def manager():
    return SessionManager()


@pytest.fixture
def session(manager):
    return manager.create_session(3, player_names=("Alice", "Bob"))


class TestSessionManager:
    """Tests for the session lifecycle."""

    def test_create_session(self, manager):
        session = manager.create_session(5)

        assert session.is_active()
        assert session.board.board_size == 5
        assert session.player_names == ("First", "Second")
        assert session.winner == Player.NONE
        assert session.score == -1
        assert manager.get_session(session.session_id) is session

    def test_invalid_board_size(self, manager):
        with pytest.raises(InvalidBoardSize):
            manager.create_session(9)
        assert manager.list_sessions() == []

    def test_player_names(self, session):
        assert session.player_name(Player.FIRST) == "Alice"
        assert session.player_name(Player.SECOND) == "Bob"
        assert session.player_name(Player.BOTH) == "both"

    def test_exactly_two_names(self, manager):
        with pytest.raises(ValueError):
            manager.create_session(5, player_names=("Solo",))

    def test_unique_ids(self, manager):
        ids = {manager.create_session(4).session_id for _ in range(5)}
        assert len(ids) == 5

    def test_end_session(self, manager, session):
        assert manager.end_session(session.session_id, "test")

        assert session.state == SessionState.ABANDONED
        assert session.metadata["end_reason"] == "test"
        assert manager.get_session(session.session_id) is None
        assert not manager.end_session(session.session_id)

    def test_list_active_sessions(self, manager):
        playing = manager.create_session(5)
        finished = manager.create_session(5)
        finished.state = SessionState.GAME_OVER

        assert manager.list_active_sessions() == [playing.session_id]
        assert set(manager.list_sessions()) == {playing.session_id, finished.session_id}

    def test_cleanup_stale_sessions(self, manager):
        """Only finished sessions past their age are removed."""
        old_finished = manager.create_session(5)
        old_finished.state = SessionState.GAME_OVER
        old_finished.created_at = time.time() - 7200

        old_active = manager.create_session(5)
        old_active.created_at = time.time() - 7200

        new_finished = manager.create_session(5)
        new_finished.state = SessionState.GAME_OVER

        assert manager.cleanup_stale_sessions(max_age_seconds=3600) == 1
        assert manager.get_session(old_finished.session_id) is None
        assert manager.get_session(old_active.session_id) is old_active
        assert manager.get_session(new_finished.session_id) is new_finished
        assert old_finished.state == SessionState.GAME_OVER


class TestGameLoop:
    """Tests for submitting moves."""

    def test_opening_move(self, session):
        loop = GameLoop(session)

        result = loop.submit_notation("c2")

        assert result.success
        assert result.move_text == "c2"
        assert result.next_player == Player.SECOND
        assert result.loop_state == LoopState.WAITING_MOVE
        assert not result.game_over
        assert session.board.field_at(2, 2).controlling_player() == Player.SECOND

    def test_syntax_error(self, session):
        loop = GameLoop(session)

        result = loop.submit_notation("z9")

        assert not result.success
        assert result.error_code == "NOTATION_SYNTAX"
        assert result.next_player == Player.FIRST
        assert session.board.history == []

    def test_illegal_move(self, session):
        loop = GameLoop(session)
        loop.submit_notation("c2")

        result = loop.submit_notation("c2")

        assert not result.success
        assert result.error_code == "ILLEGAL_MOVE"
        assert len(session.board.history) == 1

    def test_wrong_player_placement(self, session):
        loop = GameLoop(session)

        result = loop.submit_move(PlaceStone.opening(Player.SECOND, Position(0, 0)))

        assert not result.success
        assert result.error_code == "ILLEGAL_MOVE"
        assert result.errors == ["Not Bob's turn"]

    def test_wrong_player_stack_move(self, session):
        """Turn order is enforced for stack moves too."""
        loop = GameLoop(session)
        for text in ["a0", "c2", "b1"]:
            assert loop.submit_notation(text).success

        # Second to move, but First tries to move its own stack
        move = MoveStack(Player.FIRST, Position(1, 1), Direction.UP, (1,))
        result = loop.submit_move(move)

        assert not result.success
        assert result.error_code == "ILLEGAL_MOVE"
        assert session.board.field_at(1, 1).count == 1

    def test_stack_move_by_notation(self, session):
        loop = GameLoop(session)
        for text in ["a0", "c2", "b1", "b0"]:
            assert loop.submit_notation(text).success

        result = loop.submit_notation("b1+")

        assert result.success
        assert result.move_text == "b1+"
        assert session.board.field_at(1, 2).controlling_player() == Player.FIRST

    def test_full_game(self, session):
        loop = GameLoop(session)

        for text in ROAD_GAME[:-1]:
            result = loop.submit_notation(text)
            assert result.success, result.errors
            assert not result.game_over

        result = loop.submit_notation(ROAD_GAME[-1])

        assert result.success
        assert result.game_over
        assert result.winner == Player.FIRST
        assert result.score == 15
        assert result.next_player == Player.NONE
        assert session.state == SessionState.GAME_OVER
        assert session.winner == Player.FIRST
        assert session.score == 15
        assert len(session.board.history) == len(ROAD_GAME)

    def test_no_moves_after_game_over(self, session):
        loop = GameLoop(session)
        for text in ROAD_GAME:
            loop.submit_notation(text)

        result = loop.submit_notation("a0")

        assert not result.success
        assert result.error_code == "GAME_OVER"
        assert len(session.board.history) == len(ROAD_GAME)

        move = PlaceStone.of(Player.SECOND, StoneType.FLAT, Position(0, 0))
        assert loop.submit_move(move).error_code == "GAME_OVER"

    def test_new_loop_on_finished_session(self, session):
        for text in ROAD_GAME:
            GameLoop(session).submit_notation(text)

        loop = GameLoop(session)

        assert loop.state == LoopState.GAME_OVER
        assert loop.submit_notation("a0").error_code == "GAME_OVER"

    def test_abandoned_session(self, manager, session):
        loop = GameLoop(session)
        manager.end_session(session.session_id)

        result = loop.submit_notation("a0")

        assert not result.success
        assert result.error_code == "GAME_OVER"
