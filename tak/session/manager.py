"""
Session Manager - Creates and manages game sessions.

LIFECYCLE:
1. Caller picks a board size → session created with a fresh BoardState
2. During game:
   - Moves are submitted through the session's GameLoop
   - Engine validates, checks for a win, then applies
3. Game ends (road, flat count or draw) → session marked GAME_OVER
4. Session ended by caller → removed from memory

PERSISTENCE RULES:
- Sessions are in-memory only
- Nothing is written to disk
"""

from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from typing import Any
import logging
import time
import uuid

from ..engine_core.state import BoardState, Player


logger = logging.getLogger(__name__)

DEFAULT_PLAYER_NAMES = ("First", "Second")


class SessionState(Enum):
    """State of a game session."""
    ACTIVE = "active"  # Game in progress
    GAME_OVER = "game_over"  # Road, flat win or draw reached
    ABANDONED = "abandoned"  # Ended before a result


@dataclass
class Session:
    """
    An ephemeral game session.

    Contains:
    - The live board
    - Player display names
    - The result, once the game is decided
    """
    session_id: str
    board: BoardState
    created_at: float

    state: SessionState = SessionState.ACTIVE
    player_names: tuple[str, str] = DEFAULT_PLAYER_NAMES

    # Result (set when the game ends)
    winner: Player = Player.NONE
    score: int = -1

    # Session metadata, e.g. why the session ended
    metadata: dict[str, Any] = field(default_factory=dict)

    def is_active(self) -> bool:
        """Check if session still accepts moves."""
        return self.state == SessionState.ACTIVE

    def is_game_over(self) -> bool:
        return self.state == SessionState.GAME_OVER

    def player_name(self, player: Player) -> str:
        if player in (Player.FIRST, Player.SECOND):
            return self.player_names[player]
        return player.name.lower()


class SessionManager:
    """
    Manages game sessions.

    Responsibilities:
    - Create sessions for a board size
    - Track active sessions
    - Clean up completed sessions

    No persistence - sessions are in-memory only.
    """

    def __init__(self):
        self._sessions: dict[str, Session] = {}

    def create_session(
        self,
        board_size: int,
        player_names: tuple[str, str] | list[str] | None = None,
    ) -> Session:
        """
        Create a new game session.

        Args:
            board_size: Board size, must have a known setup
            player_names: Optional display names for first and second player

        Returns:
            New Session ready for the first move

        Raises:
            InvalidBoardSize if the size has no setup
        """
        board = BoardState.create(board_size)
        names = tuple(player_names) if player_names else DEFAULT_PLAYER_NAMES
        if len(names) != 2:
            raise ValueError("Exactly two player names are required")

        session = Session(
            session_id=str(uuid.uuid4()),
            board=board,
            created_at=time.time(),
            player_names=names,
        )
        self._sessions[session.session_id] = session
        logger.info("Session %s created for a %dx%d board", session.session_id, board_size, board_size)
        return session

    def get_session(self, session_id: str) -> Session | None:
        """Get a session by ID."""
        return self._sessions.get(session_id)

    def end_session(self, session_id: str, reason: str = "completed") -> bool:
        """
        End a session and remove it from memory.

        Returns False if no such session exists.
        """
        session = self._sessions.pop(session_id, None)
        if not session:
            return False
        if session.state == SessionState.ACTIVE:
            session.state = SessionState.ABANDONED
        session.metadata["end_reason"] = reason
        logger.info("Session %s ended (%s)", session_id, reason)
        return True

    def list_active_sessions(self) -> list[str]:
        """List IDs of sessions still in play."""
        return [
            sid for sid, session in self._sessions.items()
            if session.is_active()
        ]

    def list_sessions(self) -> list[str]:
        """List IDs of all sessions held in memory."""
        return list(self._sessions)

    def cleanup_stale_sessions(self, max_age_seconds: int = 3600) -> int:
        """
        Remove finished sessions older than max_age.

        Returns the number of sessions removed.
        """
        current_time = time.time()
        to_remove = [
            session_id
            for session_id, session in self._sessions.items()
            if current_time - session.created_at > max_age_seconds and not session.is_active()
        ]

        for session_id in to_remove:
            self.end_session(session_id, reason="stale")
        return len(to_remove)
