"""
API Service - Business logic layer between API and engine.

The service:
1. Translates requests to engine calls
2. Manages sessions and their game loops
3. Formats board snapshots for clients

This layer is framework-agnostic (can be used with FastAPI, a CLI, tests, etc.)
Expected failures come back as ErrorResponse values, not exceptions.
"""

from __future__ import annotations
from dataclasses import dataclass, field
import logging

from .schemas import (
    # Requests
    CreateSessionRequest,
    MoveRequest,
    # Responses
    BoardSetupResponse,
    BoardStateResponse,
    ErrorResponse,
    MoveResponse,
    SessionResponse,
    # Shared
    FieldInfo,
    PlayerInfo,
    StoneInfo,
    # Enums
    ErrorCode,
    PlayerId,
    SessionStatus,
    StoneKind,
)
from ..engine_core.errors import InvalidBoardSize
from ..engine_core.state import BoardState, Player, Position
from ..notation import format_move, square_name
from ..session import GameLoop, Session, SessionManager, SessionState


logger = logging.getLogger(__name__)

_PLAYER_IDS = {
    Player.FIRST: PlayerId.FIRST,
    Player.SECOND: PlayerId.SECOND,
    Player.BOTH: PlayerId.BOTH,
    Player.NONE: PlayerId.NONE,
}

_SESSION_STATUS = {
    SessionState.ACTIVE: SessionStatus.ACTIVE,
    SessionState.GAME_OVER: SessionStatus.GAME_OVER,
    SessionState.ABANDONED: SessionStatus.ABANDONED,
}


@dataclass
class APIService:
    """
    Main API service.

    Usage:
        service = APIService()

        # Create session
        session_response = service.create_session(CreateSessionRequest(board_size=5))

        # Play
        move_response = service.submit_move(session_id, MoveRequest(notation="a0"))

        # Render
        board_response = service.get_board(session_id)
    """
    session_manager: SessionManager = field(default_factory=SessionManager)

    # Game loops per session
    _game_loops: dict[str, GameLoop] = field(default_factory=dict)

    def get_board_setup(self, board_size: int) -> BoardSetupResponse | ErrorResponse:
        """Look up the starting reserve for a board size."""
        setup = BoardState.get_board_setup(board_size)
        if setup is None:
            return ErrorResponse(
                error=f"No setup known for board size {board_size}",
                error_code=ErrorCode.INVALID_BOARD_SIZE,
                details={"board_size": board_size},
            )
        num_stones, num_capstones = setup
        return BoardSetupResponse(board_size=board_size, num_stones=num_stones, num_capstones=num_capstones)

    def create_session(self, request: CreateSessionRequest) -> SessionResponse | ErrorResponse:
        """
        Create a new game session.
        """
        try:
            session = self.session_manager.create_session(
                board_size=request.board_size,
                player_names=(request.first_player_name, request.second_player_name),
            )
        except InvalidBoardSize as e:
            logger.warning("Session not created: %s", e)
            return ErrorResponse(
                error=str(e),
                error_code=ErrorCode.INVALID_BOARD_SIZE,
                details={"board_size": request.board_size},
            )

        self._game_loops[session.session_id] = GameLoop(session)
        return self._session_to_response(session)

    def get_session(self, session_id: str) -> SessionResponse | ErrorResponse:
        """
        Get session status.
        """
        session = self.session_manager.get_session(session_id)
        if not session:
            return self._session_not_found(session_id)
        return self._session_to_response(session)

    def get_board(self, session_id: str) -> BoardStateResponse | ErrorResponse:
        """
        Get a full board snapshot for rendering.
        """
        session = self.session_manager.get_session(session_id)
        if not session:
            return self._session_not_found(session_id)

        board = session.board
        return BoardStateResponse(
            session_id=session.session_id,
            status=_SESSION_STATUS[session.state],
            board_size=board.board_size,
            fields=[self._field_info(board, pos) for pos in board.positions()],
            players=self._player_infos(session),
            current_player=self._current_player(session),
            history=[format_move(move) for move in board.history],
            is_consistent=board.verify_state(),
        )

    def submit_move(self, session_id: str, request: MoveRequest) -> MoveResponse | ErrorResponse:
        """
        Submit a move in notation for the player to act next.
        """
        session = self.session_manager.get_session(session_id)
        game_loop = self._game_loops.get(session_id)
        if not session or not game_loop:
            return self._session_not_found(session_id)

        result = game_loop.submit_notation(request.notation)
        if not result.success:
            return ErrorResponse(
                error="; ".join(result.errors),
                error_code=ErrorCode(result.error_code or ErrorCode.ILLEGAL_MOVE),
                details={"notation": request.notation},
            )

        return MoveResponse(
            session_id=session_id,
            accepted=True,
            move=result.move_text,
            status=_SESSION_STATUS[session.state],
            next_player=_PLAYER_IDS[result.next_player],
            winner=_PLAYER_IDS[result.winner],
            score=result.score,
        )

    def end_session(self, session_id: str, reason: str = "user_ended") -> bool:
        """
        End a game session.
        """
        self._game_loops.pop(session_id, None)
        return self.session_manager.end_session(session_id, reason)

    def cleanup_stale_sessions(self, max_age_seconds: int = 3600) -> int:
        """
        Remove finished sessions older than max_age, with their game loops.

        Returns the number of sessions removed.
        """
        before = set(self.session_manager.list_sessions())
        removed = self.session_manager.cleanup_stale_sessions(max_age_seconds)
        for session_id in before - set(self.session_manager.list_sessions()):
            self._game_loops.pop(session_id, None)
        return removed

    def list_sessions(self) -> list[str]:
        """
        List IDs of sessions held in memory.
        """
        return self.session_manager.list_sessions()

    # =========================================================================
    # Helper methods
    # =========================================================================

    @staticmethod
    def _session_not_found(session_id: str) -> ErrorResponse:
        return ErrorResponse(
            error="Session not found",
            error_code=ErrorCode.SESSION_NOT_FOUND,
            details={"session_id": session_id},
        )

    def _session_to_response(self, session: Session) -> SessionResponse:
        """Convert Session to SessionResponse."""
        return SessionResponse(
            session_id=session.session_id,
            status=_SESSION_STATUS[session.state],
            board_size=session.board.board_size,
            players=self._player_infos(session),
            current_player=self._current_player(session),
            turn_number=len(session.board.history),
            winner=_PLAYER_IDS[session.winner],
            score=session.score,
            created_at=session.created_at,
        )

    @staticmethod
    def _current_player(session: Session) -> PlayerId:
        if not session.is_active():
            return PlayerId.NONE
        return _PLAYER_IDS[session.board.active_player()]

    def _player_infos(self, session: Session) -> list[PlayerInfo]:
        current = self._current_player(session)
        players = []
        for player in (Player.FIRST, Player.SECOND):
            reserve = session.board.get_player_state(player)
            players.append(
                PlayerInfo(
                    player=_PLAYER_IDS[player],
                    name=session.player_name(player),
                    num_stones=reserve.num_stones,
                    num_capstones=reserve.num_capstones,
                    is_current_turn=current == _PLAYER_IDS[player],
                )
            )
        return players

    @staticmethod
    def _field_info(board: BoardState, pos: Position) -> FieldInfo:
        stack = board.field_at(pos)
        return FieldInfo(
            x=pos.x,
            y=pos.y,
            square=square_name(pos),
            stones=[
                StoneInfo(owner=_PLAYER_IDS[stone.owner], stone_type=StoneKind(stone.stone_type.value))
                for stone in stack
            ],
            controlled_by=_PLAYER_IDS[stack.controlling_player()],
        )
