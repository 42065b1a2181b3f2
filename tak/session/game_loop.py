"""
Game Loop - Drives one session move by move.

The loop:
1. Move comes in (as a Move or as notation text)
2. Turn order and game-over are checked
3. The engine checks whether the move ends the game
4. The move is applied to the live board
5. Result is reported; a decided game closes the session
"""

from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING
import logging

from ..engine_core.action import Move
from ..engine_core.errors import NotationSyntaxError
from ..engine_core.reducer import apply_move, rejection_reason
from ..engine_core.state import Player
from ..notation import format_move, move_from_notation

if TYPE_CHECKING:
    from .manager import Session


logger = logging.getLogger(__name__)


class LoopState(Enum):
    """State of the game loop."""
    WAITING_MOVE = "waiting_move"
    GAME_OVER = "game_over"


@dataclass
class TurnResult:
    """Result of submitting one move."""
    success: bool
    loop_state: LoopState

    move_text: str | None = None
    next_player: Player = Player.NONE

    # Errors
    errors: list[str] = field(default_factory=list)
    error_code: str | None = None

    # Game over info
    winner: Player = Player.NONE
    score: int = -1

    @property
    def game_over(self) -> bool:
        return self.loop_state == LoopState.GAME_OVER


class GameLoop:
    """
    The main game loop driver.

    Usage:
        loop = GameLoop(session)

        result = loop.submit_notation("c2")
        if not result.success:
            show_errors(result.errors)
        elif result.game_over:
            announce(result.winner, result.score)
    """

    def __init__(self, session: Session):
        self.session = session
        self.state = LoopState.GAME_OVER if session.is_game_over() else LoopState.WAITING_MOVE

    def submit_notation(self, text: str) -> TurnResult:
        """Parse move text for the player to act and submit it."""
        if self.state == LoopState.GAME_OVER:
            return self._rejected("Game is over - no moves allowed", "GAME_OVER")
        try:
            move = move_from_notation(self.session.board, text)
        except NotationSyntaxError as e:
            return self._rejected(str(e), "NOTATION_SYNTAX")
        return self.submit_move(move)

    def submit_move(self, move: Move) -> TurnResult:
        """
        Submit a move for the active player.

        The win check runs on the candidate before the live board changes.
        """
        from .manager import SessionState

        board = self.session.board
        if self.state == LoopState.GAME_OVER or not self.session.is_active():
            return self._rejected("Game is over - no moves allowed", "GAME_OVER")

        if move.actor != board.active_player():
            return self._rejected(f"Not {self.session.player_name(move.actor)}'s turn", "ILLEGAL_MOVE")

        error = rejection_reason(board, move)
        if error:
            return self._rejected(error, "ILLEGAL_MOVE")

        result = board.check_win(move)
        applied = apply_move(board, move)
        if not applied:
            return self._rejected("Move could not be applied", "ILLEGAL_MOVE")

        move_text = format_move(move)
        logger.debug("Session %s: %s played %s", self.session.session_id, move.actor.name, move_text)

        if result.is_decided:
            self.state = LoopState.GAME_OVER
            self.session.state = SessionState.GAME_OVER
            self.session.winner = result.winner
            self.session.score = result.score
            logger.info(
                "Session %s over: winner=%s score=%d",
                self.session.session_id, result.winner.name, result.score,
            )

        return TurnResult(
            success=True,
            loop_state=self.state,
            move_text=move_text,
            next_player=Player.NONE if result.is_decided else board.active_player(),
            winner=result.winner,
            score=result.score,
        )

    def _rejected(self, error: str, error_code: str) -> TurnResult:
        logger.info("Session %s: move rejected: %s", self.session.session_id, error)
        return TurnResult(
            success=False,
            loop_state=self.state,
            next_player=Player.NONE if self.state == LoopState.GAME_OVER else self.session.board.active_player(),
            errors=[error],
            error_code=error_code,
        )
