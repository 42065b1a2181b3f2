"""
Session Module - Manages ephemeral game sessions.

A session represents one game of Tak:
- Created when a caller starts a game for a board size
- Holds the live board
- Accepts moves through its game loop
- Records the result when the game ends

Sessions are EPHEMERAL: nothing is persisted.
"""

from .manager import SessionManager, Session, SessionState
from .game_loop import GameLoop, LoopState, TurnResult

__all__ = [
    "SessionManager",
    "Session",
    "SessionState",
    "GameLoop",
    "LoopState",
    "TurnResult",
]
