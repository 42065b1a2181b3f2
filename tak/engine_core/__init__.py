"""
Engine Core - Authoritative Tak board state and move resolution.

The engine is the runtime that:
1. Creates a BoardState for a board size
2. Validates moves against the board
3. Applies moves via the reducer
4. Detects road and flat wins
"""

from .errors import TakError, InvalidBoardSize, IndexOutOfRange, NotationSyntaxError
from .state import (
    BOARD_SETUPS,
    BoardState,
    Direction,
    NO_RESULT,
    Player,
    PlayerState,
    Position,
    Stone,
    StoneStack,
    StoneType,
    WinResult,
    get_board_setup,
)
from .action import Move, MoveStack, PlaceStone
from .reducer import Reducer, apply_move, is_valid_move, rejection_reason

__all__ = [
    "TakError",
    "InvalidBoardSize",
    "IndexOutOfRange",
    "NotationSyntaxError",
    "BOARD_SETUPS",
    "BoardState",
    "Direction",
    "NO_RESULT",
    "Player",
    "PlayerState",
    "Position",
    "Stone",
    "StoneStack",
    "StoneType",
    "WinResult",
    "get_board_setup",
    "Move",
    "MoveStack",
    "PlaceStone",
    "Reducer",
    "apply_move",
    "is_valid_move",
    "rejection_reason",
]
