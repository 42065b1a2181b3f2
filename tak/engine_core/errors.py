"""
Engine Errors - Exceptions raised by the rules engine.

Only programming errors and construction errors are raised.
Illegal moves are NOT errors: validation returns False and the
board is left untouched.
"""

from __future__ import annotations
from typing import Any


class TakError(Exception):
    """Base class for all engine errors."""


class InvalidBoardSize(TakError, ValueError):
    """Raised when a board is created for a size with no known setup."""

    def __init__(self, board_size: Any):
        self.board_size = board_size
        super().__init__(
            f"Invalid board size {board_size}: no game configuration is known for this board size"
        )


class IndexOutOfRange(TakError, IndexError):
    """Raised when a field outside [0, board_size) is accessed."""

    def __init__(self, x: int, y: int, board_size: int):
        self.x = x
        self.y = y
        self.board_size = board_size
        super().__init__(
            f"Field ({x}, {y}) is outside a {board_size}x{board_size} board"
        )


class NotationSyntaxError(TakError, ValueError):
    """Raised when move text cannot be parsed."""

    def __init__(self, token: str, text: str | None = None, reason: str = "invalid token"):
        self.token = token
        self.text = text if text is not None else token
        self.reason = reason
        super().__init__(f"{reason}: '{token}' in '{self.text}'")
