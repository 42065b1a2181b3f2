"""
Notation - Text form of Tak moves.

Used at the boundary (CLI, API) to turn typed moves into Move values
and back. The engine itself never parses text.
"""

from .ptn import (
    DIRECTION_SYMBOLS,
    STONE_SYMBOLS,
    format_move,
    move_from_notation,
    parse_move,
    parse_square,
    square_name,
)

__all__ = [
    "DIRECTION_SYMBOLS",
    "STONE_SYMBOLS",
    "format_move",
    "move_from_notation",
    "parse_move",
    "parse_square",
    "square_name",
]
