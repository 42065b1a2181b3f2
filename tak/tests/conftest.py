"""
Pytest fixtures for Tak tests.
"""

import pytest

from ..engine_core.action import PlaceStone
from ..engine_core.state import BoardState, Player, Position, Stone, StoneType


def put(board: BoardState, x: int, y: int, owner: Player, stone_type: StoneType = StoneType.FLAT):
    """Push a stone straight onto a field, bypassing the rules (fixtures only)."""
    board.stack_at(x, y).push(Stone(owner=owner, stone_type=stone_type))


def play(board: BoardState, *moves):
    """Apply moves in order, failing the test on the first rejection."""
    for move in moves:
        assert move.apply_move(board), f"Move rejected: {move!r}"
    return board


@pytest.fixture
def board() -> BoardState:
    """Empty 5x5 board."""
    return BoardState.create(5)


@pytest.fixture
def opened_board() -> BoardState:
    """
    5x5 board after both opening placements.

    First put Second's flat at (0, 4), Second put First's flat at (4, 0).
    First is to move.
    """
    board = BoardState.create(5)
    return play(
        board,
        PlaceStone.opening(Player.FIRST, Position(0, 4)),
        PlaceStone.opening(Player.SECOND, Position(4, 0)),
    )
