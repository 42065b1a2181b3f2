"""
Reducer - Validates and applies moves to a board.

The reducer is the single point of board mutation.
All moves go through apply_move().

Design principles:
- Validate in full before touching the board
- A rejected move is a normal outcome: False, board unchanged
- One validate/apply pair per move variant, dispatched by type
"""

from __future__ import annotations
from typing import Callable
import logging

from .action import Move, MoveStack, PlaceStone
from .state import BoardState, Player, StoneType


logger = logging.getLogger(__name__)


class Reducer:
    """
    Applies moves to a board state.

    Stateless - all state is in BoardState.
    Validators return an error message for an illegal move, None if legal.
    """

    def __init__(self):
        self._validators: dict[type, Callable[[BoardState, Move], str | None]] = {
            PlaceStone: self._validate_place_stone,
            MoveStack: self._validate_move_stack,
        }
        self._appliers: dict[type, Callable[[BoardState, Move], None]] = {
            PlaceStone: self._apply_place_stone,
            MoveStack: self._apply_move_stack,
        }

    def validate(self, board: BoardState, move: Move) -> str | None:
        """
        Check a move against the board without changing it.

        Returns error message if invalid, None if valid.
        """
        return self._handler(self._validators, move)(board, move)

    def apply(self, board: BoardState, move: Move) -> bool:
        """
        Apply a move to the board.

        Returns False and leaves the board untouched if the move is illegal.
        """
        error = self.validate(board, move)
        if error:
            logger.debug("Rejected %r: %s", move, error)
            return False

        self._handler(self._appliers, move)(board, move)
        board.history.append(move)
        return True

    @staticmethod
    def _handler(table: dict[type, Callable], move: Move) -> Callable:
        handler = table.get(type(move))
        if handler is None:
            raise TypeError(f"No handler for move type: {type(move).__name__}")
        return handler

    # =========================================================================
    # PlaceStone
    # =========================================================================

    def _validate_place_stone(self, board: BoardState, move: PlaceStone) -> str | None:
        stone = move.stone
        if not board.is_inside(move.position):
            return f"Position {move.position} is outside the board"
        if not board.stack_at(move.position).is_empty:
            return f"Field {move.position} is not empty"
        if stone.owner not in (Player.FIRST, Player.SECOND):
            return f"Stone has no valid owner: {stone.owner!r}"

        # Opening: each player places one flat stone of the opponent
        if board.is_opening:
            if stone.owner == move.actor:
                return "First turns must place the opponent's stone"
            if stone.stone_type != StoneType.FLAT:
                return "First turns must place a flat stone"
            return None

        if move.actor != board.active_player():
            return f"Not {move.actor.name}'s turn"
        if stone.owner != move.actor:
            return "Only your own stones can be placed"

        reserve = board.players[stone.owner]
        if stone.stone_type == StoneType.CAPSTONE:
            if reserve.num_capstones <= 0:
                return "No capstones left"
        elif reserve.num_stones <= 0:
            return "No stones left"
        return None

    def _apply_place_stone(self, board: BoardState, move: PlaceStone) -> None:
        stone = move.stone
        board.stack_at(move.position).push(stone)
        reserve = board.players[stone.owner]
        if stone.stone_type == StoneType.CAPSTONE:
            reserve.num_capstones -= 1
        else:
            reserve.num_stones -= 1

    # =========================================================================
    # MoveStack
    # =========================================================================

    def _validate_move_stack(self, board: BoardState, move: MoveStack) -> str | None:
        # First two moves need to be placements
        if board.is_opening:
            return "The first two turns must be placements"
        if not board.is_inside(move.start_position):
            return f"Start position {move.start_position} is outside the board"

        start = board.stack_at(move.start_position)
        top = start.peek()
        if top is None:
            return f"No stack at {move.start_position}"
        if top.owner != move.actor:
            return f"Stack at {move.start_position} is not controlled by {move.actor.name}"

        drops = move.drops_per_field
        if not drops or min(drops) < 1:
            return "Every field passed must receive at least one stone"
        taken = move.stones_taken
        if taken > board.board_size:
            return f"Cannot carry more than {board.board_size} stones"
        if taken > start.count:
            return f"Stack at {move.start_position} has only {start.count} stone(s)"

        # Moving a single capstone last can flatten a wall
        can_flatten = drops[-1] == 1 and top.stone_type == StoneType.CAPSTONE
        last_step = len(drops) - 1
        for step, pos in enumerate(move.destinations()):
            if not board.is_inside(pos):
                return f"Move leaves the board at {pos}"
            target = board.stack_at(pos).peek()
            if target is None or target.stone_type == StoneType.FLAT:
                continue
            if target.stone_type == StoneType.STANDING and can_flatten and step == last_step:
                continue
            return f"Cannot move onto the {target.stone_type.value} stone at {pos}"
        return None

    def _apply_move_stack(self, board: BoardState, move: MoveStack) -> None:
        start = board.stack_at(move.start_position)
        # Lifted stones, bottom-most first
        carried = [start.pop() for _ in range(move.stones_taken)]
        carried.reverse()

        last_step = len(move.drops_per_field) - 1
        index = 0
        for step, (pos, drop) in enumerate(zip(move.destinations(), move.drops_per_field)):
            target = board.stack_at(pos)
            top = target.peek()
            if step == last_step and top is not None and top.stone_type == StoneType.STANDING:
                target.push(target.pop().flattened())
            for stone in carried[index:index + drop]:
                target.push(stone)
            index += drop


_reducer = Reducer()


def is_valid_move(board: BoardState, move: Move) -> bool:
    """Check whether a move is legal on the board. Never mutates."""
    return _reducer.validate(board, move) is None


def rejection_reason(board: BoardState, move: Move) -> str | None:
    """Why a move is illegal, or None if it is legal."""
    return _reducer.validate(board, move)


def apply_move(board: BoardState, move: Move) -> bool:
    """
    Convenience function to apply a move.

    Returns True and records the move in history, or False with the
    board unchanged.
    """
    return _reducer.apply(board, move)
