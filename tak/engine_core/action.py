"""
Moves - The two kinds of Tak moves.

A move is one of:
1. PlaceStone: put a stone from the reserve on an empty field
2. MoveStack: lift stones off a controlled stack and spread them in a line

The set is closed: Move is the union of both, and the reducer keeps
one validate/apply pair per variant. Moves are immutable values;
an applied move is appended to the board history as-is.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import TYPE_CHECKING, Iterator, Union

from .state import Direction, Player, Position, Stone, StoneType

if TYPE_CHECKING:
    from .state import BoardState


@dataclass(frozen=True)
class PlaceStone:
    """Place `stone` on the empty field at `position`."""
    actor: Player
    stone: Stone
    position: Position

    @classmethod
    def of(cls, actor: Player, stone_type: StoneType, position: Position) -> PlaceStone:
        """Factory for a placement of the actor's own stone."""
        return cls(actor=actor, stone=Stone(owner=actor, stone_type=stone_type), position=position)

    @classmethod
    def opening(cls, actor: Player, position: Position) -> PlaceStone:
        """Factory for a first-turn placement: the opponent's flat stone."""
        return cls(
            actor=actor,
            stone=Stone(owner=actor.other, stone_type=StoneType.FLAT),
            position=position,
        )

    def is_valid_move(self, board: BoardState) -> bool:
        from .reducer import is_valid_move
        return is_valid_move(board, self)

    def apply_move(self, board: BoardState) -> bool:
        from .reducer import apply_move
        return apply_move(board, self)


@dataclass(frozen=True)
class MoveStack:
    """
    Lift stones from `start_position` and move them towards `direction`.

    drops_per_field[i] stones are dropped on the (i+1)-th field along the
    way, taken from the bottom of the lifted group.
    """
    actor: Player
    start_position: Position
    direction: Direction
    drops_per_field: tuple[int, ...]

    def __post_init__(self):
        # Accept any sequence, store an immutable copy
        object.__setattr__(self, "drops_per_field", tuple(self.drops_per_field))

    @property
    def stones_taken(self) -> int:
        return sum(self.drops_per_field)

    def destinations(self) -> Iterator[Position]:
        """Fields the stack passes over, in order."""
        for step in range(1, len(self.drops_per_field) + 1):
            yield self.start_position.offset(self.direction, step)

    def is_valid_move(self, board: BoardState) -> bool:
        from .reducer import is_valid_move
        return is_valid_move(board, self)

    def apply_move(self, board: BoardState) -> bool:
        from .reducer import apply_move
        return apply_move(board, self)


Move = Union[PlaceStone, MoveStack]
