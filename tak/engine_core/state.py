"""
Board State - The authoritative Tak board.

Holds:
- The grid of stone stacks
- Both players' unplaced reserves
- The history of applied moves (its length decides who acts next)

Design principles:
- Mutated in place, but only by the reducer after a move validated in full
- Callers read through copies (field_at, get_player_state)
- Speculative evaluation always works on a clone
"""

from __future__ import annotations
from collections import deque
from dataclasses import dataclass, field, replace
from enum import Enum, IntEnum
from types import MappingProxyType
from typing import TYPE_CHECKING, Any, Iterable, Iterator, NamedTuple
import logging

from .errors import IndexOutOfRange, InvalidBoardSize

if TYPE_CHECKING:
    from .action import Move


logger = logging.getLogger(__name__)


# Unplaced pieces per player: board size -> (stones, capstones)
BOARD_SETUPS: MappingProxyType[int, tuple[int, int]] = MappingProxyType({
    3: (10, 0),
    4: (15, 0),
    5: (21, 1),
    6: (30, 1),
    7: (40, 1),
    8: (50, 2),
})


def get_board_setup(board_size: Any) -> tuple[int, int] | None:
    """Look up (num_stones, num_capstones) for a board size, None if unknown."""
    if isinstance(board_size, bool) or not isinstance(board_size, int):
        return None
    return BOARD_SETUPS.get(board_size)


class Player(IntEnum):
    """Player identifier. FIRST and SECOND double as list indices."""
    FIRST = 0
    SECOND = 1
    BOTH = 2  # Draw marker
    NONE = 3  # No owner / no winner

    @property
    def other(self) -> Player:
        if self == Player.FIRST:
            return Player.SECOND
        if self == Player.SECOND:
            return Player.FIRST
        return Player.NONE


class StoneType(Enum):
    """Type / orientation of a stone."""
    FLAT = "flat"
    STANDING = "standing"
    CAPSTONE = "capstone"


class Direction(Enum):
    """Movement directions, seen from the first player's side."""
    LEFT = "left"
    UP = "up"
    RIGHT = "right"
    DOWN = "down"

    @property
    def vector(self) -> tuple[int, int]:
        return _DIRECTION_VECTORS[self]


_DIRECTION_VECTORS = {
    Direction.LEFT: (-1, 0),
    Direction.UP: (0, 1),
    Direction.RIGHT: (1, 0),
    Direction.DOWN: (0, -1),
}


@dataclass(frozen=True)
class Position:
    """A field coordinate. x grows to the right, y grows upwards."""
    x: int
    y: int

    def offset(self, direction: Direction, distance: int = 1) -> Position:
        dx, dy = direction.vector
        return Position(self.x + dx * distance, self.y + dy * distance)


@dataclass(frozen=True)
class Stone:
    """A single piece: its owner and type."""
    owner: Player
    stone_type: StoneType

    @property
    def is_flat(self) -> bool:
        return self.stone_type == StoneType.FLAT

    def flattened(self) -> Stone:
        """Return this stone laid flat (wall flattening by a capstone)."""
        return Stone(owner=self.owner, stone_type=StoneType.FLAT)


class StoneStack:
    """
    The stones occupying one field, bottom to top.

    Only the top can change: push adds, pop removes. The top stone
    controls the field. Every stone below the top must be flat.
    """

    __slots__ = ("_stones",)

    def __init__(self, stones: Iterable[Stone] = ()):
        self._stones: list[Stone] = list(stones)

    def push(self, stone: Stone) -> None:
        self._stones.append(stone)

    def pop(self) -> Stone:
        if not self._stones:
            raise IndexError("pop from an empty stone stack")
        return self._stones.pop()

    def peek(self) -> Stone | None:
        """Top stone, or None for an empty field."""
        return self._stones[-1] if self._stones else None

    @property
    def count(self) -> int:
        return len(self._stones)

    @property
    def is_empty(self) -> bool:
        return not self._stones

    def controlling_player(self) -> Player:
        """Owner of the top stone, NONE when empty."""
        top = self.peek()
        return top.owner if top else Player.NONE

    def counts_towards_win(self) -> Player:
        """Player this field counts for in a road; walls count for nobody."""
        top = self.peek()
        if top is None or top.stone_type == StoneType.STANDING:
            return Player.NONE
        return top.owner

    def copy(self) -> StoneStack:
        return StoneStack(self._stones)

    def __len__(self) -> int:
        return len(self._stones)

    def __iter__(self) -> Iterator[Stone]:
        """Iterate bottom to top."""
        return iter(tuple(self._stones))

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, StoneStack):
            return NotImplemented
        return self._stones == other._stones

    def __repr__(self) -> str:
        return f"StoneStack({self._stones!r})"


@dataclass
class PlayerState:
    """Unplaced reserve of one player."""
    num_stones: int
    num_capstones: int

    @property
    def num_pieces_total(self) -> int:
        return self.num_stones + self.num_capstones


class WinResult(NamedTuple):
    """Outcome of a win check. score is -1 unless a single player won."""
    winner: Player
    score: int

    @property
    def is_decided(self) -> bool:
        return self.winner != Player.NONE


NO_RESULT = WinResult(Player.NONE, -1)

# Edge flags for the road search
_LEFT, _RIGHT, _BOTTOM, _TOP = 1, 2, 4, 8


@dataclass
class BoardState:
    """
    Complete Tak position at a point in time.

    fields is the live grid, indexed fields[x][y]. It is internal:
    callers read fields through field_at(), which returns copies.
    """
    board_size: int
    fields: list[list[StoneStack]] = field(default_factory=list)
    players: list[PlayerState] = field(default_factory=list)
    history: list[Move] = field(default_factory=list)

    def __post_init__(self):
        setup = get_board_setup(self.board_size)
        if setup is None:
            raise InvalidBoardSize(self.board_size)
        if not self.fields:
            self.fields = [
                [StoneStack() for _ in range(self.board_size)]
                for _ in range(self.board_size)
            ]
        if not self.players:
            num_stones, num_capstones = setup
            self.players = [
                PlayerState(num_stones=num_stones, num_capstones=num_capstones)
                for _ in (Player.FIRST, Player.SECOND)
            ]

    @classmethod
    def create(cls, board_size: int) -> BoardState:
        """Create an empty board with full reserves for both players."""
        return cls(board_size=board_size)

    @staticmethod
    def get_board_setup(board_size: Any) -> tuple[int, int] | None:
        return get_board_setup(board_size)

    def clone(self) -> BoardState:
        """Deep copy: new stacks per field, copied reserves, copied history."""
        return BoardState(
            board_size=self.board_size,
            fields=[[stack.copy() for stack in column] for column in self.fields],
            players=[replace(p) for p in self.players],
            history=list(self.history),
        )

    # =========================================================================
    # Read access
    # =========================================================================

    def is_inside(self, pos: Position) -> bool:
        return 0 <= pos.x < self.board_size and 0 <= pos.y < self.board_size

    def field_at(self, x: int | Position, y: int | None = None) -> StoneStack:
        """Get a copy of the stack at (x, y) or at a Position."""
        return self.stack_at(x, y).copy()

    def stack_at(self, x: int | Position, y: int | None = None) -> StoneStack:
        """Live stack at a field. For the engine and test fixtures only."""
        if isinstance(x, Position):
            x, y = x.x, x.y
        if y is None:
            raise TypeError("field access needs a Position or both x and y")
        if not (0 <= x < self.board_size and 0 <= y < self.board_size):
            raise IndexOutOfRange(x, y, self.board_size)
        return self.fields[x][y]

    def __getitem__(self, key: Position | tuple[int, int]) -> StoneStack:
        if isinstance(key, Position):
            return self.field_at(key)
        x, y = key
        return self.field_at(x, y)

    def positions(self) -> Iterator[Position]:
        """All positions, row by row from the bottom."""
        for y in range(self.board_size):
            for x in range(self.board_size):
                yield Position(x, y)

    def get_player_state(self, player: Player) -> PlayerState:
        """Snapshot of a player's reserve."""
        return replace(self.players[self._player_index(player)])

    def active_player(self) -> Player:
        """Player to make the next move."""
        return Player(len(self.history) % 2)

    @property
    def is_opening(self) -> bool:
        """True during the first two turns (swap placements)."""
        return len(self.history) < 2

    @property
    def is_full(self) -> bool:
        return all(not stack.is_empty for column in self.fields for stack in column)

    # =========================================================================
    # Invariants
    # =========================================================================

    def verify_state(self) -> bool:
        """
        Audit the board.

        Checks:
        - Standing stones and capstones only at the top of stacks
        - Reserve plus on-board pieces add up to the initial allocation

        Returns False on any violation, never raises.
        """
        setup = get_board_setup(self.board_size)
        if setup is None or len(self.players) != 2:
            return False
        stones_on_board = [0, 0]
        capstones_on_board = [0, 0]

        for column in self.fields:
            for stack in column:
                stones = list(stack)
                for height, stone in enumerate(stones):
                    if stone.owner not in (Player.FIRST, Player.SECOND):
                        return False
                    if height != len(stones) - 1 and not stone.is_flat:
                        return False
                    if stone.stone_type == StoneType.CAPSTONE:
                        capstones_on_board[stone.owner] += 1
                    else:
                        stones_on_board[stone.owner] += 1

        initial_stones, initial_capstones = setup
        for player in (Player.FIRST, Player.SECOND):
            reserve = self.players[player]
            if reserve.num_stones + stones_on_board[player] != initial_stones:
                return False
            if reserve.num_capstones + capstones_on_board[player] != initial_capstones:
                return False
        return True

    # =========================================================================
    # Win detection
    # =========================================================================

    def check_win(self, move: Move) -> WinResult:
        """
        Check whether the game ends with the given move.

        The move is applied to a private clone; this board is never touched.
        A road wins for the mover first, then for the other player. Without
        a road, a full board or an empty reserve ends the game by counting
        flat-topped stacks.
        """
        result_board = self.clone()
        move.apply_move(result_board)
        return result_board.evaluate_result(move.actor)

    def evaluate_result(self, mover: Player) -> WinResult:
        """Decide the current position as if `mover` had just moved."""
        roads = self._find_roads(stop_for=mover)
        if mover in roads:
            return self._win_for(mover)
        if mover.other in roads:
            return self._win_for(mover.other)

        flat_winner = self._check_flat_win()
        if flat_winner in (Player.FIRST, Player.SECOND):
            return self._win_for(flat_winner)
        return WinResult(flat_winner, -1)

    def _find_roads(self, stop_for: Player) -> set[Player]:
        """Owners with a completed road. Stops early once `stop_for` has one."""
        size = self.board_size
        visited = [[False] * size for _ in range(size)]
        road_owners: set[Player] = set()

        for start in self._border_positions():
            if visited[start.x][start.y]:
                continue
            owner = self.fields[start.x][start.y].counts_towards_win()
            if owner == Player.NONE or owner in road_owners:
                continue

            edges = self._flood_fill(start, owner, visited)
            if (edges & _LEFT and edges & _RIGHT) or (edges & _BOTTOM and edges & _TOP):
                road_owners.add(owner)
                logger.debug("Road found for %s starting at %s", owner.name, start)
                if owner == stop_for:
                    break

        return road_owners

    def _border_positions(self) -> Iterator[Position]:
        last = self.board_size - 1
        for pos in self.positions():
            if min(pos.x, pos.y) == 0 or max(pos.x, pos.y) == last:
                yield pos

    def _flood_fill(self, start: Position, owner: Player, visited: list[list[bool]]) -> int:
        """Breadth-first search over fields counting for owner. Returns edge flags."""
        last = self.board_size - 1
        edges = 0
        queue = deque([start])
        visited[start.x][start.y] = True

        while queue:
            current = queue.popleft()
            if current.x == 0:
                edges |= _LEFT
            if current.x == last:
                edges |= _RIGHT
            if current.y == 0:
                edges |= _BOTTOM
            if current.y == last:
                edges |= _TOP

            for direction in Direction:
                neighbor = current.offset(direction)
                if not self.is_inside(neighbor) or visited[neighbor.x][neighbor.y]:
                    continue
                if self.fields[neighbor.x][neighbor.y].counts_towards_win() != owner:
                    continue
                visited[neighbor.x][neighbor.y] = True
                queue.append(neighbor)

        return edges

    def _check_flat_win(self) -> Player:
        """Flat count when a reserve is empty or the board is full."""
        reserve_exhausted = any(p.num_pieces_total == 0 for p in self.players)
        if not reserve_exhausted and not self.is_full:
            return Player.NONE

        flat_tops = [0, 0]
        for column in self.fields:
            for stack in column:
                top = stack.peek()
                if top is not None and top.is_flat:
                    flat_tops[top.owner] += 1

        if flat_tops[Player.FIRST] == flat_tops[Player.SECOND]:
            return Player.BOTH
        if flat_tops[Player.FIRST] > flat_tops[Player.SECOND]:
            return Player.FIRST
        return Player.SECOND

    def _win_for(self, winner: Player) -> WinResult:
        logger.debug("Game won by %s", winner.name)
        return WinResult(winner, self.winning_score(winner))

    def winning_score(self, player: Player) -> int:
        """Board area plus unused reserve: faster wins score higher."""
        reserve = self.players[self._player_index(player)]
        return self.board_size * self.board_size + reserve.num_pieces_total

    @staticmethod
    def _player_index(player: Player) -> int:
        if player not in (Player.FIRST, Player.SECOND):
            raise ValueError(f"Not a valid player: {player!r}, only FIRST and SECOND have state")
        return int(player)
