"""
Move Notation - Parse and format moves as short text tokens.

Grammar:
    placement  := [F|S|C] square              e.g. "a0", "Sb2", "Cc1"
    movement   := [count] square dir [drops]  e.g. "b1>", "3b1+", "3b1<21"
    square     := column letter (a..) + row digit (0..), both < board size
    dir        := '<' left | '>' right | '+' up | '-' down

A movement without drop digits drops the whole lifted count on one field.
The count defaults to 1 without drops, and to the sum of the drops otherwise.
"""

from __future__ import annotations
from typing import TYPE_CHECKING

from ..engine_core.action import Move, MoveStack, PlaceStone
from ..engine_core.errors import NotationSyntaxError
from ..engine_core.state import Direction, Player, Position, Stone, StoneType

if TYPE_CHECKING:
    from ..engine_core.state import BoardState


STONE_SYMBOLS: dict[str, StoneType] = {
    "F": StoneType.FLAT,
    "S": StoneType.STANDING,
    "C": StoneType.CAPSTONE,
}

DIRECTION_SYMBOLS: dict[str, Direction] = {
    "<": Direction.LEFT,
    ">": Direction.RIGHT,
    "+": Direction.UP,
    "-": Direction.DOWN,
}

_STONE_PREFIX = {stone_type: symbol for symbol, stone_type in STONE_SYMBOLS.items()}
_DIRECTION_SUFFIX = {direction: symbol for symbol, direction in DIRECTION_SYMBOLS.items()}


def square_name(position: Position) -> str:
    """Name of a field, e.g. Position(1, 2) -> 'b2'."""
    return f"{chr(ord('a') + position.x)}{position.y}"


def parse_square(token: str, board_size: int, text: str | None = None) -> Position:
    """Parse a square name like 'c3' into a Position on a board of board_size."""
    text = token if text is None else text
    if len(token) != 2:
        raise NotationSyntaxError(token, text, "invalid square name")

    column, row = token[0], token[1]
    if not ("a" <= column <= "z"):
        raise NotationSyntaxError(column, text, "invalid column")
    if not row.isdigit() or not row.isascii():
        raise NotationSyntaxError(row, text, "invalid row")

    x = ord(column) - ord("a")
    y = int(row)
    if x >= board_size:
        raise NotationSyntaxError(column, text, "column outside the board")
    if y >= board_size:
        raise NotationSyntaxError(row, text, "row outside the board")
    return Position(x, y)


def parse_move(text: str, board_size: int, actor: Player, opening: bool = False) -> Move:
    """
    Parse one move token.

    Args:
        text: Move text, surrounding whitespace is ignored
        board_size: Size of the board the move is meant for
        actor: Player making the move
        opening: True during the first two turns; placements then
            put down the other player's stone

    Raises:
        NotationSyntaxError naming the offending substring
    """
    token = text.strip()
    if not token:
        raise NotationSyntaxError(text, text, "empty move")

    direction_indices = [i for i, char in enumerate(token) if char in DIRECTION_SYMBOLS]
    if len(direction_indices) > 1:
        raise NotationSyntaxError(token[direction_indices[1]], token, "more than one direction")
    if direction_indices:
        return _parse_movement(token, direction_indices[0], board_size, actor)
    return _parse_placement(token, board_size, actor, opening)


def _parse_placement(token: str, board_size: int, actor: Player, opening: bool) -> PlaceStone:
    stone_type = StoneType.FLAT
    square = token
    if len(token) == 3:
        if token[0] not in STONE_SYMBOLS:
            raise NotationSyntaxError(token[0], token, "invalid stone type")
        stone_type = STONE_SYMBOLS[token[0]]
        square = token[1:]
    elif len(token) != 2:
        raise NotationSyntaxError(token, token, "invalid placement")

    position = parse_square(square, board_size, token)
    owner = actor.other if opening else actor
    return PlaceStone(actor=actor, stone=Stone(owner=owner, stone_type=stone_type), position=position)


def _parse_movement(token: str, split: int, board_size: int, actor: Player) -> MoveStack:
    head, symbol, tail = token[:split], token[split], token[split + 1:]

    count = None
    square = head
    if len(head) == 3:
        if not head[0].isdigit() or not head[0].isascii() or head[0] == "0":
            raise NotationSyntaxError(head[0], token, "invalid stone count")
        count = int(head[0])
        square = head[1:]
    elif len(head) != 2:
        raise NotationSyntaxError(head or symbol, token, "invalid movement start")
    start = parse_square(square, board_size, token)

    drops = []
    for char in tail:
        if not char.isdigit() or not char.isascii() or char == "0":
            raise NotationSyntaxError(char, token, "invalid drop count")
        drops.append(int(char))

    if not drops:
        drops = [count or 1]
    elif count is not None and count != sum(drops):
        raise NotationSyntaxError(head[0], token, "stone count does not match drops")

    return MoveStack(
        actor=actor,
        start_position=start,
        direction=DIRECTION_SYMBOLS[symbol],
        drops_per_field=tuple(drops),
    )


def move_from_notation(board: BoardState, text: str) -> Move:
    """Parse a move for the player to act next on `board`."""
    return parse_move(text, board.board_size, board.active_player(), opening=board.is_opening)


def format_move(move: Move) -> str:
    """Canonical text of a move. Parsing it back gives an equivalent move."""
    if isinstance(move, PlaceStone):
        prefix = "" if move.stone.stone_type == StoneType.FLAT else _STONE_PREFIX[move.stone.stone_type]
        return f"{prefix}{square_name(move.position)}"

    if isinstance(move, MoveStack):
        taken = move.stones_taken
        count = str(taken) if taken > 1 else ""
        drops = "".join(str(d) for d in move.drops_per_field) if len(move.drops_per_field) > 1 else ""
        return f"{count}{square_name(move.start_position)}{_DIRECTION_SUFFIX[move.direction]}{drops}"

    raise TypeError(f"Cannot format move type: {type(move).__name__}")
