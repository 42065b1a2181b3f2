# ascii_board.py  – plain-text Tak board renderer
# -------------------------------------------------
from .engine_core.state import BoardState, Player, StoneType

STONE_SYMBOLS = {
    StoneType.FLAT: "F",
    StoneType.STANDING: "S",
    StoneType.CAPSTONE: "C",
}
EMPTY_FIELD = "."


def field_label(stack):
    """Top stone symbol (lowercase for the second player) plus height if > 1."""
    top = stack.peek()
    if top is None:
        return EMPTY_FIELD
    symbol = STONE_SYMBOLS[top.stone_type]
    if top.owner == Player.SECOND:
        symbol = symbol.lower()
    return symbol if stack.count == 1 else f"{symbol}{stack.count}"


def board_to_lines(board: BoardState):
    """Return a list[str] – one line per row (top row first) plus column letters."""
    size = board.board_size
    labels = [
        [field_label(board.field_at(x, y)) for x in range(size)]
        for y in range(size)
    ]
    width = max(len(label) for row in labels for label in row)

    rows = []
    for y in range(size - 1, -1, -1):             # top → bottom
        cells = " ".join(label.ljust(width) for label in labels[y])
        rows.append(f"{y} {cells}".rstrip())
    columns = " ".join(chr(ord("a") + x).ljust(width) for x in range(size))
    rows.append(f"  {columns}".rstrip())
    return rows


def reserve_line(board: BoardState, player: Player):
    reserve = board.get_player_state(player)
    return f"{player.name.title()}: {reserve.num_stones} stone(s), {reserve.num_capstones} capstone(s)"


def show(board: BoardState, *, header=None, out=print):
    """Pretty-print one board with both reserves (optionally preceded by a header)."""
    if header:
        out(header)
    for line in board_to_lines(board):
        out(line)
    for player in (Player.FIRST, Player.SECOND):
        out(reserve_line(board, player))
    out()                         # blank line
