import re

from taksim.actions import Place, Slide
from taksim.core import Board, Color, Direction, Piece, PieceKind, Position, Stack


COLOR_CODES = {"r": Color.RED, "b": Color.BLACK}
KIND_CODES = {
    "s": PieceKind.STONE,
    "w": PieceKind.STANDING,
    "x": PieceKind.STANDING,
    "c": PieceKind.CAPSTONE,
}
KIND_LETTERS = {PieceKind.STONE: "S", PieceKind.STANDING: "W", PieceKind.CAPSTONE: "C"}
DIRECTION_CHARS = {
    ">": Direction.EAST,
    "<": Direction.WEST,
    "+": Direction.NORTH,
    "-": Direction.SOUTH,
}
FILES = "abcdefgh"
COORD = r"([a-h])([1-8])"


def parse_stack(text):
    """``!`` is an empty stack, otherwise colour/kind pairs bottom first,
    e.g. ``RSBSRC``."""
    s = text.strip().lower()
    if s == "!":
        return Stack()
    if not s or len(s) % 2:
        raise ValueError(f"Malformed stack {text!r}")
    pieces = []
    for color_code, kind_code in zip(s[::2], s[1::2]):
        if color_code not in COLOR_CODES:
            raise ValueError(f"Unrecognized colour {color_code!r}")
        if kind_code not in KIND_CODES:
            raise ValueError(f"Unrecognized piece kind {kind_code!r}")
        pieces.append(Piece(KIND_CODES[kind_code], COLOR_CODES[color_code]))
    return Stack(pieces)


def format_stack(stack):
    if stack.is_empty():
        return "!"
    return "".join(("R" if p.color is Color.RED else "B") + KIND_LETTERS[p.kind] for p in stack)


def parse_board(size, text):
    """Build a board from whitespace separated stacks. The first line is the
    top row (row ``size - 1``). Stashes are left full."""
    cells = text.split()
    if len(cells) != size * size:
        raise ValueError(f"Expected {size * size} stacks, got {len(cells)}")
    board = Board(size)
    for i, cell in enumerate(cells):
        row = size - 1 - i // size
        col = i % size
        board.put_stack(Position(row, col), parse_stack(cell))
    return board


def _rows(board):
    """Rows from the top (row ``size - 1``) down, each as a list of stacks."""
    for row in range(board.size - 1, -1, -1):
        yield row, [board[(row, col)] for col in range(board.size)]


def format_board(board):
    return "\n".join(" ".join(format_stack(s) for s in stacks) for _, stacks in _rows(board))


def file_letter(col):
    return FILES[col]


def rank_label(row):
    return str(row + 1)


def coord_to_position(coord, size):
    """``a1`` is the bottom-left square, ``Position(0, 0)``."""
    m = re.fullmatch(COORD, coord.strip(), re.IGNORECASE)
    if m is None:
        raise ValueError(f"Invalid coordinate {coord!r}")
    pos = Position(int(m.group(2)) - 1, FILES.index(m.group(1).lower()))
    if not (0 <= pos.row < size and 0 <= pos.col < size):
        raise ValueError(f"Coordinate {coord!r} out of bounds")
    return pos


def position_to_coord(pos):
    return file_letter(pos[1]) + rank_label(pos[0])


def drops_to_carries(drops):
    carries = []
    remaining = sum(drops)
    for n in drops:
        carries.append(remaining)
        remaining -= n
    return tuple(carries)


def carries_to_drops(carries):
    return [a - b for a, b in zip(carries, tuple(carries[1:]) + (0,))]


def parse_move(text, size):
    s = text.strip().replace(" ", "")
    if not s:
        raise ValueError("Empty input")
    m = re.fullmatch(rf"([FSC])?({COORD})", s, re.IGNORECASE)
    if m:
        piece_char, coord = m.group(1, 2)
        if piece_char is None or piece_char.upper() == "F":
            kind = PieceKind.STONE
        elif piece_char.upper() == "S":
            kind = PieceKind.STANDING
        else:
            kind = PieceKind.CAPSTONE
        return Place(coord_to_position(coord, size), kind)
    m = re.fullmatch(rf"(\d+)?({COORD})([<>+\-])(\d*)", s, re.IGNORECASE)
    if m:
        count_str, coord, dir_char, drops_str = m.group(1, 2, 5, 6)
        pos = coord_to_position(coord, size)
        direction = DIRECTION_CHARS[dir_char]
        drops = [int(ch) for ch in drops_str]
        if any(d <= 0 for d in drops):
            raise ValueError("Drops must be positive digits")
        count = int(count_str) if count_str is not None else None
        if not drops:
            carries = (count,) if count is not None else None
            return Slide(pos, direction, carries)
        if count is not None and count != sum(drops):
            raise ValueError("Drops do not sum to count")
        return Slide(pos, direction, drops_to_carries(drops))
    raise ValueError("Could not parse move")


def format_action(action):
    if isinstance(action, Place):
        prefix = {PieceKind.STONE: "", PieceKind.STANDING: "S", PieceKind.CAPSTONE: "C"}
        return prefix[action.kind] + position_to_coord(action.position)
    dir_char = {d: c for c, d in DIRECTION_CHARS.items()}[action.direction]
    coord = position_to_coord(action.position)
    if action.carries is None:
        return f"{coord}{dir_char}"
    drops = "".join(str(n) for n in carries_to_drops(action.carries))
    return f"{action.carries[0]}{coord}{dir_char}{drops}"


def piece_char(piece):
    if piece.color is Color.RED:
        return "rRC"[piece.kind]
    return "bBK"[piece.kind]


def stack_label(stack):
    if stack.is_empty():
        return "."
    return "(" + "".join(piece_char(p) for p in stack) + ")"


def render_board(board):
    """Grid with files along the top and ranks on the left, top row first,
    followed by both reserves."""
    rows = [(rank_label(row), [stack_label(s) for s in stacks]) for row, stacks in _rows(board)]
    header = [file_letter(col) for col in range(board.size)]
    width = max(len(label) for _, labels in rows for label in labels)
    margin = max(len(rank) for rank, _ in rows)

    def line(left, cells):
        return left.rjust(margin) + " " + " ".join(c.center(width) for c in cells)

    lines = [line("", header)]
    lines.extend(line(rank, labels) for rank, labels in rows)
    lines.append("")
    for color in (Color.RED, Color.BLACK):
        stash = board.stashes[color]
        lines.append(f"{color}: stones={stash.stones}, caps={stash.caps}")
    return "\n".join(lines)
