import logging
from enum import Enum, IntEnum
from typing import NamedTuple


logger = logging.getLogger(__name__)


class TakError(Exception):
    pass


class IllegalMove(TakError):
    pass


class InvariantError(TakError):
    pass


class Color(IntEnum):
    RED = 0
    BLACK = 1

    @property
    def opponent(self):
        return Color(1 - self)

    def __str__(self):
        return "Red" if self is Color.RED else "Black"

    def __format__(self, spec):
        return format(str(self), spec)


class PieceKind(IntEnum):
    STONE = 0
    STANDING = 1
    CAPSTONE = 2

    @property
    def stackable(self):
        return self is PieceKind.STONE

    @property
    def road(self):
        return self in (PieceKind.STONE, PieceKind.CAPSTONE)

    @property
    def flattenable(self):
        return self in (PieceKind.STONE, PieceKind.STANDING)


class Piece(NamedTuple):
    kind: PieceKind
    color: Color

    def flattened(self):
        if self.kind is PieceKind.STANDING:
            return Piece(PieceKind.STONE, self.color)
        return self


class Stack:
    """Pieces on one square, bottom first. Only the top piece may be a
    standing stone or a capstone."""

    __slots__ = ("_pieces",)

    def __init__(self, pieces=()):
        pieces = list(pieces)
        for piece in pieces[:-1]:
            if piece.kind is not PieceKind.STONE:
                raise InvariantError(f"Buried piece must be a stone, got {piece}")
        self._pieces = pieces

    @property
    def top(self):
        return self._pieces[-1] if self._pieces else None

    def color(self):
        top = self.top
        return top.color if top is not None else None

    def is_empty(self):
        return not self._pieces

    def is_road(self):
        top = self.top
        return top is not None and top.kind.road

    def is_stackable(self):
        top = self.top
        return top is None or top.kind.stackable

    def is_flattenable(self):
        top = self.top
        return top is None or top.kind.flattenable

    def is_flattening(self):
        return len(self._pieces) == 1 and self._pieces[0].kind is PieceKind.CAPSTONE

    def compatible_with(self, other):
        return self.is_stackable() or (self.is_flattenable() and other.is_flattening())

    def peek_from_top(self, n):
        if n > len(self._pieces):
            raise InvariantError(f"Cannot peek {n} pieces from a stack of {len(self)}")
        if n <= 0:
            return Stack()
        return Stack(self._pieces[-n:])

    def take_off(self, n):
        taken = self.peek_from_top(n)
        if n > 0:
            del self._pieces[-n:]
        return taken

    def land(self, other):
        if not self.compatible_with(other):
            raise InvariantError(f"{other!r} cannot land on {self!r}")
        if self._pieces and not self.is_stackable():
            self._pieces[-1] = self._pieces[-1].flattened()
        self._pieces.extend(other._pieces)

    def copy(self):
        return Stack(self._pieces)

    def __len__(self):
        return len(self._pieces)

    def __iter__(self):
        return iter(self._pieces)

    def __getitem__(self, index):
        return self._pieces[index]

    def __eq__(self, other):
        if not isinstance(other, Stack):
            return NotImplemented
        return self._pieces == other._pieces

    def __repr__(self):
        return f"Stack({self._pieces!r})"


PIECE_TABLE = {
    3: (10, 0),
    4: (15, 0),
    5: (21, 1),
    6: (30, 1),
    8: (50, 2),
}


def pieces_for_size(size):
    if size < 3:
        raise ValueError("Board size must be at least 3")
    if size in PIECE_TABLE:
        return PIECE_TABLE[size]
    # Rough fit of the table above; not backed by the printed rules.
    stones = round(0.8 * size * size)
    caps = (size - 2) // 3
    logger.warning(
        "No piece table entry for size %d, approximating %d stones and %d capstones",
        size,
        stones,
        caps,
    )
    return stones, caps


class PiecesStash:
    __slots__ = ("stones", "caps")

    def __init__(self, stones, caps):
        self.stones = stones
        self.caps = caps

    @classmethod
    def for_board_size(cls, size):
        return cls(*pieces_for_size(size))

    def count(self, kind):
        return self.caps if kind is PieceKind.CAPSTONE else self.stones

    def take(self, kind):
        if self.count(kind) <= 0:
            raise InvariantError(f"No {kind.name.lower()} left in stash")
        if kind is PieceKind.CAPSTONE:
            self.caps -= 1
        else:
            self.stones -= 1

    def copy(self):
        return PiecesStash(self.stones, self.caps)

    def __eq__(self, other):
        if not isinstance(other, PiecesStash):
            return NotImplemented
        return (self.stones, self.caps) == (other.stones, other.caps)

    def __repr__(self):
        return f"PiecesStash(stones={self.stones}, caps={self.caps})"


class Direction(Enum):
    NORTH = (1, 0)
    EAST = (0, 1)
    SOUTH = (-1, 0)
    WEST = (0, -1)

    @property
    def opposite(self):
        drow, dcol = self.value
        return Direction((-drow, -dcol))


class Position(NamedTuple):
    row: int
    col: int

    def go(self, direction, steps=1):
        drow, dcol = direction.value
        return Position(self.row + drow * steps, self.col + dcol * steps)

    def distance_to_edge(self, direction, size):
        if direction is Direction.NORTH:
            return size - 1 - self.row
        if direction is Direction.SOUTH:
            return self.row
        if direction is Direction.EAST:
            return size - 1 - self.col
        return self.col


class Board:
    def __init__(self, size, stash=None):
        stones, caps = stash if stash is not None else pieces_for_size(size)
        self.size = size
        self.grid = [[Stack() for _ in range(size)] for _ in range(size)]
        self.stashes = {
            Color.RED: PiecesStash(stones, caps),
            Color.BLACK: PiecesStash(stones, caps),
        }

    def clone(self):
        other = Board.__new__(Board)
        other.size = self.size
        other.grid = [[stack.copy() for stack in row] for row in self.grid]
        other.stashes = {c: s.copy() for c, s in self.stashes.items()}
        return other

    def valid_pos(self, pos):
        return 0 <= pos[0] < self.size and 0 <= pos[1] < self.size

    def __getitem__(self, pos):
        if not self.valid_pos(pos):
            raise IndexError(f"Position {pos} is off the board")
        return self.grid[pos[0]][pos[1]]

    def put_stack(self, pos, stack):
        if not self.valid_pos(pos):
            raise IndexError(f"Position {pos} is off the board")
        self.grid[pos[0]][pos[1]] = stack

    def piece_count(self, color, kind):
        return self.stashes[color].count(kind)

    def items(self):
        for row in range(self.size):
            for col in range(self.size):
                yield Position(row, col), self.grid[row][col]

    def place(self, piece, pos):
        if not self.valid_pos(pos):
            raise InvariantError(f"Cannot place at {pos}, off the board")
        if not self[pos].is_empty():
            raise InvariantError(f"Cannot place at {pos}, square occupied")
        self.stashes[piece.color].take(piece.kind)
        self.put_stack(pos, Stack([piece]))

    def slide(self, src, direction, n):
        dst = Position(*src).go(direction)
        if not self.valid_pos(dst):
            raise InvariantError(f"Cannot slide from {src} {direction.name}, off the board")
        source = self[src]
        if len(source) < n:
            raise InvariantError(f"Cannot slide {n} pieces from a stack of {len(source)}")
        carried = source.peek_from_top(n)
        target = self[dst]
        if not target.compatible_with(carried):
            raise InvariantError(f"Cannot land {carried!r} on {target!r}")
        source.take_off(n)
        target.land(carried)

    def __eq__(self, other):
        if not isinstance(other, Board):
            return NotImplemented
        return (
            self.size == other.size
            and self.grid == other.grid
            and self.stashes == other.stashes
        )

    def __repr__(self):
        return f"Board(size={self.size})"
