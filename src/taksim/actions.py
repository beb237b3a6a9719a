from typing import NamedTuple, Optional, Tuple

from taksim.core import Color, Direction, PieceKind, Position


class Place(NamedTuple):
    """Put a fresh piece of ``kind`` on the empty square ``position``."""

    position: Position
    kind: PieceKind


class Slide(NamedTuple):
    """Pick up the top of the stack at ``position`` and spread it along
    ``direction``.

    ``carries[0]`` pieces are lifted, ``carries[i]`` pieces move onto the
    i-th square along the way, so that square keeps
    ``carries[i] - carries[i + 1]`` of them. ``carries=None`` moves the whole
    stack a single square.
    """

    position: Position
    direction: Direction
    carries: Optional[Tuple[int, ...]] = None

    def normalized(self, board):
        if self.carries is not None:
            return self
        height = len(board[self.position]) if board.valid_pos(self.position) else 0
        return Slide(self.position, self.direction, (height,))

    def squares(self):
        """Squares the slide drops onto, in order."""
        count = len(self.carries) if self.carries else 1
        return [Position(*self.position).go(self.direction, i) for i in range(1, count + 1)]


class Move(NamedTuple):
    action: object
    player: Color
