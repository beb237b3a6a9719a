from taksim.actions import Move, Place, Slide
from taksim.core import Color, Direction, PieceKind
from taksim.logic import applicable, apply_move


DIRECTIONS = (Direction.NORTH, Direction.SOUTH, Direction.EAST, Direction.WEST)


def decreasing_partitions(total, parts, largest=None):
    """
    Generate every way to write ``total`` as ``parts`` strictly decreasing
    positive integers, first (largest) part at most ``largest``.
    """
    if largest is None:
        largest = total
    if parts <= 0 or total <= 0:
        return
    if parts == 1:
        if total <= largest:
            yield (total,)
        return
    for first in range(1, min(largest, total - parts + 1) + 1):
        for rest in decreasing_partitions(total - first, parts - 1, first - 1):
            yield (first,) + rest


def _slides(pos, stack, size):
    h = min(len(stack), size)
    for direction in DIRECTIONS:
        d = pos.distance_to_edge(direction, size)
        for pieces in range(1, h * (h + 1) // 2 + 1):
            for hops in range(1, min(h, d) + 1):
                for carries in decreasing_partitions(pieces, hops, largest=h):
                    yield Slide(pos, direction, carries)


def applicable_actions(board, player):
    """Every placement and every in-bounds, decreasing slide for ``player``.

    Slides lift at most ``min(height, size)`` pieces and are not checked against the stacks they land on; filter with
    ``applicable`` where that matters.
    """
    free = []
    occupied = []
    for pos, stack in board.items():
        if stack.is_empty():
            free.append(pos)
        else:
            occupied.append((pos, stack))

    actions = []
    if board.piece_count(player, PieceKind.STONE) > 0:
        actions.extend(Place(pos, PieceKind.STONE) for pos in free)
        actions.extend(Place(pos, PieceKind.STANDING) for pos in free)
    if board.piece_count(player, PieceKind.CAPSTONE) > 0:
        actions.extend(Place(pos, PieceKind.CAPSTONE) for pos in free)

    for pos, stack in occupied:
        if stack.color() != player:
            continue
        actions.extend(_slides(pos, stack, board.size))
    return actions


def legal_actions(board, player):
    return [a for a in applicable_actions(board, player) if applicable(Move(a, player), board)]


def perft(board, player, depth):
    """Count the positions reached after ``depth`` plies. Finished games are
    leaves."""
    if depth <= 0:
        return 1
    actions = legal_actions(board, player)
    if depth == 1:
        return len(actions)
    total = 0
    for action in actions:
        child = board.clone()
        if apply_move(Move(action, player), child) is not None:
            total += 1
        else:
            total += perft(child, player.opponent, depth - 1)
    return total


class Metric:
    def __init__(self, red=0, black=0):
        self.values = {Color.RED: red, Color.BLACK: black}

    def of(self, color):
        return self.values[color]

    def __eq__(self, other):
        if not isinstance(other, Metric):
            return NotImplemented
        return self.values == other.values

    def __repr__(self):
        return f"Metric(red={self.of(Color.RED)}, black={self.of(Color.BLACK)})"


class Analyzer:
    def __init__(self, board):
        self.board = board

    def stones_left(self):
        return Metric(
            self.board.piece_count(Color.RED, PieceKind.STONE),
            self.board.piece_count(Color.BLACK, PieceKind.STONE),
        )

    def caps_left(self):
        return Metric(
            self.board.piece_count(Color.RED, PieceKind.CAPSTONE),
            self.board.piece_count(Color.BLACK, PieceKind.CAPSTONE),
        )

    def controlled_squares(self):
        metric = Metric()
        for _, stack in self.board.items():
            color = stack.color()
            if color is not None:
                metric.values[color] += 1
        return metric

    def highest_stack(self):
        metric = Metric()
        for _, stack in self.board.items():
            color = stack.color()
            if color is not None:
                metric.values[color] = max(metric.values[color], len(stack))
        return metric

    def applicable_actions(self, player):
        return applicable_actions(self.board, player)
