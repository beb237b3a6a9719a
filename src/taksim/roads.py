from collections import deque

from taksim.core import Direction, Position


NEIGHBOURS = tuple(Direction)


def is_road_cell(board, color, pos):
    stack = board[pos]
    return stack.is_road() and stack.color() == color


def _edge(size, direction, far):
    """Squares on the edge a road along ``direction`` starts from, or ends on
    when ``far`` is set."""
    last = size - 1
    if direction in (Direction.NORTH, Direction.SOUTH):
        row = 0 if (direction is Direction.NORTH) != far else last
        return [Position(row, i) for i in range(size)]
    col = 0 if (direction is Direction.EAST) != far else last
    return [Position(i, col) for i in range(size)]


def connects(board, color, direction):
    """Breadth-first search for a road of ``color`` running in ``direction``
    across the whole board."""
    goal = set(_edge(board.size, direction, far=True))
    frontier = deque(p for p in _edge(board.size, direction, far=False) if is_road_cell(board, color, p))
    visited = set(frontier)
    while frontier:
        pos = frontier.popleft()
        if pos in goal:
            return True
        for step in NEIGHBOURS:
            nxt = pos.go(step)
            if nxt in visited or not board.valid_pos(nxt):
                continue
            if is_road_cell(board, color, nxt):
                visited.add(nxt)
                frontier.append(nxt)
    return False


def has_road(board, color):
    # North covers south-north roads and East covers west-east ones.
    return connects(board, color, Direction.NORTH) or connects(board, color, Direction.EAST)
