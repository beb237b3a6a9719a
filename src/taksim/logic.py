import logging
from enum import IntEnum
from typing import NamedTuple

from taksim.actions import Move, Place, Slide
from taksim.core import (
    Board,
    Color,
    IllegalMove,
    Piece,
    PieceKind,
    Position,
)
from taksim.roads import has_road


logger = logging.getLogger(__name__)


class Result(IntEnum):
    RED_WIN = 1
    BLACK_WIN = 2
    TIE = 3

    @classmethod
    def win_for(cls, color):
        return cls.RED_WIN if color is Color.RED else cls.BLACK_WIN

    @property
    def winner(self):
        if self is Result.RED_WIN:
            return Color.RED
        if self is Result.BLACK_WIN:
            return Color.BLACK
        return None


class Outcome(NamedTuple):
    result: Result
    board: Board


def _place_rejection(action, board, player):
    if not board.valid_pos(action.position):
        return "Out of bounds"
    if not board[action.position].is_empty():
        return "Square not empty"
    if board.piece_count(player, action.kind) <= 0:
        if action.kind is PieceKind.CAPSTONE:
            return "No capstones left"
        return "No stones left"
    return None


def _slide_rejection(action, board, player):
    if not board.valid_pos(action.position):
        return "Out of bounds"
    action = action.normalized(board)
    carries = action.carries
    if not carries:
        return "Carries required"
    if any(n <= 0 for n in carries):
        return "Carries must be positive"
    if any(later >= earlier for earlier, later in zip(carries, carries[1:])):
        return "Carries must be strictly decreasing"
    source = board[action.position]
    if source.color() != player:
        return "Stack not controlled by player"
    if len(source) < carries[0]:
        return "Not enough stones in stack"
    squares = action.squares()
    if not board.valid_pos(squares[-1]):
        return "Move goes off board"
    carried = source
    for n, dst in zip(carries, squares):
        carried = carried.peek_from_top(n)
        if not board[dst].compatible_with(carried):
            return "Cannot move onto standing stone or capstone"
    return None


def rejection_reason(move, board):
    """Why ``move`` is illegal on ``board``, or ``None`` when it is legal."""
    action = move.action
    if isinstance(action, Place):
        return _place_rejection(action, board, move.player)
    if isinstance(action, Slide):
        return _slide_rejection(action, board, move.player)
    return f"Unknown action {action!r}"


def applicable(move, board):
    return rejection_reason(move, board) is None


def outcome(board):
    red_road = has_road(board, Color.RED)
    black_road = has_road(board, Color.BLACK)
    if red_road and black_road:
        result = Result.TIE
    elif red_road:
        result = Result.RED_WIN
    elif black_road:
        result = Result.BLACK_WIN
    else:
        return None
    return Outcome(result, board.clone())


def apply_move(move, board):
    """Apply ``move`` to ``board`` in place and return the ``Outcome`` if the
    game ended.

    Callers are expected to check the move first; an inapplicable move raises
    ``IllegalMove`` before anything is touched.
    """
    reason = rejection_reason(move, board)
    if reason is not None:
        raise IllegalMove(reason)

    action = move.action
    if isinstance(action, Place):
        board.place(Piece(action.kind, move.player), action.position)
    else:
        action = action.normalized(board)
        src = Position(*action.position)
        for n in action.carries:
            board.slide(src, action.direction, n)
            src = src.go(action.direction)

    logger.debug("%s played %r", move.player, action)
    result = outcome(board)
    if result is not None:
        logger.debug("Game over: %s", result.result.name)
    return result


class Logic:
    def __init__(self, size):
        self.board = Board(size)
        self.last_applied_move = None

    @classmethod
    def from_board(cls, board):
        logic = cls.__new__(cls)
        logic.board = board
        logic.last_applied_move = None
        return logic

    @property
    def size(self):
        return self.board.size

    def peek(self):
        return self.board

    def applicable(self, move):
        return applicable(move, self.board)

    def rejection_reason(self, move):
        return rejection_reason(move, self.board)

    def apply(self, move):
        result = apply_move(move, self.board)
        self.last_applied_move = move
        return result

    def first_turn(self, pos, color):
        """Each side's first placement is a stone of the opponent's color."""
        return self.apply(Move(Place(Position(*pos), PieceKind.STONE), color.opponent))
