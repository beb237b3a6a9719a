import pytest

from taksim.actions import Move, Place, Slide
from taksim.core import (
    Board,
    Color,
    Direction,
    IllegalMove,
    Piece,
    PieceKind,
    Position,
    Stack,
)
from taksim.logic import Logic, Result, applicable, apply_move, rejection_reason
from taksim.notation import parse_board

RED, BLACK = Color.RED, Color.BLACK
STONE, STANDING, CAP = PieceKind.STONE, PieceKind.STANDING, PieceKind.CAPSTONE
NORTH, EAST, SOUTH, WEST = Direction.NORTH, Direction.EAST, Direction.SOUTH, Direction.WEST


def run(text, size, action, color):
    logic = Logic.from_board(parse_board(size, text))
    result = logic.apply(Move(action, color))
    return logic, result


def check(text, size, action, color):
    return applicable(Move(action, color), parse_board(size, text))


def test_first_turn_places_opponent_stone():
    logic = Logic(3)
    target = Position(1, 2)
    result = logic.first_turn(target, RED)
    assert result is None
    for pos, stack in logic.peek().items():
        if pos == target:
            assert stack == Stack([Piece(STONE, BLACK)])
        else:
            assert stack.is_empty()
    assert logic.peek().piece_count(BLACK, STONE) == 9
    assert logic.peek().piece_count(RED, STONE) == 10
    assert logic.last_applied_move == Move(Place(target, STONE), BLACK)


def test_place_on_occupied_is_rejected():
    s = """
    RS ! !
    !  ! !
    !  ! !
    """
    assert not check(s, 3, Place(Position(2, 0), STONE), RED)


def test_place_capstone_on_standing_is_rejected():
    s = """
    RX ! !
    !  ! !
    !  ! !
    """
    assert not check(s, 3, Place(Position(2, 0), CAP), RED)


def test_place_without_stash_is_rejected():
    board = Board(3)
    assert not applicable(Move(Place(Position(0, 0), CAP), RED), board)
    board.stashes[RED].stones = 0
    assert not applicable(Move(Place(Position(0, 0), STONE), RED), board)
    assert not applicable(Move(Place(Position(0, 0), STANDING), RED), board)
    assert applicable(Move(Place(Position(0, 0), STANDING), BLACK), board)


def test_place_off_board_is_rejected():
    assert not applicable(Move(Place(Position(3, 0), STONE), RED), Board(3))


def test_move_onto_wall_is_rejected():
    s = """
    RX RS !
    !  !  !
    !  !  !
    """
    assert not check(s, 3, Slide(Position(2, 1), WEST, (1,)), RED)


def test_move_onto_stone():
    s = """
    RS RS !
    !  !  !
    !  !  !
    """
    expected = parse_board(
        3,
        """
    RSRS ! !
    !    ! !
    !    ! !
    """,
    )
    logic, result = run(s, 3, Slide(Position(2, 1), WEST, (1,)), RED)
    assert result is None
    assert logic.peek() == expected


def test_capstone_flattens_wall():
    s = """
    RX RC ! ! !
    !  !  ! ! !
    !  !  ! ! !
    !  !  ! ! !
    !  !  ! ! !
    """
    expected = parse_board(
        5,
        """
    RSRC ! ! ! !
    !    ! ! ! !
    !    ! ! ! !
    !    ! ! ! !
    !    ! ! ! !
    """,
    )
    logic, result = run(s, 5, Slide(Position(4, 1), WEST, (1,)), RED)
    assert result is None
    assert logic.peek() == expected


def test_slide_spreads_stack():
    start = """
    !        !  ! !
    !        !  ! !
    RSBSRSRX RS ! !
    !        !  ! !
    """
    expected = parse_board(
        4,
        """
    !  !    !    !
    !  !    !    !
    RS RSBS RSRX !
    !  !    !    !
    """,
    )
    logic, result = run(start, 4, Slide(Position(1, 0), EAST, (3, 2)), RED)
    assert result is None
    assert logic.peek() == expected


SPREAD = """
!        !  ! !
!        !  ! !
RSBSRSRX RS ! !
!        !  ! !
"""


@pytest.mark.parametrize(
    "carries, reason",
    [
        ((3, 3), "Carries must be strictly decreasing"),
        ((2, 3), "Carries must be strictly decreasing"),
        ((5, 1), "Not enough stones in stack"),
        ((0,), "Carries must be positive"),
        ((2, 0), "Carries must be positive"),
        ((-1,), "Carries must be positive"),
        ((), "Carries required"),
        ((4, 3, 2, 1), "Move goes off board"),
    ],
)
def test_slide_rejections(carries, reason):
    move = Move(Slide(Position(1, 0), EAST, carries), RED)
    assert rejection_reason(move, parse_board(4, SPREAD)) == reason


def test_slide_of_foreign_stack_is_rejected():
    move = Move(Slide(Position(1, 0), EAST, (1,)), BLACK)
    assert rejection_reason(move, parse_board(4, SPREAD)) == "Stack not controlled by player"


def test_slide_of_empty_square_is_rejected():
    move = Move(Slide(Position(0, 0), NORTH), RED)
    assert not applicable(move, parse_board(4, SPREAD))


def test_slide_off_every_edge_is_rejected():
    board = Board(3)
    board.put_stack(Position(0, 0), Stack([Piece(STONE, RED)]))
    board.put_stack(Position(2, 2), Stack([Piece(STONE, RED)]))
    for pos, direction in [((0, 0), SOUTH), ((0, 0), WEST), ((2, 2), NORTH), ((2, 2), EAST)]:
        assert not applicable(Move(Slide(Position(*pos), direction, (1,)), RED), board)
    assert applicable(Move(Slide(Position(0, 0), NORTH, (1,)), RED), board)


def test_slide_reaching_last_square_is_allowed():
    s = """
    !      ! !
    !      ! !
    RSBSRS ! !
    """
    assert check(s, 3, Slide(Position(0, 0), EAST, (2, 1)), RED)
    assert not check(s, 3, Slide(Position(0, 0), EAST, (3, 2, 1)), RED)


def test_carries_are_not_capped_by_board_size():
    s = """
    !        ! !
    !        ! !
    RSRSRSRS ! !
    """
    assert check(s, 3, Slide(Position(0, 0), NORTH, (4, 1)), RED)
    assert check(s, 3, Slide(Position(0, 0), NORTH, (3, 1)), RED)
    assert check(s, 3, Slide(Position(0, 0), EAST), RED)


def test_whole_stack_taller_than_board_slides():
    board = Board(5)
    board.put_stack(Position(0, 0), Stack([Piece(STONE, RED)] * 6))
    move = Move(Slide(Position(0, 0), NORTH), RED)
    assert rejection_reason(move, board) is None
    assert apply_move(move, board) is None
    assert board[(0, 0)].is_empty()
    assert board[(1, 0)] == Stack([Piece(STONE, RED)] * 6)


def test_incompatible_square_later_on_path_is_rejected():
    s = """
    !      ! !  !
    !      ! !  !
    RSRSRC ! BW !
    !      ! !  !
    """
    assert not check(s, 4, Slide(Position(1, 0), EAST, (3, 2)), RED)
    # A lone capstone may finish on the wall.
    assert check(s, 4, Slide(Position(1, 0), EAST, (2, 1)), RED)


def test_capstone_with_company_cannot_flatten():
    s = """
    !    !  !
    !    !  !
    RSRC BW !
    """
    assert not check(s, 3, Slide(Position(0, 0), EAST, (2,)), RED)
    assert check(s, 3, Slide(Position(0, 0), EAST, (1,)), RED)


def test_whole_stack_shorthand():
    s = """
    !      !  !
    !      !  !
    RSBSRS BS !
    """
    expected = parse_board(
        3,
        """
    ! !        !
    ! !        !
    ! BSRSBSRS !
    """,
    )
    logic, result = run(s, 3, Slide(Position(0, 0), EAST), RED)
    assert result is None
    assert logic.peek() == expected


def test_checker_does_not_mutate():
    board = parse_board(4, SPREAD)
    snapshot = board.clone()
    for carries in [(3, 2), (3, 3), (4, 3, 2, 1), None]:
        applicable(Move(Slide(Position(1, 0), EAST, carries), RED), board)
    assert board == snapshot


def test_apply_illegal_move_raises_without_touching_board():
    board = parse_board(4, SPREAD)
    snapshot = board.clone()
    with pytest.raises(IllegalMove, match="strictly decreasing"):
        apply_move(Move(Slide(Position(1, 0), EAST, (2, 2)), RED), board)
    assert board == snapshot


def test_slide_leaves_expected_heights():
    board = Board(5)
    board.put_stack(Position(0, 0), Stack([Piece(STONE, c) for c in (RED, BLACK, RED, BLACK, RED)]))
    apply_move(Move(Slide(Position(0, 0), NORTH, (4, 3, 1)), RED), board)
    assert [len(board[(r, 0)]) for r in range(5)] == [1, 1, 2, 1, 0]
    assert board[(3, 0)] == Stack([Piece(STONE, RED)])


def test_game_over():
    start = """
    !          !  ! ! !
    !          !  ! ! !
    !          !  ! ! !
    RSRSRSRSRC BS ! ! !
    !          !  ! ! !
    """
    expected = parse_board(
        5,
        """
    !  !    !  !  !
    !  !    !  !  !
    !  !    !  !  !
    RS BSRS RS RS RC
    !  !    !  !  !
    """,
    )
    logic, result = run(start, 5, Slide(Position(1, 0), EAST, (4, 3, 2, 1)), RED)
    assert logic.peek() == expected
    assert result is not None
    assert result.board == expected
    assert result.result is Result.RED_WIN
    assert result.result.winner is RED


def test_outcome_board_is_a_snapshot():
    start = """
    RS RS !
    RS !  !
    RS !  !
    """
    logic, result = run(start, 3, Slide(Position(2, 1), EAST, (1,)), RED)
    assert result.result is Result.RED_WIN
    logic.peek().put_stack(Position(1, 1), Stack([Piece(STONE, BLACK)]))
    assert result.board[(1, 1)].is_empty()


def test_simultaneous_roads_tie():
    start = """
    !  !  BS
    RS RS RSBS
    BS BS !
    """
    logic, result = run(start, 3, Slide(Position(1, 2), SOUTH, (1,)), BLACK)
    assert result is not None
    assert result.result is Result.TIE
    assert result.result.winner is None
