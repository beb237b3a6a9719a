import argparse
import logging

import numpy as np
from tqdm import tqdm

from taksim.actions import Move
from taksim.analyzer import legal_actions, perft
from taksim.core import Color, IllegalMove
from taksim.encoder import PLANE_NAMES, encode_board_tensor, kind_counts, road_cells
from taksim.logic import Logic, apply_move
from taksim.notation import (
    coord_to_position,
    format_action,
    parse_move,
    render_board,
)
from taksim.simulator import Player, Simulator


QUIT_WORDS = ("q", "quit", "exit", "resign")


class Resigned(Exception):
    pass


class CommandLinePlayer(Player):
    def __init__(self, name, color, size, read=None):
        self.name = name
        self.color = color
        self.size = size
        self.opponent = None
        self._read = read if read is not None else input

    def _ask(self, prompt):
        try:
            text = self._read(prompt)
        except EOFError:
            raise Resigned(self.color)
        if text.strip().lower() in QUIT_WORDS:
            raise Resigned(self.color)
        return text

    def welcome(self, opponent_name):
        self.opponent = opponent_name
        order = "first" if self.color is Color.RED else "second"
        print(f"{self.name}, you are facing {opponent_name} and will go {order}.")

    def first_action(self, board):
        print(render_board(board))
        while True:
            text = self._ask(f"{self.name}, where should {self.opponent}'s first stone go? ")
            try:
                return coord_to_position(text.strip(), self.size)
            except ValueError as e:
                print("Input error:", e)

    def action_for(self, board, opponent_action):
        if opponent_action is not None:
            print(f"{self.opponent} played {format_action(opponent_action)}.")
        print(render_board(board))
        while True:
            text = self._ask(f"{self.name} ({self.color}) move: ")
            try:
                return parse_move(text, self.size)
            except ValueError as e:
                print("Input error:", e)

    def reject(self, action, reason):
        print("Illegal move:", reason)

    def accept_outcome(self, outcome):
        winner = outcome.result.winner
        if winner is None:
            print("Game is a tie.")
        elif winner is self.color:
            print(f"Congratulations, you won, {self.name}!")
        else:
            print(f"{self.opponent} wins.")


def play(args):
    print("Enter moves in a PTN-like format.")
    print("Placement: a1 or Fa1, Sa1, Ca1 etc. Default is flat if no letter.")
    print("Movement: 3a1>21 means pick up 3 from a1, move right, drop 2 then 1.")
    print("You can omit the leading count: a1>21 means pick up 3.")
    print("Type 'quit' to exit.")
    red = CommandLinePlayer(args.red, Color.RED, args.size)
    black = CommandLinePlayer(args.black, Color.BLACK, args.size)
    try:
        outcome = Simulator(red, black, args.size).start()
    except Resigned as e:
        print(f"Game ended by {e.args[0]}.")
        return
    print(render_board(outcome.board))


def setup_position(size, moves_text):
    """Replay comma separated opening moves, first two with swapped colours.
    Returns the logic and the colour to move."""
    logic = Logic(size)
    color = Color.RED
    moves = [m.strip() for m in moves_text.split(",") if m.strip()] if moves_text else []
    for ply, text in enumerate(moves):
        if ply < 2:
            logic.first_turn(coord_to_position(text, size), color)
        else:
            logic.apply(Move(parse_move(text, size), color))
        color = color.opponent
    return logic, color


def run_perft(args):
    try:
        logic, color = setup_position(args.size, args.moves)
    except (ValueError, IllegalMove) as e:
        print("Invalid position:", e)
        return
    board = logic.peek()
    print(render_board(board))
    total = 0
    for action in tqdm(legal_actions(board, color), desc=f"perft {args.depth}"):
        child = board.clone()
        if apply_move(Move(action, color), child) is not None or args.depth <= 1:
            count = 1
        else:
            count = perft(child, color.opponent, args.depth - 1)
        total += count
        if args.divide:
            tqdm.write(f"{format_action(action)}: {count}")
    print(f"{color} to move, depth {args.depth}: {total}")


def run_encode(args):
    try:
        logic, color = setup_position(args.size, args.moves)
    except (ValueError, IllegalMove) as e:
        print("Invalid position:", e)
        return
    board = logic.peek()
    player = color if args.player is None else Color[args.player.upper()]
    try:
        planes = encode_board_tensor(board, player, pad=args.pad)
    except ValueError as e:
        print("Cannot encode:", e)
        return
    print(render_board(board))
    print(f"{player} view, planes {tuple(planes.shape)}")

    n = board.size
    for name, plane in zip(PLANE_NAMES, planes.numpy()):
        print(f"{name}:")
        # Top row first, like the board above.
        for row in np.flipud(plane[:n, :n]):
            print(" ".join(f"{v:.2f}" for v in row))

    counts = kind_counts(board)
    print(f"road squares: {int(road_cells(board, player).sum())}")
    for c in Color:
        stone, standing, cap = counts[int(c)]
        print(f"{c} tops: stones={stone}, standing={standing}, caps={cap}")


def main():
    parser = argparse.ArgumentParser(prog="taksim")
    parser.add_argument(
        "--size",
        type=int,
        default=5,
        choices=range(3, 9),
        help="board size (default 5)",
    )
    parser.add_argument("--verbose", action="store_true", help="log engine details")
    sub = parser.add_subparsers(dest="command")

    play_parser = sub.add_parser("play", help="two players on one terminal")
    play_parser.add_argument("--red", default="Red", help="name of the first player")
    play_parser.add_argument("--black", default="Black", help="name of the second player")

    perft_parser = sub.add_parser("perft", help="count positions reachable by legal moves")
    perft_parser.add_argument("--depth", type=int, default=2, help="plies to search (default 2)")
    perft_parser.add_argument(
        "--moves",
        default="",
        help="comma separated moves to reach the root position, e.g. 'a1,e5,c3'",
    )
    perft_parser.add_argument("--divide", action="store_true", help="print counts per root move")

    encode_parser = sub.add_parser("encode", help="print the input planes of a position")
    encode_parser.add_argument(
        "--moves",
        default="",
        help="comma separated moves to reach the position, e.g. 'a1,e5,c3'",
    )
    encode_parser.add_argument(
        "--player",
        choices=["red", "black"],
        help="side to encode for (default: side to move)",
    )
    encode_parser.add_argument("--pad", type=int, default=8, help="plane width (default 8)")

    args = parser.parse_args()
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    if args.command == "perft":
        run_perft(args)
    elif args.command == "encode":
        run_encode(args)
    else:
        if args.command is None:
            args.red, args.black = "Red", "Black"
        play(args)


if __name__ == "__main__":
    main()
