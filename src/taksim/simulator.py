import logging
from abc import ABC, abstractmethod

from taksim.actions import Move
from taksim.core import Color
from taksim.logic import Logic


logger = logging.getLogger(__name__)


class Player(ABC):
    name = "Player"

    def welcome(self, opponent_name):
        pass

    @abstractmethod
    def first_action(self, board):
        """Square for the opponent's first stone."""

    @abstractmethod
    def action_for(self, board, opponent_action):
        pass

    def reject(self, action, reason):
        pass

    def accept_outcome(self, outcome):
        pass


class Simulator:
    """Runs one game between two players. Red always starts."""

    def __init__(self, red, black, size):
        self.players = {Color.RED: red, Color.BLACK: black}
        self.logic = Logic(size)

    def start(self):
        red = self.players[Color.RED]
        black = self.players[Color.BLACK]
        red.welcome(black.name)
        black.welcome(red.name)

        for color in (Color.RED, Color.BLACK):
            result = self._first_turn(color)
            if result is not None:
                self._game_over(result)
                return result

        color = Color.RED
        while True:
            result = self.next_move(color)
            if result is not None:
                self._game_over(result)
                return result
            color = color.opponent

    def _first_turn(self, color):
        player = self.players[color]
        while True:
            pos = player.first_action(self.logic.peek())
            board = self.logic.peek()
            if board.valid_pos(pos) and board[pos].is_empty():
                return self.logic.first_turn(pos, color)
            logger.info("%s chose an unavailable first square %s", color, pos)
            player.reject(pos, "Square not available")

    def next_move(self, color):
        player = self.players[color]
        last = self.logic.last_applied_move
        opponent_action = last.action if last is not None else None
        while True:
            action = player.action_for(self.logic.peek(), opponent_action)
            move = Move(action, color)
            reason = self.logic.rejection_reason(move)
            if reason is None:
                return self.logic.apply(move)
            logger.info("Rejected %r from %s: %s", action, color, reason)
            player.reject(action, reason)

    def _game_over(self, outcome):
        logger.debug("Game finished: %s", outcome.result.name)
        for player in self.players.values():
            player.accept_outcome(outcome)
