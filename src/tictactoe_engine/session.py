"""
Game session: the caller side of the engine.

The session owns the authoritative board and the turn state machine:

    PLAYER_TURN -> COMPUTER_TURN -> PLAYER_TURN ...
    any state -> GAME_OVER once evaluate() reports a win or a draw

The search may run on a worker thread. It always works on a copy of the
session board; the resulting move is applied back on the caller's thread.
"""
from __future__ import annotations

import logging
import time
from concurrent.futures import Executor, Future
from enum import Enum
from typing import List, Optional, Tuple

from .board import Board, Cell, Move
from .errors import IllegalMoveError
from .outcome import NO_RESULT, Draw, Outcome, Win, evaluate
from .search import best_move
from .settings import PlayOptions

logger = logging.getLogger(__name__)


class TurnState(Enum):
    PLAYER_TURN = "player_turn"
    COMPUTER_TURN = "computer_turn"
    GAME_OVER = "game_over"


def _think(board: Board, delay: float) -> Move:
    if delay > 0:
        time.sleep(delay)
    return best_move(board)


class GameSession:
    def __init__(self, options: Optional[PlayOptions] = None):
        self.options = options or PlayOptions()
        self._board = Board.empty()
        self._state = TurnState.PLAYER_TURN
        self._outcome: Outcome = NO_RESULT
        self._request: Optional["Future[Move]"] = None
        self.history: List[Tuple[Cell, Move]] = []
        self.new_game()

    @property
    def board(self) -> Board:
        return self._board.copy()

    @property
    def state(self) -> TurnState:
        return self._state

    @property
    def outcome(self) -> Outcome:
        return self._outcome

    @property
    def message(self) -> str:
        if self._state is TurnState.PLAYER_TURN:
            return "Player Turn!"
        if self._state is TurnState.COMPUTER_TURN:
            return "Thinking....."
        if isinstance(self._outcome, Win):
            who = "Player" if self._outcome.winner is Cell.PLAYER else "Computer"
            return f"Game Over - {who} Win!"
        return "Game Over - Draw!"

    def new_game(self) -> None:
        self._board = Board.empty()
        self._outcome = NO_RESULT
        self._forget_request()
        self.history = []
        self._state = TurnState.COMPUTER_TURN if self.options.computer_first else TurnState.PLAYER_TURN
        logger.debug("new game, state=%s", self._state.value)

    def player_move(self, row: int, col: int) -> Outcome:
        if self._state is not TurnState.PLAYER_TURN:
            raise IllegalMoveError(f"Not the player's turn (state={self._state.value})")
        self._place(Move(row, col), Cell.PLAYER)
        return self._outcome

    def computer_move(self) -> Move:
        """Search and apply the computer's move on the calling thread."""
        self._require_computer_turn()
        move = _think(self._board.copy(), self.options.think_delay)
        self.apply_computer_move(move)
        return move

    def request_computer_move(self, executor: Executor) -> "Future[Move]":
        """Start the search on ``executor``; apply the result with apply_computer_move().

        Only one request may be outstanding. A request whose search raises or is
        cancelled is dropped, so a new one can be made. Pass the returned future
        back to apply_computer_move() to have a result from before new_game()
        rejected instead of played on the new board.
        """
        self._require_computer_turn()
        if self._request is not None:
            raise IllegalMoveError("A computer move is already being computed")
        request = executor.submit(_think, self._board.copy(), self.options.think_delay)
        self._request = request
        request.add_done_callback(self._drop_failed_request)
        return request

    def apply_computer_move(
        self, move: Tuple[int, int], request: Optional["Future[Move]"] = None
    ) -> Outcome:
        self._require_computer_turn()
        if request is not None and request is not self._request:
            raise IllegalMoveError("Computer move belongs to an earlier request or game")
        self._place(Move(*move), Cell.COMPUTER)
        self._request = None
        return self._outcome

    def _drop_failed_request(self, request: "Future[Move]") -> None:
        if request.cancelled() or request.exception() is not None:
            if self._request is request:
                self._request = None
            logger.debug("computer move request failed or was cancelled")

    def _forget_request(self) -> None:
        if self._request is not None:
            self._request.cancel()
        self._request = None

    def _require_computer_turn(self) -> None:
        if self._state is not TurnState.COMPUTER_TURN:
            raise IllegalMoveError(f"Not the computer's turn (state={self._state.value})")

    def _place(self, move: Move, mark: Cell) -> None:
        if not move.in_bounds():
            raise IllegalMoveError(f"Cell {tuple(move)} is off the board")
        if self._board[move] is not Cell.EMPTY:
            raise IllegalMoveError(f"Cell {tuple(move)} is already taken")
        self._board.place(move, mark)
        self.history.append((mark, move))
        self._outcome = evaluate(self._board)
        if isinstance(self._outcome, (Win, Draw)):
            self._state = TurnState.GAME_OVER
            logger.info("%s", self.message)
        elif mark is Cell.PLAYER:
            self._state = TurnState.COMPUTER_TURN
        else:
            self._state = TurnState.PLAYER_TURN
        logger.debug("%s played %s, state=%s", mark.name.lower(), tuple(move), self._state.value)
