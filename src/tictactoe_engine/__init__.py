"""tictactoe_engine package.

Board model, outcome evaluation and an exhaustive minimax opponent for 3x3
tic-tac-toe, plus a game session and a small CLI.

Convenience imports are exposed for common workflows.
"""

from .board import Board, Cell, Move
from .errors import BoardFormatError, IllegalMoveError, InvalidStateError, TicTacToeError
from .outcome import Direction, Draw, LineDescriptor, NoResult, Outcome, Win, evaluate
from .search import best_move, move_scores, run_search, score
from .session import GameSession, TurnState
from .settings import PlayOptions

__all__ = [
    "Board",
    "Cell",
    "Move",
    "evaluate",
    "Outcome",
    "NoResult",
    "Win",
    "Draw",
    "LineDescriptor",
    "Direction",
    "best_move",
    "run_search",
    "score",
    "move_scores",
    "GameSession",
    "TurnState",
    "PlayOptions",
    "TicTacToeError",
    "InvalidStateError",
    "IllegalMoveError",
    "BoardFormatError",
]
