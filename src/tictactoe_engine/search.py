"""
Exhaustive minimax search for the computer's move.

Scoring policy, from the computer's perspective:
- Computer win +10, player win -10, draw 0.
- Interior nodes adjust the running best by the node depth at the moment it
  is replaced: a maximizing node stores ``child - depth`` whenever a child
  beats the stored value, a minimizing node stores ``child + depth`` whenever
  a child undercuts it. The stored (adjusted) value is what later children are
  compared against.
- Root candidates are tried in row-major order and only a strictly greater
  score replaces the current choice, so ties go to the first cell found.

There is no pruning and no memoization: every call re-searches the full tree.
The board passed in is mutated during the search and restored before return.
"""
from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Iterator, Optional, Tuple

import numpy as np

from .board import SIZE, Board, Cell, Move
from .errors import InvalidStateError
from .outcome import Draw, Win, evaluate

logger = logging.getLogger(__name__)

WIN_SCORE = 10
LOSS_SCORE = -10
DRAW_SCORE = 0
_INITIAL_BEST = 1000


@dataclass
class SearchStats:
    positions: int = 0


@dataclass(frozen=True)
class SearchResult:
    move: Move
    score: int
    positions: int


def score(board: Board, depth: int, maximizing: bool, stats: Optional[SearchStats] = None) -> int:
    """Score ``board`` for the computer, with ``maximizing`` True on the computer's turn."""
    if stats is not None:
        stats.positions += 1
    outcome = evaluate(board)
    if isinstance(outcome, Win):
        return WIN_SCORE if outcome.winner is Cell.COMPUTER else LOSS_SCORE
    if isinstance(outcome, Draw):
        return DRAW_SCORE

    if maximizing:
        best = -_INITIAL_BEST
        for move in board.empty_cells():
            with board.placed(move, Cell.COMPUTER):
                s = score(board, depth + 1, False, stats)
            if s > best:
                best = s - depth
    else:
        best = _INITIAL_BEST
        for move in board.empty_cells():
            with board.placed(move, Cell.PLAYER):
                s = score(board, depth + 1, True, stats)
            if s < best:
                best = s + depth
    return best


def _check_searchable(board: Board) -> None:
    outcome = evaluate(board)
    if outcome.is_terminal:
        raise InvalidStateError(f"Cannot search a finished board ({outcome}): {board!r}")


def _root_scores(board: Board, stats: SearchStats) -> Iterator[Tuple[Move, int]]:
    for move in board.empty_cells():
        with board.placed(move, Cell.COMPUTER):
            s = score(board, 0, False, stats)
        yield move, s


def run_search(board: Board) -> SearchResult:
    _check_searchable(board)
    stats = SearchStats()
    best_score = -_INITIAL_BEST
    best: Optional[Move] = None
    for move, s in _root_scores(board, stats):
        if s > best_score:
            best_score = s
            best = move
    if best is None:
        raise InvalidStateError(f"No empty cell to search: {board!r}")
    logger.debug("best_move=%s score=%d positions=%d", tuple(best), best_score, stats.positions)
    return SearchResult(move=best, score=best_score, positions=stats.positions)


def best_move(board: Board) -> Move:
    """Return the computer's move for ``board``.

    Raises InvalidStateError when the board is full or already won.
    """
    return run_search(board).move


def move_scores(board: Board) -> np.ndarray:
    """Root score of every empty cell as a 3x3 float array; occupied cells are nan."""
    _check_searchable(board)
    grid = np.full((SIZE, SIZE), math.nan, dtype=float)
    stats = SearchStats()
    for move, s in _root_scores(board, stats):
        grid[move.row, move.col] = s
    return grid
