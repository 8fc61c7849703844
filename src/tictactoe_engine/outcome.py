"""
Outcome evaluation: completed lines, draws and reachability.

Notes:
- Lines are scanned in a fixed order: rows 0..2, columns 0..2, then the
  top-left -> bottom-right diagonal (0) and the bottom-left -> top-right
  diagonal (1). The first complete line is the one reported.
- evaluate() never mutates the board and never raises on a well-formed board.
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import List, Tuple, Union

from .board import SIZE, Board, Cell, Move


class Direction(Enum):
    HORIZONTAL = "horizontal"
    VERTICAL = "vertical"
    DIAGONAL = "diagonal"


@dataclass(frozen=True)
class LineDescriptor:
    direction: Direction
    index: int

    @property
    def cells(self) -> Tuple[Move, Move, Move]:
        i = self.index
        if self.direction is Direction.HORIZONTAL:
            return Move(i, 0), Move(i, 1), Move(i, 2)
        if self.direction is Direction.VERTICAL:
            return Move(0, i), Move(1, i), Move(2, i)
        if i == 0:
            return Move(0, 0), Move(1, 1), Move(2, 2)
        return Move(2, 0), Move(1, 1), Move(0, 2)

    def __str__(self) -> str:
        return f"{self.direction.value}{self.index}"


WIN_LINES: Tuple[LineDescriptor, ...] = (
    tuple(LineDescriptor(Direction.HORIZONTAL, i) for i in range(SIZE))
    + tuple(LineDescriptor(Direction.VERTICAL, i) for i in range(SIZE))
    + (LineDescriptor(Direction.DIAGONAL, 0), LineDescriptor(Direction.DIAGONAL, 1))
)

# flat index triples, same order as WIN_LINES
_LINE_INDICES: Tuple[Tuple[LineDescriptor, Tuple[int, int, int]], ...] = tuple(
    (line, tuple(m.flat_index for m in line.cells)) for line in WIN_LINES  # type: ignore[misc]
)


@dataclass(frozen=True)
class NoResult:
    is_terminal = False

    def __str__(self) -> str:
        return "no_result"


@dataclass(frozen=True)
class Draw:
    is_terminal = True

    def __str__(self) -> str:
        return "draw"


@dataclass(frozen=True)
class Win:
    winner: Cell
    line: LineDescriptor
    is_terminal = True

    def __str__(self) -> str:
        return "win"


Outcome = Union[NoResult, Win, Draw]

NO_RESULT = NoResult()
DRAW = Draw()


def evaluate(board: Board) -> Outcome:
    cells = board.key()
    for line, (a, b, c) in _LINE_INDICES:
        v = cells[a]
        if v is not Cell.EMPTY and v is cells[b] and v is cells[c]:
            return Win(v, line)
    if Cell.EMPTY in cells:
        return NO_RESULT
    return DRAW


def completed_lines(board: Board, mark: Cell) -> List[LineDescriptor]:
    cells = board.key()
    return [line for line, idx in _LINE_INDICES if all(cells[i] is mark for i in idx)]


def is_reachable(board: Board) -> bool:
    """True if the board could arise from legal alternating play.

    Either side may open, so mark counts may differ by at most one. If a side
    has a completed line it must have made the last move, and the other side
    must have no line of its own.
    """
    player, computer = board.counts()
    if abs(player - computer) > 1:
        return False
    player_lines = completed_lines(board, Cell.PLAYER)
    computer_lines = completed_lines(board, Cell.COMPUTER)
    if player_lines and computer_lines:
        return False
    if player_lines and player < computer:
        return False
    if computer_lines and computer < player:
        return False
    return True
