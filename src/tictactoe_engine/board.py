"""
Board representation: cells, moves, parsing and serialization.

Notes:
- The board is a flat list of 9 cells addressed by (row, col); index = row * 3 + col.
- The player marks X, the computer marks O. Either side may open the game.
- Boards are value-semantic: equality compares contents, copy() gives an
  independent board. The search mutates a board in place but always restores it.
"""
from __future__ import annotations

from contextlib import contextmanager
from enum import Enum
from typing import Iterator, List, NamedTuple, Sequence, Tuple

import numpy as np

from .errors import BoardFormatError

SIZE = 3


class Cell(Enum):
    EMPTY = "."
    PLAYER = "X"
    COMPUTER = "O"

    @property
    def digit(self) -> int:
        return _DIGITS[self]

    def opponent(self) -> "Cell":
        if self is Cell.PLAYER:
            return Cell.COMPUTER
        if self is Cell.COMPUTER:
            return Cell.PLAYER
        raise ValueError("Empty cell has no opponent")


_DIGITS = {Cell.EMPTY: 0, Cell.PLAYER: 1, Cell.COMPUTER: 2}

_SYMBOLS = {
    ".": Cell.EMPTY, "_": Cell.EMPTY, "-": Cell.EMPTY, "0": Cell.EMPTY,
    "X": Cell.PLAYER, "x": Cell.PLAYER, "1": Cell.PLAYER,
    "O": Cell.COMPUTER, "o": Cell.COMPUTER, "2": Cell.COMPUTER,
}

_SEPARATORS = set(" \t\n/|,")


class Move(NamedTuple):
    row: int
    col: int

    @property
    def flat_index(self) -> int:
        return self.row * SIZE + self.col

    @classmethod
    def from_index(cls, idx: int) -> "Move":
        if not 0 <= idx < SIZE * SIZE:
            raise ValueError(f"Cell index out of range: {idx}")
        return cls(*divmod(idx, SIZE))

    def in_bounds(self) -> bool:
        return 0 <= self.row < SIZE and 0 <= self.col < SIZE


ALL_MOVES: Tuple[Move, ...] = tuple(Move(r, c) for r in range(SIZE) for c in range(SIZE))


class Board:
    """A 3x3 grid of cells.

    Cells are stored row-major. Only ``place``/``clear`` mutate; everything the
    engine does to a board goes through :meth:`placed`, which undoes the
    placement even when the body raises.
    """

    __slots__ = ("_cells",)

    def __init__(self, cells: Sequence[Cell] | None = None):
        if cells is None:
            self._cells: List[Cell] = [Cell.EMPTY] * (SIZE * SIZE)
            return
        cells = list(cells)
        if len(cells) != SIZE * SIZE or not all(isinstance(c, Cell) for c in cells):
            raise BoardFormatError(f"A board needs exactly {SIZE * SIZE} cells")
        self._cells = cells

    @classmethod
    def empty(cls) -> "Board":
        return cls()

    @classmethod
    def from_rows(cls, rows: Sequence[Sequence[Cell]]) -> "Board":
        if len(rows) != SIZE or any(len(r) != SIZE for r in rows):
            raise BoardFormatError("A board needs 3 rows of 3 cells")
        return cls([c for row in rows for c in row])

    @classmethod
    def from_string(cls, text: str) -> "Board":
        """Parse 9 cell symbols, e.g. ``"OO./XX./..."`` or ``"220110000"``.

        Separators (whitespace, ``/``, ``|``, ``,``) are ignored.
        """
        symbols = [ch for ch in text if ch not in _SEPARATORS]
        if len(symbols) != SIZE * SIZE:
            raise BoardFormatError(
                f"Expected {SIZE * SIZE} cell symbols, got {len(symbols)} in {text!r}"
            )
        try:
            return cls([_SYMBOLS[ch] for ch in symbols])
        except KeyError as e:
            raise BoardFormatError(f"Unknown cell symbol {e.args[0]!r} in {text!r}") from None

    def serialize(self, digits: bool = False) -> str:
        if digits:
            return "".join(str(c.digit) for c in self._cells)
        return "".join(c.value for c in self._cells)

    def key(self) -> Tuple[Cell, ...]:
        return tuple(self._cells)

    def copy(self) -> "Board":
        return Board(self._cells)

    def cell(self, row: int, col: int) -> Cell:
        return self._cells[row * SIZE + col]

    def __getitem__(self, move: Tuple[int, int]) -> Cell:
        row, col = move
        return self._cells[row * SIZE + col]

    def place(self, move: Tuple[int, int], cell: Cell) -> None:
        row, col = move
        self._cells[row * SIZE + col] = cell

    def clear(self, move: Tuple[int, int]) -> None:
        self.place(move, Cell.EMPTY)

    @contextmanager
    def placed(self, move: Tuple[int, int], cell: Cell) -> Iterator["Board"]:
        self.place(move, cell)
        try:
            yield self
        finally:
            self.clear(move)

    def empty_cells(self) -> List[Move]:
        return [ALL_MOVES[i] for i, c in enumerate(self._cells) if c is Cell.EMPTY]

    def is_full(self) -> bool:
        return Cell.EMPTY not in self._cells

    def counts(self) -> Tuple[int, int]:
        """(player marks, computer marks)."""
        return self._cells.count(Cell.PLAYER), self._cells.count(Cell.COMPUTER)

    def rows(self) -> List[List[Cell]]:
        return [self._cells[r * SIZE:(r + 1) * SIZE] for r in range(SIZE)]

    def to_array(self) -> np.ndarray:
        return np.array([c.digit for c in self._cells], dtype=np.int8).reshape(SIZE, SIZE)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Board):
            return NotImplemented
        return self._cells == other._cells

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"Board.from_string({'/'.join(''.join(c.value for c in r) for r in self.rows())!r})"

    def __str__(self) -> str:
        lines = []
        for r, row in enumerate(self.rows()):
            lines.append(" " + " | ".join(" " if c is Cell.EMPTY else c.value for c in row))
            if r < SIZE - 1:
                lines.append("---+---+---")
        return "\n".join(lines)
