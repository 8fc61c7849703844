import numpy as np
import pytest

from tictactoe_engine.board import ALL_MOVES, Board, Cell, Move
from tictactoe_engine.errors import BoardFormatError


def test_from_string_accepts_marks_and_digits():
    a = Board.from_string("OO./XX./...")
    b = Board.from_string("220110000")
    c = Board.from_string("O O _ | X X _ | _ _ _")
    assert a == b == c
    assert a.cell(0, 0) is Cell.COMPUTER
    assert a[(1, 1)] is Cell.PLAYER
    assert a.cell(2, 2) is Cell.EMPTY


@pytest.mark.parametrize("bad", ["", "OO.XX...", "OO.XX.....", "OO.XX...Z"])
def test_from_string_rejects_bad_text(bad: str):
    with pytest.raises(BoardFormatError):
        Board.from_string(bad)


def test_from_rows_and_serialize():
    E, X, O = Cell.EMPTY, Cell.PLAYER, Cell.COMPUTER
    b = Board.from_rows([[X, X, E], [E, O, E], [E, E, E]])
    assert b.serialize() == "XX..O...."
    assert b.serialize(digits=True) == "110020000"
    assert Board.from_string(b.serialize()) == b
    with pytest.raises(BoardFormatError):
        Board.from_rows([[X, X], [E, O], [E, E]])


def test_copy_is_independent():
    b = Board.from_string("X........")
    c = b.copy()
    c.place((1, 1), Cell.COMPUTER)
    assert b.cell(1, 1) is Cell.EMPTY
    assert c.cell(1, 1) is Cell.COMPUTER
    assert b != c


def test_placed_restores_on_exception():
    b = Board.empty()
    with pytest.raises(RuntimeError):
        with b.placed((2, 1), Cell.PLAYER):
            assert b.cell(2, 1) is Cell.PLAYER
            raise RuntimeError("boom")
    assert b == Board.empty()


def test_empty_cells_row_major_and_counts():
    b = Board.from_string("X.O/.X./..O")
    assert b.empty_cells() == [Move(0, 1), Move(1, 0), Move(1, 2), Move(2, 0), Move(2, 1)]
    assert b.counts() == (2, 2)
    assert not b.is_full()
    assert Board.from_string("XOX/XOO/OXX").is_full()


def test_moves_and_indices():
    assert [m.flat_index for m in ALL_MOVES] == list(range(9))
    assert Move.from_index(5) == Move(1, 2)
    assert not Move(3, 0).in_bounds()
    with pytest.raises(ValueError):
        Move.from_index(9)


def test_to_array_uses_digit_encoding():
    arr = Board.from_string("XO./.X./..O").to_array()
    assert arr.shape == (3, 3)
    assert arr.dtype == np.int8
    assert arr.tolist() == [[1, 2, 0], [0, 1, 0], [0, 0, 2]]


def test_cell_opponent():
    assert Cell.PLAYER.opponent() is Cell.COMPUTER
    assert Cell.COMPUTER.opponent() is Cell.PLAYER
    with pytest.raises(ValueError):
        Cell.EMPTY.opponent()


def test_board_is_not_hashable_but_key_is():
    b = Board.from_string("X........")
    with pytest.raises(TypeError):
        hash(b)
    assert {b.key(): 1}[b.copy().key()] == 1
