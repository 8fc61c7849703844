import inspect
import math

import numpy as np
import pytest

import tictactoe_engine.search as search_mod
from tictactoe_engine.board import Board, Cell, Move
from tictactoe_engine.errors import InvalidStateError
from tictactoe_engine.search import best_move, move_scores, run_search, score

CORNERS_AND_CENTER = {Move(0, 0), Move(0, 2), Move(2, 0), Move(2, 2), Move(1, 1)}


def test_takes_immediate_win():
    b = Board.from_string("OO./XX./...")
    assert best_move(b) == Move(0, 2)


def test_blocks_player_threat():
    b = Board.from_string("XX./.O./...")
    assert best_move(b) == Move(0, 2)


def test_prefers_own_win_over_block():
    # both sides threaten on row 0 / row 1; winning comes first
    b = Board.from_string("XX./OO./X..")
    assert best_move(b) == Move(1, 2)


def test_last_empty_cell_is_returned():
    b = Board.from_string("XOX/XOO/OX.")
    assert best_move(b) == Move(2, 2)


def test_empty_board_opens_top_left_corner():
    mv = best_move(Board.empty())
    assert mv in CORNERS_AND_CENTER
    assert mv == Move(0, 0)


@pytest.mark.parametrize("raw", ["XOX/XOO/OXX", "XXX/OO./...", "OOO/XX./X.."])
def test_terminal_boards_are_rejected(raw: str):
    b = Board.from_string(raw)
    with pytest.raises(InvalidStateError):
        best_move(b)
    with pytest.raises(InvalidStateError):
        move_scores(b)


def test_board_is_restored_after_search():
    b = Board.from_string("X../.O./..X")
    before = b.copy()
    mv = best_move(b)
    assert b == before
    assert b[mv] is Cell.EMPTY


def test_board_is_restored_when_search_fails(monkeypatch):
    real_evaluate = search_mod.evaluate
    calls = {"n": 0}

    def flaky(board):
        calls["n"] += 1
        if calls["n"] > 50:
            raise RuntimeError("evaluation failed")
        return real_evaluate(board)

    monkeypatch.setattr(search_mod, "evaluate", flaky)
    b = Board.from_string("X../.O./...")
    before = b.copy()
    with pytest.raises(RuntimeError):
        best_move(b)
    assert b == before


def test_search_without_candidates_raises(monkeypatch):
    monkeypatch.setattr(search_mod, "_check_searchable", lambda board: None)
    with pytest.raises(InvalidStateError):
        run_search(Board.from_string("XOX/XOO/OXX"))


def test_search_submodule_is_importable_from_package():
    import tictactoe_engine

    assert inspect.ismodule(tictactoe_engine.search)
    assert search_mod.run_search is tictactoe_engine.run_search
    assert search_mod.evaluate is tictactoe_engine.evaluate


def test_terminal_scores_ignore_depth():
    assert score(Board.from_string("OOO/XX./X.."), 4, True) == 10
    assert score(Board.from_string("XXX/OO./O.."), 4, False) == -10
    assert score(Board.from_string("XOX/XOO/OXX"), 4, True) == 0


def test_minimizing_node_adjusts_when_replacing_best():
    # X at (0, 0) wins; X at (2, 2) leads to a draw scored 0 - (depth + 1)
    b = Board.from_string(".XX/XOO/OO.")
    assert score(b, 0, False) == -10
    # -10 + 5 is stored first, then the draw (-6) undercuts it and -6 + 5 is kept
    assert score(b, 5, False) == -1
    assert b == Board.from_string(".XX/XOO/OO.")


def test_maximizing_node_adjusts_when_replacing_best():
    b = Board.from_string(".OO/OXX/XX.")
    assert score(b, 0, True) == 10
    # 10 - 5 is stored first, then the draw (0 + 6) beats it and 6 - 5 is kept
    assert score(b, 5, True) == 1


def test_move_scores_grid():
    b = Board.from_string("OO./XX./...")
    grid = move_scores(b)
    assert grid.shape == (3, 3)
    for r, c in [(0, 0), (0, 1), (1, 0), (1, 1)]:
        assert math.isnan(grid[r, c])
    assert grid[0, 2] == 10
    assert np.nanmax(grid) == 10


def test_best_move_is_first_argmax_of_move_scores():
    b = Board.from_string("X../.../...")
    grid = move_scores(b)
    flat = np.where(np.isnan(grid), -np.inf, grid).ravel()
    assert best_move(b) == Move.from_index(int(np.argmax(flat)))


def test_search_result_reports_positions():
    b = Board.from_string("XOX/XOO/O..")
    res = run_search(b)
    assert res.move in b.empty_cells()
    assert res.positions >= len(b.empty_cells())
    assert res.score == move_scores(b)[res.move.row, res.move.col]


def test_repeated_calls_are_identical():
    b = Board.from_string("X../.../...")
    assert best_move(b) == best_move(b)
