from __future__ import annotations

import argparse
import csv
import logging
import sys
from importlib.metadata import PackageNotFoundError, version
from typing import Optional, TextIO

import numpy as np

from .board import Board
from .errors import BoardFormatError, IllegalMoveError, InvalidStateError
from .outcome import Win, evaluate, is_reachable
from .search import move_scores, run_search
from .session import GameSession, TurnState
from .settings import PlayOptions

BOARD_HELP = 'Board string, 9 symbols of X/O/. or 1/2/0, e.g. "OO./XX./..." (omit with --stdin)'


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="ttt", description="Tic-tac-toe against an exhaustive-search computer")
    sub = p.add_subparsers(dest="cmd")
    p.add_argument("--verbose", "-v", action="store_true", help="Enable verbose logging")
    p.add_argument("--version", action="store_true", help="Print version and exit")

    p_eval = sub.add_parser("evaluate", help="Report win/draw/no result for a board")
    p_eval.add_argument("--board", help=BOARD_HELP)
    p_eval.add_argument(
        "--stdin", action="store_true", help="Read many boards from stdin and stream CSV output"
    )

    p_move = sub.add_parser("move", help="Compute the computer's (O) move for a board")
    p_move.add_argument("--board", help=BOARD_HELP)
    p_move.add_argument("--scores", action="store_true", help="Also print the root score of every cell")
    p_move.add_argument(
        "--stdin", action="store_true", help="Read many boards from stdin and stream CSV output"
    )

    p_play = sub.add_parser("play", help="Play a game in the terminal (you are X)")
    p_play.add_argument(
        "--computer-first",
        action="store_true",
        default=None,
        help="Let the computer open (default: TTT_COMPUTER_FIRST or off)",
    )
    p_play.add_argument(
        "--think-delay",
        type=float,
        default=None,
        help="Seconds the computer waits before moving (default: TTT_THINK_DELAY or 0)",
    )

    return p


def _parse_board(raw: str) -> Optional[Board]:
    try:
        board = Board.from_string(raw)
    except BoardFormatError as e:
        logging.error("Invalid board string: %s", e)
        return None
    if not is_reachable(board):
        logging.error("Board is not a reachable state: %s", board.serialize())
        return None
    return board


def _iter_stdin_boards(stream: TextIO):
    for line in stream:
        raw = line.strip()
        if not raw:
            continue
        try:
            board = Board.from_string(raw)
        except BoardFormatError:
            logging.debug("skipping unparseable line %r", raw)
            continue
        if not is_reachable(board):
            logging.debug("skipping unreachable board %r", raw)
            continue
        yield raw, board


def _format_scores(board: Board) -> str:
    grid = move_scores(board)
    lines = []
    for r in range(3):
        cells = []
        for c in range(3):
            v = grid[r, c]
            cells.append(f"{board.cell(r, c).value:>5}" if np.isnan(v) else f"{int(v):>5d}")
        lines.append(" ".join(cells))
    return "\n".join(lines)


def _cmd_evaluate(ns: argparse.Namespace) -> int:
    if ns.stdin:
        w = csv.writer(sys.stdout)
        w.writerow(["board", "outcome", "winner", "line"])
        for raw, board in _iter_stdin_boards(sys.stdin):
            out = evaluate(board)
            if isinstance(out, Win):
                w.writerow([raw, str(out), out.winner.value, str(out.line)])
            else:
                w.writerow([raw, str(out), "", ""])
        return 0
    board = _parse_board(ns.board or "")
    if board is None:
        return 2
    out = evaluate(board)
    if isinstance(out, Win):
        logging.info("outcome=%s winner=%s line=%s", out, out.winner.value, out.line)
    else:
        logging.info("outcome=%s", out)
    return 0


def _cmd_move(ns: argparse.Namespace) -> int:
    if ns.stdin:
        w = csv.writer(sys.stdout)
        w.writerow(["board", "row", "col", "score"])
        for raw, board in _iter_stdin_boards(sys.stdin):
            if evaluate(board).is_terminal:
                logging.debug("skipping finished board %r", raw)
                continue
            res = run_search(board)
            w.writerow([raw, res.move.row, res.move.col, res.score])
        return 0
    board = _parse_board(ns.board or "")
    if board is None:
        return 2
    try:
        res = run_search(board)
    except InvalidStateError as e:
        logging.error("%s", e)
        return 2
    logging.info("move=%s score=%d positions=%d", tuple(res.move), res.score, res.positions)
    if ns.scores:
        print(_format_scores(board))
    return 0


def _read_player_move(session: GameSession, stream: TextIO) -> Optional[bool]:
    """Read one ``row col`` pair and apply it. None on end of input."""
    print(f"{session.message} Enter row and column (0-2), e.g. '1 1':")
    line = stream.readline()
    if not line:
        return None
    parts = line.replace(",", " ").split()
    try:
        row, col = (int(x) for x in parts)
    except ValueError:
        print("Please enter two numbers, e.g. '0 2'.")
        return False
    try:
        session.player_move(row, col)
    except IllegalMoveError as e:
        print(e)
        return False
    return True


def _cmd_play(ns: argparse.Namespace, stream: TextIO) -> int:
    try:
        options = PlayOptions.from_env()
        if ns.computer_first is not None:
            options.computer_first = ns.computer_first
        if ns.think_delay is not None:
            options = PlayOptions(computer_first=options.computer_first, think_delay=ns.think_delay)
    except ValueError as e:
        logging.error("%s", e)
        return 2
    session = GameSession(options)
    while session.state is not TurnState.GAME_OVER:
        print(session.board)
        print()
        if session.state is TurnState.COMPUTER_TURN:
            print(session.message)
            move = session.computer_move()
            print(f"Computer plays {move.row} {move.col}")
            continue
        if _read_player_move(session, stream) is None:
            logging.info("Input closed, leaving the game")
            return 1
    print(session.board)
    print()
    print(session.message)
    out = session.outcome
    if isinstance(out, Win):
        print(f"Winning line: {out.line}")
    return 0


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    ns = parser.parse_args(argv)
    logging.basicConfig(level=logging.DEBUG if getattr(ns, "verbose", False) else logging.INFO,
                        format="[%(levelname)s] %(message)s")

    if getattr(ns, "version", False):
        try:
            print(version("tictactoe-engine"))
        except PackageNotFoundError:
            print("unknown")
        return 0

    if ns.cmd == "evaluate":
        return _cmd_evaluate(ns)
    if ns.cmd == "move":
        return _cmd_move(ns)
    if ns.cmd == "play":
        return _cmd_play(ns, sys.stdin)

    parser.print_help()
    return 0


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
