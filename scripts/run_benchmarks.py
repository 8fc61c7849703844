#!/usr/bin/env python3
from __future__ import annotations

import argparse
import logging
import math
import statistics as stats
import time
from dataclasses import dataclass
from typing import List, Tuple

from tictactoe_engine.board import Board
from tictactoe_engine.search import run_search

POSITIONS = {
    "empty": ".........",
    "one_ply": "X........",
    "two_plies": "X../.O./...",
    "block": "XX./.O./...",
}


def ci95(values: List[float]) -> Tuple[float, float]:
    if not values:
        return (float("nan"), float("nan"))
    m = stats.fmean(values)
    s = stats.pstdev(values) if len(values) > 1 else 0.0
    z = 1.96
    half = z * (s / math.sqrt(len(values)))
    return m, half


@dataclass
class Config:
    repeats: int = 5
    include_empty: bool = False


def main(argv: list[str] | None = None) -> int:
    ap = argparse.ArgumentParser(description="Time the exhaustive search on a few fixed positions")
    ap.add_argument("--repeats", type=int, default=Config.repeats)
    ap.add_argument("--include-empty", action="store_true", help="Also time the full search from the empty board")
    ns = ap.parse_args(argv)
    cfg = Config(repeats=ns.repeats, include_empty=ns.include_empty)
    logging.basicConfig(level=logging.INFO, format="[%(levelname)s] %(message)s")

    for name, raw in POSITIONS.items():
        if name == "empty" and not cfg.include_empty:
            continue
        board = Board.from_string(raw)
        times: List[float] = []
        positions = 0
        for _ in range(cfg.repeats):
            t0 = time.perf_counter()
            res = run_search(board)
            times.append(time.perf_counter() - t0)
            positions = res.positions
        m, h = ci95(times)
        logging.info(
            "%s: move=%s positions=%d mean=%.4fs ± %.4fs (95%% CI, N=%d)",
            name, tuple(res.move), positions, m, h, cfg.repeats,
        )
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
