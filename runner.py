#!/usr/bin/env python3
"""Command-line entry point: search the reference catalog and persist every tiling."""

from __future__ import annotations

import logging
import os
import signal
import sys
import threading
from typing import Tuple

from catalog import reference_shapes, total_area
from config import CFG
from errors import ConfigError
from io_files import clear_solutions, write_solution
from models import Cursor, Solution
from progress import log_event
from solver.search import SearchContext, search

BASE_DIR = os.path.dirname(os.path.abspath(__file__))
log = logging.getLogger("puzzle.runner")


def _progress_printer(cursor_every: int):
    def _on_progress(iterations: int, cursors: Tuple[Cursor, ...]) -> None:
        print(".", end="", flush=True)
        if cursor_every > 0 and iterations % cursor_every == 0:
            print("".join(str(orientation) for orientation, _, _ in cursors), flush=True)
            log_event("Progress", iterations=iterations, cursors=cursors)

    return _on_progress


def _solution_writer(base_dir: str):
    def _on_solution(solution: Solution) -> None:
        print("\n")
        print(solution.text)
        path = write_solution(solution, base_dir)
        log.info("solution %d written to %s", solution.index, path)
        log_event("Solution found", index=solution.index, path=path)

    return _on_solution


def main() -> int:
    logging.basicConfig(level=logging.INFO, format="%(asctime)s [%(levelname)s] %(message)s")

    abort = threading.Event()
    try:
        shapes = reference_shapes()
        ctx = SearchContext(shapes, CFG.BOARD_SIZE)
    except ConfigError as exc:
        log.error("refusing to search: %s", exc)
        return 2

    area = total_area(shapes)
    if area != CFG.BOARD_SIZE * CFG.BOARD_SIZE:
        log.warning(
            "pieces cover %d cells but the board has %d; no tiling can exist",
            area, CFG.BOARD_SIZE * CFG.BOARD_SIZE,
        )

    stale = clear_solutions(BASE_DIR)
    if stale:
        log.info("removed %d solution file(s) from an earlier run", stale)

    previous = signal.signal(signal.SIGINT, lambda signum, frame: abort.set())
    log_event("Search started", board=CFG.BOARD_SIZE, pieces=len(shapes), prune=CFG.PRUNE)
    try:
        result = search(
            ctx,
            on_solution=_solution_writer(BASE_DIR),
            on_progress=_progress_printer(CFG.CURSOR_EVERY),
            progress_every=CFG.PROGRESS_EVERY,
            abort=abort,
            prune=CFG.PRUNE,
        )
    finally:
        signal.signal(signal.SIGINT, previous)

    log_event(
        "Search finished",
        status=result.status,
        solutions=result.solutions,
        iterations=result.iterations,
        pruned=result.pruned,
        duration=f"{result.elapsed:.2f}s",
    )
    print()
    if not result.complete:
        log.warning("aborted after %d iterations, %d solutions", result.iterations, result.solutions)
        return 130
    log.info("%d solutions in %d iterations (%d pruned)", result.solutions, result.iterations, result.pruned)
    print("All done.")
    return 0


if __name__ == "__main__":
    sys.exit(main())
