# solver/search.py: depth-first placement search with connectivity pruning
from __future__ import annotations

import time
from typing import Callable, List, Optional, Protocol, Sequence, Tuple

from board import Board
from config import CFG
from errors import ConfigError
from models import Cursor, Piece, SearchResult, Shape, Solution
from solver.connectivity import FloodScratch, is_unsolvable

SolutionSink = Callable[[Solution], None]
ProgressHook = Callable[[int, Tuple[Cursor, ...]], None]


class AbortSignal(Protocol):
    def is_set(self) -> bool: ...


class SearchContext:
    """Everything a search run mutates: board, flood scratch, cursors, counters.

    Pieces are ordered largest first (stable for equal sizes). ``index`` is
    the piece whose placement is attempted next; pieces below it are
    committed on the board.
    """

    def __init__(self, shapes: Sequence[Shape], board_size: int):
        shapes = list(shapes)
        if not shapes:
            raise ConfigError("no pieces to place")
        seen_tags = set()
        for shape in shapes:
            if shape.tag in seen_tags:
                raise ConfigError(f"duplicate piece tag {shape.tag}")
            seen_tags.add(shape.tag)
            if shape.size <= 0 or not shape.orientations:
                raise ConfigError(f"piece {shape.label} has no cells")

        self.board = Board(board_size)
        self.scratch = FloodScratch(board_size)
        ordered = sorted(shapes, key=lambda s: s.size, reverse=True)
        self.pieces: List[Piece] = [Piece(s) for s in ordered]
        self.min_piece_size = self.pieces[-1].size

        self.index = 0
        self.started = False
        self.iterations = 0
        self.solutions = 0
        self.pruned = 0
        self.elapsed = 0.0

    @property
    def board_size(self) -> int:
        return self.board.size

    @property
    def finished(self) -> bool:
        return self.started and self.index < 0

    def cursors(self) -> Tuple[Cursor, ...]:
        return tuple(p.cursor for p in self.pieces)

    def result(self, status: str) -> SearchResult:
        return SearchResult(
            status=status,
            solutions=self.solutions,
            iterations=self.iterations,
            pruned=self.pruned,
            elapsed=self.elapsed,
        )


def _backtrack(ctx: SearchContext, k: int) -> int:
    """Advance piece k; on exhaustion unwind to earlier pieces. Returns the new index."""
    pieces = ctx.pieces
    size = ctx.board.size
    while not pieces[k].advance(size):
        pieces[k].reset(size)
        k -= 1
        if k < 0:
            return k
        pieces[k].unplace(ctx.board)
    return k


def search(
    ctx: SearchContext,
    *,
    on_solution: Optional[SolutionSink] = None,
    on_progress: Optional[ProgressHook] = None,
    progress_every: Optional[int] = None,
    abort: Optional[AbortSignal] = None,
    prune: Optional[bool] = None,
) -> SearchResult:
    """
    Run (or resume) the search until the cursor space is exhausted or ``abort``
    is set. Each full board is handed to ``on_solution`` once, numbered from 1
    in discovery order.

    Abort is only honoured between iterations, so an aborted context holds
    exactly the committed placements and can be passed back in to resume.
    """
    if prune is None:
        prune = CFG.PRUNE
    if progress_every is None:
        progress_every = CFG.PROGRESS_EVERY

    board = ctx.board
    size = board.size
    pieces = ctx.pieces
    last = len(pieces) - 1
    t0 = time.time()

    if not ctx.started:
        ctx.started = True
        ctx.index = 0 if pieces[0].reset(size) else -1
    k = ctx.index

    status = "complete"
    try:
        while k >= 0:
            if abort is not None and abort.is_set():
                status = "aborted"
                break

            ctx.iterations += 1
            if on_progress is not None and progress_every > 0 and ctx.iterations % progress_every == 0:
                on_progress(ctx.iterations, ctx.cursors())

            piece = pieces[k]
            if piece.place(board):
                if k == last:
                    try:
                        if board.is_full():
                            # the index is claimed only after the sink returns
                            if on_solution is not None:
                                on_solution(Solution(ctx.solutions + 1, board.render(), board.snapshot()))
                            ctx.solutions += 1
                    finally:
                        piece.unplace(board)
                elif prune and is_unsolvable(board, ctx.min_piece_size, ctx.scratch):
                    piece.unplace(board)
                    ctx.pruned += 1
                else:
                    k += 1
                    if pieces[k].reset(size):
                        continue
                    # no orientation of the next piece fits at all
                    k -= 1
                    piece.unplace(board)
            k = _backtrack(ctx, k)
    finally:
        ctx.index = k
        ctx.elapsed += time.time() - t0

    return ctx.result(status)


def solve(shapes: Sequence[Shape], board_size: Optional[int] = None, **kwargs) -> SearchResult:
    ctx = SearchContext(shapes, CFG.BOARD_SIZE if board_size is None else board_size)
    return search(ctx, **kwargs)


__all__ = ["SearchContext", "search", "solve"]
