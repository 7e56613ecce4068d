# solver/connectivity.py
from __future__ import annotations

from typing import FrozenSet, List, Optional, Tuple

from board import Board
from models import EMPTY

# king-move neighbourhood
_NEIGHBOURS = tuple(
    (dx, dy) for dy in (-1, 0, 1) for dx in (-1, 0, 1) if (dx, dy) != (0, 0)
)


class FloodScratch:
    """Visit markers for flood fills over a board of a given size.

    A cell counts as visited in the current run iff its marker equals
    ``marker``; ``bump()`` starts a new run without touching the grid.
    """

    def __init__(self, size: int):
        self.size = size
        self.grid: List[List[int]] = [[0] * size for _ in range(size)]
        self.marker = 0

    def bump(self) -> int:
        self.marker += 1
        return self.marker

    def __str__(self) -> str:
        return "".join(" ".join(f"{c:03x}" for c in row) + "\n" for row in self.grid)


def _scratch_for(board: Board, scratch: Optional[FloodScratch]) -> FloodScratch:
    if scratch is None:
        return FloodScratch(board.size)
    if scratch.size != board.size:
        raise ValueError(f"scratch size {scratch.size} != board size {board.size}")
    return scratch


def fill(
    board: Board,
    scratch: FloodScratch,
    x: int,
    y: int,
    collect: Optional[List[Tuple[int, int]]] = None,
) -> int:
    """Flood-fill the empty region containing (x, y) and return its size.

    Uses the scratch's current marker; callers bump it once per scan. Visited
    cells are appended to ``collect`` when given.
    """
    size = board.size
    cells = board.cells
    seen = scratch.grid
    marker = scratch.marker

    seen[y][x] = marker
    count = 0
    stack = [(x, y)]
    while stack:
        cx, cy = stack.pop()
        count += 1
        if collect is not None:
            collect.append((cx, cy))
        for dx, dy in _NEIGHBOURS:
            nx, ny = cx + dx, cy + dy
            if nx < 0 or ny < 0 or nx >= size or ny >= size:
                continue
            if cells[ny][nx] == EMPTY and seen[ny][nx] != marker:
                seen[ny][nx] = marker
                stack.append((nx, ny))
    return count


def is_unsolvable(board: Board, min_piece_size: int, scratch: Optional[FloodScratch] = None) -> bool:
    """True if some empty region is smaller than ``min_piece_size``.

    Necessary, not sufficient: a False answer says nothing about whether the
    board can still be completed.
    """
    scratch = _scratch_for(board, scratch)
    marker = scratch.bump()
    seen = scratch.grid
    for y, row in enumerate(board.cells):
        for x, v in enumerate(row):
            if v != EMPTY or seen[y][x] == marker:
                continue
            if fill(board, scratch, x, y) < min_piece_size:
                return True
    return False


def region_sizes(board: Board, scratch: Optional[FloodScratch] = None) -> List[int]:
    scratch = _scratch_for(board, scratch)
    marker = scratch.bump()
    seen = scratch.grid
    sizes: List[int] = []
    for y, row in enumerate(board.cells):
        for x, v in enumerate(row):
            if v == EMPTY and seen[y][x] != marker:
                sizes.append(fill(board, scratch, x, y))
    return sizes


def regions(board: Board, scratch: Optional[FloodScratch] = None) -> List[FrozenSet[Tuple[int, int]]]:
    """Every empty region as a set of (x, y) cells, in discovery order."""
    scratch = _scratch_for(board, scratch)
    marker = scratch.bump()
    seen = scratch.grid
    out: List[FrozenSet[Tuple[int, int]]] = []
    for y, row in enumerate(board.cells):
        for x, v in enumerate(row):
            if v == EMPTY and seen[y][x] != marker:
                found: List[Tuple[int, int]] = []
                fill(board, scratch, x, y, found)
                out.append(frozenset(found))
    return out


def smallest_region(board: Board, scratch: Optional[FloodScratch] = None) -> Optional[int]:
    sizes = region_sizes(board, scratch)
    return min(sizes) if sizes else None


__all__ = ["FloodScratch", "fill", "is_unsolvable", "region_sizes", "regions", "smallest_region"]
