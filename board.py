"""Square occupancy grid shared by the search engine."""

from __future__ import annotations

from typing import List, Tuple

from errors import ConfigError, InvariantError, PlacementOutOfBounds
from models import EMPTY, Grid, Orientation, Tag


class Board:
    def __init__(self, size: int):
        if not isinstance(size, int) or isinstance(size, bool) or size <= 0:
            raise ConfigError(f"board size must be a positive integer, got {size!r}")
        self.size = size
        self.cells: List[List[Tag]] = [[EMPTY] * size for _ in range(size)]
        self.filled = 0

    def cell(self, x: int, y: int) -> Tag:
        return self.cells[y][x]

    def is_full(self) -> bool:
        return self.filled == self.size * self.size

    def clear(self) -> None:
        for row in self.cells:
            row[:] = [EMPTY] * self.size
        self.filled = 0

    def _check_bounds(self, o: Orientation, x: int, y: int) -> None:
        if x < 0 or y < 0 or x + o.width > self.size or y + o.height > self.size:
            raise PlacementOutOfBounds(
                f"{o.width}x{o.height} orientation at ({x},{y}) "
                f"does not fit a {self.size}x{self.size} board"
            )

    def place(self, tag: Tag, o: Orientation, x: int, y: int) -> bool:
        """Stamp ``tag`` over every occupied cell of ``o`` anchored at (x, y).

        On overlap the cells written by this call are rolled back and False is
        returned; the board is then identical to its state before the call.
        """
        self._check_bounds(o, x, y)
        cells = self.cells
        written: List[Tuple[int, int]] = []
        for dx, dy, _ in o.cells:
            bx, by = x + dx, y + dy
            if cells[by][bx] != EMPTY:
                self._rollback(tag, written)
                return False
            cells[by][bx] = tag
            written.append((bx, by))
        self.filled += len(written)
        return True

    def _rollback(self, tag: Tag, written: List[Tuple[int, int]]) -> None:
        for bx, by in written:
            if self.cells[by][bx] != tag:
                raise InvariantError(
                    f"rollback of tag {tag} found {self.cells[by][bx]} at ({bx},{by})"
                )
            self.cells[by][bx] = EMPTY

    def unplace(self, tag: Tag, o: Orientation, x: int, y: int) -> None:
        self._check_bounds(o, x, y)
        cells = self.cells
        for dx, dy, _ in o.cells:
            bx, by = x + dx, y + dy
            if cells[by][bx] == tag:
                cells[by][bx] = EMPTY
                self.filled -= 1

    def snapshot(self) -> Grid:
        return tuple(tuple(row) for row in self.cells)

    def render(self) -> str:
        return "".join(" ".join(f"{c:06x}" for c in row) + "\n" for row in self.cells)

    def __str__(self) -> str:
        return self.render()


__all__ = ["Board"]
