from __future__ import annotations

from dataclasses import dataclass
from functools import cached_property
from typing import TYPE_CHECKING, Optional, Tuple

if TYPE_CHECKING:  # pragma: no cover
    from board import Board

Tag = int
Grid = Tuple[Tuple[Tag, ...], ...]
Cursor = Tuple[int, int, int]  # (orientation, x, y)

EMPTY: Tag = 0


@dataclass(frozen=True)
class Orientation:
    """One rotation/mirror of a piece, stamped with the piece's tag."""

    rows: Grid

    @property
    def height(self) -> int:
        return len(self.rows)

    @property
    def width(self) -> int:
        return len(self.rows[0]) if self.rows else 0

    @cached_property
    def cells(self) -> Tuple[Tuple[int, int, Tag], ...]:
        # occupied (dx, dy, tag), row-major
        return tuple(
            (dx, dy, v)
            for dy, row in enumerate(self.rows)
            for dx, v in enumerate(row)
            if v != EMPTY
        )

    @property
    def size(self) -> int:
        return len(self.cells)

    def fits(self, board_size: int) -> bool:
        return self.width <= board_size and self.height <= board_size


@dataclass(frozen=True)
class Shape:
    tag: Tag
    orientations: Tuple[Orientation, ...]
    size: int
    name: str = ""
    color: Optional[int] = None  # display only; never used for identity

    @property
    def label(self) -> str:
        return self.name or f"piece-{self.tag}"


@dataclass
class Piece:
    """A shape plus its mutable search cursor."""

    shape: Shape
    orientation: int = 0
    x: int = 0
    y: int = 0

    @property
    def tag(self) -> Tag:
        return self.shape.tag

    @property
    def size(self) -> int:
        return self.shape.size

    @property
    def current(self) -> Orientation:
        return self.shape.orientations[self.orientation]

    @property
    def cursor(self) -> Cursor:
        return (self.orientation, self.x, self.y)

    def _first_fitting(self, start: int, board_size: int) -> Optional[int]:
        for idx in range(start, len(self.shape.orientations)):
            if self.shape.orientations[idx].fits(board_size):
                return idx
        return None

    def reset(self, board_size: int) -> bool:
        """Move to the first orientation that fits, anchored at the origin.

        Returns False when no orientation of the shape fits the board at all.
        """
        first = self._first_fitting(0, board_size)
        self.orientation = 0 if first is None else first
        self.x = 0
        self.y = 0
        return first is not None

    def advance(self, board_size: int) -> bool:
        # x fastest, then y, then orientation
        o = self.current
        if self.x + o.width < board_size:
            self.x += 1
            return True
        if self.y + o.height < board_size:
            self.x = 0
            self.y += 1
            return True
        nxt = self._first_fitting(self.orientation + 1, board_size)
        if nxt is None:
            return False
        self.orientation = nxt
        self.x = 0
        self.y = 0
        return True

    def place(self, board: "Board") -> bool:
        return board.place(self.tag, self.current, self.x, self.y)

    def unplace(self, board: "Board") -> None:
        board.unplace(self.tag, self.current, self.x, self.y)

    def __str__(self) -> str:
        return (
            f"<Piece {self.shape.label} tag({self.tag}) "
            f"orientation({self.orientation}) x({self.x}) y({self.y})>"
        )


@dataclass(frozen=True)
class Solution:
    index: int  # 1-based, in discovery order
    text: str
    cells: Grid


@dataclass(frozen=True)
class SearchResult:
    status: str  # "complete" | "aborted"
    solutions: int
    iterations: int
    pruned: int = 0
    elapsed: float = 0.0

    @property
    def complete(self) -> bool:
        return self.status == "complete"
