# shapes.py: piece text -> deduplicated orientations
from __future__ import annotations

from typing import List, Optional, Tuple

from errors import ShapeError
from models import EMPTY, Orientation, Shape, Tag

FILLED_MARK = "X"
EMPTY_MARK = "."


def parse_shape(tag: Tag, text: str) -> Orientation:
    """
    Parse a row-based description (``X`` filled, ``.`` empty) into the base
    orientation, stamping filled cells with ``tag``.

    Leading/trailing whitespace on each row is ignored and blank rows are
    skipped. Anything else that is off raises ShapeError.
    """
    if not isinstance(tag, int) or isinstance(tag, bool) or tag == EMPTY or tag < 0:
        raise ShapeError(f"piece tag must be a positive integer, got {tag!r}")
    if not isinstance(text, str):
        raise ShapeError(f"shape description must be text, got {type(text).__name__}")

    rows: List[Tuple[Tag, ...]] = []
    width: Optional[int] = None
    for lineno, raw in enumerate(text.splitlines(), start=1):
        line = raw.strip()
        if not line:
            continue
        bad = set(line) - {FILLED_MARK, EMPTY_MARK}
        if bad:
            raise ShapeError(
                f"tag {tag}: unexpected mark(s) {''.join(sorted(bad))!r} on line {lineno}"
            )
        if width is None:
            width = len(line)
        elif len(line) != width:
            raise ShapeError(
                f"tag {tag}: row {len(rows) + 1} has {len(line)} cells, expected {width}"
            )
        rows.append(tuple(tag if ch == FILLED_MARK else EMPTY for ch in line))

    if not rows:
        raise ShapeError(f"tag {tag}: empty shape description")
    base = Orientation(tuple(rows))
    if base.size == 0:
        raise ShapeError(f"tag {tag}: shape has no filled cells")
    return base


def rotate(o: Orientation) -> Orientation:
    """Rotate 90° clockwise: an H×W grid becomes W×H."""
    h, w = o.height, o.width
    return Orientation(
        tuple(tuple(o.rows[r][c] for r in range(h - 1, -1, -1)) for c in range(w))
    )


def mirror(o: Orientation) -> Orientation:
    return Orientation(tuple(tuple(reversed(row)) for row in o.rows))


def orientations(base: Orientation) -> Tuple[Orientation, ...]:
    """All distinct rotations and mirrors of ``base``, in generation order."""
    out: List[Orientation] = []

    def _add(o: Orientation) -> None:
        if o not in out:
            out.append(o)

    current = base
    for _ in range(4):
        _add(current)
        _add(mirror(current))
        current = rotate(current)
    return tuple(out)


def make_shape(tag: Tag, text: str, *, name: str = "", color: Optional[int] = None) -> Shape:
    base = parse_shape(tag, text)
    return Shape(
        tag=tag,
        orientations=orientations(base),
        size=base.size,
        name=name,
        color=color,
    )


def render_orientation(o: Orientation) -> str:
    return "\n".join(
        "".join(FILLED_MARK if v != EMPTY else EMPTY_MARK for v in row) for row in o.rows
    ) + "\n"


__all__ = [
    "parse_shape",
    "rotate",
    "mirror",
    "orientations",
    "make_shape",
    "render_orientation",
]
