# catalog.py: the reference 8×8 puzzle pieces
from __future__ import annotations

from typing import List, Sequence, Tuple

from models import Shape
from shapes import make_shape

# (name, display colour, shape). Tags are assigned 1..n in this order; the
# colours are for rendering only.
REFERENCE_PIECES: Tuple[Tuple[str, int, str], ...] = (
    ("orange-red", 0xFF4500, """
        .X.
        XXX
        .X.
    """),
    ("blue", 0x0000FF, """
        XX
        X.
        X.
        X.
    """),
    ("indigo", 0x4B0082, """
        .XX
        XX.
        X..
    """),
    ("black", 0x000001, """
        XX
        XX
        X.
    """),
    ("lime", 0x61B329, """
        XX
        .X
        .X
        XX
    """),
    ("sky", 0x42C0FB, """
        XX.
        .X.
        XXX
    """),
    ("forest", 0x215E21, """
        .XX
        XXX
        XX.
    """),
    ("grey", 0xDDDDDD, """
        XXX
        .X.
        .X.
    """),
    ("orange", 0xFF7722, """
        X..
        XXX
        XXX
    """),
    ("brown", 0x6B4226, """
        XXXX
        X.XX
        X...
    """),
    ("yellow", 0xFFE600, """
        XXX
        ..X
        ..X
    """),
)


def build_shapes(entries: Sequence[Tuple[str, int, str]]) -> List[Shape]:
    return [
        make_shape(tag, text, name=name, color=color)
        for tag, (name, color, text) in enumerate(entries, start=1)
    ]


def reference_shapes() -> List[Shape]:
    return build_shapes(REFERENCE_PIECES)


def total_area(shapes: Sequence[Shape]) -> int:
    return sum(s.size for s in shapes)


CATALOG_AREA = total_area(reference_shapes())

__all__ = ["REFERENCE_PIECES", "build_shapes", "reference_shapes", "total_area", "CATALOG_AREA"]
