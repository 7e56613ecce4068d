import pytest

from catalog import CATALOG_AREA, REFERENCE_PIECES, build_shapes, reference_shapes
from errors import ShapeError
from render import render_solution
from solver.search import SearchContext


def test_reference_catalog_covers_the_board_exactly():
    shapes = reference_shapes()
    assert len(shapes) == 11
    assert CATALOG_AREA == 64
    assert [s.tag for s in shapes] == list(range(1, 12))


def test_reference_catalog_orders_largest_first():
    ctx = SearchContext(reference_shapes(), 8)
    sizes = [p.size for p in ctx.pieces]
    assert sizes == sorted(sizes, reverse=True)
    assert ctx.pieces[0].shape.name == "brown"
    assert ctx.min_piece_size == 5


def test_display_colour_never_doubles_as_tag():
    shapes = reference_shapes()
    black = next(s for s in shapes if s.name == "black")
    assert black.color == 0x000001
    assert black.tag != 0
    assert all(s.tag != s.color for s in shapes)


def test_build_shapes_fails_fast_on_bad_entry():
    entries = list(REFERENCE_PIECES[:2]) + [("bad", 0x123456, "XX\nX")]
    with pytest.raises(ShapeError):
        build_shapes(entries)


def test_render_solution_uses_display_colours():
    shapes = build_shapes([("left", 0xFF0000, "X\nX"), ("right", None, "X\nX")])
    svg, legend = render_solution(((1, 2), (1, 2)), shapes)
    assert svg.startswith("<svg")
    assert svg.count("<rect") == 5  # four cells plus the frame
    assert "#ff0000" in svg
    assert "left (2)" in legend
    assert "right (2)" in legend
    assert "rgb(" in legend
