import random

import pytest

from board import Board
from catalog import reference_shapes
from errors import ConfigError, InvariantError, PlacementOutOfBounds
from models import Piece
from shapes import parse_shape


@pytest.mark.parametrize("size", [0, -1, True, 2.5, "8"])
def test_board_rejects_non_positive_or_non_integer_size(size):
    with pytest.raises(ConfigError):
        Board(size)


def test_place_marks_every_occupied_cell():
    board = Board(4)
    plus = parse_shape(5, ".X.\nXXX\n.X.")
    assert board.place(5, plus, 1, 1)
    assert board.filled == 5
    assert board.cell(2, 1) == 5
    assert board.cell(1, 2) == 5
    assert board.cell(1, 1) == 0
    assert board.cell(3, 3) == 0


def test_failed_place_leaves_board_untouched():
    board = Board(3)
    assert board.place(1, parse_shape(1, "X"), 2, 0)
    before = board.snapshot()

    # first two cells are free, the third collides
    assert not board.place(2, parse_shape(2, "XXX"), 0, 0)
    assert board.snapshot() == before
    assert board.filled == 1


def test_place_then_unplace_round_trips():
    board = Board(4)
    board.place(9, parse_shape(9, "XX\nXX"), 0, 0)
    before = board.snapshot()
    el = parse_shape(3, "X.\nX.\nXX")
    assert board.place(3, el, 2, 1)
    board.unplace(3, el, 2, 1)
    assert board.snapshot() == before
    assert board.filled == 4


def test_unplace_never_clears_foreign_tags():
    board = Board(3)
    bar = parse_shape(1, "XXX")
    board.place(1, bar, 0, 0)
    board.unplace(2, parse_shape(2, "XXX"), 0, 0)
    assert board.snapshot()[0] == (1, 1, 1)
    assert board.filled == 3


@pytest.mark.parametrize("x,y", [(2, 0), (0, 3), (-1, 0)])
def test_out_of_bounds_placement_is_an_invariant_error(x, y):
    board = Board(4)
    square = parse_shape(1, "XXX\nXXX")
    with pytest.raises(PlacementOutOfBounds):
        board.place(1, square, x, y)
    assert issubclass(PlacementOutOfBounds, InvariantError)
    assert board.filled == 0


def test_rollback_refuses_to_clear_a_foreign_cell():
    board = Board(2)
    board.cells[0][0] = 4
    with pytest.raises(InvariantError):
        board._rollback(3, [(0, 0)])


def test_render_is_fixed_width_hex():
    board = Board(2)
    board.place(0xFF, parse_shape(0xFF, "X"), 0, 0)
    board.place(0x4B0082, parse_shape(0x4B0082, "X"), 1, 1)
    assert board.render() == "0000ff 000000\n000000 4b0082\n"
    assert str(board) == board.render()


def test_clear_and_is_full():
    board = Board(2)
    assert not board.is_full()
    board.place(1, parse_shape(1, "XX\nXX"), 0, 0)
    assert board.is_full()
    board.clear()
    assert board.filled == 0
    assert board.snapshot() == ((0, 0), (0, 0))


def test_place_is_all_or_nothing_on_crowded_boards():
    rng = random.Random(1234)
    shapes = reference_shapes()
    for _ in range(25):
        board = Board(8)
        for shape in rng.sample(shapes, 4):
            o = rng.choice(shape.orientations)
            board.place(shape.tag, o, rng.randrange(8 - o.width + 1), rng.randrange(8 - o.height + 1))

        placed_tags = {v for row in board.cells for v in row} - {0}
        probe = Piece(next(s for s in shapes if s.tag not in placed_tags))
        assert probe.reset(8)
        while True:
            before = board.snapshot()
            if probe.place(board):
                probe.unplace(board)
            assert board.snapshot() == before
            if not probe.advance(8):
                break
