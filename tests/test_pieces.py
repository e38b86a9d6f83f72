from __future__ import annotations

import numpy as np
import pytest

from tetris_autoplay.game.pieces import (
    BASE_SHAPES,
    DEFAULT_SHAPES,
    Piece,
    ShapeTable,
    TetrominoType,
    rotate_clockwise,
)


@pytest.mark.parametrize("kind", list(TetrominoType))
def test_four_rotations_return_original(kind):
    shape = DEFAULT_SHAPES.shape_for(kind, 0)
    turned = shape
    for _ in range(4):
        turned = rotate_clockwise(turned)
    assert np.array_equal(turned, shape)
    assert turned.shape == shape.shape


@pytest.mark.parametrize("kind", list(TetrominoType))
def test_every_kind_has_four_states_of_four_cells(kind):
    states = DEFAULT_SHAPES.rotations(kind)
    assert len(states) == 4
    assert all(int(s.sum()) == 4 for s in states)


def test_rotation_is_clockwise():
    l_piece = DEFAULT_SHAPES.shape_for(TetrominoType.L, 1)
    assert l_piece.tolist() == [[1, 0], [1, 0], [1, 1]]
    vertical_i = DEFAULT_SHAPES.shape_for(TetrominoType.I, 1)
    assert vertical_i.shape == (4, 1)


def test_square_states_identical():
    states = DEFAULT_SHAPES.rotations(TetrominoType.O)
    assert all(np.array_equal(states[0], s) for s in states)


def test_rotation_index_wraps():
    assert np.array_equal(DEFAULT_SHAPES.shape_for(TetrominoType.T, 5), DEFAULT_SHAPES.shape_for(TetrominoType.T, 1))
    assert np.array_equal(DEFAULT_SHAPES.shape_for(TetrominoType.T, -1), DEFAULT_SHAPES.shape_for(TetrominoType.T, 3))


def test_shapes_are_read_only():
    shape = DEFAULT_SHAPES.shape_for(TetrominoType.T, 0)
    with pytest.raises(ValueError):
        shape[0, 0] = 1


def test_table_rejects_wrong_rotation_count():
    base = BASE_SHAPES[TetrominoType.T]
    with pytest.raises(ValueError, match="4 rotation states"):
        ShapeTable({TetrominoType.T: [base, rotate_clockwise(base), rotate_clockwise(rotate_clockwise(base))]})


def test_table_rejects_inconsistent_rotations():
    base = BASE_SHAPES[TetrominoType.T]
    with pytest.raises(ValueError, match="turned clockwise"):
        ShapeTable({TetrominoType.T: [base, base, base, base]})


def test_table_rejects_non_binary_and_empty_shapes():
    with pytest.raises(ValueError, match="binary"):
        ShapeTable.from_base_shapes({TetrominoType.O: np.array([[2, 1], [1, 1]])})
    with pytest.raises(ValueError, match="no occupied"):
        ShapeTable.from_base_shapes({TetrominoType.O: np.zeros((2, 2), dtype=np.int8)})


def test_piece_is_immutable_and_with_rotation_is_pure():
    piece = Piece(TetrominoType.S)
    turned = piece.with_rotation(1)
    assert piece.rotation == 0
    assert turned.rotation == 1
    assert turned.kind is TetrominoType.S
    assert np.array_equal(piece.shape_for_rotation(1), turned.shape())
    with pytest.raises(AttributeError):
        piece.rotation = 2  # type: ignore[misc]


def test_rotated_wraps_around():
    assert Piece(TetrominoType.J, 3).rotated(1).rotation == 0
    assert Piece(TetrominoType.J, 0).rotated(-1).rotation == 3


def test_cells_at_offsets_occupied_cells():
    cells = Piece(TetrominoType.O).cells_at(4, 7)
    assert sorted(cells) == [(4, 7), (4, 8), (5, 7), (5, 8)]


def test_max_width():
    assert DEFAULT_SHAPES.max_width() == 4
