from __future__ import annotations

from dataclasses import dataclass, field
from enum import IntEnum
from typing import Dict, List, Mapping, Sequence, Tuple

import numpy as np


class TetrominoType(IntEnum):
    I = 1
    O = 2
    T = 3
    S = 4
    Z = 5
    J = 6
    L = 7


Shape = np.ndarray
ROTATIONS = 4


def rotate_clockwise(shape: Shape) -> Shape:
    return np.rot90(shape, 1, axes=(1, 0))


BASE_SHAPES = {
    TetrominoType.I: np.array([[1, 1, 1, 1]], dtype=np.int8),
    TetrominoType.O: np.array([[1, 1], [1, 1]], dtype=np.int8),
    TetrominoType.T: np.array([[0, 1, 0], [1, 1, 1]], dtype=np.int8),
    TetrominoType.S: np.array([[0, 1, 1], [1, 1, 0]], dtype=np.int8),
    TetrominoType.Z: np.array([[1, 1, 0], [0, 1, 1]], dtype=np.int8),
    TetrominoType.J: np.array([[1, 0, 0], [1, 1, 1]], dtype=np.int8),
    TetrominoType.L: np.array([[0, 0, 1], [1, 1, 1]], dtype=np.int8),
}


def _frozen(shape: Shape) -> Shape:
    out = np.array(shape, dtype=np.int8, copy=True)
    out.setflags(write=False)
    return out


def _check_matrix(kind: TetrominoType, shape: Shape) -> None:
    if shape.ndim != 2 or 0 in shape.shape:
        raise ValueError(f"{kind.name}: shape must be a non-empty 2D matrix, got shape {shape.shape}")
    if not np.isin(shape, (0, 1)).all():
        raise ValueError(f"{kind.name}: shape must be binary")
    if not shape.any():
        raise ValueError(f"{kind.name}: shape has no occupied cells")


class ShapeTable:
    """Precomputed rotation states for every tetromino kind.

    Rotation r is the base matrix turned clockwise r times. Every kind has
    exactly four states, including the rotation-invariant square. Tables are
    validated once when built; lookups afterwards never fail.
    """

    def __init__(self, rotations: Mapping[TetrominoType, Sequence[Shape]]) -> None:
        table: Dict[TetrominoType, Tuple[Shape, ...]] = {}
        for kind, states in rotations.items():
            kind = TetrominoType(kind)
            states = [np.asarray(s) for s in states]
            if len(states) != ROTATIONS:
                raise ValueError(f"{kind.name}: expected {ROTATIONS} rotation states, got {len(states)}")
            for s in states:
                _check_matrix(kind, s)
            for r, s in enumerate(states):
                following = states[(r + 1) % ROTATIONS]
                if not np.array_equal(rotate_clockwise(s), following):
                    raise ValueError(f"{kind.name}: rotation {(r + 1) % ROTATIONS} is not rotation {r} turned clockwise")
            table[kind] = tuple(_frozen(s) for s in states)
        if not table:
            raise ValueError("shape table is empty")
        self._table = table

    @classmethod
    def from_base_shapes(cls, base_shapes: Mapping[TetrominoType, Shape]) -> "ShapeTable":
        rotations: Dict[TetrominoType, List[Shape]] = {}
        for kind, base in base_shapes.items():
            base = np.asarray(base, dtype=np.int8)
            _check_matrix(TetrominoType(kind), base)
            states = [base]
            for _ in range(ROTATIONS - 1):
                states.append(rotate_clockwise(states[-1]))
            rotations[kind] = states
        return cls(rotations)

    def kinds(self) -> List[TetrominoType]:
        return list(self._table)

    def shape_for(self, kind: TetrominoType, rotation: int) -> Shape:
        return self._table[TetrominoType(kind)][rotation % ROTATIONS]

    def rotations(self, kind: TetrominoType) -> Tuple[Shape, ...]:
        return self._table[TetrominoType(kind)]

    def max_width(self) -> int:
        return max(s.shape[1] for states in self._table.values() for s in states)


DEFAULT_SHAPES = ShapeTable.from_base_shapes(BASE_SHAPES)


@dataclass(frozen=True)
class Piece:
    kind: TetrominoType
    rotation: int = 0  # 0..3
    table: ShapeTable = field(default=DEFAULT_SHAPES, repr=False, compare=False)

    def shape(self) -> Shape:
        return self.table.shape_for(self.kind, self.rotation)

    def shape_for_rotation(self, rotation: int) -> Shape:
        return self.table.shape_for(self.kind, rotation)

    def with_rotation(self, rotation: int) -> "Piece":
        return Piece(self.kind, rotation % ROTATIONS, self.table)

    def rotated(self, delta: int) -> "Piece":
        return self.with_rotation(self.rotation + delta)

    def cells_at(self, origin_x: int, origin_y: int) -> List[Tuple[int, int]]:
        s = self.shape()
        h, w = s.shape
        cells: List[Tuple[int, int]] = []
        for dy in range(h):
            for dx in range(w):
                if s[dy, dx]:
                    cells.append((origin_x + dx, origin_y + dy))
        return cells
