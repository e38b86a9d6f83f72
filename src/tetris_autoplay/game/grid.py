from __future__ import annotations

from typing import Iterable, Optional, Sequence, Tuple

import numpy as np


Coordinate = Tuple[int, int]


class Grid:
    """Fixed-size occupancy board.

    Row 0 is the top of the board. Cells hold 0 when empty and a positive
    integer (the tetromino kind, used only for display) when filled.
    The dimensions are fixed at construction.
    """

    def __init__(self, width: int = 10, height: int = 20, cells: Optional[np.ndarray] = None) -> None:
        self.width = int(width)
        self.height = int(height)
        if self.width <= 0 or self.height <= 0:
            raise ValueError(f"grid dimensions must be positive, got {self.width}x{self.height}")
        if cells is None:
            self.cells = np.zeros((self.height, self.width), dtype=np.int8)
        else:
            cells = np.asarray(cells)
            if cells.shape != (self.height, self.width):
                raise ValueError(f"expected cells of shape {(self.height, self.width)}, got {cells.shape}")
            self.cells = cells.astype(np.int8, copy=True)

    @classmethod
    def from_rows(cls, rows: Sequence[Sequence[int]]) -> "Grid":
        """Build a grid from nested rows, top row first. Truthy cells are filled."""
        array = (np.asarray(rows) != 0).astype(np.int8)
        if array.ndim != 2:
            raise ValueError("rows must form a 2D matrix")
        height, width = array.shape
        return cls(width, height, array)

    def copy(self) -> "Grid":
        return Grid(self.width, self.height, self.cells)

    def reset(self) -> None:
        self.cells.fill(0)

    def is_inside(self, x: int, y: int) -> bool:
        return 0 <= x < self.width and 0 <= y < self.height

    def is_filled(self, x: int, y: int) -> bool:
        return bool(self.cells[y, x] != 0)

    def occupancy(self) -> np.ndarray:
        return self.cells != 0

    def place(self, shape: np.ndarray, x: int, y: int, value: int = 1) -> int:
        """Write the occupied cells of `shape` at (x, y); return cells written.

        Cells falling outside the board are skipped.
        """
        written = 0
        for dy, dx in zip(*np.nonzero(shape)):
            col, row = x + int(dx), y + int(dy)
            if self.is_inside(col, row):
                self.cells[row, col] = value
                written += 1
        return written

    def place_cells(self, cells: Iterable[Coordinate], value: int = 1) -> None:
        for x, y in cells:
            self.cells[y, x] = value

    def clear_full_lines(self) -> int:
        """Remove complete rows, shifting everything above down; return count.

        Rows are scanned bottom to top and the same index is checked again
        after a shift, so stacked full rows are all removed.
        """
        cleared = 0
        row = self.height - 1
        while row >= 0:
            if np.all(self.cells[row] != 0):
                cleared += 1
                self.cells[1 : row + 1] = self.cells[0:row].copy()
                self.cells[0] = 0
            else:
                row -= 1
        return cleared

    def column_heights(self) -> np.ndarray:
        occ = self.occupancy()
        first_filled = np.where(occ.any(axis=0), np.argmax(occ, axis=0), self.height)
        return (self.height - first_filled).astype(np.int64)

    def aggregate_height(self) -> int:
        return int(np.sum(self.column_heights()))

    def max_height(self) -> int:
        return int(np.max(self.column_heights()))

    def count_holes(self) -> int:
        # Empty cells under the first filled cell of their column
        occ = self.occupancy()
        covered = np.logical_or.accumulate(occ, axis=0)
        return int(np.count_nonzero(covered & ~occ))

    def bumpiness(self) -> int:
        return int(np.sum(np.abs(np.diff(self.column_heights()))))

    def top_row_occupied(self) -> bool:
        return bool(np.any(self.cells[0] != 0))

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Grid):
            return NotImplemented
        return self.cells.shape == other.cells.shape and bool(np.array_equal(self.occupancy(), other.occupancy()))

    def __repr__(self) -> str:
        return f"Grid(width={self.width}, height={self.height}, filled={int(np.count_nonzero(self.cells))})"


def format_grid(cells: np.ndarray, empty: str = "·", filled: str = "█") -> str:
    return "\n".join("".join(filled if cell else empty for cell in row) for row in cells)
