from __future__ import annotations

from typing import Optional

import numpy as np

from tetris_autoplay.game.grid import Grid
from tetris_autoplay.game.pieces import Shape


def can_place(grid: Grid, shape: Shape, x: int, y: int) -> bool:
    """Return True if `shape` fits with its top-left corner at (x, y).

    Occupied cells above the board (negative rows) are only checked against
    the side walls, so a piece may stick out over the top.
    """
    for dy, dx in zip(*np.nonzero(shape)):
        col = x + int(dx)
        row = y + int(dy)
        if col < 0 or col >= grid.width:
            return False
        if row < 0:
            continue
        if row >= grid.height or grid.cells[row, col] != 0:
            return False
    return True


def simulate_drop(grid: Grid, shape: Shape, x: int) -> Optional[int]:
    """Hard-drop `shape` in column offset `x` from row 0.

    Returns the landing row, or None when the column is unreachable: the
    piece sticks out past a wall or the floor at spawn, or the spawn position
    already overlaps filled cells.
    """
    if not can_place(grid, shape, x, 0):
        return None

    y = 0
    while can_place(grid, shape, x, y + 1):
        y += 1
    return y
