from __future__ import annotations

import numpy as np
import pytest

from tetris_autoplay.game.grid import Grid


@pytest.fixture
def empty_grid() -> Grid:
    return Grid(10, 20)


@pytest.fixture
def almost_full_bottom() -> Grid:
    """Row 19 filled in every column except the last."""
    grid = Grid(10, 20)
    grid.cells[19, :9] = 1
    return grid


@pytest.fixture
def stacked_to_top() -> Grid:
    """Column 0 filled from floor to ceiling, everything else empty."""
    grid = Grid(10, 20)
    grid.cells[:, 0] = 1
    return grid


def make_grid(rows: list[str]) -> Grid:
    """Build a grid from strings of '#' (filled) and '.' (empty), top row first."""
    return Grid.from_rows([[1 if ch == "#" else 0 for ch in row] for row in rows])


@pytest.fixture
def grid_from_strings():
    return make_grid


@pytest.fixture
def rng() -> np.random.Generator:
    return np.random.default_rng(1234)
