from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Tuple

from tetris_autoplay.game.grid import Grid


@dataclass(frozen=True)
class HeuristicWeights:
    """Linear weights for the board evaluation.

    Higher completed-line counts are rewarded; height, holes and bumpiness
    are penalised. `landing_height` is an extra term that is off (0.0)
    unless a caller opts in.
    """

    aggregate_height: float = -0.510066
    completed_lines: float = 0.760666
    holes: float = -0.35663
    bumpiness: float = -0.184483
    landing_height: float = 0.0


DEFAULT_WEIGHTS = HeuristicWeights()


@dataclass(frozen=True)
class BoardFeatures:
    completed_lines: int
    aggregate_height: int
    holes: int
    bumpiness: int
    max_height: int
    column_heights: Tuple[int, ...]
    topped_out: bool


def extract_features(grid: Grid) -> BoardFeatures:
    """Measure a board after virtually clearing its complete rows.

    The argument is left untouched. `topped_out` flags a board whose top
    row is occupied while the aggregate height exceeds `height - 2`.
    """
    board = grid.copy()
    completed = board.clear_full_lines()
    heights = board.column_heights()
    aggregate = int(heights.sum())
    return BoardFeatures(
        completed_lines=completed,
        aggregate_height=aggregate,
        holes=board.count_holes(),
        bumpiness=board.bumpiness(),
        max_height=int(heights.max()),
        column_heights=tuple(int(h) for h in heights),
        topped_out=board.top_row_occupied() and aggregate > board.height - 2,
    )


def score_features(features: BoardFeatures, weights: HeuristicWeights = DEFAULT_WEIGHTS,
                   landing_height: float = 0.0) -> float:
    if features.topped_out:
        return -math.inf
    score = (
        weights.aggregate_height * features.aggregate_height
        + weights.completed_lines * features.completed_lines
        + weights.holes * features.holes
        + weights.bumpiness * features.bumpiness
    )
    if weights.landing_height:
        score += weights.landing_height * landing_height
    return score


def evaluate(grid: Grid, weights: HeuristicWeights = DEFAULT_WEIGHTS, landing_height: float = 0.0) -> float:
    """Score a post-placement board; -inf marks a losing placement."""
    return score_features(extract_features(grid), weights, landing_height)


def piece_landing_height(board_height: int, shape_rows: int, y: int) -> float:
    # Height of the piece's vertical centre above the floor.
    return board_height - y - shape_rows / 2.0
