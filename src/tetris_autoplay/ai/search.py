from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Iterable, Iterator, List, Optional

from tetris_autoplay.game.grid import Grid
from tetris_autoplay.game.pieces import ROTATIONS, Piece, Shape

from .collision import simulate_drop
from .evaluator import DEFAULT_WEIGHTS, HeuristicWeights, extract_features, piece_landing_height, score_features


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Placement:
    rotation: int
    x: int
    y: int
    score: float


def candidate_columns(shape: Shape, board_width: int) -> range:
    # Left edge offsets that let the piece sit flush against either wall.
    return range(-(shape.shape[1] - 1), board_width)


def best_placement(placements: Iterable[Placement]) -> Optional[Placement]:
    """Pick the first placement with the strictly highest finite score."""
    best: Optional[Placement] = None
    best_score = -math.inf
    for placement in placements:
        if placement.score > best_score:
            best_score = placement.score
            best = placement
    return best


class MoveSearch:
    """Single-piece placement search.

    Every rotation and column offset is hard-dropped on a private copy of the
    board and scored with the heuristic weights. The live board is never
    written to.
    """

    def __init__(self, weights: Optional[HeuristicWeights] = None) -> None:
        self.weights = weights or DEFAULT_WEIGHTS

    def enumerate_placements(self, piece: Piece, grid: Grid) -> Iterator[Placement]:
        """Yield every reachable resting placement in search order.

        Rotations ascend and, within a rotation, x ascends. Unreachable
        columns are skipped; losing boards are yielded with score -inf.
        `piece` only needs a `shape_for_rotation(r)` method.
        """
        for rotation in range(ROTATIONS):
            shape = piece.shape_for_rotation(rotation)
            for x in candidate_columns(shape, grid.width):
                y = simulate_drop(grid, shape, x)
                if y is None:
                    continue
                board = grid.copy()
                board.place(shape, x, y)
                features = extract_features(board)
                landing = piece_landing_height(grid.height, shape.shape[0], y)
                yield Placement(rotation, x, y, score_features(features, self.weights, landing))

    def find_best_move(self, piece: Piece, grid: Grid) -> Optional[Placement]:
        """Return the highest-scoring placement, or None when the game is lost.

        Only a strictly better score replaces the current best, so ties go to
        the lowest rotation and then the leftmost column.
        """
        best = best_placement(self.enumerate_placements(piece, grid))
        if best is None:
            logger.debug("no legal placement for %r", piece)
        else:
            logger.debug("best placement for %r: %s", piece, best)
        return best

    def valid_placements(self, piece: Piece, grid: Grid) -> List[Placement]:
        return list(self.enumerate_placements(piece, grid))


def enumerate_placements(piece: Piece, grid: Grid, weights: Optional[HeuristicWeights] = None) -> Iterator[Placement]:
    return MoveSearch(weights).enumerate_placements(piece, grid)


def find_best_move(piece: Piece, grid: Grid, weights: Optional[HeuristicWeights] = None) -> Optional[Placement]:
    return MoveSearch(weights).find_best_move(piece, grid)
