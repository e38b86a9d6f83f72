from __future__ import annotations

import logging
import random
from collections import deque
from dataclasses import dataclass
from enum import IntEnum
from typing import TYPE_CHECKING, Deque, List, Optional, Tuple

import numpy as np

from .grid import Grid
from .pieces import DEFAULT_SHAPES, Piece, ShapeTable, TetrominoType
from .rules import ScoringRules

if TYPE_CHECKING:
    from tetris_autoplay.ai.search import MoveSearch, Placement


logger = logging.getLogger(__name__)


class Action(IntEnum):
    LEFT = 0
    RIGHT = 1
    ROTATE_CW = 2
    ROTATE_CCW = 3
    SOFT_DROP = 4
    HARD_DROP = 5
    NONE = 6


@dataclass
class GameConfig:
    width: int = 10
    height: int = 20
    random_seed: Optional[int] = None
    spawn_y: int = 0
    preview_size: int = 1


class TetrisGame:
    """Headless falling-block game.

    Owns the live board. Pieces are spawned from a seeded RNG with a short
    preview queue, moved by `step` actions or placed directly through
    `apply_placement` / `autoplay_step`. Locking a piece clears full rows,
    updates the score and spawns the next piece.
    """

    def __init__(self, config: Optional[GameConfig] = None, rules: Optional[ScoringRules] = None,
                 shapes: Optional[ShapeTable] = None) -> None:
        self.config = config or GameConfig()
        self.rules = rules or ScoringRules()
        self.shapes = shapes or DEFAULT_SHAPES
        self.rng = random.Random(self.config.random_seed)
        self.grid = Grid(self.config.width, self.config.height)
        self.score = 0
        self.lines_cleared_total = 0
        self.pieces_placed = 0
        self.game_over = False
        self.current_piece: Optional[Piece] = None
        self.current_x = 0
        self.current_y = 0
        self.next_pieces: Deque[TetrominoType] = deque()
        self.reset()

    def reset(self, seed: Optional[int] = None) -> None:
        if seed is not None:
            self.rng.seed(seed)
        self.grid.reset()
        self.score = 0
        self.lines_cleared_total = 0
        self.pieces_placed = 0
        self.game_over = False
        self.next_pieces.clear()
        for _ in range(max(0, self.config.preview_size)):
            self.next_pieces.append(self._random_kind())
        self._spawn_piece()

    def _random_kind(self) -> TetrominoType:
        return self.rng.choice(self.shapes.kinds())

    def _spawn_piece(self, kind: Optional[TetrominoType] = None) -> None:
        if kind is None:
            if self.next_pieces:
                kind = self.next_pieces.popleft()
                self.next_pieces.append(self._random_kind())
            else:
                kind = self._random_kind()
        self.current_piece = Piece(kind, 0, self.shapes)
        w = self.current_piece.shape().shape[1]
        self.current_x = self.grid.width // 2 - w // 2
        self.current_y = self.config.spawn_y
        # Spawn overlap ends the game
        if not self._fits(self.current_piece, self.current_x, self.current_y):
            self.game_over = True
            logger.info("spawn blocked for %s; game over with score %d", kind.name, self.score)

    def spawn(self, kind: TetrominoType) -> None:
        """Replace the falling piece with `kind` at the spawn position."""
        self._spawn_piece(TetrominoType(kind))

    def _fits(self, piece: Piece, x: int, y: int) -> bool:
        return all(self.grid.is_inside(cx, cy) and not self.grid.is_filled(cx, cy) for cx, cy in piece.cells_at(x, y))

    def _move(self, dx: int, dy: int) -> bool:
        if self.current_piece is None:
            return False
        new_x = self.current_x + dx
        new_y = self.current_y + dy
        if self._fits(self.current_piece, new_x, new_y):
            self.current_x = new_x
            self.current_y = new_y
            return True
        return False

    def _rotate(self, delta: int) -> None:
        if self.current_piece is None:
            return
        rotated = self.current_piece.rotated(delta)
        if self._fits(rotated, self.current_x, self.current_y):
            self.current_piece = rotated

    def _lock_piece(self) -> Tuple[int, bool]:
        assert self.current_piece is not None
        cells = self.current_piece.cells_at(self.current_x, self.current_y)
        if not all(self.grid.is_inside(x, y) and not self.grid.is_filled(x, y) for x, y in cells):
            self.game_over = True
            logger.info("illegal lock; game over with score %d", self.score)
            return 0, True
        self.grid.place_cells(cells, int(self.current_piece.kind))
        lines = self.grid.clear_full_lines()
        self.lines_cleared_total += lines
        self.pieces_placed += 1
        self.score += self.rules.score_for_lines(lines)
        return lines, False

    def _lock_and_spawn(self) -> int:
        lines, _ = self._lock_piece()
        if not self.game_over:
            self._spawn_piece()
        return lines

    def hard_drop(self) -> int:
        if self.current_piece is None or self.game_over:
            return 0
        while self._move(0, 1):
            pass
        return self._lock_and_spawn()

    def apply_placement(self, placement: "Placement") -> bool:
        """Lock the falling piece at a searched placement.

        Returns False (and leaves the board alone) when the placement does not
        fit on the live board.
        """
        if self.current_piece is None or self.game_over:
            return False
        piece = self.current_piece.with_rotation(placement.rotation)
        if not self._fits(piece, placement.x, placement.y):
            return False
        self.current_piece = piece
        self.current_x = placement.x
        self.current_y = placement.y
        self._lock_and_spawn()
        return True

    def autoplay_step(self, search: Optional["MoveSearch"] = None) -> Optional["Placement"]:
        """Let the move search place the falling piece; None means game over."""
        if self.current_piece is None or self.game_over:
            return None
        if search is None:
            from tetris_autoplay.ai.search import MoveSearch

            search = MoveSearch()
        # The search only sees a snapshot of the live board
        best = search.find_best_move(self.current_piece, self.grid.copy())
        if best is None:
            self.game_over = True
            logger.info("no legal placement for %s; game over with score %d",
                        self.current_piece.kind.name, self.score)
            return None
        if not self.apply_placement(best):
            self.game_over = True
            logger.info("placement %s does not fit the live board; game over with score %d", best, self.score)
            return None
        return best

    def step(self, action: Action) -> Tuple[np.ndarray, int, bool, dict]:
        if self.game_over:
            return self.get_state(), 0, True, self.get_stats()

        lines = 0
        if action == Action.LEFT:
            self._move(-1, 0)
        elif action == Action.RIGHT:
            self._move(1, 0)
        elif action == Action.ROTATE_CW:
            self._rotate(1)
        elif action == Action.ROTATE_CCW:
            self._rotate(-1)
        elif action == Action.SOFT_DROP:
            if not self._move(0, 1):
                lines = self._lock_and_spawn()
        elif action == Action.HARD_DROP:
            lines = self.hard_drop()
        elif action == Action.NONE:
            pass

        reward = self.rules.score_for_lines(lines)
        return self.get_state(), reward, self.game_over, self.get_stats()

    def get_state(self) -> np.ndarray:
        # Falling piece overlaid as negative kind values
        state = self.grid.cells.copy()
        if self.current_piece is not None and not self.game_over:
            for x, y in self.current_piece.cells_at(self.current_x, self.current_y):
                if self.grid.is_inside(x, y):
                    state[y, x] = -int(self.current_piece.kind)
        return state

    def preview(self) -> List[TetrominoType]:
        return list(self.next_pieces)

    def get_stats(self) -> dict:
        return {
            "score": self.score,
            "lines_cleared_total": self.lines_cleared_total,
            "pieces_placed": self.pieces_placed,
            "game_over": self.game_over,
            "max_height": self.grid.max_height(),
        }
