from __future__ import annotations

from typing import Any, Dict, List, Optional, Tuple

import numpy as np
import gymnasium as gym
from gymnasium import spaces

from tetris_autoplay.ai.evaluator import HeuristicWeights, extract_features
from tetris_autoplay.ai.search import MoveSearch, Placement, best_placement
from tetris_autoplay.game.core import GameConfig, TetrisGame
from tetris_autoplay.game.grid import format_grid
from tetris_autoplay.game.pieces import ROTATIONS


def _column_offset(game: TetrisGame) -> int:
    # Column index 0 maps to the leftmost offset of the widest shape.
    return game.shapes.max_width() - 1


def _valid_placements(game: TetrisGame, search: MoveSearch) -> List[Placement]:
    if game.current_piece is None or game.game_over:
        return []
    return search.valid_placements(game.current_piece, game.grid.copy())


def _compute_action_mask(game: TetrisGame, placements: List[Placement]) -> np.ndarray:
    offset = _column_offset(game)
    mask = np.zeros((ROTATIONS, game.grid.width + offset), dtype=np.bool_)
    for p in placements:
        mask[p.rotation, p.x + offset] = True
    return mask


class TetrisPlacementEnv(gym.Env):
    """Placement-level Tetris: one action hard-drops the falling piece.

    Action: (rotation, column) where column = x + (widest shape width - 1).
    `info["action_mask"]` marks reachable placements and
    `info["autoplay_action"]` holds the move search's choice.
    """

    metadata = {"render_modes": ["ansi"], "render_fps": 4}

    def __init__(self, config: Optional[GameConfig] = None, render_mode: Optional[str] = None,
                 weights: Optional[HeuristicWeights] = None,
                 reward_weights: Optional[Dict[str, float]] = None,
                 invalid_action_penalty: float = -1.0,
                 step_penalty: float = 0.0,
                 terminal_penalty: float = -10.0) -> None:
        super().__init__()
        self.game = TetrisGame(config)
        self.search = MoveSearch(weights)
        self.render_mode = render_mode

        self.invalid_action_penalty = float(invalid_action_penalty)
        self.step_penalty = float(step_penalty)
        self.terminal_penalty = float(terminal_penalty)
        self.reward_weights: Dict[str, float] = {
            "survive": 0.1,          # per placed piece
            "lines": 1.0,            # per cleared row
            "lines_sq": 0.5,         # extra for multi-row clears
            "holes": 0.3,            # penalise new holes
            "bumpiness": 0.02,       # penalise bumpiness increase
            "height": 0.05,          # penalise max height increase
        }
        if reward_weights:
            self.reward_weights.update({k: float(v) for k, v in reward_weights.items()})

        height, width = self.game.grid.height, self.game.grid.width
        n_kinds = len(self.game.shapes.kinds())
        preview = max(1, self.game.config.preview_size)

        self.observation_space = spaces.Dict(
            {
                "grid": spaces.Box(low=0, high=1, shape=(height, width), dtype=np.int8),
                "piece": spaces.Discrete(n_kinds + 1),
                "next_pieces": spaces.Box(low=0, high=n_kinds, shape=(preview,), dtype=np.int8),
            }
        )
        self.n_columns = width + _column_offset(self.game)
        self.action_space = spaces.MultiDiscrete((ROTATIONS, self.n_columns))

        self._placements: List[Placement] = []

    def _get_obs(self) -> Dict[str, Any]:
        preview = max(1, self.game.config.preview_size)
        next_pieces = np.zeros((preview,), dtype=np.int8)
        for i, kind in enumerate(self.game.preview()[:preview]):
            next_pieces[i] = int(kind)
        piece = 0 if self.game.current_piece is None or self.game.game_over else int(self.game.current_piece.kind)
        return {
            "grid": (self.game.grid.cells != 0).astype(np.int8),
            "piece": piece,
            "next_pieces": next_pieces,
        }

    def _get_info(self) -> Dict[str, Any]:
        self._placements = _valid_placements(self.game, self.search)
        offset = _column_offset(self.game)
        best = best_placement(self._placements)
        return {
            "action_mask": _compute_action_mask(self.game, self._placements),
            "valid_actions": [(p.rotation, p.x + offset) for p in self._placements],
            "autoplay_action": None if best is None else (best.rotation, best.x + offset),
            "score": self.game.score,
            "lines_cleared_total": self.game.lines_cleared_total,
            "pieces_placed": self.game.pieces_placed,
        }

    def get_action_mask(self) -> np.ndarray:
        return _compute_action_mask(self.game, _valid_placements(self.game, self.search))

    def reset(self, *, seed: Optional[int] = None, options: Optional[dict] = None) -> Tuple[Dict[str, Any], Dict[str, Any]]:
        super().reset(seed=seed)
        self.game.reset(seed)
        return self._get_obs(), self._get_info()

    def step(self, action: np.ndarray | Tuple[int, int]):
        rotation, column = map(int, action)
        x = column - _column_offset(self.game)

        match = next((p for p in self._placements if p.rotation == rotation and p.x == x), None)

        before = extract_features(self.game.grid)
        lines_before = self.game.lines_cleared_total

        reward_components: Dict[str, float] = {}
        if match is None or not self.game.apply_placement(match):
            reward_components["invalid"] = self.invalid_action_penalty
        else:
            lines = self.game.lines_cleared_total - lines_before
            after = extract_features(self.game.grid)
            reward_components["survive"] = self.reward_weights["survive"]
            reward_components["lines"] = self.reward_weights["lines"] * float(lines)
            reward_components["lines_sq"] = self.reward_weights["lines_sq"] * float(lines * lines)
            reward_components["holes"] = -self.reward_weights["holes"] * float(max(0, after.holes - before.holes))
            reward_components["bumpiness"] = -self.reward_weights["bumpiness"] * float(
                max(0, after.bumpiness - before.bumpiness))
            reward_components["height"] = -self.reward_weights["height"] * float(
                max(0, after.max_height - before.max_height))

        reward_components["step"] = self.step_penalty
        info = self._get_info()
        # No placement the search accepts ends the game as well
        if not self.game.game_over and info["autoplay_action"] is None:
            self.game.game_over = True
        terminated = bool(self.game.game_over)
        if terminated:
            reward_components["terminal"] = self.terminal_penalty

        obs = self._get_obs()
        info["reward_components"] = reward_components
        reward = float(sum(reward_components.values()))
        return obs, reward, terminated, False, info

    def render(self) -> Optional[str]:
        if self.render_mode == "ansi":
            return format_grid(self.game.get_state(), filled="#", empty=".")
        return None

    def close(self) -> None:
        pass
