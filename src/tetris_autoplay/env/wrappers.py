from __future__ import annotations

import numpy as np
import gymnasium as gym
from gymnasium import spaces


class FlattenDiscreteActionWrapper(gym.ActionWrapper):
    """Flattens MultiDiscrete (rotation, column) -> Discrete(N).

    Also exposes `get_action_mask()` returning a 1D boolean mask of shape (N,).
    Index = rotation * n_columns + column.
    """

    def __init__(self, env: gym.Env):
        super().__init__(env)
        assert isinstance(env.action_space, spaces.MultiDiscrete)
        rotations, columns = map(int, env.action_space.nvec)
        self.rot = rotations
        self.columns = columns
        self.n = rotations * columns
        self.action_space = spaces.Discrete(self.n)

    def _unflatten(self, idx: int) -> tuple[int, int]:
        return idx // self.columns, idx % self.columns

    def flatten(self, rotation: int, column: int) -> int:
        return int(rotation) * self.columns + int(column)

    def action(self, action: int):  # type: ignore[override]
        return np.array(self._unflatten(int(action)), dtype=np.int64)

    def get_action_mask(self) -> np.ndarray:
        return self.env.unwrapped.get_action_mask().reshape(-1)


class ResampleInvalidActionWrapper(gym.Wrapper):
    """Swap a masked-out Discrete action for a random reachable placement.

    Needs an inner wrapper exposing `get_action_mask()`, such as
    `FlattenDiscreteActionWrapper`. Sampling uses the env's seeded RNG.
    """

    def __init__(self, env: gym.Env):
        super().__init__(env)
        if not isinstance(env.action_space, spaces.Discrete):
            raise TypeError("ResampleInvalidActionWrapper expects a Discrete action space")
        if not callable(getattr(env, "get_action_mask", None)):
            raise TypeError("wrapped env must provide get_action_mask()")

    def get_action_mask(self) -> np.ndarray:
        return self.env.get_action_mask()

    def replacement(self, action: int) -> int:
        mask = self.get_action_mask()
        if 0 <= action < mask.size and mask[action]:
            return action
        reachable = np.flatnonzero(mask)
        if reachable.size == 0:
            return action
        return int(self.np_random.choice(reachable))

    def step(self, action):  # type: ignore[override]
        return self.env.step(self.replacement(int(action)))
