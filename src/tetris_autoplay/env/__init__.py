"""Gymnasium environments for Tetris autoplay."""

from __future__ import annotations

from gymnasium.envs.registration import register

ENV_ID = "TetrisPlacement-10x20-v0"

# Placement-level environment: one (rotation, column) action per piece
register(
    id=ENV_ID,
    entry_point="tetris_autoplay.env.placement_env:TetrisPlacementEnv",
)

__all__ = ["ENV_ID"]
