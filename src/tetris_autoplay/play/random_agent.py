from __future__ import annotations

import argparse
import random
from typing import List, Optional

import gymnasium as gym

from tetris_autoplay.env import ENV_ID  # ensure registration


def run_random(steps: int = 200, seed: Optional[int] = None, follow_autoplay: bool = False) -> float:
    """Play `steps` placements with random valid actions (or the autoplay choice)."""
    rng = random.Random(seed)
    env = gym.make(ENV_ID)
    obs, info = env.reset(seed=seed)
    total_reward = 0.0
    for _ in range(steps):
        valid = info.get("valid_actions", [])
        if follow_autoplay and info.get("autoplay_action") is not None:
            action = info["autoplay_action"]
        elif valid:
            action = rng.choice(valid)
        else:
            action = env.action_space.sample()
        obs, reward, terminated, truncated, info = env.step(action)
        total_reward += float(reward)
        if terminated or truncated:
            obs, info = env.reset()
    env.close()
    return total_reward


def main(argv: Optional[List[str]] = None) -> None:
    p = argparse.ArgumentParser(description="Baseline agent for the placement environment.")
    p.add_argument("--steps", type=int, default=200)
    p.add_argument("--seed", type=int, default=None)
    p.add_argument("--autoplay", action="store_true", help="Follow the move search instead of random actions")
    args = p.parse_args(argv)
    total = run_random(args.steps, args.seed, args.autoplay)
    label = "Autoplay" if args.autoplay else "Random"
    print(f"{label} agent total reward: {total:.2f}")


if __name__ == "__main__":  # pragma: no cover
    main()
