"""Autoplay move search.

Exports the placement search and its building blocks:
- can_place / simulate_drop: collision checks and hard-drop simulation
- HeuristicWeights, evaluate, extract_features: board scoring
- MoveSearch, Placement, find_best_move: exhaustive single-piece search
"""

from .collision import can_place, simulate_drop
from .evaluator import DEFAULT_WEIGHTS, BoardFeatures, HeuristicWeights, evaluate, extract_features
from .search import MoveSearch, Placement, best_placement, enumerate_placements, find_best_move

__all__ = [
    "can_place",
    "simulate_drop",
    "DEFAULT_WEIGHTS",
    "BoardFeatures",
    "HeuristicWeights",
    "evaluate",
    "extract_features",
    "MoveSearch",
    "Placement",
    "best_placement",
    "enumerate_placements",
    "find_best_move",
]
