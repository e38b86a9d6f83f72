"""Game module for Tetris autoplay.

Exports the headless game engine and supporting classes:
- Grid: fixed-size occupancy board with line clearing
- Piece, ShapeTable, TetrominoType: tetromino kinds and rotation states
- ScoringRules: points for cleared rows
- TetrisGame: game loop, piece queue and autoplay hook
"""

from .grid import Grid
from .pieces import DEFAULT_SHAPES, Piece, ShapeTable, TetrominoType
from .rules import ScoringRules
from .core import Action, GameConfig, TetrisGame

__all__ = [
    "Grid",
    "Piece",
    "ShapeTable",
    "DEFAULT_SHAPES",
    "TetrominoType",
    "ScoringRules",
    "TetrisGame",
    "GameConfig",
    "Action",
]
