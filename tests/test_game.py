from __future__ import annotations

import numpy as np
import pytest

from tetris_autoplay.ai.search import MoveSearch, Placement
from tetris_autoplay.game.core import Action, GameConfig, TetrisGame
from tetris_autoplay.game.pieces import TetrominoType
from tetris_autoplay.game.rules import ScoringRules


@pytest.fixture
def game() -> TetrisGame:
    return TetrisGame(GameConfig(random_seed=7))


def test_spawn_position_and_preview(game):
    game.spawn(TetrominoType.O)
    assert (game.current_x, game.current_y) == (4, 0)
    game.spawn(TetrominoType.I)
    assert game.current_x == 3
    assert len(game.preview()) == 1


def test_seeded_games_repeat():
    a = TetrisGame(GameConfig(random_seed=3))
    b = TetrisGame(GameConfig(random_seed=3))
    assert a.current_piece.kind == b.current_piece.kind
    assert a.preview() == b.preview()


def test_moves_respect_walls(game):
    game.spawn(TetrominoType.O)
    for _ in range(10):
        game.step(Action.LEFT)
    assert game.current_x == 0
    for _ in range(10):
        game.step(Action.RIGHT)
    assert game.current_x == 8


def test_rotation_actions(game):
    game.spawn(TetrominoType.T)
    game.step(Action.ROTATE_CW)
    assert game.current_piece.rotation == 1
    game.step(Action.ROTATE_CCW)
    game.step(Action.ROTATE_CCW)
    assert game.current_piece.rotation == 3


def test_hard_drop_locks_and_spawns(game):
    game.spawn(TetrominoType.O)
    game.step(Action.HARD_DROP)
    assert game.grid.cells[18:, 4:6].tolist() == [[int(TetrominoType.O)] * 2] * 2
    assert game.pieces_placed == 1
    assert game.current_y == 0


def test_soft_drop_locks_on_floor(game):
    game.spawn(TetrominoType.O)
    for _ in range(18):
        game.step(Action.SOFT_DROP)
    assert game.pieces_placed == 0
    game.step(Action.SOFT_DROP)
    assert game.pieces_placed == 1


def test_line_clear_scores(game):
    game.grid.cells[19, :9] = 1
    game.spawn(TetrominoType.I)
    assert game.apply_placement(Placement(rotation=1, x=9, y=16, score=0.0))
    assert game.lines_cleared_total == 1
    assert game.score == 100
    assert game.grid.cells[17:, 9].tolist() == [int(TetrominoType.I)] * 3
    assert not game.grid.cells[19, :9].any()


def test_apply_placement_rejects_overlap(game):
    game.grid.cells[19, 0] = 1
    game.spawn(TetrominoType.O)
    assert not game.apply_placement(Placement(rotation=0, x=0, y=18, score=0.0))
    assert game.pieces_placed == 0


def test_autoplay_step_uses_a_snapshot(game):
    game.spawn(TetrominoType.O)
    placement = game.autoplay_step(MoveSearch())
    assert (placement.rotation, placement.x, placement.y) == (0, 0, 18)
    assert game.grid.cells[18:, :2].all()


def test_autoplay_game_over_when_no_move(game):
    game.grid.cells[:, 0] = 1
    game.spawn(TetrominoType.O)
    assert game.autoplay_step() is None
    assert game.game_over


def test_blocked_spawn_ends_game(game):
    game.grid.cells[0:2, 3:7] = 1
    game.spawn(TetrominoType.O)
    assert game.game_over
    state, reward, done, info = game.step(Action.LEFT)
    assert done and info["game_over"]


def test_autoplay_survives_many_pieces():
    game = TetrisGame(GameConfig(random_seed=11))
    search = MoveSearch()
    for _ in range(60):
        assert game.autoplay_step(search) is not None
    assert game.lines_cleared_total > 0
    assert game.grid.max_height() < 15


def test_state_overlays_falling_piece(game):
    game.spawn(TetrominoType.O)
    state = game.get_state()
    assert (state[0:2, 4:6] == -int(TetrominoType.O)).all()
    assert not game.grid.cells.any()


def test_reset_clears_counters(game):
    game.autoplay_step()
    game.reset(5)
    assert game.pieces_placed == 0 and game.score == 0 and not game.grid.cells.any()


def test_scoring_rules():
    rules = ScoringRules()
    assert [rules.score_for_lines(n) for n in range(5)] == [0, 100, 300, 500, 800]


def test_autoplay_step_ends_game_when_placement_does_not_fit(game):
    class OffBoardSearch:
        def find_best_move(self, piece, grid):
            return Placement(rotation=0, x=0, y=grid.height - 1, score=0.0)

    game.spawn(TetrominoType.O)
    assert game.autoplay_step(OffBoardSearch()) is None
    assert game.game_over
    assert game.pieces_placed == 0
    assert not game.grid.cells.any()
