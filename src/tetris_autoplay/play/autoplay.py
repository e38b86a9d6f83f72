from __future__ import annotations

import argparse
import logging
import sys
import time
from typing import List, Optional

from tetris_autoplay.ai.evaluator import HeuristicWeights
from tetris_autoplay.ai.search import MoveSearch
from tetris_autoplay.game.core import GameConfig, TetrisGame
from tetris_autoplay.game.grid import format_grid


logger = logging.getLogger(__name__)


def play_game(game: TetrisGame, search: MoveSearch, max_pieces: Optional[int] = None) -> dict:
    """Run autoplay until game over or `max_pieces` locks; return stats."""
    while not game.game_over:
        if max_pieces is not None and game.pieces_placed >= max_pieces:
            break
        if game.autoplay_step(search) is None:
            break
    return game.get_stats()


def run_games(games: int = 1, seed: int = 0, max_pieces: Optional[int] = None,
              weights: Optional[HeuristicWeights] = None, width: int = 10, height: int = 20) -> List[dict]:
    search = MoveSearch(weights)
    results: List[dict] = []
    for i in range(games):
        game = TetrisGame(GameConfig(width=width, height=height, random_seed=seed + i))
        start = time.perf_counter()
        stats = play_game(game, search, max_pieces)
        stats["seconds"] = time.perf_counter() - start
        stats["board"] = format_grid(game.grid.cells)
        logger.info("game %d/%d: score=%d lines=%d pieces=%d", i + 1, games,
                    stats["score"], stats["lines_cleared_total"], stats["pieces_placed"])
        results.append(stats)
    return results


def _print_progress(game_idx: int, total: int, stats: dict) -> None:
    width = 30
    filled = int(width * (game_idx + 1) / max(1, total))
    bar = "=" * filled + "." * (width - filled)
    msg = f"\r[{bar}] {game_idx + 1}/{total}  lines={stats['lines_cleared_total']}  pieces={stats['pieces_placed']}"
    print(msg, end="", file=sys.stdout, flush=True)


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(description="Run headless autoplay games and report statistics.")
    p.add_argument("--games", type=int, default=5)
    p.add_argument("--seed", type=int, default=0)
    p.add_argument("--max-pieces", type=int, default=1000,
                   help="Stop a game after this many locked pieces (0 = play until game over)")
    p.add_argument("--width", type=int, default=10)
    p.add_argument("--height", type=int, default=20)
    p.add_argument("--landing-height-weight", type=float, default=0.0,
                   help="Optional landing height term; 0 disables it")
    p.add_argument("--show-board", action="store_true", help="Print each final board")
    p.add_argument("--log-level", default="WARNING")
    return p


def main(argv: Optional[List[str]] = None) -> None:
    args = build_parser().parse_args(argv)
    logging.basicConfig(level=args.log_level.upper(), format="%(asctime)s %(name)s %(levelname)s %(message)s")

    weights = HeuristicWeights(landing_height=args.landing_height_weight)
    max_pieces = args.max_pieces if args.max_pieces > 0 else None
    results: List[dict] = []
    for i in range(args.games):
        stats = run_games(1, args.seed + i, max_pieces, weights, args.width, args.height)[0]
        results.append(stats)
        _print_progress(i, args.games, stats)
    print()

    for i, stats in enumerate(results):
        status = "game over" if stats["game_over"] else "piece limit"
        print(f"game {i + 1}: score={stats['score']} lines={stats['lines_cleared_total']} "
              f"pieces={stats['pieces_placed']} ({status}, {stats['seconds']:.2f}s)")
        if args.show_board:
            print(stats["board"])
    if results:
        mean_lines = sum(r["lines_cleared_total"] for r in results) / len(results)
        mean_score = sum(r["score"] for r in results) / len(results)
        print(f"mean lines={mean_lines:.1f} mean score={mean_score:.1f}")


if __name__ == "__main__":  # pragma: no cover
    main()
