from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class ScoringRules:
    """Points awarded when a locked piece clears rows.

    `line_clear_scores[n - 1]` is paid for clearing n rows at once. A single
    tetromino spans at most four rows, so larger counts never occur.
    """

    line_clear_scores: tuple[int, int, int, int] = (100, 300, 500, 800)

    def score_for_lines(self, lines: int) -> int:
        if lines <= 0:
            return 0
        return self.line_clear_scores[min(lines, len(self.line_clear_scores)) - 1]
