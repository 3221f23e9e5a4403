from __future__ import annotations

from dataclasses import dataclass


@dataclass
class ScoringRules:
    # Indexed by rows cleared by a single lock (0..4).
    line_clear_scores: tuple[int, int, int, int, int] = (0, 100, 300, 500, 800)
    soft_drop_points: int = 1
    hard_drop_points: int = 2
    lines_per_level: int = 10
    initial_interval: int = 500
    min_interval: int = 100
    interval_step: int = 50

    def __post_init__(self) -> None:
        if len(self.line_clear_scores) != 5:
            raise ValueError("line_clear_scores needs one entry for 0..4 cleared rows")
        if self.lines_per_level <= 0:
            raise ValueError("lines_per_level must be positive")
        if self.initial_interval <= 0 or self.min_interval <= 0:
            raise ValueError("fall intervals must be positive")

    def score_for_lines(self, lines: int, level: int = 1) -> int:
        if not 0 <= lines < len(self.line_clear_scores):
            raise ValueError(f"cannot score {lines} simultaneous rows")
        return self.line_clear_scores[lines] * level

    def level_for_lines(self, total_lines: int) -> int:
        return total_lines // self.lines_per_level + 1

    def fall_interval_for_level(self, level: int) -> int:
        return max(self.min_interval, self.initial_interval - (level - 1) * self.interval_step)
