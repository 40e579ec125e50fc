"""
obstacles.py: Gap obstacle generation and the difficulty curve.
"""

import random
from typing import Optional

from .config import GameConfig
from .constants import DIFFICULTY_MEDIUM_AT, DIFFICULTY_HARD_AT, DIFFICULTY_EXTREME_AT
from .data_models import Difficulty, ObstaclePair


class ObstacleGenerator:
    """
    Produces obstacle pairs whose gap shrinks linearly with the score until
    it reaches the configured minimum.
    """

    def __init__(self, config: GameConfig, rng: Optional[random.Random] = None, seed: Optional[int] = None):
        self.config = config
        self.rng = rng if rng is not None else random.Random(seed)

    def gap_height_for(self, score: int) -> float:
        if score < 0:
            raise ValueError(f"Score cannot be negative: {score}")
        cfg = self.config
        return max(cfg.minimum_gap, cfg.initial_gap - score * cfg.gap_decrease_per_point)

    def classify(self, gap_height: float) -> Difficulty:
        """Buckets how far the gap has shrunk from its initial size."""
        cfg = self.config
        fraction = (cfg.initial_gap - gap_height) / (cfg.initial_gap - cfg.minimum_gap)

        if fraction < DIFFICULTY_MEDIUM_AT:
            return Difficulty.EASY
        if fraction < DIFFICULTY_HARD_AT:
            return Difficulty.MEDIUM
        if fraction < DIFFICULTY_EXTREME_AT:
            return Difficulty.HARD
        return Difficulty.EXTREME

    def difficulty_for(self, score: int) -> Difficulty:
        return self.classify(self.gap_height_for(score))

    def at_minimum_gap(self, score: int) -> bool:
        return self.gap_height_for(score) <= self.config.minimum_gap

    def generate(self, play_area_height: float, current_score: int, x: Optional[float] = None) -> ObstaclePair:
        """
        Generates a pair placed at `x` (default: the right edge of the play area).

        The top segment height is drawn uniformly from
        [min_top_height, play_area_height - gap - bottom_margin]. A play area
        too short for that range pins the top height to min_top_height.
        """
        cfg = self.config
        gap = self.gap_height_for(current_score)

        low = cfg.min_top_height
        high = max(low, play_area_height - gap - cfg.bottom_margin)
        top_height = self.rng.uniform(low, high)

        return ObstaclePair(
            top_height=top_height,
            bottom_y=top_height + gap,
            gap_height=gap,
            x=float(cfg.screen_width if x is None else x),
            width=cfg.obstacle_width,
            difficulty=self.classify(gap),
        )
