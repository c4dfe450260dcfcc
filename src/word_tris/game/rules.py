from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Callable

from word_tris.constants import MAX_LEVEL


@dataclass
class ScoringRules:
    points_per_letter: int = 10
    rare_letter_bonus: int = 5
    level_multiplier_step: float = 0.1
    points_per_level: int = 100
    max_level: int = MAX_LEVEL

    def score_word(self, text: str, level: int, is_rare: Callable[[str], bool]) -> int:
        rarity_bonus = self.rare_letter_bonus * sum(1 for ch in text if is_rare(ch))
        base = len(text) * self.points_per_letter + rarity_bonus
        # half-up rounding, not banker's
        return int(math.floor(base * (1 + (level - 1) * self.level_multiplier_step) + 0.5))

    def level_for(self, score: int) -> int:
        return min(self.max_level, score // self.points_per_level + 1)
