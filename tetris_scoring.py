"""Scoring tables and combo rules, selectable by preset name"""
from __future__ import annotations
import math
from dataclasses import dataclass, field
from typing import Dict, Mapping, Optional, Tuple

from tetris_config import CONFIG

# Base points per piece type
CLASSIC_TABLE: Dict[str, int] = {"I": 100, "O": 80, "T": 90, "S": 85, "Z": 85, "J": 75, "L": 75}
STREAK_TABLE: Dict[str, int] = {"I": 100, "O": 120, "T": 150, "S": 140, "Z": 140, "J": 180, "L": 180}
SIMPLE_TABLE: Dict[str, int] = {"I": 150, "O": 100, "T": 120, "L": 110}


@dataclass(frozen=True)
class ScoringRules:
    """Everything the progression engine treats as tunable.

    `combo_min_streak` is the run length at which a combo starts; the combo
    count then grows by one per further repeat. `tracked_kinds` doubles as the
    tie-break order for the most-played type.

    `combo_multiplier_bump` raises the running score multiplier on every combo
    play; with `combo_break_resets_multiplier` it falls back to 1.0 when the
    streak breaks.
    """
    name: str = "classic"
    base_scores: Mapping[str, int] = field(default_factory=lambda: dict(CLASSIC_TABLE))
    unknown_base: int = 50
    combo_min_streak: int = 3
    combo_step: float = 0.2
    experience_step: float = 0.0
    tracked_kinds: Tuple[str, ...] = ("I", "O", "T", "L")
    combo_multiplier_bump: float = 0.0
    combo_break_resets_multiplier: bool = False
    count_every_combo_play: bool = False

    first_threshold: int = 1000
    threshold_growth: float = 1.5
    difficulty_step: float = 0.2
    max_difficulty: float = 3.0
    multiplier_step: float = 0.5
    max_score_multiplier: float = 10.0
    reset_level_score: bool = True

    def __post_init__(self):
        if self.combo_min_streak < 2:
            raise ValueError("combo_min_streak must be at least 2")
        if self.first_threshold <= 0 or self.threshold_growth < 1.0:
            raise ValueError("level thresholds must be positive and non-decreasing")

    def base_score(self, kind: str) -> int:
        return self.base_scores.get(kind, self.unknown_base)

    def combo_count(self, streak: int) -> int:
        return max(0, streak - (self.combo_min_streak - 1))

    def combo_multiplier(self, combo: int) -> float:
        return min(self.max_score_multiplier, 1.0 + combo * self.combo_step)

    def threshold_for(self, level: int) -> int:
        return int(self.first_threshold * self.threshold_growth ** (level - 1))


def round_half_up(x: float) -> int:
    return int(math.floor(x + 0.5))


CLASSIC = ScoringRules()

# Combo from the first repeat, +0.1 per repeat, bonus for experience, every type counted.
STREAK = ScoringRules(
    name="streak",
    base_scores=dict(STREAK_TABLE),
    combo_min_streak=2,
    combo_step=0.1,
    experience_step=0.01,
    tracked_kinds=("I", "O", "T", "S", "Z", "J", "L"),
)

# Running multiplier +1 per combo play, back to 1 on a break; level-ups only raise difficulty.
SIMPLE = ScoringRules(
    name="simple",
    base_scores=dict(SIMPLE_TABLE),
    unknown_base=100,
    combo_step=0.0,
    combo_multiplier_bump=1.0,
    combo_break_resets_multiplier=True,
    count_every_combo_play=True,
    multiplier_step=0.0,
)

PRESETS: Dict[str, ScoringRules] = {r.name: r for r in (CLASSIC, STREAK, SIMPLE)}


def rules_from_config(name: Optional[str] = None) -> ScoringRules:
    name = name or CONFIG["SCORING_PRESET"]
    try:
        return PRESETS[name]
    except KeyError:
        raise KeyError(f"unknown scoring preset {name!r}; choose from {sorted(PRESETS)}") from None
