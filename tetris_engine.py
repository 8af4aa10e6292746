"""
Progression engine: scoring, combos, levels, play statistics.

The engine only ever sees `(Piece, Origin)` pairs. Queue and reserve internals
stay with the caller, and everything the engine knows is in `ProgressionState`.
"""
from __future__ import annotations
import enum
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Dict, FrozenSet, List, Mapping, Optional, Set

from loguru import logger

from tetris_piece import Piece
from tetris_scoring import CLASSIC, ScoringRules, round_half_up

EFFICIENCY_TOLERANCE = 1.0


class Origin(enum.Enum):
    QUEUE = "queue"
    STACK = "stack"


class Achievement(enum.Enum):
    VETERAN = 5
    MASTER = 10

    @property
    def level(self) -> int:
        return self.value


@dataclass
class ProgressionState:
    # score
    total_score: int = 0
    level_score: int = 0
    last_play_score: int = 0
    # combo
    current_combo: int = 0
    best_combo: int = 0
    total_combos: int = 0
    last_kind: Optional[str] = None
    type_streak: int = 0
    # level
    level: int = 1
    level_threshold: int = 1000
    points_to_next_level: int = 1000
    difficulty_factor: float = 1.0
    score_multiplier: float = 1.0
    # stats
    total_plays: int = 0
    plays_from_queue: int = 0
    plays_from_stack: int = 0
    kind_counts: Dict[str, int] = field(default_factory=dict)
    most_played_kind: Optional[str] = None
    reserve_efficiency: float = 0.0
    # achievements
    achievements: Set[Achievement] = field(default_factory=set)
    milestones_reached: int = 0
    personal_best: int = 0


@dataclass(frozen=True)
class PlayReport:
    piece: Piece
    origin: Origin
    score_gained: int
    total_score: int
    level: int
    combo: int
    combo_multiplier: float
    leveled_up: bool
    unlocked: FrozenSet[Achievement] = frozenset()


@dataclass(frozen=True)
class StatsSnapshot:
    total_score: int
    level_score: int
    last_play_score: int
    personal_best: int
    current_combo: int
    best_combo: int
    total_combos: int
    last_kind: Optional[str]
    type_streak: int
    level: int
    level_threshold: int
    points_to_next_level: int
    difficulty_factor: float
    score_multiplier: float
    total_plays: int
    plays_from_queue: int
    plays_from_stack: int
    kind_counts: Mapping[str, int]
    most_played_kind: Optional[str]
    reserve_efficiency: float
    achievements: FrozenSet[Achievement]
    milestones_reached: int

    @property
    def level_progress(self) -> float:
        """Share of the current threshold already scored, 0..1."""
        return min(1.0, self.total_score / self.level_threshold)


@dataclass(frozen=True)
class PerformanceReport:
    average_per_play: float
    reserve_usage_pct: float
    levels_gained: int
    points_to_next_level: int
    combo_potential: int
    recommendations: List[str]


class ProgressionEngine:
    def __init__(self, rules: ScoringRules = CLASSIC):
        self.rules = rules
        self.state = self._fresh_state()

    def _fresh_state(self) -> ProgressionState:
        first = self.rules.threshold_for(1)
        return ProgressionState(
            level_threshold=first,
            points_to_next_level=first,
            kind_counts={k: 0 for k in self.rules.tracked_kinds},
        )

    def reset(self):
        self.state = self._fresh_state()

    # ---------- play ----------
    def process(self, piece: Piece, origin: Origin) -> PlayReport:
        if not isinstance(piece, Piece):
            raise TypeError(f"expected Piece, got {type(piece).__name__}")
        if not isinstance(origin, Origin):
            raise TypeError(f"expected Origin, got {origin!r}")
        s = self.state

        combo_mult = self._detect_combo(piece.kind)
        experience = 1.0 + s.total_plays * self.rules.experience_step
        points = round_half_up(
            self.rules.base_score(piece.kind) * combo_mult * s.score_multiplier * s.difficulty_factor * experience
        )

        s.total_score += points
        s.level_score += points
        s.last_play_score = points
        s.personal_best = max(s.personal_best, s.total_score)

        self._record_play(piece.kind, origin)
        leveled_up = self._verify_level_progression()
        unlocked = self._check_achievements()

        logger.debug("played {} from {}: +{} (combo {}, x{:.1f})", piece, origin.value, points, s.current_combo, combo_mult)
        return PlayReport(
            piece=piece, origin=origin, score_gained=points, total_score=s.total_score,
            level=s.level, combo=s.current_combo, combo_multiplier=combo_mult,
            leveled_up=leveled_up, unlocked=frozenset(unlocked),
        )

    def _detect_combo(self, kind: str) -> float:
        s, r = self.state, self.rules
        mult = 1.0
        if kind == s.last_kind:
            s.type_streak += 1
            combo = r.combo_count(s.type_streak)
            if combo > 0:
                if combo == 1 or r.count_every_combo_play:
                    s.total_combos += 1
                s.current_combo = combo
                s.best_combo = max(s.best_combo, combo)
                mult = r.combo_multiplier(combo)
                if r.combo_multiplier_bump:
                    s.score_multiplier = round(min(r.max_score_multiplier, s.score_multiplier + r.combo_multiplier_bump), 2)
        else:
            s.type_streak = 1
            s.current_combo = 0
            if r.combo_break_resets_multiplier:
                s.score_multiplier = 1.0
        s.last_kind = kind
        return mult

    def _record_play(self, kind: str, origin: Origin):
        s = self.state
        s.total_plays += 1
        if origin is Origin.QUEUE:
            s.plays_from_queue += 1
        else:
            s.plays_from_stack += 1
        if kind in s.kind_counts:
            s.kind_counts[kind] += 1
        # strictly greater wins, so earlier kinds in the check order keep ties
        best = 0
        for k in self.rules.tracked_kinds:
            if s.kind_counts[k] > best:
                best = s.kind_counts[k]
                s.most_played_kind = k
        s.reserve_efficiency = self._live_efficiency()

    def _live_efficiency(self) -> float:
        s = self.state
        if s.total_plays == 0:
            return 0.0
        return s.plays_from_stack / s.total_plays * 100.0

    def _verify_level_progression(self) -> bool:
        s, r = self.state, self.rules
        leveled_up = False
        if s.total_score >= s.level_threshold:
            s.level += 1
            s.level_threshold = r.threshold_for(s.level)
            s.difficulty_factor = round(min(r.max_difficulty, s.difficulty_factor + r.difficulty_step), 2)
            s.score_multiplier = round(min(r.max_score_multiplier, s.score_multiplier + r.multiplier_step), 2)
            s.milestones_reached += 1
            if r.reset_level_score:
                s.level_score = 0
            leveled_up = True
            logger.info("level {} reached: multiplier x{:.1f}, difficulty {:.1f}", s.level, s.score_multiplier, s.difficulty_factor)
        s.points_to_next_level = s.level_threshold - s.total_score
        return leveled_up

    def _check_achievements(self) -> List[Achievement]:
        s = self.state
        unlocked = []
        for ach in Achievement:
            if s.level == ach.level and ach not in s.achievements:
                s.achievements.add(ach)
                unlocked.append(ach)
                logger.info("achievement unlocked: {}", ach.name.lower())
        return unlocked

    # ---------- maintenance ----------
    def optimize(self) -> bool:
        """Repair drifted values; True if anything changed."""
        s, r = self.state, self.rules
        repaired = False

        clamped = min(r.max_score_multiplier, max(1.0, s.score_multiplier))
        if clamped != s.score_multiplier:
            s.score_multiplier = clamped
            repaired = True

        live = self._live_efficiency()
        if abs(live - s.reserve_efficiency) > EFFICIENCY_TOLERANCE:
            s.reserve_efficiency = live
            repaired = True

        if s.level > 5 and s.difficulty_factor < 2.0:
            target = round(min(r.max_difficulty, 1.0 + (s.level - 1) * r.difficulty_step), 2)
            if target != s.difficulty_factor:
                s.difficulty_factor = target
                repaired = True

        if repaired:
            logger.info("optimize repaired engine state")
        return repaired

    # ---------- reporting ----------
    def snapshot(self) -> StatsSnapshot:
        s = self.state
        return StatsSnapshot(
            total_score=s.total_score, level_score=s.level_score, last_play_score=s.last_play_score,
            personal_best=s.personal_best, current_combo=s.current_combo, best_combo=s.best_combo,
            total_combos=s.total_combos, last_kind=s.last_kind, type_streak=s.type_streak,
            level=s.level, level_threshold=s.level_threshold, points_to_next_level=s.points_to_next_level,
            difficulty_factor=s.difficulty_factor, score_multiplier=s.score_multiplier,
            total_plays=s.total_plays, plays_from_queue=s.plays_from_queue, plays_from_stack=s.plays_from_stack,
            kind_counts=MappingProxyType(dict(s.kind_counts)), most_played_kind=s.most_played_kind,
            reserve_efficiency=s.reserve_efficiency, achievements=frozenset(s.achievements),
            milestones_reached=s.milestones_reached,
        )

    def report(self) -> PerformanceReport:
        s = self.state
        plays = s.total_plays
        recs = []
        if s.reserve_efficiency < 20:
            recs.append("Use the reserve stack more often")
        if s.best_combo < 5:
            recs.append("Chain pieces of the same type to build combos")
        if s.type_streak < 3:
            recs.append("Keep same-type streaks going to raise the multiplier")
        return PerformanceReport(
            average_per_play=s.total_score / plays if plays else 0.0,
            reserve_usage_pct=s.plays_from_stack / plays * 100.0 if plays else 0.0,
            levels_gained=s.level - 1,
            points_to_next_level=s.level_threshold - s.total_score,
            combo_potential=s.total_score + s.best_combo * 100,
            recommendations=recs,
        )
