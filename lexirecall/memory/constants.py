"""
Memory Model Constants and Parameters

All configurable parameters for the half-life scheduling algorithm in one place.
Module-level names hold the defaults; SchedulerConfig bundles them into a single
named configuration object that callers can override field by field.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


# ---- Interaction Outcomes ----

class Outcome(str, Enum):
    """The learner's judgment for one presentation."""
    REMEMBERED = "remembered"
    FORGOT = "forgot"


# ---- Derived Memory Stages ----

class MemoryStage(str, Enum):
    """Reporting classification, recomputed from halflife/total_exposure."""
    NEW = "new"                # Never seen
    LEARNING = "learning"      # Seen, halflife at or below STABILIZED_HALFLIFE
    STABILIZED = "stabilized"  # Halflife above STABILIZED_HALFLIFE


# ---- Priors for New Items ----

INITIAL_SUCCESS_WEIGHT = 3.0   # alpha prior
INITIAL_FAILURE_WEIGHT = 1.0   # beta prior
INITIAL_HALFLIFE = 1440.0      # minutes (1 day)


# ---- Bounds ----

MIN_HALFLIFE = 10.0            # minutes
MAX_HALFLIFE = 525600.0        # minutes (1 year)
MIN_SUCCESS = 0.1              # success_weight never collapses below this


# ---- Failure Update ----

DECAY_ON_FAIL = 0.5            # Fraction of success evidence kept after a lapse
FAIL_HALFLIFE_SHRINK = 0.2     # Halflife multiplier on a lapse


# ---- Success Update ----

FAST_RECALL_WINDOW_MS = 2800   # Recall faster than this earns a reaction bonus
REACTION_BONUS_MAX = 0.8
ASSISTANCE_PENALTY = 0.25      # Per revealed detail / pronunciation request; 0 = neutral
SLOW_RECALL_THRESHOLD_MS = 7000
SLOW_RECALL_PENALTY = 0.5
GROWTH_SCALE = 1.5             # growth_factor = 1 + confidence * GROWTH_SCALE


# ---- Scheduling ----

R_TARGET = 0.85                # Item is due once predicted recall falls to this
STABILIZED_HALFLIFE = 4320.0   # minutes (3 days)
REQUEUE_OFFSET = 3             # Forgotten items return after this many other cards


# ---- Grade Strategy (SM-2 flavoured) ----

EASINESS_DEFAULT = 2.5
EASINESS_MIN = 1.3
GRADE_RESET_HALFLIFE = 1440.0  # minutes; halflife ceiling after a lapse


@dataclass(frozen=True)
class SchedulerConfig:
    """
    Tunable constants for the memory model and session scheduler.

    Defaults match the module-level constants above. Instances are immutable;
    use dataclasses.replace() to derive a variant.
    """
    initial_success_weight: float = INITIAL_SUCCESS_WEIGHT
    initial_failure_weight: float = INITIAL_FAILURE_WEIGHT
    initial_halflife: float = INITIAL_HALFLIFE

    min_halflife: float = MIN_HALFLIFE
    max_halflife: float = MAX_HALFLIFE
    min_success: float = MIN_SUCCESS

    decay_on_fail: float = DECAY_ON_FAIL
    fail_halflife_shrink: float = FAIL_HALFLIFE_SHRINK

    fast_recall_window_ms: float = FAST_RECALL_WINDOW_MS
    reaction_bonus_max: float = REACTION_BONUS_MAX
    assistance_penalty: float = ASSISTANCE_PENALTY
    slow_recall_threshold_ms: float = SLOW_RECALL_THRESHOLD_MS
    slow_recall_penalty: float = SLOW_RECALL_PENALTY
    growth_scale: float = GROWTH_SCALE

    r_target: float = R_TARGET
    stabilized_halflife: float = STABILIZED_HALFLIFE
    requeue_offset: int = REQUEUE_OFFSET

    easiness_default: float = EASINESS_DEFAULT
    easiness_min: float = EASINESS_MIN
    grade_reset_halflife: float = GRADE_RESET_HALFLIFE

    # When False, a negative elapsed_ms is rejected instead of clamped to 0
    clamp_elapsed: bool = True

    def __post_init__(self):
        if not 0.0 < self.min_halflife <= self.max_halflife:
            raise ValueError("Require 0 < min_halflife <= max_halflife")
        if not self.min_halflife <= self.initial_halflife <= self.max_halflife:
            raise ValueError("initial_halflife must lie within [min_halflife, max_halflife]")
        if self.min_success <= 0.0:
            raise ValueError("min_success must be positive")
        if self.initial_success_weight <= 0.0 or self.initial_failure_weight <= 0.0:
            raise ValueError("Initial weights must be positive")
        if not 0.0 < self.decay_on_fail <= 1.0:
            raise ValueError("decay_on_fail must be in (0, 1]")
        if not 0.0 < self.fail_halflife_shrink <= 1.0:
            raise ValueError("fail_halflife_shrink must be in (0, 1]")
        if not 0.0 < self.r_target < 1.0:
            raise ValueError("r_target must be in (0, 1)")
        if self.fast_recall_window_ms <= 0:
            raise ValueError("fast_recall_window_ms must be positive")
        if self.reaction_bonus_max < 0 or self.assistance_penalty < 0 or self.slow_recall_penalty < 0:
            raise ValueError("Bonus and penalty magnitudes must be non-negative")
        if self.growth_scale < 0:
            raise ValueError("growth_scale must be non-negative")
        if self.requeue_offset < 1:
            raise ValueError("requeue_offset must be at least 1")
        if self.easiness_min <= 1.0:
            raise ValueError("easiness_min must exceed 1.0")


DEFAULT_CONFIG = SchedulerConfig()
