"""
Memory State - Per-Item State and Recall Prediction

Defines the memory state record and the quantities derived from it.

Key concepts:
- Success weight (alpha): accumulated evidence of successful recall
- Failure weight (beta): accumulated evidence of forgetting
- Halflife (h): minutes until predicted recall decays to 0.5
- Recall probability: P(recall) = 2 ^ (-elapsed / h)
"""

from __future__ import annotations
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Optional
import math

from lexirecall.memory.constants import (
    DEFAULT_CONFIG,
    MemoryStage,
    Outcome,
    SchedulerConfig,
)


@dataclass(frozen=True)
class Item:
    """
    A learnable unit (word/term). Owned by content management.

    The scheduler only ever reads item_id.
    """
    item_id: str
    term: str
    definition: str = ""
    example: Optional[str] = None
    tags: tuple[str, ...] = ()


@dataclass(frozen=True)
class MemoryState:
    """
    Memory state for a single item.

    Never mutated in place: update rules return a new instance.
    """
    item_id: str

    # Beta-distribution evidence (both always > 0)
    success_weight: float  # alpha
    failure_weight: float  # beta

    # Minutes until predicted recall falls to 0.5
    halflife: float

    # Review tracking
    last_seen: Optional[datetime]  # None = never seen
    total_exposure: int
    due_at: datetime

    @property
    def is_new(self) -> bool:
        return self.total_exposure == 0 or self.last_seen is None

    @property
    def confidence(self) -> float:
        return confidence(self.success_weight, self.failure_weight)


@dataclass(frozen=True)
class InteractionObservation:
    """
    One presentation of one card, as measured by the presentation layer.

    Consumed exactly once by the memory model.
    """
    elapsed_ms: float
    outcome: Outcome
    assistance_count: int = 0

    @property
    def remembered(self) -> bool:
        return self.outcome == Outcome.REMEMBERED


@dataclass(frozen=True)
class CardStateSnapshot:
    """Lightweight view of a state with its current recall probability."""
    item_id: str
    recall: float
    halflife: float
    stage: MemoryStage
    due: bool = field(default=False)


def confidence(success_weight: float, failure_weight: float) -> float:
    """
    Beta-distribution point estimate of recall reliability.

    Formula: alpha / (alpha + beta)
    """
    return success_weight / (success_weight + failure_weight)


def calculate_recall(halflife: float, minutes_since_seen: float) -> float:
    """
    Calculate recall probability using half-life decay.

    Formula: P = 2 ^ (-dt / h)

    Where:
    - dt = minutes since the item was last seen
    - h = halflife in minutes

    Interpretation:
    - Immediately after review: P = 1.0
    - After one halflife: P = 0.5
    - When P drops to R_TARGET, the item becomes "due"

    Args:
        halflife: Current halflife in minutes
        minutes_since_seen: Time since last interaction in minutes

    Returns:
        Recall probability between 0 and 1
    """
    if minutes_since_seen <= 0:
        return 1.0
    return 2.0 ** (-minutes_since_seen / halflife)


def minutes_between(earlier: datetime, later: datetime) -> float:
    """Signed minutes from earlier to later."""
    return (later - earlier).total_seconds() / 60.0


def predict_recall(state: MemoryState, now: datetime) -> float:
    """
    Predicted probability that the item is recalled at `now`.

    Never-seen items return 0.0 so they always count as due. Clock skew
    (now before last_seen) is treated as zero elapsed time.
    """
    if state.is_new:
        return 0.0
    return calculate_recall(state.halflife, minutes_between(state.last_seen, now))


def minutes_to_target(halflife: float, r_target: float) -> float:
    """
    Minutes until predicted recall decays from 1.0 to r_target.

    Solves 2 ^ (-t / h) = r_target  =>  t = -h * log2(r_target)
    """
    return -halflife * math.log2(r_target)


def is_due(state: MemoryState, now: datetime) -> bool:
    """Never-seen items are always due; otherwise due once now reaches due_at."""
    if state.is_new:
        return True
    return now >= state.due_at


def classify_stage(state: MemoryState, config: SchedulerConfig = DEFAULT_CONFIG) -> MemoryStage:
    """
    Derive the reporting stage from halflife and exposure.

    A lapse shrinks halflife, so a forgotten item falls back to LEARNING
    without any extra bookkeeping.
    """
    if state.is_new:
        return MemoryStage.NEW
    if state.halflife > config.stabilized_halflife:
        return MemoryStage.STABILIZED
    return MemoryStage.LEARNING


def snapshot(
    state: MemoryState,
    now: datetime,
    config: SchedulerConfig = DEFAULT_CONFIG
) -> CardStateSnapshot:
    """Build a CardStateSnapshot for reporting."""
    return CardStateSnapshot(
        item_id=state.item_id,
        recall=predict_recall(state, now),
        halflife=state.halflife,
        stage=classify_stage(state, config),
        due=is_due(state, now),
    )


def initialize_new_state(
    item_id: str,
    now: Optional[datetime] = None,
    config: SchedulerConfig = DEFAULT_CONFIG
) -> MemoryState:
    """
    Initialize state for a new item (never seen before).

    Args:
        item_id: Identifier of the item entering the learner's collection
        now: Creation time (defaults to now, UTC); the item is due immediately
        config: Source of the prior weights and halflife

    Returns:
        New MemoryState initialized with priors
    """
    if now is None:
        now = datetime.now(timezone.utc)

    return MemoryState(
        item_id=item_id,
        success_weight=config.initial_success_weight,
        failure_weight=config.initial_failure_weight,
        halflife=config.initial_halflife,
        last_seen=None,
        total_exposure=0,
        due_at=now,
    )
