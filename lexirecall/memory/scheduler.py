"""
Scheduler - Memory Model Entry Points

Pure scheduling and state updates (no storage calls).

Main workflow:
1. Load item state (caller's responsibility)
2. Validate the observation (clamp elapsed time)
3. Apply the strategy's update rules
4. Compute the next due time from the target recall threshold
5. Return the new state (+ event data for the review log)

This module handles ONLY the algorithm logic.
Storage I/O is handled by the store package.
"""

from __future__ import annotations
from datetime import datetime, timezone
from typing import Optional, Tuple

from lexirecall.memory.constants import DEFAULT_CONFIG, Outcome, SchedulerConfig
from lexirecall.memory.memory_state import (
    InteractionObservation,
    MemoryState,
    predict_recall,
)
from lexirecall.memory.strategies import BaseStrategy, HalflifeStrategy, SchedulingStrategy


def _resolve_strategy(
    strategy: Optional[SchedulingStrategy],
    config: SchedulerConfig
) -> SchedulingStrategy:
    if strategy is not None:
        return strategy
    if config is DEFAULT_CONFIG:
        return _DEFAULT_STRATEGY
    return HalflifeStrategy(config)


_DEFAULT_STRATEGY: BaseStrategy = HalflifeStrategy(DEFAULT_CONFIG)


def evaluate(
    state: MemoryState,
    obs: InteractionObservation,
    now: Optional[datetime] = None,
    config: SchedulerConfig = DEFAULT_CONFIG,
    strategy: Optional[SchedulingStrategy] = None
) -> MemoryState:
    """
    Apply one completed interaction to an item's memory state.

    Pure function: `state` is left untouched and a new state is returned,
    so it is safe to call from any thread.

    Args:
        state: Prior MemoryState of the item
        obs: Observation produced by the presentation layer
        now: Interaction timestamp (defaults to now, UTC)
        config: Tunable constants (ignored when `strategy` is given)
        strategy: Alternative scheduling strategy (defaults to HalflifeStrategy)

    Returns:
        New MemoryState with updated weights, halflife, last_seen,
        total_exposure and due_at

    Raises:
        InvalidObservation: The observation violates its contract
    """
    if now is None:
        now = datetime.now(timezone.utc)
    return _resolve_strategy(strategy, config).evaluate(state, obs, now)


def process_review(
    state: MemoryState,
    obs: InteractionObservation,
    now: Optional[datetime] = None,
    config: SchedulerConfig = DEFAULT_CONFIG,
    strategy: Optional[SchedulingStrategy] = None
) -> Tuple[MemoryState, dict]:
    """
    Evaluate an interaction and return updated state + event data.

    Caller is responsible for:
    1. Loading the state
    2. Saving the state after review
    3. Persisting the event

    Args:
        state: MemoryState to update (may be new or existing)
        obs: Interaction observation
        now: Review timestamp (defaults to now, UTC)
        config: Tunable constants (ignored when `strategy` is given)
        strategy: Alternative scheduling strategy

    Returns:
        Tuple of (updated_state, event_data_dict)
        event_data_dict is ready to pass to StateStore.log_review_event()
    """
    if now is None:
        now = datetime.now(timezone.utc)

    is_new = state.is_new
    recall_before = None if is_new else predict_recall(state, now)

    updated = evaluate(state, obs, now, config=config, strategy=strategy)

    event_data = {
        'item_id': state.item_id,
        'timestamp': now,
        'outcome': Outcome(obs.outcome).value,
        'elapsed_ms': int(max(0, obs.elapsed_ms)),
        'assistance_count': obs.assistance_count,
        'halflife_before': None if is_new else state.halflife,
        'success_weight_before': None if is_new else state.success_weight,
        'failure_weight_before': None if is_new else state.failure_weight,
        'recall_before': recall_before,
        'halflife_after': updated.halflife,
        'success_weight_after': updated.success_weight,
        'failure_weight_after': updated.failure_weight,
        'due_at': updated.due_at,
        'session_id': None,  # Will be set by caller if needed
        'session_position': None,  # Will be set by caller if needed
    }

    return updated, event_data
