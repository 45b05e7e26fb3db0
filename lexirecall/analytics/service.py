"""
Service layer to assemble collection statistics from a state store.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Optional

from lexirecall.analytics.metrics import (
    compute_collection_stats,
    compute_daily_reviews,
    compute_recall_rate,
    compute_stage_distribution,
    events_to_frame,
    states_to_frame,
)
from lexirecall.analytics.types import DashboardData
from lexirecall.memory.constants import DEFAULT_CONFIG, SchedulerConfig
from lexirecall.store.base import StateStore


def build_dashboard(
    store: StateStore,
    now: Optional[datetime] = None,
    since: Optional[datetime] = None,
    config: SchedulerConfig = DEFAULT_CONFIG
) -> DashboardData:
    """
    Build all values needed by a stats view.

    Args:
        store: Source of states and the review log
        now: Evaluation time for recall and due flags (defaults to now, UTC)
        since: Only consider review events at or after this time
    """
    if now is None:
        now = datetime.now(timezone.utc)

    states_df = states_to_frame(store.get_all_states(), now, config)
    events_df = events_to_frame(store.get_review_events(since=since))

    return DashboardData(
        stats=compute_collection_stats(states_df),
        recall_rate=compute_recall_rate(events_df),
        daily_reviews=compute_daily_reviews(events_df),
        stage_distribution=compute_stage_distribution(states_df),
    )
