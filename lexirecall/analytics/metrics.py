"""
Metric computations for collection statistics.
"""

from __future__ import annotations

from datetime import datetime
from typing import Sequence

import pandas as pd

from lexirecall.analytics.types import CollectionStats
from lexirecall.memory.constants import DEFAULT_CONFIG, MemoryStage, SchedulerConfig
from lexirecall.memory.memory_state import MemoryState, snapshot


STATE_COLUMNS = [
    "item_id",
    "halflife",
    "success_weight",
    "failure_weight",
    "confidence",
    "total_exposure",
    "recall",
    "stage",
    "due",
]

EVENT_COLUMNS = ["item_id", "timestamp", "outcome", "elapsed_ms", "session_id", "day_utc"]


def states_to_frame(
    states: Sequence[MemoryState],
    now: datetime,
    config: SchedulerConfig = DEFAULT_CONFIG
) -> pd.DataFrame:
    """
    One row per state with recall, stage and due flag evaluated at `now`.
    """
    if not states:
        return pd.DataFrame(columns=STATE_COLUMNS)

    rows = []
    for state in states:
        snap = snapshot(state, now, config)
        rows.append({
            "item_id": state.item_id,
            "halflife": state.halflife,
            "success_weight": state.success_weight,
            "failure_weight": state.failure_weight,
            "confidence": state.confidence,
            "total_exposure": state.total_exposure,
            "recall": snap.recall,
            "stage": snap.stage.value,
            "due": snap.due,
        })
    return pd.DataFrame(rows, columns=STATE_COLUMNS)


def compute_stage_distribution(states_df: pd.DataFrame) -> pd.Series:
    """
    Item count per stage, always listing every stage in lifecycle order.
    """
    order = [stage.value for stage in MemoryStage]
    if states_df.empty:
        return pd.Series(0, index=order, dtype="int64")
    return states_df["stage"].value_counts().reindex(order, fill_value=0).astype("int64")


def compute_retention_rate(states_df: pd.DataFrame) -> int:
    """
    Mean predicted recall of items seen at least once, as a rounded percent.
    """
    if states_df.empty:
        return 0
    seen = states_df[states_df["total_exposure"] > 0]
    if seen.empty:
        return 0
    return int(round(seen["recall"].mean() * 100))


def compute_collection_stats(states_df: pd.DataFrame) -> CollectionStats:
    distribution = compute_stage_distribution(states_df)
    return CollectionStats(
        total=int(len(states_df)),
        due_now=int(states_df["due"].sum()) if not states_df.empty else 0,
        new=int(distribution[MemoryStage.NEW.value]),
        learning=int(distribution[MemoryStage.LEARNING.value]),
        stabilized=int(distribution[MemoryStage.STABILIZED.value]),
        retention_rate=compute_retention_rate(states_df),
    )


def events_to_frame(events: Sequence[dict]) -> pd.DataFrame:
    """
    Review events as a dataframe sorted by timestamp, with a UTC day column.
    """
    if not events:
        return pd.DataFrame(columns=EVENT_COLUMNS)

    df = pd.DataFrame(list(events))
    df = df[[c for c in EVENT_COLUMNS if c != "day_utc" and c in df.columns]].copy()
    df["timestamp"] = pd.to_datetime(df["timestamp"], utc=True, errors="coerce")
    df = df.dropna(subset=["item_id", "timestamp"])
    df["day_utc"] = df["timestamp"].dt.floor("D")
    return df.sort_values("timestamp").reset_index(drop=True)


def compute_daily_reviews(events_df: pd.DataFrame) -> pd.Series:
    """
    Reviews per UTC day over a dense day index (days without reviews are 0).
    """
    if events_df.empty:
        return pd.Series(dtype="int64")

    counts = events_df.groupby("day_utc").size()
    day_index = pd.date_range(
        start=events_df["day_utc"].min(),
        end=events_df["day_utc"].max(),
        freq="D",
    )
    return counts.reindex(day_index, fill_value=0).astype("int64")


def compute_recall_rate(events_df: pd.DataFrame) -> float:
    """
    Fraction of logged reviews whose outcome was "remembered".
    """
    if events_df.empty:
        return 0.0
    return float((events_df["outcome"] == "remembered").mean())
