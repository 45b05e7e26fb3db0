"""
Types for collection statistics.
"""

from __future__ import annotations

from dataclasses import dataclass

import pandas as pd


@dataclass(frozen=True)
class CollectionStats:
    """
    Point-in-time counts over every tracked item.
    """
    total: int
    due_now: int          # "fading": predicted recall at or below target
    new: int
    learning: int
    stabilized: int
    retention_rate: int   # Mean predicted recall of seen items, percent


@dataclass(frozen=True)
class DashboardData:
    """
    Precomputed metrics and series for a stats view.
    """
    stats: CollectionStats
    recall_rate: float              # Fraction of logged reviews remembered
    daily_reviews: pd.Series        # Reviews per UTC day
    stage_distribution: pd.Series   # Item count per stage
