"""
Analytics package exports.
"""

from lexirecall.analytics.service import build_dashboard
from lexirecall.analytics.types import CollectionStats, DashboardData

__all__ = [
    "build_dashboard",
    "CollectionStats",
    "DashboardData",
]
