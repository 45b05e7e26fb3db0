"""
State store adapters.

The memory model never imports this package and the session layer only uses
the StateStore protocol. SqlStateStore persists MemoryState records.
"""

from lexirecall.store.base import StateStore
from lexirecall.store.database import (
    SqlStateStore,
    create_db_engine,
    get_database_url,
    is_test_mode,
)

__all__ = [
    "StateStore",
    "SqlStateStore",
    "create_db_engine",
    "get_database_url",
    "is_test_mode",
]
