"""
State store contract.

The scheduler never talks to storage itself; callers hand new states to an
object satisfying this protocol (usually through StateSyncer).
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional, Protocol, Sequence

from lexirecall.memory.memory_state import MemoryState


class StateStore(Protocol):
    """Persists MemoryState records keyed by item id, plus the review log."""

    def get_state(self, item_id: str) -> Optional[MemoryState]:
        ...

    def get_due_states(self, before: datetime) -> list[MemoryState]:
        ...

    def get_all_states(self) -> list[MemoryState]:
        ...

    def upsert_state(self, state: MemoryState) -> None:
        ...

    def batch_upsert_states(self, states: Sequence[MemoryState]) -> None:
        ...

    def log_review_event(self, event: dict) -> None:
        ...

    def get_review_events(self, since: Optional[datetime] = None) -> list[dict]:
        ...
