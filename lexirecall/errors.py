"""
Exception types raised by the scheduler and its store adapters.

Caller-contract violations subclass ValueError; persistence failures
subclass RuntimeError so the session layer can tell them apart.
"""

from __future__ import annotations

from typing import Optional


class SchedulerError(Exception):
    """Base class for all lexirecall errors."""


class InvalidTarget(SchedulerError, ValueError):
    """record_outcome was called for an item that is not the active one."""

    def __init__(self, item_id: str, active_id: Optional[str]):
        self.item_id = item_id
        self.active_id = active_id
        if active_id is None:
            message = f"Session is finished; cannot record outcome for {item_id!r}"
        else:
            message = f"Item {item_id!r} is not the active item (active: {active_id!r})"
        super().__init__(message)


class InvalidObservation(SchedulerError, ValueError):
    """An interaction observation violates its contract (e.g. negative elapsed time)."""


class PersistenceError(SchedulerError, RuntimeError):
    """The external state store failed. Recoverable from the scheduler's point of view."""

    def __init__(self, message: str, item_id: Optional[str] = None):
        self.item_id = item_id
        super().__init__(message)
