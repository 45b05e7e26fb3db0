"""Session scheduling: queue, background sync and the study-session controller."""

from lexirecall.session.queue import (
    OutcomeResult,
    RequeuePolicy,
    ReviewCard,
    SessionQueue,
    SessionStatus,
    record_outcome,
    start_session,
)
from lexirecall.session.sync import StateSyncer, SyncStatus
from lexirecall.session.controller import StudySession, load_due_cards

__all__ = [
    "OutcomeResult",
    "RequeuePolicy",
    "ReviewCard",
    "SessionQueue",
    "SessionStatus",
    "record_outcome",
    "start_session",
    "StateSyncer",
    "SyncStatus",
    "StudySession",
    "load_due_cards",
]
