"""
lexirecall - adaptive review scheduling for vocabulary learning

Quick start:
    from datetime import datetime, timezone
    from lexirecall import memory, session

    now = datetime.now(timezone.utc)
    card = session.ReviewCard(
        memory.Item("w:converge", "converge", "to come together"),
        memory.initialize_new_state("w:converge", now),
    )
    queue = session.start_session([card])
    obs = memory.InteractionObservation(elapsed_ms=900, outcome=memory.Outcome.REMEMBERED)
    result = session.record_outcome(queue, "w:converge", obs, now)
    result.state.due_at, result.queue.is_finished
"""

from lexirecall.errors import (
    InvalidObservation,
    InvalidTarget,
    PersistenceError,
    SchedulerError,
)
from lexirecall.memory import (
    DEFAULT_CONFIG,
    InteractionObservation,
    Item,
    MemoryStage,
    MemoryState,
    Outcome,
    SchedulerConfig,
    classify_stage,
    evaluate,
    initialize_new_state,
    predict_recall,
)
from lexirecall.session import (
    RequeuePolicy,
    ReviewCard,
    SessionQueue,
    SessionStatus,
    record_outcome,
    start_session,
)

__version__ = "0.1.0"

__all__ = [
    "SchedulerError",
    "InvalidTarget",
    "InvalidObservation",
    "PersistenceError",
    "DEFAULT_CONFIG",
    "SchedulerConfig",
    "Outcome",
    "MemoryStage",
    "Item",
    "MemoryState",
    "InteractionObservation",
    "evaluate",
    "predict_recall",
    "classify_stage",
    "initialize_new_state",
    "RequeuePolicy",
    "ReviewCard",
    "SessionQueue",
    "SessionStatus",
    "start_session",
    "record_outcome",
]
