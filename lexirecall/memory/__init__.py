"""
Memory Model - adaptive review scheduling

Implements a Bayesian-flavoured half-life model:
- Success/failure evidence weights (Beta distribution point estimate)
- Half-life forgetting curve: P(recall) = 2 ^ (-dt / h)
- Reaction-time bonus and help penalty on successful recall
- Next due time where predicted recall meets R_TARGET

Quick start:
    from lexirecall import memory

    state = memory.initialize_new_state("w:converge", now)
    obs = memory.InteractionObservation(elapsed_ms=850, outcome=memory.Outcome.REMEMBERED)
    state = memory.evaluate(state, obs, now)
    memory.predict_recall(state, later)
"""

# Core scheduler API (algorithm logic)
from lexirecall.memory.scheduler import evaluate, process_review

# Constants and parameters
from lexirecall.memory.constants import (
    DEFAULT_CONFIG,
    MemoryStage,
    Outcome,
    SchedulerConfig,
    R_TARGET,
    MIN_HALFLIFE,
    MAX_HALFLIFE,
    MIN_SUCCESS,
    INITIAL_HALFLIFE,
    INITIAL_SUCCESS_WEIGHT,
    INITIAL_FAILURE_WEIGHT,
    GROWTH_SCALE,
)

# Memory state
from lexirecall.memory.memory_state import (
    CardStateSnapshot,
    InteractionObservation,
    Item,
    MemoryState,
    calculate_recall,
    classify_stage,
    confidence,
    initialize_new_state,
    is_due,
    minutes_to_target,
    predict_recall,
    snapshot,
)

# Strategies
from lexirecall.memory.strategies import (
    BaseStrategy,
    GradeStrategy,
    HalflifeStrategy,
    SchedulingStrategy,
    get_strategy,
)


__all__ = [
    # Core algorithm
    "evaluate",
    "process_review",

    # Enums and config
    "Outcome",
    "MemoryStage",
    "SchedulerConfig",
    "DEFAULT_CONFIG",

    # Memory state
    "Item",
    "MemoryState",
    "InteractionObservation",
    "CardStateSnapshot",
    "initialize_new_state",
    "predict_recall",
    "calculate_recall",
    "minutes_to_target",
    "classify_stage",
    "confidence",
    "is_due",
    "snapshot",

    # Strategies
    "SchedulingStrategy",
    "BaseStrategy",
    "HalflifeStrategy",
    "GradeStrategy",
    "get_strategy",

    # Parameters
    "R_TARGET",
    "MIN_HALFLIFE",
    "MAX_HALFLIFE",
    "MIN_SUCCESS",
    "INITIAL_HALFLIFE",
    "INITIAL_SUCCESS_WEIGHT",
    "INITIAL_FAILURE_WEIGHT",
    "GROWTH_SCALE",
]
