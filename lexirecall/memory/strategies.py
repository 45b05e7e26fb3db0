"""
Scheduling Strategies

Interchangeable implementations of the {evaluate, predict_recall} contract.

- HalflifeStrategy: reference Bayesian half-life model (continuous signal)
- GradeStrategy: SM-2 flavoured discrete grades, as a degenerate case

Strategies differ only in how they move the weights and halflife. Bounds,
due-time computation, recall prediction and bookkeeping are shared.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import replace
from datetime import datetime, timedelta
from typing import Protocol

from lexirecall.memory import updates
from lexirecall.memory.constants import DEFAULT_CONFIG, SchedulerConfig
from lexirecall.memory.memory_state import (
    InteractionObservation,
    MemoryState,
    minutes_to_target,
    predict_recall,
)


class SchedulingStrategy(Protocol):
    """Contract every scheduling strategy satisfies."""

    name: str
    config: SchedulerConfig

    def evaluate(
        self,
        state: MemoryState,
        obs: InteractionObservation,
        now: datetime
    ) -> MemoryState:
        ...

    def predict_recall(self, state: MemoryState, now: datetime) -> float:
        ...


class BaseStrategy(ABC):
    """
    Shared evaluate() skeleton.

    Subclasses implement:
    - update_memory()
    """

    name = "base"

    def __init__(self, config: SchedulerConfig = DEFAULT_CONFIG):
        self.config = config

    @abstractmethod
    def update_memory(
        self,
        state: MemoryState,
        obs: InteractionObservation,
        elapsed_ms: float
    ) -> tuple[float, float, float]:
        """Return (success_weight, failure_weight, halflife) after the interaction."""

    def evaluate(
        self,
        state: MemoryState,
        obs: InteractionObservation,
        now: datetime
    ) -> MemoryState:
        """
        Apply one interaction and return the new state.

        The input state is never mutated.
        """
        elapsed_ms = updates.validate_observation(obs, self.config)
        success, failure, halflife = self.update_memory(state, obs, elapsed_ms)

        success = max(self.config.min_success, success)
        failure = max(self.config.min_success, failure)
        halflife = updates.clamp_halflife(halflife, self.config)

        due_in = minutes_to_target(halflife, self.config.r_target)

        return replace(
            state,
            success_weight=success,
            failure_weight=failure,
            halflife=halflife,
            last_seen=now,
            total_exposure=state.total_exposure + 1,
            due_at=now + timedelta(minutes=due_in),
        )

    def predict_recall(self, state: MemoryState, now: datetime) -> float:
        return predict_recall(state, now)

    def __repr__(self):
        return f"<{type(self).__name__}(name={self.name!r})>"


class HalflifeStrategy(BaseStrategy):
    """Reference strategy: Beta-weighted half-life growth with reaction-time bonus."""

    name = "halflife"

    def update_memory(self, state, obs, elapsed_ms):
        if obs.remembered:
            return updates.apply_remembered_update(
                success_weight=state.success_weight,
                failure_weight=state.failure_weight,
                halflife=state.halflife,
                elapsed_ms=elapsed_ms,
                assistance_count=obs.assistance_count,
                config=self.config,
            )
        return updates.apply_forgot_update(
            state.success_weight,
            state.failure_weight,
            state.halflife,
            self.config,
        )


class GradeStrategy(BaseStrategy):
    """
    SM-2 flavoured strategy.

    The observation is mapped onto a quality grade (0-5). Easiness is derived
    from the weights instead of being stored, so both strategies share one
    MemoryState shape.
    """

    name = "grade"

    def grade(self, obs: InteractionObservation, elapsed_ms: float) -> int:
        """
        Map an observation to an SM-2 quality grade.

        - forgot: 1
        - fast and unaided: 5
        - slow or aided: 3
        - otherwise: 4
        """
        if not obs.remembered:
            return 1
        if obs.assistance_count > 0 or elapsed_ms > self.config.slow_recall_threshold_ms:
            return 3
        if elapsed_ms < self.config.fast_recall_window_ms:
            return 5
        return 4

    def easiness(self, state: MemoryState) -> float:
        """Easiness factor implied by the evidence accumulated beyond the priors."""
        surplus = state.success_weight - self.config.initial_success_weight
        lapses = state.failure_weight - self.config.initial_failure_weight
        ef = self.config.easiness_default + 0.1 * surplus - 0.2 * lapses
        return max(self.config.easiness_min, ef)

    def update_memory(self, state, obs, elapsed_ms):
        q = self.grade(obs, elapsed_ms)

        if q < 3:
            success, failure, _ = updates.apply_forgot_update(
                state.success_weight,
                state.failure_weight,
                state.halflife,
                self.config,
            )
            halflife = min(state.halflife, self.config.grade_reset_halflife)
            return success, failure, halflife

        # EF' = EF + (0.1 - (5 - q) * (0.08 + (5 - q) * 0.02))
        ef = self.easiness(state) + (0.1 - (5 - q) * (0.08 + (5 - q) * 0.02))
        ef = max(self.config.easiness_min, ef)
        return state.success_weight + 1.0, state.failure_weight, state.halflife * ef


STRATEGIES = {
    HalflifeStrategy.name: HalflifeStrategy,
    GradeStrategy.name: GradeStrategy,
}


def get_strategy(name: str = "halflife", config: SchedulerConfig = DEFAULT_CONFIG) -> BaseStrategy:
    """
    Look up a strategy by name and bind it to a config.

    Raises:
        ValueError: Unknown strategy name
    """
    try:
        strategy_cls = STRATEGIES[name]
    except KeyError:
        raise ValueError(f"Unknown scheduling strategy: {name!r}") from None
    return strategy_cls(config)
