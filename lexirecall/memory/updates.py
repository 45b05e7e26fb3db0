"""
Memory Updates

Implements the weight and halflife update rules for one interaction.

Key principles:
- Fast, unaided recall produces the largest halflife gains
- Every request for help is evidence of non-automatic recall
- A lapse partially erases success evidence and sharply shortens the interval
- Out-of-range intermediate values are clamped, never signalled
"""

from __future__ import annotations

from lexirecall.errors import InvalidObservation
from lexirecall.memory.constants import DEFAULT_CONFIG, Outcome, SchedulerConfig
from lexirecall.memory.memory_state import InteractionObservation, confidence


def clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))


def clamp_halflife(halflife: float, config: SchedulerConfig = DEFAULT_CONFIG) -> float:
    return clamp(halflife, config.min_halflife, config.max_halflife)


def normalize_elapsed(elapsed_ms: float, config: SchedulerConfig = DEFAULT_CONFIG) -> float:
    """
    Clamp elapsed time to >= 0 to defend against clock skew.

    Raises:
        InvalidObservation: elapsed_ms is negative and clamping is disabled
    """
    if elapsed_ms < 0:
        if not config.clamp_elapsed:
            raise InvalidObservation(f"Negative elapsed time: {elapsed_ms} ms")
        return 0.0
    return float(elapsed_ms)


def validate_observation(
    obs: InteractionObservation,
    config: SchedulerConfig = DEFAULT_CONFIG
) -> float:
    """
    Check the observation contract and return the usable elapsed time.

    Raises:
        InvalidObservation: unknown outcome, negative assistance count, or
            negative elapsed time with clamping disabled
    """
    if not isinstance(obs.outcome, Outcome):
        try:
            Outcome(obs.outcome)
        except ValueError:
            raise InvalidObservation(f"Unknown outcome: {obs.outcome!r}") from None
    if obs.assistance_count < 0:
        raise InvalidObservation(f"Negative assistance count: {obs.assistance_count}")
    return normalize_elapsed(obs.elapsed_ms, config)


def reaction_bonus(elapsed_ms: float, config: SchedulerConfig = DEFAULT_CONFIG) -> float:
    """
    Reward for fast recall.

    Formula:
        bonus = clamp(1 - elapsed / FAST_RECALL_WINDOW_MS, 0, REACTION_BONUS_MAX)
    """
    raw = 1.0 - elapsed_ms / config.fast_recall_window_ms
    return clamp(raw, 0.0, config.reaction_bonus_max)


def help_penalty(
    elapsed_ms: float,
    assistance_count: int,
    config: SchedulerConfig = DEFAULT_CONFIG
) -> float:
    """
    Penalty for assisted or slow recall.

    Each assistance request subtracts ASSISTANCE_PENALTY; crossing
    SLOW_RECALL_THRESHOLD_MS subtracts SLOW_RECALL_PENALTY on top.
    """
    penalty = assistance_count * config.assistance_penalty
    if elapsed_ms > config.slow_recall_threshold_ms:
        penalty += config.slow_recall_penalty
    return penalty


def growth_factor(conf: float, config: SchedulerConfig = DEFAULT_CONFIG) -> float:
    """
    Halflife multiplier on success, increasing in confidence.

    Formula: 1 + confidence * GROWTH_SCALE
    """
    return 1.0 + conf * config.growth_scale


def apply_forgot_update(
    success_weight: float,
    failure_weight: float,
    halflife: float,
    config: SchedulerConfig = DEFAULT_CONFIG
) -> tuple[float, float, float]:
    """
    Update weights and halflife after a lapse.

    Formulas:
        beta' = beta + 1
        alpha' = max(MIN_SUCCESS, alpha * DECAY_ON_FAIL)
        h' = max(MIN_HALFLIFE, h * FAIL_HALFLIFE_SHRINK)

    Returns:
        (success_weight, failure_weight, halflife)
    """
    new_failure = failure_weight + 1.0
    new_success = max(config.min_success, success_weight * config.decay_on_fail)
    new_halflife = clamp_halflife(halflife * config.fail_halflife_shrink, config)
    return new_success, new_failure, new_halflife


def apply_remembered_update(
    success_weight: float,
    failure_weight: float,
    halflife: float,
    elapsed_ms: float,
    assistance_count: int,
    config: SchedulerConfig = DEFAULT_CONFIG
) -> tuple[float, float, float]:
    """
    Update weights and halflife after successful recall.

    Formulas:
        alpha' = max(MIN_SUCCESS, alpha + 1 + bonus - penalty)
        h' = min(MAX_HALFLIFE, h * (1 + confidence' * GROWTH_SCALE))

    Where confidence' = alpha' / (alpha' + beta).

    Args:
        elapsed_ms: Reaction time, already clamped to >= 0
        assistance_count: Number of help requests during the presentation

    Returns:
        (success_weight, failure_weight, halflife)
    """
    bonus = reaction_bonus(elapsed_ms, config)
    penalty = help_penalty(elapsed_ms, assistance_count, config)

    new_success = max(config.min_success, success_weight + 1.0 + bonus - penalty)
    conf = confidence(new_success, failure_weight)
    new_halflife = clamp_halflife(halflife * growth_factor(conf, config), config)
    return new_success, failure_weight, new_halflife
