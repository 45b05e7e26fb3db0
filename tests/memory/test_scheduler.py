import math
from dataclasses import replace
from datetime import timedelta

import pytest

from lexirecall.errors import InvalidObservation
from lexirecall.memory import (
    GradeStrategy,
    InteractionObservation,
    Outcome,
    SchedulerConfig,
    evaluate,
    initialize_new_state,
    is_due,
    predict_recall,
    process_review,
)
from tests.fakes import forgot, remembered


def _minutes_until_due(state, now):
    return (state.due_at - now).total_seconds() / 60.0


def test_fast_unaided_recall_extends_halflife(seen_state, now):
    updated = evaluate(seen_state, remembered(elapsed_ms=500), now)

    assert updated.success_weight == pytest.approx(4.8)
    assert updated.failure_weight == pytest.approx(1.0)
    assert updated.halflife == pytest.approx(1440.0 * (1 + (4.8 / 5.8) * 1.5))
    assert updated.halflife > seen_state.halflife
    assert _minutes_until_due(updated, now) == pytest.approx(-updated.halflife * math.log2(0.85))


def test_evaluate_records_exposure(seen_state, now):
    updated = evaluate(seen_state, remembered(), now)
    assert updated.last_seen == now
    assert updated.total_exposure == seen_state.total_exposure + 1
    assert updated.item_id == seen_state.item_id


def test_evaluate_does_not_touch_the_input(seen_state, now):
    before = replace(seen_state)
    evaluate(seen_state, forgot(), now)
    assert seen_state == before


def test_forgot_shrinks_halflife_and_adds_failure(seen_state, now):
    updated = evaluate(seen_state, forgot(), now)
    assert updated.halflife < seen_state.halflife
    assert updated.halflife == pytest.approx(288.0)
    assert updated.failure_weight == pytest.approx(2.0)
    assert updated.success_weight == pytest.approx(1.5)


def test_due_at_is_where_recall_meets_target(seen_state, now):
    updated = evaluate(seen_state, remembered(), now)
    assert predict_recall(updated, updated.due_at) == pytest.approx(0.85)
    assert not is_due(updated, now)
    assert is_due(updated, updated.due_at)


def test_fast_recall_beats_slow_recall(seen_state, now):
    fast = evaluate(seen_state, remembered(elapsed_ms=400), now)
    slow = evaluate(seen_state, remembered(elapsed_ms=9000), now)
    assert fast.halflife > slow.halflife
    assert fast.due_at > slow.due_at


def test_assistance_reduces_growth(seen_state, now):
    plain = evaluate(seen_state, remembered(), now)
    helped = evaluate(seen_state, remembered(assistance_count=2), now)
    assert helped.success_weight < plain.success_weight
    assert helped.halflife < plain.halflife


def test_neutral_assistance_penalty(seen_state, now):
    config = SchedulerConfig(assistance_penalty=0.0)
    plain = evaluate(seen_state, remembered(), now, config=config)
    helped = evaluate(seen_state, remembered(assistance_count=3), now, config=config)
    assert helped == plain


def test_negative_elapsed_behaves_like_instant_recall(seen_state, now):
    skewed = evaluate(seen_state, remembered(elapsed_ms=-120), now)
    instant = evaluate(seen_state, remembered(elapsed_ms=0), now)
    assert skewed == instant


def test_negative_elapsed_rejected_without_clamping(seen_state, now):
    config = SchedulerConfig(clamp_elapsed=False)
    with pytest.raises(InvalidObservation):
        evaluate(seen_state, remembered(elapsed_ms=-1), now, config=config)


def test_halflife_stays_within_bounds(seen_state, now):
    state = replace(seen_state, halflife=12.0)
    for _ in range(5):
        state = evaluate(state, forgot(), now)
        assert state.halflife >= 10.0
        assert state.success_weight >= 0.1

    state = replace(seen_state, halflife=400000.0)
    for _ in range(5):
        state = evaluate(state, remembered(), now)
        assert state.halflife <= 525600.0


def test_weights_stay_positive_under_repeated_failure(seen_state, now):
    state = seen_state
    for i in range(20):
        state = evaluate(state, forgot(), now + timedelta(minutes=i))
    assert state.success_weight > 0
    assert state.failure_weight > 0


def test_first_review_of_new_item(now):
    state = initialize_new_state("w:drift", now)
    updated = evaluate(state, remembered(), now)
    assert not updated.is_new
    assert updated.halflife > state.halflife
    assert updated.due_at > now


def test_explicit_strategy_is_used(seen_state, now):
    updated = evaluate(seen_state, remembered(), now, strategy=GradeStrategy())
    assert updated.halflife == pytest.approx(1440.0 * 2.6)


def test_process_review_event_for_seen_item(seen_state, now):
    updated, event = process_review(seen_state, remembered(elapsed_ms=500.7), now)

    assert event["item_id"] == "w:converge"
    assert event["timestamp"] == now
    assert event["outcome"] == Outcome.REMEMBERED.value
    assert event["elapsed_ms"] == 500
    assert event["halflife_before"] == 1440.0
    assert event["recall_before"] == pytest.approx(0.5)
    assert event["halflife_after"] == updated.halflife
    assert event["due_at"] == updated.due_at
    assert event["session_id"] is None


def test_process_review_event_for_new_item(now):
    state = initialize_new_state("w:drift", now)
    _, event = process_review(state, forgot(elapsed_ms=-5), now)

    assert event["outcome"] == "forgot"
    assert event["elapsed_ms"] == 0
    assert event["halflife_before"] is None
    assert event["success_weight_before"] is None
    assert event["recall_before"] is None


def test_plain_string_outcome_is_accepted(seen_state, now):
    obs = InteractionObservation(elapsed_ms=500, outcome="remembered")
    updated, event = process_review(seen_state, obs, now)

    assert updated == evaluate(seen_state, remembered(elapsed_ms=500), now)
    assert event["outcome"] == "remembered"


def test_unknown_outcome_is_rejected(seen_state, now):
    with pytest.raises(InvalidObservation, match="Unknown outcome"):
        evaluate(seen_state, InteractionObservation(elapsed_ms=500, outcome="skipped"), now)
