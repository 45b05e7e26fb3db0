from dataclasses import replace

import pytest

from lexirecall.memory import (
    GradeStrategy,
    HalflifeStrategy,
    SchedulerConfig,
    evaluate,
    get_strategy,
)
from tests.fakes import forgot, remembered


@pytest.fixture
def grade():
    return GradeStrategy()


def test_get_strategy_by_name():
    assert isinstance(get_strategy(), HalflifeStrategy)
    assert isinstance(get_strategy("grade"), GradeStrategy)


def test_get_strategy_binds_config():
    config = SchedulerConfig(r_target=0.9)
    assert get_strategy("grade", config).config is config


def test_get_strategy_unknown_name():
    with pytest.raises(ValueError, match="Unknown scheduling strategy"):
        get_strategy("leitner")


def test_halflife_strategy_matches_default_evaluate(seen_state, now):
    obs = remembered(elapsed_ms=1200, assistance_count=1)
    assert HalflifeStrategy().evaluate(seen_state, obs, now) == evaluate(seen_state, obs, now)


def test_grades(grade):
    assert grade.grade(forgot(), 3000) == 1
    assert grade.grade(remembered(), 500) == 5
    assert grade.grade(remembered(), 4000) == 4
    assert grade.grade(remembered(), 8000) == 3
    assert grade.grade(remembered(assistance_count=1), 500) == 3


def test_easiness_tracks_evidence(grade, seen_state):
    assert grade.easiness(seen_state) == pytest.approx(2.5)
    assert grade.easiness(replace(seen_state, success_weight=5.0)) == pytest.approx(2.7)
    assert grade.easiness(replace(seen_state, failure_weight=10.0)) == pytest.approx(1.3)


def test_grade_strategy_success_multiplies_by_easiness(grade, seen_state, now):
    updated = grade.evaluate(seen_state, remembered(elapsed_ms=500), now)
    assert updated.halflife == pytest.approx(1440.0 * 2.6)
    assert updated.success_weight == pytest.approx(4.0)


def test_grade_strategy_hesitant_recall_grows_less(grade, seen_state, now):
    quick = grade.evaluate(seen_state, remembered(elapsed_ms=500), now)
    hesitant = grade.evaluate(seen_state, remembered(elapsed_ms=8000), now)
    assert seen_state.halflife < hesitant.halflife < quick.halflife


def test_grade_strategy_lapse_resets_long_interval(grade, seen_state, now):
    mature = replace(seen_state, halflife=20000.0)
    updated = grade.evaluate(mature, forgot(), now)
    assert updated.halflife == pytest.approx(1440.0)
    assert updated.failure_weight == pytest.approx(2.0)


def test_grade_strategy_lapse_keeps_short_interval(grade, seen_state, now):
    young = replace(seen_state, halflife=60.0)
    assert grade.evaluate(young, forgot(), now).halflife == pytest.approx(60.0)


def test_strategies_share_due_computation(grade, seen_state, now):
    updated = grade.evaluate(seen_state, remembered(), now)
    assert grade.predict_recall(updated, updated.due_at) == pytest.approx(0.85)
