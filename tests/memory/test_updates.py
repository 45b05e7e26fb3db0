import pytest

from lexirecall.errors import InvalidObservation
from lexirecall.memory import SchedulerConfig
from lexirecall.memory.updates import (
    apply_forgot_update,
    apply_remembered_update,
    growth_factor,
    help_penalty,
    normalize_elapsed,
    reaction_bonus,
    validate_observation,
)
from tests.fakes import remembered


def test_reaction_bonus_is_capped_for_very_fast_recall():
    assert reaction_bonus(0) == pytest.approx(0.8)
    assert reaction_bonus(500) == pytest.approx(0.8)


def test_reaction_bonus_decreases_then_vanishes():
    assert reaction_bonus(1400) == pytest.approx(0.5)
    assert reaction_bonus(2800) == 0.0
    assert reaction_bonus(6000) == 0.0


def test_help_penalty_counts_assistance_and_slowness():
    assert help_penalty(500, 0) == 0.0
    assert help_penalty(500, 2) == pytest.approx(0.5)
    assert help_penalty(8000, 0) == pytest.approx(0.5)
    assert help_penalty(8000, 1) == pytest.approx(0.75)


def test_assistance_penalty_can_be_neutral():
    config = SchedulerConfig(assistance_penalty=0.0)
    assert help_penalty(500, 4, config) == 0.0


def test_growth_factor_increases_with_confidence():
    assert growth_factor(0.0) == 1.0
    assert growth_factor(0.5) < growth_factor(0.9)


def test_negative_elapsed_is_clamped_by_default():
    assert normalize_elapsed(-250) == 0.0


def test_negative_elapsed_rejected_when_clamping_disabled():
    config = SchedulerConfig(clamp_elapsed=False)
    with pytest.raises(InvalidObservation):
        normalize_elapsed(-1, config)


def test_negative_assistance_count_is_rejected():
    with pytest.raises(InvalidObservation):
        validate_observation(remembered(assistance_count=-1))


def test_forgot_update_reference_values():
    success, failure, halflife = apply_forgot_update(3.0, 1.0, 1440.0)
    assert success == pytest.approx(1.5)
    assert failure == pytest.approx(2.0)
    assert halflife == pytest.approx(288.0)


def test_forgot_update_respects_floors():
    success, _, halflife = apply_forgot_update(0.1, 1.0, 10.0)
    assert success == pytest.approx(0.1)
    assert halflife == pytest.approx(10.0)


def test_remembered_update_reference_values():
    success, failure, halflife = apply_remembered_update(3.0, 1.0, 1440.0, 500, 0)
    assert success == pytest.approx(4.8)
    assert failure == 1.0
    assert halflife == pytest.approx(1440.0 * (1 + (4.8 / 5.8) * 1.5))


def test_remembered_update_caps_halflife():
    _, _, halflife = apply_remembered_update(50.0, 1.0, 500000.0, 500, 0)
    assert halflife == 525600.0


def test_heavily_assisted_recall_keeps_success_weight_positive():
    success, _, _ = apply_remembered_update(0.1, 5.0, 20.0, 9000, 10)
    assert success == pytest.approx(0.1)
