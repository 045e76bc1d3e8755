"""Tests for threshold configuration."""

import pytest

from raisecoach import InvalidConfigurationError, RepThresholds


def test_defaults_match_lateral_raise():
    t = RepThresholds()
    assert (t.rep_threshold, t.rest_threshold, t.target_angle, t.lowering_drop_delta) == (80.0, 30.0, 100.0, 15.0)


@pytest.mark.parametrize("kwargs", [
    {"rest_threshold": 80.0},
    {"rest_threshold": 90.0},
    {"rep_threshold": 100.0},
    {"rep_threshold": 120.0},
    {"target_angle": 70.0},
])
def test_ordering_violations_are_rejected(kwargs):
    with pytest.raises(InvalidConfigurationError):
        RepThresholds(**kwargs)


@pytest.mark.parametrize("kwargs", [
    {"rest_threshold": 0.0},
    {"rest_threshold": -5.0},
    {"lowering_drop_delta": 0.0},
    {"target_angle": float("inf")},
    {"rep_threshold": float("nan")},
    {"rep_threshold": "80"},
    {"rep_threshold": True},
])
def test_non_positive_or_non_numeric_values_are_rejected(kwargs):
    with pytest.raises(InvalidConfigurationError):
        RepThresholds(**kwargs)


def test_from_mapping_accepts_camel_case_and_fills_defaults():
    t = RepThresholds.from_mapping({"repThreshold": 60, "restThreshold": 20})
    assert t.rep_threshold == 60
    assert t.rest_threshold == 20
    assert t.target_angle == 100.0


def test_from_mapping_rejects_unknown_options():
    with pytest.raises(InvalidConfigurationError):
        RepThresholds.from_mapping({"repThreshhold": 60})


def test_replace_revalidates():
    t = RepThresholds()
    assert t.replace(target_angle=120.0).target_angle == 120.0
    with pytest.raises(InvalidConfigurationError):
        t.replace(target_angle=50.0)


def test_configuration_error_is_a_value_error():
    with pytest.raises(ValueError):
        RepThresholds(rest_threshold=200.0)
