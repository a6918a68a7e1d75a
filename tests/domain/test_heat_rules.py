"""Tests for the heat rule table invariants."""

from dataclasses import replace

import pytest

from pipeline_heat.application.heat_rules import DEFAULT_HEAT_RULES
from pipeline_heat.domain.heat_rules import (
    DecayRules,
    HeatBucket,
    heat_label,
    validate_heat_buckets,
)
from pipeline_heat.exceptions import HeatBucketsError, HeatEngineError, HeatRulesValueError
from tests.support.heat_rules import make_rules


def _buckets(*pairs: tuple[float, int]) -> tuple[HeatBucket, ...]:
    return tuple(HeatBucket(max_score=max_score, heat=heat) for max_score, heat in pairs)


def test_default_buckets_are_valid() -> None:
    validate_heat_buckets(DEFAULT_HEAT_RULES.heat_buckets)


def test_single_bucket_covering_everything_is_valid() -> None:
    validate_heat_buckets(_buckets((100.0, 2)))


@pytest.mark.parametrize(
    "buckets",
    [
        (),
        _buckets((24.0, 0), (49.0, 1), (74.0, 2)),
        _buckets((24.0, 0), (24.0, 1), (100.0, 3)),
        _buckets((49.0, 1), (24.0, 0), (100.0, 3)),
        _buckets((-1.0, 0), (100.0, 3)),
        _buckets((50.0, 0), (100.0, 4)),
    ],
    ids=["empty", "short-of-100", "duplicate", "unordered", "negative", "heat-range"],
)
def test_invalid_buckets_are_rejected(buckets: tuple[HeatBucket, ...]) -> None:
    with pytest.raises(HeatBucketsError):
        validate_heat_buckets(buckets)


def test_rules_config_rejects_bad_buckets_at_construction() -> None:
    with pytest.raises(HeatBucketsError, match="does not reach 100"):
        replace(DEFAULT_HEAT_RULES, heat_buckets=_buckets((24.0, 0), (80.0, 3)))


def test_heat_bucket_error_is_a_value_error() -> None:
    assert issubclass(HeatBucketsError, ValueError)


@pytest.mark.parametrize(
    ("heat", "label"),
    [(0, "Cold"), (1, "Warm"), (2, "Hot"), (3, "Very Hot"), (7, "Cold")],
)
def test_heat_label(heat: int, label: str) -> None:
    assert heat_label(heat) == label


@pytest.mark.parametrize(
    ("overrides", "message"),
    [
        ({"personalization_divisor": 0.0}, "personalizationDivisor"),
        ({"tailoring_divisor": -4.0}, "tailoringDivisor"),
        ({"tailoring_divisor": float("nan")}, "tailoringDivisor"),
        ({"decay": DecayRules(half_life_days=0.0, minimum_factor=0.25)}, "halfLifeDays"),
        ({"decay": DecayRules(half_life_days=-0.0, minimum_factor=0.25)}, "halfLifeDays"),
        ({"decay": DecayRules(half_life_days=7.0, minimum_factor=3.0)}, "minimumFactor"),
        ({"decay": DecayRules(half_life_days=7.0, minimum_factor=-0.1)}, "minimumFactor"),
        (
            {"decay": DecayRules(half_life_days=7.0, minimum_factor=0.25, maximum_days=-1.0)},
            "maximumDays",
        ),
    ],
    ids=[
        "zero-personalization",
        "negative-tailoring",
        "nan-tailoring",
        "zero-half-life",
        "negative-zero-half-life",
        "minimum-above-one",
        "minimum-below-zero",
        "negative-cutoff",
    ],
)
def test_rules_config_rejects_unusable_values_at_construction(
    overrides: dict[str, object], message: str
) -> None:
    with pytest.raises(HeatRulesValueError, match=message):
        make_rules(**overrides)


def test_rule_value_error_is_an_engine_value_error() -> None:
    assert issubclass(HeatRulesValueError, HeatEngineError)
    assert issubclass(HeatRulesValueError, ValueError)


def test_boundary_decay_values_are_accepted() -> None:
    rules = make_rules(decay=DecayRules(half_life_days=0.5, minimum_factor=1.0, maximum_days=0.0))

    assert rules.decay.minimum_factor == 1.0
