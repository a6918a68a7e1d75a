"""Domain model for the configurable heat rule table."""

from __future__ import annotations

from dataclasses import dataclass
from types import MappingProxyType

from ..exceptions import HeatBucketsError, HeatRulesValueError
from .entities import ContactStrength, OutreachChannel, OutreachOutcome, Stage

SCORE_MIN = 0.0
SCORE_MAX = 100.0
HEAT_LEVELS = (0, 1, 2, 3)
HEAT_LABELS = {0: "Cold", 1: "Warm", 2: "Hot", 3: "Very Hot"}


@dataclass(frozen=True)
class ScoreCaps:
    """Optional upper bounds applied after all contributions.

    ``archived_score`` mirrors the document's ``caps.archived`` key so existing
    documents keep their shape; archived items always score 0.
    """

    archived_score: float
    per_stage: MappingProxyType[Stage, float]


@dataclass(frozen=True)
class DecayRules:
    """Half-life decay applied to perishable outreach signals."""

    half_life_days: float
    minimum_factor: float
    maximum_days: float | None = None  # None: no hard cutoff


@dataclass(frozen=True)
class HeatBucket:
    """Scores up to and including ``max_score`` map to ``heat``."""

    max_score: float
    heat: int


@dataclass(frozen=True)
class RulesConfig:
    """All scoring weights and thresholds for one process."""

    caps: ScoreCaps
    stage_base: MappingProxyType[Stage, float]
    referral_bonus: float
    outreach_outcome_weight: MappingProxyType[OutreachOutcome, float]
    contact_strength_weight: MappingProxyType[ContactStrength, float]
    channel_weight: MappingProxyType[OutreachChannel, float]
    personalization_divisor: float
    tailoring_divisor: float
    decay: DecayRules
    heat_buckets: tuple[HeatBucket, ...]

    def __post_init__(self) -> None:
        validate_rule_values(self)
        validate_heat_buckets(self.heat_buckets)


def validate_rule_values(rules: RulesConfig) -> None:
    """Reject divisors and decay settings that would break scoring.

    Raises:
        HeatRulesValueError: If a divisor or the half-life is not positive, the
            minimum factor is outside 0..1 or the cutoff is negative.
    """
    if not rules.personalization_divisor > 0.0:
        raise HeatRulesValueError(
            f"personalizationDivisor must be positive, got {rules.personalization_divisor}"
        )
    if not rules.tailoring_divisor > 0.0:
        raise HeatRulesValueError(
            f"tailoringDivisor must be positive, got {rules.tailoring_divisor}"
        )
    decay = rules.decay
    if not decay.half_life_days > 0.0:
        raise HeatRulesValueError(f"halfLifeDays must be positive, got {decay.half_life_days}")
    if not 0.0 <= decay.minimum_factor <= 1.0:
        raise HeatRulesValueError(
            f"minimumFactor must be within 0..1, got {decay.minimum_factor}"
        )
    if decay.maximum_days is not None and not decay.maximum_days >= 0.0:
        raise HeatRulesValueError(f"maximumDays must not be negative, got {decay.maximum_days}")


def validate_heat_buckets(buckets: tuple[HeatBucket, ...]) -> None:
    """Reject bucket tables that leave part of 0–100 unassigned.

    Raises:
        HeatBucketsError: If the buckets are empty, unordered, out of range or
            do not reach 100.
    """
    if not buckets:
        raise HeatBucketsError("at least one bucket is required")
    if buckets[0].max_score < SCORE_MIN:
        raise HeatBucketsError(f"first maxScore {buckets[0].max_score} is below {SCORE_MIN:g}")
    for previous, current in zip(buckets, buckets[1:], strict=False):
        if current.max_score <= previous.max_score:
            raise HeatBucketsError(
                f"maxScore {current.max_score} does not ascend past {previous.max_score}"
            )
    if buckets[-1].max_score < SCORE_MAX:
        raise HeatBucketsError(f"last maxScore {buckets[-1].max_score} does not reach 100")
    for bucket in buckets:
        if bucket.heat not in HEAT_LEVELS:
            raise HeatBucketsError(f"heat {bucket.heat} is outside 0..3")


def heat_label(heat: int) -> str:
    """Display name for a heat level; unknown levels read as cold."""
    return HEAT_LABELS.get(heat, HEAT_LABELS[0])
