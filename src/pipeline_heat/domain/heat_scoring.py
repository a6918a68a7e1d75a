"""Domain scoring rules for pipeline heat.

Usage example:
    from datetime import UTC, datetime

    from pipeline_heat.application.heat_rules import DEFAULT_HEAT_RULES
    from pipeline_heat.domain.entities import EntitySnapshot, Stage
    from pipeline_heat.domain.heat_scoring import compute_score

    now = datetime(2026, 3, 1, tzinfo=UTC)
    snapshot = EntitySnapshot(
        stage=Stage.APPLIED, archived=False, created_at=now, updated_at=now
    )

    result = compute_score(snapshot, DEFAULT_HEAT_RULES, now=now)
    assert (result.score, result.heat) == (35.0, 1)
"""

from __future__ import annotations

import math
from collections.abc import Mapping
from dataclasses import dataclass
from datetime import datetime
from enum import StrEnum
from typing import TypeVar

from ..observability.logging import get_logger
from .decay import as_utc, decay_factor, elapsed_days_between
from .entities import STRONG_REFERRAL_KINDS, EntitySnapshot
from .heat_rules import SCORE_MAX, SCORE_MIN, HeatBucket, RulesConfig

logger = get_logger("pipeline_heat.heat_scoring")


class BreakdownCategory(StrEnum):
    """Kind of contribution recorded in a score breakdown."""

    CLAMP = "clamp"
    STAGE_BASE = "stageBase"
    REFERRAL = "referral"
    OUTREACH = "outreach"
    APPLICATION = "application"


@dataclass(frozen=True)
class BreakdownEntry:
    """One labelled, signed contribution (or clamp event)."""

    category: BreakdownCategory
    label: str
    delta: float

    def to_dict(self) -> dict[str, object]:
        return {"category": self.category.value, "label": self.label, "delta": self.delta}


@dataclass(frozen=True)
class ScoreResult:
    """Computed score, heat bucket and the explanation behind them."""

    score: float
    heat: int
    decay_factor: float
    breakdown: tuple[BreakdownEntry, ...]

    def to_dict(self) -> dict[str, object]:
        """Return plain data suitable for JSON encoding."""
        return {
            "score": self.score,
            "heat": self.heat,
            "decayFactor": self.decay_factor,
            "breakdown": [entry.to_dict() for entry in self.breakdown],
        }


def bucket_for_score(score: float, buckets: tuple[HeatBucket, ...]) -> int:
    """Map a score to the heat of the first bucket whose ``max_score`` covers it.

    A score equal to a threshold belongs to that bucket, not the next one.
    """
    for bucket in sorted(buckets, key=lambda item: item.max_score):
        if score <= bucket.max_score:
            return bucket.heat
    # Validated buckets always reach 100, so only out-of-range input lands here.
    return buckets[-1].heat


KeyT = TypeVar("KeyT")


def _weight(weights: Mapping[KeyT, float], key: KeyT, table: str) -> float:
    value = weights.get(key)
    if value is None:
        logger.warning("No %s weight for %s; contributing 0", table, key)
        return 0.0
    return value


def compute_score(entity: EntitySnapshot, rules: RulesConfig, *, now: datetime) -> ScoreResult:
    """Score one pipeline item against a rule table.

    Deterministic for a given ``now``; never raises for a structurally valid
    snapshot. Unknown enum weights contribute zero.
    """
    if entity.archived:
        return ScoreResult(
            score=0.0,
            heat=0,
            decay_factor=1.0,
            breakdown=(BreakdownEntry(BreakdownCategory.CLAMP, "archived", 0.0),),
        )

    breakdown: list[BreakdownEntry] = []

    score = _weight(rules.stage_base, entity.stage, "stage base")
    breakdown.append(BreakdownEntry(BreakdownCategory.STAGE_BASE, f"stage:{entity.stage}", score))

    strong_referral = next(
        (ref for ref in entity.referrals if ref.kind in STRONG_REFERRAL_KINDS), None
    )
    if strong_referral is not None and rules.referral_bonus > score:
        breakdown.append(
            BreakdownEntry(
                BreakdownCategory.REFERRAL,
                f"referral:{strong_referral.kind}",
                rules.referral_bonus - score,
            )
        )
        score = rules.referral_bonus

    latest_outreach = max(entity.outreach, key=lambda item: as_utc(item.sent_at), default=None)
    touch_times = [entity.updated_at]
    if entity.last_touch_at is not None:
        touch_times.append(entity.last_touch_at)
    if latest_outreach is not None:
        touch_times.append(latest_outreach.sent_at)
    reference = max((as_utc(value) for value in touch_times), default=as_utc(entity.created_at))
    factor = decay_factor(elapsed_days_between(reference, now), rules.decay)

    if latest_outreach is not None:
        raw = (
            _weight(rules.outreach_outcome_weight, latest_outreach.outcome, "outreach outcome")
            + _weight(rules.channel_weight, latest_outreach.channel, "channel")
            + latest_outreach.personalization_score / rules.personalization_divisor
        )
        if latest_outreach.contact_strength is not None:
            raw += _weight(
                rules.contact_strength_weight,
                latest_outreach.contact_strength,
                "contact strength",
            )
        contribution = raw * factor
        score += contribution
        breakdown.append(
            BreakdownEntry(
                BreakdownCategory.OUTREACH,
                f"{latest_outreach.channel}/{latest_outreach.outcome}",
                contribution,
            )
        )

    latest_application = max(
        entity.applications, key=lambda item: as_utc(item.date_sent), default=None
    )
    if latest_application is not None:
        # Submission is durable: no decay.
        contribution = latest_application.tailoring_score / rules.tailoring_divisor
        score += contribution
        breakdown.append(
            BreakdownEntry(
                BreakdownCategory.APPLICATION,
                f"tailoring:{latest_application.tailoring_score:g}",
                contribution,
            )
        )

    score = _apply_caps(score, entity, rules, breakdown)
    heat = bucket_for_score(score, rules.heat_buckets)
    logger.debug("Scored %s entity: score=%.2f heat=%d", entity.stage, score, heat)
    return ScoreResult(score=score, heat=heat, decay_factor=factor, breakdown=tuple(breakdown))


def _apply_caps(
    score: float,
    entity: EntitySnapshot,
    rules: RulesConfig,
    breakdown: list[BreakdownEntry],
) -> float:
    if math.isnan(score):
        breakdown.append(BreakdownEntry(BreakdownCategory.CLAMP, "invalid", 0.0))
        score = 0.0

    stage_cap = rules.caps.per_stage.get(entity.stage)
    if stage_cap is not None and score > stage_cap:
        breakdown.append(BreakdownEntry(BreakdownCategory.CLAMP, "stage-cap", stage_cap - score))
        score = stage_cap

    if score < SCORE_MIN:
        breakdown.append(BreakdownEntry(BreakdownCategory.CLAMP, "floor", SCORE_MIN - score))
        score = SCORE_MIN
    elif score > SCORE_MAX:
        breakdown.append(BreakdownEntry(BreakdownCategory.CLAMP, "ceiling", SCORE_MAX - score))
        score = SCORE_MAX
    return score
