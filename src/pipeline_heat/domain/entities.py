"""Read-only entity snapshots supplied by the surrounding application.

Usage example:
    from datetime import UTC, datetime

    from pipeline_heat.domain.entities import EntitySnapshot, Stage

    created = datetime(2026, 1, 5, tzinfo=UTC)
    snapshot = EntitySnapshot(
        stage=Stage.APPLIED,
        archived=False,
        created_at=created,
        updated_at=created,
    )
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import StrEnum


class Stage(StrEnum):
    """Pipeline phase of a tracked opportunity."""

    APPLIED = "APPLIED"
    HR = "HR"
    TECH = "TECH"
    OFFER = "OFFER"
    REJECTED = "REJECTED"
    DORMANT = "DORMANT"


class OutreachOutcome(StrEnum):
    """Recorded response to an outreach attempt."""

    POSITIVE = "POSITIVE"
    NEGATIVE = "NEGATIVE"
    NO_RESPONSE = "NO_RESPONSE"
    NONE = "NONE"


class OutreachChannel(StrEnum):
    """Medium an outreach attempt was sent through."""

    EMAIL = "EMAIL"
    LINKEDIN = "LINKEDIN"
    PHONE = "PHONE"
    OTHER = "OTHER"


class ContactStrength(StrEnum):
    """Relationship strength with the contacted person."""

    STRONG = "STRONG"
    MEDIUM = "MEDIUM"
    WEAK = "WEAK"
    UNKNOWN = "UNKNOWN"


class ReferralKind(StrEnum):
    """Kind of introduction or vouching event."""

    REFERRAL = "REFERRAL"
    SENT_CV = "SENT_CV"
    INTRO = "INTRO"


# Referral kinds that floor the score at the referral bonus.
STRONG_REFERRAL_KINDS = frozenset({ReferralKind.REFERRAL, ReferralKind.SENT_CV})


@dataclass(frozen=True)
class OutreachRecord:
    """One outreach attempt linked to the pipeline item."""

    sent_at: datetime
    channel: OutreachChannel
    outcome: OutreachOutcome
    personalization_score: float  # 0–100
    contact_strength: ContactStrength | None = None


@dataclass(frozen=True)
class ApplicationRecord:
    """One submitted application."""

    date_sent: datetime
    tailoring_score: float  # 0–100


@dataclass(frozen=True)
class ReferralRecord:
    """One referral event."""

    kind: ReferralKind


@dataclass(frozen=True)
class EntitySnapshot:
    """Everything the engine needs to know about one pipeline item."""

    stage: Stage
    archived: bool
    created_at: datetime
    updated_at: datetime
    last_touch_at: datetime | None = None
    outreach: tuple[OutreachRecord, ...] = ()
    applications: tuple[ApplicationRecord, ...] = ()
    referrals: tuple[ReferralRecord, ...] = ()
