"""Loading and validation for serialised entity snapshots."""

from __future__ import annotations

from datetime import datetime
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from ..domain.entities import (
    ApplicationRecord,
    ContactStrength,
    EntitySnapshot,
    OutreachChannel,
    OutreachOutcome,
    OutreachRecord,
    ReferralKind,
    ReferralRecord,
    Stage,
)
from ..exceptions import EntitySnapshotValidationError
from ..protocols import FileSystem


class _SnapshotModel(BaseModel):
    model_config = ConfigDict(extra="ignore", frozen=True)


def _validate_percentage(value: float) -> float:
    if value < 0.0 or value > 100.0:
        raise ValueError("must be within 0..100")
    return value


class _OutreachModel(_SnapshotModel):
    sent_at: datetime = Field(alias="sentAt")
    channel: OutreachChannel
    outcome: OutreachOutcome = OutreachOutcome.NONE
    personalization_score: float = Field(default=0.0, alias="personalizationScore")
    contact_strength: ContactStrength | None = Field(default=None, alias="contactStrength")

    @field_validator("personalization_score")
    @classmethod
    def _validate_score(cls, value: float) -> float:
        return _validate_percentage(value)


class _ApplicationModel(_SnapshotModel):
    date_sent: datetime = Field(alias="dateSent")
    tailoring_score: float = Field(alias="tailoringScore")

    @field_validator("tailoring_score")
    @classmethod
    def _validate_score(cls, value: float) -> float:
        return _validate_percentage(value)


class _ReferralModel(_SnapshotModel):
    kind: ReferralKind


class _EntitySnapshotModel(_SnapshotModel):
    stage: Stage
    archived: bool = False
    created_at: datetime = Field(alias="createdAt")
    updated_at: datetime = Field(alias="updatedAt")
    last_touch_at: datetime | None = Field(default=None, alias="lastTouchAt")
    outreach: tuple[_OutreachModel, ...] = ()
    applications: tuple[_ApplicationModel, ...] = ()
    referrals: tuple[_ReferralModel, ...] = ()


def _format_validation_error(exc: ValidationError) -> str:
    first = exc.errors()[0]
    location = ".".join(str(part) for part in first.get("loc", ("<root>",))) or "<root>"
    message = str(first.get("msg", "invalid value"))
    return f"{location}: {message}"


def _to_domain_snapshot(model: _EntitySnapshotModel) -> EntitySnapshot:
    return EntitySnapshot(
        stage=model.stage,
        archived=model.archived,
        created_at=model.created_at,
        updated_at=model.updated_at,
        last_touch_at=model.last_touch_at,
        outreach=tuple(
            OutreachRecord(
                sent_at=item.sent_at,
                channel=item.channel,
                outcome=item.outcome,
                personalization_score=item.personalization_score,
                contact_strength=item.contact_strength,
            )
            for item in model.outreach
        ),
        applications=tuple(
            ApplicationRecord(date_sent=item.date_sent, tailoring_score=item.tailoring_score)
            for item in model.applications
        ),
        referrals=tuple(ReferralRecord(kind=item.kind) for item in model.referrals),
    )


def parse_entity_snapshot(payload: str, *, source: str = "<input>") -> EntitySnapshot:
    """Validate a JSON entity snapshot (camelCase keys) into the domain type."""
    try:
        model = _EntitySnapshotModel.model_validate_json(payload)
    except ValidationError as exc:
        raise EntitySnapshotValidationError(source, _format_validation_error(exc)) from exc
    return _to_domain_snapshot(model)


def load_entity_snapshot(*, path: Path, fs: FileSystem) -> EntitySnapshot:
    """Load and validate an entity snapshot from a JSON file."""
    if not fs.exists(path):
        raise EntitySnapshotValidationError(str(path), "file not found")
    return parse_entity_snapshot(fs.read_text(path), source=str(path))
