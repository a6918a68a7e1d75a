"""Tests for entity snapshot validation."""

from __future__ import annotations

import json
from datetime import UTC, datetime
from pathlib import Path

import pytest

from pipeline_heat.application.entity_snapshots import load_entity_snapshot, parse_entity_snapshot
from pipeline_heat.domain.entities import (
    ContactStrength,
    OutreachChannel,
    OutreachOutcome,
    ReferralKind,
    Stage,
)
from pipeline_heat.exceptions import EntitySnapshotValidationError
from tests.fakes import InMemoryFileSystem


def _payload(**overrides: object) -> str:
    payload: dict[str, object] = {
        "stage": "HR",
        "createdAt": "2026-02-01T09:00:00Z",
        "updatedAt": "2026-02-20T09:00:00Z",
        "outreach": [
            {
                "sentAt": "2026-02-21T10:30:00Z",
                "channel": "LINKEDIN",
                "outcome": "NO_RESPONSE",
                "personalizationScore": 70,
                "contactStrength": "MEDIUM",
            }
        ],
        "applications": [{"dateSent": "2026-02-02T00:00:00Z", "tailoringScore": 40}],
        "referrals": [{"kind": "SENT_CV"}],
    }
    payload.update(overrides)
    return json.dumps(payload)


def test_parse_entity_snapshot_maps_camel_case_fields() -> None:
    snapshot = parse_entity_snapshot(_payload())

    assert snapshot.stage is Stage.HR
    assert snapshot.archived is False
    assert snapshot.last_touch_at is None
    assert snapshot.updated_at == datetime(2026, 2, 20, 9, 0, tzinfo=UTC)
    outreach = snapshot.outreach[0]
    assert outreach.channel is OutreachChannel.LINKEDIN
    assert outreach.outcome is OutreachOutcome.NO_RESPONSE
    assert outreach.personalization_score == 70.0
    assert outreach.contact_strength is ContactStrength.MEDIUM
    assert snapshot.applications[0].tailoring_score == 40.0
    assert snapshot.referrals[0].kind is ReferralKind.SENT_CV


def test_optional_outreach_fields_default() -> None:
    payload = _payload(outreach=[{"sentAt": "2026-02-21T10:30:00Z", "channel": "PHONE"}])

    outreach = parse_entity_snapshot(payload).outreach[0]

    assert outreach.outcome is OutreachOutcome.NONE
    assert outreach.personalization_score == 0.0
    assert outreach.contact_strength is None


def test_collections_default_to_empty() -> None:
    payload = json.dumps(
        {
            "stage": "APPLIED",
            "archived": True,
            "createdAt": "2026-02-01T09:00:00Z",
            "updatedAt": "2026-02-01T09:00:00Z",
        }
    )

    snapshot = parse_entity_snapshot(payload)

    assert snapshot.archived is True
    assert snapshot.outreach == ()
    assert snapshot.applications == ()
    assert snapshot.referrals == ()


@pytest.mark.parametrize(
    ("overrides", "location"),
    [
        ({"stage": "INTERVIEW"}, "stage"),
        ({"updatedAt": "yesterday"}, "updatedAt"),
        ({"referrals": [{"kind": "FRIEND"}]}, "referrals.0.kind"),
        (
            {"applications": [{"dateSent": "2026-02-02T00:00:00Z", "tailoringScore": 120}]},
            "applications.0.tailoringScore",
        ),
    ],
)
def test_invalid_payload_names_location(overrides: dict[str, object], location: str) -> None:
    with pytest.raises(EntitySnapshotValidationError) as exc_info:
        parse_entity_snapshot(_payload(**overrides), source="lead.json")

    assert exc_info.value.source == "lead.json"
    assert exc_info.value.detail.startswith(f"{location}:")


def test_malformed_json_is_rejected() -> None:
    with pytest.raises(EntitySnapshotValidationError):
        parse_entity_snapshot("{not json")


def test_load_entity_snapshot_reads_from_filesystem() -> None:
    fs = InMemoryFileSystem()
    path = Path("snapshots/lead.json")
    fs.write_text(_payload(), path)

    snapshot = load_entity_snapshot(path=path, fs=fs)

    assert snapshot.stage is Stage.HR


def test_load_entity_snapshot_missing_file() -> None:
    with pytest.raises(EntitySnapshotValidationError, match="file not found"):
        load_entity_snapshot(path=Path("missing.json"), fs=InMemoryFileSystem())
