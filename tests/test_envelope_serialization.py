"""Tests for the JSON wire format of notification events."""

from __future__ import annotations

import json
from datetime import datetime, timezone

import pytest

from projectpulse.domain.entities import EventEnvelope, EventType
from projectpulse.domain.exceptions import EventDeserializationError
from projectpulse.infrastructure.messaging import decode_envelope, encode_envelope


def _envelope(**overrides) -> EventEnvelope:
    values = {
        "event_type": EventType.TASK_ASSIGNED,
        "subject_user_id": "user-42",
        "context_id": "task-7",
        "message": 'You have been assigned a new task: "Ship"',
        "occurred_at": datetime(2024, 5, 1, 12, 30, tzinfo=timezone.utc),
    }
    values.update(overrides)
    return EventEnvelope(**values)


def test_encode_uses_camel_case_keys() -> None:
    envelope = _envelope()

    payload = json.loads(encode_envelope(envelope))

    assert payload["eventType"] == "task.assigned"
    assert payload["subjectUserId"] == "user-42"
    assert payload["contextId"] == "task-7"
    assert payload["occurredAt"] == "2024-05-01T12:30:00+00:00"
    assert payload["eventId"] == envelope.event_id
    assert payload["schemaVersion"] == 1


def test_decode_restores_envelope() -> None:
    envelope = _envelope()

    decoded = decode_envelope(encode_envelope(envelope))

    assert decoded == envelope


def test_decode_accepts_payload_without_optional_fields() -> None:
    raw = json.dumps(
        {
            "eventType": "project.updated",
            "subjectUserId": "u1",
            "contextId": "p1",
            "message": "Project 'Apollo' has been updated. Please review the changes.",
            "occurredAt": "2024-05-01T10:00:00",
        }
    )

    decoded = decode_envelope(raw)

    assert decoded.event_type is EventType.PROJECT_UPDATED
    assert decoded.event_id is None
    assert decoded.occurred_at.tzinfo is not None


@pytest.mark.parametrize(
    "raw",
    [
        None,
        b"\xff\xfe not utf-8",
        b"{not json",
        b"[1, 2, 3]",
        b'{"eventType": "task.exploded", "subjectUserId": "u", "contextId": "c",'
        b' "message": "m", "occurredAt": "2024-01-01T00:00:00Z"}',
        b'{"eventType": "task.assigned", "subjectUserId": "  ", "contextId": "c",'
        b' "message": "m", "occurredAt": "2024-01-01T00:00:00Z"}',
        b'{"eventType": "task.assigned", "subjectUserId": "u", "contextId": "c",'
        b' "message": "m"}',
        b'{"eventType": "task.assigned", "subjectUserId": "u", "contextId": "c",'
        b' "message": "m", "occurredAt": "2024-01-01T00:00:00Z", "schemaVersion": 9}',
        b'{"eventType": "task.assigned", "subjectUserId": "u", "contextId": "c",'
        b' "message": "m", "occurredAt": "0001-01-01T00:00:00+05:00"}',
    ],
)
def test_decode_rejects_malformed_payloads(raw) -> None:
    with pytest.raises(EventDeserializationError):
        decode_envelope(raw)


def test_envelope_requires_non_empty_fields() -> None:
    with pytest.raises(ValueError):
        _envelope(message="")
    with pytest.raises(ValueError):
        _envelope(event_type="not.an.event")


def test_partition_key_is_recipient() -> None:
    assert _envelope().partition_key == "user-42"


def test_decode_normalizes_offsets_to_utc() -> None:
    raw = json.dumps(
        {
            "eventType": "task.assigned",
            "subjectUserId": "u1",
            "contextId": "t1",
            "message": "m",
            "occurredAt": "2024-05-01T10:00:00+02:00",
        }
    )

    decoded = decode_envelope(raw)

    assert decoded.occurred_at == datetime(2024, 5, 1, 8, 0, tzinfo=timezone.utc)
    assert decoded.occurred_at.utcoffset().total_seconds() == 0
