"""JSON wire format of :class:`EventEnvelope` messages."""

from __future__ import annotations

import json
from datetime import datetime, timezone
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from projectpulse.domain.entities import ENVELOPE_SCHEMA_VERSION, EventEnvelope, EventType
from projectpulse.domain.exceptions import EventDeserializationError


class EnvelopeMessage(BaseModel):
    """Flat, self-describing record published for every notification event."""

    model_config = ConfigDict(
        populate_by_name=True,
        str_strip_whitespace=True,
        extra="ignore",
        frozen=True,
    )

    event_type: EventType = Field(alias="eventType")
    subject_user_id: str = Field(alias="subjectUserId", min_length=1, max_length=64)
    context_id: str = Field(alias="contextId", min_length=1, max_length=64)
    message: str = Field(alias="message", min_length=1)
    occurred_at: datetime = Field(alias="occurredAt")
    event_id: str | None = Field(default=None, alias="eventId", max_length=36)
    schema_version: int = Field(default=ENVELOPE_SCHEMA_VERSION, alias="schemaVersion", ge=1)

    @field_validator("schema_version")
    @classmethod
    def _supported_version(cls, value: int) -> int:
        if value > ENVELOPE_SCHEMA_VERSION:
            raise ValueError(
                f"schema version {value} is newer than supported {ENVELOPE_SCHEMA_VERSION}"
            )
        return value

    @field_validator("occurred_at")
    @classmethod
    def _normalize_to_utc(cls, value: datetime) -> datetime:
        """Express ``occurredAt`` in UTC; naive values are taken as UTC already."""

        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        try:
            return value.astimezone(timezone.utc)
        except OverflowError as exc:
            raise ValueError("occurredAt is outside the representable range") from exc


def encode_envelope(envelope: EventEnvelope) -> bytes:
    """Serialize ``envelope`` into the UTF-8 JSON message value."""

    payload: dict[str, Any] = {
        "schemaVersion": envelope.schema_version,
        "eventId": envelope.event_id,
        "eventType": envelope.event_type.value,
        "subjectUserId": envelope.subject_user_id,
        "contextId": envelope.context_id,
        "message": envelope.message,
        "occurredAt": envelope.occurred_at.isoformat(),
    }
    return json.dumps(payload, ensure_ascii=False, separators=(",", ":")).encode("utf-8")


def decode_envelope(raw: bytes | str | None) -> EventEnvelope:
    """Parse a message value, raising :class:`EventDeserializationError` on any defect."""

    if raw is None:
        raise EventDeserializationError("Message has no value")
    try:
        text = raw.decode("utf-8") if isinstance(raw, (bytes, bytearray)) else raw
        data = json.loads(text)
    except (UnicodeDecodeError, json.JSONDecodeError) as exc:
        raise EventDeserializationError(f"Payload is not valid JSON: {exc}") from exc

    if not isinstance(data, dict):
        raise EventDeserializationError("Payload must be a JSON object")

    try:
        message = EnvelopeMessage.model_validate(data)
    except ValidationError as exc:
        fields = ", ".join(
            ".".join(str(part) for part in error["loc"]) or "<root>"
            for error in exc.errors()
        )
        raise EventDeserializationError(f"Invalid envelope fields: {fields}") from exc

    return EventEnvelope(
        event_type=message.event_type,
        subject_user_id=message.subject_user_id,
        context_id=message.context_id,
        message=message.message,
        occurred_at=message.occurred_at,
        event_id=message.event_id,
        schema_version=message.schema_version,
    )


__all__ = ["EnvelopeMessage", "decode_envelope", "encode_envelope"]
