"""Domain entity representing a user notification."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from .event_envelope import EventEnvelope


@dataclass
class Notification:
    """Information message delivered to a specific user.

    ``created_at`` is the storage time and differs from ``occurred_at``, the
    moment the producing service recorded the event.
    """

    id: int | None
    recipient_id: str
    context_id: str
    event_type: str
    message: str
    occurred_at: datetime | None = None
    event_id: str | None = None
    created_at: datetime | None = None
    is_read: bool = False

    @classmethod
    def from_envelope(cls, envelope: EventEnvelope) -> "Notification":
        """Build an unsaved notification carrying the envelope content verbatim."""

        return cls(
            id=None,
            recipient_id=envelope.subject_user_id,
            context_id=envelope.context_id,
            event_type=envelope.event_type.value,
            message=envelope.message,
            occurred_at=envelope.occurred_at,
            event_id=envelope.event_id,
        )


__all__ = ["Notification"]
