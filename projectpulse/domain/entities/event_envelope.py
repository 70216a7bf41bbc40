"""Domain entity describing a notification event travelling through the broker."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from uuid import uuid4

ENVELOPE_SCHEMA_VERSION = 1


class EventType(str, Enum):
    """Closed catalogue of notification events emitted by the platform."""

    TASK_ASSIGNED = "task.assigned"
    TASK_UPDATED = "task.updated"
    TASK_DELETED = "task.deleted"
    TASK_STATUS_CHANGED = "task.status_changed"
    SUBTASK_ASSIGNED = "subtask.assigned"
    COMMENT_ADDED = "comment.added"
    PROJECT_MEMBER_ADDED = "project.member_added"
    PROJECT_MANAGER_ASSIGNED = "project.manager_assigned"
    PROJECT_UPDATED = "project.updated"
    PROJECT_STATUS_CHANGED = "project.status_changed"
    PROJECT_DELETED = "project.deleted"
    PROJECT_PERMISSIONS_CHANGED = "project.permissions_changed"
    DELIVERABLE_PHASE_CHANGED = "deliverable.phase_changed"

    @classmethod
    def parse(cls, value: str) -> "EventType":
        """Return the member matching ``value`` or raise ``ValueError``."""

        try:
            return cls(value)
        except ValueError:
            raise ValueError(f"Unknown event type '{value}'") from None


@dataclass(frozen=True)
class EventEnvelope:
    """Immutable, self-describing payload for one notification event.

    ``subject_user_id`` and ``context_id`` are opaque correlation identifiers
    owned by other services.
    """

    event_type: EventType
    subject_user_id: str
    context_id: str
    message: str
    occurred_at: datetime
    event_id: str | None = field(default_factory=lambda: str(uuid4()))
    schema_version: int = ENVELOPE_SCHEMA_VERSION

    def __post_init__(self) -> None:
        for name in ("subject_user_id", "context_id", "message"):
            value = getattr(self, name)
            if not isinstance(value, str) or not value.strip():
                raise ValueError(f"EventEnvelope.{name} must be a non-empty string")
        if not isinstance(self.event_type, EventType):
            object.__setattr__(self, "event_type", EventType.parse(self.event_type))
        if not isinstance(self.occurred_at, datetime):
            raise ValueError("EventEnvelope.occurred_at must be a datetime")

    @property
    def partition_key(self) -> str:
        """Key used to route every event of one recipient to the same partition."""

        return self.subject_user_id


__all__ = ["ENVELOPE_SCHEMA_VERSION", "EventEnvelope", "EventType"]
