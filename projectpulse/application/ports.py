"""Interfaces the application layer depends on.

Infrastructure adapters implement these; tests substitute in-memory doubles.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from enum import Enum
from typing import Protocol

from projectpulse.domain.entities import EventEnvelope, Notification, PermissionGrant


class PublishResult(Enum):
    """Result of handing an event to the broker client."""

    QUEUED = "queued"  # Accepted by the client; delivery continues in the background
    FAILED = "failed"  # Rejected before reaching the client's queue


@dataclass(frozen=True)
class PublishResponse:
    """Outcome of :meth:`EventProducer.publish`."""

    result: PublishResult
    event_id: str | None = None
    error_message: str | None = None

    @property
    def queued(self) -> bool:
        return self.result is PublishResult.QUEUED


class EventProducer(Protocol):
    """Publishes notification events without blocking the caller on the broker."""

    def publish(self, envelope: EventEnvelope) -> PublishResponse:
        ...


class NotificationStore(Protocol):
    """Durable, append-only record of notifications."""

    def append(self, notification: Notification, *, deduplicate: bool = False) -> int:
        ...

    def list_by_recipient(
        self, recipient_id: str, *, limit: int | None = 50, unread_only: bool = False
    ) -> Sequence[Notification]:
        ...


class GrantLookup(Protocol):
    """Resolves the grant record of a ``(project, user)`` pair."""

    def get(self, *, project_id: str, user_id: str) -> PermissionGrant | None:
        ...


__all__ = [
    "EventProducer",
    "GrantLookup",
    "NotificationStore",
    "PublishResponse",
    "PublishResult",
]
