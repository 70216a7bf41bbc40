"""Use cases for reading a user's notifications."""

from __future__ import annotations

from collections.abc import Sequence

from sqlalchemy.orm import Session

from projectpulse.domain.entities import Notification
from projectpulse.infrastructure.repositories import NotificationRepository


def list_notifications(
    session: Session,
    recipient_id: str,
    *,
    limit: int | None = 50,
    unread_only: bool = False,
) -> Sequence[Notification]:
    """Return the recipient's notifications, newest first."""

    if limit is not None and limit < 1:
        raise ValueError("Limit must be greater than zero")
    return NotificationRepository(session).list_by_recipient(
        recipient_id, limit=limit, unread_only=unread_only
    )


def count_unread_notifications(session: Session, recipient_id: str) -> int:
    return NotificationRepository(session).count_unread(recipient_id)


__all__ = ["count_unread_notifications", "list_notifications"]
