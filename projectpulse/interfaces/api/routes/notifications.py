"""Endpoints for reading the authenticated user's notifications."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from projectpulse.application.use_cases.notifications import (
    count_unread_notifications,
    list_notifications as list_notifications_uc,
    mark_notification_read as mark_notification_read_uc,
)
from projectpulse.config import get_settings
from projectpulse.domain.entities import Identity, Notification
from projectpulse.infrastructure.database import get_db
from projectpulse.interfaces.api.dependencies import get_current_identity
from projectpulse.interfaces.api.schemas import NotificationRead, UnreadCountRead

router = APIRouter(prefix="/notifications", tags=["notifications"])


def _notification_to_schema(notification: Notification) -> NotificationRead:
    return NotificationRead(
        id=notification.id or 0,
        user_id=notification.recipient_id,
        context_id=notification.context_id,
        event_type=notification.event_type,
        message=notification.message,
        occurred_at=notification.occurred_at,
        created_at=notification.created_at,
        is_read=notification.is_read,
    )


@router.get("/", response_model=list[NotificationRead])
def list_notifications(
    limit: int | None = Query(default=None, ge=1, le=500),
    unread_only: bool = Query(default=False),
    db: Session = Depends(get_db),
    identity: Identity = Depends(get_current_identity),
) -> list[NotificationRead]:
    """Return the most recent notifications for the authenticated user."""

    effective_limit = limit or get_settings().notification_list_limit
    try:
        notifications = list_notifications_uc(
            db, identity.user_id, limit=effective_limit, unread_only=unread_only
        )
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    return [_notification_to_schema(notification) for notification in notifications]


@router.get("/unread-count", response_model=UnreadCountRead)
def unread_count(
    db: Session = Depends(get_db),
    identity: Identity = Depends(get_current_identity),
) -> UnreadCountRead:
    return UnreadCountRead(unread=count_unread_notifications(db, identity.user_id))


@router.put("/{notification_id}/read", response_model=NotificationRead)
def mark_notification_read(
    notification_id: int,
    db: Session = Depends(get_db),
    identity: Identity = Depends(get_current_identity),
) -> NotificationRead:
    try:
        notification = mark_notification_read_uc(
            db, notification_id, recipient_id=identity.user_id
        )
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc
    return _notification_to_schema(notification)
