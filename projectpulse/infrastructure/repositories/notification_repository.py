"""Persistence helpers for notification entities."""

from __future__ import annotations

from collections.abc import Sequence

from sqlalchemy import func
from sqlalchemy.orm import Session

from projectpulse.domain.entities import Notification
from projectpulse.infrastructure.models import NotificationModel
from projectpulse.utils import (
    ensure_app_timezone,
    now_in_app_timezone,
    to_storage_datetime,
)


class NotificationRepository:
    """Append-only store of :class:`Notification` rows queried by recipient."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def append(self, notification: Notification, *, deduplicate: bool = False) -> int:
        """Insert ``notification`` and return its store-assigned identifier.

        Identical content is never coalesced. With ``deduplicate`` enabled a
        row sharing the same non-empty ``event_id`` is returned instead.
        """

        if deduplicate and notification.event_id:
            existing_id = (
                self.session.query(NotificationModel.id)
                .filter(NotificationModel.event_id == notification.event_id)
                .order_by(NotificationModel.id.asc())
                .limit(1)
                .scalar()
            )
            if existing_id is not None:
                return existing_id

        model = NotificationModel(
            recipient_id=notification.recipient_id,
            context_id=notification.context_id,
            event_type=notification.event_type,
            message=notification.message,
            event_id=notification.event_id,
            occurred_at=to_storage_datetime(notification.occurred_at),
            created_at=to_storage_datetime(
                notification.created_at or now_in_app_timezone()
            ),
            is_read=notification.is_read,
        )
        self.session.add(model)
        self.session.commit()
        self.session.refresh(model)
        return model.id

    def list_by_recipient(
        self,
        recipient_id: str,
        *,
        limit: int | None = 50,
        unread_only: bool = False,
    ) -> Sequence[Notification]:
        query = self.session.query(NotificationModel).filter(
            NotificationModel.recipient_id == recipient_id
        )
        if unread_only:
            query = query.filter(NotificationModel.is_read.is_(False))
        query = query.order_by(
            NotificationModel.created_at.desc(), NotificationModel.id.desc()
        )
        if limit is not None:
            query = query.limit(limit)
        return [self._to_entity(model) for model in query.all()]

    def get(self, notification_id: int) -> Notification | None:
        model = self.session.get(NotificationModel, notification_id)
        return self._to_entity(model) if model else None

    def count_unread(self, recipient_id: str) -> int:
        count = (
            self.session.query(func.count(NotificationModel.id))
            .filter(
                NotificationModel.recipient_id == recipient_id,
                NotificationModel.is_read.is_(False),
            )
            .scalar()
        )
        return int(count or 0)

    def mark_as_read(self, notification_id: int, *, recipient_id: str) -> bool:
        """Flag the notification as read; ``False`` when it is not the recipient's."""

        updated = (
            self.session.query(NotificationModel)
            .filter(
                NotificationModel.id == notification_id,
                NotificationModel.recipient_id == recipient_id,
            )
            .update({NotificationModel.is_read: True}, synchronize_session=False)
        )
        self.session.commit()
        return bool(updated)

    @staticmethod
    def _to_entity(model: NotificationModel) -> Notification:
        return Notification(
            id=model.id,
            recipient_id=model.recipient_id,
            context_id=model.context_id,
            event_type=model.event_type,
            message=model.message,
            occurred_at=ensure_app_timezone(model.occurred_at),
            event_id=model.event_id,
            created_at=ensure_app_timezone(model.created_at),
            is_read=bool(model.is_read),
        )


__all__ = ["NotificationRepository"]
