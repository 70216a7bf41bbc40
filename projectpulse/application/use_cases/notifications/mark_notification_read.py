"""Use case for flagging a notification as read by its recipient."""

from sqlalchemy.orm import Session

from projectpulse.domain.entities import Notification
from projectpulse.infrastructure.repositories import NotificationRepository


def mark_notification_read(
    session: Session, notification_id: int, *, recipient_id: str
) -> Notification:
    """Mark the notification as read and return it.

    Notifications owned by someone else are reported as missing.
    """

    repository = NotificationRepository(session)
    if not repository.mark_as_read(notification_id, recipient_id=recipient_id):
        raise ValueError("Notification not found")
    notification = repository.get(notification_id)
    if notification is None:
        raise ValueError("Notification not found")
    return notification
