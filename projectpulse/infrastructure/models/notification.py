"""SQLAlchemy model for persisted notifications."""

from sqlalchemy import Boolean, Column, DateTime, Integer, String, Text

from projectpulse.infrastructure.database import Base


class NotificationModel(Base):
    """Database representation for user notifications.

    ``recipient_id`` and ``context_id`` reference entities owned by other
    services, so they carry no foreign keys. ``event_id`` is indexed but not
    unique: redelivered events are stored as distinct rows.
    """

    __tablename__ = "notification"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    recipient_id = Column(String(64), nullable=False, index=True)
    context_id = Column(String(64), nullable=False)
    event_type = Column(String(50), nullable=False)
    message = Column(Text, nullable=False)
    event_id = Column(String(36), nullable=True, index=True)
    occurred_at = Column(DateTime(), nullable=True)
    created_at = Column(DateTime(), nullable=False)
    is_read = Column(Boolean, nullable=False, default=False)


__all__ = ["NotificationModel"]
