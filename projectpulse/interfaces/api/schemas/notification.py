"""Pydantic models describing notification payloads."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict


class NotificationRead(BaseModel):
    """Representation of a notification delivered to the client."""

    id: int
    user_id: str
    context_id: str
    event_type: str
    message: str
    occurred_at: datetime | None = None
    created_at: datetime
    is_read: bool = False

    model_config = ConfigDict(from_attributes=True)


class UnreadCountRead(BaseModel):
    unread: int


__all__ = ["NotificationRead", "UnreadCountRead"]
