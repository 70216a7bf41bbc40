"""Repository implementations for infrastructure layer."""

from .notification_repository import NotificationRepository
from .permission_grant_repository import PermissionGrantRepository

__all__ = [
    "NotificationRepository",
    "PermissionGrantRepository",
]
