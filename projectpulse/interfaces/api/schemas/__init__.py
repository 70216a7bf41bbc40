from .health import HealthRead
from .notification import NotificationRead, UnreadCountRead
from .permission import AssignPermissionsRequest, PermissionGrantRead

__all__ = [
    "AssignPermissionsRequest",
    "HealthRead",
    "NotificationRead",
    "PermissionGrantRead",
    "UnreadCountRead",
]
