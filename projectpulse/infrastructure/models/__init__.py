"""ORM models used by the application infrastructure."""

from .notification import NotificationModel
from .permission_grant import ProjectMemberPermissionModel, ProjectPermissionModel

__all__ = [
    "NotificationModel",
    "ProjectMemberPermissionModel",
    "ProjectPermissionModel",
]
