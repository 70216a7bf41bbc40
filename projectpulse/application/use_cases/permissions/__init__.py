"""Use cases managing project member capabilities."""

from .assign_project_permissions import assign_project_permissions
from .get_project_permissions import (
    get_member_permissions,
    list_project_permissions,
    list_user_permissions,
)

__all__ = [
    "assign_project_permissions",
    "get_member_permissions",
    "list_project_permissions",
    "list_user_permissions",
]
