"""Domain entities exposed by the application."""

from .event_envelope import ENVELOPE_SCHEMA_VERSION, EventEnvelope, EventType
from .identity import Identity
from .notification import Notification
from .permission_grant import (
    CAPABILITY_ASSIGN_TASK,
    CAPABILITY_EDIT,
    CAPABILITY_MANAGE_COMMENTS,
    CAPABILITY_MANAGE_DELIVERABLES,
    CAPABILITY_MANAGE_PHASES,
    CAPABILITY_MANAGE_SUBTASKS,
    CAPABILITY_MANAGE_TASKS,
    CAPABILITY_MANAGE_TEAM,
    CAPABILITY_VIEW,
    PermissionGrant,
    is_authorized,
    normalize_capabilities,
)
from .role import Role

__all__ = [
    "ENVELOPE_SCHEMA_VERSION",
    "EventEnvelope",
    "EventType",
    "Identity",
    "Notification",
    "CAPABILITY_ASSIGN_TASK",
    "CAPABILITY_EDIT",
    "CAPABILITY_MANAGE_COMMENTS",
    "CAPABILITY_MANAGE_DELIVERABLES",
    "CAPABILITY_MANAGE_PHASES",
    "CAPABILITY_MANAGE_SUBTASKS",
    "CAPABILITY_MANAGE_TASKS",
    "CAPABILITY_MANAGE_TEAM",
    "CAPABILITY_VIEW",
    "PermissionGrant",
    "is_authorized",
    "normalize_capabilities",
    "Role",
]
