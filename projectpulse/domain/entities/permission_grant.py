"""Domain entities for project-scoped capabilities."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable

from .role import Role

CAPABILITY_VIEW = "view"
CAPABILITY_EDIT = "edit"
CAPABILITY_ASSIGN_TASK = "assign_task"
CAPABILITY_MANAGE_TASKS = "manage_tasks"
CAPABILITY_MANAGE_SUBTASKS = "manage_subtasks"
CAPABILITY_MANAGE_COMMENTS = "manage_comments"
CAPABILITY_MANAGE_DELIVERABLES = "manage_deliverables"
CAPABILITY_MANAGE_PHASES = "manage_phases"
CAPABILITY_MANAGE_TEAM = "manage_team"


@dataclass(frozen=True)
class PermissionGrant:
    """Capabilities granted to ``user_id`` on ``project_id``."""

    project_id: str
    user_id: str
    capabilities: frozenset[str] = field(default_factory=frozenset)

    def allows(self, capability: str) -> bool:
        return capability in self.capabilities

    @classmethod
    def empty(cls, project_id: str, user_id: str) -> "PermissionGrant":
        """Return the grant equivalent to "no record" for the pair."""

        return cls(project_id=project_id, user_id=user_id)


def normalize_capabilities(capabilities: Iterable[str]) -> list[str]:
    """Return stripped, de-duplicated capability names preserving order."""

    unique: list[str] = []
    for capability in capabilities:
        if not isinstance(capability, str):
            raise ValueError("Capability names must be strings")
        name = capability.strip()
        if not name:
            raise ValueError("Capability names cannot be empty")
        if name not in unique:
            unique.append(name)
    return unique


def is_authorized(role: Role, grant: PermissionGrant | None, capability: str) -> bool:
    """Compose the global role axis and the project grant axis with logical OR.

    A missing grant never authorizes anything.
    """

    if role.is_elevated:
        return True
    if grant is None:
        return False
    return grant.allows(capability)


__all__ = [
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
]
