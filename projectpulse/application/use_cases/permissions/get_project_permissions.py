"""Use cases for reading project permission grants."""

from __future__ import annotations

from collections.abc import Sequence

from sqlalchemy.orm import Session

from projectpulse.domain.entities import PermissionGrant
from projectpulse.infrastructure.repositories import PermissionGrantRepository


def get_member_permissions(
    session: Session, *, project_id: str, user_id: str
) -> PermissionGrant:
    """Return the grant of the pair; a missing record reads as no capabilities."""

    grant = PermissionGrantRepository(session).get(project_id=project_id, user_id=user_id)
    return grant or PermissionGrant.empty(project_id, user_id)


def list_project_permissions(session: Session, project_id: str) -> Sequence[PermissionGrant]:
    return PermissionGrantRepository(session).list_by_project(project_id)


def list_user_permissions(session: Session, user_id: str) -> Sequence[PermissionGrant]:
    return PermissionGrantRepository(session).list_by_user(user_id)


__all__ = [
    "get_member_permissions",
    "list_project_permissions",
    "list_user_permissions",
]
