"""Persistence layer for project member capabilities."""

from __future__ import annotations

from collections.abc import Iterable, Sequence

from sqlalchemy.orm import Session

from projectpulse.domain.entities import PermissionGrant, normalize_capabilities
from projectpulse.infrastructure.models import (
    ProjectMemberPermissionModel,
    ProjectPermissionModel,
)


class PermissionGrantRepository:
    """Provide read and replace operations for :class:`PermissionGrant` records."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def get(self, *, project_id: str, user_id: str) -> PermissionGrant | None:
        model = self._get_model(project_id=project_id, user_id=user_id)
        return self._to_entity(model) if model else None

    def list_by_project(self, project_id: str) -> Sequence[PermissionGrant]:
        models = (
            self.session.query(ProjectMemberPermissionModel)
            .filter(ProjectMemberPermissionModel.project_id == project_id)
            .order_by(ProjectMemberPermissionModel.user_id.asc())
            .all()
        )
        return [self._to_entity(model) for model in models]

    def list_by_user(self, user_id: str) -> Sequence[PermissionGrant]:
        models = (
            self.session.query(ProjectMemberPermissionModel)
            .filter(ProjectMemberPermissionModel.user_id == user_id)
            .order_by(ProjectMemberPermissionModel.project_id.asc())
            .all()
        )
        return [self._to_entity(model) for model in models]

    def replace(
        self,
        *,
        project_id: str,
        user_id: str,
        capabilities: Iterable[str],
    ) -> PermissionGrant:
        """Replace every capability of the pair with ``capabilities``."""

        names = normalize_capabilities(capabilities)
        model = self._get_model(project_id=project_id, user_id=user_id)
        if model is None:
            model = ProjectMemberPermissionModel(project_id=project_id, user_id=user_id)
            self.session.add(model)
        else:
            model.permissions.clear()
            # Flush orphan removals before re-adding names covered by the unique constraint.
            self.session.flush()

        model.permissions.extend(ProjectPermissionModel(name=name) for name in names)
        self.session.commit()
        self.session.refresh(model)
        return self._to_entity(model)

    def _get_model(
        self, *, project_id: str, user_id: str
    ) -> ProjectMemberPermissionModel | None:
        return (
            self.session.query(ProjectMemberPermissionModel)
            .filter(
                ProjectMemberPermissionModel.project_id == project_id,
                ProjectMemberPermissionModel.user_id == user_id,
            )
            .first()
        )

    @staticmethod
    def _to_entity(model: ProjectMemberPermissionModel) -> PermissionGrant:
        return PermissionGrant(
            project_id=model.project_id,
            user_id=model.user_id,
            capabilities=frozenset(permission.name for permission in model.permissions),
        )


__all__ = ["PermissionGrantRepository"]
