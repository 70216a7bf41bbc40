"""Use case for replacing the capabilities a member holds on a project."""

from __future__ import annotations

from collections.abc import Iterable

from sqlalchemy.orm import Session

from projectpulse.application.ports import EventProducer, PublishResponse
from projectpulse.application.use_cases.authorization import AuthorizationGate
from projectpulse.application.use_cases.mutations import run_gated_mutation
from projectpulse.application.use_cases.notifications import (
    permissions_changed_envelope,
)
from projectpulse.domain.entities import (
    CAPABILITY_MANAGE_TEAM,
    EventEnvelope,
    Identity,
    PermissionGrant,
    normalize_capabilities,
)
from projectpulse.infrastructure.repositories import PermissionGrantRepository


def assign_project_permissions(
    session: Session,
    *,
    gate: AuthorizationGate,
    identity: Identity,
    project_id: str,
    user_id: str,
    capabilities: Iterable[str],
    producer: EventProducer,
) -> tuple[PermissionGrant, list[PublishResponse]]:
    """Replace the grant of ``user_id`` on ``project_id`` and notify that user.

    The caller needs ``manage_team`` on the project (or an elevated role).
    """

    project_id = project_id.strip()
    user_id = user_id.strip()
    if not project_id or not user_id:
        raise ValueError("Project and user are required")
    names = normalize_capabilities(capabilities)

    def write() -> PermissionGrant:
        return PermissionGrantRepository(session).replace(
            project_id=project_id, user_id=user_id, capabilities=names
        )

    def build_events(grant: PermissionGrant) -> list[EventEnvelope]:
        return [
            permissions_changed_envelope(
                project_id=grant.project_id,
                user_id=grant.user_id,
                capabilities=grant.capabilities,
            )
        ]

    return run_gated_mutation(
        gate,
        identity,
        project_id=project_id,
        capability=CAPABILITY_MANAGE_TEAM,
        write=write,
        build_events=build_events,
        producer=producer,
    )


__all__ = ["assign_project_permissions"]
