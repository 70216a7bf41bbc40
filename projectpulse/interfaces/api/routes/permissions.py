"""Endpoints managing the capabilities of project members."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from projectpulse.application.ports import EventProducer
from projectpulse.application.use_cases.authorization import AuthorizationGate
from projectpulse.application.use_cases.permissions import (
    assign_project_permissions,
    get_member_permissions,
    list_project_permissions,
    list_user_permissions,
)
from projectpulse.domain.entities import CAPABILITY_VIEW, Identity, PermissionGrant
from projectpulse.domain.exceptions import AuthorizationError
from projectpulse.infrastructure.database import get_db
from projectpulse.interfaces.api.dependencies import (
    get_authorization_gate,
    get_current_identity,
    get_event_producer,
)
from projectpulse.interfaces.api.schemas import (
    AssignPermissionsRequest,
    PermissionGrantRead,
)

router = APIRouter(prefix="/permissions", tags=["permissions"])


def _grant_to_schema(grant: PermissionGrant) -> PermissionGrantRead:
    return PermissionGrantRead(
        project_id=grant.project_id,
        user_id=grant.user_id,
        permissions=sorted(grant.capabilities),
    )


def _forbidden(exc: AuthorizationError) -> HTTPException:
    return HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=str(exc))


@router.post("/assign", response_model=PermissionGrantRead)
def assign_permissions(
    payload: AssignPermissionsRequest,
    db: Session = Depends(get_db),
    identity: Identity = Depends(get_current_identity),
    gate: AuthorizationGate = Depends(get_authorization_gate),
    producer: EventProducer = Depends(get_event_producer),
) -> PermissionGrantRead:
    """Replace the member's capabilities on the project and notify the member."""

    try:
        grant, _ = assign_project_permissions(
            db,
            gate=gate,
            identity=identity,
            project_id=payload.project_id,
            user_id=payload.user_id,
            capabilities=payload.permissions,
            producer=producer,
        )
    except AuthorizationError as exc:
        raise _forbidden(exc) from exc
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    return _grant_to_schema(grant)


@router.get("/by-project-and-user", response_model=PermissionGrantRead)
def read_member_permissions(
    project_id: str = Query(..., alias="projectId", min_length=1),
    user_id: str = Query(..., alias="userId", min_length=1),
    db: Session = Depends(get_db),
    identity: Identity = Depends(get_current_identity),
    gate: AuthorizationGate = Depends(get_authorization_gate),
) -> PermissionGrantRead:
    """Return the member's grant; members may always read their own."""

    if identity.user_id != user_id:
        try:
            gate.require(identity, project_id, CAPABILITY_VIEW)
        except AuthorizationError as exc:
            raise _forbidden(exc) from exc
    grant = get_member_permissions(db, project_id=project_id, user_id=user_id)
    return _grant_to_schema(grant)


@router.get("/by-project/{project_id}", response_model=list[PermissionGrantRead])
def read_project_permissions(
    project_id: str,
    db: Session = Depends(get_db),
    identity: Identity = Depends(get_current_identity),
    gate: AuthorizationGate = Depends(get_authorization_gate),
) -> list[PermissionGrantRead]:
    try:
        gate.require(identity, project_id, CAPABILITY_VIEW)
    except AuthorizationError as exc:
        raise _forbidden(exc) from exc
    return [_grant_to_schema(grant) for grant in list_project_permissions(db, project_id)]


@router.get("/by-user/{user_id}", response_model=list[PermissionGrantRead])
def read_user_permissions(
    user_id: str,
    db: Session = Depends(get_db),
    identity: Identity = Depends(get_current_identity),
) -> list[PermissionGrantRead]:
    if identity.user_id != user_id and not identity.role.is_elevated:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Not allowed")
    return [_grant_to_schema(grant) for grant in list_user_permissions(db, user_id)]
