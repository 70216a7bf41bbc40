"""FastAPI dependency utilities."""

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from projectpulse.application.ports import EventProducer
from projectpulse.application.use_cases.authorization import (
    AuthorizationGate,
    authenticate_credential,
)
from projectpulse.domain.entities import Identity
from projectpulse.domain.exceptions import AuthenticationError
from projectpulse.infrastructure.database import get_db
from projectpulse.infrastructure.repositories import PermissionGrantRepository

bearer_scheme = HTTPBearer(auto_error=False)


def get_current_identity(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
) -> Identity:
    """Return the caller decoded from the bearer credential."""

    try:
        return authenticate_credential(credentials.credentials if credentials else None)
    except AuthenticationError as exc:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=str(exc),
            headers={"WWW-Authenticate": "Bearer"},
        ) from exc


def get_authorization_gate(db: Session = Depends(get_db)) -> AuthorizationGate:
    return AuthorizationGate(PermissionGrantRepository(db))


def get_event_producer(request: Request) -> EventProducer:
    """Return the producer created by the application lifespan."""

    producer = getattr(request.app.state, "producer", None)
    if producer is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Event producer is not available",
        )
    return producer


__all__ = [
    "bearer_scheme",
    "get_authorization_gate",
    "get_current_identity",
    "get_event_producer",
]
