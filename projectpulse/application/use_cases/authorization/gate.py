"""Capability checks that must pass before an event-producing mutation runs."""

from __future__ import annotations

import logging

from projectpulse.application.ports import GrantLookup
from projectpulse.domain.entities import Identity, is_authorized
from projectpulse.domain.exceptions import AuthorizationError

from .authenticate import authenticate_credential

logger = logging.getLogger(__name__)


class AuthorizationGate:
    """Decide whether an identity may act on a project.

    Elevated global roles authorize every capability; everyone else needs a
    grant for ``(project_id, user_id)`` that names the capability. Missing
    grants deny.
    """

    def __init__(self, grants: GrantLookup) -> None:
        self._grants = grants

    def authenticate(self, credential: str | None) -> Identity:
        return authenticate_credential(credential)

    def authorize(self, identity: Identity, project_id: str, capability: str) -> bool:
        if identity.role.is_elevated:
            return True
        grant = self._grants.get(project_id=project_id, user_id=identity.user_id)
        return is_authorized(identity.role, grant, capability)

    def require(self, identity: Identity, project_id: str, capability: str) -> None:
        """Raise :class:`AuthorizationError` unless :meth:`authorize` allows the action."""

        if self.authorize(identity, project_id, capability):
            return
        logger.info(
            "Denied capability %s on project %s to user %s (%s)",
            capability,
            project_id,
            identity.user_id,
            identity.role.value,
        )
        raise AuthorizationError(
            user_id=identity.user_id, project_id=project_id, capability=capability
        )


__all__ = ["AuthorizationGate"]
