"""Use case for turning a bearer credential into an :class:`Identity`."""

from __future__ import annotations

from projectpulse.domain.entities import Identity, Role
from projectpulse.domain.exceptions import AuthenticationError
from projectpulse.infrastructure.security import (
    ROLE_CLAIM,
    SUBJECT_CLAIM,
    ExpiredCredentialError,
    decode_access_token,
)

# Claim names written by the .NET user service.
_DOTNET_NAME_CLAIM = "http://schemas.xmlsoap.org/ws/2005/05/identity/claims/name"
_DOTNET_ROLE_CLAIM = "http://schemas.microsoft.com/ws/2008/06/identity/claims/role"

_BEARER_PREFIX = "bearer "


def authenticate_credential(credential: str | None) -> Identity:
    """Decode ``credential`` (with or without the ``Bearer`` prefix)."""

    token = (credential or "").strip()
    if token.lower().startswith(_BEARER_PREFIX):
        token = token[len(_BEARER_PREFIX):].strip()
    if not token:
        raise AuthenticationError("Missing bearer credential")

    try:
        claims = decode_access_token(token)
    except ExpiredCredentialError as exc:
        raise AuthenticationError("Credential has expired") from exc
    except ValueError as exc:
        raise AuthenticationError("Invalid credential") from exc

    user_id = claims.get(SUBJECT_CLAIM) or claims.get(_DOTNET_NAME_CLAIM)
    if not isinstance(user_id, str) or not user_id.strip():
        raise AuthenticationError("Credential has no subject")

    role_claim = claims.get(ROLE_CLAIM, claims.get(_DOTNET_ROLE_CLAIM))
    try:
        role = Role.from_claim(role_claim)
    except ValueError as exc:
        raise AuthenticationError("Credential has no valid role") from exc

    return Identity(user_id=user_id.strip(), role=role)


__all__ = ["authenticate_credential"]
