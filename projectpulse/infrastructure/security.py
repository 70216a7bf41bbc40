"""JWT helpers for bearer credentials.

Credentials are issued by the user service; this package only verifies them.
``create_access_token`` mirrors the issuer's claim layout for local tooling.
"""

from datetime import datetime, timedelta, timezone

from jose import ExpiredSignatureError, JWTError, jwt

from projectpulse.config import get_settings

ROLE_CLAIM = "role"
SUBJECT_CLAIM = "sub"


class ExpiredCredentialError(ValueError):
    """The credential signature is valid but its ``exp`` claim has passed."""


def create_access_token(
    *, user_id: str, role: str, expires_delta: timedelta | None = None
) -> str:
    settings = get_settings()
    expire = datetime.now(timezone.utc) + (
        expires_delta or timedelta(minutes=settings.access_token_expire_minutes)
    )
    claims = {SUBJECT_CLAIM: user_id, ROLE_CLAIM: role, "exp": expire}
    return jwt.encode(claims, settings.secret_key, algorithm=settings.jwt_algorithm)


def decode_access_token(token: str) -> dict:
    """Verify ``token`` and return its claims, raising ``ValueError`` otherwise."""

    settings = get_settings()
    try:
        return jwt.decode(token, settings.secret_key, algorithms=[settings.jwt_algorithm])
    except ExpiredSignatureError as exc:
        raise ExpiredCredentialError("Credential has expired") from exc
    except JWTError as exc:
        raise ValueError("Could not validate credentials") from exc


__all__ = [
    "ROLE_CLAIM",
    "SUBJECT_CLAIM",
    "ExpiredCredentialError",
    "create_access_token",
    "decode_access_token",
]
