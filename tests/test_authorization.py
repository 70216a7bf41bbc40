"""Tests for roles, grants, credential decoding and the authorization gate."""

from __future__ import annotations

from datetime import timedelta

import pytest

from projectpulse.application.use_cases.authorization import (
    AuthorizationGate,
    authenticate_credential,
)
from projectpulse.domain.entities import (
    CAPABILITY_ASSIGN_TASK,
    CAPABILITY_MANAGE_TEAM,
    Identity,
    PermissionGrant,
    Role,
    is_authorized,
)
from projectpulse.domain.exceptions import AuthenticationError, AuthorizationError
from projectpulse.infrastructure.security import create_access_token


class _Grants:
    def __init__(self, *grants: PermissionGrant) -> None:
        self._grants = {(grant.project_id, grant.user_id): grant for grant in grants}
        self.lookups: list[tuple[str, str]] = []

    def get(self, *, project_id: str, user_id: str) -> PermissionGrant | None:
        self.lookups.append((project_id, user_id))
        return self._grants.get((project_id, user_id))


@pytest.mark.parametrize(
    ("claim", "expected"),
    [
        ("Admin", Role.ADMIN),
        ("projectmanager", Role.PROJECT_MANAGER),
        ("Project_Manager", Role.PROJECT_MANAGER),
        ("TeamMember", Role.TEAM_MEMBER),
    ],
)
def test_role_from_claim(claim: str, expected: Role) -> None:
    assert Role.from_claim(claim) is expected


def test_role_from_unknown_claim_fails() -> None:
    with pytest.raises(ValueError):
        Role.from_claim("Owner")
    with pytest.raises(ValueError):
        Role.from_claim(None)


def test_only_admin_and_manager_are_elevated() -> None:
    assert Role.ADMIN.is_elevated
    assert Role.PROJECT_MANAGER.is_elevated
    assert not Role.TEAM_MEMBER.is_elevated


def test_is_authorized_combines_role_and_grant() -> None:
    grant = PermissionGrant("p1", "u1", frozenset({CAPABILITY_ASSIGN_TASK}))

    assert is_authorized(Role.ADMIN, None, CAPABILITY_MANAGE_TEAM)
    assert is_authorized(Role.TEAM_MEMBER, grant, CAPABILITY_ASSIGN_TASK)
    assert not is_authorized(Role.TEAM_MEMBER, grant, CAPABILITY_MANAGE_TEAM)
    assert not is_authorized(Role.TEAM_MEMBER, None, CAPABILITY_ASSIGN_TASK)


def test_gate_denies_team_member_without_grant() -> None:
    gate = AuthorizationGate(_Grants())
    identity = Identity(user_id="u1", role=Role.TEAM_MEMBER)

    assert gate.authorize(identity, "p1", CAPABILITY_ASSIGN_TASK) is False
    with pytest.raises(AuthorizationError) as excinfo:
        gate.require(identity, "p1", CAPABILITY_ASSIGN_TASK)
    assert excinfo.value.capability == CAPABILITY_ASSIGN_TASK


def test_gate_elevated_role_skips_grant_lookup() -> None:
    grants = _Grants()
    gate = AuthorizationGate(grants)

    assert gate.authorize(Identity("pm", Role.PROJECT_MANAGER), "p1", CAPABILITY_MANAGE_TEAM)
    assert grants.lookups == []


def test_gate_uses_project_scoped_grant() -> None:
    gate = AuthorizationGate(
        _Grants(PermissionGrant("p1", "u1", frozenset({CAPABILITY_ASSIGN_TASK})))
    )
    identity = Identity("u1", Role.TEAM_MEMBER)

    assert gate.authorize(identity, "p1", CAPABILITY_ASSIGN_TASK)
    assert not gate.authorize(identity, "p2", CAPABILITY_ASSIGN_TASK)


def test_authenticate_credential_reads_subject_and_role() -> None:
    token = create_access_token(user_id="u7", role="ProjectManager")

    identity = authenticate_credential(f"Bearer {token}")

    assert identity == Identity(user_id="u7", role=Role.PROJECT_MANAGER)


@pytest.mark.parametrize("credential", [None, "", "Bearer ", "Bearer not-a-jwt"])
def test_authenticate_rejects_missing_or_invalid(credential) -> None:
    with pytest.raises(AuthenticationError):
        authenticate_credential(credential)


def test_authenticate_rejects_expired_credential() -> None:
    token = create_access_token(
        user_id="u7", role="Admin", expires_delta=timedelta(minutes=-5)
    )

    with pytest.raises(AuthenticationError, match="expired"):
        authenticate_credential(token)


def test_authenticate_rejects_unknown_role() -> None:
    token = create_access_token(user_id="u7", role="Owner")

    with pytest.raises(AuthenticationError):
        authenticate_credential(token)
