"""Domain entity representing a user role."""

from enum import Enum


class Role(str, Enum):
    """Global role carried in the ``role`` claim of a bearer credential."""

    ADMIN = "Admin"
    PROJECT_MANAGER = "ProjectManager"
    TEAM_MEMBER = "TeamMember"

    @property
    def is_elevated(self) -> bool:
        """Return ``True`` when the role bypasses per-project grants."""

        return self in _ELEVATED_ROLES

    @classmethod
    def from_claim(cls, value: object) -> "Role":
        """Resolve a role claim case-insensitively, raising ``ValueError`` otherwise."""

        if isinstance(value, str):
            normalized = value.strip().replace("_", "").replace(" ", "").lower()
            for role in cls:
                if role.value.lower() == normalized:
                    return role
        raise ValueError(f"Unknown role claim {value!r}")


_ELEVATED_ROLES = frozenset({Role.ADMIN, Role.PROJECT_MANAGER})


__all__ = ["Role"]
