"""Domain entity for the caller decoded from a bearer credential."""

from dataclasses import dataclass

from .role import Role


@dataclass(frozen=True)
class Identity:
    """Authenticated caller: a stable user identifier plus a global role."""

    user_id: str
    role: Role


__all__ = ["Identity"]
