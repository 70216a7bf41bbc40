"""Schemas for project member permission grants."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class AssignPermissionsRequest(BaseModel):
    """Replace the capabilities of a member; accepts camelCase or snake_case keys."""

    project_id: str = Field(..., min_length=1, max_length=64)
    user_id: str = Field(..., min_length=1, max_length=64)
    permissions: list[str] = Field(default_factory=list)

    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, extra="forbid"
    )


class PermissionGrantRead(BaseModel):
    project_id: str
    user_id: str
    permissions: list[str]


__all__ = ["AssignPermissionsRequest", "PermissionGrantRead"]
