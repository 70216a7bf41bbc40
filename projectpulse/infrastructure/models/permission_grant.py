"""SQLAlchemy models for project member capabilities."""

from uuid import uuid4

from sqlalchemy import Column, ForeignKey, String, UniqueConstraint
from sqlalchemy.orm import relationship

from projectpulse.infrastructure.database import Base


def _new_id() -> str:
    return str(uuid4())


class ProjectMemberPermissionModel(Base):
    """One row per ``(project_id, user_id)`` pair holding granted capabilities."""

    __tablename__ = "project_member_permission"
    __table_args__ = (
        UniqueConstraint("project_id", "user_id", name="uq_project_member_permission"),
    )

    id = Column(String(36), primary_key=True, default=_new_id)
    project_id = Column(String(64), nullable=False, index=True)
    user_id = Column(String(64), nullable=False, index=True)

    permissions = relationship(
        "ProjectPermissionModel",
        back_populates="member_permission",
        cascade="all, delete-orphan",
        lazy="selectin",
    )


class ProjectPermissionModel(Base):
    """A single named capability belonging to a member permission record."""

    __tablename__ = "project_permission"
    __table_args__ = (
        UniqueConstraint(
            "member_permission_id", "name", name="uq_project_permission_name"
        ),
    )

    id = Column(String(36), primary_key=True, default=_new_id)
    member_permission_id = Column(
        String(36),
        ForeignKey("project_member_permission.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    name = Column(String(50), nullable=False)

    member_permission = relationship(
        "ProjectMemberPermissionModel", back_populates="permissions"
    )


__all__ = ["ProjectMemberPermissionModel", "ProjectPermissionModel"]
