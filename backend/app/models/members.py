"""Organisation membership model with role, team and rights columns."""

from __future__ import annotations

from datetime import datetime
from uuid import UUID, uuid4

from sqlalchemy import JSON, Column, UniqueConstraint
from sqlmodel import Field

from app.core.time import utcnow
from app.models.base import QueryModel

RUNTIME_ANNOTATION_TYPES = (datetime,)

MEMBER_ROLES = frozenset({"owner", "admin", "employee"})
ASSIGNABLE_ROLES = frozenset({"admin", "employee"})


class Member(QueryModel, table=True):
    """Person belonging to an organisation (owner, admin or employee)."""

    __tablename__ = "members"  # pyright: ignore[reportAssignmentType]
    __table_args__ = (
        UniqueConstraint("organisation_id", "email", name="uq_members_org_email"),
    )

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    organisation_id: UUID = Field(foreign_key="organisations.id", index=True)
    first_name: str
    last_name: str
    email: str
    role: str = Field(default="employee", index=True)
    team_id: UUID | None = Field(default=None, foreign_key="teams.id", index=True)
    payroll_number: str | None = None
    invited_at: datetime | None = None
    admin_profile_id: UUID | None = Field(default=None, foreign_key="rights_profiles.id")
    employee_profile_id: UUID | None = Field(default=None, foreign_key="rights_profiles.id")
    permissions: dict[str, object] = Field(default_factory=dict, sa_column=Column(JSON))
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()
