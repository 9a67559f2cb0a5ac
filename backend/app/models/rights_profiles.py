"""Named bundles of rights assignable to members."""

from __future__ import annotations

from datetime import datetime
from uuid import UUID, uuid4

from sqlalchemy import JSON, Column, UniqueConstraint
from sqlmodel import Field

from app.core.time import utcnow
from app.models.base import QueryModel

RUNTIME_ANNOTATION_TYPES = (datetime,)

PROFILE_TYPES = ("admin", "employee")


class RightsProfile(QueryModel, table=True):
    """Admin or employee rights profile owned by an organisation."""

    __tablename__ = "rights_profiles"  # pyright: ignore[reportAssignmentType]
    __table_args__ = (
        UniqueConstraint(
            "organisation_id",
            "profile_type",
            "name",
            name="uq_rights_profiles_org_type_name",
        ),
    )

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    organisation_id: UUID = Field(foreign_key="organisations.id", index=True)
    profile_type: str = Field(index=True)
    name: str
    rights: dict[str, object] = Field(default_factory=dict, sa_column=Column(JSON))
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)
