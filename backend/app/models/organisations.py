"""Organisation (tenant) model."""

from __future__ import annotations

from datetime import datetime
from uuid import UUID, uuid4

from sqlmodel import Field

from app.core.time import utcnow
from app.models.base import QueryModel

RUNTIME_ANNOTATION_TYPES = (datetime,)


class Organisation(QueryModel, table=True):
    """Tenant boundary owning members, teams, profiles and audit entries."""

    __tablename__ = "organisations"  # pyright: ignore[reportAssignmentType]

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    name: str
    member_label: str = Field(default="member")
    require_mfa: bool = Field(default=False)
    max_employees: int = Field(default=5, ge=1)
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)
