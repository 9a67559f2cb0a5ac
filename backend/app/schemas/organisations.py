"""Schemas for organisation settings payloads."""

from __future__ import annotations

from datetime import datetime
from uuid import UUID

from sqlmodel import Field, SQLModel

RUNTIME_ANNOTATION_TYPES = (datetime, UUID)


class OrganisationRead(SQLModel):
    """Organisation payload returned by read endpoints."""

    id: UUID
    name: str
    member_label: str
    require_mfa: bool
    max_employees: int
    created_at: datetime
    updated_at: datetime


class OrganisationUpdate(SQLModel):
    """Partial update of organisation settings; unset fields are left alone."""

    name: str | None = Field(default=None, min_length=1)
    member_label: str | None = None
    require_mfa: bool | None = None
    max_employees: int | None = Field(default=None, ge=1)
