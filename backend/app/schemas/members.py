"""Schemas for member CRUD payloads."""

from __future__ import annotations

from datetime import datetime
from typing import Literal
from uuid import UUID

from sqlmodel import Field, SQLModel

RUNTIME_ANNOTATION_TYPES = (datetime, UUID)


class MemberRead(SQLModel):
    """Member payload returned by read endpoints."""

    id: UUID
    organisation_id: UUID
    first_name: str
    last_name: str
    email: str
    role: str
    team_id: UUID | None = None
    payroll_number: str | None = None
    invited_at: datetime | None = None
    admin_profile_id: UUID | None = None
    employee_profile_id: UUID | None = None
    permissions: dict[str, object] = Field(default_factory=dict)
    created_at: datetime
    updated_at: datetime


class MemberCreate(SQLModel):
    """Payload for adding an employee to the organisation."""

    email: str = Field(min_length=3)
    first_name: str = Field(min_length=1)
    last_name: str = Field(min_length=1)
    team_id: UUID | None = None
    payroll_number: str | None = None


class MemberUpdate(SQLModel):
    """Partial member update; only fields present in the request are applied."""

    first_name: str | None = Field(default=None, min_length=1)
    last_name: str | None = Field(default=None, min_length=1)
    email: str | None = Field(default=None, min_length=3)
    role: Literal["admin", "employee"] | None = None
    team_id: UUID | None = None
    payroll_number: str | None = None
    permissions: dict[str, object] | None = None
