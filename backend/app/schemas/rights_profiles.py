"""Schemas for admin/employee rights profile payloads."""

from __future__ import annotations

from datetime import datetime
from uuid import UUID

from sqlmodel import Field, SQLModel

RUNTIME_ANNOTATION_TYPES = (datetime, UUID)


class RightsProfileRead(SQLModel):
    """Rights profile payload returned by read endpoints."""

    id: UUID
    profile_type: str
    name: str
    rights: dict[str, object] = Field(default_factory=dict)


class RightsProfileWrite(SQLModel):
    """Payload for creating or replacing a rights profile."""

    name: str = Field(min_length=1)
    rights: dict[str, object] = Field(default_factory=dict)


class ProfileAssignment(SQLModel):
    """Profile to copy onto a member; `None` clears the assignment."""

    profile_id: UUID | None = None
