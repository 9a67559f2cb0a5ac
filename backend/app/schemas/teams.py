"""Schemas for team payloads."""

from __future__ import annotations

from datetime import datetime
from uuid import UUID

from sqlmodel import Field, SQLModel

RUNTIME_ANNOTATION_TYPES = (datetime, UUID)


class TeamRead(SQLModel):
    id: UUID
    organisation_id: UUID
    name: str
    created_at: datetime


class TeamCreate(SQLModel):
    name: str = Field(min_length=1)


class TeamUpdate(SQLModel):
    name: str = Field(min_length=1)
