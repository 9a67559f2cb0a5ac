"""Schemas for the audit trail query and feed API."""

from __future__ import annotations

from datetime import date, datetime
from uuid import UUID

from pydantic import Field
from sqlmodel import SQLModel

RUNTIME_ANNOTATION_TYPES = (date, datetime, UUID)


class AuditEntryRead(SQLModel):
    """Audit entry payload returned by read endpoints."""

    id: UUID
    organisation_id: UUID
    actor_id: UUID
    actor_name: str
    action: str
    target_type: str
    target_id: UUID | None = None
    target_label: str | None = None
    changes: dict[str, dict[str, object]] | None = None
    metadata_: dict[str, object] | None = Field(default=None, serialization_alias="metadata")
    created_at: datetime


class AuditEditorRead(SQLModel):
    """Owner/admin identity offered as an actor filter option."""

    id: UUID
    name: str


class AuditFeedRequest(SQLModel):
    """Filter criteria and display state for a rendered audit feed."""

    actions: list[str] = Field(default_factory=list)
    actor_ids: list[UUID] = Field(default_factory=list)
    subject: str = ""
    date_from: date | None = None
    date_to: date | None = None
    timezone: str = "UTC"
    verbose: bool = False
    expanded_ids: list[UUID] = Field(
        default_factory=list,
        description="Entries whose expand/collapse state is inverted from the default.",
    )


class RightChangeRead(SQLModel):
    key: str
    label: str
    line: str


class ChangeDetailRead(SQLModel):
    field: str
    label: str
    old: str
    new: str
    rights: list[RightChangeRead] | None = None
    lines: list[str]


class AuditEntryViewRead(SQLModel):
    """Display-ready audit entry."""

    id: UUID
    actor_id: UUID
    actor_name: str
    action: str
    action_label: str
    target_label: str | None = None
    member_link_id: UUID | None = None
    headcount: str | None = None
    headline: str
    timestamp: str
    has_detail: bool
    expanded: bool
    summary: str | None = None
    changes: list[ChangeDetailRead] = Field(default_factory=list)
    metadata_lines: list[str] = Field(default_factory=list)
