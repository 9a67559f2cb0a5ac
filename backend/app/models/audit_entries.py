"""Append-only audit log model for administrative changes."""

from __future__ import annotations

from datetime import datetime
from uuid import UUID, uuid4

from sqlalchemy import JSON, Column
from sqlmodel import Field

from app.core.time import utcnow
from app.models.base import QueryModel

RUNTIME_ANNOTATION_TYPES = (datetime,)


class AuditEntry(QueryModel, table=True):
    """Append-only audit log entry describing one administrative action.

    Actor and target names are denormalized so entries stay readable after
    the referenced rows are renamed or deleted.
    """

    __tablename__ = "audit_entries"  # pyright: ignore[reportAssignmentType]

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    organisation_id: UUID = Field(foreign_key="organisations.id", index=True)
    actor_id: UUID = Field(index=True)
    actor_name: str
    action: str = Field(index=True)
    target_type: str
    target_id: UUID | None = None
    target_label: str | None = None
    changes: dict[str, dict[str, object]] | None = Field(
        default=None,
        sa_column=Column(JSON),
    )
    # `metadata` is reserved on declarative classes.
    metadata_: dict[str, object] | None = Field(
        default=None,
        sa_column=Column("metadata", JSON),
    )
    created_at: datetime = Field(default_factory=utcnow, index=True)
