"""Audit trail endpoints: raw entry listing, editor options and the rendered feed."""

from __future__ import annotations

from typing import TYPE_CHECKING
from uuid import UUID
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlmodel import col

from app.api.deps import require_org_admin
from app.core.config import settings
from app.db.session import get_session
from app.models.audit_entries import AuditEntry
from app.schemas.audit import (
    AuditEditorRead,
    AuditEntryRead,
    AuditEntryViewRead,
    AuditFeedRequest,
)
from app.services.audit import actor_display_name
from app.services.audit_filters import AuditFilter
from app.services.audit_view import AuditViewState, render_entries
from app.services.organisations import OrganisationContext, list_editors

if TYPE_CHECKING:
    from sqlmodel.ext.asyncio.session import AsyncSession

router = APIRouter(prefix="/organisations/me/audit", tags=["audit"])
SESSION_DEP = Depends(get_session)
ORG_ADMIN_DEP = Depends(require_org_admin)


def _resolve_timezone(name: str) -> ZoneInfo:
    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError) as exc:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=f"Unknown timezone: {name}",
        ) from exc


@router.get("", response_model=list[AuditEntryRead], response_model_by_alias=True)
async def list_audit_entries(
    session: AsyncSession = SESSION_DEP,
    ctx: OrganisationContext = ORG_ADMIN_DEP,
    action: str | None = None,
    actor_id: UUID | None = None,
    limit: int | None = Query(default=None, ge=1),
    offset: int = Query(default=0, ge=0),
) -> list[AuditEntryRead]:
    """Return the newest audit entries for the active organisation."""
    query = AuditEntry.objects.filter_by(organisation_id=ctx.organisation.id)
    if action is not None:
        query = query.filter(col(AuditEntry.action) == action)
    if actor_id is not None:
        query = query.filter(col(AuditEntry.actor_id) == actor_id)

    entries = await (
        query.order_by(col(AuditEntry.created_at).desc())
        .offset(offset)
        .limit(limit or settings.audit_recent_limit)
        .all(session)
    )
    return [AuditEntryRead.model_validate(e, from_attributes=True) for e in entries]


@router.get("/editors", response_model=list[AuditEditorRead])
async def list_audit_editors(
    session: AsyncSession = SESSION_DEP,
    ctx: OrganisationContext = ORG_ADMIN_DEP,
) -> list[AuditEditorRead]:
    """Owners and admins who can appear as actors, for the actor filter."""
    editors = await list_editors(session, organisation_id=ctx.organisation.id)
    return [AuditEditorRead(id=member.id, name=actor_display_name(member)) for member in editors]


@router.post("/feed", response_model=list[AuditEntryViewRead])
async def audit_feed(
    payload: AuditFeedRequest,
    session: AsyncSession = SESSION_DEP,
    ctx: OrganisationContext = ORG_ADMIN_DEP,
) -> list[AuditEntryViewRead]:
    """Filter the recent entries and render them for display."""
    entries = await (
        AuditEntry.objects.filter_by(organisation_id=ctx.organisation.id)
        .order_by(col(AuditEntry.created_at).desc())
        .limit(settings.audit_recent_limit)
        .all(session)
    )
    criteria = AuditFilter(
        actions=frozenset(payload.actions),
        actor_ids=frozenset(payload.actor_ids),
        subject=payload.subject,
        date_from=payload.date_from,
        date_to=payload.date_to,
        tz=_resolve_timezone(payload.timezone),
    )
    state = AuditViewState(
        verbose=payload.verbose,
        overrides={str(entry_id) for entry_id in payload.expanded_ids},
    )
    return [
        AuditEntryViewRead.model_validate(view, from_attributes=True)
        for view in render_entries(entries, criteria, state)
    ]
