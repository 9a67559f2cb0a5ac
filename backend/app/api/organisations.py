"""Endpoints for the caller's organisation settings."""

from __future__ import annotations

from typing import TYPE_CHECKING

from fastapi import APIRouter, Depends

from app.api.deps import require_org_editor, require_org_member
from app.db.session import get_session
from app.schemas.organisations import OrganisationRead, OrganisationUpdate
from app.services.organisations import OrganisationContext, update_organisation

if TYPE_CHECKING:
    from sqlmodel.ext.asyncio.session import AsyncSession

router = APIRouter(prefix="/organisations/me", tags=["organisations"])
SESSION_DEP = Depends(get_session)
ORG_MEMBER_DEP = Depends(require_org_member)
ORG_EDITOR_DEP = Depends(require_org_editor)


@router.get("", response_model=OrganisationRead)
async def get_my_organisation(
    ctx: OrganisationContext = ORG_MEMBER_DEP,
) -> OrganisationRead:
    """Return the caller's organisation."""
    return OrganisationRead.model_validate(ctx.organisation, from_attributes=True)


@router.patch("", response_model=OrganisationRead)
async def update_my_organisation(
    payload: OrganisationUpdate,
    session: AsyncSession = SESSION_DEP,
    ctx: OrganisationContext = ORG_EDITOR_DEP,
) -> OrganisationRead:
    """Update organisation settings and record what changed."""
    organisation = await update_organisation(session, ctx=ctx, payload=payload)
    return OrganisationRead.model_validate(organisation, from_attributes=True)
