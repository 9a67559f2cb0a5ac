"""Reusable FastAPI dependencies for caller identity and organisation roles.

These dependencies are the "policy wiring" layer for the API: they resolve
the acting member, load the organisation every query is scoped to, and
enforce the role checks shared by several routers.

If you're adding a new endpoint, prefer composing from these dependencies
instead of re-implementing permission checks in the router.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from fastapi import Depends, HTTPException, status

from app.core.auth import AuthContext, get_auth_context
from app.db.session import get_session
from app.models.members import Member
from app.models.organisations import Organisation
from app.services.organisations import (
    OrganisationContext,
    can_add_members,
    can_edit_organisation,
    can_manage_members,
    is_org_admin,
    is_org_owner,
)

if TYPE_CHECKING:
    from sqlmodel.ext.asyncio.session import AsyncSession

AUTH_DEP = Depends(get_auth_context)
SESSION_DEP = Depends(get_session)


async def require_org_member(
    auth: AuthContext = AUTH_DEP,
    session: AsyncSession = SESSION_DEP,
) -> OrganisationContext:
    """Resolve the acting member and their organisation."""
    member = await Member.objects.by_id(auth.member_id).first(session)
    if member is None:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN)
    organisation = await Organisation.objects.by_id(member.organisation_id).first(session)
    if organisation is None:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN)
    return OrganisationContext(organisation=organisation, member=member)


ORG_MEMBER_DEP = Depends(require_org_member)


async def require_org_admin(
    ctx: OrganisationContext = ORG_MEMBER_DEP,
) -> OrganisationContext:
    """Require owner or admin membership (audit trail visibility)."""
    if not is_org_admin(ctx.member):
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN)
    return ctx


async def require_org_owner(
    ctx: OrganisationContext = ORG_MEMBER_DEP,
) -> OrganisationContext:
    """Require the organisation owner (rights profile management)."""
    if not is_org_owner(ctx.member):
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN)
    return ctx


async def require_member_manager(
    ctx: OrganisationContext = ORG_MEMBER_DEP,
) -> OrganisationContext:
    """Require the owner or an admin with write access to member records."""
    if not can_manage_members(ctx.member):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Insufficient permissions",
        )
    return ctx


async def require_member_adder(
    ctx: OrganisationContext = ORG_MEMBER_DEP,
) -> OrganisationContext:
    """Require the owner or an admin allowed to add members and assign profiles."""
    if not can_add_members(ctx.member):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Insufficient permissions",
        )
    return ctx


async def require_org_editor(
    ctx: OrganisationContext = ORG_MEMBER_DEP,
) -> OrganisationContext:
    """Require permission to change organisation settings."""
    if not can_edit_organisation(ctx.member):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Only the owner can edit organisation settings",
        )
    return ctx
