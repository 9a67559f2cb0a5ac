"""Admin and employee rights profile endpoints (owner only)."""

from __future__ import annotations

from typing import TYPE_CHECKING
from uuid import UUID

from fastapi import APIRouter, Depends, status

from app.api.deps import require_org_owner
from app.db.session import get_session
from app.schemas.common import OkResponse
from app.schemas.rights_profiles import RightsProfileRead, RightsProfileWrite
from app.services.organisations import OrganisationContext
from app.services.rights_profiles import (
    create_profile,
    delete_profile,
    list_profiles,
    require_profile_type,
    update_profile,
)

if TYPE_CHECKING:
    from sqlmodel.ext.asyncio.session import AsyncSession

router = APIRouter(prefix="/organisations/me/profiles", tags=["rights-profiles"])
SESSION_DEP = Depends(get_session)
ORG_OWNER_DEP = Depends(require_org_owner)
PROFILE_TYPE_DEP = Depends(require_profile_type)


@router.get("/{profile_type}", response_model=list[RightsProfileRead])
async def list_rights_profiles(
    profile_type: str = PROFILE_TYPE_DEP,
    session: AsyncSession = SESSION_DEP,
    ctx: OrganisationContext = ORG_OWNER_DEP,
) -> list[RightsProfileRead]:
    profiles = await list_profiles(
        session,
        organisation_id=ctx.organisation.id,
        profile_type=profile_type,
    )
    return [RightsProfileRead.model_validate(p, from_attributes=True) for p in profiles]


@router.post(
    "/{profile_type}",
    response_model=RightsProfileRead,
    status_code=status.HTTP_201_CREATED,
)
async def add_rights_profile(
    payload: RightsProfileWrite,
    profile_type: str = PROFILE_TYPE_DEP,
    session: AsyncSession = SESSION_DEP,
    ctx: OrganisationContext = ORG_OWNER_DEP,
) -> RightsProfileRead:
    profile = await create_profile(session, ctx=ctx, profile_type=profile_type, payload=payload)
    return RightsProfileRead.model_validate(profile, from_attributes=True)


@router.patch("/{profile_type}/{profile_id}", response_model=RightsProfileRead)
async def edit_rights_profile(
    profile_id: UUID,
    payload: RightsProfileWrite,
    profile_type: str = PROFILE_TYPE_DEP,
    session: AsyncSession = SESSION_DEP,
    ctx: OrganisationContext = ORG_OWNER_DEP,
) -> RightsProfileRead:
    """Replace a profile's name and rights; members using it receive the new rights."""
    profile = await update_profile(
        session,
        ctx=ctx,
        profile_type=profile_type,
        profile_id=profile_id,
        payload=payload,
    )
    return RightsProfileRead.model_validate(profile, from_attributes=True)


@router.delete("/{profile_type}/{profile_id}", response_model=OkResponse)
async def remove_rights_profile(
    profile_id: UUID,
    profile_type: str = PROFILE_TYPE_DEP,
    session: AsyncSession = SESSION_DEP,
    ctx: OrganisationContext = ORG_OWNER_DEP,
) -> OkResponse:
    await delete_profile(session, ctx=ctx, profile_type=profile_type, profile_id=profile_id)
    return OkResponse()
