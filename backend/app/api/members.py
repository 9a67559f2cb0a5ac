"""Member management endpoints."""

from __future__ import annotations

from typing import TYPE_CHECKING
from uuid import UUID

from fastapi import APIRouter, Depends, status
from sqlmodel import col

from app.api.deps import require_member_adder, require_member_manager, require_org_member
from app.db.session import get_session
from app.models.members import Member
from app.schemas.common import OkResponse
from app.schemas.members import MemberCreate, MemberRead, MemberUpdate
from app.schemas.rights_profiles import ProfileAssignment
from app.services.members import create_member, delete_member, mark_member_invited, update_member
from app.services.organisations import OrganisationContext
from app.services.rights_profiles import assign_profile, require_profile_type

if TYPE_CHECKING:
    from sqlmodel.ext.asyncio.session import AsyncSession

router = APIRouter(prefix="/organisations/me/members", tags=["members"])
SESSION_DEP = Depends(get_session)
ORG_MEMBER_DEP = Depends(require_org_member)
MEMBER_MANAGER_DEP = Depends(require_member_manager)
MEMBER_ADDER_DEP = Depends(require_member_adder)


@router.get("", response_model=list[MemberRead])
async def list_members(
    session: AsyncSession = SESSION_DEP,
    ctx: OrganisationContext = ORG_MEMBER_DEP,
) -> list[MemberRead]:
    members = await (
        Member.objects.filter_by(organisation_id=ctx.organisation.id)
        .order_by(col(Member.first_name).asc(), col(Member.last_name).asc())
        .all(session)
    )
    return [MemberRead.model_validate(m, from_attributes=True) for m in members]


@router.post("", response_model=MemberRead, status_code=status.HTTP_201_CREATED)
async def add_member(
    payload: MemberCreate,
    session: AsyncSession = SESSION_DEP,
    ctx: OrganisationContext = MEMBER_ADDER_DEP,
) -> MemberRead:
    """Add an employee to the organisation."""
    member = await create_member(session, ctx=ctx, payload=payload)
    return MemberRead.model_validate(member, from_attributes=True)


@router.patch("/{member_id}", response_model=MemberRead)
async def edit_member(
    member_id: UUID,
    payload: MemberUpdate,
    session: AsyncSession = SESSION_DEP,
    ctx: OrganisationContext = MEMBER_MANAGER_DEP,
) -> MemberRead:
    member = await update_member(session, ctx=ctx, member_id=member_id, payload=payload)
    return MemberRead.model_validate(member, from_attributes=True)


@router.delete("/{member_id}", response_model=OkResponse)
async def remove_member(
    member_id: UUID,
    session: AsyncSession = SESSION_DEP,
    ctx: OrganisationContext = MEMBER_MANAGER_DEP,
) -> OkResponse:
    await delete_member(session, ctx=ctx, member_id=member_id)
    return OkResponse()


@router.post("/{member_id}/invited", response_model=MemberRead)
async def record_member_invited(
    member_id: UUID,
    session: AsyncSession = SESSION_DEP,
    ctx: OrganisationContext = MEMBER_MANAGER_DEP,
) -> MemberRead:
    """Record that an invitation email was sent to the member."""
    member = await mark_member_invited(session, ctx=ctx, member_id=member_id)
    return MemberRead.model_validate(member, from_attributes=True)


@router.put("/{member_id}/profiles/{profile_type}", response_model=MemberRead)
async def set_member_profile(
    member_id: UUID,
    profile_type: str,
    payload: ProfileAssignment,
    session: AsyncSession = SESSION_DEP,
    ctx: OrganisationContext = MEMBER_ADDER_DEP,
) -> MemberRead:
    """Assign (or clear) the member's admin or employee rights profile."""
    member = await assign_profile(
        session,
        ctx=ctx,
        member_id=member_id,
        profile_type=require_profile_type(profile_type),
        profile_id=payload.profile_id,
    )
    return MemberRead.model_validate(member, from_attributes=True)
