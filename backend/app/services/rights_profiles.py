"""Admin/employee rights profile management and assignment to members."""

from __future__ import annotations

from typing import TYPE_CHECKING

from fastapi import HTTPException, status
from sqlmodel import col

from app.core.time import utcnow
from app.models.members import Member
from app.models.rights_profiles import PROFILE_TYPES, RightsProfile
from app.services.audit import diff_changes, record_audit
from app.services.audit_labels import AuditAction, TargetType
from app.services.members import get_member_or_404
from app.services.rights import rights_for_profile_type, validate_rights

if TYPE_CHECKING:
    from uuid import UUID

    from sqlmodel.ext.asyncio.session import AsyncSession

    from app.schemas.rights_profiles import RightsProfileWrite
    from app.services.organisations import OrganisationContext


def require_profile_type(profile_type: str) -> str:
    if profile_type not in PROFILE_TYPES:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Unknown profile type: {profile_type}",
        )
    return profile_type


def profile_fk(profile_type: str) -> str:
    """Member column referencing a profile of this type."""
    return f"{profile_type}_profile_id"


def profile_target_type(profile_type: str) -> str:
    return f"{profile_type}_profile"


async def list_profiles(
    session: AsyncSession,
    *,
    organisation_id: UUID,
    profile_type: str,
) -> list[RightsProfile]:
    return (
        await RightsProfile.objects.filter_by(
            organisation_id=organisation_id,
            profile_type=profile_type,
        )
        .order_by(col(RightsProfile.name).asc())
        .all(session)
    )


async def _get_profile(
    session: AsyncSession,
    *,
    profile_id: UUID,
    organisation_id: UUID,
    profile_type: str,
) -> RightsProfile | None:
    return await RightsProfile.objects.filter_by(
        id=profile_id,
        organisation_id=organisation_id,
        profile_type=profile_type,
    ).first(session)


async def _get_profile_or_404(
    session: AsyncSession,
    *,
    profile_id: UUID,
    organisation_id: UUID,
    profile_type: str,
) -> RightsProfile:
    profile = await _get_profile(
        session,
        profile_id=profile_id,
        organisation_id=organisation_id,
        profile_type=profile_type,
    )
    if profile is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Profile not found")
    return profile


async def _ensure_name_available(
    session: AsyncSession,
    *,
    name: str,
    organisation_id: UUID,
    profile_type: str,
    exclude_id: UUID | None = None,
) -> None:
    existing = await RightsProfile.objects.filter_by(
        organisation_id=organisation_id,
        profile_type=profile_type,
        name=name,
    ).first(session)
    if existing is not None and existing.id != exclude_id:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="A profile with this name already exists",
        )


async def create_profile(
    session: AsyncSession,
    *,
    ctx: OrganisationContext,
    profile_type: str,
    payload: RightsProfileWrite,
) -> RightsProfile:
    organisation_id = ctx.organisation.id
    name = payload.name.strip()
    rights = validate_rights(
        payload.rights,
        rights_for_profile_type(profile_type),
        fill_defaults=True,
    )
    await _ensure_name_available(
        session,
        name=name,
        organisation_id=organisation_id,
        profile_type=profile_type,
    )
    profile = RightsProfile(
        organisation_id=organisation_id,
        profile_type=profile_type,
        name=name,
        rights=rights,
    )
    session.add(profile)
    await session.commit()
    await session.refresh(profile)

    await record_audit(
        session,
        organisation_id=organisation_id,
        actor_id=ctx.member.id,
        actor_name=ctx.actor_name,
        action=f"{profile_type}_profile.created",
        target_type=profile_target_type(profile_type),
        target_id=profile.id,
        target_label=profile.name,
        metadata={"rights": rights},
    )
    return profile


async def update_profile(
    session: AsyncSession,
    *,
    ctx: OrganisationContext,
    profile_type: str,
    profile_id: UUID,
    payload: RightsProfileWrite,
) -> RightsProfile:
    """Replace a profile's name and rights and push the rights to its members."""
    organisation_id = ctx.organisation.id
    profile = await _get_profile_or_404(
        session,
        profile_id=profile_id,
        organisation_id=organisation_id,
        profile_type=profile_type,
    )
    name = payload.name.strip()
    rights = validate_rights(
        payload.rights,
        rights_for_profile_type(profile_type),
        fill_defaults=True,
    )
    await _ensure_name_available(
        session,
        name=name,
        organisation_id=organisation_id,
        profile_type=profile_type,
        exclude_id=profile.id,
    )
    before = {"name": profile.name, "rights": dict(profile.rights or {})}

    profile.name = name
    profile.rights = rights
    profile.updated_at = utcnow()
    session.add(profile)
    members = await Member.objects.filter_by(
        organisation_id=organisation_id,
        **{profile_fk(profile_type): profile.id},
    ).all(session)
    for member in members:
        member.permissions = dict(rights)
        session.add(member)
    await session.commit()
    await session.refresh(profile)

    changes = diff_changes(before, {"name": name, "rights": rights})
    if changes:
        await record_audit(
            session,
            organisation_id=organisation_id,
            actor_id=ctx.member.id,
            actor_name=ctx.actor_name,
            action=f"{profile_type}_profile.updated",
            target_type=profile_target_type(profile_type),
            target_id=profile.id,
            target_label=name,
            changes=changes,
        )
    return profile


async def delete_profile(
    session: AsyncSession,
    *,
    ctx: OrganisationContext,
    profile_type: str,
    profile_id: UUID,
) -> None:
    """Delete a profile; members keep their copied rights but lose the link."""
    organisation_id = ctx.organisation.id
    profile = await _get_profile_or_404(
        session,
        profile_id=profile_id,
        organisation_id=organisation_id,
        profile_type=profile_type,
    )
    fk = profile_fk(profile_type)
    members = await Member.objects.filter_by(
        organisation_id=organisation_id,
        **{fk: profile.id},
    ).all(session)
    for member in members:
        setattr(member, fk, None)
        session.add(member)
    label = profile.name
    await session.delete(profile)
    await session.commit()

    await record_audit(
        session,
        organisation_id=organisation_id,
        actor_id=ctx.member.id,
        actor_name=ctx.actor_name,
        action=f"{profile_type}_profile.deleted",
        target_type=profile_target_type(profile_type),
        target_id=profile_id,
        target_label=label,
    )


async def assign_profile(
    session: AsyncSession,
    *,
    ctx: OrganisationContext,
    member_id: UUID,
    profile_type: str,
    profile_id: UUID | None,
) -> Member:
    """Point a member at a profile (or none), copying the profile's rights."""
    organisation_id = ctx.organisation.id
    member = await get_member_or_404(
        session,
        member_id=member_id,
        organisation_id=organisation_id,
    )
    fk = profile_fk(profile_type)
    old_profile_id: UUID | None = getattr(member, fk)
    old_name: str | None = None
    if old_profile_id is not None:
        old_profile = await _get_profile(
            session,
            profile_id=old_profile_id,
            organisation_id=organisation_id,
            profile_type=profile_type,
        )
        old_name = old_profile.name if old_profile is not None else None

    new_name: str | None = None
    if profile_id is not None:
        profile = await _get_profile_or_404(
            session,
            profile_id=profile_id,
            organisation_id=organisation_id,
            profile_type=profile_type,
        )
        member.permissions = dict(profile.rights or {})
        new_name = profile.name

    setattr(member, fk, profile_id)
    member.updated_at = utcnow()
    session.add(member)
    await session.commit()
    await session.refresh(member)

    changes = diff_changes(
        {profile_target_type(profile_type): old_name},
        {profile_target_type(profile_type): new_name},
    )
    if changes:
        await record_audit(
            session,
            organisation_id=organisation_id,
            actor_id=ctx.member.id,
            actor_name=ctx.actor_name,
            action=AuditAction.MEMBER_UPDATED,
            target_type=TargetType.MEMBER,
            target_id=member.id,
            target_label=member.full_name,
            changes=changes,
        )
    return member
