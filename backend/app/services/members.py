"""Member lifecycle operations that write audit trail entries."""

from __future__ import annotations

from typing import TYPE_CHECKING

from fastapi import HTTPException, status

from app.core.time import utcnow
from app.models.members import Member
from app.models.teams import Team
from app.services.audit import diff_changes, record_audit
from app.services.audit_labels import RIGHTS_FIELD, AuditAction, TargetType
from app.services.rights import ADMIN_RIGHTS, EMPLOYEE_RIGHTS, build_default_rights, validate_rights

if TYPE_CHECKING:
    from uuid import UUID

    from sqlmodel.ext.asyncio.session import AsyncSession

    from app.schemas.members import MemberCreate, MemberUpdate
    from app.services.organisations import OrganisationContext

MEMBER_RIGHTS = (*ADMIN_RIGHTS, *EMPLOYEE_RIGHTS)

# Request field -> key used in the recorded change set.
_AUDIT_KEYS = {
    "first_name": "first_name",
    "last_name": "last_name",
    "email": "email",
    "role": "role",
    "team_id": "team",
    "payroll_number": "payroll_number",
    "permissions": RIGHTS_FIELD,
}


async def get_member_or_404(
    session: AsyncSession,
    *,
    member_id: UUID,
    organisation_id: UUID,
) -> Member:
    member = await Member.objects.filter_by(
        id=member_id,
        organisation_id=organisation_id,
    ).first(session)
    if member is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Member not found")
    return member


async def _team_name(
    session: AsyncSession,
    *,
    team_id: UUID | None,
    organisation_id: UUID,
) -> str | None:
    if team_id is None:
        return None
    team = await Team.objects.filter_by(id=team_id, organisation_id=organisation_id).first(
        session,
    )
    if team is None:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail="Team not found in this organisation",
        )
    return team.name


async def _ensure_email_available(
    session: AsyncSession,
    *,
    email: str,
    organisation_id: UUID,
    exclude_id: UUID | None = None,
) -> None:
    existing = await Member.objects.filter_by(
        organisation_id=organisation_id,
        email=email,
    ).first(session)
    if existing is not None and existing.id != exclude_id:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="A member with this email already exists in your organisation.",
        )


async def create_member(
    session: AsyncSession,
    *,
    ctx: OrganisationContext,
    payload: MemberCreate,
) -> Member:
    """Add an employee, enforcing the subscribed member limit."""
    organisation = ctx.organisation
    member_count = await Member.objects.filter_by(organisation_id=organisation.id).count(session)
    if member_count >= organisation.max_employees:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=(
                f"Your organisation has reached its limit of {organisation.max_employees} "
                "members. Ask the owner to increase the limit in Billing."
            ),
        )
    email = payload.email.strip().lower()
    await _ensure_email_available(session, email=email, organisation_id=organisation.id)
    await _team_name(session, team_id=payload.team_id, organisation_id=organisation.id)

    member = Member(
        organisation_id=organisation.id,
        email=email,
        first_name=payload.first_name.strip(),
        last_name=payload.last_name.strip(),
        role="employee",
        team_id=payload.team_id,
        payroll_number=payload.payroll_number,
        permissions=build_default_rights(EMPLOYEE_RIGHTS),
    )
    session.add(member)
    await session.commit()
    await session.refresh(member)

    await record_audit(
        session,
        organisation_id=organisation.id,
        actor_id=ctx.member.id,
        actor_name=ctx.actor_name,
        action=AuditAction.MEMBER_CREATED,
        target_type=TargetType.MEMBER,
        target_id=member.id,
        target_label=member.full_name,
        metadata={
            "email": member.email,
            "member_count": member_count + 1,
            "max_employees": organisation.max_employees,
        },
    )
    return member


async def update_member(
    session: AsyncSession,
    *,
    ctx: OrganisationContext,
    member_id: UUID,
    payload: MemberUpdate,
) -> Member:
    """Apply a partial member update and record the fields that changed."""
    organisation_id = ctx.organisation.id
    member = await get_member_or_404(
        session,
        member_id=member_id,
        organisation_id=organisation_id,
    )
    updates = payload.model_dump(exclude_unset=True)
    if "role" in updates:
        if updates["role"] is None:
            del updates["role"]
        elif member.role == "owner" and updates["role"] != "owner":
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="Cannot change the owner's role",
            )
    for key in ("first_name", "last_name", "email"):
        if key in updates:
            if updates[key] is None:
                del updates[key]
            else:
                updates[key] = str(updates[key]).strip()
    if "email" in updates:
        updates["email"] = updates["email"].lower()
        await _ensure_email_available(
            session,
            email=updates["email"],
            organisation_id=organisation_id,
            exclude_id=member.id,
        )
    if "permissions" in updates:
        if updates["permissions"] is None:
            del updates["permissions"]
        else:
            updates["permissions"] = validate_rights(updates["permissions"], MEMBER_RIGHTS)

    before: dict[str, object] = {}
    after: dict[str, object] = {}
    for key, value in updates.items():
        audit_key = _AUDIT_KEYS[key]
        if key == "team_id":
            before[audit_key] = await _team_name(
                session,
                team_id=member.team_id,
                organisation_id=organisation_id,
            )
            after[audit_key] = await _team_name(
                session,
                team_id=value,
                organisation_id=organisation_id,
            )
        else:
            before[audit_key] = getattr(member, key)
            after[audit_key] = value

    for key, value in updates.items():
        setattr(member, key, value)
    member.updated_at = utcnow()
    session.add(member)
    await session.commit()
    await session.refresh(member)

    changes = diff_changes(before, after)
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


async def delete_member(
    session: AsyncSession,
    *,
    ctx: OrganisationContext,
    member_id: UUID,
) -> None:
    """Remove a member; the owner cannot be deleted."""
    organisation = ctx.organisation
    member = await get_member_or_404(
        session,
        member_id=member_id,
        organisation_id=organisation.id,
    )
    if member.role == "owner":
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Cannot delete the organisation owner",
        )
    member_count = await Member.objects.filter_by(organisation_id=organisation.id).count(session)
    snapshot = {
        "email": member.email,
        "role": member.role,
        "payroll_number": member.payroll_number,
    }
    label = member.full_name
    await session.delete(member)
    await session.commit()

    await record_audit(
        session,
        organisation_id=organisation.id,
        actor_id=ctx.member.id,
        actor_name=ctx.actor_name,
        action=AuditAction.MEMBER_DELETED,
        target_type=TargetType.MEMBER,
        target_id=member_id,
        target_label=label,
        metadata={
            **snapshot,
            "member_count": max(member_count - 1, 0),
            "max_employees": organisation.max_employees,
        },
    )


async def mark_member_invited(
    session: AsyncSession,
    *,
    ctx: OrganisationContext,
    member_id: UUID,
) -> Member:
    """Stamp `invited_at` after an invite was delivered by the caller."""
    organisation_id = ctx.organisation.id
    member = await get_member_or_404(
        session,
        member_id=member_id,
        organisation_id=organisation_id,
    )
    previous = member.invited_at
    member.invited_at = utcnow()
    member.updated_at = member.invited_at
    session.add(member)
    await session.commit()
    await session.refresh(member)

    await record_audit(
        session,
        organisation_id=organisation_id,
        actor_id=ctx.member.id,
        actor_name=ctx.actor_name,
        action=AuditAction.MEMBER_INVITED,
        target_type=TargetType.MEMBER,
        target_id=member.id,
        target_label=member.full_name,
        changes=diff_changes({"invited_at": previous}, {"invited_at": member.invited_at}),
        metadata={"email": member.email},
    )
    return member
