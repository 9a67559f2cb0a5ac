"""Organisation membership context, role checks and settings updates."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from fastapi import HTTPException, status
from sqlmodel import col

from app.core.time import utcnow
from app.models.members import Member
from app.models.organisations import Organisation
from app.services.audit import actor_display_name, diff_changes, record_audit
from app.services.audit_labels import AuditAction, TargetType

if TYPE_CHECKING:
    from uuid import UUID

    from sqlmodel.ext.asyncio.session import AsyncSession

    from app.schemas.organisations import OrganisationUpdate

ADMIN_ROLES = frozenset({"owner", "admin"})
DEFAULT_MEMBER_LABEL = "member"


@dataclass(frozen=True)
class OrganisationContext:
    """Resolved organisation and membership for the acting member."""

    organisation: Organisation
    member: Member

    @property
    def actor_name(self) -> str:
        return actor_display_name(self.member)


def is_org_admin(member: Member) -> bool:
    """Return whether a member may administer the organisation (owner or admin)."""
    return member.role in ADMIN_ROLES


def is_org_owner(member: Member) -> bool:
    return member.role == "owner"


def _admin_right(member: Member, key: str) -> object:
    return (member.permissions or {}).get(key)


def can_manage_members(member: Member) -> bool:
    """Owners always; admins with write access to member records."""
    if is_org_owner(member):
        return True
    return member.role == "admin" and _admin_right(member, "can_manage_members") in (
        "write",
        True,
    )


def can_add_members(member: Member) -> bool:
    if is_org_owner(member):
        return True
    return member.role == "admin" and _admin_right(member, "can_add_members") is True


def can_edit_organisation(member: Member) -> bool:
    if is_org_owner(member):
        return True
    return member.role == "admin" and _admin_right(member, "can_edit_organisation") is True


async def get_member_in_org(
    session: AsyncSession,
    *,
    member_id: UUID,
    organisation_id: UUID,
) -> Member | None:
    """Fetch a member by id, scoped to one organisation."""
    return await Member.objects.filter_by(
        id=member_id,
        organisation_id=organisation_id,
    ).first(session)


async def list_editors(session: AsyncSession, *, organisation_id: UUID) -> list[Member]:
    """Return owners and admins ordered by first name (actor filter options)."""
    return (
        await Member.objects.filter_by(organisation_id=organisation_id)
        .filter(col(Member.role).in_(sorted(ADMIN_ROLES)))
        .order_by(col(Member.first_name).asc())
        .all(session)
    )


def _settings_snapshot(organisation: Organisation) -> dict[str, object]:
    return {
        "name": organisation.name,
        "member_label": organisation.member_label,
        "require_mfa": organisation.require_mfa,
        "max_employees": organisation.max_employees,
    }


async def update_organisation(
    session: AsyncSession,
    *,
    ctx: OrganisationContext,
    payload: OrganisationUpdate,
) -> Organisation:
    """Apply a settings update and record an `org.updated` entry for what changed."""
    organisation = ctx.organisation
    updates = payload.model_dump(exclude_unset=True, exclude_none=True)
    if "member_label" in updates:
        updates["member_label"] = str(updates["member_label"]).strip() or DEFAULT_MEMBER_LABEL
    if "name" in updates:
        updates["name"] = str(updates["name"]).strip()
    if "max_employees" in updates:
        member_count = await Member.objects.filter_by(
            organisation_id=organisation.id,
        ).count(session)
        if int(updates["max_employees"]) < member_count:
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail=f"The organisation already has {member_count} members.",
            )

    before = _settings_snapshot(organisation)
    for key, value in updates.items():
        setattr(organisation, key, value)
    organisation.updated_at = utcnow()
    session.add(organisation)
    await session.commit()
    await session.refresh(organisation)

    changes = diff_changes(before, updates)
    if changes:
        await record_audit(
            session,
            organisation_id=organisation.id,
            actor_id=ctx.member.id,
            actor_name=ctx.actor_name,
            action=AuditAction.ORG_UPDATED,
            target_type=TargetType.ORGANISATION,
            target_id=organisation.id,
            target_label=organisation.name,
            changes=changes,
        )
    return organisation
