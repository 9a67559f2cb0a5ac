"""Team create/rename/delete with audit trail entries."""

from __future__ import annotations

from typing import TYPE_CHECKING

from fastapi import HTTPException, status

from app.models.members import Member
from app.models.teams import Team
from app.services.audit import diff_changes, record_audit
from app.services.audit_labels import AuditAction, TargetType

if TYPE_CHECKING:
    from uuid import UUID

    from sqlmodel.ext.asyncio.session import AsyncSession

    from app.services.organisations import OrganisationContext


async def _get_team_or_404(
    session: AsyncSession,
    *,
    team_id: UUID,
    organisation_id: UUID,
) -> Team:
    team = await Team.objects.filter_by(id=team_id, organisation_id=organisation_id).first(
        session,
    )
    if team is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Team not found")
    return team


async def _ensure_name_available(
    session: AsyncSession,
    *,
    name: str,
    organisation_id: UUID,
) -> None:
    existing = await Team.objects.filter_by(organisation_id=organisation_id, name=name).first(
        session,
    )
    if existing is not None:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="A team with this name already exists",
        )


async def create_team(session: AsyncSession, *, ctx: OrganisationContext, name: str) -> Team:
    organisation_id = ctx.organisation.id
    name = name.strip()
    await _ensure_name_available(session, name=name, organisation_id=organisation_id)
    team = Team(organisation_id=organisation_id, name=name)
    session.add(team)
    await session.commit()
    await session.refresh(team)

    await record_audit(
        session,
        organisation_id=organisation_id,
        actor_id=ctx.member.id,
        actor_name=ctx.actor_name,
        action=AuditAction.TEAM_CREATED,
        target_type=TargetType.TEAM,
        target_id=team.id,
        target_label=team.name,
    )
    return team


async def rename_team(
    session: AsyncSession,
    *,
    ctx: OrganisationContext,
    team_id: UUID,
    name: str,
) -> Team:
    organisation_id = ctx.organisation.id
    team = await _get_team_or_404(session, team_id=team_id, organisation_id=organisation_id)
    name = name.strip()
    changes = diff_changes({"name": team.name}, {"name": name})
    if changes is None:
        return team
    await _ensure_name_available(session, name=name, organisation_id=organisation_id)
    team.name = name
    session.add(team)
    await session.commit()
    await session.refresh(team)

    await record_audit(
        session,
        organisation_id=organisation_id,
        actor_id=ctx.member.id,
        actor_name=ctx.actor_name,
        action=AuditAction.TEAM_UPDATED,
        target_type=TargetType.TEAM,
        target_id=team.id,
        target_label=team.name,
        changes=changes,
    )
    return team


async def delete_team(session: AsyncSession, *, ctx: OrganisationContext, team_id: UUID) -> None:
    """Delete a team and unassign its members."""
    organisation_id = ctx.organisation.id
    team = await _get_team_or_404(session, team_id=team_id, organisation_id=organisation_id)
    members = await Member.objects.filter_by(
        organisation_id=organisation_id,
        team_id=team.id,
    ).all(session)
    for member in members:
        member.team_id = None
        session.add(member)
    label = team.name
    await session.delete(team)
    await session.commit()

    await record_audit(
        session,
        organisation_id=organisation_id,
        actor_id=ctx.member.id,
        actor_name=ctx.actor_name,
        action=AuditAction.TEAM_DELETED,
        target_type=TargetType.TEAM,
        target_id=team_id,
        target_label=label,
        metadata={"unassigned_members": len(members)},
    )
